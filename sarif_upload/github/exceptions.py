class GitHubApiError(Exception):
    """Raised when a GitHub API call returns an unexpected response."""


class GitHubNetworkError(GitHubApiError):
    """Raised when a GitHub API call fails due to network/infrastructure issues."""
