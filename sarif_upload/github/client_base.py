from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ApiResponse:
    """Status, request id and raw body of a GitHub API response."""

    status: int
    request_id: str | None
    body: str


class BaseGitHubClient(ABC):
    """Contract for the GitHub endpoints used by the upload pipeline."""

    @abstractmethod
    def put_analysis(self, payload: dict[str, object]) -> ApiResponse:
        """PUT a SARIF upload payload to the code scanning analysis endpoint.

        Raises:
            GitHubNetworkError: if no response was received.
        """

    @abstractmethod
    def put_status_report(self, report: dict[str, object]) -> ApiResponse:
        """PUT a status report to the code scanning status endpoint.

        Raises:
            GitHubNetworkError: if no response was received.
        """

    @abstractmethod
    def get_workflow_path(self, run_id: int) -> str:
        """Return the repository path of the workflow that owns the run.

        Raises:
            GitHubApiError: on any non-2xx response or missing field.
        """

    def close(self) -> None:
        """Release any transport resources."""
