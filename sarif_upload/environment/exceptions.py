class EnvironmentStoreError(Exception):
    """Base exception for job environment errors."""


class MissingEnvironmentError(EnvironmentStoreError):
    """Raised when a required CI environment variable is missing or invalid."""
