from abc import ABC, abstractmethod


class BaseEnvironmentStore(ABC):
    """Contract for the job-scoped key/value store shared between steps.

    Values written by one step are visible, read-only, to every later step of
    the same job. Callers check before writing and never overwrite a key.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is unset or empty."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Publish a value for the current and all later steps of the job."""
