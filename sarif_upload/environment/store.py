import os
from collections.abc import MutableMapping
from pathlib import Path

from sarif_upload.environment.base import BaseEnvironmentStore
from sarif_upload.environment.exceptions import EnvironmentStoreError
from sarif_upload.logging.logger import Log


class InMemoryEnvironmentStore(BaseEnvironmentStore):
    """Dictionary-backed store for tests and local runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key) or None

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def snapshot(self) -> dict[str, str]:
        """Return a copy of everything published so far."""
        return dict(self._values)


class ActionsEnvironmentStore(BaseEnvironmentStore):
    """Store backed by the runner's environment file.

    Reads come from the process environment, which the runner seeds from the
    environment file of earlier steps. Writes go to both the process
    environment (so the current step sees them) and the environment file (so
    later steps inherit them).
    """

    def __init__(
        self,
        env_file: Path | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self._env_file = env_file
        self._environ = environ if environ is not None else os.environ

    def get(self, key: str) -> str | None:
        return self._environ.get(key) or None

    def set(self, key: str, value: str) -> None:
        if "\n" in key or "=" in key:
            raise EnvironmentStoreError(f"Invalid environment variable name: {key!r}")
        if "\n" in value:
            raise EnvironmentStoreError(f"Value for {key} must be a single line")
        self._environ[key] = value
        if self._env_file is None:
            Log.warning(f"No environment file configured; {key} will not reach later steps")
            return
        try:
            with self._env_file.open("a", encoding="utf-8") as handle:
                handle.write(f"{key}={value}\n")
        except OSError as exc:
            raise EnvironmentStoreError(
                f"Failed to write {key} to {self._env_file}: {exc}"
            ) from exc
