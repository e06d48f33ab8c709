from pathlib import Path

from sarif_upload.config.settings import Settings
from sarif_upload.environment.base import BaseEnvironmentStore
from sarif_upload.environment.store import ActionsEnvironmentStore, InMemoryEnvironmentStore


class EnvironmentStoreFactory:
    """Creates the configured environment store adapter."""

    STORES: tuple[str, ...] = ("actions", "memory")

    @classmethod
    def create(cls, settings: Settings) -> BaseEnvironmentStore:
        kind = settings.environment_store.lower()
        if kind == "memory":
            return InMemoryEnvironmentStore()
        if kind == "actions":
            env_file = Path(settings.github_env) if settings.github_env else None
            return ActionsEnvironmentStore(env_file=env_file)
        raise ValueError(
            f"Unknown environment store '{kind}'. Choose from: {list(cls.STORES)}"
        )
