"""Identity of the running job, cached across steps through the environment store."""

import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path

from sarif_upload.config.settings import Settings
from sarif_upload.environment import shared_env
from sarif_upload.environment.base import BaseEnvironmentStore
from sarif_upload.environment.exceptions import MissingEnvironmentError
from sarif_upload.github.client_base import BaseGitHubClient
from sarif_upload.logging.logger import Log

_PULL_MERGE_REF = re.compile(r"refs/pull/(\d+)/merge")


def isoformat(moment: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with milliseconds and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JobContext:
    """Resolves the fields that identify this job to the analysis service.

    The analysis key and the workflow start time are computed once per job
    and published to the store; every later lookup, in this step or a later
    one, reads the cached value.
    """

    def __init__(
        self,
        settings: Settings,
        store: BaseEnvironmentStore,
        api_client: BaseGitHubClient,
    ) -> None:
        self._settings = settings
        self._store = store
        self._api_client = api_client

    def ref(self) -> str:
        """Return the ref under analysis, mapping PR merge refs to head refs."""
        ref = self._require("GITHUB_REF", self._settings.github_ref)
        return _PULL_MERGE_REF.sub(r"refs/pull/\1/head", ref)

    def commit_oid(self) -> str:
        """Return the checked-out commit, falling back to GITHUB_SHA."""
        try:
            completed = subprocess.run(
                ["git", "rev-parse", "HEAD"],
                cwd=self._checkout_path(),
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            Log.info(
                "Failed to call git to get current commit. "
                f"Continuing with data from environment: {exc}"
            )
            return self._require("GITHUB_SHA", self._settings.github_sha)
        return completed.stdout.strip()

    def workflow_run_id(self) -> int:
        raw = self._require("GITHUB_RUN_ID", self._settings.github_run_id)
        try:
            return int(raw)
        except ValueError as exc:
            raise MissingEnvironmentError(
                f"GITHUB_RUN_ID must be an integer workflow run ID, got {raw!r}"
            ) from exc

    def analysis_name(self) -> str:
        return self._require("GITHUB_WORKFLOW", self._settings.github_workflow)

    def analysis_key(self) -> str:
        """Return '<workflow path>:<job name>', looking up the path at most once per job."""
        cached = self._store.get(shared_env.ANALYSIS_KEY)
        if cached is not None:
            return cached
        workflow_path = self._api_client.get_workflow_path(self.workflow_run_id())
        job_name = self._require("GITHUB_JOB", self._settings.github_job)
        analysis_key = f"{workflow_path}:{job_name}"
        self._store.set(shared_env.ANALYSIS_KEY, analysis_key)
        Log.debug(f"Cached analysis key {analysis_key}")
        return analysis_key

    def cached_workflow_started_at(self) -> str | None:
        return self._store.get(shared_env.WORKFLOW_STARTED_AT)

    def workflow_started_at(self, action_started_at: datetime) -> str:
        """Return the job start time; the first step to ask records its own start."""
        cached = self.cached_workflow_started_at()
        if cached is not None:
            return cached
        started_at = isoformat(action_started_at)
        self._store.set(shared_env.WORKFLOW_STARTED_AT, started_at)
        return started_at

    def matrix(self) -> str | None:
        matrix = self._settings.input_matrix.strip()
        if matrix in ("", "null"):
            return None
        return matrix

    def checkout_uri(self) -> str:
        return self._checkout_path().resolve().as_uri()

    def _checkout_path(self) -> Path:
        if self._settings.input_checkout_path:
            return Path(self._settings.input_checkout_path)
        return Path.cwd()

    @staticmethod
    def _require(name: str, value: str) -> str:
        if not value:
            raise MissingEnvironmentError(f"{name} environment variable must be set")
        Log.debug(f"{name}={value}")
        return value
