"""Builds and sends action status reports to the code scanning status endpoint."""

import json
from collections.abc import Callable
from datetime import datetime, timezone

from sarif_upload.config.settings import Settings
from sarif_upload.environment.job_context import JobContext, isoformat
from sarif_upload.github.client_base import BaseGitHubClient
from sarif_upload.github.exceptions import GitHubNetworkError
from sarif_upload.logging.logger import Log
from sarif_upload.reporting.models import ActionStatus, StatusReport
from sarif_upload.upload.models import UploadStats


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusReporter:
    """Reports the start and outcome of each action in a job.

    Reporting is best-effort telemetry. The only response acted upon is a 403
    or 404 to a strictly checked report: the endpoint uses these to say that
    the upload itself would be rejected, so the caller should stop.
    """

    def __init__(
        self,
        job_context: JobContext,
        api_client: BaseGitHubClient,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._job_context = job_context
        self._api_client = api_client
        self._settings = settings
        self._clock = clock

    def build_report(
        self,
        action_name: str,
        status: ActionStatus,
        action_started_at: datetime,
        cause: str | None = None,
        exception: str | None = None,
        upload_stats: UploadStats | None = None,
    ) -> StatusReport:
        """Compose a status report.

        Args:
            action_name: Name of the action, e.g. 'upload-sarif'.
            status: Phase reached by the action.
            action_started_at: When this action started executing.
            cause: Cause of failure (failure reports only).
            exception: Formatted exception (failure reports only).
            upload_stats: Upload summary, merged into success reports.

        Raises:
            GitHubApiError: if the analysis key is not cached and the workflow
                lookup fails.
        """
        return StatusReport(
            workflow_run_id=self._workflow_run_id(),
            workflow_name=self._settings.github_workflow,
            job_name=self._settings.github_job,
            analysis_key=self._job_context.analysis_key(),
            commit_oid=self._settings.github_sha,
            ref=self._job_context.ref(),
            action_name=action_name,
            action_oid=self._settings.action_oid,
            started_at=self._job_context.workflow_started_at(action_started_at),
            action_started_at=isoformat(action_started_at),
            status=status,
            completed_at=isoformat(self._clock()) if status.is_terminal else None,
            cause=cause or None,
            exception=exception or None,
            matrix_vars=self._settings.input_matrix or None,
            upload_stats=upload_stats,
        )

    def send(self, report: StatusReport, ignore_failures: bool = False) -> bool:
        """Send a report.

        Returns False only when ``ignore_failures`` is off and the endpoint
        answers 403 or 404; every other outcome returns True.
        """
        body = report.to_dict()
        Log.debug(f"Sending status report: {json.dumps(body)}")
        try:
            response = self._api_client.put_status_report(body)
        except GitHubNetworkError as exc:
            Log.warning(f"Failed to send {report.status.value} status report: {exc}")
            return True

        if not ignore_failures:
            if response.status == 403:
                Log.error(
                    "The repository on which this action is running is not "
                    "opted-in to code scanning."
                )
                return False
            if response.status == 404:
                Log.error("Not authorized to use the code scanning feature on this repository.")
                return False

        if not 200 <= response.status < 300:
            Log.warning(
                f"Status report was not accepted ({response.request_id}): "
                f"({response.status}) {response.body}"
            )
        return True

    def _workflow_run_id(self) -> int:
        try:
            return int(self._settings.github_run_id)
        except ValueError:
            return -1
