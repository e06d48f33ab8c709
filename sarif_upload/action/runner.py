import traceback
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from sarif_upload.config.settings import Settings
from sarif_upload.environment.exceptions import EnvironmentStoreError
from sarif_upload.github.exceptions import GitHubApiError
from sarif_upload.logging.logger import Log
from sarif_upload.processor.processor import Processor
from sarif_upload.reporting.models import ActionStatus, StatusReport
from sarif_upload.reporting.status_reporter import StatusReporter, utcnow
from sarif_upload.upload.models import UploadStats

ACTION_NAME = "upload-sarif"


class ActionRunner:
    """Run the upload once, bracketed by starting and outcome status reports."""

    def __init__(
        self,
        processor: Processor,
        reporter: StatusReporter,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._processor = processor
        self._reporter = reporter
        self._settings = settings
        self._clock = clock

    def run(self) -> bool:
        """Execute the action. Returns True iff the results were uploaded."""
        started_at = self._clock()
        if not self._settings.github_ref:
            Log.error("GITHUB_REF must be set.")
            return False

        starting = self._build(ActionStatus.STARTING, started_at)
        if starting is not None and not self._reporter.send(starting, ignore_failures=False):
            Log.error(f"Aborting {ACTION_NAME}: status endpoint rejected the job")
            return False

        try:
            stats = self._processor.process(Path(self._settings.input_sarif_file))
        except Exception as exc:
            self._handle_failure(started_at, exc)
            return False

        Log.info(
            f"{ACTION_NAME} completed: {stats.num_results_in_sarif} results, "
            f"{stats.zipped_upload_size_bytes} bytes uploaded"
        )
        self._report(ActionStatus.SUCCESS, started_at, upload_stats=stats)
        return True

    def _handle_failure(self, started_at: datetime, exc: Exception) -> None:
        Log.error(f"{ACTION_NAME} failed: {exc}")
        self._report(
            ActionStatus.FAILURE,
            started_at,
            cause=str(exc),
            exception="".join(traceback.format_exception(exc)),
        )

    def _report(
        self,
        status: ActionStatus,
        started_at: datetime,
        cause: str | None = None,
        exception: str | None = None,
        upload_stats: UploadStats | None = None,
    ) -> None:
        report = self._build(status, started_at, cause, exception, upload_stats)
        if report is not None:
            self._reporter.send(report, ignore_failures=True)

    def _build(
        self,
        status: ActionStatus,
        started_at: datetime,
        cause: str | None = None,
        exception: str | None = None,
        upload_stats: UploadStats | None = None,
    ) -> StatusReport | None:
        try:
            return self._reporter.build_report(
                ACTION_NAME, status, started_at, cause, exception, upload_stats
            )
        except (GitHubApiError, EnvironmentStoreError) as exc:
            Log.warning(f"Could not build {status.value} status report: {exc}")
            return None
