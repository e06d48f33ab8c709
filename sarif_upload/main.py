import sys

from sarif_upload.action.runner import ActionRunner
from sarif_upload.config.settings import Settings
from sarif_upload.environment.factory import EnvironmentStoreFactory
from sarif_upload.environment.job_context import JobContext
from sarif_upload.github.httpx_client_adapter import HttpxGitHubClient
from sarif_upload.logging.logger import Log
from sarif_upload.processor.processor import build_processor
from sarif_upload.reporting.status_reporter import StatusReporter


def main() -> None:
    """Entry point: settings -> store and API client -> run the action once."""
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        store = EnvironmentStoreFactory.create(settings)
        api_client = HttpxGitHubClient.from_settings(settings)
    except ValueError as exc:
        Log.error(f"Invalid configuration: {exc}")
        sys.exit(1)

    try:
        processor = build_processor(settings, store, api_client)
        reporter = StatusReporter(JobContext(settings, store, api_client), api_client, settings)
        runner = ActionRunner(processor, reporter, settings)
        succeeded = runner.run()
    finally:
        api_client.close()

    sys.exit(0 if succeeded else 1)


if __name__ == "__main__":
    main()
