import time

from sarif_upload.environment import shared_env
from sarif_upload.environment.base import BaseEnvironmentStore
from sarif_upload.github.client_base import ApiResponse, BaseGitHubClient
from sarif_upload.github.exceptions import GitHubNetworkError
from sarif_upload.logging.logger import Log
from sarif_upload.upload.exceptions import (
    DuplicateUploadError,
    RetriesExhaustedError,
    UploadHttpError,
)
from sarif_upload.upload.models import UploadPayload

# Seconds to wait before attempts 2, 3 and 4; 21s in total.
BACKOFF_PERIODS: tuple[int, ...] = (1, 5, 15)


class UploadClient:
    """Delivers an upload payload at most once per job, retrying 5xx responses."""

    def __init__(
        self,
        api_client: BaseGitHubClient,
        store: BaseEnvironmentStore,
        *,
        test_mode: bool = False,
    ) -> None:
        self._api_client = api_client
        self._store = store
        self._test_mode = test_mode

    def upload_with_retry(self, payload: UploadPayload) -> None:
        """Upload the payload.

        Raises:
            DuplicateUploadError: if this job already attempted an upload.
            UploadHttpError: on a non-retryable response or transport failure.
            RetriesExhaustedError: if every attempt got a 5xx response.
        """
        if self._store.get(shared_env.UPLOAD_SENTINEL) is not None:
            raise DuplicateUploadError(
                "Aborting upload: only one SARIF upload is allowed per job"
            )
        self._store.set(shared_env.UPLOAD_SENTINEL, "true")

        Log.info("Uploading results")
        if self._test_mode:
            Log.info("Test mode enabled, skipping upload")
            return

        body = payload.to_dict()
        total_attempts = len(BACKOFF_PERIODS) + 1
        for attempt in range(total_attempts):
            response = self._attempt(body)
            if response.status == 202:
                Log.info("Successfully uploaded results")
                return
            if not 500 <= response.status < 600:
                raise UploadHttpError(response.status, response.request_id, response.body)
            if attempt == len(BACKOFF_PERIODS):
                raise RetriesExhaustedError(
                    response.status, response.request_id, response.body, total_attempts
                )
            wait = BACKOFF_PERIODS[attempt]
            Log.warning(
                f"Upload attempt ({attempt + 1} of {total_attempts}) failed "
                f"({response.request_id}). Retrying in {wait} seconds: "
                f"({response.status}) {response.body}"
            )
            time.sleep(wait)

    def _attempt(self, body: dict[str, object]) -> ApiResponse:
        try:
            return self._api_client.put_analysis(body)
        except GitHubNetworkError as exc:
            raise UploadHttpError(None, None, str(exc)) from exc
