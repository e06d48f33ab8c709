class UploadError(Exception):
    """Base exception for all upload-related errors."""


class DuplicateUploadError(UploadError):
    """Raised when an upload was already attempted earlier in this job."""


class UploadHttpError(UploadError):
    """Raised when the upload endpoint answers with a non-retryable response.

    A status of None means the request never got a response.
    """

    def __init__(self, status: int | None, request_id: str | None, body: str) -> None:
        super().__init__(f"Upload failed ({request_id}): ({status}) {body}")
        self.status = status
        self.request_id = request_id
        self.body = body


class RetriesExhaustedError(UploadError):
    """Raised when every upload attempt failed with a 5xx response."""

    def __init__(
        self,
        status: int,
        request_id: str | None,
        body: str,
        attempts: int,
    ) -> None:
        super().__init__(
            f"Upload failed after {attempts} attempts ({request_id}): ({status}) {body}"
        )
        self.status = status
        self.request_id = request_id
        self.body = body
        self.attempts = attempts
