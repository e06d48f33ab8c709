import base64
import gzip
import json

from sarif_upload.environment.job_context import JobContext
from sarif_upload.logging.logger import Log
from sarif_upload.sarif.exceptions import MalformedDocumentError
from sarif_upload.sarif.merger import count_results_in_sarif, get_tool_names
from sarif_upload.sarif.models import SarifDocument
from sarif_upload.upload.models import UploadPayload, UploadStats


def compress_sarif(serialized_sarif: str) -> str:
    """Gzip the serialized document and encode it as base64 text."""
    zipped = gzip.compress(serialized_sarif.encode("utf-8"))
    return base64.b64encode(zipped).decode("ascii")


class PayloadBuilder:
    """Assembles the upload payload from a fingerprinted SARIF document."""

    def __init__(self, job_context: JobContext) -> None:
        self._job_context = job_context

    def build(self, serialized_sarif: str) -> tuple[UploadPayload, UploadStats]:
        document = _parse_document(serialized_sarif)
        zipped_sarif = compress_sarif(serialized_sarif)
        payload = UploadPayload(
            commit_oid=self._job_context.commit_oid(),
            ref=self._job_context.ref(),
            analysis_key=self._job_context.analysis_key(),
            analysis_name=self._job_context.analysis_name(),
            sarif=zipped_sarif,
            workflow_run_id=self._job_context.workflow_run_id(),
            checkout_uri=self._job_context.checkout_uri(),
            tool_names=tuple(get_tool_names(document)),
            environment=self._job_context.matrix(),
            started_at=self._job_context.cached_workflow_started_at(),
        )
        stats = UploadStats(
            raw_upload_size_bytes=len(serialized_sarif.encode("utf-8")),
            zipped_upload_size_bytes=len(zipped_sarif),
            num_results_in_sarif=count_results_in_sarif(document),
        )
        Log.debug(f"Raw upload size: {stats.raw_upload_size_bytes} bytes")
        Log.debug(f"Base64 zipped upload size: {stats.zipped_upload_size_bytes} bytes")
        Log.debug(f"Number of results in upload: {stats.num_results_in_sarif}")
        return payload, stats


def _parse_document(serialized_sarif: str) -> SarifDocument:
    try:
        data = json.loads(serialized_sarif)
    except json.JSONDecodeError as exc:
        raise MalformedDocumentError(f"Fingerprinted SARIF is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedDocumentError("Fingerprinted SARIF must be a JSON object")
    if not isinstance(data.get("version"), str) or not isinstance(data.get("runs"), list):
        raise MalformedDocumentError(
            "Fingerprinted SARIF must declare a string 'version' and a 'runs' list"
        )
    return SarifDocument(version=data["version"], runs=data["runs"])
