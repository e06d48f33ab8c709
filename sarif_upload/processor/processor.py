from pathlib import Path

from sarif_upload.config.settings import Settings
from sarif_upload.environment.base import BaseEnvironmentStore
from sarif_upload.environment.job_context import JobContext
from sarif_upload.github.client_base import BaseGitHubClient
from sarif_upload.logging.logger import Log
from sarif_upload.processor.pipeline import PipelineContext, PipelineStep
from sarif_upload.processor.steps import (
    BuildPayloadStep,
    CombineSarifStep,
    FingerprintStep,
    ResolveSarifFilesStep,
    UploadStep,
    ValidateSarifStep,
)
from sarif_upload.sarif.fingerprints import FingerprinterFactory
from sarif_upload.sarif.schema_loader import load_sarif_schema
from sarif_upload.sarif.validator import SchemaValidator
from sarif_upload.upload.models import UploadStats
from sarif_upload.upload.payload_builder import PayloadBuilder
from sarif_upload.upload.upload_client import UploadClient


class Processor:
    """Orchestrates one SARIF upload.

    Pipeline: resolve files -> combine -> validate -> fingerprint -> build payload -> upload.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, input_path: Path) -> UploadStats:
        """Run every step for the given file or directory and return upload stats."""
        context = PipelineContext(input_path=input_path)
        with Log.group("Uploading results"):
            for step in self._steps:
                context = step.run(context)
        if context.upload_stats is None:
            raise ValueError("Pipeline finished without producing upload stats")
        return context.upload_stats


def build_processor(
    settings: Settings,
    store: BaseEnvironmentStore,
    api_client: BaseGitHubClient,
    schema_path: Path | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    job_context = JobContext(settings, store, api_client)
    validator = SchemaValidator(load_sarif_schema(schema_path))
    fingerprinter = FingerprinterFactory.create(settings.fingerprinter)
    upload_client = UploadClient(api_client, store, test_mode=settings.test_mode)
    return Processor(
        steps=[
            ResolveSarifFilesStep(settings.sarif_suffix),
            CombineSarifStep(),
            ValidateSarifStep(validator),
            FingerprintStep(fingerprinter),
            BuildPayloadStep(PayloadBuilder(job_context)),
            UploadStep(upload_client),
        ]
    )
