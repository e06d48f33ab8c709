import json

from sarif_upload.logging.logger import Log
from sarif_upload.processor.pipeline import PipelineContext, PipelineStep
from sarif_upload.sarif.fingerprints import BaseFingerprinter
from sarif_upload.sarif.merger import combine_sarif_files, find_sarif_files, load_sarif_json
from sarif_upload.sarif.validator import SchemaValidator
from sarif_upload.upload.payload_builder import PayloadBuilder
from sarif_upload.upload.upload_client import UploadClient


class ResolveSarifFilesStep(PipelineStep):
    def __init__(self, suffix: str) -> None:
        self._suffix = suffix

    def run(self, context: PipelineContext) -> PipelineContext:
        context.sarif_files = find_sarif_files(context.input_path, self._suffix)
        Log.info(
            f"Uploading sarif files: {json.dumps([str(p) for p in context.sarif_files])}"
        )
        return context


class CombineSarifStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.document = combine_sarif_files(context.sarif_files)
        Log.info(
            f"Combined {len(context.sarif_files)} files into "
            f"{len(context.document.runs)} runs (SARIF {context.document.version})"
        )
        return context


class ValidateSarifStep(PipelineStep):
    def __init__(self, validator: SchemaValidator) -> None:
        self._validator = validator

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.sarif_files:
            raise ValueError("PipelineContext.sarif_files must be set before validation")
        for sarif_file in context.sarif_files:
            self._validator.check(load_sarif_json(sarif_file), source=str(sarif_file))
        return context


class FingerprintStep(PipelineStep):
    def __init__(self, fingerprinter: BaseFingerprinter) -> None:
        self._fingerprinter = fingerprinter

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before fingerprinting")
        context.serialized_sarif = self._fingerprinter.add_fingerprints(
            context.document.to_json()
        )
        return context


class BuildPayloadStep(PipelineStep):
    def __init__(self, payload_builder: PayloadBuilder) -> None:
        self._payload_builder = payload_builder

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.serialized_sarif:
            raise ValueError("PipelineContext.serialized_sarif must be set before building")
        context.payload, context.upload_stats = self._payload_builder.build(
            context.serialized_sarif
        )
        return context


class UploadStep(PipelineStep):
    def __init__(self, upload_client: UploadClient) -> None:
        self._upload_client = upload_client

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.payload is None:
            raise ValueError("PipelineContext.payload must be set before upload")
        self._upload_client.upload_with_retry(context.payload)
        return context
