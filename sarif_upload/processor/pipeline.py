from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from sarif_upload.sarif.models import SarifDocument
from sarif_upload.upload.models import UploadPayload, UploadStats


@dataclass(slots=True)
class PipelineContext:
    input_path: Path
    sarif_files: list[Path] = field(default_factory=list)
    document: SarifDocument | None = None
    serialized_sarif: str = ""
    payload: UploadPayload | None = None
    upload_stats: UploadStats | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
