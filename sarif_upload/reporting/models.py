from dataclasses import asdict, dataclass
from enum import Enum

from sarif_upload.upload.models import UploadStats


class ActionStatus(str, Enum):
    STARTING = "starting"
    SUCCESS = "success"
    FAILURE = "failure"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self is not ActionStatus.STARTING


@dataclass(frozen=True)
class StatusReport:
    """One phase transition of an action, as sent to the status endpoint."""

    workflow_run_id: int
    workflow_name: str
    job_name: str
    analysis_key: str
    commit_oid: str
    ref: str
    action_name: str
    action_oid: str
    started_at: str
    action_started_at: str
    status: ActionStatus
    completed_at: str | None = None
    cause: str | None = None
    exception: str | None = None
    matrix_vars: str | None = None
    upload_stats: UploadStats | None = None

    def __post_init__(self) -> None:
        if self.status.is_terminal != (self.completed_at is not None):
            raise ValueError(
                f"completed_at must be set exactly for terminal statuses, got "
                f"status={self.status.value} completed_at={self.completed_at!r}"
            )
        if self.status is not ActionStatus.FAILURE and (self.cause or self.exception):
            raise ValueError("cause and exception are only allowed on failure reports")

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "workflow_run_id": self.workflow_run_id,
            "workflow_name": self.workflow_name,
            "job_name": self.job_name,
            "analysis_key": self.analysis_key,
            "commit_oid": self.commit_oid,
            "ref": self.ref,
            "action_name": self.action_name,
            "action_oid": self.action_oid,
            "started_at": self.started_at,
            "action_started_at": self.action_started_at,
            "status": self.status.value,
        }
        optional = {
            "completed_at": self.completed_at,
            "cause": self.cause,
            "exception": self.exception,
            "matrix_vars": self.matrix_vars,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        if self.upload_stats is not None:
            data.update(asdict(self.upload_stats))
        return data
