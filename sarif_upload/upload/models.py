from dataclasses import dataclass


@dataclass(frozen=True)
class UploadPayload:
    """Body of a SARIF upload request. Built once and resent unchanged on retry."""

    commit_oid: str
    ref: str
    analysis_key: str
    analysis_name: str
    sarif: str
    workflow_run_id: int
    checkout_uri: str
    tool_names: tuple[str, ...]
    environment: str | None = None
    started_at: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "commit_oid": self.commit_oid,
            "ref": self.ref,
            "analysis_key": self.analysis_key,
            "analysis_name": self.analysis_name,
            "sarif": self.sarif,
            "workflow_run_id": self.workflow_run_id,
            "checkout_uri": self.checkout_uri,
            "tool_names": list(self.tool_names),
        }
        if self.environment is not None:
            data["environment"] = self.environment
        if self.started_at is not None:
            data["started_at"] = self.started_at
        return data


@dataclass(frozen=True)
class UploadStats:
    """Size and result count of a completed upload."""

    raw_upload_size_bytes: int
    zipped_upload_size_bytes: int
    num_results_in_sarif: int
