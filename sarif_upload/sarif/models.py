import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SarifDocument:
    """A SARIF log: a format version and its ordered runs.

    Runs are kept as the raw JSON objects read from disk.
    """

    version: str
    runs: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "runs": self.runs}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
