"""Structural validation of SARIF documents against the JSON schema."""

import json
from dataclasses import asdict, dataclass
from typing import Any

from jsonschema.validators import validator_for

from sarif_upload.logging.logger import Log
from sarif_upload.sarif.exceptions import SchemaValidationError
from sarif_upload.sarif.models import SarifDocument


@dataclass(frozen=True)
class SchemaViolation:
    """One schema violation, located by JSON path."""

    path: str
    message: str
    validator: str

    def describe(self) -> str:
        return f"{self.path}: {self.message}"


class SchemaValidator:
    """Checks documents against a fixed schema, reporting every violation."""

    def __init__(self, schema: dict[str, Any]) -> None:
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
        self._validator = validator_cls(schema)

    def validate(self, document: SarifDocument | dict[str, Any]) -> list[SchemaViolation]:
        """Return all violations; an empty list means the document is valid."""
        instance = document.to_dict() if isinstance(document, SarifDocument) else document
        errors = sorted(self._validator.iter_errors(instance), key=lambda e: e.json_path)
        return [
            SchemaViolation(path=e.json_path, message=e.message, validator=str(e.validator))
            for e in errors
        ]

    def check(self, document: SarifDocument | dict[str, Any], source: str) -> None:
        """Raise if the document is invalid.

        Raises:
            SchemaValidationError: listing every violation, one per line.
        """
        violations = self.validate(document)
        if not violations:
            return
        for violation in violations:
            with Log.group(f"Error details: {violation.describe()}"):
                Log.debug(json.dumps(asdict(violation), indent=2))
        lines = "\n".join(f"- {v.describe()}" for v in violations)
        raise SchemaValidationError(
            f'Unable to upload "{source}" as it is not valid SARIF:\n{lines}',
            violations,
        )
