import json
from pathlib import Path
from typing import Any

from sarif_upload.sarif.exceptions import SarifError

_DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schemas"
SARIF_SCHEMA_FILE = "sarif-schema-2.1.0.json"


def load_sarif_schema(path: Path | None = None) -> dict[str, Any]:
    """Load the SARIF JSON schema.

    Args:
        path: Path to the schema file.
              Defaults to the bundled sarif-schema-2.1.0.json.

    Raises:
        SarifError: if the file cannot be read or is not a JSON object.
    """
    if path is None:
        path = _DEFAULT_SCHEMA_DIR / SARIF_SCHEMA_FILE
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SarifError(f"Failed to load SARIF schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise SarifError(f"SARIF schema {path} must be a JSON object")
    return schema
