from sarif_upload.sarif.merger import (
    combine_sarif_files,
    count_results_in_sarif,
    find_sarif_files,
    get_tool_names,
    load_sarif_json,
)
from sarif_upload.sarif.models import SarifDocument
from sarif_upload.sarif.validator import SchemaValidator, SchemaViolation

__all__ = [
    "SarifDocument",
    "SchemaValidator",
    "SchemaViolation",
    "combine_sarif_files",
    "count_results_in_sarif",
    "find_sarif_files",
    "get_tool_names",
    "load_sarif_json",
]
