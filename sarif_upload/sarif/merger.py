"""Locating, combining and summarizing SARIF results files."""

import json
from pathlib import Path
from typing import Any

from sarif_upload.logging.logger import Log
from sarif_upload.sarif.exceptions import (
    MalformedDocumentError,
    NoSarifFilesError,
    VersionMismatchError,
)
from sarif_upload.sarif.models import SarifDocument

DEFAULT_SUFFIX = ".sarif"


def find_sarif_files(input_path: Path, suffix: str = DEFAULT_SUFFIX) -> list[Path]:
    """Resolve an input path to the results files it designates.

    A file is returned as-is. A directory yields every file directly inside
    it whose name ends with ``suffix``, in name order.

    Raises:
        FileNotFoundError: if the path does not exist.
        NoSarifFilesError: if a directory holds no matching files.
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Path does not exist: {input_path}")
    if not input_path.is_dir():
        return [input_path]
    sarif_files = sorted(
        p.resolve()
        for p in input_path.iterdir()
        if p.is_file() and p.name.endswith(suffix)
    )
    if not sarif_files:
        raise NoSarifFilesError(f'No SARIF files found to upload in "{input_path}".')
    return sarif_files


def combine_sarif_files(sarif_files: list[Path]) -> SarifDocument:
    """Merge results files into one document.

    The first file's version is adopted; runs are concatenated in file order.

    Raises:
        MalformedDocumentError: if a file is not a parseable SARIF object.
        VersionMismatchError: if two files declare different versions.
    """
    version: str | None = None
    runs: list[dict[str, Any]] = []
    for sarif_file in sarif_files:
        data = _read_sarif(sarif_file)
        file_version = data["version"]
        if version is None:
            version = file_version
        elif file_version != version:
            raise VersionMismatchError(version, file_version)
        runs.extend(data["runs"])
    if version is None:
        raise MalformedDocumentError("No SARIF files were given to combine")
    Log.debug(f"Combined {len(sarif_files)} files into {len(runs)} runs")
    return SarifDocument(version=version, runs=runs)


def count_results_in_sarif(document: SarifDocument) -> int:
    return sum(len(run.get("results") or []) for run in document.runs)


def get_tool_names(document: SarifDocument) -> list[str]:
    """Return unique driver names in order of first appearance."""
    names: dict[str, None] = {}
    for run in document.runs:
        driver = (run.get("tool") or {}).get("driver") or {}
        name = driver.get("name")
        if isinstance(name, str) and name:
            names.setdefault(name, None)
    return list(names)


def load_sarif_json(path: Path) -> dict[str, Any]:
    """Parse one results file into a JSON object.

    Raises:
        MalformedDocumentError: if the file cannot be read or is not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedDocumentError(f"Unable to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedDocumentError(f"{path} must contain a JSON object")
    return data


def _read_sarif(path: Path) -> dict[str, Any]:
    data = load_sarif_json(path)
    if not isinstance(data.get("version"), str):
        raise MalformedDocumentError(f"{path} must declare a string 'version'")
    if not isinstance(data.get("runs"), list):
        raise MalformedDocumentError(f"{path} must contain a 'runs' list")
    return data
