import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture()
def write_sarif(tmp_path: Path) -> Callable[[str, dict[str, Any]], Path]:
    """Write a SARIF document under tmp_path and return its path."""

    def _write(name: str, document: dict[str, Any]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
