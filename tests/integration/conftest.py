from collections.abc import Iterator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def no_git() -> Iterator[None]:
    """Make commit resolution fall back to GITHUB_SHA regardless of the host checkout."""
    with patch(
        "sarif_upload.environment.job_context.subprocess.run",
        side_effect=FileNotFoundError("git"),
    ):
        yield


@pytest.fixture(autouse=True)
def no_sleep() -> Iterator[None]:
    with patch("sarif_upload.upload.upload_client.time.sleep"):
        yield
