import base64
import gzip
import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx

from sarif_upload.action.runner import ActionRunner
from sarif_upload.config.settings import Settings
from sarif_upload.environment import shared_env
from sarif_upload.environment.job_context import JobContext
from sarif_upload.environment.store import InMemoryEnvironmentStore
from sarif_upload.github.httpx_client_adapter import HttpxGitHubClient
from sarif_upload.processor.processor import build_processor
from sarif_upload.reporting.status_reporter import StatusReporter
from sarif_upload.sarif.exceptions import SchemaValidationError, VersionMismatchError
from sarif_upload.upload.exceptions import DuplicateUploadError, RetriesExhaustedError

WriteSarif = Callable[[str, dict[str, Any]], Path]
STARTED = datetime(2020, 5, 1, 10, 0, tzinfo=timezone.utc)


def _make_run(tool_name: str = "CodeQL", num_results: int = 1) -> dict[str, Any]:
    return {
        "tool": {"driver": {"name": tool_name}},
        "results": [
            {"ruleId": f"rule-{i}", "message": {"text": f"Finding {i}"}}
            for i in range(num_results)
        ],
    }


def _make_sarif(
    runs: list[dict[str, Any]] | None = None,
    version: str = "2.1.0",
) -> dict[str, Any]:
    return {"version": version, "runs": runs if runs is not None else [_make_run()]}


class FakeGitHub:
    """Records requests and answers uploads with a scripted status sequence."""

    def __init__(self, upload_statuses: list[int], status_report_status: int = 200) -> None:
        self.upload_statuses = list(upload_statuses)
        self.status_report_status = status_report_status
        self.uploads: list[dict[str, Any]] = []
        self.status_reports: list[dict[str, Any]] = []
        self.workflow_lookups = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/repos/octo/repo/actions/runs/42":
            self.workflow_lookups += 1
            return httpx.Response(
                200, json={"workflow_url": "https://api.github.test/workflows/7"}
            )
        if path == "/workflows/7":
            return httpx.Response(200, json={"path": ".github/workflows/codeql.yml"})
        if path == "/repos/octo/repo/code-scanning/analysis/status":
            self.status_reports.append(json.loads(request.content))
            return httpx.Response(self.status_report_status)
        if path == "/repos/octo/repo/code-scanning/analysis":
            self.uploads.append(json.loads(request.content))
            status = self.upload_statuses.pop(0)
            return httpx.Response(
                status, headers={"x-github-request-id": f"req-{len(self.uploads)}"}
            )
        return httpx.Response(404)


def _make_settings(input_path: Path, checkout: Path) -> Settings:
    return Settings(
        environment_store="memory",
        test_mode=False,
        github_api_url="https://api.github.test",
        github_repository="octo/repo",
        github_run_id="42",
        github_ref="refs/pull/7/merge",
        github_sha="abc123",
        github_workflow="CodeQL",
        github_job="analyze",
        input_sarif_file=str(input_path),
        input_checkout_path=str(checkout),
        input_matrix="",
    )


def _make_runner(
    settings: Settings,
    store: InMemoryEnvironmentStore,
    github: FakeGitHub,
) -> tuple[ActionRunner, HttpxGitHubClient]:
    api_client = HttpxGitHubClient(
        base_url=settings.github_api_url,
        token="t",
        repository=settings.github_repository,
        timeout_seconds=5,
        transport=httpx.MockTransport(github.handler),
    )
    processor = build_processor(settings, store, api_client)
    reporter = StatusReporter(
        JobContext(settings, store, api_client), api_client, settings, clock=lambda: STARTED
    )
    return ActionRunner(processor, reporter, settings, clock=lambda: STARTED), api_client


class TestUploadPipeline:
    def test_uploads_merged_directory(self, write_sarif: WriteSarif, tmp_path: Path) -> None:
        write_sarif("results/a.sarif", _make_sarif([_make_run("ESLint", 3)]))
        write_sarif("results/b.sarif", _make_sarif([_make_run("ESLint", 0), _make_run("CodeQL", 5)]))
        github = FakeGitHub([202])
        store = InMemoryEnvironmentStore()
        runner, api_client = _make_runner(
            _make_settings(tmp_path / "results", tmp_path), store, github
        )

        assert runner.run() is True
        api_client.close()

        assert len(github.uploads) == 1
        upload = github.uploads[0]
        assert upload["ref"] == "refs/pull/7/head"
        assert upload["commit_oid"] == "abc123"
        assert upload["analysis_key"] == ".github/workflows/codeql.yml:analyze"
        assert upload["workflow_run_id"] == 42
        assert upload["tool_names"] == ["ESLint", "CodeQL"]
        assert upload["started_at"] == "2020-05-01T10:00:00.000Z"
        assert "environment" not in upload
        sarif = json.loads(gzip.decompress(base64.b64decode(upload["sarif"])))
        assert [run["tool"]["driver"]["name"] for run in sarif["runs"]] == [
            "ESLint",
            "ESLint",
            "CodeQL",
        ]

        assert [r["status"] for r in github.status_reports] == ["starting", "success"]
        assert github.status_reports[1]["num_results_in_sarif"] == 8
        assert github.workflow_lookups == 1
        assert store.get(shared_env.UPLOAD_SENTINEL) is not None

    def test_retries_server_errors(self, write_sarif: WriteSarif, tmp_path: Path) -> None:
        path = write_sarif("results.sarif", _make_sarif())
        github = FakeGitHub([503, 502, 202])
        runner, _api = _make_runner(
            _make_settings(path, tmp_path), InMemoryEnvironmentStore(), github
        )

        assert runner.run() is True

        assert len(github.uploads) == 3
        assert github.uploads[0] == github.uploads[2]

    def test_reports_exhausted_retries(self, write_sarif: WriteSarif, tmp_path: Path) -> None:
        path = write_sarif("results.sarif", _make_sarif())
        github = FakeGitHub([500, 500, 500, 500])
        runner, _api = _make_runner(
            _make_settings(path, tmp_path), InMemoryEnvironmentStore(), github
        )

        assert runner.run() is False

        assert len(github.uploads) == 4
        failure = github.status_reports[-1]
        assert failure["status"] == "failure"
        assert "req-4" in failure["cause"]
        assert RetriesExhaustedError.__name__ in failure["exception"]

    def test_invalid_sarif_is_never_uploaded(self, write_sarif: WriteSarif, tmp_path: Path) -> None:
        document = _make_sarif()
        del document["runs"][0]["tool"]
        del document["runs"][0]["results"][0]["message"]
        path = write_sarif("results.sarif", document)
        github = FakeGitHub([])
        runner, _api = _make_runner(
            _make_settings(path, tmp_path), InMemoryEnvironmentStore(), github
        )

        assert runner.run() is False

        assert github.uploads == []
        failure = github.status_reports[-1]
        assert SchemaValidationError.__name__ in failure["exception"]
        assert failure["cause"].startswith(f'Unable to upload "{path}"')
        assert failure["cause"].count("\n- ") == 2

    def test_invalid_file_in_directory_is_named(
        self, write_sarif: WriteSarif, tmp_path: Path
    ) -> None:
        write_sarif("results/a.sarif", _make_sarif())
        broken = _make_sarif()
        del broken["runs"][0]["tool"]
        write_sarif("results/b.sarif", broken)
        github = FakeGitHub([])
        runner, _api = _make_runner(
            _make_settings(tmp_path / "results", tmp_path), InMemoryEnvironmentStore(), github
        )

        assert runner.run() is False

        cause = github.status_reports[-1]["cause"]
        assert cause.startswith(f'Unable to upload "{(tmp_path / "results" / "b.sarif").resolve()}"')
        assert github.uploads == []

    def test_version_mismatch_fails(self, write_sarif: WriteSarif, tmp_path: Path) -> None:
        write_sarif("results/a.sarif", _make_sarif(version="2.1.0"))
        write_sarif("results/b.sarif", _make_sarif(version="2.0.0"))
        github = FakeGitHub([])
        runner, _api = _make_runner(
            _make_settings(tmp_path / "results", tmp_path), InMemoryEnvironmentStore(), github
        )

        assert runner.run() is False

        assert VersionMismatchError.__name__ in github.status_reports[-1]["exception"]

    def test_rejected_starting_report_skips_upload(
        self, write_sarif: WriteSarif, tmp_path: Path
    ) -> None:
        path = write_sarif("results.sarif", _make_sarif())
        github = FakeGitHub([202], status_report_status=403)
        runner, _api = _make_runner(
            _make_settings(path, tmp_path), InMemoryEnvironmentStore(), github
        )

        assert runner.run() is False

        assert github.uploads == []
        assert [r["status"] for r in github.status_reports] == ["starting"]


class TestCrossStepState:
    def test_second_step_in_job_cannot_upload_again(
        self, write_sarif: WriteSarif, tmp_path: Path
    ) -> None:
        path = write_sarif("results.sarif", _make_sarif())
        github = FakeGitHub([202, 202])
        store = InMemoryEnvironmentStore()
        settings = _make_settings(path, tmp_path)
        first, _api1 = _make_runner(settings, store, github)
        assert first.run() is True

        second, _api2 = _make_runner(settings, InMemoryEnvironmentStore(store.snapshot()), github)

        assert second.run() is False
        assert len(github.uploads) == 1
        assert github.workflow_lookups == 1
        assert DuplicateUploadError.__name__ in github.status_reports[-1]["exception"]

    def test_test_mode_skips_network_upload(
        self, write_sarif: WriteSarif, tmp_path: Path
    ) -> None:
        path = write_sarif("results.sarif", _make_sarif())
        github = FakeGitHub([])
        settings = _make_settings(path, tmp_path).model_copy(update={"test_mode": True})
        runner, _api = _make_runner(settings, InMemoryEnvironmentStore(), github)

        assert runner.run() is True

        assert github.uploads == []
        assert [r["status"] for r in github.status_reports] == ["starting", "success"]
