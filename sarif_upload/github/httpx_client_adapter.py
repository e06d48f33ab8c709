import httpx

from sarif_upload.config.settings import Settings
from sarif_upload.github.client_base import ApiResponse, BaseGitHubClient
from sarif_upload.github.exceptions import GitHubApiError, GitHubNetworkError
from sarif_upload.logging.logger import Log

_REQUEST_ID_HEADER = "x-github-request-id"
_USER_AGENT = "sarif-upload-worker"


class HttpxGitHubClient(BaseGitHubClient):
    """GitHub REST client built on httpx."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        repository: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        owner, _, repo = repository.partition("/")
        if not owner or not repo:
            raise ValueError(
                f"Repository must be in the form 'owner/repo', got {repository!r}"
            )
        self._repo_path = f"/repos/{owner}/{repo}"
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": _USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpxGitHubClient":
        return cls(
            base_url=settings.github_api_url,
            token=settings.input_token,
            repository=settings.github_repository,
            timeout_seconds=settings.http_timeout_seconds,
        )

    def put_analysis(self, payload: dict[str, object]) -> ApiResponse:
        return self._send("PUT", f"{self._repo_path}/code-scanning/analysis", payload)

    def put_status_report(self, report: dict[str, object]) -> ApiResponse:
        return self._send(
            "PUT", f"{self._repo_path}/code-scanning/analysis/status", report
        )

    def get_workflow_path(self, run_id: int) -> str:
        run = self._get_json(f"{self._repo_path}/actions/runs/{run_id}")
        workflow_url = run.get("workflow_url")
        if not isinstance(workflow_url, str) or not workflow_url:
            raise GitHubApiError(f"Workflow run {run_id} has no workflow_url")
        workflow = self._get_json(workflow_url)
        path = workflow.get("path")
        if not isinstance(path, str) or not path:
            raise GitHubApiError(f"Workflow {workflow_url} has no path")
        return path

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, url: str, data: dict[str, object]) -> ApiResponse:
        try:
            response = self._client.request(method, url, json=data)
        except httpx.TransportError as exc:
            raise GitHubNetworkError(f"GitHub API network error: {exc}") from exc
        Log.debug(f"{method} {url} response status: {response.status_code}")
        return ApiResponse(
            status=response.status_code,
            request_id=response.headers.get(_REQUEST_ID_HEADER),
            body=response.text,
        )

    def _get_json(self, url: str) -> dict[str, object]:
        try:
            response = self._client.get(url)
        except httpx.TransportError as exc:
            raise GitHubNetworkError(f"GitHub API network error: {exc}") from exc
        if not response.is_success:
            raise GitHubApiError(
                f"GET {url} failed ({response.headers.get(_REQUEST_ID_HEADER)}): "
                f"({response.status_code}) {response.text}"
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubApiError(f"GET {url} returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise GitHubApiError(f"GET {url} returned a non-object response")
        return data
