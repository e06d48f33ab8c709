from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    test_mode: bool = False

    environment_store: str = "actions"
    fingerprinter: str = "passthrough"
    http_timeout_seconds: int = 30

    github_api_url: str = "https://api.github.com"
    github_env: str = ""
    github_repository: str = ""
    github_run_id: str = ""
    github_ref: str = ""
    github_sha: str = ""
    github_workflow: str = ""
    github_job: str = ""

    input_token: str = ""
    input_sarif_file: str = "../results"
    input_checkout_path: str = ""
    input_matrix: str = ""

    sarif_suffix: str = ".sarif"
    action_oid: str = "unknown"
