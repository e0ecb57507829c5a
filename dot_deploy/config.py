"""Action configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dot_deploy.models.deployment import PayloadSchema

# Load .env file for local runs; values already in the environment win
load_dotenv()


class Settings(BaseSettings):
    """Action settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # dot-deploy service
    dot_deploy_api_base_url: str = "https://api.dot-deploy.dev"
    dot_deploy_payload_schema: PayloadSchema = PayloadSchema.DEPLOY

    # Verification artifact
    dot_deploy_stage_artifact: bool = False
    dot_deploy_artifact_name: str = "dot-deploy-verification"
    dot_deploy_artifact_retention_days: int = Field(default=1, ge=1, le=90)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    @property
    def register_url(self) -> str:
        """Full URL of the deploy registration endpoint."""
        return f"{self.dot_deploy_api_base_url.rstrip('/')}/actions/deploys/register"


class RunEnvironment(BaseSettings):
    """Pointers the Actions runner exports for the current workflow run.

    Values stay raw strings; numeric parsing happens in metadata derivation.
    """

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_",
        case_sensitive=False,
        extra="ignore",
    )

    event_path: str | None = None
    repository_id: str | None = None
    run_id: str | None = None
    run_attempt: str | None = None
    ref_name: str | None = None
    repository_owner: str | None = None

    # File commands
    output: str | None = None
    state: str | None = None


class ArtifactRuntime(BaseSettings):
    """Credentials for the Actions artifact (results) service."""

    model_config = SettingsConfigDict(
        env_prefix="ACTIONS_",
        case_sensitive=False,
        extra="ignore",
    )

    runtime_token: str | None = None
    results_url: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
