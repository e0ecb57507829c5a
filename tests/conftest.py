"""Pytest configuration and fixtures."""

import io
import json
from pathlib import Path
from typing import Any, Callable

import pytest

from dot_deploy.config import RunEnvironment, Settings
from dot_deploy.models.deployment import PayloadSchema
from dot_deploy.services.actions_runtime import ActionsRuntime
from dot_deploy.utils.logging import clear_secrets
from tests.helpers import API_BASE_URL


@pytest.fixture(autouse=True)
def _forget_secrets():
    """Keep registered log secrets from leaking between tests."""
    yield
    clear_secrets()


@pytest.fixture
def write_event(tmp_path: Path) -> Callable[[Any], Path]:
    """Write an event document and return its path."""

    def _write(document: Any) -> Path:
        path = tmp_path / "event.json"
        text = document if isinstance(document, str) else json.dumps(document)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def deploy_payload() -> dict[str, str]:
    """Complete client payload for the deploy schema."""
    return {
        "version": "v2.4.0",
        "deployment_type": "rollback",
        "environment": "production",
        "secret": "s3cr3t-callback",
        "deployment_id": "dep_123",
    }


@pytest.fixture
def output_file(tmp_path: Path) -> Path:
    path = tmp_path / "github_output"
    path.touch()
    return path


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    path = tmp_path / "github_state"
    path.touch()
    return path


@pytest.fixture
def make_run_env(output_file: Path, state_file: Path) -> Callable[..., RunEnvironment]:
    """Build a RunEnvironment without picking up the host's GITHUB_* vars."""

    def _make(event_path: Path | None, **overrides: Any) -> RunEnvironment:
        values: dict[str, Any] = {
            "event_path": str(event_path) if event_path else None,
            "repository_id": "101",
            "run_id": "2002",
            "run_attempt": "1",
            "ref_name": "main",
            "repository_owner": "acme",
            "output": str(output_file),
            "state": str(state_file),
        }
        values.update(overrides)
        return RunEnvironment(**values)

    return _make


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "dot_deploy_api_base_url": API_BASE_URL,
            "dot_deploy_payload_schema": PayloadSchema.DEPLOY,
            "dot_deploy_stage_artifact": False,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def stdout() -> io.StringIO:
    """Captures the workflow commands a runtime writes."""
    return io.StringIO()


@pytest.fixture
def make_runtime(stdout: io.StringIO) -> Callable[..., ActionsRuntime]:
    def _make(run_env: RunEnvironment, environ: dict[str, str] | None = None) -> ActionsRuntime:
        return ActionsRuntime(run_env, environ=environ or {}, stream=stdout)

    return _make
