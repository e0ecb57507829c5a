"""Deployment data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class DeploymentType(str, Enum):
    """Nature of a deployment."""

    NORMAL = "normal"
    ROLLBACK = "rollback"
    PROMOTION = "promotion"
    BLUE_GREEN = "blue_green"


class PayloadSchema(str, Enum):
    """Client payload layout the action accepts.

    DEPLOY carries the full deployment description, BUILD only a build id
    and the callback secret.
    """

    DEPLOY = "deploy"
    BUILD = "build"


class RegistrationPhase(str, Enum):
    """Progress of a single registration run."""

    NOT_STARTED = "not_started"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    REGISTERED = "registered"
    FAILED = "failed"


class DeployRequest(BaseModel):
    """Validated client payload of the triggering event."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(..., min_length=1)
    secret: SecretStr
    deployment_type: DeploymentType | None = None
    environment: str | None = None
    deployment_id: str | None = None


class DeployMetadata(BaseModel):
    """Run metadata sent along with every registration."""

    model_config = ConfigDict(frozen=True)

    repository_id: int | None = None
    workflow_run_id: int | None = None
    workflow_run_attempt: int | None = None
    branch_name: str | None = None
    org_login: str | None = None
    version: str


class RegistrationResult(BaseModel):
    """Interpreted response of the registration endpoint."""

    ok: bool
    status_code: int
    body: dict[str, Any] | None = None
    raw_body: str = ""
