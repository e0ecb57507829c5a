"""Data models for dot-deploy."""

from dot_deploy.models.artifact import (
    CleanupOutcome,
    StagedArtifact,
    UploadedArtifact,
    UploadOptions,
)
from dot_deploy.models.deployment import (
    DeployMetadata,
    DeploymentType,
    DeployRequest,
    PayloadSchema,
    RegistrationPhase,
    RegistrationResult,
)

__all__ = [
    # Deployment models
    "DeploymentType",
    "DeployRequest",
    "DeployMetadata",
    "PayloadSchema",
    "RegistrationPhase",
    "RegistrationResult",
    # Artifact models
    "CleanupOutcome",
    "StagedArtifact",
    "UploadedArtifact",
    "UploadOptions",
]
