"""Verification artifact data models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UploadOptions(BaseModel):
    """Options for an artifact upload."""

    retention_days: int = Field(default=1, ge=1, le=90)
    compression_level: int = Field(default=0, ge=0, le=9)


class UploadedArtifact(BaseModel):
    """Artifact as reported by the storage service after upload."""

    id: int
    size: int


class StagedArtifact(BaseModel):
    """Verification artifact uploaded for the current run."""

    model_config = ConfigDict(frozen=True)

    artifact_id: int
    size: int
    verification_token: str
    temp_dir: Path


class CleanupOutcome(BaseModel):
    """Result of a best-effort cleanup step.

    ``ignored_failure`` means the step raised and the error was swallowed.
    """

    action: str
    status: Literal["done", "not_found", "ignored_failure"]
    error: str | None = None

    @property
    def ignored(self) -> bool:
        return self.status == "ignored_failure"
