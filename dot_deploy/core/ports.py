"""Interfaces between the core workflow and the Actions runtime."""

from pathlib import Path
from typing import Protocol

from dot_deploy.models.artifact import UploadedArtifact, UploadOptions


class SecretSink(Protocol):
    """Hides secret values from every later log line."""

    def mask(self, value: str) -> None: ...


class RunState(Protocol):
    """Per-run key/value sink shared between the phases of a job."""

    def set_output(self, key: str, value: str) -> None: ...

    def save_state(self, key: str, value: str) -> None: ...

    def get_state(self, key: str) -> str: ...

    def set_failed(self, message: str) -> None: ...


class ArtifactStorage(Protocol):
    """Artifact store of the current workflow run.

    ``delete`` raises ArtifactNotFoundError when no artifact has ``name``.
    """

    async def delete(self, name: str) -> None: ...

    async def upload(
        self, name: str, files: list[Path], options: UploadOptions
    ) -> UploadedArtifact: ...
