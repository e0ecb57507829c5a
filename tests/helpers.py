"""Shared test helpers."""

from pathlib import Path
from typing import Any

from dot_deploy.models.artifact import UploadedArtifact, UploadOptions

API_BASE_URL = "https://dot-deploy.test"
REGISTER_URL = f"{API_BASE_URL}/actions/deploys/register"


def read_file_commands(path: Path) -> dict[str, str]:
    """Parse ``key<<delimiter`` entries written to GITHUB_OUTPUT/GITHUB_STATE."""
    values: dict[str, str] = {}
    lines = path.read_text(encoding="utf-8").splitlines()
    i = 0
    while i < len(lines):
        key, delimiter = lines[i].split("<<", 1)
        end = lines.index(delimiter, i + 1)
        values[key] = "\n".join(lines[i + 1 : end])
        i = end + 1
    return values


class FakeArtifactStorage:
    """In-memory artifact store recording every call."""

    def __init__(self, delete_error: Exception | None = None, upload_error: Exception | None = None):
        self.delete_error = delete_error
        self.upload_error = upload_error
        self.deleted: list[str] = []
        self.uploads: list[dict[str, Any]] = []

    async def delete(self, name: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(name)

    async def upload(self, name: str, files: list[Path], options: UploadOptions) -> UploadedArtifact:
        if self.upload_error is not None:
            raise self.upload_error
        self.uploads.append(
            {
                "name": name,
                "contents": [f.read_text(encoding="utf-8") for f in files],
                "options": options,
            }
        )
        return UploadedArtifact(id=4242, size=178)
