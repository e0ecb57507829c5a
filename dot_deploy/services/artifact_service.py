"""Client for the GitHub Actions artifact service (v4 artifacts).

The runner exposes the results service through ``ACTIONS_RESULTS_URL`` and
authenticates it with ``ACTIONS_RUNTIME_TOKEN``. Requests are twirp JSON
calls; uploads go straight to the signed blob URL the service hands out.
"""

import hashlib
import io
import zipfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import httpx
import jwt

from dot_deploy.config import ArtifactRuntime
from dot_deploy.core.exceptions import (
    ArtifactNotFoundError,
    ArtifactStorageError,
    ConfigurationError,
)
from dot_deploy.models.artifact import UploadedArtifact, UploadOptions
from dot_deploy.utils.logging import get_logger

logger = get_logger(__name__)

TWIRP_SERVICE = "twirp/github.actions.results.api.v1.ArtifactService"
RESULTS_SCOPE_PREFIX = "Actions.Results:"


def parse_backend_ids(runtime_token: str) -> tuple[str, str]:
    """Extract (workflow run, job run) backend ids from the runtime token."""
    try:
        claims = jwt.decode(runtime_token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise ConfigurationError(f"ACTIONS_RUNTIME_TOKEN is not a valid JWT: {e}") from e

    for scope in str(claims.get("scp", "")).split(" "):
        if not scope.startswith(RESULTS_SCOPE_PREFIX):
            continue
        parts = scope.split(":")
        if len(parts) == 3 and parts[1] and parts[2]:
            return parts[1], parts[2]

    raise ConfigurationError("Failed to get backend IDs: no Actions.Results scope in token")


def zip_files(files: list[Path], compression_level: int) -> bytes:
    """Pack ``files`` flat into an in-memory zip archive."""
    compression = zipfile.ZIP_STORED if compression_level == 0 else zipfile.ZIP_DEFLATED
    buffer = io.BytesIO()
    with zipfile.ZipFile(
        buffer,
        "w",
        compression=compression,
        compresslevel=compression_level or None,
    ) as archive:
        for file in files:
            archive.write(file, arcname=file.name)
    return buffer.getvalue()


class ArtifactServiceClient:
    """Artifact storage of the current workflow run."""

    def __init__(
        self,
        runtime: ArtifactRuntime,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not runtime.runtime_token:
            raise ConfigurationError("ACTIONS_RUNTIME_TOKEN is not defined")
        if not runtime.results_url:
            raise ConfigurationError("ACTIONS_RESULTS_URL is not defined")

        self.base_url = runtime.results_url.rstrip("/")
        self._token = runtime.runtime_token
        self._transport = transport
        self.run_backend_id, self.job_backend_id = parse_backend_ids(runtime.runtime_token)

    def _backend_ids(self) -> dict[str, str]:
        return {
            "workflow_run_backend_id": self.run_backend_id,
            "workflow_job_run_backend_id": self.job_backend_id,
        }

    async def _call(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        """Invoke a twirp method and return its JSON response."""
        url = f"{self.base_url}/{TWIRP_SERVICE}/{method}"
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.post(url, json=body, headers=headers)

        if resp.status_code > 299:
            logger.error(
                "artifact_service.request_failed",
                method=method,
                status_code=resp.status_code,
                body=resp.text[:500],
            )
            raise ArtifactStorageError(
                f"{method} failed with status {resp.status_code}",
                {"method": method, "status_code": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ArtifactStorageError(
                f"{method} returned a non-JSON body",
                {"method": method, "status_code": resp.status_code, "body": resp.text[:500]},
            ) from e
        if not isinstance(data, dict):
            raise ArtifactStorageError(
                f"{method} returned a non-object body",
                {"method": method, "status_code": resp.status_code},
            )
        return data

    async def list_artifacts(self, name: str | None = None) -> list[dict[str, Any]]:
        body: dict[str, Any] = self._backend_ids()
        if name is not None:
            body["name_filter"] = name
        data = await self._call("ListArtifacts", body)
        return data.get("artifacts", [])

    async def delete(self, name: str) -> None:
        """Delete the artifact called ``name`` from this run."""
        if not await self.list_artifacts(name):
            raise ArtifactNotFoundError(name)

        data = await self._call("DeleteArtifact", {**self._backend_ids(), "name": name})
        if not data.get("ok"):
            raise ArtifactStorageError(f"DeleteArtifact: response from backend was not ok for {name}")
        logger.info("artifact_service.deleted", name=name, artifact_id=data.get("artifact_id"))

    async def upload(
        self, name: str, files: list[Path], options: UploadOptions
    ) -> UploadedArtifact:
        """Zip ``files`` and upload them as a new artifact."""
        expires_at = datetime.now(timezone.utc) + timedelta(days=options.retention_days)
        created = await self._call(
            "CreateArtifact",
            {
                **self._backend_ids(),
                "name": name,
                "version": 4,
                "expires_at": expires_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
            },
        )
        if not created.get("ok") or not created.get("signed_upload_url"):
            raise ArtifactStorageError(f"CreateArtifact: response from backend was not ok for {name}")

        archive = zip_files(files, options.compression_level)
        digest = hashlib.sha256(archive).hexdigest()

        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.put(
                created["signed_upload_url"],
                content=archive,
                headers={
                    "x-ms-blob-type": "BlockBlob",
                    "Content-Type": "application/zip",
                },
            )
        if resp.status_code > 299:
            raise ArtifactStorageError(
                f"Blob upload failed with status {resp.status_code}",
                {"status_code": resp.status_code},
            )

        finalized = await self._call(
            "FinalizeArtifact",
            {
                **self._backend_ids(),
                "name": name,
                "size": str(len(archive)),
                "hash": f"sha256:{digest}",
            },
        )
        if not finalized.get("ok"):
            raise ArtifactStorageError(f"FinalizeArtifact: response from backend was not ok for {name}")

        artifact = UploadedArtifact(id=int(finalized["artifact_id"]), size=len(archive))
        logger.info("artifact_service.uploaded", name=name, artifact_id=artifact.id, size=artifact.size)
        return artifact
