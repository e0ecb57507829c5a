"""Verification artifact staging.

The verification token lets dot-deploy check out of band that this run
produced the artifact: the artifact holds the same token the registration
body carries.
"""

import secrets
import shutil
import string
import tempfile
from pathlib import Path

from dot_deploy.core.exceptions import ArtifactNotFoundError
from dot_deploy.core.ports import ArtifactStorage
from dot_deploy.models.artifact import CleanupOutcome, StagedArtifact, UploadOptions
from dot_deploy.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits + "_-"
TOKEN_LENGTH = 32
TOKEN_FILE_NAME = "verification_token.txt"


def generate_verification_token(length: int = TOKEN_LENGTH) -> str:
    """Random opaque token drawn from the URL-safe alphabet."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


class ArtifactStager:
    """Uploads a fresh verification artifact for the current run."""

    def __init__(
        self,
        storage: ArtifactStorage,
        name: str = "dot-deploy-verification",
        options: UploadOptions | None = None,
    ):
        self.storage = storage
        self.name = name
        self.options = options or UploadOptions(retention_days=1, compression_level=0)
        self.outcomes: list[CleanupOutcome] = []
        self.temp_dir: Path | None = None

    async def stage(self) -> StagedArtifact:
        """Replace any earlier artifact with a new token artifact."""
        token = generate_verification_token()

        self.outcomes.append(await self.delete_existing())

        self.temp_dir = Path(tempfile.mkdtemp(prefix="dot-deploy-"))
        token_file = self.temp_dir / TOKEN_FILE_NAME
        token_file.write_text(token, encoding="utf-8")

        uploaded = await self.storage.upload(self.name, [token_file], self.options)
        logger.info(
            "staging.uploaded",
            artifact_id=uploaded.id,
            size=uploaded.size,
        )
        return StagedArtifact(
            artifact_id=uploaded.id,
            size=uploaded.size,
            verification_token=token,
            temp_dir=self.temp_dir,
        )

    def cleanup(self) -> CleanupOutcome | None:
        """Remove the staging directory, if one was created."""
        if self.temp_dir is None:
            return None
        outcome = remove_temp_dir(self.temp_dir)
        self.outcomes.append(outcome)
        self.temp_dir = None
        return outcome

    async def delete_existing(self) -> CleanupOutcome:
        """Best-effort delete of a previous artifact with the same name."""
        action = f"delete artifact {self.name}"
        try:
            await self.storage.delete(self.name)
        except ArtifactNotFoundError:
            return CleanupOutcome(action=action, status="not_found")
        except Exception as e:
            logger.warning("staging.delete_ignored", name=self.name, error=str(e))
            return CleanupOutcome(action=action, status="ignored_failure", error=str(e))
        return CleanupOutcome(action=action, status="done")


def remove_temp_dir(temp_dir: Path) -> CleanupOutcome:
    """Best-effort removal of a staging directory."""
    action = f"remove {temp_dir}"
    try:
        shutil.rmtree(temp_dir)
    except FileNotFoundError:
        return CleanupOutcome(action=action, status="not_found")
    except OSError as e:
        logger.debug("staging.temp_dir_cleanup_failed", path=str(temp_dir), error=str(e))
        return CleanupOutcome(action=action, status="ignored_failure", error=str(e))
    return CleanupOutcome(action=action, status="done")
