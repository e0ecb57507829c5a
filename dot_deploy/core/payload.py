"""Client payload extraction.

Reads the event document the runner wrote for the triggering
``repository_dispatch`` event and turns its ``client_payload`` into a
DeployRequest. Validation runs field by field in a fixed order and stops at
the first problem, so the error a user sees always names one field.
"""

import json
from pathlib import Path
from typing import Any

from dot_deploy.config import RunEnvironment
from dot_deploy.core.exceptions import (
    ConfigurationError,
    InvalidFieldError,
    MissingFieldError,
    MissingPayloadError,
)
from dot_deploy.core.ports import SecretSink
from dot_deploy.models.deployment import (
    DeploymentType,
    DeployMetadata,
    DeployRequest,
    PayloadSchema,
)
from dot_deploy.utils.logging import get_logger

logger = get_logger(__name__)

# (payload key, label used in the error message), in validation order
SCHEMA_FIELDS: dict[PayloadSchema, list[tuple[str, str]]] = {
    PayloadSchema.DEPLOY: [
        ("version", "build version"),
        ("deployment_type", "deploymentType"),
        ("environment", "environment"),
        ("secret", "secret"),
        ("deployment_id", "deploymentId"),
    ],
    PayloadSchema.BUILD: [
        ("build_id", "build id"),
        ("secret", "secret"),
    ],
}

# Payload key carrying the identifier of the artifact being deployed
VERSION_KEYS = {
    PayloadSchema.DEPLOY: "version",
    PayloadSchema.BUILD: "build_id",
}


class PayloadExtractor:
    """Builds a DeployRequest from the triggering event document."""

    def __init__(
        self,
        run_env: RunEnvironment,
        secret_sink: SecretSink,
        schema: PayloadSchema = PayloadSchema.DEPLOY,
    ):
        self.run_env = run_env
        self.secret_sink = secret_sink
        self.schema = schema

    def extract(self) -> DeployRequest:
        """Return the validated client payload.

        Raises:
            ConfigurationError: GITHUB_EVENT_PATH is unset or unreadable
            MissingPayloadError: the document has no client_payload object
            MissingFieldError: a required field is absent, empty or not a string
            InvalidFieldError: deployment_type is not a known DeploymentType
        """
        client_payload = self._read_client_payload()

        values: dict[str, str] = {}
        for key, label in SCHEMA_FIELDS[self.schema]:
            value = client_payload.get(key)
            if not value or not isinstance(value, str):
                raise MissingFieldError(key, label)
            if key == "secret":
                self.secret_sink.mask(value)
            values[key] = value

        deployment_type = None
        if "deployment_type" in values:
            deployment_type = self._parse_deployment_type(values["deployment_type"])

        return DeployRequest(
            version=values[VERSION_KEYS[self.schema]],
            secret=values["secret"],
            deployment_type=deployment_type,
            environment=values.get("environment"),
            deployment_id=values.get("deployment_id"),
        )

    def _read_client_payload(self) -> dict[str, Any]:
        event_path = self.run_env.event_path
        if not event_path:
            raise ConfigurationError("GITHUB_EVENT_PATH is not defined")

        try:
            document = json.loads(Path(event_path).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read event document: {e}", {"event_path": event_path}
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Event document is not valid JSON: {e}", {"event_path": event_path}
            ) from e

        client_payload = (
            document.get("client_payload") if isinstance(document, dict) else None
        )
        if not client_payload or not isinstance(client_payload, dict):
            raise MissingPayloadError()
        return client_payload

    @staticmethod
    def _parse_deployment_type(value: str) -> DeploymentType:
        try:
            return DeploymentType(value)
        except ValueError:
            raise InvalidFieldError(
                "deployment_type", value, [t.value for t in DeploymentType]
            ) from None


def parse_run_number(value: str | None) -> int | None:
    """Parse a numeric run identifier; anything unparsable becomes None."""
    if value is None:
        return None
    # Plain ASCII decimal only; int() alone also takes "1_000" and non-ASCII digits
    digits = value.strip()
    if not (digits.isascii() and digits.removeprefix("-").isdigit()):
        logger.debug("metadata.unparsable_number", value=value)
        return None
    return int(digits)


def derive_metadata(run_env: RunEnvironment, extractor: PayloadExtractor) -> DeployMetadata:
    """Collect the run metadata reported with a registration."""
    request = extractor.extract()

    return DeployMetadata(
        repository_id=parse_run_number(run_env.repository_id),
        workflow_run_id=parse_run_number(run_env.run_id),
        workflow_run_attempt=parse_run_number(run_env.run_attempt),
        branch_name=run_env.ref_name,
        org_login=run_env.repository_owner,
        version=request.version,
    )
