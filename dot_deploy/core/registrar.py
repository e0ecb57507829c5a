"""Deploy registration.

Tells dot-deploy that a deploy workflow run has started: validates the
client payload, builds the registration body from the run metadata, posts
it once, and publishes the identifiers for the later phases of the job.
"""

from typing import Any

from dot_deploy.config import RunEnvironment, Settings
from dot_deploy.core.exceptions import RegistrarStateError, RegistrationFailedError
from dot_deploy.core.payload import PayloadExtractor, derive_metadata
from dot_deploy.core.ports import RunState
from dot_deploy.core.staging import ArtifactStager
from dot_deploy.models.artifact import StagedArtifact
from dot_deploy.models.deployment import (
    DeployRequest,
    PayloadSchema,
    RegistrationPhase,
    RegistrationResult,
)
from dot_deploy.services.deploy_api import DeployApiClient, DeployApiResponse
from dot_deploy.utils.logging import get_logger


class DeployRegistrar:
    """Registers the start of a deploy with the dot-deploy service.

    A registrar runs once:
    1. Validates the payload and derives the run metadata
    2. Stages the verification artifact (when a stager is given)
    3. Posts the registration
    4. Publishes the identifiers as outputs and run state
    """

    def __init__(
        self,
        settings: Settings,
        run_env: RunEnvironment,
        extractor: PayloadExtractor,
        api_client: DeployApiClient,
        run_state: RunState,
        stager: ArtifactStager | None = None,
    ):
        self.settings = settings
        self.run_env = run_env
        self.extractor = extractor
        self.api_client = api_client
        self.run_state = run_state
        self.stager = stager
        self.phase = RegistrationPhase.NOT_STARTED
        self.logger = get_logger("dot_deploy.registrar")

    async def register_deploy_start(self) -> RegistrationResult:
        """Run the registration; raises on any unrecoverable error.

        A failed or missing delete of an earlier artifact never stops the
        registration, but a failed upload does: nothing is posted without the
        artifact id the body would carry.
        """
        if self.phase != RegistrationPhase.NOT_STARTED:
            raise RegistrarStateError(
                f"Registrar already ran (phase: {self.phase.value})",
                {"phase": self.phase.value},
            )

        try:
            self.phase = RegistrationPhase.VALIDATING
            metadata = derive_metadata(self.run_env, self.extractor)
            request = self.extractor.extract()

            staged = await self.stager.stage() if self.stager else None

            body = self.build_body(metadata.model_dump(), request, staged)
            url = self.settings.register_url

            self.phase = RegistrationPhase.SUBMITTING
            self.logger.debug("registrar.submitting", url=url, body=body)
            response = await self.api_client.post_json(url, body, request.secret)

            result = self.interpret_response(response)
            self.publish(request, staged)
            self.phase = RegistrationPhase.REGISTERED
            self.logger.info(
                "registrar.registered",
                version=request.version,
                status_code=result.status_code,
            )
            return result

        except Exception as e:
            self.phase = RegistrationPhase.FAILED
            self.logger.error(
                "registrar.failed",
                error=str(e),
                error_type=type(e).__name__,
                status_code=getattr(e, "status_code", None),
                body=getattr(e, "body", None),
            )
            self.run_state.set_failed(str(e))
            raise

        finally:
            if self.stager:
                self.stager.cleanup()

    def build_body(
        self,
        metadata: dict[str, Any],
        request: DeployRequest,
        staged: StagedArtifact | None,
    ) -> dict[str, Any]:
        """Registration body: metadata plus the optional correlation fields."""
        body = dict(metadata)
        if request.deployment_id is not None:
            body["deployment_id"] = request.deployment_id
        if staged is not None:
            body["artifact_id"] = staged.artifact_id
            body["verification_token"] = staged.verification_token
        return body

    def interpret_response(self, response: DeployApiResponse) -> RegistrationResult:
        """Map the HTTP response to a result; the status code is checked first."""
        data = response.json()

        if response.status_code > 299:
            raise RegistrationFailedError(
                f"Failed to register deploy start: Got response code {response.status_code}",
                response.status_code,
                response.text,
            )

        if data is None or data.get("status") != "ok":
            raise RegistrationFailedError(
                "Failed because the server returned a non-ok status",
                response.status_code,
                response.text,
            )

        return RegistrationResult(
            ok=True,
            status_code=response.status_code,
            body=data,
            raw_body=response.text,
        )

    def publish(self, request: DeployRequest, staged: StagedArtifact | None) -> None:
        """Expose the identifiers as step outputs and saved run state."""
        values: dict[str, str] = {}
        if self.extractor.schema == PayloadSchema.BUILD:
            values["build-id"] = request.version
        else:
            values["version"] = request.version
            if request.environment is not None:
                values["environment"] = request.environment
            if request.deployment_type is not None:
                values["deployment_type"] = request.deployment_type.value
            if request.deployment_id is not None:
                values["deployment_id"] = request.deployment_id

        if staged is not None:
            values["artifact_id"] = str(staged.artifact_id)
            values["verification_token"] = staged.verification_token

        for key, value in values.items():
            self.run_state.set_output(key, value)
            self.run_state.save_state(key, value)
