"""Pre step entry point: register the deploy start with dot-deploy."""

import asyncio
import os
import sys

from dot_deploy import __version__
from dot_deploy.config import ArtifactRuntime, RunEnvironment, Settings, get_settings
from dot_deploy.core.exceptions import DotDeployError
from dot_deploy.core.payload import PayloadExtractor
from dot_deploy.core.registrar import DeployRegistrar
from dot_deploy.core.staging import ArtifactStager
from dot_deploy.models.artifact import UploadOptions
from dot_deploy.services.actions_runtime import ActionsRuntime
from dot_deploy.services.artifact_service import ArtifactServiceClient
from dot_deploy.services.deploy_api import DeployApiClient
from dot_deploy.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_registrar(
    settings: Settings,
    run_env: RunEnvironment,
    runtime: ActionsRuntime,
    artifact_runtime: ArtifactRuntime | None = None,
    api_client: DeployApiClient | None = None,
) -> DeployRegistrar:
    """Wire a registrar from explicit configuration."""
    extractor = PayloadExtractor(
        run_env,
        secret_sink=runtime,
        schema=settings.dot_deploy_payload_schema,
    )

    stager = None
    if settings.dot_deploy_stage_artifact:
        stager = ArtifactStager(
            ArtifactServiceClient(artifact_runtime or ArtifactRuntime()),
            name=settings.dot_deploy_artifact_name,
            options=UploadOptions(
                retention_days=settings.dot_deploy_artifact_retention_days,
                compression_level=0,
            ),
        )

    return DeployRegistrar(
        settings=settings,
        run_env=run_env,
        extractor=extractor,
        api_client=api_client or DeployApiClient(),
        run_state=runtime,
        stager=stager,
    )


async def preprocess(settings: Settings, run_env: RunEnvironment, runtime: ActionsRuntime) -> int:
    """Run the registration and return the process exit code."""
    logger.info("pre.starting", version=__version__)
    try:
        registrar = create_registrar(settings, run_env, runtime)
        await registrar.register_deploy_start()
    except DotDeployError as e:
        # Failures inside the registrar already marked the step failed
        if runtime.exit_code == 0:
            runtime.set_failed(e.message)
        logger.error("pre.failed", error=e.message, details=e.details)
    except Exception as e:
        if runtime.exit_code == 0:
            runtime.set_failed(str(e))
        logger.exception("pre.unexpected_error", error=str(e))
    return runtime.exit_code


def run() -> None:
    """Console script entry point."""
    settings = get_settings()
    configure_logging(settings)
    run_env = RunEnvironment()
    runtime = ActionsRuntime(run_env, environ=os.environ)
    sys.exit(asyncio.run(preprocess(settings, run_env, runtime)))


if __name__ == "__main__":
    run()
