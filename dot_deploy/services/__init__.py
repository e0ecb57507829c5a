"""Services for dot-deploy."""

from dot_deploy.services.actions_runtime import ActionsRuntime
from dot_deploy.services.artifact_service import ArtifactServiceClient
from dot_deploy.services.deploy_api import DeployApiClient

__all__ = [
    "ActionsRuntime",
    "ArtifactServiceClient",
    "DeployApiClient",
]
