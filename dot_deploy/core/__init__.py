"""Core functionality for dot-deploy."""

from dot_deploy.core.exceptions import (
    ArtifactNotFoundError,
    ArtifactStorageError,
    ConfigurationError,
    DotDeployError,
    InvalidFieldError,
    MissingFieldError,
    MissingPayloadError,
    PayloadError,
    RegistrarStateError,
    RegistrationFailedError,
)
from dot_deploy.core.payload import PayloadExtractor, derive_metadata
from dot_deploy.core.registrar import DeployRegistrar
from dot_deploy.core.staging import ArtifactStager

__all__ = [
    "ArtifactNotFoundError",
    "ArtifactStorageError",
    "ConfigurationError",
    "DotDeployError",
    "InvalidFieldError",
    "MissingFieldError",
    "MissingPayloadError",
    "PayloadError",
    "RegistrarStateError",
    "RegistrationFailedError",
    "PayloadExtractor",
    "derive_metadata",
    "DeployRegistrar",
    "ArtifactStager",
]
