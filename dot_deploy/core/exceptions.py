"""Custom exceptions for dot-deploy."""

from typing import Any


class DotDeployError(Exception):
    """Base exception for dot-deploy."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(DotDeployError):
    """A required execution-environment pointer is missing or unusable."""

    pass


class PayloadError(DotDeployError):
    """The triggering event document is malformed or incomplete."""

    pass


class MissingPayloadError(PayloadError):
    """The event document carries no client payload object."""

    def __init__(self):
        super().__init__("Client payload is missing")


class MissingFieldError(PayloadError):
    """A required client payload field is absent, empty or not a string."""

    def __init__(self, field: str, label: str | None = None):
        super().__init__(
            f"Client payload is missing the {label or field}",
            {"field": field},
        )
        self.field = field


class InvalidFieldError(PayloadError):
    """A client payload field holds a value outside its allowed set."""

    def __init__(self, field: str, value: str, allowed: list[str]):
        super().__init__(
            f"Client payload has an invalid {field}: {value!r}",
            {"field": field, "value": value, "allowed": allowed},
        )
        self.field = field


class ArtifactStorageError(DotDeployError):
    """The artifact service rejected or failed a request."""

    pass


class ArtifactNotFoundError(ArtifactStorageError):
    """No artifact with the given name exists in this run."""

    def __init__(self, name: str):
        super().__init__(f"Artifact not found: {name}", {"name": name})
        self.name = name


class RegistrationFailedError(DotDeployError):
    """The dot-deploy service did not accept the deploy registration."""

    def __init__(self, message: str, status_code: int, body: str | None = None):
        super().__init__(
            message,
            {"status_code": status_code, "body": body},
        )
        self.status_code = status_code
        self.body = body


class RegistrarStateError(DotDeployError):
    """The registrar was asked to run again after it already ran."""

    pass
