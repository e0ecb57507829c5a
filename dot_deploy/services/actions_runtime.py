"""GitHub Actions runner integration.

Implements the secret sink and run-state ports on top of the runner's
workflow commands (``::name::message`` lines on stdout) and file commands
(``GITHUB_OUTPUT`` / ``GITHUB_STATE``).
"""

import os
import sys
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

from dot_deploy.config import RunEnvironment
from dot_deploy.utils.logging import register_secret


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_key_value(key: str, value: str, delimiter: str) -> str:
    """Format a multi-line safe ``key<<delimiter`` file command entry."""
    if delimiter in key:
        raise ValueError(f"Unexpected input: name should not contain the delimiter {delimiter!r}")
    if delimiter in value:
        raise ValueError(f"Unexpected input: value should not contain the delimiter {delimiter!r}")
    return f"{key}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}"


class ActionsRuntime:
    """Process-level outputs, state and masking of an Actions step."""

    def __init__(
        self,
        run_env: RunEnvironment,
        environ: Mapping[str, str] | None = None,
        stream: TextIO | None = None,
    ):
        self.run_env = run_env
        self._environ = environ if environ is not None else {}
        self._stream = stream
        self.exit_code = 0

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def issue_command(
        self, command: str, message: str = "", properties: dict[str, str] | None = None
    ) -> None:
        """Write a workflow command to stdout."""
        line = f"::{command}"
        if properties:
            line += " " + ",".join(
                f"{key}={escape_property(value)}" for key, value in properties.items()
            )
        line += f"::{escape_data(message)}"
        self.stream.write(line + os.linesep)
        self.stream.flush()

    def mask(self, value: str) -> None:
        """Register a secret with the runner and the local log redaction."""
        self.issue_command("add-mask", value)
        register_secret(value)

    def debug(self, message: str) -> None:
        self.issue_command("debug", message)

    def set_output(self, key: str, value: str) -> None:
        if self.run_env.output:
            self._append_file_command(self.run_env.output, key, value)
        else:
            self.stream.write(os.linesep)
            self.issue_command("set-output", value, {"name": key})

    def save_state(self, key: str, value: str) -> None:
        if self.run_env.state:
            self._append_file_command(self.run_env.state, key, value)
        else:
            self.issue_command("save-state", value, {"name": key})

    def get_state(self, key: str) -> str:
        """Read back a value saved by an earlier phase; empty if never saved."""
        return self._environ.get(f"STATE_{key}", "")

    def set_failed(self, message: str) -> None:
        """Mark the step as failed with ``message`` as the visible reason."""
        self.exit_code = 1
        self.issue_command("error", message)

    def _append_file_command(self, path: str, key: str, value: str) -> None:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Missing file at path: {path}")

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(format_key_value(key, value, delimiter) + os.linesep)
