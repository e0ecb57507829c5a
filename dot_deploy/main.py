"""Main step entry point: republish the registration state as outputs."""

import os

from dot_deploy.config import RunEnvironment, get_settings
from dot_deploy.core.ports import RunState
from dot_deploy.services.actions_runtime import ActionsRuntime
from dot_deploy.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

# Keys the pre step may have saved, depending on payload schema and staging
STATE_KEYS = [
    "version",
    "build-id",
    "environment",
    "deployment_type",
    "deployment_id",
    "artifact_id",
    "verification_token",
]


def export_outputs(run_state: RunState) -> dict[str, str]:
    """Copy every saved state value to a step output of the same name."""
    exported: dict[str, str] = {}
    for key in STATE_KEYS:
        value = run_state.get_state(key)
        if not value:
            continue
        run_state.set_output(key, value)
        exported[key] = value

    logger.info("main.outputs_exported", keys=list(exported))
    return exported


def run() -> None:
    """Console script entry point."""
    configure_logging(get_settings())
    run_env = RunEnvironment()
    try:
        export_outputs(ActionsRuntime(run_env, environ=os.environ))
    except Exception as e:
        # Output export never fails the job
        logger.exception("main.export_failed", error=str(e))


if __name__ == "__main__":
    run()
