"""Running scripts and source text inside an environment."""

import os
import tempfile
from pathlib import Path
from typing import Optional, Sequence

from mcp_local_venv.config import Settings, load_settings
from mcp_local_venv.commands import Sink, run_activated_command
from mcp_local_venv.environments.environment import require_environment
from mcp_local_venv.errors import ProcessError
from mcp_local_venv.types import CommandResult, Environment
from mcp_local_venv.logging import get_logger

logger = get_logger(__name__)


def run_file(
    env: Environment,
    script_path: str | os.PathLike,
    args: Sequence[str] = (),
    ignore_error_status: bool = True,
    stdout: Sink = None,
    stderr: Sink = None,
    *,
    settings: Optional[Settings] = None,
) -> CommandResult:
    """Run a script with the environment's interpreter.

    A non-zero exit raises ProcessError only when ``ignore_error_status`` is false.
    """
    require_environment(env)
    settings = settings or load_settings()

    logger.debug("running_script", script=str(script_path), args=list(args))
    result = run_activated_command(
        env,
        env.interpreter,
        str(script_path),
        " ".join(args),
        shell=settings.shell,
        stdout=stdout,
        stderr=stderr,
    )

    if not ignore_error_status and not result.success:
        raise ProcessError(result.command, result.returncode, result.stderr)
    return result


def run_source(
    env: Environment,
    source: str,
    args: Sequence[str] = (),
    ignore_error_status: bool = True,
    stdout: Sink = None,
    stderr: Sink = None,
    *,
    settings: Optional[Settings] = None,
) -> CommandResult:
    """Write ``source`` to a temporary script and run it like run_file."""
    require_environment(env)

    fd, script_path = tempfile.mkstemp(suffix=".py", prefix="mcp-venv-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as script:
            script.write(source)
        return run_file(
            env,
            script_path,
            args,
            ignore_error_status=ignore_error_status,
            stdout=stdout,
            stderr=stderr,
            settings=settings,
        )
    finally:
        Path(script_path).unlink(missing_ok=True)
