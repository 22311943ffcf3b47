"""Environment lifecycle management."""

import os
import shutil
from pathlib import Path
from typing import Optional

from mcp_local_venv.config import Settings, load_settings
from mcp_local_venv.commands import CAPTURE, run_command
from mcp_local_venv.errors import (
    EnvironmentCreationError,
    InvalidArgumentError,
    NotManagedError,
)
from mcp_local_venv.types import Environment, MARKER_FILE
from mcp_local_venv.logging import get_logger

logger = get_logger(__name__)


def _canonical(directory: str | os.PathLike) -> Path:
    return Path(directory).expanduser().resolve()


def require_environment(env: object) -> Environment:
    """Reject anything that is not an environment handle."""
    if not isinstance(env, Environment):
        raise InvalidArgumentError("environment", "Environment", env)
    return env


def is_managed(directory: str | os.PathLike) -> bool:
    """Whether a directory carries the environment marker."""
    return (_canonical(directory) / MARKER_FILE).is_file()


def create_environment(
    directory: str | os.PathLike,
    interpreter: Optional[str] = None,
    package_manager: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
) -> Environment:
    """Create an environment at ``directory`` unless one is already marked there.

    The marker check is not atomic; two concurrent calls on the same
    directory may both run the creation tool.
    """
    settings = settings or load_settings()
    env = Environment(
        directory=_canonical(directory),
        interpreter=interpreter or settings.interpreter,
        package_manager=package_manager or settings.package_manager,
    )

    if env.is_managed:
        logger.info("environment_exists", directory=str(env.directory))
        return env

    logger.info(
        "creating_environment",
        directory=str(env.directory),
        creator=list(settings.creator),
    )

    try:
        result = run_command(
            [*settings.creator, str(env.directory)], stdout=CAPTURE, stderr=CAPTURE
        )
    except FileNotFoundError as e:
        raise EnvironmentCreationError(str(env.directory), str(e)) from e

    if result.stdout:
        logger.debug("creator_stdout", output=result.stdout)

    if not result.success:
        logger.error(
            "environment_creation_failed",
            directory=str(env.directory),
            returncode=result.returncode,
            stderr=result.stderr,
        )
        raise EnvironmentCreationError(str(env.directory), result.stderr or "")

    env.marker_file.write_text(" ".join(settings.creator) + "\n")

    logger.info("environment_created", directory=str(env.directory))
    return env


def get_environment(
    directory: str | os.PathLike,
    interpreter: Optional[str] = None,
    package_manager: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
) -> Environment:
    """Handle for an existing managed environment."""
    settings = settings or load_settings()
    env = Environment(
        directory=_canonical(directory),
        interpreter=interpreter or settings.interpreter,
        package_manager=package_manager or settings.package_manager,
    )
    if not env.is_managed:
        raise NotManagedError(str(env.directory))
    return env


def _check_removable(path: Path) -> None:
    if not path.is_dir():
        raise NotManagedError(str(path))
    if path == Path(path.anchor):
        raise ValueError(f"Refusing to remove filesystem root {path}")
    if path == Path.home().resolve():
        raise ValueError(f"Refusing to remove home directory {path}")


def destroy_environment(env: Environment) -> None:
    """Remove an environment's directory tree."""
    require_environment(env)
    if Path(env.directory).expanduser().is_symlink():
        raise ValueError(f"Refusing to remove symlinked environment {env.directory}")
    directory = _canonical(env.directory)
    if not (directory / MARKER_FILE).is_file():
        raise NotManagedError(str(directory))

    _check_removable(directory)

    logger.info("destroying_environment", directory=str(directory))
    shutil.rmtree(directory)
