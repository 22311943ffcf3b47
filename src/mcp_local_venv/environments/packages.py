"""Package installation and listing."""

import json
from typing import List, Optional

from mcp_local_venv.config import Settings, load_settings
from mcp_local_venv.commands import CAPTURE, Sink, run_activated_command
from mcp_local_venv.environments.environment import require_environment
from mcp_local_venv.errors import (
    InvalidArgumentError,
    MalformedOutputError,
    ProcessError,
)
from mcp_local_venv.types import CommandResult, Environment, Package
from mcp_local_venv.logging import get_logger

logger = get_logger(__name__)


def install_packages(
    env: Environment,
    packages: List[str],
    stdout: Sink = None,
    stderr: Sink = None,
    *,
    settings: Optional[Settings] = None,
) -> List[CommandResult]:
    """Install each package in order, one subprocess per package.

    Exit statuses are not checked and a failed package does not stop the
    remaining installs; inspect the returned results or the routed output.
    """
    require_environment(env)
    if not isinstance(packages, list):
        raise InvalidArgumentError("packages", "list", packages)
    for package in packages:
        if not isinstance(package, str) or not package.strip():
            raise InvalidArgumentError("package", "non-empty str", package)

    settings = settings or load_settings()
    results = []
    for package in packages:
        logger.info("installing_package", package=package, directory=str(env.directory))
        result = run_activated_command(
            env,
            env.package_manager,
            "install",
            package,
            shell=settings.shell,
            stdout=stdout,
            stderr=stderr,
        )
        if not result.success:
            logger.warning(
                "package_install_failed", package=package, returncode=result.returncode
            )
        results.append(result)
    return results


def parse_package_list(output: str) -> List[Package]:
    """Parse ``list --format json`` output into packages."""
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"invalid JSON ({e.msg})", output) from e

    if not isinstance(data, list):
        raise MalformedOutputError("expected a JSON array", output)

    packages = []
    for entry in data:
        if not isinstance(entry, dict):
            raise MalformedOutputError("expected an array of objects", output)
        name, version = entry.get("name"), entry.get("version")
        if not isinstance(name, str) or not isinstance(version, str):
            raise MalformedOutputError(
                "entries need string 'name' and 'version' fields", output
            )
        packages.append(Package(name, version))
    return packages


def list_packages(
    env: Environment, *, settings: Optional[Settings] = None
) -> List[Package]:
    """List installed packages in the package manager's order."""
    require_environment(env)
    settings = settings or load_settings()

    result = run_activated_command(
        env,
        env.package_manager,
        "list",
        "--format",
        "json",
        shell=settings.shell,
        stdout=CAPTURE,
        stderr=CAPTURE,
    )
    if not result.success:
        raise ProcessError(result.command, result.returncode, result.stderr)

    return parse_package_list(result.stdout or "")
