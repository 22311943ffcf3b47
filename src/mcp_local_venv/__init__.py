"""MCP local virtual environment package."""

from mcp_local_venv.types import Environment, CommandResult, Package
from mcp_local_venv.config import Settings, load_settings
from mcp_local_venv.commands import CAPTURE
from mcp_local_venv.environments.environment import (
    create_environment,
    destroy_environment,
    get_environment,
    is_managed,
)
from mcp_local_venv.environments.packages import install_packages, list_packages
from mcp_local_venv.environments.execution import run_file, run_source
from mcp_local_venv.errors import (
    LocalVenvError,
    EnvironmentCreationError,
    NotManagedError,
    InvalidArgumentError,
    MalformedOutputError,
    ProcessError,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "Environment",
    "CommandResult",
    "Package",
    "CAPTURE",

    # Configuration
    "Settings",
    "load_settings",

    # Lifecycle functions
    "create_environment",
    "destroy_environment",
    "get_environment",
    "is_managed",

    # Package functions
    "install_packages",
    "list_packages",

    # Execution functions
    "run_file",
    "run_source",

    # Error types
    "LocalVenvError",
    "EnvironmentCreationError",
    "NotManagedError",
    "InvalidArgumentError",
    "MalformedOutputError",
    "ProcessError",
]
