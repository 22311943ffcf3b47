"""Settings loaded from the process environment."""

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import appdirs

APP_NAME = "mcp-local-venv"
ENV_PREFIX = "MCP_LOCAL_VENV_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_home() -> Path:
    """Base directory for environments addressed by relative path."""
    return Path(appdirs.user_data_dir(APP_NAME)) / "envs"


@dataclass(frozen=True)
class Settings:
    """Runtime settings"""

    home: Path = field(default_factory=default_home)
    creator: tuple[str, ...] = ("virtualenv",)
    shell: str = "bash"
    interpreter: str = "python"
    package_manager: str = "pip"
    log_level: str = "INFO"

    def resolve(self, path: str | os.PathLike) -> Path:
        """Resolve an environment path, anchoring relative ones under home."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.home / candidate
        return candidate.resolve()


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from MCP_LOCAL_VENV_* variables."""
    environ = os.environ if environ is None else environ

    def get(name: str) -> str | None:
        value = environ.get(ENV_PREFIX + name)
        return value if value else None

    defaults = Settings()

    creator = get("CREATOR")
    creator_argv = tuple(shlex.split(creator)) if creator else defaults.creator
    if not creator_argv:
        raise ValueError(f"{ENV_PREFIX}CREATOR must name a command")

    log_level = (get("LOG_LEVEL") or defaults.log_level).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level {log_level!r}, expected one of {', '.join(LOG_LEVELS)}"
        )

    home = get("HOME")

    return Settings(
        home=Path(home).expanduser() if home else defaults.home,
        creator=creator_argv,
        shell=get("SHELL") or defaults.shell,
        interpreter=get("INTERPRETER") or defaults.interpreter,
        package_manager=get("PACKAGE_MANAGER") or defaults.package_manager,
        log_level=log_level,
    )
