"""Core type definitions"""

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Sequence

MARKER_FILE = ".ENV-MARKER"
ACTIVATE_SCRIPT = Path("bin") / "activate"


@dataclass(frozen=True)
class Environment:
    """Handle to a virtual environment rooted at a directory"""

    directory: Path
    interpreter: str = "python"
    package_manager: str = "pip"

    def __post_init__(self):
        object.__setattr__(self, "directory", Path(self.directory))

    @property
    def marker_file(self) -> Path:
        return self.directory / MARKER_FILE

    @property
    def activate_script(self) -> Path:
        return self.directory / ACTIVATE_SCRIPT

    @property
    def is_managed(self) -> bool:
        return self.marker_file.is_file()


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished subprocess"""

    command: str | Sequence[str]
    returncode: int
    stdout: str | None = None
    stderr: str | None = None

    @property
    def success(self) -> bool:
        return self.returncode == 0


class Package(NamedTuple):
    """Installed package as reported by the package manager"""

    name: str
    version: str
