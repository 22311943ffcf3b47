import stat
import sys
import textwrap
from pathlib import Path

import pytest

from mcp_local_venv.config import Settings
from mcp_local_venv.environments.environment import create_environment
from mcp_local_venv.types import Environment

FAKE_PIP = """\
#!/usr/bin/env bash
root="$(cd "$(dirname "$0")/.." && pwd)"
case "$1" in
  install)
    echo "$2" >> "$root/installed.log"
    if [ "$2" = "broken" ]; then
      echo "ERROR: No matching distribution found for $2" >&2
      exit 1
    fi
    echo "Successfully installed $2"
    ;;
  list)
    if [ -f "$root/listing.txt" ]; then
      cat "$root/listing.txt"
    else
      echo "[]"
    fi
    if [ -f "$root/list-fails" ]; then
      echo "list exploded" >&2
      exit 3
    fi
    ;;
  *)
    echo "unknown command $1" >&2
    exit 2
    ;;
esac
"""

FAKE_CREATOR = """\
#!/usr/bin/env bash
set -e
tools="$(cd "$(dirname "$0")" && pwd)"
echo "$1" >> "$tools/creator.log"
mkdir -p "$1/bin"
echo "export PATH=\\"$1/bin:\\$PATH\\"" > "$1/bin/activate"
cp "$tools/pip" "$1/bin/pip"
cp "$tools/python" "$1/bin/python"
echo "created virtual environment in $1"
"""

FAILING_CREATOR = """\
#!/usr/bin/env bash
echo "virtualenv: error: cannot create $1" >&2
exit 1
"""


def write_executable(path: Path, content: str) -> Path:
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def tools_dir(tmp_path: Path) -> Path:
    """Fake creation tool, package manager and interpreter"""
    tools = tmp_path / "tools"
    tools.mkdir()
    write_executable(tools / "pip", FAKE_PIP)
    write_executable(
        tools / "python",
        textwrap.dedent(
            f"""\
            #!/usr/bin/env bash
            exec "{sys.executable}" "$@"
            """
        ),
    )
    write_executable(tools / "fake-virtualenv", FAKE_CREATOR)
    write_executable(tools / "failing-virtualenv", FAILING_CREATOR)
    return tools


@pytest.fixture
def settings(tmp_path: Path, tools_dir: Path) -> Settings:
    return Settings(
        home=tmp_path / "home",
        creator=(str(tools_dir / "fake-virtualenv"),),
        shell="bash",
    )


@pytest.fixture
def creator_calls(tools_dir: Path):
    """Directories the fake creation tool was run for"""
    log = tools_dir / "creator.log"

    def calls() -> list[str]:
        return log.read_text().splitlines() if log.exists() else []

    return calls


@pytest.fixture
def environment(tmp_path: Path, settings: Settings) -> Environment:
    return create_environment(tmp_path / "env", settings=settings)


@pytest.fixture
def installed(environment: Environment):
    """Packages the fake pip was asked to install"""
    log = environment.directory / "installed.log"

    def packages() -> list[str]:
        return log.read_text().splitlines() if log.exists() else []

    return packages
