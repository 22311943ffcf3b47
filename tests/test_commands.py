import io
import subprocess
import sys
from pathlib import Path

from mcp_local_venv.commands import (
    CAPTURE,
    activated_command,
    resolve_sink,
    run_activated_command,
    run_command,
)
from mcp_local_venv.types import Environment


def test_run_command_capture():
    result = run_command(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"],
        stdout=CAPTURE,
        stderr=CAPTURE,
    )

    assert result.returncode == 0
    assert result.stdout == "out\n"
    assert result.stderr == "err\n"


def test_run_command_text_stream_sink():
    """Test streams without a file descriptor receive the captured text"""
    out = io.StringIO()
    result = run_command([sys.executable, "-c", "print('hi')"], stdout=out, stderr=CAPTURE)

    assert out.getvalue() == "hi\n"
    assert result.stdout == "hi\n"


def test_run_command_file_sink(tmp_path: Path):
    """Test real files are handed to the child directly"""
    log = tmp_path / "out.log"
    with open(log, "w") as f:
        result = run_command([sys.executable, "-c", "print('to file')"], stdout=f)

    assert result.stdout is None
    assert log.read_text() == "to file\n"


def test_run_command_nonzero_exit():
    result = run_command([sys.executable, "-c", "raise SystemExit(7)"], stdout=CAPTURE)

    assert result.returncode == 7
    assert not result.success


def test_resolve_sink():
    default = io.StringIO()
    assert resolve_sink(CAPTURE, default) == (subprocess.PIPE, None)
    assert resolve_sink(subprocess.DEVNULL, default) == (subprocess.DEVNULL, None)
    assert resolve_sink(None, default) == (subprocess.PIPE, default)


def test_activated_command():
    env = Environment(Path("/envs/demo"))

    command = activated_command(env, "pip", "install", "requests")

    assert command == "source /envs/demo/bin/activate && pip install requests"


def test_activated_command_skips_empty_words():
    env = Environment(Path("/envs/demo"))

    assert activated_command(env, "python", "run.py", "") == (
        "source /envs/demo/bin/activate && python run.py"
    )


def test_run_activated_command(environment: Environment):
    result = run_activated_command(environment, "pip", "install", "rich", stdout=CAPTURE)

    assert result.command == activated_command(environment, "pip", "install", "rich")
    assert result.stdout.strip() == "Successfully installed rich"


def test_run_activated_command_missing_activate(tmp_path: Path):
    """Test a missing activation script fails before the program runs"""
    env = Environment(tmp_path / "nothing")

    result = run_activated_command(env, "pip", "list", stdout=CAPTURE, stderr=CAPTURE)

    assert result.returncode != 0
    assert result.stdout == ""
