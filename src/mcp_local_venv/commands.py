"""Command execution inside environments."""

import io
import subprocess
import sys
from typing import IO, Sequence, Union

from mcp_local_venv.types import CommandResult, Environment
from mcp_local_venv.logging import get_logger

logger = get_logger(__name__)

# Sink value asking for a stream to be captured onto the CommandResult.
CAPTURE = subprocess.PIPE

Sink = Union[None, int, IO[str]]


def resolve_sink(sink: Sink, default: IO[str]) -> tuple[int | IO[str], IO[str] | None]:
    """Map a sink to a subprocess target plus an optional stream to copy captured text into."""
    if sink is None:
        sink = default
    if isinstance(sink, int):
        return sink, None
    try:
        sink.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return subprocess.PIPE, sink
    sink.flush()
    return sink, None


def run_command(
    argv: Sequence[str], stdout: Sink = None, stderr: Sink = None
) -> CommandResult:
    """Run a command to completion and return its result.

    Streams default to the process-wide ``sys.stdout``/``sys.stderr``.
    """
    out_target, out_copy = resolve_sink(stdout, sys.stdout)
    err_target, err_copy = resolve_sink(stderr, sys.stderr)

    logger.debug("shell_cmd_exec", cmd=list(argv))

    process = subprocess.run(
        list(argv),
        stdout=out_target,
        stderr=err_target,
        text=True,
        check=False,
    )

    for copy, text in ((out_copy, process.stdout), (err_copy, process.stderr)):
        if copy is not None and text:
            copy.write(text)

    logger.debug("shell_cmd_complete", cmd=list(argv), returncode=process.returncode)

    return CommandResult(
        command=list(argv),
        returncode=process.returncode,
        stdout=process.stdout,
        stderr=process.stderr,
    )


def activated_command(env: Environment, *words: str) -> str:
    """Shell snippet that sources the activation script then runs ``words``.

    Words are joined with single spaces and not escaped: callers must pass
    shell-safe package names, paths and arguments.
    """
    program = " ".join(word for word in words if word)
    return f"source {env.activate_script} && {program}"


def run_activated_command(
    env: Environment,
    *words: str,
    shell: str = "bash",
    stdout: Sink = None,
    stderr: Sink = None,
) -> CommandResult:
    """Run a program inside an environment through ``<shell> -c``."""
    script = activated_command(env, *words)
    result = run_command([shell, "-c", script], stdout=stdout, stderr=stderr)
    return CommandResult(
        command=script,
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )
