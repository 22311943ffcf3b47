import logging

from mcp.types import ErrorData, INTERNAL_ERROR, INVALID_PARAMS

from mcp_local_venv.errors import (
    EnvironmentCreationError,
    InvalidArgumentError,
    LocalVenvError,
    MalformedOutputError,
    NotManagedError,
    ProcessError,
    log_error,
)


def test_error_codes():
    assert NotManagedError("/envs/demo").code == INVALID_PARAMS
    assert InvalidArgumentError("packages", "list", "x").code == INVALID_PARAMS
    assert EnvironmentCreationError("/envs/demo", "boom").code == INTERNAL_ERROR
    assert MalformedOutputError("bad", "x").code == INTERNAL_ERROR
    assert ProcessError("pip list", 1).code == INTERNAL_ERROR


def test_errors_share_base():
    for error in (
        NotManagedError("/envs/demo"),
        ProcessError("pip list", 1),
        MalformedOutputError("bad", "x"),
    ):
        assert isinstance(error, LocalVenvError)


def test_to_error_data():
    data = NotManagedError("/envs/demo").to_error_data()

    assert isinstance(data, ErrorData)
    assert data.code == INVALID_PARAMS
    assert "/envs/demo" in data.message
    assert data.data == {"directory": "/envs/demo"}


def test_process_error_message():
    error = ProcessError("python run.py", 2, "Traceback\n")

    assert error.returncode == 2
    assert error.stderr == "Traceback\n"
    assert "code 2" in str(error)
    assert "Traceback" in str(error)


def test_invalid_argument_message():
    error = InvalidArgumentError("packages", "list", "requests")

    assert str(error) == "Invalid packages: expected list, got str"


def test_log_error(caplog):
    logger = logging.getLogger("test_errors")
    with caplog.at_level(logging.ERROR, logger="test_errors"):
        log_error(NotManagedError("/envs/demo"), {"tool": "venv_destroy"}, logger)

    record = caplog.records[0]
    assert record.data["error_type"] == "NotManagedError"
    assert record.data["code"] == INVALID_PARAMS
    assert record.data["context"] == {"tool": "venv_destroy"}
