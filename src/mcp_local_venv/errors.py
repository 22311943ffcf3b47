"""Error handling for local virtual environments."""
import logging
from typing import Any, Dict, Optional
from mcp.types import (
    ErrorData,
    INVALID_PARAMS,
    INTERNAL_ERROR
)

logger = logging.getLogger(__name__)

def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Log an error with context."""
    logger = logger or logging.getLogger(__name__)

    error_info = {
        "error_type": error.__class__.__name__,
        "error_message": str(error)
    }
    if context:
        error_info["context"] = context
    if isinstance(error, LocalVenvError):
        error_info["code"] = error.code
        error_info["details"] = error.details

    logger.error("Environment error occurred", extra={"data": error_info})


class LocalVenvError(Exception):
    """Base error class for environment operations."""
    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_error_data(self) -> ErrorData:
        """Convert to ErrorData format."""
        return ErrorData(
            code=self.code,
            message=str(self),
            data=self.details
        )


class EnvironmentCreationError(LocalVenvError):
    """The environment creation tool failed."""
    def __init__(self, directory: str, stderr: str):
        super().__init__(
            f"Failed to create environment at {directory}: {stderr.strip()}",
            code=INTERNAL_ERROR,
            details={"directory": directory, "stderr": stderr}
        )
        self.stderr = stderr


class NotManagedError(LocalVenvError):
    """Directory carries no environment marker."""
    def __init__(self, directory: str):
        super().__init__(
            f"Directory {directory} is not a managed environment",
            code=INVALID_PARAMS,
            details={"directory": directory}
        )


class InvalidArgumentError(LocalVenvError):
    """Operation received an argument of the wrong type."""
    def __init__(self, argument: str, expected: str, value: Any):
        super().__init__(
            f"Invalid {argument}: expected {expected}, got {type(value).__name__}",
            code=INVALID_PARAMS,
            details={"argument": argument, "expected": expected}
        )


class MalformedOutputError(LocalVenvError):
    """Package manager output did not match the expected shape."""
    def __init__(self, reason: str, output: str):
        super().__init__(
            f"Malformed package listing: {reason}",
            code=INTERNAL_ERROR,
            details={"reason": reason, "output": output}
        )


class ProcessError(LocalVenvError):
    """Subprocess exited with a non-zero status."""
    def __init__(self, command: str, returncode: int, stderr: Optional[str] = None):
        message = f"Command exited with code {returncode}: {command}"
        if stderr:
            message += f"\nstderr: {stderr.strip()}"
        super().__init__(
            message,
            code=INTERNAL_ERROR,
            details={"command": command, "returncode": returncode, "stderr": stderr}
        )
        self.returncode = returncode
        self.stderr = stderr
