"""
IPC Exceptions

Exceptions related to the channel that connects the two stages of a
pipeline.

Author: pipesh developers
Version: 1.0.0
"""

from typing import Optional, Any


class IPCException(Exception):
    """
    Base exception for all IPC-related errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 6000
        self.context = context or {}

    def __str__(self) -> str:
        return f"[Error {self.error_code}] {self.message}"


class PipeError(IPCException):
    """
    Error creating or closing a pipe.

    This exception is raised when pipe operations fail due to:
    - Descriptor table exhaustion
    - Invalid pipe descriptor

    Example:
        >>> raise PipeError("pipe failed: Too many open files", errno=24)
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(
            message=message,
            error_code=6001,
            context=ctx
        )
        self.errno = errno
