"""
Process Exceptions

Exceptions related to launching, rewiring and reaping child processes.

ForkError and WaitError are raised in the interpreter. ExecError and
RedirectionError are raised on the child side of a fork, where they are
reported and turned into the child's exit status.

Author: pipesh developers
Version: 1.0.0
"""

from typing import Optional, Any


# Exit statuses used by a child that never reached its program image
EXIT_REDIRECTION_FAILED = 1
EXIT_CANNOT_EXECUTE = 126
EXIT_NOT_FOUND = 127


class ProcessException(Exception):
    """
    Base exception for all process-related errors.

    Attributes:
        message: Human-readable error description
        pid: Process ID associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        pid: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.pid = pid
        self.error_code = error_code or 2000
        self.context = context or {}
        if pid is not None:
            self.context["pid"] = pid

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.pid is not None:
            base = f"{base} (pid={self.pid})"
        return base


class ForkError(ProcessException):
    """
    Error during fork().

    Common causes include:
    - Process limit exceeded
    - Memory allocation failure for the child

    Example:
        >>> raise ForkError("fork failed: Resource temporarily unavailable", parent_pid=1)
    """

    def __init__(
        self,
        message: str,
        parent_pid: int,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(
            message=message,
            pid=parent_pid,
            error_code=2001,
            context=ctx
        )
        self.parent_pid = parent_pid
        self.errno = errno


class ExecError(ProcessException):
    """
    Error taking on a new program image.

    Carries the status the child exits with: 127 when the program cannot
    be found on the search path, 126 for any other exec failure.

    Example:
        >>> raise ExecError("nosuchprog: command not found", program="nosuchprog")
    """

    def __init__(
        self,
        message: str,
        program: str,
        exit_status: int = EXIT_CANNOT_EXECUTE,
        pid: Optional[int] = None
    ) -> None:
        super().__init__(
            message=message,
            pid=pid,
            error_code=2002,
            context={"program": program}
        )
        self.program = program
        self.exit_status = exit_status


class RedirectionError(ProcessException):
    """
    A child failed to rewire one of its standard streams.

    Example:
        >>> raise RedirectionError("dup2 failed for stdout", stream="stdout")
    """

    exit_status = EXIT_REDIRECTION_FAILED

    def __init__(
        self,
        message: str,
        stream: str,
        pid: Optional[int] = None
    ) -> None:
        super().__init__(
            message=message,
            pid=pid,
            error_code=2003,
            context={"stream": stream}
        )
        self.stream = stream


class WaitError(ProcessException):
    """
    The interpreter could not collect a child's status.

    Example:
        >>> raise WaitError("waitpid failed: No child processes", pid=42)
    """

    def __init__(
        self,
        message: str,
        pid: int
    ) -> None:
        super().__init__(
            message=message,
            pid=pid,
            error_code=2004
        )
