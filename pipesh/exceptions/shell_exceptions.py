"""
Shell Exceptions

Exceptions raised by the interpreter itself: line parsing, built-in
commands and configuration. None of these are fatal to a session; the
dispatcher reports them and moves on to the next line.

Author: pipesh developers
Version: 1.0.0
"""

from typing import Optional, Any


class ShellException(Exception):
    """
    Base exception for all interpreter-level errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 1000
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code})"
        )


class ParseError(ShellException):
    """
    A line could not be turned into a command.

    The whole line is discarded; nothing from it is executed.
    """

    def __init__(
        self,
        message: str,
        line: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or 1001,
            context=context
        )
        self.line = line


class TooManyArgumentsError(ParseError):
    """
    The line holds more tokens than the interpreter accepts.

    Example:
        >>> raise TooManyArgumentsError(count=65, limit=64)
    """

    def __init__(
        self,
        count: int,
        limit: int,
        line: Optional[str] = None
    ) -> None:
        super().__init__(
            message="Too many arguments",
            line=line,
            error_code=1002,
            context={"count": count, "limit": limit}
        )
        self.count = count
        self.limit = limit


class PipelineSyntaxError(ParseError):
    """
    The pipe marker is misplaced.

    Raised when either side of the marker is empty, or when more than one
    marker appears on a line.

    Example:
        >>> raise PipelineSyntaxError("Invalid command usage with pipe")
    """

    def __init__(
        self,
        message: str = "Invalid command usage with pipe",
        line: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            line=line,
            error_code=1003,
            context=context
        )


class BuiltinError(ShellException):
    """
    A built-in command failed to do its job.

    Example:
        >>> raise BuiltinError("cd", "/missing: No such file or directory")
    """

    def __init__(
        self,
        builtin: str,
        message: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=1004,
            context=context
        )
        self.builtin = builtin


class ConfigError(ShellException):
    """Raised when configuration loading or validation fails."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=1005,
            context={"path": path} if path else None
        )
        self.path = path
