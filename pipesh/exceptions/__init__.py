"""
pipesh Exception Hierarchy

Architecture:
    ShellException
    ├── ParseError
    │   ├── TooManyArgumentsError
    │   └── PipelineSyntaxError
    ├── BuiltinError
    └── ConfigError
    ProcessException
    ├── ForkError
    ├── ExecError
    ├── RedirectionError
    └── WaitError
    IPCException
    └── PipeError

Nothing in this hierarchy ends a session. The dispatcher reports each
error and continues with the next line.
"""

from .shell_exceptions import (
    ShellException,
    ParseError,
    TooManyArgumentsError,
    PipelineSyntaxError,
    BuiltinError,
    ConfigError,
)

from .process_exceptions import (
    ProcessException,
    ForkError,
    ExecError,
    RedirectionError,
    WaitError,
    EXIT_REDIRECTION_FAILED,
    EXIT_CANNOT_EXECUTE,
    EXIT_NOT_FOUND,
)

from .ipc_exceptions import (
    IPCException,
    PipeError,
)

__all__ = [
    # Shell exceptions
    "ShellException",
    "ParseError",
    "TooManyArgumentsError",
    "PipelineSyntaxError",
    "BuiltinError",
    "ConfigError",
    # Process exceptions
    "ProcessException",
    "ForkError",
    "ExecError",
    "RedirectionError",
    "WaitError",
    "EXIT_REDIRECTION_FAILED",
    "EXIT_CANNOT_EXECUTE",
    "EXIT_NOT_FOUND",
    # IPC exceptions
    "IPCException",
    "PipeError",
]
