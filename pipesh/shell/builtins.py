"""
Shell Built-in Commands

Commands the interpreter runs itself because they change its own state.
The table is closed: ``cd`` and ``exit``.

Every handler returns the continuation signal: True to keep reading
lines, False to end the session.

Author: pipesh developers
Version: 1.0.0
"""

import os
import sys
from enum import Enum, auto
from types import MappingProxyType
from typing import Callable, Mapping

from pipesh.exceptions import BuiltinError
from pipesh.logger import Logger, get_logger


class BuiltinKind(Enum):
    """What a built-in does."""
    CHANGE_DIRECTORY = auto()
    EXIT = auto()


BUILTINS: Mapping[str, BuiltinKind] = MappingProxyType({
    'cd': BuiltinKind.CHANGE_DIRECTORY,
    'exit': BuiltinKind.EXIT,
})


class BuiltinCommands:
    """
    Built-in shell commands.

    These commands are executed directly by the interpreter without
    creating a new process.
    """

    def __init__(self, table: Mapping[str, BuiltinKind] = BUILTINS):
        """
        Initialize built-in commands.

        Args:
            table: Mapping from command name to built-in kind
        """
        self._table = table
        self._logger: Logger = get_logger('builtins')
        self._handlers: dict[BuiltinKind, Callable] = {
            BuiltinKind.CHANGE_DIRECTORY: self.cmd_cd,
            BuiltinKind.EXIT: self.cmd_exit,
        }

    @property
    def names(self) -> frozenset:
        return frozenset(self._table)

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in (case-sensitive)."""
        return name in self._table

    def execute(self, command) -> bool:
        """
        Execute a built-in command.

        Args:
            command: Command whose name is in the table

        Returns:
            Continuation signal
        """
        kind = self._table.get(command.name)
        handler = self._handlers.get(kind) if kind is not None else None

        if handler is None:
            print(
                f"pipesh: built-in command '{command.name}' not implemented",
                file=sys.stderr
            )
            return True

        try:
            return handler(command.args[1:])
        except BuiltinError as e:
            self._logger.warning(f"{e.builtin} failed: {e.message}", context=e.context)
            print(f"pipesh: {e.builtin}: {e.message}", file=sys.stderr)
            return True

    # Command implementations

    def cmd_cd(self, args) -> bool:
        """Change the interpreter's working directory."""
        if args:
            path = args[0]
        else:
            path = os.environ.get('HOME')
            if path is None:
                raise BuiltinError(
                    'cd',
                    "requires an argument if HOME is not set"
                )

        try:
            os.chdir(path)
        except OSError as e:
            raise BuiltinError(
                'cd',
                f"{path}: {e.strerror}",
                context={'errno': e.errno}
            ) from e

        os.environ['PWD'] = os.getcwd()
        self._logger.debug("changed directory", context={'cwd': os.environ['PWD']})
        return True

    def cmd_exit(self, args) -> bool:
        """End the session; arguments are ignored."""
        return False
