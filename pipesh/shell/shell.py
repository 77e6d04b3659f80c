"""
pipesh Shell Module

The dispatcher and the interactive loop around it.

One cycle: read a line, parse it, then either run a built-in, launch one
external program, or run a two-stage pipeline. Every failure is reported
and the cycle ends with a continue signal; only ``exit`` and end of input
stop the loop.

Author: pipesh developers
Version: 1.0.0
"""

import sys
from typing import Optional, TextIO

from .parser import CommandParser, Command, Pipeline
from .builtins import BuiltinCommands
from pipesh.core.config_loader import Config, get_config
from pipesh.exceptions import (
    ParseError,
    ProcessException,
    IPCException,
    EXIT_CANNOT_EXECUTE,
    EXIT_NOT_FOUND,
)
from pipesh.logger import Logger, get_logger
from pipesh.process.handle import ProcessHandle
from pipesh.process.launcher import ProcessLauncher
from pipesh.process.pipeline import PipelineOrchestrator
from pipesh.process.states import (
    SignalDisposition,
    set_interrupt_disposition,
    restore_interrupt_handler,
)


# The child has already reported why exec failed
_CHILD_REPORTED = (EXIT_NOT_FOUND, EXIT_CANNOT_EXECUTE)


class Shell:
    """
    pipesh interpreter.

    Example:
        >>> shell = Shell()
        >>> shell.execute_line("echo hello | wc -c")
        True
        >>> shell.execute_line("exit")
        False
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        launcher: Optional[ProcessLauncher] = None
    ):
        self._config = config or get_config()
        self._logger: Logger = get_logger('shell')
        self._parser = CommandParser(max_args=self._config.shell.max_args)
        self._builtins = BuiltinCommands()
        self._launcher = launcher or ProcessLauncher()
        self._orchestrator = PipelineOrchestrator(self._launcher)
        self._running = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def parser(self) -> CommandParser:
        return self._parser

    @property
    def builtins(self) -> BuiltinCommands:
        return self._builtins

    @property
    def launcher(self) -> ProcessLauncher:
        return self._launcher

    @property
    def running(self) -> bool:
        return self._running

    def run(self, stream: Optional[TextIO] = None) -> int:
        """
        Run the read-execute loop until ``exit`` or end of input.

        The prompt is shown only when reading from a terminal. SIGINT is
        ignored for the lifetime of the loop.

        Args:
            stream: Line source, stdin by default

        Returns:
            The interpreter's exit status, always 0
        """
        stream = stream or sys.stdin
        interactive = bool(getattr(stream, 'isatty', None) and stream.isatty())

        previous = set_interrupt_disposition(SignalDisposition.IGNORED)
        self._running = True
        self._logger.info("session started", context={'interactive': interactive})

        try:
            while self._running:
                line = self._read_line(stream, interactive)
                if line is None:
                    break
                self._running = self.execute_line(line)
        finally:
            self._running = False
            restore_interrupt_handler(previous)

        self._logger.info("session ended")
        print(self._config.shell.exit_message)
        return 0

    def _read_line(self, stream: TextIO, interactive: bool) -> Optional[str]:
        """Read one line without its newline; None at end of input."""
        if interactive:
            sys.stdout.write(self._config.shell.prompt)
            sys.stdout.flush()

        line = stream.readline()
        if not line:
            if interactive:
                print()
            return None

        return line.rstrip('\n')

    def run_script(self, script: str) -> bool:
        """
        Execute several lines, stopping early on ``exit``.

        Args:
            script: Lines separated by newlines

        Returns:
            Continuation signal after the last executed line
        """
        for line in script.split('\n'):
            if not self.execute_line(line):
                return False
        return True

    def execute_line(self, line: str) -> bool:
        """
        Parse and execute one line.

        Args:
            line: Command line string

        Returns:
            False if the session should stop, True otherwise
        """
        try:
            try:
                parsed = self._parser.parse(line)
            except ParseError as e:
                self._logger.warning(f"rejected line: {e.message}", context=e.context)
                return self._report(e.message)

            if isinstance(parsed, Pipeline):
                return self.execute_pipeline(parsed)
            return self.dispatch(parsed)
        except MemoryError:
            self._logger.exception("out of memory while processing line")
            return self._report("out of memory")

    def dispatch(self, command: Command) -> bool:
        """
        Route a command to a built-in or an external program.

        Args:
            command: Parsed command, possibly empty

        Returns:
            Continuation signal
        """
        if command.is_empty:
            return True

        if self._builtins.is_builtin(command.name):
            return self._builtins.execute(command)

        try:
            handle = self._launcher.run(command)
        except ProcessException as e:
            self._logger.error(f"cannot launch {command.name}: {e.message}")
            return self._report(e.message)

        self._report_status(handle)
        return True

    def execute_pipeline(self, pipeline: Pipeline) -> bool:
        """
        Run both stages of a pipeline as external programs.

        Returns:
            Continuation signal, always True
        """
        try:
            handles = self._orchestrator.run(pipeline)
        except (ProcessException, IPCException) as e:
            return self._report(e.message)

        for handle in handles:
            self._report_status(handle)
        return True

    def _report_status(self, handle: ProcessHandle) -> None:
        if handle.succeeded or not self._config.shell.report_status:
            return
        if handle.exit_code in _CHILD_REPORTED:
            return
        print(f"pipesh: {handle.name}: {handle.describe()}", file=sys.stderr)

    @staticmethod
    def _report(message: str) -> bool:
        print(f"pipesh: {message}", file=sys.stderr)
        return True


def create_shell(config: Optional[Config] = None) -> Shell:
    """Factory function to create a shell."""
    return Shell(config)
