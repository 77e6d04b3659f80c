"""
Process Launcher Module

Creates child processes for external commands and waits for them:
- fork() a child
- reset SIGINT, SIGPIPE and SIGXFSZ to their default actions in the child
- optionally rewire the child's standard streams
- execvp() the program, searching PATH
- block until the child exits or is killed by a signal

The child side never returns into interpreter code. Whatever happens
after fork, it leaves through os._exit().

Author: pipesh developers
Version: 1.0.0
"""

import os
import signal
import sys
from typing import Optional, Callable

from .handle import ProcessHandle
from .states import ProcessState, reset_child_signals
from pipesh.exceptions import (
    ProcessException,
    ForkError,
    ExecError,
    WaitError,
    EXIT_CANNOT_EXECUTE,
    EXIT_NOT_FOUND,
)
from pipesh.logger import Logger, get_logger


# Runs in the child after fork and before exec; raises RedirectionError on failure
Rewire = Callable[[], None]


class ProcessLauncher:
    """
    Spawns external programs and collects their termination status.

    Example:
        >>> launcher = ProcessLauncher()
        >>> handle = launcher.run(Command(('ls', '-l')))
        >>> handle.exit_code
        0
    """

    def __init__(self):
        self._logger: Logger = get_logger('launcher')

    def run(self, command) -> ProcessHandle:
        """
        Launch a command and wait for it to finish.

        Args:
            command: Non-empty Command to run

        Returns:
            The resolved handle of the child

        Raises:
            ForkError: If the child could not be created
            WaitError: If the child's status could not be collected
        """
        handle = self.spawn(command)
        return self.wait(handle)

    def spawn(self, command, rewire: Optional[Rewire] = None) -> ProcessHandle:
        """
        Fork a child that runs ``command``.

        Args:
            command: Non-empty Command to run
            rewire: Callable run in the child before exec to set up its
                standard streams

        Returns:
            An unresolved handle for the child

        Raises:
            ValueError: If the command is empty
            ForkError: If fork() fails
        """
        if command.is_empty:
            raise ValueError("cannot launch an empty command")

        # Buffered output would otherwise be written twice
        sys.stdout.flush()
        sys.stderr.flush()

        try:
            pid = os.fork()
        except OSError as e:
            raise ForkError(
                f"fork failed: {e.strerror}",
                parent_pid=os.getpid(),
                errno=e.errno
            ) from e

        if pid == 0:
            self._become(command, rewire)

        handle = ProcessHandle(pid=pid, command=command)
        self._logger.debug(
            f"spawned {command.name}",
            pid=pid,
            context={'argv': ' '.join(command.args)}
        )
        return handle

    def wait(self, handle: ProcessHandle) -> ProcessHandle:
        """
        Block until the child has exited or been killed by a signal.

        A stopped child is not finished; waiting resumes until it
        terminates.

        Args:
            handle: Handle returned by spawn()

        Returns:
            The same handle, now resolved
        """
        while not handle.resolved:
            try:
                _, status = os.waitpid(handle.pid, os.WUNTRACED)
            except ChildProcessError as e:
                raise WaitError(f"waitpid failed: {e.strerror}", pid=handle.pid) from e

            if handle.update(status) is ProcessState.STOPPED:
                self._logger.info(f"{handle.name} stopped, still waiting", pid=handle.pid)

        self._logger.debug(f"{handle.name} {handle.describe()}", pid=handle.pid)
        return handle

    def terminate(self, handle: ProcessHandle) -> ProcessHandle:
        """
        Kill a child with SIGTERM and reap it.

        Used to clean up a half-built pipeline so no child is left running.
        """
        if handle.resolved:
            return handle

        try:
            os.kill(handle.pid, signal.SIGTERM)
            # A stopped child only acts on SIGTERM once continued
            os.kill(handle.pid, signal.SIGCONT)
        except ProcessLookupError:
            pass

        self._logger.warning(f"terminated {handle.name}", pid=handle.pid)
        return self.wait(handle)

    def _become(self, command, rewire: Optional[Rewire]) -> None:
        """Child side of spawn(): prepare, then take on the program image."""
        status = EXIT_CANNOT_EXECUTE
        try:
            reset_child_signals()
            if rewire is not None:
                rewire()
            self._replace_image(command)
        except ProcessException as e:
            status = getattr(e, 'exit_status', EXIT_CANNOT_EXECUTE)
            _child_report(e.message)
        except Exception as e:
            _child_report(f"{command.name}: {e}")
        finally:
            os._exit(status)

    @staticmethod
    def _replace_image(command) -> None:
        """execvp() the command; only returns by raising ExecError."""
        try:
            os.execvp(command.name, command.argv)
        except FileNotFoundError:
            raise ExecError(
                f"{command.name}: command not found",
                program=command.name,
                exit_status=EXIT_NOT_FOUND,
                pid=os.getpid()
            )
        except OSError as e:
            raise ExecError(
                f"{command.name}: {e.strerror}",
                program=command.name,
                exit_status=EXIT_CANNOT_EXECUTE,
                pid=os.getpid()
            )


def _child_report(message: str) -> None:
    """Write an error straight to fd 2; Python's stdio is not trusted after fork."""
    try:
        os.write(2, f"pipesh: {message}\n".encode(errors='replace'))
    except OSError:
        pass
