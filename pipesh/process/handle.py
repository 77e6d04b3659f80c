"""
Process Handle Module

A ProcessHandle is the interpreter's record of one spawned child: its pid,
the command it runs, and the status collected by waitpid().

Author: pipesh developers
Version: 1.0.0
"""

import os
import signal
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .states import ProcessState

if TYPE_CHECKING:
    from pipesh.shell.parser import Command


@dataclass
class ProcessHandle:
    """
    Identity and eventual termination status of a spawned child.

    The status fields are only meaningful once ``resolved`` is true.

    Attributes:
        pid: Process ID of the child
        command: Command the child was asked to run
        state: Last observed lifecycle state
        exit_code: Exit status if the child exited normally
        term_signal: Signal number if the child was killed by a signal
        stop_count: Number of times the child was observed stopped
    """
    pid: int
    command: 'Command'
    state: ProcessState = ProcessState.RUNNING
    exit_code: Optional[int] = None
    term_signal: Optional[int] = None
    stop_count: int = 0

    @property
    def name(self) -> str:
        return self.command.name

    @property
    def resolved(self) -> bool:
        """True once the child exited or was killed by a signal."""
        return self.state.is_terminal

    @property
    def succeeded(self) -> bool:
        return self.state is ProcessState.EXITED and self.exit_code == 0

    def update(self, status: int) -> ProcessState:
        """
        Record a raw wait status.

        Args:
            status: Status word returned by os.waitpid()

        Returns:
            The new lifecycle state
        """
        if os.WIFEXITED(status):
            self.state = ProcessState.EXITED
            self.exit_code = os.WEXITSTATUS(status)
        elif os.WIFSIGNALED(status):
            self.state = ProcessState.SIGNALED
            self.term_signal = os.WTERMSIG(status)
        elif os.WIFSTOPPED(status):
            self.state = ProcessState.STOPPED
            self.stop_count += 1
        elif os.WIFCONTINUED(status):
            self.state = ProcessState.RUNNING
        return self.state

    def describe(self) -> str:
        """Human-readable summary of the termination status."""
        if self.state is ProcessState.EXITED:
            return f"exited with status {self.exit_code}"
        if self.state is ProcessState.SIGNALED:
            try:
                sig_name = signal.Signals(self.term_signal).name
            except ValueError:
                sig_name = f"signal {self.term_signal}"
            return f"terminated by signal {sig_name}"
        if self.state is ProcessState.STOPPED:
            return "stopped"
        return "running"
