"""
Process States Module

Defines the lifecycle states of a launched child, the interrupt signal
disposition shared between the interpreter and its children, and the
signal reset a child performs before exec.

Author: pipesh developers
Version: 1.0.0
"""

import signal
from enum import Enum, auto
from typing import Any


class ProcessState(Enum):
    """
    Child lifecycle states as observed through waitpid().

    State transitions:
        RUNNING -> STOPPED: Child suspended (e.g. SIGTSTP)
        STOPPED -> RUNNING: Child continued
        RUNNING -> EXITED: Child called exit()
        RUNNING -> SIGNALED: Child was killed by a signal
    """

    RUNNING = auto()
    """Child has been spawned and not yet resolved."""

    STOPPED = auto()
    """Child is suspended; it is not done."""

    EXITED = auto()
    """Child terminated normally with an exit status."""

    SIGNALED = auto()
    """Child was terminated by a signal."""

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessState.EXITED, ProcessState.SIGNALED)


class SignalDisposition(Enum):
    """
    Disposition of the interactive interrupt signal (SIGINT).

    The interpreter runs with IGNORED so a Ctrl-C never ends the session.
    Every child switches back to DEFAULT right before exec so the running
    program can be interrupted.
    """

    IGNORED = signal.SIG_IGN
    DEFAULT = signal.SIG_DFL

    @property
    def handler(self) -> Any:
        return self.value


def set_interrupt_disposition(disposition: SignalDisposition) -> Any:
    """
    Install a disposition for SIGINT.

    Args:
        disposition: The disposition to install

    Returns:
        The previously installed handler, suitable for restore_interrupt_handler()
    """
    return signal.signal(signal.SIGINT, disposition.handler)


def restore_interrupt_handler(handler: Any) -> None:
    """Reinstall a handler previously returned by set_interrupt_disposition()."""
    if handler is None:
        # Installed outside Python; fall back to the default action
        handler = signal.SIG_DFL
    signal.signal(signal.SIGINT, handler)


def current_interrupt_disposition() -> Any:
    """Return the handler currently installed for SIGINT."""
    return signal.getsignal(signal.SIGINT)


# Signals CPython sets to SIG_IGN at startup; ignored dispositions survive exec
_INHERITED_IGNORES = tuple(
    getattr(signal, name) for name in ('SIGPIPE', 'SIGXFSZ') if hasattr(signal, name)
)


def reset_child_signals() -> None:
    """
    Give an about-to-exec child the default action for every signal the
    interpreter changed: SIGINT, plus the ones the runtime ignores.

    Only ever called between fork() and exec().
    """
    set_interrupt_disposition(SignalDisposition.DEFAULT)
    for signum in _INHERITED_IGNORES:
        signal.signal(signum, signal.SIG_DFL)
