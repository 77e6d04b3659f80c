"""
pipesh Process Management Module

Provides child process lifecycle management:
- Process states and interrupt signal disposition
- Process handles
- Launching and reaping external programs
- Two-stage pipeline orchestration
"""

from .states import (
    ProcessState,
    SignalDisposition,
    set_interrupt_disposition,
    restore_interrupt_handler,
    current_interrupt_disposition,
    reset_child_signals,
)
from .handle import ProcessHandle
from .launcher import ProcessLauncher
from .pipeline import PipelineOrchestrator

__all__ = [
    # States
    'ProcessState',
    'SignalDisposition',
    'set_interrupt_disposition',
    'restore_interrupt_handler',
    'current_interrupt_disposition',
    'reset_child_signals',
    # Handles
    'ProcessHandle',
    # Launching
    'ProcessLauncher',
    'PipelineOrchestrator',
]
