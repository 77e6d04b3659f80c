"""
pipesh - a small command interpreter

Runs built-ins, external programs and two-stage pipelines, one line at a
time, using fork/exec and a single pipe.
"""

__version__ = "1.0.0"

from .shell.shell import Shell, create_shell
from .shell.parser import CommandParser, Command, Pipeline

__all__ = [
    'Shell',
    'create_shell',
    'CommandParser',
    'Command',
    'Pipeline',
]
