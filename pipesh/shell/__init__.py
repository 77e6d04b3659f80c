"""
pipesh Shell Module

Provides the interpreter front end:
- Line parsing
- Built-in commands
- Dispatch and the read-execute loop
"""

from .parser import (
    CommandParser,
    Command,
    Pipeline,
    ParsedLine,
    tokenize,
    split_pipeline,
)
from .builtins import BuiltinCommands, BuiltinKind, BUILTINS
from .shell import Shell, create_shell

__all__ = [
    'CommandParser',
    'Command',
    'Pipeline',
    'ParsedLine',
    'tokenize',
    'split_pipeline',
    'BuiltinCommands',
    'BuiltinKind',
    'BUILTINS',
    'Shell',
    'create_shell',
]
