"""
Command Parser Module

Turns one input line into either a single Command or a two-stage
Pipeline.

Tokens are separated by runs of spaces, tabs and newlines. There is no
quoting, escaping or expansion. The pipe marker is the token ``|`` on its
own; a ``|`` inside a longer word is ordinary text.

Author: pipesh developers
Version: 1.0.0
"""

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from pipesh.exceptions import TooManyArgumentsError, PipelineSyntaxError
from pipesh.logger import Logger, get_logger


TOKEN_DELIMITERS = " \t\n"
_DELIMITER_RUN = re.compile(f"[{TOKEN_DELIMITERS}]+")
PIPE_MARKER = "|"
DEFAULT_MAX_ARGS = 64


@dataclass(frozen=True)
class Command:
    """
    An ordered sequence of argument strings.

    The first argument names the program or built-in. An empty command
    (blank line) is valid and does nothing when dispatched.
    """
    args: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.args[0] if self.args else ""

    @property
    def argv(self) -> List[str]:
        """Fresh argument list for exec."""
        return list(self.args)

    @property
    def is_empty(self) -> bool:
        return not self.args

    def __len__(self) -> int:
        return len(self.args)

    def __str__(self) -> str:
        return " ".join(self.args)


@dataclass(frozen=True)
class Pipeline:
    """
    Two commands joined by one channel: producer | consumer.

    Both sides must be non-empty.
    """
    producer: Command
    consumer: Command

    def __post_init__(self):
        if self.producer.is_empty or self.consumer.is_empty:
            raise PipelineSyntaxError()

    def __str__(self) -> str:
        return f"{self.producer} {PIPE_MARKER} {self.consumer}"


ParsedLine = Union[Command, Pipeline]


def tokenize(line: str, max_args: int = DEFAULT_MAX_ARGS) -> List[str]:
    """
    Split a line into argument strings.

    Args:
        line: Raw input line
        max_args: Largest number of tokens accepted

    Returns:
        New list of tokens, possibly empty

    Raises:
        TooManyArgumentsError: If the line holds more than ``max_args`` tokens
    """
    tokens = [token for token in _DELIMITER_RUN.split(line) if token]

    if len(tokens) > max_args:
        raise TooManyArgumentsError(count=len(tokens), limit=max_args, line=line)

    return tokens


def split_pipeline(tokens: List[str], line: str = "") -> ParsedLine:
    """
    Build a Command or Pipeline from tokens.

    Raises:
        PipelineSyntaxError: If a side of the marker is empty or the marker
            appears more than once
    """
    markers = [i for i, token in enumerate(tokens) if token == PIPE_MARKER]

    if not markers:
        return Command(tuple(tokens))

    if len(markers) > 1:
        raise PipelineSyntaxError(
            "Only one pipe is supported",
            line=line,
            context={'pipes': len(markers)}
        )

    split = markers[0]
    producer = Command(tuple(tokens[:split]))
    consumer = Command(tuple(tokens[split + 1:]))

    if producer.is_empty or consumer.is_empty:
        raise PipelineSyntaxError(line=line)

    return Pipeline(producer, consumer)


class CommandParser:
    """
    Parses interpreter input lines.

    Example:
        >>> parser = CommandParser()
        >>> parser.parse("ls -la | wc -l")
        Pipeline(producer=Command(args=('ls', '-la')), consumer=Command(args=('wc', '-l')))
    """

    def __init__(self, max_args: int = DEFAULT_MAX_ARGS):
        if max_args < 1:
            raise ValueError("max_args must be at least 1")
        self._max_args = max_args
        self._logger: Logger = get_logger('parser')

    @property
    def max_args(self) -> int:
        return self._max_args

    def parse(self, line: str) -> ParsedLine:
        """
        Parse a command line.

        Args:
            line: Command line string

        Returns:
            Command (empty for a blank line) or Pipeline

        Raises:
            ParseError: If the line is rejected; nothing from it may run
        """
        tokens = tokenize(line, self._max_args)
        parsed = split_pipeline(tokens, line)

        self._logger.debug(
            "parsed line",
            context={'kind': type(parsed).__name__, 'tokens': len(tokens)}
        )
        return parsed
