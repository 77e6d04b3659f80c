"""
Test helpers for code that forks.

Children write to the real file descriptors, not to Python's sys.stdout,
so their output is captured at descriptor level.
"""

import os
import sys
import tempfile
from contextlib import contextmanager
from typing import Iterator, Set


PROC_FD_DIR = '/proc/self/fd'


class CapturedOutput:
    """Bytes written to a descriptor while it was captured."""

    def __init__(self):
        self.data = b''

    @property
    def text(self) -> str:
        return self.data.decode(errors='replace')


@contextmanager
def captured_fd(fd: int) -> Iterator[CapturedOutput]:
    """Point ``fd`` at a temporary file for the duration of the block."""
    sys.stdout.flush()
    sys.stderr.flush()

    result = CapturedOutput()
    with tempfile.TemporaryFile() as tmp:
        saved = os.dup(fd)
        os.dup2(tmp.fileno(), fd)
        try:
            yield result
        finally:
            os.dup2(saved, fd)
            os.close(saved)
            tmp.seek(0)
            result.data = tmp.read()


def open_fd_count() -> int:
    """Number of descriptors open in this process (Linux only)."""
    return len(os.listdir(PROC_FD_DIR))


def has_proc_fd() -> bool:
    return os.path.isdir(PROC_FD_DIR)


def ignored_signals(status_text: str) -> Set[int]:
    """Signal numbers in the SigIgn mask of a /proc/<pid>/status dump."""
    for line in status_text.splitlines():
        if line.startswith('SigIgn:'):
            mask = int(line.split()[1], 16)
            return {signum for signum in range(1, 65) if mask & (1 << (signum - 1))}
    raise ValueError("no SigIgn line in status text")
