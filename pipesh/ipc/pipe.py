"""
Channel Module

A Channel is one kernel pipe: a read end and a write end. The interpreter
opens it, each pipeline stage keeps the single end it uses, and everyone
closes what they do not need so the reader sees end-of-stream once the
writer is done.

Author: pipesh developers
Version: 1.0.0
"""

import errno
import os
from typing import Optional

from pipesh.exceptions import PipeError, RedirectionError


STDIN_FILENO = 0
STDOUT_FILENO = 1


class Channel:
    """
    One-directional byte stream between two processes.

    Closing an end is idempotent; a closed end is recorded as None.

    Example:
        >>> with Channel.open() as channel:
        ...     reader, writer = channel.read_fd, channel.write_fd
        >>> channel.closed
        True
    """

    def __init__(self, read_fd: int, write_fd: int):
        self._read_fd: Optional[int] = read_fd
        self._write_fd: Optional[int] = write_fd

    @classmethod
    def open(cls) -> 'Channel':
        """
        Create a new pipe.

        Raises:
            PipeError: If the kernel refuses to create the pipe
        """
        try:
            read_fd, write_fd = os.pipe()
        except OSError as e:
            raise PipeError(f"pipe failed: {e.strerror}", errno=e.errno) from e
        return cls(read_fd, write_fd)

    @property
    def read_fd(self) -> Optional[int]:
        return self._read_fd

    @property
    def write_fd(self) -> Optional[int]:
        return self._write_fd

    @property
    def closed(self) -> bool:
        return self._read_fd is None and self._write_fd is None

    def close_read(self) -> None:
        """Close the read end if it is still open."""
        fd, self._read_fd = self._read_fd, None
        if fd is not None:
            os.close(fd)

    def close_write(self) -> None:
        """Close the write end if it is still open."""
        fd, self._write_fd = self._write_fd, None
        if fd is not None:
            os.close(fd)

    def close(self) -> None:
        """Close both ends."""
        try:
            self.close_read()
        finally:
            self.close_write()

    def attach_writer(self) -> None:
        """
        Child side: make the write end this process's stdout.

        Closes the read end, replaces stdout with the write end, then
        closes the original write-end descriptor.

        Raises:
            RedirectionError: If any step fails
        """
        try:
            self.close_read()
            self._adopt('_write_fd', STDOUT_FILENO)
        except OSError as e:
            raise RedirectionError(
                f"dup2 failed for stdout: {e.strerror}",
                stream="stdout",
                pid=os.getpid()
            ) from e

    def attach_reader(self) -> None:
        """
        Child side: make the read end this process's stdin.

        Raises:
            RedirectionError: If any step fails
        """
        try:
            self.close_write()
            self._adopt('_read_fd', STDIN_FILENO)
        except OSError as e:
            raise RedirectionError(
                f"dup2 failed for stdin: {e.strerror}",
                stream="stdin",
                pid=os.getpid()
            ) from e

    def _adopt(self, attr: str, target: int) -> None:
        """Move the end stored in ``attr`` onto ``target`` and forget it."""
        fd = getattr(self, attr)
        if fd is None:
            raise OSError(errno.EBADF, os.strerror(errno.EBADF))

        if fd == target:
            # Already in place; pipe ends are created close-on-exec
            os.set_inheritable(target, True)
        else:
            os.dup2(fd, target)
            os.close(fd)
        setattr(self, attr, None)

    def __enter__(self) -> 'Channel':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Channel(read_fd={self._read_fd}, write_fd={self._write_fd})"
