"""Drivers that wire the standard streams of a runc process."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional

from .command import Command

logger = logging.getLogger(__name__)


class Io(ABC):
    """Supplies the standard streams of a command and the caller's ends of them."""

    def stdin(self) -> Optional[BinaryIO]:
        """Return the write side of stdin, if the driver exposes one."""
        return None

    def stdout(self) -> Optional[BinaryIO]:
        """Return the read side of stdout, if the driver exposes one."""
        return None

    def stderr(self) -> Optional[BinaryIO]:
        """Return the read side of stderr, if the driver exposes one."""
        return None

    @abstractmethod
    def set(self, cmd: Command) -> None:
        """Attach the process side of the streams to ``cmd``."""

    @abstractmethod
    def close_after_start(self) -> None:
        """Close the ends that only the started process should hold."""


@dataclass
class IOOption:
    """Which of the three standard streams to open."""

    open_stdin: bool = True
    open_stdout: bool = True
    open_stderr: bool = True


@dataclass
class Pipe:
    """Both ends of an anonymous pipe."""

    rd: BinaryIO
    wr: BinaryIO

    def close(self) -> None:
        self.rd.close()
        self.wr.close()


def _open_pipe() -> Pipe:
    rd, wr = os.pipe()
    return Pipe(rd=open(rd, "rb", buffering=0), wr=open(wr, "wb", buffering=0))


def _clone(handle: BinaryIO, mode: str) -> Optional[BinaryIO]:
    try:
        fd = os.dup(handle.fileno())
    except (OSError, ValueError):
        return None
    return open(fd, mode, buffering=0)


class PipedIo(Io):
    """Pipes for each enabled stream, owned by the given user and group.

    The stdin pipe's read side and the output pipes' write sides are handed
    to the command; the caller keeps the opposite ends.
    """

    def __init__(self, uid: int, gid: int, opts: Optional[IOOption] = None) -> None:
        opts = opts or IOOption()
        self._stdin = self._create_pipe(uid, gid, opts.open_stdin, for_stdin=True)
        self._stdout = self._create_pipe(uid, gid, opts.open_stdout, for_stdin=False)
        self._stderr = self._create_pipe(uid, gid, opts.open_stderr, for_stdin=False)

    @staticmethod
    def _create_pipe(uid: int, gid: int, enabled: bool, *, for_stdin: bool) -> Optional[Pipe]:
        if not enabled:
            return None
        pipe = _open_pipe()
        side = pipe.rd if for_stdin else pipe.wr
        try:
            os.fchown(side.fileno(), uid, gid)
        except OSError:
            pipe.close()
            raise
        return pipe

    def stdin(self) -> Optional[BinaryIO]:
        return None if self._stdin is None else _clone(self._stdin.wr, "wb")

    def stdout(self) -> Optional[BinaryIO]:
        return None if self._stdout is None else _clone(self._stdout.rd, "rb")

    def stderr(self) -> Optional[BinaryIO]:
        return None if self._stderr is None else _clone(self._stderr.rd, "rb")

    def set(self, cmd: Command) -> None:
        if self._stdin is not None:
            cmd.stdin = self._stdin.rd.fileno()
        if self._stdout is not None:
            cmd.stdout = self._stdout.wr.fileno()
        if self._stderr is not None:
            cmd.stderr = self._stderr.wr.fileno()

    def close_after_start(self) -> None:
        for name, pipe in (("stdout", self._stdout), ("stderr", self._stderr)):
            if pipe is None:
                continue
            try:
                pipe.wr.close()
            except OSError as exc:
                logger.debug("close %s: %s", name, exc)

    def __enter__(self) -> "PipedIo":
        return self

    def __exit__(self, *exc_info: object) -> None:
        for pipe in (self._stdin, self._stdout, self._stderr):
            if pipe is not None:
                pipe.close()


class NullIo(Io):
    """Sends output and errors to the null device; nothing can be captured."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dev_null: Optional[BinaryIO] = open(os.devnull, "r+b", buffering=0)

    def set(self, cmd: Command) -> None:
        with self._lock:
            if self._dev_null is not None:
                cmd.stdout = self._dev_null
                cmd.stderr = self._dev_null

    def close_after_start(self) -> None:
        with self._lock:
            dev_null, self._dev_null = self._dev_null, None
        if dev_null is not None:
            dev_null.close()


class InheritedStdIo(Io):
    """Lets the process write to the caller's own stdout and stderr."""

    def set(self, cmd: Command) -> None:
        cmd.stdin = subprocess.DEVNULL
        cmd.stdout = None
        cmd.stderr = None

    def close_after_start(self) -> None:
        pass


class PipedStdIo(Io):
    """Captures the process output and errors through pipes."""

    def set(self, cmd: Command) -> None:
        cmd.stdin = subprocess.DEVNULL
        cmd.stdout = subprocess.PIPE
        cmd.stderr = subprocess.PIPE

    def close_after_start(self) -> None:
        pass


@dataclass
class FIFO(Io):
    """Connects the streams to named files, usually FIFOs."""

    stdin: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None

    def set(self, cmd: Command) -> None:
        if self.stdin is not None:
            fd = os.open(self.stdin, os.O_RDONLY | os.O_NONBLOCK)
            cmd.stdin = open(fd, "rb", buffering=0)
        if self.stdout is not None:
            cmd.stdout = open(os.open(self.stdout, os.O_WRONLY), "wb", buffering=0)
        if self.stderr is not None:
            cmd.stderr = open(os.open(self.stderr, os.O_WRONLY), "wb", buffering=0)

    def close_after_start(self) -> None:
        pass