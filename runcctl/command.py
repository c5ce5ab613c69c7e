"""Description of a process to start, and the executors that run it."""

from __future__ import annotations

import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import IO, Any, Optional, Union

from .error import InvalidCommandError, ProcessSpawnError

Stream = Union[None, int, IO[Any]]


@dataclass
class Command:
    """A program with its arguments and the wiring of its standard streams.

    Each stream takes what :class:`subprocess.Popen` accepts: ``None`` to
    inherit from the caller, :data:`subprocess.PIPE`, :data:`subprocess.DEVNULL`,
    a file descriptor or an open file object.
    """

    program: Union[str, "os.PathLike[str]"]
    args: list[str] = field(default_factory=list)
    stdin: Stream = None
    stdout: Stream = None
    stderr: Stream = None
    env_remove: set[str] = field(default_factory=set)

    def argv(self) -> list[str]:
        """Return the program followed by its arguments."""
        return [os.fspath(self.program), *self.args]

    def environment(self) -> dict[str, str]:
        """Return the caller's environment without the removed variables."""
        return {
            name: value
            for name, value in os.environ.items()
            if name not in self.env_remove
        }


@dataclass(frozen=True)
class ExecutionResult:
    """Exit status, pid and decoded output of a finished process."""

    status: int
    pid: int
    stdout: str
    stderr: str

    def success(self) -> bool:
        """Return whether the process exited with status zero."""
        return self.status == 0


def _decode(data: Optional[bytes]) -> str:
    return "" if data is None else data.decode("utf-8", "replace")


class Spawner(ABC):
    """Runs a :class:`Command` to completion."""

    @abstractmethod
    def execute(self, cmd: Command) -> ExecutionResult:
        """Run ``cmd`` and return its result."""


class DefaultExecutor(Spawner):
    """Runs commands as local child processes."""

    def execute(self, cmd: Command) -> ExecutionResult:
        try:
            child = subprocess.Popen(
                cmd.argv(),
                stdin=cmd.stdin,
                stdout=cmd.stdout,
                stderr=cmd.stderr,
                env=cmd.environment(),
            )
        except (OSError, ValueError) as exc:
            raise ProcessSpawnError(exc) from exc
        pid = child.pid
        try:
            out, err = child.communicate()
        except OSError as exc:
            raise InvalidCommandError(exc) from exc
        return ExecutionResult(
            status=child.returncode,
            pid=pid,
            stdout=_decode(out),
            stderr=_decode(err),
        )