"""Option builders for runc global flags and per-command flags."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from .client import LogFormat, Runc
from .command import DefaultExecutor, Spawner
from .error import NotFoundError
from .io import Io
from .utils import PathLike, abs_string, binary_path

JSON = LogFormat.JSON.value
TEXT = LogFormat.TEXT.value

DEFAULT_COMMAND = "runc"

_DEBUG = "--debug"
_LOG = "--log"
_LOG_FORMAT = "--log-format"
_ROOT = "--root"
_ROOTLESS = "--rootless"
_SYSTEMD_CGROUP = "--systemd-cgroup"

_CONSOLE_SOCKET = "--console-socket"
_DETACH = "--detach"
_NO_NEW_KEYRING = "--no-new-keyring"
_NO_PIVOT = "--no-pivot"
_PID_FILE = "--pid-file"

_ALL = "--all"
_FORCE = "--force"


class GlobalOpts:
    """Builder for the flags passed to every runc invocation.

    Each setter updates the builder and returns it, so calls can be chained.
    """

    def __init__(self) -> None:
        self._command: Optional[Path] = None
        self._debug = False
        self._log: Optional[Path] = None
        self._log_format = LogFormat.TEXT
        self._root: Optional[Path] = None
        # None means runc decides ("auto"), which differs from an explicit value.
        self._rootless: Optional[bool] = None
        self._set_pgid = False
        self._systemd_cgroup = False
        self._timeout = timedelta(0)
        self._executor: Optional[Spawner] = None

    def command(self, command: PathLike) -> "GlobalOpts":
        """Override the runc binary; ``runc`` is used otherwise."""
        self._command = Path(command)
        return self

    def root(self, root: PathLike) -> "GlobalOpts":
        """Set the directory that stores container state."""
        self._root = Path(root)
        return self

    def debug(self, debug: bool) -> "GlobalOpts":
        """Enable or disable debug logging."""
        self._debug = debug
        return self

    def log(self, log: PathLike) -> "GlobalOpts":
        """Send runc's log to ``log`` instead of stderr."""
        self._log = Path(log)
        return self

    def log_format(self, log_format: LogFormat) -> "GlobalOpts":
        """Set the log format."""
        self._log_format = LogFormat(log_format)
        return self

    def log_json(self) -> "GlobalOpts":
        """Log in JSON."""
        return self.log_format(LogFormat.JSON)

    def log_text(self) -> "GlobalOpts":
        """Log in plain text."""
        return self.log_format(LogFormat.TEXT)

    def systemd_cgroup(self, systemd_cgroup: bool) -> "GlobalOpts":
        """Enable or disable systemd cgroup support."""
        self._systemd_cgroup = systemd_cgroup
        return self

    def rootless(self, rootless: bool) -> "GlobalOpts":
        """Enable or disable rootless mode explicitly."""
        self._rootless = rootless
        return self

    def rootless_auto(self) -> "GlobalOpts":
        """Let runc detect whether to run rootless."""
        self._rootless = None
        return self

    def set_pgid(self, set_pgid: bool) -> "GlobalOpts":
        """Record whether the process group id should be set."""
        self._set_pgid = set_pgid
        return self

    def timeout(self, millis: int) -> "GlobalOpts":
        """Set the command timeout in milliseconds."""
        self._timeout = timedelta(milliseconds=millis)
        return self

    def custom_spawner(self, executor: Spawner) -> "GlobalOpts":
        """Use ``executor`` to run runc commands."""
        self._executor = executor
        return self

    def _output(self) -> tuple[Path, List[str]]:
        command = binary_path(self._command or Path(DEFAULT_COMMAND))
        if command is None:
            raise NotFoundError()

        args: List[str] = []
        if self._root is not None:
            args += [_ROOT, abs_string(self._root)]
        if self._debug:
            args.append(_DEBUG)
        if self._log is not None:
            args += [_LOG, abs_string(self._log)]
        args += [_LOG_FORMAT, str(self._log_format)]
        if self._systemd_cgroup:
            args.append(_SYSTEMD_CGROUP)
        if self._rootless is not None:
            args.append(f"{_ROOTLESS}={str(self._rootless).lower()}")
        return command, args

    def build(self) -> Runc:
        """Resolve the binary and return a configured client."""
        command, args = self._output()
        spawner = self._executor if self._executor is not None else DefaultExecutor()
        return Runc(command=command, args=args, spawner=spawner)


def _path_args(pid_file: Optional[Path], console_socket: Optional[Path]) -> List[str]:
    args: List[str] = []
    if pid_file is not None:
        args += [_PID_FILE, abs_string(pid_file)]
    if console_socket is not None:
        args += [_CONSOLE_SOCKET, abs_string(console_socket)]
    return args


@dataclass
class CreateOpts:
    """Options for ``runc create`` and ``runc run``."""

    io: Optional[Io] = None
    pid_file: Optional[Path] = None
    console_socket: Optional[Path] = None
    detach: bool = False
    no_pivot: bool = False
    no_new_keyring: bool = False

    def args(self) -> List[str]:
        """Return the command-line flags for these options."""
        args = _path_args(self.pid_file, self.console_socket)
        if self.no_pivot:
            args.append(_NO_PIVOT)
        if self.no_new_keyring:
            args.append(_NO_NEW_KEYRING)
        if self.detach:
            args.append(_DETACH)
        return args

    def with_io(self, io: Io) -> "CreateOpts":
        return dataclasses.replace(self, io=io)

    def with_pid_file(self, pid_file: PathLike) -> "CreateOpts":
        return dataclasses.replace(self, pid_file=Path(pid_file))

    def with_console_socket(self, console_socket: PathLike) -> "CreateOpts":
        return dataclasses.replace(self, console_socket=Path(console_socket))

    def with_detach(self, detach: bool) -> "CreateOpts":
        return dataclasses.replace(self, detach=detach)

    def with_no_pivot(self, no_pivot: bool) -> "CreateOpts":
        return dataclasses.replace(self, no_pivot=no_pivot)

    def with_no_new_keyring(self, no_new_keyring: bool) -> "CreateOpts":
        return dataclasses.replace(self, no_new_keyring=no_new_keyring)


@dataclass
class ExecOpts:
    """Options for ``runc exec``."""

    io: Optional[Io] = None
    pid_file: Optional[Path] = None
    console_socket: Optional[Path] = None
    detach: bool = False

    def args(self) -> List[str]:
        """Return the command-line flags for these options."""
        args = _path_args(self.pid_file, self.console_socket)
        if self.detach:
            args.append(_DETACH)
        return args

    def with_io(self, io: Io) -> "ExecOpts":
        return dataclasses.replace(self, io=io)

    def with_pid_file(self, pid_file: PathLike) -> "ExecOpts":
        return dataclasses.replace(self, pid_file=Path(pid_file))

    def with_console_socket(self, console_socket: PathLike) -> "ExecOpts":
        return dataclasses.replace(self, console_socket=Path(console_socket))

    def with_detach(self, detach: bool) -> "ExecOpts":
        return dataclasses.replace(self, detach=detach)


@dataclass
class DeleteOpts:
    """Options for ``runc delete``."""

    force: bool = False

    def args(self) -> List[str]:
        """Return the command-line flags for these options."""
        return [_FORCE] if self.force else []

    def with_force(self, force: bool) -> "DeleteOpts":
        return dataclasses.replace(self, force=force)


@dataclass
class KillOpts:
    """Options for ``runc kill``."""

    all: bool = False

    def args(self) -> List[str]:
        """Return the command-line flags for these options."""
        return [_ALL] if self.all else []

    def with_all(self, all: bool) -> "KillOpts":
        return dataclasses.replace(self, all=all)