"""Client that drives the runc binary."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional

from .command import Command, DefaultExecutor, Spawner
from .container import Container
from .error import (
    CommandFailedError,
    IoSetError,
    JsonDeserializationError,
    MissingContainerStatsError,
    UnimplementedError,
)
from .events import Event, Stats
from .utils import PathLike, abs_string, write_value_to_temp_file

if TYPE_CHECKING:
    from .options import CreateOpts, DeleteOpts, ExecOpts, KillOpts


@dataclass(frozen=True)
class Response:
    """Pid, exit status and output of a finished runc invocation."""

    pid: int
    status: int
    output: str


@dataclass(frozen=True)
class Version:
    """Version information reported by runc."""

    runc_version: Optional[str] = None
    spec_version: Optional[str] = None
    commit: Optional[str] = None


class LogFormat(str, Enum):
    """Log format runc writes; text is the default."""

    JSON = "json"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value


def _decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise JsonDeserializationError(exc) from exc


def _null_or_list(output: str) -> List[Any]:
    # runc prints "null" for an empty list.
    output = output.strip()
    if output == "null":
        return []
    data = _decode_json(output)
    if not isinstance(data, list):
        raise JsonDeserializationError("invalid type: expected a sequence")
    return data


@dataclass
class Runc:
    """A runc binary together with the global arguments passed on every call."""

    command: Path
    args: List[str] = field(default_factory=list)
    spawner: Spawner = field(default_factory=DefaultExecutor)

    def _command(self, args: List[str]) -> Command:
        # NOTIFY_SOCKET changes runc's behaviour and is only meant for systemd.
        return Command(
            program=self.command,
            args=[*self.args, *args],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env_remove={"NOTIFY_SOCKET"},
        )

    def _launch(self, cmd: Command, combined_output: bool) -> Response:
        result = self.spawner.execute(cmd)
        if not result.success():
            raise CommandFailedError(result.status, result.stdout, result.stderr)
        output = result.stdout + result.stderr if combined_output else result.stdout
        return Response(pid=result.pid, status=result.status, output=output)

    @staticmethod
    def _set_io(io: Any, cmd: Command) -> None:
        try:
            io.set(cmd)
        except OSError as exc:
            raise IoSetError(exc) from exc

    def _bundle_call(
        self, action: str, container_id: str, bundle: PathLike, opts: Optional["CreateOpts"]
    ) -> Command:
        args = [action, "--bundle", abs_string(bundle)]
        if opts is not None:
            args.extend(opts.args())
        args.append(container_id)
        return self._command(args)

    def create(
        self, container_id: str, bundle: PathLike, opts: Optional["CreateOpts"] = None
    ) -> Response:
        """Create a new container."""
        cmd = self._bundle_call("create", container_id, bundle, opts)
        io = getattr(opts, "io", None)
        if io is None:
            return self._launch(cmd, True)
        self._set_io(io, cmd)
        response = self._launch(cmd, True)
        io.close_after_start()
        return response

    def delete(self, container_id: str, opts: Optional["DeleteOpts"] = None) -> None:
        """Delete a container."""
        args = ["delete"]
        if opts is not None:
            args.extend(opts.args())
        args.append(container_id)
        self._launch(self._command(args), True)

    def exec(self, container_id: str, spec: Any, opts: Optional["ExecOpts"] = None) -> None:
        """Execute an additional process inside the container."""
        with write_value_to_temp_file(spec) as filename:
            args = ["exec", "--process", filename]
            if opts is not None:
                args.extend(opts.args())
            args.append(container_id)
            cmd = self._command(args)
            io = getattr(opts, "io", None)
            if io is None:
                self._launch(cmd, True)
            else:
                self._set_io(io, cmd)
                self._launch(cmd, True)
                io.close_after_start()

    def kill(self, container_id: str, sig: int, opts: Optional["KillOpts"] = None) -> None:
        """Send a signal to processes inside the container."""
        args = ["kill"]
        if opts is not None:
            args.extend(opts.args())
        args.extend([container_id, str(sig)])
        self._launch(self._command(args), True)

    def list(self) -> List[Container]:
        """List all containers known to this runc instance."""
        response = self._launch(self._command(["list", "--format=json"]), True)
        return [Container.from_dict(item) for item in _null_or_list(response.output)]

    def pause(self, container_id: str) -> None:
        """Pause a container."""
        self._launch(self._command(["pause", container_id]), True)

    def resume(self, container_id: str) -> None:
        """Resume a paused container."""
        self._launch(self._command(["resume", container_id]), True)

    def checkpoint(self) -> None:
        """Checkpointing is not supported."""
        raise UnimplementedError("checkpoint")

    def restore(self) -> None:
        """Restoring is not supported."""
        raise UnimplementedError("restore")

    def ps(self, container_id: str) -> List[int]:
        """Return the pids of the processes inside the container."""
        response = self._launch(self._command(["ps", "--format=json", container_id]), False)
        pids = _null_or_list(response.output)
        for pid in pids:
            if isinstance(pid, bool) or not isinstance(pid, int) or pid < 0:
                raise JsonDeserializationError("invalid type: expected a list of pids")
        return pids

    def run(
        self, container_id: str, bundle: PathLike, opts: Optional["CreateOpts"] = None
    ) -> Response:
        """Create, start and delete a container, returning its result."""
        cmd = self._bundle_call("run", container_id, bundle, opts)
        io = getattr(opts, "io", None)
        if io is not None:
            self._set_io(io, cmd)
        return self._launch(cmd, True)

    def start(self, container_id: str) -> Response:
        """Start an already created container."""
        return self._launch(self._command(["start", container_id]), True)

    def state(self, container_id: str) -> Container:
        """Return the state of a container."""
        response = self._launch(self._command(["state", container_id]), True)
        return Container.from_json(response.output)

    def stats(self, container_id: str) -> Stats:
        """Return the latest statistics for a container."""
        response = self._launch(self._command(["events", "--stats", container_id]), True)
        event = Event.from_json(response.output)
        if event.stats is None:
            raise MissingContainerStatsError()
        return event.stats

    def update(self, container_id: str, resources: Any) -> None:
        """Update a container with the given resource spec."""
        with write_value_to_temp_file(resources) as filename:
            args = ["update", "--resources", filename, container_id]
            self._launch(self._command(args), True)