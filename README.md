# runcctl

A small Python client for the `runc` container runtime. It assembles
`runc` command lines from option objects, runs them as child processes
and turns their JSON output into Python objects. It also parses the
command-line flags a container daemon passes to a runtime shim.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Building a client

Global flags passed to every `runc` call are collected with
`runcctl.options.GlobalOpts` and turned into a `runcctl.client.Runc`
by `build()`. Each setter returns the builder, so calls can be chained.
The binary (default `runc`) is looked up on `PATH`;
`runcctl.error.NotFoundError` is raised if it cannot be found.

```python
from runcctl.options import GlobalOpts

runc = (
    GlobalOpts()
    .command("runc")
    .root("/run/runc")
    .debug(True)
    .log("/tmp/runc.log")
    .log_json()
    .systemd_cgroup(True)
    .rootless(True)
    .build()
)
```

The global arguments produced are `--root`, `--debug`, `--log`,
`--log-format` (always present, `text` unless changed),
`--systemd-cgroup` and `--rootless=true|false` (left out when
`rootless_auto()` is in effect). Paths are made absolute.

## Container lifecycle

```python
from runcctl.options import CreateOpts, DeleteOpts, ExecOpts, KillOpts

opts = CreateOpts().with_pid_file("container.pid").with_detach(True)
response = runc.create("my-container", "/path/to/bundle", opts)
print(response.pid, response.status, response.output)

runc.start("my-container")
print(runc.state("my-container").status)
print(runc.ps("my-container"))

runc.exec("my-container", {"cwd": "/", "args": ["sh"]}, ExecOpts())
runc.pause("my-container")
runc.resume("my-container")

runc.kill("my-container", 15, KillOpts().with_all(True))
runc.delete("my-container", DeleteOpts().with_force(True))
```

- `list()` and `state()` return `runcctl.container.Container` records.
- `ps()` returns a list of pids.
- `stats()` runs `runc events --stats` and returns a
  `runcctl.events.Stats` record; `MissingContainerStatsError` is raised
  if the event carries no data.
- `exec()` and `update()` write the process spec or resources as JSON to
  a temporary file under `$XDG_RUNTIME_DIR` (or the system temp
  directory) and remove it afterwards. The spec may be a dict, a
  dataclass or any object with a `to_dict()` method.
- `run()` creates, starts and deletes a container in one call.

When `runc` exits with a non-zero status, `runcctl.error.CommandFailedError`
is raised carrying `status`, `stdout` and `stderr`. Every error in the
package derives from `runcctl.error.RuncError`.

## Process I/O

`CreateOpts` and `ExecOpts` accept an I/O driver from `runcctl.io`
through `with_io()`:

- `PipedStdIo` captures the output of `runc` itself into the response;
- `InheritedStdIo` sends it to the caller's stdout and stderr;
- `NullIo` discards it;
- `PipedIo(uid, gid, IOOption(...))` creates pipes for the container
  process, owned by the given user and group; `stdin()`, `stdout()` and
  `stderr()` return the caller's ends;
- `FIFO(stdin=..., stdout=..., stderr=...)` opens named files, usually
  FIFOs, by path.

```python
from runcctl.io import PipedStdIo
from runcctl.options import CreateOpts

opts = CreateOpts().with_io(PipedStdIo())
```

## Custom executors

Commands are described by `runcctl.command.Command` and run by a
`runcctl.command.Spawner`. The default, `DefaultExecutor`, starts a local
child process with `NOTIFY_SOCKET` removed from its environment. Pass
another `Spawner` subclass to `GlobalOpts.custom_spawner()`; its
`execute(cmd)` must return an `ExecutionResult`.

## Shim arguments

`runcctl.shim_args.parse` reads the single-dash flags a container daemon
passes to a runtime shim (`-namespace`, `-id`, `-socket`, `-bundle`,
`-address`, `-publish-binary`, `-debug`) followed by an optional action
such as `start` or `delete`, and returns a `Flags` record.
`InvalidArgumentError` is raised for unknown or malformed flags and when
no namespace is given.

```python
from runcctl.shim_args import parse

flags = parse(["-namespace", "default", "-id", "123", "start"])
assert flags.action == "start"
```

## What the package does not do

- `checkpoint()` and `restore()` raise `UnimplementedError`; there is no
  streaming of `runc events`.
- `GlobalOpts.timeout()` and `GlobalOpts.set_pgid()` only record their
  values; the default executor does not apply them.
- `runcctl.client.Version` is a plain record; nothing queries `runc` for
  its version.
- Only the shim's command line is handled: there is no shim server, no
  task service and no event publishing to a container daemon.