import os
import subprocess
import sys

import pytest

from runcctl.command import Command, DefaultExecutor
from runcctl.io import FIFO, InheritedStdIo, IOOption, NullIo, PipedIo, PipedStdIo


def test_io_option_defaults():
    opts = IOOption()
    assert (opts.open_stdin, opts.open_stdout, opts.open_stderr) == (True, True, True)


def test_io_option_disabled():
    opts = IOOption(open_stdin=False, open_stdout=False, open_stderr=False)
    io = PipedIo(1000, 1000, opts)
    assert io.stdin() is None
    assert io.stdout() is None
    assert io.stderr() is None


def test_create_piped_io():
    with PipedIo(os.getuid(), os.getgid(), IOOption()) as io:
        stdin = io.stdin()
        stdin.write(b"\xfa")
        stdin.close()
        assert io._stdin.rd.read(1) == b"\xfa"

        stdout = io.stdout()
        io._stdout.wr.write(b"\xce")
        assert stdout.read(1) == b"\xce"

        stderr = io.stderr()
        io._stderr.wr.write(b"\xa5")
        assert stderr.read(1) == b"\xa5"

        io.close_after_start()
        assert stdout.read(1) == b""
        assert stderr.read(1) == b""
        stdout.close()
        stderr.close()


def test_piped_io_set_and_capture():
    with PipedIo(os.getuid(), os.getgid()) as io:
        out = io.stdout()
        err = io.stderr()
        cmd = Command(
            sys.executable,
            ["-c", "import sys; print('hello'); sys.stderr.write('oops')"],
        )
        io.set(cmd)
        assert cmd.stdout == io._stdout.wr.fileno()
        assert cmd.stderr == io._stderr.wr.fileno()
        result = DefaultExecutor().execute(cmd)
        io.close_after_start()
        assert result.success()
        assert out.read().strip() == b"hello"
        assert err.read() == b"oops"
        out.close()
        err.close()


def test_null_io():
    io = NullIo()
    assert io.stdin() is None
    assert io.stdout() is None
    assert io.stderr() is None


def test_null_io_set_then_close():
    io = NullIo()
    cmd = Command("true")
    io.set(cmd)
    assert cmd.stdout is cmd.stderr
    assert cmd.stdout.name == os.devnull
    io.close_after_start()
    fresh = Command("true")
    io.set(fresh)
    assert fresh.stdout is None and fresh.stderr is None


def test_inherited_std_io_set():
    cmd = Command("true", stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    InheritedStdIo().set(cmd)
    assert (cmd.stdin, cmd.stdout, cmd.stderr) == (subprocess.DEVNULL, None, None)


def test_piped_std_io_set():
    cmd = Command("true")
    PipedStdIo().set(cmd)
    assert (cmd.stdin, cmd.stdout, cmd.stderr) == (
        subprocess.DEVNULL,
        subprocess.PIPE,
        subprocess.PIPE,
    )


def test_piped_std_io_captures_output():
    io = PipedStdIo()
    cmd = Command(sys.executable, ["-c", "print('captured')"])
    io.set(cmd)
    result = DefaultExecutor().execute(cmd)
    assert result.stdout.strip() == "captured"


def test_fifo_set(tmp_path):
    fifo_path = tmp_path / "in.fifo"
    os.mkfifo(fifo_path)
    out_path = tmp_path / "out.log"
    out_path.write_bytes(b"")
    io = FIFO(stdin=str(fifo_path), stdout=str(out_path))
    cmd = Command("true")
    io.set(cmd)
    assert cmd.stdin.name == cmd.stdin.fileno() or cmd.stdin.readable()
    assert cmd.stdout.writable()
    assert cmd.stderr is None
    cmd.stdout.write(b"data")
    cmd.stdout.close()
    cmd.stdin.close()
    assert out_path.read_bytes() == b"data"


def test_fifo_missing_file(tmp_path):
    io = FIFO(stdout=str(tmp_path / "missing"))
    with pytest.raises(FileNotFoundError):
        io.set(Command("true"))