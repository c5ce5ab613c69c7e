import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from runcctl.error import InvalidPathError, JsonDeserializationError, SpecFileCreationError
from runcctl.utils import (
    abs_path,
    abs_string,
    binary_path,
    write_value_to_temp_file,
    xdg_runtime_dir,
)


def test_abs_string_current_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert abs_string(".") == os.getcwd()


def test_abs_string_parent_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert abs_string("..") == str(Path(os.getcwd()).parent)


def test_abs_path_normalises_lexically(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert abs_path("a/../b") == Path(os.getcwd()) / "b"


def test_abs_string_keeps_absolute(tmp_path):
    assert abs_string(str(tmp_path)) == str(tmp_path)


def test_abs_string_rejects_invalid_utf8():
    with pytest.raises(InvalidPathError, match="invalid UTF-8 string"):
        abs_string("/tmp/\udcff")


def test_xdg_runtime_dir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    assert xdg_runtime_dir() == str(tmp_path)


def test_xdg_runtime_dir_falls_back_to_temp(monkeypatch):
    monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
    assert xdg_runtime_dir() == abs_string(tempfile.gettempdir())


def test_write_value_to_temp_file(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    value = {"user": {"uid": 1000, "gid": 1000}, "cwd": "/path/to/dir"}
    with write_value_to_temp_file(value) as filename:
        assert filename.startswith(f"{tmp_path}/runc-process-")
        with open(filename, encoding="utf-8") as handle:
            assert json.load(handle) == value
    assert not os.path.exists(filename)


@dataclass
class _Spec:
    cwd: str
    args: list


def test_write_dataclass_value(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    spec = _Spec(cwd="/path/to/dir", args=["sh"])
    with write_value_to_temp_file(spec) as filename:
        with open(filename, encoding="utf-8") as handle:
            assert json.load(handle) == {"cwd": "/path/to/dir", "args": ["sh"]}


def test_temp_files_are_unique(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    with write_value_to_temp_file({}) as first, write_value_to_temp_file({}) as second:
        assert first != second
        assert len(list(tmp_path.iterdir())) == 2
    assert list(tmp_path.iterdir()) == []


def test_unserializable_value_cleans_up(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    with pytest.raises(JsonDeserializationError):
        with write_value_to_temp_file(object()):
            pass
    assert list(tmp_path.iterdir()) == []


def test_missing_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path / "missing"))
    with pytest.raises(SpecFileCreationError):
        with write_value_to_temp_file({}):
            pass


def test_binary_path_searches_path(tmp_path, monkeypatch):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    tool = second / "tool"
    tool.write_text("")
    monkeypatch.setenv("PATH", f"{first}{os.pathsep}{second}")
    assert binary_path("tool") == tool


def test_binary_path_first_match_wins(tmp_path, monkeypatch):
    first = tmp_path / "first"
    second = tmp_path / "second"
    for directory in (first, second):
        directory.mkdir()
        (directory / "tool").write_text("")
    monkeypatch.setenv("PATH", f"{first}{os.pathsep}{second}")
    assert binary_path("tool") == first / "tool"


def test_binary_path_absolute(tmp_path, monkeypatch):
    tool = tmp_path / "tool"
    tool.write_text("")
    monkeypatch.setenv("PATH", str(tmp_path / "elsewhere"))
    assert binary_path(str(tool)) == tool


def test_binary_path_ignores_directories(tmp_path, monkeypatch):
    (tmp_path / "tool").mkdir()
    monkeypatch.setenv("PATH", str(tmp_path))
    assert binary_path("tool") is None


def test_binary_path_not_found(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    assert binary_path("tool") is None


def test_binary_path_without_path_env(monkeypatch):
    monkeypatch.delenv("PATH", raising=False)
    assert binary_path("sh") is None