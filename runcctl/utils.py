"""Path helpers and temporary spec files."""

from __future__ import annotations

import dataclasses
import json
import os
import tempfile
import uuid
from contextlib import contextmanager, suppress
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from .error import InvalidPathError, JsonDeserializationError, RuncError, SpecFileCreationError

PathLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]


def abs_path(path: PathLike) -> Path:
    """Return ``path`` made absolute and lexically normalised."""
    try:
        return Path(os.path.abspath(os.fsdecode(path)))
    except OSError as exc:
        raise InvalidPathError(exc) from exc


def abs_string(path: PathLike) -> str:
    """Return the absolute form of ``path`` as a UTF-8 string."""
    text = str(abs_path(path))
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        lossy = text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
        raise InvalidPathError(f"invalid UTF-8 string: {lossy}") from exc
    return text


def xdg_runtime_dir() -> str:
    """Return ``$XDG_RUNTIME_DIR``, else the system temp dir, else ``.``."""
    value = os.environ.get("XDG_RUNTIME_DIR")
    if value is not None:
        return value
    try:
        return abs_string(tempfile.gettempdir())
    except (RuncError, OSError):
        return "."


def _to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@contextmanager
def write_value_to_temp_file(value: Any) -> Iterator[str]:
    """Write ``value`` as JSON to a fresh file and yield its name.

    The file is removed when the context exits.
    """
    filename = f"{xdg_runtime_dir()}/runc-process-{uuid.uuid4()}"
    try:
        fd = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except OSError as exc:
        raise SpecFileCreationError(exc) from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            try:
                payload = json.dumps(value, default=_to_json, separators=(",", ":"))
            except (TypeError, ValueError) as exc:
                raise JsonDeserializationError(exc) from exc
            try:
                handle.write(payload)
                handle.flush()
            except OSError as exc:
                raise SpecFileCreationError(exc) from exc
        yield filename
    finally:
        with suppress(FileNotFoundError):
            os.remove(filename)


def binary_path(path: PathLike) -> Optional[Path]:
    """Resolve ``path`` against ``$PATH``; absolute paths are checked as given."""
    search = os.environ.get("PATH")
    if search is None:
        return None
    name = os.fsdecode(path)
    for directory in search.split(os.pathsep):
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None