"""Container state as reported by runc."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .error import JsonDeserializationError


def _require(data: dict, key: str) -> Any:
    if key not in data:
        raise JsonDeserializationError(f"missing field `{key}`")
    return data[key]


def _string(data: dict, key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise JsonDeserializationError(f"invalid type for `{key}`: expected a string")
    return value


def _integer(data: dict, key: str, *, unsigned: bool) -> int:
    value = _require(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise JsonDeserializationError(f"invalid type for `{key}`: expected an integer")
    if unsigned and value < 0:
        raise JsonDeserializationError(f"invalid value for `{key}`: expected unsigned")
    return value


@dataclass
class Container:
    """Information about a runc container."""

    id: str
    pid: int
    status: str
    bundle: str
    rootfs: str
    created: datetime
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Container":
        """Build a container from decoded runc JSON output."""
        if not isinstance(data, dict):
            raise JsonDeserializationError("invalid type: expected a container object")
        created = _integer(data, "created", unsigned=False)
        try:
            created_at = datetime.fromtimestamp(created, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise JsonDeserializationError(exc) from exc
        annotations = _require(data, "annotations")
        if not isinstance(annotations, dict) or not all(
            isinstance(v, str) for v in annotations.values()
        ):
            raise JsonDeserializationError(
                "invalid type for `annotations`: expected a map of strings"
            )
        return cls(
            id=_string(data, "id"),
            pid=_integer(data, "pid", unsigned=True),
            status=_string(data, "status"),
            bundle=_string(data, "bundle"),
            rootfs=_string(data, "rootfs"),
            created=created_at,
            annotations=dict(annotations),
        )

    @classmethod
    def from_json(cls, text: str) -> "Container":
        """Parse a container from a JSON document."""
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise JsonDeserializationError(exc) from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation used by runc."""
        return {
            "id": self.id,
            "pid": self.pid,
            "status": self.status,
            "bundle": self.bundle,
            "rootfs": self.rootfs,
            "created": int(self.created.timestamp()),
            "annotations": dict(self.annotations),
        }