"""Events and statistics emitted by ``runc events``."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .error import JsonDeserializationError

_U64_LIMIT = 2**64


class EventType(str, Enum):
    """Kind of event generated by runc."""

    STATS = "stats"
    OOM = "oom"


def _mapping(value: Any, key: str) -> dict:
    if not isinstance(value, dict):
        raise JsonDeserializationError(f"invalid type for `{key}`: expected an object")
    return value


def _u64(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < _U64_LIMIT:
        raise JsonDeserializationError(f"invalid value for `{key}`: expected u64")
    return value


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise JsonDeserializationError(f"invalid type for `{key}`: expected a string")
    return value


def _list_of(parse: Callable[[Any, str], Any]) -> Callable[[Any, str], list]:
    def parse_list(value: Any, key: str) -> list:
        if not isinstance(value, list):
            raise JsonDeserializationError(f"invalid type for `{key}`: expected a list")
        return [parse(item, key) for item in value]

    return parse_list


def _u64_map(value: Any, key: str) -> dict[str, int]:
    return {name: _u64(item, key) for name, item in _mapping(value, key).items()}


def _required(data: dict, key: str, parse: Callable[[Any, str], Any]) -> Any:
    if key not in data:
        raise JsonDeserializationError(f"missing field `{key}`")
    return parse(data[key], key)


def _optional(data: dict, key: str, parse: Callable[[Any, str], Any]) -> Any:
    value = data.get(key)
    return None if value is None else parse(value, key)


@dataclass
class HugeTLB:
    usage: Optional[int]
    max: Optional[int]
    fail_count: int


@dataclass
class BlkIOEntry:
    major: Optional[int]
    minor: Optional[int]
    op: Optional[str]
    value: Optional[int]


@dataclass
class BlkIO:
    """Block IO statistics; every list may be absent."""

    io_service_bytes_recursive: Optional[list[BlkIOEntry]]
    io_serviced_recursive: Optional[list[BlkIOEntry]]
    io_queued_recursive: Optional[list[BlkIOEntry]]
    io_service_time_recursive: Optional[list[BlkIOEntry]]
    io_wait_time_recursive: Optional[list[BlkIOEntry]]
    io_merged_recursive: Optional[list[BlkIOEntry]]
    io_time_recursive: Optional[list[BlkIOEntry]]
    sectors_recursive: Optional[list[BlkIOEntry]]


@dataclass
class Pids:
    current: Optional[int]
    limit: Optional[int]


@dataclass
class Throttling:
    periods: Optional[int]
    throttled_periods: Optional[int]
    throttled_time: Optional[int]


@dataclass
class CpuUsage:
    """CPU times in nanoseconds."""

    total: Optional[int]
    per_cpu: Optional[list[int]]
    kernel: int
    user: int


@dataclass
class Cpu:
    usage: Optional[int]
    throttling: Optional[Throttling]


@dataclass
class MemoryEntry:
    limit: int
    usage: Optional[int]
    max: Optional[int]
    fail_count: int


@dataclass
class Memory:
    cache: Optional[int]
    usage: Optional[MemoryEntry]
    swap: Optional[MemoryEntry]
    kernel: Optional[MemoryEntry]
    kernel_tcp: Optional[MemoryEntry]
    raw: Optional[dict[str, int]]


def _parse_hugetlb(value: Any, key: str) -> HugeTLB:
    data = _mapping(value, key)
    return HugeTLB(
        usage=_optional(data, "usage", _u64),
        max=_optional(data, "max", _u64),
        fail_count=_required(data, "failcnt", _u64),
    )


def _parse_blkio_entry(value: Any, key: str) -> BlkIOEntry:
    data = _mapping(value, key)
    return BlkIOEntry(
        major=_optional(data, "major", _u64),
        minor=_optional(data, "minor", _u64),
        op=_optional(data, "op", _string),
        value=_optional(data, "value", _u64),
    )


_entries = _list_of(_parse_blkio_entry)


def _parse_blkio(value: Any, key: str) -> BlkIO:
    data = _mapping(value, key)
    return BlkIO(
        io_service_bytes_recursive=_optional(data, "ioServiceBytesRecursive", _entries),
        io_serviced_recursive=_optional(data, "ioServicedRecursive", _entries),
        io_queued_recursive=_optional(data, "ioQueueRecursive", _entries),
        io_service_time_recursive=_optional(data, "ioServiceTimeRecursive", _entries),
        io_wait_time_recursive=_optional(data, "ioWaitTimeRecursive", _entries),
        io_merged_recursive=_optional(data, "ioMergedRecursive", _entries),
        io_time_recursive=_optional(data, "ioTimeRecursive", _entries),
        sectors_recursive=_optional(data, "sectorsRecursive", _entries),
    )


def _parse_pids(value: Any, key: str) -> Pids:
    data = _mapping(value, key)
    return Pids(
        current=_optional(data, "current", _u64),
        limit=_optional(data, "limit", _u64),
    )


def _parse_throttling(value: Any, key: str) -> Throttling:
    data = _mapping(value, key)
    return Throttling(
        periods=_optional(data, "periods", _u64),
        throttled_periods=_optional(data, "throttledPeriods", _u64),
        throttled_time=_optional(data, "throttledTime", _u64),
    )


def _parse_cpu_usage(value: Any, key: str) -> CpuUsage:
    data = _mapping(value, key)
    return CpuUsage(
        total=_optional(data, "total", _u64),
        per_cpu=_optional(data, "per_cpu", _list_of(_u64)),
        kernel=_required(data, "kernel", _u64),
        user=_required(data, "user", _u64),
    )


def _parse_cpu(value: Any, key: str) -> Cpu:
    data = _mapping(value, key)
    return Cpu(
        usage=_optional(data, "usage", _u64),
        throttling=_optional(data, "throttling", _parse_throttling),
    )


def _parse_memory_entry(value: Any, key: str) -> MemoryEntry:
    data = _mapping(value, key)
    return MemoryEntry(
        limit=_required(data, "limit", _u64),
        usage=_optional(data, "usage", _u64),
        max=_optional(data, "max", _u64),
        fail_count=_required(data, "failcnt", _u64),
    )


def _parse_memory(value: Any, key: str) -> Memory:
    data = _mapping(value, key)
    return Memory(
        cache=_optional(data, "cache", _u64),
        usage=_optional(data, "usage", _parse_memory_entry),
        swap=_optional(data, "swap", _parse_memory_entry),
        kernel=_optional(data, "kernel", _parse_memory_entry),
        kernel_tcp=_optional(data, "kernelTCP", _parse_memory_entry),
        raw=_optional(data, "raw", _u64_map),
    )


@dataclass
class Stats:
    """Container resource statistics."""

    cpu: Cpu
    memory: Memory
    pids: Pids
    block_io: BlkIO
    huge_tlb: HugeTLB

    @classmethod
    def from_dict(cls, data: Any) -> "Stats":
        """Build statistics from the decoded ``data`` object of an event."""
        data = _mapping(data, "data")
        return cls(
            cpu=_required(data, "cpu", _parse_cpu),
            memory=_required(data, "memory", _parse_memory),
            pids=_required(data, "pids", _parse_pids),
            block_io=_required(data, "blkio", _parse_blkio),
            huge_tlb=_required(data, "hugetlb", _parse_hugetlb),
        )


def _parse_event_type(value: Any, key: str) -> EventType:
    try:
        return EventType(value)
    except ValueError as exc:
        raise JsonDeserializationError(f"unknown variant for `{key}`: {value!r}") from exc


@dataclass
class Event:
    """A single event reported by runc."""

    event_type: EventType
    id: str
    stats: Optional[Stats]

    @classmethod
    def from_dict(cls, data: Any) -> "Event":
        """Build an event from a decoded JSON object."""
        data = _mapping(data, "event")
        return cls(
            event_type=_required(data, "type", _parse_event_type),
            id=_required(data, "id", _string),
            stats=_optional(data, "data", lambda value, _key: Stats.from_dict(value)),
        )

    @classmethod
    def from_json(cls, text: str) -> "Event":
        """Parse an event from a JSON document."""
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise JsonDeserializationError(exc) from exc
        return cls.from_dict(data)