"""Command-line flags passed by the container daemon to a shim binary."""

from __future__ import annotations

import os
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Union

_BOOL_FLAGS = {"debug": "debug"}
_STRING_FLAGS = {
    "namespace": "namespace",
    "id": "id",
    "socket": "socket",
    "bundle": "bundle",
    "address": "address",
    "publish-binary": "publish_binary",
}
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


class InvalidArgumentError(ValueError):
    """The shim's command line could not be accepted."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid argument: {reason}")


@dataclass
class Flags:
    """Parsed shim flags."""

    debug: bool = False
    namespace: str = ""
    id: str = ""
    socket: str = ""
    bundle: str = ""
    address: str = ""
    publish_binary: str = ""
    action: str = ""


def _parse_bool(name: str, value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise InvalidArgumentError(f'invalid boolean value "{value}" for -{name}')


def parse(args: Iterable[Union[str, bytes, "os.PathLike[str]"]]) -> Flags:
    """Parse shim arguments with single-dash flags followed by an optional action."""
    flags = Flags()
    remaining = deque(os.fsdecode(arg) for arg in args)

    while remaining:
        arg = remaining[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        remaining.popleft()
        name = arg[1:]
        if name.startswith("-"):
            name = name[1:]
            if not name:
                break
        if not name or name[0] in "-=":
            raise InvalidArgumentError(f"bad flag syntax: {arg}")
        name, has_value, value = name.partition("=")

        if name in _BOOL_FLAGS:
            setattr(flags, _BOOL_FLAGS[name], _parse_bool(name, value) if has_value else True)
        elif name in _STRING_FLAGS:
            if not has_value:
                if not remaining:
                    raise InvalidArgumentError(f"flag needs an argument: -{name}")
                value = remaining.popleft()
            setattr(flags, _STRING_FLAGS[name], value)
        else:
            raise InvalidArgumentError(f"flag provided but not defined: -{name}")

    if remaining:
        flags.action = remaining[0]

    if not flags.namespace:
        raise InvalidArgumentError("Shim namespace cannot be empty")

    return flags