"""Exceptions raised while driving the runc binary."""

from __future__ import annotations


class RuncError(Exception):
    """Base class for every error raised by this package."""


class InvalidPathError(RuncError):
    """A path could not be made absolute or is not valid UTF-8."""

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Invalid path: {reason}")


class JsonDeserializationError(RuncError):
    """A value could not be converted to or from JSON."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(str(cause))


class MissingContainerStatsError(RuncError):
    """An event carried no statistics."""

    def __init__(self) -> None:
        super().__init__("Missing container statistics")


class ProcessSpawnError(RuncError):
    """The runc process could not be started."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(str(cause))


class InvalidCommandError(RuncError):
    """Waiting for the runc process failed."""

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Error occured in runc: {reason}")


class CommandFailedError(RuncError):
    """runc exited with a non-zero status."""

    def __init__(self, status: int, stdout: str, stderr: str) -> None:
        self.status = status
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f'Runc command failed: status={status}, stdout="{stdout}", stderr="{stderr}"'
        )


class NotFoundError(RuncError):
    """The runc binary could not be located."""

    def __init__(self) -> None:
        super().__init__("Unable to locate the runc")


class SpecFileCreationError(RuncError):
    """A temporary spec file could not be written."""

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Failed to spec file: {reason}")


class UnimplementedError(RuncError, NotImplementedError):
    """The requested runc operation is not supported."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"Sorry, this part of api is not implemented: {feature}")


class IoSetError(RuncError):
    """Standard streams could not be attached to a command."""

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Failed to set cmd io: {reason}")