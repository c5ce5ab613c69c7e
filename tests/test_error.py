import pytest

from runcctl.error import (
    CommandFailedError,
    InvalidCommandError,
    InvalidPathError,
    IoSetError,
    JsonDeserializationError,
    MissingContainerStatsError,
    NotFoundError,
    ProcessSpawnError,
    RuncError,
    SpecFileCreationError,
    UnimplementedError,
)


def test_command_failed_message_and_fields():
    err = CommandFailedError(1, "out", "err")
    assert str(err) == 'Runc command failed: status=1, stdout="out", stderr="err"'
    assert err.status == 1
    assert err.stdout == "out"
    assert err.stderr == "err"


def test_command_failed_is_caught_as_runc_error():
    err = CommandFailedError(2, "o", "e")
    caught = None
    try:
        raise err
    except RuncError as exc:
        caught = exc
    assert caught is err
    assert caught.status == 2
    assert str(caught) == 'Runc command failed: status=2, stdout="o", stderr="e"'


def test_not_found_message():
    assert str(NotFoundError()) == "Unable to locate the runc"


def test_missing_stats_message():
    assert str(MissingContainerStatsError()) == "Missing container statistics"


def test_unimplemented_message_and_base():
    err = UnimplementedError("checkpoint")
    assert str(err) == "Sorry, this part of api is not implemented: checkpoint"
    with pytest.raises(NotImplementedError):
        raise err


def test_json_error_is_transparent():
    cause = ValueError("bad input")
    err = JsonDeserializationError(cause)
    assert str(err) == str(cause)
    assert err.cause is cause


def test_process_spawn_error_is_transparent():
    cause = FileNotFoundError("no such binary")
    err = ProcessSpawnError(cause)
    assert str(err) == str(cause)


@pytest.mark.parametrize(
    "factory, prefix",
    [
        (InvalidPathError, "Invalid path: "),
        (InvalidCommandError, "Error occured in runc: "),
        (SpecFileCreationError, "Failed to spec file: "),
        (IoSetError, "Failed to set cmd io: "),
    ],
)
def test_prefixed_messages(factory, prefix):
    err = factory("why")
    assert str(err) == prefix + "why"
    with pytest.raises(RuncError):
        raise err