import pytest

from sockio.payload_errors import (
    ERR_OVERLAP,
    ERR_PAUSED,
    ERR_TIMEOUT,
    OpError,
    PayloadError,
    RetryError,
)


@pytest.mark.parametrize(
    "op, err, temporary, text",
    [
        ("read", ERR_PAUSED, True, "read: paused"),
        ("read", ERR_TIMEOUT, False, "read: timeout"),
    ],
)
def test_op_error(op, err, temporary, text):
    error = OpError(op, err)
    assert str(error) == text
    assert isinstance(error, PayloadError)
    assert error.temporary() is temporary


def test_retry_error_is_temporary():
    assert RetryError("again").temporary() is True


def test_plain_payload_error_is_not_temporary():
    assert ERR_OVERLAP.temporary() is False


def test_nested_op_error_delegates_temporary():
    assert OpError("payload", OpError("read", ERR_PAUSED)).temporary() is True


def test_op_error_wrapping_foreign_error_is_not_temporary():
    error = OpError("write", ValueError("boom"))
    assert error.temporary() is False
    assert str(error) == "write: boom"


def test_op_error_keeps_op_and_cause():
    error = OpError("write", ERR_TIMEOUT)
    assert error.op == "write"
    assert error.err is ERR_TIMEOUT