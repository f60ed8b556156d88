"""Errors raised while encoding or decoding payloads."""

from __future__ import annotations


class PayloadError(Exception):
    """Base class of payload errors."""

    def temporary(self) -> bool:
        """Return True if the failed operation may be retried."""
        return False


class RetryError(PayloadError):
    """An error after which the operation may be retried."""

    def temporary(self) -> bool:
        return True


class OpError(PayloadError):
    """An error raised by a named operation, wrapping its cause."""

    def __init__(self, op: str, err: BaseException) -> None:
        super().__init__(op, err)
        self.op = op
        self.err = err

    def __str__(self) -> str:
        return f"{self.op}: {self.err}"

    def temporary(self) -> bool:
        """Return True if the wrapped error is a temporary payload error."""
        return isinstance(self.err, PayloadError) and self.err.temporary()


ERR_PAUSED = RetryError("paused")
ERR_TIMEOUT = PayloadError("timeout")
ERR_OVERLAP = PayloadError("overlap")
INVALID_PAYLOAD = "invalid payload"