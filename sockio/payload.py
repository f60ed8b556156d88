"""A payload carries several engine packets in one HTTP request or response."""

from __future__ import annotations

import enum
import threading
import time
from collections.abc import Callable
from typing import Any, BinaryIO

from sockio.frame import FrameType
from sockio.packet import PacketType
from sockio.payload_decoder import PayloadDecoder
from sockio.payload_encoder import PayloadEncoder
from sockio.payload_errors import ERR_OVERLAP, ERR_PAUSED, ERR_TIMEOUT, OpError
from sockio.pauser import Pauser

# Upper bound on one wait, so that pause triggers and moved deadlines are noticed.
_POLL = 0.01


class _Wake(enum.Enum):
    READY = enum.auto()
    CLOSED = enum.auto()
    TRIGGERED = enum.auto()
    TIMED_OUT = enum.auto()


class _Slot:
    """Hand-off point for one value at a time, guarded by the payload's condition."""

    def __init__(self) -> None:
        self._box: list[Any] | None = None

    def is_full(self) -> bool:
        return self._box is not None

    def holds(self, box: list[Any]) -> bool:
        return self._box is box

    def put(self, value: Any) -> list[Any]:
        box = [value]
        self._box = box
        return box

    def take(self) -> Any:
        box = self._box
        self._box = None
        return box[0]

    def withdraw(self, box: list[Any]) -> None:
        if self._box is box:
            self._box = None


class Payload:
    """Encodes and decodes the payload protocol between HTTP bodies and packets.

    One side calls :meth:`feed_in` and :meth:`flush_out` with request and
    response bodies; the other reads and writes packets through
    :meth:`next_reader` and :meth:`next_writer`. Deadlines are
    ``time.monotonic()`` values, or ``None`` for no deadline.
    """

    def __init__(self, supports_binary: bool) -> None:
        self._cond = threading.Condition()
        self._closed = False
        self._err: BaseException | None = None
        self._err_lock = threading.Lock()
        self._pauser = Pauser()

        self._feeding = threading.Lock()
        self._read_offer = _Slot()
        self._read_result = _Slot()
        self._read_deadline: float | None = None
        self._decoder = PayloadDecoder(self)

        self._flushing = threading.Lock()
        self._write_offer = _Slot()
        self._write_result = _Slot()
        self._write_deadline: float | None = None
        self._encoder = PayloadEncoder(supports_binary, self)

    def __enter__(self) -> Payload:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Public API

    def feed_in(self, reader: BinaryIO, supports_binary: bool) -> None:
        """Hand a request body to :meth:`next_reader` and wait until it is read.

        Raises ``EOFError`` once closed, a temporary ``OpError`` when paused,
        ``OpError`` on timeout or overlap, and the stored read error otherwise.
        """
        self._check_open()
        if not self._feeding.acquire(blocking=False):
            raise OpError("read", ERR_OVERLAP)
        try:
            if not self._pauser.working():
                raise OpError("payload", ERR_PAUSED)
            try:
                with self._cond:
                    wake = self._send(self._read_offer, (reader, supports_binary), self._read_by)
                    if wake is _Wake.READY:
                        wake, err = self._receive(self._read_result, self._read_by)
                if wake is not _Wake.READY:
                    raise self._failure(wake, "read")
                self._raise_stored("read", err)
            finally:
                self._pauser.done()
        finally:
            self._feeding.release()

    def flush_out(self, writer: BinaryIO) -> None:
        """Hand a response body to :meth:`next_writer` and wait until it is written.

        When paused, or when a pause begins meanwhile, a NOOP payload is
        written instead.
        """
        self._check_open()
        if not self._flushing.acquire(blocking=False):
            raise OpError("write", ERR_OVERLAP)
        try:
            if not self._pauser.working():
                writer.write(self._encoder.noop())
                return
            try:
                with self._cond:
                    wake = self._send(
                        self._write_offer, writer, self._write_by, self._pauser.pausing_trigger
                    )
                    if wake is _Wake.READY:
                        wake, err = self._receive(self._write_result, self._write_by)
                if wake is _Wake.TRIGGERED:
                    writer.write(self._encoder.noop())
                    return
                if wake is not _Wake.READY:
                    raise self._failure(wake, "write")
                self._raise_stored("write", err)
            finally:
                self._pauser.done()
        finally:
            self._flushing.release()

    def next_reader(self) -> tuple[FrameType, PacketType, PayloadDecoder]:
        """Return frame type, packet type and a reader for the next packet."""
        return self._decoder.next_reader()

    def set_read_deadline(self, deadline: float | None) -> None:
        """Set the deadline for reading, as a ``time.monotonic()`` value."""
        with self._cond:
            self._read_deadline = deadline
            self._cond.notify_all()

    def next_writer(self, frame_type: FrameType, packet_type: PacketType) -> PayloadEncoder:
        """Return a writer for the next packet; it is sent on close."""
        return self._encoder.next_writer(frame_type, packet_type)

    def set_write_deadline(self, deadline: float | None) -> None:
        """Set the deadline for writing, as a ``time.monotonic()`` value."""
        with self._cond:
            self._write_deadline = deadline
            self._cond.notify_all()

    def pause(self) -> None:
        """Pause, waiting for every active feed and flush to finish."""
        self._pauser.pause()
        with self._cond:
            self._cond.notify_all()

    def resume(self) -> None:
        """Resume after a pause."""
        self._pauser.resume()

    def close(self) -> None:
        """Close the payload; every waiting and later call raises."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def store(self, op: str, err: BaseException | None) -> BaseException | None:
        """Remember the first real error, wrapped in ``OpError``, and return it.

        ``None`` and ``EOFError`` are returned as given unless an error is
        already stored, in which case the stored one is returned.
        """
        with self._err_lock:
            if self._err is not None:
                return self._err
            if err is None or isinstance(err, EOFError):
                return err
            self._err = OpError(op, err)
            return self._err

    # Feeder protocol used by the decoder and encoder

    def get_reader(self) -> tuple[BinaryIO, bool]:
        """Wait for a body from :meth:`feed_in`."""
        self._check_open()
        if not self._pauser.working():
            raise OpError("payload", ERR_PAUSED)
        self._pauser.done()
        with self._cond:
            wake, offer = self._receive(
                self._read_offer, self._read_by, self._pauser.paused_trigger
            )
        if wake is not _Wake.READY:
            raise self._failure(wake, "read")
        return offer

    def put_reader(self, err: BaseException | None) -> None:
        """Report the end of a fed body to :meth:`feed_in`."""
        self._check_open()
        with self._cond:
            wake = self._send(self._read_result, err, self._read_by)
        if wake is not _Wake.READY:
            raise self._failure(wake, "read")

    def get_writer(self) -> BinaryIO:
        """Wait for a body from :meth:`flush_out`."""
        self._check_open()
        if not self._pauser.working():
            raise OpError("payload", ERR_PAUSED)
        self._pauser.done()
        with self._cond:
            wake, writer = self._receive(
                self._write_offer, self._write_by, self._pauser.paused_trigger
            )
        if wake is not _Wake.READY:
            raise self._failure(wake, "write")
        return writer

    def put_writer(self, err: BaseException | None) -> None:
        """Report the end of a flushed body to :meth:`flush_out`."""
        self._check_open()
        stored = self.store("write", err)
        with self._cond:
            wake = self._send(self._write_result, err, self._write_by)
        if wake is not _Wake.READY:
            raise self._failure(wake, "write")
        if stored is not None:
            raise stored

    # Internals

    def _read_by(self) -> float | None:
        return self._read_deadline

    def _write_by(self) -> float | None:
        return self._write_deadline

    def _load(self) -> BaseException:
        with self._err_lock:
            if self._err is not None:
                return self._err
        return EOFError("payload closed")

    def _check_open(self) -> None:
        with self._cond:
            closed = self._closed
        if closed:
            raise self._load()

    def _raise_stored(self, op: str, err: BaseException | None) -> None:
        failure = self.store(op, err)
        if failure is not None:
            raise failure

    def _failure(self, wake: _Wake, op: str) -> BaseException:
        if wake is _Wake.CLOSED:
            return self._load()
        if wake is _Wake.TIMED_OUT:
            return self.store(op, ERR_TIMEOUT)
        return OpError("payload", ERR_PAUSED)

    def _wait_for(
        self,
        ready: Callable[[], bool],
        deadline: Callable[[], float | None],
        trigger: Callable[[], threading.Event] | None = None,
    ) -> _Wake:
        """Wait, holding the condition, until ready, closed, triggered or timed out."""
        while True:
            if ready():
                return _Wake.READY
            if self._closed:
                return _Wake.CLOSED
            if trigger is not None and trigger().is_set():
                return _Wake.TRIGGERED
            until = deadline()
            left = None if until is None else until - time.monotonic()
            if left is not None and left <= 0:
                return _Wake.TIMED_OUT
            self._cond.wait(_POLL if left is None else min(left, _POLL))

    def _send(
        self,
        slot: _Slot,
        value: Any,
        deadline: Callable[[], float | None],
        trigger: Callable[[], threading.Event] | None = None,
    ) -> _Wake:
        wake = self._wait_for(lambda: not slot.is_full(), deadline, trigger)
        if wake is not _Wake.READY:
            return wake
        box = slot.put(value)
        self._cond.notify_all()
        wake = self._wait_for(lambda: not slot.holds(box), deadline, trigger)
        if wake is not _Wake.READY:
            slot.withdraw(box)
        return wake

    def _receive(
        self,
        slot: _Slot,
        deadline: Callable[[], float | None],
        trigger: Callable[[], threading.Event] | None = None,
    ) -> tuple[_Wake, Any]:
        wake = self._wait_for(slot.is_full, deadline, trigger)
        if wake is not _Wake.READY:
            return wake, None
        value = slot.take()
        self._cond.notify_all()
        return wake, value