"""Coordinates pausing a payload while readers and writers are at work."""

from __future__ import annotations

import enum
import threading


class _Status(enum.Enum):
    NORMAL = enum.auto()
    PAUSING = enum.auto()
    PAUSED = enum.auto()


class Pauser:
    """Tracks active workers and lets one caller pause once all are done."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._workers = 0
        self._pausing = threading.Event()
        self._paused = threading.Event()
        self._status = _Status.NORMAL

    def pause(self) -> bool:
        """Wait until no worker is active, then pause.

        Returns False if already paused, or if another caller paused first.
        """
        with self._cond:
            if self._status is _Status.PAUSED:
                return False
            if self._status is _Status.NORMAL:
                self._pausing.set()
                self._status = _Status.PAUSING
            while self._workers != 0:
                self._cond.wait()
            if self._status is _Status.PAUSED:
                return False
            self._paused.set()
            self._status = _Status.PAUSED
            self._cond.notify_all()
            return True

    def resume(self) -> None:
        """Return to normal state with fresh triggers."""
        with self._cond:
            self._status = _Status.NORMAL
            self._paused = threading.Event()
            self._pausing = threading.Event()

    def working(self) -> bool:
        """Register a worker; returns False when paused."""
        with self._cond:
            if self._status is _Status.PAUSED:
                return False
            self._workers += 1
            return True

    def done(self) -> None:
        """Unregister a worker."""
        with self._cond:
            if self._status is _Status.PAUSED or self._workers == 0:
                return
            self._workers -= 1
            self._cond.notify_all()

    def pausing_trigger(self) -> threading.Event:
        """Return the event set when pausing begins."""
        with self._cond:
            return self._pausing

    def paused_trigger(self) -> threading.Event:
        """Return the event set once paused."""
        with self._cond:
            return self._paused