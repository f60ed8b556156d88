"""Room management and broadcasting to connections."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Protocol

_MAX_WORKERS = 100


class Connection(Protocol):
    """What the broadcaster needs from a connection."""

    id: str

    def emit(self, event: str, *args: Any) -> None: ...


class Broadcast:
    """Keeps rooms of connections and sends events to them."""

    def __init__(self) -> None:
        self._rooms: dict[str, dict[str, Connection]] = {}
        self._lock = threading.RLock()

    def join(self, room: str, connection: Connection) -> None:
        """Add the connection to the room."""
        with self._lock:
            self._rooms.setdefault(room, {})[connection.id] = connection

    def leave(self, room: str, connection: Connection) -> None:
        """Remove the connection from the room, dropping the room when empty."""
        with self._lock:
            members = self._rooms.get(room)
            if members is None:
                return
            members.pop(connection.id, None)
            if not members:
                del self._rooms[room]

    def leave_all(self, connection: Connection) -> None:
        """Remove the connection from every room."""
        with self._lock:
            for room in list(self._rooms):
                members = self._rooms[room]
                members.pop(connection.id, None)
                if not members:
                    del self._rooms[room]

    def clear(self, room: str) -> None:
        """Remove the room and all its connections."""
        with self._lock:
            self._rooms.pop(room, None)

    def send(self, room: str, event: str, *args: Any) -> None:
        """Emit the event with args to every connection in the room."""
        with self._lock:
            targets = list(self._rooms.get(room, {}).values())
        self._emit_all(targets, event, args)

    def send_all(self, event: str, *args: Any) -> None:
        """Emit the event with args to every connection of every room."""
        with self._lock:
            targets = [c for members in self._rooms.values() for c in members.values()]
        self._emit_all(targets, event, args)

    def for_each(self, room: str, f: Callable[[Connection], None]) -> None:
        """Call ``f`` for each connection in the room; nothing if it does not exist."""
        with self._lock:
            members = self._rooms.get(room)
            if members is None:
                return
            occupants = list(members.values())
        for connection in occupants:
            f(connection)

    def count(self, room: str) -> int:
        """Return the number of connections in the room."""
        with self._lock:
            return len(self._rooms.get(room, {}))

    def rooms(self, connection: Connection | None = None) -> list[str]:
        """Return all rooms, or the rooms the given connection has joined."""
        if connection is None:
            return self.all_rooms()
        with self._lock:
            return [room for room, members in self._rooms.items() if connection.id in members]

    def all_rooms(self) -> list[str]:
        """Return the names of all rooms."""
        with self._lock:
            return list(self._rooms)

    @staticmethod
    def _emit_all(targets: list[Connection], event: str, args: tuple[Any, ...]) -> None:
        if not targets:
            return
        with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(targets))) as pool:
            futures = [pool.submit(c.emit, event, *args) for c in targets]
        for future in futures:
            future.result()