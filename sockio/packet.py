"""Engine packet types and framing of packets inside transport frames."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from sockio.frame import FrameType

_log = logging.getLogger(__name__)

_ZERO = ord("0")


class PacketType(enum.IntEnum):
    """Engine packet type."""

    OPEN = 0
    CLOSE = 1
    PING = 2
    PONG = 3
    MESSAGE = 4
    UPGRADE = 5
    NOOP = 6

    def __str__(self) -> str:
        return self.name.lower()

    def string_byte(self) -> int:
        """Return the packet type as it is written in a text frame."""
        return int(self) + _ZERO

    def binary_byte(self) -> int:
        """Return the packet type as it is written in a binary frame."""
        return int(self)


def byte_to_packet_type(b: int, frame_type: FrameType) -> PacketType:
    """Convert a type byte read from a frame of ``frame_type`` to a packet type.

    Raises ``ValueError`` when the byte names no packet type.
    """
    if frame_type == FrameType.STRING:
        b = (b - _ZERO) & 0xFF
    return PacketType(b)


@dataclass
class Frame:
    """A transport frame: its type and raw content."""

    frame_type: FrameType
    data: bytes


@dataclass
class Packet:
    """An engine packet: frame type, packet type and payload."""

    frame_type: FrameType
    packet_type: PacketType
    data: bytes


class FrameReader(Protocol):
    def next_reader(self) -> tuple[FrameType, BinaryIO]: ...


class FrameWriter(Protocol):
    def next_writer(self, frame_type: FrameType) -> BinaryIO: ...


class PacketDecoder:
    """Reads packets out of the frames of a frame reader."""

    def __init__(self, reader: FrameReader) -> None:
        self._reader = reader

    def next_reader(self) -> tuple[FrameType, PacketType, BinaryIO]:
        """Return the frame type, packet type and a reader for the packet body.

        Raises ``EOFError`` when no more frames are available.
        """
        frame_type, reader = self._reader.next_reader()
        head = reader.read(1)
        if len(head) != 1:
            reader.close()
            raise EOFError("frame holds no packet type")
        return frame_type, byte_to_packet_type(head[0], frame_type), reader


class PacketEncoder:
    """Writes packets as frames of a frame writer."""

    def __init__(self, writer: FrameWriter) -> None:
        self._writer = writer

    def next_writer(self, frame_type: FrameType, packet_type: PacketType) -> BinaryIO:
        """Open a frame, write the packet type and return the frame for the body."""
        writer = self._writer.next_writer(frame_type)
        if frame_type == FrameType.STRING:
            head = packet_type.string_byte()
        else:
            head = packet_type.binary_byte()
        try:
            writer.write(bytes([head]))
        except Exception:
            try:
                writer.close()
            except Exception as close_err:  # noqa: BLE001
                _log.error("close writer after write: %s", close_err)
            raise
        return writer