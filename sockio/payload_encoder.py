"""Encodes packets into a multi-packet payload."""

from __future__ import annotations

import base64
from typing import BinaryIO, Protocol

from sockio.frame import FrameType
from sockio.packet import PacketType
from sockio.payload_util import write_binary_len, write_text_len


class _WriterFeeder(Protocol):
    def get_writer(self) -> BinaryIO: ...

    def put_writer(self, err: BaseException | None) -> None: ...


def _code_unit_length(data: bytes) -> int:
    """Length of the packet type plus ``data`` counted in JavaScript code units."""
    length = 1
    for b in data:
        if b >> 3 == 30:
            length += 2
        elif b >> 4 == 14 or b >> 5 == 6:
            length += 1
        elif b >> 6 == 2:
            continue
        else:
            length += 1
    return length


class PayloadEncoder:
    """Writes one packet at a time into writers handed out by a feeder."""

    def __init__(self, supports_binary: bool, feeder: _WriterFeeder | None = None) -> None:
        self.supports_binary = supports_binary
        self._feeder = feeder
        self._frame_type = FrameType.STRING
        self._packet_type = PacketType.OPEN
        self._frame = bytearray()
        self._base64 = False
        self._raw: BinaryIO | None = None

    def noop(self) -> bytes:
        """Return an encoded NOOP payload."""
        if self.supports_binary:
            return bytes([0x00, 0x01, 0xFF, ord("6")])
        return b"1:6"

    def next_writer(self, frame_type: FrameType, packet_type: PacketType) -> PayloadEncoder:
        """Start a packet; write its body, then call :meth:`close`."""
        if self._feeder is None:
            raise RuntimeError("encoder has no writer feeder")
        self._raw = self._feeder.get_writer()
        self._frame_type = frame_type
        self._packet_type = packet_type
        self._frame = bytearray()
        self._base64 = not self.supports_binary and frame_type == FrameType.BINARY
        return self

    def write(self, data: bytes) -> int:
        """Add data to the body of the current packet."""
        self._frame.extend(data)
        return len(data)

    def close(self) -> None:
        """Write the current packet to the feeder's writer and hand it back."""
        body = base64.b64encode(bytes(self._frame)) if self._base64 else bytes(self._frame)
        header = bytearray()
        if self.supports_binary:
            self._binary_header(header, body)
        elif self._frame_type == FrameType.BINARY:
            write_text_len(len(body) + 2, header)
            header.append(ord("b"))
            header.append(self._packet_type.string_byte())
        else:
            write_text_len(_code_unit_length(body), header)
            header.append(self._packet_type.string_byte())

        failure: Exception | None = None
        try:
            self._raw.write(bytes(header))
            self._raw.write(body)
        except Exception as err:  # noqa: BLE001
            failure = err
        self._feeder.put_writer(failure)
        if failure is not None:
            raise failure

    def _binary_header(self, header: bytearray, body: bytes) -> None:
        if self._frame_type == FrameType.BINARY:
            type_byte = self._packet_type.binary_byte()
        else:
            type_byte = self._packet_type.string_byte()
        header.append(self._frame_type.to_byte())
        write_binary_len(_code_unit_length(body), header)
        header.append(type_byte)