"""Decodes packets out of a multi-packet payload."""

from __future__ import annotations

import base64
import io
from typing import BinaryIO, Protocol

from sockio.frame import FrameType, byte_to_frame_type
from sockio.packet import PacketType, byte_to_packet_type
from sockio.payload_errors import INVALID_PAYLOAD, PayloadError
from sockio.payload_util import read_binary_len, read_text_len

_CHUNK = 4096


class _ReaderFeeder(Protocol):
    def get_reader(self) -> tuple[BinaryIO, bool]: ...

    def put_reader(self, err: BaseException | None) -> None: ...


def _read_byte(reader: BinaryIO) -> int:
    b = reader.read(1)
    if not b:
        raise EOFError("unexpected end of payload")
    return b[0]


def _extra_code_units(chunk: bytes) -> int:
    """Bytes counted beyond their JavaScript length for the lead bytes in ``chunk``."""
    extra = 0
    for b in chunk:
        if b >> 3 == 30 or b >> 4 == 14:
            extra += 2
        elif b >> 5 == 6:
            extra += 1
    return extra


class PayloadDecoder:
    """Reads the packets of payloads handed out by a feeder, one at a time."""

    def __init__(self, feeder: _ReaderFeeder) -> None:
        self._feeder = feeder
        self._raw: BinaryIO | None = None
        self._supports_binary = False
        self._frame_type = FrameType.STRING
        self._packet_type = PacketType.OPEN
        self._remaining = 0
        self._is_base64 = False
        self._base64: io.BytesIO | None = None

    def next_reader(self) -> tuple[FrameType, PacketType, PayloadDecoder]:
        """Return frame type, packet type and a reader for the next packet body."""
        if self._raw is None:
            reader, supports_binary = self._feeder.get_reader()
            try:
                self._set_next_reader(reader, supports_binary)
            except Exception as err:  # noqa: BLE001
                self._release(err)
        return self._frame_type, self._packet_type, self

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes of the current packet body; all if negative."""
        if self._is_base64:
            if self._base64 is None:
                self._base64 = io.BytesIO(base64.b64decode(self._read_raw(-1)))
            return self._base64.read(size)
        return self._read_raw(size)

    def close(self) -> None:
        """Finish the current packet and move on to the next one."""
        try:
            while self.read(_CHUNK):
                pass
        except Exception as err:  # noqa: BLE001
            self._release(err)
        try:
            self._set_next_reader(self._raw, self._supports_binary)
        except EOFError:
            self._raw = None
            self._remaining = 0
            self._is_base64 = False
            self._base64 = None
            self._release(None)
        except Exception as err:  # noqa: BLE001
            self._release(err)

    def _read_raw(self, size: int) -> bytes:
        if size is None or size < 0:
            parts = []
            while True:
                chunk = self._read_limited(self._remaining)
                if not chunk:
                    return b"".join(parts)
                parts.append(chunk)
        return self._read_limited(size)

    def _read_limited(self, size: int) -> bytes:
        n = min(size, self._remaining)
        if n <= 0 or self._raw is None:
            return b""
        chunk = self._raw.read(n)
        self._remaining -= len(chunk)
        if not self._is_base64:
            self._remaining += _extra_code_units(chunk)
        return chunk

    def _release(self, err: BaseException | None) -> None:
        self._feeder.put_reader(err)
        if err is not None:
            raise err

    def _set_next_reader(self, reader: BinaryIO, supports_binary: bool) -> None:
        if supports_binary:
            frame_type, packet_type, length = self._binary_read(reader)
        else:
            frame_type, packet_type, length = self._text_read(reader)
        self._frame_type = frame_type
        self._packet_type = packet_type
        self._raw = reader
        self._remaining = length
        self._supports_binary = supports_binary
        self._is_base64 = not supports_binary and frame_type == FrameType.BINARY
        self._base64 = None

    @staticmethod
    def _text_read(reader: BinaryIO) -> tuple[FrameType, PacketType, int]:
        length = read_text_len(reader)
        frame_type = FrameType.STRING
        b = _read_byte(reader)
        length -= 1
        if b == ord("b"):
            frame_type = FrameType.BINARY
            b = _read_byte(reader)
            length -= 1
        return frame_type, byte_to_packet_type(b, FrameType.STRING), length

    @staticmethod
    def _binary_read(reader: BinaryIO) -> tuple[FrameType, PacketType, int]:
        b = _read_byte(reader)
        if b > 1:
            raise PayloadError(INVALID_PAYLOAD)
        frame_type = byte_to_frame_type(b)
        length = read_binary_len(reader)
        b = _read_byte(reader)
        return frame_type, byte_to_packet_type(b, frame_type), length - 1