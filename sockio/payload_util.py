"""Length prefixes used in the payload framing."""

from __future__ import annotations

from typing import BinaryIO

from sockio.payload_errors import INVALID_PAYLOAD, PayloadError

_END = 0xFF
_COLON = ord(":")
_ZERO = ord("0")
_NINE = ord("9")


def write_binary_len(length: int, buf: bytearray) -> None:
    """Append ``length`` as a binary length prefix (digit bytes then 0xff)."""
    if length <= 0:
        buf.extend((0x00, _END))
        return
    buf.extend(int(d) for d in str(length))
    buf.append(_END)


def write_text_len(length: int, buf: bytearray) -> None:
    """Append ``length`` as a text length prefix (decimal then ':')."""
    if length <= 0:
        buf.extend(b"0:")
        return
    buf.extend(str(length).encode("ascii"))
    buf.append(_COLON)


def _read_byte(reader: BinaryIO) -> int:
    b = reader.read(1)
    if not b:
        raise EOFError("unexpected end of payload")
    return b[0]


def read_binary_len(reader: BinaryIO) -> int:
    """Read a binary length prefix.

    Raises ``EOFError`` at end of input and ``PayloadError`` on a bad digit.
    """
    result = 0
    while True:
        b = _read_byte(reader)
        if b == _END:
            return result
        if b > 9:
            raise PayloadError(INVALID_PAYLOAD)
        result = result * 10 + b


def read_text_len(reader: BinaryIO) -> int:
    """Read a text length prefix.

    Raises ``EOFError`` at end of input and ``PayloadError`` on a bad digit.
    """
    result = 0
    while True:
        b = _read_byte(reader)
        if b == _COLON:
            return result
        if b < _ZERO or b > _NINE:
            raise PayloadError(INVALID_PAYLOAD)
        result = result * 10 + (b - _ZERO)