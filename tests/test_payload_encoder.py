import io

import pytest

from sockio.frame import FrameType
from sockio.packet import PacketType
from sockio.payload_encoder import PayloadEncoder
from sockio.payload_errors import ERR_PAUSED, OpError

S = FrameType.STRING
B = FrameType.BINARY

CASES = [
    (True, bytes([0x00, 0x01, 0xFF]) + b"0", [(S, PacketType.OPEN, b"")]),
    (
        True,
        bytes([0x00, 0x09, 0xFF]) + "4hello 你好".encode(),
        [(S, PacketType.MESSAGE, "hello 你好".encode())],
    ),
    (
        True,
        bytes([0x01, 0x09, 0xFF, 0x04]) + "hello 你好".encode(),
        [(B, PacketType.MESSAGE, "hello 你好".encode())],
    ),
    (
        True,
        bytes([0x01, 0x07, 0xFF, 0x04])
        + b"hello\n"
        + bytes([0x00, 0x04, 0xFF])
        + "4你好\n".encode()
        + bytes([0x00, 0x06, 0xFF])
        + b"2probe",
        [
            (B, PacketType.MESSAGE, b"hello\n"),
            (S, PacketType.MESSAGE, "你好\n".encode()),
            (S, PacketType.PING, b"probe"),
        ],
    ),
    (False, b"1:0", [(S, PacketType.OPEN, b"")]),
    (False, "9:4hello 你好".encode(), [(S, PacketType.MESSAGE, "hello 你好".encode())]),
    (False, b"18:b4aGVsbG8g5L2g5aW9", [(B, PacketType.MESSAGE, "hello 你好".encode())]),
    (
        False,
        "10:b4aGVsbG8K4:4你好\n6:2probe".encode(),
        [
            (B, PacketType.MESSAGE, b"hello\n"),
            (S, PacketType.MESSAGE, "你好\n".encode()),
            (S, PacketType.PING, b"probe"),
        ],
    ),
    (
        False,
        "6:412↓453:41↓".encode(),
        [
            (S, PacketType.MESSAGE, "12↓45".encode()),
            (S, PacketType.MESSAGE, "1↓".encode()),
        ],
    ),
    (
        False,
        "6:4hello6:4🇩🇪a5:41234".encode(),
        [
            (S, PacketType.MESSAGE, b"hello"),
            (S, PacketType.MESSAGE, "🇩🇪a".encode()),
            (S, PacketType.MESSAGE, b"1234"),
        ],
    ),
    (
        False,
        "2:4h3:4€a2:41".encode(),
        [
            (S, PacketType.MESSAGE, b"h"),
            (S, PacketType.MESSAGE, "€a".encode()),
            (S, PacketType.MESSAGE, b"1"),
        ],
    ),
    (
        False,
        "2:4h4:4👍a2:41".encode(),
        [
            (S, PacketType.MESSAGE, b"h"),
            (S, PacketType.MESSAGE, "👍a".encode()),
            (S, PacketType.MESSAGE, b"1"),
        ],
    ),
]


class FakeWriterFeeder:
    def __init__(self, writer):
        self.writer = writer
        self.return_error = None
        self.passed_error = None

    def get_writer(self):
        if self.return_error is not None:
            raise self.return_error
        return self.writer

    def put_writer(self, err):
        self.passed_error = err
        if self.return_error is not None:
            raise self.return_error


class ErrorWriter:
    def __init__(self, err):
        self.err = err

    def write(self, data):
        raise self.err


@pytest.mark.parametrize("supports_binary, data, packets", CASES)
def test_encoder(supports_binary, data, packets):
    buf = io.BytesIO()
    feeder = FakeWriterFeeder(buf)
    encoder = PayloadEncoder(supports_binary, feeder)
    for frame_type, packet_type, body in packets:
        writer = encoder.next_writer(frame_type, packet_type)
        assert writer.write(body) == len(body)
        writer.close()
    assert buf.getvalue() == data
    assert feeder.passed_error is None


def test_encoder_begin_error():
    feeder = FakeWriterFeeder(io.BytesIO())
    target = OpError("payload", ERR_PAUSED)
    feeder.return_error = target
    encoder = PayloadEncoder(True, feeder)
    with pytest.raises(OpError) as info:
        encoder.next_writer(B, PacketType.OPEN)
    assert info.value is target


def test_encoder_end_error():
    write_error = OSError("write error")
    feeder = FakeWriterFeeder(ErrorWriter(write_error))
    encoder = PayloadEncoder(True, feeder)
    writer = encoder.next_writer(B, PacketType.OPEN)

    target = RuntimeError("error")
    feeder.return_error = target
    with pytest.raises(RuntimeError) as info:
        writer.close()
    assert info.value is target
    assert feeder.passed_error is write_error


def test_encoder_write_error_passed_and_raised():
    write_error = OSError("write error")
    feeder = FakeWriterFeeder(ErrorWriter(write_error))
    encoder = PayloadEncoder(False, feeder)
    writer = encoder.next_writer(S, PacketType.MESSAGE)
    writer.write(b"x")
    with pytest.raises(OSError) as info:
        writer.close()
    assert info.value is write_error
    assert feeder.passed_error is write_error


@pytest.mark.parametrize(
    "supports_binary, data",
    [(True, bytes([0x00, 0x01, 0xFF, ord("6")])), (False, b"1:6")],
)
def test_encoder_noop(supports_binary, data):
    assert PayloadEncoder(supports_binary).noop() == data