"""In-memory frame readers and writers for exercising the packet codec."""

from __future__ import annotations

import io
from collections import deque
from collections.abc import Iterable

from sockio.frame import FrameType
from sockio.packet import Frame, PacketType


class _DiscardFrame:
    """A frame writer that throws its data away."""

    def __init__(self) -> None:
        self.closed = False

    def write(self, data: bytes) -> int:
        return len(data)

    def close(self) -> None:
        self.closed = True


class FakeDiscardWriter:
    """Frame writer whose frames discard everything written to them."""

    def next_writer(self, frame_type: FrameType) -> _DiscardFrame:
        return _DiscardFrame()


class _FakeFrame:
    """Buffers one frame and hands it to its owner on close."""

    def __init__(self, owner: FakeConnWriter, frame_type: FrameType) -> None:
        self._owner = owner
        self._frame_type = frame_type
        self._data = bytearray()

    def write(self, data: bytes) -> int:
        self._data.extend(data)
        return len(data)

    def close(self) -> None:
        self._owner.frames.append(Frame(self._frame_type, bytes(self._data)))


class FakeConnWriter:
    """Frame writer that collects the closed frames in ``frames``."""

    def __init__(self) -> None:
        self.frames: list[Frame] = []

    def next_writer(self, frame_type: FrameType) -> _FakeFrame:
        return _FakeFrame(self, frame_type)


class FakeConnReader:
    """Frame reader that yields the given frames, then raises ``EOFError``."""

    def __init__(self, frames: Iterable[Frame]) -> None:
        self._frames = deque(frames)

    def next_reader(self) -> tuple[FrameType, io.BytesIO]:
        if not self._frames:
            raise EOFError("no more frames")
        frame = self._frames.popleft()
        return frame.frame_type, io.BytesIO(frame.data)


class _ConstFrame:
    """Reader that returns the same single byte on every read."""

    def __init__(self, value: int) -> None:
        self.value = value
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        return bytes([self.value])

    def close(self) -> None:
        self.closed = True


class FakeConstReader:
    """Endless frame reader alternating text and binary message frames."""

    def __init__(self) -> None:
        self._frame_type = FrameType.STRING
        self._frame = _ConstFrame(PacketType.MESSAGE.string_byte())

    def next_reader(self) -> tuple[FrameType, _ConstFrame]:
        current = self._frame_type
        if current == FrameType.BINARY:
            self._frame_type = FrameType.STRING
            self._frame.value = PacketType.MESSAGE.string_byte()
        else:
            self._frame_type = FrameType.BINARY
            self._frame.value = PacketType.MESSAGE.binary_byte()
        self._frame.closed = False
        return current, self._frame