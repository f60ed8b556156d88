# sockio

Building blocks for socket.io style servers: the Engine.IO frame and packet
types, a packet encoder and decoder, the long-polling payload codec with its
pause/resume coordination, an in-memory room broadcaster, and the option
defaults for a Redis adapter. The package has no dependencies outside the
standard library.

## Install

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Frames and packets

`sockio.frame.FrameType` is `STRING` or `BINARY`; `to_byte()` and
`byte_to_frame_type(b)` convert to and from the wire byte.

`sockio.packet.PacketType` has `OPEN`, `CLOSE`, `PING`, `PONG`, `MESSAGE`,
`UPGRADE` and `NOOP`. `string_byte()` gives the byte written in a text frame
(`'0'`..`'6'`), `binary_byte()` the byte written in a binary frame (0..6), and
`str()` the lower-case name. `byte_to_packet_type(b, frame_type)` goes the
other way and raises `ValueError` for an unknown byte.

`PacketEncoder` writes packets into frames of any object with
`next_writer(frame_type)`; `PacketDecoder` reads them from any object with
`next_reader()`. `sockio.fake_conn` has in-memory frame readers and writers:

```python
from sockio.frame import FrameType
from sockio.packet import PacketType, PacketDecoder, PacketEncoder
from sockio.fake_conn import FakeConnReader, FakeConnWriter

writer = FakeConnWriter()
encoder = PacketEncoder(writer)
w = encoder.next_writer(FrameType.STRING, PacketType.MESSAGE)
w.write(b"hello")
w.close()
# writer.frames == [Frame(FrameType.STRING, b"4hello")]

decoder = PacketDecoder(FakeConnReader(writer.frames))
frame_type, packet_type, reader = decoder.next_reader()
body = reader.read()            # b"hello"
decoder.next_reader()           # raises EOFError: no more frames
```

`FakeConstReader` yields endless alternating text and binary `MESSAGE`
frames, and `FakeDiscardWriter` hands out frames that drop what is written.

## Payloads

`sockio.payload.Payload(supports_binary)` carries packets over HTTP
long-polling. One side hands request bodies in with
`feed_in(reader, supports_binary)` and response bodies out with
`flush_out(writer)`; the other reads packets with `next_reader()` and writes
them with `next_writer(frame_type, packet_type)`, writing the body and then
calling `close()` on the returned writer.

Deadlines are set with `set_read_deadline(deadline)` and
`set_write_deadline(deadline)`, as `time.monotonic()` values or `None` for
none. `pause()` waits until feeds and flushes in progress are finished; while
paused, `flush_out` writes a NOOP payload, and the other calls raise a
temporary error, until `resume()`. `close()` ends the payload (it can also be
used as a context manager); calls after it raise `EOFError`, or the first
error that was stored with `store(op, err)`.

Errors live in `sockio.payload_errors`: `PayloadError` is the base,
`OpError(op, err)` names the operation (`"read: timeout"`), and `temporary()`
tells whether a retry makes sense.

The lower layers can be used on their own: `sockio.payload_encoder.PayloadEncoder`
and `sockio.payload_decoder.PayloadDecoder` encode and decode the text
(`"9:4hello 你好"`, with lengths counted in JavaScript code units, and
base64 for binary packets) and binary formats; `sockio.payload_util` has
`write_text_len`, `read_text_len`, `write_binary_len` and `read_binary_len`;
`sockio.pauser.Pauser` is the pause coordinator.

## Rooms

```python
from sockio.broadcast import Broadcast

rooms = Broadcast()
rooms.join("lobby", connection)        # connection has .id and .emit(event, *args)
rooms.send("lobby", "reply", "hello")  # emit to everyone in the room
rooms.send_all("notice", "hi")         # emit to everyone in every room
rooms.for_each("lobby", print)
rooms.count("lobby")
rooms.rooms(connection)                # rooms this connection is in
rooms.all_rooms()
rooms.leave("lobby", connection)       # empty rooms are removed
rooms.leave_all(connection)
rooms.clear("lobby")
```

Emits are run on a thread pool of at most 100 workers; an exception raised by
an `emit` is re-raised by `send` or `send_all`.

## Redis adapter options

`sockio.adapter_options.get_options(opts)` merges the non-empty fields of a
`RedisAdapterOptions` over `default_options()` (address `127.0.0.1:6379`,
prefix `socket.io`, network `tcp`). `get_addr()` builds `host:port` when
`addr` is empty.

## What this package does not do

There is no HTTP server, no polling or websocket transport, no session
management, no socket.io client, namespaces or event dispatch, and no Redis
connection: the Redis options are only a settings object. These pieces are
codecs and helpers to build such things on.