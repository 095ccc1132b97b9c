"""Streaming protobuf wire-format reader and field dispatcher.

Messages are walked field by field over a bounded view of the input buffer.
Nested messages are handed to callbacks as bounded substreams, so nothing
larger than a single scalar field is ever copied out of the buffer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

# Protobuf wire types
VARINT = 0
FIXED64 = 1
LENGTH_DELIMITED = 2
START_GROUP = 3
END_GROUP = 4
FIXED32 = 5

MAX_VARINT_BYTES = 10


class WireFormatError(Exception):
    """Raised when the byte stream is not a valid protobuf encoding."""


class TruncatedStreamError(WireFormatError):
    """Raised when a read runs past the end of the stream."""


class MissingRequiredFieldError(WireFormatError):
    """Raised when a required field never appeared in a message."""


class ProtoStream:
    """Read cursor over ``data[start:end]``."""

    def __init__(self, data: bytes | memoryview, start: int = 0, end: int | None = None) -> None:
        self._data = data if isinstance(data, memoryview) else memoryview(data)
        self._pos = start
        self._end = len(self._data) if end is None else end

    @property
    def bytes_left(self) -> int:
        return self._end - self._pos

    def read(self, count: int) -> bytes:
        if count > self.bytes_left:
            msg = f"need {count} bytes, {self.bytes_left} left"
            raise TruncatedStreamError(msg)
        chunk = bytes(self._data[self._pos : self._pos + count])
        self._pos += count
        return chunk

    def read_varint(self) -> int:
        result = 0
        shift = 0
        for _ in range(MAX_VARINT_BYTES):
            if self._pos >= self._end:
                msg = "varint runs past end of stream"
                raise TruncatedStreamError(msg)
            byte = self._data[self._pos]
            self._pos += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7
        msg = "varint longer than 10 bytes"
        raise WireFormatError(msg)

    def read_tag(self) -> tuple[int, int]:
        key = self.read_varint()
        field_number = key >> 3
        if field_number == 0:
            msg = "invalid field number 0"
            raise WireFormatError(msg)
        return field_number, key & 0x07

    def read_fixed32(self) -> int:
        return int.from_bytes(self.read(4), "little")

    def read_fixed64(self) -> int:
        return int.from_bytes(self.read(8), "little")

    def read_substream(self) -> ProtoStream:
        """Open the next length-delimited payload and step over it."""
        length = self.read_varint()
        if length > self.bytes_left:
            msg = f"length prefix {length} exceeds {self.bytes_left} remaining bytes"
            raise TruncatedStreamError(msg)
        sub = ProtoStream(self._data, self._pos, self._pos + length)
        self._pos += length
        return sub

    def skip(self, wire_type: int) -> None:
        if wire_type == VARINT:
            self.read_varint()
        elif wire_type == FIXED64:
            self.read(8)
        elif wire_type == LENGTH_DELIMITED:
            self.read_substream()
        elif wire_type == FIXED32:
            self.read(4)
        else:
            msg = f"unsupported wire type {wire_type}"
            raise WireFormatError(msg)


class Field(NamedTuple):
    """Binds a field number's expected wire type to its handler.

    Length-delimited handlers receive a ``ProtoStream`` bounded to the
    payload; varint and fixed handlers receive the integer value.
    """

    wire_type: int
    handler: Callable[[Any], Any]


def _read_value(stream: ProtoStream, wire_type: int) -> Any:
    if wire_type == VARINT:
        return stream.read_varint()
    if wire_type == LENGTH_DELIMITED:
        return stream.read_substream()
    if wire_type == FIXED32:
        return stream.read_fixed32()
    if wire_type == FIXED64:
        return stream.read_fixed64()
    msg = f"unsupported wire type {wire_type}"
    raise WireFormatError(msg)


def decode_message(
    stream: ProtoStream,
    fields: Mapping[int, Field],
    *,
    required: Collection[int] = (),
    name: str = "message",
) -> None:
    """Stream one message, dispatching known fields in wire order.

    Unknown fields are skipped. Raises:
        WireFormatError: On malformed input, a wire type mismatch on a known
            field, or a required field that never appeared.
    """
    seen: set[int] = set()

    while stream.bytes_left > 0:
        field_number, wire_type = stream.read_tag()
        entry = fields.get(field_number)
        if entry is None:
            stream.skip(wire_type)
            continue

        if wire_type != entry.wire_type:
            msg = (
                f"{name} field {field_number}: wire type {wire_type}, "
                f"expected {entry.wire_type}"
            )
            raise WireFormatError(msg)

        entry.handler(_read_value(stream, wire_type))
        seen.add(field_number)

    missing = sorted(set(required) - seen)
    if missing:
        msg = f"{name} missing required fields {missing}"
        raise MissingRequiredFieldError(msg)

