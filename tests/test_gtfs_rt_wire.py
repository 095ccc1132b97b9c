"""Tests for the protobuf wire reader and field dispatcher."""

import pytest

from subway_arrivals.services.gtfs_rt.wire import (
    FIXED32,
    LENGTH_DELIMITED,
    VARINT,
    Field,
    MissingRequiredFieldError,
    ProtoStream,
    TruncatedStreamError,
    WireFormatError,
    decode_message,
)


class TestProtoStream:
    """Unit tests for ProtoStream."""

    def test_read_varint_single_byte(self) -> None:
        stream = ProtoStream(b"\x08")
        assert stream.read_varint() == 8
        assert stream.bytes_left == 0

    def test_read_varint_multi_byte(self) -> None:
        # 1700000000 encoded as a varint
        stream = ProtoStream(b"\x80\xe2\xcf\xaa\x06")
        assert stream.read_varint() == 1700000000

    def test_read_varint_truncated(self) -> None:
        with pytest.raises(TruncatedStreamError):
            ProtoStream(b"\x80\x80").read_varint()

    def test_read_varint_too_long(self) -> None:
        with pytest.raises(WireFormatError):
            ProtoStream(b"\xff" * 11).read_varint()

    def test_read_tag(self) -> None:
        assert ProtoStream(b"\x12").read_tag() == (2, LENGTH_DELIMITED)
        assert ProtoStream(b"\xca\x3e").read_tag() == (1001, LENGTH_DELIMITED)

    def test_read_tag_field_zero(self) -> None:
        with pytest.raises(WireFormatError):
            ProtoStream(b"\x00").read_tag()

    def test_read_substream_is_bounded(self) -> None:
        stream = ProtoStream(b"\x03abcXY")
        sub = stream.read_substream()
        assert sub.bytes_left == 3
        assert sub.read(3) == b"abc"
        assert stream.bytes_left == 2
        assert stream.read(2) == b"XY"

    def test_substream_read_past_end(self) -> None:
        sub = ProtoStream(b"\x02abc").read_substream()
        with pytest.raises(TruncatedStreamError):
            sub.read(3)

    def test_length_prefix_exceeds_remaining(self) -> None:
        with pytest.raises(TruncatedStreamError):
            ProtoStream(b"\x05ab").read_substream()

    def test_read_fixed(self) -> None:
        assert ProtoStream(b"\x01\x00\x00\x00").read_fixed32() == 1
        assert ProtoStream(b"\x00\x01\x00\x00\x00\x00\x00\x00").read_fixed64() == 256

    def test_skip_each_wire_type(self) -> None:
        stream = ProtoStream(b"\x96\x01" + b"\x00" * 8 + b"\x02hi" + b"\x00" * 4)
        stream.skip(VARINT)
        stream.skip(1)
        stream.skip(LENGTH_DELIMITED)
        stream.skip(FIXED32)
        assert stream.bytes_left == 0

    @pytest.mark.parametrize("wire_type", [3, 4, 6, 7])
    def test_skip_unsupported_wire_type(self, wire_type: int) -> None:
        with pytest.raises(WireFormatError):
            ProtoStream(b"\x00" * 8).skip(wire_type)

    def test_accepts_memoryview(self) -> None:
        stream = ProtoStream(memoryview(b"\x2a"))
        assert stream.read_varint() == 42


class TestDecodeMessage:
    """Unit tests for decode_message dispatch."""

    def test_dispatches_in_wire_order(self) -> None:
        calls: list[tuple[str, object]] = []
        fields = {
            1: Field(VARINT, lambda v: calls.append(("num", v))),
            2: Field(LENGTH_DELIMITED, lambda s: calls.append(("text", s.read(s.bytes_left)))),
        }
        decode_message(ProtoStream(b"\x12\x02hi\x08\x07\x12\x01x"), fields)
        assert calls == [("text", b"hi"), ("num", 7), ("text", b"x")]

    def test_unknown_fields_are_skipped(self) -> None:
        seen: list[int] = []
        # field 5 varint, field 6 bytes, then field 1
        data = b"\x28\x01\x32\x03abc\x08\x09"
        decode_message(ProtoStream(data), {1: Field(VARINT, seen.append)})
        assert seen == [9]

    def test_wire_type_mismatch(self) -> None:
        with pytest.raises(WireFormatError, match="wire type"):
            decode_message(ProtoStream(b"\x08\x01"), {1: Field(LENGTH_DELIMITED, print)})

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredFieldError, match=r"\[2\]"):
            decode_message(
                ProtoStream(b"\x08\x01"),
                {1: Field(VARINT, lambda v: None), 2: Field(VARINT, lambda v: None)},
                required=(1, 2),
                name="Thing",
            )

    def test_required_satisfied(self) -> None:
        decode_message(
            ProtoStream(b"\x08\x01"), {1: Field(VARINT, lambda v: None)}, required=(1,)
        )

    def test_handler_errors_propagate(self) -> None:
        def boom(_value: int) -> None:
            msg = "bad"
            raise WireFormatError(msg)

        with pytest.raises(WireFormatError, match="bad"):
            decode_message(ProtoStream(b"\x08\x01"), {1: Field(VARINT, boom)})

    def test_empty_message(self) -> None:
        decode_message(ProtoStream(b""), {})
