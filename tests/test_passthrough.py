import io

import pytest

from playbackkit.decoder import DecoderError
from playbackkit.ogg import PacketReader, PacketWriteEndInfo, PacketWriter
from playbackkit.passthrough import PassthroughDecoder

IDENT = b"\x01vorbis-ident"
COMMENT = b"\x03vorbis-comment"
SETUP = b"\x05vorbis-setup"


def _source(ident=IDENT):
    writer = PacketWriter()
    writer.write_packet(ident, 7, PacketWriteEndInfo.END_PAGE, 0)
    writer.write_packet(COMMENT, 7, PacketWriteEndInfo.NORMAL_PACKET, 0)
    writer.write_packet(SETUP, 7, PacketWriteEndInfo.END_PAGE, 0)
    writer.write_packet(b"a1", 7, PacketWriteEndInfo.END_PAGE, 100)
    writer.write_packet(b"a2", 7, PacketWriteEndInfo.END_PAGE, 200)
    writer.write_packet(b"a3", 7, PacketWriteEndInfo.END_STREAM, 300)
    return io.BytesIO(writer.take())


def _parse(chunks):
    reader = PacketReader(io.BytesIO(b"".join(chunks)))
    packets = []
    while (packet := reader.read_packet()) is not None:
        packets.append(packet)
    return packets


def test_full_stream_is_repaged_with_new_serial():
    decoder = PassthroughDecoder(_source(), stream_serial=1234)
    packets = list(decoder)
    assert len(packets) == 3
    parsed = _parse(p.oggdata() for p in packets)
    assert [p.data for p in parsed] == [IDENT, COMMENT, SETUP, b"a1", b"a2", b"a3"]
    assert [p.absgp_page for p in parsed] == [0, 0, 0, 100, 200, 300]
    assert all(p.stream_serial == 1234 for p in parsed)
    assert parsed[-1].last_in_stream()
    assert not any(p.last_in_stream() for p in parsed[:-1])


def test_end_of_stream_returns_none():
    decoder = PassthroughDecoder(_source(), stream_serial=1)
    for _ in range(3):
        assert decoder.next_packet().is_empty() is False
    assert decoder.next_packet() is None


def test_seek_closes_stream_and_starts_relative_one():
    decoder = PassthroughDecoder(_source(), stream_serial=1234)
    chunks = [decoder.next_packet().oggdata()]
    decoder.seek(200)
    chunks.extend(p.oggdata() for p in decoder)
    parsed = _parse(chunks)

    first = [p for p in parsed if p.stream_serial == 1234]
    second = [p for p in parsed if p.stream_serial == 1235]
    assert [p.data for p in first] == [IDENT, COMMENT, SETUP, b"a1", b"a2"]
    assert first[-1].last_in_stream()
    assert first[-1].absgp_page == 200
    assert [p.data for p in second] == [IDENT, COMMENT, SETUP, b"a3"]
    assert second[-1].absgp_page == 100
    assert second[-1].last_in_stream()


def test_serial_wraps_to_32_bits():
    decoder = PassthroughDecoder(_source(), stream_serial=0xFFFFFFFF)
    decoder.seek(100)
    parsed = _parse(p.oggdata() for p in decoder)
    assert {p.stream_serial for p in parsed} == {0}


def test_wrong_header_type_is_invalid():
    with pytest.raises(DecoderError, match="Invalid Data"):
        PassthroughDecoder(_source(ident=b"\x02bad"), stream_serial=1)


def test_empty_input_raises():
    with pytest.raises(DecoderError):
        PassthroughDecoder(io.BytesIO(b""), stream_serial=1)


def test_garbage_input_raises():
    with pytest.raises(DecoderError, match="Passthrough Decoder Error"):
        PassthroughDecoder(io.BytesIO(b"definitely not ogg data"), stream_serial=1)