import io
import struct

import pytest

from playbackkit.ogg import (
    NoCapturePatternFound,
    OggReadError,
    PacketReader,
    PacketWriteEndInfo,
    PacketWriter,
    crc32,
)


def _read_all(data):
    reader = PacketReader(io.BytesIO(data))
    packets = []
    while (packet := reader.read_packet()) is not None:
        packets.append(packet)
    return packets


def _three_page_stream():
    writer = PacketWriter()
    writer.write_packet(b"first", 9, PacketWriteEndInfo.END_PAGE, 100)
    writer.write_packet(b"second", 9, PacketWriteEndInfo.END_PAGE, 200)
    writer.write_packet(b"third", 9, PacketWriteEndInfo.END_STREAM, 300)
    return writer.take()


def test_crc_of_empty_is_zero():
    assert crc32(b"") == 0


def test_crc_check_value():
    assert crc32(b"123456789") == 0x89A1897F


def test_first_page_header_fields():
    writer = PacketWriter()
    writer.write_packet(b"hello", 42, PacketWriteEndInfo.END_PAGE, 7)
    page = writer.take()
    assert page[:6] == b"OggS\x00\x02"
    assert struct.unpack_from("<Q", page, 6)[0] == 7
    assert struct.unpack_from("<I", page, 14)[0] == 42


def test_normal_packet_produces_no_page():
    writer = PacketWriter()
    writer.write_packet(b"pending", 1, PacketWriteEndInfo.NORMAL_PACKET, 0)
    assert writer.take() == b""


def test_take_clears_buffer():
    writer = PacketWriter()
    writer.write_packet(b"x", 1, PacketWriteEndInfo.END_PAGE, 0)
    assert writer.take()
    assert writer.take() == b""


def test_round_trip_packets_and_flags():
    writer = PacketWriter()
    writer.write_packet(b"a", 5, PacketWriteEndInfo.NORMAL_PACKET, 10)
    writer.write_packet(b"bb", 5, PacketWriteEndInfo.END_PAGE, 20)
    writer.write_packet(b"ccc", 5, PacketWriteEndInfo.END_STREAM, 30)
    packets = _read_all(writer.take())
    assert [p.data for p in packets] == [b"a", b"bb", b"ccc"]
    assert [p.absgp_page for p in packets] == [20, 20, 30]
    assert [p.last_in_page() for p in packets] == [False, True, True]
    assert [p.last_in_stream() for p in packets] == [False, False, True]
    assert all(p.stream_serial == 5 for p in packets)


@pytest.mark.parametrize("size", [0, 254, 255, 510, 70000])
def test_round_trip_packet_sizes(size):
    payload = bytes(i % 251 for i in range(size))
    writer = PacketWriter()
    writer.write_packet(payload, 3, PacketWriteEndInfo.END_STREAM, 1234)
    packets = _read_all(writer.take())
    assert len(packets) == 1
    assert packets[0].data == payload
    assert packets[0].absgp_page == 1234


def test_interleaved_streams_are_separated():
    writer = PacketWriter()
    writer.write_packet(b"one", 1, PacketWriteEndInfo.END_PAGE, 1)
    writer.write_packet(b"two", 2, PacketWriteEndInfo.END_PAGE, 1)
    packets = _read_all(writer.take())
    assert [(p.stream_serial, p.data) for p in packets] == [(1, b"one"), (2, b"two")]


def test_corrupted_page_fails_checksum():
    data = bytearray(_three_page_stream())
    data[30] ^= 0xFF
    with pytest.raises(OggReadError):
        _read_all(bytes(data))


def test_garbage_has_no_capture_pattern():
    reader = PacketReader(io.BytesIO(b"this is not an ogg stream at all"))
    with pytest.raises(NoCapturePatternFound):
        reader.read_packet()


def test_empty_stream_reads_none():
    reader = PacketReader(io.BytesIO(b""))
    assert reader.read_packet() is None
    with pytest.raises(OggReadError):
        reader.read_packet_expected()


@pytest.mark.parametrize("goal, expected", [(250, b"second"), (300, b"third"), (50, b"first")])
def test_seek_absgp(goal, expected):
    reader = PacketReader(io.BytesIO(_three_page_stream()))
    assert reader.seek_absgp(None, goal) is True
    assert reader.read_packet().data == expected


def test_seek_on_unknown_serial_fails():
    reader = PacketReader(io.BytesIO(_three_page_stream()))
    with pytest.raises(OggReadError):
        reader.seek_absgp(77, 100)


def test_delete_unread_packets():
    writer = PacketWriter()
    writer.write_packet(b"p1", 4, PacketWriteEndInfo.NORMAL_PACKET, 0)
    writer.write_packet(b"p2", 4, PacketWriteEndInfo.END_PAGE, 0)
    writer.write_packet(b"p3", 4, PacketWriteEndInfo.END_STREAM, 10)
    reader = PacketReader(io.BytesIO(writer.take()))
    assert reader.read_packet().data == b"p1"
    reader.delete_unread_packets()
    assert reader.read_packet().data == b"p3"


def test_invalid_serial_rejected():
    with pytest.raises(ValueError):
        PacketWriter().write_packet(b"x", -1, PacketWriteEndInfo.END_PAGE, 0)