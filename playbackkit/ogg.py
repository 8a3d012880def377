"""Reading and writing of Ogg pages and the packets they carry."""

from __future__ import annotations

import struct
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO

_CAPTURE = b"OggS"
_HEADER = struct.Struct("<4sBBQIIIB")
_CRC_OFFSET = 22
_FLAG_CONTINUED = 0x01
_FLAG_BOS = 0x02
_FLAG_EOS = 0x04
_NO_GRANULE = 0xFFFFFFFFFFFFFFFF
_MAX_SEGMENTS = 255


def _make_crc_table() -> tuple[int, ...]:
    table = []
    for index in range(256):
        reg = index << 24
        for _ in range(8):
            reg = (reg << 1) ^ 0x04C11DB7 if reg & 0x80000000 else reg << 1
        table.append(reg & 0xFFFFFFFF)
    return tuple(table)


_CRC_TABLE = _make_crc_table()


def crc32(data: bytes) -> int:
    """The Ogg page checksum: CRC-32, polynomial 0x04C11DB7, no reflection."""
    crc = 0
    for byte in data:
        crc = ((crc << 8) & 0xFFFFFFFF) ^ _CRC_TABLE[(crc >> 24) ^ byte]
    return crc


class OggReadError(Exception):
    """Raised when an Ogg stream cannot be read."""


class NoCapturePatternFound(OggReadError):
    """Raised when data that should start a page does not."""

    def __init__(self, message: str = "No Ogg capture pattern found") -> None:
        super().__init__(message)


class PacketWriteEndInfo(Enum):
    NORMAL_PACKET = "normal"
    END_PAGE = "end_page"
    END_STREAM = "end_stream"


@dataclass(frozen=True)
class OggPacket:
    data: bytes
    stream_serial: int
    absgp_page: int
    ends_page: bool = False
    ends_stream: bool = False

    def last_in_stream(self) -> bool:
        return self.ends_stream

    def last_in_page(self) -> bool:
        return self.ends_page


@dataclass(frozen=True)
class _Page:
    offset: int
    flags: int
    granule: int
    serial: int
    lacing: bytes
    body: bytes


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise OggReadError(f"unexpected end of data in {what}")
    return data


def _read_page(stream: BinaryIO) -> _Page | None:
    offset = stream.tell()
    header = stream.read(_HEADER.size)
    if not header:
        return None
    if header[:4] != _CAPTURE[: len(header[:4])]:
        raise NoCapturePatternFound()
    if len(header) < _HEADER.size:
        raise OggReadError("unexpected end of data in page header")
    _, version, flags, granule, serial, _, checksum, segments = _HEADER.unpack(header)
    if version != 0:
        raise OggReadError(f"invalid stream structure version {version}")
    lacing = _read_exact(stream, segments, "segment table")
    body = _read_exact(stream, sum(lacing), "page body")
    unsigned = header[:_CRC_OFFSET] + b"\0\0\0\0" + header[_CRC_OFFSET + 4 :]
    if crc32(unsigned + lacing + body) != checksum:
        raise OggReadError("page checksum mismatch")
    return _Page(offset, flags, granule, serial, lacing, body)


class PacketReader:
    """Reassembles packets from the pages of a seekable binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._ready: deque[OggPacket] = deque()
        self._partial: dict[int, bytearray] = {}

    def read_packet(self) -> OggPacket | None:
        """Return the next packet, or None at the end of the data."""
        while not self._ready:
            page = _read_page(self._stream)
            if page is None:
                return None
            self._absorb(page)
        return self._ready.popleft()

    def read_packet_expected(self) -> OggPacket:
        packet = self.read_packet()
        if packet is None:
            raise OggReadError("end of data where a packet was expected")
        return packet

    def _absorb(self, page: _Page) -> None:
        partial = self._partial.pop(page.serial, None)
        continued = bool(page.flags & _FLAG_CONTINUED)
        if not continued:
            partial = None
        skipping = continued and partial is None
        current = partial if partial is not None else bytearray()
        completed: list[bytes] = []
        pos = 0
        for lace in page.lacing:
            if not skipping:
                current += page.body[pos : pos + lace]
            pos += lace
            if lace < 255:
                if not skipping:
                    completed.append(bytes(current))
                skipping = False
                current = bytearray()
        if page.lacing and page.lacing[-1] == 255 and not skipping:
            self._partial[page.serial] = current

        eos = bool(page.flags & _FLAG_EOS)
        last_index = len(completed) - 1
        for index, data in enumerate(completed):
            last = index == last_index
            self._ready.append(
                OggPacket(data, page.serial, page.granule, ends_page=last, ends_stream=last and eos)
            )

    def seek_absgp(self, stream_serial: int | None, absgp: int) -> bool:
        """Position at the last page whose granule position is at most ``absgp``.

        Falls back to the first page of the stream when none qualifies.
        """
        self._stream.seek(0)
        first: int | None = None
        target: int | None = None
        while True:
            try:
                page = _read_page(self._stream)
            except OggReadError:
                break
            if page is None:
                break
            if stream_serial is not None and page.serial != stream_serial:
                continue
            if first is None:
                first = page.offset
            if page.granule != _NO_GRANULE and page.granule <= absgp:
                target = page.offset
        if target is None:
            target = first
        if target is None:
            raise OggReadError("no pages to seek in")
        self._stream.seek(target)
        self.delete_unread_packets()
        return True

    def delete_unread_packets(self) -> None:
        """Drop packets already read from pages but not yet returned."""
        self._ready.clear()
        self._partial.clear()


@dataclass
class _StreamState:
    sequence: int = 0
    started: bool = False
    continued: bool = False
    granule: int | None = None
    lacing: bytearray = field(default_factory=bytearray)
    body: bytearray = field(default_factory=bytearray)


class PacketWriter:
    """Lays packets out in Ogg pages, collecting the bytes in memory."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._streams: dict[int, _StreamState] = {}

    def write_packet(
        self, data: bytes, serial: int, end_info: PacketWriteEndInfo, absgp: int
    ) -> None:
        if not 0 <= serial <= 0xFFFFFFFF:
            raise ValueError(f"stream serial out of range: {serial}")
        if not 0 <= absgp <= _NO_GRANULE:
            raise ValueError(f"granule position out of range: {absgp}")
        state = self._streams.setdefault(serial, _StreamState())
        data = bytes(data)
        laces = [255] * (len(data) // 255) + [len(data) % 255]
        pos = 0
        for lace in laces:
            if len(state.lacing) == _MAX_SEGMENTS:
                self._flush(serial, state, eos=False)
            state.lacing.append(lace)
            state.body += data[pos : pos + lace]
            pos += lace
        state.granule = absgp

        if end_info is not PacketWriteEndInfo.NORMAL_PACKET:
            eos = end_info is PacketWriteEndInfo.END_STREAM
            self._flush(serial, state, eos=eos)
            if eos:
                del self._streams[serial]

    def _flush(self, serial: int, state: _StreamState, *, eos: bool) -> None:
        flags = 0
        if state.continued:
            flags |= _FLAG_CONTINUED
        if not state.started:
            flags |= _FLAG_BOS
        if eos:
            flags |= _FLAG_EOS
        granule = _NO_GRANULE if state.granule is None else state.granule
        header = _HEADER.pack(
            _CAPTURE, 0, flags, granule, serial, state.sequence, 0, len(state.lacing)
        )
        page = bytearray(header)
        page += state.lacing
        page += state.body
        struct.pack_into("<I", page, _CRC_OFFSET, crc32(page))
        self._buffer += page

        state.started = True
        state.sequence = (state.sequence + 1) & 0xFFFFFFFF
        state.continued = bool(state.lacing) and state.lacing[-1] == 255
        state.granule = None
        state.lacing = bytearray()
        state.body = bytearray()

    def take(self) -> bytes:
        """Return the bytes of all finished pages and clear them."""
        data = bytes(self._buffer)
        self._buffer.clear()
        return data