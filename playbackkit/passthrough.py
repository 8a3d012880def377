"""A decoder that passes Ogg Vorbis data through, re-paged as a fresh stream."""

from __future__ import annotations

import logging
import time
from typing import BinaryIO

from .decoder import AudioDecoder, AudioPacket, DecoderError
from .ogg import (
    NoCapturePatternFound,
    OggPacket,
    OggReadError,
    PacketReader,
    PacketWriteEndInfo,
    PacketWriter,
)

logger = logging.getLogger(__name__)

_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF


def _error(message: object) -> DecoderError:
    return DecoderError(f"Passthrough Decoder Error: {message}")


class PassthroughDecoder(AudioDecoder):
    """Reads Vorbis packets from an Ogg stream and emits them as Ogg pages."""

    def __init__(self, stream: BinaryIO, *, stream_serial: int | None = None) -> None:
        self._reader = PacketReader(stream)
        self._writer = PacketWriter()
        if stream_serial is None:
            stream_serial = time.time_ns() // 1_000_000
        self._stream_serial = stream_serial & _U32
        logger.info("Starting passthrough track with serial %d", self._stream_serial)

        self._ident = self._header(1)
        self._comment = self._header(3)
        self._setup = self._header(5)
        self._reader.delete_unread_packets()

        self._ofsgp_page = 0
        self._eos = False
        self._bos = False

    def _header(self, code: int) -> bytes:
        try:
            packet = self._reader.read_packet_expected()
        except OggReadError as exc:
            raise _error(exc) from exc
        if not packet.data:
            raise _error("Invalid Data")
        logger.debug("Vorbis header type %d", packet.data[0])
        if packet.data[0] != code:
            raise _error("Invalid Data")
        return packet.data

    def _read(self) -> OggPacket | None:
        try:
            return self._reader.read_packet()
        except OggReadError as exc:
            raise _error(exc) from exc

    def seek(self, absgp: int) -> None:
        # Close the previous stream with an end-of-stream page if it lacks one.
        if self._bos and not self._eos:
            try:
                packet = self._reader.read_packet()
            except OggReadError:
                packet = None
            if packet is not None:
                self._writer.write_packet(
                    packet.data,
                    self._stream_serial,
                    PacketWriteEndInfo.END_STREAM,
                    (packet.absgp_page - self._ofsgp_page) & _U64,
                )
            else:
                logger.warning("Cannot write EoS after seeking")

        self._eos = False
        self._bos = False
        self._ofsgp_page = 0
        self._stream_serial = (self._stream_serial + 1) & _U32

        try:
            self._reader.seek_absgp(None, absgp)
        except OggReadError as exc:
            raise _error(exc) from exc

        packet = self._read()
        if packet is None:
            raise _error("Packet is None")
        self._ofsgp_page = packet.absgp_page
        logger.debug("Seek to offset page %d", self._ofsgp_page)

    def _write_headers(self) -> None:
        serial = self._stream_serial
        self._writer.write_packet(self._ident, serial, PacketWriteEndInfo.END_PAGE, 0)
        self._writer.write_packet(self._comment, serial, PacketWriteEndInfo.NORMAL_PACKET, 0)
        self._writer.write_packet(self._setup, serial, PacketWriteEndInfo.END_PAGE, 0)
        self._bos = True
        logger.debug("Wrote Ogg headers")

    def next_packet(self) -> AudioPacket | None:
        if not self._bos:
            self._write_headers()

        while True:
            try:
                packet = self._reader.read_packet()
            except NoCapturePatternFound:
                packet = None
            except OggReadError as exc:
                raise _error(exc) from exc
            if packet is None:
                logger.info("end of streaming")
                return None

            granule = packet.absgp_page
            # Skip until there is audio with a usable granule position.
            if granule == 0 or granule == self._ofsgp_page:
                continue

            if packet.last_in_stream():
                self._eos = True
                end_info = PacketWriteEndInfo.END_STREAM
            elif packet.last_in_page():
                end_info = PacketWriteEndInfo.END_PAGE
            else:
                end_info = PacketWriteEndInfo.NORMAL_PACKET

            self._writer.write_packet(
                packet.data,
                self._stream_serial,
                end_info,
                (granule - self._ofsgp_page) & _U64,
            )

            data = self._writer.take()
            if data:
                return AudioPacket.from_ogg(data)