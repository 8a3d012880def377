"""The audio sink interface and the errors that sinks raise."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import ClassVar, Sequence

from .config import AudioFormat
from .convert import Converter
from .decoder import AudioPacket


class SinkError(Exception):
    """Raised when an audio sink fails."""

    PREFIX: ClassVar[str] = "Audio Sink Error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{self.PREFIX}: {detail}")


class NotConnectedError(SinkError):
    PREFIX: ClassVar[str] = "Audio Sink Error Not Connected"


class SinkConnectionRefusedError(SinkError):
    PREFIX: ClassVar[str] = "Audio Sink Error Connection Refused"


class OnWriteError(SinkError):
    PREFIX: ClassVar[str] = "Audio Sink Error On Write"


class InvalidParamsError(SinkError):
    PREFIX: ClassVar[str] = "Audio Sink Error Invalid Parameters"


class Sink(ABC):
    """An audio output that accepts decoded packets."""

    NAME: ClassVar[str] = ""

    def start(self) -> None:
        """Prepare the output for writing."""

    def stop(self) -> None:
        """Finish writing and release the output."""

    @abstractmethod
    def write(self, packet: AudioPacket, converter: Converter) -> None:
        """Send one packet to the output."""


def _pack(code: str, values: Sequence[float | int]) -> bytes:
    return struct.pack(f"={len(values)}{code}", *values)


def encode_samples(
    samples: Sequence[float], audio_format: AudioFormat, converter: Converter
) -> bytes:
    """Encode float samples as native-endian bytes of ``audio_format``."""
    if audio_format is AudioFormat.F64:
        return _pack("d", samples)
    if audio_format is AudioFormat.F32:
        return _pack("f", converter.f64_to_f32(samples))
    if audio_format is AudioFormat.S32:
        return _pack("i", converter.f64_to_s32(samples))
    if audio_format is AudioFormat.S24:
        return _pack("i", converter.f64_to_s24(samples))
    if audio_format is AudioFormat.S24_3:
        return b"".join(converter.f64_to_s24_3(samples))
    if audio_format is AudioFormat.S16:
        return _pack("h", converter.f64_to_s16(samples))
    raise InvalidParamsError(f"unsupported audio format {audio_format!r}")


class BytesSink(Sink):
    """A sink that takes raw bytes; samples are encoded in its format."""

    def __init__(self, audio_format: AudioFormat = AudioFormat.S16) -> None:
        self.format = audio_format

    def write(self, packet: AudioPacket, converter: Converter) -> None:
        if packet.is_ogg:
            self.write_bytes(packet.oggdata())
        else:
            self.write_bytes(encode_samples(packet.samples(), self.format, converter))

    @abstractmethod
    def write_bytes(self, data: bytes) -> None:
        """Send raw bytes to the output."""