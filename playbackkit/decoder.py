"""Decoded audio packets and the decoder interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator

_OGG_DATA_ON_SAMPLES = "Decoder OggData Error: Can't return OggData on Samples"
_SAMPLES_ON_OGG_DATA = "Decoder Samples Error: Can't return Samples on OggData"


class DecoderError(Exception):
    """Raised when a decoder cannot read or produce audio."""


class AudioPacketError(Exception):
    """Raised when a packet is asked for content of the other kind."""


@dataclass
class AudioPacket:
    """Either float samples in -1.0..=1.0 or raw Ogg data."""

    payload: list[float] | bytes
    is_ogg: bool = False

    def __post_init__(self) -> None:
        if self.is_ogg and not isinstance(self.payload, bytes):
            raise TypeError("Ogg packets carry bytes")
        if not self.is_ogg and not isinstance(self.payload, list):
            raise TypeError("sample packets carry a list of floats")

    @classmethod
    def from_samples(cls, samples: Iterable[float]) -> AudioPacket:
        return cls(list(samples), False)

    @classmethod
    def from_ogg(cls, data: bytes) -> AudioPacket:
        return cls(bytes(data), True)

    @classmethod
    def samples_from_f32(cls, f32_samples: Iterable[float]) -> AudioPacket:
        return cls([float(sample) for sample in f32_samples], False)

    def samples(self) -> list[float]:
        """The samples; raises AudioPacketError on an Ogg packet."""
        if self.is_ogg:
            raise AudioPacketError(_OGG_DATA_ON_SAMPLES)
        return self.payload  # type: ignore[return-value]

    def oggdata(self) -> bytes:
        """The Ogg data; raises AudioPacketError on a sample packet."""
        if not self.is_ogg:
            raise AudioPacketError(_SAMPLES_ON_OGG_DATA)
        return self.payload  # type: ignore[return-value]

    def is_empty(self) -> bool:
        return len(self.payload) == 0


class AudioDecoder(ABC):
    """A source of audio packets that can seek by granule position."""

    @abstractmethod
    def seek(self, absgp: int) -> None:
        """Move to the given absolute granule position."""

    @abstractmethod
    def next_packet(self) -> AudioPacket | None:
        """Return the next packet, or None at the end of the stream."""

    def __iter__(self) -> Iterator[AudioPacket]:
        while (packet := self.next_packet()) is not None:
            yield packet