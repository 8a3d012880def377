"""Player and volume-control configuration."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Callable, ClassVar

from .dither import Ditherer, TriangularDitherer

logger = logging.getLogger(__name__)


def db_to_ratio(db: float) -> float:
    """Convert a decibel value to an amplitude ratio."""
    return math.pow(10.0, db / 20.0)


def ratio_to_db(ratio: float) -> float:
    """Convert an amplitude ratio to decibels."""
    return 20.0 * math.log10(ratio)


class Bitrate(Enum):
    BITRATE96 = 96
    BITRATE160 = 160
    BITRATE320 = 320

    @classmethod
    def parse(cls, s: str) -> Bitrate:
        for member in cls:
            if s == str(member.value):
                return member
        raise ValueError(f"invalid bitrate: {s!r}")


class AudioFormat(Enum):
    F64 = "F64"
    F32 = "F32"
    S32 = "S32"
    S24 = "S24"
    S24_3 = "S24_3"
    S16 = "S16"

    @classmethod
    def parse(cls, s: str) -> AudioFormat:
        try:
            return cls(s.upper())
        except ValueError:
            raise ValueError(f"invalid audio format: {s!r}") from None

    def size(self) -> int:
        """Bytes used to store one sample in this format."""
        return _FORMAT_SIZES[self]


_FORMAT_SIZES = {
    AudioFormat.F64: 8,
    AudioFormat.F32: 4,
    AudioFormat.S32: 4,
    AudioFormat.S24: 4,  # 24-bit samples padded into a 32-bit word
    AudioFormat.S24_3: 3,
    AudioFormat.S16: 2,
}


class NormalisationType(Enum):
    ALBUM = "album"
    TRACK = "track"
    AUTO = "auto"

    @classmethod
    def parse(cls, s: str) -> NormalisationType:
        try:
            return cls(s.lower())
        except ValueError:
            raise ValueError(f"invalid normalisation type: {s!r}") from None


class NormalisationMethod(Enum):
    BASIC = "basic"
    DYNAMIC = "dynamic"

    @classmethod
    def parse(cls, s: str) -> NormalisationMethod:
        try:
            return cls(s.lower())
        except ValueError:
            raise ValueError(f"invalid normalisation method: {s!r}") from None


@dataclass
class PlayerConfig:
    bitrate: Bitrate = Bitrate.BITRATE160
    gapless: bool = True
    passthrough: bool = False
    normalisation: bool = False
    normalisation_type: NormalisationType = NormalisationType.AUTO
    normalisation_method: NormalisationMethod = NormalisationMethod.DYNAMIC
    normalisation_pregain: float = 0.0
    normalisation_threshold: float = field(default_factory=lambda: db_to_ratio(-2.0))
    normalisation_attack: timedelta = timedelta(milliseconds=5)
    normalisation_release: timedelta = timedelta(milliseconds=100)
    normalisation_knee: float = 1.0
    # A builder, so the ditherer is created where it will be used.
    ditherer: Callable[[], Ditherer] | None = TriangularDitherer


class VolumeCtrlKind(Enum):
    CUBIC = "cubic"
    FIXED = "fixed"
    LINEAR = "linear"
    LOG = "log"


@dataclass
class VolumeCtrl:
    """A volume control curve; cubic and log curves carry a dB range."""

    MAX_VOLUME: ClassVar[int] = 0xFFFF
    DEFAULT_DB_RANGE: ClassVar[float] = 60.0

    kind: VolumeCtrlKind = VolumeCtrlKind.LOG
    db_range: float | None = 60.0

    @classmethod
    def parse(cls, s: str) -> VolumeCtrl:
        return cls.from_str_with_range(s, cls.DEFAULT_DB_RANGE)

    @classmethod
    def from_str_with_range(cls, s: str, db_range: float) -> VolumeCtrl:
        try:
            kind = VolumeCtrlKind(s.lower())
        except ValueError:
            raise ValueError(f"invalid volume control: {s!r}") from None
        if kind in (VolumeCtrlKind.CUBIC, VolumeCtrlKind.LOG):
            return cls(kind, db_range)
        return cls(kind, None)

    def effective_db_range(self) -> float:
        """The dB range this control spans."""
        if self.kind is VolumeCtrlKind.FIXED:
            return 0.0
        if self.kind is VolumeCtrlKind.LINEAR:
            return self.DEFAULT_DB_RANGE
        return float(self.db_range if self.db_range is not None else 0.0)

    def set_db_range(self, new_db_range: float) -> None:
        if self.kind in (VolumeCtrlKind.CUBIC, VolumeCtrlKind.LOG):
            self.db_range = new_db_range
        else:
            logger.error("Invalid to set dB range for volume control type %r", self)
        logger.debug("Volume control is now %r", self)

    def range_ok(self) -> bool:
        return self.effective_db_range() > 0.0 or self.kind in (
            VolumeCtrlKind.FIXED,
            VolumeCtrlKind.LINEAR,
        )