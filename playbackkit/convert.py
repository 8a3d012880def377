"""Conversion of normalized float samples to output sample formats."""

from __future__ import annotations

import logging
import math
import struct
import sys
from typing import Callable, Iterable

from .dither import Ditherer

logger = logging.getLogger(__name__)


def _round_half_away(value: float) -> float:
    if not math.isfinite(value):
        return value
    truncated = float(math.trunc(value))
    if abs(value - truncated) >= 0.5:
        truncated += math.copysign(1.0, value)
    return truncated


def _saturate(value: float, bits: int) -> int:
    """Cast to a signed integer of ``bits`` width, saturating; NaN gives 0."""
    if math.isnan(value):
        return 0
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1
    if value <= low:
        return low
    if value >= high:
        return high
    return int(value)


def _to_f32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class Converter:
    """Scales float samples in -1.0..=1.0 to integer formats, with optional dither."""

    SCALE_S32 = 2147483648.0
    SCALE_S24 = 8388608.0
    SCALE_S16 = 32768.0

    def __init__(self, ditherer_builder: Callable[[], Ditherer] | None = None) -> None:
        self.ditherer: Ditherer | None = None
        if ditherer_builder is not None:
            self.ditherer = ditherer_builder()
            logger.info("Converting with ditherer: %s", self.ditherer)

    def scale(self, sample: float, factor: float) -> float:
        """Scale, add dither and round half away from zero."""
        dither = self.ditherer.noise() if self.ditherer is not None else 0.0
        return _round_half_away(sample * factor + dither)

    def clamping_scale(self, sample: float, factor: float) -> float:
        """Scale and clamp to the two's complement range of ``factor``."""
        value = self.scale(sample, factor)
        low = -factor
        high = factor - 1.0
        if value < low:
            return low
        if value > high:
            return high
        return value

    def f64_to_f32(self, samples: Iterable[float]) -> list[float]:
        return [_to_f32(sample) for sample in samples]

    def f64_to_s32(self, samples: Iterable[float]) -> list[int]:
        return [_saturate(self.scale(s, self.SCALE_S32), 32) for s in samples]

    def f64_to_s24(self, samples: Iterable[float]) -> list[int]:
        """24-bit samples held in 32-bit integers."""
        return [_saturate(self.clamping_scale(s, self.SCALE_S24), 32) for s in samples]

    def f64_to_s24_3(self, samples: Iterable[float]) -> list[bytes]:
        """24-bit samples as 3-byte native-endian values."""
        return [
            _saturate(self.clamping_scale(s, self.SCALE_S24), 32).to_bytes(
                3, sys.byteorder, signed=True
            )
            for s in samples
        ]

    def f64_to_s16(self, samples: Iterable[float]) -> list[int]:
        return [_saturate(self.scale(s, self.SCALE_S16), 16) for s in samples]