"""Mappings between linear volume positions and output amplitude."""

from __future__ import annotations

import logging
import math

from .config import VolumeCtrl, VolumeCtrlKind, db_to_ratio

logger = logging.getLogger(__name__)

_EPSILON = 2.220446049250313e-16


class LogMapping:
    """Exponential curve giving near-linear perceived loudness."""

    @staticmethod
    def _coefficients(db_range: float) -> tuple[float, float]:
        db_ratio = db_to_ratio(db_range)
        return db_ratio, math.log(db_ratio)

    @staticmethod
    def linear_to_mapped(normalized_volume: float, db_range: float) -> float:
        db_ratio, ideal_factor = LogMapping._coefficients(db_range)
        return math.exp(ideal_factor * normalized_volume) / db_ratio

    @staticmethod
    def mapped_to_linear(mapped_volume: float, db_range: float) -> float:
        db_ratio, ideal_factor = LogMapping._coefficients(db_range)
        return math.log(db_ratio * mapped_volume) / ideal_factor


class CubicMapping:
    """Cubic curve in the style of the ALSA mixer."""

    @staticmethod
    def _min_norm(db_range: float) -> float:
        # 60 here is the cubic voltage to dB ratio, not the default range.
        return math.pow(10.0, -1.0 * db_range / 60.0)

    @staticmethod
    def linear_to_mapped(normalized_volume: float, db_range: float) -> float:
        min_norm = CubicMapping._min_norm(db_range)
        return (normalized_volume * (1.0 - min_norm) + min_norm) ** 3

    @staticmethod
    def mapped_to_linear(mapped_volume: float, db_range: float) -> float:
        min_norm = CubicMapping._min_norm(db_range)
        return (math.pow(mapped_volume, 1.0 / 3.0) - min_norm) / (1.0 - min_norm)


def to_mapped(volume_ctrl: VolumeCtrl, volume: int) -> float:
    """Map a volume in 0..=MAX_VOLUME to an amplitude in 0.0..=1.0."""
    if not 0 <= volume <= VolumeCtrl.MAX_VOLUME:
        raise ValueError(f"volume out of range: {volume}")
    if volume == 0:
        return 0.0
    if volume == VolumeCtrl.MAX_VOLUME:
        return 1.0

    normalized = volume / VolumeCtrl.MAX_VOLUME
    if volume_ctrl.range_ok():
        db_range = volume_ctrl.effective_db_range()
        if volume_ctrl.kind is VolumeCtrlKind.CUBIC:
            mapped = CubicMapping.linear_to_mapped(normalized, db_range)
        elif volume_ctrl.kind is VolumeCtrlKind.LOG:
            mapped = LogMapping.linear_to_mapped(normalized, db_range)
        else:
            mapped = normalized
    else:
        logger.error(
            "%r does not work with 0 dB range, using linear mapping instead", volume_ctrl
        )
        mapped = normalized

    logger.debug("Input volume %d mapped to: %.2f%%", volume, mapped * 100.0)
    return mapped


def from_mapped(volume_ctrl: VolumeCtrl, mapped_volume: float) -> int:
    """Map an amplitude in 0.0..=1.0 back to a volume in 0..=MAX_VOLUME."""
    if abs(mapped_volume - 0.0) <= _EPSILON:
        return 0
    if abs(mapped_volume - 1.0) <= _EPSILON:
        return VolumeCtrl.MAX_VOLUME

    if volume_ctrl.range_ok():
        db_range = volume_ctrl.effective_db_range()
        if volume_ctrl.kind is VolumeCtrlKind.CUBIC:
            unmapped = CubicMapping.mapped_to_linear(mapped_volume, db_range)
        elif volume_ctrl.kind is VolumeCtrlKind.LOG:
            unmapped = LogMapping.mapped_to_linear(mapped_volume, db_range)
        else:
            unmapped = mapped_volume
    else:
        logger.error(
            "%r does not work with 0 dB range, using linear mapping instead", volume_ctrl
        )
        unmapped = mapped_volume

    scaled = unmapped * VolumeCtrl.MAX_VOLUME
    if math.isnan(scaled) or scaled <= 0:
        return 0
    if scaled >= VolumeCtrl.MAX_VOLUME:
        return VolumeCtrl.MAX_VOLUME
    return int(scaled)