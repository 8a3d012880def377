"""Dither noise generators used when requantizing float samples to integers.

Triangular dithering is the default for integer output. Gaussian dithering
sounds more like analog hiss. High-passed dithering moves the noise up in
frequency and only suits DACs without noise shaping. Dithering S32 or F32
output gains nothing audible.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Callable, ClassVar

_NUM_CHANNELS = 2


class Ditherer(ABC):
    """A source of dither noise, measured in least significant bits."""

    NAME: ClassVar[str] = ""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    @abstractmethod
    def noise(self) -> float:
        """Return the next noise value."""

    def __str__(self) -> str:
        return self.NAME


class TriangularDitherer(Ditherer):
    """Triangular PDF noise spanning 2 LSB peak to peak."""

    NAME: ClassVar[str] = "tpdf"

    def noise(self) -> float:
        return self._rng.triangular(-1.0, 1.0, 0.0)


class GaussianDitherer(Ditherer):
    """Gaussian noise with 1/2 LSB RMS."""

    NAME: ClassVar[str] = "gpdf"

    def noise(self) -> float:
        return self._rng.gauss(0.0, 0.5)


class HighPassDitherer(Ditherer):
    """Uniform noise high-passed per channel: new minus previous noise."""

    NAME: ClassVar[str] = "tpdf_hp"

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(rng)
        self._active_channel = 0
        self._previous_noises = [0.0] * _NUM_CHANNELS

    def noise(self) -> float:
        new_noise = self._rng.uniform(-0.5, 0.5)
        channel = self._active_channel
        high_passed = new_noise - self._previous_noises[channel]
        self._previous_noises[channel] = new_noise
        self._active_channel ^= 1
        return high_passed


DithererBuilder = Callable[[], Ditherer]

_DITHERERS: dict[str, type[Ditherer]] = {
    cls.NAME: cls for cls in (TriangularDitherer, GaussianDitherer, HighPassDitherer)
}


def find_ditherer(name: str | None) -> type[Ditherer] | None:
    """Return the ditherer class registered under ``name``, or None."""
    if name is None:
        return None
    return _DITHERERS.get(name)