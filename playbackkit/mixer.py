"""Volume mixers and the filters they apply to the sample stream."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, ClassVar, MutableSequence

from .config import VolumeCtrl
from .mappings import from_mapped, to_mapped

logger = logging.getLogger(__name__)


@dataclass
class MixerConfig:
    device: str = "default"
    control: str = "PCM"
    index: int = 0
    volume_ctrl: VolumeCtrl = field(default_factory=VolumeCtrl)


class AudioFilter(ABC):
    """Modifies samples in place before they reach the sink."""

    @abstractmethod
    def modify_stream(self, data: MutableSequence[float]) -> None:
        """Change ``data`` in place."""


class Mixer(ABC):
    """Controls playback volume in the range 0..=VolumeCtrl.MAX_VOLUME."""

    NAME: ClassVar[str] = ""

    def __init__(self, config: MixerConfig | None = None) -> None:
        self.config = config if config is not None else MixerConfig()

    @abstractmethod
    def set_volume(self, volume: int) -> None:
        """Set the volume."""

    @abstractmethod
    def volume(self) -> int:
        """Return the current volume."""

    def get_audio_filter(self) -> AudioFilter | None:
        return None


class _SharedVolume:
    """A mapped volume shared between a mixer and its filters."""

    __slots__ = ("value",)

    def __init__(self, value: float) -> None:
        self.value = value


class _SoftVolumeApplier(AudioFilter):
    def __init__(self, volume: _SharedVolume) -> None:
        self._volume = volume

    def modify_stream(self, data: MutableSequence[float]) -> None:
        volume = self._volume.value
        if volume < 1.0:
            data[:] = [sample * volume for sample in data]


class SoftMixer(Mixer):
    """Applies volume by scaling the samples themselves."""

    NAME: ClassVar[str] = "softvol"

    def __init__(self, config: MixerConfig | None = None) -> None:
        super().__init__(config)
        self._volume_ctrl = self.config.volume_ctrl
        logger.info("Mixing with softvol and volume control: %r", self._volume_ctrl)
        self._shared = _SharedVolume(0.5)

    def volume(self) -> int:
        return from_mapped(self._volume_ctrl, self._shared.value)

    def set_volume(self, volume: int) -> None:
        self._shared.value = to_mapped(self._volume_ctrl, volume)

    def get_audio_filter(self) -> AudioFilter:
        return _SoftVolumeApplier(self._shared)


MixerFn = Callable[[MixerConfig], Mixer]

_MIXERS: dict[str, type[Mixer]] = {SoftMixer.NAME: SoftMixer}


def find(name: str | None) -> type[Mixer] | None:
    """Return the mixer class for ``name``; None selects the soft mixer."""
    if name is None:
        return SoftMixer
    return _MIXERS.get(name)