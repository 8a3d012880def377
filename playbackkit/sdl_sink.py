"""A sink that queues audio on an SDL playback device."""

from __future__ import annotations

import logging
import struct
import threading
import time
from typing import ClassVar, Protocol

from .backend import InvalidParamsError, OnWriteError, Sink
from .config import AudioFormat
from .constants import NUM_CHANNELS, SAMPLE_RATE
from .convert import Converter
from .decoder import AudioPacket, AudioPacketError

logger = logging.getLogger(__name__)

_SUPPORTED = (AudioFormat.F32, AudioFormat.S32, AudioFormat.S16)
_STRUCT_CODES = {AudioFormat.F32: "f", AudioFormat.S32: "i", AudioFormat.S16: "h"}


class AudioQueue(Protocol):
    """A device that plays bytes queued on it."""

    def queue(self, data: bytes) -> None: ...

    def size(self) -> int: ...

    def clear(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...


class _PygameAudioQueue:
    """An SDL playback device fed from a byte queue."""

    def __init__(self, audio_format: AudioFormat) -> None:
        import pygame
        from pygame._sdl2.audio import AUDIO_F32, AUDIO_S16, AUDIO_S32, AudioDevice

        sdl_formats = {
            AudioFormat.F32: AUDIO_F32,
            AudioFormat.S32: AUDIO_S32,
            AudioFormat.S16: AUDIO_S16,
        }
        pygame.init()
        self._lock = threading.Lock()
        self._buffer = bytearray()
        self._device = AudioDevice(
            devicename=None,
            iscapture=False,
            frequency=SAMPLE_RATE,
            audioformat=sdl_formats[audio_format],
            numchannels=NUM_CHANNELS,
            chunksize=1024,
            allowed_changes=0,
            callback=self._fill,
        )

    def _fill(self, _device: object, stream: memoryview) -> None:
        wanted = len(stream)
        with self._lock:
            count = min(wanted, len(self._buffer))
            stream[:count] = bytes(self._buffer[:count])
            del self._buffer[:count]
        if count < wanted:
            stream[count:] = bytes(wanted - count)

    def queue(self, data: bytes) -> None:
        with self._lock:
            self._buffer += data

    def size(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def pause(self) -> None:
        self._device.pause(1)

    def resume(self) -> None:
        self._device.pause(0)


class SdlSink(Sink):
    """Plays F32, S32 or S16 audio through SDL."""

    NAME: ClassVar[str] = "sdl"

    def __init__(
        self,
        device: str | None = None,
        audio_format: AudioFormat = AudioFormat.S16,
        *,
        queue: AudioQueue | None = None,
    ) -> None:
        logger.info("Using SDL sink with format: %s", audio_format.name)
        if device is not None:
            logger.warning("SDL sink does not support specifying a device name")
        if audio_format not in _SUPPORTED:
            raise InvalidParamsError(
                f"SDL currently does not support {audio_format.name} output"
            )
        self.format = audio_format
        self._queue: AudioQueue = queue if queue is not None else _PygameAudioQueue(audio_format)

    def start(self) -> None:
        self._queue.clear()
        self._queue.resume()

    def stop(self) -> None:
        self._queue.pause()
        self._queue.clear()

    def _encode(self, samples: list[float], converter: Converter) -> bytes:
        if self.format is AudioFormat.F32:
            values: list = converter.f64_to_f32(samples)
        elif self.format is AudioFormat.S32:
            values = converter.f64_to_s32(samples)
        else:
            values = converter.f64_to_s16(samples)
        return struct.pack(f"<{len(values)}{_STRUCT_CODES[self.format]}", *values)

    def write(self, packet: AudioPacket, converter: Converter) -> None:
        try:
            samples = packet.samples()
        except AudioPacketError as exc:
            raise OnWriteError(str(exc)) from exc
        data = self._encode(samples, converter)
        # Wait for the device to drain until less than a second is queued.
        limit = NUM_CHANNELS * self.format.size() * SAMPLE_RATE
        while self._queue.size() > limit:
            time.sleep(0.01)
        self._queue.queue(data)