"""A sink that writes raw audio to standard output or to a file."""

from __future__ import annotations

import logging
import os
import sys
from typing import BinaryIO, ClassVar

from .backend import BytesSink, NotConnectedError, OnWriteError, SinkConnectionRefusedError
from .config import AudioFormat

logger = logging.getLogger(__name__)


class StdoutSink(BytesSink):
    """Writes audio bytes to a path, or to standard output when none is given."""

    NAME: ClassVar[str] = "pipe"

    def __init__(self, path: str | None = None, audio_format: AudioFormat = AudioFormat.S16) -> None:
        super().__init__(audio_format)
        logger.info("Using pipe sink with format: %s", audio_format.name)
        self.path = path
        self._output: BinaryIO | None = None

    def start(self) -> None:
        if self._output is not None:
            return
        if self.path is None:
            self._output = sys.stdout.buffer
            return
        try:
            fd = os.open(self.path, os.O_WRONLY)
        except OSError as exc:
            raise SinkConnectionRefusedError(str(exc)) from exc
        self._output = os.fdopen(fd, "wb")

    def write_bytes(self, data: bytes) -> None:
        if self._output is None:
            raise NotConnectedError("Output is None")
        try:
            self._output.write(data)
            self._output.flush()
        except OSError as exc:
            raise OnWriteError(str(exc)) from exc