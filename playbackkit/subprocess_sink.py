"""A sink that pipes raw audio into the standard input of a command."""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import ClassVar

from .backend import BytesSink, NotConnectedError, OnWriteError, SinkConnectionRefusedError
from .config import AudioFormat

logger = logging.getLogger(__name__)


class SubprocessSink(BytesSink):
    """Starts a shell-style command and writes audio to its standard input."""

    NAME: ClassVar[str] = "subprocess"

    def __init__(
        self, shell_command: str | None = None, audio_format: AudioFormat = AudioFormat.S16
    ) -> None:
        super().__init__(audio_format)
        logger.info("Using subprocess sink with format: %s", audio_format.name)
        if shell_command is None:
            raise ValueError("subprocess sink requires specifying a shell command")
        self.shell_command = shell_command
        self._child: subprocess.Popen[bytes] | None = None

    def start(self) -> None:
        args = shlex.split(self.shell_command)
        if not args:
            raise ValueError("subprocess sink command is empty")
        try:
            self._child = subprocess.Popen(args, stdin=subprocess.PIPE)
        except OSError as exc:
            raise SinkConnectionRefusedError(str(exc)) from exc

    def stop(self) -> None:
        child, self._child = self._child, None
        if child is None:
            return
        try:
            child.kill()
            child.wait()
        except OSError as exc:
            raise OnWriteError(str(exc)) from exc
        finally:
            if child.stdin is not None:
                try:
                    child.stdin.close()
                except OSError:
                    pass

    def write_bytes(self, data: bytes) -> None:
        if self._child is None:
            return
        stdin = self._child.stdin
        if stdin is None:
            raise NotConnectedError("Child is None")
        try:
            stdin.write(data)
            stdin.flush()
        except OSError as exc:
            raise OnWriteError(str(exc)) from exc