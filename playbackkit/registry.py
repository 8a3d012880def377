"""The table of available audio sinks."""

from __future__ import annotations

from typing import Callable

from .backend import Sink
from .config import AudioFormat
from .pipe import StdoutSink
from .sdl_sink import SdlSink
from .subprocess_sink import SubprocessSink

SinkBuilder = Callable[[str | None, AudioFormat], Sink]

# The default backend goes first.
BACKENDS: tuple[tuple[str, SinkBuilder], ...] = (
    (SdlSink.NAME, SdlSink),
    (StdoutSink.NAME, StdoutSink),
    (SubprocessSink.NAME, SubprocessSink),
)


def find(name: str | None) -> SinkBuilder | None:
    """Return the sink builder for ``name``; None selects the default."""
    if name is None:
        return BACKENDS[0][1]
    for backend_name, builder in BACKENDS:
        if backend_name == name:
            return builder
    return None