from playbackkit.config import AudioFormat
from playbackkit.pipe import StdoutSink
from playbackkit.registry import BACKENDS, find
from playbackkit.sdl_sink import SdlSink
from playbackkit.subprocess_sink import SubprocessSink


def test_find_by_name():
    assert find("pipe") is StdoutSink
    assert find("subprocess") is SubprocessSink
    assert find("sdl") is SdlSink


def test_default_is_first_backend():
    assert find(None) is BACKENDS[0][1]


def test_unknown_name_gives_none():
    assert find("nonexistent") is None


def test_every_listed_backend_is_found_by_its_name():
    names = [name for name, _ in BACKENDS]
    assert len(names) == len(set(names))
    assert set(names) == {"sdl", "pipe", "subprocess"}
    for name, builder in BACKENDS:
        assert find(name) is builder


def test_builder_creates_sink(tmp_path):
    builder = find("pipe")
    sink = builder(str(tmp_path / "x.raw"), AudioFormat.S24)
    assert sink.format is AudioFormat.S24
    assert sink.path == str(tmp_path / "x.raw")