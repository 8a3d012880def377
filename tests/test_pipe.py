import struct

import pytest

from playbackkit.backend import NotConnectedError, SinkConnectionRefusedError
from playbackkit.config import AudioFormat
from playbackkit.convert import Converter
from playbackkit.decoder import AudioPacket
from playbackkit.pipe import StdoutSink


def test_writes_bytes_to_existing_file(tmp_path):
    target = tmp_path / "out.raw"
    target.write_bytes(b"")
    sink = StdoutSink(str(target), AudioFormat.S16)
    sink.start()
    sink.write_bytes(b"\x01\x02\x03")
    sink.write_bytes(b"\x04")
    assert target.read_bytes() == b"\x01\x02\x03\x04"


def test_writes_encoded_samples(tmp_path):
    target = tmp_path / "out.raw"
    target.write_bytes(b"")
    sink = StdoutSink(str(target), AudioFormat.F32)
    sink.start()
    sink.write(AudioPacket.from_samples([0.5, -0.25]), Converter())
    assert struct.unpack("=2f", target.read_bytes()) == (0.5, -0.25)


def test_missing_file_is_refused(tmp_path):
    sink = StdoutSink(str(tmp_path / "missing.raw"), AudioFormat.S16)
    with pytest.raises(SinkConnectionRefusedError):
        sink.start()


def test_write_before_start_is_not_connected():
    sink = StdoutSink(None, AudioFormat.S16)
    with pytest.raises(NotConnectedError, match="Output is None"):
        sink.write_bytes(b"\x00")


def test_writes_to_stdout_without_path(capsysbinary):
    sink = StdoutSink(None, AudioFormat.S16)
    sink.start()
    sink.write_bytes(b"pcm-bytes")
    assert capsysbinary.readouterr().out == b"pcm-bytes"


def test_name():
    assert StdoutSink.NAME == "pipe"
    assert StdoutSink().format is AudioFormat.S16