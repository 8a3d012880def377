# playbackkit

Building blocks for the output stage of an audio player. It takes
floating-point PCM samples in the range `-1.0..=1.0`, applies volume, and
writes them to an output in the sample format you choose. It can also pass
Ogg Vorbis data through untouched, packed into fresh Ogg pages.

The stream constants are in `playbackkit.constants`. They are `SAMPLE_RATE`
(44100), `NUM_CHANNELS` (2), `SAMPLES_PER_SECOND`, `PAGES_PER_MS` and
`MS_PER_PAGE`.

## Modules

### Configuration: `playbackkit.config`

- `AudioFormat` has the members `F64`, `F32`, `S32`, `S24` (24 bits held in a
  32-bit word), `S24_3` (24 bits packed into 3 bytes) and `S16`.
  - `AudioFormat.parse(s)` ignores case.
  - `size()` returns the number of bytes per sample.
- `Bitrate` has the members `BITRATE96`, `BITRATE160` and `BITRATE320`.
  `Bitrate.parse("160")` gives `BITRATE160`.
- `NormalisationType` has `ALBUM`, `TRACK` and `AUTO`. `NormalisationMethod`
  has `BASIC` and `DYNAMIC`. Both have a `parse` method that ignores case.
- `PlayerConfig` is a dataclass with these defaults:
  - bitrate 160
  - gapless on
  - normalisation off, type auto, method dynamic
  - threshold `db_to_ratio(-2.0)`, attack 5 ms, release 100 ms, knee 1.0
  - ditherer builder `TriangularDitherer`
- `VolumeCtrl` combines a `VolumeCtrlKind` (`CUBIC`, `FIXED`, `LINEAR`, `LOG`)
  with a dB range.
  - The default is logarithmic with a 60 dB range.
  - `VolumeCtrl.parse(s)` and `VolumeCtrl.from_str_with_range(s, db_range)`
    build one from a string.
  - `effective_db_range()`, `set_db_range(...)` and `range_ok()` read and
    change the range. `set_db_range` only affects cubic and log controls; for
    any other kind it logs an error.
  - `VolumeCtrl.MAX_VOLUME` is 65535.
- `db_to_ratio(db)` and `ratio_to_db(ratio)` convert between decibels and
  amplitude ratios.

Every `parse` method raises `ValueError` on an unknown string.

### Dithering: `playbackkit.dither`

There are three dither classes. Each has a `noise()` method that returns
noise measured in least significant bits:

| Class | Name | Noise |
|---|---|---|
| `TriangularDitherer` | `"tpdf"` | Triangular, from -1 to 1 |
| `GaussianDitherer` | `"gpdf"` | Gaussian, sigma 0.5 |
| `HighPassDitherer` | `"tpdf_hp"` | Uniform noise in ±0.5, minus the previous value for the same channel; channels alternate |

Each constructor accepts an optional `random.Random`.
`find_ditherer(name)` returns the class for a name, or `None`.

### Conversion: `playbackkit.convert`

`Converter(ditherer_builder=None)` converts samples between formats.

- `scale(...)` multiplies a sample by a factor, adds dither and rounds half
  away from zero.
- `clamping_scale(...)` does the same, then clamps the result to the two's
  complement range.
- The list conversions are `f64_to_f32`, `f64_to_s32`, `f64_to_s24`,
  `f64_to_s24_3` and `f64_to_s16`.
  - Integer results saturate at the limits of their type.
  - `f64_to_s24_3` returns 3-byte values in native byte order.

### Volume mapping: `playbackkit.mappings`

- `LogMapping` and `CubicMapping` each have `linear_to_mapped` and
  `mapped_to_linear`.
- `to_mapped(volume_ctrl, volume)` maps a volume in `0..=65535` to an amplitude
  in `0.0..=1.0`. It raises `ValueError` when the volume is out of range.
- `from_mapped(volume_ctrl, mapped_volume)` maps back the other way.
- Volume 0 is silence and 65535 is full scale.

### Mixing: `playbackkit.mixer`

- `MixerConfig` holds `device`, `control`, `index` and `volume_ctrl`.
- `SoftMixer` stores a mapped volume, which starts at 0.5.
  - `set_volume` and `volume` work in the `0..=65535` range.
  - `get_audio_filter()` returns an `AudioFilter`. Its `modify_stream(data)`
    scales a mutable sample list in place, and only while the volume is
    below full scale.
- `find(name)` returns the mixer class. Both `None` and `"softvol"` give
  `SoftMixer`, and any other name gives `None`.

### Packets and decoding: `playbackkit.decoder`, `playbackkit.ogg`, `playbackkit.passthrough`

`AudioPacket` holds either samples or Ogg bytes.

- Build one with `from_samples`, `samples_from_f32` or `from_ogg`.
- Read it back with `samples()` or `oggdata()`. Asking for the wrong kind
  raises `AudioPacketError`.
- `is_empty()` tells you whether the packet has no content.

`AudioDecoder` is the decoder interface. Its methods are `seek(absgp)` and
`next_packet()`, and iterating over a decoder yields its packets.

`playbackkit.ogg` is a small Ogg container layer:

- `PacketReader` reads packets from a seekable binary stream. It checks page
  checksums.
  - Its methods are `read_packet`, `read_packet_expected`, `seek_absgp` and
    `delete_unread_packets`.
- `PacketWriter` lays packets out into pages.
  - `write_packet(data, serial, end_info, absgp)` adds a packet.
    `end_info` is a `PacketWriteEndInfo`.
  - `take()` returns the finished bytes and clears them.
- `crc32(data)` computes the Ogg page checksum.
- Read failures raise `OggReadError`, or its subclass `NoCapturePatternFound`.

`PassthroughDecoder(stream, *, stream_serial=None)` re-wraps a Vorbis stream
without decoding it.

- When built, it reads the identification, comment and setup headers. It
  raises `DecoderError` if they are missing or out of order.
- `next_packet()` returns packets of Ogg data under a new stream serial. The
  serial defaults to the current time in milliseconds, and the headers are
  written first.
- `seek(absgp)` ends the current stream and starts a new one, with the next
  serial.

### Sinks: `playbackkit.backend` and the sink modules

`Sink` has the methods `start()`, `stop()` and `write(packet, converter)`.

`BytesSink` turns sample packets into bytes in the sink's `AudioFormat`, using
`encode_samples(samples, audio_format, converter)` in native byte order. It
passes Ogg packets on unchanged. Subclasses implement `write_bytes(data)`.

The sinks:

- `StdoutSink(path=None, audio_format=AudioFormat.S16)`, name `"pipe"`, in
  `playbackkit.pipe`.
  - `start()` opens an existing file or named pipe for writing, or uses
    standard output when no path is given.
  - Every write is flushed.
  - `stop()` does not close the file.
- `SubprocessSink(shell_command, audio_format=AudioFormat.S16)`, name
  `"subprocess"`, in `playbackkit.subprocess_sink`.
  - `start()` splits the command shell-style and launches it with a piped
    standard input.
  - Writes go to that standard input. They do nothing before `start()`.
  - `stop()` kills the process and waits for it to exit.
  - A missing command raises `ValueError`.
- `SdlSink(device=None, audio_format=AudioFormat.S16, *, queue=None)`, name
  `"sdl"`, in `playbackkit.sdl_sink`.
  - It plays through a pygame SDL audio device.
  - It supports only F32, S32 and S16. Any other format raises
    `InvalidParamsError`.
  - A device name is ignored, with a warning.
  - `write` waits until less than one second of audio is queued, then adds
    the new samples.
  - It accepts only sample packets. An Ogg packet raises `OnWriteError`.
  - Any object with `queue`, `size`, `clear`, `pause` and `resume` can stand
    in for the device.

`playbackkit.registry.find(name)` returns the sink class for `"sdl"`,
`"pipe"` or `"subprocess"`. It returns `SdlSink`, the default, for `None`,
and `None` for an unknown name. Each sink class can be called as
`(device, audio_format)`.

Sinks raise subclasses of `SinkError`:

- `NotConnectedError`
- `SinkConnectionRefusedError`
- `OnWriteError`
- `InvalidParamsError`

## Example

```python
from playbackkit.config import AudioFormat
from playbackkit.convert import Converter
from playbackkit.decoder import AudioPacket
from playbackkit.dither import find_ditherer
from playbackkit.mixer import MixerConfig, SoftMixer
from playbackkit.pipe import StdoutSink

mixer = SoftMixer(MixerConfig())
mixer.set_volume(40000)
volume_filter = mixer.get_audio_filter()

samples = [0.0, 0.25, -0.25, 0.5]
volume_filter.modify_stream(samples)

converter = Converter(find_ditherer("tpdf"))
sink = StdoutSink(None, AudioFormat.S16)  # None writes to standard output
sink.start()
sink.write(AudioPacket.from_samples(samples), converter)
sink.stop()
```

## What it does not do

- There is no command-line program, player loop or track handling. The
  package only provides the pieces.
- It does not decode Vorbis into samples. `PassthroughDecoder` only re-packs
  Ogg data, so sample packets must come from your own decoder.
- The only mixer is the software mixer. It cannot control a hardware mixer.
- The only sinks are `pipe`, `subprocess` and `sdl`.

## Installation and tests

```
pip install -e ".[test]"
pytest
```