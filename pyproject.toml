[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "playbackkit"
version = "0.1.0"
description = "Audio playback building blocks: sample conversion, dithering, volume mapping, Ogg passthrough and output sinks"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["audio", "playback", "pcm", "dither", "ogg", "vorbis", "mixer", "volume"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["playbackkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
