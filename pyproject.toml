[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "audioshelf"
version = "0.1.0"
description = "A small desktop audio player that plays MP3, WAV and FLAC files from the folders of your music library"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["audio", "player", "music", "library", "playlist", "queue", "mp3", "flac", "wav"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
audioshelf = "audioshelf.app:main"

[tool.hatch.build.targets.wheel]
packages = ["audioshelf"]

[tool.pytest.ini_options]
addopts = "-ra"
