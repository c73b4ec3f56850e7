"""Music library: the saved folder list, directory scanning and file details."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

PathLike = Union[str, "os.PathLike[str]"]

AUDIO_PATTERNS = ("*.mp3", "*.wav", "*.flac")

ROOT = "Root"
FOLDER = "Folder"
FILE = "File"


class PathStore:
    """A text file holding one library folder per line."""

    def __init__(self, file_path: PathLike) -> None:
        self.file_path = Path(file_path)

    def load(self) -> list[str]:
        """Return the stored paths, skipping empty lines; [] if the file is missing."""
        try:
            with self.file_path.open(encoding="utf-8") as stream:
                lines = [line.rstrip("\r\n") for line in stream]
        except OSError:
            return []
        return [line for line in lines if line]

    def append(self, path: str) -> None:
        """Add one path at the end of the file."""
        with self.file_path.open("a", encoding="utf-8") as stream:
            stream.write(f"{path}\n")

    def overwrite(self, paths: Iterable[str]) -> None:
        """Replace the file's contents with the given paths."""
        with self.file_path.open("w", encoding="utf-8") as stream:
            stream.writelines(f"{path}\n" for path in paths)


@dataclass
class LibraryNode:
    """An entry of the library tree.

    For a folder, ``path`` is the folder itself; for a file it is the folder
    that holds the file.
    """

    name: str
    kind: str
    path: str
    children: list["LibraryNode"] = field(default_factory=list)

    @property
    def full_path(self) -> str:
        if self.kind == FILE:
            return str(Path(self.path) / self.name)
        return self.path


@dataclass(frozen=True)
class FileDetails:
    """The details shown for a selected file."""

    name: str
    duration: str
    suffix: str
    size: str
    absolute_path: str


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _is_audio_name(name: str) -> bool:
    lowered = name.lower()
    return any(fnmatch.fnmatchcase(lowered, pattern) for pattern in AUDIO_PATTERNS)


def _entries(directory: PathLike) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as entries:
            return sorted(entries, key=lambda entry: entry.name.lower())
    except (FileNotFoundError, NotADirectoryError, PermissionError):
        return []


def audio_files_in(directory: PathLike) -> list[Path]:
    """Audio files directly inside ``directory``, sorted by name ignoring case."""
    return [
        Path(directory) / entry.name
        for entry in _entries(directory)
        if not _is_hidden(entry.name) and entry.is_file() and _is_audio_name(entry.name)
    ]


def _subdirectories(directory: PathLike) -> list[Path]:
    return [
        Path(directory) / entry.name
        for entry in _entries(directory)
        if not _is_hidden(entry.name) and entry.is_dir()
    ]


def contains_audio(directory: PathLike) -> bool:
    """True if ``directory`` or any folder below it holds an audio file."""
    if audio_files_in(directory):
        return True
    return any(contains_audio(sub) for sub in _subdirectories(directory))


class Library:
    """The folder tree of the configured roots and the flat list of all tracks."""

    def __init__(self) -> None:
        self.roots: list[LibraryNode] = []
        self.all_files: list[Path] = []

    def clear(self) -> None:
        self.roots.clear()
        self.all_files.clear()

    def scan(self, roots: Iterable[PathLike]) -> list[LibraryNode]:
        """Rebuild the tree from the given root folders and return its roots."""
        self.clear()
        for root in roots:
            node = LibraryNode(name=str(root), kind=ROOT, path=str(root))
            self._populate(Path(root), node)
            self.roots.append(node)
        return self.roots

    def _populate(self, directory: Path, node: LibraryNode) -> None:
        for sub in _subdirectories(directory):
            if contains_audio(sub):
                folder = LibraryNode(name=sub.name, kind=FOLDER, path=str(sub))
                node.children.append(folder)
                self._populate(sub, folder)
        for audio in audio_files_in(directory):
            self.all_files.append(audio)
            node.children.append(LibraryNode(name=audio.name, kind=FILE, path=str(directory)))


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    return -((-a) // b) if a < 0 else a // b


def _trem(a: int, b: int) -> int:
    return a - b * _tdiv(a, b)


def format_size(size: int) -> str:
    """Render a byte count the way the file panel shows it."""
    megabytes = _tdiv(size, 1000000)
    fraction = _trem(_tdiv(size, 1000), 100)
    padding = "0" if fraction < 10 else ""
    return f"{megabytes}.{padding}{fraction}MB"


def format_duration(milliseconds: int) -> str:
    """Render milliseconds as minutes and zero-padded seconds."""
    minutes = _tdiv(milliseconds, 60000)
    seconds = _trem(_tdiv(milliseconds, 1000), 60)
    padding = "0" if seconds < 10 else ""
    return f"{minutes}:{padding}{seconds}"


def _suffix(name: str) -> str:
    head, dot, tail = name.rpartition(".")
    return tail if dot else ""


def describe_file(path: PathLike, duration_ms: int) -> FileDetails:
    """Collect the details of one file; a missing file reports a size of zero."""
    file_path = Path(path)
    try:
        size = file_path.stat().st_size
    except OSError:
        size = 0
    return FileDetails(
        name=file_path.name,
        duration=format_duration(int(duration_ms)),
        suffix=_suffix(file_path.name),
        size=format_size(size),
        absolute_path=os.path.abspath(file_path),
    )