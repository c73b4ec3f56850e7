"""Audio playback: a pygame-backed output and the player that drives it."""

from __future__ import annotations

import enum
import os
import wave
from pathlib import Path
from typing import Protocol, Union

from audioshelf.library import format_duration

PathLike = Union[str, "os.PathLike[str]"]


class PlaybackState(enum.Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class _Backend(Protocol):
    state: PlaybackState

    @property
    def position(self) -> int: ...

    @property
    def duration(self) -> int: ...

    @property
    def volume(self) -> float: ...

    def load(self, path: PathLike) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...

    def set_position(self, position: int) -> None: ...

    def set_volume(self, volume: float) -> None: ...


def _ensure_mixer():
    import pygame

    if not pygame.mixer.get_init():
        pygame.mixer.init()
    return pygame


def media_duration(path: PathLike) -> int:
    """Length of an audio file in milliseconds."""
    file_path = Path(path)
    if file_path.suffix.lower() == ".wav":
        with wave.open(str(file_path), "rb") as stream:
            rate = stream.getframerate()
            return stream.getnframes() * 1000 // rate if rate else 0
    pygame = _ensure_mixer()
    return int(pygame.mixer.Sound(str(file_path)).get_length() * 1000)


class PygameBackend:
    """Audio output through pygame's streaming music channel."""

    def __init__(self) -> None:
        self._pygame = _ensure_mixer()
        self._music = self._pygame.mixer.music
        self.state = PlaybackState.STOPPED
        self._offset = 0
        self._duration = 0
        self._loaded = False

    @property
    def position(self) -> int:
        if self.state is PlaybackState.STOPPED:
            return self._offset
        elapsed = max(self._music.get_pos(), 0)
        position = self._offset + elapsed
        return min(position, self._duration) if self._duration else position

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def volume(self) -> float:
        return float(self._music.get_volume())

    @property
    def ended(self) -> bool:
        """True once a playing track has run out."""
        return self.state is PlaybackState.PLAYING and not self._music.get_busy()

    def load(self, path: PathLike) -> None:
        self._music.stop()
        self._music.load(str(path))
        self._duration = media_duration(path)
        self._offset = 0
        self._loaded = True
        self.state = PlaybackState.STOPPED

    def play(self) -> None:
        if not self._loaded:
            return
        if self.state is PlaybackState.PAUSED:
            self._music.unpause()
        else:
            self._start_at(self._offset)
        self.state = PlaybackState.PLAYING

    def pause(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self._music.pause()
            self.state = PlaybackState.PAUSED

    def stop(self) -> None:
        self._music.stop()
        self._offset = 0
        self.state = PlaybackState.STOPPED

    def set_position(self, position: int) -> None:
        self._offset = max(0, int(position))
        if self.state is PlaybackState.PLAYING:
            self._start_at(self._offset)
        elif self.state is PlaybackState.PAUSED:
            self._start_at(self._offset)
            self._music.pause()

    def set_volume(self, volume: float) -> None:
        self._music.set_volume(volume)

    def _start_at(self, position: int) -> None:
        try:
            self._music.play(start=position / 1000.0)
        except self._pygame.error:
            self._music.play()
            self._offset = 0


class Player:
    """Plays one file at a time and renders its progress labels."""

    def __init__(self, backend: _Backend) -> None:
        self.backend = backend
        self.current_name = ""
        self._has_media = False
        self._volume_changed = False
        self._volume = int(backend.volume * 100)

    @property
    def state(self) -> PlaybackState:
        return self.backend.state

    @property
    def position(self) -> int:
        return self.backend.position

    @property
    def duration(self) -> int:
        return self.backend.duration

    @property
    def volume(self) -> int:
        return self._volume

    @property
    def has_ended(self) -> bool:
        return bool(getattr(self.backend, "ended", False))

    def play(self, file_path: PathLike) -> None:
        """Load ``file_path`` and play it from the start."""
        self.backend.load(file_path)
        self.backend.set_position(0)
        self.backend.play()
        self._has_media = True
        self.current_name = Path(file_path).name

    def stop(self) -> None:
        self.backend.stop()

    def pause_resume(self) -> None:
        if self.backend.state is PlaybackState.PLAYING:
            self.backend.pause()
        else:
            self.backend.play()

    def seek_relative(self, change: int) -> None:
        """Move by ``change`` milliseconds, clamped to the track."""
        target = self.backend.position + change
        duration = self.backend.duration
        self.backend.set_position(min(max(target, 0), duration))

    def set_volume(self, volume: int) -> None:
        """Set the volume as a percentage."""
        self._volume = int(volume)
        self._volume_changed = True
        self.backend.set_volume(self._volume / 100.0)

    def progress_text(self) -> str:
        if not self._has_media:
            return "0:0"
        return format_duration(self.backend.position)

    def duration_text(self) -> str:
        if not self._has_media:
            return "/ 0:0"
        return "/  " + format_duration(self.backend.duration)

    def volume_text(self) -> str:
        prefix = "Volume" if self._volume_changed else "volume"
        return f"{prefix} {self._volume}%"