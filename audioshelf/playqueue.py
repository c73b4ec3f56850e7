"""The play queue: track order, shuffle, looping and auto-advance."""

from __future__ import annotations

import os
import random
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from audioshelf.library import audio_files_in
from audioshelf.player import Player

PathLike = Union[str, "os.PathLike[str]"]
TrackCallback = Callable[[Path], None]


class PlayQueue:
    """An ordered list of tracks with a current position.

    ``on_track_change`` is called with the path of each track the queue
    starts, just before playback begins.
    """

    def __init__(
        self,
        player: Player,
        on_track_change: Optional[TrackCallback] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.player = player
        self.on_track_change = on_track_change
        self.rng = rng if rng is not None else random.Random()
        self.auto_play = False
        self.shuffle = False
        self.loop_queue = False
        self.loop_file = False
        self.current_index = -1
        self._tracks: list[Path] = []
        self._original: Optional[list[Path]] = None

    @property
    def tracks(self) -> tuple[Path, ...]:
        return tuple(self._tracks)

    @property
    def current(self) -> Optional[Path]:
        if 0 <= self.current_index < len(self._tracks):
            return self._tracks[self.current_index]
        return None

    def __len__(self) -> int:
        return len(self._tracks)

    def load_directory(self, directory: PathLike, file_path: PathLike) -> None:
        """Queue the audio files of ``directory``, positioned at ``file_path``."""
        self.load_files(audio_files_in(directory), file_path)

    def load_files(self, files: Iterable[PathLike], file_path: PathLike) -> None:
        """Queue ``files`` in order, positioned at ``file_path``.

        Raises ValueError if a non-empty list does not contain ``file_path``.
        """
        tracks = [Path(f) for f in files]
        if not tracks:
            self._tracks = []
            return
        target = Path(file_path)
        try:
            index = tracks.index(target)
        except ValueError:
            raise ValueError(f"{file_path} is not in the queue") from None
        self._tracks = tracks
        self.current_index = index
        if self.shuffle:
            self.randomize()

    def randomize(self) -> None:
        """Shuffle the queue, keeping the current track first."""
        if not self._tracks:
            return
        self._original = list(self._tracks)
        current = self._original[self.current_index]
        rest = [t for i, t in enumerate(self._original) if i != self.current_index]
        self.rng.shuffle(rest)
        self._tracks = [current, *rest]
        self.current_index = 0

    def set_shuffle(self, enabled: bool) -> None:
        """Switch shuffle on or off, reordering a non-empty queue."""
        self.shuffle = bool(enabled)
        if not self._tracks:
            return
        if self.shuffle:
            self.randomize()
        elif self._original is not None:
            current = self._tracks[self.current_index]
            if current in self._original:
                self.current_index = self._original.index(current)
            self._tracks = self._original

    def _restart_current(self) -> None:
        self.player.backend.set_position(0)
        self.player.backend.play()

    def _start(self, index: int) -> None:
        self.current_index = index
        track = self._tracks[index]
        if self.on_track_change is not None:
            self.on_track_change(track)
        self.player.play(track)

    def play_next(self) -> None:
        if not self._tracks:
            return
        last = len(self._tracks) - 1
        if self.loop_file:
            self._restart_current()
        elif self.current_index != last:
            self._start(self.current_index + 1)
        elif self.loop_queue:
            self._start(0)

    def play_previous(self) -> None:
        if not self._tracks:
            return
        if self.loop_file:
            self._restart_current()
        elif self.current_index > 0:
            self._start(self.current_index - 1)
        elif self.current_index == 0 and self.loop_queue:
            self._start(len(self._tracks) - 1)

    def play_at(self, index: int) -> None:
        """Play the track at ``index``; out-of-range indices are ignored."""
        if 0 <= index < len(self._tracks):
            self._start(index)

    def item_at(self, index: int) -> Path:
        if not 0 <= index < len(self._tracks):
            raise IndexError(f"queue position {index} out of range")
        return self._tracks[index]

    def handle_end_of_media(self) -> None:
        """React to the current track finishing."""
        if not self._tracks:
            return
        last = len(self._tracks) - 1
        if self.loop_file:
            self._restart_current()
        elif self.auto_play:
            if self.loop_queue:
                self._start(0 if self.current_index == last else self.current_index + 1)
            elif self.current_index != last:
                self._start(self.current_index + 1)

    def labels(self) -> list[str]:
        """Numbered display lines for the queue, starting at 1."""
        return [f"{number}. {track.name}" for number, track in enumerate(self._tracks, start=1)]