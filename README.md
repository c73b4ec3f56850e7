# audioshelf

audioshelf is a small desktop audio player for music kept in ordinary folders.
You tell it which folders make up your library. It finds every `.mp3`, `.wav`
and `.flac` file beneath them and plays them one after another.

## Features

- A library tree that mirrors your folders. It shows only folders that hold
  audio somewhere below them. Hidden entries, whose names start with a dot,
  are skipped. Entries are sorted by name without regard to case.
- An "All files" tab listing every track from every library folder.
- A play queue. It is built from the folder of the track you start in the
  library tree, or from the whole library when you start a track from
  "All files".
- Queue modes:
  - auto play: move on to the next track when one finishes;
  - shuffle: the current track stays first and the rest are put in random order;
  - loop queue: wrap around at either end of the queue;
  - loop file: "next", "previous" and the end of a track all restart the
    current track.
- Playback controls: pause/resume, previous/next, skip 10 seconds back or
  forward, a progress slider you can drag, and a volume slider.
- A details panel with a file's name, duration, type, size and absolute path.

## Installation

```
pip install .
```

Playback uses pygame's mixer. The window is built with tkinter, which must be
available in your Python installation.

## Running

```
audioshelf
```

The list of library folders is kept in a plain text file with one path per
line. By default it is `paths.txt` in the current directory. To use another
file:

```
audioshelf --paths-file my-folders.txt
```

Use "Edit library" to change the list from inside the program. You can add a
folder, or remove the selected one after confirming. The library is scanned
again when the editor closes.

## Using it as a library

The parts behind the window can be used on their own.

### `audioshelf.library`

- `PathStore(file_path)` reads and writes the folder list:
  - `load()` returns the stored paths and skips empty lines. It returns an
    empty list if the file is missing.
  - `append(path)` adds one path.
  - `overwrite(paths)` replaces the whole list.
- `Library().scan(roots)` builds a tree of `LibraryNode` entries (with `name`,
  `kind`, `path`, `children` and `full_path`) and fills `all_files`.
- `audio_files_in(directory)` lists the audio files directly inside a folder.
- `contains_audio(directory)` tells whether a folder or any folder below it
  holds audio.
- `format_size(size)`, `format_duration(milliseconds)` and
  `describe_file(path, duration_ms)` produce the text of the details panel.
  `describe_file` returns a `FileDetails`.

### `audioshelf.player`

- `Player(backend)` drives a playback backend such as `PygameBackend`. It offers:
  - `play(file_path)`, `stop()` and `pause_resume()`;
  - `seek_relative(change)`, which is clamped to the track;
  - `set_volume(volume)`, which takes a percentage;
  - the label texts `progress_text()`, `duration_text()` and `volume_text()`.
- `media_duration(path)` returns a file's length in milliseconds.

### `audioshelf.playqueue`

`PlayQueue(player, on_track_change=None, rng=None)` holds the ordered tracks.

- `load_directory(directory, file_path)` and `load_files(files, file_path)`
  fill the queue. `load_files` raises `ValueError` if the starting file is not
  in a non-empty list.
- It plays tracks with `play_next()`, `play_previous()` and `play_at(index)`.
- `handle_end_of_media()` applies the auto-play and looping rules when a track
  finishes.
- `set_shuffle(enabled)` and `randomize()` reorder the queue.
- `labels()` returns the numbered lines shown in the queue list.

### Example

```python
from audioshelf.library import PathStore, Library

store = PathStore("paths.txt")
library = Library()
library.scan(store.load())
print([str(path) for path in library.all_files])
```

## What it does not do

- audioshelf does not read tags or other metadata from audio files.
- It does not save playlists, queue order, volume or mode settings between
  runs. Only the folder list in the paths file is stored.
- It has no command-line playback. The `audioshelf` command opens the window.

## Running the tests

```
pip install .[test]
pytest
```