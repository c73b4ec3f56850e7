import wave
from pathlib import Path

import pytest

from audioshelf.app import MainWindow, PathEditor, parse_args, main
from audioshelf.library import FILE, PathStore
from audioshelf.player import PlaybackState, Player


class FakeBackend:
    def __init__(self):
        self.state = PlaybackState.STOPPED
        self.position = 0
        self.duration = 0
        self.volume = 1.0
        self.loaded = []
        self.ended = False

    def load(self, path):
        self.loaded.append(Path(path))
        self.duration = 60000
        self.position = 0
        self.state = PlaybackState.STOPPED

    def play(self):
        self.state = PlaybackState.PLAYING
        self.ended = False

    def pause(self):
        self.state = PlaybackState.PAUSED

    def stop(self):
        self.state = PlaybackState.STOPPED
        self.position = 0
        self.ended = False

    def set_position(self, position):
        self.position = position

    def set_volume(self, volume):
        self.volume = volume


def _write_wav(path, seconds=1, rate=8000):
    with wave.open(str(path), "wb") as stream:
        stream.setnchannels(1)
        stream.setsampwidth(2)
        stream.setframerate(rate)
        stream.writeframes(b"\x00\x00" * rate * seconds)


@pytest.fixture
def music(tmp_path):
    root = tmp_path / "music"
    (root / "sub").mkdir(parents=True)
    (root / "empty").mkdir()
    _write_wav(root / "a.wav")
    _write_wav(root / "b.wav")
    _write_wav(root / "sub" / "c.wav")
    (root / "notes.txt").write_text("not audio")
    return root


@pytest.fixture
def window(tmp_path, music):
    paths_file = tmp_path / "paths.txt"
    paths_file.write_text(f"{music}\n")
    return MainWindow(None, paths_file, Player(FakeBackend()))


def _file_node(window, name):
    return next(n for n in window.library.roots[0].children if n.name == name)


def test_refresh_library_builds_tree(window, music):
    roots = window.library.roots
    assert [r.name for r in roots] == [str(music)]
    assert [c.name for c in roots[0].children] == ["sub", "a.wav", "b.wav"]
    assert sorted(p.name for p in window.library.all_files) == ["a.wav", "b.wav", "c.wav"]


def test_refresh_library_picks_up_new_paths(window, tmp_path):
    extra = tmp_path / "extra"
    extra.mkdir()
    _write_wav(extra / "d.wav")
    window.store.append(str(extra))
    roots = window.refresh_library()
    assert len(roots) == 2
    assert roots[1].children[0].name == "d.wav"


def test_show_file_info(window, music):
    details = window.show_file_info(music / "a.wav")
    assert details.name == "a.wav"
    assert details.suffix == "wav"
    assert details.duration == "0:01"
    assert window.file_details == details


def test_activate_library_node_queues_folder(window, music):
    window.activate_library_node(_file_node(window, "a.wav"))
    assert window.player.backend.loaded == [music / "a.wav"]
    assert window.queue.labels() == ["1. a.wav", "2. b.wav"]
    assert window.player.current_name == "a.wav"


def test_activate_folder_node_does_nothing(window):
    window.activate_library_node(_file_node(window, "sub"))
    assert window.player.backend.loaded == []
    assert len(window.queue) == 0


def test_select_library_node_shows_file(window):
    window.select_library_node(_file_node(window, "b.wav"))
    assert window.file_details.name == "b.wav"


def test_next_track_updates_details(window, music):
    window.activate_library_node(_file_node(window, "a.wav"))
    window.next_track()
    assert window.player.backend.loaded[-1] == music / "b.wav"
    assert window.file_details.name == "b.wav"
    window.previous_track()
    assert window.player.backend.loaded[-1] == music / "a.wav"


def test_poll_advances_with_auto_play(window, music):
    window.activate_library_node(_file_node(window, "a.wav"))
    window.set_auto_play(True)
    window.player.backend.ended = True
    window.poll()
    assert window.player.backend.loaded[-1] == music / "b.wav"
    assert window.queue.current_index == 1


def test_poll_stops_without_auto_play(window):
    window.activate_library_node(_file_node(window, "a.wav"))
    window.player.backend.ended = True
    window.poll()
    assert window.player.state is PlaybackState.STOPPED
    assert len(window.player.backend.loaded) == 1


def test_play_from_all_files_queues_everything(window, music):
    target = music / "sub" / "c.wav"
    window.play_from_all_files(target)
    assert len(window.queue) == len(window.library.all_files)
    assert window.queue.current == target
    assert window.player.backend.loaded == [target]


def test_queue_position_actions(window):
    window.play_from_all_files(window.library.all_files[0])
    details = window.select_queue_position(1)
    assert details.name == window.queue.item_at(1).name
    window.play_queue_position(2)
    assert window.player.backend.loaded[-1] == window.queue.item_at(2)
    with pytest.raises(IndexError):
        window.select_queue_position(5)


def test_shuffle_keeps_current_first(window):
    window.play_from_all_files(window.library.all_files[1])
    current = window.queue.current
    window.set_shuffle(True)
    assert window.queue.current_index == 0
    assert window.queue.current == current
    assert sorted(window.queue.tracks) == sorted(window.library.all_files)
    window.set_shuffle(False)
    assert list(window.queue.tracks) == window.library.all_files
    assert window.queue.current == current


def test_seeking_clamps(window):
    window.activate_library_node(_file_node(window, "a.wav"))
    window.player.backend.position = 5000
    window.fast_forward()
    assert window.player.backend.position == 15000
    window.rewind()
    window.rewind()
    assert window.player.backend.position == 0
    window.player.backend.position = window.player.duration - 1
    window.fast_forward()
    assert window.player.backend.position == window.player.duration


def test_pause_resume_toggles(window):
    window.activate_library_node(_file_node(window, "a.wav"))
    window.pause_resume()
    assert window.player.state is PlaybackState.PAUSED
    window.pause_resume()
    assert window.player.state is PlaybackState.PLAYING


def test_set_volume(window):
    window.set_volume(40)
    assert window.player.backend.volume == pytest.approx(0.4)
    assert window.player.volume_text() == "Volume 40%"


def test_path_editor_add_path(tmp_path):
    store = PathStore(tmp_path / "paths.txt")
    editor = PathEditor(None, store)
    editor.ask_directory = lambda: str(tmp_path / "songs")
    assert editor.add_path() == str(tmp_path / "songs")
    assert store.load() == [str(tmp_path / "songs")]
    assert editor.paths == [str(tmp_path / "songs")]


def test_path_editor_add_cancelled(tmp_path):
    store = PathStore(tmp_path / "paths.txt")
    editor = PathEditor(None, store)
    editor.ask_directory = lambda: ""
    assert editor.add_path() is None
    assert store.load() == []


def test_path_editor_remove_confirmed(tmp_path):
    store = PathStore(tmp_path / "paths.txt")
    store.overwrite(["one", "two", "three"])
    editor = PathEditor(None, store)
    editor.selected = 1
    editor.confirm = lambda: True
    assert editor.remove_path() is True
    assert store.load() == ["one", "three"]
    assert editor.selected is None


def test_path_editor_remove_declined_or_unselected(tmp_path):
    store = PathStore(tmp_path / "paths.txt")
    store.overwrite(["one", "two"])
    editor = PathEditor(None, store)
    editor.confirm = lambda: False
    assert editor.remove_path() is False
    editor.selected = 0
    assert editor.remove_path() is False
    assert store.load() == ["one", "two"]


def test_parse_args():
    assert parse_args([]).paths_file == "paths.txt"
    assert parse_args(["--paths-file", "lib.txt"]).paths_file == "lib.txt"


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as raised:
        main(["--help"])
    assert raised.value.code == 0


def test_library_file_nodes_have_full_paths(window, music):
    node = _file_node(window, "a.wav")
    assert node.kind == FILE
    assert Path(node.full_path) == music / "a.wav"