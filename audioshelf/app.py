"""The desktop window: library browser, file details, queue and transport controls."""

from __future__ import annotations

import argparse
import os
import wave
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from audioshelf.library import (
    FILE,
    ROOT,
    FileDetails,
    Library,
    LibraryNode,
    PathStore,
    describe_file,
)
from audioshelf.player import Player, PygameBackend, media_duration
from audioshelf.playqueue import PlayQueue

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_PATHS_FILE = "paths.txt"
SEEK_STEP_MS = 10000
TICK_MS = 200
HIGHLIGHT = "#00ccff"
INFO_FIELDS = ("Name", "Duration", "Type", "Size", "Path")


def _probe_duration(path: PathLike) -> int:
    try:
        return media_duration(path)
    except (OSError, EOFError, ValueError, RuntimeError, wave.Error):
        return 0


class PathEditor:
    """Edits the list of library folders kept in a PathStore.

    With ``parent`` set to a Tk widget it opens a modal window; with ``None``
    it works without widgets, using ``selected`` as the current row.
    """

    def __init__(self, parent, store: PathStore) -> None:
        self.store = store
        self.paths: list[str] = store.load()
        self.selected: Optional[int] = None
        self.ask_directory: Callable[[], str] = self._dialog_directory
        self.confirm: Callable[[], bool] = self._dialog_confirm
        self.window = None
        self._listbox = None
        if parent is not None:
            self._build(parent)

    def _build(self, parent) -> None:
        import tkinter as tk
        from tkinter import ttk

        window = tk.Toplevel(parent)
        window.title("Library folders")
        listbox = tk.Listbox(window, width=60, height=12, exportselection=False)
        for path in self.paths:
            listbox.insert("end", path)
        listbox.pack(fill="both", expand=True, padx=6, pady=6)
        buttons = ttk.Frame(window)
        buttons.pack(fill="x", padx=6, pady=(0, 6))
        ttk.Button(buttons, text="Add folder", command=self.add_path).pack(side="left")
        ttk.Button(buttons, text="Remove folder", command=self.remove_path).pack(side="left", padx=6)
        ttk.Button(buttons, text="Close", command=window.destroy).pack(side="right")
        window.transient(parent)
        window.grab_set()
        self.window = window
        self._listbox = listbox

    def _dialog_directory(self) -> str:
        from tkinter import filedialog

        return filedialog.askdirectory(parent=self.window, title="Choose folder") or ""

    def _dialog_confirm(self) -> bool:
        from tkinter import messagebox

        return bool(
            messagebox.askyesno(
                "Confirm deletion",
                "Are you sure you want to remove the selected path?",
                parent=self.window,
            )
        )

    def _selection(self) -> Optional[int]:
        if self._listbox is not None:
            chosen = self._listbox.curselection()
            return chosen[0] if chosen else None
        return self.selected

    def add_path(self) -> Optional[str]:
        """Ask for a folder and store it; returns the folder, or None if cancelled."""
        directory = self.ask_directory()
        if not directory:
            return None
        self.paths.append(directory)
        if self._listbox is not None:
            self._listbox.insert("end", directory)
        self.store.append(directory)
        return directory

    def remove_path(self) -> bool:
        """Remove the selected folder after confirmation; True if one was removed."""
        index = self._selection()
        if index is None or not 0 <= index < len(self.paths):
            return False
        if not self.confirm():
            return False
        del self.paths[index]
        if self._listbox is not None:
            self._listbox.delete(index)
        self.selected = None
        self.store.overwrite(self.paths)
        return True


class MainWindow:
    """The player's main window.

    With ``root`` set to a Tk root it builds the widgets and polls playback;
    with ``None`` the same actions run without any widgets.
    """

    def __init__(self, root=None, paths_file: PathLike = DEFAULT_PATHS_FILE, player: Optional[Player] = None) -> None:
        self.root = root
        self.store = PathStore(paths_file)
        self.library = Library()
        self.player = player if player is not None else Player(PygameBackend())
        self.queue = PlayQueue(self.player, on_track_change=self.show_file_info)
        self.file_details: Optional[FileDetails] = None
        self.editor: Optional[PathEditor] = None
        self._built = False
        self._tree_nodes: dict[str, LibraryNode] = {}
        self._all_file_items: dict[str, Path] = {}
        self._user_moving_slider = False
        if root is not None:
            self._build(root)
        self.refresh_library()
        if root is not None:
            self._update_progress_view()
            root.after(TICK_MS, self._tick)

    # ----- actions -------------------------------------------------------

    def refresh_library(self) -> list[LibraryNode]:
        """Rescan the stored folders and return the library's root nodes."""
        roots = self.library.scan(self.store.load())
        self._refresh_library_view()
        return roots

    def show_file_info(self, path: PathLike) -> FileDetails:
        """Describe ``path`` in the details panel and return the details."""
        details = describe_file(path, _probe_duration(path))
        self.file_details = details
        if self._built:
            values = (details.name, details.duration, details.suffix, details.size, details.absolute_path)
            for var, value in zip(self._info_vars, values):
                var.set(value)
        return details

    def edit_library(self) -> None:
        self.editor = PathEditor(self.root, self.store)
        if self.root is not None and self.editor.window is not None:
            self.root.wait_window(self.editor.window)
        self.refresh_library()

    def select_library_node(self, node: LibraryNode) -> None:
        if node.kind == FILE:
            self.show_file_info(node.full_path)

    def activate_library_node(self, node: LibraryNode) -> None:
        """Queue the file's folder and play the file."""
        if node.kind != FILE:
            return
        full_path = node.full_path
        self.queue.load_directory(node.path, full_path)
        self.player.play(full_path)
        self._after_playback_change()

    def select_all_files_entry(self, path: PathLike) -> None:
        self.show_file_info(path)

    def play_from_all_files(self, path: PathLike) -> None:
        """Queue every track of the library and play ``path``."""
        self.queue.load_files(self.library.all_files, path)
        self.player.play(path)
        self._after_playback_change()

    def pause_resume(self) -> None:
        self.player.pause_resume()

    def next_track(self) -> None:
        self.queue.play_next()
        self._after_playback_change()

    def previous_track(self) -> None:
        self.queue.play_previous()
        self._after_playback_change()

    def play_queue_position(self, index: int) -> None:
        self.queue.play_at(index)
        self._after_playback_change()

    def select_queue_position(self, index: int) -> FileDetails:
        return self.show_file_info(self.queue.item_at(index))

    def rewind(self) -> None:
        self.player.seek_relative(-SEEK_STEP_MS)

    def fast_forward(self) -> None:
        self.player.seek_relative(SEEK_STEP_MS)

    def set_volume(self, volume: int) -> None:
        self.player.set_volume(volume)
        if self._built:
            self._volume_var.set(self.player.volume_text())

    def set_auto_play(self, enabled: bool) -> None:
        self.queue.auto_play = bool(enabled)

    def set_shuffle(self, enabled: bool) -> None:
        self.queue.set_shuffle(enabled)
        self._refresh_queue_view()

    def set_loop_queue(self, enabled: bool) -> None:
        self.queue.loop_queue = bool(enabled)

    def set_loop_file(self, enabled: bool) -> None:
        self.queue.loop_file = bool(enabled)

    def poll(self) -> None:
        """Advance the queue when a track has finished and refresh progress."""
        if self.player.has_ended:
            self.queue.handle_end_of_media()
            if self.player.has_ended:
                self.player.stop()
            self._refresh_queue_view()
        self._update_progress_view()

    # ----- widgets -------------------------------------------------------

    def _tick(self) -> None:
        self.poll()
        self.root.after(TICK_MS, self._tick)

    def _after_playback_change(self) -> None:
        self._refresh_queue_view()
        self._update_progress_view()

    def _build(self, root) -> None:
        import tkinter as tk
        from tkinter import ttk

        root.title("Audio player")

        left = ttk.Frame(root)
        left.pack(side="left", fill="both", expand=True, padx=6, pady=6)
        notebook = ttk.Notebook(left)
        notebook.pack(fill="both", expand=True)

        library_frame = ttk.Frame(notebook)
        self._library_tree = ttk.Treeview(library_frame, columns=("kind",), selectmode="browse")
        self._library_tree.heading("#0", text="Name")
        self._library_tree.heading("kind", text="Type")
        self._library_tree.pack(fill="both", expand=True)
        self._library_tree.bind("<<TreeviewSelect>>", self._on_library_select)
        self._library_tree.bind("<Double-1>", self._on_library_activate)
        ttk.Button(library_frame, text="Edit library", command=self.edit_library).pack(fill="x")
        notebook.add(library_frame, text="Library")

        files_frame = ttk.Frame(notebook)
        self._all_files_tree = ttk.Treeview(files_frame, columns=("folder",), selectmode="browse")
        self._all_files_tree.heading("#0", text="Name")
        self._all_files_tree.heading("folder", text="Folder")
        self._all_files_tree.pack(fill="both", expand=True)
        self._all_files_tree.bind("<<TreeviewSelect>>", self._on_all_files_select)
        self._all_files_tree.bind("<Double-1>", self._on_all_files_activate)
        notebook.add(files_frame, text="All files")

        right = ttk.Frame(root)
        right.pack(side="left", fill="both", expand=True, padx=6, pady=6)

        self._info_vars = [tk.StringVar() for _ in INFO_FIELDS]
        info = ttk.Frame(right)
        info.pack(fill="x")
        for row, (label, var) in enumerate(zip(INFO_FIELDS, self._info_vars)):
            ttk.Label(info, text=label).grid(row=row, column=0, sticky="w")
            ttk.Entry(info, textvariable=var, state="readonly", width=50).grid(row=row, column=1, sticky="ew")
        info.columnconfigure(1, weight=1)

        self._queue_list = tk.Listbox(right, height=12, exportselection=False)
        self._queue_list.pack(fill="both", expand=True, pady=6)
        self._queue_list.bind("<<ListboxSelect>>", self._on_queue_select)
        self._queue_list.bind("<Double-1>", self._on_queue_activate)

        self._current_var = tk.StringVar()
        ttk.Entry(right, textvariable=self._current_var, state="readonly").pack(fill="x")

        progress = ttk.Frame(right)
        progress.pack(fill="x", pady=4)
        self._progress_var = tk.StringVar(value="0:0")
        self._duration_var = tk.StringVar(value="/ 0:0")
        self._progress_scale = ttk.Scale(progress, from_=0, to=0, orient="horizontal")
        self._progress_scale.pack(side="left", fill="x", expand=True)
        self._progress_scale.bind("<ButtonPress-1>", self._on_slider_pressed)
        self._progress_scale.bind("<ButtonRelease-1>", self._on_slider_released)
        ttk.Label(progress, textvariable=self._progress_var).pack(side="left")
        ttk.Label(progress, textvariable=self._duration_var).pack(side="left")

        controls = ttk.Frame(right)
        controls.pack(fill="x")
        for text, command in (
            ("Previous", self.previous_track),
            ("-10 s", self.rewind),
            ("Pause / Resume", self.pause_resume),
            ("+10 s", self.fast_forward),
            ("Next", self.next_track),
        ):
            ttk.Button(controls, text=text, command=command).pack(side="left")

        options = ttk.Frame(right)
        options.pack(fill="x", pady=4)
        for text, setter in (
            ("Auto play", self.set_auto_play),
            ("Shuffle", self.set_shuffle),
            ("Loop queue", self.set_loop_queue),
            ("Loop file", self.set_loop_file),
        ):
            var = tk.BooleanVar(value=False)
            ttk.Checkbutton(
                options, text=text, variable=var, command=lambda v=var, s=setter: s(v.get())
            ).pack(side="left")

        volume = ttk.Frame(root)
        volume.pack(side="left", fill="y", padx=6, pady=6)
        self._volume_var = tk.StringVar(value=self.player.volume_text())
        volume_scale = tk.Scale(volume, from_=100, to=0, orient="vertical", showvalue=False)
        volume_scale.set(self.player.volume)
        volume_scale.configure(command=lambda value: self.set_volume(int(float(value))))
        volume_scale.pack(fill="y", expand=True)
        ttk.Label(volume, textvariable=self._volume_var).pack()

        self._built = True

    def _refresh_library_view(self) -> None:
        if not self._built:
            return
        for tree in (self._library_tree, self._all_files_tree):
            tree.delete(*tree.get_children())
        self._tree_nodes.clear()
        self._all_file_items.clear()
        for node in self.library.roots:
            self._insert_node("", node)
        for path in self.library.all_files:
            item = self._all_files_tree.insert("", "end", text=path.name, values=(str(path.parent),))
            self._all_file_items[item] = path

    def _insert_node(self, parent: str, node: LibraryNode) -> None:
        kind = "" if node.kind == ROOT else node.kind
        item = self._library_tree.insert(parent, "end", text=node.name, values=(kind,))
        self._tree_nodes[item] = node
        for child in node.children:
            self._insert_node(item, child)

    def _refresh_queue_view(self) -> None:
        if not self._built:
            return
        self._queue_list.delete(0, "end")
        for label in self.queue.labels():
            self._queue_list.insert("end", label)
        if self.queue.current is not None:
            self._queue_list.itemconfig(self.queue.current_index, foreground=HIGHLIGHT)

    def _update_progress_view(self) -> None:
        if not self._built:
            return
        self._progress_var.set(self.player.progress_text())
        self._duration_var.set(self.player.duration_text())
        self._current_var.set(self.player.current_name)
        self._volume_var.set(self.player.volume_text())
        self._progress_scale.configure(to=max(self.player.duration, 0))
        if not self._user_moving_slider:
            self._progress_scale.set(self.player.position)

    def _on_slider_pressed(self, _event) -> None:
        self._user_moving_slider = True

    def _on_slider_released(self, _event) -> None:
        self._user_moving_slider = False
        self.player.backend.set_position(int(float(self._progress_scale.get())))

    def _focused_item(self, tree) -> Optional[str]:
        selection = tree.selection()
        return selection[0] if selection else None

    def _on_library_select(self, _event) -> None:
        node = self._tree_nodes.get(self._focused_item(self._library_tree) or "")
        if node is not None:
            self.select_library_node(node)

    def _on_library_activate(self, _event) -> None:
        node = self._tree_nodes.get(self._focused_item(self._library_tree) or "")
        if node is not None:
            self.activate_library_node(node)

    def _on_all_files_select(self, _event) -> None:
        path = self._all_file_items.get(self._focused_item(self._all_files_tree) or "")
        if path is not None:
            self.select_all_files_entry(path)

    def _on_all_files_activate(self, _event) -> None:
        path = self._all_file_items.get(self._focused_item(self._all_files_tree) or "")
        if path is not None:
            self.play_from_all_files(path)

    def _on_queue_select(self, _event) -> None:
        chosen = self._queue_list.curselection()
        if chosen:
            self.select_queue_position(chosen[0])

    def _on_queue_activate(self, _event) -> None:
        chosen = self._queue_list.curselection()
        if chosen:
            self.play_queue_position(chosen[0])


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="audioshelf", description="Browse and play a local music library.")
    parser.add_argument(
        "--paths-file",
        default=DEFAULT_PATHS_FILE,
        help="file listing the library folders, one per line (default: %(default)s)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    import tkinter as tk

    root = tk.Tk()
    MainWindow(root, args.paths_file)
    root.mainloop()
    return 0