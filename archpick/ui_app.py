from __future__ import annotations

import os
import shlex
import subprocess
from typing import List, Optional, Sequence, Set

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import DataTable, Footer, Header, Static

from .arch import ProcessRunner, editor_command, installed_packages
from .models import AUR_PREFIX
from .modals import ConfirmModal
from .selector import marker_to_name, split_line

class PickerApp(App[List[str]]):
    """
    Built-in multi-select chooser. Takes the same delimiter-separated
    selection lines fzf gets and exits with the chosen lines.
    """

    TITLE = "Interactive Arch Installer"

    CSS = """
    Screen { background: $background; }
    Header { background: $panel; }
    Footer { background: $panel; }

    #statusbar { height: auto; border: round $primary; background: $boost; padding: 0 2; margin: 0 1 1 1; }
    #pick_row { height: 1fr; }
    #pick_tbl { width: 3fr; height: 1fr; }
    #pick_info { width: 2fr; min-width: 40; height: 1fr; overflow: auto; }

    .infobox { border: round $primary; background: $boost; padding: 1 2; margin: 0 1 1 1; }
    DataTable { height: 1fr; border: round $surface; background: $panel; margin: 0 1 1 1; }

    #modal { width: 92%; max-width: 170; padding: 1 2; border: round $primary; background: $panel; }
    """

    BINDINGS = [
        ("space", "toggle", "Toggle"),
        ("a", "select_all", "Select all"),
        ("e", "edit", "Edit description"),
        ("i", "confirm", "Install"),
        ("q", "cancel", "Quit"),
        ("escape", "cancel", "Quit"),
    ]

    def __init__(self, lines: Sequence[str], installed: Optional[Set[str]] = None, editor: Optional[str] = None):
        super().__init__()
        self.lines = list(lines)
        self.installed = installed or set()
        self.editor = editor
        self.selected: Set[int] = set()
        self.info_text = ""
        self._sel_col = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("", id="statusbar")
        with Horizontal(id="pick_row"):
            yield DataTable(id="pick_tbl")
            yield Static("", id="pick_info", classes="infobox")
        yield Footer()

    def on_mount(self) -> None:
        tbl = self.query_one("#pick_tbl", DataTable)
        tbl.cursor_type = "row"
        self._sel_col = tbl.add_columns("Sel", "Group", "Pkg", "Src", "Inst")[0]
        for idx, line in enumerate(self.lines):
            group, pkg, _desc, marker = split_line(line)
            name = marker_to_name(marker)
            src = "aur" if marker.startswith(AUR_PREFIX) else "repo"
            inst = "✔" if name in self.installed else ""
            tbl.add_row("", Text.from_ansi(group), Text.from_ansi(pkg), src, inst, key=str(idx))
        tbl.focus()
        self._info(0)
        self.update_status()

    # ---------- helpers ----------
    def _modal_open(self) -> bool:
        return isinstance(self.screen, ConfirmModal)

    def _cursor(self) -> Optional[int]:
        tbl = self.query_one("#pick_tbl", DataTable)
        if not tbl.row_count:
            return None
        return tbl.cursor_row

    def _mark(self, idx: int) -> None:
        tbl = self.query_one("#pick_tbl", DataTable)
        tbl.update_cell(str(idx), self._sel_col, "✔" if idx in self.selected else "")

    def _info(self, idx: Optional[int]) -> None:
        box = self.query_one("#pick_info", Static)
        if idx is None or not (0 <= idx < len(self.lines)):
            self.info_text = "Space Toggle · a Select all · e Edit · i Install · q Quit"
            box.update(self.info_text)
            return
        _group, _pkg, desc, marker = split_line(self.lines[idx])
        if desc and os.path.isfile(desc):
            with open(desc, "r", encoding="utf-8", errors="replace") as f:
                body = f.read()[:15000]
        else:
            body = f"No description for {marker_to_name(marker)}. Press e to create."
        self.info_text = body
        box.update(Text(body))

    def selected_lines(self) -> List[str]:
        return [self.lines[i] for i in sorted(self.selected)]

    def update_status(self) -> None:
        self.query_one("#statusbar", Static).update(
            f"Packages: {len(self.lines)}   Selected: {len(self.selected)}"
        )

    # ---------- events ----------
    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._info(event.cursor_row)

    # ---------- actions ----------
    def action_toggle(self) -> None:
        if self._modal_open():
            return
        idx = self._cursor()
        if idx is None:
            return
        if idx in self.selected:
            self.selected.remove(idx)
        else:
            self.selected.add(idx)
        self._mark(idx)
        self.update_status()

    def action_select_all(self) -> None:
        if self._modal_open():
            return
        self.selected = set(range(len(self.lines)))
        for idx in self.selected:
            self._mark(idx)
        self.update_status()

    def action_edit(self) -> None:
        if self._modal_open():
            return
        idx = self._cursor()
        if idx is None:
            return
        desc = split_line(self.lines[idx])[2]
        cmd = shlex.split(self.editor or editor_command()) + [desc]
        try:
            with self.suspend():
                subprocess.call(cmd)
        except FileNotFoundError:
            self.notify(f"Editor not found: {cmd[0]}", severity="error")
        self._info(idx)

    def action_confirm(self) -> None:
        if self._modal_open():
            return
        if not self.selected:
            self.notify("Nothing selected.", severity="warning")
            return
        names = [marker_to_name(split_line(ln)[3]) for ln in self.selected_lines()]

        def _done(ok: Optional[bool]) -> None:
            if ok:
                self.exit(self.selected_lines())

        self.push_screen(ConfirmModal(f"Install {len(names)} package(s)?", " ".join(names)), callback=_done)

    def action_cancel(self) -> None:
        if self._modal_open():
            return
        self.exit([])

class TextualChooser:
    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    def choose(self, lines: Sequence[str]) -> str:
        result = PickerApp(lines, installed=installed_packages(self.runner)).run()
        return "\n".join(result or [])
