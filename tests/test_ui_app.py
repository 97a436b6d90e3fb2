"""
Headless tests for the built-in picker used when fzf is missing.
"""

import asyncio
import contextlib
from pathlib import Path

from archpick.lists import make_group
from archpick.models import PackageEntry
from archpick.selector import GROUP_COLORS, choose_chooser, format_line, parse_selection
from archpick.ui_app import PickerApp, TextualChooser


def _lines(tmp_path: Path):
    (tmp_path / "git.md").write_text("Package: git\n")
    entries = [
        PackageEntry("git", "repo", make_group("base", GROUP_COLORS)),
        PackageEntry("foo", "aur", make_group("aur", GROUP_COLORS)),
        PackageEntry("htop", "repo", make_group("cli-tools", GROUP_COLORS)),
    ]
    return [format_line(e, tmp_path / f"{e.key}.md") for e in entries]


def _drive(app: PickerApp, *keys: str, confirm: bool = False):
    async def scenario():
        async with app.run_test() as pilot:
            await pilot.pause()
            for key in keys:
                await pilot.press(key)
            if confirm:
                await pilot.pause()
                await pilot.click("#yes")
        return app.return_value

    return asyncio.run(scenario())


class TestPickerApp:
    def test_toggle_and_confirm(self, tmp_path):
        lines = _lines(tmp_path)
        result = _drive(PickerApp(lines, editor="true"), "space", "down", "space", "i", confirm=True)
        assert result == lines[:2]
        assert parse_selection("\n".join(result)) == (["git", "foo"], [])

    def test_untoggle(self, tmp_path):
        lines = _lines(tmp_path)
        result = _drive(PickerApp(lines), "space", "space", "down", "down", "space", "i", confirm=True)
        assert result == [lines[2]]

    def test_select_all(self, tmp_path):
        lines = _lines(tmp_path)
        assert _drive(PickerApp(lines), "a", "i", confirm=True) == lines

    def test_cancel(self, tmp_path):
        assert _drive(PickerApp(_lines(tmp_path)), "space", "q") == []


class TestPreviewAndEdit:
    def test_preview_and_editor(self, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr("archpick.ui_app.subprocess.call", lambda cmd: calls.append(cmd) or 0)
        lines = _lines(tmp_path)
        app = PickerApp(lines, editor="myed -w")
        monkeypatch.setattr(app, "suspend", contextlib.nullcontext)

        async def scenario():
            seen = []
            async with app.run_test() as pilot:
                await pilot.pause()
                seen.append(app.info_text)
                await pilot.press("down")
                await pilot.pause()
                seen.append(app.info_text)
                await pilot.press("e")
                await pilot.pause()
                await pilot.press("q")
            return seen

        seen = asyncio.run(scenario())
        assert seen == ["Package: git\n", "No description for foo. Press e to create."]
        assert calls == [["myed", "-w", str(tmp_path / "foo.md")]]
        assert app.return_value == []


class TestChooserFallback:
    def test_textual_when_fzf_missing(self, runner):
        assert isinstance(choose_chooser(runner), TextualChooser)
