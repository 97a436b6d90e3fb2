"""
Tests for description stubs.
"""

from pathlib import Path

from archpick.descriptions import description_path, ensure_descriptions, sanitize
from archpick.lists import make_group
from archpick.models import PackageEntry
from archpick.selector import GROUP_COLORS


def _entry(key: str, source: str = "repo", group: str = "base") -> PackageEntry:
    return PackageEntry(key=key, source=source, group=make_group(group, GROUP_COLORS))


class TestSanitize:
    def test_safe_names_untouched(self):
        assert sanitize("lib32-gcc+libs_1.0") == "lib32-gcc+libs_1.0"

    def test_unsafe_chars_replaced(self):
        assert sanitize("a b;c/d") == "a_b_c_d"

    def test_path(self, tmp_path: Path):
        assert description_path(tmp_path, "foo bar") == tmp_path / "foo_bar.md"


class TestEnsureDescriptions:
    def test_creates_template(self, tmp_path: Path):
        desc_dir = tmp_path / "descriptions"
        paths = ensure_descriptions(desc_dir, [_entry("foo", "aur", "extra-aur")])
        text = (desc_dir / "foo.md").read_text()
        assert paths == {"foo": desc_dir / "foo.md"}
        assert text.startswith("Package: foo\nGroup: extra-aur\nSource: AUR\n")
        assert "- Purpose:" in text
        assert "- Notes:" in text

    def test_official_label(self, tmp_path: Path):
        ensure_descriptions(tmp_path, [_entry("git")])
        assert "Source: official" in (tmp_path / "git.md").read_text()

    def test_never_overwrites(self, tmp_path: Path):
        ensure_descriptions(tmp_path, [_entry("foo")])
        (tmp_path / "foo.md").write_text("my notes\n")
        ensure_descriptions(tmp_path, [_entry("foo")])
        assert (tmp_path / "foo.md").read_text() == "my notes\n"
