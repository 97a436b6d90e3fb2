"""
Shared test fixtures: a scripted process runner and list-file helpers.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from archpick.arch import ProcessResult
from archpick.selector import marker_to_name, split_line


class FakeRunner:
    """Records every invocation; nothing is executed."""

    def __init__(self, tools: Iterable[str] = ("yay",), exit_codes: Optional[Dict[str, int]] = None):
        self.tools = set(tools)
        self.exit_codes = dict(exit_codes or {})
        self.calls: List[List[str]] = []
        self.streams: List[List[str]] = []
        self.cwds: List[Optional[str]] = []
        self.build_provides: Optional[str] = None

    def which(self, cmd: str) -> Optional[str]:
        return f"/usr/bin/{cmd}" if cmd in self.tools else None

    def run(self, args: Sequence[str], input_text: Optional[str] = None, interactive: bool = False) -> ProcessResult:
        self.calls.append(list(args))
        return ProcessResult("", "", self.exit_codes.get(args[0], 0))

    def stream(self, args: Sequence[str], sink, cwd: Optional[str] = None) -> int:
        self.streams.append(list(args))
        self.cwds.append(cwd)
        sink(f"output of {' '.join(args)}\n")
        rc = self.exit_codes.get(args[-1], self.exit_codes.get(args[0], 0))
        if args[0] == "makepkg" and rc == 0 and self.build_provides:
            self.tools.add(self.build_provides)
        return rc


class PickingChooser:
    """Chooser stand-in that "selects" the lines whose package is in `names`."""

    def __init__(self, names: Sequence[str]):
        self.names = list(names)
        self.seen: List[str] = []

    def choose(self, lines: Sequence[str]) -> str:
        self.seen = list(lines)
        picked = [ln for ln in lines if marker_to_name(split_line(ln)[3]) in self.names]
        return "\n".join(picked)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def packages_dir(tmp_path: Path) -> Path:
    d = tmp_path / "packages"
    d.mkdir()
    return d


@pytest.fixture
def write_list(packages_dir: Path):
    def _write(name: str, *lines: str) -> Path:
        path = packages_dir / f"{name}.list"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def state_env(tmp_path: Path) -> Dict[str, str]:
    return {"XDG_STATE_HOME": str(tmp_path / "state")}
