from __future__ import annotations
import logging
import re
import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Protocol, Sequence, Tuple

from .arch import ProcessRunner, editor_command
from .models import AUR_PREFIX, PackageEntry

logger = logging.getLogger(__name__)

DELIMITER = "\t"
PACKAGE_COLOR = "1;33"
VALID_NAME = re.compile(r"^[A-Za-z0-9+_.-]+$")

GROUP_COLORS: Mapping[str, str] = MappingProxyType({
    "base": "1;32",
    "common": "0;32",
    "cli-tools": "0;36",
    "dev": "1;34",
    "web": "1;35",
    "desktop-gnome": "1;33",
    "desktop-plasma": "1;33",
    "media": "0;31",
    "productivity": "0;35",
    "virtualization": "0;36",
    "network-services": "0;33",
    "security": "1;31",
    "fonts": "0;37",
    "appearance": "0;36",
    "office": "0;34",
    "devops": "0;35",
    "media-creation": "0;31",
    "aur": "1;31",
})

def color_text(code: str, text: str) -> str:
    return f"\033[{code}m{text}\033[0m"

def format_line(entry: PackageEntry, desc_file: Path) -> str:
    # columns: colored group, colored package, description file, raw marker
    return DELIMITER.join([
        color_text(entry.group.color, entry.group.name),
        color_text(PACKAGE_COLOR, entry.key),
        str(desc_file),
        entry.marker,
    ])

def format_lines(entries: Sequence[PackageEntry], desc_paths: Mapping[str, Path]) -> List[str]:
    return [format_line(e, desc_paths[e.key]) for e in entries]

def split_line(line: str) -> List[str]:
    parts = line.split(DELIMITER)
    return parts + [""] * (4 - len(parts))

@dataclass(frozen=True)
class UiSizes:
    height_pct: int
    preview_pct: int

def ui_sizes(lines: int, cols: int) -> UiSizes:
    if lines < 24:
        height = 60
    elif lines < 40:
        height = 70
    else:
        height = 80
    if cols < 100:
        preview = 60
    elif cols < 160:
        preview = 55
    else:
        preview = 50
    return UiSizes(height, preview)

def terminal_sizes() -> UiSizes:
    size = shutil.get_terminal_size((80, 24))
    return ui_sizes(size.lines, size.columns)

def preview_command(runner: ProcessRunner) -> str:
    if runner.which("bat"):
        return "bat --style=numbers --color=always --paging=never"
    return "sed -n 1,200p"

def build_fzf_command(sizes: UiSizes, preview_cmd: str, editor: str) -> List[str]:
    return [
        "fzf", "--ansi", "--multi", f"--height={sizes.height_pct}%", "--border",
        f"--delimiter={DELIMITER}", "--with-nth=1,2",
        "--bind", f"tab:toggle+down,ctrl-a:select-all,ctrl-e:execute({editor} {{3}} >/dev/tty)",
        "--preview", f"if [ -f {{3}} ]; then {preview_cmd} {{3}}; else echo 'No description for {{2}}. Press Ctrl-E to create.'; fi",
        f"--preview-window=right:{sizes.preview_pct}%:wrap",
        "--prompt=Select packages (multi): ",
    ]

class Chooser(Protocol):
    def choose(self, lines: Sequence[str]) -> str: ...

class FzfChooser:
    def __init__(self, runner: ProcessRunner, sizes: Optional[UiSizes] = None, editor: Optional[str] = None):
        self.runner = runner
        self.sizes = sizes
        self.editor = editor

    def choose(self, lines: Sequence[str]) -> str:
        cmd = build_fzf_command(
            self.sizes or terminal_sizes(),
            preview_command(self.runner),
            self.editor or editor_command(),
        )
        logger.debug("Chooser: %s", shlex.join(cmd))
        res = self.runner.run(cmd, input_text="\n".join(lines) + "\n", interactive=True)
        # 1 = no match, 130 = aborted; both mean nothing selected
        if res.exit_code != 0:
            logger.debug("fzf exited with %d", res.exit_code)
            return ""
        return res.stdout

def choose_chooser(runner: ProcessRunner) -> Chooser:
    if runner.which("fzf"):
        return FzfChooser(runner)
    from .ui_app import TextualChooser
    logger.info("fzf not found; using the built-in picker.")
    return TextualChooser(runner)

def marker_to_name(marker: str) -> str:
    marker = marker.strip()
    return marker[len(AUR_PREFIX):] if marker.startswith(AUR_PREFIX) else marker

def parse_selection(block: str) -> Tuple[List[str], List[str]]:
    """
    Turns the chooser output back into package names. Returns
    (valid, rejected); rejected names are logged and left out.
    """
    valid: List[str] = []
    rejected: List[str] = []
    for raw in block.splitlines():
        if not raw.strip():
            continue
        pkg = marker_to_name(split_line(raw)[3])
        if VALID_NAME.fullmatch(pkg):
            valid.append(pkg)
        else:
            logger.warning("Skipping suspicious package name: %s", pkg)
            rejected.append(pkg)
    return valid, rejected
