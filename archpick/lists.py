from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Mapping, Optional, Set, Tuple

from .errors import ConfigError, EmptyResultError
from .models import AUR_PREFIX, Group, PackageEntry

logger = logging.getLogger(__name__)

LIST_SUFFIX = ".list"
DEFAULT_GROUP_COLOR = "0;37"

def is_aur_group(name: str) -> bool:
    # TODO: replace the name heuristic with an explicit per-group source field
    return "aur" in name.lower()

def make_group(name: str, colors: Mapping[str, str]) -> Group:
    return Group(name=name, color=colors.get(name, DEFAULT_GROUP_COLOR), is_aur=is_aur_group(name))

def parse_line(line: str, group: Group) -> Optional[Tuple[str, str]]:
    """
    Returns (key, source) for one list-file line, or None for blanks and
    `#` comments. An `aur:` prefix forces the AUR source.
    """
    s = line.strip()
    if not s or s.startswith("#"):
        return None
    if s.startswith(AUR_PREFIX):
        key = s[len(AUR_PREFIX):].strip()
        return (key, "aur") if key else None
    return s, ("aur" if group.is_aur else "repo")

def list_files(directory: Path) -> List[Path]:
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix == LIST_SUFFIX),
        key=lambda p: p.name,
    )

def load_entries(directory: Path, colors: Mapping[str, str]) -> List[PackageEntry]:
    """
    Reads every `*.list` file of `directory` (sorted by file name) into one
    ordered list of entries. The first occurrence of a key wins, later
    duplicates from any group are dropped.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ConfigError(f"Packages directory not found: {directory}")

    seen: Set[str] = set()
    out: List[PackageEntry] = []
    for path in list_files(directory):
        group = make_group(path.stem, colors)
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                parsed = parse_line(line, group)
                if parsed is None:
                    continue
                key, source = parsed
                if key in seen:
                    logger.debug("Duplicate %s in %s ignored", key, path.name)
                    continue
                seen.add(key)
                out.append(PackageEntry(key=key, source=source, group=group))

    if not out:
        raise EmptyResultError(f"No packages found in {directory}")
    return out
