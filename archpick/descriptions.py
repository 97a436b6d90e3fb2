from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Dict, Iterable

from .models import PackageEntry

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9+_.-]")

TEMPLATE = (
    "Package: {key}\n"
    "Group: {group}\n"
    "Source: {source}\n"
    "\n"
    "Summary:\n"
    "\n"
    "- Purpose:\n"
    "- Notes:\n"
)

def sanitize(key: str) -> str:
    return _UNSAFE.sub("_", key)

def description_path(desc_dir: Path, key: str) -> Path:
    return Path(desc_dir) / f"{sanitize(key)}.md"

def render_template(entry: PackageEntry) -> str:
    return TEMPLATE.format(key=entry.key, group=entry.group.name, source=entry.source_label)

def ensure_descriptions(desc_dir: Path, entries: Iterable[PackageEntry]) -> Dict[str, Path]:
    """
    Maps every entry key to its description file, creating a stub for keys
    that have none yet. Existing files are never rewritten.
    """
    desc_dir = Path(desc_dir)
    desc_dir.mkdir(parents=True, exist_ok=True)
    paths: Dict[str, Path] = {}
    for e in entries:
        path = description_path(desc_dir, e.key)
        if not path.exists():
            path.write_text(render_template(e), encoding="utf-8")
            logger.info("Created description template: %s", path)
        paths[e.key] = path
    return paths
