from __future__ import annotations
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

APP_NAME = "archpick"
DEFAULT_PACKAGES_DIR = "./packages"
DESCRIPTIONS_DIRNAME = "descriptions"

@dataclass(frozen=True)
class Options:
    packages_dir: Path = Path(DEFAULT_PACKAGES_DIR)
    dry_run: bool = False
    auto_confirm: bool = True  # False => yay asks before each install
    log_file: Optional[Path] = None
    verbose: bool = False

@dataclass(frozen=True)
class RunPaths:
    state_dir: Path
    log_file: Path
    report_file: Path
    desc_dir: Path

def state_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    base = env.get("XDG_STATE_HOME") or ""
    root = Path(base) if base else Path(env.get("HOME") or Path.home()) / ".local" / "state"
    return root / APP_NAME

def descriptions_dir(packages_dir: Path) -> Path:
    return Path(packages_dir).parent / DESCRIPTIONS_DIRNAME

def resolve_paths(options: Options, env: Optional[Mapping[str, str]] = None, stamp: Optional[str] = None) -> RunPaths:
    stamp = stamp or time.strftime("%Y%m%d_%H%M%S")
    sdir = state_dir(env)
    log_file = Path(options.log_file) if options.log_file else sdir / f"installer_{stamp}.log"
    return RunPaths(
        state_dir=sdir,
        log_file=log_file,
        report_file=sdir / f"installer_summary_{stamp}.txt",
        desc_dir=descriptions_dir(options.packages_dir),
    )
