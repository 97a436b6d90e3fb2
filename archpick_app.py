#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from archpick.config import DEFAULT_PACKAGES_DIR, Options
from archpick.session import run

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="archpick",
        description="Pick Arch packages from curated lists and install them with yay.",
        allow_abbrev=False,
    )
    ap.add_argument("packages_dir", nargs="?", default=DEFAULT_PACKAGES_DIR, help=f"directory with *.list files (default {DEFAULT_PACKAGES_DIR})")
    ap.add_argument("--dry-run", action="store_true", help="only show what would happen")
    ap.add_argument("--no-confirm", action="store_true", help="do not auto-confirm installs (yay will prompt)")
    ap.add_argument("--log-file", metavar="PATH", help="override default log path")
    ap.add_argument("--verbose", action="store_true", help="more debug output")
    return ap

def parse_options(argv: Optional[List[str]] = None) -> Options:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.log_file is not None and not args.log_file.strip():
        ap.error("--log-file requires a path argument")
    return Options(
        packages_dir=Path(args.packages_dir),
        dry_run=args.dry_run,
        auto_confirm=not args.no_confirm,
        log_file=Path(args.log_file) if args.log_file else None,
        verbose=args.verbose,
    )

def main(argv: Optional[List[str]] = None) -> int:
    return run(parse_options(argv))

if __name__ == "__main__":
    sys.exit(main())
