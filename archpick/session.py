from __future__ import annotations
import getpass
import logging
import os
import platform
from typing import Mapping, Optional, TextIO

from rich.console import Console

from .arch import ProcessRunner
from .config import Options, RunPaths, resolve_paths
from .descriptions import ensure_descriptions
from .errors import ArchpickError
from .installer import INSTALLER, Consent, ask_consent, ensure_installer, install_packages
from .lists import load_entries
from .report import RunLog, append_crash_tail, print_banner, print_summary, write_dry_run, write_summary
from .selector import GROUP_COLORS, Chooser, choose_chooser, format_lines, parse_selection

logger = logging.getLogger(__name__)

def current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return str(os.getuid())

def system_line() -> str:
    u = platform.uname()
    return f"{u.system} {u.node} {u.release} {u.version} {u.machine}"

def run(
    options: Options,
    runner: Optional[ProcessRunner] = None,
    chooser: Optional[Chooser] = None,
    consent: Consent = ask_consent,
    console: Optional[Console] = None,
    env: Optional[Mapping[str, str]] = None,
    echo: Optional[TextIO] = None,
) -> int:
    """
    One installer session. Returns the process exit code; run-level
    failures map to their `exit_code`, anything unexpected leaves the log
    tail in the report file and propagates.
    """
    runner = runner or ProcessRunner()
    console = console or Console()
    paths = resolve_paths(options, env)
    paths.state_dir.mkdir(parents=True, exist_ok=True)
    log = RunLog(paths.log_file, verbose=options.verbose, echo=echo)
    try:
        return _session(options, paths, log, runner, chooser, consent, console)
    except ArchpickError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except Exception as exc:
        logger.exception("Unexpected error: %s", exc)
        append_crash_tail(paths.report_file, log.tail())
        logger.error("Wrote diagnostic summary to %s", paths.report_file)
        raise
    finally:
        log.close()

def _session(
    options: Options,
    paths: RunPaths,
    log: RunLog,
    runner: ProcessRunner,
    chooser: Optional[Chooser],
    consent: Consent,
    console: Console,
) -> int:
    entries = load_entries(options.packages_dir, GROUP_COLORS)
    logger.debug("Loaded %d packages from %s", len(entries), options.packages_dir)
    desc_paths = ensure_descriptions(paths.desc_dir, entries)
    lines = format_lines(entries, desc_paths)

    print_banner(console, options.packages_dir, paths.desc_dir, paths.log_file)
    logger.info("Launching selection UI...")
    block = (chooser or choose_chooser(runner)).choose(lines)
    if not block.strip():
        logger.info("No selection made; exiting.")
        return 0

    packages, _rejected = parse_selection(block)
    if not packages:
        logger.warning("No valid packages selected. Exiting.")
        return 0

    logger.info("Selected packages (%d): %s", len(packages), " ".join(packages))
    log.raw("Selected packages:\n" + "".join(f"{p}\n" for p in packages), echo=False)

    user = current_user()
    logger.info("Run started by user: %s", user)
    logger.info("System: %s", system_line())
    logger.info(
        "Running with DRY_RUN=%s AUTO_CONFIRM=%s VERBOSE=%s",
        options.dry_run, options.auto_confirm, options.verbose,
    )

    if options.dry_run:
        if not runner.which(INSTALLER):
            logger.warning("%s is not installed; a real run will offer to build it.", INSTALLER)
        logger.info("Dry-run mode: no installation will be performed.")
        write_dry_run(paths.report_file, packages, paths.log_file, user)
        logger.info("Wrote dry-run package list to %s", paths.report_file)
        return 0

    ensure_installer(runner, log.raw, consent)
    report = install_packages(runner, packages, log.raw, auto_confirm=options.auto_confirm)

    write_summary(paths.report_file, report, paths.log_file, user)
    logger.info("Wrote summary report to: %s", paths.report_file)
    if report.failed:
        logger.warning("Some packages failed to install. See %s and %s for details.", paths.report_file, paths.log_file)
    else:
        logger.info("All selected packages installed successfully.")
    print_summary(console, report, paths.report_file, paths.log_file)
    return 0
