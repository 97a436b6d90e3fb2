from __future__ import annotations
import logging
import sys
from collections import deque
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .models import InstallReport

LOGGER_NAME = "archpick"
CRASH_TAIL_LINES = 200
REPORT_TITLE = "Interactive Arch Installer"

LEVEL_TAGS = {logging.WARNING: "WARN", logging.CRITICAL: "ERROR"}

def iso_now(when: Optional[datetime] = None) -> str:
    return (when or datetime.now()).astimezone().isoformat(timespec="seconds")

class LineFormatter(logging.Formatter):
    """`<ISO-8601> [LEVEL] message`, with WARN instead of WARNING."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s [%(tag)s] %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        return iso_now(datetime.fromtimestamp(record.created))

    def format(self, record: logging.LogRecord) -> str:
        record.tag = LEVEL_TAGS.get(record.levelno, record.levelname)
        return super().format(record)

class RunLog:
    """
    Session log. Attaches a file handler and a terminal handler to the
    `archpick` logger until `close()`; raw child-process output goes
    through `raw()`.
    """

    def __init__(self, path: Path, verbose: bool = False, console: Optional[Console] = None, echo: Optional[TextIO] = None):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.echo = echo
        self.logger = logging.getLogger(LOGGER_NAME)

        self._file = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        self._file.setFormatter(LineFormatter())
        self._term = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        self.logger.addHandler(self._file)
        self.logger.addHandler(self._term)
        self.logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def raw(self, text: str, echo: bool = True) -> None:
        if echo:
            out = self.echo or sys.stdout
            out.write(text)
            out.flush()
        self._file.acquire()
        try:
            self._file.stream.write(text)
            self._file.stream.flush()
        finally:
            self._file.release()

    def tail(self, n: int = CRASH_TAIL_LINES) -> List[str]:
        self._file.flush()
        with open(self.path, "r", encoding="utf-8", errors="replace") as f:
            return list(deque(f, maxlen=n))

    def close(self) -> None:
        for h in (self._file, self._term):
            self.logger.removeHandler(h)
            h.close()
        self.logger.setLevel(logging.NOTSET)

def _names(names: Sequence[str]) -> List[str]:
    return [f"  {n}" for n in names]

def write_summary(path: Path, report: InstallReport, log_file: Path, user: str, when: Optional[datetime] = None) -> None:
    lines = [
        f"{REPORT_TITLE} run summary",
        f"Timestamp: {iso_now(when)}",
        f"User: {user}",
        f"Packages requested: {len(report.requested)}",
        f"Succeeded: {len(report.succeeded)}",
        *_names(report.succeeded),
        f"Failed: {len(report.failed)}",
        *_names(report.failed),
        f"Logfile: {log_file}",
        "End of summary.",
    ]
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")

def write_dry_run(path: Path, packages: Sequence[str], log_file: Path, user: str, when: Optional[datetime] = None) -> None:
    lines = [
        f"{REPORT_TITLE} dry run",
        f"Timestamp: {iso_now(when)}",
        f"User: {user}",
        f"Would install: {len(packages)}",
        *_names(packages),
        f"Logfile: {log_file}",
    ]
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")

def append_crash_tail(path: Path, tail: Sequence[str]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"---- Last {CRASH_TAIL_LINES} lines of log ----\n")
        f.writelines(tail)

def print_banner(console: Console, packages_dir: Path, desc_dir: Path, log_file: Path) -> None:
    console.print()
    console.print(f"[bold cyan]{REPORT_TITLE} (yay-only) - {datetime.now():%c}[/]")
    console.print(f"Packages dir: {escape(str(packages_dir))}")
    console.print(f"Descriptions dir: {escape(str(desc_dir))}")
    console.print(f"Log file: {escape(str(log_file))}")
    console.print()

def print_summary(console: Console, report: InstallReport, report_file: Path, log_file: Path) -> None:
    console.print()
    console.print(f"[b]Packages requested:[/b] {len(report.requested)}")
    console.print(f"[b green]Succeeded:[/] {len(report.succeeded)}")
    for n in report.succeeded:
        console.print(f"  [green]{escape(n)}[/]")
    console.print(f"[b red]Failed:[/] {len(report.failed)}")
    for n in report.failed:
        console.print(f"  [red]{escape(n)}[/]")
    console.print()
    console.print(f"[bold green]Done. Summary saved to:[/] {escape(str(report_file))}")
    console.print(f"Log: {escape(str(log_file))}")
