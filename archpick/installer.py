from __future__ import annotations
import logging
import os
import shlex
import tempfile
from typing import Callable, List, Optional, Sequence

from rich.prompt import Confirm

from .arch import ProcessRunner, Sink
from .errors import MissingDependencyError
from .models import InstallReport, InstallResult

logger = logging.getLogger(__name__)

INSTALLER = "yay"
INSTALLER_AUR_URL = "https://aur.archlinux.org/yay.git"

Consent = Callable[[str], bool]

def ask_consent(question: str) -> bool:
    return Confirm.ask(question, default=False)

def _step(runner: ProcessRunner, cmd: List[str], sink: Sink, cwd: Optional[str] = None) -> None:
    logger.debug("Running: %s", shlex.join(cmd))
    rc = runner.stream(cmd, sink, cwd=cwd)
    if rc != 0:
        raise MissingDependencyError(f"Failed to build {INSTALLER}: `{shlex.join(cmd)}` exited with {rc}")

def bootstrap_installer(runner: ProcessRunner, sink: Sink) -> None:
    """Builds yay from its AUR recipe (needs sudo and base-devel)."""
    logger.info("Installing base-devel and git if missing...")
    _step(runner, ["sudo", "pacman", "-Sy", "--noconfirm"], sink)
    _step(runner, ["sudo", "pacman", "-S", "--needed", "--noconfirm", "base-devel", "git"], sink)

    with tempfile.TemporaryDirectory(prefix="archpick-") as tmp:
        clone = os.path.join(tmp, INSTALLER)
        logger.info("Cloning %s AUR...", INSTALLER)
        _step(runner, ["git", "clone", INSTALLER_AUR_URL, clone], sink)
        logger.info("Building and installing %s...", INSTALLER)
        _step(runner, ["makepkg", "-si", "--noconfirm"], sink, cwd=clone)

def ensure_installer(runner: ProcessRunner, sink: Sink, consent: Consent = ask_consent) -> str:
    path = runner.which(INSTALLER)
    if path:
        logger.info("%s is installed: %s", INSTALLER, path)
        return path

    logger.info("%s not found. Will build & install %s from AUR (requires sudo & base-devel).", INSTALLER, INSTALLER)
    if not consent(f"Proceed to install {INSTALLER} now?"):
        raise MissingDependencyError(f"{INSTALLER} required; aborting.")

    bootstrap_installer(runner, sink)

    path = runner.which(INSTALLER)
    if not path:
        raise MissingDependencyError(f"{INSTALLER} still not found after build. Aborting.")
    logger.info("%s installed successfully: %s", INSTALLER, path)
    return path

def install_command(pkg: str, auto_confirm: bool = True) -> List[str]:
    cmd = [INSTALLER, "-S", "--needed"]
    if auto_confirm:
        cmd.append("--noconfirm")
    cmd.append(pkg)
    return cmd

def install_packages(runner: ProcessRunner, packages: Sequence[str], sink: Sink, auto_confirm: bool = True) -> InstallReport:
    """
    Installs one package at a time. A failing package is recorded and the
    loop moves on to the next one.
    """
    report = InstallReport(requested=list(packages))
    logger.info("Beginning installation via %s...", INSTALLER)
    for pkg in packages:
        logger.info("Installing: %s", pkg)
        result = InstallResult(pkg, runner.stream(install_command(pkg, auto_confirm), sink))
        report.record(result)
        if result.ok:
            logger.info("Installed: %s", pkg)
        else:
            logger.error("Failed to install: %s (exit code %d)", pkg, result.exit_code)
    return report
