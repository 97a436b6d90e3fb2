from __future__ import annotations
import codecs
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Tuple

Sink = Callable[[str], None]

@dataclass(frozen=True)
class ProcessResult:
    stdout: str
    stderr: str
    exit_code: int

class ProcessRunner:
    """
    Narrow seam over child processes (chooser, editor, yay, pacman).
    Tests swap in a fake with the same three methods.
    """

    def which(self, cmd: str) -> Optional[str]:
        return shutil.which(cmd)

    def run(self, args: Sequence[str], input_text: Optional[str] = None, interactive: bool = False) -> ProcessResult:
        # interactive: stderr stays on the terminal (fzf draws its UI there)
        stderr = None if interactive else subprocess.PIPE
        try:
            p = subprocess.run(list(args), input=input_text, stdout=subprocess.PIPE, stderr=stderr, text=True)
        except FileNotFoundError:
            return ProcessResult("", f"Command not found: {args[0]}", 127)
        return ProcessResult(p.stdout, p.stderr or "", p.returncode)

    def stream(self, args: Sequence[str], sink: Sink, cwd: Optional[str] = None) -> int:
        """
        Runs a command with stdout+stderr merged, handing output to `sink`
        as it arrives. stdin stays attached so yay/sudo can still prompt.
        """
        try:
            p = subprocess.Popen(list(args), stdout=subprocess.PIPE, stderr=subprocess.STDOUT, cwd=cwd)
        except FileNotFoundError:
            sink(f"Command not found: {args[0]}\n")
            return 127
        assert p.stdout is not None
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        with p.stdout:
            # read1: prompts without a trailing newline must show up immediately
            while True:
                chunk = p.stdout.read1(4096)
                if not chunk:
                    break
                sink(decoder.decode(chunk))
            tail = decoder.decode(b"", final=True)
            if tail:
                sink(tail)
        return p.wait()

def run_capture(runner: ProcessRunner, cmd: List[str]) -> Tuple[int, str]:
    res = runner.run(cmd)
    return res.exit_code, res.stdout

def installed_packages(runner: ProcessRunner) -> Set[str]:
    if not runner.which("pacman"):
        return set()
    rc, out = run_capture(runner, ["pacman", "-Qq"])
    return set(out.split()) if rc == 0 else set()

def editor_command() -> str:
    return os.environ.get("EDITOR") or "vi"
