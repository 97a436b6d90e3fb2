from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

AUR_PREFIX = "aur:"

@dataclass(frozen=True)
class Group:
    name: str
    color: str
    is_aur: bool = False

@dataclass(frozen=True)
class PackageEntry:
    key: str
    source: str  # repo|aur
    group: Group

    @property
    def is_aur(self) -> bool:
        return self.source == "aur"

    @property
    def marker(self) -> str:
        return f"{AUR_PREFIX}{self.key}" if self.is_aur else self.key

    @property
    def source_label(self) -> str:
        return "AUR" if self.is_aur else "official"

@dataclass(frozen=True)
class InstallResult:
    name: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

@dataclass
class InstallReport:
    requested: List[str] = field(default_factory=list)
    succeeded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def record(self, result: InstallResult) -> None:
        (self.succeeded if result.ok else self.failed).append(result.name)
