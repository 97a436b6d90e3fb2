from __future__ import annotations


class ArchpickError(Exception):
    """Fatal, run-level failure. The CLI exits with ``exit_code``."""

    exit_code = 1


class ConfigError(ArchpickError):
    """Bad command line input or a missing packages directory."""


class MissingDependencyError(ArchpickError):
    """The installer tool is absent and could not be bootstrapped."""


class EmptyResultError(ArchpickError):
    """The packages directory yielded no package entries."""
