"""
errors.py

Responsibility: the error taxonomy shared by every stage of the pipeline.

The CLI catches `GenPkgbuildError` at the top level and exits non-zero.
`UsageError` is the only variant that also prints the usage text.
"""

from __future__ import annotations


class GenPkgbuildError(RuntimeError):
    """Base exception for all genpkgbuild errors."""


class UsageError(GenPkgbuildError):
    pass


class ConfigError(GenPkgbuildError):
    pass


class TerminalUnavailable(GenPkgbuildError):
    pass


class DestinationError(GenPkgbuildError):
    pass


class ResolutionError(GenPkgbuildError):
    pass


class UnsupportedVCS(GenPkgbuildError):
    def __init__(self, vcs: str) -> None:
        super().__init__(f"sorry, only git repositories are supported: {vcs}")
        self.vcs = vcs


class CloneError(GenPkgbuildError):
    pass


class VersionCommandError(GenPkgbuildError):
    def __init__(self, message: str, stderr: str = "") -> None:
        if stderr.strip():
            message = f"{message}\n\n{stderr.rstrip()}"
        super().__init__(message)
        self.stderr = stderr


class InputError(GenPkgbuildError):
    pass


class RenderError(GenPkgbuildError):
    pass
