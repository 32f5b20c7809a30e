"""Exceptions raised by the installer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .smoke import SmokeReport


class InstallerError(RuntimeError):
    """Base class for installer failures reported to the user."""


class UnsupportedPlatform(InstallerError):
    """Raised when no release artifact exists for the requested platform."""


class DownloadError(InstallerError):
    """Raised when a release archive cannot be downloaded."""


class ChecksumMismatch(InstallerError):
    """Raised when an archive digest differs from the published one."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"Checksum mismatch for {path}. Expected={expected} Actual={actual}")


class MissingBinary(InstallerError):
    """Raised when the archive does not contain the executable."""


class FormulaError(InstallerError):
    """Raised when a formula manifest cannot be loaded."""


class SmokeTestFailed(InstallerError):
    """Raised when post-install smoke checks do not pass."""

    def __init__(self, report: "SmokeReport") -> None:
        self.report = report
        failed = ", ".join(check.name for check in report.checks if not check.passed)
        super().__init__(f"Smoke test failed: {failed or 'unknown check'}")


__all__ = [
    "InstallerError",
    "UnsupportedPlatform",
    "DownloadError",
    "ChecksumMismatch",
    "MissingBinary",
    "FormulaError",
    "SmokeTestFailed",
]
