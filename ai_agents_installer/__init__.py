"""Platform-aware installer for prebuilt ai-agents-cli release archives."""

__version__ = "0.1.0"
from .artifacts import InstallLayout, Installer, InstallResult, compute_sha256, fetch_artifact
from .caveats import credential_status, render_caveats
from .errors import (
    ChecksumMismatch,
    DownloadError,
    FormulaError,
    InstallerError,
    MissingBinary,
    SmokeTestFailed,
    UnsupportedPlatform,
)
from .formula import load_formula, render_homebrew_formula, update_formula
from .pipeline import InstallContext, InstallReport, install_release
from .schemas.release import Checksum, Formula, PlatformKey, ReleaseDescriptor
from .selector import detect_platform, select_artifact
from .smoke import SmokeReport, SmokeTestRunner

__all__ = [
    "__version__",
    "Checksum",
    "ChecksumMismatch",
    "DownloadError",
    "Formula",
    "FormulaError",
    "InstallContext",
    "InstallLayout",
    "InstallReport",
    "InstallResult",
    "Installer",
    "InstallerError",
    "MissingBinary",
    "PlatformKey",
    "ReleaseDescriptor",
    "SmokeReport",
    "SmokeTestFailed",
    "SmokeTestRunner",
    "UnsupportedPlatform",
    "compute_sha256",
    "credential_status",
    "detect_platform",
    "fetch_artifact",
    "install_release",
    "load_formula",
    "render_caveats",
    "render_homebrew_formula",
    "select_artifact",
    "update_formula",
]
