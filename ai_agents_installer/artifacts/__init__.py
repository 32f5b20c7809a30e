"""Archive download, verification and installation."""

from .download import download_artifact, fetch_artifact
from .installer import InstalledFile, Installer, InstallResult
from .layout import Destination, InstallItem, InstallLayout, default_items
from .utils import compute_sha256, verify_sha256

__all__ = [
    "Destination",
    "InstallItem",
    "InstallLayout",
    "InstalledFile",
    "Installer",
    "InstallResult",
    "compute_sha256",
    "default_items",
    "download_artifact",
    "fetch_artifact",
    "verify_sha256",
]
