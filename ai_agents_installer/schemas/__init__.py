"""Release schema exports."""

from .release import Checksum, Formula, PlatformKey, ReleaseDescriptor, render_download_url

__all__ = [
    "Checksum",
    "Formula",
    "PlatformKey",
    "ReleaseDescriptor",
    "render_download_url",
]
