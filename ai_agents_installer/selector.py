"""Release artifact selection for the invoking platform."""

from __future__ import annotations

import logging
import platform as _platform
from dataclasses import dataclass
from typing import Optional

from .errors import UnsupportedPlatform
from .schemas.release import Formula, PlatformKey, ReleaseDescriptor, render_download_url

logger = logging.getLogger(__name__)

_MACOS_NAMES = {"darwin", "macos", "macosx", "osx", "mac"}
_LINUX_NAMES = {"linux"}
_ARM64_NAMES = {"arm64", "aarch64", "armv8", "armv8l"}
_AMD64_NAMES = {"x86_64", "amd64", "x64", "x86-64"}


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Normalised OS and architecture of a host."""

    os_name: str
    arch: str


def detect_platform() -> PlatformInfo:
    """Describe the current host using :mod:`platform`."""

    return PlatformInfo(os_name=_platform.system(), arch=_platform.machine())


def normalize_os(os_name: str) -> str:
    lowered = (os_name or "").strip().lower()
    if lowered in _MACOS_NAMES:
        return "macos"
    if lowered in _LINUX_NAMES:
        return "linux"
    raise UnsupportedPlatform(f"Unsupported operating system: {os_name or '<empty>'}")


def normalize_arch(arch: str) -> Optional[str]:
    """Return ``arm64``/``amd64`` or ``None`` for unrecognised values."""

    lowered = (arch or "").strip().lower()
    if lowered in _ARM64_NAMES:
        return "arm64"
    if lowered in _AMD64_NAMES:
        return "amd64"
    return None


def resolve_platform_key(os_name: str, arch: str) -> PlatformKey:
    """Map an OS/architecture pair onto a published platform key.

    Linux only ships an amd64 archive. On macOS an unrecognised architecture
    falls back to the amd64 archive, which Rosetta can run.
    """

    family = normalize_os(os_name)
    normalized_arch = normalize_arch(arch)
    if family == "linux":
        if normalized_arch != "amd64":
            logger.warning("No linux-%s archive published; using linux-amd64", normalized_arch or arch)
        return PlatformKey.LINUX_AMD64
    if normalized_arch == "arm64":
        return PlatformKey.MACOS_ARM64
    if normalized_arch is None:
        logger.warning("Unrecognised architecture '%s'; falling back to macos-amd64", arch)
    return PlatformKey.MACOS_AMD64


def parse_platform_key(value: str) -> PlatformKey:
    try:
        return PlatformKey(value.strip().lower())
    except ValueError:
        choices = ", ".join(key.value for key in PlatformKey)
        raise UnsupportedPlatform(f"Unknown platform key '{value}'. Expected one of: {choices}") from None


def select_artifact(
    formula: Formula,
    os_name: Optional[str] = None,
    arch: Optional[str] = None,
) -> ReleaseDescriptor:
    """Return the release descriptor matching the given (or current) platform."""

    if os_name is None or arch is None:
        host = detect_platform()
        os_name = host.os_name if os_name is None else os_name
        arch = host.arch if arch is None else arch

    key = resolve_platform_key(os_name, arch)
    if key not in formula.checksums:
        if key.os_token == "darwin" and PlatformKey.MACOS_AMD64 in formula.checksums:
            logger.warning("Formula has no %s artifact; using %s", key.value, PlatformKey.MACOS_AMD64.value)
            key = PlatformKey.MACOS_AMD64
        else:
            raise UnsupportedPlatform(f"Formula '{formula.name}' publishes no artifact for {key.value}")

    descriptor = formula.descriptor(key)
    logger.debug("Selected %s for os=%s arch=%s", descriptor.url, os_name, arch)
    return descriptor


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "normalize_os",
    "normalize_arch",
    "parse_platform_key",
    "render_download_url",
    "resolve_platform_key",
    "select_artifact",
]
