"""Shared helpers used by artifact tooling."""

from __future__ import annotations

import hashlib
import stat
from pathlib import Path

from ..errors import ChecksumMismatch

_CHUNK_SIZE = 1024 * 1024


def compute_sha256(path: Path) -> str:
    """Return the SHA-256 checksum for a file."""

    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify_sha256(path: Path, expected: str) -> str:
    """Check ``path`` against ``expected`` and return the actual digest.

    Raises :class:`ChecksumMismatch` when the digests differ, including the
    case where ``expected`` is a placeholder rather than a real digest.
    """

    actual = compute_sha256(path)
    if actual != expected.strip().lower():
        raise ChecksumMismatch(str(path), expected, actual)
    return actual


def make_executable(path: Path) -> None:
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
