"""Release archive download and verification."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests
from requests import Session
from requests.exceptions import RequestException

from ..errors import ChecksumMismatch, DownloadError
from ..schemas.release import ReleaseDescriptor
from .utils import verify_sha256

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60
_CHUNK_SIZE = 1024 * 1024


def download_artifact(
    descriptor: ReleaseDescriptor,
    destination_dir: Path,
    *,
    session: Optional[Session] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> Path:
    """Stream ``descriptor.url`` into ``destination_dir`` and return the file path."""

    destination_dir.mkdir(parents=True, exist_ok=True)
    target = destination_dir / descriptor.filename
    partial = target.with_name(target.name + ".part")

    if session is None:
        with requests.Session() as owned:
            return _stream(descriptor, target, partial, owned, timeout)
    return _stream(descriptor, target, partial, session, timeout)


def _stream(descriptor: ReleaseDescriptor, target: Path, partial: Path, session: Session, timeout: int) -> Path:
    logger.info("Downloading %s", descriptor.url)
    try:
        response = session.get(descriptor.url, stream=True, timeout=timeout)
    except RequestException as exc:
        raise DownloadError(f"Download of {descriptor.url} failed: {exc}") from exc

    try:
        if response.status_code != 200:
            raise DownloadError(
                f"Download of {descriptor.url} returned {response.status_code}: {response.reason}"
            )
        with partial.open("wb") as handle:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if chunk:
                    handle.write(chunk)
    except RequestException as exc:
        partial.unlink(missing_ok=True)
        raise DownloadError(f"Download of {descriptor.url} failed: {exc}") from exc
    except Exception:
        partial.unlink(missing_ok=True)
        raise
    finally:
        response.close()

    partial.replace(target)
    return target


def fetch_artifact(
    descriptor: ReleaseDescriptor,
    destination_dir: Path,
    *,
    session: Optional[Session] = None,
    timeout: int = DEFAULT_TIMEOUT,
    expected_sha256: Optional[str] = None,
) -> tuple[Path, str]:
    """Download and verify an archive. Returns ``(path, sha256)``.

    A cached archive whose digest already matches is reused. On mismatch the
    downloaded file is removed and :class:`ChecksumMismatch` propagates.
    """

    if expected_sha256 is None and not descriptor.checksum.is_digest:
        logger.warning(
            "Published checksum for %s is a placeholder (%s); verification will fail",
            descriptor.platform.value,
            descriptor.checksum.sha256,
        )
    expected = expected_sha256 or descriptor.checksum.sha256
    cached = destination_dir / descriptor.filename
    if cached.exists():
        try:
            digest = verify_sha256(cached, expected)
        except ChecksumMismatch:
            logger.info("Discarding stale cached archive %s", cached)
            cached.unlink()
        else:
            logger.info("Using cached archive %s", cached)
            return cached, digest

    path = download_artifact(descriptor, destination_dir, session=session, timeout=timeout)
    try:
        digest = verify_sha256(path, expected)
    except ChecksumMismatch:
        path.unlink(missing_ok=True)
        raise
    return path, digest
