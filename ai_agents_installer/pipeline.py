"""End-to-end install workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from requests import Session

from .artifacts.download import fetch_artifact
from .artifacts.installer import Installer, InstallResult
from .artifacts.layout import InstallLayout
from .artifacts.utils import verify_sha256
from .caveats import render_caveats
from .errors import MissingBinary
from .schemas.release import Formula, ReleaseDescriptor
from .selector import select_artifact
from .smoke import SmokeReport, SmokeTestRunner

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InstallContext:
    formula: Formula
    layout: InstallLayout
    cache_dir: Path
    os_name: Optional[str] = None
    arch: Optional[str] = None
    archive_path: Optional[Path] = None
    expected_sha256: Optional[str] = None
    run_smoke_tests: bool = True
    smoke_returncode: Optional[int] = None
    session: Optional[Session] = None


@dataclass(slots=True)
class InstallReport:
    descriptor: ReleaseDescriptor
    archive_path: Path
    sha256: str
    install: InstallResult
    smoke: Optional[SmokeReport]
    caveats: str
    logs: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.smoke is None or self.smoke.passed

    def to_dict(self) -> Dict[str, object]:
        return {
            "descriptor": self.descriptor.model_dump(mode="json"),
            "archive_path": str(self.archive_path),
            "sha256": self.sha256,
            "install": self.install.to_dict(),
            "smoke": self.smoke.to_dict() if self.smoke else None,
            "succeeded": self.succeeded,
            "caveats": self.caveats,
            "logs": self.logs,
            "next_steps": self.next_steps,
        }


def install_release(context: InstallContext) -> InstallReport:
    """Select, fetch, verify and install a release, then smoke test it.

    Checksum failures abort before anything is copied. Smoke test failures
    are recorded on the report and leave the installed files in place.
    """

    logs: List[str] = []
    formula = context.formula
    descriptor = select_artifact(formula, context.os_name, context.arch)
    logs.append(f"Selected {descriptor.platform.value} artifact {descriptor.url}")

    expected = context.expected_sha256 or descriptor.checksum.sha256
    if context.archive_path is not None:
        archive = context.archive_path
        if not archive.exists():
            raise FileNotFoundError(f"Archive not found: {archive}")
        sha = verify_sha256(archive, expected)
        logs.append(f"Using local archive {archive}")
    else:
        archive, sha = fetch_artifact(
            descriptor,
            context.cache_dir,
            session=context.session,
            expected_sha256=expected,
        )
        logs.append(f"Downloaded {descriptor.filename} to {archive}")
    logs.append(f"Verified sha256 {sha}")

    installer = Installer(context.layout, binary=formula.name)
    result = installer.install(archive)
    logs.extend(result.logs)

    smoke: Optional[SmokeReport] = None
    next_steps: List[str] = []
    if context.run_smoke_tests:
        binary = result.binary_path
        if binary is None:  # pragma: no cover - installer guarantees the binary
            raise MissingBinary(f"{formula.name} was not installed")
        runner = SmokeTestRunner(
            binary,
            title=formula.title,
            version=formula.version,
            expected_returncode=context.smoke_returncode,
        )
        smoke = runner.run()
        if smoke.passed:
            logs.append("Smoke tests passed.")
        else:
            logs.append("Smoke tests failed; installed files were kept.")
            next_steps.append(f"Run `{binary} --help` and `{binary} version` to investigate.")

    return InstallReport(
        descriptor=descriptor,
        archive_path=archive,
        sha256=sha,
        install=result,
        smoke=smoke,
        caveats=render_caveats(formula),
        logs=logs,
        next_steps=next_steps,
    )
