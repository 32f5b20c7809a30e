"""Post-install smoke checks for the installed binary."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .errors import SmokeTestFailed

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def contains_title(output: str, title: str) -> bool:
    return title in output


def contains_version(output: str, version: str) -> bool:
    """True if ``version`` appears as a whole version token in ``output``.

    ``1.0.0`` matches ``v1.0.0`` and ``version 1.0.0`` but not ``1.0.1``,
    ``11.0.0`` or ``1.0.0.1``.
    """

    pattern = rf"(?<!\d)(?<!\d\.){re.escape(version)}(?!\.?\d)"
    return re.search(pattern, output) is not None


@dataclass(slots=True)
class SmokeCheck:
    name: str
    args: Sequence[str]
    expected: str
    matcher: Callable[[str, str], bool]


@dataclass(slots=True)
class SmokeCheckResult:
    name: str
    argv: List[str]
    expected: str
    passed: bool
    returncode: Optional[int] = None
    output: str = ""
    message: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "argv": self.argv,
            "expected": self.expected,
            "passed": self.passed,
            "returncode": self.returncode,
            "output": self.output,
            "message": self.message,
        }


@dataclass(slots=True)
class SmokeReport:
    binary: Path
    checks: List[SmokeCheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return bool(self.checks) and all(check.passed for check in self.checks)

    def to_dict(self) -> Dict[str, object]:
        return {
            "binary": str(self.binary),
            "passed": self.passed,
            "checks": [check.to_dict() for check in self.checks],
        }


class SmokeTestRunner:
    """Runs ``--help`` and ``version`` against an installed binary."""

    def __init__(
        self,
        binary: Path,
        *,
        title: str,
        version: str,
        expected_returncode: Optional[int] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.binary = Path(binary)
        self.title = title
        self.version = version
        self.expected_returncode = expected_returncode
        self.timeout = timeout

    def checks(self) -> List[SmokeCheck]:
        return [
            SmokeCheck(name="help", args=["--help"], expected=self.title, matcher=contains_title),
            SmokeCheck(name="version", args=["version"], expected=self.version, matcher=contains_version),
        ]

    def run(self) -> SmokeReport:
        report = SmokeReport(binary=self.binary)
        for check in self.checks():
            result = self._run_check(check)
            if not result.passed:
                logger.warning("Smoke check '%s' failed: %s", result.name, result.message)
            report.checks.append(result)
        return report

    def verify(self) -> SmokeReport:
        report = self.run()
        if not report.passed:
            raise SmokeTestFailed(report)
        return report

    def _run_check(self, check: SmokeCheck) -> SmokeCheckResult:
        argv = [str(self.binary), *check.args]
        result = SmokeCheckResult(name=check.name, argv=argv, expected=check.expected, passed=False)
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            result.message = f"Timed out after {self.timeout}s"
            return result
        except OSError as exc:
            result.message = f"Could not execute {self.binary}: {exc}"
            return result

        result.returncode = proc.returncode
        result.output = proc.stdout or ""

        if self.expected_returncode is not None and proc.returncode != self.expected_returncode:
            result.message = f"Exit status {proc.returncode}, expected {self.expected_returncode}"
            return result
        if not check.matcher(result.output, check.expected):
            result.message = f"Output of '{' '.join(check.args)}' does not contain '{check.expected}'"
            return result

        result.passed = True
        return result
