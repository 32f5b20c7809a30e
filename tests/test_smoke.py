from __future__ import annotations

from pathlib import Path

import pytest

from ai_agents_installer.errors import SmokeTestFailed
from ai_agents_installer.smoke import SmokeTestRunner, contains_version

from .test_installer import FAKE_BINARY


def _write_binary(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    path.chmod(0o755)
    return path


def test_smoke_test_passes(tmp_path: Path) -> None:
    binary = _write_binary(tmp_path / "ai-agents-cli", FAKE_BINARY.format(version="1.0.0"))

    report = SmokeTestRunner(binary, title="AI Agents CLI", version="1.0.0").verify()

    assert report.passed
    assert [check.name for check in report.checks] == ["help", "version"]
    assert report.checks[0].returncode == 1


def test_help_without_title_fails(tmp_path: Path) -> None:
    binary = _write_binary(
        tmp_path / "ai-agents-cli",
        '#!/bin/sh\nif [ "$1" = "version" ]; then echo 1.0.0; else echo "Usage: tool"; fi\n',
    )

    runner = SmokeTestRunner(binary, title="AI Agents CLI", version="1.0.0")
    with pytest.raises(SmokeTestFailed) as excinfo:
        runner.verify()

    report = excinfo.value.report
    assert not report.passed
    assert report.checks[0].passed is False
    assert report.checks[1].passed is True
    assert "help" in str(excinfo.value)


def test_version_mismatch_fails(tmp_path: Path) -> None:
    binary = _write_binary(tmp_path / "ai-agents-cli", FAKE_BINARY.format(version="1.0.1"))

    report = SmokeTestRunner(binary, title="AI Agents CLI", version="1.0.0").run()

    assert not report.passed
    assert report.checks[1].name == "version"
    assert not report.checks[1].passed
    assert "1.0.0" in report.checks[1].message


def test_help_output_on_stderr_counts(tmp_path: Path) -> None:
    binary = _write_binary(
        tmp_path / "ai-agents-cli",
        '#!/bin/sh\nif [ "$1" = "version" ]; then echo v1.0.0 >&2; else echo "AI Agents CLI" >&2; fi\nexit 1\n',
    )

    assert SmokeTestRunner(binary, title="AI Agents CLI", version="1.0.0").run().passed


def test_expected_returncode_is_enforced(tmp_path: Path) -> None:
    binary = _write_binary(tmp_path / "ai-agents-cli", FAKE_BINARY.format(version="1.0.0"))

    assert SmokeTestRunner(binary, title="AI Agents CLI", version="1.0.0", expected_returncode=1).run().passed
    report = SmokeTestRunner(binary, title="AI Agents CLI", version="1.0.0", expected_returncode=0).run()
    assert not report.passed
    assert "Exit status 1" in report.checks[0].message


def test_missing_binary_reports_failure(tmp_path: Path) -> None:
    report = SmokeTestRunner(tmp_path / "absent", title="AI Agents CLI", version="1.0.0").run()

    assert not report.passed
    assert all(check.returncode is None for check in report.checks)
    assert "Could not execute" in report.checks[0].message


def test_undecodable_output_is_replaced(tmp_path: Path) -> None:
    binary = _write_binary(
        tmp_path / "ai-agents-cli",
        "#!/bin/sh\n"
        'if [ "$1" = "version" ]; then printf \'v1.0.0 \\377\\n\'; else printf \'AI Agents CLI \\377\\376\\n\'; fi\n'
        "exit 1\n",
    )

    report = SmokeTestRunner(binary, title="AI Agents CLI", version="1.0.0").run()

    assert report.passed
    assert "�" in report.checks[0].output


@pytest.mark.parametrize(
    ("output", "expected"),
    [
        ("ai-agents-cli version 1.0.0", True),
        ("v1.0.0", True),
        ("1.0.0\n", True),
        ("version: 1.0.0.", True),
        ("ai-agents-cli version 1.0.1", False),
        ("11.0.0", False),
        ("1.0.0.1", False),
        ("1.0.01", False),
    ],
)
def test_contains_version(output: str, expected: bool) -> None:
    assert contains_version(output, "1.0.0") is expected
