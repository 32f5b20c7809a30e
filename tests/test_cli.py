from __future__ import annotations

import json
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

import pytest

from ai_agents_installer.artifacts.utils import compute_sha256
from ai_agents_installer.cli import main as cli

from .test_installer import _binary_files, _create_archive


def _run_cli(argv: list[str]) -> tuple[int, str]:
    buffer = StringIO()
    with redirect_stdout(buffer):
        code = cli.main(argv)
    return code, buffer.getvalue()


def _run_cli_json(argv: list[str]) -> tuple[int, dict]:
    code, output = _run_cli(argv)
    return code, json.loads(output)


def test_cli_select(tmp_path: Path) -> None:
    code, payload = _run_cli_json(["select", "--os", "Darwin", "--arch", "arm64"])

    assert code == 0
    assert payload["platform"] == "macos-arm64"
    assert "darwin-arm64" in payload["url"]
    assert payload["checksum"] == {"sha256": "PLACEHOLDER_SHA256_ARM64"}


def test_cli_select_unsupported_os() -> None:
    code, payload = _run_cli_json(["select", "--os", "Windows", "--arch", "x86_64"])

    assert code == 1
    assert payload["error"] == "UnsupportedPlatform"


def test_cli_install_local_archive(tmp_path: Path) -> None:
    archive = _create_archive(tmp_path / "release.tar.gz", _binary_files())
    prefix = tmp_path / "prefix"

    code, payload = _run_cli_json(
        [
            "install",
            "--os",
            "Linux",
            "--arch",
            "x86_64",
            "--archive",
            str(archive),
            "--sha256",
            compute_sha256(archive),
            "--prefix",
            str(prefix),
        ]
    )

    assert code == 0
    assert payload["succeeded"] is True
    assert payload["install"]["installed"][0]["path"] == str(prefix / "bin" / "ai-agents-cli")
    assert len(payload["install"]["skipped"]) == 4


def test_cli_install_checksum_mismatch(tmp_path: Path) -> None:
    archive = _create_archive(tmp_path / "release.tar.gz", _binary_files())

    code, payload = _run_cli_json(
        ["install", "--os", "Linux", "--arch", "x86_64", "--archive", str(archive), "--prefix", str(tmp_path / "p")]
    )

    assert code == 1
    assert payload["error"] == "ChecksumMismatch"
    assert not (tmp_path / "p").exists()


def test_cli_install_smoke_failure_exit_code(tmp_path: Path) -> None:
    archive = _create_archive(tmp_path / "release.tar.gz", _binary_files(version="2.0.0"))

    code, payload = _run_cli_json(
        [
            "install",
            "--os",
            "Linux",
            "--arch",
            "amd64",
            "--archive",
            str(archive),
            "--sha256",
            compute_sha256(archive),
            "--prefix",
            str(tmp_path / "prefix"),
        ]
    )

    assert code == 1
    assert payload["succeeded"] is False
    assert (tmp_path / "prefix" / "bin" / "ai-agents-cli").exists()


def test_cli_smoke_test(tmp_path: Path) -> None:
    binary = tmp_path / "ai-agents-cli"
    binary.write_text(_binary_files(version="3.1.4")["ai-agents-cli"], encoding="utf-8")
    binary.chmod(0o755)

    code, payload = _run_cli_json(["smoke-test", "--binary", str(binary), "--expect-version", "3.1.4"])
    assert code == 0
    assert payload["passed"] is True

    code, payload = _run_cli_json(["smoke-test", "--binary", str(binary)])
    assert code == 1
    assert payload["checks"][1]["passed"] is False


def test_cli_caveats_check(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IAM_KEY_ID", "id")
    monkeypatch.delenv("IAM_SECRET", raising=False)

    code, payload = _run_cli_json(["caveats", "--check", "--dotenv", str(tmp_path / ".env")])

    assert code == 0
    assert "AI Agents CLI has been installed!" in payload["caveats"]
    present = {entry["name"]: entry["present"] for entry in payload["credentials"]}
    assert present["IAM_KEY_ID"] is True
    assert present["IAM_SECRET"] is False


def test_cli_checksum(tmp_path: Path) -> None:
    target = tmp_path / "file.bin"
    target.write_bytes(b"abc")

    code, payload = _run_cli_json(["checksum", str(target)])

    assert code == 0
    assert payload["sha256"] == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_cli_formula_update_and_render(tmp_path: Path) -> None:
    archive = tmp_path / "linux.tar.gz"
    archive.write_bytes(b"linux archive")
    manifest = tmp_path / "formula.yaml"

    code, payload = _run_cli_json(
        [
            "formula",
            "update",
            "--set-version",
            "1.4.0",
            "--checksum",
            "macos-arm64=" + "a" * 64,
            "--archive",
            f"linux-amd64={archive}",
            "--output",
            str(manifest),
        ]
    )
    assert code == 0
    assert payload["version"] == "1.4.0"
    assert payload["checksums"]["linux-amd64"] == compute_sha256(archive)

    code, text = _run_cli(["--formula", str(manifest), "formula", "render"])
    assert code == 0
    assert 'version "1.4.0"' in text
    assert f'sha256 "{"a" * 64}"' in text
    assert "ai-agents-cli-linux-amd64.tar.gz" in text


def test_cli_formula_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manifest = tmp_path / "formula.json"
    manifest.write_text(
        json.dumps({"version": "5.0.0", "default_platform": "linux-amd64", "checksums": {"linux-amd64": "e" * 64}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("AI_AGENTS_FORMULA", str(manifest))

    code, payload = _run_cli_json(["select", "--os", "linux", "--arch", "x86_64"])

    assert code == 0
    assert payload["version"] == "5.0.0"
    assert payload["url"].endswith("/v5.0.0/ai-agents-cli-linux-amd64.tar.gz")


def test_cli_formula_render_rejects_missing_default_artifact(tmp_path: Path) -> None:
    manifest = tmp_path / "formula.json"
    manifest.write_text(json.dumps({"checksums": {"linux-amd64": "e" * 64}}), encoding="utf-8")

    code, payload = _run_cli_json(["--formula", str(manifest), "formula", "render"])

    assert code == 1
    assert payload["error"] == "FormulaError"
    assert "default_platform" in payload["message"]


def test_cli_formula_update_sets_fields(tmp_path: Path) -> None:
    manifest = tmp_path / "formula.json"

    code, payload = _run_cli_json(
        [
            "formula",
            "update",
            "--set",
            "homepage=https://github.com/cloudru/ai-agents-cli",
            "--set",
            "credentials=api-key",
            "--output",
            str(manifest),
        ]
    )

    assert code == 0
    assert payload["homepage"] == "https://github.com/cloudru/ai-agents-cli"
    assert payload["credentials"] == "api-key"
    assert json.loads(manifest.read_text(encoding="utf-8"))["credentials"] == "api-key"

    code, payload = _run_cli_json(["formula", "update", "--set", "channel=beta", "--output", str(manifest)])
    assert code == 1
    assert payload["error"] == "FormulaError"
