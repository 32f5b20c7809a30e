"""Command-line entry point for the installer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from ai_agents_installer import __version__
from ai_agents_installer.artifacts.download import fetch_artifact
from ai_agents_installer.artifacts.layout import InstallLayout
from ai_agents_installer.artifacts.utils import compute_sha256
from ai_agents_installer.caveats import credential_status, render_caveats
from ai_agents_installer.config import InstallerSettings
from ai_agents_installer.errors import InstallerError
from ai_agents_installer.formula import (
    dump_formula,
    load_formula_or_default,
    render_homebrew_formula,
    update_formula,
)
from ai_agents_installer.pipeline import InstallContext, install_release
from ai_agents_installer.schemas.release import Formula
from ai_agents_installer.secrets import use_dotenv
from ai_agents_installer.selector import parse_platform_key, select_artifact
from ai_agents_installer.smoke import SmokeTestRunner

logger = logging.getLogger("ai_agents_installer")


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = InstallerSettings.from_env()
    parser = _build_parser(settings)
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        if args.command == "select":
            return _handle_select(args)
        if args.command == "fetch":
            return _handle_fetch(args)
        if args.command == "install":
            return _handle_install(args)
        if args.command == "smoke-test":
            return _handle_smoke_test(args)
        if args.command == "caveats":
            return _handle_caveats(args)
        if args.command == "checksum":
            return _handle_checksum(args)
        if args.command == "formula":
            if args.formula_command == "render":
                return _handle_formula_render(args)
            if args.formula_command == "update":
                return _handle_formula_update(args)
            parser.error("formula command requires a subcommand")
    except InstallerError as exc:
        logger.error("%s", exc)
        _print_json({"error": type(exc).__name__, "message": str(exc)})
        return 1

    parser.error(f"Unknown command '{args.command}'")
    return 1


def _build_parser(settings: InstallerSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-agents-installer",
        description="Install prebuilt ai-agents-cli release archives.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--formula",
        default=str(settings.formula_path) if settings.formula_path else None,
        help="Formula manifest (YAML or JSON). Defaults to the built-in formula.",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    subparsers = parser.add_subparsers(dest="command", required=True)

    select = subparsers.add_parser("select", help="Show the release artifact for a platform.")
    _add_platform_arguments(select)

    fetch = subparsers.add_parser("fetch", help="Download and verify a release archive.")
    _add_platform_arguments(fetch)
    fetch.add_argument("--output-dir", default=str(settings.cache_dir))
    fetch.add_argument("--sha256", help="Expected digest, overriding the formula.")

    install = subparsers.add_parser("install", help="Download, verify and install a release.")
    _add_platform_arguments(install)
    install.add_argument("--archive", help="Install from a local archive instead of downloading.")
    install.add_argument("--prefix", default=str(settings.prefix))
    install.add_argument("--cache-dir", default=str(settings.cache_dir))
    install.add_argument("--sha256", help="Expected digest, overriding the formula.")
    install.add_argument("--skip-smoke-test", action="store_true")
    install.add_argument("--expect-returncode", type=int)

    smoke = subparsers.add_parser("smoke-test", help="Run smoke checks against an installed binary.")
    smoke.add_argument("--binary", required=True)
    smoke.add_argument("--title")
    smoke.add_argument("--expect-version", dest="expected_version")
    smoke.add_argument("--expect-returncode", type=int)

    caveats = subparsers.add_parser("caveats", help="Print post-install guidance.")
    caveats.add_argument("--check", action="store_true", help="Report which credential variables are set.")
    caveats.add_argument("--dotenv", default=str(settings.dotenv_path))

    checksum = subparsers.add_parser("checksum", help="Print the SHA-256 digest of a file.")
    checksum.add_argument("path")

    formula = subparsers.add_parser("formula", help="Formula manifest utilities.")
    formula_sub = formula.add_subparsers(dest="formula_command", required=True)
    render = formula_sub.add_parser("render", help="Render the Homebrew formula.")
    render.add_argument("--output")
    update = formula_sub.add_parser("update", help="Set version and checksums.")
    update.add_argument("--set-version", dest="new_version")
    update.add_argument("--checksum", action="append", help="platform=sha256 (repeatable).")
    update.add_argument("--archive", action="append", help="platform=path (repeatable).")
    update.add_argument(
        "--set",
        dest="overrides",
        action="append",
        help="Override a formula field, e.g. homepage=URL or credentials=api-key (repeatable).",
    )
    update.add_argument("--output", required=True)

    return parser


def _add_platform_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--os", dest="os_name", help="Target OS (defaults to the current host).")
    parser.add_argument("--arch", help="Target CPU architecture (defaults to the current host).")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_formula(args: argparse.Namespace) -> Formula:
    return load_formula_or_default(Path(args.formula) if args.formula else None)


def _handle_select(args: argparse.Namespace) -> int:
    formula = _load_formula(args)
    descriptor = select_artifact(formula, args.os_name, args.arch)
    _print_json(descriptor.model_dump(mode="json"))
    return 0


def _handle_fetch(args: argparse.Namespace) -> int:
    formula = _load_formula(args)
    descriptor = select_artifact(formula, args.os_name, args.arch)
    path, sha = fetch_artifact(descriptor, Path(args.output_dir), expected_sha256=args.sha256)
    _print_json(
        {
            "descriptor": descriptor.model_dump(mode="json"),
            "archive_path": str(path),
            "sha256": sha,
        }
    )
    return 0


def _handle_install(args: argparse.Namespace) -> int:
    formula = _load_formula(args)
    context = InstallContext(
        formula=formula,
        layout=InstallLayout(prefix=Path(args.prefix).expanduser()),
        cache_dir=Path(args.cache_dir).expanduser(),
        os_name=args.os_name,
        arch=args.arch,
        archive_path=Path(args.archive).expanduser() if args.archive else None,
        expected_sha256=args.sha256,
        run_smoke_tests=not args.skip_smoke_test,
        smoke_returncode=args.expect_returncode,
    )
    report = install_release(context)
    _print_json(report.to_dict())
    if not report.succeeded:
        logger.error("Post-install smoke tests failed for %s", formula.name)
        return 1
    return 0


def _handle_smoke_test(args: argparse.Namespace) -> int:
    formula = _load_formula(args)
    runner = SmokeTestRunner(
        Path(args.binary),
        title=args.title or formula.title,
        version=args.expected_version or formula.version,
        expected_returncode=args.expect_returncode,
    )
    report = runner.run()
    _print_json(report.to_dict())
    return 0 if report.passed else 1


def _handle_caveats(args: argparse.Namespace) -> int:
    formula = _load_formula(args)
    payload: Dict[str, object] = {"caveats": render_caveats(formula)}
    if args.check:
        use_dotenv(Path(args.dotenv))
        payload["credentials"] = credential_status(formula)
    _print_json(payload)
    return 0


def _handle_checksum(args: argparse.Namespace) -> int:
    path = Path(args.path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    _print_json({"path": str(path), "sha256": compute_sha256(path)})
    return 0


def _handle_formula_render(args: argparse.Namespace) -> int:
    formula = _load_formula(args)
    text = render_homebrew_formula(formula)
    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        _print_json({"path": str(output), "class_name": formula.class_name})
    else:
        sys.stdout.write(text)
    return 0


def _handle_formula_update(args: argparse.Namespace) -> int:
    formula = _load_formula(args)
    checksums = {parse_platform_key(key): value for key, value in _parse_pairs(args.checksum).items()}
    archives = {parse_platform_key(key): Path(value) for key, value in _parse_pairs(args.archive).items()}
    updated = update_formula(
        formula,
        version=args.new_version,
        checksums=checksums,
        archives=archives,
        overrides=_parse_pairs(args.overrides),
    )
    output = Path(args.output)
    dump_formula(updated, output)
    _print_json(
        {
            "path": str(output),
            "version": updated.version,
            "homepage": updated.homepage,
            "credentials": updated.credentials,
            "checksums": {key.value: value for key, value in updated.checksums.items()},
        }
    )
    return 0


def _parse_pairs(values: Optional[Sequence[str]]) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for entry in values or []:
        if "=" not in entry:
            raise ValueError(f"Expected key=value (got '{entry}')")
        key, raw_value = entry.split("=", 1)
        pairs[key.strip()] = raw_value.strip()
    return pairs


def _print_json(payload: Mapping[str, object]) -> None:
    print(json.dumps(payload, indent=2, default=str))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
