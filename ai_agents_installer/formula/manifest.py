"""Formula manifest helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..artifacts.utils import compute_sha256
from ..errors import FormulaError
from ..schemas.release import Formula, PlatformKey

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_formula(path: Path) -> Formula:
    """Load a formula from YAML or JSON."""

    if not path.exists():
        raise FormulaError(f"Formula manifest not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        payload = yaml.safe_load(text) if path.suffix.lower() in _YAML_SUFFIXES else json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise FormulaError(f"Invalid formula manifest at {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise FormulaError(f"Formula manifest at {path} must be a mapping")
    try:
        return Formula.model_validate(payload)
    except ValidationError as exc:
        raise FormulaError(f"Invalid formula manifest at {path}: {exc}") from exc


def dump_formula(formula: Formula, path: Path) -> None:
    """Write a formula manifest to disk."""

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = formula.model_dump(mode="json")
    if path.suffix.lower() in _YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def load_formula_or_default(path: Optional[Path]) -> Formula:
    return load_formula(path) if path is not None else Formula()


def update_formula(
    formula: Formula,
    *,
    version: Optional[str] = None,
    checksums: Optional[Mapping[PlatformKey, str]] = None,
    archives: Optional[Mapping[PlatformKey, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Formula:
    """Return a new formula with a new version and/or digests applied."""

    payload = formula.model_dump()
    if version is not None:
        payload["version"] = version
    digests = dict(payload["checksums"])
    digests.update(checksums or {})
    for key, archive in (archives or {}).items():
        if not archive.exists():
            raise FileNotFoundError(f"Archive not found: {archive}")
        digests[key] = compute_sha256(archive)
    payload["checksums"] = digests
    payload.update(overrides or {})
    try:
        return Formula.model_validate(payload)
    except ValidationError as exc:
        raise FormulaError(f"Invalid formula update: {exc}") from exc
