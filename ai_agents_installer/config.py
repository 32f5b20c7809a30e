"""Environment-driven installer settings."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PREFIX_ENV = "AI_AGENTS_PREFIX"
CACHE_DIR_ENV = "AI_AGENTS_CACHE_DIR"
FORMULA_ENV = "AI_AGENTS_FORMULA"
LOG_LEVEL_ENV = "AI_AGENTS_LOG_LEVEL"
DOTENV_ENV = "AI_AGENTS_DOTENV"

_CACHE_NAME = "ai-agents-installer"


def default_cache_dir(environ: Mapping[str, str]) -> Path:
    if platform.system().lower() == "darwin":
        return Path.home() / "Library" / "Caches" / _CACHE_NAME
    base = environ.get("XDG_CACHE_HOME")
    return (Path(base) if base else Path.home() / ".cache") / _CACHE_NAME


@dataclass(slots=True)
class InstallerSettings:
    prefix: Path
    cache_dir: Path
    formula_path: Optional[Path]
    log_level: str
    dotenv_path: Path

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InstallerSettings":
        env = os.environ if environ is None else environ
        prefix = env.get(PREFIX_ENV)
        cache_dir = env.get(CACHE_DIR_ENV)
        formula = env.get(FORMULA_ENV)
        return cls(
            prefix=Path(prefix).expanduser() if prefix else Path.home() / ".local",
            cache_dir=Path(cache_dir).expanduser() if cache_dir else default_cache_dir(env),
            formula_path=Path(formula).expanduser() if formula else None,
            log_level=env.get(LOG_LEVEL_ENV, "WARNING").upper(),
            dotenv_path=Path(env.get(DOTENV_ENV, ".env")).expanduser(),
        )
