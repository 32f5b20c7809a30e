from __future__ import annotations

import pytest

from ai_agents_installer import secrets


@pytest.fixture(autouse=True)
def _isolate_secret_resolvers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(secrets, "_secret_specs", {})
    monkeypatch.setattr(secrets, "_resolvers", [])
    secrets.register_resolver(secrets.EnvResolver(), priority=0, name="env", source="env")


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in ("AI_AGENTS_PREFIX", "AI_AGENTS_CACHE_DIR", "AI_AGENTS_FORMULA", "AI_AGENTS_LOG_LEVEL", "AI_AGENTS_DOTENV"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AI_AGENTS_CACHE_DIR", str(tmp_path / "cache"))
