# tests/persistence/test_collaborators.py
"""
Testes das implementações em memória dos colaboradores do orquestrador
(releases, secrets, settings, marketplace).

Decisões arquiteturais:
    - Os colaboradores são assíncronos; os testes usam `asyncio.run`

Limites explícitos:
    - Não valida criptografia nem autenticação (fora do escopo)
"""

import asyncio
from datetime import datetime, timezone

import pytest

try:
    from quadlet_deploy.persistence.collaborators import (
        InMemoryMarketplaceProvider,
        InMemoryReleaseStore,
        InMemorySecretsProvider,
        InMemorySettingsProvider,
    )
    from quadlet_deploy.persistence.records import InMemoryRecordStore
    from quadlet_deploy.release.models import ReleaseConfig, ReleaseRecord, UserSettings
except Exception as e:  # noqa: BLE001
    InMemoryReleaseStore = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


NOW = datetime(2026, 1, 16, tzinfo=timezone.utc)


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing collaborators: {_IMPORT_ERR}")


def test_record_store_basics():
    _require_imports()
    store = InMemoryRecordStore()
    store.put("a", 1)
    store.put("b", 2)
    store.put("a", 3)
    assert store.get("a") == 3
    assert store.list() == [3, 2]
    assert store.list(lambda v: v > 2) == [3]
    assert store.delete("a") is True
    assert store.delete("a") is False
    assert len(store) == 1


def test_release_store_scopes_by_user(qdrant_release):
    """
    Verifica que releases e configurações são isoladas por usuário.

    Invariantes:
        - release de outro usuário é tratada como inexistente
        - a configuração devolvida é a mais recente, como ReleaseConfig
    """
    _require_imports()
    releases = InMemoryReleaseStore()
    releases.add_release(
        ReleaseRecord(id="rel-1", user_uuid="user-1", name="lab", version=1, created_at=NOW, updated_at=NOW)
    )

    async def scenario():
        await releases.save_configuration("user-1", "rel-1", qdrant_release)
        return (
            await releases.get_release("user-1", "rel-1"),
            await releases.get_release("user-2", "rel-1"),
            await releases.get_configuration("user-1", "rel-1"),
            await releases.get_configuration("user-1", "rel-9"),
            await releases.delete_configurations("user-1", "rel-1"),
        )

    own, foreign, config, missing, deleted = asyncio.run(scenario())
    assert own.name == "lab"
    assert foreign is None
    assert isinstance(config, ReleaseConfig)
    assert config.selection("rag_provider") == "qdrant"
    assert missing is None
    assert deleted == 1


def test_secrets_provider_values_only_on_request():
    _require_imports()
    secrets = InMemorySecretsProvider({"user-1": {"openai_api_key": "sk-1"}})
    secrets.set("user-1", "anthropic_api_key", "sk-2")
    names = asyncio.run(secrets.list("user-1"))
    values = asyncio.run(secrets.list("user-1", include_values=True))
    assert names == [{"name": "anthropic_api_key"}, {"name": "openai_api_key"}]
    assert values[1] == {"name": "openai_api_key", "value": "sk-1"}
    assert asyncio.run(secrets.list("user-2")) == []


def test_settings_provider_accepts_dicts(tailscale_settings):
    _require_imports()
    settings = InMemorySettingsProvider({"user-1": tailscale_settings})
    settings.set("user-2", UserSettings())
    assert asyncio.run(settings.get("user-1")).tailscale.tailnet == "tail8dd1.ts.net"
    assert asyncio.run(settings.get("user-2")).tailscale is None
    assert asyncio.run(settings.get("user-3")) is None


def test_marketplace_returns_copies():
    _require_imports()
    market = InMemoryMarketplaceProvider({"qdrant": {"port": 6333}})
    first = asyncio.run(market.get("qdrant"))
    first["port"] = 1
    assert asyncio.run(market.get("qdrant")) == {"port": 6333}
    assert asyncio.run(market.get("nope")) is None
