# src/quadlet_deploy/persistence/collaborators.py
"""
Colaboradores externos do orquestrador (protocolos assíncronos) e suas
implementações em memória.

Protocolos:
    - ReleaseStore        → releases e configurações salvas
    - SecretsProvider     → `list(user_id, include_values)` -> [{name, value}]
    - SettingsProvider    → `get(user_id)` -> UserSettings | None
    - MarketplaceProvider → `get(service_id)` -> config | None

Decisões arquiteturais:
    - O orquestrador depende apenas dos protocolos
    - Implementações em memória servem a testes e a uso embarcado

Limites explícitos:
    - Não há criptografia de secrets em repouso
    - Não há autenticação
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional, Protocol

from quadlet_deploy.release.models import (
    ConfigurationRecord,
    ReleaseConfig,
    ReleaseRecord,
    UserSettings,
)

from .configurations import DEFAULT_SCHEMA_VERSION, ConfigurationService
from .records import InMemoryRecordStore


# ---------------------------------------------------------------------------
# Protocolos
# ---------------------------------------------------------------------------

class ReleaseStore(Protocol):
    async def get_release(self, user_id: str, release_id: str) -> Optional[ReleaseRecord]:
        ...

    async def get_configuration(self, user_id: str, release_id: str) -> Optional[ReleaseConfig]:
        ...

    async def save_configuration(
        self,
        user_id: str,
        release_id: str,
        config_data: Mapping[str, Any],
        schema_version: str = DEFAULT_SCHEMA_VERSION,
    ) -> ConfigurationRecord:
        ...

    async def delete_configurations(self, user_id: str, release_id: str) -> int:
        ...


class SecretsProvider(Protocol):
    async def list(self, user_id: str, include_values: bool = False) -> List[Dict[str, Any]]:
        ...


class SettingsProvider(Protocol):
    async def get(self, user_id: str) -> Optional[UserSettings]:
        ...


class MarketplaceProvider(Protocol):
    async def get(self, service_id: str) -> Optional[Dict[str, Any]]:
        ...


# ---------------------------------------------------------------------------
# Implementações em memória
# ---------------------------------------------------------------------------

class InMemoryReleaseStore:
    def __init__(self, configurations: Optional[ConfigurationService] = None):
        self.releases: InMemoryRecordStore[ReleaseRecord] = InMemoryRecordStore()
        self.configurations = configurations or ConfigurationService()

    def add_release(self, release: ReleaseRecord) -> None:
        self.releases.put(release.id, release)

    async def get_release(self, user_id: str, release_id: str) -> Optional[ReleaseRecord]:
        release = self.releases.get(release_id)
        if release is None or release.user_uuid != user_id:
            return None
        return release

    async def get_configuration(self, user_id: str, release_id: str) -> Optional[ReleaseConfig]:
        record = self.configurations.latest(user_id, release_id)
        if record is None:
            return None
        return ReleaseConfig.from_dict(record.parsed())

    async def save_configuration(
        self,
        user_id: str,
        release_id: str,
        config_data: Mapping[str, Any],
        schema_version: str = DEFAULT_SCHEMA_VERSION,
    ) -> ConfigurationRecord:
        return self.configurations.save(
            user_uuid=user_id,
            release_id=release_id,
            config_data=config_data,
            schema_version=schema_version,
        )

    async def delete_configurations(self, user_id: str, release_id: str) -> int:
        return self.configurations.delete_for_release(user_id, release_id)


class InMemorySecretsProvider:
    def __init__(self, secrets: Optional[Mapping[str, Mapping[str, str]]] = None):
        self._secrets: Dict[str, Dict[str, str]] = {
            user: dict(values) for user, values in (secrets or {}).items()
        }

    def set(self, user_id: str, name: str, value: str) -> None:
        self._secrets.setdefault(user_id, {})[name] = value

    async def list(self, user_id: str, include_values: bool = False) -> List[Dict[str, Any]]:
        entries = []
        for name, value in sorted(self._secrets.get(user_id, {}).items()):
            entry: Dict[str, Any] = {"name": name}
            if include_values:
                entry["value"] = value
            entries.append(entry)
        return entries


class InMemorySettingsProvider:
    def __init__(self, settings: Optional[Mapping[str, Any]] = None):
        self._settings: Dict[str, UserSettings] = {}
        for user_id, value in (settings or {}).items():
            self.set(user_id, value)

    def set(self, user_id: str, value: Any) -> None:
        if not isinstance(value, UserSettings):
            value = UserSettings.from_dict(value)
        self._settings[user_id] = value

    async def get(self, user_id: str) -> Optional[UserSettings]:
        return self._settings.get(user_id)


class InMemoryMarketplaceProvider:
    def __init__(self, configs: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._configs: Dict[str, Dict[str, Any]] = {
            k: deepcopy(dict(v)) for k, v in (configs or {}).items()
        }

    async def get(self, service_id: str) -> Optional[Dict[str, Any]]:
        config = self._configs.get(service_id)
        return deepcopy(config) if config is not None else None
