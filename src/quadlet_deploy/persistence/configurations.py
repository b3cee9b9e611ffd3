# src/quadlet_deploy/persistence/configurations.py
"""
Configurações salvas de release (versionadas).

Cada save grava um novo `ConfigurationRecord` com
`version = max(version da release) + 1`. A configuração vigente é o
registro mais recente por (`created_at`, `version`).

Limites explícitos:
    - Não resolve defaults
    - Não valida subdomínios (ver resolve.validation)
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from quadlet_deploy.core.exceptions import ValidationError
from quadlet_deploy.release.models import ConfigurationRecord, is_valid_configuration

from .records import InMemoryRecordStore


DEFAULT_SCHEMA_VERSION = "0.2.0"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfigurationService:
    def __init__(
        self,
        store: Optional[InMemoryRecordStore[ConfigurationRecord]] = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.store = store if store is not None else InMemoryRecordStore()
        self._clock = clock
        self._id_factory = id_factory

    def _for_release(self, user_uuid: str, release_id: str) -> List[ConfigurationRecord]:
        return self.store.list(lambda r: r.user_uuid == user_uuid and r.release_id == release_id)

    def save(
        self,
        *,
        user_uuid: str,
        release_id: str,
        config_data: Mapping[str, Any],
        schema_version: str = DEFAULT_SCHEMA_VERSION,
    ) -> ConfigurationRecord:
        """
        Grava uma nova versão da configuração da release.

        Raises:
            ValidationError: Se `config_data` não tiver nenhuma seção conhecida.
        """
        if not is_valid_configuration(config_data):
            raise ValidationError(
                message="Invalid configuration structure",
                details={"release_id": release_id},
                hint="A configuração precisa conter infrastructure, features, providers ou service_selections.",
            )
        versions = [r.version for r in self.store.list(lambda r: r.release_id == release_id)]
        record = ConfigurationRecord(
            id=self._id_factory(),
            user_uuid=user_uuid,
            release_id=release_id,
            config_data=json.dumps(dict(config_data), sort_keys=True),
            schema_version=schema_version,
            version=max(versions, default=0) + 1,
            created_at=self._clock(),
        )
        self.store.put(record.id, record)
        return record

    def latest(self, user_uuid: str, release_id: str) -> Optional[ConfigurationRecord]:
        records = self._for_release(user_uuid, release_id)
        if not records:
            return None
        return max(records, key=lambda r: (r.created_at, r.version))

    def history(self, user_uuid: str, release_id: str) -> List[ConfigurationRecord]:
        return sorted(self._for_release(user_uuid, release_id), key=lambda r: r.version)

    def delete_for_release(self, user_uuid: str, release_id: str) -> int:
        records = self._for_release(user_uuid, release_id)
        for r in records:
            self.store.delete(r.id)
        return len(records)
