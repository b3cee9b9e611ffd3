# src/quadlet_deploy/release/models.py
"""
Modelos de release e configuração salva.

Uma release é um contêiner nomeado e versionado das escolhas de deployment
de um usuário. Cada "save" produz um novo `ConfigurationRecord`; a
configuração vigente de uma release é o registro mais recente.

Componentes:
    - ReleaseRecord        → identidade e versão da release
    - ConfigurationRecord  → snapshot persistido (config_data em JSON)
    - ReleaseConfig        → snapshot imutável das escolhas do usuário
    - TailscaleSettings / UserSettings → pré-requisito de deploy

Invariantes:
    - ReleaseConfig nunca é mutado após criado (acessores retornam cópias)
    - Nomes de release seguem `^[A-Za-z0-9_-]{1,64}$`
    - `config_data` é sempre JSON serializado

Limites explícitos:
    - Não persiste registros (ver quadlet_deploy.persistence)
    - Não resolve defaults (ver quadlet_deploy.resolve)
"""

from __future__ import annotations

import json
import re
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from quadlet_deploy.core.exceptions import ValidationError


RELEASE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# Ao menos uma destas seções torna um config_data estruturalmente válido.
_CONFIG_SECTIONS = ("infrastructure", "features", "providers", "service_selections")


def is_valid_release_name(name: str) -> bool:
    return isinstance(name, str) and bool(RELEASE_NAME_PATTERN.match(name))


def is_valid_configuration(data: Any) -> bool:
    """Config salva precisa ser um mapping com ao menos uma seção conhecida."""
    if not isinstance(data, Mapping):
        return False
    return any(section in data for section in _CONFIG_SECTIONS)


@dataclass(frozen=True)
class ReleaseRecord:
    """Release persistida. `version` compõe o caminho `{user}/v{version}/`."""

    id: str
    user_uuid: str
    name: str
    version: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not is_valid_release_name(self.name):
            raise ValidationError(
                message=f"Invalid release name: {self.name!r}",
                details={"name": self.name, "pattern": RELEASE_NAME_PATTERN.pattern},
                hint="Use apenas letras, números, '_' e '-' (1 a 64 caracteres).",
            )
        if not isinstance(self.version, int) or self.version < 1:
            raise ValueError("release version must be a positive integer")


@dataclass(frozen=True)
class ConfigurationRecord:
    """Snapshot persistido de uma configuração de release."""

    id: str
    user_uuid: str
    release_id: str
    config_data: str
    schema_version: str
    version: int
    created_at: datetime

    def parsed(self) -> Dict[str, Any]:
        """Decodifica `config_data`.

        Raises:
            ValidationError: Se o JSON for inválido ou a raiz não for um objeto.
        """
        try:
            data = json.loads(self.config_data)
        except json.JSONDecodeError as e:
            raise ValidationError(
                message="Invalid configuration data format",
                details={"configuration_id": self.id, "error": str(e)},
            ) from e
        if not isinstance(data, dict):
            raise ValidationError(
                message="Invalid configuration data format",
                details={"configuration_id": self.id, "root_type": type(data).__name__},
            )
        return data


@dataclass(frozen=True)
class TailscaleSettings:
    full_hostname: str
    hostname: str
    tailnet: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "full_hostname": self.full_hostname,
            "hostname": self.hostname,
            "tailnet": self.tailnet,
        }


@dataclass(frozen=True)
class UserSettings:
    """Settings do usuário. Sem `tailscale`, nenhum deploy é possível."""

    tailscale: Optional[TailscaleSettings] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "UserSettings":
        ts = (data or {}).get("tailscale")
        if not ts:
            return cls(tailscale=None)
        return cls(
            tailscale=TailscaleSettings(
                full_hostname=str(ts.get("full_hostname", "")),
                hostname=str(ts.get("hostname", "")),
                tailnet=str(ts.get("tailnet", "")),
            )
        )


@dataclass(frozen=True)
class ReleaseConfig:
    """
    Snapshot imutável das escolhas de deployment do usuário.

    Campos:
        - service_selections: provider escolhido por categoria (nullable)
        - model_assignments: `primary_chat_models` e `embedding_models`
        - core_services: overrides literais dos serviços core
          (`openwebui`, `litellm`, `llama_swap`)
        - caddy_routes: subdomínio por serviço (nullable)
        - infrastructure: `network` (`name`, `subnet`) e, opcionalmente,
          `services` com overrides por serviço (ex.: `enabled: false`)
        - release_metadata: dados livres (nome, descrição)

    Decisões arquiteturais:
        - O snapshot é criado no save e substituído por versões novas
        - Acessores retornam cópias profundas
    """

    service_selections: Dict[str, Optional[str]] = field(default_factory=dict)
    model_assignments: Dict[str, List[str]] = field(default_factory=dict)
    core_services: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    caddy_routes: Dict[str, Optional[str]] = field(default_factory=dict)
    infrastructure: Dict[str, Any] = field(default_factory=dict)
    release_metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReleaseConfig":
        if not isinstance(data, Mapping):
            raise ValidationError(
                message="Invalid configuration structure",
                details={"root_type": type(data).__name__},
            )
        return cls(
            service_selections=deepcopy(dict(data.get("service_selections") or {})),
            model_assignments=deepcopy(dict(data.get("model_assignments") or {})),
            core_services=deepcopy(dict(data.get("core_services") or {})),
            caddy_routes=deepcopy(dict(data.get("caddy_routes") or {})),
            infrastructure=deepcopy(dict(data.get("infrastructure") or {})),
            release_metadata=deepcopy(dict(data.get("release_metadata") or {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return deepcopy(
            {
                "service_selections": self.service_selections,
                "model_assignments": self.model_assignments,
                "core_services": self.core_services,
                "caddy_routes": self.caddy_routes,
                "infrastructure": self.infrastructure,
                "release_metadata": self.release_metadata,
            }
        )

    # -----------------------------
    # Acessores
    # -----------------------------
    def selection(self, key: str) -> Optional[str]:
        value = self.service_selections.get(key)
        return value or None

    def route(self, key: str) -> Optional[str]:
        value = self.caddy_routes.get(key)
        return value or None

    def core_service(self, key: str) -> Dict[str, Any]:
        return deepcopy(dict(self.core_services.get(key) or {}))

    @property
    def primary_chat_models(self) -> List[str]:
        return list(self.model_assignments.get("primary_chat_models") or [])

    @property
    def embedding_models(self) -> List[str]:
        return list(self.model_assignments.get("embedding_models") or [])

    @property
    def network(self) -> Dict[str, Any]:
        return deepcopy(dict(self.infrastructure.get("network") or {}))

    @property
    def service_overrides(self) -> Dict[str, Dict[str, Any]]:
        return deepcopy(dict(self.infrastructure.get("services") or {}))
