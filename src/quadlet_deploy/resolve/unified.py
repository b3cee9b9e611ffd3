# src/quadlet_deploy/resolve/unified.py
"""
Configuração unificada de deployment.

`UnifiedDeploymentConfig` é o resultado derivado e efêmero da resolução:
recalculado a cada deploy, nunca persistido. É a única entrada do
ServiceGraph builder e do renderer.

Seções:
    - infrastructure: `network` (`name`, `subnet`) e `services`
      (nome -> bloco descritivo)
    - features: nome -> bool
    - providers: categoria -> id do provider
    - provider_config: bag plano de settings
    - tailscale: `full_hostname`, `hostname`, `tailnet`
    - secrets: nome -> valor
    - models: `cloud`, `local`, `embedding`

Invariantes:
    - `to_dict()` é determinístico (mesma entrada -> mesmo JSON canônico)
    - `infrastructure.services` ausente indica entrada legada (modo inferido)
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class UnifiedDeploymentConfig:
    infrastructure: Dict[str, Any] = field(default_factory=dict)
    features: Dict[str, bool] = field(default_factory=dict)
    providers: Dict[str, str] = field(default_factory=dict)
    provider_config: Dict[str, Any] = field(default_factory=dict)
    tailscale: Dict[str, Any] = field(default_factory=dict)
    secrets: Dict[str, str] = field(default_factory=dict)
    models: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return deepcopy(
            {
                "infrastructure": self.infrastructure,
                "features": self.features,
                "providers": self.providers,
                "provider_config": self.provider_config,
                "tailscale": self.tailscale,
                "secrets": self.secrets,
                "models": self.models,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnifiedDeploymentConfig":
        """Carrega um user-config bruto (inclusive legado, sem `infrastructure.services`)."""
        return cls(
            infrastructure=deepcopy(dict(data.get("infrastructure") or {})),
            features=deepcopy(dict(data.get("features") or {})),
            providers=deepcopy(dict(data.get("providers") or {})),
            provider_config=deepcopy(dict(data.get("provider_config") or {})),
            tailscale=deepcopy(dict(data.get("tailscale") or {})),
            secrets=deepcopy(dict(data.get("secrets") or {})),
            models=deepcopy(dict(data.get("models") or {})),
        )

    # -----------------------------
    # Acessores
    # -----------------------------
    @property
    def services(self) -> Optional[Dict[str, Any]]:
        services = self.infrastructure.get("services")
        if services is None:
            return None
        return deepcopy(dict(services))

    def network_name(self, default: str = "llm") -> str:
        network = self.infrastructure.get("network") or {}
        return network.get("name") or default

    @property
    def network_subnet(self) -> Optional[str]:
        network = self.infrastructure.get("network") or {}
        return network.get("subnet") or None

    @property
    def cloud_models(self) -> List[str]:
        return list(self.models.get("cloud") or [])
