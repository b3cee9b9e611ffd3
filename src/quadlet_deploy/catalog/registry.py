"""
DefaultsRegistry v1 — catálogo imutável de defaults de deployment.

No quadlet-deploy, imagens de serviço, providers padrão, provider_config
padrão, blocos de infraestrutura e modelos padrão são centralizados em um
único objeto explícito. Resolver e renderer não consultam tabelas globais.

Este módulo fornece:
- ServiceDescriptor: especificação estática de um serviço renderizável
- DefaultsRegistry: ponto único de verdade para os defaults (v1)
- load_registry: overrides declarativos (YAML/JSON) sobre o catálogo v1

Decisões arquiteturais:
- O registry é construído uma vez e passado por construção
- Mapeamentos são expostos como `MappingProxyType` (somente leitura)
- Extensão é explícita: `register_service()` e `with_overrides()` retornam
  um novo registry, nunca mutam o atual
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from quadlet_deploy.core.config.loader import load_config
from quadlet_deploy.core.config.merge import deep_merge

from .defaults import default_tables_v1


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def to_plain(value: Any) -> Any:
    """Converte estruturas congeladas do registry em dict/list puros."""
    if isinstance(value, Mapping):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [to_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class ServiceDescriptor:
    """Especificação estática de um serviço (não editável pelo usuário).

    `env_from_provider_config` mapeia variável de ambiente -> chave de
    provider_config (emitida apenas quando o valor é truthy).
    `secrets_from_provider_config` mapeia secret -> chave de provider_config
    (montado apenas quando o valor é truthy). `provider_key_secrets` indica
    que o serviço recebe os secrets de API key dos providers de modelos cloud.
    """

    name: str
    image: str
    ports: Tuple[str, ...] = ()
    volumes: Tuple[str, ...] = ()
    dependencies: Tuple[str, ...] = ()
    description: str = ""
    environment: Tuple[Tuple[str, str], ...] = ()
    secrets: Tuple[str, ...] = ()
    env_from_provider_config: Tuple[Tuple[str, str], ...] = ()
    secrets_from_provider_config: Tuple[Tuple[str, str], ...] = ()
    provider_key_secrets: bool = False
    health_cmd: Optional[str] = None

    def volume_names(self) -> Tuple[str, ...]:
        """Nomes de volume sem o sufixo `.volume`, na ordem declarada."""
        names = []
        for spec in self.volumes:
            name = spec.split(":", 1)[0]
            if name.endswith(".volume"):
                name = name[: -len(".volume")]
            names.append(name)
        return tuple(names)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image,
            "ports": list(self.ports),
            "volumes": list(self.volumes),
            "dependencies": list(self.dependencies),
            "description": self.description,
            "environment": dict(self.environment),
            "secrets": list(self.secrets),
            "env_from_provider_config": dict(self.env_from_provider_config),
            "secrets_from_provider_config": dict(self.secrets_from_provider_config),
            "provider_key_secrets": self.provider_key_secrets,
            "health_cmd": self.health_cmd,
        }

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "ServiceDescriptor":
        if not isinstance(name, str) or not name.strip():
            raise ValueError("service name must be a non-empty string")
        image = data.get("image")
        if not isinstance(image, str) or not image.strip():
            raise ValueError(f"service '{name}' must declare a non-empty image")
        return cls(
            name=name,
            image=image,
            ports=tuple(data.get("ports") or ()),
            volumes=tuple(data.get("volumes") or ()),
            dependencies=tuple(data.get("dependencies") or ()),
            description=str(data.get("description") or ""),
            environment=tuple((str(k), str(v)) for k, v in (data.get("environment") or {}).items()),
            secrets=tuple(data.get("secrets") or ()),
            env_from_provider_config=tuple(
                (str(k), str(v)) for k, v in (data.get("env_from_provider_config") or {}).items()
            ),
            secrets_from_provider_config=tuple(
                (str(k), str(v)) for k, v in (data.get("secrets_from_provider_config") or {}).items()
            ),
            provider_key_secrets=bool(data.get("provider_key_secrets", False)),
            health_cmd=data.get("health_cmd"),
        )


@dataclass(frozen=True, eq=False)
class DefaultsRegistry:
    """Registry imutável de defaults de deployment.

    Campos principais:
        - services: catálogo de `ServiceDescriptor` por nome
        - core_services: conjunto obrigatório do modo inferido (ordenado)
        - provider_services: providers[categoria] == id -> serviços
        - category_features: categoria de provider -> feature flag
        - selection_categories: service_selections -> categoria de provider
        - selection_routes: service_selections -> chave em caddy_routes
        - default_providers / default_provider_config
        - provider_config_overrides: core_services.openwebui -> provider_config
        - provider_urls: URLs geradas por seleção de provider
        - marketplace_defaults / infrastructure_defaults
        - core_service_keys / core_routes
        - models: ids padrão (local, embedding, task)
        - default_network
    """

    services: Mapping[str, ServiceDescriptor] = field(default_factory=dict)
    core_services: Tuple[str, ...] = ()
    provider_services: Mapping[str, Mapping[str, Tuple[str, ...]]] = field(default_factory=dict)
    category_features: Mapping[str, str] = field(default_factory=dict)
    selection_categories: Mapping[str, str] = field(default_factory=dict)
    selection_routes: Mapping[str, str] = field(default_factory=dict)
    default_providers: Mapping[str, Optional[str]] = field(default_factory=dict)
    default_provider_config: Mapping[str, Any] = field(default_factory=dict)
    provider_config_overrides: Mapping[str, str] = field(default_factory=dict)
    provider_urls: Mapping[str, Mapping[str, Mapping[str, Any]]] = field(default_factory=dict)
    marketplace_defaults: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    infrastructure_defaults: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    core_service_keys: Mapping[str, str] = field(default_factory=dict)
    core_routes: Mapping[str, str] = field(default_factory=dict)
    models: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    default_network: str = "llm"

    def __post_init__(self) -> None:
        object.__setattr__(self, "services", MappingProxyType(dict(self.services)))
        object.__setattr__(self, "core_services", tuple(self.core_services))
        for name in (
            "provider_services",
            "category_features",
            "selection_categories",
            "selection_routes",
            "default_providers",
            "default_provider_config",
            "provider_config_overrides",
            "provider_urls",
            "marketplace_defaults",
            "infrastructure_defaults",
            "core_service_keys",
            "core_routes",
            "models",
        ):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def v1(cls) -> "DefaultsRegistry":
        """Factory do catálogo v1 compilado."""
        return cls.from_dict(default_tables_v1())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DefaultsRegistry":
        services = {
            name: ServiceDescriptor.from_dict(name, spec or {})
            for name, spec in (data.get("services") or {}).items()
        }
        return cls(
            services=services,
            core_services=tuple(data.get("core_services") or ()),
            provider_services=data.get("provider_services") or {},
            category_features=data.get("category_features") or {},
            selection_categories=data.get("selection_categories") or {},
            selection_routes=data.get("selection_routes") or {},
            default_providers=data.get("default_providers") or {},
            default_provider_config=data.get("default_provider_config") or {},
            provider_config_overrides=data.get("provider_config_overrides") or {},
            provider_urls=data.get("provider_urls") or {},
            marketplace_defaults=data.get("marketplace_defaults") or {},
            infrastructure_defaults=data.get("infrastructure_defaults") or {},
            core_service_keys=data.get("core_service_keys") or {},
            core_routes=data.get("core_routes") or {},
            models=data.get("models") or {},
            default_network=str(data.get("default_network") or "llm"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "services": {name: d.to_dict() for name, d in self.services.items()},
            "core_services": list(self.core_services),
            "provider_services": to_plain(self.provider_services),
            "category_features": to_plain(self.category_features),
            "selection_categories": to_plain(self.selection_categories),
            "selection_routes": to_plain(self.selection_routes),
            "default_providers": to_plain(self.default_providers),
            "default_provider_config": to_plain(self.default_provider_config),
            "provider_config_overrides": to_plain(self.provider_config_overrides),
            "provider_urls": to_plain(self.provider_urls),
            "marketplace_defaults": to_plain(self.marketplace_defaults),
            "infrastructure_defaults": to_plain(self.infrastructure_defaults),
            "core_service_keys": to_plain(self.core_service_keys),
            "core_routes": to_plain(self.core_routes),
            "models": to_plain(self.models),
            "default_network": self.default_network,
        }

    # ------------------------------------------------------------------
    # Extensão explícita (sempre retorna um novo registry)
    # ------------------------------------------------------------------
    def register_service(self, descriptor: ServiceDescriptor) -> "DefaultsRegistry":
        if not isinstance(descriptor, ServiceDescriptor):
            raise TypeError("descriptor must be a ServiceDescriptor")
        if descriptor.name in self.services:
            raise ValueError(f"service already registered: {descriptor.name}")
        services = dict(self.services)
        services[descriptor.name] = descriptor
        return replace(self, services=services)

    def with_overrides(self, overrides: Dict[str, Any]) -> "DefaultsRegistry":
        """Novo registry com `overrides` aplicado via deep-merge sobre `to_dict()`."""
        return DefaultsRegistry.from_dict(deep_merge(self.to_dict(), overrides))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def has_service(self, name: str) -> bool:
        return name in self.services

    def get_service(self, name: str) -> ServiceDescriptor:
        if name not in self.services:
            raise KeyError(f"unknown service: {name}")
        return self.services[name]

    def list_service_ids(self) -> List[str]:
        return sorted(self.services.keys())

    def default_models(self, group: str) -> List[str]:
        return list(self.models.get(group, ()))


def load_registry(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> DefaultsRegistry:
    """Catálogo v1 com overrides declarativos opcionais (YAML/JSON).

    Sem `defaults_path`, retorna `DefaultsRegistry.v1()` inalterado.
    """
    registry = DefaultsRegistry.v1()
    if defaults_path is None:
        return registry
    return registry.with_overrides(load_config(defaults_path=defaults_path, local_path=local_path))
