# src/quadlet_deploy/graph/service_set.py
"""
Service Graph Builder.

Deriva, a partir da `UnifiedDeploymentConfig`, o conjunto ordenado de
serviços a renderizar e as arestas de dependência entre eles.

A origem do conjunto é uma variante etiquetada, resolvida uma única vez:

    - DeclarativeSource(services)
        `infrastructure.services` presente: cada chave conta, exceto as
        marcadas explicitamente com `enabled: false`.
    - InferredSource(features, providers)
        entrada legada sem `infrastructure.services`: conjunto core
        obrigatório + lookups categoria/provider do registry. O provider
        selecionado basta; feature flags não removem serviços.

Consumidores downstream recebem sempre um `ServiceSet` uniforme e nunca
voltam a ramificar entre os dois modos.

Decisões arquiteturais:
    - Nomes desconhecidos são ignorados com warning (nunca fatais)
    - Arestas vêm da tabela estática de dependências do registry
    - Arestas para serviços fora do conjunto são descartadas com warning

Invariantes:
    - Toda aresta em `edges` aponta para um nome presente em `names`
    - `names` não possui duplicatas e preserva a ordem de descoberta
    - A mesma config produz o mesmo ServiceSet

Limites explícitos:
    - Não ordena topologicamente (ver core.engine.planner)
    - Não renderiza units
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from quadlet_deploy.catalog.registry import DefaultsRegistry
from quadlet_deploy.core.pipeline.context import DeployContext
from quadlet_deploy.resolve.unified import UnifiedDeploymentConfig


_STEP_ID = "service_graph"


@dataclass(frozen=True)
class DeclarativeSource:
    services: Dict[str, Any] = field(default_factory=dict)

    mode = "declarative"


@dataclass(frozen=True)
class InferredSource:
    features: Dict[str, bool] = field(default_factory=dict)
    providers: Dict[str, str] = field(default_factory=dict)

    mode = "inferred"


ServiceSource = Union[DeclarativeSource, InferredSource]


@dataclass(frozen=True)
class ServiceSet:
    """Conjunto ordenado de serviços + arestas de dependência."""

    names: Tuple[str, ...] = ()
    edges: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    mode: str = "declarative"
    warnings: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def dependencies_of(self, name: str) -> Tuple[str, ...]:
        return self.edges.get(name, ())


def service_source(config: UnifiedDeploymentConfig) -> ServiceSource:
    """Resolve o modo de origem do conjunto de serviços (uma única vez)."""
    services = config.services
    if services is not None:
        return DeclarativeSource(services=services)
    return InferredSource(features=dict(config.features), providers=dict(config.providers))


def _declarative_candidates(source: DeclarativeSource) -> List[str]:
    names: List[str] = []
    for name, block in source.services.items():
        if isinstance(block, Mapping) and block.get("enabled") is False:
            continue
        names.append(name)
    return names


def _inferred_candidates(source: InferredSource, registry: DefaultsRegistry) -> List[str]:
    names: List[str] = list(registry.core_services)
    for category, by_provider in registry.provider_services.items():
        provider_id = source.providers.get(category)
        if not provider_id or provider_id not in by_provider:
            continue
        names.extend(by_provider[provider_id])
    return names


def build_service_set(
    config: UnifiedDeploymentConfig,
    registry: DefaultsRegistry,
    ctx: Optional[DeployContext] = None,
) -> ServiceSet:
    """
    Constrói o ServiceSet de uma configuração unificada.

    Args:
        config: Configuração resolvida (ou carregada de um user-config legado).
        registry: Catálogo de serviços e tabelas de lookup.
        ctx: Contexto de deploy opcional; recebe warnings e eventos.

    Returns:
        ServiceSet: nomes em ordem de descoberta, arestas restritas ao
        conjunto, modo de origem e warnings emitidos.
    """
    source = service_source(config)
    if isinstance(source, DeclarativeSource):
        candidates = _declarative_candidates(source)
    else:
        candidates = _inferred_candidates(source, registry)

    warnings: List[str] = []

    def _warn(message: str, **extra: Any) -> None:
        warnings.append(message)
        if ctx is not None:
            ctx.warn(step_id=_STEP_ID, message=message, **extra)

    names: List[str] = []
    for name in candidates:
        if name in names:
            continue
        if not registry.has_service(name):
            _warn(f"Unknown service '{name}' skipped", service=name)
            continue
        names.append(name)

    edges: Dict[str, Tuple[str, ...]] = {}
    for name in names:
        kept: List[str] = []
        for dep in registry.get_service(name).dependencies:
            if dep in names:
                kept.append(dep)
            else:
                _warn(
                    f"Dependency '{dep}' of '{name}' is not in the service set; edge dropped",
                    service=name,
                    dependency=dep,
                )
        edges[name] = tuple(kept)

    if ctx is not None:
        ctx.log(
            step_id=_STEP_ID,
            level="INFO",
            message="service set built",
            mode=source.mode,
            services=list(names),
        )

    return ServiceSet(
        names=tuple(names),
        edges=edges,
        mode=source.mode,
        warnings=tuple(warnings),
    )
