# src/quadlet_deploy/core/engine/__init__.py
"""
Engine do quadlet-deploy.

Componentes principais:
    - planner      → ordenação topológica determinística de serviços
    - orchestrator → pipeline assíncrono de deploy com estados explícitos
                     (importado de `quadlet_deploy.core.engine.orchestrator`,
                     pois depende do renderer, que depende do planner)

Princípios fundamentais:
    - Planejamento e execução são responsabilidades separadas
    - A ordem de renderização é determinística para o mesmo grafo
    - Toda falha leva o deployment a `failed` antes de ser relançada
"""

from .planner import CycleDetectedError, UnknownDependencyError, plan_service_order

__all__ = [
    "CycleDetectedError",
    "UnknownDependencyError",
    "plan_service_order",
]
