"""
Grafo de serviços derivado da configuração unificada.
"""

from .service_set import (
    DeclarativeSource,
    InferredSource,
    ServiceSet,
    build_service_set,
    service_source,
)

__all__ = [
    "DeclarativeSource",
    "InferredSource",
    "ServiceSet",
    "build_service_set",
    "service_source",
]
