"""
Catálogo de defaults (imagens, providers, modelos) do quadlet-deploy.
"""

from .registry import DefaultsRegistry, ServiceDescriptor, load_registry, to_plain

__all__ = ["DefaultsRegistry", "ServiceDescriptor", "load_registry", "to_plain"]
