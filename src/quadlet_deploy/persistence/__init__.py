"""
Persistência: record store, configurações, deployments e colaboradores.
"""

from .collaborators import (
    InMemoryMarketplaceProvider,
    InMemoryReleaseStore,
    InMemorySecretsProvider,
    InMemorySettingsProvider,
    MarketplaceProvider,
    ReleaseStore,
    SecretsProvider,
    SettingsProvider,
)
from .configurations import DEFAULT_SCHEMA_VERSION, ConfigurationService
from .deployments import (
    ALLOWED_TRANSITIONS,
    DeploymentRecord,
    DeploymentStateMachine,
    can_transition,
)
from .records import InMemoryRecordStore

__all__ = [
    "ALLOWED_TRANSITIONS",
    "DEFAULT_SCHEMA_VERSION",
    "ConfigurationService",
    "DeploymentRecord",
    "DeploymentStateMachine",
    "InMemoryMarketplaceProvider",
    "InMemoryRecordStore",
    "InMemoryReleaseStore",
    "InMemorySecretsProvider",
    "InMemorySettingsProvider",
    "MarketplaceProvider",
    "ReleaseStore",
    "SecretsProvider",
    "SettingsProvider",
    "can_transition",
]
