"""
Resolução da configuração unificada de deployment.
"""

from .resolver import LAYER_NAMES, PROVIDER_CONFIG_LAYER_NAMES, ConfigurationResolver
from .unified import UnifiedDeploymentConfig
from .validation import ValidationReport, validate_release_config

__all__ = [
    "LAYER_NAMES",
    "PROVIDER_CONFIG_LAYER_NAMES",
    "ConfigurationResolver",
    "UnifiedDeploymentConfig",
    "ValidationReport",
    "validate_release_config",
]
