"""
Modelos de release, configuração salva e settings do usuário.
"""

from .models import (
    ConfigurationRecord,
    ReleaseConfig,
    ReleaseRecord,
    TailscaleSettings,
    UserSettings,
    is_valid_configuration,
    is_valid_release_name,
)

__all__ = [
    "ConfigurationRecord",
    "ReleaseConfig",
    "ReleaseRecord",
    "TailscaleSettings",
    "UserSettings",
    "is_valid_configuration",
    "is_valid_release_name",
]
