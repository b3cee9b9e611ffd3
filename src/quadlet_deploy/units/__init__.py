"""
Geração de units Quadlet (container, network, volume).
"""

from .builder import UnitBuilder, extract_unit_metadata, parse_unit, serialize_unit
from .renderer import (
    UnitRenderer,
    build_container_unit,
    build_network_unit,
    build_volume_unit,
    extract_provider,
    file_type_for,
    provider_secret_names,
)
from .validation import validate_rendered_files

__all__ = [
    "UnitBuilder",
    "UnitRenderer",
    "build_container_unit",
    "build_network_unit",
    "build_volume_unit",
    "extract_provider",
    "extract_unit_metadata",
    "file_type_for",
    "parse_unit",
    "provider_secret_names",
    "serialize_unit",
    "validate_rendered_files",
]
