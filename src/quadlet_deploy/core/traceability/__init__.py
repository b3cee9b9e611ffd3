# src/quadlet_deploy/core/traceability/__init__.py
"""
Pacote de rastreabilidade do quadlet-deploy — Manifest de deployment.

API pública exposta:
    - DeploymentManifest    → estrutura canônica do manifest
    - ManifestFile          → entrada `{name, type, checksum, size}`
    - build_manifest        → criação do manifest a partir dos arquivos renderizados
    - verify_manifest_files → verificação de integridade contra o storage
    - MANIFEST_FILENAME     → nome do arquivo publicado (`manifest.json`)
"""

from .manifest import (
    MANIFEST_FILENAME,
    DeploymentManifest,
    ManifestFile,
    build_manifest,
    verify_manifest_files,
)

__all__ = [
    "MANIFEST_FILENAME",
    "DeploymentManifest",
    "ManifestFile",
    "build_manifest",
    "verify_manifest_files",
]
