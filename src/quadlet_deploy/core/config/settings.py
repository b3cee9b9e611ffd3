# src/quadlet_deploy/core/config/settings.py
"""
Configuração operacional do serviço de deployment.

`DeploySettings` é a visão tipada (e imutável) da configuração resolvida
por `load_config`. Ela decide qual adapter de storage é construído e com
qual origem pública os artefatos são anunciados.

Chaves reconhecidas (v1):

    deploy:
      schema_version: "0.2.0"
      public_base_url: "https://static.leger.run/"
    storage:
      backend: local | s3
      root_dir: ./artifacts        # backend=local
      bucket: leger-static         # backend=s3
      endpoint_url: https://...    # backend=s3 (R2)

Decisões arquiteturais:
    - Chaves ausentes caem nos defaults abaixo
    - Backend desconhecido é erro de configuração (sem fallback silencioso)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ConfigError


DEFAULT_SCHEMA_VERSION = "0.2.0"
DEFAULT_PUBLIC_BASE_URL = "https://static.leger.run/"
SUPPORTED_BACKENDS = ("local", "s3")


@dataclass(frozen=True)
class DeploySettings:
    """Configuração operacional resolvida (imutável)."""

    schema_version: str = DEFAULT_SCHEMA_VERSION
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL
    storage_backend: str = "local"
    storage_root_dir: str = "artifacts"
    storage_bucket: Optional[str] = None
    storage_endpoint_url: Optional[str] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DeploySettings":
        """
        Constrói `DeploySettings` a partir da configuração resolvida.

        Args:
            config (Dict[str, Any]): Resultado de `load_config`.

        Returns:
            DeploySettings: Configuração tipada.

        Raises:
            ConfigError: Se `storage.backend` não for suportado ou se
                `backend=s3` não declarar `storage.bucket`.
        """
        deploy = config.get("deploy") or {}
        storage = config.get("storage") or {}

        backend = str(storage.get("backend", "local"))
        if backend not in SUPPORTED_BACKENDS:
            raise ConfigError(
                f"storage.backend inválido: {backend!r} (suportados: {', '.join(SUPPORTED_BACKENDS)})"
            )
        bucket = storage.get("bucket")
        if backend == "s3" and not bucket:
            raise ConfigError("storage.bucket é obrigatório quando storage.backend = 's3'")

        base_url = str(deploy.get("public_base_url", DEFAULT_PUBLIC_BASE_URL))
        if not base_url.endswith("/"):
            base_url += "/"

        return cls(
            schema_version=str(deploy.get("schema_version", DEFAULT_SCHEMA_VERSION)),
            public_base_url=base_url,
            storage_backend=backend,
            storage_root_dir=str(storage.get("root_dir", "artifacts")),
            storage_bucket=bucket,
            storage_endpoint_url=storage.get("endpoint_url"),
        )
