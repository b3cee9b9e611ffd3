# src/quadlet_deploy/core/config/hashing.py
"""
Hashing canônico do quadlet-deploy.

Este módulo concentra os dois usos de SHA-256 do projeto:
    - identidade estrutural de uma configuração (JSON canônico)
    - checksum de conteúdo dos artefatos renderizados (manifest)

Princípios fundamentais:
    - Hashing determinístico e reprodutível entre execuções e plataformas
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Conteúdo textual é sempre codificado em UTF-8 antes do digest

Invariantes:
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres
    - Conteúdos idênticos byte a byte produzem o mesmo checksum

Limites explícitos:
    - Não persiste hashes
    - Não valida material criptográfico
"""


import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico de uma configuração.

    Política de hashing (v1):
        - Serialização JSON canônica
        - Ordenação estável de chaves
        - Separadores compactos
        - Codificação UTF-8
        - Algoritmo SHA-256

    Args:
        config (Dict[str, Any]): Configuração (ex.: UnifiedDeploymentConfig.to_dict()).

    Returns:
        str: Hash SHA-256 hexadecimal da configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """

    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_content_checksum(content: str) -> str:
    """SHA-256 hexadecimal do conteúdo codificado em UTF-8."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def content_size(content: str) -> int:
    """Tamanho em bytes da representação UTF-8 do conteúdo."""
    return len(content.encode("utf-8"))
