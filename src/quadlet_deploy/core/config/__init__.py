# src/quadlet_deploy/core/config/__init__.py

"""
Camada de configuração do quadlet-deploy.

Este pacote reúne as estruturas e utilitários responsáveis por carregar,
mesclar e identificar configurações: a configuração operacional do
próprio serviço (storage, URL pública, versão de schema) e as camadas
de patch usadas na resolução da configuração unificada de deployment.

A configuração no quadlet-deploy é:
    - declarativa
    - determinística
    - aplicada em camadas nomeadas com precedência explícita

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Deep-merge não destrutivo (patches nunca apagam campos irmãos)
    - Aplicação de camadas nomeadas em ordem documentada
    - Hash canônico de configuração e checksum de conteúdo

Invariantes:
    - A configuração final é um dicionário puro (dict)
    - A mesma entrada sempre produz a mesma configuração final
    - Conflitos estruturais são tratados como erro

Limites explícitos:
    - Não conhece serviços, providers ou unit files
    - Não executa o pipeline de deployment
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash, compute_content_checksum, content_size
from .layers import PatchLayer, apply_layers
from .loader import load_config, load_config_file
from .merge import deep_merge
from .settings import DeploySettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "compute_content_checksum",
    "content_size",
    "PatchLayer",
    "apply_layers",
    "load_config",
    "load_config_file",
    "deep_merge",
    "DeploySettings",
]
