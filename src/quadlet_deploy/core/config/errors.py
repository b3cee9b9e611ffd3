# src/quadlet_deploy/core/config/errors.py
"""
Exceções canônicas da camada de configuração do quadlet-deploy.

Este módulo define a hierarquia de exceções utilizadas durante o
carregamento de arquivos de configuração e a resolução por deep-merge.

As exceções aqui definidas representam **violações estruturais da
configuração**, e não falhas do pipeline de deployment (essas vivem em
`quadlet_deploy.core.exceptions`).

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de renderização ou upload

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende do orquestrador nem dos adapters de storage
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração.

    Permite captura genérica de falhas de carregamento e merge, separando-as
    das falhas do pipeline de deployment.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base (defaults)
    não é encontrado no caminho especificado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório
        - Nenhum default é inventado automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo de configuração
    não é suportado pelo loader.

    Formatos suportados:
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:  {"openwebui": {"port": 8080}}
        - patch: {"openwebui": "disabled"}

    Decisões arquiteturais:
        - O deep-merge é tipado por chave
        - `None` na base não gera conflito (representa ausência de valor)
        - Nenhum merge parcial é produzido em caso de conflito
    """
