# src/quadlet_deploy/core/config/merge.py
"""
Utilitário canônico de deep-merge de configuração.

Este módulo implementa a política de merge usada em todo o quadlet-deploy:
na resolução da configuração operacional (defaults + local) e na aplicação
das camadas de patch que produzem a configuração unificada de deployment.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - None no patch → chave tratada como "não mencionada" (ignorada)
    - None na base → substituído por qualquer valor do patch
    - conflito de tipos → erro estrutural explícito

Princípios fundamentais:
    - O merge é determinístico e puramente funcional
    - Nenhum input é mutado durante o processo
    - Um patch nunca substitui por inteiro um campo irmão que não menciona

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - Chaves não mencionadas no patch são preservadas
    - Conflitos estruturais interrompem o merge

Limites explícitos:
    - Não carrega arquivos de configuração
    - Não realiza coerção de tipos
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def _without_none(value: Any) -> Any:
    """Cópia profunda de `value` sem chaves cujo valor é None (apenas dicts)."""
    if isinstance(value, dict):
        return {k: _without_none(v) for k, v in value.items() if v is not None}
    return deepcopy(value)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico e não destrutivo entre dois dicionários.

    Esta função aplica `override` como um patch sobre `base`, produzindo
    uma nova estrutura sem mutar nenhum dos inputs.

    Política de merge (v1):
        - dict + dict → merge recursivo por chave
        - list        → sobrescrita total
        - escalar     → sobrescrita direta pelo patch
        - None no patch → ignorado (o valor da base é mantido)
        - None na base  → aceita qualquer tipo vindo do patch
        - conflito de tipos → `ConfigTypeConflictError`

    Args:
        base (Dict[str, Any]): Configuração base (camada inferior).
        override (Dict[str, Any]): Patch da camada superior.

    Returns:
        Dict[str, Any]: Nova configuração resultante do merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e patch.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        # None -> chave não mencionada
        if override_value is None:
            continue

        if key not in result or result[key] is None:
            result[key] = _without_none(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        # list -> sobrescrita total
        if isinstance(base_value, list) and isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # int e float são intercambiáveis (ex.: gpu_memory_fraction)
        numeric = (int, float)
        if (
            isinstance(base_value, numeric)
            and isinstance(override_value, numeric)
            and not isinstance(base_value, bool)
            and not isinstance(override_value, bool)
        ):
            result[key] = override_value
            continue

        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        # escalar -> sobrescrita
        result[key] = deepcopy(override_value)

    return result
