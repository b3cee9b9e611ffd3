# src/quadlet_deploy/core/config/layers.py
"""
Camadas nomeadas de patch de configuração.

A resolução da configuração unificada de deployment combina várias fontes
independentes (defaults de infraestrutura, defaults de providers, escolhas
da release, overrides literais do usuário). Em vez de depender da ordem
implícita de chamadas, cada fonte é representada por uma `PatchLayer`
nomeada, e a precedência é simplesmente a posição na lista.

Política:
    - A primeira camada é a de menor precedência
    - Cada camada é aplicada com `deep_merge` sobre o resultado acumulado
    - A lista de camadas é um artefato visível e testável

Invariantes:
    - Nomes de camada são únicos dentro de uma aplicação
    - Nenhuma camada é mutada durante a aplicação
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .merge import deep_merge


@dataclass(frozen=True)
class PatchLayer:
    """Uma fonte de configuração com nome estável e um patch (dict)."""

    name: str
    patch: Dict[str, Any] = field(default_factory=dict)


def apply_layers(
    layers: Iterable[PatchLayer],
    *,
    base: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Aplica uma lista ordenada de camadas, da menor para a maior precedência.

    Args:
        layers (Iterable[PatchLayer]): Camadas em ordem de precedência crescente.
        base (Optional[Dict[str, Any]]): Estrutura inicial (default: dict vazio).

    Returns:
        Dict[str, Any]: Resultado do merge de todas as camadas.

    Raises:
        ValueError: Se dois layers tiverem o mesmo nome.
        ConfigTypeConflictError: Se houver conflito estrutural entre camadas.
    """
    result: Dict[str, Any] = dict(base or {})
    seen: List[str] = []
    for layer in layers:
        if layer.name in seen:
            raise ValueError(f"Duplicate patch layer: {layer.name}")
        seen.append(layer.name)
        result = deep_merge(result, layer.patch)
    return result
