# src/quadlet_deploy/core/engine/planner.py
"""
Planejador de ordem de serviços (DAG).

Este módulo valida o grafo de dependências de um conjunto de serviços e
produz uma ordem topológica determinística, usada pelo renderer para
emitir as units de container.

Princípios fundamentais:
    - O grafo deve formar um DAG válido
    - A ordenação é determinística para a mesma entrada
    - Nenhuma decisão silenciosa ou heurística implícita

Decisões arquiteturais:
    - Utiliza ordenação topológica determinística (Kahn modificado)
    - Empates são resolvidos por ordem lexicográfica do nome do serviço
    - Erros estruturais são tratados como falhas fatais

Invariantes:
    - Nenhum serviço aparece antes de suas dependências
    - Todos os serviços aparecem exatamente uma vez
    - A mesma entrada produz sempre a mesma ordem

Limites explícitos:
    - Não filtra arestas pendentes (responsabilidade do ServiceSet)
    - Não interage com DeployContext
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence, Set


class UnknownDependencyError(ValueError):
    """
    Exceção levantada quando um serviço referencia uma dependência inexistente.

    Decisões arquiteturais:
        - Todas as dependências devem ser resolvíveis dentro do conjunto
        - Dependências inexistentes são tratadas como erro estrutural

    Limites explícitos:
        - Não tenta inferir ou criar serviços ausentes
    """


class CycleDetectedError(ValueError):
    """
    Exceção levantada quando o grafo de dependências contém um ciclo.

    Invariantes:
        - A existência de um ciclo invalida o planejamento
        - Nenhuma ordem topológica válida pode ser produzida

    Limites explícitos:
        - Não tenta resolver ou quebrar ciclos automaticamente
    """


def plan_service_order(
    names: Iterable[str],
    edges: Mapping[str, Sequence[str]],
) -> List[str]:
    """
    Valida e produz uma ordem topológica determinística de serviços.

    Sempre que múltiplos serviços estiverem prontos, a escolha é feita por
    ordem lexicográfica do nome.

    Args:
        names: Nomes dos serviços do conjunto.
        edges: serviço -> dependências (todas dentro de `names`).

    Returns:
        List[str]: Nomes em ordem de dependência.

    Raises:
        ValueError: Se algum nome for inválido ou duplicado.
        UnknownDependencyError: Se uma dependência não pertencer ao conjunto.
        CycleDetectedError: Se houver ciclo no grafo de dependências.
    """
    ordered_names: List[str] = []
    known: Set[str] = set()
    for name in names:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("service name must be a non-empty string")
        if name in known:
            raise ValueError(f"Duplicate service name: {name}")
        known.add(name)
        ordered_names.append(name)

    deps: Dict[str, List[str]] = {}
    for name in ordered_names:
        d = list(edges.get(name, ()) or ())
        for dep in d:
            if dep not in known:
                raise UnknownDependencyError(f"Service '{name}' depends on unknown service '{dep}'")
        deps[name] = d

    # Kahn (determinístico)
    incoming_count: Dict[str, int] = {name: len(set(d)) for name, d in deps.items()}
    outgoing: Dict[str, Set[str]] = {name: set() for name in ordered_names}
    for name, dlist in deps.items():
        for dep in set(dlist):
            outgoing[dep].add(name)

    ready: List[str] = sorted(name for name, c in incoming_count.items() if c == 0)
    order: List[str] = []

    while ready:
        name = ready.pop(0)
        order.append(name)
        for child in sorted(outgoing[name]):
            incoming_count[child] -= 1
            if incoming_count[child] == 0:
                ready.append(child)
                ready.sort()

    if len(order) != len(ordered_names):
        raise CycleDetectedError("Cycle detected in service dependency graph")

    return order
