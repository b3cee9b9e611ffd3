# src/quadlet_deploy/persistence/records.py
"""
Record store mínimo (get/put/list/delete) em memória.

Representa uma tabela indexada por id. Cada `put` substitui a linha
inteira; não existe histórico por linha.

Limites explícitos:
    - Sem transações, sem índices secundários
    - Não é thread-safe (um writer por deploy)
"""

from __future__ import annotations

from typing import Callable, Dict, Generic, List, Optional, TypeVar


T = TypeVar("T")


class InMemoryRecordStore(Generic[T]):
    def __init__(self) -> None:
        self._rows: Dict[str, T] = {}

    def get(self, record_id: str) -> Optional[T]:
        return self._rows.get(record_id)

    def put(self, record_id: str, record: T) -> None:
        self._rows[record_id] = record

    def list(self, predicate: Optional[Callable[[T], bool]] = None) -> List[T]:
        """Linhas na ordem de inserção, opcionalmente filtradas."""
        rows = list(self._rows.values())
        if predicate is None:
            return rows
        return [r for r in rows if predicate(r)]

    def delete(self, record_id: str) -> bool:
        return self._rows.pop(record_id, None) is not None

    def __len__(self) -> int:
        return len(self._rows)
