# src/quadlet_deploy/core/pipeline/context.py
"""
Contexto de execução de um deploy.

Este módulo define o `DeployContext`, a estrutura canônica utilizada para
compartilhar estado explícito entre as etapas de um deploy (resolução,
grafo de serviços, renderização, manifest, upload).

O DeployContext atua como o único meio permitido de:
    - armazenamento de artefatos intermediários (config resolvida,
      ServiceSet, arquivos renderizados, manifest)
    - registro de logs estruturados de execução
    - coleta de warnings não fatais associados a etapas

Princípios fundamentais:
    - Isolamento por execução (cada deploy possui seu próprio contexto)
    - Comunicação explícita e rastreável
    - Ausência de logger global ou estado compartilhado

Invariantes:
    - Artefatos são indexados por chave explícita
    - Logs sempre incluem `run_id` e `step_id`
    - Warnings são agrupados por `step_id`

Limites explícitos:
    - Não executa etapas
    - Não persiste dados automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List


@dataclass
class DeployContext:
    """
    Contexto de execução de um deploy.

    O `run_id` é o id do registro de deployment, de modo que o event log
    pode ser correlacionado diretamente com a linha persistida.

    Decisões arquiteturais:
        - Etapas interagem apenas via DeployContext
        - Logs e warnings são estruturados e rastreáveis
        - Warnings nunca interrompem o deploy (ex.: serviço desconhecido)

    Limites explícitos:
        - Não decide políticas de falha
        - Não valida semântica de domínio
    """
    run_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Artifact store
    # -----------------------------
    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        if key not in self._artifacts:
            raise KeyError(key)
        return self._artifacts[key]

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        if step_id not in self.warnings:
            self.warnings[step_id] = []
        self.warnings[step_id].append(message)

    def warn(self, *, step_id: str, message: str, **extra: Any) -> None:
        """Registra o warning e o evento de log correspondente (nível WARNING)."""
        self.add_warning(step_id=step_id, message=message)
        self.log(step_id=step_id, level="WARNING", message=message, **extra)
