# src/quadlet_deploy/persistence/deployments.py
"""
Máquina de estados de deployments.

Estados e transições permitidas:

    rendering ──► uploading ──► ready
        │             │
        └──► failed ◄─┘

    `deployed` existe na enumeração, mas nenhuma transição leva a ele.

Decisões arquiteturais:
    - Cada transição é uma atualização completa da linha (sem histórico)
    - Estados terminais gravam `completed_at`; não terminais nunca gravam
    - Relógio e gerador de ids são injetáveis (testes determinísticos)

Invariantes:
    - O status nunca volta atrás
    - Nenhuma transição sai de um estado terminal
    - O status corrente de uma release é o do deployment iniciado por último

Limites explícitos:
    - Não executa o pipeline (ver core.engine.orchestrator)
    - Não há exclusão mútua entre deploys concorrentes da mesma release
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional

from quadlet_deploy.core.exceptions import InvalidTransition, NotFound
from quadlet_deploy.core.pipeline.types import DeploymentStatus

from .records import InMemoryRecordStore


ALLOWED_TRANSITIONS: Mapping[DeploymentStatus, FrozenSet[DeploymentStatus]] = {
    DeploymentStatus.RENDERING: frozenset({DeploymentStatus.UPLOADING, DeploymentStatus.FAILED}),
    DeploymentStatus.UPLOADING: frozenset({DeploymentStatus.READY, DeploymentStatus.FAILED}),
    DeploymentStatus.READY: frozenset(),
    DeploymentStatus.FAILED: frozenset(),
    DeploymentStatus.DEPLOYED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt is not None else None


@dataclass(frozen=True)
class DeploymentRecord:
    id: str
    release_id: str
    user_uuid: str
    status: DeploymentStatus
    started_at: datetime
    r2_path: Optional[str] = None
    manifest_url: Optional[str] = None
    error_message: Optional[str] = None
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "release_id": self.release_id,
            "user_uuid": self.user_uuid,
            "status": self.status.value,
            "r2_path": self.r2_path,
            "manifest_url": self.manifest_url,
            "error_message": self.error_message,
            "started_at": _iso(self.started_at),
            "completed_at": _iso(self.completed_at),
        }


def can_transition(current: DeploymentStatus, target: DeploymentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class DeploymentStateMachine:
    """Cria e avança registros de deployment sobre um record store."""

    def __init__(
        self,
        store: Optional[InMemoryRecordStore[DeploymentRecord]] = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.store = store if store is not None else InMemoryRecordStore()
        self._clock = clock
        self._id_factory = id_factory

    async def create(self, *, release_id: str, user_uuid: str) -> DeploymentRecord:
        record = DeploymentRecord(
            id=self._id_factory(),
            release_id=release_id,
            user_uuid=user_uuid,
            status=DeploymentStatus.RENDERING,
            started_at=self._clock(),
        )
        self.store.put(record.id, record)
        return record

    async def get(self, deployment_id: str) -> Optional[DeploymentRecord]:
        return self.store.get(deployment_id)

    async def transition(
        self,
        deployment_id: str,
        status: DeploymentStatus,
        *,
        r2_path: Optional[str] = None,
        manifest_url: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> DeploymentRecord:
        """
        Avança o status de um deployment.

        Raises:
            NotFound: Se o deployment não existir.
            InvalidTransition: Se a transição não for permitida.
        """
        current = self.store.get(deployment_id)
        if current is None:
            raise NotFound(
                message="Deployment not found",
                details={"resource": "deployment", "id": deployment_id},
            )
        status = DeploymentStatus(status)
        if not can_transition(current.status, status):
            raise InvalidTransition(
                message=f"Invalid status transition: {current.status.value} -> {status.value}",
                details={
                    "deployment_id": deployment_id,
                    "from": current.status.value,
                    "to": status.value,
                },
            )

        changes: Dict[str, Any] = {"status": status}
        if status.is_terminal:
            changes["completed_at"] = self._clock()
        if r2_path is not None:
            changes["r2_path"] = r2_path
        if manifest_url is not None:
            changes["manifest_url"] = manifest_url
        if error_message is not None:
            changes["error_message"] = error_message

        updated = replace(current, **changes)
        self.store.put(deployment_id, updated)
        return updated

    def _for_release(self, user_uuid: str, release_id: str) -> List[DeploymentRecord]:
        return self.store.list(lambda r: r.user_uuid == user_uuid and r.release_id == release_id)

    async def latest_for_release(self, user_uuid: str, release_id: str) -> Optional[DeploymentRecord]:
        records = self._for_release(user_uuid, release_id)
        if not records:
            return None
        # empate em started_at: vence o criado por último
        indexed = list(enumerate(records))
        return max(indexed, key=lambda item: (item[1].started_at, item[0]))[1]

    async def status_for_release(
        self,
        user_uuid: str,
        release_id: str,
        *,
        has_configuration: bool,
    ) -> Dict[str, Any]:
        latest = await self.latest_for_release(user_uuid, release_id)
        return {
            "deployment": latest.to_dict() if latest is not None else None,
            "hasConfiguration": has_configuration,
        }

    async def delete_for_release(self, user_uuid: str, release_id: str) -> int:
        records = self._for_release(user_uuid, release_id)
        for r in records:
            self.store.delete(r.id)
        return len(records)
