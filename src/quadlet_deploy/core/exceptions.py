"""
quadlet-deploy — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do quadlet-deploy.

Objetivo:
- Permitir que resolver, renderer, storage e orquestrador levantem
  exceções semânticas tipadas
- Facilitar o mapeamento determinístico para DeployErrorPayload
- Evitar ValueError/RuntimeError genéricos no pipeline de deploy

Regras:
- `str(exc)` é a mensagem curta gravada em `error_message`
- Exceções carregam apenas dados estruturados (serializáveis)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import (
    DEPLOY_EXECUTION_ERROR,
    INVALID_TRANSITION,
    NOT_FOUND,
    PREREQUISITE_MISSING,
    RENDER_FAILED,
    UPLOAD_FAILED,
    VALIDATION_FAILED,
    DeployErrorPayload,
    deploy_execution_error,
)


@dataclass(frozen=True)
class DeployException(Exception):
    """Base class para exceções internas do quadlet-deploy.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None
    decision_required: bool = False

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuração da release
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationError(DeployException):
    """Configuração estruturalmente inválida (ex.: subdomínios duplicados)."""


@dataclass(frozen=True)
class PrerequisiteMissing(DeployException):
    """Pré-requisito do usuário ausente (ex.: Tailscale não configurado)."""


@dataclass(frozen=True)
class NotFound(PrerequisiteMissing):
    """Release ou configuração salva inexistente (caso particular de pré-requisito)."""


# ---------------------------------------------------------------------------
# Pipeline de deployment
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderError(DeployException):
    """Renderização não produziu nenhuma unit (fatal)."""


@dataclass(frozen=True)
class UploadError(DeployException):
    """Falha de escrita no artifact store."""


@dataclass(frozen=True)
class InvalidTransition(DeployException):
    """Transição de status não permitida pela máquina de estados."""


_PAYLOAD_TYPES = {
    ValidationError: VALIDATION_FAILED,
    PrerequisiteMissing: PREREQUISITE_MISSING,
    NotFound: NOT_FOUND,
    RenderError: RENDER_FAILED,
    UploadError: UPLOAD_FAILED,
    InvalidTransition: INVALID_TRANSITION,
}


def exception_to_payload(exc: BaseException, *, step: Optional[str] = None) -> DeployErrorPayload:
    """Converte qualquer exceção em `DeployErrorPayload` serializável.

    Exceções tipadas preservam mensagem, details e hint; qualquer outra é
    encapsulada como DEPLOY_EXECUTION_ERROR.
    """
    if isinstance(exc, DeployException):
        payload_type = _PAYLOAD_TYPES.get(type(exc), DEPLOY_EXECUTION_ERROR)
        return DeployErrorPayload(
            type=payload_type,
            message=exc.message,
            details=dict(exc.details),
            hint=exc.hint,
            decision_required=exc.decision_required,
        )
    return deploy_execution_error(
        step=step,
        exc_type=type(exc).__name__,
        exc_message=str(exc),
    )
