"""
quadlet-deploy — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do quadlet-deploy.
Erros fazem parte do contrato operacional do serviço: o `error_message`
gravado no registro de deployment e o payload devolvido à camada de API
precisam ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Nenhuma correção implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeployErrorPayload:
    """
    Payload canônico de erro do quadlet-deploy.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao usuário (onde corrigir)
    - decision_required: indica que o deploy só pode prosseguir após ação
      explícita do usuário (ex.: configurar Tailscale, salvar configuração)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    decision_required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Configuração da release
VALIDATION_FAILED = "VALIDATION_FAILED"
PREREQUISITE_MISSING = "PREREQUISITE_MISSING"
NOT_FOUND = "NOT_FOUND"

# Pipeline de deployment
RENDER_FAILED = "RENDER_FAILED"
UPLOAD_FAILED = "UPLOAD_FAILED"
INVALID_TRANSITION = "INVALID_TRANSITION"
DEPLOY_EXECUTION_ERROR = "DEPLOY_EXECUTION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def deploy_execution_error(
    *,
    step: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o event log do deploy para diagnosticar a falha. Nenhum retry é aplicado automaticamente.",
) -> DeployErrorPayload:
    return DeployErrorPayload(
        type=DEPLOY_EXECUTION_ERROR,
        message="Falha inesperada durante o deploy",
        details={
            "step": step,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
        decision_required=False,
    )
