# src/quadlet_deploy/resolve/validation.py
"""
Validação de configuração de release antes do deploy.

Produz um `ValidationReport` com três níveis de mensagem:
    - errors: bloqueiam o deploy (Tailscale ausente, subdomínios duplicados)
    - warnings: não bloqueiam (override de serviço desconhecido)
    - notes: informativos (defaults que serão aplicados)

Limites explícitos:
    - Não resolve a configuração (ver resolver.py)
    - Não levanta exceção por conta própria; `raise_if_invalid()` é opt-in
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from quadlet_deploy.catalog.registry import DefaultsRegistry
from quadlet_deploy.core.exceptions import ValidationError
from quadlet_deploy.release.models import ReleaseConfig, UserSettings


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "notes": list(self.notes),
        }

    def raise_if_invalid(self) -> None:
        """Levanta `ValidationError` com todas as mensagens de erro agregadas."""
        if self.valid:
            return
        raise ValidationError(
            message=f"Validation failed: {', '.join(self.errors)}",
            details={"errors": list(self.errors), "warnings": list(self.warnings)},
            hint="Corrija a configuração da release e tente novamente.",
            decision_required=True,
        )


def _duplicate_subdomains(routes: Mapping[str, Any]) -> List[str]:
    seen = set()
    duplicates: List[str] = []
    for value in routes.values():
        if not value:
            continue
        if value in seen and value not in duplicates:
            duplicates.append(value)
        seen.add(value)
    return duplicates


def validate_release_config(
    release: Union[ReleaseConfig, Mapping[str, Any]],
    settings: Union[UserSettings, Mapping[str, Any], None],
    registry: Optional[DefaultsRegistry] = None,
) -> ValidationReport:
    """
    Valida uma configuração de release contra os settings do usuário.

    Regras:
        - Tailscale ausente -> erro
        - Provider de RAG sem modelos de embedding -> nota (defaults aplicados)
        - Subdomínios não vazios repetidos em `caddy_routes` -> erro
        - Override em `infrastructure.services` para serviço fora do catálogo
          -> warning (o serviço será ignorado no deploy)

    Args:
        release: Configuração salva (ReleaseConfig ou dict).
        settings: Settings do usuário (UserSettings, dict ou None).
        registry: Catálogo usado nas notas e warnings. Default: v1.

    Returns:
        ValidationReport: `valid` é True se e somente se não houver erros.
    """
    registry = registry or DefaultsRegistry.v1()
    if not isinstance(release, ReleaseConfig):
        release = ReleaseConfig.from_dict(release)
    if not isinstance(settings, UserSettings):
        settings = UserSettings.from_dict(settings)

    errors: List[str] = []
    warnings: List[str] = []
    notes: List[str] = []

    if settings.tailscale is None:
        errors.append("Tailscale configuration not found. Please configure Tailscale in Settings first.")

    if release.selection("rag_provider") and not release.embedding_models:
        default_embedding = ", ".join(registry.default_models("embedding"))
        notes.append(f"RAG enabled with default embedding model ({default_embedding})")

    duplicates = _duplicate_subdomains(release.caddy_routes)
    if duplicates:
        errors.append(f"Duplicate subdomains found: {', '.join(duplicates)}")

    for service_name in release.service_overrides:
        if not registry.has_service(service_name):
            warnings.append(f"Unknown service '{service_name}' will be skipped")

    return ValidationReport(valid=not errors, errors=errors, warnings=warnings, notes=notes)
