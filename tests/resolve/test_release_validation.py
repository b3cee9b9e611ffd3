# tests/resolve/test_release_validation.py
"""
Testes de `validate_release_config` e `ValidationReport`.

Os testes asseguram que:
- uma release válida com RAG sem embedding gera apenas nota informativa
- subdomínios repetidos em `caddy_routes` invalidam a configuração
- Tailscale ausente é erro bloqueante
- overrides de serviços desconhecidos geram warning (não erro)
- `raise_if_invalid` agrega todos os erros em uma única mensagem
"""

import copy

import pytest

try:
    from quadlet_deploy.core.exceptions import ValidationError
    from quadlet_deploy.resolve.validation import ValidationReport, validate_release_config
except Exception as e:  # noqa: BLE001
    validate_release_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing release validation: {_IMPORT_ERR}")


def test_rag_without_embedding_is_valid_with_note(registry, qdrant_release, tailscale_settings):
    """
    Verifica que o default de embedding é uma nota, nunca um erro.

    Invariantes:
        - `errors == []`
        - a nota cita o modelo default do catálogo
    """
    _require_imports()
    report = validate_release_config(qdrant_release, tailscale_settings, registry)
    assert report.valid is True
    assert report.errors == []
    assert report.notes == ["RAG enabled with default embedding model (qwen3-embedding-8b)"]


def test_duplicate_subdomains_invalidate(registry, qdrant_release, tailscale_settings):
    _require_imports()
    release = copy.deepcopy(qdrant_release)
    release["caddy_routes"]["litellm_subdomain"] = "chat"
    report = validate_release_config(release, tailscale_settings, registry)
    assert report.valid is False
    assert any("Duplicate subdomains found" in e for e in report.errors)
    assert "Duplicate subdomains found: chat" in report.errors


def test_empty_subdomains_are_not_duplicates(registry, qdrant_release, tailscale_settings):
    _require_imports()
    release = copy.deepcopy(qdrant_release)
    release["caddy_routes"].update({"cockpit_subdomain": None, "llama_swap_subdomain": ""})
    release["caddy_routes"]["searxng_subdomain"] = ""
    assert validate_release_config(release, tailscale_settings, registry).valid is True


def test_missing_tailscale_is_error(registry, qdrant_release):
    _require_imports()
    report = validate_release_config(qdrant_release, None, registry)
    assert report.valid is False
    assert report.errors == [
        "Tailscale configuration not found. Please configure Tailscale in Settings first."
    ]


def test_unknown_service_override_is_warning(registry, qdrant_release, tailscale_settings):
    _require_imports()
    release = copy.deepcopy(qdrant_release)
    release["infrastructure"]["services"] = {"mystery": {"enabled": True}}
    report = validate_release_config(release, tailscale_settings, registry)
    assert report.valid is True
    assert report.warnings == ["Unknown service 'mystery' will be skipped"]


def test_raise_if_invalid_aggregates_errors():
    """
    Verifica a agregação de erros em `ValidationError`.

    Decisões arquiteturais:
        - Relatório válido não levanta nada
        - A mensagem junta os erros com ", "
    """
    _require_imports()
    ValidationReport(valid=True).raise_if_invalid()
    report = ValidationReport(valid=False, errors=["a", "b"], warnings=["w"])
    with pytest.raises(ValidationError) as exc:
        report.raise_if_invalid()
    assert str(exc.value) == "Validation failed: a, b"
    assert exc.value.details == {"errors": ["a", "b"], "warnings": ["w"]}
    assert report.to_dict()["valid"] is False
