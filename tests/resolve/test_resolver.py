# tests/resolve/test_resolver.py
"""
Testes do `ConfigurationResolver`.

Este módulo valida a resolução de release + settings + secrets +
marketplace em uma `UnifiedDeploymentConfig`:

- provider escolhido vira `providers.<categoria>` e liga a feature
- modelos de embedding ausentes recebem o default do catálogo
- a precedência das camadas nomeadas é a documentada
- patches não destrutivos preservam campos irmãos
- a resolução é determinística (hash canônico estável)
- pré-requisitos ausentes são erros tipados

Decisões arquiteturais:
    - O registry v1 é injetado por construção (fixture `registry`)
    - Nenhum store é usado: a resolução é pura

Limites explícitos:
    - Não valida subdomínios duplicados (ver test_release_validation.py)
    - Não valida renderização
"""

import copy

import pytest

try:
    from quadlet_deploy.core.config.hashing import compute_config_hash
    from quadlet_deploy.core.exceptions import NotFound, PrerequisiteMissing, ValidationError
    from quadlet_deploy.release.models import ReleaseConfig
    from quadlet_deploy.resolve import LAYER_NAMES, ConfigurationResolver
except Exception as e:  # noqa: BLE001
    ConfigurationResolver = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing resolver. Expected `quadlet_deploy.resolve.ConfigurationResolver`.\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_rag_selection_resolves_provider_feature_and_default_embedding(
    registry, qdrant_release, tailscale_settings
):
    """
    Verifica o caso canônico de RAG via qdrant sem embedding escolhido.

    Invariantes:
        - `providers.vector_db == "qdrant"`
        - `features.rag_enabled is True`
        - `models.embedding` recebe o default do catálogo
        - o bloco do qdrant entra em `infrastructure.services` com a rota da release
    """
    _require_imports()
    unified = ConfigurationResolver(registry).resolve(qdrant_release, tailscale_settings)

    assert unified.providers["vector_db"] == "qdrant"
    assert unified.features["rag_enabled"] is True
    assert unified.models["embedding"] == ["qwen3-embedding-8b"]
    assert unified.models["cloud"] == ["openai/gpt-4o", "anthropic/claude-3-5-sonnet"]
    assert unified.models["local"] == []

    services = unified.services
    assert services["qdrant"]["external_subdomain"] == "vectors"
    assert services["qdrant"]["port"] == 6333
    assert unified.provider_config["qdrant_url"] == "http://qdrant:6333"


def test_without_cloud_models_local_defaults_apply(registry, qdrant_release, tailscale_settings):
    _require_imports()
    release = copy.deepcopy(qdrant_release)
    release["model_assignments"]["primary_chat_models"] = []
    unified = ConfigurationResolver(registry).resolve(release, tailscale_settings)
    assert unified.models["cloud"] == []
    assert unified.models["local"] == ["gpt-oss-20b", "gpt-oss-120b"]


def test_layer_order_is_visible(registry, qdrant_release):
    """
    Verifica que a precedência é um artefato visível e testável.

    Decisões arquiteturais:
        - A ordem das camadas é a ordem da lista
    """
    _require_imports()
    resolver = ConfigurationResolver(registry)
    layers = resolver.service_layers(ReleaseConfig.from_dict(qdrant_release))
    assert [layer.name for layer in layers] == list(LAYER_NAMES)
    assert resolver.layer_names() == [
        "infrastructure_defaults",
        "provider_defaults",
        "release_selections",
        "user_overrides",
    ]


def test_nested_override_preserves_siblings(registry, qdrant_release, tailscale_settings):
    """
    Verifica que um override literal não apaga campos irmãos dos defaults.

    Invariantes:
        - `openwebui.port` e `openwebui.volume` sobrevivem
        - o subdomínio da release é aplicado
        - o campo sobrescrito pelo usuário reflete o override
    """
    _require_imports()
    unified = ConfigurationResolver(registry).resolve(qdrant_release, tailscale_settings)
    openwebui = unified.services["openwebui"]
    assert openwebui["port"] == 8080
    assert openwebui["volume"] == "openwebui.volume"
    assert openwebui["external_subdomain"] == "chat"
    assert openwebui["rag_top_k"] == 8


def test_user_override_wins_over_release_selection(registry, qdrant_release, tailscale_settings):
    _require_imports()
    release = copy.deepcopy(qdrant_release)
    release["core_services"]["openwebui"]["external_subdomain"] = "ai"
    unified = ConfigurationResolver(registry).resolve(release, tailscale_settings)
    assert unified.services["openwebui"]["external_subdomain"] == "ai"


def test_marketplace_config_overrides_registry_defaults(registry, qdrant_release, tailscale_settings):
    _require_imports()
    unified = ConfigurationResolver(registry).resolve(
        qdrant_release,
        tailscale_settings,
        marketplace_configs={"qdrant": {"port": 6335, "image_tag": "v1.12"}},
    )
    qdrant = unified.services["qdrant"]
    assert qdrant["port"] == 6335
    assert qdrant["image_tag"] == "v1.12"
    assert qdrant["container_name"] == "qdrant"


def test_provider_config_layers(registry, qdrant_release, tailscale_settings):
    """
    Verifica provider_config: defaults -> urls -> overrides do usuário.

    Invariantes:
        - overrides de `core_services.openwebui` viram chaves de provider_config
        - chaves não mencionadas mantêm o default
    """
    _require_imports()
    unified = ConfigurationResolver(registry).resolve(qdrant_release, tailscale_settings)
    pc = unified.provider_config
    assert pc["webui_name"] == "Lab AI"
    assert pc["rag_top_k"] == 8
    assert pc["chunk_size"] == 1500
    assert pc["rag_embedding_model"] == "qwen3-embedding-8b"


def test_explicit_feature_flag_overrides_inferred(registry, qdrant_release, tailscale_settings):
    _require_imports()
    release = copy.deepcopy(qdrant_release)
    release["core_services"]["openwebui"]["enable_rag"] = False
    unified = ConfigurationResolver(registry).resolve(release, tailscale_settings)
    assert unified.providers["vector_db"] == "qdrant"
    assert unified.features["rag_enabled"] is False


def test_providers_without_value_are_dropped(registry, qdrant_release, tailscale_settings):
    _require_imports()
    unified = ConfigurationResolver(registry).resolve(qdrant_release, tailscale_settings)
    assert "image_engine" not in unified.providers
    assert all(v for v in unified.providers.values())


def test_secrets_are_flattened(registry, qdrant_release, tailscale_settings):
    _require_imports()
    unified = ConfigurationResolver(registry).resolve(
        qdrant_release,
        tailscale_settings,
        secrets=[
            {"name": "openai_api_key", "value": "sk-1"},
            {"name": "empty", "value": ""},
            {"value": "orphan"},
        ],
    )
    assert unified.secrets == {"openai_api_key": "sk-1"}
    assert unified.tailscale["hostname"] == "blueprint"


def test_resolution_is_deterministic(registry, qdrant_release, tailscale_settings):
    """
    Verifica que a mesma entrada produz a mesma configuração canônica.

    Invariantes:
        - `to_dict()` idêntico
        - hash canônico idêntico
    """
    _require_imports()
    resolver = ConfigurationResolver(registry)
    a = resolver.resolve(qdrant_release, tailscale_settings)
    b = resolver.resolve(copy.deepcopy(qdrant_release), dict(tailscale_settings))
    assert a.to_dict() == b.to_dict()
    assert compute_config_hash(a.to_dict()) == compute_config_hash(b.to_dict())


def test_missing_release_raises_not_found(registry, tailscale_settings):
    _require_imports()
    with pytest.raises(NotFound):
        ConfigurationResolver(registry).resolve(None, tailscale_settings)


def test_missing_tailscale_raises_prerequisite(registry, qdrant_release):
    """
    Verifica que Tailscale ausente bloqueia a resolução.

    Decisões arquiteturais:
        - Erro exige decisão do usuário (`decision_required=True`)
    """
    _require_imports()
    with pytest.raises(PrerequisiteMissing) as exc:
        ConfigurationResolver(registry).resolve(qdrant_release, {})
    assert exc.value.decision_required is True
    assert "Tailscale" in str(exc.value)


def test_type_conflict_between_layers_is_validation_error(registry, qdrant_release, tailscale_settings):
    _require_imports()
    release = copy.deepcopy(qdrant_release)
    release["infrastructure"]["services"] = {"openwebui": {"port": {"nested": True}}}
    with pytest.raises(ValidationError, match="Invalid configuration structure"):
        ConfigurationResolver(registry).resolve(release, tailscale_settings)


def test_resolve_logs_to_context(registry, qdrant_release, tailscale_settings, deploy_ctx):
    _require_imports()
    ConfigurationResolver(registry).resolve(qdrant_release, tailscale_settings, ctx=deploy_ctx)
    event = deploy_ctx.events[-1]
    assert event["step_id"] == "resolve"
    assert event["layers"] == list(LAYER_NAMES)
    assert "qdrant" in event["services"]
