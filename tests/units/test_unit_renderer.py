# tests/units/test_unit_renderer.py
"""
Testes do renderer de units Quadlet (`UnitRenderer`).

Este módulo valida:
- a ordem do conjunto renderizado (network, containers, volumes)
- containers em ordem de dependência com empates lexicográficos
- volumes deduplicados na ordem de primeira aparição
- o texto exato de uma unit `.container` (golden)
- secrets estáticos, de API key por provider e condicionados a provider_config
- `RenderError` quando não há serviços

Decisões arquiteturais:
    - O registry reduzido (`fixture_registry`) mantém o golden legível
    - A configuração é construída diretamente, sem passar pelo resolver

Limites explícitos:
    - Não valida upload nem manifest
"""

import pytest

try:
    from quadlet_deploy.core.exceptions import RenderError
    from quadlet_deploy.core.pipeline.types import FileType
    from quadlet_deploy.graph.service_set import build_service_set
    from quadlet_deploy.resolve.unified import UnifiedDeploymentConfig
    from quadlet_deploy.units.builder import extract_unit_metadata
    from quadlet_deploy.units.renderer import (
        UnitRenderer,
        extract_provider,
        file_type_for,
        provider_secret_names,
    )
except Exception as e:  # noqa: BLE001
    UnitRenderer = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


GOLDEN_WEB = """\
[Unit]
Description=Web frontend
Documentation=https://docs.leger.run/
After=network-online.target
After=appnet.network.service
Requires=appnet.network.service
After=db.service
Wants=db.service
After=cache.service
Wants=cache.service
Wants=network-online.target

[Container]
Image=example.org/web:1
AutoUpdate=registry
ContainerName=frontend
Network=appnet.network
PublishPort=127.0.0.1:8080:8080
Environment=DB_HOST=db
Environment=CACHE_HOST=cache
Environment=SITE_NAME=Shop
Volume=web.volume:/srv
Volume=shared.volume:/shared
HealthCmd=curl -f http://localhost:8080/health
HealthInterval=30s
HealthTimeout=10s
HealthRetries=3
HealthStartPeriod=60s

[Service]
Slice=llm.slice
Restart=always
RestartSec=10
TimeoutStartSec=900

[Install]
WantedBy=default.target
"""


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing unit renderer: {_IMPORT_ERR}")


def _config(**extra):
    data = {
        "infrastructure": {
            "network": {"name": "appnet", "subnet": "10.1.0.0/24"},
            "services": {"web": {"container_name": "frontend"}, "db": {}, "cache": {}},
        },
        "provider_config": {"site_name": "Shop"},
    }
    data.update(extra)
    return UnifiedDeploymentConfig.from_dict(data)


def _render(registry, config, ctx=None):
    service_set = build_service_set(config, registry)
    return UnitRenderer(registry).render(config, service_set, ctx)


def test_render_order_network_containers_volumes(fixture_registry):
    """
    Verifica a ordem completa do conjunto renderizado.

    Invariantes:
        - network sempre primeiro
        - containers em ordem topológica (cache, db antes de web)
        - volumes distintos, na ordem de primeira aparição
    """
    _require_imports()
    files = _render(fixture_registry, _config())
    assert [f.name for f in files] == [
        "appnet.network",
        "cache.container",
        "db.container",
        "web.container",
        "db-data.volume",
        "shared.volume",
        "web.volume",
    ]
    assert [f.type for f in files[:2]] == [FileType.NETWORK, FileType.CONTAINER]
    assert files[-1].type == FileType.VOLUME


def test_container_unit_golden(fixture_registry):
    _require_imports()
    files = {f.name: f for f in _render(fixture_registry, _config())}
    assert files["web.container"].content == GOLDEN_WEB


def test_network_unit_has_subnet(fixture_registry):
    _require_imports()
    network = _render(fixture_registry, _config())[0]
    assert network.content == (
        "[Unit]\nDescription=appnet network\n\n"
        "[Network]\nSubnet=10.1.0.0/24\n\n"
        "[Install]\nWantedBy=default.target\n"
    )


def test_volume_unit_name_has_single_suffix(fixture_registry):
    _require_imports()
    files = {f.name: f for f in _render(fixture_registry, _config())}
    assert "shared.volume" in files
    assert "shared.volume.volume" not in files
    assert "Description=shared volume" in files["shared.volume"].content


def test_static_secrets_are_mounted(fixture_registry):
    _require_imports()
    files = {f.name: f for f in _render(fixture_registry, _config())}
    assert extract_unit_metadata(files["db.container"].content)["secrets"] == ["db_password"]
    assert "HealthCmd" not in files["db.container"].content


def test_provider_key_secrets_from_cloud_models(fixture_registry):
    """
    Verifica secrets de API key derivados dos modelos cloud.

    Invariantes:
        - um secret por provider distinto, na ordem de primeira aparição
        - hífens viram `_` e o nome é minúsculo
        - ids sem `/` caem no provider `unknown`
    """
    _require_imports()
    config = UnifiedDeploymentConfig.from_dict(
        {
            "infrastructure": {"services": {"worker": {}}},
            "models": {"cloud": ["openai/gpt-4o", "Mistral-AI/large", "openai/o1", "bare"]},
        }
    )
    files = {f.name: f for f in _render(fixture_registry, config)}
    secrets = extract_unit_metadata(files["worker.container"].content)["secrets"]
    assert secrets == ["openai_api_key", "mistral_ai_api_key", "unknown_api_key"]


def test_secret_from_provider_config_requires_value(registry):
    _require_imports()
    base = {"infrastructure": {"services": {"qdrant": {}}}}
    without = _render(registry, UnifiedDeploymentConfig.from_dict(base))
    with_key = _render(
        registry,
        UnifiedDeploymentConfig.from_dict(dict(base, provider_config={"qdrant_api_key": "k"})),
    )
    assert "Secret=" not in without[1].content
    assert "Secret=qdrant_api_key" in with_key[1].content


def test_env_from_provider_config_skips_falsy(fixture_registry):
    _require_imports()
    config = _config(provider_config={"site_name": ""})
    files = {f.name: f for f in _render(fixture_registry, config)}
    env = extract_unit_metadata(files["web.container"].content)["environment"]
    assert env == {"DB_HOST": "db", "CACHE_HOST": "cache"}


def test_render_logs_summary(fixture_registry, deploy_ctx):
    _require_imports()
    _render(fixture_registry, _config(), deploy_ctx)
    assert deploy_ctx.events[-1]["message"] == "Rendered 7 files for 3 services"


def test_empty_service_set_raises_render_error(fixture_registry):
    _require_imports()
    config = UnifiedDeploymentConfig.from_dict({"infrastructure": {"services": {}}})
    with pytest.raises(RenderError, match="No services to render"):
        _render(fixture_registry, config)


def test_helpers():
    _require_imports()
    assert extract_provider("openai/gpt-4") == "openai"
    assert extract_provider("gpt-4") == "unknown"
    assert provider_secret_names(["a/x", "a/y", "b-c/z"]) == ["a_api_key", "b_c_api_key"]
    assert file_type_for("llm.network") == FileType.NETWORK
    assert file_type_for("litellm.env") == FileType.ENV
    assert file_type_for("Caddyfile") == FileType.CONFIG
