# tests/conftest.py
"""
Fixtures compartilhados para testes do quadlet-deploy.

Este módulo define fixtures reutilizáveis que fornecem:
- registry v1 e um registry reduzido de fixture
- configurações de release determinísticas (dict)
- settings de usuário com e sem Tailscale
- relógio e gerador de ids determinísticos
- DeployContext controlado

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Imports do pacote são realizados de forma lazy para
      melhorar a clareza de erros durante falhas
    - Nenhuma fixture faz I/O (tmp_path fica a cargo de cada teste)

Limites explícitos:
    - Não substituir testes de integração do orquestrador
    - Não conter lógica de domínio
"""

from datetime import datetime, timedelta, timezone

import pytest


FIXED_NOW = datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc)


# =====================================================
# Relógio / ids
# =====================================================

class TickingClock:
    """Relógio determinístico: cada chamada avança um segundo."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


class SequentialIds:
    def __init__(self, prefix: str = "dep"):
        self.prefix = prefix
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"{self.prefix}-{self.n:03d}"


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def ids():
    return SequentialIds()


# =====================================================
# Registry
# =====================================================

@pytest.fixture
def registry():
    from quadlet_deploy.catalog.registry import DefaultsRegistry

    return DefaultsRegistry.v1()


@pytest.fixture
def fixture_registry():
    """
    Registry reduzido para testes de grafo e renderer.

    Serviços:
        - web      → depende de db e cache; healthcheck declarado
        - db       → volume `db-data`, secret estático
        - cache    → sem dependências
        - worker   → depende de `ghost` (fora do catálogo)

    Decisões arquiteturais:
        - Nomes curtos e estáveis (golden tests)
        - `worker` existe para exercitar arestas pendentes
    """
    from quadlet_deploy.catalog.registry import DefaultsRegistry

    return DefaultsRegistry.from_dict(
        {
            "services": {
                "web": {
                    "image": "example.org/web:1",
                    "ports": ["127.0.0.1:8080:8080"],
                    "volumes": ["web.volume:/srv", "shared.volume:/shared"],
                    "dependencies": ["db", "cache"],
                    "description": "Web frontend",
                    "environment": {"DB_HOST": "db", "CACHE_HOST": "cache"},
                    "env_from_provider_config": {"SITE_NAME": "site_name"},
                    "health_cmd": "curl -f http://localhost:8080/health",
                },
                "db": {
                    "image": "example.org/db:16",
                    "volumes": ["db-data.volume:/var/lib/db", "shared.volume:/shared"],
                    "environment": {"DB_USER": "app"},
                    "secrets": ["db_password"],
                },
                "cache": {"image": "example.org/cache:7"},
                "worker": {
                    "image": "example.org/worker:1",
                    "dependencies": ["ghost"],
                    "provider_key_secrets": True,
                },
            },
            "core_services": ["web", "db", "cache"],
            "provider_services": {"queue_engine": {"worker": ["worker"]}},
            "category_features": {"queue_engine": "queue_enabled"},
            "default_network": "appnet",
            "models": {"embedding": ["embed-small"], "local": ["local-chat"]},
        }
    )


# =====================================================
# Release / settings
# =====================================================

@pytest.fixture
def tailscale_settings() -> dict:
    return {
        "tailscale": {
            "full_hostname": "blueprint.tail8dd1.ts.net",
            "hostname": "blueprint",
            "tailnet": "tail8dd1.ts.net",
        }
    }


@pytest.fixture
def qdrant_release() -> dict:
    """Release com RAG via qdrant e nenhum modelo de embedding escolhido."""
    return {
        "service_selections": {
            "rag_provider": "qdrant",
            "web_search_provider": None,
            "image_generation_provider": None,
        },
        "model_assignments": {
            "primary_chat_models": ["openai/gpt-4o", "anthropic/claude-3-5-sonnet"],
            "embedding_models": [],
        },
        "core_services": {
            "openwebui": {"webui_name": "Lab AI", "rag_top_k": 8},
        },
        "caddy_routes": {
            "openwebui_subdomain": "chat",
            "litellm_subdomain": "llm",
            "qdrant_subdomain": "vectors",
        },
        "infrastructure": {"network": {"name": "llm", "subnet": "10.89.0.0/24"}},
        "release_metadata": {"name": "lab"},
    }


@pytest.fixture
def deploy_ctx():
    from quadlet_deploy.core.pipeline.context import DeployContext

    return DeployContext(
        run_id="dep-test-001",
        created_at=FIXED_NOW,
        meta={"source": "pytest"},
    )
