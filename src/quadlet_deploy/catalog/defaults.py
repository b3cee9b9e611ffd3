"""
Catálogo v1 — tabelas compiladas de defaults do quadlet-deploy.

As tabelas abaixo só são lidas por `DefaultsRegistry.v1()`; nenhum outro
módulo as referencia diretamente. Resolver e renderer recebem o registry
por construção, o que permite substituí-lo por fixtures nos testes.

Conteúdo:
- imagens, portas, volumes e dependências de cada serviço
- blocos de infraestrutura dos serviços core
- defaults de marketplace (qdrant, searxng, comfyui, whisper, jupyter)
- providers e provider_config padrão
- modelos padrão (chat local, embedding, task)
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict


_SERVICES_V1: Dict[str, Dict[str, Any]] = {
    "caddy": {
        "image": "docker.io/caddy:2-alpine",
        "ports": ["80:80", "443:443", "443:443/udp"],
        "volumes": ["caddy-config.volume:/config", "caddy-data.volume:/data"],
        "description": "Caddy Reverse Proxy for LLM Services",
    },
    "cockpit": {
        "image": "quay.io/cockpit/ws:latest",
        "ports": ["127.0.0.1:9090:9090"],
        "description": "Cockpit Web Console",
    },
    "openwebui": {
        "image": "ghcr.io/open-webui/open-webui:main",
        "ports": ["127.0.0.1:3000:8080"],
        "volumes": ["openwebui.volume:/app/backend/data"],
        "dependencies": ["openwebui-postgres", "openwebui-redis", "litellm"],
        "description": "Open WebUI - LLM Chat Interface",
        "environment": {
            "DATABASE_URL": "postgresql://openwebui@openwebui-postgres:5432/openwebui",
            "REDIS_URL": "redis://openwebui-redis:6379",
            "OPENAI_API_BASE_URL": "http://litellm:4000/v1",
        },
        "env_from_provider_config": {
            "WEBUI_NAME": "webui_name",
            "RAG_TOP_K": "rag_top_k",
            "CHUNK_SIZE": "chunk_size",
            "CHUNK_OVERLAP": "chunk_overlap",
        },
    },
    "openwebui-postgres": {
        "image": "docker.io/postgres:16-alpine",
        "volumes": ["openwebui-postgres.volume:/var/lib/postgresql/data"],
        "description": "PostgreSQL for OpenWebUI",
        "environment": {"POSTGRES_USER": "openwebui", "POSTGRES_DB": "openwebui"},
        "secrets": ["postgres_password"],
    },
    "openwebui-redis": {
        "image": "docker.io/redis:7-alpine",
        "volumes": ["openwebui-redis.volume:/data"],
        "description": "Redis for OpenWebUI",
    },
    "litellm": {
        "image": "ghcr.io/berriai/litellm:main-latest",
        "ports": ["127.0.0.1:4000:4000"],
        "dependencies": ["litellm-postgres", "litellm-redis"],
        "description": "LiteLLM - Unified LLM Proxy",
        "environment": {
            "DATABASE_URL": "postgresql://litellm@litellm-postgres:5432/litellm",
            "REDIS_HOST": "litellm-redis",
            "REDIS_PORT": "6379",
        },
        "provider_key_secrets": True,
    },
    "litellm-postgres": {
        "image": "docker.io/postgres:16-alpine",
        "volumes": ["litellm-postgres.volume:/var/lib/postgresql/data"],
        "description": "PostgreSQL for LiteLLM",
        "environment": {"POSTGRES_USER": "litellm", "POSTGRES_DB": "litellm"},
        "secrets": ["postgres_password"],
    },
    "litellm-redis": {
        "image": "docker.io/redis:7-alpine",
        "volumes": ["litellm-redis.volume:/data"],
        "description": "Redis for LiteLLM",
    },
    "llama-swap": {
        "image": "ghcr.io/mostlygeek/llama-swap:latest",
        "ports": ["127.0.0.1:8000:8000"],
        "volumes": ["llama-swap.volume:/models"],
        "description": "Llama-Swap - Local Model Router",
    },
    "qdrant": {
        "image": "docker.io/qdrant/qdrant:latest",
        "ports": ["127.0.0.1:6333:6333", "127.0.0.1:6334:6334"],
        "volumes": ["qdrant.volume:/qdrant/storage"],
        "description": "Qdrant Vector Database",
        "secrets_from_provider_config": {"qdrant_api_key": "qdrant_api_key"},
    },
    "searxng": {
        "image": "docker.io/searxng/searxng:latest",
        "ports": ["127.0.0.1:8080:8080"],
        "dependencies": ["searxng-redis"],
        "description": "SearXNG - Privacy-respecting metasearch engine",
    },
    "searxng-redis": {
        "image": "docker.io/redis:7-alpine",
        "description": "Redis for SearXNG",
    },
    "comfyui": {
        "image": "ghcr.io/ai-dock/comfyui:latest",
        "ports": ["127.0.0.1:8188:8188"],
        "volumes": ["comfyui.volume:/workspace", "comfyui-models.volume:/models"],
        "description": "ComfyUI - Stable Diffusion GUI",
    },
    "whisper": {
        "image": "onerahmet/openai-whisper-asr-webservice:latest",
        "ports": ["127.0.0.1:9000:9000"],
        "description": "Whisper ASR - Speech to Text",
    },
    "edgetts": {
        "image": "ghcr.io/travisvn/edge-tts-docker:latest",
        "ports": ["127.0.0.1:5500:5500"],
        "description": "Edge TTS - Text to Speech",
    },
    "jupyter": {
        "image": "quay.io/jupyter/minimal-notebook:latest",
        "ports": ["127.0.0.1:8888:8888"],
        "volumes": ["jupyter.volume:/home/jovyan/work"],
        "description": "Jupyter Notebook - Code Execution",
    },
    "tika": {
        "image": "apache/tika:latest",
        "ports": ["127.0.0.1:9998:9998"],
        "description": "Apache Tika - Content Extraction",
    },
}

# proxy, console, chat UI + db + cache, LLM proxy + db + cache, model router
_CORE_SERVICES_V1 = [
    "caddy",
    "cockpit",
    "openwebui",
    "openwebui-postgres",
    "openwebui-redis",
    "litellm",
    "litellm-postgres",
    "litellm-redis",
    "llama-swap",
]

# providers[category] == provider_id -> serviços adicionados no modo inferido
_PROVIDER_SERVICES_V1: Dict[str, Dict[str, Any]] = {
    "vector_db": {"qdrant": ["qdrant"]},
    "web_search_engine": {"searxng": ["searxng", "searxng-redis"]},
    "image_engine": {"comfyui": ["comfyui"]},
    "stt_engine": {"whisper": ["whisper"], "whisper-local": ["whisper"]},
    "tts_engine": {"edgetts": ["edgetts"]},
    "code_execution_engine": {"jupyter": ["jupyter"]},
    "content_extraction": {"tika": ["tika"]},
}

_CATEGORY_FEATURES_V1 = {
    "vector_db": "rag_enabled",
    "web_search_engine": "web_search_enabled",
    "image_engine": "image_generation_enabled",
    "stt_engine": "stt_enabled",
    "tts_engine": "tts_enabled",
    "code_execution_engine": "code_execution_enabled",
}

# service_selections -> providers
_SELECTION_CATEGORIES_V1 = {
    "rag_provider": "vector_db",
    "web_search_provider": "web_search_engine",
    "image_generation_provider": "image_engine",
    "stt_provider": "stt_engine",
    "tts_provider": "tts_engine",
    "code_execution_provider": "code_execution_engine",
    "extraction_provider": "content_extraction",
    "storage_provider": "storage_provider",
}

# service_selections que viram serviço de infraestrutura -> chave em caddy_routes
_SELECTION_ROUTES_V1 = {
    "rag_provider": "qdrant_subdomain",
    "web_search_provider": "searxng_subdomain",
    "image_generation_provider": "comfyui_subdomain",
    "stt_provider": "whisper_subdomain",
    "code_execution_provider": "jupyter_subdomain",
}

_DEFAULT_PROVIDERS_V1: Dict[str, Any] = {
    "vector_db": "pgvector",
    "rag_embedding": "openai",
    "content_extraction": "tika",
    "text_splitter": "recursive",
    "web_search_engine": "searxng",
    "web_loader": "requests",
    "image_engine": None,
    "stt_engine": "openai",
    "tts_engine": "openai",
    "code_execution_engine": "jupyter",
    "storage_provider": "local",
    "auth_provider": "local",
}

_DEFAULT_PROVIDER_CONFIG_V1: Dict[str, Any] = {
    "webui_name": "Leger AI",
    "custom_name": "",
    "default_locale": "en-US",
    "log_level": "INFO",
    "redis_key_prefix": "open-webui",
    "openwebui_timeout_start": 900,
    "rag_top_k": 5,
    "chunk_size": 1500,
    "chunk_overlap": 100,
    "pdf_extract_images": True,
    "rag_embedding_model": "qwen3-embedding-8b",
    "rag_embedding_trust_remote_code": False,
    "rag_reranking_trust_remote_code": False,
    "rag_embedding_auto_update": False,
    "rag_reranking_auto_update": False,
    "task_model_title": "qwen3-0.6b",
    "task_model_autocomplete": "qwen3-0.6b",
    "task_model_tags": "qwen3-4b",
    "task_model_query": "qwen3-4b",
    "task_model_search_query": "qwen3-4b",
    "task_model_rag_template": "qwen3-4b",
    "autocomplete_input_max_length": 200,
    "audio_stt_model": "whisper-1",
    "audio_tts_model": "tts-1",
    "audio_tts_voice": "alloy",
    "chroma_tenant": "default_tenant",
    "chroma_database": "default_database",
    "qdrant_grpc_port": 6334,
    "qdrant_prefer_grpc": False,
    "qdrant_on_disk": True,
}

# core_services.openwebui.<campo> -> provider_config.<chave>
_PROVIDER_CONFIG_OVERRIDES_V1 = {
    "webui_name": "webui_name",
    "custom_name": "custom_name",
    "rag_top_k": "rag_top_k",
    "chunk_size": "chunk_size",
    "chunk_overlap": "chunk_overlap",
    "task_model_title": "task_model_title",
    "task_model_tags": "task_model_tags",
    "task_model_autocomplete": "task_model_autocomplete",
    "task_model_query": "task_model_query",
    "task_model_search_query": "task_model_search_query",
    "task_model_rag_template": "task_model_rag_template",
    "log_level": "log_level",
    "redis_key_prefix": "redis_key_prefix",
    "timeout_start": "openwebui_timeout_start",
}

# URLs geradas a partir da infraestrutura, por seleção
_PROVIDER_URLS_V1: Dict[str, Dict[str, Any]] = {
    "rag_provider": {
        "qdrant": {"qdrant_url": "http://qdrant:6333", "qdrant_api_key": ""},
    },
    "web_search_provider": {
        "searxng": {"searxng_query_url": "http://searxng:8080/search?q=<query>"},
    },
    "extraction_provider": {
        "tika": {"tika_server_url": "http://tika:9998"},
        "docling": {"docling_server_url": "http://docling:5001"},
    },
}

_MARKETPLACE_DEFAULTS_V1: Dict[str, Dict[str, Any]] = {
    "qdrant": {
        "container_name": "qdrant",
        "hostname": "qdrant",
        "port": 6333,
        "external_subdomain": "qdrant",
        "volume": "qdrant.volume",
    },
    "searxng": {
        "container_name": "searxng",
        "hostname": "searxng",
        "port": 8080,
        "external_subdomain": "search",
        "volume": "searxng.volume",
    },
    "comfyui": {
        "container_name": "comfyui",
        "hostname": "comfyui",
        "port": 8188,
        "external_subdomain": "comfy",
        "websocket": True,
    },
    "whisper": {
        "container_name": "whisper",
        "hostname": "whisper",
        "port": 9000,
        "external_subdomain": "whisper",
    },
    "jupyter": {
        "container_name": "jupyter",
        "hostname": "jupyter",
        "port": 8888,
        "external_subdomain": "jupyter",
        "volume": "jupyter.volume",
    },
}

_INFRASTRUCTURE_DEFAULTS_V1: Dict[str, Dict[str, Any]] = {
    "caddy": {
        "container_name": "caddy",
        "hostname": "caddy",
        "port": 443,
        "published_port": 443,
        "bind_address": "0.0.0.0",
        "external_subdomain": None,
        "description": "Caddy Reverse Proxy for LLM Services",
    },
    "cockpit": {
        "container_name": "cockpit",
        "hostname": "host",
        "port": 9090,
        "published_port": 9090,
        "bind_address": "127.0.0.1",
        "external_subdomain": "cockpit",
        "description": "Cockpit Web Console",
    },
    "openwebui": {
        "container_name": "openwebui",
        "hostname": "openwebui",
        "port": 8080,
        "published_port": 3000,
        "bind_address": "127.0.0.1",
        "external_subdomain": None,
        "volume": "openwebui.volume",
        "websocket": True,
        "description": "Open WebUI - LLM Chat Interface",
    },
    "openwebui-postgres": {
        "container_name": "openwebui-postgres",
        "hostname": "openwebui-postgres",
        "port": 5432,
        "volume": "openwebui-postgres.volume",
        "db_name": "openwebui",
        "db_user": "openwebui",
        "description": "PostgreSQL for OpenWebUI",
    },
    "openwebui-redis": {
        "container_name": "openwebui-redis",
        "hostname": "openwebui-redis",
        "port": 6379,
        "volume": "openwebui-redis.volume",
        "description": "Redis for OpenWebUI",
    },
    "litellm": {
        "container_name": "litellm",
        "hostname": "litellm",
        "port": 4000,
        "published_port": 4000,
        "bind_address": "127.0.0.1",
        "external_subdomain": None,
        "description": "LiteLLM - Unified LLM Proxy",
    },
    "litellm-postgres": {
        "container_name": "litellm-postgres",
        "hostname": "litellm-postgres",
        "port": 5432,
        "volume": "litellm-postgres.volume",
        "db_name": "litellm",
        "db_user": "litellm",
        "description": "PostgreSQL for LiteLLM",
    },
    "litellm-redis": {
        "container_name": "litellm-redis",
        "hostname": "litellm-redis",
        "port": 6379,
        "volume": "litellm-redis.volume",
        "description": "Redis for LiteLLM",
    },
    "llama-swap": {
        "container_name": "llama-swap",
        "hostname": "llama-swap",
        "port": 8000,
        "published_port": 8000,
        "bind_address": "127.0.0.1",
        "external_subdomain": None,
        "volume": "llama-swap.volume",
        "description": "Llama-Swap - Local Model Router",
    },
}

# core_services.<chave> -> serviço de infraestrutura; caddy_routes.<chave> -> serviço
_CORE_SERVICE_KEYS_V1 = {
    "openwebui": "openwebui",
    "litellm": "litellm",
    "llama_swap": "llama-swap",
}

_CORE_ROUTES_V1 = {
    "cockpit_subdomain": "cockpit",
    "openwebui_subdomain": "openwebui",
    "litellm_subdomain": "litellm",
    "llama_swap_subdomain": "llama-swap",
}

_MODELS_V1 = {
    "local": ["gpt-oss-20b", "gpt-oss-120b"],
    "embedding": ["qwen3-embedding-8b"],
    "task": ["qwen3-0.6b", "qwen3-4b"],
}


def default_tables_v1() -> Dict[str, Any]:
    """Cópia independente das tabelas v1, no formato aceito por `DefaultsRegistry.from_dict`."""
    return deepcopy(
        {
            "services": _SERVICES_V1,
            "core_services": _CORE_SERVICES_V1,
            "provider_services": _PROVIDER_SERVICES_V1,
            "category_features": _CATEGORY_FEATURES_V1,
            "selection_categories": _SELECTION_CATEGORIES_V1,
            "selection_routes": _SELECTION_ROUTES_V1,
            "default_providers": _DEFAULT_PROVIDERS_V1,
            "default_provider_config": _DEFAULT_PROVIDER_CONFIG_V1,
            "provider_config_overrides": _PROVIDER_CONFIG_OVERRIDES_V1,
            "provider_urls": _PROVIDER_URLS_V1,
            "marketplace_defaults": _MARKETPLACE_DEFAULTS_V1,
            "infrastructure_defaults": _INFRASTRUCTURE_DEFAULTS_V1,
            "core_service_keys": _CORE_SERVICE_KEYS_V1,
            "core_routes": _CORE_ROUTES_V1,
            "models": _MODELS_V1,
            "default_network": "llm",
        }
    )
