# src/quadlet_deploy/resolve/resolver.py
"""
Resolver de configuração de deployment.

Este módulo combina as quatro fontes independentes de configuração em uma
única `UnifiedDeploymentConfig`:

    1. infrastructure_defaults → blocos compilados dos serviços core
    2. provider_defaults       → blocos de marketplace dos providers escolhidos
    3. release_selections      → valores explícitos da release (rede, rotas)
    4. user_overrides          → overrides literais (`core_services`,
                                 `infrastructure.services`)

A precedência é a ordem de uma lista de `PatchLayer` nomeadas, aplicada
por `apply_layers`. Cada camada é um patch não destrutivo: dicts são
mesclados por chave, `None` significa "não mencionado" e camadas
posteriores vencem campo a campo.

`provider_config` é resolvido da mesma forma, com as camadas
provider_defaults → provider_urls → user_overrides.

Decisões arquiteturais:
    - O registry de defaults é injetado por construção
    - Nenhuma dependência de relógio ou aleatoriedade (determinismo)
    - Conflitos de tipo entre camadas viram `ValidationError`

Invariantes:
    - Mesma entrada -> `to_dict()` byte a byte idêntico
    - Providers sem valor são removidos (nunca mapeados para sentinela)
    - Features explícitas em `core_services.openwebui` vencem as inferidas

Limites explícitos:
    - Não busca dados em stores (recebe tudo pronto)
    - Não valida subdomínios (ver validation.py)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from quadlet_deploy.catalog.registry import DefaultsRegistry, to_plain
from quadlet_deploy.core.config.errors import ConfigTypeConflictError
from quadlet_deploy.core.config.layers import PatchLayer, apply_layers
from quadlet_deploy.core.config.merge import deep_merge
from quadlet_deploy.core.exceptions import NotFound, PrerequisiteMissing, ValidationError
from quadlet_deploy.core.pipeline.context import DeployContext
from quadlet_deploy.release.models import ReleaseConfig, UserSettings

from .unified import UnifiedDeploymentConfig


LAYER_NAMES = (
    "infrastructure_defaults",
    "provider_defaults",
    "release_selections",
    "user_overrides",
)

PROVIDER_CONFIG_LAYER_NAMES = (
    "provider_defaults",
    "provider_urls",
    "user_overrides",
)

# Features ligadas por padrão (task models padrão sempre disponíveis)
_BASE_FEATURES = (
    "title_generation",
    "autocomplete_generation",
    "tags_generation",
    "websocket_support",
)

# core_services.openwebui.<flag> -> features.<feature>
_FEATURE_OVERRIDES = {
    "enable_rag": "rag_enabled",
    "enable_web_search": "web_search_enabled",
    "enable_image_generation": "image_generation_enabled",
}

_STEP_ID = "resolve"


def _coerce_release(release: Union[ReleaseConfig, Mapping[str, Any], None]) -> Optional[ReleaseConfig]:
    if release is None or isinstance(release, ReleaseConfig):
        return release
    return ReleaseConfig.from_dict(release)


def _coerce_settings(settings: Union[UserSettings, Mapping[str, Any], None]) -> Optional[UserSettings]:
    if settings is None or isinstance(settings, UserSettings):
        return settings
    return UserSettings.from_dict(settings)


class ConfigurationResolver:
    """Resolve release + settings + secrets + marketplace em config unificada."""

    def __init__(self, registry: DefaultsRegistry):
        self.registry = registry

    @staticmethod
    def layer_names() -> List[str]:
        """Ordem de precedência das camadas (menor -> maior)."""
        return list(LAYER_NAMES)

    # ------------------------------------------------------------------
    # Camadas de infraestrutura
    # ------------------------------------------------------------------
    def _marketplace_blocks(
        self,
        release: ReleaseConfig,
        marketplace_configs: Mapping[str, Any],
    ) -> Dict[str, Dict[str, Any]]:
        """Blocos de marketplace (default do registry + config do marketplace) por provider escolhido."""
        blocks: Dict[str, Dict[str, Any]] = {}
        for selection_key in self.registry.selection_routes:
            provider_id = release.selection(selection_key)
            if not provider_id:
                continue
            base = to_plain(self.registry.marketplace_defaults.get(provider_id, {}))
            fetched = marketplace_configs.get(provider_id) or {}
            block = deep_merge(base, dict(fetched))
            if block:
                blocks[provider_id] = block
        return blocks

    def service_layers(
        self,
        release: ReleaseConfig,
        marketplace_configs: Optional[Mapping[str, Any]] = None,
    ) -> List[PatchLayer]:
        """Camadas nomeadas que produzem `infrastructure`, em ordem de precedência."""
        registry = self.registry
        marketplace = self._marketplace_blocks(release, marketplace_configs or {})

        infrastructure_defaults = {
            "network": {"name": registry.default_network},
            "services": to_plain(registry.infrastructure_defaults),
        }

        provider_defaults = {"services": marketplace}

        selected_services: Dict[str, Any] = {}
        for route_key, service_name in registry.core_routes.items():
            subdomain = release.route(route_key)
            if subdomain:
                selected_services[service_name] = {"external_subdomain": subdomain}
        for selection_key, route_key in registry.selection_routes.items():
            provider_id = release.selection(selection_key)
            subdomain = release.route(route_key)
            if provider_id in marketplace and subdomain:
                selected_services[provider_id] = {"external_subdomain": subdomain}
        release_selections = {
            "network": release.network,
            "services": selected_services,
        }

        override_services: Dict[str, Any] = {}
        for core_key, service_name in registry.core_service_keys.items():
            block = release.core_service(core_key)
            if block:
                override_services[service_name] = block
        for service_name, block in release.service_overrides.items():
            override_services[service_name] = deep_merge(
                override_services.get(service_name, {}), dict(block or {})
            )
        user_overrides = {"services": override_services}

        return [
            PatchLayer("infrastructure_defaults", infrastructure_defaults),
            PatchLayer("provider_defaults", provider_defaults),
            PatchLayer("release_selections", release_selections),
            PatchLayer("user_overrides", user_overrides),
        ]

    # ------------------------------------------------------------------
    # provider_config
    # ------------------------------------------------------------------
    def provider_config_layers(self, release: ReleaseConfig) -> List[PatchLayer]:
        registry = self.registry

        urls: Dict[str, Any] = {}
        for selection_key, by_provider in registry.provider_urls.items():
            provider_id = release.selection(selection_key)
            if provider_id and provider_id in by_provider:
                urls.update(to_plain(by_provider[provider_id]))

        openwebui = release.core_service("openwebui")
        overrides: Dict[str, Any] = {}
        for field_name, config_key in registry.provider_config_overrides.items():
            value = openwebui.get(field_name)
            # valores falsy contam como não mencionados
            if value:
                overrides[config_key] = value

        return [
            PatchLayer("provider_defaults", to_plain(registry.default_provider_config)),
            PatchLayer("provider_urls", urls),
            PatchLayer("user_overrides", overrides),
        ]

    # ------------------------------------------------------------------
    # providers / features / models / secrets
    # ------------------------------------------------------------------
    def build_providers(self, release: ReleaseConfig) -> Dict[str, str]:
        providers: Dict[str, Any] = dict(self.registry.default_providers)
        for selection_key, category in self.registry.selection_categories.items():
            value = release.selection(selection_key)
            if value:
                providers[category] = value
        return {k: v for k, v in providers.items() if v}

    def build_features(self, release: ReleaseConfig, providers: Mapping[str, str]) -> Dict[str, bool]:
        features: Dict[str, bool] = {name: True for name in _BASE_FEATURES}
        for category, feature in self.registry.category_features.items():
            if providers.get(category):
                features[feature] = True
        openwebui = release.core_service("openwebui")
        for flag, feature in _FEATURE_OVERRIDES.items():
            value = openwebui.get(flag)
            if isinstance(value, bool):
                features[feature] = value
        return features

    def build_models(self, release: ReleaseConfig) -> Dict[str, List[str]]:
        cloud = release.primary_chat_models
        local = [] if cloud else self.registry.default_models("local")
        embedding = release.embedding_models or self.registry.default_models("embedding")
        return {"cloud": cloud, "local": local, "embedding": embedding}

    @staticmethod
    def build_secrets(secrets: Optional[Iterable[Mapping[str, Any]]]) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for entry in secrets or []:
            name = entry.get("name")
            value = entry.get("value")
            if name and value:
                out[str(name)] = str(value)
        return out

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------
    def resolve(
        self,
        release: Union[ReleaseConfig, Mapping[str, Any], None],
        settings: Union[UserSettings, Mapping[str, Any], None],
        secrets: Optional[Iterable[Mapping[str, Any]]] = None,
        marketplace_configs: Optional[Mapping[str, Any]] = None,
        *,
        ctx: Optional[DeployContext] = None,
    ) -> UnifiedDeploymentConfig:
        """
        Resolve a configuração unificada de deployment.

        Args:
            release: Configuração salva da release (ReleaseConfig ou dict).
            settings: Settings do usuário (UserSettings ou dict com `tailscale`).
            secrets: Entradas `{name, value}` do secrets provider.
            marketplace_configs: Config de marketplace por id de serviço.
            ctx: Contexto de deploy opcional (event log).

        Returns:
            UnifiedDeploymentConfig: Configuração derivada, nunca persistida.

        Raises:
            NotFound: Se a release não possuir configuração salva.
            PrerequisiteMissing: Se `settings.tailscale` estiver ausente.
            ValidationError: Se houver conflito de tipo entre camadas.
        """
        release_cfg = _coerce_release(release)
        if release_cfg is None:
            raise NotFound(
                message="Release configuration not found",
                details={"resource": "configuration"},
                hint="Salve uma configuração para a release antes do deploy.",
            )

        user_settings = _coerce_settings(settings)
        if user_settings is None or user_settings.tailscale is None:
            raise PrerequisiteMissing(
                message="Tailscale configuration not found in settings. Please configure Tailscale first.",
                details={"prerequisite": "tailscale"},
                hint="Configure o Tailscale em Settings.",
                decision_required=True,
            )

        layers = self.service_layers(release_cfg, marketplace_configs)
        config_layers = self.provider_config_layers(release_cfg)
        try:
            infrastructure = apply_layers(layers)
            provider_config = apply_layers(config_layers)
        except ConfigTypeConflictError as e:
            raise ValidationError(
                message=f"Invalid configuration structure: {e}",
                details={"layers": [layer.name for layer in layers]},
            ) from e

        providers = self.build_providers(release_cfg)
        unified = UnifiedDeploymentConfig(
            infrastructure=infrastructure,
            features=self.build_features(release_cfg, providers),
            providers=providers,
            provider_config=provider_config,
            tailscale=user_settings.tailscale.to_dict(),
            secrets=self.build_secrets(secrets),
            models=self.build_models(release_cfg),
        )

        if ctx is not None:
            ctx.log(
                step_id=_STEP_ID,
                level="INFO",
                message="configuration resolved",
                layers=[layer.name for layer in layers],
                services=sorted(infrastructure.get("services", {}).keys()),
            )
        return unified
