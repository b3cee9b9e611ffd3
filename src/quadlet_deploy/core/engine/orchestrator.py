# src/quadlet_deploy/core/engine/orchestrator.py
"""
Orquestrador de deployments.

Executa, em uma única cadeia sequencial de awaits por deploy:

    criar registro (rendering)
      → carregar configuração, release, settings, secrets e marketplace
      → resolver configuração unificada
      → validar configuração da release
      → construir ServiceSet
      → renderizar units
      → validar conjunto renderizado
      → transição para uploading
      → upload (arquivos, depois manifest)
      → transição para ready (r2_path, manifest_url)

Correção de falhas:
- Qualquer exceção é capturada uma única vez no topo de `deploy()`.
- O registro vai para `failed` com `str(exc)` em `error_message`.
- O erro estruturado (DeployErrorPayload) fica no event log do contexto.
- A exceção original é relançada ao chamador.
- `contexts` guarda apenas o DeployContext do deploy mais recente de cada
  release; `delete_release_artifacts` remove também esse contexto.

Limites explícitos:
- Sem retry: um deploy falho exige nova chamada (novo registro)
- Sem cancelamento ou timeout próprios
- Deploys concorrentes da mesma release gravam no mesmo prefixo
  `{user}/v{version}/` sem exclusão mútua
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from quadlet_deploy.catalog.registry import DefaultsRegistry
from quadlet_deploy.core.config.hashing import compute_config_hash
from quadlet_deploy.core.config.settings import DeploySettings
from quadlet_deploy.core.exceptions import NotFound, ValidationError, exception_to_payload
from quadlet_deploy.core.pipeline.context import DeployContext
from quadlet_deploy.core.pipeline.types import DeploymentStatus
from quadlet_deploy.graph.service_set import build_service_set
from quadlet_deploy.persistence.collaborators import (
    MarketplaceProvider,
    ReleaseStore,
    SecretsProvider,
    SettingsProvider,
)
from quadlet_deploy.persistence.deployments import DeploymentRecord, DeploymentStateMachine
from quadlet_deploy.release.models import ReleaseConfig
from quadlet_deploy.resolve.resolver import ConfigurationResolver
from quadlet_deploy.resolve.validation import validate_release_config
from quadlet_deploy.storage.artifacts import ArtifactStore
from quadlet_deploy.storage.upload import delete_deployment, upload_deployment
from quadlet_deploy.units.renderer import UnitRenderer
from quadlet_deploy.units.validation import validate_rendered_files


class DeploymentOrchestrator:
    """Pipeline de deploy: resolve → grafo → render → validação → upload."""

    def __init__(
        self,
        *,
        releases: ReleaseStore,
        secrets: SecretsProvider,
        settings: SettingsProvider,
        marketplace: MarketplaceProvider,
        store: ArtifactStore,
        deployments: Optional[DeploymentStateMachine] = None,
        registry: Optional[DefaultsRegistry] = None,
        deploy_settings: Optional[DeploySettings] = None,
    ):
        self.releases = releases
        self.secrets = secrets
        self.settings = settings
        self.marketplace = marketplace
        self.store = store
        self.deployments = deployments or DeploymentStateMachine()
        self.registry = registry or DefaultsRegistry.v1()
        self.deploy_settings = deploy_settings or DeploySettings()
        self.resolver = ConfigurationResolver(self.registry)
        self.renderer = UnitRenderer(self.registry)
        self.contexts: Dict[str, DeployContext] = {}

    # ------------------------------------------------------------------
    # Helpers de rastreabilidade
    # ------------------------------------------------------------------
    @staticmethod
    def _begin(ctx: DeployContext, step_id: str) -> None:
        ctx.meta["current_step"] = step_id
        ctx.log(step_id=step_id, level="INFO", message="step started")

    @staticmethod
    def _end(ctx: DeployContext, step_id: str, **extra: Any) -> None:
        ctx.log(step_id=step_id, level="INFO", message="step finished", **extra)

    def _contexts_for_release(self, user_id: str, release_id: str) -> List[str]:
        return [
            run_id
            for run_id, ctx in self.contexts.items()
            if ctx.meta.get("user_id") == user_id and ctx.meta.get("release_id") == release_id
        ]

    def _retain_context(self, ctx: DeployContext) -> None:
        # só o contexto do deploy mais recente de cada release fica em memória
        for run_id in self._contexts_for_release(ctx.meta["user_id"], ctx.meta["release_id"]):
            del self.contexts[run_id]
        self.contexts[ctx.run_id] = ctx

    async def _marketplace_configs(self, config: ReleaseConfig) -> Dict[str, Any]:
        configs: Dict[str, Any] = {}
        for selection_key in self.registry.selection_routes:
            provider_id = config.selection(selection_key)
            if not provider_id or provider_id in configs:
                continue
            fetched = await self.marketplace.get(provider_id)
            if fetched:
                configs[provider_id] = fetched
        return configs

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    async def _run(self, ctx: DeployContext, record: DeploymentRecord, user_id: str, release_id: str) -> DeploymentRecord:
        self._begin(ctx, "load")
        config = await self.releases.get_configuration(user_id, release_id)
        if config is None:
            raise NotFound(
                message="No configuration found for this release. Please save a configuration first.",
                details={"resource": "configuration", "release_id": release_id},
                hint="Salve uma configuração para a release antes do deploy.",
            )
        release = await self.releases.get_release(user_id, release_id)
        if release is None:
            raise NotFound(
                message="Release not found",
                details={"resource": "release", "id": release_id},
            )
        user_settings = await self.settings.get(user_id)
        secrets = await self.secrets.list(user_id, include_values=True)
        marketplace_configs = await self._marketplace_configs(config)
        self._end(ctx, "load", version=release.version, marketplace=sorted(marketplace_configs))

        self._begin(ctx, "resolve")
        unified = self.resolver.resolve(config, user_settings, secrets, marketplace_configs, ctx=ctx)
        config_hash = compute_config_hash(unified.to_dict())
        ctx.set_artifact("config", unified)
        ctx.meta["config_hash"] = config_hash
        self._end(ctx, "resolve", config_hash=config_hash)

        self._begin(ctx, "validate_release")
        report = validate_release_config(config, user_settings, self.registry)
        for warning in report.warnings:
            ctx.warn(step_id="validate_release", message=warning)
        for note in report.notes:
            ctx.log(step_id="validate_release", level="INFO", message=note)
        report.raise_if_invalid()
        self._end(ctx, "validate_release")

        self._begin(ctx, "service_graph")
        service_set = build_service_set(unified, self.registry, ctx=ctx)
        ctx.set_artifact("service_set", service_set)
        self._end(ctx, "service_graph", services=len(service_set))

        self._begin(ctx, "render")
        files = self.renderer.render(unified, service_set, ctx=ctx)
        ctx.set_artifact("files", files)
        self._end(ctx, "render", files=len(files))

        self._begin(ctx, "validate_files")
        valid, errors = validate_rendered_files(files)
        if not valid:
            raise ValidationError(
                message=f"Validation failed: {', '.join(errors)}",
                details={"errors": errors},
            )
        self._end(ctx, "validate_files")

        record = await self.deployments.transition(record.id, DeploymentStatus.UPLOADING)

        self._begin(ctx, "upload")
        result = await upload_deployment(
            self.store,
            owner=user_id,
            release_id=release_id,
            version=release.version,
            schema_version=self.deploy_settings.schema_version,
            files=files,
            public_base_url=self.deploy_settings.public_base_url,
            ctx=ctx,
        )
        ctx.set_artifact("manifest", result.manifest)
        self._end(ctx, "upload", r2_path=result.r2_path)

        return await self.deployments.transition(
            record.id,
            DeploymentStatus.READY,
            r2_path=result.r2_path,
            manifest_url=result.manifest_url,
        )

    async def deploy(self, user_id: str, release_id: str) -> DeploymentRecord:
        """
        Executa um deploy completo da release.

        Returns:
            DeploymentRecord: Registro final (status `ready`).

        Raises:
            Exception: Qualquer falha do pipeline, após o registro ir para `failed`.
        """
        record = await self.deployments.create(release_id=release_id, user_uuid=user_id)
        ctx = DeployContext(
            run_id=record.id,
            created_at=record.started_at,
            meta={"user_id": user_id, "release_id": release_id},
        )
        self._retain_context(ctx)

        try:
            return await self._run(ctx, record, user_id, release_id)
        except Exception as e:
            payload = exception_to_payload(e, step=ctx.meta.get("current_step"))
            ctx.log(
                step_id=str(ctx.meta.get("current_step", "deploy")),
                level="ERROR",
                message=str(e),
                error=payload.to_dict(),
            )
            await self.deployments.transition(record.id, DeploymentStatus.FAILED, error_message=str(e))
            raise

    # ------------------------------------------------------------------
    # Consultas e limpeza
    # ------------------------------------------------------------------
    async def status(self, user_id: str, release_id: str) -> Dict[str, Any]:
        """`{deployment, hasConfiguration}` para a release."""
        config = await self.releases.get_configuration(user_id, release_id)
        return await self.deployments.status_for_release(
            user_id,
            release_id,
            has_configuration=config is not None,
        )

    async def delete_release_artifacts(self, user_id: str, release_id: str) -> Dict[str, Any]:
        """Remove artefatos publicados, registros de deployment e configurações da release."""
        release = await self.releases.get_release(user_id, release_id)
        deleted_keys = []
        if release is not None:
            deleted_keys = await delete_deployment(self.store, owner=user_id, version=release.version)
        deployments = await self.deployments.delete_for_release(user_id, release_id)
        configurations = await self.releases.delete_configurations(user_id, release_id)
        for run_id in self._contexts_for_release(user_id, release_id):
            del self.contexts[run_id]
        return {
            "artifacts": deleted_keys,
            "deployments": deployments,
            "configurations": configurations,
        }
