# src/quadlet_deploy/units/renderer.py
"""
Renderer de units Quadlet.

Converte uma `UnifiedDeploymentConfig` + `ServiceSet` na lista ordenada de
`RenderedFile` que compõe um deployment:

    1. uma unit `.network` (sempre exatamente uma, sempre primeiro)
    2. uma unit `.container` por serviço, em ordem de dependência
       (planner de Kahn, empates lexicográficos)
    3. uma unit `.volume` por nome de volume distinto, na ordem em que
       aparece pela primeira vez

Decisões arquiteturais:
    - Toda unit é montada via `UnitBuilder` e serializada por um único ponto
    - Environment e Secret seguem a ordem de inserção das tabelas do registry
    - Secrets de API key são derivados dos providers dos modelos cloud
      (`provider/model`) e montados no proxy de LLM

Invariantes:
    - Conjunto de serviços vazio -> `RenderError` (nenhum arquivo retornado)
    - Todo `After=<dep>.service` aponta para um serviço renderizado
    - Nomes de arquivo são únicos no conjunto

Limites explícitos:
    - Não faz upload
    - Não inicia containers nem provisiona redes
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from quadlet_deploy.catalog.registry import DefaultsRegistry, ServiceDescriptor
from quadlet_deploy.core.engine.planner import plan_service_order
from quadlet_deploy.core.exceptions import RenderError
from quadlet_deploy.core.pipeline.context import DeployContext
from quadlet_deploy.core.pipeline.types import FileType, RenderedFile
from quadlet_deploy.graph.service_set import ServiceSet
from quadlet_deploy.resolve.unified import UnifiedDeploymentConfig

from .builder import UnitBuilder, serialize_unit


DOCUMENTATION_URL = "https://docs.leger.run/"

HEALTH_DEFAULTS = (
    ("HealthInterval", "30s"),
    ("HealthTimeout", "10s"),
    ("HealthRetries", "3"),
    ("HealthStartPeriod", "60s"),
)

SERVICE_DEFAULTS = (
    ("Slice", "llm.slice"),
    ("Restart", "always"),
    ("RestartSec", "10"),
    ("TimeoutStartSec", "900"),
)

_EXTENSION_TYPES = (
    (".container", FileType.CONTAINER),
    (".volume", FileType.VOLUME),
    (".network", FileType.NETWORK),
    (".env", FileType.ENV),
)

_STEP_ID = "render"


def file_type_for(name: str) -> FileType:
    """Tipo do artefato pela extensão; qualquer outra extensão é `config`."""
    for suffix, file_type in _EXTENSION_TYPES:
        if name.endswith(suffix):
            return file_type
    return FileType.CONFIG


def extract_provider(model_id: str) -> str:
    """`openai/gpt-4` -> `openai`; ids sem `/` -> `unknown`."""
    parts = model_id.split("/")
    return parts[0] if len(parts) > 1 else "unknown"


def provider_secret_names(model_ids: Iterable[str]) -> List[str]:
    """Secrets de API key por provider distinto, na ordem de primeira aparição."""
    names: List[str] = []
    for model_id in model_ids:
        name = extract_provider(model_id).lower().replace("-", "_") + "_api_key"
        if name not in names:
            names.append(name)
    return names


def _dedupe(values: Iterable[str]) -> List[str]:
    out: List[str] = []
    for value in values:
        if value not in out:
            out.append(value)
    return out


def build_network_unit(name: str, subnet: Optional[str] = None) -> UnitBuilder:
    unit = UnitBuilder()
    unit.section("Unit").add("Description", f"{name} network")
    unit.section("Network")
    if subnet:
        unit.add("Subnet", subnet)
    unit.section("Install").add("WantedBy", "default.target")
    return unit


def build_volume_unit(name: str) -> UnitBuilder:
    unit = UnitBuilder()
    unit.section("Unit").add("Description", f"{name} volume")
    unit.section("Volume")
    unit.section("Install").add("WantedBy", "default.target")
    return unit


def build_container_unit(
    name: str,
    image: str,
    *,
    network: str,
    description: Optional[str] = None,
    container_name: Optional[str] = None,
    dependencies: Iterable[str] = (),
    ports: Iterable[str] = (),
    environment: Optional[Mapping[str, str]] = None,
    secrets: Iterable[str] = (),
    volumes: Iterable[str] = (),
    health_cmd: Optional[str] = None,
) -> UnitBuilder:
    """Monta uma unit `.container` com seções na ordem fixa Unit/Container/Service/Install."""
    unit = UnitBuilder()

    unit.section("Unit")
    unit.add("Description", description or f"{name} container")
    unit.add("Documentation", DOCUMENTATION_URL)
    unit.add("After", "network-online.target")
    unit.add("After", f"{network}.network.service")
    unit.add("Requires", f"{network}.network.service")
    for dep in dependencies:
        unit.add("After", f"{dep}.service")
        unit.add("Wants", f"{dep}.service")
    unit.add("Wants", "network-online.target")

    unit.section("Container")
    unit.add("Image", image)
    unit.add("AutoUpdate", "registry")
    unit.add("ContainerName", container_name or name)
    unit.add("Network", f"{network}.network")
    unit.add_all("PublishPort", ports)
    for key, value in (environment or {}).items():
        unit.add("Environment", f"{key}={value}")
    unit.add_all("Secret", secrets)
    unit.add_all("Volume", volumes)
    if health_cmd:
        unit.add("HealthCmd", health_cmd)
        for key, value in HEALTH_DEFAULTS:
            unit.add(key, value)

    unit.section("Service")
    for key, value in SERVICE_DEFAULTS:
        unit.add(key, value)

    unit.section("Install").add("WantedBy", "default.target")
    return unit


class UnitRenderer:
    """Renderiza o conjunto completo de units de um deployment."""

    def __init__(self, registry: DefaultsRegistry):
        self.registry = registry

    def service_environment(
        self,
        descriptor: ServiceDescriptor,
        provider_config: Mapping[str, Any],
    ) -> Dict[str, str]:
        environment: Dict[str, str] = dict(descriptor.environment)
        for env_name, config_key in descriptor.env_from_provider_config:
            value = provider_config.get(config_key)
            if value:
                environment[env_name] = str(value)
        return environment

    def service_secrets(
        self,
        descriptor: ServiceDescriptor,
        config: UnifiedDeploymentConfig,
    ) -> List[str]:
        secrets: List[str] = list(descriptor.secrets)
        if descriptor.provider_key_secrets:
            secrets.extend(provider_secret_names(config.cloud_models))
        for secret_name, config_key in descriptor.secrets_from_provider_config:
            if config.provider_config.get(config_key):
                secrets.append(secret_name)
        return _dedupe(secrets)

    def render_service(
        self,
        name: str,
        config: UnifiedDeploymentConfig,
        service_set: ServiceSet,
    ) -> RenderedFile:
        descriptor = self.registry.get_service(name)
        block = (config.services or {}).get(name) or {}
        unit = build_container_unit(
            name,
            descriptor.image,
            network=config.network_name(self.registry.default_network),
            description=descriptor.description or None,
            container_name=block.get("container_name") or name,
            dependencies=service_set.dependencies_of(name),
            ports=descriptor.ports,
            environment=self.service_environment(descriptor, config.provider_config),
            secrets=self.service_secrets(descriptor, config),
            volumes=descriptor.volumes,
            health_cmd=descriptor.health_cmd,
        )
        return RenderedFile(name=f"{name}.container", content=serialize_unit(unit), type=FileType.CONTAINER)

    def render(
        self,
        config: UnifiedDeploymentConfig,
        service_set: ServiceSet,
        ctx: Optional[DeployContext] = None,
    ) -> List[RenderedFile]:
        """
        Renderiza network, containers e volumes.

        Raises:
            RenderError: Se o ServiceSet estiver vazio.
        """
        if len(service_set) == 0:
            raise RenderError(
                message="No services to render",
                details={"mode": service_set.mode, "warnings": list(service_set.warnings)},
                hint="Habilite ao menos um serviço na configuração da release.",
            )

        network = config.network_name(self.registry.default_network)
        files: List[RenderedFile] = [
            RenderedFile(
                name=f"{network}.network",
                content=serialize_unit(build_network_unit(network, config.network_subnet)),
                type=FileType.NETWORK,
            )
        ]

        order = plan_service_order(service_set.names, service_set.edges)
        volumes: List[str] = []
        for name in order:
            files.append(self.render_service(name, config, service_set))
            for volume in self.registry.get_service(name).volume_names():
                if volume not in volumes:
                    volumes.append(volume)

        for volume in volumes:
            files.append(
                RenderedFile(
                    name=f"{volume}.volume",
                    content=serialize_unit(build_volume_unit(volume)),
                    type=FileType.VOLUME,
                )
            )

        if ctx is not None:
            ctx.log(
                step_id=_STEP_ID,
                level="INFO",
                message=f"Rendered {len(files)} files for {len(order)} services",
                files=[f.name for f in files],
            )
        return files
