# src/quadlet_deploy/core/pipeline/types.py
"""
Tipos canônicos do pipeline de deployment.

Este módulo define as estruturas e enums que padronizam a comunicação
entre renderer, manifest builder, artifact store e máquina de estados.

Componentes principais:
    - FileType         → classificação de um artefato renderizado
    - RenderedFile     → artefato textual imutável produzido pelo renderer
    - DeploymentStatus → estados do ciclo de vida de um deployment

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Valores textuais dos enums são usados diretamente em JSON e persistência
    - Nenhuma lógica de execução vive neste módulo

Limites explícitos:
    - Não renderiza units
    - Não decide transições de status (ver persistence.deployments)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class FileType(str, Enum):
    """
    Tipo de um artefato renderizado.

    Tipos definidos:
        - CONTAINER: unit `.container`
        - VOLUME: unit `.volume`
        - NETWORK: unit `.network`
        - CONFIG: arquivos de configuração auxiliares (json, yaml, Caddyfile)
        - ENV: arquivos `.env`

    Invariantes:
        - O valor textual do enum é estável e canônico (vai para o manifest)
    """
    CONTAINER = "container"
    VOLUME = "volume"
    NETWORK = "network"
    CONFIG = "config"
    ENV = "env"


class DeploymentStatus(str, Enum):
    """
    Estados do ciclo de vida de um deployment.

    Estados definidos:
        - RENDERING: estado inicial (registro criado, units sendo geradas)
        - UPLOADING: artefatos validados, upload em andamento
        - READY: artefatos publicados (terminal)
        - FAILED: falha em qualquer etapa (terminal)
        - DEPLOYED: terminal, sem transição de entrada no pipeline

    Decisões arquiteturais:
        - `DEPLOYED` existe na enumeração para compatibilidade com registros
          persistidos, mas nenhuma transição leva a ele
        - Transições permitidas vivem na máquina de estados, não aqui
    """
    RENDERING = "rendering"
    UPLOADING = "uploading"
    READY = "ready"
    FAILED = "failed"
    DEPLOYED = "deployed"

    @property
    def is_terminal(self) -> bool:
        return self in (DeploymentStatus.READY, DeploymentStatus.FAILED, DeploymentStatus.DEPLOYED)


@dataclass(frozen=True)
class RenderedFile:
    """
    Artefato textual imutável produzido pelo renderer.

    Campos:
        - name: nome do arquivo (ex.: `openwebui.container`)
        - content: conteúdo textual completo
        - type: classificação do artefato

    Invariantes:
        - `name` é único dentro de um conjunto renderizado
        - O conteúdo é exatamente o que será enviado ao storage
    """
    name: str
    content: str
    type: FileType

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "content": self.content, "type": self.type.value}
