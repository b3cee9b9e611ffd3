# src/quadlet_deploy/core/traceability/manifest.py
"""
Manifest de deployment — índice de integridade dos artefatos publicados.

Este módulo define a estrutura e as operações canônicas do
`DeploymentManifest`, publicado como `manifest.json` ao lado das units
de um deployment.

O Manifest consolida, de forma determinística e auditável:
    - versão de schema, release e usuário
    - timestamp de geração (UTC)
    - nome, tipo, checksum SHA-256 e tamanho de cada arquivo publicado
    - `required_secrets` (sempre vazio nesta versão)

Princípios fundamentais:
    - Checksums são calculados sobre o conteúdo codificado em UTF-8
    - O tamanho é o comprimento em bytes UTF-8, nunca em caracteres
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para `generated_at`
    - O formato de persistência é JSON com indentação 2
    - A ordem de `files` é a ordem de renderização

Invariantes:
    - Os nomes em `files` são exatamente os nomes dos arquivos enviados
    - `verify_manifest_files()` reproduz cada checksum a partir do conteúdo

Limites explícitos:
    - Não faz upload (ver quadlet_deploy.storage)
    - Não assina o manifest
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from quadlet_deploy.core.config.hashing import compute_content_checksum, content_size
from quadlet_deploy.core.pipeline.types import RenderedFile


MANIFEST_FILENAME = "manifest.json"


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Timestamps sem timezone são assumidos como UTC; os demais são convertidos."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


@dataclass(frozen=True)
class ManifestFile:
    name: str
    type: str
    checksum: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "checksum": self.checksum, "size": self.size}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ManifestFile":
        return cls(
            name=str(data["name"]),
            type=str(data["type"]),
            checksum=str(data["checksum"]),
            size=int(data["size"]),
        )


@dataclass(frozen=True)
class DeploymentManifest:
    """
    Manifest de um deployment.

    Campos:
        - version: versão de schema (ex.: `0.2.0`)
        - release_id / user_uuid
        - generated_at: ISO 8601 em UTC
        - files: entradas `{name, type, checksum, size}`
        - required_secrets: lista de secrets exigidos pelo host

    Limites explícitos:
        - `required_secrets` não é populado a partir dos secrets montados
          pelo renderer; permanece vazio até que a regra de população
          seja definida
    """

    version: str
    release_id: str
    user_uuid: str
    generated_at: str
    files: List[ManifestFile] = field(default_factory=list)
    required_secrets: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "release_id": self.release_id,
            "user_uuid": self.user_uuid,
            "generated_at": self.generated_at,
            "files": [f.to_dict() for f in self.files],
            "required_secrets": list(self.required_secrets),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeploymentManifest":
        return cls(
            version=str(data.get("version", "")),
            release_id=str(data.get("release_id", "")),
            user_uuid=str(data.get("user_uuid", "")),
            generated_at=str(data.get("generated_at", "")),
            files=[ManifestFile.from_dict(f) for f in (data.get("files") or [])],
            required_secrets=[str(s) for s in (data.get("required_secrets") or [])],
        )

    @classmethod
    def from_json(cls, text: str) -> "DeploymentManifest":
        return cls.from_dict(json.loads(text))

    def file_names(self) -> List[str]:
        return [f.name for f in self.files]


def build_manifest(
    *,
    release_id: str,
    user_uuid: str,
    schema_version: str,
    files: Iterable[RenderedFile],
    generated_at: Optional[datetime] = None,
) -> DeploymentManifest:
    """
    Constrói o Manifest de um conjunto de arquivos renderizados.

    Args:
        release_id: Id da release.
        user_uuid: Id do usuário dono do deployment.
        schema_version: Versão de schema gravada em `version`.
        files: Arquivos renderizados, na ordem de upload.
        generated_at: Timestamp de geração (default: agora, em UTC).

    Returns:
        DeploymentManifest: Manifest com um checksum por arquivo.
    """
    ts = _ensure_tzaware_utc(generated_at or datetime.now(timezone.utc))
    entries = [
        ManifestFile(
            name=f.name,
            type=f.type.value,
            checksum=compute_content_checksum(f.content),
            size=content_size(f.content),
        )
        for f in files
    ]
    # TODO: popular required_secrets a partir dos Secret= montados pelo renderer quando a regra for definida
    return DeploymentManifest(
        version=schema_version,
        release_id=release_id,
        user_uuid=user_uuid,
        generated_at=_iso(ts),
        files=entries,
        required_secrets=[],
    )


def verify_manifest_files(
    manifest: Union[DeploymentManifest, Mapping[str, Any]],
    contents: Mapping[str, Optional[str]],
) -> List[str]:
    """
    Recalcula checksums e tamanhos contra o conteúdo buscado do storage.

    Args:
        manifest: Manifest (objeto ou dict).
        contents: nome do arquivo -> conteúdo (None = ausente).

    Returns:
        List[str]: Divergências encontradas; lista vazia significa íntegro.
    """
    if not isinstance(manifest, DeploymentManifest):
        manifest = DeploymentManifest.from_dict(manifest)

    problems: List[str] = []
    for entry in manifest.files:
        content = contents.get(entry.name)
        if content is None:
            problems.append(f"File '{entry.name}' is missing")
            continue
        if compute_content_checksum(content) != entry.checksum:
            problems.append(f"Checksum mismatch for '{entry.name}'")
        if content_size(content) != entry.size:
            problems.append(f"Size mismatch for '{entry.name}'")
    return problems
