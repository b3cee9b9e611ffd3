# src/quadlet_deploy/storage/upload.py
"""
Publicação de um deployment no artifact store.

`upload_deployment()` envia cada arquivo renderizado e, somente depois que
todos tiverem sucesso, o `manifest.json`. Um manifest publicado implica,
portanto, que todos os arquivos listados nele foram gravados.

Invariantes:
    - O manifest é sempre o último objeto gravado
    - Os nomes no manifest são exatamente os nomes enviados
    - Qualquer falha de escrita vira `UploadError` (sem retry parcial)

Limites explícitos:
    - Não há exclusão mútua entre deploys concorrentes da mesma release:
      ambos gravam no mesmo prefixo `{owner}/v{version}/`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from quadlet_deploy.core.exceptions import UploadError
from quadlet_deploy.core.pipeline.context import DeployContext
from quadlet_deploy.core.pipeline.types import RenderedFile
from quadlet_deploy.core.traceability.manifest import (
    MANIFEST_FILENAME,
    DeploymentManifest,
    build_manifest,
    verify_manifest_files,
)

from .artifacts import (
    DEFAULT_PUBLIC_BASE_URL,
    ArtifactStore,
    content_type_for,
    deployment_path,
    object_key,
    public_url,
)


_STEP_ID = "upload"


@dataclass(frozen=True)
class UploadResult:
    r2_path: str
    manifest_url: str
    manifest: DeploymentManifest
    keys: List[str] = field(default_factory=list)


async def _put(store: ArtifactStore, path: str, filename: str, content: str) -> str:
    try:
        return await store.put(path, filename, content, content_type_for(filename))
    except Exception as e:
        raise UploadError(
            message=f"Failed to upload {filename}: {e}",
            details={"key": f"{path}{filename}", "error_type": type(e).__name__},
        ) from e


async def upload_deployment(
    store: ArtifactStore,
    *,
    owner: str,
    release_id: str,
    version: int,
    schema_version: str,
    files: Sequence[RenderedFile],
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL,
    generated_at: Optional[datetime] = None,
    ctx: Optional[DeployContext] = None,
) -> UploadResult:
    """
    Envia os arquivos de um deployment e, por último, o manifest.

    Args:
        store: Artifact store de destino.
        owner: Dono do prefixo (uuid do usuário).
        release_id: Id da release (gravado no manifest).
        version: Versão da release (compõe o prefixo `v{version}`).
        schema_version: Versão de schema gravada no manifest.
        files: Arquivos renderizados, na ordem de envio.
        public_base_url: Origem pública do bucket.
        generated_at: Timestamp do manifest (default: agora).
        ctx: Contexto de deploy opcional.

    Returns:
        UploadResult: prefixo, URL pública do manifest e o manifest enviado.

    Raises:
        UploadError: Se não houver arquivos ou se alguma escrita falhar.
    """
    if not files:
        raise UploadError(message="No files to upload", details={"owner": owner, "version": version})

    path = deployment_path(owner, version)
    keys: List[str] = []
    for f in files:
        keys.append(await _put(store, path, f.name, f.content))
        if ctx is not None:
            ctx.log(step_id=_STEP_ID, level="INFO", message="file uploaded", key=keys[-1])

    manifest = build_manifest(
        release_id=release_id,
        user_uuid=owner,
        schema_version=schema_version,
        files=files,
        generated_at=generated_at,
    )
    keys.append(await _put(store, path, MANIFEST_FILENAME, manifest.to_json()))

    manifest_url = public_url(owner, version, MANIFEST_FILENAME, public_base_url)
    if ctx is not None:
        ctx.log(
            step_id=_STEP_ID,
            level="INFO",
            message="manifest uploaded",
            manifest_url=manifest_url,
            files=len(files),
        )
    return UploadResult(r2_path=path, manifest_url=manifest_url, manifest=manifest, keys=keys)


async def delete_deployment(store: ArtifactStore, *, owner: str, version: int) -> List[str]:
    """Remove todos os objetos do prefixo do deployment; retorna as chaves removidas."""
    keys = await store.list(deployment_path(owner, version))
    for key in keys:
        await store.delete(key)
    return keys


async def deployment_exists(store: ArtifactStore, *, owner: str, version: int) -> bool:
    """Um deployment existe quando o manifest está publicado."""
    return await store.head(object_key(owner, version, MANIFEST_FILENAME))


async def get_deployment_manifest(
    store: ArtifactStore,
    *,
    owner: str,
    version: int,
) -> Optional[DeploymentManifest]:
    content = await store.get(object_key(owner, version, MANIFEST_FILENAME))
    if content is None:
        return None
    return DeploymentManifest.from_json(content)


async def verify_deployment(store: ArtifactStore, *, owner: str, version: int) -> List[str]:
    """
    Busca o manifest publicado e recalcula o checksum de cada arquivo.

    Returns:
        List[str]: Divergências; vazia significa deployment íntegro.
    """
    manifest = await get_deployment_manifest(store, owner=owner, version=version)
    if manifest is None:
        return [f"Manifest not found at {object_key(owner, version, MANIFEST_FILENAME)}"]
    contents: Dict[str, Optional[str]] = {}
    for name in manifest.file_names():
        contents[name] = await store.get(object_key(owner, version, name))
    return verify_manifest_files(manifest, contents)
