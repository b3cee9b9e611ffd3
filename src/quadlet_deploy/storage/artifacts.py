# src/quadlet_deploy/storage/artifacts.py
"""
Contrato do artifact store e implementação em filesystem local.

Esquema de caminhos:
    {owner}/v{version}/{filename}

URL pública:
    <public_base_url>{owner}/v{version}/{filename}

Decisões arquiteturais:
    - O contrato é assíncrono; implementações síncronas apenas o satisfazem
    - Stores levantam seus próprios erros nativos; a tradução para
      `UploadError` acontece em `upload.py`
    - `head`/`get` de chave inexistente não são erro (False / None)

Limites explícitos:
    - Não conhece manifest nem deployment records
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol, Union


DEFAULT_PUBLIC_BASE_URL = "https://static.leger.run/"

_CONTENT_TYPES = (
    (".json", "application/json"),
    (".yaml", "application/yaml"),
)


def deployment_path(owner: str, version: int) -> str:
    """Prefixo de um deployment: `{owner}/v{version}/`."""
    return f"{owner}/v{version}/"


def object_key(owner: str, version: int, filename: str) -> str:
    return f"{deployment_path(owner, version)}{filename}"


def public_url(owner: str, version: int, filename: str, base_url: str = DEFAULT_PUBLIC_BASE_URL) -> str:
    if not base_url.endswith("/"):
        base_url = base_url + "/"
    return f"{base_url}{object_key(owner, version, filename)}"


def content_type_for(filename: str) -> str:
    for suffix, content_type in _CONTENT_TYPES:
        if filename.endswith(suffix):
            return content_type
    return "text/plain"


class ArtifactStore(Protocol):
    """Contrato mínimo de um blob store de artefatos."""

    async def put(self, path: str, filename: str, content: str, content_type: str) -> str:
        """Grava `path + filename`; retorna a chave gravada."""
        ...

    async def list(self, prefix: str) -> List[str]:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def head(self, key: str) -> bool:
        ...

    async def get(self, key: str) -> Optional[str]:
        ...


class LocalArtifactStore:
    """
    Artifact store em diretório local.

    Chaves viram caminhos relativos a `root_dir`. O content type não é
    persistido.
    """

    def __init__(self, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)

    def _resolve(self, key: str) -> Path:
        target = (self.root_dir / key).resolve()
        root = self.root_dir.resolve()
        if target != root and root not in target.parents:
            raise ValueError(f"key escapes store root: {key}")
        return target

    async def put(self, path: str, filename: str, content: str, content_type: str) -> str:
        key = f"{path}{filename}"
        target = self._resolve(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return key

    async def list(self, prefix: str) -> List[str]:
        if not self.root_dir.exists():
            return []
        keys = []
        for p in self.root_dir.rglob("*"):
            if not p.is_file():
                continue
            key = p.relative_to(self.root_dir).as_posix()
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)

    async def delete(self, key: str) -> None:
        target = self._resolve(key)
        if target.exists():
            target.unlink()

    async def head(self, key: str) -> bool:
        return self._resolve(key).is_file()

    async def get(self, key: str) -> Optional[str]:
        target = self._resolve(key)
        if not target.is_file():
            return None
        return target.read_text(encoding="utf-8")
