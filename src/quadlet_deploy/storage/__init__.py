"""
Artifact store (filesystem local, S3/R2) e publicação de deployments.
"""

from typing import Optional

from quadlet_deploy.core.config.settings import DeploySettings

from .artifacts import (
    DEFAULT_PUBLIC_BASE_URL,
    ArtifactStore,
    LocalArtifactStore,
    content_type_for,
    deployment_path,
    object_key,
    public_url,
)
from .s3 import S3ArtifactStore
from .upload import (
    UploadResult,
    delete_deployment,
    deployment_exists,
    get_deployment_manifest,
    upload_deployment,
    verify_deployment,
)


def create_artifact_store(settings: DeploySettings, client: Optional[object] = None) -> ArtifactStore:
    """Store conforme `storage.backend`; `client` permite injetar um client S3."""
    if settings.storage_backend == "s3":
        if client is not None:
            return S3ArtifactStore(bucket=settings.storage_bucket, client=client)
        return S3ArtifactStore.from_endpoint(settings.storage_bucket, settings.storage_endpoint_url)
    return LocalArtifactStore(settings.storage_root_dir)


__all__ = [
    "DEFAULT_PUBLIC_BASE_URL",
    "ArtifactStore",
    "LocalArtifactStore",
    "S3ArtifactStore",
    "UploadResult",
    "content_type_for",
    "create_artifact_store",
    "delete_deployment",
    "deployment_exists",
    "deployment_path",
    "get_deployment_manifest",
    "object_key",
    "public_url",
    "upload_deployment",
    "verify_deployment",
]
