"""
Tipos e contexto compartilhados pelo pipeline de deployment.
"""

from .context import DeployContext
from .types import DeploymentStatus, FileType, RenderedFile

__all__ = ["DeployContext", "DeploymentStatus", "FileType", "RenderedFile"]
