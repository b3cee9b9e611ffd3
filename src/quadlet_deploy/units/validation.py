# src/quadlet_deploy/units/validation.py
"""Validação estrutural do conjunto renderizado, antes do upload."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from quadlet_deploy.core.pipeline.types import FileType, RenderedFile


def validate_rendered_files(files: Iterable[RenderedFile]) -> Tuple[bool, List[str]]:
    """
    Regras:
        - ao menos um arquivo renderizado
        - exatamente uma definição de network presente
        - nenhum arquivo com conteúdo vazio

    Returns:
        (valid, errors)
    """
    file_list = list(files)
    errors: List[str] = []

    if not file_list:
        errors.append("No files were rendered")

    networks = [f for f in file_list if f.type == FileType.NETWORK]
    if not networks:
        errors.append("Missing required network definition")
    elif len(networks) > 1:
        errors.append(f"Expected exactly one network definition, found {len(networks)}")

    for f in file_list:
        if not f.content or not f.content.strip():
            errors.append(f"File '{f.name}' has no content")

    return (not errors, errors)
