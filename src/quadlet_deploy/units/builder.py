# src/quadlet_deploy/units/builder.py
"""
Builder estruturado de units Quadlet.

Uma unit é representada como uma lista ordenada de entradas
`(section, key, value)` mais a ordem das seções. `serialize_unit()` é o
único ponto que produz texto; `parse_unit()` faz o caminho inverso.

Formato serializado:
    - cada seção abre com `[Nome]`
    - entradas `Chave=valor`, uma por linha, na ordem de inserção
    - seções separadas por uma linha em branco
    - seções vazias são preservadas (ex.: `[Volume]`)
    - termina com `\\n`

Invariantes:
    - `parse_unit(serialize_unit(b)) == b`
    - Chaves repetidas são permitidas (After=, Environment=, ...)
    - A ordem das entradas nunca é alterada

Limites explícitos:
    - Não conhece semântica de serviços (ver renderer.py)
    - Comentários (`#`, `;`) são ignorados no parse e nunca emitidos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple


Entry = Tuple[str, str, str]


@dataclass
class UnitBuilder:
    sections: List[str] = field(default_factory=list)
    entries: List[Entry] = field(default_factory=list)
    _current: Optional[str] = field(default=None, repr=False, compare=False)

    def section(self, name: str) -> "UnitBuilder":
        """Abre (ou reabre) uma seção; entradas seguintes vão para ela."""
        if not name or "[" in name or "]" in name:
            raise ValueError(f"invalid section name: {name!r}")
        if name not in self.sections:
            self.sections.append(name)
        self._current = name
        return self

    def add(self, key: str, value: Any) -> "UnitBuilder":
        if self._current is None:
            raise ValueError("add() called before section()")
        if not key or "=" in key:
            raise ValueError(f"invalid key: {key!r}")
        text = str(value)
        if "\n" in text:
            raise ValueError(f"value for {key} must be a single line")
        self.entries.append((self._current, key, text))
        return self

    def add_all(self, key: str, values: Iterable[Any]) -> "UnitBuilder":
        for value in values:
            self.add(key, value)
        return self

    # -----------------------------
    # Leitura
    # -----------------------------
    def entries_for(self, section: str) -> List[Tuple[str, str]]:
        return [(k, v) for s, k, v in self.entries if s == section]

    def values(self, section: str, key: str) -> List[str]:
        return [v for s, k, v in self.entries if s == section and k == key]

    def get(self, section: str, key: str) -> Optional[str]:
        found = self.values(section, key)
        return found[0] if found else None


def serialize_unit(builder: UnitBuilder) -> str:
    blocks: List[str] = []
    for section in builder.sections:
        lines = [f"[{section}]"]
        lines.extend(f"{key}={value}" for key, value in builder.entries_for(section))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def parse_unit(text: str) -> UnitBuilder:
    """
    Lê o texto de uma unit de volta para um `UnitBuilder`.

    Raises:
        ValueError: Se houver entrada fora de seção ou linha sem `=`.
    """
    builder = UnitBuilder()
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith(";"):
            continue
        if line.startswith("[") and line.endswith("]"):
            builder.section(line[1:-1])
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ValueError(f"line {lineno}: expected Key=value, got {raw!r}")
        builder.add(key.strip(), value)
    return builder


def extract_unit_metadata(content: str) -> Dict[str, Any]:
    """
    Extrai metadados de uma unit `.container` renderizada.

    Returns:
        dict com `image`, `ports`, `secrets`, `volumes` e `environment`.
    """
    unit = parse_unit(content)
    environment: Dict[str, str] = {}
    for definition in unit.values("Container", "Environment"):
        key, _, value = definition.partition("=")
        environment[key] = value
    return {
        "image": unit.get("Container", "Image"),
        "ports": unit.values("Container", "PublishPort"),
        # opções do secret (ex.: `name,type=env`) ficam de fora
        "secrets": [s.split(",", 1)[0] for s in unit.values("Container", "Secret")],
        "volumes": unit.values("Container", "Volume"),
        "environment": environment,
    }
