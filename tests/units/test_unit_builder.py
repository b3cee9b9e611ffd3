# tests/units/test_unit_builder.py
"""
Testes do builder estruturado de units (`UnitBuilder`, `serialize_unit`,
`parse_unit`, `extract_unit_metadata`).

Este módulo valida que:
- a serialização segue o formato `[Seção]` + `Chave=valor`
- seções são separadas por uma linha em branco e o texto termina com `\\n`
- seções vazias são preservadas
- parse(serialize(b)) reconstrói exatamente o builder
- entradas inválidas são rejeitadas na construção

Decisões arquiteturais:
    - Golden text explícito no teste (sem montar strings por concatenação)

Limites explícitos:
    - Não valida a semântica de serviços (ver test_unit_renderer.py)
"""

import pytest

try:
    from quadlet_deploy.units.builder import (
        UnitBuilder,
        extract_unit_metadata,
        parse_unit,
        serialize_unit,
    )
except Exception as e:  # noqa: BLE001
    UnitBuilder = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


GOLDEN_VOLUME = """\
[Unit]
Description=qdrant volume

[Volume]

[Install]
WantedBy=default.target
"""


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing unit builder: {_IMPORT_ERR}")


def test_serialize_matches_golden_with_empty_section():
    """
    Verifica o formato exato de uma unit com seção vazia.

    Invariantes:
        - `[Volume]` vazio é preservado
        - Uma linha em branco entre seções
    """
    _require_imports()
    unit = UnitBuilder()
    unit.section("Unit").add("Description", "qdrant volume")
    unit.section("Volume")
    unit.section("Install").add("WantedBy", "default.target")
    assert serialize_unit(unit) == GOLDEN_VOLUME


def test_repeated_keys_keep_insertion_order():
    _require_imports()
    unit = UnitBuilder()
    unit.section("Unit").add("After", "a.service").add("Wants", "a.service").add("After", "b.service")
    assert unit.values("Unit", "After") == ["a.service", "b.service"]
    assert serialize_unit(unit).splitlines()[1:] == [
        "After=a.service",
        "Wants=a.service",
        "After=b.service",
    ]


def test_parse_serialize_roundtrip():
    _require_imports()
    unit = UnitBuilder()
    unit.section("Unit").add("Description", "web")
    unit.section("Container").add("Image", "example.org/web:1")
    unit.add_all("Environment", ["A=1", "B=x=y"])
    unit.section("Volume")
    again = parse_unit(serialize_unit(unit))
    assert again == unit
    assert serialize_unit(again) == serialize_unit(unit)


def test_parse_ignores_comments_and_blank_lines():
    _require_imports()
    text = "# header\n[Unit]\n; note\nDescription=x\n\n"
    unit = parse_unit(text)
    assert unit.sections == ["Unit"]
    assert unit.get("Unit", "Description") == "x"


def test_parse_rejects_line_without_equals():
    _require_imports()
    with pytest.raises(ValueError):
        parse_unit("[Unit]\nDescription\n")


def test_builder_rejects_invalid_input():
    """
    Verifica as guardas do builder.

    Invariantes:
        - `add()` exige uma seção aberta
        - chave não pode conter `=`
        - valor não pode ter múltiplas linhas
    """
    _require_imports()
    with pytest.raises(ValueError):
        UnitBuilder().add("Image", "x")
    unit = UnitBuilder().section("Container")
    with pytest.raises(ValueError):
        unit.add("Bad=Key", "x")
    with pytest.raises(ValueError):
        unit.add("Exec", "line1\nline2")
    with pytest.raises(ValueError):
        unit.section("[Bad]")


def test_extract_unit_metadata():
    _require_imports()
    text = (
        "[Container]\n"
        "Image=example.org/db:16\n"
        "PublishPort=127.0.0.1:5432:5432\n"
        "Environment=POSTGRES_USER=app\n"
        "Secret=db_password,type=env\n"
        "Volume=db-data.volume:/var/lib/db\n"
    )
    meta = extract_unit_metadata(text)
    assert meta == {
        "image": "example.org/db:16",
        "ports": ["127.0.0.1:5432:5432"],
        "secrets": ["db_password"],
        "volumes": ["db-data.volume:/var/lib/db"],
        "environment": {"POSTGRES_USER": "app"},
    }
