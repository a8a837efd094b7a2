"""
Tests for CSV and JSON client import/export.
"""

import json
from datetime import date

import pytest

from banco.files import CsvClienteStorage, JsonClienteStorage, storage_for_path
from conftest import build_cliente


def test_storage_for_path_picks_by_extension(tmp_path):
    assert isinstance(storage_for_path(tmp_path / "out.CSV"), CsvClienteStorage)
    assert isinstance(storage_for_path(tmp_path / "out.json"), JsonClienteStorage)
    with pytest.raises(ValueError, match="Unsupported"):
        storage_for_path(tmp_path / "out.xml")


def test_csv_export_writes_one_row_per_card(tmp_path):
    path = tmp_path / "clientes.csv"
    clientes = [
        build_cliente(nombre="Ana", user_name="ana", cliente_id=1, tarjetas=2),
        build_cliente(nombre="Luis", user_name="luis", cliente_id=2, tarjetas=0),
    ]

    written = CsvClienteStorage().export_file(path, clientes)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert written == 2
    assert lines[0].startswith("cliente_id,nombre,user_name,email")
    assert len(lines) == 4
    assert lines[3] == "2,Luis,luis,luis@example.com,,,,"


def test_csv_import_regroups_cards(tmp_path):
    path = tmp_path / "clientes.csv"
    path.write_text(
        "cliente_id,nombre,user_name,email,tarjeta_id,numero_tarjeta,nombre_titular,fecha_caducidad\n"
        "1,Ana,ana,ana@example.com,10,4111 1111 1111 1111,Ana,2030-01-31\n"
        "1,Ana,ana,ana@example.com,11,5500000000000004,,2031-02-28\n"
        ",Luis,luis,luis@example.com,,,,\n",
        encoding="utf-8",
    )

    clientes = list(CsvClienteStorage().import_file(path))

    assert [c.usuario.user_name for c in clientes] == ["ana", "luis"]
    ana, luis = clientes
    assert ana.id == 1
    assert [t.numero_tarjeta for t in ana.tarjetas] == ["4111111111111111", "5500000000000004"]
    assert ana.tarjetas[1].nombre_titular == "Ana"
    assert ana.tarjetas[1].fecha_caducidad == date(2031, 2, 28)
    assert luis.id is None
    assert luis.tarjetas == []


def test_csv_export_then_import_preserves_clients(tmp_path):
    path = tmp_path / "nested" / "clientes.csv"
    original = [build_cliente(nombre="Ana", user_name="ana", cliente_id=1, tarjetas=2)]

    CsvClienteStorage().export_file(path, original)
    imported = list(CsvClienteStorage().import_file(path))

    assert imported == original


def test_csv_import_missing_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("cliente_id,nombre\n1,Ana\n", encoding="utf-8")

    with pytest.raises(ValueError, match="missing columns"):
        list(CsvClienteStorage().import_file(path))


def test_csv_import_reports_bad_line(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "cliente_id,nombre,user_name,email,tarjeta_id,numero_tarjeta,nombre_titular,fecha_caducidad\n"
        "1,Ana,ana,ana@example.com,10,4111111111111111,Ana,31/01/2030\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match=r"bad\.csv:2"):
        list(CsvClienteStorage().import_file(path))


def test_json_export_and_import(tmp_path):
    path = tmp_path / "clientes.json"
    original = [
        build_cliente(nombre="Ana", user_name="ana", cliente_id=1),
        build_cliente(nombre="Luis", user_name="luis", cliente_id=2, tarjetas=0),
    ]

    assert JsonClienteStorage().export_file(path, original) == 2
    assert list(JsonClienteStorage().import_file(path)) == original


def test_json_import_rejects_non_list(tmp_path):
    path = tmp_path / "clientes.json"
    path.write_text('{"usuario": {}}', encoding="utf-8")

    with pytest.raises(ValueError, match="JSON list"):
        list(JsonClienteStorage().import_file(path))


def test_json_import_reports_bad_record(tmp_path):
    path = tmp_path / "clientes.json"
    path.write_text('[{"usuario": {"nombre": "Ana"}}]', encoding="utf-8")

    with pytest.raises(ValueError, match="#0"):
        list(JsonClienteStorage().import_file(path))


def test_json_import_invalid_json(tmp_path):
    path = tmp_path / "clientes.json"
    path.write_text("[", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON"):
        list(JsonClienteStorage().import_file(path))


def test_csv_import_rejects_card_without_expiry(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "cliente_id,nombre,user_name,email,tarjeta_id,numero_tarjeta,nombre_titular,fecha_caducidad\n"
        "1,Ana,ana,ana@example.com,,1234567890123456,Ana,\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match=r"bad\.csv:2.*expiry date"):
        list(CsvClienteStorage().import_file(path))


def test_json_import_rejects_card_with_null_expiry(tmp_path):
    path = tmp_path / "clientes.json"
    record = build_cliente(nombre="Ana", user_name="ana", cliente_id=1).to_dict()
    record['tarjetas'][0]['fecha_caducidad'] = None
    path.write_text(json.dumps([record]), encoding="utf-8")

    with pytest.raises(ValueError, match="#0.*expiry date"):
        list(JsonClienteStorage().import_file(path))
