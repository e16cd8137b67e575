"""Unit tests for the built-in text-based conversion plugins."""

from __future__ import annotations

import itertools
import json
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from unified_converter.errors import InvalidInputError, PluginError
from unified_converter.plugins.builtins import (
    BUILTIN_PLUGINS,
    CsvToExcelPlugin,
    CsvToJsonPlugin,
    JsonToCsvPlugin,
    JsonToXmlPlugin,
    TextToPdfPlugin,
    read_csv_rows,
)
from unified_converter.types import FormatTag


@pytest.mark.parametrize(
    ("plugin_cls", "pair"),
    [
        (CsvToJsonPlugin, (FormatTag.CSV, FormatTag.JSON)),
        (JsonToCsvPlugin, (FormatTag.JSON, FormatTag.CSV)),
        (JsonToXmlPlugin, (FormatTag.JSON, FormatTag.XML)),
        (CsvToExcelPlugin, (FormatTag.CSV, FormatTag.EXCEL)),
        (TextToPdfPlugin, (FormatTag.TEXT, FormatTag.PDF)),
    ],
)
def test_builtin_plugin_supports_only_its_pair(plugin_cls, pair) -> None:
    plugin = plugin_cls()
    for source, target in itertools.product(FormatTag, repeat=2):
        assert plugin.supports(source, target) is ((source, target) == pair)


def test_builtin_plugins_have_distinct_names() -> None:
    names = [plugin_cls().name for plugin_cls in BUILTIN_PLUGINS]
    assert len(set(names)) == len(names)
    assert all(name.endswith("Converter") for name in names)


def _convert(plugin, write_file, name: str, content: str, out_name: str) -> Path:
    source = write_file(name, content)
    output = source.with_name(out_name)
    plugin.convert(source, output)
    return output


def test_csv_to_json_uses_header_row(write_file) -> None:
    output = _convert(CsvToJsonPlugin(), write_file, "in.csv", "a,b\n1,2\n", "out.json")
    assert json.loads(output.read_text(encoding="utf-8")) == [{"a": "1", "b": "2"}]


def test_csv_to_json_single_row_uses_positional_fields(write_file) -> None:
    output = _convert(CsvToJsonPlugin(), write_file, "in.csv", "x, y\n", "out.json")
    assert json.loads(output.read_text(encoding="utf-8")) == [
        {"field1": "x", "field2": "y"}
    ]


def test_csv_to_json_handles_quotes_semicolons_and_blank_lines(write_file) -> None:
    output = _convert(
        CsvToJsonPlugin(),
        write_file,
        "in.csv",
        'name;note\n\nAnn;"hi; there"\nBob ; ok \n',
        "out.json",
    )
    assert json.loads(output.read_text(encoding="utf-8")) == [
        {"name": "Ann", "note": "hi; there"},
        {"name": "Bob", "note": "ok"},
    ]


def test_csv_to_json_rejects_empty_input(write_file) -> None:
    with pytest.raises(InvalidInputError, match="empty"):
        _convert(CsvToJsonPlugin(), write_file, "in.csv", "\n  \n", "out.json")


def test_csv_plugins_reject_missing_input(tmp_path: Path) -> None:
    with pytest.raises(InvalidInputError, match="does not exist"):
        CsvToJsonPlugin().convert(tmp_path / "missing.csv", tmp_path / "out.json")


def test_read_csv_rows_strips_utf8_bom(write_file) -> None:
    source = write_file("bom.csv", "﻿a,b\n1,2\n")
    assert read_csv_rows(source) == [["a", "b"], ["1", "2"]]


def test_json_to_csv_writes_first_object_keys(write_file) -> None:
    payload = [
        {"a": 1, "b": None, "c": True},
        {"a": "x,y", "c": [1, 2], "extra": "dropped"},
    ]
    output = _convert(
        JsonToCsvPlugin(), write_file, "in.json", json.dumps(payload), "out.csv"
    )
    assert output.read_text(encoding="utf-8").splitlines() == [
        "a,b,c",
        "1,,true",
        '"x,y",,"[1, 2]"',
    ]


def test_json_to_csv_empty_array_writes_empty_file(write_file) -> None:
    output = _convert(JsonToCsvPlugin(), write_file, "in.json", "[]", "out.csv")
    assert output.read_text(encoding="utf-8") == ""


@pytest.mark.parametrize("payload", ['{"a": 1}', "[1, 2]", '[{"a": 1}, "x"]'])
def test_json_to_csv_requires_array_of_objects(write_file, payload: str) -> None:
    with pytest.raises(InvalidInputError, match="array of objects"):
        _convert(JsonToCsvPlugin(), write_file, "in.json", payload, "out.csv")


def test_json_to_csv_reports_malformed_json(write_file) -> None:
    with pytest.raises(InvalidInputError, match="Malformed JSON"):
        _convert(JsonToCsvPlugin(), write_file, "in.json", "[{]", "out.csv")


def test_json_to_xml_maps_objects_and_arrays(write_file) -> None:
    payload = {
        "name": "Ann",
        "tags": ["a", "b"],
        "1st": 1,
        "active": False,
        "note": None,
        "bad key": "v",
    }
    output = _convert(
        JsonToXmlPlugin(), write_file, "in.json", json.dumps(payload), "out.xml"
    )
    assert output.read_bytes().startswith(b"<?xml")
    root = ET.parse(output).getroot()
    assert root.tag == "root"
    assert root.findtext("name") == "Ann"
    assert [item.text for item in root.find("tags").findall("item")] == ["a", "b"]
    assert root.findtext("_1st") == "1"
    assert root.findtext("active") == "false"
    assert root.find("note") is not None and root.find("note").text is None
    assert root.findtext("bad_key") == "v"


def test_json_to_xml_top_level_array(write_file) -> None:
    output = _convert(
        JsonToXmlPlugin(), write_file, "in.json", '[{"a": 1}, 2]', "out.xml"
    )
    items = ET.parse(output).getroot().findall("item")
    assert len(items) == 2
    assert items[0].findtext("a") == "1"
    assert items[1].text == "2"


def test_json_to_xml_prefixes_reserved_names(write_file) -> None:
    output = _convert(
        JsonToXmlPlugin(), write_file, "in.json", '{"xmlns": "x"}', "out.xml"
    )
    assert ET.parse(output).getroot().findtext("_xmlns") == "x"


def test_csv_to_excel_without_openpyxl_raises_plugin_error(
    monkeypatch: pytest.MonkeyPatch, write_file
) -> None:
    monkeypatch.setitem(sys.modules, "openpyxl", None)
    source = write_file("in.csv", "a,b\n1,2\n")
    with pytest.raises(PluginError, match=r"\.\[excel\]"):
        CsvToExcelPlugin().convert(source, source.with_name("out.xlsx"))


def test_text_to_pdf_without_reportlab_raises_plugin_error(
    monkeypatch: pytest.MonkeyPatch, write_file
) -> None:
    monkeypatch.setitem(sys.modules, "reportlab.lib.pagesizes", None)
    source = write_file("in.txt", "hello\n")
    with pytest.raises(PluginError, match=r"\.\[pdf\]"):
        TextToPdfPlugin().convert(source, source.with_name("out.pdf"))


def test_csv_to_json_keeps_line_breaks_inside_quoted_cells(write_file) -> None:
    output = _convert(
        CsvToJsonPlugin(),
        write_file,
        "in.csv",
        'a,b\n"line1\n\nline2",x\n\n"p\x0cq","r s"\n',
        "out.json",
    )
    assert json.loads(output.read_text(encoding="utf-8")) == [
        {"a": "line1\n\nline2", "b": "x"},
        {"a": "p\x0cq", "b": "r s"},
    ]


def test_json_csv_json_roundtrip_preserves_multiline_values(write_file) -> None:
    records = [{"a": "line1\nline2", "b": "x"}, {"a": "one", "b": "two\n\nthree"}]
    source = write_file("in.json", json.dumps(records))
    as_csv = source.with_name("mid.csv")
    back = source.with_name("back.json")

    JsonToCsvPlugin().convert(source, as_csv)
    CsvToJsonPlugin().convert(as_csv, back)

    assert json.loads(back.read_text(encoding="utf-8")) == records
