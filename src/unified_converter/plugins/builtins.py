"""Built-in conversion plugins.

Notes
-----
Excel and PDF output rely on optional extras (``excel``, ``pdf``); their
libraries are imported lazily so the core package stays lightweight.
"""

from __future__ import annotations

import csv
import io
import json
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from unified_converter.errors import InvalidInputError, PluginError
from unified_converter.types import FormatTag

_DELIMITERS = (",", ";", "\t")
_XML_NAME_INVALID = re.compile(r"[^A-Za-z0-9_.-]")


def _require_readable(input_path: Path) -> None:
    if not input_path.is_file():
        raise InvalidInputError(
            f"Input file does not exist or cannot be read: {input_path}"
        )


def _read_text(input_path: Path) -> str:
    _require_readable(input_path)
    try:
        return input_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidInputError(f"Input file is not valid UTF-8 text: {exc}") from exc


def _first_non_blank_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    raise InvalidInputError("Input file is empty")


def _sniff_delimiter(header: str) -> str:
    for delimiter in _DELIMITERS:
        if delimiter in header:
            return delimiter
    return ","


def read_csv_rows(input_path: Path) -> list[list[str]]:
    """Parse a CSV file into trimmed rows, skipping blank rows.

    Quoted cells may span lines; their embedded line breaks are kept.

    Parameters
    ----------
    input_path : Path
        CSV file to read.

    Returns
    -------
    list[list[str]]
        Parsed rows; the first row is the header when more than one exists.

    Raises
    ------
    InvalidInputError
        If the file is missing, empty, or not valid CSV.
    """
    text = _read_text(input_path)
    delimiter = _sniff_delimiter(_first_non_blank_line(text))
    try:
        rows = [
            [cell.strip() for cell in row]
            for row in csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
        ]
    except csv.Error as exc:
        raise InvalidInputError(f"Malformed CSV input: {exc}") from exc
    rows = [row for row in rows if any(row)]
    if not rows:
        raise InvalidInputError("No valid data found in CSV file")
    return rows


def _read_json(input_path: Path) -> Any:
    text = _read_text(input_path)
    if not text.strip():
        raise InvalidInputError("Input file is empty")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"Malformed JSON input: {exc}") from exc


class _SinglePairPlugin:
    """Base for plugins handling exactly one conversion direction."""

    name = ""
    source = FormatTag.UNKNOWN
    target = FormatTag.UNKNOWN

    def supports(self, source: FormatTag, target: FormatTag) -> bool:
        """Return ``True`` only for this plugin's direction."""
        return source is self.source and target is self.target

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class CsvToJsonPlugin(_SinglePairPlugin):
    """Convert CSV rows into a JSON array of objects."""

    name = "CSV to JSON Converter"
    source = FormatTag.CSV
    target = FormatTag.JSON

    def convert(self, input_path: Path, output_path: Path) -> None:
        """Write the CSV rows as objects keyed by the header row."""
        rows = read_csv_rows(input_path)
        if len(rows) > 1:
            header, body = rows[0], rows[1:]
            records = [dict(zip(header, values)) for values in body]
        else:
            records = [
                {f"field{index}": value for index, value in enumerate(rows[0], start=1)}
            ]
        with output_path.open("w", encoding="utf-8") as handle:
            json.dump(records, handle, indent=2, ensure_ascii=False)
            handle.write("\n")


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class JsonToCsvPlugin(_SinglePairPlugin):
    """Convert a JSON array of objects into CSV."""

    name = "JSON to CSV Converter"
    source = FormatTag.JSON
    target = FormatTag.CSV

    def convert(self, input_path: Path, output_path: Path) -> None:
        """Write one CSV row per object, using the first object's keys as header.

        Raises
        ------
        InvalidInputError
            If the JSON root is not an array of objects.
        """
        data = _read_json(input_path)
        if not isinstance(data, list):
            raise InvalidInputError("Input JSON must be an array of objects.")
        if not data:
            output_path.write_text("", encoding="utf-8")
            return
        if not all(isinstance(item, dict) for item in data):
            raise InvalidInputError("Input JSON must be an array of objects.")

        header = list(data[0].keys())
        with output_path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(header)
            for item in data:
                writer.writerow([_csv_cell(item.get(key)) for key in header])


def _xml_name(key: str) -> str:
    name = _XML_NAME_INVALID.sub("_", key) or "_"
    if not (name[0].isalpha() or name[0] == "_") or name.lower().startswith("xml"):
        name = f"_{name}"
    return name


def _xml_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _build_xml(parent: ET.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _build_xml(ET.SubElement(parent, _xml_name(str(key))), item)
    elif isinstance(value, list):
        for item in value:
            _build_xml(ET.SubElement(parent, "item"), item)
    elif value is not None:
        parent.text = _xml_text(value)


class JsonToXmlPlugin(_SinglePairPlugin):
    """Convert any JSON document into an XML tree rooted at ``<root>``."""

    name = "JSON to XML Converter"
    source = FormatTag.JSON
    target = FormatTag.XML

    def convert(self, input_path: Path, output_path: Path) -> None:
        """Map objects to elements and array entries to ``<item>`` elements."""
        root = ET.Element("root")
        _build_xml(root, _read_json(input_path))
        tree = ET.ElementTree(root)
        ET.indent(tree)
        tree.write(output_path, encoding="utf-8", xml_declaration=True)


class CsvToExcelPlugin(_SinglePairPlugin):
    """Convert CSV rows into an XLSX workbook."""

    name = "CSV to Excel Converter"
    source = FormatTag.CSV
    target = FormatTag.EXCEL

    def convert(self, input_path: Path, output_path: Path) -> None:
        """Write every CSV cell as a string into a sheet named ``Data``.

        Raises
        ------
        PluginError
            If ``openpyxl`` is not installed.
        """
        try:
            from openpyxl import Workbook
        except ImportError as exc:
            raise PluginError(
                "openpyxl is required for Excel output. Install with extra: .[excel]"
            ) from exc

        rows = read_csv_rows(input_path)
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Data"
        for row in rows:
            sheet.append(row)
        workbook.save(output_path)


def _pdf_markup(line: str) -> str:
    escaped = line.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return escaped or "&nbsp;"


class TextToPdfPlugin(_SinglePairPlugin):
    """Render plain text into a PDF document."""

    name = "Text to PDF Converter"
    source = FormatTag.TEXT
    target = FormatTag.PDF

    def convert(self, input_path: Path, output_path: Path) -> None:
        """Render each text line as a paragraph.

        Raises
        ------
        PluginError
            If ``reportlab`` is not installed.
        """
        try:
            from reportlab.lib.pagesizes import A4
            from reportlab.lib.styles import getSampleStyleSheet
            from reportlab.platypus import Paragraph, SimpleDocTemplate
        except ImportError as exc:
            raise PluginError(
                "reportlab is required for PDF output. Install with extra: .[pdf]"
            ) from exc

        text = _read_text(input_path)
        if not text:
            raise InvalidInputError("Input file is empty")
        style = getSampleStyleSheet()["Normal"]
        story = [Paragraph(_pdf_markup(line), style) for line in text.splitlines()]
        document = SimpleDocTemplate(str(output_path), pagesize=A4, title=input_path.name)
        document.build(story)


BUILTIN_PLUGINS: tuple[type[_SinglePairPlugin], ...] = (
    CsvToJsonPlugin,
    JsonToCsvPlugin,
    JsonToXmlPlugin,
    CsvToExcelPlugin,
    TextToPdfPlugin,
)
