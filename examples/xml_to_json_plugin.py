#!/usr/bin/env python3
"""Example plugin adding XML to JSON conversion.

Load it with::

    unified-convert convert feed.xml feed.json --to json \
        --plugin-module examples/xml_to_json_plugin.py
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from pathlib import Path

from unified_converter.errors import InvalidInputError
from unified_converter.types import FormatTag


def _element_to_value(element: ET.Element) -> object:
    children = list(element)
    if not children:
        return element.text.strip() if element.text and element.text.strip() else None
    if all(child.tag == "item" for child in children):
        return [_element_to_value(child) for child in children]
    return {child.tag: _element_to_value(child) for child in children}


class XmlToJsonPlugin:
    """Convert an XML document into nested JSON objects."""

    name = "XML to JSON Converter"

    def supports(self, source: FormatTag, target: FormatTag) -> bool:
        """Handle XML to JSON only."""
        return source is FormatTag.XML and target is FormatTag.JSON

    def convert(self, input_path: Path, output_path: Path) -> None:
        """Write the root element's children as a JSON document.

        Raises
        ------
        InvalidInputError
            If the XML cannot be parsed.
        """
        try:
            root = ET.parse(input_path).getroot()
        except ET.ParseError as exc:
            raise InvalidInputError(f"Malformed XML input: {exc}") from exc
        output_path.write_text(
            json.dumps(_element_to_value(root), indent=2) + "\n", encoding="utf-8"
        )


PLUGIN = XmlToJsonPlugin()
