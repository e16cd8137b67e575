"""Best-effort file format detection from extension and content."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from unified_converter.types import FormatTag

logger = logging.getLogger(__name__)

EXTENSION_FORMATS: dict[str, FormatTag] = {
    "csv": FormatTag.CSV,
    "json": FormatTag.JSON,
    "xml": FormatTag.XML,
    "xlsx": FormatTag.EXCEL,
    "xls": FormatTag.EXCEL,
    "txt": FormatTag.TEXT,
    "pdf": FormatTag.PDF,
}

CSV_DELIMITERS = (",", ";", "\t")
EXCEL_MIN_BYTES = 8
ZIP_MAGIC = b"PK"
_TEXT_ENCODING = "utf-8-sig"
_SNIFF_CHARS = 4096


def file_extension(path: Path) -> str:
    """Return the lower-cased extension of ``path`` without the dot."""
    return path.suffix[1:].lower()


def _first_line(path: Path) -> str | None:
    with path.open("r", encoding=_TEXT_ENCODING, newline="") as handle:
        line = handle.readline()
    if not line:
        return None
    return line.rstrip("\r\n")


def _first_non_empty_line(path: Path) -> str | None:
    with path.open("r", encoding=_TEXT_ENCODING) as handle:
        for line in handle:
            stripped = line.strip()
            if stripped:
                return stripped
    return None


def _looks_like_csv(path: Path) -> bool:
    line = _first_line(path)
    return line is not None and any(sep in line for sep in CSV_DELIMITERS)


def _looks_like_json(path: Path) -> bool:
    line = _first_non_empty_line(path)
    return line is not None and line.startswith(("{", "["))


def _looks_like_xml(path: Path) -> bool:
    line = _first_non_empty_line(path)
    # "<?xml" is covered by the "<" prefix.
    return line is not None and line.startswith("<")


def _looks_like_excel(path: Path) -> bool:
    with path.open("rb") as handle:
        header = handle.read(EXCEL_MIN_BYTES)
    if len(header) < EXCEL_MIN_BYTES:
        return False
    if not header.startswith(ZIP_MAGIC):
        # Legacy .xls (OLE2) files are accepted without a signature check.
        logger.debug("No ZIP signature in %s; accepting as legacy Excel.", path)
    return True


def _looks_like_text(path: Path) -> bool:
    with path.open("r", encoding=_TEXT_ENCODING) as handle:
        return bool(handle.read(_SNIFF_CHARS))


_CONTENT_CHECKS: dict[FormatTag, Callable[[Path], bool]] = {
    FormatTag.CSV: _looks_like_csv,
    FormatTag.JSON: _looks_like_json,
    FormatTag.XML: _looks_like_xml,
    FormatTag.EXCEL: _looks_like_excel,
    FormatTag.TEXT: _looks_like_text,
}


def detect_format(path: Path | str | None) -> FormatTag:
    """Classify a file into a ``FormatTag``.

    The extension selects a candidate format; a lightweight content check
    may then demote the candidate to ``UNKNOWN`` but never switches it to
    another format.

    Parameters
    ----------
    path : Path | str | None
        File to inspect.

    Returns
    -------
    FormatTag
        Detected format, or ``FormatTag.UNKNOWN`` when the file is missing,
        unreadable, empty, or unrecognized. Never raises.
    """
    if path is None:
        return FormatTag.UNKNOWN
    path = Path(path)
    try:
        if not path.is_file():
            return FormatTag.UNKNOWN
    except OSError:
        return FormatTag.UNKNOWN

    candidate = EXTENSION_FORMATS.get(file_extension(path))
    if candidate is None:
        return FormatTag.UNKNOWN

    check = _CONTENT_CHECKS.get(candidate)
    if check is None:
        return candidate
    try:
        matches = check(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Content check for %s failed: %s", path, exc)
        return FormatTag.UNKNOWN
    return candidate if matches else FormatTag.UNKNOWN


class FormatDetector:
    """Callable wrapper around :func:`detect_format` for injection."""

    def detect(self, path: Path | str | None) -> FormatTag:
        """Detect the format of ``path``."""
        return detect_format(path)
