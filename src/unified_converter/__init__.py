"""Convert files between tabular, hierarchical, and document formats."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from unified_converter.types import ConversionKey, FormatTag

__version__ = "0.1.0"


def convert_file(
    input_path: Path,
    output_path: Path,
    target_format: FormatTag | str,
    source_format: FormatTag | str | None = None,
    *,
    plugin_modules: Iterable[str] | None = None,
) -> Path:
    """Convert a file, raising ``ConversionError`` on failure.

    Parameters
    ----------
    input_path : Path
        Source file.
    output_path : Path
        Destination file.
    target_format : FormatTag | str
        Output format, e.g. ``"JSON"``.
    source_format : FormatTag | str | None, default=None
        Input format; detected from extension and content when omitted.
    plugin_modules : Iterable[str] | None, default=None
        Extra plugin modules (import path or file path) to register.

    Returns
    -------
    Path
        The output path.
    """
    from .api import convert_file_or_raise as _impl

    return _impl(
        input_path=input_path,
        output_path=output_path,
        target_format=target_format,
        source_format=source_format,
        plugin_modules=plugin_modules,
    )


def detect_format(path: Path | str) -> FormatTag:
    """Detect a file's format; ``FormatTag.UNKNOWN`` when undetermined."""
    from .detection import detect_format as _impl

    return _impl(path)


__all__ = [
    "ConversionKey",
    "FormatTag",
    "convert_file",
    "detect_format",
]
