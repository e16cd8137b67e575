"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from unified_converter.application.options import DispatchOptions
from unified_converter.application.ports import ConversionRecorder
from unified_converter.application.results import ConversionOutcome
from unified_converter.types import FormatTag


def convert_file(
    *,
    input_path: Path | None,
    output_path: Path | None,
    target_format: FormatTag | str | None,
    source_format: FormatTag | str | None = None,
    plugin_modules: Iterable[str] | None = None,
    recorder: ConversionRecorder | None = None,
    options: DispatchOptions | None = None,
) -> ConversionOutcome:
    """Convert one file via lazy use-case import."""
    from unified_converter.application.use_cases import convert_file as _impl

    return _impl(
        input_path=input_path,
        output_path=output_path,
        target_format=target_format,
        source_format=source_format,
        plugin_modules=plugin_modules,
        recorder=recorder,
        options=options,
    )


__all__ = [
    "ConversionOutcome",
    "ConversionRecorder",
    "DispatchOptions",
    "convert_file",
]
