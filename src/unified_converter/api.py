"""Public file-based conversion API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
from typing import Optional

from unified_converter.application.options import DispatchOptions
from unified_converter.application.ports import ConversionRecorder
from unified_converter.application.use_cases import convert_file
from unified_converter.errors import (
    ConversionError,
    DetectionError,
    UnsupportedConversionError,
)
from unified_converter.types import FailureKind, FormatTag


def convert_file_or_raise(
    input_path: Path,
    output_path: Path,
    target_format: FormatTag | str,
    source_format: Optional[FormatTag | str] = None,
    *,
    plugin_modules: Optional[Iterable[str]] = None,
    recorder: Optional[ConversionRecorder] = None,
    cleanup_partial_output: bool = True,
) -> Path:
    """Convert a file and return the output path, raising on failure.

    Raises
    ------
    DetectionError
        If the source format could not be detected.
    UnsupportedConversionError
        If no converter is registered for the resolved pair.
    ConversionError
        For parameter and plugin failures.
    """
    outcome = convert_file(
        input_path=input_path,
        output_path=output_path,
        target_format=target_format,
        source_format=source_format,
        plugin_modules=plugin_modules,
        recorder=recorder,
        options=DispatchOptions(cleanup_partial_output=cleanup_partial_output),
    )
    if outcome.success:
        return output_path

    message = outcome.error or "Conversion failed"
    if outcome.failure is FailureKind.DETECTION:
        raise DetectionError(message)
    if outcome.failure is FailureKind.ROUTING:
        raise UnsupportedConversionError(message)
    raise ConversionError(message)
