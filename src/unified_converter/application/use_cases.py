"""Application use-cases orchestrating conversion workflows."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from unified_converter.application.options import DispatchOptions
from unified_converter.application.ports import ConversionRecorder
from unified_converter.application.results import ConversionOutcome
from unified_converter.dispatcher import ConversionRequest, Dispatcher
from unified_converter.plugins.registry import create_default_registry
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
    """Use-case: convert one file through the default plugin registry.

    Raises
    ------
    PluginError
        If an extra plugin module cannot be loaded. Conversion failures
        are reported in the returned outcome instead.
    """
    registry = create_default_registry(extra_modules=plugin_modules)
    dispatcher = Dispatcher(registry, recorder=recorder, options=options)
    return dispatcher.dispatch(
        ConversionRequest(
            input_path=input_path,
            output_path=output_path,
            target_format=target_format,
            source_format=source_format,
        )
    )
