"""Conversion dispatcher: resolve, route, invoke, and report."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from unified_converter.application.options import DispatchOptions
from unified_converter.application.ports import ConversionRecorder, FormatDetectorPort
from unified_converter.application.results import ConversionOutcome
from unified_converter.detection import FormatDetector
from unified_converter.infrastructure.audit_log import NullRecorder
from unified_converter.plugins.registry import ConversionRegistry
from unified_converter.types import FailureKind, FormatTag

logger = logging.getLogger(__name__)

INVALID_PARAMETERS = "Invalid parameters"
DETECTION_FAILED = "Could not detect input format"


@dataclass(frozen=True)
class ConversionRequest:
    """Normalized conversion request.

    Parameters
    ----------
    input_path : Path | None
        Source file.
    output_path : Path | None
        Destination file.
    target_format : FormatTag | str | None
        Requested output format.
    source_format : FormatTag | str | None, default=None
        Declared input format; detected from the file when omitted.
    """

    input_path: Path | None
    output_path: Path | None
    target_format: FormatTag | str | None
    source_format: FormatTag | str | None = None


def _parse_optional(value: FormatTag | str | None) -> FormatTag | None:
    if value is None:
        return None
    return FormatTag.parse(value)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class Dispatcher:
    """Stateless coordinator over a registry and a format detector.

    Every failure (bad parameters, undetectable input, missing route,
    plugin exception) is returned as a failed :class:`ConversionOutcome`.
    """

    def __init__(
        self,
        registry: ConversionRegistry,
        *,
        detector: FormatDetectorPort | None = None,
        recorder: ConversionRecorder | None = None,
        options: DispatchOptions | None = None,
    ) -> None:
        self._registry = registry
        self._detector = detector or FormatDetector()
        self._recorder = recorder or NullRecorder()
        self._options = options or DispatchOptions()

    @property
    def registry(self) -> ConversionRegistry:
        """Registry used for routing."""
        return self._registry

    def convert(
        self,
        input_path: Path | str | None,
        output_path: Path | str | None,
        source_format: FormatTag | str | None,
        target_format: FormatTag | str | None,
    ) -> ConversionOutcome:
        """Run a single conversion; see :meth:`dispatch`."""
        return self.dispatch(
            ConversionRequest(
                input_path=Path(input_path) if input_path is not None else None,
                output_path=Path(output_path) if output_path is not None else None,
                target_format=target_format,
                source_format=source_format,
            )
        )

    def dispatch(self, request: ConversionRequest) -> ConversionOutcome:
        """Resolve the source format, route to a plugin, and invoke it.

        Parameters
        ----------
        request : ConversionRequest
            Conversion to perform.

        Returns
        -------
        ConversionOutcome
            Success or failure with a human-readable reason. Never raises
            for conversion failures.
        """
        try:
            declared = _parse_optional(request.source_format)
            target = _parse_optional(request.target_format)
        except ValueError as exc:
            return self._finish(
                request,
                FormatTag.UNKNOWN,
                None,
                f"{INVALID_PARAMETERS}: {exc}",
                failure=FailureKind.PARAMETERS,
            )

        if request.input_path is None or request.output_path is None or target is None:
            return self._finish(
                request,
                declared or FormatTag.UNKNOWN,
                target,
                INVALID_PARAMETERS,
                failure=FailureKind.PARAMETERS,
            )

        input_path = Path(request.input_path)
        output_path = Path(request.output_path)
        source = declared
        if source is None:
            source = self._detector.detect(input_path)
        if source is FormatTag.UNKNOWN:
            return self._finish(
                request, source, target, DETECTION_FAILED, failure=FailureKind.DETECTION
            )

        plugin = self._registry.lookup(source, target)
        if plugin is None:
            return self._finish(
                request,
                source,
                target,
                f"No converter available for {source.value} to {target.value}",
                failure=FailureKind.ROUTING,
            )

        output_existed = output_path.exists()
        started = time.perf_counter()
        try:
            plugin.convert(input_path, output_path)
        except Exception as exc:
            elapsed = time.perf_counter() - started
            logger.debug("Plugin '%s' raised.", plugin.name, exc_info=True)
            if self._options.cleanup_partial_output and not output_existed:
                self._remove_partial_output(output_path)
            return self._finish(
                request,
                source,
                target,
                _describe(exc),
                failure=FailureKind.PLUGIN,
                plugin_name=plugin.name,
                elapsed=elapsed,
            )
        return self._finish(
            request,
            source,
            target,
            None,
            plugin_name=plugin.name,
            elapsed=time.perf_counter() - started,
        )

    def _finish(
        self,
        request: ConversionRequest,
        source: FormatTag,
        target: FormatTag | None,
        error: str | None,
        *,
        failure: FailureKind | None = None,
        plugin_name: str | None = None,
        elapsed: float = 0.0,
    ) -> ConversionOutcome:
        outcome = ConversionOutcome(
            success=error is None,
            source_format=source,
            target_format=target,
            error=error,
            failure=failure,
            plugin_name=plugin_name,
            elapsed_seconds=elapsed,
        )
        if outcome.success:
            logger.info(
                "Converted %s (%s) -> %s (%s) with '%s'.",
                request.input_path,
                source,
                request.output_path,
                target,
                plugin_name,
            )
        else:
            logger.warning(
                "Conversion of %s (%s -> %s) failed: %s",
                request.input_path,
                source,
                target,
                error,
            )
        self._recorder.record(
            request.input_path,
            request.output_path,
            source,
            target,
            outcome.status,
            error,
        )
        return outcome

    @staticmethod
    def _remove_partial_output(output_path: Path) -> None:
        try:
            output_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove partial output %s: %s", output_path, exc)
