"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass

from unified_converter.types import ConversionStatus, FailureKind, FormatTag


@dataclass(frozen=True)
class ConversionOutcome:
    """Structured result of one conversion attempt."""

    success: bool
    source_format: FormatTag
    target_format: FormatTag | None
    error: str | None = None
    failure: FailureKind | None = None
    plugin_name: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def status(self) -> ConversionStatus:
        """Audit status derived from ``success``."""
        return ConversionStatus.SUCCESS if self.success else ConversionStatus.FAILED
