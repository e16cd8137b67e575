"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from unified_converter.types import ConversionStatus, FormatTag


class ConversionRecorder(Protocol):
    """Receive one audit record per conversion attempt."""

    def record(
        self,
        input_path: Path | None,
        output_path: Path | None,
        from_format: FormatTag | None,
        to_format: FormatTag | None,
        status: ConversionStatus,
        message: str | None,
    ) -> None:
        """Persist or forward the record."""


class FormatDetectorPort(Protocol):
    """Classify a file into a format tag."""

    def detect(self, path: Path | str | None) -> FormatTag:
        """Return detected format or ``FormatTag.UNKNOWN``."""
