"""Shared fixtures and test doubles for unit tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from unified_converter.types import ConversionStatus, FormatTag


class RecordingPlugin:
    """Plugin double that supports a fixed set of pairs and records calls."""

    def __init__(
        self,
        name: str,
        pairs: Iterable[tuple[FormatTag, FormatTag]],
        *,
        payload: str = "converted",
        error: Exception | None = None,
        partial: bool = False,
    ) -> None:
        self.name = name
        self._pairs = set(pairs)
        self._payload = payload
        self._error = error
        self._partial = partial
        self.probed: list[tuple[FormatTag, FormatTag]] = []
        self.calls: list[tuple[Path, Path]] = []

    def supports(self, source: FormatTag, target: FormatTag) -> bool:
        self.probed.append((source, target))
        return (source, target) in self._pairs

    def convert(self, input_path: Path, output_path: Path) -> None:
        self.calls.append((input_path, output_path))
        if self._partial:
            output_path.write_text("half", encoding="utf-8")
        if self._error is not None:
            raise self._error
        output_path.write_text(self._payload, encoding="utf-8")


class ListRecorder:
    """Recorder double keeping every record in memory."""

    def __init__(self) -> None:
        self.records: list[tuple[object, ...]] = []

    def record(
        self,
        input_path: Path | None,
        output_path: Path | None,
        from_format: FormatTag | None,
        to_format: FormatTag | None,
        status: ConversionStatus,
        message: str | None,
    ) -> None:
        self.records.append(
            (input_path, output_path, from_format, to_format, status, message)
        )


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str | bytes], Path]:
    """Return a helper writing text or bytes to ``tmp_path / name``."""

    def _write(name: str, content: str | bytes) -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_plugin() -> type[RecordingPlugin]:
    """Return the recording plugin double class."""
    return RecordingPlugin


@pytest.fixture
def recorder() -> ListRecorder:
    """Return a fresh in-memory recorder double."""
    return ListRecorder()
