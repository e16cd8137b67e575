"""Audit log adapters implementing the ``ConversionRecorder`` port."""

from __future__ import annotations

import csv
import logging
from collections import deque
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from unified_converter.schemas import AUDIT_HEADER, AuditRecord, HistoryQuery
from unified_converter.types import ConversionStatus, FormatTag

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "conversion_log.csv"


def _printable(text: str) -> str:
    # Undecodable file names arrive as lone surrogates; log their bytes escaped.
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def _path_text(path: Path | str | None) -> str:
    return _printable(str(Path(path).absolute())) if path is not None else "null"


def build_record(
    input_path: Path | None,
    output_path: Path | None,
    from_format: FormatTag | None,
    to_format: FormatTag | None,
    status: ConversionStatus,
    message: str | None,
) -> AuditRecord:
    """Build an audit record stamped with the current local time."""
    return AuditRecord(
        timestamp=datetime.now().replace(microsecond=0),
        input_path=_path_text(input_path),
        output_path=_path_text(output_path),
        from_format=str(from_format) if from_format is not None else "UNKNOWN",
        to_format=str(to_format) if to_format is not None else "null",
        status=status,
        message=_printable(message or ""),
    )


def _limit(limit: int) -> int:
    try:
        return HistoryQuery(limit=limit).limit
    except ValidationError as exc:
        raise ValueError(f"Invalid history limit: {limit}") from exc


class NullRecorder:
    """Recorder that discards every record."""

    def record(self, *args: object, **kwargs: object) -> None:
        del args, kwargs


class InMemoryAuditLog:
    """Bounded ring buffer of recent audit records."""

    def __init__(self, capacity: int = 1000) -> None:
        self._records: deque[AuditRecord] = deque(maxlen=capacity)

    def record(
        self,
        input_path: Path | None,
        output_path: Path | None,
        from_format: FormatTag | None,
        to_format: FormatTag | None,
        status: ConversionStatus,
        message: str | None,
    ) -> None:
        """Append a record, evicting the oldest when full."""
        self._records.append(
            build_record(input_path, output_path, from_format, to_format, status, message)
        )

    def recent(self, limit: int = 20) -> list[AuditRecord]:
        """Return up to ``limit`` most recent records, oldest first."""
        return list(self._records)[-_limit(limit):]


class CsvAuditLog:
    """Append-only delimited audit log with a fixed header row.

    Parameters
    ----------
    path : Path | str
        Log file location; created on first write.
    """

    def __init__(self, path: Path | str = DEFAULT_LOG_FILE) -> None:
        self.path = Path(path)

    def record(
        self,
        input_path: Path | None,
        output_path: Path | None,
        from_format: FormatTag | None,
        to_format: FormatTag | None,
        status: ConversionStatus,
        message: str | None,
    ) -> None:
        """Append one row; write failures are logged, not raised."""
        entry = build_record(input_path, output_path, from_format, to_format, status, message)
        try:
            self.append(entry)
        except (OSError, UnicodeError) as exc:
            logger.error("Failed to write to log file %s: %s", self.path, exc)

    def append(self, entry: AuditRecord) -> None:
        """Append ``entry``, writing the header first if the log is new.

        Raises
        ------
        OSError
            If the log file cannot be written.
        """
        needs_header = not self.path.exists() or self.path.stat().st_size == 0
        if self.path.parent != Path("."):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            if needs_header:
                writer.writerow(AUDIT_HEADER)
            writer.writerow(entry.to_row())

    def recent(self, limit: int = 20) -> list[AuditRecord]:
        """Return up to ``limit`` most recent records, oldest first.

        Malformed rows are skipped; a missing or unreadable log yields ``[]``.
        """
        window: deque[AuditRecord] = deque(maxlen=_limit(limit))
        try:
            with self.path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
                reader = csv.reader(handle)
                next(reader, None)
                for row in reader:
                    if len(row) < 6:
                        continue
                    try:
                        window.append(AuditRecord.from_row(row))
                    except ValidationError:
                        logger.debug("Skipping malformed audit row: %r", row)
        except OSError as exc:
            logger.debug("Audit log %s not readable: %s", self.path, exc)
            return []
        return list(window)
