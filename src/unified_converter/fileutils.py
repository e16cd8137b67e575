"""File and time helpers used around conversions."""

from __future__ import annotations

import logging
import shutil
import time
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_SIZE_UNITS = "KMGTPE"


def create_backup(path: Path) -> Path | None:
    """Copy ``path`` to ``<stem>_backup_<millis><suffix>`` in the same directory.

    Returns
    -------
    Path | None
        Backup location, or ``None`` if the file is missing or the copy failed.
    """
    if not path.is_file():
        return None
    millis = time.time_ns() // 1_000_000
    backup = path.with_name(f"{path.stem}_backup_{millis}{path.suffix}")
    try:
        shutil.copy2(path, backup)
    except OSError as exc:
        logger.error("Failed to create backup of %s: %s", path, exc)
        return None
    return backup


def format_file_size(size: int) -> str:
    """Format a byte count as a human-readable string (``"1.5 KB"``)."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    exp = 0
    while value >= 1024 and exp < len(_SIZE_UNITS):
        value /= 1024
        exp += 1
    return f"{value:.1f} {_SIZE_UNITS[exp - 1]}B"


def format_duration(millis: int) -> str:
    """Format a duration in milliseconds (``"250ms"``, ``"2m 5s"``, ``"1h 1m"``)."""
    if millis < 1000:
        return f"{millis}ms"
    seconds = millis // 1000
    if seconds < 60:
        return f"{seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m {seconds % 60}s"
    return f"{minutes // 60}h {minutes % 60}m"


def current_timestamp() -> str:
    """Return the current local time formatted with ``TIMESTAMP_FORMAT``."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)
