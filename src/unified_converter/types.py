"""Format vocabulary and conversion keys."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FormatTag(str, Enum):
    """Closed set of recognized file formats."""

    CSV = "CSV"
    JSON = "JSON"
    XML = "XML"
    EXCEL = "EXCEL"
    TEXT = "TEXT"
    PDF = "PDF"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: FormatTag | str) -> FormatTag:
        """Parse a tag name case-insensitively.

        Raises
        ------
        ValueError
            If ``value`` does not name a format.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError as exc:
            valid = ", ".join(tag.value for tag in cls.convertible())
            raise ValueError(f"Unknown format '{value}'. Expected one of: {valid}") from exc

    @classmethod
    def convertible(cls) -> tuple[FormatTag, ...]:
        """Return every tag usable in a conversion key."""
        return tuple(tag for tag in cls if tag is not cls.UNKNOWN)


class ConversionStatus(str, Enum):
    """Outcome status recorded in the audit log."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConversionKey:
    """Ordered ``(source, target)`` pair identifying a conversion direction."""

    source: FormatTag
    target: FormatTag

    def __post_init__(self) -> None:
        if self.source is self.target:
            raise ValueError(f"Conversion key needs distinct formats, got {self.source}")

    def __str__(self) -> str:
        return f"{self.source.value}_TO_{self.target.value}"


class FailureKind(str, Enum):
    """Category of a failed conversion."""

    PARAMETERS = "PARAMETERS"
    DETECTION = "DETECTION"
    ROUTING = "ROUTING"
    PLUGIN = "PLUGIN"
