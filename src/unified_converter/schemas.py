"""Pydantic schemas for runtime validation of audit records."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from unified_converter.fileutils import TIMESTAMP_FORMAT
from unified_converter.types import ConversionStatus

AUDIT_HEADER: tuple[str, ...] = (
    "Date",
    "Input File",
    "Output File",
    "From Format",
    "To Format",
    "Status",
    "Error Message",
)


class AuditRecord(BaseModel):
    """One row of the conversion audit log."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timestamp: datetime
    input_path: str
    output_path: str
    from_format: str
    to_format: str
    status: ConversionStatus
    message: str = ""

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: object) -> object:
        if isinstance(value, str):
            return datetime.strptime(value.strip(), TIMESTAMP_FORMAT)
        return value

    @classmethod
    def from_row(cls, row: list[str]) -> AuditRecord:
        """Build a record from a delimited log row (message column optional)."""
        padded = list(row) + [""] * (len(AUDIT_HEADER) - len(row))
        return cls(
            timestamp=padded[0],
            input_path=padded[1],
            output_path=padded[2],
            from_format=padded[3],
            to_format=padded[4],
            status=padded[5],
            message=padded[6],
        )

    def to_row(self) -> list[str]:
        """Render the record as a delimited log row."""
        return [
            self.timestamp.strftime(TIMESTAMP_FORMAT),
            self.input_path,
            self.output_path,
            self.from_format,
            self.to_format,
            self.status.value,
            self.message,
        ]


class HistoryQuery(BaseModel):
    """Validated input for reading back recent audit records."""

    model_config = ConfigDict(extra="forbid")

    limit: int = Field(default=20, gt=0)
