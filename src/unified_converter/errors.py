"""Exception hierarchy for file conversion."""

from __future__ import annotations


class ConversionError(Exception):
    """Base error for conversion failures.

    Parameters
    ----------
    message : str
        Human-readable failure description.
    exit_code : int, default=1
        Process exit code used by the CLI.
    """

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class PluginError(ConversionError):
    """Plugin loading, registration, or runtime dependency failure."""


class InvalidInputError(ConversionError):
    """Source file is missing, empty, or malformed."""


class UnsupportedConversionError(ConversionError):
    """No converter is registered for the requested pair."""


class DetectionError(ConversionError):
    """Source format could not be determined."""
