"""Plugin protocol for format-pair converters."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from unified_converter.types import FormatTag


@runtime_checkable
class ConverterPlugin(Protocol):
    """Protocol implemented by conversion plugins."""

    name: str

    def supports(self, source: FormatTag, target: FormatTag) -> bool:
        """Check whether plugin handles the ``source`` to ``target`` direction.

        Parameters
        ----------
        source : FormatTag
            Format of the input file.
        target : FormatTag
            Format of the output file.

        Returns
        -------
        bool
            ``True`` if plugin can perform this conversion.
        """

    def convert(self, input_path: Path, output_path: Path) -> None:
        """Convert ``input_path`` and write the result to ``output_path``.

        Parameters
        ----------
        input_path : Path
            Source file.
        output_path : Path
            Destination file; created or overwritten.

        Raises
        ------
        Exception
            Any failure; the dispatcher turns it into a failed outcome.
        """
