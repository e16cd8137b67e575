"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DispatchOptions:
    """Dispatcher behavior toggles.

    Attributes
    ----------
    cleanup_partial_output : bool, default=True
        Delete an output file created by a plugin call that then failed.
        Files that existed before the call are always left in place.
    """

    cleanup_partial_output: bool = True
