"""Suite markers by folder, and e2e gating on the installed console script."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

CONSOLE_SCRIPT = "unified-convert"
SUITE_MARKERS = {
    "unit_tests": "unit",
    "integration_tests": "integration",
    "e2e_tests": "e2e",
}


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each test with its suite; skip e2e tests without the console script."""
    del config
    script_missing = shutil.which(CONSOLE_SCRIPT) is None
    for item in items:
        suite = next(
            (
                SUITE_MARKERS[part]
                for part in Path(str(item.fspath)).parts
                if part in SUITE_MARKERS
            ),
            None,
        )
        if suite is None:
            continue
        item.add_marker(getattr(pytest.mark, suite))
        if suite == "e2e" and script_missing:
            item.add_marker(
                pytest.mark.skip(reason=f"'{CONSOLE_SCRIPT}' is not installed")
            )
