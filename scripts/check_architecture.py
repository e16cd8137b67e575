#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/unified_converter"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = _read(path)
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    codec_imports = [
        "import openpyxl",
        "from openpyxl",
        "import reportlab",
        "from reportlab",
    ]
    _assert_no_imports(PACKAGE / "cli/cli.py", codec_imports)

    core_modules = [
        PACKAGE / "dispatcher.py",
        PACKAGE / "detection.py",
        PACKAGE / "plugins/registry.py",
        *(PACKAGE / "application").glob("*.py"),
    ]
    for path in core_modules:
        _assert_no_imports(path, ["import typer", "from typer", *codec_imports])

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
