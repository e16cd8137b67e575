"""End-to-end smoke tests for the installed console script."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import unified_converter


def test_package_import_smoke() -> None:
    """Ensure package can be imported in the test process."""
    assert unified_converter.__version__


def test_cli_help_smoke() -> None:
    """Ensure the installed CLI entrypoint responds to --help."""
    result = subprocess.run(
        ["unified-convert", "--help"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr
    assert "Convert files between" in result.stdout


def test_cli_missing_input_fails_cleanly(tmp_path: Path) -> None:
    """Ensure CLI returns a user-facing validation error for a missing input."""
    result = subprocess.run(
        [
            "unified-convert",
            "convert",
            str(tmp_path / "definitely-missing.csv"),
            str(tmp_path / "out.json"),
            "--to",
            "json",
        ],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode != 0
    assert "Traceback" not in result.stderr


def test_cli_csv_json_csv_roundtrip(tmp_path: Path) -> None:
    """Convert CSV to JSON and back through the console script."""
    source = tmp_path / "rows.csv"
    source.write_text("id,name\n1,Ann\n2,Bob\n", encoding="utf-8")
    as_json = tmp_path / "rows.json"
    back = tmp_path / "back.csv"
    log_file = tmp_path / "audit.csv"

    for src, dst, target in ((source, as_json, "json"), (as_json, back, "csv")):
        result = subprocess.run(
            ["unified-convert", "convert", str(src), str(dst), "--to", target,
             "--log-file", str(log_file)],
            capture_output=True,
            text=True,
            check=False,
        )
        assert result.returncode == 0, result.stderr

    assert json.loads(as_json.read_text(encoding="utf-8"))[1] == {"id": "2", "name": "Bob"}
    assert back.read_text(encoding="utf-8") == source.read_text(encoding="utf-8")

    history = subprocess.run(
        ["unified-convert", "history", "--log-file", str(log_file)],
        capture_output=True,
        text=True,
        check=False,
    )
    assert history.returncode == 0
    assert len(history.stdout.splitlines()) == 2
