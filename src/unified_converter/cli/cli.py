#!/usr/bin/env python3
"""
unified_converter.cli.cli

Typer-based CLI for converting files between CSV, JSON, XML, Excel, text
and PDF.

Examples
--------
Install core + CLI only:

    uv pip install -e ".[cli]"

Install CLI + Excel and PDF output support:

    uv pip install -e ".[cli,excel,pdf]"

Convert with source auto-detection:

    unified-convert convert data.csv data.json --to json
"""

from __future__ import annotations

import logging
import os
import traceback
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from unified_converter.errors import ConversionError, PluginError
from unified_converter.types import FormatTag

if TYPE_CHECKING:
    from unified_converter.plugins.registry import ConversionRegistry

app = typer.Typer(
    name="unified-convert",
    help="Convert files between CSV, JSON, XML, Excel, text and PDF.",
    no_args_is_help=True,
)

LOG_FILE_ENV = "UNIFIED_CONVERTER_LOG_FILE"
LOG_FILE_HELP = f"Audit log CSV file (env: {LOG_FILE_ENV})."
PLUGIN_MODULE_HELP = "Extra plugin module (import path or .py file, repeatable)."


def _default_log_file() -> Path:
    from unified_converter.infrastructure.audit_log import DEFAULT_LOG_FILE

    return Path(os.getenv(LOG_FILE_ENV, DEFAULT_LOG_FILE))


# -----------------------------
# Dependency checks / utilities
# -----------------------------
@dataclass(frozen=True)
class MissingDep:
    """Represent a missing optional dependency."""

    import_name: str
    extra_name: str
    purpose: str


_EXCEL_DEP = MissingDep("openpyxl", "excel", "Excel workbook output")
_PDF_DEP = MissingDep("reportlab", "pdf", "PDF document output")


def _is_importable(module: str) -> bool:
    """Check whether a module can be resolved.

    Parameters
    ----------
    module : str
        Module name to resolve.

    Returns
    -------
    bool
        ``True`` if the module can be imported, otherwise ``False``.
    """
    try:
        import importlib.util

        return importlib.util.find_spec(module) is not None
    except (ImportError, ValueError):
        return False


def _require_deps(missing: Sequence[MissingDep]) -> None:
    """Raise a Typer error if any required deps are missing.

    Parameters
    ----------
    missing : Sequence[MissingDep]
        Missing dependency requirements for a command.
    """
    not_found = [d for d in missing if not _is_importable(d.import_name)]
    if not not_found:
        return

    extras = sorted({d.extra_name for d in not_found})
    details = "\n".join(
        f"- Missing '{d.import_name}' ({d.purpose}). Install extra: .[{d.extra_name}]"
        for d in not_found
    )

    uv_hint = f'uv pip install -e ".[cli,{",".join(extras)}]"'
    pip_hint = f'pip install "unified-file-converter[cli,{",".join(extras)}]"'

    msg = (
        "Missing optional dependencies for this command.\n\n"
        f"{details}\n\n"
        "Install with uv (recommended):\n"
        f"  {uv_hint}\n\n"
        "Or with pip:\n"
        f"  {pip_hint}\n"
    )
    raise typer.BadParameter(msg)


def _plugin_deps(plugin: object | None) -> list[MissingDep]:
    """Return the optional dependencies a bound built-in plugin needs.

    External plugins bound to the same pair bring their own dependencies
    and are not checked here.
    """
    from unified_converter.plugins.builtins import CsvToExcelPlugin, TextToPdfPlugin

    needs: dict[type, MissingDep] = {
        CsvToExcelPlugin: _EXCEL_DEP,
        TextToPdfPlugin: _PDF_DEP,
    }
    dep = needs.get(type(plugin))
    return [dep] if dep is not None else []


def _parse_format(value: str | None) -> FormatTag | None:
    """Parse a format option, rejecting unknown names and ``UNKNOWN``."""
    if value is None:
        return None
    try:
        tag = FormatTag.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if tag is FormatTag.UNKNOWN:
        raise typer.BadParameter("UNKNOWN is not a convertible format.")
    return tag


def _build_registry(plugin_modules: list[str] | None) -> ConversionRegistry:
    """Create the default registry, surfacing plugin load errors as CLI errors."""
    from unified_converter.plugins.registry import create_default_registry

    try:
        return create_default_registry(extra_modules=plugin_modules)
    except PluginError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _display(value: object) -> str:
    """Render paths and messages printable even for undecodable file names."""
    return str(value).encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised during conversion.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {_display(exc)}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Log progress (-v info, -vv debug)."
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    verbose : int, default=0
        Logging verbosity level.
    """
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="File to convert.",
    ),
    output_path: Path = typer.Argument(..., help="Where to write the converted file."),
    to_format: str = typer.Option(..., "--to", "-t", help="Target format."),
    from_format: str | None = typer.Option(
        None, "--from", "-f", help="Source format (detected when omitted)."
    ),
    log_file: Path | None = typer.Option(None, "--log-file", help=LOG_FILE_HELP),
    no_log: bool = typer.Option(False, "--no-log", help="Do not write the audit log."),
    plugin_modules: list[str] | None = typer.Option(
        None, "--plugin-module", help=PLUGIN_MODULE_HELP
    ),
    backup: bool = typer.Option(
        False, "--backup", help="Back up an existing output file before converting."
    ),
    keep_partial: bool = typer.Option(
        False, "--keep-partial", help="Keep partially written output on failure."
    ),
) -> None:
    """Convert one file to the target format.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    input_path : Path
        File to convert.
    output_path : Path
        Destination file.
    to_format : str
        Target format name (case-insensitive).
    from_format : str | None
        Source format name; detected from the file when omitted.

    Notes
    -----
    - Excel output requires the `excel` extra; PDF output requires `pdf`.
    - Every attempt is appended to the audit log unless ``--no-log`` is set.
    """
    from unified_converter.application.options import DispatchOptions
    from unified_converter.detection import detect_format
    from unified_converter.dispatcher import Dispatcher
    from unified_converter.fileutils import (
        create_backup,
        format_duration,
        format_file_size,
    )
    from unified_converter.infrastructure.audit_log import CsvAuditLog, NullRecorder

    debug: bool = bool(ctx.obj.get("debug", False))
    target = _parse_format(to_format)
    source = _parse_format(from_format)
    registry = _build_registry(plugin_modules)
    resolved = source if source is not None else detect_format(input_path)
    _require_deps(_plugin_deps(registry.lookup(resolved, target)))

    recorder = NullRecorder() if no_log else CsvAuditLog(log_file or _default_log_file())
    dispatcher = Dispatcher(
        registry,
        recorder=recorder,
        options=DispatchOptions(cleanup_partial_output=not keep_partial),
    )

    if backup and output_path.exists():
        saved = create_backup(output_path)
        if saved is not None:
            typer.echo(f"Backup: {_display(saved)}")

    try:
        outcome = dispatcher.convert(input_path, output_path, source, target)
    except Exception as exc:
        # Recorder failures are the only thing the dispatcher lets through.
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if not outcome.success:
        raise typer.Exit(
            code=_print_conversion_error(ConversionError(outcome.error or "failed"), debug)
        )

    size = output_path.stat().st_size if output_path.exists() else 0
    typer.echo(
        f"✓ Saved: {_display(output_path)} ({outcome.source_format} -> {outcome.target_format}, "
        f"{format_file_size(size)}, {format_duration(int(outcome.elapsed_seconds * 1000))})"
    )


@app.command("detect")
def detect_cmd(
    path: Path = typer.Argument(..., help="File to inspect."),
) -> None:
    """Print the detected format of a file (UNKNOWN if undetermined)."""
    from unified_converter.detection import detect_format

    typer.echo(detect_format(path).value)


@app.command("formats")
def formats_cmd(
    from_format: str | None = typer.Option(
        None, "--from", "-f", help="Only list targets reachable from this format."
    ),
    plugin_modules: list[str] | None = typer.Option(
        None, "--plugin-module", help=PLUGIN_MODULE_HELP
    ),
) -> None:
    """List supported conversions."""
    registry = _build_registry(plugin_modules)
    source = _parse_format(from_format)
    order = list(FormatTag.convertible())

    if source is not None:
        targets = sorted(registry.supported_targets(source), key=order.index)
        if not targets:
            typer.echo(f"No conversions available from {source}.")
            return
        for target in targets:
            typer.echo(target.value)
        return

    for src in sorted(registry.supported_sources(), key=order.index):
        for target in sorted(registry.supported_targets(src), key=order.index):
            plugin = registry.lookup(src, target)
            typer.echo(f"{src.value} -> {target.value}\t{plugin.name if plugin else ''}")


@app.command("history")
def history_cmd(
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of records."),
    log_file: Path | None = typer.Option(None, "--log-file", help=LOG_FILE_HELP),
) -> None:
    """Show the most recent audit log records."""
    from unified_converter.fileutils import TIMESTAMP_FORMAT
    from unified_converter.infrastructure.audit_log import CsvAuditLog

    records = CsvAuditLog(log_file or _default_log_file()).recent(limit)
    if not records:
        typer.echo("No conversions recorded.")
        return
    for record in records:
        line = (
            f"{record.timestamp.strftime(TIMESTAMP_FORMAT)}  {record.status.value:<7}  "
            f"{record.from_format} -> {record.to_format}  "
            f"{record.input_path} -> {record.output_path}"
        )
        if record.message:
            line += f"  ({record.message})"
        typer.echo(line)


def main() -> None:
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
