"""CLI for the ``payment_processor`` package.

Exposes a callable command handler (:func:`cmd_process`) and a Typer-based
console interface. A local ``.env`` is loaded with ``python-dotenv`` before
logging is configured, so ``PAYMENT_PROCESSOR_LOG_LEVEL`` may live there.
Business logic lives in :mod:`payment_processor.processor`; this module only
moves JSON in and out and maps failures to exit codes.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .logging_setup import LOG_LEVEL_ENV_VAR, configure_logging, get_logger

logger = get_logger(__name__)


def cmd_process(input_path: str, output_path: str) -> int:
    """Read records from ``input_path``, write the report to ``output_path``.

    Returns a process exit code: ``0`` on success, ``1`` when the input cannot
    be read or parsed or the output cannot be written. Errors are printed to
    stderr as ``Error: ...``.
    """

    from .ingest import RecordsFormatError, load_records, write_report
    from .processor import process_transactions

    logger.debug("processing %s -> %s", input_path, output_path)
    try:
        records = load_records(input_path)
    except FileNotFoundError:
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1
    except PermissionError as e:
        print(f"Error: Access denied to file: {e}", file=sys.stderr)
        return 1
    except RecordsFormatError as e:
        print(f"Error: Invalid JSON format in input file: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: I/O error occurred: {e}", file=sys.stderr)
        return 1

    report = process_transactions(records)

    try:
        written = write_report(report, output_path)
    except PermissionError as e:
        print(f"Error: Access denied to file: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: I/O error occurred: {e}", file=sys.stderr)
        return 1

    print(f"Report generated at {written}")
    return 0


# ---- Typer-based console interface -------------------------------------------


# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
INPUT_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--input",
    help="Input JSON file containing transactions",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)

OUTPUT_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--output",
    help="Output JSON file for the report",
    dir_okay=False,
    file_okay=True,
)

LOG_LEVEL_OPTION: OptionInfo = typer.Option(
    ...,
    "--log-level",
    help=f"Log level name or number (falls back to ${LOG_LEVEL_ENV_VAR}, then INFO).",
)


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Payment Transaction Processor: validate, deduplicate and summarize a batch.",
)


@app.command("process")
def process_cmd(
    input_path: Annotated[Path, INPUT_OPTION],
    output_path: Annotated[Path, OUTPUT_OPTION],
) -> None:
    """Process a JSON batch of transactions and write a summary report."""

    code = cmd_process(str(input_path), str(output_path))
    if code:
        raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    log_level: Annotated[str | None, LOG_LEVEL_OPTION] = None,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables) and configures package logging. The level comes
    from ``--log-level``, else from the environment as loaded above.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    if log_level is None:
        log_level = os.getenv(LOG_LEVEL_ENV_VAR)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m payment_processor.cli`
    app()
