"""Load transaction records from JSON and write report JSON.

These helpers sit at the boundary, outside the pure core. Structural problems
(malformed JSON, a non-array document, a field of the wrong JSON type) raise
:class:`RecordsFormatError`; filesystem errors propagate unchanged for the
caller to report.
"""

from __future__ import annotations

import json
from decimal import Decimal
from os import PathLike
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .logging_setup import get_logger
from .models import RawRecord, SummaryReport
from .schemas import report_to_json

logger = get_logger(__name__)

_RECORD_LIST = TypeAdapter(list[RawRecord])


class RecordsFormatError(ValueError):
    """Input text is not a JSON array of transaction record objects."""


def parse_records(text: str) -> list[RawRecord]:
    """Parse a JSON array of records; numbers are decoded as exact decimals.

    A top-level ``null`` is treated as an empty batch.
    """

    try:
        data = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise RecordsFormatError(f"invalid JSON: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise RecordsFormatError(
            f"expected a JSON array of transaction records, got {type(data).__name__}"
        )

    try:
        return _RECORD_LIST.validate_python(data)
    except ValidationError as exc:
        raise RecordsFormatError(
            f"malformed transaction record(s): {exc.error_count()} error(s)\n{exc}"
        ) from exc


def load_records(path: str | PathLike[str]) -> list[RawRecord]:
    p = Path(path)
    records = parse_records(p.read_text(encoding="utf-8"))
    logger.debug("loaded %d records from %s", len(records), p)
    return records


def write_report(report: SummaryReport, path: str | PathLike[str]) -> Path:
    """Write ``report`` as indented JSON and return the absolute output path."""

    p = Path(path).resolve()
    p.write_text(report_to_json(report) + "\n", encoding="utf-8")
    logger.debug("wrote report to %s", p)
    return p


__all__ = ["RecordsFormatError", "load_records", "parse_records", "write_report"]
