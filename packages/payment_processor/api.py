"""Public API for the ``payment_processor`` package.

A stable import surface over the core components. Each function is pure and
total over its input; none performs I/O.
"""

from __future__ import annotations

from .dedupe import deduplicate
from .duplicates import detect_duplicates
from .processor import compute_amount_stats, process_transactions
from .schemas import report_to_dict, report_to_json
from .validation import validate

__all__ = [
    "compute_amount_stats",
    "deduplicate",
    "detect_duplicates",
    "process_transactions",
    "report_to_dict",
    "report_to_json",
    "validate",
]
