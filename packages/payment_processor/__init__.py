"""Public interface for the ``payment_processor`` package.

Re-exports the API functions and models; there is no runtime logic here.
"""

from .api import (
    compute_amount_stats,
    deduplicate,
    detect_duplicates,
    process_transactions,
    report_to_dict,
    report_to_json,
    validate,
)
from .models import (
    AmountStats,
    DuplicateGroup,
    DuplicateRule,
    RawRecord,
    RejectionReason,
    SummaryReport,
    Transaction,
    TransactionStatus,
)

__all__ = [
    # API
    "process_transactions",
    "validate",
    "detect_duplicates",
    "deduplicate",
    "compute_amount_stats",
    "report_to_dict",
    "report_to_json",
    # Models / types
    "RawRecord",
    "Transaction",
    "TransactionStatus",
    "RejectionReason",
    "DuplicateRule",
    "DuplicateGroup",
    "AmountStats",
    "SummaryReport",
]
