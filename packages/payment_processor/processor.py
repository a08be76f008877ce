"""Batch orchestration: validate, detect duplicates, deduplicate, aggregate.

:func:`process_transactions` is the single entry point of the core. It is a
pure function of its input: no I/O, no shared state, and no record can abort
the batch (each one is classified individually).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Any

from .dedupe import deduplicate
from .duplicates import detect_duplicates
from .logging_setup import get_logger
from .models import (
    AmountStats,
    RawRecord,
    RejectionReason,
    SummaryReport,
    Transaction,
    TransactionStatus,
)
from .validation import validate

logger = get_logger(__name__)

_CENT = Decimal("0.01")


def _coerce(record: RawRecord | Mapping[str, Any]) -> RawRecord:
    if isinstance(record, RawRecord):
        return record
    return RawRecord.model_validate(record)


def _working_precision(amounts: Sequence[Decimal]) -> int:
    # Digits from the leading digit of the sum down past the cent position, with
    # guard digits so the division never rounds before the final quantize.
    count_digits = len(str(len(amounts)))
    top = max(a.adjusted() for a in amounts) + count_digits + 1
    bottom = min(min(a.as_tuple().exponent for a in amounts), -2) - count_digits - 2
    return max(28, top - bottom + 1)


def round_average(amounts: Sequence[Decimal]) -> Decimal:
    """Mean of non-empty finite ``amounts``, to 2 places (half-even).

    Summation and division run in a context wide enough for the operands, so
    arbitrarily large amounts neither lose digits nor overflow the quantize.
    """

    with localcontext() as ctx:
        ctx.prec = _working_precision(amounts)
        total = sum(amounts, Decimal(0))
        return (total / len(amounts)).quantize(_CENT, rounding=ROUND_HALF_EVEN)


def compute_amount_stats(transactions: Sequence[Transaction]) -> AmountStats:
    """Min/max/average of amounts; all zero for an empty sequence."""

    if not transactions:
        return AmountStats()
    amounts = [tx.amount for tx in transactions]
    return AmountStats(
        min=min(amounts),
        max=max(amounts),
        avg=round_average(amounts),
    )


def process_transactions(records: Iterable[RawRecord | Mapping[str, Any]]) -> SummaryReport:
    """Build the :class:`SummaryReport` for a batch of raw records.

    Steps, in order:

    1. Validate every record in input order, tallying rejection reasons.
    2. Detect duplicate groups over the valid, not yet deduplicated, list.
    3. Deduplicate by identifier (latest timestamp wins).
    4. Count statuses and compute SUCCESS amount statistics on the
       deduplicated set.

    Plain mappings are accepted and coerced through :class:`RawRecord`.
    """

    invalid_reasons = {reason: 0 for reason in RejectionReason}
    valid: list[Transaction] = []
    total = 0

    for pos, record in enumerate(records):
        total += 1
        outcome = validate(_coerce(record))
        if isinstance(outcome, RejectionReason):
            invalid_reasons[outcome] += 1
            logger.debug("record %d rejected: %s", pos, outcome)
        else:
            valid.append(outcome)

    duplicate_groups = detect_duplicates(valid)
    for group in duplicate_groups:
        logger.debug(
            "duplicate group rule=%s ids=%s",
            group.rule,
            [tx.transaction_id for tx in group.transactions],
        )

    deduplicated = deduplicate(valid)

    status_counts = {status: 0 for status in TransactionStatus}
    for tx in deduplicated:
        status_counts[tx.status] += 1

    successes = [tx for tx in deduplicated if tx.status is TransactionStatus.SUCCESS]

    report = SummaryReport(
        total_transactions=total,
        valid_transactions=len(valid),
        invalid_transactions=total - len(valid),
        invalid_reasons=invalid_reasons,
        status_counts=status_counts,
        success_amount_stats=compute_amount_stats(successes),
        duplicate_groups=tuple(duplicate_groups),
    )
    logger.info(
        "processed %d records: %d valid, %d invalid, %d unique, %d duplicate groups",
        report.total_transactions,
        report.valid_transactions,
        report.invalid_transactions,
        len(deduplicated),
        len(report.duplicate_groups),
    )
    return report


__all__ = ["compute_amount_stats", "process_transactions", "round_average"]
