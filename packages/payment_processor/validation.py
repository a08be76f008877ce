"""Field validation: turn a :class:`RawRecord` into a ``Transaction`` or a reason.

Rules are an ordered tuple of ``(reason, check)`` pairs evaluated
short-circuit; the first failing check decides the :class:`RejectionReason`.
Checks after ``MISSING_FIELDS`` may assume every field is present.
"""

from __future__ import annotations

import string
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from .models import RawRecord, RejectionReason, Transaction, TransactionStatus

type ValidationOutcome = Transaction | RejectionReason

_CURRENCY_ALPHABET = frozenset(string.ascii_uppercase)
_STATUS_VALUES = frozenset(s.value for s in TransactionStatus)


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_utc_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp that carries an explicit UTC designator.

    Accepts a trailing ``Z`` or a zero offset (``+00:00``); fractional seconds
    are optional. Returns ``None`` for unparseable, unzoned, or non-UTC input.
    """

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    offset = parsed.utcoffset()
    if offset is None or offset != timedelta(0):
        return None
    return parsed.astimezone(UTC)


def _has_all_fields(raw: RawRecord) -> bool:
    return not any(
        _is_blank(v)
        for v in (
            raw.transaction_id,
            raw.merchant_ref,
            raw.amount,
            raw.currency,
            raw.status,
            raw.created_at_utc,
        )
    )


def _has_positive_amount(raw: RawRecord) -> bool:
    amount = raw.amount
    # NaN does not compare; infinities are not amounts.
    return amount is not None and amount.is_finite() and amount > 0


def _has_valid_currency(raw: RawRecord) -> bool:
    currency = raw.currency or ""
    return len(currency) == 3 and all(ch in _CURRENCY_ALPHABET for ch in currency)


def _has_valid_status(raw: RawRecord) -> bool:
    return raw.status in _STATUS_VALUES


def _has_utc_timestamp(raw: RawRecord) -> bool:
    return raw.created_at_utc is not None and parse_utc_timestamp(raw.created_at_utc) is not None


_RULES: tuple[tuple[RejectionReason, Callable[[RawRecord], bool]], ...] = (
    (RejectionReason.MISSING_FIELDS, _has_all_fields),
    (RejectionReason.INVALID_AMOUNT, _has_positive_amount),
    (RejectionReason.INVALID_CURRENCY, _has_valid_currency),
    (RejectionReason.INVALID_STATUS, _has_valid_status),
    (RejectionReason.INVALID_TIMESTAMP, _has_utc_timestamp),
)


def validate(raw: RawRecord) -> ValidationOutcome:
    """Validate ``raw`` and return a ``Transaction`` or the first failing reason.

    Pure and deterministic. Field values are copied verbatim; the amount keeps
    its exact decimal value and the timestamp becomes an aware UTC datetime.
    """

    for reason, check in _RULES:
        if not check(raw):
            return reason

    # Every rule passed, so all fields are present and well-formed.
    return Transaction(
        transaction_id=raw.transaction_id,
        merchant_ref=raw.merchant_ref,
        amount=raw.amount,
        currency=raw.currency,
        status=TransactionStatus(raw.status),
        created_at_utc=parse_utc_timestamp(raw.created_at_utc),
    )


__all__ = ["ValidationOutcome", "parse_utc_timestamp", "validate"]
