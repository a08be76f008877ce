"""Duplicate detection over validated transactions.

Two independent rules run over the same (pre-deduplication) list:

- ``TXID``: transactions sharing an identifier.
- ``MERCHANT_AMOUNT_DAY``: transactions sharing merchant, amount, currency and
  UTC calendar date, reported only when the group mixes identifiers. A group
  made of one repeated identifier is already covered by ``TXID``.

Groups keep input order, and keys are reported in first-seen order with all
``TXID`` groups before all ``MERCHANT_AMOUNT_DAY`` groups.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from datetime import date
from decimal import Decimal

from .models import DuplicateGroup, DuplicateRule, Transaction

type MerchantDayKey = tuple[str, Decimal, str, date]


def _group_by[K: Hashable](
    transactions: Sequence[Transaction], key: Callable[[Transaction], K]
) -> dict[K, list[Transaction]]:
    # dict preserves first-seen key order; members keep input order.
    groups: dict[K, list[Transaction]] = {}
    for tx in transactions:
        groups.setdefault(key(tx), []).append(tx)
    return groups


def _merchant_day_key(tx: Transaction) -> MerchantDayKey:
    return (tx.merchant_ref, tx.amount, tx.currency, tx.utc_date)


def detect_duplicates(transactions: Sequence[Transaction]) -> list[DuplicateGroup]:
    """Return duplicate groups for ``transactions`` (input order preserved)."""

    groups: list[DuplicateGroup] = []

    for members in _group_by(transactions, lambda tx: tx.transaction_id).values():
        if len(members) > 1:
            groups.append(DuplicateGroup(rule=DuplicateRule.TXID, transactions=tuple(members)))

    for members in _group_by(transactions, _merchant_day_key).values():
        if len(members) < 2:
            continue
        if len({tx.transaction_id for tx in members}) == 1:
            continue
        groups.append(
            DuplicateGroup(rule=DuplicateRule.MERCHANT_AMOUNT_DAY, transactions=tuple(members))
        )

    return groups


__all__ = ["detect_duplicates"]
