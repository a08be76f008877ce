"""Collapse transactions sharing an identifier to one representative."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Transaction


def deduplicate(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Keep the latest transaction per identifier.

    The member with the greatest ``created_at_utc`` wins. When several members
    share that instant, the one encountered first is kept. The result lists
    identifiers in order of first appearance.
    """

    latest: dict[str, Transaction] = {}
    for tx in transactions:
        current = latest.get(tx.transaction_id)
        # Strictly later only, so ties keep the earlier record.
        if current is None or tx.created_at_utc > current.created_at_utc:
            latest[tx.transaction_id] = tx
    return list(latest.values())


__all__ = ["deduplicate"]
