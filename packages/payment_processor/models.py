"""Data models for ``payment_processor``.

Two layers live here:

- ``RawRecord``: the loosely-typed boundary record, validated with pydantic
  only for *shape* (every field optional). Content rules are applied later by
  :mod:`payment_processor.validation`.
- Domain values (``Transaction``, ``DuplicateGroup``, ``AmountStats``,
  ``SummaryReport``): frozen dataclasses created fresh per batch.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionStatus(StrEnum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PENDING = "PENDING"


class RejectionReason(StrEnum):
    """Why a raw record was rejected. Declaration order is evaluation order."""

    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_CURRENCY = "INVALID_CURRENCY"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"


class DuplicateRule(StrEnum):
    TXID = "TXID"
    MERCHANT_AMOUNT_DAY = "MERCHANT_AMOUNT_DAY"


# ---------------------------------------------------------------------------
# Boundary record
# ---------------------------------------------------------------------------

# Lower-cased external key -> field alias. Snake-case names are accepted too so
# records can be built directly from Python code.
_KEY_ALIASES: dict[str, str] = {
    "transactionid": "transactionId",
    "transaction_id": "transactionId",
    "merchantref": "merchantRef",
    "merchant_ref": "merchantRef",
    "amount": "amount",
    "currency": "currency",
    "status": "status",
    "createdatutc": "createdAtUtc",
    "created_at_utc": "createdAtUtc",
}


class RawRecord(BaseModel):
    """A single input record as received from the caller.

    Keys are matched case-insensitively (``TransactionID`` and
    ``transactionId`` are the same field) and unknown keys are ignored. String
    values are kept verbatim; emptiness is judged by the validator, not here.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    transaction_id: str | None = Field(default=None, alias="transactionId")
    merchant_ref: str | None = Field(default=None, alias="merchantRef")
    amount: Decimal | None = Field(default=None, alias="amount")
    currency: str | None = Field(default=None, alias="currency")
    status: str | None = Field(default=None, alias="status")
    created_at_utc: str | None = Field(default=None, alias="createdAtUtc")

    @model_validator(mode="before")
    @classmethod
    def _fold_key_case(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        folded: dict[str, Any] = {}
        for key, value in data.items():
            alias = _KEY_ALIASES.get(str(key).lower())
            if alias is not None:
                folded[alias] = value
        return folded


# ---------------------------------------------------------------------------
# Domain values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A fully validated payment transaction.

    Only :func:`payment_processor.validation.validate` builds these; an
    instance is never partially valid. ``created_at_utc`` is timezone-aware and
    normalized to UTC.
    """

    transaction_id: str
    merchant_ref: str
    amount: Decimal
    currency: str
    status: TransactionStatus
    created_at_utc: datetime

    @property
    def utc_date(self) -> date:
        return self.created_at_utc.date()


@dataclass(frozen=True, slots=True)
class DuplicateGroup:
    """Transactions sharing a key under one detection rule, in input order."""

    rule: DuplicateRule
    transactions: tuple[Transaction, ...]


_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class AmountStats:
    min: Decimal = _ZERO
    max: Decimal = _ZERO
    avg: Decimal = _ZERO


def _zero_counts[K](keys: Iterable[K]) -> dict[K, int]:
    return {k: 0 for k in keys}


@dataclass(frozen=True, slots=True)
class SummaryReport:
    """Aggregated outcome of one batch.

    ``invalid_reasons`` and ``status_counts`` always carry every enum member,
    defaulting to zero, so consumers may index any key unconditionally.
    """

    total_transactions: int = 0
    valid_transactions: int = 0
    invalid_transactions: int = 0
    invalid_reasons: dict[RejectionReason, int] = field(
        default_factory=lambda: _zero_counts(RejectionReason)
    )
    status_counts: dict[TransactionStatus, int] = field(
        default_factory=lambda: _zero_counts(TransactionStatus)
    )
    success_amount_stats: AmountStats = field(default_factory=AmountStats)
    duplicate_groups: tuple[DuplicateGroup, ...] = ()


__all__ = [
    "AmountStats",
    "DuplicateGroup",
    "DuplicateRule",
    "RawRecord",
    "RejectionReason",
    "SummaryReport",
    "Transaction",
    "TransactionStatus",
]
