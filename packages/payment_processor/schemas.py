"""JSON wire models for the summary report.

The report's external field names are fixed (camelCase, e.g.
``totalTransactions``). Domain dataclasses stay snake_case; these pydantic
models own the mapping and serialization details:

- amounts are emitted as JSON numbers;
- ``createdAtUtc`` is emitted as ISO-8601 with a trailing ``Z``;
- count mappings are keyed by enum value.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_serializer
from pydantic.alias_generators import to_camel

from .models import (
    AmountStats,
    DuplicateGroup,
    DuplicateRule,
    RejectionReason,
    SummaryReport,
    Transaction,
    TransactionStatus,
)

JsonAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid", frozen=True
    )


class TransactionOut(_CamelModel):
    transaction_id: str
    merchant_ref: str
    amount: JsonAmount
    currency: str
    status: TransactionStatus
    created_at_utc: datetime

    @field_serializer("created_at_utc")
    def _iso_utc(self, value: datetime) -> str:
        # Shortest round-trip form: fractional seconds only when non-zero,
        # without trailing zeros.
        value = value.astimezone(UTC)
        text = value.replace(microsecond=0, tzinfo=None).isoformat()
        if value.microsecond:
            text += f".{value.microsecond:06d}".rstrip("0")
        return text + "Z"

    @classmethod
    def from_domain(cls, tx: Transaction) -> TransactionOut:
        return cls(
            transaction_id=tx.transaction_id,
            merchant_ref=tx.merchant_ref,
            amount=tx.amount,
            currency=tx.currency,
            status=tx.status,
            created_at_utc=tx.created_at_utc,
        )


class DuplicateGroupOut(_CamelModel):
    rule: DuplicateRule
    transactions: list[TransactionOut]

    @classmethod
    def from_domain(cls, group: DuplicateGroup) -> DuplicateGroupOut:
        return cls(
            rule=group.rule,
            transactions=[TransactionOut.from_domain(tx) for tx in group.transactions],
        )


class AmountStatsOut(_CamelModel):
    min: JsonAmount
    max: JsonAmount
    avg: JsonAmount

    @classmethod
    def from_domain(cls, stats: AmountStats) -> AmountStatsOut:
        return cls(min=stats.min, max=stats.max, avg=stats.avg)


class SummaryReportOut(_CamelModel):
    """Top-level report document."""

    total_transactions: int
    valid_transactions: int
    invalid_transactions: int
    invalid_reasons: dict[RejectionReason, int]
    status_counts: dict[TransactionStatus, int]
    success_amount_stats: AmountStatsOut
    duplicate_groups: list[DuplicateGroupOut]

    @classmethod
    def from_domain(cls, report: SummaryReport) -> SummaryReportOut:
        return cls(
            total_transactions=report.total_transactions,
            valid_transactions=report.valid_transactions,
            invalid_transactions=report.invalid_transactions,
            # Re-seed so every key is present regardless of how the report was built.
            invalid_reasons={r: report.invalid_reasons.get(r, 0) for r in RejectionReason},
            status_counts={s: report.status_counts.get(s, 0) for s in TransactionStatus},
            success_amount_stats=AmountStatsOut.from_domain(report.success_amount_stats),
            duplicate_groups=[DuplicateGroupOut.from_domain(g) for g in report.duplicate_groups],
        )


def report_to_dict(report: SummaryReport) -> dict:
    """JSON-compatible dict of ``report`` using the external field names."""

    return SummaryReportOut.from_domain(report).model_dump(mode="json", by_alias=True)


def report_to_json(report: SummaryReport, *, indent: int | None = 2) -> str:
    return SummaryReportOut.from_domain(report).model_dump_json(by_alias=True, indent=indent)


__all__ = [
    "AmountStatsOut",
    "DuplicateGroupOut",
    "SummaryReportOut",
    "TransactionOut",
    "report_to_dict",
    "report_to_json",
]
