"""In-memory stores for tests, examples and dry runs."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from carteira.domain.cnpj import format_canonical, padded_digits
from carteira.domain.records import HoldingSnapshot, PerformanceRecord, ValuationRecord


class InMemoryFundRegistry:
    def __init__(self, fund_ids: Iterable[str] = ()) -> None:
        self._fund_ids = {padded_digits(item) for item in fund_ids} - {""}

    async def tracked_fund_ids(self) -> set[str]:
        return set(self._fund_ids)


class InMemoryValuationStore:
    def __init__(self, records: Iterable[ValuationRecord] = ()) -> None:
        self.rows: dict[tuple[date, str], ValuationRecord] = {}
        self.upsert_calls = 0
        for record in records:
            self.rows[record.key] = record

    @classmethod
    def from_quotas(cls, fund_id: str, quotas: dict[date, Decimal | str | float]) -> "InMemoryValuationStore":
        canonical = format_canonical(fund_id)
        return cls(ValuationRecord(day, canonical, Decimal(str(value))) for day, value in quotas.items())

    async def upsert_many(self, records: Iterable[ValuationRecord]) -> int:
        self.upsert_calls += 1
        batch = {record.key: record for record in records}
        self.rows.update(batch)
        return len(batch)

    async def quota_on(self, fund_id: str, day: date) -> Decimal | None:
        record = self.rows.get((day, fund_id))
        return record.quota_value if record else None

    async def previous_quota(self, fund_id: str, day: date) -> ValuationRecord | None:
        earlier = [record for (d, f), record in self.rows.items() if f == fund_id and d < day]
        return max(earlier, key=lambda record: record.date) if earlier else None


class InMemoryHoldingSource:
    def __init__(self, holdings: Iterable[HoldingSnapshot] = ()) -> None:
        self.holdings = list(holdings)

    async def active_holdings(self) -> list[HoldingSnapshot]:
        return [holding for holding in self.holdings if holding.is_active]


class InMemoryPerformanceStore:
    def __init__(self) -> None:
        self.rows: dict[tuple[int, int, date], PerformanceRecord] = {}

    async def upsert(self, record: PerformanceRecord) -> bool:
        created = record.key not in self.rows
        self.rows[record.key] = record
        return created

    async def for_portfolio(self, portfolio_id: int, period: date) -> list[PerformanceRecord]:
        return [
            record
            for (portfolio, _, record_period), record in sorted(self.rows.items())
            if portfolio == portfolio_id and record_period == period
        ]


__all__ = [
    "InMemoryFundRegistry",
    "InMemoryHoldingSource",
    "InMemoryPerformanceStore",
    "InMemoryValuationStore",
]
