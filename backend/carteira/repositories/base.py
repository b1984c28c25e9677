"""Store contracts consumed by the import and calculation jobs."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Protocol

from carteira.domain.records import HoldingSnapshot, PerformanceRecord, ValuationRecord


class FundRegistry(Protocol):
    """Read-only view over the funds the system tracks."""

    async def tracked_fund_ids(self) -> set[str]:
        """Return registry numbers as 14 digits, zero-padded."""
        ...


class ValuationStore(Protocol):
    async def upsert_many(self, records: Iterable[ValuationRecord]) -> int:
        ...

    async def quota_on(self, fund_id: str, day: date) -> Decimal | None:
        ...

    async def previous_quota(self, fund_id: str, day: date) -> ValuationRecord | None:
        ...


class HoldingSource(Protocol):
    async def active_holdings(self) -> list[HoldingSnapshot]:
        ...


class PerformanceStore(Protocol):
    async def upsert(self, record: PerformanceRecord) -> bool:
        """Insert or overwrite ``record``; return ``True`` when a new row was created."""
        ...

    async def for_portfolio(self, portfolio_id: int, period: date) -> list[PerformanceRecord]:
        ...


__all__ = ["FundRegistry", "HoldingSource", "PerformanceStore", "ValuationStore"]
