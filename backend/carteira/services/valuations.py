"""Day-over-day quota movement read from the valuation store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from carteira.domain.cnpj import format_canonical
from carteira.repositories.base import ValuationStore

from .performance import HUNDRED


@dataclass
class DailyChange:
    fund_id: str
    valuation_date: date
    quota_value: Decimal
    previous_date: date | None = None
    previous_quota_value: Decimal | None = None
    change: Decimal | None = None
    change_pct: Decimal | None = None


async def daily_change(store: ValuationStore, fund_id: str, day: date) -> DailyChange | None:
    """Compare the quota published on ``day`` with the fund's previous published quota.

    Returns ``None`` when there is no quota on ``day``. Without an earlier
    quota both deltas stay empty; the percentage also stays empty when the
    earlier quota is not positive.
    """

    fund_id = format_canonical(fund_id)
    quota = await store.quota_on(fund_id, day)
    if quota is None:
        return None

    result = DailyChange(fund_id=fund_id, valuation_date=day, quota_value=quota)
    previous = await store.previous_quota(fund_id, day)
    if previous is None:
        return result

    result.previous_date = previous.date
    result.previous_quota_value = previous.quota_value
    result.change = quota - previous.quota_value
    if previous.quota_value > 0:
        result.change_pct = result.change / previous.quota_value * HUNDRED
    return result


__all__ = ["DailyChange", "daily_change"]
