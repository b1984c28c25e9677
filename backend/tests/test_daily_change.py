"""Day-over-day quota movement tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from carteira.repositories import InMemoryValuationStore
from carteira.services.valuations import daily_change

FUND = "11.111.111/0001-11"

QUOTAS = {
    date(2026, 1, 2): "1.250000",
    date(2026, 1, 5): "1.262500",
}


async def test_change_against_previous_published_day():
    store = InMemoryValuationStore.from_quotas(FUND, QUOTAS)

    result = await daily_change(store, "11111111000111", date(2026, 1, 5))

    assert result is not None
    assert result.fund_id == FUND
    assert result.previous_date == date(2026, 1, 2)
    assert result.change == Decimal("0.0125")
    assert result.change_pct == pytest.approx(Decimal("1"))


async def test_first_quota_has_no_change():
    store = InMemoryValuationStore.from_quotas(FUND, QUOTAS)

    result = await daily_change(store, FUND, date(2026, 1, 2))

    assert result is not None
    assert result.quota_value == Decimal("1.25")
    assert result.previous_date is None
    assert result.change is None
    assert result.change_pct is None


async def test_day_without_quota_returns_none():
    store = InMemoryValuationStore.from_quotas(FUND, QUOTAS)

    assert await daily_change(store, FUND, date(2026, 1, 3)) is None
