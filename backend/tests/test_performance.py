"""Performance calculation job tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from carteira.domain.records import HoldingSnapshot, PerformanceRecord
from carteira.repositories import InMemoryHoldingSource, InMemoryPerformanceStore, InMemoryValuationStore
from carteira.services.performance import (
    PerformanceCalculator,
    earnings_for,
    period_return,
    summarize_portfolio,
)

FUND = "11.111.111/0001-11"
MARCH_2025 = date(2025, 3, 31)

# 2025-03-01 is a Saturday and 2024-03-31 a Sunday, so every anchor falls back
# to the previous business day.
QUOTAS = {
    date(2024, 3, 29): "90.000000",
    date(2024, 12, 31): "95.000000",
    date(2025, 2, 28): "100.000000",
    date(2025, 3, 31): "101.130000",
}


def _holding(holding_id: int = 10, fund_id: str = FUND, invested: str = "10000", quotas: str = "98.5"):
    return HoldingSnapshot(
        portfolio_id=1,
        holding_id=holding_id,
        fund_id=fund_id,
        quotas_held=Decimal(quotas),
        total_invested_value=Decimal(invested),
    )


def _calculator(holdings, quotas=QUOTAS, settings=None, reporter=None):
    store = InMemoryPerformanceStore()
    calculator = PerformanceCalculator(
        InMemoryHoldingSource(holdings),
        InMemoryValuationStore.from_quotas(FUND, quotas),
        store,
        reporter=reporter,
        settings=settings,
    )
    return calculator, store


def test_period_return_matches_quota_ratio():
    assert period_return(Decimal("100.000000"), Decimal("101.130000")) == pytest.approx(Decimal("1.13"))
    assert period_return(Decimal("0"), Decimal("101.13")) == Decimal("0")


def test_earnings_for_zero_investment_or_missing_return():
    assert earnings_for(Decimal("1.13"), Decimal("10000")) == Decimal("113")
    assert earnings_for(Decimal("1.13"), Decimal("0")) == Decimal("0")
    assert earnings_for(None, Decimal("10000")) == Decimal("0")


async def test_run_writes_monthly_yearly_and_trailing_returns(settings, reporter):
    calculator, store = _calculator([_holding()], settings=settings, reporter=reporter)

    summary = await calculator.run(target_date=date(2025, 3, 20))

    assert summary.period == MARCH_2025
    assert summary.holdings_processed == 1
    assert summary.records_created == 1
    record = store.rows[(1, 10, MARCH_2025)]
    assert record.monthly_return_pct == Decimal("1.13")
    assert record.yearly_return_pct == pytest.approx(Decimal("6.4526315789"))
    assert record.trailing_12m_return_pct == pytest.approx(Decimal("12.3666666667"))
    assert record.earnings_amount == Decimal("113")
    assert record.initial_balance == Decimal("10000")


async def test_missing_anchors_leave_returns_empty(settings, reporter):
    quotas = {date(2025, 2, 28): "100", date(2025, 3, 31): "101.13"}
    calculator, store = _calculator([_holding()], quotas=quotas, settings=settings, reporter=reporter)

    await calculator.run(target_date=MARCH_2025)

    record = store.rows[(1, 10, MARCH_2025)]
    assert record.yearly_return_pct is None
    assert record.trailing_12m_return_pct is None
    assert record.monthly_return_pct == Decimal("1.13")


async def test_rerun_overwrites_the_same_record(settings, reporter):
    calculator, store = _calculator([_holding()], settings=settings, reporter=reporter)
    await calculator.run(target_date=MARCH_2025)

    calculator.holdings = InMemoryHoldingSource([_holding(invested="20000")])
    summary = await calculator.run(target_date=MARCH_2025)

    assert summary.records_created == 0
    assert summary.records_updated == 1
    assert len(store.rows) == 1
    assert store.rows[(1, 10, MARCH_2025)].earnings_amount == Decimal("226")


async def test_holding_without_month_end_quota_is_skipped(settings, reporter):
    quotas = {date(2025, 2, 28): "100", date(2025, 3, 25): "101"}
    calculator, store = _calculator([_holding()], quotas=quotas, settings=settings, reporter=reporter)

    summary = await calculator.run(target_date=MARCH_2025)

    assert summary.holdings_skipped == 1
    assert summary.errors == 0
    assert store.rows == {}


async def test_inactive_holdings_are_ignored(settings, reporter):
    calculator, store = _calculator([_holding(quotas="0")], settings=settings, reporter=reporter)

    summary = await calculator.run(target_date=MARCH_2025)

    assert summary.holdings_processed == 0
    assert store.rows == {}


async def test_failing_holding_does_not_abort_batch(settings, reporter):
    holdings = [_holding(holding_id=1, fund_id="not-a-registry-number"), _holding(holding_id=2)]
    calculator, store = _calculator(holdings, settings=settings, reporter=reporter)

    summary = await calculator.run(target_date=MARCH_2025)

    assert summary.errors == 1
    assert summary.records_created == 1
    assert (1, 2, MARCH_2025) in store.rows
    failure = reporter.by_level("error")[0]
    assert failure.fields["holding_id"] == 1
    assert isinstance(failure.exc, ValueError)


async def test_find_quota_walks_back_at_most_five_days(settings):
    calculator, _ = _calculator([], quotas={date(2025, 6, 10): "1.5"}, settings=settings)

    assert await calculator.find_quota(FUND, date(2025, 6, 13)) == Decimal("1.5")
    assert await calculator.find_quota(FUND, date(2025, 6, 15)) == Decimal("1.5")
    assert await calculator.find_quota(FUND, date(2025, 6, 16)) is None
    assert await calculator.find_quota(FUND, date(2025, 6, 9)) is None


async def test_trailing_anchor_is_month_end_a_year_earlier(settings, reporter):
    quotas = {
        date(2024, 3, 14): "50",
        date(2025, 2, 28): "100",
        date(2025, 3, 31): "110",
    }
    calculator, store = _calculator([_holding()], quotas=quotas, settings=settings, reporter=reporter)

    await calculator.run(target_date=date(2025, 3, 15))
    assert store.rows[(1, 10, MARCH_2025)].trailing_12m_return_pct is None

    calculator.valuations = InMemoryValuationStore.from_quotas(FUND, {**quotas, date(2024, 3, 28): "55"})
    await calculator.run(target_date=date(2025, 3, 15))
    assert store.rows[(1, 10, MARCH_2025)].trailing_12m_return_pct == Decimal("100")


def test_summarize_portfolio_weights_by_allocation():
    records = [
        PerformanceRecord(1, 1, MARCH_2025, Decimal("1.0"), None, None, Decimal("100")),
        PerformanceRecord(1, 2, MARCH_2025, Decimal("2.0"), None, None, Decimal("50")),
        PerformanceRecord(1, 3, MARCH_2025, Decimal("5.0"), None, None, Decimal("10")),
    ]

    summary = summarize_portfolio(records, {1: Decimal("75"), 2: Decimal("25"), 3: None})

    assert summary.period == MARCH_2025
    assert summary.total_earnings == Decimal("160")
    assert summary.weighted_return_pct == Decimal("1.25")
    assert summary.allocation_total == Decimal("100")
    assert summary.missing_allocation == [3]


def test_summarize_portfolio_without_allocations():
    summary = summarize_portfolio([], {})

    assert summary.period is None
    assert summary.weighted_return_pct == Decimal("0")
