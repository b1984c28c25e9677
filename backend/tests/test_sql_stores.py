"""SQLAlchemy store tests against a throwaway SQLite database."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from carteira.db.init import init_database
from carteira.db.session import session_factory
from carteira.domain.records import HoldingSnapshot, PerformanceRecord, ValuationRecord
from carteira.models import FundInvestment, FundValuation, InvestmentFund, PerformanceHistory, Portfolio
from carteira.repositories import (
    InMemoryHoldingSource,
    SqlFundRegistry,
    SqlHoldingSource,
    SqlPerformanceStore,
    SqlValuationStore,
)
from carteira.services.performance import PerformanceCalculator

FUND = "11.111.111/0001-11"


async def _engine(tmp_path: Path) -> AsyncEngine:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'carteira.db'}")
    await init_database(engine)
    return engine


async def _seed(engine: AsyncEngine) -> None:
    async with session_factory(engine)() as session:
        portfolio = Portfolio(id=1, name="Carteira Previdenciária")
        active = InvestmentFund(id=1, cnpj=FUND, fund_name="Fundo Renda Fixa")
        closed = InvestmentFund(id=2, cnpj="22.222.222/0001-22", fund_name="Fundo Encerrado")
        session.add_all([portfolio, active, closed])
        session.add_all(
            [
                FundInvestment(
                    id=10,
                    portfolio_id=1,
                    investment_fund_id=1,
                    total_invested_value=Decimal("10000"),
                    total_quotas_held=Decimal("98.5"),
                    percentage_allocation=Decimal("60"),
                ),
                FundInvestment(
                    id=11,
                    portfolio_id=1,
                    investment_fund_id=2,
                    total_invested_value=Decimal("0"),
                    total_quotas_held=Decimal("0"),
                ),
            ]
        )
        await session.commit()


async def test_valuation_upsert_overwrites_existing_rows(tmp_path: Path):
    engine = await _engine(tmp_path)
    try:
        async with session_factory(engine)() as session:
            store = SqlValuationStore(session, batch_size=1)
            first = [
                ValuationRecord(date(2026, 1, 2), FUND, Decimal("1.234567")),
                ValuationRecord(date(2026, 1, 5), FUND, Decimal("1.240000")),
            ]
            assert await store.upsert_many(first) == 2
            corrected = [
                ValuationRecord(date(2026, 1, 5), FUND, Decimal("1.250000")),
                ValuationRecord(date(2026, 1, 5), FUND, Decimal("1.260000")),
            ]
            assert await store.upsert_many(corrected) == 1

            count = await session.scalar(select(func.count()).select_from(FundValuation))
            assert count == 2
            assert await store.quota_on(FUND, date(2026, 1, 5)) == Decimal("1.26")
            assert await store.quota_on(FUND, date(2026, 1, 3)) is None

            previous = await store.previous_quota(FUND, date(2026, 1, 5))
            assert previous is not None
            assert previous.date == date(2026, 1, 2)
    finally:
        await engine.dispose()


async def test_registry_and_holdings_read_from_tables(tmp_path: Path):
    engine = await _engine(tmp_path)
    try:
        await _seed(engine)
        async with session_factory(engine)() as session:
            assert await SqlFundRegistry(session).tracked_fund_ids() == {"11111111000111", "22222222000122"}

            holdings = await SqlHoldingSource(session).active_holdings()
            assert [holding.holding_id for holding in holdings] == [10]
            assert holdings[0].fund_id == FUND
            assert holdings[0].percentage_allocation == Decimal("60")
    finally:
        await engine.dispose()


async def test_performance_upsert_keeps_one_row_per_period(tmp_path: Path):
    engine = await _engine(tmp_path)
    try:
        await _seed(engine)
        async with session_factory(engine)() as session:
            store = SqlPerformanceStore(session)
            period = date(2026, 1, 31)
            first = PerformanceRecord(1, 10, period, Decimal("1.13"), None, None, Decimal("113"), Decimal("10000"))
            second = PerformanceRecord(
                1, 10, period, Decimal("1.20"), Decimal("1.20"), Decimal("11.5"), Decimal("120"), Decimal("10000")
            )

            assert await store.upsert(first) is True
            assert await store.upsert(second) is False

            count = await session.scalar(select(func.count()).select_from(PerformanceHistory))
            assert count == 1
            [stored] = await store.for_portfolio(1, period)
            assert stored.monthly_return_pct == Decimal("1.2")
            assert stored.trailing_12m_return_pct == Decimal("11.5")
            assert stored.earnings_amount == Decimal("120")
    finally:
        await engine.dispose()


async def test_registry_pads_numbers_stored_without_leading_zero(tmp_path: Path):
    engine = await _engine(tmp_path)
    try:
        async with session_factory(engine)() as session:
            session.add(InvestmentFund(id=5, cnpj="1111111000111", fund_name="Fundo Sem Zero"))
            await session.commit()

            assert await SqlFundRegistry(session).tracked_fund_ids() == {"01111111000111"}
    finally:
        await engine.dispose()


async def test_rejected_holding_rolls_back_and_batch_continues(tmp_path: Path, settings, reporter):
    engine = await _engine(tmp_path)
    rollbacks: list[object] = []
    event.listen(engine.sync_engine, "rollback", rollbacks.append)
    try:
        await _seed(engine)
        async with session_factory(engine)() as session:
            await SqlValuationStore(session).upsert_many(
                [
                    ValuationRecord(date(2025, 2, 28), FUND, Decimal("100")),
                    ValuationRecord(date(2025, 3, 31), FUND, Decimal("101")),
                ]
            )
            holdings = [
                # portfolio_id is NOT NULL, so the database rejects this row
                HoldingSnapshot(None, 99, FUND, Decimal("1"), Decimal("500")),
                HoldingSnapshot(1, 10, FUND, Decimal("98.5"), Decimal("10000")),
            ]
            calculator = PerformanceCalculator(
                InMemoryHoldingSource(holdings),
                SqlValuationStore(session),
                SqlPerformanceStore(session),
                reporter=reporter,
                settings=settings,
            )

            summary = await calculator.run(target_date=date(2025, 3, 31))

            assert summary.errors == 1
            assert summary.records_created == 1
            assert rollbacks
            [stored] = await SqlPerformanceStore(session).for_portfolio(1, date(2025, 3, 31))
            assert stored.holding_id == 10
            assert stored.monthly_return_pct == Decimal("1")
    finally:
        await engine.dispose()
