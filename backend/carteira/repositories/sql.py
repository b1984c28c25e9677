"""SQLAlchemy-backed stores.

Upserts use the database's native ``INSERT ... ON CONFLICT DO UPDATE`` so a
re-triggered or concurrent run can never produce a second row for the same
natural key. PostgreSQL is the production target; SQLite is supported for
local runs and tests.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from carteira.domain.cnpj import padded_digits
from carteira.domain.records import HoldingSnapshot, PerformanceRecord, ValuationRecord
from carteira.models import FundInvestment, FundValuation, InvestmentFund, PerformanceHistory

_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(session: AsyncSession, table: Any) -> Any:
    dialect = session.get_bind().dialect.name
    try:
        return _INSERTS[dialect](table)
    except KeyError:
        raise NotImplementedError(f"Upsert is not supported for the {dialect!r} dialect") from None


def _decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


class SqlFundRegistry:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def tracked_fund_ids(self) -> set[str]:
        result = await self.session.execute(select(InvestmentFund.cnpj))
        digits = (padded_digits(cnpj) for cnpj in result.scalars())
        return {value for value in digits if value}


class SqlValuationStore:
    def __init__(self, session: AsyncSession, *, batch_size: int = 1000) -> None:
        self.session = session
        self.batch_size = batch_size

    async def upsert_many(self, records: Iterable[ValuationRecord]) -> int:
        try:
            return await self._upsert_many(records)
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    async def _upsert_many(self, records: Iterable[ValuationRecord]) -> int:
        # ON CONFLICT rejects a key repeated inside one statement.
        unique = {record.key: record for record in records}
        if not unique:
            return 0
        now = datetime.utcnow()
        rows = [
            {
                "date": record.date,
                "fund_cnpj": record.fund_id,
                "quota_value": record.quota_value,
                "source": record.source,
                "created_at": now,
                "updated_at": now,
            }
            for record in unique.values()
        ]
        for offset in range(0, len(rows), self.batch_size):
            stmt = _insert_for(self.session, FundValuation).values(rows[offset : offset + self.batch_size])
            stmt = stmt.on_conflict_do_update(
                index_elements=[FundValuation.date, FundValuation.fund_cnpj],
                set_={
                    "quota_value": stmt.excluded.quota_value,
                    "source": stmt.excluded.source,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            await self.session.execute(stmt)
        await self.session.commit()
        return len(rows)

    async def quota_on(self, fund_id: str, day: date) -> Decimal | None:
        stmt = select(FundValuation.quota_value).where(
            FundValuation.fund_cnpj == fund_id,
            FundValuation.date == day,
        )
        return _decimal((await self.session.execute(stmt)).scalar_one_or_none())

    async def previous_quota(self, fund_id: str, day: date) -> ValuationRecord | None:
        stmt = (
            select(FundValuation)
            .where(FundValuation.fund_cnpj == fund_id, FundValuation.date < day)
            .order_by(FundValuation.date.desc())
            .limit(1)
        )
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return ValuationRecord(row.date, row.fund_cnpj, _decimal(row.quota_value), row.source or "")


class SqlHoldingSource:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def active_holdings(self) -> list[HoldingSnapshot]:
        stmt = (
            select(FundInvestment, InvestmentFund.cnpj)
            .join(InvestmentFund, FundInvestment.investment_fund_id == InvestmentFund.id)
            .where(FundInvestment.total_quotas_held > 0)
            .order_by(FundInvestment.portfolio_id, FundInvestment.id)
        )
        result = await self.session.execute(stmt)
        return [
            HoldingSnapshot(
                portfolio_id=investment.portfolio_id,
                holding_id=investment.id,
                fund_id=cnpj,
                quotas_held=_decimal(investment.total_quotas_held),
                total_invested_value=_decimal(investment.total_invested_value) or Decimal("0"),
                percentage_allocation=_decimal(investment.percentage_allocation),
            )
            for investment, cnpj in result.all()
        ]


class SqlPerformanceStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def upsert(self, record: PerformanceRecord) -> bool:
        try:
            return await self._upsert(record)
        except SQLAlchemyError:
            # a failed statement aborts the whole transaction on PostgreSQL
            await self.session.rollback()
            raise

    async def _upsert(self, record: PerformanceRecord) -> bool:
        existing = await self.session.execute(
            select(PerformanceHistory.id).where(
                PerformanceHistory.portfolio_id == record.portfolio_id,
                PerformanceHistory.fund_investment_id == record.holding_id,
                PerformanceHistory.period == record.period,
            )
        )
        created = existing.scalar_one_or_none() is None

        now = datetime.utcnow()
        stmt = _insert_for(self.session, PerformanceHistory).values(
            portfolio_id=record.portfolio_id,
            fund_investment_id=record.holding_id,
            period=record.period,
            monthly_return=record.monthly_return_pct,
            yearly_return=record.yearly_return_pct,
            last_12_months_return=record.trailing_12m_return_pct,
            earnings=record.earnings_amount,
            initial_balance=record.initial_balance,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                PerformanceHistory.portfolio_id,
                PerformanceHistory.fund_investment_id,
                PerformanceHistory.period,
            ],
            set_={
                "monthly_return": stmt.excluded.monthly_return,
                "yearly_return": stmt.excluded.yearly_return,
                "last_12_months_return": stmt.excluded.last_12_months_return,
                "earnings": stmt.excluded.earnings,
                "initial_balance": stmt.excluded.initial_balance,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
        await self.session.commit()
        return created

    async def for_portfolio(self, portfolio_id: int, period: date) -> list[PerformanceRecord]:
        stmt = (
            select(PerformanceHistory)
            .where(PerformanceHistory.portfolio_id == portfolio_id, PerformanceHistory.period == period)
            .order_by(PerformanceHistory.fund_investment_id)
        )
        rows = (await self.session.execute(stmt)).scalars().all()
        return [
            PerformanceRecord(
                portfolio_id=row.portfolio_id,
                holding_id=row.fund_investment_id,
                period=row.period,
                monthly_return_pct=_decimal(row.monthly_return),
                yearly_return_pct=_decimal(row.yearly_return),
                trailing_12m_return_pct=_decimal(row.last_12_months_return),
                earnings_amount=_decimal(row.earnings),
                initial_balance=_decimal(row.initial_balance),
            )
            for row in rows
        ]


__all__ = ["SqlFundRegistry", "SqlHoldingSource", "SqlPerformanceStore", "SqlValuationStore"]
