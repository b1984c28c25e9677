"""Read-side endpoint for monthly portfolio performance."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carteira.db.session import get_db
from carteira.domain.periods import month_end
from carteira.models import FundInvestment
from carteira.repositories import SqlPerformanceStore
from carteira.schemas import PerformanceRecordSchema, PortfolioPerformanceSchema
from carteira.services.performance import summarize_portfolio

router = APIRouter()


@router.get("/{portfolio_id}/performance", response_model=PortfolioPerformanceSchema)
async def get_portfolio_performance(
    portfolio_id: int,
    period: date = Query(..., description="Any day of the month to report"),
    session: AsyncSession = Depends(get_db),
) -> PortfolioPerformanceSchema:
    period_end = month_end(period)
    records = await SqlPerformanceStore(session).for_portfolio(portfolio_id, period_end)
    if not records:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No performance records for portfolio {portfolio_id} in {period_end:%Y-%m}",
        )

    allocation_rows = await session.execute(
        select(FundInvestment.id, FundInvestment.percentage_allocation).where(
            FundInvestment.portfolio_id == portfolio_id
        )
    )
    allocations = {holding_id: allocation for holding_id, allocation in allocation_rows.all()}
    summary = summarize_portfolio(records, allocations)

    return PortfolioPerformanceSchema(
        portfolio_id=portfolio_id,
        period=period_end,
        total_earnings=summary.total_earnings,
        weighted_return_pct=summary.weighted_return_pct,
        allocation_total=summary.allocation_total,
        missing_allocation=summary.missing_allocation,
        records=[
            PerformanceRecordSchema(
                portfolio_id=record.portfolio_id,
                holding_id=record.holding_id,
                period=record.period,
                monthly_return_pct=record.monthly_return_pct,
                yearly_return_pct=record.yearly_return_pct,
                trailing_12m_return_pct=record.trailing_12m_return_pct,
                earnings_amount=record.earnings_amount,
                initial_balance=record.initial_balance,
                best_return_period=record.best_return_period(),
                positive_performance=record.positive_performance,
            )
            for record in records
        ],
    )


__all__ = ["router"]
