"""Monthly performance snapshots per fund holding."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from carteira.db.base import Base


class PerformanceHistory(Base):
    __tablename__ = "performance_history"
    __table_args__ = (
        UniqueConstraint(
            "portfolio_id", "fund_investment_id", "period", name="uq_performance_history_portfolio_holding_period"
        ),
        Index("ix_performance_history_portfolio_period", "portfolio_id", "period"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    portfolio_id: Mapped[int] = mapped_column(ForeignKey("portfolio.id", ondelete="CASCADE"))
    fund_investment_id: Mapped[int] = mapped_column(ForeignKey("fund_investment.id", ondelete="CASCADE"))
    period: Mapped[date] = mapped_column(Date)
    monthly_return: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    yearly_return: Mapped[Decimal | None] = mapped_column(Numeric(18, 8), nullable=True)
    last_12_months_return: Mapped[Decimal | None] = mapped_column(Numeric(18, 8), nullable=True)
    earnings: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    initial_balance: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow
    )


__all__ = ["PerformanceHistory"]
