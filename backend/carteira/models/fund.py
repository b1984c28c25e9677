"""Portfolio, fund registry and holding models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carteira.db.base import Base


class Portfolio(Base):
    __tablename__ = "portfolio"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    fund_investments: Mapped[list["FundInvestment"]] = relationship(
        back_populates="portfolio", cascade="all, delete-orphan"
    )


class InvestmentFund(Base):
    __tablename__ = "investment_fund"
    __table_args__ = (Index("ix_investment_fund_name", "fund_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    cnpj: Mapped[str] = mapped_column(String(18), unique=True)
    fund_name: Mapped[str] = mapped_column(String(255))
    administrator_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    fund_investments: Mapped[list["FundInvestment"]] = relationship(back_populates="investment_fund")


class FundInvestment(Base):
    __tablename__ = "fund_investment"
    __table_args__ = (
        UniqueConstraint("portfolio_id", "investment_fund_id", name="uq_fund_investment_portfolio_fund"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    portfolio_id: Mapped[int] = mapped_column(ForeignKey("portfolio.id", ondelete="CASCADE"))
    investment_fund_id: Mapped[int] = mapped_column(ForeignKey("investment_fund.id", ondelete="CASCADE"))
    total_invested_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0)
    total_quotas_held: Mapped[Decimal] = mapped_column(Numeric(24, 8), default=0)
    percentage_allocation: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)

    portfolio: Mapped[Portfolio] = relationship(back_populates="fund_investments")
    investment_fund: Mapped[InvestmentFund] = relationship(back_populates="fund_investments")


__all__ = ["Portfolio", "InvestmentFund", "FundInvestment"]
