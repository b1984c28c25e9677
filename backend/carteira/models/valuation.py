"""Daily fund quota values imported from CVM."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from carteira.db.base import Base


class FundValuation(Base):
    __tablename__ = "fund_valuation"
    __table_args__ = (
        UniqueConstraint("date", "fund_cnpj", name="uq_fund_valuation_date_cnpj"),
        Index("ix_fund_valuation_cnpj_date", "fund_cnpj", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[date] = mapped_column(Date)
    fund_cnpj: Mapped[str] = mapped_column(String(18))
    quota_value: Mapped[Decimal] = mapped_column(Numeric(15, 6))
    source: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow
    )


__all__ = ["FundValuation"]
