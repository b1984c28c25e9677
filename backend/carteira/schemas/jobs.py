"""Pydantic schemas for job triggers and performance reads."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ImportRequest(BaseModel):
    start_date: date | None = Field(default=None, examples=["2026-01-15"])
    months_back: int | None = Field(default=None, ge=0, le=36)


class ImportSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str
    files_processed: int
    records_imported: int
    records_skipped: int
    months_not_found: int
    months_forbidden: int
    duration_seconds: float
    started_at: datetime | None = None
    finished_at: datetime | None = None
    message: str | None = None


class CalculationRequest(BaseModel):
    target_date: date | None = Field(default=None, examples=["2026-01-31"])


class CalculationSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    period: date
    holdings_processed: int
    records_created: int
    records_updated: int
    holdings_skipped: int
    errors: int
    duration_seconds: float
    started_at: datetime | None = None
    finished_at: datetime | None = None


class PerformanceRecordSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    portfolio_id: int
    holding_id: int
    period: date
    monthly_return_pct: Decimal
    yearly_return_pct: Decimal | None = None
    trailing_12m_return_pct: Decimal | None = None
    earnings_amount: Decimal
    initial_balance: Decimal | None = None
    best_return_period: str | None = None
    positive_performance: bool = False


class PortfolioPerformanceSchema(BaseModel):
    portfolio_id: int
    period: date
    total_earnings: Decimal
    weighted_return_pct: Decimal
    allocation_total: Decimal
    missing_allocation: list[int]
    records: list[PerformanceRecordSchema]


__all__ = [
    "CalculationRequest",
    "CalculationSummarySchema",
    "ImportRequest",
    "ImportSummarySchema",
    "PerformanceRecordSchema",
    "PortfolioPerformanceSchema",
]
