"""Pydantic schemas for fund valuation reads."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class DailyChangeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fund_id: str
    valuation_date: date
    quota_value: Decimal
    previous_date: date | None = None
    previous_quota_value: Decimal | None = None
    change: Decimal | None = None
    change_pct: Decimal | None = None


__all__ = ["DailyChangeSchema"]
