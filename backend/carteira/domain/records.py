"""Typed records exchanged between the jobs and their stores."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Literal

from carteira.errors import InvalidRecordError

from .cnpj import format_canonical, is_canonical
from .periods import month_end, month_start

ReturnPeriod = Literal["monthly", "yearly", "twelve_months"]


def _to_decimal(value: object, field_name: str) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidRecordError(f"{field_name} is not a number: {value!r}") from exc
    if not result.is_finite():
        raise InvalidRecordError(f"{field_name} must be finite: {value!r}")
    return result


def _optional_decimal(value: object, field_name: str) -> Decimal | None:
    if value is None:
        return None
    return _to_decimal(value, field_name)


@dataclass(frozen=True)
class FundRegistryEntry:
    fund_id: str
    name: str = ""

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "fund_id", format_canonical(self.fund_id))
        except ValueError as exc:
            raise InvalidRecordError(str(exc)) from exc


@dataclass(frozen=True)
class ValuationRecord:
    """Official quota price of one fund on one calendar date."""

    date: date
    fund_id: str
    quota_value: Decimal
    source: str = "CVM"

    def __post_init__(self) -> None:
        if not isinstance(self.date, date):
            raise InvalidRecordError(f"date must be a date, got {self.date!r}")
        if self.date > date.today():
            raise InvalidRecordError(f"date cannot be in the future, got {self.date}")
        if not is_canonical(self.fund_id):
            raise InvalidRecordError(f"fund_id must be formatted as XX.XXX.XXX/XXXX-XX, got {self.fund_id!r}")
        quota = _to_decimal(self.quota_value, "quota_value")
        if quota <= 0:
            raise InvalidRecordError(f"quota_value must be positive, got {quota}")
        object.__setattr__(self, "quota_value", quota)
        if self.source and len(self.source) > 100:
            raise InvalidRecordError("source must be at most 100 characters")

    @property
    def key(self) -> tuple[date, str]:
        return self.date, self.fund_id


@dataclass(frozen=True)
class HoldingSnapshot:
    """A portfolio's position in one fund."""

    portfolio_id: int
    holding_id: int
    fund_id: str
    quotas_held: Decimal
    total_invested_value: Decimal
    percentage_allocation: Decimal | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "quotas_held", _to_decimal(self.quotas_held, "quotas_held"))
        object.__setattr__(
            self, "total_invested_value", _to_decimal(self.total_invested_value, "total_invested_value")
        )
        allocation = _optional_decimal(self.percentage_allocation, "percentage_allocation")
        if allocation is not None and not Decimal("0") <= allocation <= Decimal("100"):
            raise InvalidRecordError(f"percentage_allocation must be within 0..100, got {allocation}")
        object.__setattr__(self, "percentage_allocation", allocation)

    @property
    def is_active(self) -> bool:
        return self.quotas_held > 0


@dataclass(frozen=True)
class PerformanceRecord:
    """Monthly performance snapshot of one holding."""

    portfolio_id: int
    holding_id: int
    period: date
    monthly_return_pct: Decimal
    yearly_return_pct: Decimal | None
    trailing_12m_return_pct: Decimal | None
    earnings_amount: Decimal
    initial_balance: Decimal | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.period, date) or self.period != month_end(self.period):
            raise InvalidRecordError(f"period must be the last day of a month, got {self.period!r}")
        # the current month is reported on its last day, before that day arrives
        if month_start(self.period) > date.today():
            raise InvalidRecordError(f"period cannot be in the future, got {self.period}")
        object.__setattr__(self, "monthly_return_pct", _to_decimal(self.monthly_return_pct, "monthly_return_pct"))
        object.__setattr__(self, "yearly_return_pct", _optional_decimal(self.yearly_return_pct, "yearly_return_pct"))
        object.__setattr__(
            self,
            "trailing_12m_return_pct",
            _optional_decimal(self.trailing_12m_return_pct, "trailing_12m_return_pct"),
        )
        object.__setattr__(self, "earnings_amount", _to_decimal(self.earnings_amount, "earnings_amount"))
        object.__setattr__(self, "initial_balance", _optional_decimal(self.initial_balance, "initial_balance"))

    @property
    def key(self) -> tuple[int, int, date]:
        return self.portfolio_id, self.holding_id, self.period

    def returns(self) -> dict[ReturnPeriod, Decimal]:
        values: dict[ReturnPeriod, Decimal | None] = {
            "monthly": self.monthly_return_pct,
            "yearly": self.yearly_return_pct,
            "twelve_months": self.trailing_12m_return_pct,
        }
        return {name: value for name, value in values.items() if value is not None}

    def best_return_period(self) -> ReturnPeriod | None:
        returns = self.returns()
        if not returns:
            return None
        return max(returns, key=lambda name: returns[name])

    def best_return_value(self) -> Decimal | None:
        best = self.best_return_period()
        return self.returns()[best] if best else None

    @property
    def positive_performance(self) -> bool:
        return any(value > 0 for value in self.returns().values())

    @property
    def negative_performance(self) -> bool:
        return any(value < 0 for value in self.returns().values())

    @property
    def market_value(self) -> Decimal:
        if self.initial_balance is None:
            return Decimal("0")
        return self.initial_balance + self.earnings_amount


__all__ = [
    "FundRegistryEntry",
    "HoldingSnapshot",
    "PerformanceRecord",
    "ReturnPeriod",
    "ValuationRecord",
]
