"""Monthly performance snapshots for fund holdings.

For every holding with quotas, the calculator reads the fund's quota at the
edges of the target month (and at the year and 12-month anchors), derives the
period returns and the monthly earnings over the invested value, and upserts
one record per ``(portfolio, holding, month end)``. Missing quotas never raise:
a missing month edge skips the holding, a missing anchor leaves that return
empty.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Literal, Mapping

from opentelemetry import trace

from carteira.config import AppSettings, get_settings
from carteira.core.reporting import JobReporter, LoggingReporter
from carteira.domain.cnpj import format_canonical
from carteira.domain.periods import month_end, month_start, shift_months
from carteira.domain.records import HoldingSnapshot, PerformanceRecord
from carteira.repositories.base import HoldingSource, PerformanceStore, ValuationStore

tracer = trace.get_tracer(__name__)

HUNDRED = Decimal("100")
ZERO = Decimal("0")

HoldingOutcome = Literal["created", "updated", "skipped"]


def period_return(start: Decimal, end: Decimal) -> Decimal:
    """Percentage change from ``start`` to ``end``; zero when ``start`` is zero."""

    if start == 0:
        return ZERO
    return (end - start) / start * HUNDRED


def earnings_for(monthly_return_pct: Decimal | None, invested_value: Decimal) -> Decimal:
    if monthly_return_pct is None or invested_value == 0:
        return ZERO
    return monthly_return_pct / HUNDRED * invested_value


@dataclass
class CalculationSummary:
    period: date
    holdings_processed: int = 0
    records_created: int = 0
    records_updated: int = 0
    holdings_skipped: int = 0
    errors: int = 0
    duration_seconds: float = 0.0
    started_at: datetime | None = None
    finished_at: datetime | None = None


class PerformanceCalculator:
    """Derives monthly, yearly and trailing 12-month returns per holding."""

    def __init__(
        self,
        holdings: HoldingSource,
        valuations: ValuationStore,
        performance: PerformanceStore,
        *,
        reporter: JobReporter | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self.holdings = holdings
        self.valuations = valuations
        self.performance = performance
        self.reporter = reporter or LoggingReporter("PerformanceCalculationJob")
        self.lookback_days = (settings or get_settings()).quota_lookback_days

    async def find_quota(self, fund_id: str, on_or_before: date) -> Decimal | None:
        """Quota on ``on_or_before`` or on one of the preceding lookback days."""

        for offset in range(self.lookback_days + 1):
            value = await self.valuations.quota_on(fund_id, on_or_before - timedelta(days=offset))
            if value is not None:
                return value
        return None

    async def _return_since(self, fund_id: str, anchor: date, quota_end: Decimal) -> Decimal | None:
        quota_anchor = await self.find_quota(fund_id, anchor)
        if quota_anchor is None:
            return None
        return period_return(quota_anchor, quota_end)

    async def calculate(self, holding: HoldingSnapshot, target_date: date) -> PerformanceRecord | None:
        """Build the record for ``holding`` in ``target_date``'s month, or ``None`` without data."""

        fund_id = format_canonical(holding.fund_id)
        period_start = month_start(target_date)
        period_end = month_end(target_date)

        quota_start = await self.find_quota(fund_id, period_start)
        quota_end = await self.find_quota(fund_id, period_end)
        if quota_start is None or quota_end is None:
            return None

        monthly = period_return(quota_start, quota_end)
        yearly = await self._return_since(fund_id, date(period_end.year, 1, 1), quota_end)
        trailing = await self._return_since(fund_id, shift_months(period_end, -12), quota_end)

        return PerformanceRecord(
            portfolio_id=holding.portfolio_id,
            holding_id=holding.holding_id,
            period=period_end,
            monthly_return_pct=monthly,
            yearly_return_pct=yearly,
            trailing_12m_return_pct=trailing,
            earnings_amount=earnings_for(monthly, holding.total_invested_value),
            initial_balance=holding.total_invested_value,
        )

    async def _process(self, holding: HoldingSnapshot, target_date: date) -> HoldingOutcome:
        record = await self.calculate(holding, target_date)
        if record is None:
            self.reporter.info(
                "insufficient quota data, skipping",
                holding_id=holding.holding_id,
                fund=holding.fund_id,
            )
            return "skipped"
        created = await self.performance.upsert(record)
        return "created" if created else "updated"

    async def run(self, target_date: date | None = None) -> CalculationSummary:
        target_date = target_date or date.today() - timedelta(days=1)
        summary = CalculationSummary(period=month_end(target_date), started_at=datetime.now())
        clock = time.perf_counter()

        with tracer.start_as_current_span("performance_calculation") as span:
            span.set_attribute("carteira.period", summary.period.isoformat())
            self.reporter.info("starting", target_date=target_date, period=summary.period)

            for holding in await self.holdings.active_holdings():
                summary.holdings_processed += 1
                try:
                    outcome = await self._process(holding, target_date)
                except Exception as exc:  # counted per holding, never raised
                    summary.errors += 1
                    self.reporter.error(
                        "failed to calculate holding",
                        exc=exc,
                        portfolio_id=holding.portfolio_id,
                        holding_id=holding.holding_id,
                    )
                    continue
                if outcome == "created":
                    summary.records_created += 1
                elif outcome == "updated":
                    summary.records_updated += 1
                else:
                    summary.holdings_skipped += 1

            summary.finished_at = datetime.now()
            summary.duration_seconds = round(time.perf_counter() - clock, 2)
            span.set_attribute("carteira.errors", summary.errors)
            self.reporter.info(
                "finished",
                holdings_processed=summary.holdings_processed,
                records_created=summary.records_created,
                records_updated=summary.records_updated,
                holdings_skipped=summary.holdings_skipped,
                errors=summary.errors,
                duration_seconds=summary.duration_seconds,
            )
        return summary


@dataclass
class PortfolioPerformanceSummary:
    period: date | None
    total_earnings: Decimal = ZERO
    weighted_return_pct: Decimal = ZERO
    allocation_total: Decimal = ZERO
    missing_allocation: list[int] = field(default_factory=list)


def summarize_portfolio(
    records: Iterable[PerformanceRecord],
    allocations: Mapping[int, Decimal | None],
) -> PortfolioPerformanceSummary:
    """Roll holding records up to an allocation-weighted portfolio return.

    ``allocations`` maps holding ids to their percentage of the portfolio.
    Holdings without an allocation still count towards earnings but not
    towards the weighted return.
    """

    records = list(records)
    summary = PortfolioPerformanceSummary(period=records[0].period if records else None)
    weighted_sum = ZERO
    for record in records:
        summary.total_earnings += record.earnings_amount
        allocation = allocations.get(record.holding_id)
        if allocation is None:
            summary.missing_allocation.append(record.holding_id)
            continue
        weighted_sum += record.monthly_return_pct * allocation
        summary.allocation_total += allocation
    if summary.allocation_total > 0:
        summary.weighted_return_pct = weighted_sum / summary.allocation_total
    return summary


__all__ = [
    "CalculationSummary",
    "PerformanceCalculator",
    "PortfolioPerformanceSummary",
    "earnings_for",
    "period_return",
    "summarize_portfolio",
]
