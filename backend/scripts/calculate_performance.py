"""CLI wrapper for the monthly performance calculation."""

from __future__ import annotations

import argparse
import asyncio
from datetime import date

from carteira.config import get_settings
from carteira.core.logging import setup_logging
from carteira.core.telemetry import setup_telemetry
from carteira.db.session import get_engine, session_factory
from carteira.repositories import SqlHoldingSource, SqlPerformanceStore, SqlValuationStore
from carteira.services.performance import PerformanceCalculator


async def _run(target_date: date | None) -> int:
    async with session_factory()() as session:
        calculator = PerformanceCalculator(
            SqlHoldingSource(session),
            SqlValuationStore(session),
            SqlPerformanceStore(session),
        )
        summary = await calculator.run(target_date=target_date)
    print(
        f"{summary.period:%Y-%m}: {summary.holdings_processed} holdings, "
        f"{summary.records_created} created, {summary.records_updated} updated, "
        f"{summary.holdings_skipped} skipped, {summary.errors} errors"
    )
    return 1 if summary.errors else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Calculate monthly performance for every active fund holding")
    parser.add_argument("--target-date", type=date.fromisoformat, default=None, help="YYYY-MM-DD, defaults to yesterday")
    args = parser.parse_args()

    setup_logging()
    setup_telemetry(get_settings(), engine=get_engine())
    raise SystemExit(asyncio.run(_run(args.target_date)))


if __name__ == "__main__":
    main()
