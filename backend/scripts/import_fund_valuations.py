"""CLI wrapper for the CVM fund valuation import."""

from __future__ import annotations

import argparse
import asyncio
from datetime import date

from carteira.config import get_settings
from carteira.core.logging import setup_logging
from carteira.core.telemetry import setup_telemetry
from carteira.db.session import get_engine, session_factory
from carteira.ingest.valuations import ValuationImporter
from carteira.providers.cvm import CvmArchiveClient
from carteira.repositories import SqlFundRegistry, SqlValuationStore


async def _run(start_date: date | None, months_back: int | None) -> None:
    settings = get_settings()
    async with session_factory()() as session, CvmArchiveClient() as client:
        importer = ValuationImporter(
            SqlFundRegistry(session),
            SqlValuationStore(session, batch_size=settings.upsert_batch_size),
            client,
            settings=settings,
        )
        summary = await importer.run(start_date=start_date, months_back=months_back)
    print(
        f"{summary.status}: {summary.files_processed} archives, "
        f"{summary.records_imported} quotas upserted, {summary.records_skipped} rows skipped "
        f"in {summary.duration_seconds}s"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Import daily fund quotas from the CVM open-data portal")
    parser.add_argument("--start-date", type=date.fromisoformat, default=None, help="YYYY-MM-DD, defaults to today")
    parser.add_argument("--months-back", type=int, default=None, help="Trailing months to fetch")
    args = parser.parse_args()

    setup_logging()
    setup_telemetry(get_settings(), engine=get_engine())
    asyncio.run(_run(args.start_date, args.months_back))


if __name__ == "__main__":
    main()
