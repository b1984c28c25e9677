"""Daily quota import from the CVM open-data portal.

Each run walks a closed window of calendar months, newest first, downloads the
month's ``inf_diario_fi`` archive, keeps only the rows of funds present in the
registry and upserts them on ``(date, fund_cnpj)``. Months that are not
published yet (404) or blocked (403) are skipped; any other download or parse
failure aborts the run. Downloads live in a per-run temporary directory that
is removed on every exit path.
"""

from __future__ import annotations

import io
import tempfile
import time
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Literal

import pandas as pd
from opentelemetry import trace

from carteira.config import AppSettings, get_settings
from carteira.core.reporting import JobReporter, LoggingReporter
from carteira.domain.cnpj import CNPJ_DIGITS, format_canonical
from carteira.domain.periods import iter_months
from carteira.domain.records import ValuationRecord
from carteira.errors import ArchiveFetchError, ArchiveFormatError, InvalidRecordError
from carteira.providers.cvm import CvmArchiveClient, Failed, Forbidden, NotFound, archive_name
from carteira.repositories.base import FundRegistry, ValuationStore

tracer = trace.get_tracer(__name__)

CNPJ_COLUMNS = ("CNPJ_FUNDO", "CNPJ_FUNDO_CLASSE")
DATE_COLUMN = "DT_COMPTC"
QUOTA_COLUMN = "VL_QUOTA"
CSV_ENCODING = "latin-1"


@dataclass
class ImportSummary:
    status: Literal["success", "skipped"]
    files_processed: int = 0
    records_imported: int = 0
    records_skipped: int = 0
    months_not_found: int = 0
    months_forbidden: int = 0
    duration_seconds: float = 0.0
    started_at: datetime | None = None
    finished_at: datetime | None = None
    message: str | None = None


@dataclass
class ParsedArchive:
    records: list[ValuationRecord] = field(default_factory=list)
    skipped: int = 0

    def extend(self, other: "ParsedArchive") -> None:
        self.records.extend(other.records)
        self.skipped += other.skipped


def _parse_quota(raw: str) -> Decimal | None:
    try:
        value = Decimal(raw.strip().replace(",", "."))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _build_record(digits: str, raw_date: str, raw_value: str, source: str) -> ValuationRecord | None:
    quota = _parse_quota(raw_value)
    if quota is None or quota <= 0:
        return None
    try:
        day = date.fromisoformat(raw_date.strip())
        return ValuationRecord(day, format_canonical(digits), quota, source)
    except (ValueError, InvalidRecordError):
        return None


def parse_daily_report(content: bytes, tracked: set[str], *, source: str = "CVM") -> ParsedArchive:
    """Parse one semicolon-delimited daily report keeping only tracked funds.

    Rows of untracked funds, and tracked rows with a missing, unparseable or
    non-positive quota (or an unreadable date), are counted as skipped.
    """

    try:
        frame = pd.read_csv(
            io.BytesIO(content),
            sep=";",
            encoding=CSV_ENCODING,
            dtype=str,
            keep_default_na=False,
        )
    except pd.errors.EmptyDataError:
        return ParsedArchive()
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ArchiveFormatError(f"Unreadable daily report: {exc}") from exc

    cnpj_column = next((name for name in CNPJ_COLUMNS if name in frame.columns), None)
    missing = [name for name in (DATE_COLUMN, QUOTA_COLUMN) if name not in frame.columns]
    if cnpj_column is None or missing:
        missing = missing if cnpj_column else ["/".join(CNPJ_COLUMNS), *missing]
        raise ArchiveFormatError(f"Daily report is missing columns: {', '.join(missing)}")

    digits = frame[cnpj_column].str.replace(r"\D", "", regex=True).str.zfill(CNPJ_DIGITS)
    tracked_mask = digits.isin(tracked)
    parsed = ParsedArchive(skipped=int((~tracked_mask).sum()))

    kept = frame.loc[tracked_mask, [DATE_COLUMN, QUOTA_COLUMN]]
    for fund_digits, raw_date, raw_value in zip(digits[tracked_mask], kept[DATE_COLUMN], kept[QUOTA_COLUMN]):
        record = _build_record(fund_digits, raw_date, raw_value, source)
        if record is None:
            parsed.skipped += 1
            continue
        parsed.records.append(record)
    return parsed


def read_archive(path: Path, tracked: set[str], *, source: str = "CVM") -> ParsedArchive:
    """Parse every ``.csv`` member of a downloaded archive."""

    result = ParsedArchive()
    try:
        with zipfile.ZipFile(path) as archive:
            for member in archive.infolist():
                if not member.filename.lower().endswith(".csv"):
                    continue
                result.extend(parse_daily_report(archive.read(member), tracked, source=source))
    except zipfile.BadZipFile as exc:
        raise ArchiveFormatError(f"{path.name} is not a valid zip archive") from exc
    return result


class ValuationImporter:
    """Keeps the valuation store current with recently published quotas."""

    def __init__(
        self,
        registry: FundRegistry,
        store: ValuationStore,
        client: CvmArchiveClient,
        *,
        reporter: JobReporter | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.client = client
        self.reporter = reporter or LoggingReporter("FundValuationImportJob")
        self.settings = settings or get_settings()

    async def run(self, start_date: date | None = None, months_back: int | None = None) -> ImportSummary:
        start_date = start_date or date.today()
        if months_back is None:
            months_back = self.settings.import_months_back
        months = list(iter_months(start_date, months_back))

        started_at = datetime.now()
        clock = time.perf_counter()

        with tracer.start_as_current_span("fund_valuation_import") as span:
            span.set_attribute("carteira.months_back", months_back)
            self.reporter.info("starting CVM import", start_date=start_date, months_back=months_back)

            tracked = await self.registry.tracked_fund_ids()
            if not tracked:
                self.reporter.warning("no investment funds registered, import cancelled")
                finished_at = datetime.now()
                return ImportSummary(
                    status="skipped",
                    message="No funds to track",
                    duration_seconds=round(time.perf_counter() - clock, 2),
                    started_at=started_at,
                    finished_at=finished_at,
                )
            self.reporter.info("tracking funds", count=len(tracked), oldest_month="%04d-%02d" % months[-1])

            summary = ImportSummary(status="success", started_at=started_at)
            try:
                with tempfile.TemporaryDirectory(prefix="cvm_funds_", dir=self.settings.tmp_dir) as workdir:
                    await self._import_months(months, Path(workdir), tracked, summary)
            except Exception as exc:
                self.reporter.error("import failed", exc=exc)
                raise
            finally:
                self.reporter.info("cleaned up temporary files")

            summary.finished_at = datetime.now()
            summary.duration_seconds = round(time.perf_counter() - clock, 2)
            span.set_attribute("carteira.records_imported", summary.records_imported)
            self.reporter.info(
                "import completed",
                files_processed=summary.files_processed,
                records_imported=summary.records_imported,
                records_skipped=summary.records_skipped,
                duration_seconds=summary.duration_seconds,
            )
            return summary

    async def _import_months(
        self,
        months: Iterable[tuple[int, int]],
        workdir: Path,
        tracked: set[str],
        summary: ImportSummary,
    ) -> None:
        for year, month in months:
            result = await self.client.fetch(year, month)
            if isinstance(result, NotFound):
                summary.months_not_found += 1
                self.reporter.info("archive not published yet (404), skipping", url=result.url)
                continue
            if isinstance(result, Forbidden):
                summary.months_forbidden += 1
                self.reporter.warning("access forbidden (403), server may be blocking requests", url=result.url)
                continue
            if isinstance(result, Failed):
                raise ArchiveFetchError(result.url, result.reason) from result.cause

            path = workdir / archive_name(year, month)
            path.write_bytes(result.content)
            parsed = read_archive(path, tracked, source=self.settings.valuation_source)
            imported = await self.store.upsert_many(parsed.records) if parsed.records else 0

            summary.files_processed += 1
            summary.records_imported += imported
            summary.records_skipped += parsed.skipped
            self.reporter.info("archive processed", url=result.url, imported=imported, skipped=parsed.skipped)


__all__ = ["ImportSummary", "ParsedArchive", "ValuationImporter", "parse_daily_report", "read_archive"]
