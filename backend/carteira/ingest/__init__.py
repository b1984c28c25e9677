"""Import jobs that populate the valuation store."""

from .valuations import ImportSummary, ParsedArchive, ValuationImporter, parse_daily_report, read_archive

__all__ = ["ImportSummary", "ParsedArchive", "ValuationImporter", "parse_daily_report", "read_archive"]
