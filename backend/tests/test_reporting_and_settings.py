from __future__ import annotations

import logging

from carteira.config import AppSettings
from carteira.core.reporting import LoggingReporter


def test_logging_reporter_prefixes_job_name(caplog):
    reporter = LoggingReporter("FundValuationImportJob", logging.getLogger("carteira.test"))

    with caplog.at_level(logging.INFO, logger="carteira.test"):
        reporter.info("archive processed", imported=3, skipped=1)
        reporter.error("import failed", exc=RuntimeError("boom"))

    assert caplog.records[0].getMessage() == "[FundValuationImportJob] archive processed imported=3 skipped=1"
    assert caplog.records[1].levelno == logging.ERROR
    assert caplog.records[1].exc_info[0] is RuntimeError


def test_settings_hide_database_password():
    settings = AppSettings(database_url="postgresql+asyncpg://carteira:secret@db:5432/carteira")

    rendered = settings.dict_for_logging()

    assert "secret" not in rendered["database_url"]
    assert rendered["import_months_back"] == 2
    assert rendered["quota_lookback_days"] == 5
