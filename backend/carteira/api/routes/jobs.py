"""Endpoints that run the valuation import and performance calculation inline."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from carteira.api.dependencies import get_archive_client
from carteira.config import get_settings
from carteira.db.session import get_db
from carteira.errors import ArchiveFetchError, ArchiveFormatError
from carteira.ingest.valuations import ValuationImporter
from carteira.providers.cvm import CvmArchiveClient
from carteira.repositories import SqlFundRegistry, SqlHoldingSource, SqlPerformanceStore, SqlValuationStore
from carteira.schemas import CalculationRequest, CalculationSummarySchema, ImportRequest, ImportSummarySchema
from carteira.services.performance import PerformanceCalculator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/fund-valuations", response_model=ImportSummarySchema)
async def run_fund_valuation_import(
    payload: ImportRequest,
    session: AsyncSession = Depends(get_db),
    client: CvmArchiveClient = Depends(get_archive_client),
) -> ImportSummarySchema:
    settings = get_settings()
    importer = ValuationImporter(
        SqlFundRegistry(session),
        SqlValuationStore(session, batch_size=settings.upsert_batch_size),
        client,
        settings=settings,
    )
    try:
        summary = await importer.run(start_date=payload.start_date, months_back=payload.months_back)
    except (ArchiveFetchError, ArchiveFormatError) as exc:
        logger.error("Fund valuation import failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return ImportSummarySchema.model_validate(summary)


@router.post("/performance", response_model=CalculationSummarySchema)
async def run_performance_calculation(
    payload: CalculationRequest,
    session: AsyncSession = Depends(get_db),
) -> CalculationSummarySchema:
    calculator = PerformanceCalculator(
        SqlHoldingSource(session),
        SqlValuationStore(session),
        SqlPerformanceStore(session),
    )
    summary = await calculator.run(target_date=payload.target_date)
    return CalculationSummarySchema.model_validate(summary)


__all__ = ["router"]
