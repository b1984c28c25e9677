"""Read-side endpoint for day-over-day fund quota movement."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from carteira.db.session import get_db
from carteira.repositories import SqlValuationStore
from carteira.schemas import DailyChangeSchema
from carteira.services.valuations import daily_change

router = APIRouter()


@router.get("/daily-change", response_model=DailyChangeSchema)
async def get_daily_change(
    cnpj: str = Query(..., description="Fund registry number, punctuated or digits only"),
    day: date = Query(...),
    session: AsyncSession = Depends(get_db),
) -> DailyChangeSchema:
    try:
        result = await daily_change(SqlValuationStore(session), cnpj, day)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No quota published for {cnpj} on {day.isoformat()}",
        )
    return DailyChangeSchema.model_validate(result)


__all__ = ["router"]
