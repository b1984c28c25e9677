"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .funds import router as funds_router
from .jobs import router as jobs_router
from .performance import router as performance_router

api_router = APIRouter()
api_router.include_router(jobs_router, prefix="/jobs", tags=["jobs"])
api_router.include_router(performance_router, prefix="/portfolios", tags=["performance"])
api_router.include_router(funds_router, prefix="/funds", tags=["funds"])

__all__ = ["api_router"]
