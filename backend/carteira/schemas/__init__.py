"""Pydantic schemas exposed by the API."""

from .funds import DailyChangeSchema
from .jobs import (
    CalculationRequest,
    CalculationSummarySchema,
    ImportRequest,
    ImportSummarySchema,
    PerformanceRecordSchema,
    PortfolioPerformanceSchema,
)

__all__ = [
    "CalculationRequest",
    "CalculationSummarySchema",
    "DailyChangeSchema",
    "ImportRequest",
    "ImportSummarySchema",
    "PerformanceRecordSchema",
    "PortfolioPerformanceSchema",
]
