"""Store contracts and their SQLAlchemy and in-memory implementations."""

from .base import FundRegistry, HoldingSource, PerformanceStore, ValuationStore
from .memory import InMemoryFundRegistry, InMemoryHoldingSource, InMemoryPerformanceStore, InMemoryValuationStore
from .sql import SqlFundRegistry, SqlHoldingSource, SqlPerformanceStore, SqlValuationStore

__all__ = [
    "FundRegistry",
    "HoldingSource",
    "PerformanceStore",
    "ValuationStore",
    "InMemoryFundRegistry",
    "InMemoryHoldingSource",
    "InMemoryPerformanceStore",
    "InMemoryValuationStore",
    "SqlFundRegistry",
    "SqlHoldingSource",
    "SqlPerformanceStore",
    "SqlValuationStore",
]
