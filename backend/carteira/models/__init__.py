"""Database model exports."""

from .fund import FundInvestment, InvestmentFund, Portfolio
from .performance import PerformanceHistory
from .valuation import FundValuation

__all__ = [
    "Portfolio",
    "InvestmentFund",
    "FundInvestment",
    "FundValuation",
    "PerformanceHistory",
]
