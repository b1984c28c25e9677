"""Fund valuation import and performance calculation service."""

__version__ = "0.1.0"
