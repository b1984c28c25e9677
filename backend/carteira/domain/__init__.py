"""Domain records and helpers shared by the import and calculation jobs."""

from .cnpj import format_canonical, is_canonical, normalize, padded_digits
from .periods import iter_months, month_end, month_start, shift_months
from .records import FundRegistryEntry, HoldingSnapshot, PerformanceRecord, ValuationRecord

__all__ = [
    "FundRegistryEntry",
    "HoldingSnapshot",
    "PerformanceRecord",
    "ValuationRecord",
    "format_canonical",
    "is_canonical",
    "iter_months",
    "month_end",
    "month_start",
    "normalize",
    "padded_digits",
    "shift_months",
]
