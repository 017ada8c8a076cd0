"""Modified Dietz rate of return."""

from .core.exceptions import (
    CashflowImportError,
    InvalidEpsilonError,
    InvalidPeriodError,
    ModifiedDietzError,
)
from .core.finance import DEFAULT_EPSILON, ModifiedDietz
from .core.models import MarketValueDelta, Period

__all__ = [
    "DEFAULT_EPSILON",
    "ModifiedDietz",
    "MarketValueDelta",
    "Period",
    "ModifiedDietzError",
    "InvalidPeriodError",
    "InvalidEpsilonError",
    "CashflowImportError",
]
