"""Modified Dietz return calculations.

Pure functions for cash-flow filtering, period adjustment and time
weighting, plus the ModifiedDietz engine that chains them.
No I/O.

Usage:
    from modified_dietz.core.finance import ModifiedDietz, Period, MarketValueDelta
"""

from ..models import MarketValueDelta, Period
from .dietz import ModifiedDietz
from .returns import (
    DEFAULT_EPSILON,
    adjust_period,
    cashflow_weight,
    filter_cashflows,
    ieee_divide,
    net_cashflow_total,
    ordered_dates,
    time_weighted_cashflow,
    validate_epsilon,
    validate_period,
)

__all__ = [
    "ModifiedDietz",
    "MarketValueDelta",
    "Period",
    "DEFAULT_EPSILON",
    "validate_period",
    "validate_epsilon",
    "filter_cashflows",
    "ordered_dates",
    "net_cashflow_total",
    "adjust_period",
    "cashflow_weight",
    "time_weighted_cashflow",
    "ieee_divide",
]
