"""Modified Dietz building blocks.

All functions are pure — they accept periods, market values and cash-flow
maps and return floats or new values. No I/O, no side effects.

Formula:
  R = (MV_end − MV_start − F) / (MV_start + Σ F_i × W_i)
  W_i = (D − (t_i − start)) / D

Where:
  F    — sum of net external cash flows in the period
  F_i  — a single net cash flow at timestamp t_i
  D    — duration of the (adjusted) period in seconds
  W_i  — share of the period remaining after the flow (1.0 at start, 0.0 at end)
"""

import logging
import math
from datetime import datetime
from typing import Sequence

from ..exceptions import InvalidEpsilonError, InvalidPeriodError
from ..models import CashflowMap, MarketValueDelta, Period

logger = logging.getLogger(__name__)

#: Default threshold below which a cash flow amount is treated as absent.
DEFAULT_EPSILON = 0.0001


def validate_period(period: Period) -> None:
    """Raise InvalidPeriodError unless period.start < period.end."""
    if not period.start < period.end:
        raise InvalidPeriodError(
            f"Period end must follow its start: {period.start.isoformat()} → {period.end.isoformat()}"
        )


def validate_epsilon(epsilon: float) -> None:
    """Raise InvalidEpsilonError unless 0 <= epsilon <= 1."""
    if not 0.0 <= epsilon <= 1.0:
        raise InvalidEpsilonError(f"Epsilon must be within [0, 1], got {epsilon!r}")


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics instead of raising ZeroDivisionError.

    0/0 and nan/0 give nan; any other x/0 gives an infinity whose sign is
    the product of the operand signs (so a -0.0 denominator flips it).
    """
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def filter_cashflows(raw: CashflowMap, period: Period, epsilon: float) -> dict[datetime, float]:
    """Keep the flows inside (period.start, period.end] whose magnitude exceeds epsilon.

    Args:
        raw: Caller-supplied cash flows, possibly outside the period or negligible.
        period: Measurement period. Start is exclusive, end is inclusive.
        epsilon: Amounts with abs(amount) <= epsilon are dropped.

    Returns:
        New dict holding only the net cash flows.
    """
    net = {ts: amount for ts, amount in raw.items() if period.contains(ts) and abs(amount) > epsilon}
    if len(net) != len(raw):
        logger.debug("Dropped %d of %d cash flows (outside period or <= %g)",
                     len(raw) - len(net), len(raw), epsilon)
    return net


def ordered_dates(flows: CashflowMap) -> tuple[datetime, ...]:
    return tuple(sorted(flows))


def net_cashflow_total(flows: CashflowMap) -> float:
    """Net external inflow (F). Summed in date order for reproducible rounding."""
    return sum((flows[ts] for ts in sorted(flows)), 0.0)


def adjust_period(period: Period, market_value: MarketValueDelta, dates: Sequence[datetime]) -> Period:
    """Shrink the period to the funded span when the account starts or ends empty.

    A zero starting value moves the start to the first net cash flow; a zero
    ending value moves the end to the last one. Without net cash flows the
    original boundaries are kept, even if a market value is zero.

    Args:
        period: Original measurement period.
        market_value: Beginning and ending market value.
        dates: Net cash-flow timestamps in ascending order.

    Returns:
        The adjusted period. It may have zero duration.
    """
    if not dates:
        return period
    start, end = period.start, period.end
    if market_value.start == 0:
        start = dates[0]
    if market_value.end == 0:
        end = dates[-1]
    return Period(start=start, end=end)


def cashflow_weight(ts: datetime, adjusted_period: Period) -> float:
    """Fraction of the adjusted period remaining after ts (1.0 at start, 0.0 at end)."""
    duration = adjusted_period.duration
    elapsed = (ts - adjusted_period.start).total_seconds()
    return ieee_divide(duration - elapsed, duration)


def time_weighted_cashflow(flows: CashflowMap, adjusted_period: Period) -> float:
    """Adjusted net cash flow: Σ F_i × W_i, also known as ttwcf."""
    return sum(
        (flows[ts] * cashflow_weight(ts, adjusted_period) for ts in sorted(flows)),
        0.0,
    )
