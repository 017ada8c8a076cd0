"""Modified Dietz return engine.

Derives every quantity once, at construction, from immutable inputs. The
instance is read-only afterwards, so it can be shared across threads.
"""

import logging
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from ..exceptions import ModifiedDietzError
from ..models import CashflowMap, MarketValueDelta, Period
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

logger = logging.getLogger(__name__)


class ModifiedDietz:
    """Modified Dietz rate of return for a single period.

    Period semantics: start < t <= end (exclusive of start, inclusive of end).

    Raises:
        InvalidPeriodError: period.start >= period.end.
        InvalidEpsilonError: epsilon outside [0, 1].
    """

    __slots__ = (
        "_period",
        "_market_value",
        "_raw_cashflow_map",
        "_epsilon",
        "_net_cashflow_map",
        "_ordered_cashflow_dates",
        "_net_cashflow_total",
        "_adjusted_period",
        "_adjusted_net_cashflow",
        "_gain_or_loss",
        "_average_capital",
        "_performance",
    )

    def __init__(
        self,
        period: Period,
        market_value: MarketValueDelta,
        raw_cashflow_map: Optional[CashflowMap] = None,
        epsilon: float = DEFAULT_EPSILON,
    ):
        validate_period(period)
        validate_epsilon(epsilon)

        _set = object.__setattr__
        _set(self, "_period", period)
        _set(self, "_market_value", market_value)
        _set(self, "_raw_cashflow_map", MappingProxyType(dict(raw_cashflow_map or {})))
        _set(self, "_epsilon", epsilon)

        net = filter_cashflows(self._raw_cashflow_map, period, epsilon)
        dates = ordered_dates(net)
        adjusted = adjust_period(period, market_value, dates)
        total = net_cashflow_total(net)
        ttwcf = time_weighted_cashflow(net, adjusted)
        gain = market_value.end - market_value.start - total
        capital = market_value.start + ttwcf

        _set(self, "_net_cashflow_map", MappingProxyType(net))
        _set(self, "_ordered_cashflow_dates", dates)
        _set(self, "_net_cashflow_total", total)
        _set(self, "_adjusted_period", adjusted)
        _set(self, "_adjusted_net_cashflow", ttwcf)
        _set(self, "_gain_or_loss", gain)
        _set(self, "_average_capital", capital)
        _set(self, "_performance", ieee_divide(gain, capital))

        if adjusted != period:
            logger.debug("Adjusted period %s → %s", period, adjusted)
        if capital == 0:
            logger.warning("Average capital is zero; performance is %s", self._performance)
        logger.debug("Modified Dietz over %s: %d net flows, R=%s", period, len(net), self._performance)

    @classmethod
    def from_values(
        cls,
        period: Period,
        start_value: float,
        end_value: float,
        cashflow_map: Optional[CashflowMap] = None,
        epsilon: float = DEFAULT_EPSILON,
    ) -> "ModifiedDietz":
        """Build from explicit start and end values instead of a MarketValueDelta."""
        return cls(period, MarketValueDelta(start=start_value, end=end_value), cashflow_map, epsilon)

    @classmethod
    def create(
        cls,
        period: Period,
        market_value: MarketValueDelta,
        raw_cashflow_map: Optional[CashflowMap] = None,
        epsilon: float = DEFAULT_EPSILON,
    ) -> Optional["ModifiedDietz"]:
        """Like the constructor, but returns None for an invalid period or epsilon."""
        try:
            return cls(period, market_value, raw_cashflow_map, epsilon)
        except ModifiedDietzError as e:
            logger.debug("Not constructed: %s", e)
            return None

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def period(self) -> Period:
        """The period for which performance is calculated."""
        return self._period

    @property
    def market_value(self) -> MarketValueDelta:
        return self._market_value

    @property
    def raw_cashflow_map(self) -> Mapping[datetime, float]:
        """Cash flows as supplied, including any outside the period or below epsilon."""
        return self._raw_cashflow_map

    @property
    def epsilon(self) -> float:
        return self._epsilon

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def net_cashflow_map(self) -> Mapping[datetime, float]:
        """Cash flows within (start, end] whose magnitude exceeds epsilon."""
        return self._net_cashflow_map

    @property
    def ordered_cashflow_dates(self) -> tuple[datetime, ...]:
        return self._ordered_cashflow_dates

    @property
    def net_cashflow_total(self) -> float:
        """Net external inflow (F), also known as total net cash flows (tncf).

        Contributions are positive, withdrawals negative.
        """
        return self._net_cashflow_total

    @property
    def adjusted_period(self) -> Period:
        """The period without the time before the account was funded or after it was emptied."""
        return self._adjusted_period

    @property
    def adjusted_net_cashflow(self) -> float:
        """Sum of each flow multiplied by its weight, also known as ttwcf."""
        return self._adjusted_net_cashflow

    @property
    def gain_or_loss(self) -> float:
        return self._gain_or_loss

    @property
    def average_capital(self) -> float:
        return self._average_capital

    @property
    def performance(self) -> float:
        """Rate of return (R).

        nan or ±inf when average capital is zero. This is a valid result,
        e.g. a full liquidation with nothing left at work.
        """
        return self._performance

    def weight(self, ts: datetime) -> float:
        """Weight of a flow at ts within the adjusted period."""
        return cashflow_weight(ts, self._adjusted_period)

    # ------------------------------------------------------------------
    # Equality excludes epsilon and every derived value
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, ModifiedDietz):
            return NotImplemented
        return (
            self._period == other._period
            and self._market_value == other._market_value
            and dict(self._raw_cashflow_map) == dict(other._raw_cashflow_map)
        )

    def __hash__(self):
        return hash((self._period, self._market_value, frozenset(self._raw_cashflow_map.items())))

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def describe(self) -> str:
        """Multi-line diagnostic dump of the inputs and derived values."""
        lines = ["NetCashFlowMap:"]
        lines.extend(f"({ts.isoformat()}, {amount})" for ts, amount in self._net_cashflow_map.items())
        lines.append(f"mv.start {self._market_value.start:.0f}")
        lines.append(f"mv.end {self._market_value.end:.0f}")
        lines.append(f"netCashflowTotal {self._net_cashflow_total:.0f}")
        lines.append(f"gainOrLoss {self._gain_or_loss:.0f}")
        lines.append(f"adjustedNetCashflow {self._adjusted_net_cashflow:.0f}")
        lines.append(f"averageCapital {self._average_capital:.0f}")
        lines.append(f"period={self._period}")
        lines.append(f"adjustedPeriod={self._adjusted_period}")
        lines.append("dates=[" + ", ".join(ts.isoformat() for ts in self._ordered_cashflow_dates) + "]")
        lines.append(f"performance {100.0 * self._performance:.1f}%")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return (
            f"ModifiedDietz(period={self._period}, start={self._market_value.start!r}, "
            f"end={self._market_value.end!r}, flows={len(self._net_cashflow_map)}, "
            f"performance={self._performance!r})"
        )
