"""Data models for the Modified Dietz engine."""

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

#: Timestamp → signed flow amount. Positive = contribution, negative = withdrawal.
CashflowMap = Mapping[datetime, float]


@dataclass(frozen=True)
class Period:
    """A measurement interval, exclusive of start and inclusive of end: (start, end]."""
    start: datetime
    end: datetime

    @property
    def duration(self) -> float:
        """Length of the period in seconds."""
        return (self.end - self.start).total_seconds()

    def contains(self, ts: datetime) -> bool:
        return self.start < ts <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


@dataclass(frozen=True)
class MarketValueDelta:
    """Beginning and ending market value of the period, in a single currency."""
    start: float
    end: float
