from __future__ import annotations

from enum import StrEnum


class Interval(StrEnum):
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    QUARTERLY = "quarterly"

    @property
    def hledger_flag(self) -> str:
        return _INTERVAL_FLAGS[self]


_INTERVAL_FLAGS: dict[Interval, str] = {
    Interval.MONTHLY: "-M",
    Interval.WEEKLY: "-W",
    Interval.QUARTERLY: "-Q",
}


class Scenario(StrEnum):
    PESSIMISTIC = "pessimistic"
    REALISTIC = "realistic"
    OPTIMISTIC = "optimistic"


# Share of the current monthly savings pace each forecast scenario assumes.
SCENARIO_MULTIPLIERS: dict[Scenario, float] = {
    Scenario.PESSIMISTIC: 0.4,
    Scenario.REALISTIC: 1.0,
    Scenario.OPTIMISTIC: 1.6,
}
