"""Frozen dataclass models for probe observations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sitewatch.models.enums import StatusClass


@dataclass(frozen=True, slots=True)
class Observation:
    """The outcome of a single probe of one target."""

    status_code: int  # 0 = transport failure
    status_label: str
    observed_at: datetime
    latency: timedelta = timedelta(0)

    @property
    def status_class(self) -> StatusClass:
        return StatusClass.for_code(self.status_code)


@dataclass(frozen=True, slots=True)
class TargetStatus:
    """Point-in-time view of a target: its latest observation plus history."""

    target: str
    current: Observation
    history: tuple[Observation, ...]

    def __post_init__(self) -> None:
        if not self.history:
            raise ValueError(f"history for {self.target} is empty")
        if self.history[-1] != self.current:
            raise ValueError(f"current observation for {self.target} is not the last in history")

    @classmethod
    def from_history(cls, target: str, history: list[Observation] | tuple[Observation, ...]) -> TargetStatus:
        history = tuple(history)
        if not history:
            raise ValueError(f"history for {target} is empty")
        return cls(target=target, current=history[-1], history=history)

    @property
    def checks(self) -> int:
        return len(self.history)

    @property
    def status_class(self) -> StatusClass:
        return self.current.status_class
