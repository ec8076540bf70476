"""
Statistics-related domain models.

Immutable data structures for tracking event selection and processing statistics.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CutFlow:
    """
    Events surviving each admission predicate, in evaluation order.

    ``survivors[i]`` counts events that passed predicates ``0..i``.
    """

    total_events: int
    predicate_names: tuple[str, ...] = field(default_factory=tuple)
    survivors: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate the cut flow."""
        if self.total_events < 0:
            raise ValueError(f"total_events must be non-negative, got {self.total_events}")
        if len(self.predicate_names) != len(self.survivors):
            raise ValueError(
                f"predicate_names ({len(self.predicate_names)}) and survivors "
                f"({len(self.survivors)}) must have the same length"
            )
        previous = self.total_events
        for name, count in zip(self.predicate_names, self.survivors):
            if count < 0 or count > previous:
                raise ValueError(f"survivors after '{name}' must be within 0..{previous}, got {count}")
            previous = count

    @property
    def passed_events(self) -> int:
        """Events surviving every predicate."""
        if not self.survivors:
            return self.total_events
        return self.survivors[-1]

    @property
    def efficiency(self) -> float:
        if self.total_events == 0:
            return 0.0
        return self.passed_events / self.total_events

    def __add__(self, other: 'CutFlow') -> 'CutFlow':
        if self.predicate_names != other.predicate_names:
            raise ValueError("Cannot combine cut flows of different predicate chains")
        return CutFlow(
            total_events=self.total_events + other.total_events,
            predicate_names=self.predicate_names,
            survivors=tuple(a + b for a, b in zip(self.survivors, other.survivors)),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_events": self.total_events,
            "survivors": dict(zip(self.predicate_names, self.survivors)),
            "passed_events": self.passed_events,
            "efficiency": f"{self.efficiency * 100:.1f}%",
        }


@dataclass(frozen=True)
class ProcessingStatistics:
    """
    Statistics of one processing run.

    Immutable snapshot of selection and timing.
    """

    cut_flow: CutFlow
    partitions: int
    total_time_sec: float
    start_time: datetime
    end_time: datetime

    def __post_init__(self):
        """Validate processing statistics."""
        if self.partitions <= 0:
            raise ValueError(f"partitions must be positive, got {self.partitions}")
        if self.total_time_sec < 0:
            raise ValueError(f"total_time_sec must be non-negative, got {self.total_time_sec}")
        if self.end_time < self.start_time:
            raise ValueError("end_time must be after start_time")

    @property
    def events_per_second(self) -> float:
        if self.total_time_sec == 0:
            return 0.0
        return self.cut_flow.total_events / self.total_time_sec

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            **self.cut_flow.to_dict(),
            "partitions": self.partitions,
            "total_time_sec": f"{self.total_time_sec:.1f}",
            "events_per_second": f"{self.events_per_second:.0f}",
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
        }
