"""
Event-related domain models.

Immutable data structures representing read event batches and their partitions.
"""

from dataclasses import dataclass
import awkward as ak


@dataclass(frozen=True)
class EventBatch:
    """Events read from the dataset, one field per collection."""

    events: ak.Array
    source: str
    event_count: int
    read_time_sec: float

    def __post_init__(self):
        """Validate the event batch."""
        if self.event_count < 0:
            raise ValueError(f"event_count must be non-negative, got {self.event_count}")
        if self.read_time_sec < 0:
            raise ValueError(f"read_time_sec must be non-negative, got {self.read_time_sec}")

    @property
    def collections(self) -> tuple[str, ...]:
        return tuple(self.events.fields)


@dataclass(frozen=True)
class EventPartition:
    """
    A contiguous slice of an EventBatch processed by one worker.

    Partitions of one batch are merged back in ``partition_index`` order.
    """

    events: ak.Array
    partition_index: int
    entry_start: int
    entry_stop: int

    def __post_init__(self):
        """Validate the partition."""
        if self.partition_index < 0:
            raise ValueError(f"partition_index must be non-negative, got {self.partition_index}")
        if self.entry_start < 0 or self.entry_stop < self.entry_start:
            raise ValueError(
                f"invalid entry range [{self.entry_start}, {self.entry_stop})"
            )

    @property
    def event_count(self) -> int:
        return self.entry_stop - self.entry_start

    @classmethod
    def from_batch(cls, batch: EventBatch, partition_index: int, entry_start: int, entry_stop: int) -> 'EventPartition':
        """Slice ``[entry_start, entry_stop)`` out of a batch."""
        return cls(
            events=batch.events[entry_start:entry_stop],
            partition_index=partition_index,
            entry_start=entry_start,
            entry_stop=entry_stop,
        )
