"""
Pipeline context.

Immutable record of one run, handed from stage to stage.
"""

from dataclasses import dataclass, field, replace
from typing import Optional
from datetime import datetime

from domain.config import PipelineConfig
from domain.events import EventBatch
from domain.statistics import ProcessingStatistics
from services.histogramming.aggregator import Aggregator
from .states import PipelineState


@dataclass(frozen=True)
class PipelineContext:
    """
    Everything a run has produced so far.

    Stages never mutate a context; they return a copy made with one of the
    ``with_*`` methods.
    """

    config: PipelineConfig
    current_state: PipelineState
    start_time: datetime = field(default_factory=datetime.now)

    # Stage outputs
    event_batch: Optional[EventBatch] = None
    aggregator: Optional[Aggregator] = None
    processing_stats: Optional[ProcessingStatistics] = None
    written_histograms: list[str] = field(default_factory=list)

    # Seconds spent per stage, in execution order
    stage_times: dict[str, float] = field(default_factory=dict)

    error_message: Optional[str] = None
    error_details: Optional[dict] = None

    def with_state(self, new_state: PipelineState) -> 'PipelineContext':
        return replace(self, current_state=new_state)

    def with_event_batch(self, batch: EventBatch) -> 'PipelineContext':
        """Return new context holding the events read from the dataset."""
        return replace(self, event_batch=batch)

    def with_results(self, aggregator: Aggregator, stats: ProcessingStatistics) -> 'PipelineContext':
        """
        Return new context with filled histograms and processing statistics.

        The event batch is dropped; events are not needed after filling.
        """
        return replace(self, aggregator=aggregator, processing_stats=stats, event_batch=None)

    def with_written_histograms(self, names: list[str]) -> 'PipelineContext':
        return replace(self, written_histograms=list(names))

    def with_stage_time(self, stage: str, seconds: float) -> 'PipelineContext':
        return replace(self, stage_times={**self.stage_times, stage: seconds})

    def with_error(self, message: str, details: Optional[dict] = None) -> 'PipelineContext':
        """
        Return new context in the FAILED state.

        Args:
            message: Error message
            details: Optional error details dict
        """
        return replace(
            self,
            current_state=PipelineState.FAILED,
            error_message=message,
            error_details=details or {}
        )

    @property
    def elapsed_time(self) -> float:
        """Seconds since the run started."""
        return (datetime.now() - self.start_time).total_seconds()

    @property
    def is_terminal(self) -> bool:
        return self.current_state.is_terminal()

    @property
    def is_successful(self) -> bool:
        return self.current_state == PipelineState.COMPLETED

    @property
    def has_error(self) -> bool:
        return self.current_state == PipelineState.FAILED

    def get_summary(self) -> dict:
        """
        Summary of the run for logging and the JSON run stats.

        Returns:
            Dict with state, timing, cut flow and output information
        """
        summary = {
            "state": str(self.current_state),
            "start_time": self.start_time.isoformat(),
            "elapsed_time_sec": self.elapsed_time,
            "stage_times_sec": dict(self.stage_times),
            "written_histograms_count": len(self.written_histograms),
            "is_successful": self.is_successful,
            "error_message": self.error_message,
        }
        if self.processing_stats is not None:
            summary["processing"] = self.processing_stats.to_dict()
        return summary
