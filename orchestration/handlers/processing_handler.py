"""
ProcessingHandler - Selection, derivation and filling.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from services.processing.partitioned_processor import PartitionedProcessor


class ProcessingHandler(StateHandler):
    """
    Handler for PROCESSING state.

    Runs the PartitionedProcessor over the loaded events; the merged
    histograms and the cut flow replace the events in the context.
    """

    def __init__(self, processor: PartitionedProcessor):
        super().__init__()
        self.processor = processor

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        if context.event_batch is None:
            return context.with_error("No events loaded before processing"), PipelineState.FAILED

        aggregator, stats = self.processor.process_batch(
            context.event_batch,
            n_partitions=context.config.processing.partitions
        )

        cut_flow = stats.cut_flow
        self.logger.info(
            f"Selected {cut_flow.passed_events}/{cut_flow.total_events} events "
            f"({cut_flow.efficiency * 100:.1f}%) in {stats.total_time_sec:.1f}s"
        )
        for name, survivors in zip(cut_flow.predicate_names, cut_flow.survivors):
            self.logger.info(f"  after {name}: {survivors}")

        return self._finish(context, context.with_results(aggregator, stats))
