"""
WritingHandler - Persists the merged histograms.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from domain.histograms import HistogramCatalog
from services.histogramming.result_writer import ResultWriter


class WritingHandler(StateHandler):
    """
    Handler for WRITING_OUTPUT state.

    Every catalog histogram is written exactly once; an unwritable output
    file raises OutputError.
    """

    def __init__(self, writer: ResultWriter, catalog: HistogramCatalog):
        super().__init__()
        self.writer = writer
        self.catalog = catalog

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        if context.aggregator is None:
            return context.with_error("No histograms to write"), PipelineState.FAILED

        written = self.writer.write(context.aggregator, self.catalog)
        self.logger.info(f"Closed output file {self.writer.output_file}")

        return self._finish(context, context.with_written_histograms(written))
