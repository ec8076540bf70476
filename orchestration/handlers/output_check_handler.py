"""
OutputCheckHandler - Checks the output file before any event is read.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from services.histogramming.result_writer import ResultWriter


class OutputCheckHandler(StateHandler):
    """
    Handler for IDLE state.

    An output file that cannot be created raises OutputError here, so the run
    fails before the dataset is opened.
    """

    def __init__(self, writer: ResultWriter):
        super().__init__()
        self.writer = writer

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self.writer.check_writable()
        self.logger.info(f"Output file {self.writer.output_file} can be created")

        return self._finish(context, context)
