"""
DatasetHandler - Reads the input events.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from services.dataset.event_source import EventSource


class DatasetHandler(StateHandler):
    """
    Handler for LOADING_DATASET state.

    Reads the reconstructed and truth kinematics and the particle collection
    in one pass. An unreadable or empty dataset raises DatasetError, so the
    run fails before any output exists.
    """

    def __init__(self, event_source: EventSource):
        super().__init__()
        self.event_source = event_source

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        collections = context.config.collections
        self.logger.info(f"Opening {self.event_source.file_path}")

        batch = self.event_source.read({
            collections.reco_kinematics: "kinematics",
            collections.truth_kinematics: "kinematics",
            collections.particles: "particles",
        })
        self.logger.info(f"Opened dataset with {batch.event_count} events")

        return self._finish(context, context.with_event_batch(batch))
