"""
Base stage handler.
"""

from abc import ABC, abstractmethod
import logging

from orchestration.context import PipelineContext
from orchestration.states import PipelineState, next_state


class StateHandler(ABC):
    """
    One pipeline stage.

    A handler receives the context in its own state and returns the updated
    context together with the state to move to. Fatal problems are raised as
    ``NECError`` and turned into FAILED by the state machine.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        """
        Run the stage.

        Args:
            context: Context in this handler's state

        Returns:
            Tuple of (updated_context, next_state)

        Raises:
            NECError: If the run must abort
        """

    def _determine_next_state(self, context: PipelineContext) -> PipelineState:
        """Stages always run in order: dataset, processing, output."""
        return next_state(context.current_state)

    def _finish(self, context: PipelineContext, updated: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        """Log the stage exit and hand ``updated`` on to the next stage."""
        target = self._determine_next_state(context)
        self.logger.info(f"{context.current_state} done → {target}")
        return updated, target
