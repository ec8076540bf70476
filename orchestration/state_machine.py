"""
State machine for pipeline execution.

Drives a PipelineContext from IDLE to COMPLETED through the stage handlers,
recording how long every stage took.
"""

import logging
import time
from typing import Dict

from domain.errors import NECError
from .context import PipelineContext
from .states import PipelineState, STATE_ORDER, is_valid_transition, next_state
from .handlers.base import StateHandler

# Stages that must do work; IDLE may have a handler for pre-run checks
STAGE_STATES = (
    PipelineState.LOADING_DATASET,
    PipelineState.PROCESSING,
    PipelineState.WRITING_OUTPUT,
)


class StateMachine:
    """
    Runs stage handlers in order until COMPLETED or FAILED.

    A stage raising ``NECError`` fails the run: the error is logged as a
    panic and the context moves to FAILED. Any other exception is a bug and
    propagates unchanged.
    """

    def __init__(self, handlers: Dict[PipelineState, StateHandler]):
        """
        Args:
            handlers: Handler per stage state
        """
        self.handlers = handlers
        self.logger = logging.getLogger(self.__class__.__name__)

        missing = [str(state) for state in STAGE_STATES if state not in handlers]
        if missing:
            self.logger.warning(f"No handler for stages {missing}; they will be skipped")

    def run(self, initial_context: PipelineContext) -> PipelineContext:
        """
        Run the pipeline.

        Args:
            initial_context: Context to start from, usually in IDLE

        Returns:
            Final context, in COMPLETED or FAILED
        """
        context = initial_context
        self.logger.info(f"Running pipeline '{context.config.run_name}'")

        # each state is visited at most once on the way to a terminal state
        for _ in range(len(STATE_ORDER)):
            if context.is_terminal:
                break
            state = context.current_state
            stage_start = time.time()
            try:
                context = self._step(context)
            except NECError as e:
                self.logger.error(f"PANIC: {e}")
                context = context.with_error(
                    message=f"Error in {state}: {e}",
                    details={"state": str(state), "error_type": type(e).__name__},
                )
            if state in self.handlers:
                context = context.with_stage_time(str(state), time.time() - stage_start)

        if not context.is_terminal:
            context = context.with_error(f"Pipeline stopped in non-terminal state {context.current_state}")

        self._log_outcome(context)
        return context

    def _step(self, context: PipelineContext) -> PipelineContext:
        """Run the handler of the current state and move to the state it returns."""
        current = context.current_state
        handler = self.handlers.get(current)

        if handler is None:
            return context.with_state(next_state(current))

        updated_context, target = handler.handle(context)

        if not is_valid_transition(current, target):
            self.logger.error(f"Invalid transition: {current} → {target}")
            return context.with_error(f"Invalid state transition: {current} → {target}")

        self.logger.debug(f"Transition: {current} → {target}")
        return updated_context.with_state(target)

    def _log_outcome(self, context: PipelineContext):
        if context.is_successful:
            self.logger.info(f"✓ Pipeline completed in {context.elapsed_time:.1f}s")
        else:
            self.logger.error(f"✗ Pipeline failed: {context.error_message}")

        for stage, seconds in context.stage_times.items():
            self.logger.info(f"  {stage}: {seconds:.1f}s")
