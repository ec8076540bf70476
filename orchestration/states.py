"""
Pipeline states.

The NEC run is a straight line of stages; any stage may fail.
"""

from enum import Enum, auto


class PipelineState(Enum):
    IDLE = auto()
    LOADING_DATASET = auto()
    PROCESSING = auto()
    WRITING_OUTPUT = auto()

    # Terminal states
    COMPLETED = auto()
    FAILED = auto()

    def is_terminal(self) -> bool:
        return self in (PipelineState.COMPLETED, PipelineState.FAILED)

    def __str__(self) -> str:
        return self.name


# Success path, in order
STATE_ORDER = (
    PipelineState.IDLE,
    PipelineState.LOADING_DATASET,
    PipelineState.PROCESSING,
    PipelineState.WRITING_OUTPUT,
    PipelineState.COMPLETED,
)

# Each state may move to its successor on the success path, or to FAILED
VALID_TRANSITIONS = {
    state: {successor, PipelineState.FAILED}
    for state, successor in zip(STATE_ORDER, STATE_ORDER[1:])
}
VALID_TRANSITIONS[PipelineState.COMPLETED] = set()
VALID_TRANSITIONS[PipelineState.FAILED] = set()


def is_valid_transition(from_state: PipelineState, to_state: PipelineState) -> bool:
    return to_state in VALID_TRANSITIONS.get(from_state, set())


def next_state(state: PipelineState) -> PipelineState:
    """State following ``state`` on the success path; terminal states stay put."""
    if state.is_terminal():
        return state
    return STATE_ORDER[STATE_ORDER.index(state) + 1]
