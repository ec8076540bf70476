"""
State handlers for pipeline execution.

Each handler implements logic for a specific pipeline state.
"""

from .base import StateHandler
from .output_check_handler import OutputCheckHandler
from .dataset_handler import DatasetHandler
from .processing_handler import ProcessingHandler
from .writing_handler import WritingHandler

__all__ = [
    "StateHandler",
    "OutputCheckHandler",
    "DatasetHandler",
    "ProcessingHandler",
    "WritingHandler",
]
