"""
Domain models for the NEC pipeline.

Pure data structures with validation, no business logic.
"""

from .errors import (
    NECError,
    ConfigurationError,
    DuplicateNameError,
    UnknownAxisError,
    UnknownHistogramError,
    MissingInputError,
    RegistrySealedError,
    DatasetError,
    OutputError,
)
from .axes import Axis, AxisRegistry
from .histograms import HistogramSpec, HistogramDefinition, HistogramCatalog, make_title
from .events import EventBatch, EventPartition
from .statistics import CutFlow, ProcessingStatistics
from .config import (
    PipelineConfig,
    AnalysisOptions,
    CollectionNames,
    ProcessingConfig,
)

__all__ = [
    "NECError",
    "ConfigurationError",
    "DuplicateNameError",
    "UnknownAxisError",
    "UnknownHistogramError",
    "MissingInputError",
    "RegistrySealedError",
    "DatasetError",
    "OutputError",
    "Axis",
    "AxisRegistry",
    "HistogramSpec",
    "HistogramDefinition",
    "HistogramCatalog",
    "make_title",
    "EventBatch",
    "EventPartition",
    "CutFlow",
    "ProcessingStatistics",
    "PipelineConfig",
    "AnalysisOptions",
    "CollectionNames",
    "ProcessingConfig",
]
