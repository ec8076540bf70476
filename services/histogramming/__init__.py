"""
Histogramming services.

Filling, merging and writing of the analysis histograms.
"""

from .aggregator import Aggregator, BinContent, FillSpec
from .result_writer import ResultWriter

__all__ = [
    "Aggregator",
    "BinContent",
    "FillSpec",
    "ResultWriter",
]
