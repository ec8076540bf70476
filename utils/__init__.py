"""
Utility modules for pipeline.
"""

from .batching import get_partition_bounds

__all__ = [
    "get_partition_bounds",
]
