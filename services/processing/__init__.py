"""
Processing services.

Fork-join processing of event partitions.
"""

from .partitioned_processor import PartitionedProcessor

__all__ = ["PartitionedProcessor"]
