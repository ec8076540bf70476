"""
Partition splitting utilities for parallel event processing.

Splits a range of events into contiguous partitions.
"""

import logging

logger = logging.getLogger(__name__)


def get_partition_bounds(n_items: int, n_partitions: int) -> list[tuple[int, int]]:
    """
    Split ``range(n_items)`` into contiguous ``(start, stop)`` partitions.

    Uses even distribution with the last partition absorbing the remainder.
    Never returns more partitions than items, and never an empty partition
    unless there are no items at all.

    Args:
        n_items: Number of items to split
        n_partitions: Requested number of partitions

    Returns:
        List of (start, stop) pairs covering every item exactly once
    """
    if n_partitions <= 0:
        raise ValueError(f"n_partitions must be positive, got {n_partitions}")
    if n_items < 0:
        raise ValueError(f"n_items must be non-negative, got {n_items}")
    if n_items == 0:
        return [(0, 0)]

    n_partitions = min(n_partitions, n_items)
    items_per_partition = n_items // n_partitions

    bounds = []
    for index in range(n_partitions):
        start_idx = index * items_per_partition
        if index == n_partitions - 1:
            end_idx = n_items  # Last partition gets remainder
        else:
            end_idx = start_idx + items_per_partition
        bounds.append((start_idx, end_idx))

    logger.debug(f"Split {n_items} items into {len(bounds)} partitions")
    return bounds
