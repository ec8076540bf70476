"""
PartitionedProcessor - Fork-join processing of event partitions.

Single responsibility: Run filter, derivation and filling on event partitions
in a thread pool, then merge the partial histograms deterministically.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import nullcontext
from datetime import datetime
from typing import Iterable

import awkward as ak
from tqdm import tqdm

from domain.events import EventBatch, EventPartition
from domain.histograms import HistogramCatalog
from domain.statistics import CutFlow, ProcessingStatistics
from services.calculations.quantities import QuantityPipeline
from services.histogramming.aggregator import Aggregator, FillSpec
from services.selection.filters import EventFilterChain
from utils.batching import get_partition_bounds


class PartitionedProcessor:
    """
    Processes an event batch as independent partitions.

    Filtering and derivation are pure per-event computations; every partition
    fills its own Aggregator, so no histogram is shared between threads.
    Partial aggregators are merged in partition order once all are done.
    """

    def __init__(
        self,
        catalog: HistogramCatalog,
        filter_chain: EventFilterChain,
        pipeline: QuantityPipeline,
        fill_plan: Iterable[FillSpec],
        max_threads: int = 4,
        show_progress: bool = True
    ):
        """
        Initialize processor.

        Args:
            catalog: Histogram catalog, one histogram per definition
            filter_chain: Admission cuts
            pipeline: Quantity derivations
            fill_plan: Histogram fills
            max_threads: Maximum number of concurrent threads
            show_progress: Whether to show progress bar
        """
        if max_threads <= 0:
            raise ValueError(f"max_threads must be positive, got {max_threads}")

        self.catalog = catalog
        self.filter_chain = filter_chain
        self.pipeline = pipeline
        self.fill_plan = tuple(fill_plan)
        self.max_threads = max_threads
        self.show_progress = show_progress
        self.logger = logging.getLogger(self.__class__.__name__)

    def process_events(self, events: ak.Array) -> tuple[Aggregator, CutFlow]:
        """
        Filter, derive and fill for one group of events.

        Args:
            events: Awkward array of events

        Returns:
            Tuple of (filled aggregator, cut flow)
        """
        aggregator = Aggregator(self.catalog)
        selected, cut_flow = self.filter_chain.select(events)
        if len(selected) > 0:
            quantities = self.pipeline.run(selected)
            aggregator.fill_quantities(quantities, self.fill_plan)
        return aggregator, cut_flow

    def process_batch(self, batch: EventBatch, n_partitions: int) -> tuple[Aggregator, ProcessingStatistics]:
        """
        Process a batch split into ``n_partitions`` partitions.

        Args:
            batch: Events read from the dataset
            n_partitions: Requested number of partitions

        Returns:
            Tuple of (merged aggregator, processing statistics)
        """
        start_time = datetime.now()
        start = time.time()

        partitions = [
            EventPartition.from_batch(batch, index, entry_start, entry_stop)
            for index, (entry_start, entry_stop) in enumerate(
                get_partition_bounds(len(batch.events), n_partitions)
            )
        ]
        self.logger.info(
            f"Processing {batch.event_count} events in {len(partitions)} partitions "
            f"with {min(self.max_threads, len(partitions))} threads"
        )

        results = self._run_partitions(partitions)

        # merge in partition order, independent of completion order
        merged = Aggregator(self.catalog)
        cut_flow = CutFlow(
            total_events=0,
            predicate_names=self.filter_chain.predicate_names,
            survivors=tuple(0 for _ in self.filter_chain.predicate_names),
        )
        for index in range(len(partitions)):
            partial_aggregator, partial_cut_flow = results[index]
            merged.merge(partial_aggregator)
            cut_flow = cut_flow + partial_cut_flow

        statistics = ProcessingStatistics(
            cut_flow=cut_flow,
            partitions=len(partitions),
            total_time_sec=time.time() - start,
            start_time=start_time,
            end_time=datetime.now(),
        )
        return merged, statistics

    def _run_partitions(self, partitions: list[EventPartition]) -> dict[int, tuple[Aggregator, CutFlow]]:
        results = {}

        with ThreadPoolExecutor(max_workers=self.max_threads) as executor:
            futures = {
                executor.submit(self.process_events, partition.events): partition
                for partition in partitions
            }

            progress_bar = self._create_progress_bar(len(partitions))

            with progress_bar as pbar:
                for future in as_completed(futures):
                    partition = futures[future]
                    results[partition.partition_index] = future.result()
                    self.logger.debug(
                        f"Partition {partition.partition_index} "
                        f"[{partition.entry_start}, {partition.entry_stop}) done"
                    )
                    if self.show_progress:
                        pbar.update(1)

        return results

    def _create_progress_bar(self, total: int):
        if self.show_progress:
            return tqdm(
                total=total,
                desc="Processing partitions",
                unit="partition",
                dynamic_ncols=True,
                mininterval=1
            )
        return nullcontext()
