"""
Aggregator service - Fills histograms from derived quantities.

Single responsibility: Own the histograms of one worker (or of the whole run)
and accumulate sum of weights and sum of weights² per bin.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import awkward as ak
import hist
import numpy as np

from domain.histograms import HistogramCatalog


@dataclass(frozen=True)
class FillSpec:
    """Which quantities fill a histogram: one value per axis and an optional weight."""

    histogram: str
    values: tuple[str, ...]
    weight: Optional[str] = None

    @property
    def inputs(self) -> tuple[str, ...]:
        if self.weight is None:
            return self.values
        return self.values + (self.weight,)


@dataclass(frozen=True)
class BinContent:
    """Accumulated content of one bin."""

    sum_of_weights: float
    sum_of_weights_squared: float

    @property
    def count(self) -> float:
        """Bin content as ROOT reports it: the sum of weights."""
        return self.sum_of_weights


def _flatten_to_numpy(array) -> np.ndarray:
    if isinstance(array, ak.Array):
        return ak.to_numpy(ak.flatten(array, axis=None)).astype(np.float64)
    return np.atleast_1d(np.asarray(array, dtype=np.float64)).ravel()


def _broadcast_and_flatten(*arrays) -> list[np.ndarray]:
    """
    Broadcast event-level scalars against per-particle vectors and flatten.

    An event scalar paired with per-particle weights becomes one entry per particle.
    """
    if any(isinstance(a, ak.Array) for a in arrays):
        return [_flatten_to_numpy(a) for a in ak.broadcast_arrays(*arrays)]
    flat = np.broadcast_arrays(*[np.atleast_1d(np.asarray(a, dtype=np.float64)) for a in arrays])
    return [a.flatten() for a in flat]


class Aggregator:
    """
    Holds one empty-at-start histogram per catalog definition and fills them.

    Fills are buffered as flat arrays and binned when a histogram is first
    read. Partial aggregators built from the same catalog are combined with
    ``merge``, which appends the buffered fills in merge order, so merging
    contiguous partitions in order bins exactly the same entries in the same
    order as one sequential fill.
    """

    def __init__(self, catalog: HistogramCatalog):
        """
        Initialize aggregator.

        Args:
            catalog: Histogram catalog; one histogram is created per definition
        """
        self.catalog = catalog
        self._histograms: dict[str, hist.Hist] = {
            definition.name: definition.create_histogram() for definition in catalog
        }
        self._pending: dict[str, list[tuple]] = {name: [] for name in self._histograms}
        self._entries: dict[str, int] = {name: 0 for name in self._histograms}
        self.logger = logging.getLogger(self.__class__.__name__)

    def fill(self, histogram_name: str, *values, weight=None):
        """
        Fill a histogram.

        ``fill(h, v)`` and ``fill(h, v, w)`` for 1-D, ``fill(h, x, y)`` and
        ``fill(h, x, y, w)`` for 2-D. One value more than the dimension is
        taken as the weight; ``weight=w`` may be given instead. Values and
        weight may be scalars, numpy arrays, or awkward arrays (jagged
        per-particle arrays are filled once per particle).

        Raises:
            UnknownHistogramError: If the histogram is not in the catalog
            ValueError: If the number of values does not match the dimension
        """
        definition = self.catalog.get_definition(histogram_name)
        if weight is None and len(values) == definition.ndim + 1:
            *values, weight = values
        if len(values) != definition.ndim:
            raise ValueError(
                f"Histogram '{histogram_name}' is {definition.ndim}-D, got {len(values)} values"
            )

        if weight is None:
            flat_values = _broadcast_and_flatten(*values)
            flat_weight = None
        else:
            *flat_values, flat_weight = _broadcast_and_flatten(*values, weight)

        n_entries = len(flat_values[0])
        if n_entries == 0:
            return

        self._pending[histogram_name].append((tuple(flat_values), flat_weight))
        self._entries[histogram_name] += n_entries

    def fill_quantities(self, quantities: dict, fill_specs: Iterable[FillSpec]):
        """
        Fill every histogram whose inputs are present in the quantity namespace.

        Args:
            quantities: Named quantities of a batch of events
            fill_specs: Fill plan
        """
        for spec in fill_specs:
            if not all(name in quantities for name in spec.inputs):
                self.logger.debug(f"Skipping {spec.histogram}: inputs not available")
                continue
            weight = quantities[spec.weight] if spec.weight is not None else None
            self.fill(spec.histogram, *(quantities[name] for name in spec.values), weight=weight)

    def merge(self, other: 'Aggregator') -> 'Aggregator':
        """
        Add another aggregator's fills after this one's.

        Buffered fills are appended; content the other aggregator has already
        binned is added bin by bin (values and variances).
        """
        if other.catalog.names() != self.catalog.names():
            raise ValueError("Cannot merge aggregators built from different catalogs")
        for name, histogram in other._histograms.items():
            self._histograms[name] += histogram
            self._pending[name].extend(other._pending[name])
            self._entries[name] += other._entries[name]
        return self

    def histogram(self, histogram_name: str) -> hist.Hist:
        self.catalog.get_definition(histogram_name)
        self._flush(histogram_name)
        return self._histograms[histogram_name]

    def histograms(self) -> dict[str, hist.Hist]:
        """All histograms, in catalog order."""
        for name in self._histograms:
            self._flush(name)
        return dict(self._histograms)

    def entries(self, histogram_name: str) -> int:
        """Number of fills into a histogram, flow bins included."""
        self.catalog.get_definition(histogram_name)
        return self._entries[histogram_name]

    def bin_content(self, histogram_name: str, *coordinates: float) -> BinContent:
        """
        Content of the bin containing the given coordinates (flow bins included).

        Args:
            histogram_name: Histogram to look up
            coordinates: One coordinate per axis
        """
        histogram = self.histogram(histogram_name)
        # flow view index: underflow is 0, so regular bins are shifted by one
        index = tuple(axis.index(c) + 1 for axis, c in zip(histogram.axes, coordinates))
        view = histogram.view(flow=True)
        return BinContent(
            sum_of_weights=float(view.value[index]),
            sum_of_weights_squared=float(view.variance[index]),
        )

    def _flush(self, histogram_name: str):
        """Bin the buffered fills of one histogram in a single pass, in fill order."""
        chunks = self._pending[histogram_name]
        if not chunks:
            return

        values = [np.concatenate(column) for column in zip(*(chunk[0] for chunk in chunks))]
        if all(chunk[1] is None for chunk in chunks):
            weight = None
        else:
            # unweighted chunks count with weight 1
            weight = np.concatenate([
                np.ones(len(chunk_values[0])) if chunk_weight is None else chunk_weight
                for chunk_values, chunk_weight in chunks
            ])

        self._histograms[histogram_name].fill(*values, weight=weight)
        self._pending[histogram_name] = []
