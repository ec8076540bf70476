"""
EventFilterChain service - Event admission.

Single responsibility: Decide which events enter the derivation and filling steps.
Cuts are silent; only the cumulative survivor counts are kept.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import awkward as ak
import numpy as np

from domain.errors import DuplicateNameError
from domain.statistics import CutFlow

# Maps a batch of events to one boolean per event
Predicate = Callable[[ak.Array], ak.Array]


def in_range(value, low: float, high: float):
    """True iff ``low < value < high``; both bounds are excluded. Works on scalars and arrays."""
    return (low < value) & (value < high)


def has_collection(name: str) -> Predicate:
    """Predicate: the named collection holds at least one record."""
    def predicate(events: ak.Array) -> ak.Array:
        if name not in events.fields:
            return np.zeros(len(events), dtype=bool)
        return ak.num(events[name], axis=1) > 0
    return predicate


def kinematic_in_range(collection: str, field: str, low: float, high: float) -> Predicate:
    """
    Predicate: a field of the first record of a kinematic collection lies in ``(low, high)``.

    Must be preceded by ``has_collection(collection)`` in the chain.
    """
    def predicate(events: ak.Array) -> ak.Array:
        return in_range(events[collection][field][:, 0], low, high)
    return predicate


@dataclass(frozen=True)
class NamedPredicate:
    name: str
    function: Predicate


class EventFilterChain:
    """
    Ordered admission predicates with per-event short-circuit.

    Each predicate only sees events that passed every earlier predicate, so
    presence checks protect later predicates that index into a collection.
    """

    def __init__(self, predicates: Optional[list[tuple[str, Predicate]]] = None):
        self._predicates: list[NamedPredicate] = []
        self.logger = logging.getLogger(self.__class__.__name__)
        for name, function in predicates or []:
            self.add(name, function)

    def add(self, name: str, function: Predicate) -> 'EventFilterChain':
        """
        Append a predicate.

        Raises:
            DuplicateNameError: If a predicate with this name is already in the chain
        """
        if any(p.name == name for p in self._predicates):
            raise DuplicateNameError(f"Predicate '{name}' is already in the chain")
        self._predicates.append(NamedPredicate(name, function))
        return self

    @property
    def predicate_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    def evaluate(self, events: ak.Array) -> np.ndarray:
        """
        Evaluate the chain on a batch of events.

        Args:
            events: Awkward array of events

        Returns:
            Boolean numpy mask, True for events passing every predicate
        """
        mask, _ = self.evaluate_with_cut_flow(events)
        return mask

    def evaluate_with_cut_flow(self, events: ak.Array) -> tuple[np.ndarray, CutFlow]:
        """
        Evaluate the chain and count survivors after each predicate.

        Returns:
            Tuple of (mask, cut flow)
        """
        mask = np.ones(len(events), dtype=bool)
        survivors = []

        for predicate in self._predicates:
            surviving_indices = np.flatnonzero(mask)
            if len(surviving_indices) > 0:
                passed = ak.to_numpy(predicate.function(events[surviving_indices])).astype(bool)
                mask[surviving_indices[~passed]] = False
            survivors.append(int(np.count_nonzero(mask)))

        cut_flow = CutFlow(
            total_events=len(events),
            predicate_names=self.predicate_names,
            survivors=tuple(survivors),
        )
        return mask, cut_flow

    def select(self, events: ak.Array) -> tuple[ak.Array, CutFlow]:
        """Return the passing events together with the cut flow."""
        mask, cut_flow = self.evaluate_with_cut_flow(events)
        self.logger.debug(f"{cut_flow.passed_events}/{cut_flow.total_events} events passed selection")
        return events[mask], cut_flow
