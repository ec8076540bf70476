"""
Quantity derivations for the energy correlator.

Provides the per-event and per-particle derivation functions and the
QuantityPipeline that runs them in order over a batch of events.

Event-level quantities are 1-D awkward arrays (one entry per event);
per-particle quantities are jagged arrays (one list per event).
"""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable

import awkward as ak
import numpy as np
import vector

from domain.errors import DuplicateNameError, MissingInputError

vector.register_awkward()


def kinematic_field(kinematics: ak.Array, field: str) -> ak.Array:
    """Field of the first (authoritative) record of a kinematic collection, per event."""
    return kinematics[field][:, 0]


def natural_log(values: ak.Array) -> ak.Array:
    """Unclamped ln: 0 gives -inf and negative inputs give NaN."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(values)


def extract_field(particles: ak.Array, field: str) -> ak.Array:
    """Per-particle projection of one field, in input order."""
    return particles[field]


def polar_angle(momenta: ak.Array) -> ak.Array:
    """Angle between each momentum 3-vector and the +z axis."""
    momentum_vectors = vector.zip({
        "px": momenta.x,
        "py": momenta.y,
        "pz": momenta.z,
    })
    return momentum_vectors.theta


def rapidity(angles: ak.Array) -> ak.Array:
    """``ln(tan(angle / 2))`` per particle, with the same unclamped log."""
    return natural_log(np.tan(angles / 2.0))


def energy_fraction_weight(energies: ak.Array, reference: ak.Array, beam_energy: float) -> ak.Array:
    """Per-particle weight ``reference * energy / beam_energy``; the event scalar broadcasts over particles."""
    return reference * (energies / beam_energy)


def reference_energy(scalar: ak.Array, beam_energy: float) -> ak.Array:
    """The nucleon reference energy, repeated once per event of ``scalar``."""
    return ak.full_like(scalar, beam_energy, dtype=np.float64)


@dataclass(frozen=True)
class QuantityStep:
    """One derivation: ``name = function(*inputs)``."""

    name: str
    function: Callable[..., ak.Array]
    inputs: tuple[str, ...]

    def __post_init__(self):
        """Validate the step."""
        if not self.name:
            raise ValueError("step name cannot be empty")


class QuantityPipeline:
    """
    Ordered derivation steps over a named-quantity namespace.

    Inputs are checked when the pipeline is built: every step may only read
    raw collection names or outputs of earlier steps.
    """

    def __init__(self, raw_names: Iterable[str], steps: Iterable[QuantityStep]):
        """
        Initialize and validate the pipeline.

        Args:
            raw_names: Collection names available in every event batch
            steps: Derivation steps in execution order

        Raises:
            MissingInputError: If a step reads a name not yet available
            DuplicateNameError: If a step output is already defined
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._raw_names = tuple(raw_names)
        self._steps = tuple(steps)
        self._validate()

    def _validate(self):
        available = set(self._raw_names)
        for step in self._steps:
            missing = [name for name in step.inputs if name not in available]
            if missing:
                raise MissingInputError(
                    f"Step '{step.name}' reads undefined quantities: {', '.join(missing)}"
                )
            if step.name in available:
                raise DuplicateNameError(f"Quantity '{step.name}' is already defined")
            available.add(step.name)

    @property
    def raw_names(self) -> tuple[str, ...]:
        return self._raw_names

    @property
    def output_names(self) -> tuple[str, ...]:
        return tuple(step.name for step in self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def run(self, events: ak.Array) -> dict[str, ak.Array]:
        """
        Derive every quantity for a batch of events.

        Args:
            events: Awkward array of events that passed the filter chain

        Returns:
            Namespace of raw collections and derived quantities

        Raises:
            MissingInputError: If the batch lacks a collection a step reads
        """
        quantities = {name: events[name] for name in events.fields}

        for step in self._steps:
            try:
                arguments = [quantities[name] for name in step.inputs]
            except KeyError as e:
                raise MissingInputError(
                    f"Step '{step.name}' reads {e.args[0]!r}, which is not in the event batch"
                ) from None
            quantities[step.name] = step.function(*arguments)

        self.logger.debug(f"Derived {len(self._steps)} quantities for {len(events)} events")
        return quantities
