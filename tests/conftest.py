"""
Shared fixtures for the NEC pipeline tests.

Events are built in memory with the same layout EventSource produces:
one field per collection, each a jagged list of records.
"""

import pytest
import awkward as ak

from domain.axes import Axis, AxisRegistry
from domain.histograms import HistogramCatalog, HistogramSpec

RECO = "InclusiveKinematicsElectron"
TRUTH = "InclusiveKinematicsTruth"
PARTICLES = "ReconstructedParticles"


def make_event(q2=50.0, x=0.37, x_truth=0.35, particles=((5.0, (0.0, 0.0, 1.0)),),
               with_reco=True, with_truth=True) -> dict:
    """One event record; ``particles`` is a sequence of (energy, (px, py, pz))."""
    return {
        RECO: [{"Q2": float(q2), "x": float(x)}] if with_reco else [],
        TRUTH: [{"Q2": float(q2), "x": float(x_truth)}] if with_truth else [],
        PARTICLES: [
            {"energy": float(energy), "momentum": {"x": float(px), "y": float(py), "z": float(pz)}}
            for energy, (px, py, pz) in particles
        ],
    }


def make_events(*events) -> ak.Array:
    return ak.Array(list(events))


@pytest.fixture
def sample_events():
    """Mixed sample: passing events, a Q2 boundary event and an event without kinematics."""
    return make_events(
        make_event(q2=50.0, x=0.37, particles=((5.0, (1.0, 0.0, 0.0)), (10.0, (0.0, 1.0, 1.0)))),
        make_event(q2=10.0, x=0.20, particles=((3.0, (0.0, 0.5, -0.5)),)),
        make_event(q2=99.0, x=0.80, particles=((20.0, (0.3, 0.4, 12.0)),)),
        make_event(with_reco=False),
        make_event(q2=100.0, x=0.50),
        make_event(q2=25.0, x=0.05, particles=((1.5, (0.2, 0.1, -3.0)), (2.5, (1.0, 1.0, 0.5)))),
        make_event(q2=75.0, x=0.61, with_truth=False),
        make_event(q2=5.0, x=1.20, particles=((7.0, (0.0, 0.0, -1.0)),)),
    )


@pytest.fixture
def small_catalog():
    """Catalog with a 1-D histogram ``H`` on axis x and a 2-D histogram ``H2``."""
    registry = AxisRegistry()
    registry.register("x", Axis(title="x", bin_count=21, low_edge=-0.1, high_edge=2.0))
    registry.register("e", Axis(title="E", bin_count=10, low_edge=0.0, high_edge=10.0))
    registry.seal()

    catalog = HistogramCatalog(registry)
    catalog.define(HistogramSpec(name="H", axis_refs=("x",)))
    catalog.define(HistogramSpec(name="H2", axis_refs=("x", "e")))
    return catalog
