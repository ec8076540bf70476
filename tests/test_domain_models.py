"""
Unit tests for domain models.

Tests that all domain models validate correctly and are immutable.
"""

import pytest
import awkward as ak
from datetime import datetime, timedelta

from domain import (
    Axis,
    AxisRegistry,
    CutFlow,
    EventBatch,
    EventPartition,
    HistogramCatalog,
    HistogramSpec,
    ProcessingStatistics,
    make_title,
)
from domain.errors import (
    ConfigurationError,
    DuplicateNameError,
    RegistrySealedError,
    UnknownAxisError,
    UnknownHistogramError,
)


class TestAxis:
    """Tests for Axis domain model."""

    def test_create_valid_axis(self):
        """Test creating a valid Axis."""
        axis = Axis(title="x_{B}", bin_count=60, low_edge=-1.0, high_edge=2.0)

        assert axis.bin_count == 60
        assert axis.bin_width == pytest.approx(0.05)

    def test_zero_bins_fails(self):
        """Test that an axis without bins raises ValueError."""
        with pytest.raises(ValueError, match="bin_count must be at least 1"):
            Axis(title="x", bin_count=0, low_edge=0.0, high_edge=1.0)

    def test_inverted_edges_fail(self):
        """Test that low_edge must be below high_edge."""
        with pytest.raises(ValueError, match="must be below high_edge"):
            Axis(title="x", bin_count=10, low_edge=1.0, high_edge=1.0)

    def test_axis_is_immutable(self):
        """Test that Axis is immutable."""
        axis = Axis(title="x", bin_count=10, low_edge=0.0, high_edge=1.0)

        with pytest.raises(Exception):  # FrozenInstanceError
            axis.bin_count = 20

    def test_from_dict(self):
        """Test building an Axis from a config mapping."""
        axis = Axis.from_dict({"title": "E [GeV]", "bins": "200", "low": 0, "high": 200})

        assert axis == Axis(title="E [GeV]", bin_count=200, low_edge=0.0, high_edge=200.0)


class TestAxisRegistry:
    """Tests for AxisRegistry."""

    def test_resolve_returns_registered_axis(self):
        """Test that resolving a registered name gives an equal axis."""
        registry = AxisRegistry()
        axis = Axis(title="x", bin_count=21, low_edge=-0.1, high_edge=2.0)
        registry.register("x", axis)

        assert registry.resolve("x") == axis
        assert "x" in registry
        assert len(registry) == 1

    def test_resolve_unknown_name_fails(self):
        """Test that an unknown name raises UnknownAxisError."""
        registry = AxisRegistry()

        with pytest.raises(UnknownAxisError, match="Unknown axis 'nope'"):
            registry.resolve("nope")

    def test_unknown_axis_is_configuration_error(self):
        """Test that UnknownAxisError is both a ConfigurationError and a KeyError."""
        registry = AxisRegistry()

        with pytest.raises(ConfigurationError):
            registry.resolve("nope")
        with pytest.raises(KeyError):
            registry.resolve("nope")

    def test_duplicate_name_fails(self):
        """Test that registering a name twice raises DuplicateNameError."""
        registry = AxisRegistry()
        registry.register("x", Axis(title="x", bin_count=1, low_edge=0.0, high_edge=1.0))

        with pytest.raises(DuplicateNameError):
            registry.register("x", Axis(title="y", bin_count=2, low_edge=0.0, high_edge=1.0))

    def test_sealed_registry_rejects_new_axes(self):
        """Test that a sealed registry refuses registration but still resolves."""
        registry = AxisRegistry.from_dict({"x": {"title": "x", "bins": 10, "low": 0, "high": 1}})
        registry.seal()

        assert registry.is_sealed
        with pytest.raises(RegistrySealedError):
            registry.register("y", Axis(title="y", bin_count=1, low_edge=0.0, high_edge=1.0))
        assert registry.resolve("x").bin_count == 10

    def test_names_keep_registration_order(self):
        """Test that names are listed in registration order."""
        registry = AxisRegistry.from_dict({
            "ene": Axis(title="E", bin_count=1, low_edge=0.0, high_edge=1.0),
            "rap": Axis(title="y", bin_count=1, low_edge=0.0, high_edge=1.0),
        })

        assert registry.names() == ["ene", "rap"]
        assert list(registry) == ["ene", "rap"]


class TestHistogramCatalog:
    """Tests for HistogramSpec, HistogramCatalog and title composition."""

    @pytest.fixture
    def registry(self):
        registry = AxisRegistry()
        registry.register("rap", Axis(title="y = ln tan(#theta/2)", bin_count=200, low_edge=-15.0, high_edge=5.0))
        registry.register("ene", Axis(title="E [GeV]", bin_count=200, low_edge=0.0, high_edge=200.0))
        return registry

    def test_make_title(self):
        """Test ROOT-style title composition."""
        assert make_title("", "x", "y") == ";x;y"
        assert make_title("T", "x", "y", "z") == "T;x;y;z"

    def test_one_dimensional_title_uses_y_override(self, registry):
        """Test that a 1-D histogram title is ';x;y_override'."""
        catalog = HistogramCatalog(registry)
        definition = catalog.define(HistogramSpec(name="hNEC", axis_refs=("rap",), y_title="#LTNEC#GT"))

        assert definition.ndim == 1
        assert definition.rendered_title == ";y = ln tan(#theta/2);#LTNEC#GT"

    def test_two_dimensional_title_uses_second_axis(self, registry):
        """Test that a 2-D histogram takes its y title from the second axis."""
        catalog = HistogramCatalog(registry)
        definition = catalog.define(HistogramSpec(
            name="hRapVsEne", axis_refs=("rap", "ene"), y_title="ignored", z_title="counts"
        ))

        assert definition.ndim == 2
        assert definition.rendered_title == ";y = ln tan(#theta/2);E [GeV];counts"

    def test_unknown_axis_fails_at_definition(self, registry):
        """Test that a typo in an axis reference fails when the histogram is defined."""
        catalog = HistogramCatalog(registry)

        with pytest.raises(UnknownAxisError):
            catalog.define(HistogramSpec(name="hBad", axis_refs=("rapp",)))
        assert "hBad" not in catalog

    def test_duplicate_histogram_fails(self, registry):
        """Test that defining a histogram name twice raises DuplicateNameError."""
        catalog = HistogramCatalog(registry)
        catalog.define(HistogramSpec(name="hEnePar", axis_refs=("ene",)))

        with pytest.raises(DuplicateNameError):
            catalog.define(HistogramSpec(name="hEnePar", axis_refs=("ene",)))

    def test_unknown_histogram_fails(self, registry):
        """Test that looking up an undefined histogram raises UnknownHistogramError."""
        catalog = HistogramCatalog(registry)

        with pytest.raises(UnknownHistogramError):
            catalog.get_definition("hMissing")

    def test_spec_needs_one_or_two_axes(self):
        """Test that 0 or 3 axis references are rejected."""
        with pytest.raises(ValueError, match="needs 1 or 2 axes"):
            HistogramSpec(name="h", axis_refs=())
        with pytest.raises(ValueError, match="needs 1 or 2 axes"):
            HistogramSpec(name="h", axis_refs=("a", "b", "c"))

    def test_created_histogram_matches_axis(self, registry):
        """Test that the created histogram has the axis binning and an empty content."""
        catalog = HistogramCatalog(registry)
        h = catalog.define(HistogramSpec(name="hEnePar", axis_refs=("ene",))).create_histogram()

        assert h.axes[0].size == 200
        assert h.axes[0].edges[0] == 0.0
        assert h.axes[0].edges[-1] == 200.0
        assert h.axes[0].label == "E [GeV]"
        assert h.sum(flow=True).value == 0.0


class TestCutFlow:
    """Tests for CutFlow domain model."""

    def test_passed_events_and_efficiency(self):
        """Test the survivor bookkeeping."""
        cut_flow = CutFlow(total_events=10, predicate_names=("a", "b"), survivors=(8, 4))

        assert cut_flow.passed_events == 4
        assert cut_flow.efficiency == pytest.approx(0.4)

    def test_survivors_must_not_grow(self):
        """Test that a later predicate cannot have more survivors than an earlier one."""
        with pytest.raises(ValueError, match="survivors after 'b'"):
            CutFlow(total_events=10, predicate_names=("a", "b"), survivors=(4, 5))

    def test_lengths_must_match(self):
        """Test that every predicate needs a survivor count."""
        with pytest.raises(ValueError, match="same length"):
            CutFlow(total_events=10, predicate_names=("a",), survivors=())

    def test_addition_sums_counts(self):
        """Test combining the cut flows of two partitions."""
        first = CutFlow(total_events=5, predicate_names=("a",), survivors=(3,))
        second = CutFlow(total_events=7, predicate_names=("a",), survivors=(2,))

        combined = first + second

        assert combined.total_events == 12
        assert combined.survivors == (5,)

    def test_addition_of_different_chains_fails(self):
        """Test that cut flows of different chains cannot be combined."""
        with pytest.raises(ValueError):
            CutFlow(total_events=1, predicate_names=("a",), survivors=(1,)) + \
                CutFlow(total_events=1, predicate_names=("b",), survivors=(1,))

    def test_empty_chain_passes_everything(self):
        """Test that a chain without predicates passes every event."""
        cut_flow = CutFlow(total_events=3)

        assert cut_flow.passed_events == 3
        assert cut_flow.to_dict()["efficiency"] == "100.0%"


class TestProcessingStatistics:
    """Tests for ProcessingStatistics domain model."""

    def test_events_per_second(self):
        """Test throughput computation."""
        start = datetime.now()
        stats = ProcessingStatistics(
            cut_flow=CutFlow(total_events=100),
            partitions=4,
            total_time_sec=2.0,
            start_time=start,
            end_time=start + timedelta(seconds=2),
        )

        assert stats.events_per_second == pytest.approx(50.0)
        assert stats.to_dict()["partitions"] == 4

    def test_end_before_start_fails(self):
        """Test that end_time before start_time raises ValueError."""
        start = datetime.now()
        with pytest.raises(ValueError, match="end_time must be after start_time"):
            ProcessingStatistics(
                cut_flow=CutFlow(total_events=1),
                partitions=1,
                total_time_sec=0.0,
                start_time=start,
                end_time=start - timedelta(seconds=1),
            )


class TestEventBatch:
    """Tests for EventBatch and EventPartition domain models."""

    def test_create_valid_event_batch(self):
        """Test creating a valid EventBatch."""
        events = ak.Array([{"K": [{"Q2": 1.0}]}, {"K": []}])
        batch = EventBatch(events=events, source="file.root", event_count=2, read_time_sec=0.5)

        assert batch.collections == ("K",)
        assert batch.event_count == 2

    def test_event_batch_negative_count_fails(self):
        """Test that negative event count raises ValueError."""
        with pytest.raises(ValueError, match="event_count must be non-negative"):
            EventBatch(events=ak.Array([]), source="f", event_count=-1, read_time_sec=0.0)

    def test_partition_from_batch(self):
        """Test slicing a partition out of a batch."""
        events = ak.Array([{"v": float(i)} for i in range(6)])
        batch = EventBatch(events=events, source="f", event_count=6, read_time_sec=0.0)

        partition = EventPartition.from_batch(batch, partition_index=1, entry_start=2, entry_stop=5)

        assert partition.event_count == 3
        assert ak.to_list(partition.events.v) == [2.0, 3.0, 4.0]

    def test_partition_invalid_range_fails(self):
        """Test that a reversed entry range raises ValueError."""
        with pytest.raises(ValueError, match="invalid entry range"):
            EventPartition(events=ak.Array([]), partition_index=0, entry_start=3, entry_stop=2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
