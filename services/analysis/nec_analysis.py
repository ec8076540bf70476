"""
Nucleon energy correlator analysis definition.

Builds the axes, histograms, admission cuts, derivation steps and fill plan
of the NEC prototype from the run configuration.
"""
import logging
from dataclasses import dataclass
from functools import partial

from domain.axes import AxisRegistry
from domain.config import PipelineConfig
from domain.errors import MissingInputError
from domain.histograms import HistogramCatalog, HistogramSpec
from services.calculations import consts
from services.calculations.quantities import (
    QuantityPipeline,
    QuantityStep,
    energy_fraction_weight,
    extract_field,
    kinematic_field,
    natural_log,
    polar_angle,
    rapidity,
    reference_energy,
)
from services.histogramming.aggregator import FillSpec
from services.selection.filters import EventFilterChain, has_collection, kinematic_in_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Analysis:
    """Everything needed to process events, validated at construction."""

    axes: AxisRegistry
    catalog: HistogramCatalog
    filter_chain: EventFilterChain
    pipeline: QuantityPipeline
    fill_plan: tuple[FillSpec, ...]

    def __post_init__(self):
        """Validate the fill plan against the catalog and pipeline."""
        available = set(self.pipeline.raw_names) | set(self.pipeline.output_names)
        for spec in self.fill_plan:
            definition = self.catalog.get_definition(spec.histogram)
            if len(spec.values) != definition.ndim:
                raise ValueError(
                    f"Fill of '{spec.histogram}' gives {len(spec.values)} values "
                    f"for a {definition.ndim}-D histogram"
                )
            missing = [name for name in spec.inputs if name not in available]
            if missing:
                raise MissingInputError(
                    f"Fill of '{spec.histogram}' reads undefined quantities: {', '.join(missing)}"
                )


def build_axis_registry(axes_config: dict = None) -> AxisRegistry:
    registry = AxisRegistry.from_dict(axes_config or consts.AXES)
    registry.seal()
    return registry


def build_histogram_catalog(axes: AxisRegistry, histograms_config: dict = None) -> HistogramCatalog:
    catalog = HistogramCatalog(axes)
    for name, hist_dict in (histograms_config or consts.HISTOGRAMS).items():
        catalog.define(HistogramSpec(
            name=name,
            axis_refs=tuple(hist_dict["axes"]),
            title=hist_dict.get("title", ""),
            y_title=hist_dict.get("y_title", ""),
            z_title=hist_dict.get("z_title"),
        ))
    return catalog


def build_filter_chain(config: PipelineConfig) -> EventFilterChain:
    """
    Admission cuts, in order.

    Presence checks come before the Q2 cut, which indexes the first record.
    Every kinematic collection read by the derivations is required to be
    present, so reading its first record is always defined.
    """
    options = config.options
    collections = config.collections
    return EventFilterChain([
        ("has_kinematics", has_collection(collections.reco_kinematics)),
        ("q2_cut", kinematic_in_range(collections.reco_kinematics, "Q2", options.min_q2, options.max_q2)),
        ("has_truth_kinematics", has_collection(collections.truth_kinematics)),
    ])


def build_quantity_pipeline(config: PipelineConfig) -> QuantityPipeline:
    options = config.options
    collections = config.collections
    steps = [
        QuantityStep("xbRec", partial(kinematic_field, field="x"), (collections.reco_kinematics,)),
        QuantityStep("lnxbRec", natural_log, ("xbRec",)),
        QuantityStep("xbGen", partial(kinematic_field, field="x"), (collections.truth_kinematics,)),
        QuantityStep("lnxbGen", natural_log, ("xbGen",)),
        QuantityStep("parEne", partial(extract_field, field="energy"), (collections.particles,)),
        QuantityStep("parMom", partial(extract_field, field="momentum"), (collections.particles,)),
        QuantityStep("parTheta", polar_angle, ("parMom",)),
        QuantityStep("parRap", rapidity, ("parTheta",)),
        QuantityStep(
            "parWeight",
            partial(energy_fraction_weight, beam_energy=options.beam_energy),
            ("parEne", "xbRec"),
        ),
        QuantityStep("nucEne", partial(reference_energy, beam_energy=options.beam_energy), ("xbRec",)),
    ]
    return QuantityPipeline(raw_names=collections.all(), steps=steps)


def build_fill_plan(fills_config: dict = None) -> tuple[FillSpec, ...]:
    return tuple(
        FillSpec(histogram=name, values=tuple(values), weight=weight)
        for name, (values, weight) in (fills_config or consts.FILLS).items()
    )


def build_analysis(config: PipelineConfig) -> Analysis:
    """
    Build and validate the full analysis.

    Raises:
        ConfigurationError: On unknown axes or histograms, duplicate names,
            or derivation inputs that are never defined
    """
    axes = build_axis_registry()
    catalog = build_histogram_catalog(axes)
    analysis = Analysis(
        axes=axes,
        catalog=catalog,
        filter_chain=build_filter_chain(config),
        pipeline=build_quantity_pipeline(config),
        fill_plan=build_fill_plan(),
    )
    logger.info(
        f"Defined {len(axes)} axes, {len(catalog)} histograms, "
        f"{len(analysis.filter_chain)} cuts and {len(analysis.pipeline)} derivations"
    )
    if config.options.n_pow != 1.0:
        logger.warning(f"n_pow={config.options.n_pow} is reserved and not applied to the weights")
    return analysis
