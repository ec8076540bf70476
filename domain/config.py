"""
Configuration domain models.

Validated configuration objects for the pipeline.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

DEFAULT_INPUT_FILE = (
    "root://dtn-eic.jlab.org//volatile/eic/EPIC/RECO/25.06.1/epic_craterlake/DIS/NC/10x100/minQ2=10/"
    "pythia8NCDIS_10x100_minQ2=10_beamEffects_xAngle=-0.025_hiDiv_5.1287.eicrecon.edm4eic.root"
)
DEFAULT_OUTPUT_FILE = "test.root"
DEFAULT_BEAM_ENERGY_GEV = 100.0  # nominal proton beam energy of the 10x100 campaign


@dataclass(frozen=True)
class AnalysisOptions:
    """User options of the correlator analysis."""

    input_file: str = DEFAULT_INPUT_FILE
    output_file: str = DEFAULT_OUTPUT_FILE

    # Q2 admission cut, open interval
    min_q2: float = 0.0
    max_q2: float = 100.0

    # Power to raise xB to; reserved, not used by the derivations yet
    n_pow: float = 1.0

    beam_energy: float = DEFAULT_BEAM_ENERGY_GEV

    def __post_init__(self):
        """Validate analysis options."""
        if not self.input_file:
            raise ValueError("input_file cannot be empty")
        if not self.output_file:
            raise ValueError("output_file cannot be empty")
        if not self.min_q2 < self.max_q2:
            raise ValueError(f"min_q2 ({self.min_q2}) must be below max_q2 ({self.max_q2})")
        if self.beam_energy <= 0:
            raise ValueError(f"beam_energy must be positive, got {self.beam_energy}")


@dataclass(frozen=True)
class CollectionNames:
    """Names of the EDM4eic collections the analysis reads."""

    reco_kinematics: str = "InclusiveKinematicsElectron"
    truth_kinematics: str = "InclusiveKinematicsTruth"
    particles: str = "ReconstructedParticles"

    def __post_init__(self):
        """Validate collection names."""
        for name in (self.reco_kinematics, self.truth_kinematics, self.particles):
            if not name:
                raise ValueError("collection names cannot be empty")

    def all(self) -> tuple[str, ...]:
        return (self.reco_kinematics, self.truth_kinematics, self.particles)


@dataclass(frozen=True)
class ProcessingConfig:
    """Configuration for reading and processing events."""

    tree_name: str = "events"

    # Performance
    threads: int = 4
    partitions: int = 4
    batch_size: int = 100_000

    # Behavior
    show_progress_bar: bool = True

    def __post_init__(self):
        """Validate processing configuration."""
        if self.threads <= 0:
            raise ValueError(f"threads must be positive, got {self.threads}")
        if self.partitions <= 0:
            raise ValueError(f"partitions must be positive, got {self.partitions}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if not self.tree_name:
            raise ValueError("tree_name cannot be empty")


@dataclass(frozen=True)
class PipelineConfig:
    """
    Complete pipeline configuration.

    Immutable configuration object validated at creation.
    """

    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    collections: CollectionNames = field(default_factory=CollectionNames)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)

    # Run metadata
    run_name: str = "nec_prototype"

    def with_overrides(self, **option_overrides) -> 'PipelineConfig':
        """
        Return a new config with analysis options replaced.

        ``None`` values are ignored so unset CLI arguments keep the file values.
        Keys ``threads`` and ``partitions`` go to the processing config.
        """
        processing_keys = {"threads", "partitions"}
        options = {k: v for k, v in option_overrides.items() if v is not None and k not in processing_keys}
        processing = {k: v for k, v in option_overrides.items() if v is not None and k in processing_keys}
        return replace(
            self,
            options=replace(self.options, **options),
            processing=replace(self.processing, **processing),
        )

    @classmethod
    def from_dict(cls, config_dict: Optional[dict]) -> 'PipelineConfig':
        """
        Create PipelineConfig from a dictionary (e.g., loaded from YAML).

        Args:
            config_dict: Dictionary with configuration values, may be None

        Returns:
            Validated PipelineConfig instance
        """
        config_dict = config_dict or {}

        options_dict = config_dict.get("analysis_options", {})
        options = AnalysisOptions(
            input_file=options_dict.get("input_file", DEFAULT_INPUT_FILE),
            output_file=options_dict.get("output_file", DEFAULT_OUTPUT_FILE),
            min_q2=float(options_dict.get("min_q2", 0.0)),
            max_q2=float(options_dict.get("max_q2", 100.0)),
            n_pow=float(options_dict.get("n_pow", 1.0)),
            beam_energy=float(options_dict.get("beam_energy", DEFAULT_BEAM_ENERGY_GEV)),
        )

        collections_dict = config_dict.get("collections", {})
        collections = CollectionNames(
            reco_kinematics=collections_dict.get("reco_kinematics", "InclusiveKinematicsElectron"),
            truth_kinematics=collections_dict.get("truth_kinematics", "InclusiveKinematicsTruth"),
            particles=collections_dict.get("particles", "ReconstructedParticles"),
        )

        processing_dict = config_dict.get("processing", {})
        processing = ProcessingConfig(
            tree_name=processing_dict.get("tree_name", "events"),
            threads=processing_dict.get("threads", 4),
            partitions=processing_dict.get("partitions", 4),
            batch_size=processing_dict.get("batch_size", 100_000),
            show_progress_bar=processing_dict.get("show_progress_bar", True),
        )

        run_metadata = config_dict.get("run_metadata", {})

        return cls(
            options=options,
            collections=collections,
            processing=processing,
            run_name=run_metadata.get("run_name", "nec_prototype"),
        )
