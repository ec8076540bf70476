"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest

from domain.config import (
    DEFAULT_BEAM_ENERGY_GEV,
    DEFAULT_OUTPUT_FILE,
    AnalysisOptions,
    PipelineConfig,
    ProcessingConfig,
)
from main import load_config, parse_args, build_config

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config.yaml"


class TestAnalysisOptions:
    """Tests for AnalysisOptions validation."""

    def test_defaults(self):
        """Test the prototype defaults."""
        options = AnalysisOptions()

        assert options.input_file.startswith("root://dtn-eic.jlab.org/")
        assert options.output_file == DEFAULT_OUTPUT_FILE == "test.root"
        assert (options.min_q2, options.max_q2) == (0.0, 100.0)
        assert options.n_pow == 1.0
        assert options.beam_energy == DEFAULT_BEAM_ENERGY_GEV == 100.0

    def test_inverted_q2_window_fails(self):
        """Test that min_q2 must be below max_q2."""
        with pytest.raises(ValueError, match="must be below max_q2"):
            AnalysisOptions(min_q2=100.0, max_q2=10.0)

    def test_non_positive_beam_energy_fails(self):
        """Test that the reference energy must be positive."""
        with pytest.raises(ValueError, match="beam_energy must be positive"):
            AnalysisOptions(beam_energy=0.0)

    def test_empty_output_fails(self):
        """Test that an empty output path raises ValueError."""
        with pytest.raises(ValueError, match="output_file cannot be empty"):
            AnalysisOptions(output_file="")


class TestProcessingConfig:
    """Tests for ProcessingConfig validation."""

    def test_zero_threads_fails(self):
        """Test that threads must be positive."""
        with pytest.raises(ValueError, match="threads must be positive"):
            ProcessingConfig(threads=0)

    def test_zero_partitions_fails(self):
        """Test that partitions must be positive."""
        with pytest.raises(ValueError, match="partitions must be positive"):
            ProcessingConfig(partitions=0)


class TestPipelineConfig:
    """Tests for PipelineConfig construction."""

    def test_from_empty_dict_gives_defaults(self):
        """Test that a missing or empty config gives the defaults."""
        assert PipelineConfig.from_dict(None) == PipelineConfig()
        assert PipelineConfig.from_dict({}) == PipelineConfig()

    def test_from_dict(self):
        """Test reading every section of a config mapping."""
        config = PipelineConfig.from_dict({
            "run_metadata": {"run_name": "scan"},
            "analysis_options": {"input_file": "in.root", "output_file": "out.root",
                                 "min_q2": 10, "max_q2": 50, "beam_energy": 275},
            "collections": {"reco_kinematics": "InclusiveKinematicsDA"},
            "processing": {"threads": 2, "partitions": 8},
        })

        assert config.run_name == "scan"
        assert config.options.input_file == "in.root"
        assert config.options.min_q2 == 10.0
        assert config.options.beam_energy == 275.0
        assert config.collections.reco_kinematics == "InclusiveKinematicsDA"
        assert config.collections.particles == "ReconstructedParticles"
        assert config.processing.threads == 2
        assert config.processing.partitions == 8

    def test_with_overrides_ignores_none(self):
        """Test that unset overrides keep the existing values."""
        config = PipelineConfig().with_overrides(output_file="nec.root", min_q2=None, threads=None)

        assert config.options.output_file == "nec.root"
        assert config.options.min_q2 == 0.0
        assert config.processing.threads == 4

    def test_with_overrides_routes_processing_keys(self):
        """Test that threads and partitions go to the processing config."""
        config = PipelineConfig().with_overrides(threads=8, partitions=16, max_q2=50.0)

        assert config.processing.threads == 8
        assert config.processing.partitions == 16
        assert config.options.max_q2 == 50.0

    def test_with_overrides_validates(self):
        """Test that overridden values are validated."""
        with pytest.raises(ValueError):
            PipelineConfig().with_overrides(min_q2=200.0)

    def test_repository_config_matches_defaults(self):
        """Test that the shipped config.yaml loads and reproduces the defaults."""
        config = PipelineConfig.from_dict(load_config(str(REPO_CONFIG)))

        assert config == PipelineConfig()


class TestCommandLine:
    """Tests for the CLI option handling."""

    def test_cli_overrides_config(self, tmp_path):
        """Test that CLI flags override values from the YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "analysis_options:\n"
            "  output_file: from_file.root\n"
            "  min_q2: 5\n"
        )

        args = parse_args(["--config", str(config_file), "--output", "from_cli.root", "--threads", "2"])
        config = build_config(args)

        assert config.options.output_file == "from_cli.root"
        assert config.options.min_q2 == 5.0
        assert config.processing.threads == 2

    def test_no_config_file_uses_defaults(self):
        """Test that running without --config uses the built-in defaults."""
        config = build_config(parse_args([]))

        assert config == PipelineConfig()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
