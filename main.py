#!/usr/bin/env python3
"""
Main entry point for the prototype NEC (nucleon energy correlator) calculation.

Reads EDM4eic events, applies the event selection, derives per-event and
per-particle quantities and writes the filled histograms to a ROOT file.

Configuration comes from a YAML file (optional); individual options can be
overridden from the command line.
"""

import sys
import logging
import argparse
import yaml

from domain.config import PipelineConfig
from domain.errors import NECError
from pipeline.executor import PipelineExecutor


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Prototype NEC calculation on EDM4eic events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Built-in defaults (JLab XRootD input, test.root output)
  python main.py

  # Custom config and a local input file
  python main.py --config config.yaml --input events.root --output nec.root

  # Tighter Q^2 window, 8 partitions on 8 threads
  python main.py --min-q2 10 --max-q2 50 --threads 8 --partitions 8

  # Dry-run to validate config and histogram definitions
  python main.py --dry-run
        """
    )

    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to configuration file (default: built-in defaults)"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Validate configuration and analysis without reading events"
    )
    parser.add_argument(
        "--stats-file", type=str, default=None,
        help="Write a JSON run summary (cut flow, timing) to this path"
    )

    # --- Analysis options ---
    analysis_group = parser.add_argument_group("Analysis Options")
    analysis_group.add_argument("--input", type=str, default=None, help="Input file path or URL")
    analysis_group.add_argument("--output", type=str, default=None, help="Output ROOT file")
    analysis_group.add_argument("--min-q2", type=float, default=None, help="Lower Q^2 bound (exclusive)")
    analysis_group.add_argument("--max-q2", type=float, default=None, help="Upper Q^2 bound (exclusive)")
    analysis_group.add_argument("--n-pow", type=float, default=None, help="Energy weight power")
    analysis_group.add_argument(
        "--beam-energy", type=float, default=None,
        help="Reference beam energy in GeV for the energy weight"
    )

    # --- Processing options ---
    processing_group = parser.add_argument_group("Processing Options")
    processing_group.add_argument("--threads", type=int, default=None, help="Worker threads")
    processing_group.add_argument("--partitions", type=int, default=None, help="Event partitions")

    return parser.parse_args(argv)


def build_config(args) -> PipelineConfig:
    """Create the validated config from YAML (if any) plus CLI overrides."""
    config_dict = load_config(args.config) if args.config else {}
    config = PipelineConfig.from_dict(config_dict)
    return config.with_overrides(
        input_file=args.input,
        output_file=args.output,
        min_q2=args.min_q2,
        max_q2=args.max_q2,
        n_pow=args.n_pow,
        beam_energy=args.beam_energy,
        threads=args.threads,
        partitions=args.partitions,
    )


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Prototype NEC calculation")
    logger.info("=" * 60)

    try:
        if args.config:
            logger.info(f"Loading configuration from: {args.config}")
        config = build_config(args)
        logger.info("Configuration loaded and validated successfully")
        logger.info(f"Input: {config.options.input_file}")
        logger.info(f"Output: {config.options.output_file}")

        executor = PipelineExecutor(config)

        if args.dry_run:
            logger.info("Dry run mode - configuration is valid, exiting")
            logger.info(f"Histograms: {executor.analysis.catalog.names()}")
            return 0

        final_context = executor.run()

        if args.stats_file:
            executor.save_run_stats(args.stats_file, final_context)

        if final_context.is_successful:
            logger.info("✓ Pipeline completed successfully")
            return 0
        else:
            logger.error(f"✗ Pipeline failed: {final_context.error_message}")
            return 1

    except (NECError, ValueError, OSError) as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
