"""
PipelineExecutor - High-level pipeline orchestrator.

Wires together all services and executes the state machine.

The analysis (axes, histograms, cuts, derivations, fills) is built and
validated when the executor is created, so configuration errors surface
before any event is read.
"""

import json
import logging
import os

from domain.config import PipelineConfig
from orchestration import PipelineState, PipelineContext, StateMachine
from orchestration.handlers import (
    OutputCheckHandler,
    DatasetHandler,
    ProcessingHandler,
    WritingHandler,
)
from services.analysis.nec_analysis import Analysis, build_analysis
from services.dataset.event_source import EventSource
from services.histogramming.result_writer import ResultWriter
from services.processing.partitioned_processor import PartitionedProcessor


class PipelineExecutor:
    """
    High-level pipeline executor.

    Responsible for:
    1. Building and validating the analysis
    2. Creating all services with dependency injection
    3. Building the state machine with handlers
    4. Running the pipeline and returning the final context
    """

    def __init__(self, config: PipelineConfig):
        """
        Raises:
            ConfigurationError: If the analysis definition is inconsistent
        """
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.analysis: Analysis = build_analysis(config)
        self.logger.info("Defined histograms")
        self.state_machine = self._build_state_machine()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> PipelineContext:
        """Execute the pipeline and return final context."""
        self.logger.info("Starting prototype NEC calculation!")
        initial_context = PipelineContext(
            config=self.config,
            current_state=PipelineState.IDLE,
        )
        final_context = self.state_machine.run(initial_context)
        if final_context.is_successful:
            self.logger.info("NEC calculation finished!")
        return final_context

    def save_run_stats(self, stats_path: str, context: PipelineContext):
        """
        Save the run summary (cut flow, timing, written histograms) as JSON.

        Args:
            stats_path: Path of the JSON file
            context: Final pipeline context after execution
        """
        stats = {
            "run_name": self.config.run_name,
            "input_file": self.config.options.input_file,
            "output_file": self.config.options.output_file,
            "summary": context.get_summary(),
            "written_histograms": context.written_histograms,
        }

        stats_dir = os.path.dirname(stats_path)
        if stats_dir:
            os.makedirs(stats_dir, exist_ok=True)

        with open(stats_path, "w") as f:
            json.dump(stats, f, indent=2, default=str)

        self.logger.info(f"Saved run stats to: {stats_path}")

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _build_state_machine(self) -> StateMachine:
        options = self.config.options
        processing = self.config.processing

        event_source = EventSource(
            file_path=options.input_file,
            tree_name=processing.tree_name,
            batch_size=processing.batch_size,
        )
        processor = PartitionedProcessor(
            catalog=self.analysis.catalog,
            filter_chain=self.analysis.filter_chain,
            pipeline=self.analysis.pipeline,
            fill_plan=self.analysis.fill_plan,
            max_threads=processing.threads,
            show_progress=processing.show_progress_bar,
        )
        writer = ResultWriter(options.output_file)

        handlers = {
            PipelineState.IDLE: OutputCheckHandler(writer),
            PipelineState.LOADING_DATASET: DatasetHandler(event_source),
            PipelineState.PROCESSING: ProcessingHandler(processor),
            PipelineState.WRITING_OUTPUT: WritingHandler(writer, self.analysis.catalog),
        }
        return StateMachine(handlers)
