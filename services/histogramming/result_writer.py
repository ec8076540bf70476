"""
ResultWriter service - Writes filled histograms to a ROOT file.

Single responsibility: Persist every catalog histogram exactly once.
"""

import logging
import os

import uproot

from domain.errors import OutputError
from domain.histograms import HistogramCatalog
from .aggregator import Aggregator


class ResultWriter:
    """Writes the histograms of an Aggregator into a single ROOT container."""

    def __init__(self, output_file: str):
        if not output_file:
            raise ValueError("output_file cannot be empty")
        self.output_file = output_file
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def output_dir(self) -> str:
        return os.path.dirname(self.output_file) or os.curdir

    def check_writable(self):
        """
        Make sure the output file can be created, without creating it.

        Creates the parent directory if needed.

        Raises:
            OutputError: If the output file cannot be created
        """
        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Couldn't open output file {self.output_file}: {e}") from e

        if os.path.isdir(self.output_file):
            raise OutputError(f"Couldn't open output file {self.output_file}: is a directory")

        target = self.output_file if os.path.exists(self.output_file) else self.output_dir
        if not os.access(target, os.W_OK):
            raise OutputError(f"Couldn't open output file {self.output_file}: permission denied")

        self.logger.debug(f"Output file {self.output_file} is writable")

    def write(self, aggregator: Aggregator, catalog: HistogramCatalog) -> list[str]:
        """
        Write every histogram defined in the catalog, overwriting the file.

        Each histogram is stored under its name with the catalog's
        ``title;x;y[;z]`` string as its ROOT title.

        Args:
            aggregator: Aggregator holding the filled histograms
            catalog: Catalog listing the histograms to write

        Returns:
            Names of the written histograms

        Raises:
            OutputError: If the output file cannot be created
        """
        histograms = aggregator.histograms()

        self.check_writable()
        try:
            root_file = uproot.recreate(self.output_file)
        except OSError as e:
            raise OutputError(f"Couldn't open output file {self.output_file}: {e}") from e

        written = []
        with root_file:
            for definition in catalog:
                histogram = histograms[definition.name]
                # uproot takes the TH1 title from the ``title`` attribute
                histogram.title = definition.rendered_title
                root_file[definition.name] = histogram
                written.append(definition.name)

        self.logger.info(f"Wrote {len(written)} histograms to {self.output_file}")
        return written
