"""
EventSource service - Single responsibility: Read EDM4eic event files.

Extracts the requested collections from a podio ROOT file using uproot.
No analysis logic.
"""

import logging
import time
from collections import defaultdict

import awkward as ak
import uproot

from domain.errors import DatasetError
from domain.events import EventBatch
from services.dataset import schemas


class EventSource:
    """
    Service for reading one EDM4eic ROOT file.

    The file is opened once per ``read``; any failure to open it, or an empty
    event tree, is fatal for the run.
    """

    def __init__(self, file_path: str, tree_name: str = "events", batch_size: int = 100_000):
        """
        Initialize event source.

        Args:
            file_path: Path or URI of the ROOT file
            tree_name: Name of the event tree
            batch_size: Number of entries to read per batch
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.file_path = file_path
        self.tree_name = tree_name
        self.batch_size = batch_size
        self.logger = logging.getLogger(self.__class__.__name__)

    def read(self, collections: dict[str, str]) -> EventBatch:
        """
        Read the requested collections of every event.

        Args:
            collections: Dict of {collection name: collection type}

        Returns:
            EventBatch with one field per collection

        Raises:
            DatasetError: If the file cannot be opened, the tree is missing,
                it holds no events, or a collection branch is missing
        """
        start_time = time.time()

        try:
            root_file = uproot.open(self.file_path)
        except Exception as e:
            raise DatasetError(f"Couldn't open input file {self.file_path}: {e}") from e

        with root_file:
            tree = self._get_tree(root_file)
            n_entries = tree.num_entries
            if n_entries == 0:
                raise DatasetError(f"No events found in {self.file_path}")

            branch_mappings = {
                collection: schemas.get_branch_mapping(collection, collection_type)
                for collection, collection_type in collections.items()
            }
            self._check_branches(tree, branch_mappings)

            events = self._read_file_in_batches(tree, branch_mappings, n_entries)

        read_time = time.time() - start_time
        self.logger.info(f"Read {n_entries} events from {self.file_path} in {read_time:.1f}s")

        return EventBatch(
            events=events,
            source=self.file_path,
            event_count=n_entries,
            read_time_sec=read_time,
        )

    def _get_tree(self, root_file):
        available_trees = [key[:-2] if key.endswith(';1') else key for key in root_file.keys()]
        if self.tree_name not in available_trees:
            raise DatasetError(
                f"Tree '{self.tree_name}' not found in {self.file_path} "
                f"(available: {', '.join(available_trees)})"
            )
        return root_file[self.tree_name]

    def _check_branches(self, tree, branch_mappings: dict[str, dict[str, str]]):
        available = {key.split("/")[-1] for key in tree.keys()}
        missing = [
            branch
            for mapping in branch_mappings.values()
            for branch in mapping
            if branch not in available
        ]
        if missing:
            raise DatasetError(
                f"Missing branches in {self.file_path}: {', '.join(missing)}"
            )

    def _read_file_in_batches(
        self,
        tree,
        branch_mappings: dict[str, dict[str, str]],
        n_entries: int
    ) -> ak.Array:
        all_branches = [branch for mapping in branch_mappings.values() for branch in mapping]
        collection_chunks = {collection: [] for collection in branch_mappings}

        entry_ranges = [
            (start, min(start + self.batch_size, n_entries))
            for start in range(0, n_entries, self.batch_size)
        ]

        for entry_start, entry_stop in entry_ranges:
            batch_data = tree.arrays(
                filter_name=all_branches,
                entry_start=entry_start,
                entry_stop=entry_stop,
                library="ak"
            )
            columns = {field.split("/")[-1]: batch_data[field] for field in batch_data.fields}
            self.logger.debug(f"Read entries {entry_start}-{entry_stop}")

            for collection, mapping in branch_mappings.items():
                collection_chunks[collection].append(_zip_collection(columns, mapping))

        return ak.zip(
            {
                collection: ak.concatenate(chunks) if len(chunks) > 1 else chunks[0]
                for collection, chunks in collection_chunks.items()
            },
            depth_limit=1
        )


def _zip_collection(columns: dict[str, ak.Array], branch_mapping: dict[str, str]) -> ak.Array:
    """
    Zip the member branches of one collection into a jagged array of records.

    Dotted fields (``momentum.x``) become nested records (``momentum: {x}``).
    """
    fields = {}
    nested = defaultdict(dict)
    for branch, field in branch_mapping.items():
        if "." in field:
            parent, child = field.split(".", 1)
            nested[parent][child] = columns[branch]
        else:
            fields[field] = columns[branch]

    for parent, children in nested.items():
        fields[parent] = ak.zip(children)

    return ak.zip(fields)
