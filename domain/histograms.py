"""
Histogram definition domain models.

Histograms reference axes by name; the catalog resolves them eagerly so a
typo in an axis name fails at configuration time.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

import hist

from .axes import Axis, AxisRegistry
from .errors import DuplicateNameError, UnknownHistogramError

# hist axis names, by dimension
AXIS_NAMES = ("x", "y")


def make_title(title: str, x_title: str, y_title: str = "", z_title: Optional[str] = None) -> str:
    """Compose a ROOT-style ``title;x;y[;z]`` string."""
    rendered = f"{title};{x_title};{y_title}"
    if z_title is not None:
        rendered += f";{z_title}"
    return rendered


@dataclass(frozen=True)
class HistogramSpec:
    """Name, axis references and display metadata of one histogram."""

    name: str
    axis_refs: tuple[str, ...]
    title: str = ""
    y_title: str = ""
    z_title: Optional[str] = None

    def __post_init__(self):
        """Validate name and dimension."""
        if not self.name:
            raise ValueError("name cannot be empty")
        if len(self.axis_refs) not in (1, 2):
            raise ValueError(
                f"Histogram '{self.name}' needs 1 or 2 axes, got {len(self.axis_refs)}"
            )

    @property
    def ndim(self) -> int:
        return len(self.axis_refs)


@dataclass(frozen=True)
class HistogramDefinition:
    """A HistogramSpec with its axes resolved."""

    spec: HistogramSpec
    axes: tuple[Axis, ...]

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def ndim(self) -> int:
        return len(self.axes)

    @property
    def y_axis_title(self) -> str:
        if self.ndim == 2:
            return self.axes[1].title
        return self.spec.y_title

    @property
    def rendered_title(self) -> str:
        return make_title(self.spec.title, self.axes[0].title, self.y_axis_title, self.spec.z_title)

    def create_histogram(self) -> hist.Hist:
        """Build an empty histogram with sum-of-weights and sum-of-weights² storage."""
        hist_axes = [
            hist.axis.Regular(
                axis.bin_count,
                axis.low_edge,
                axis.high_edge,
                name=axis_name,
                label=axis.title,
                underflow=True,
                overflow=True,
            )
            for axis_name, axis in zip(AXIS_NAMES, self.axes)
        ]
        return hist.Hist(
            *hist_axes,
            storage=hist.storage.Weight(),
            name=self.name,
            label=self.rendered_title,
        )


class HistogramCatalog:
    """Histogram definitions by name, in definition order."""

    def __init__(self, axis_registry: AxisRegistry):
        self._axis_registry = axis_registry
        self._definitions: dict[str, HistogramDefinition] = {}

    def define(self, spec: HistogramSpec) -> HistogramDefinition:
        """
        Define a histogram, resolving its axes immediately.

        Raises:
            UnknownAxisError: If an axis reference does not resolve
            DuplicateNameError: If a histogram with this name already exists
        """
        if spec.name in self._definitions:
            raise DuplicateNameError(f"Histogram '{spec.name}' is already defined")
        axes = tuple(self._axis_registry.resolve(ref) for ref in spec.axis_refs)
        definition = HistogramDefinition(spec=spec, axes=axes)
        self._definitions[spec.name] = definition
        return definition

    def get_definition(self, name: str) -> HistogramDefinition:
        """
        Raises:
            UnknownHistogramError: If no histogram is defined under this name
        """
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownHistogramError(f"Unknown histogram '{name}'") from None

    def names(self) -> list[str]:
        return list(self._definitions)

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[HistogramDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
