"""
Axis domain models.

Named, immutable bin layouts shared by histogram definitions.
"""

from dataclasses import dataclass
from typing import Iterator

from .errors import DuplicateNameError, UnknownAxisError, RegistrySealedError


@dataclass(frozen=True)
class Axis:
    """A regular binning: ``bin_count`` equal bins between the two edges."""

    title: str
    bin_count: int
    low_edge: float
    high_edge: float

    def __post_init__(self):
        """Validate the binning."""
        if self.bin_count < 1:
            raise ValueError(f"bin_count must be at least 1, got {self.bin_count}")
        if not self.low_edge < self.high_edge:
            raise ValueError(
                f"low_edge ({self.low_edge}) must be below high_edge ({self.high_edge})"
            )

    @property
    def bin_width(self) -> float:
        return (self.high_edge - self.low_edge) / self.bin_count

    @classmethod
    def from_dict(cls, axis_dict: dict) -> 'Axis':
        """Build an Axis from a ``{title, bins, low, high}`` mapping."""
        return cls(
            title=axis_dict.get("title", ""),
            bin_count=int(axis_dict["bins"]),
            low_edge=float(axis_dict["low"]),
            high_edge=float(axis_dict["high"]),
        )


class AxisRegistry:
    """
    Axis definitions looked up by name.

    Filled during configuration, then sealed; resolving works in both phases.
    """

    def __init__(self):
        self._axes: dict[str, Axis] = {}
        self._sealed = False

    def register(self, name: str, axis: Axis) -> Axis:
        """
        Register an axis under a new name.

        Raises:
            DuplicateNameError: If the name is already registered
            RegistrySealedError: If the registry was sealed
        """
        if self._sealed:
            raise RegistrySealedError(f"Cannot register axis '{name}': registry is sealed")
        if name in self._axes:
            raise DuplicateNameError(f"Axis '{name}' is already registered")
        self._axes[name] = axis
        return axis

    def resolve(self, name: str) -> Axis:
        """
        Look up a registered axis.

        Raises:
            UnknownAxisError: If no axis is registered under this name
        """
        try:
            return self._axes[name]
        except KeyError:
            raise UnknownAxisError(f"Unknown axis '{name}'") from None

    def seal(self):
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def names(self) -> list[str]:
        return list(self._axes)

    def __contains__(self, name: str) -> bool:
        return name in self._axes

    def __iter__(self) -> Iterator[str]:
        return iter(self._axes)

    def __len__(self) -> int:
        return len(self._axes)

    @classmethod
    def from_dict(cls, axes_dict: dict) -> 'AxisRegistry':
        """
        Create a registry from ``{name: Axis or {title, bins, low, high}}``.

        Args:
            axes_dict: Mapping of axis names to axes or axis dictionaries

        Returns:
            Unsealed AxisRegistry holding every axis
        """
        registry = cls()
        for name, axis in axes_dict.items():
            if not isinstance(axis, Axis):
                axis = Axis.from_dict(axis)
            registry.register(name, axis)
        return registry
