"""
Filler Registry

Index of the filler cells currently available for closing gaps, sorted by
width so the gap filler can ask for the widest filler that still fits.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging

from ..library.cells import CellLibrary

logger = logging.getLogger(__name__)

# Widths closer than this are considered equal when checking a fit
WIDTH_EPSILON = 1e-9


@dataclass(frozen=True)
class FillerEntry:
    name: str
    width: float


class FillerRegistry:
    """
    Filler cells keyed by name, ordered widest first.

    Entries of equal width keep their registration order, so best_fit()
    always picks the first-registered one and output is reproducible.
    """

    def __init__(self, entries: Optional[Sequence[Tuple[str, float]]] = None):
        self._entries: List[FillerEntry] = []
        for name, width in entries or []:
            self.add(name, width)

    @classmethod
    def from_library(cls, prefixes: Sequence[str],
                     library: CellLibrary) -> "FillerRegistry":
        registry = cls()
        registry.rebuild(prefixes, library)
        return registry

    def add(self, name: str, width: float):
        """Register a filler cell; a name registered twice keeps its first slot."""
        if width <= 0:
            logger.warning(f"Ignoring filler {name} with non-positive width {width:g}")
            return
        if any(entry.name == name for entry in self._entries):
            return
        self._entries.append(FillerEntry(name, width))
        # sort() is stable, ties stay in registration order
        self._entries.sort(key=lambda entry: -entry.width)

    def clear(self):
        self._entries = []

    def rebuild(self, prefixes: Sequence[str], library: CellLibrary):
        """
        Replace the registry contents with the library's filler cells.

        Only cells flagged as fillers are considered. When prefixes are given
        a cell must also start with one of them; an empty prefix list takes
        every filler in the library.
        """
        self.clear()
        for cell in library.filler_cells():
            if prefixes and not any(cell.name.startswith(p) for p in prefixes):
                continue
            self.add(cell.name, cell.size_x)

        logger.debug(
            "Filler registry rebuilt from prefixes %s: %s",
            list(prefixes) or "(all)",
            ", ".join(f"{e.name}={e.width:g}" for e in self._entries) or "empty",
        )

    def best_fit(self, max_width: float) -> Optional[Tuple[str, float]]:
        """Widest filler not exceeding max_width, or None."""
        for entry in self._entries:
            if entry.width <= max_width + WIDTH_EPSILON:
                return entry.name, entry.width
        return None

    @property
    def cell_count(self) -> int:
        return len(self._entries)

    def smallest_width(self) -> float:
        """Width of the narrowest filler, 0 when the registry is empty."""
        if not self._entries:
            return 0.0
        return self._entries[-1].width

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def widths(self) -> List[float]:
        return [entry.width for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __repr__(self) -> str:
        return f"FillerRegistry({[(e.name, e.width) for e in self._entries]!r})"
