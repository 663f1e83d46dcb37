"""
Deduplication of cell boundary vertices into a shared corner graph.

Every boundary vertex resolves to a Corner through a structural ``(x, y)``
key, so two cells touching the same position hold the same Corner instance.
Each corner is then linked to its cyclic predecessor and successor inside
every cell that uses it; the links accumulate across cells.
"""

from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from .cells import Cell, Corner
from .errors import DegenerateCell
from .geometry import Point

logger = structlog.get_logger()

CornerKey = Tuple[float, float]


def corner_key(point: Point, snap_digits: Optional[int] = None) -> CornerKey:
    """
    Identity key for a vertex position.

    With ``snap_digits`` set, coordinates are rounded first so vertices
    a few ulps apart collapse onto the same corner.
    """
    x, y = point
    if snap_digits is not None:
        x = round(x, snap_digits)
        y = round(y, snap_digits)
    # -0.0 and 0.0 already hash and compare equal
    return (float(x), float(y))


class CornerGraph:
    """Registry of corners for one map generation."""

    def __init__(self, snap_digits: Optional[int] = None):
        self.snap_digits = snap_digits
        self._registry: Dict[CornerKey, Corner] = {}

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, point) -> bool:
        return corner_key(point, self.snap_digits) in self._registry

    @property
    def corners(self) -> List[Corner]:
        """All corners in creation order."""
        return list(self._registry.values())

    def resolve(self, point: Point) -> Corner:
        """Return the corner at ``point``, creating it on first encounter."""
        key = corner_key(point, self.snap_digits)
        corner = self._registry.get(key)
        if corner is None:
            corner = Corner(position=Point(*point))
            self._registry[key] = corner
        return corner

    def add_cell(self, cell: Cell) -> None:
        """Resolve the corners of one cell and link them around its ring."""
        if len(cell.boundary) < 3:
            raise DegenerateCell(
                f"Cell at {tuple(cell.center)} has {len(cell.boundary)} boundary vertices")

        ring = [self.resolve(vertex) for vertex in cell.boundary]
        cell.corners = ring

        for corner in ring:
            if cell not in corner.cells:
                corner.cells.append(cell)

        n = len(ring)
        for i, corner in enumerate(ring):
            corner.add_connection(ring[i - 1])
            corner.add_connection(ring[(i + 1) % n])

    def build(self, cells: Iterable[Cell]) -> "CornerGraph":
        """Add every cell, in order."""
        count = 0
        for cell in cells:
            self.add_cell(cell)
            count += 1

        logger.info("Corner graph built", cells=count, corners=len(self._registry))
        return self
