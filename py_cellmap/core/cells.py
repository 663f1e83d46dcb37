"""Cell and corner entities of the tessellated map."""

from dataclasses import dataclass, field
from typing import List, Set, Tuple

from .geometry import Point, Rect, bounding_box, polygon_area


@dataclass(eq=False)
class Corner:
    """
    A polygon vertex shared by every cell that touches it.

    Corners compare and hash by identity: two cells reference the same
    corner only when they hold the very same instance.
    """
    position: Point
    connections: Set["Corner"] = field(default_factory=set, repr=False)
    cells: List["Cell"] = field(default_factory=list, repr=False)

    def add_connection(self, other: "Corner") -> None:
        """Link to an adjacent corner. Repeated links are ignored."""
        if other is not self:
            self.connections.add(other)


@dataclass(eq=False)
class Cell:
    """One tessellation region around a generating point."""
    center: Point
    boundary: Tuple[Point, ...]
    corners: List[Corner] = field(default_factory=list, repr=False)
    neighbors: Set["Cell"] = field(default_factory=set, repr=False)

    @property
    def area(self) -> float:
        return polygon_area(self.boundary)

    def bounding_box(self) -> Rect:
        return bounding_box(self.boundary)

    def is_neighbour(self, other: "Cell") -> bool:
        """True when the two cells share at least one corner instance."""
        if other is self:
            return False
        own = set(self.corners)
        return any(corner in own for corner in other.corners)

    def add_neighbour(self, other: "Cell") -> None:
        """Record adjacency on both cells at once."""
        if other is self:
            return
        self.neighbors.add(other)
        other.neighbors.add(self)

    def visible(self, display: Rect, margin: float = 100) -> bool:
        """Coarse culling: does the cell's extent touch the padded display?"""
        return self.bounding_box().intersects(display.expand(margin))
