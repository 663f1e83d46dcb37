"""Planar primitives and polygon measures shared by the pipeline."""

from typing import Iterable, NamedTuple, Sequence

import numpy as np


class Point(NamedTuple):
    """A coordinate pair. Compared by value only."""
    x: float
    y: float


class Rect(NamedTuple):
    """Axis-aligned rectangle given by its lower and upper corners."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_viewport(cls, x: float, y: float, width: float, height: float) -> "Rect":
        """Build a rectangle from a camera-style origin and size."""
        return cls(x, y, x + width, y + height)

    def expand(self, margin: float) -> "Rect":
        """Grow the rectangle by ``margin`` on every side."""
        return Rect(self.min_x - margin, self.min_y - margin,
                    self.max_x + margin, self.max_y + margin)

    def intersects(self, other: "Rect") -> bool:
        """True when the two rectangles overlap or touch."""
        return (self.min_x <= other.max_x and other.min_x <= self.max_x and
                self.min_y <= other.max_y and other.min_y <= self.max_y)

    def contains(self, point: Sequence[float]) -> bool:
        x, y = point
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


def bounding_box(vertices: Iterable[Sequence[float]]) -> Rect:
    """Smallest rectangle enclosing all vertices."""
    coords = np.asarray(list(vertices), dtype=float)
    lo = coords.min(axis=0)
    hi = coords.max(axis=0)
    return Rect(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))


def vertex_centroid(vertices: Sequence[Sequence[float]]) -> Point:
    """
    Arithmetic mean of the polygon vertices.

    This is not the area-weighted centroid: for irregular polygons the result
    is pulled towards densely spaced vertices. It is the centroid approximation
    used by Lloyd relaxation here.
    """
    coords = np.asarray(vertices, dtype=float)
    mean = coords.mean(axis=0)
    return Point(float(mean[0]), float(mean[1]))


def polygon_area(vertices: Sequence[Sequence[float]]) -> float:
    """Unsigned polygon area using the shoelace formula."""
    n = len(vertices)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i][0] * vertices[j][1] - vertices[j][0] * vertices[i][1]

    return abs(area) * 0.5


def area_spread(areas: Iterable[float]) -> float:
    """Mean squared deviation of a set of cell areas."""
    values = np.asarray(list(areas), dtype=float)
    if values.size == 0:
        return 0.0
    return float(np.mean((values - values.mean()) ** 2))
