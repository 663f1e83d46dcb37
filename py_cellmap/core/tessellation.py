"""
Bounded Voronoi tessellation of a point set.

scipy.spatial.Voronoi builds the diagram; clipping to the domain is done by
reflecting every point across the four domain edges. The bisector between a
point and its reflection is the edge itself, so the Voronoi regions of the
original points are exactly their cells clipped to the rectangle.

All regions index one shared vertex array, which means a vertex shared by
adjacent cells comes out with bit-identical coordinates in each of them.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi

from .cells import Cell
from .errors import DegenerateInput
from .geometry import Point, Rect

logger = structlog.get_logger()

Polygon = Tuple[Point, ...]
Tessellator = Callable[[np.ndarray, Rect], List[Polygon]]

EDGE_TOLERANCE = 1e-9


def mirror_points(points: np.ndarray, bounds: Rect) -> np.ndarray:
    """Reflect points across the left, right, bottom and top domain edges."""
    left = points.copy()
    left[:, 0] = 2 * bounds.min_x - left[:, 0]
    right = points.copy()
    right[:, 0] = 2 * bounds.max_x - right[:, 0]
    bottom = points.copy()
    bottom[:, 1] = 2 * bounds.min_y - bottom[:, 1]
    top = points.copy()
    top[:, 1] = 2 * bounds.max_y - top[:, 1]
    return np.vstack([left, right, bottom, top])


def _validate_points(points: np.ndarray, bounds: Rect) -> None:
    if points.ndim != 2 or points.shape[1] != 2 or len(points) == 0:
        raise DegenerateInput(f"Expected a non-empty (n, 2) point array, got shape {points.shape}")

    if not np.all(np.isfinite(points)):
        raise DegenerateInput("Point set contains non-finite coordinates")

    xs, ys = points[:, 0], points[:, 1]
    outside = (xs < bounds.min_x) | (xs > bounds.max_x) | (ys < bounds.min_y) | (ys > bounds.max_y)
    if np.any(outside):
        raise DegenerateInput(f"{int(outside.sum())} points lie outside {tuple(bounds)}")

    # A point on an edge coincides with its own reflection
    on_edge = ((xs == bounds.min_x) | (xs == bounds.max_x) |
               (ys == bounds.min_y) | (ys == bounds.max_y))
    if np.any(on_edge):
        raise DegenerateInput(f"{int(on_edge.sum())} points lie on the domain edge")

    if len(np.unique(points, axis=0)) != len(points):
        raise DegenerateInput("Point set contains duplicate positions")


def snap_to_bounds(vertices: np.ndarray, bounds: Rect, tolerance: float = EDGE_TOLERANCE) -> np.ndarray:
    """
    Clamp vertices into the rectangle and put near-edge vertices exactly on it.

    Circumcentres on an edge land a few ulps either side of it; ``tolerance``
    is relative to the larger side of the rectangle.
    """
    lo = np.array([bounds.min_x, bounds.min_y])
    hi = np.array([bounds.max_x, bounds.max_y])
    snapped = np.clip(vertices, lo, hi)

    eps = tolerance * max(hi[0] - lo[0], hi[1] - lo[1])
    for axis in (0, 1):
        column = snapped[:, axis]
        column[np.abs(column - lo[axis]) <= eps] = lo[axis]
        column[np.abs(column - hi[axis]) <= eps] = hi[axis]
    return snapped


def _order_region(vertices: np.ndarray, center: np.ndarray) -> np.ndarray:
    """Sort convex polygon vertices counter-clockwise around an interior point."""
    angles = np.arctan2(vertices[:, 1] - center[1], vertices[:, 0] - center[0])
    return vertices[np.argsort(angles, kind="stable")]


def triangulate_and_clip(points: Sequence[Sequence[float]], bounds: Rect) -> List[Polygon]:
    """
    Compute the clipped Voronoi polygon of every point.

    Args:
        points: Generating points, shape (n, 2)
        bounds: Domain rectangle every point must lie strictly inside

    Returns:
        One counter-clockwise polygon per input point, in input order

    Raises:
        DegenerateInput: points outside or on the domain edge, duplicated,
            or geometry Qhull cannot resolve into bounded regions
    """
    pts = np.asarray(points, dtype=float)
    _validate_points(pts, bounds)

    try:
        vor = Voronoi(np.vstack([pts, mirror_points(pts, bounds)]))
    except QhullError as exc:
        raise DegenerateInput(f"Voronoi construction failed: {exc}") from exc

    vertices = snap_to_bounds(vor.vertices, bounds)

    polygons = []
    for i in range(len(pts)):
        region = vor.regions[vor.point_region[i]]
        if not region or -1 in region:
            raise DegenerateInput(f"Point {i} has an unbounded Voronoi region")

        ordered = _order_region(vertices[region], pts[i])

        polygon = []
        for x, y in ordered:
            vertex = Point(float(x), float(y))
            if not polygon or polygon[-1] != vertex:
                polygon.append(vertex)
        if len(polygon) > 1 and polygon[0] == polygon[-1]:
            polygon.pop()

        if len(polygon) < 3:
            raise DegenerateInput(f"Point {i} produced a polygon with {len(polygon)} vertices")
        polygons.append(tuple(polygon))

    return polygons


@dataclass(frozen=True)
class Tessellation:
    """One immutable tessellation pass: points, their polygons and cells."""
    points: np.ndarray
    polygons: Tuple[Polygon, ...]
    cells: Tuple[Cell, ...]


def build_cells(points: np.ndarray, polygons: Sequence[Polygon]) -> List[Cell]:
    """Pair each point with its polygon. Corners and neighbours stay empty."""
    if len(points) != len(polygons):
        raise DegenerateInput(
            f"Tessellator returned {len(polygons)} polygons for {len(points)} points")

    for i, polygon in enumerate(polygons):
        if len(polygon) < 3:
            raise DegenerateInput(f"Tessellator returned {len(polygon)} vertices for point {i}")

    return [Cell(center=Point(float(p[0]), float(p[1])),
                 boundary=tuple(Point(float(x), float(y)) for x, y in polygon))
            for p, polygon in zip(points, polygons)]


def tessellate(points: np.ndarray, bounds: Rect,
               tessellator: Tessellator = triangulate_and_clip) -> Tessellation:
    """Run the tessellator over ``points`` and build a fresh cell set."""
    points = np.array(points, dtype=float)
    points.setflags(write=False)

    polygons = tuple(tessellator(points, bounds))
    cells = build_cells(points, polygons)

    logger.info("Tessellation complete", cells=len(cells),
                vertices=sum(len(p) for p in polygons))
    return Tessellation(points=points, polygons=polygons, cells=tuple(cells))
