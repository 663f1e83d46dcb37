"""Lloyd relaxation over tessellation snapshots."""

from typing import Callable, Optional, Sequence

import numpy as np
import structlog

from .cells import Cell
from .geometry import Rect, vertex_centroid
from .tessellation import Tessellation, Tessellator, tessellate, triangulate_and_clip

logger = structlog.get_logger()


def lloyd_points(cells: Sequence[Cell]) -> np.ndarray:
    """New generating points: the vertex average of each cell boundary, in cell order."""
    points = np.empty((len(cells), 2), dtype=float)
    for i, cell in enumerate(cells):
        points[i] = vertex_centroid(cell.boundary)
    return points


def relax(snapshot: Tessellation, bounds: Rect, iterations: int = 1,
          tessellator: Tessellator = triangulate_and_clip,
          on_iteration: Optional[Callable[[int, Tessellation], None]] = None) -> Tessellation:
    """
    Apply a fixed number of Lloyd relaxation passes.

    Each pass moves every point to the vertex average of its cell and
    retessellates from scratch; the previous snapshot is discarded whole.
    There is no convergence test.

    Args:
        snapshot: Tessellation to start from (left untouched)
        bounds: Domain rectangle
        iterations: Number of passes, 0 returns ``snapshot`` itself
        tessellator: Polygon builder handed to :func:`tessellate`
        on_iteration: Called with (completed passes, new snapshot)

    Returns:
        The final snapshot
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")

    logger.info("Starting Lloyd's relaxation", iterations=iterations)

    current = snapshot
    for iteration in range(iterations):
        new_points = lloyd_points(current.cells)
        logger.debug("Relaxed points computed", points=len(current.points), new=len(new_points))

        current = tessellate(new_points, bounds, tessellator)
        if on_iteration is not None:
            on_iteration(iteration + 1, current)

        logger.info(f"Relaxation iteration {iteration + 1} complete")

    return current
