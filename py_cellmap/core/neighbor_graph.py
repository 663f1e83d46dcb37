"""
Cell adjacency discovery.

Two distinct cells are neighbours when they share at least one Corner
instance. Both strategies below require the corner graph to be built and
produce the same relation:

- ``pairwise`` tests every unordered pair of cells once. O(N^2) pairs,
  fine for a few hundred cells.
- ``corners`` walks the cell list each Corner collected while the corner
  graph was built, which is close to linear in the number of corners.
"""

from itertools import combinations
from typing import Sequence

import structlog

from .cells import Cell

logger = structlog.get_logger()

STRATEGIES = ("pairwise", "corners")


def attach_neighbours_pairwise(cells: Sequence[Cell]) -> int:
    """Compare every unordered cell pair. Returns the number of links made."""
    corner_sets = [set(cell.corners) for cell in cells]
    links = 0
    for a, b in combinations(range(len(cells)), 2):
        if not corner_sets[a].isdisjoint(corner_sets[b]):
            cells[a].add_neighbour(cells[b])
            links += 1
    return links


def attach_neighbours_from_corners(cells: Sequence[Cell]) -> int:
    """Link every pair of cells listed on a common corner."""
    seen = set()
    for cell in cells:
        for corner in cell.corners:
            if corner in seen:
                continue
            seen.add(corner)
            for a, b in combinations(corner.cells, 2):
                a.add_neighbour(b)

    links = sum(len(cell.neighbors) for cell in cells) // 2
    return links


def attach_neighbours(cells: Sequence[Cell], strategy: str = "pairwise") -> int:
    """
    Populate ``Cell.neighbors`` symmetrically for the whole cell set.

    Args:
        cells: Cells whose corners are already resolved
        strategy: ``"pairwise"`` or ``"corners"``

    Returns:
        Number of distinct neighbour pairs
    """
    if strategy == "pairwise":
        links = attach_neighbours_pairwise(cells)
    elif strategy == "corners":
        links = attach_neighbours_from_corners(cells)
    else:
        raise ValueError(f"Unknown neighbour strategy {strategy!r}, expected one of {STRATEGIES}")

    logger.info("Neighbour graph built", strategy=strategy, cells=len(cells), links=links)
    return links
