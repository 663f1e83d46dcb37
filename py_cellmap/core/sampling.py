"""Seeded generation of candidate cell centres."""

from typing import Optional

import numpy as np
import structlog

from .alea_prng import AleaPRNG, Seed
from .errors import InvalidParameter

logger = structlog.get_logger()


def validate_sampling(x0: float, y0: float, width: float, height: float,
                      num_points: int) -> None:
    """Raise InvalidParameter for an unusable count or domain."""
    if num_points is None or num_points <= 0:
        raise InvalidParameter(f"num_points must be positive, got {num_points}")
    if width <= x0:
        raise InvalidParameter(f"width ({width}) must be greater than x ({x0})")
    if height <= y0:
        raise InvalidParameter(f"height ({height}) must be greater than y ({y0})")


def sample_points(x0: float, y0: float, width: float, height: float,
                  num_points: int, seed: Seed = None,
                  prng: Optional[AleaPRNG] = None) -> np.ndarray:
    """
    Generate uniformly distributed points inside the sampling domain.

    ``width`` and ``height`` are the upper bounds of the domain, so every
    point satisfies ``x0 <= px < width`` and ``y0 <= py < height``. Each point
    draws its x coordinate first, then its y coordinate.

    Args:
        x0, y0: Lower bounds of the domain
        width, height: Upper bounds of the domain
        num_points: Number of points to generate
        seed: Seed for a fresh generator (ignored when ``prng`` is given)
        prng: Existing generator to draw from; its state is advanced

    Returns:
        Array of shape (num_points, 2)
    """
    validate_sampling(x0, y0, width, height, num_points)

    if prng is None:
        prng = AleaPRNG(seed if seed is not None else "default")

    points = np.empty((num_points, 2), dtype=float)
    for i in range(num_points):
        points[i, 0] = prng.uniform(x0, width)
        points[i, 1] = prng.uniform(y0, height)

    logger.info("Points sampled", count=num_points, draws=prng.draws)
    return points
