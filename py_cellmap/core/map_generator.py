"""
Map generation pipeline.

Sampling, tessellation, Lloyd relaxation and topology construction are
driven by MapGenerator as a small state machine:

    UNINITIALIZED -> SAMPLED -> TESSELLATED -> (RELAXING -> TESSELLATED)* -> FINALIZED

Corners and neighbours are built once, after the last relaxation pass.
Cells can only be queried once the map is FINALIZED.
"""

from enum import Enum
from typing import List, Literal, Optional, Union

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field

from ..config import settings
from .alea_prng import AleaPRNG
from .cells import Cell, Corner
from .corner_graph import CornerGraph
from .errors import NotReady
from .geometry import Rect
from .neighbor_graph import attach_neighbours
from .relaxation import relax
from .sampling import sample_points
from .tessellation import Tessellation, Tessellator, tessellate, triangulate_and_clip

logger = structlog.get_logger()


class MapState(str, Enum):
    UNINITIALIZED = "uninitialized"
    SAMPLED = "sampled"
    TESSELLATED = "tessellated"
    RELAXING = "relaxing"
    FINALIZED = "finalized"


class MapOptions(BaseModel):
    """Options for one map generation."""

    model_config = ConfigDict(populate_by_name=True)

    seed: Optional[Union[str, int]] = Field(None, description="Seed for the point sampler")
    x: float = Field(0, description="Lower x bound of the domain")
    y: float = Field(0, description="Lower y bound of the domain")
    width: float = Field(..., description="Upper x bound of the domain")
    height: float = Field(..., description="Upper y bound of the domain")
    num_points: int = Field(..., alias="numPoints", description="Number of cells to generate")
    max_relax: int = Field(
        default_factory=lambda: settings.max_relax, alias="maxRelax", ge=0,
        description="Lloyd relaxation passes",
    )
    visibility_margin: float = Field(
        default_factory=lambda: settings.visibility_margin, ge=0,
        description="Padding around the display rectangle for get_cells",
    )
    neighbor_strategy: Literal["pairwise", "corners"] = Field(
        default_factory=lambda: settings.neighbor_strategy,
        description="Cell adjacency discovery strategy",
    )
    corner_snap_digits: Optional[int] = Field(
        default_factory=lambda: settings.corner_snap_digits, ge=0,
        description="Decimals kept when keying corners, None for exact coordinates",
    )

    @property
    def bounds(self) -> Rect:
        """Domain rectangle; width and height are upper bounds, not extents."""
        return Rect(self.x, self.y, self.width, self.height)


class MapGenerator:
    """Builds and owns one tessellated map with its corner and neighbour graphs."""

    def __init__(self, options: MapOptions, tessellator: Tessellator = triangulate_and_clip,
                 auto_generate: bool = True):
        """
        Args:
            options: Generation options
            tessellator: Point set to clipped polygon builder
            auto_generate: Run the whole pipeline immediately
        """
        self.options = options
        self.tessellator = tessellator
        self._reset()

        if auto_generate:
            self.generate()

    def _reset(self) -> None:
        self.state = MapState.UNINITIALIZED
        self.prng: Optional[AleaPRNG] = None
        self.points: Optional[np.ndarray] = None
        self.snapshot: Optional[Tessellation] = None
        self.corner_graph: Optional[CornerGraph] = None
        self.relax_counter = 0

    def _require(self, *states: MapState) -> None:
        if self.state not in states:
            expected = ", ".join(s.value for s in states)
            raise NotReady(f"Map is {self.state.value}, expected {expected}")

    @property
    def bounds(self) -> Rect:
        return self.options.bounds

    def sample(self) -> np.ndarray:
        """Seed the generator and draw the initial points."""
        self._require(MapState.UNINITIALIZED)
        opts = self.options
        self.prng = AleaPRNG(opts.seed if opts.seed is not None else "default")
        self.points = sample_points(opts.x, opts.y, opts.width, opts.height,
                                    opts.num_points, prng=self.prng)
        self.state = MapState.SAMPLED
        return self.points

    def tessellate(self) -> Tessellation:
        """First tessellation pass over the sampled points."""
        self._require(MapState.SAMPLED)
        self.snapshot = tessellate(self.points, self.bounds, self.tessellator)
        self.state = MapState.TESSELLATED
        return self.snapshot

    def relax(self) -> Tessellation:
        """Run the configured number of Lloyd passes, replacing points and cells."""
        self._require(MapState.TESSELLATED)
        self.state = MapState.RELAXING

        def record(completed: int, snapshot: Tessellation) -> None:
            self.relax_counter = completed

        try:
            final = relax(self.snapshot, self.bounds, self.options.max_relax,
                          self.tessellator, on_iteration=record)
        except Exception:
            self._reset()
            raise

        self.snapshot = final
        self.points = final.points
        self.state = MapState.TESSELLATED
        return final

    def finalize(self) -> None:
        """Build the corner graph, then the neighbour graph, exactly once."""
        self._require(MapState.TESSELLATED)
        opts = self.options
        cells = self.snapshot.cells

        graph = CornerGraph(snap_digits=opts.corner_snap_digits)
        try:
            graph.build(cells)
            attach_neighbours(cells, opts.neighbor_strategy)
        except Exception:
            self._reset()
            raise

        self.corner_graph = graph
        self.state = MapState.FINALIZED
        logger.info("Map finalized", cells=len(cells), corners=len(graph),
                    relaxations=self.relax_counter)

    def generate(self) -> "MapGenerator":
        """Run the full pipeline. Any failure leaves the generator uninitialized."""
        logger.info("Generating map", seed=self.options.seed, bounds=tuple(self.bounds),
                    num_points=self.options.num_points, max_relax=self.options.max_relax)
        try:
            self.sample()
            self.tessellate()
            self.relax()
            self.finalize()
        except Exception:
            self._reset()
            raise
        return self

    @property
    def cells(self) -> List[Cell]:
        """Every finalized cell, in point order."""
        self._require(MapState.FINALIZED)
        return list(self.snapshot.cells)

    @property
    def corners(self) -> List[Corner]:
        self._require(MapState.FINALIZED)
        return self.corner_graph.corners

    def get_cells(self, display: Rect, margin: Optional[float] = None) -> List[Cell]:
        """
        Cells whose bounding box touches ``display`` padded by ``margin``.

        A coarse test: cells near the edge of the padded display may be
        reported even when their polygon does not reach it.
        """
        self._require(MapState.FINALIZED)
        if margin is None:
            margin = self.options.visibility_margin
        return [cell for cell in self.snapshot.cells if cell.visible(display, margin)]
