"""
Core map generation functionality.
"""

from .cells import Cell, Corner
from .corner_graph import CornerGraph, corner_key
from .errors import CellMapError, DegenerateCell, DegenerateInput, InvalidParameter, NotReady
from .geometry import Point, Rect
from .map_generator import MapGenerator, MapOptions, MapState
from .neighbor_graph import attach_neighbours
from .relaxation import lloyd_points, relax
from .sampling import sample_points
from .tessellation import Tessellation, tessellate, triangulate_and_clip

__all__ = ['Cell', 'Corner', 'CornerGraph', 'corner_key',
           'CellMapError', 'DegenerateCell', 'DegenerateInput', 'InvalidParameter', 'NotReady',
           'Point', 'Rect', 'MapGenerator', 'MapOptions', 'MapState', 'attach_neighbours',
           'lloyd_points', 'relax', 'sample_points', 'Tessellation', 'tessellate',
           'triangulate_and_clip']
