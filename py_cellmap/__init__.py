"""
py_cellmap - seeded Voronoi cell maps with Lloyd relaxation and explicit topology.
"""

from .core import (
    Cell, Corner, MapGenerator, MapOptions, MapState, Point, Rect,
    CellMapError, DegenerateCell, DegenerateInput, InvalidParameter, NotReady,
)

__version__ = "0.1.0"

__all__ = ['Cell', 'Corner', 'MapGenerator', 'MapOptions', 'MapState', 'Point', 'Rect',
           'CellMapError', 'DegenerateCell', 'DegenerateInput', 'InvalidParameter', 'NotReady']
