"""Errors raised by the cell map generation pipeline."""


class CellMapError(Exception):
    """Base class for all generation failures."""


class InvalidParameter(CellMapError, ValueError):
    """Sampling bounds or point count are unusable."""


class DegenerateInput(CellMapError, ValueError):
    """Point set cannot be tessellated into bounded polygons."""


class DegenerateCell(CellMapError, ValueError):
    """A cell boundary has fewer than three vertices."""


class NotReady(CellMapError, RuntimeError):
    """Pipeline step or query invoked before its prerequisites ran."""
