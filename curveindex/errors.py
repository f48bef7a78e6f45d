"""Exception types raised while building curves and indexes."""

from __future__ import annotations

from typing import Optional


class CurveIndexError(Exception):
    """Base class for errors raised by :mod:`curveindex`."""


class CurveConstructionError(CurveIndexError, ValueError):
    """Raised when vertex input cannot be turned into a curve."""

    def __init__(self, message: str, *, num_points: Optional[int] = None):
        super().__init__(message)
        self.num_points = num_points


class IndexConfigError(CurveIndexError, ValueError):
    """Raised for an invalid spread or index type."""


__all__ = ["CurveIndexError", "CurveConstructionError", "IndexConfigError"]
