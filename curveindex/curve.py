"""Polyline and ring types carrying an optional segment index."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from .config import resolve_index
from .errors import CurveConstructionError
from .index import IndexType, SpatialIndex, build_index
from .nearest import nearest_segment
from .pairs import pair_search
from .primitives import Point, Rect, Segment
from .visitors import NearestSegmentVisitor, PairVisitFunc, SearchVisitor

logger = logging.getLogger(__name__)

PointLike = Union[Point, Sequence[float]]


def _as_coords(points: Union[Iterable[PointLike], np.ndarray]) -> np.ndarray:
    if isinstance(points, np.ndarray):
        raw = points
    else:
        raw = [(p.x, p.y) if isinstance(p, Point) else p for p in points]
    try:
        coords = np.array(raw, dtype=float)
    except (TypeError, ValueError) as exc:
        raise CurveConstructionError(f"vertices are not numeric pairs: {exc}") from exc
    if coords.size == 0:
        coords = np.zeros((0, 2), dtype=float)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise CurveConstructionError(
            f"vertices must form an (n, 2) array, got shape {coords.shape}", num_points=len(coords)
        )
    if not np.all(np.isfinite(coords)):
        raise CurveConstructionError("vertices must be finite", num_points=len(coords))
    coords.setflags(write=False)
    return coords


def _segment_rects(segments: np.ndarray) -> np.ndarray:
    rects = np.hstack(
        [
            np.minimum(segments[:, :2], segments[:, 2:]),
            np.maximum(segments[:, :2], segments[:, 2:]),
        ]
    )
    rects.setflags(write=False)
    return rects


class IndexedCurve:
    """Immutable vertex sequence with derived segments and an optional index.

    Subclasses decide how segments are derived from vertices; see
    :class:`Line` and :class:`Ring`.
    """

    closed = False

    def __init__(
        self,
        points: Union[Iterable[PointLike], np.ndarray] = (),
        index: Union[IndexType, str, None] = None,
        *,
        spread: Optional[int] = None,
    ) -> None:
        index_type, resolved_spread = resolve_index(index, spread)
        self._coords = _as_coords(points)
        self._segments = self._derive_segments(self._coords)
        self._segments.setflags(write=False)
        self._rects = _segment_rects(self._segments)
        self._index: SpatialIndex = build_index(self._rects, resolved_spread, index_type)
        logger.debug(
            "Built %s: points=%d segments=%d index=%s levels=%d",
            type(self).__name__,
            len(self._coords),
            len(self._segments),
            index_type.value,
            self._index.num_levels,
        )

    @staticmethod
    def _derive_segments(coords: np.ndarray) -> np.ndarray:
        if len(coords) < 2:
            return np.zeros((0, 4), dtype=float)
        return np.hstack([coords[:-1], coords[1:]])

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(num_points={self.num_points()}, "
            f"index={self.index_type.value}, levels={self.index_num_levels()})"
        )

    # -- vertices and segments -------------------------------------------

    def num_points(self) -> int:
        return len(self._coords)

    def points(self) -> List[Point]:
        return [Point(x, y) for x, y in self._coords]

    def points_array(self) -> np.ndarray:
        """Read-only ``(n, 2)`` view of the vertices."""

        return self._coords

    def point(self, index: int) -> Optional[Point]:
        if 0 <= index < len(self._coords):
            x, y = self._coords[index]
            return Point(x, y)
        return None

    def segments_array(self) -> np.ndarray:
        """Read-only ``(m, 4)`` array of ``ax, ay, bx, by`` rows."""

        return self._segments

    def segment_rects_array(self) -> np.ndarray:
        return self._rects

    def num_segments(self) -> int:
        return len(self._segments)

    def segments(self) -> List[Segment]:
        return [Segment.from_coords(*row) for row in self._segments]

    def segment(self, index: int) -> Optional[Segment]:
        if 0 <= index < len(self._segments):
            return Segment.from_coords(*self._segments[index])
        return None

    def rect(self) -> Rect:
        if len(self._coords) == 0:
            return Rect.from_bounds(0.0, 0.0, 0.0, 0.0)
        lo = self._coords.min(axis=0)
        hi = self._coords.max(axis=0)
        return Rect.from_bounds(lo[0], lo[1], hi[0], hi[1])

    def memsize(self) -> int:
        return int(self._coords.nbytes + self._segments.nbytes + self._rects.nbytes + self._index.nbytes())

    # -- index accessors --------------------------------------------------

    @property
    def index_type(self) -> IndexType:
        return self._index.index_type

    @property
    def spatial_index(self) -> SpatialIndex:
        return self._index

    def index_spread(self) -> int:
        return self._index.spread

    def index_num_levels(self) -> int:
        return self._index.num_levels

    def index_level_num_rects(self, level: int) -> int:
        if 0 <= level < self._index.num_levels:
            return len(self._index.levels[level])
        return 0

    def index_level_rect(self, level: int, rect_index: int) -> Optional[Rect]:
        """Rect ``rect_index`` of ``level`` (0 = leaves), or ``None`` when out of range."""

        if not 0 <= level < self._index.num_levels:
            return None
        rects = self._index.levels[level]
        if not 0 <= rect_index < len(rects):
            return None
        return Rect.from_bounds(*rects[rect_index])

    # -- metrics ----------------------------------------------------------

    def _segment_lengths(self) -> np.ndarray:
        return np.hypot(self._segments[:, 2] - self._segments[:, 0], self._segments[:, 3] - self._segments[:, 1])

    # -- searches ---------------------------------------------------------

    def nearest_segment(self, visitor: NearestSegmentVisitor) -> bool:
        return nearest_segment(self, visitor.rect_distance, visitor.segment_distance, visitor.visit)

    def line_search(self, other: "Line", visitor: Union[SearchVisitor, PairVisitFunc]) -> bool:
        if not isinstance(other, Line):
            raise TypeError(f"line_search expects a Line, got {type(other).__name__}")
        return pair_search(self, other, visitor)

    def ring_search(self, other: "Ring", visitor: Union[SearchVisitor, PairVisitFunc]) -> bool:
        if not isinstance(other, Ring):
            raise TypeError(f"ring_search expects a Ring, got {type(other).__name__}")
        return pair_search(self, other, visitor)


class Line(IndexedCurve):
    """Open polyline: ``n`` vertices give ``n - 1`` segments."""

    def length(self) -> float:
        return float(self._segment_lengths().sum())


class Ring(IndexedCurve):
    """Closed ring.

    The closing segment from the last vertex back to the first is implied.
    When the caller already repeated the first vertex at the end, no extra
    zero-length segment is added.
    """

    closed = True

    @staticmethod
    def _derive_segments(coords: np.ndarray) -> np.ndarray:
        if len(coords) == 0:
            return np.zeros((0, 4), dtype=float)
        if len(coords) > 1 and np.array_equal(coords[0], coords[-1]):
            return np.hstack([coords[:-1], coords[1:]])
        return np.hstack([coords, np.roll(coords, -1, axis=0)])

    def _distinct_coords(self) -> np.ndarray:
        if len(self._coords) > 1 and np.array_equal(self._coords[0], self._coords[-1]):
            return self._coords[:-1]
        return self._coords

    def _signed_area(self) -> float:
        coords = self._distinct_coords()
        if len(coords) < 3:
            return 0.0
        x = coords[:, 0]
        y = coords[:, 1]
        return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))

    def area(self) -> float:
        return abs(self._signed_area())

    def clockwise(self) -> bool:
        return self._signed_area() < 0.0

    def perimeter(self) -> float:
        return float(self._segment_lengths().sum())

    def convex(self) -> bool:
        """Every turn between consecutive edges goes the same way."""

        coords = self._distinct_coords()
        if len(coords) < 3:
            return False
        edges = np.roll(coords, -1, axis=0) - coords
        nxt = np.roll(edges, -1, axis=0)
        turns = edges[:, 0] * nxt[:, 1] - edges[:, 1] * nxt[:, 0]
        turns = turns[turns != 0.0]
        if len(turns) == 0:
            return False
        return bool(np.all(turns > 0.0) or np.all(turns < 0.0))


__all__ = ["IndexedCurve", "Line", "PointLike", "Ring"]
