"""Candidate segment pairs between two curves with overlapping bounding boxes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Tuple, Union

import numpy as np

from .index import SpatialIndex
from .logging_utils import debug_log_call
from .primitives import Segment
from .visitors import PairVisitFunc, SearchVisitor, pair_callback

if TYPE_CHECKING:  # pragma: no cover
    from .curve import IndexedCurve

logger = logging.getLogger(__name__)

# Node level used for a single segment below the deepest index level.
_SEGMENT_LEVEL = -1


def overlapping(rects: np.ndarray, rect: np.ndarray) -> np.ndarray:
    """Boolean mask of the rows of ``rects`` whose closed box meets ``rect``."""

    return ~(
        (rects[:, 0] > rect[2])
        | (rects[:, 2] < rect[0])
        | (rects[:, 1] > rect[3])
        | (rects[:, 3] < rect[1])
    )


class _Side:
    """One curve as seen by the co-descent."""

    def __init__(self, curve: "IndexedCurve") -> None:
        self.segments = curve.segments_array()
        self.segment_rects = curve.segment_rects_array()
        self.index: SpatialIndex = curve.spatial_index

    @property
    def top(self) -> int:
        return self.index.num_levels - 1

    def rects(self, level: int) -> np.ndarray:
        if level == _SEGMENT_LEVEL:
            return self.segment_rects
        return self.index.levels[level]

    def children(self, level: int, node: int) -> Tuple[int, np.ndarray]:
        start, stop = self.index.child_range(level, node)
        if level == 0:
            return _SEGMENT_LEVEL, self.index.order[start:stop]
        return level - 1, np.arange(start, stop)

    def segment(self, seg_index: int) -> Segment:
        return Segment.from_coords(*self.segments[seg_index])


class _CoDescent:
    def __init__(self, side_a: _Side, side_b: _Side, visit: PairVisitFunc) -> None:
        self.a = side_a
        self.b = side_b
        self.visit = visit
        self.reported = 0

    def descend(self, level_a: int, node_a: int, level_b: int, node_b: int) -> bool:
        """Visit every leaf pair under two overlapping nodes.

        The deeper (higher level) node is split first. Returns ``False``
        once the visitor asked to stop.
        """

        if level_a == _SEGMENT_LEVEL and level_b == _SEGMENT_LEVEL:
            self.reported += 1
            return self.visit(self.a.segment(node_a), node_a, self.b.segment(node_b), node_b)

        if level_a >= level_b:
            child_level, children = self.a.children(level_a, node_a)
            other = self.b.rects(level_b)[node_b]
            hits = children[overlapping(self.a.rects(child_level)[children], other)]
            for child in hits:
                if not self.descend(child_level, int(child), level_b, node_b):
                    return False
        else:
            child_level, children = self.b.children(level_b, node_b)
            other = self.a.rects(level_a)[node_a]
            hits = children[overlapping(self.b.rects(child_level)[children], other)]
            for child in hits:
                if not self.descend(level_a, node_a, child_level, int(child)):
                    return False
        return True


def _scan(side_a: _Side, side_b: _Side, visit: PairVisitFunc) -> bool:
    for index_a, rect_a in enumerate(side_a.segment_rects):
        hits = np.flatnonzero(overlapping(side_b.segment_rects, rect_a))
        if len(hits) == 0:
            continue
        seg_a = side_a.segment(index_a)
        for index_b in hits:
            index_b = int(index_b)
            if not visit(seg_a, index_a, side_b.segment(index_b), index_b):
                return False
    return True


@debug_log_call(logger, log_result=False)
def pair_search(
    curve_a: "IndexedCurve",
    curve_b: "IndexedCurve",
    visitor: Union[SearchVisitor, PairVisitFunc],
) -> bool:
    """Report each segment pair of ``curve_a`` x ``curve_b`` with overlapping rects.

    Pairs whose boxes touch are reported even when the segments themselves
    do not meet; filter with :func:`segment_intersects_segment` for exact
    intersections. When either curve has no index every pair of segment
    rects is tested directly, which yields the same pairs. Returns ``False``
    when the visitor stopped the search.
    """

    visit = pair_callback(visitor)
    side_a = _Side(curve_a)
    side_b = _Side(curve_b)
    if len(side_a.segments) == 0 or len(side_b.segments) == 0:
        return True

    if side_a.index.num_levels == 0 or side_b.index.num_levels == 0:
        logger.debug(
            "Pair search without index: %d x %d segments", len(side_a.segments), len(side_b.segments)
        )
        completed = _scan(side_a, side_b, visit)
    else:
        root_a = side_a.rects(side_a.top)[0]
        root_b = side_b.rects(side_b.top)[0]
        if not overlapping(root_b[np.newaxis, :], root_a)[0]:
            return True
        search = _CoDescent(side_a, side_b, visit)
        completed = search.descend(side_a.top, 0, side_b.top, 0)
        logger.debug("Pair search reported %d candidate pair(s), completed=%s", search.reported, completed)

    if not completed:
        logger.debug("Pair search stopped by visitor")
    return completed


__all__ = ["overlapping", "pair_search"]
