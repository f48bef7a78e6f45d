"""Branch-and-bound search reporting segments in increasing distance order."""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from typing import TYPE_CHECKING, List, Tuple

from .logging_utils import debug_log_call
from .primitives import Rect, Segment
from .visitors import NearestVisitFunc, RectCostFunc, SegmentCostFunc, split_cost

if TYPE_CHECKING:  # pragma: no cover
    from .curve import IndexedCurve

logger = logging.getLogger(__name__)

# Segments sort ahead of rects on equal keys so a segment whose distance
# equals the smallest open bound is reported without expanding the rect.
_SEGMENT = 0
_RECT = 1

FrontierItem = Tuple[float, int, int, tuple]


@debug_log_call(logger, log_result=False)
def nearest_segment(
    curve: "IndexedCurve",
    rect_dist: RectCostFunc,
    seg_dist: SegmentCostFunc,
    visit: NearestVisitFunc,
) -> bool:
    """Report the segments of ``curve`` to ``visit`` nearest first.

    ``rect_dist`` must return a lower bound of ``seg_dist`` for every
    segment inside the rect. Either cost callback may return
    ``(value, suppress_pruning)`` instead of a bare value:

    * a rect flagged this way is expanded before anything else is
      reported, its bound is ignored;
    * a segment flagged this way goes straight to the head of the frontier
      and is scored again before anything else is reported. Scoring repeats
      for as long as ``seg_dist`` keeps setting the flag, so the callback
      must clear it eventually.

    A segment is reported only when no unexpanded rect has a smaller bound,
    so reported distances never decrease. Returns ``False`` when ``visit``
    stopped the search and ``True`` when every segment was reported.
    """

    segments = curve.segments_array()
    if len(segments) == 0:
        return True

    index = curve.spatial_index
    sequence = itertools.count()
    frontier: List[FrontierItem] = []

    def push_segment(seg_index: int, segment: Segment) -> None:
        distance, suppress = split_cost(seg_dist(segment))
        if suppress:
            heapq.heappush(frontier, (-math.inf, _SEGMENT, next(sequence), (seg_index, segment, True)))
            return
        if math.isnan(distance):
            logger.debug("Skipping segment %d with NaN distance", seg_index)
            return
        heapq.heappush(frontier, (distance, _SEGMENT, next(sequence), (seg_index, segment, False)))

    def push_rect(level: int, rect_index: int) -> None:
        rect = Rect.from_bounds(*index.levels[level][rect_index])
        bound, suppress = split_cost(rect_dist(rect))
        key = -math.inf if suppress or math.isnan(bound) else bound
        heapq.heappush(frontier, (key, _RECT, next(sequence), (level, rect_index)))

    if index.num_levels == 0:
        for seg_index, row in enumerate(segments):
            push_segment(seg_index, Segment.from_coords(*row))
    else:
        push_rect(index.num_levels - 1, 0)

    reported = 0
    while frontier:
        key, kind, _, payload = heapq.heappop(frontier)

        if kind == _RECT:
            level, rect_index = payload
            start, stop = index.child_range(level, rect_index)
            if level == 0:
                for seg_index in index.order[start:stop]:
                    seg_index = int(seg_index)
                    push_segment(seg_index, Segment.from_coords(*segments[seg_index]))
            else:
                for child in range(start, stop):
                    push_rect(level - 1, child)
            continue

        seg_index, segment, provisional = payload
        if provisional:
            push_segment(seg_index, segment)
            continue

        reported += 1
        if not visit(segment, key, seg_index):
            logger.debug(
                "Nearest search stopped by visitor after %d segment(s), %d item(s) left in frontier",
                reported,
                len(frontier),
            )
            return False

    return True


__all__ = ["nearest_segment"]
