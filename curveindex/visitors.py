"""Visitor interfaces driving nearest and pair searches."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Tuple, Union, runtime_checkable

from .primitives import Point, Rect, Segment, point_rect_distance, point_segment_distance

# A cost callback returns either a distance or ``(distance, suppress_pruning)``.
Cost = Union[float, Tuple[float, bool]]
RectCostFunc = Callable[[Rect], Cost]
SegmentCostFunc = Callable[[Segment], Cost]
NearestVisitFunc = Callable[[Segment, float, int], bool]
PairVisitFunc = Callable[[Segment, int, Segment, int], bool]


@runtime_checkable
class NearestSegmentVisitor(Protocol):
    def segment_distance(self, segment: Segment) -> Cost: ...

    def rect_distance(self, rect: Rect) -> Cost: ...

    def visit(self, segment: Segment, distance: float, index: int) -> bool: ...


@runtime_checkable
class SearchVisitor(Protocol):
    def visit(self, seg_a: Segment, index_a: int, seg_b: Segment, index_b: int) -> bool: ...


def split_cost(value: Cost) -> Tuple[float, bool]:
    """Normalize a cost callback result to ``(distance, suppress_pruning)``."""

    if isinstance(value, tuple):
        distance, suppress = value
        return float(distance), bool(suppress)
    return float(value), False


def pair_callback(visitor: Union[SearchVisitor, PairVisitFunc]) -> PairVisitFunc:
    if isinstance(visitor, SearchVisitor):
        return visitor.visit
    if callable(visitor):
        return visitor
    raise TypeError(f"expected a SearchVisitor or callable, got {type(visitor).__name__}")


@dataclass
class CallbackNearestVisitor:
    """Adapt three plain callables to :class:`NearestSegmentVisitor`."""

    rect_cost: RectCostFunc
    segment_cost: SegmentCostFunc
    on_visit: NearestVisitFunc

    def segment_distance(self, segment: Segment) -> Cost:
        return self.segment_cost(segment)

    def rect_distance(self, rect: Rect) -> Cost:
        return self.rect_cost(rect)

    def visit(self, segment: Segment, distance: float, index: int) -> bool:
        return self.on_visit(segment, distance, index)


@dataclass
class NearestToPoint:
    """Collect the segments closest to ``point``, nearest first.

    ``limit`` caps how many segments are kept; ``max_distance`` stops the
    search once reported distances exceed it.
    """

    point: Point
    limit: Optional[int] = None
    max_distance: float = math.inf
    results: List[Tuple[Segment, float, int]] = field(default_factory=list)

    def segment_distance(self, segment: Segment) -> Cost:
        return point_segment_distance(self.point, segment)

    def rect_distance(self, rect: Rect) -> Cost:
        return point_rect_distance(self.point, rect)

    def visit(self, segment: Segment, distance: float, index: int) -> bool:
        if distance > self.max_distance:
            return False
        if self.limit is not None and len(self.results) >= self.limit:
            return False
        self.results.append((segment, distance, index))
        return self.limit is None or len(self.results) < self.limit


__all__ = [
    "CallbackNearestVisitor",
    "Cost",
    "NearestSegmentVisitor",
    "NearestToPoint",
    "NearestVisitFunc",
    "PairVisitFunc",
    "RectCostFunc",
    "SearchVisitor",
    "SegmentCostFunc",
    "pair_callback",
    "split_cost",
]
