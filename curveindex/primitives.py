"""Point, rectangle and segment value types with elementary predicates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def rect(self) -> "Rect":
        return Rect(self, self)

    def intersects_rect(self, rect: "Rect") -> bool:
        return rect_intersects_point(rect, self)

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its ``min`` and ``max`` corners."""

    min: Point
    max: Point

    @classmethod
    def from_bounds(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> "Rect":
        return cls(Point(min_x, min_y), Point(max_x, max_y))

    def bounds(self) -> Tuple[float, float, float, float]:
        return self.min.x, self.min.y, self.max.x, self.max.y

    def center(self) -> Point:
        return Point((self.min.x + self.max.x) * 0.5, (self.min.y + self.max.y) * 0.5)

    def expand(self, other: "Rect") -> "Rect":
        """Return the smallest rect holding both ``self`` and ``other``."""

        return Rect.from_bounds(
            min(self.min.x, other.min.x),
            min(self.min.y, other.min.y),
            max(self.max.x, other.max.x),
            max(self.max.y, other.max.y),
        )

    def expand_point(self, point: Point) -> "Rect":
        return self.expand(point.rect())

    def intersects_rect(self, other: "Rect") -> bool:
        return rect_intersects_rect(self, other)

    def intersects_point(self, point: Point) -> bool:
        return rect_intersects_point(self, point)


@dataclass(frozen=True)
class Segment:
    """Directed straight segment from ``a`` to ``b``.

    Equality follows direction: ``Segment(a, b) != Segment(b, a)`` unless
    ``a == b``. Use :meth:`same_edge` to compare regardless of direction.
    """

    a: Point
    b: Point

    @classmethod
    def from_coords(cls, ax: float, ay: float, bx: float, by: float) -> "Segment":
        return cls(Point(ax, ay), Point(bx, by))

    def rect(self) -> Rect:
        return Rect.from_bounds(
            min(self.a.x, self.b.x),
            min(self.a.y, self.b.y),
            max(self.a.x, self.b.x),
            max(self.a.y, self.b.y),
        )

    def length(self) -> float:
        return math.hypot(self.b.x - self.a.x, self.b.y - self.a.y)

    def reversed(self) -> "Segment":
        return Segment(self.b, self.a)

    def same_edge(self, other: "Segment") -> bool:
        return self == other or self == other.reversed()

    def intersects_segment(self, other: "Segment") -> bool:
        return segment_intersects_segment(self, other)


def rect_intersects_rect(a: Rect, b: Rect) -> bool:
    return not (
        a.min.x > b.max.x
        or a.max.x < b.min.x
        or a.min.y > b.max.y
        or a.max.y < b.min.y
    )


def rect_intersects_point(rect: Rect, point: Point) -> bool:
    return rect.min.x <= point.x <= rect.max.x and rect.min.y <= point.y <= rect.max.y


def _orient(a: Point, b: Point, c: Point) -> float:
    return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)


def _sign(value: float) -> int:
    if value > 0.0:
        return 1
    if value < 0.0:
        return -1
    return 0


def _on_segment_box(a: Point, b: Point, p: Point) -> bool:
    return min(a.x, b.x) <= p.x <= max(a.x, b.x) and min(a.y, b.y) <= p.y <= max(a.y, b.y)


def segment_intersects_segment(s1: Segment, s2: Segment) -> bool:
    """Return ``True`` when the closed segments share at least one point.

    Proper crossings, touching endpoints and collinear overlap all count.
    """

    if not rect_intersects_rect(s1.rect(), s2.rect()):
        return False

    d1 = _sign(_orient(s2.a, s2.b, s1.a))
    d2 = _sign(_orient(s2.a, s2.b, s1.b))
    d3 = _sign(_orient(s1.a, s1.b, s2.a))
    d4 = _sign(_orient(s1.a, s1.b, s2.b))

    if d1 * d2 < 0 and d3 * d4 < 0:
        return True
    if d1 == 0 and _on_segment_box(s2.a, s2.b, s1.a):
        return True
    if d2 == 0 and _on_segment_box(s2.a, s2.b, s1.b):
        return True
    if d3 == 0 and _on_segment_box(s1.a, s1.b, s2.a):
        return True
    if d4 == 0 and _on_segment_box(s1.a, s1.b, s2.b):
        return True
    return False


def point_segment_distance(point: Point, segment: Segment) -> float:
    """Euclidean distance from ``point`` to the closest point of ``segment``."""

    dx = segment.b.x - segment.a.x
    dy = segment.b.y - segment.a.y
    denom = dx * dx + dy * dy
    if denom <= 0.0:
        return math.hypot(point.x - segment.a.x, point.y - segment.a.y)
    t = ((point.x - segment.a.x) * dx + (point.y - segment.a.y) * dy) / denom
    t = min(max(t, 0.0), 1.0)
    return math.hypot(point.x - (segment.a.x + t * dx), point.y - (segment.a.y + t * dy))


def point_rect_distance(point: Point, rect: Rect) -> float:
    """Distance from ``point`` to ``rect``; zero when the point lies inside."""

    dx = max(rect.min.x - point.x, 0.0, point.x - rect.max.x)
    dy = max(rect.min.y - point.y, 0.0, point.y - rect.max.y)
    return math.hypot(dx, dy)


__all__ = [
    "Point",
    "Rect",
    "Segment",
    "point_rect_distance",
    "point_segment_distance",
    "rect_intersects_point",
    "rect_intersects_rect",
    "segment_intersects_segment",
]
