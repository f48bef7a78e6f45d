"""Bounding-rectangle hierarchy built over the segments of a curve."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .errors import IndexConfigError
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

MIN_SPREAD = 2
MAX_SPREAD = 4096
DEFAULT_SPREAD = 16


class IndexType(enum.Enum):
    DEFAULT = "default"
    NONE = "none"
    NATURAL = "natural"
    YSTRIPES = "ystripes"

    @classmethod
    def coerce(cls, value: Union["IndexType", str]) -> "IndexType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise IndexConfigError(f"unknown index type {value!r}")


@dataclass(frozen=True, eq=False)
class SpatialIndex:
    """Levels of bounding rects, leaves first.

    ``levels[0]`` holds one rect per leaf group of at most ``spread``
    segments and ``levels[-1]`` holds the single root rect. Every level is a
    read-only ``(m, 4)`` array of ``min_x, min_y, max_x, max_y`` rows.
    ``order`` lists segment indexes in leaf order: leaf ``i`` owns
    ``order[i * spread:(i + 1) * spread]``.
    """

    spread: int
    index_type: IndexType
    levels: Tuple[np.ndarray, ...]
    order: np.ndarray

    @property
    def num_levels(self) -> int:
        return len(self.levels)

    def child_range(self, level: int, rect_index: int) -> Tuple[int, int]:
        """Return the ``[start, stop)`` range of children one level down.

        For ``level == 0`` the range indexes into :attr:`order`.
        """

        below = len(self.order) if level == 0 else len(self.levels[level - 1])
        start = rect_index * self.spread
        return start, min(start + self.spread, below)

    def leaf_segments(self, rect_index: int) -> np.ndarray:
        start, stop = self.child_range(0, rect_index)
        return self.order[start:stop]

    def nbytes(self) -> int:
        return int(sum(level.nbytes for level in self.levels) + self.order.nbytes)


EMPTY_ORDER = np.zeros(0, dtype=np.intp)
EMPTY_ORDER.setflags(write=False)


def validate_spread(spread: int) -> int:
    try:
        value = int(spread)
    except (TypeError, ValueError) as exc:
        raise IndexConfigError(f"index spread must be an integer, got {spread!r}") from exc
    if value < MIN_SPREAD:
        raise IndexConfigError(f"index spread must be at least {MIN_SPREAD}, got {value}")
    if value > MAX_SPREAD:
        logger.debug("Clamping index spread %d to %d", value, MAX_SPREAD)
        value = MAX_SPREAD
    return value


def group_bounds(rects: np.ndarray, spread: int) -> np.ndarray:
    """Tight bounds of consecutive groups of ``spread`` rows of ``rects``."""

    starts = np.arange(0, len(rects), spread)
    mins = np.minimum.reduceat(rects[:, :2], starts, axis=0)
    maxs = np.maximum.reduceat(rects[:, 2:], starts, axis=0)
    return np.hstack([mins, maxs])


def ystripes_order(rects: np.ndarray, spread: int) -> np.ndarray:
    """Order segments stripe by stripe, left to right inside each stripe.

    ``ceil(sqrt(n / spread))`` horizontal stripes of equal height cover the
    rects; each rect falls in the stripe holding its center y. Ties keep the
    original segment order.
    """

    count = len(rects)
    num_stripes = max(1, math.ceil(math.sqrt(count / spread)))
    center_x = (rects[:, 0] + rects[:, 2]) * 0.5
    center_y = (rects[:, 1] + rects[:, 3]) * 0.5
    min_y = float(rects[:, 1].min())
    height = float(rects[:, 3].max()) - min_y
    if height > 0.0:
        stripe = np.floor((center_y - min_y) / height * num_stripes).astype(np.intp)
        stripe = np.clip(stripe, 0, num_stripes - 1)
    else:
        stripe = np.zeros(count, dtype=np.intp)
    logger.debug("ystripes: %d segments over %d stripes", count, num_stripes)
    return np.lexsort((np.arange(count), center_x, stripe)).astype(np.intp)


def build_index(segment_rects: np.ndarray, spread: int, index_type: IndexType) -> SpatialIndex:
    """Build the rect hierarchy for ``segment_rects`` (an ``(n, 4)`` array).

    ``index_type`` must already be resolved, ``IndexType.DEFAULT`` is
    rejected here.
    """

    spread = validate_spread(spread)
    if index_type is IndexType.DEFAULT:
        raise IndexConfigError("IndexType.DEFAULT must be resolved before building")

    count = len(segment_rects)
    if index_type is IndexType.NONE or count == 0:
        return SpatialIndex(spread, index_type, (), EMPTY_ORDER)

    if index_type is IndexType.YSTRIPES:
        order = ystripes_order(segment_rects, spread)
    else:
        order = np.arange(count, dtype=np.intp)

    levels = []
    current = segment_rects[order]
    while len(current) > 1:
        current = group_bounds(current, spread)
        current.setflags(write=False)
        levels.append(current)

    order.setflags(write=False)
    logger.debug(
        "Built %s index: %d segments, spread=%d, levels=%s",
        index_type.value,
        count,
        spread,
        [len(level) for level in levels],
    )
    return SpatialIndex(spread, index_type, tuple(levels), order)


apply_debug_logging(globals(), logger=logger, skip={"group_bounds"})


__all__ = [
    "DEFAULT_SPREAD",
    "IndexType",
    "MAX_SPREAD",
    "MIN_SPREAD",
    "SpatialIndex",
    "build_index",
    "group_bounds",
    "validate_spread",
    "ystripes_order",
]
