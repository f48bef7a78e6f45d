from .primitives import (
    Point,
    Rect,
    Segment,
    point_rect_distance,
    point_segment_distance,
    rect_intersects_point,
    rect_intersects_rect,
    segment_intersects_segment,
)
from .errors import CurveConstructionError, CurveIndexError, IndexConfigError
from .index import DEFAULT_SPREAD, MAX_SPREAD, IndexType, SpatialIndex, build_index
from .config import IndexConfig, get_index_config, set_index_config
from .visitors import (
    CallbackNearestVisitor,
    NearestSegmentVisitor,
    NearestToPoint,
    SearchVisitor,
)
from .nearest import nearest_segment
from .pairs import pair_search
from .curve import IndexedCurve, Line, Ring

__all__ = [
    'Point',
    'Rect',
    'Segment',
    'point_rect_distance',
    'point_segment_distance',
    'rect_intersects_point',
    'rect_intersects_rect',
    'segment_intersects_segment',
    'CurveIndexError',
    'CurveConstructionError',
    'IndexConfigError',
    'DEFAULT_SPREAD',
    'MAX_SPREAD',
    'IndexType',
    'SpatialIndex',
    'build_index',
    'IndexConfig',
    'get_index_config',
    'set_index_config',
    'CallbackNearestVisitor',
    'NearestSegmentVisitor',
    'NearestToPoint',
    'SearchVisitor',
    'nearest_segment',
    'pair_search',
    'IndexedCurve',
    'Line',
    'Ring',
]
