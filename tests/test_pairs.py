import itertools

import numpy as np
import pytest

from curveindex import (
    IndexType,
    Line,
    Ring,
    pair_search,
    rect_intersects_rect,
    segment_intersects_segment,
)

INDEX_TYPES = [IndexType.NONE, IndexType.NATURAL, IndexType.YSTRIPES]

CURVE_A = [(-1, -1), (0, 0), (1, 0), (2, -1)]
CURVE_B = [(-5, -0.5), (5, -0.5), (5, -0.25), (-5, -0.25)]


def _random_walk(n, seed, lead=None):
    rng = np.random.default_rng(seed)
    walk = np.cumsum(rng.normal(scale=0.8, size=(n, 2)), axis=0)
    if lead is None:
        return walk
    return np.vstack([np.asarray(lead, dtype=float), walk])


def _pairs(curve_a, curve_b):
    found = []

    def visit(seg_a, index_a, seg_b, index_b):
        assert seg_a == curve_a.segment(index_a)
        assert seg_b == curve_b.segment(index_b)
        found.append((index_a, index_b))
        return True

    assert pair_search(curve_a, curve_b, visit)
    return found


def _brute_force_boxes(curve_a, curve_b):
    return {
        (i, j)
        for (i, sa), (j, sb) in itertools.product(enumerate(curve_a.segments()), enumerate(curve_b.segments()))
        if rect_intersects_rect(sa.rect(), sb.rect())
    }


@pytest.mark.parametrize('index_a', INDEX_TYPES)
@pytest.mark.parametrize('index_b', INDEX_TYPES)
def test_band_crossing_reports_four_pairs(index_a, index_b):
    a = Line(CURVE_A, index_a)
    b = Line(CURVE_B, index_b)

    found = _pairs(a, b)

    assert len(found) == 4
    assert set(found) == {(0, 0), (0, 2), (2, 0), (2, 2)}
    for i, j in found:
        assert segment_intersects_segment(a.segment(i), b.segment(j))


@pytest.mark.parametrize('index', INDEX_TYPES)
def test_stopping_visitor_reports_one_pair(index):
    a = Line(CURVE_A, index)
    b = Line(CURVE_B, index)
    calls = []

    def visit(seg_a, index_a, seg_b, index_b):
        calls.append((index_a, index_b))
        return False

    assert not pair_search(a, b, visit)
    assert len(calls) == 1


@pytest.mark.parametrize('spread', [2, 4, 16])
def test_pairs_do_not_depend_on_index(spread):
    coords_a = _random_walk(300, seed=1, lead=[(-30, 0), (30, 0)])
    coords_b = _random_walk(250, seed=2, lead=[(0, -30), (0, 30)])
    results = []
    for index_a, index_b in itertools.product(INDEX_TYPES, INDEX_TYPES):
        a = Line(coords_a, index_a, spread=spread)
        b = Ring(coords_b, index_b, spread=spread)
        found = _pairs(a, b)
        assert len(found) == len(set(found))
        results.append(set(found))

    expected = _brute_force_boxes(Line(coords_a, IndexType.NONE), Ring(coords_b, IndexType.NONE))
    assert expected
    assert all(result == expected for result in results)


@pytest.mark.parametrize('index', INDEX_TYPES)
def test_candidates_cover_true_intersections(index):
    a = Ring(_random_walk(200, seed=7, lead=[(-30, 0), (30, 0)]), index, spread=6)
    b = Ring(_random_walk(180, seed=8, lead=[(0, -30), (0, 30)]), index, spread=6)

    found = set(_pairs(a, b))
    crossings = {
        (i, j)
        for (i, sa), (j, sb) in itertools.product(enumerate(a.segments()), enumerate(b.segments()))
        if segment_intersects_segment(sa, sb)
    }

    assert crossings
    assert crossings <= found


@pytest.mark.parametrize('index', INDEX_TYPES)
def test_self_search(index):
    ring = Ring(_random_walk(120, seed=4), index, spread=4)
    found = []

    ring.ring_search(ring, lambda sa, ia, sb, ib: found.append((ia, ib)) is None)

    n = ring.num_segments()
    pairs = set(found)
    assert all((i, i) in pairs for i in range(n))
    assert all((i, (i + 1) % n) in pairs for i in range(n))
    assert all((j, i) in pairs for i, j in pairs)


def test_search_visitor_object():
    class Collector:
        def __init__(self):
            self.pairs = []

        def visit(self, seg_a, index_a, seg_b, index_b):
            self.pairs.append((index_a, index_b))
            return True

    collector = Collector()
    Line(CURVE_A).line_search(Line(CURVE_B), collector)

    assert sorted(collector.pairs) == [(0, 0), (0, 2), (2, 0), (2, 2)]


def test_search_methods_check_curve_kind():
    line = Line(CURVE_A)
    ring = Ring(CURVE_B)

    with pytest.raises(TypeError):
        line.line_search(ring, lambda *args: True)
    with pytest.raises(TypeError):
        line.ring_search(line, lambda *args: True)
    assert ring.line_search(line, lambda *args: True)


def test_non_callable_visitor_is_rejected():
    with pytest.raises(TypeError):
        pair_search(Line(CURVE_A), Line(CURVE_B), object())


@pytest.mark.parametrize('index', INDEX_TYPES)
def test_empty_curve_reports_nothing(index):
    def fail(*args):
        raise AssertionError('visitor must not run')

    assert pair_search(Line([], index), Line(CURVE_B, index), fail)
    assert pair_search(Line(CURVE_A, index), Ring([], index), fail)


def test_disjoint_curves_report_nothing():
    far = Line([(x + 100.0, y) for x, y in CURVE_A])
    assert _pairs(Line(CURVE_A), far) == []
