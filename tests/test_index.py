import math

import numpy as np
import pytest

from curveindex import (
    MAX_SPREAD,
    IndexConfig,
    IndexConfigError,
    IndexType,
    Line,
    Ring,
    build_index,
    get_index_config,
    set_index_config,
)


def _random_walk(n, seed=11):
    rng = np.random.default_rng(seed)
    return np.cumsum(rng.normal(size=(n, 2)), axis=0)


def _zigzag(n):
    # Long horizontal strip folded back and forth in y.
    return [(float(i % 40), float(i // 40) * 5.0 + (i % 2) * 0.1) for i in range(n)]


@pytest.fixture
def restore_config():
    saved = get_index_config()
    yield
    set_index_config(saved)


def _expected_levels(num_segments, spread):
    if num_segments <= 1:
        return 0
    levels = 0
    count = num_segments
    while count > 1:
        count = math.ceil(count / spread)
        levels += 1
    return levels


@pytest.mark.parametrize('num_points, spread', [(3, 4), (5, 4), (17, 4), (18, 4), (101, 16), (300, 3)])
@pytest.mark.parametrize('index', [IndexType.NATURAL, IndexType.YSTRIPES])
def test_level_count_and_root(num_points, spread, index):
    line = Line(_random_walk(num_points), index, spread=spread)
    num_segments = num_points - 1
    levels = line.index_num_levels()

    assert levels == _expected_levels(num_segments, spread)
    assert levels == math.ceil(round(math.log(num_segments, spread), 9))
    assert line.index_spread() == spread
    assert line.index_level_num_rects(levels - 1) == 1
    assert line.index_level_rect(levels - 1, 0) == line.rect()
    assert line.index_level_num_rects(0) == math.ceil(num_segments / spread)


def test_natural_leaves_bound_consecutive_segments():
    line = Line(_random_walk(40), IndexType.NATURAL, spread=4)
    segments = line.segments()

    for leaf in range(line.index_level_num_rects(0)):
        members = segments[leaf * 4:(leaf + 1) * 4]
        expected = members[0].rect()
        for s in members[1:]:
            expected = expected.expand(s.rect())
        assert line.index_level_rect(0, leaf) == expected


def test_upper_levels_bound_their_children():
    line = Line(_random_walk(200), IndexType.NATURAL, spread=3)

    for level in range(1, line.index_num_levels()):
        for i in range(line.index_level_num_rects(level)):
            children = range(i * 3, min((i + 1) * 3, line.index_level_num_rects(level - 1)))
            expected = line.index_level_rect(level - 1, children[0])
            for c in children[1:]:
                expected = expected.expand(line.index_level_rect(level - 1, c))
            assert line.index_level_rect(level, i) == expected


@pytest.mark.parametrize('points', [_zigzag(400), _random_walk(257).tolist()])
def test_ystripes_partitions_segments_with_tight_leaves(points):
    ring = Ring(points, IndexType.YSTRIPES, spread=8)
    index = ring.spatial_index
    segments = ring.segments()

    assert sorted(index.order.tolist()) == list(range(ring.num_segments()))
    for leaf in range(ring.index_level_num_rects(0)):
        members = [segments[i] for i in index.leaf_segments(leaf)]
        assert 0 < len(members) <= 8
        expected = members[0].rect()
        for s in members[1:]:
            expected = expected.expand(s.rect())
        assert ring.index_level_rect(0, leaf) == expected


def test_ystripes_is_deterministic():
    points = _random_walk(500)
    first = Line(points, IndexType.YSTRIPES, spread=6).spatial_index
    second = Line(points, IndexType.YSTRIPES, spread=6).spatial_index

    assert np.array_equal(first.order, second.order)
    for a, b in zip(first.levels, second.levels):
        assert np.array_equal(a, b)


@pytest.mark.parametrize('level, rect_index', [(2, 0), (5, 0), (0, 3), (1, 1), (-1, 0), (0, -1)])
def test_index_level_rect_out_of_range_is_none(level, rect_index):
    line = Line(_random_walk(13), IndexType.NATURAL, spread=4)

    assert line.index_num_levels() == 2
    assert line.index_level_num_rects(0) == 3
    assert line.index_level_rect(level, rect_index) is None


def test_unindexed_curve_has_no_levels():
    line = Line(_random_walk(100), IndexType.NONE)

    assert line.index_num_levels() == 0
    assert line.index_level_num_rects(0) == 0
    assert line.index_level_rect(0, 0) is None


def test_spread_is_clamped():
    line = Line(_random_walk(10), IndexType.NATURAL, spread=MAX_SPREAD * 2)
    assert line.index_spread() == MAX_SPREAD


def test_build_index_rejects_unresolved_default():
    with pytest.raises(IndexConfigError):
        build_index(np.zeros((3, 4)), 4, IndexType.DEFAULT)


def test_default_index_follows_config(restore_config):
    set_index_config(IndexConfig(spread=5, default_index=IndexType.YSTRIPES))

    line = Line(_random_walk(30))
    assert line.index_type is IndexType.YSTRIPES
    assert line.index_spread() == 5

    set_index_config(IndexConfig(spread=16, default_index=IndexType.NONE))
    assert line.index_type is IndexType.YSTRIPES
    assert Line(_random_walk(30)).index_num_levels() == 0


def test_config_is_copied():
    config = get_index_config()
    original = config.spread
    config.spread = original + 1
    assert get_index_config().spread == original


@pytest.mark.parametrize(
    'config',
    [IndexConfig(spread=1), IndexConfig(default_index=IndexType.DEFAULT), IndexConfig(default_index='bogus')],
)
def test_invalid_config_is_rejected(config, restore_config):
    with pytest.raises(IndexConfigError):
        set_index_config(config)
