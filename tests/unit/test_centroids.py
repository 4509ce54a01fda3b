"""Unit tests for candidate center generation."""

import itertools
import math

import pytest

from maxrect.config import CentroidConfig, CentroidStrategy
from maxrect.core.centroids import (
    OFFSET_PATTERNS,
    dedupe_and_sort,
    edge_offset_points,
    fallback_centers,
    generate_candidates,
    hull_samples,
    hybrid_candidates,
    offset_patterns,
    pole_of_inaccessibility,
    pole_seeded_candidates,
    resolve_strategy,
    select_strategy,
    uniform_candidates,
)
from maxrect.core.geometry import point_in_polygon
from maxrect.domain import Point, Polygon


def inside(polygon: Polygon):
    """Exact containment test bound to a polygon."""
    return lambda p: point_in_polygon(p, polygon.points)


@pytest.fixture
def square() -> Polygon:
    """100 x 100 square."""
    return Polygon.from_coords([(0, 0), (100, 0), (100, 100), (0, 100)])


@pytest.fixture
def l_shape() -> Polygon:
    """L shape with a 100 x 30 foot and a 30 x 100 leg."""
    return Polygon.from_coords([(0, 0), (100, 0), (100, 30), (30, 30), (30, 100), (0, 100)])


class TestSelectStrategy:
    """Tests for strategy selection."""

    def test_many_paths(self):
        """Test six or more paths select hybrid."""
        assert select_strategy(6, 4, 10000.0) is CentroidStrategy.HYBRID

    def test_many_vertices(self):
        """Test twelve or more vertices select hybrid."""
        assert select_strategy(None, 12, 10000.0) is CentroidStrategy.HYBRID

    def test_small_area(self):
        """Test small bounding boxes select hybrid."""
        assert select_strategy(None, 4, 4999.0) is CentroidStrategy.HYBRID

    def test_large_area_with_paths(self):
        """Test large multi-path regions select hybrid."""
        assert select_strategy(3, 4, 30000.0) is CentroidStrategy.HYBRID
        assert select_strategy(2, 4, 30000.0) is CentroidStrategy.UNIFORM

    def test_default_uniform(self):
        """Test mid-sized simple polygons select uniform."""
        assert select_strategy(None, 4, 10000.0) is CentroidStrategy.UNIFORM
        assert select_strategy(5, 11, 5000.0) is CentroidStrategy.UNIFORM

    def test_resolve_keeps_explicit_strategy(self, square):
        """Test an explicit strategy is not overridden."""
        assert resolve_strategy(CentroidStrategy.HYBRID, square, None) is CentroidStrategy.HYBRID

    def test_resolve_auto(self, square):
        """Test auto resolves through the selection rule."""
        assert resolve_strategy(CentroidStrategy.AUTO, square, None) is CentroidStrategy.UNIFORM


class TestDedupeAndSort:
    """Tests for deduplication and ordering."""

    def test_near_duplicates_removed(self):
        """Test points within the snap size collapse to the first one."""
        points = [Point(10, 10), Point(10.01, 10.01), Point(20, 20)]
        result = dedupe_and_sort(points, 0.5, Point(0, 0))
        assert result == [Point(10, 10), Point(20, 20)]

    def test_sorted_by_distance_then_coordinates(self):
        """Test equal distances are ordered by x, then y."""
        points = [Point(0, 5), Point(5, 0), Point(-5, 0), Point(1, 1)]
        result = dedupe_and_sort(points, 0.1, Point(0, 0))
        assert result == [Point(1, 1), Point(-5, 0), Point(0, 5), Point(5, 0)]


class TestUniformCandidates:
    """Tests for the uniform strategy."""

    def test_all_inside(self, l_shape):
        """Test every candidate passes the containment test."""
        candidates = uniform_candidates(l_shape, inside(l_shape), CentroidConfig())
        assert candidates
        assert all(point_in_polygon(p, l_shape.points) for p in candidates)

    def test_nearest_to_center_first(self, square):
        """Test the bounding box center leads for a square."""
        candidates = uniform_candidates(square, inside(square), CentroidConfig())
        assert candidates[0] == Point(50, 50)

    def test_no_duplicates(self, square):
        """Test overlapping grids do not repeat points."""
        candidates = uniform_candidates(square, inside(square), CentroidConfig())
        assert len(candidates) == len(set(candidates))

    def test_deterministic(self, l_shape):
        """Test repeated calls give the same order."""
        config = CentroidConfig()
        first = uniform_candidates(l_shape, inside(l_shape), config)
        second = uniform_candidates(l_shape, inside(l_shape), config)
        assert first == second


class TestHybridCandidates:
    """Tests for the hybrid strategy."""

    def test_edge_offsets_point_inward(self, square):
        """Test edge offsets land inside for either winding."""
        config = CentroidConfig(edge_positions=[0.5], edge_offsets=[10.0])
        for polygon in (square, Polygon(tuple(reversed(square.points)))):
            points = edge_offset_points(polygon, config)
            assert len(points) == 4
            assert all(point_in_polygon(p, polygon.points) for p in points)

    def test_edge_offset_count(self, square):
        """Test one point per edge, position and offset."""
        points = edge_offset_points(square, CentroidConfig())
        assert len(points) == 4 * 3 * 2

    def test_edge_offset_skips_zero_length_edges(self):
        """Test a repeated vertex adds no points and no normal is taken."""
        repeated = Polygon.from_coords([(0, 0), (100, 0), (100, 0), (100, 100), (0, 100)])
        points = edge_offset_points(repeated, CentroidConfig())
        assert len(points) == 4 * 3 * 2

    def test_hull_samples_inside_hull(self, l_shape):
        """Test hull samples stay inside the convex hull."""
        samples = hull_samples(l_shape, 30)
        assert len(samples) == 30
        hull = [Point(0, 0), Point(100, 0), Point(100, 30), Point(30, 100), Point(0, 100)]
        assert all(point_in_polygon(p, hull) for p in samples)

    def test_hull_samples_disabled(self, square):
        """Test a zero sample count yields nothing."""
        assert hull_samples(square, 0) == []

    def test_all_inside(self, l_shape):
        """Test hull samples in the notch are filtered out."""
        candidates = hybrid_candidates(l_shape, inside(l_shape), CentroidConfig())
        assert candidates
        assert all(point_in_polygon(p, l_shape.points) for p in candidates)


class TestPoleOfInaccessibility:
    """Tests for the pole of inaccessibility search."""

    def test_square_center(self, square):
        """Test the pole of a square is its center."""
        pole, distance = pole_of_inaccessibility(square, precision=0.5)
        assert pole.x == pytest.approx(50.0, abs=1.0)
        assert pole.y == pytest.approx(50.0, abs=1.0)
        assert distance == pytest.approx(50.0, abs=1.0)

    def test_pole_inside_concave_polygon(self, l_shape):
        """Test the pole of an L shape is inside and near the corner."""
        pole, distance = pole_of_inaccessibility(l_shape, precision=0.5)
        assert point_in_polygon(pole, l_shape.points)
        assert distance >= 15.0 - 0.5
        assert pole.x < 40 and pole.y < 40

    def test_thin_rectangle(self):
        """Test the pole lies on the midline of a thin rectangle."""
        thin = Polygon.from_coords([(0, 0), (200, 0), (200, 10), (0, 10)])
        pole, distance = pole_of_inaccessibility(thin, precision=0.1)
        assert pole.y == pytest.approx(5.0, abs=0.2)
        assert distance == pytest.approx(5.0, abs=0.2)


class TestPoleSeededCandidates:
    """Tests for the dense search candidates."""

    def test_pole_first(self, l_shape):
        """Test the pole leads the list."""
        config = CentroidConfig(polylabel_precision=0.5)
        candidates = list(pole_seeded_candidates(l_shape, inside(l_shape), config))
        pole, _ = pole_of_inaccessibility(l_shape, 0.5)
        assert candidates[0] == pole

    def test_all_inside(self, l_shape):
        """Test grid points in the notch are filtered out."""
        candidates = list(pole_seeded_candidates(l_shape, inside(l_shape), CentroidConfig()))
        assert all(point_in_polygon(p, l_shape.points) for p in candidates)

    def test_grid_aligned_to_step(self, square):
        """Test grid points sit on multiples of the grid step."""
        config = CentroidConfig(grid_step=10.0)
        candidates = list(pole_seeded_candidates(square, inside(square), config))
        on_grid = [p for p in candidates if p.x % 10 == 0 and p.y % 10 == 0]
        # 9 x 9 interior lattice points are strictly inside
        assert len(on_grid) >= 81

    def test_candidates_tested_on_demand(self):
        """Test containment only runs for the candidates actually taken."""
        large = Polygon.from_coords([(0, 0), (2000, 0), (2000, 2000), (0, 2000)])
        calls = []

        def counting(p):
            calls.append(p)
            return point_in_polygon(p, large.points)

        candidates = pole_seeded_candidates(large, counting, CentroidConfig(grid_step=8.0))
        first = list(itertools.islice(candidates, 5))

        assert len(first) == 5
        # The aligned grid alone holds about 62k points
        assert len(calls) < 100

    def test_offset_patterns(self):
        """Test offsets scale with the bounding box."""
        points = offset_patterns(Point(50, 50), 100.0, 200.0)
        assert len(points) == len(OFFSET_PATTERNS)
        assert points[0] == Point(60, 50)
        assert points[2] == Point(50, 70)


class TestGenerateCandidates:
    """Tests for strategy dispatch."""

    def test_dispatch(self, square):
        """Test uniform and hybrid dispatch to their generators."""
        config = CentroidConfig()
        contains = inside(square)
        assert generate_candidates(
            square, CentroidStrategy.UNIFORM, contains, config
        ) == uniform_candidates(square, contains, config)
        assert generate_candidates(
            square, CentroidStrategy.HYBRID, contains, config
        ) == hybrid_candidates(square, contains, config)

    def test_auto_rejected(self, square):
        """Test an unresolved strategy is rejected."""
        with pytest.raises(ValueError, match="Unresolved"):
            generate_candidates(square, CentroidStrategy.AUTO, inside(square), CentroidConfig())

    def test_fallback_centers(self, square):
        """Test the classic centroids are offered as a fallback."""
        centers = fallback_centers(square, inside(square))
        assert centers
        assert all(math.isclose(p.x, 50.0) and math.isclose(p.y, 50.0) for p in centers)
