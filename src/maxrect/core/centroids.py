"""Candidate center generation.

Candidate centers are points proposed as rectangle centroids. Which points
are proposed depends on the CentroidStrategy:

- UNIFORM: two superimposed regular grids plus the classic centroids and
  fractional split points
- HYBRID: points offset inward from every edge, a sparse interior grid and
  samples inside the convex hull
- Pole seeded (dense search): the pole of inaccessibility first, then the
  classic centroids, offset patterns and an aligned fixed-step grid

Every generator filters its points with the supplied containment test and
returns a deterministic order. The pole-seeded candidates are yielded lazily
because the dense search rarely visits more than a prefix of them.
"""

import heapq
import itertools
import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from maxrect.config import CentroidConfig, CentroidStrategy
from maxrect.core.boundary import compute_convex_hull
from maxrect.core.geometry import (
    area_centroid,
    perpendicular_direction,
    point_in_polygon,
    signed_distance,
    vertex_centroid,
)
from maxrect.domain import Point, Polygon

Containment = Callable[[Point], bool]

HYBRID_PATH_COUNT = 6
HYBRID_VERTEX_COUNT = 12
SMALL_AREA = 5000.0
LARGE_AREA = 25000.0
LARGE_AREA_PATH_COUNT = 3

FRACTIONAL_SPLITS = (1 / 3, 1 / 2, 2 / 3)

# (dx, dy) as fractions of the bounding box width and height
OFFSET_PATTERNS = (
    (0.1, 0.0),
    (-0.1, 0.0),
    (0.0, 0.1),
    (0.0, -0.1),
    (0.2, 0.0),
    (-0.2, 0.0),
    (0.0, 0.2),
    (0.0, -0.2),
    (0.15, 0.15),
    (-0.15, 0.15),
    (0.15, -0.15),
    (-0.15, -0.15),
    (0.1, 0.1),
    (-0.1, 0.1),
    (0.1, -0.1),
    (-0.1, -0.1),
)

# Area centroid offsets are added only when it is this far from the pole
CENTROID_POLE_SEPARATION = 10.0


def select_strategy(
    path_count: int | None, vertex_count: int, bbox_area: float
) -> CentroidStrategy:
    """Pick the centroid strategy for a polygon.

    Args:
        path_count: Number of source paths merged into the polygon, if known
        vertex_count: Number of polygon vertices
        bbox_area: Bounding box area

    Returns:
        HYBRID or UNIFORM
    """
    paths = path_count or 0
    if paths >= HYBRID_PATH_COUNT:
        return CentroidStrategy.HYBRID
    if vertex_count >= HYBRID_VERTEX_COUNT:
        return CentroidStrategy.HYBRID
    if bbox_area < SMALL_AREA:
        return CentroidStrategy.HYBRID
    if bbox_area > LARGE_AREA and paths >= LARGE_AREA_PATH_COUNT:
        return CentroidStrategy.HYBRID
    return CentroidStrategy.UNIFORM


def dedupe_and_sort(points: Iterable[Point], tolerance: float, origin: Point) -> list[Point]:
    """Remove near-duplicates and order by distance from origin.

    Points are bucketed on a grid of size ``tolerance``; the first point of
    each bucket is kept. Ties in distance are broken on x, then y.

    Args:
        points: Candidate points in generation order
        tolerance: Snap size for duplicate detection
        origin: Reference point for ordering

    Returns:
        Unique points, nearest to origin first
    """
    unique = _dedupe(points, tolerance)
    unique.sort(key=lambda p: (math.hypot(p.x - origin.x, p.y - origin.y), p.x, p.y))
    return unique


def _dedupe(points: Iterable[Point], tolerance: float) -> list[Point]:
    seen: set[tuple[int, int]] = set()
    unique = []
    snap = tolerance if tolerance > 0 else 1e-9
    for p in points:
        key = (round(p.x / snap), round(p.y / snap))
        if key in seen:
            continue
        seen.add(key)
        unique.append(p)
    return unique


def _grid_points(polygon: Polygon, steps: int) -> list[Point]:
    """Interior lattice of a steps x steps grid over the bounding box."""
    bbox = polygon.bounding_box
    points = []
    for i in range(1, steps):
        x = bbox.min_x + bbox.width * i / steps
        for j in range(1, steps):
            points.append(Point(x, bbox.min_y + bbox.height * j / steps))
    return points


def _classic_centroids(polygon: Polygon) -> list[Point]:
    return [
        area_centroid(polygon.points),
        vertex_centroid(polygon.points),
        polygon.bounding_box.center,
    ]


def uniform_candidates(
    polygon: Polygon, contains: Containment, config: CentroidConfig
) -> list[Point]:
    """Candidates from two regular grids plus classic centroids.

    Args:
        polygon: Polygon to search
        contains: Containment test used to filter candidates
        config: Grid settings

    Returns:
        Inside candidates, nearest to the bounding box center first
    """
    bbox = polygon.bounding_box
    points = _classic_centroids(polygon)
    for fx in FRACTIONAL_SPLITS:
        for fy in FRACTIONAL_SPLITS:
            points.append(Point(bbox.min_x + bbox.width * fx, bbox.min_y + bbox.height * fy))
    points.extend(_grid_points(polygon, config.coarse_grid_steps))
    points.extend(_grid_points(polygon, config.dense_grid_steps))

    finest = min(bbox.width, bbox.height) / config.dense_grid_steps
    inside = [p for p in points if contains(p)]
    return dedupe_and_sort(inside, finest / 2, bbox.center)


def edge_offset_points(polygon: Polygon, config: CentroidConfig) -> list[Point]:
    """Points sampled along each edge and pushed inward along its normal."""
    points = polygon.points
    n = len(points)
    # Left normal points inward for counter-clockwise rings
    orientation = 1.0 if polygon.is_counter_clockwise() else -1.0
    result = []
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        dx = b.x - a.x
        dy = b.y - a.y
        if math.hypot(dx, dy) < 1e-10:
            continue
        nx, ny = perpendicular_direction(a, b)
        nx *= orientation
        ny *= orientation
        for t in config.edge_positions:
            base_x = a.x + dx * t
            base_y = a.y + dy * t
            for offset in config.edge_offsets:
                result.append(Point(base_x + nx * offset, base_y + ny * offset))
    return result


def _halton(index: int, base: int) -> float:
    result = 0.0
    f = 1.0
    i = index
    while i > 0:
        f /= base
        result += f * (i % base)
        i //= base
    return result


def hull_samples(polygon: Polygon, count: int) -> list[Point]:
    """Deterministic low-discrepancy samples inside the convex hull.

    Args:
        polygon: Polygon whose hull is sampled
        count: Maximum number of samples

    Returns:
        Up to ``count`` points inside the hull
    """
    if count <= 0:
        return []
    hull = compute_convex_hull(list(polygon.points))
    if len(hull) < 3:
        return []
    bbox = polygon.bounding_box
    samples = []
    for index in range(1, count * 20 + 1):
        p = Point(
            bbox.min_x + bbox.width * _halton(index, 2),
            bbox.min_y + bbox.height * _halton(index, 3),
        )
        if point_in_polygon(p, hull):
            samples.append(p)
            if len(samples) >= count:
                break
    return samples


def hybrid_candidates(
    polygon: Polygon, contains: Containment, config: CentroidConfig
) -> list[Point]:
    """Candidates hugging the edges plus a sparse interior grid and hull samples.

    Args:
        polygon: Polygon to search
        contains: Containment test used to filter candidates
        config: Offset and grid settings

    Returns:
        Inside candidates, nearest to the bounding box center first
    """
    bbox = polygon.bounding_box
    points = edge_offset_points(polygon, config)
    points.extend(_grid_points(polygon, config.interior_grid_steps + 1))
    points.extend(hull_samples(polygon, config.hull_samples))

    finest = min(bbox.width, bbox.height) / (config.interior_grid_steps + 1)
    inside = [p for p in points if contains(p)]
    return dedupe_and_sort(inside, finest / 2, bbox.center)


@dataclass(order=True)
class _Cell:
    neg_potential: float
    order: int
    x: float
    y: float
    half: float
    distance: float


def pole_of_inaccessibility(polygon: Polygon, precision: float = 1.0) -> tuple[Point, float]:
    """Find the interior point farthest from the boundary.

    Covers the bounding box with square cells and repeatedly splits the cell
    with the highest potential distance (center distance plus half diagonal)
    until no cell can beat the best distance by more than ``precision``.

    Args:
        polygon: Polygon to search
        precision: Stop once no cell can improve by more than this

    Returns:
        Tuple of (pole, distance to the boundary)
    """
    pts = polygon.points
    bbox = polygon.bounding_box
    cell_size = max(min(bbox.width, bbox.height), max(bbox.width, bbox.height) / 256)
    if cell_size <= 0:
        return Point(bbox.min_x, bbox.min_y), 0.0

    counter = itertools.count()

    def make_cell(x: float, y: float, half: float) -> _Cell:
        d = signed_distance(Point(x, y), pts)
        return _Cell(-(d + half * math.sqrt(2)), next(counter), x, y, half, d)

    heap: list[_Cell] = []
    half = cell_size / 2
    x = bbox.min_x
    while x < bbox.max_x:
        y = bbox.min_y
        while y < bbox.max_y:
            heapq.heappush(heap, make_cell(x + half, y + half, half))
            y += cell_size
        x += cell_size

    centroid = area_centroid(pts)
    best = make_cell(centroid.x, centroid.y, 0.0)
    center = bbox.center
    bbox_cell = make_cell(center.x, center.y, 0.0)
    if bbox_cell.distance > best.distance:
        best = bbox_cell

    while heap:
        cell = heapq.heappop(heap)
        if cell.distance > best.distance:
            best = cell
        if -cell.neg_potential - best.distance <= precision:
            continue
        h = cell.half / 2
        heapq.heappush(heap, make_cell(cell.x - h, cell.y - h, h))
        heapq.heappush(heap, make_cell(cell.x + h, cell.y - h, h))
        heapq.heappush(heap, make_cell(cell.x - h, cell.y + h, h))
        heapq.heappush(heap, make_cell(cell.x + h, cell.y + h, h))

    return Point(best.x, best.y), best.distance


def _aligned_grid(polygon: Polygon, step: float) -> list[Point]:
    """Grid on absolute multiples of step, so overlapping shapes share points."""
    bbox = polygon.bounding_box
    start_x = math.ceil(bbox.min_x / step)
    end_x = math.floor(bbox.max_x / step)
    start_y = math.ceil(bbox.min_y / step)
    end_y = math.floor(bbox.max_y / step)
    return [
        Point(i * step, j * step)
        for i in range(start_x, end_x + 1)
        for j in range(start_y, end_y + 1)
    ]


def offset_patterns(origin: Point, width: float, height: float) -> list[Point]:
    """Strategic offsets around a point, scaled by the bounding box size."""
    return [Point(origin.x + dx * width, origin.y + dy * height) for dx, dy in OFFSET_PATTERNS]


def pole_seeded_candidates(
    polygon: Polygon, contains: Containment, config: CentroidConfig
) -> Iterator[Point]:
    """Candidates of the dense search, seeded by the pole of inaccessibility.

    The pole is always first. It is followed by the classic centroids, the
    offset patterns around the pole (and around the area centroid when it is
    far from the pole) and finally the aligned grid ordered by distance from
    the pole.

    Points are yielded lazily, so containment and deduplication only run
    for the candidates a time-boxed search actually reaches.

    Args:
        polygon: Polygon to search
        contains: Containment test used to filter candidates
        config: Grid step and pole precision

    Yields:
        Inside candidates, pole first
    """
    bbox = polygon.bounding_box
    pole, _ = pole_of_inaccessibility(polygon, config.polylabel_precision)

    strategic = _classic_centroids(polygon)
    strategic.extend(offset_patterns(pole, bbox.width, bbox.height))
    centroid = strategic[0]
    if contains(centroid) and centroid.distance_to(pole) > CENTROID_POLE_SEPARATION:
        strategic.extend(offset_patterns(centroid, bbox.width, bbox.height))

    grid = _aligned_grid(polygon, config.grid_step)
    grid.sort(key=lambda p: (math.hypot(p.x - pole.x, p.y - pole.y), p.x, p.y))

    snap = config.grid_step / 2
    seen: set[tuple[int, int]] = set()
    for p in itertools.chain([pole], strategic, grid):
        key = (round(p.x / snap), round(p.y / snap))
        if key in seen or not contains(p):
            continue
        seen.add(key)
        yield p


def generate_candidates(
    polygon: Polygon,
    strategy: CentroidStrategy,
    contains: Containment,
    config: CentroidConfig,
) -> list[Point]:
    """Generate candidates for a resolved strategy.

    Args:
        polygon: Polygon to search
        strategy: UNIFORM or HYBRID (AUTO must be resolved first)
        contains: Containment test used to filter candidates
        config: Candidate settings

    Returns:
        Ordered candidate centers

    Raises:
        ValueError: If the strategy is AUTO
    """
    if strategy is CentroidStrategy.UNIFORM:
        return uniform_candidates(polygon, contains, config)
    if strategy is CentroidStrategy.HYBRID:
        return hybrid_candidates(polygon, contains, config)
    raise ValueError(f"Unresolved centroid strategy: {strategy.value}")


def resolve_strategy(
    configured: CentroidStrategy, polygon: Polygon, path_count: int | None
) -> CentroidStrategy:
    """Resolve AUTO into a concrete strategy for this polygon."""
    if configured is not CentroidStrategy.AUTO:
        return configured
    return select_strategy(path_count, polygon.vertex_count, polygon.bounding_box.area)


def fallback_centers(polygon: Polygon, contains: Containment) -> list[Point]:
    """Classic centroids that are inside, used when a generator yields nothing."""
    return [p for p in _classic_centroids(polygon) if contains(p)]
