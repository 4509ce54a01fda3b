"""Geometric operations for polygon and rectangle calculations.

Helpers in this module cover:
- Half-open ray-casting containment and scanline crossings
- Tolerance-augmented containment for post-hoc validation
- Nearest point and distance-to-boundary calculations
- Area and vertex centroids
- Angle normalization and edge normals
- Convexity testing

All functions are pure and stateless.
"""

import math
from collections.abc import Sequence

from maxrect.domain import Point


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Ray-casting containment test.

    A ray from the point towards +x toggles the result at every edge it
    crosses. Edges are half-open in y (``yi > y`` vs ``yj > y``), so
    horizontal edges never count and a vertex on the ray counts once.
    Points on the top or right boundary therefore test as outside.

    Args:
        point: Query point
        polygon: Polygon vertices, implicitly closed

    Returns:
        True if the point is strictly inside (or on a bottom/left edge)

    Examples:
        >>> ring = [Point(0.0, 0.0), Point(4.0, 0.0), Point(4.0, 4.0), Point(0.0, 4.0)]
        >>> point_in_polygon(Point(2.0, 2.0), ring)
        True
        >>> point_in_polygon(Point(4.0, 2.0), ring)
        False
    """
    count = len(polygon)
    if count < 3:
        return False

    px, py = point.x, point.y
    crossings = False
    prev = polygon[-1]
    for curr in polygon:
        if (curr.y > py) != (prev.y > py):
            x_at_py = curr.x + (prev.x - curr.x) * (py - curr.y) / (prev.y - curr.y)
            if px < x_at_py:
                crossings = not crossings
        prev = curr

    return crossings


def ray_crossings(polygon: Sequence[Point], y: float) -> list[float]:
    """Sorted x positions where a horizontal line at y crosses the polygon.

    Uses the same half-open edge rule as point_in_polygon, so a point
    (px, y) is inside exactly when an odd number of crossings lie strictly
    to its right.
    """
    if len(polygon) < 3:
        return []
    xs = []
    prev = polygon[-1]
    for curr in polygon:
        if (curr.y > y) != (prev.y > y):
            xs.append(curr.x + (prev.x - curr.x) * (y - curr.y) / (prev.y - curr.y))
        prev = curr
    xs.sort()
    return xs


def nearest_point_on_segment(point: Point, seg_start: Point, seg_end: Point) -> tuple[Point, float]:
    """Closest point of segment [seg_start, seg_end] to ``point``.

    Returns:
        (closest point, distance to it). A degenerate segment returns its
        start point.

    Examples:
        >>> foot, dist = nearest_point_on_segment(
        ...     Point(3.0, 4.0), Point(0.0, 0.0), Point(10.0, 0.0)
        ... )
        >>> foot.to_tuple(), dist
        ((3.0, 0.0), 4.0)
    """
    ux = seg_end.x - seg_start.x
    uy = seg_end.y - seg_start.y
    length_sq = ux * ux + uy * uy
    if length_sq < 1e-10:
        return seg_start, math.hypot(point.x - seg_start.x, point.y - seg_start.y)

    param = ((point.x - seg_start.x) * ux + (point.y - seg_start.y) * uy) / length_sq
    param = min(1.0, max(0.0, param))
    foot = Point(seg_start.x + param * ux, seg_start.y + param * uy)
    return foot, math.hypot(point.x - foot.x, point.y - foot.y)


def distance_to_boundary(point: Point, polygon: Sequence[Point]) -> float:
    """Distance from a point to the closest polygon edge.

    Args:
        point: The point to measure from
        polygon: Polygon vertices

    Returns:
        Unsigned distance to the nearest edge (inf for an empty polygon)
    """
    best = math.inf
    n = len(polygon)
    for i in range(n):
        _, d = nearest_point_on_segment(point, polygon[i], polygon[(i + 1) % n])
        if d < best:
            best = d
    return best


def signed_distance(point: Point, polygon: Sequence[Point]) -> float:
    """Distance to the boundary, positive inside the polygon and negative outside."""
    d = distance_to_boundary(point, polygon)
    return d if point_in_polygon(point, polygon) else -d


def point_in_polygon_with_tolerance(
    point: Point, polygon: Sequence[Point], tolerance: float
) -> bool:
    """Containment test that also accepts points within tolerance of an edge.

    Used for post-hoc validation, where a rectangle that touches the boundary
    exactly must not be rejected because of floating point noise.

    Args:
        point: The point to test
        polygon: Polygon vertices
        tolerance: Distance to an edge that still counts as inside

    Returns:
        True if the point is inside or on the boundary
    """
    if point_in_polygon(point, polygon):
        return True
    if tolerance <= 0:
        return False
    return distance_to_boundary(point, polygon) <= tolerance


def normalize_angle(angle: float) -> float:
    """Normalize an undirected angle in degrees to [0, 180)."""
    result = angle % 180.0
    # -1e-17 % 180 rounds to exactly 180.0
    return 0.0 if result >= 180.0 else result


def angle_difference(a: float, b: float) -> float:
    """Smallest difference between two undirected angles, in [0, 90]."""
    diff = abs(normalize_angle(a) - normalize_angle(b))
    return min(diff, 180.0 - diff)


def edge_angle(p1: Point, p2: Point) -> float:
    """Undirected angle of the segment p1 -> p2 in degrees, in [0, 180)."""
    return normalize_angle(math.degrees(math.atan2(p2.y - p1.y, p2.x - p1.x)))


def perpendicular_direction(p1: Point, p2: Point) -> tuple[float, float]:
    """Unit normal of the segment p1 -> p2, turned a quarter counter-clockwise.

    For a counter-clockwise ring this points into the polygon.

    Raises:
        ValueError: If p1 and p2 coincide
    """
    length = math.hypot(p2.x - p1.x, p2.y - p1.y)
    if length < 1e-10:
        raise ValueError("Cannot calculate perpendicular of zero-length line")
    return (p1.y - p2.y) / length, (p2.x - p1.x) / length


def vertex_centroid(points: Sequence[Point]) -> Point:
    """Average of the vertices."""
    n = len(points)
    return Point(sum(p.x for p in points) / n, sum(p.y for p in points) / n)


def area_centroid(points: Sequence[Point]) -> Point:
    """Area-weighted centroid of a polygon.

    Falls back to the vertex average when the polygon has (near) zero area.

    Args:
        points: Polygon vertices

    Returns:
        Centroid point
    """
    n = len(points)
    area = 0.0
    cx = 0.0
    cy = 0.0
    for i in range(n):
        j = (i + 1) % n
        cross = points[i].x * points[j].y - points[j].x * points[i].y
        area += cross
        cx += (points[i].x + points[j].x) * cross
        cy += (points[i].y + points[j].y) * cross

    area /= 2.0
    if abs(area) < 1e-10:
        return vertex_centroid(points)

    return Point(cx / (6.0 * area), cy / (6.0 * area))


def is_convex(points: Sequence[Point]) -> bool:
    """Check whether a polygon is convex.

    Collinear vertices are allowed; a polygon whose turns change sign is not
    convex.

    Args:
        points: Polygon vertices

    Returns:
        True if all turns go the same way
    """
    n = len(points)
    if n < 4:
        return n == 3

    sign = 0
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        c = points[(i + 2) % n]
        cross = (b.x - a.x) * (c.y - b.y) - (b.y - a.y) * (c.x - b.x)
        if abs(cross) < 1e-10:
            continue
        current = 1 if cross > 0 else -1
        if sign == 0:
            sign = current
        elif current != sign:
            return False

    return True


def cross(o: Point, a: Point, b: Point) -> float:
    """Z component of (a - o) x (b - o)."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)
