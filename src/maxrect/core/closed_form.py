"""Closed-form rectangles for quadrilaterals.

Four-vertex polygons that are parallelograms or trapezoids get a rectangle
directly from their edge lengths, without any search. The results are
candidates: the orchestrator still runs them through final validation.
"""

import math

from maxrect.core.boundary import detect_orientation
from maxrect.core.geometry import angle_difference, edge_angle, vertex_centroid
from maxrect.domain import Point, Polygon, Rectangle, RectangleSource

PARALLELOGRAM_LENGTH_TOLERANCE = 5.0
PAIR_AVERAGE_TOLERANCE = 1.0
PARALLEL_ANGLE_TOLERANCE = 5.0


def _edges(polygon: Polygon) -> list[tuple[Point, Point, float, float]]:
    points = polygon.points
    result = []
    for i in range(4):
        a = points[i]
        b = points[(i + 1) % 4]
        result.append((a, b, math.hypot(b.x - a.x, b.y - a.y), edge_angle(a, b)))
    return result


def _pair_length(first: float, second: float) -> float:
    """Average of an opposite edge pair, or its minimum when they differ noticeably."""
    if abs(first - second) > PAIR_AVERAGE_TOLERANCE:
        return min(first, second)
    return (first + second) / 2


def parallelogram_rectangle(polygon: Polygon, angle: float) -> Rectangle | None:
    """Rectangle for a parallelogram-like quadrilateral.

    Valid when both opposite edge pairs differ in length by less than 5
    units. The pair closer to ``angle`` gives the width, the other pair the
    height; the rectangle is centered on the vertex average.

    Args:
        polygon: Four-vertex polygon
        angle: Target orientation in degrees

    Returns:
        Rectangle at ``angle``, or None if the shape is not a parallelogram
    """
    if polygon.vertex_count != 4:
        return None

    edges = _edges(polygon)
    lengths = [e[2] for e in edges]
    if abs(lengths[0] - lengths[2]) >= PARALLELOGRAM_LENGTH_TOLERANCE:
        return None
    if abs(lengths[1] - lengths[3]) >= PARALLELOGRAM_LENGTH_TOLERANCE:
        return None

    first_pair = _pair_length(lengths[0], lengths[2])
    second_pair = _pair_length(lengths[1], lengths[3])
    if angle_difference(edges[0][3], angle) <= angle_difference(edges[1][3], angle):
        width, height = first_pair, second_pair
    else:
        width, height = second_pair, first_pair

    if width <= 0 or height <= 0:
        return None
    return Rectangle(vertex_centroid(polygon.points), angle, width, height)


def trapezoid_rectangle(polygon: Polygon, angle: float) -> Rectangle | None:
    """Rectangle for a quadrilateral with at least one pair of parallel edges.

    Among the parallel pairs the one closest to ``angle`` is used. The
    rectangle runs along the shorter parallel edge with that edge's length,
    spans the full perpendicular distance between the parallel edges and is
    centered below the shorter edge's midpoint.

    Args:
        polygon: Four-vertex polygon
        angle: Target orientation in degrees

    Returns:
        Rectangle aligned with the parallel edges, or None if no edges are
        parallel
    """
    if polygon.vertex_count != 4:
        return None

    edges = _edges(polygon)
    best_pair: tuple[int, int] | None = None
    best_diff = math.inf
    for first, second in ((0, 2), (1, 3)):
        if angle_difference(edges[first][3], edges[second][3]) >= PARALLEL_ANGLE_TOLERANCE:
            continue
        diff = angle_difference(edges[first][3], angle)
        if diff < best_diff:
            best_diff = diff
            best_pair = (first, second)

    if best_pair is None:
        return None

    first, second = best_pair
    shorter = edges[first] if edges[first][2] <= edges[second][2] else edges[second]
    start, end, width, rect_angle = shorter
    if width <= 0:
        return None

    rad = math.radians(rect_angle)
    nx, ny = -math.sin(rad), math.cos(rad)
    projections = [p.x * nx + p.y * ny for p in polygon.points]
    height = max(projections) - min(projections)
    if height <= 0:
        return None

    mid = Point((start.x + end.x) / 2, (start.y + end.y) / 2)
    shift = (max(projections) + min(projections)) / 2 - (mid.x * nx + mid.y * ny)
    center = Point(mid.x + nx * shift, mid.y + ny * shift)
    return Rectangle(center, rect_angle, width, height)


def closed_form_rectangle(
    polygon: Polygon, angle: float | None = None
) -> tuple[Rectangle, RectangleSource] | None:
    """Try the parallelogram formula, then the trapezoid formula.

    Args:
        polygon: Polygon to fit into (only four-vertex polygons qualify)
        angle: Target orientation (detected from the polygon if None)

    Returns:
        Tuple of (rectangle, source) or None if neither formula applies
    """
    if polygon.vertex_count != 4:
        return None

    target = detect_orientation(polygon) if angle is None else angle
    rect = parallelogram_rectangle(polygon, target)
    if rect is not None:
        return rect, RectangleSource.PARALLELOGRAM

    rect = trapezoid_rectangle(polygon, target)
    if rect is not None:
        return rect, RectangleSource.TRAPEZOID

    return None
