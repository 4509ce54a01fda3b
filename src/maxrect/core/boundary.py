"""Boundary analysis for angle selection.

This module extracts the polygon's edges, groups them into dominant
orientations and builds the candidate angle sets that drive the searches.
A rectangle side tends to lie flush against the polygon's longest or most
common edge direction, so those angles are tried first.

Key functions:
- extract_edges: Edges sorted by length, longest first
- find_dominant_angles: Edge orientation groups weighted by total length
- compute_convex_hull: Graham scan hull
- detect_orientation: Edge angle that maximizes the rotated width
- boundary_angles / natural_angles / critical_angles / strategic_angles:
  Candidate angle sets
"""

import math
from collections.abc import Iterable, Sequence

from maxrect.core.geometry import angle_difference, cross, edge_angle, normalize_angle
from maxrect.domain import AngleGroup, Edge, Point, Polygon


def extract_edges(polygon: Polygon) -> list[Edge]:
    """Extract polygon edges sorted by length descending.

    Zero-length edges are skipped. The sort is stable, so equal-length edges
    keep their ring order.

    Args:
        polygon: Polygon to analyze

    Returns:
        Edges, longest first
    """
    points = polygon.points
    n = len(points)
    edges = []
    for i in range(n):
        start = points[i]
        end = points[(i + 1) % n]
        length = math.hypot(end.x - start.x, end.y - start.y)
        if length < 1e-10:
            continue
        edges.append(Edge(start, end, i, length, edge_angle(start, end)))

    edges.sort(key=lambda e: -e.length)
    return edges


def find_dominant_angles(
    edges: Sequence[Edge],
    tolerance: float = 5.0,
    min_length: float = 5.0,
) -> list[AngleGroup]:
    """Group edges by orientation.

    Each edge joins the first existing group whose angle is within
    ``tolerance`` (wrapping at 180 degrees), otherwise it starts a new group.
    When every edge is shorter than ``min_length`` (small-scale input) all
    edges are grouped instead of none.

    Args:
        edges: Edges, normally from extract_edges
        tolerance: Maximum angle difference inside a group in degrees
        min_length: Edges shorter than this are ignored

    Returns:
        Groups sorted by total length descending
    """
    usable = [e for e in edges if e.length >= min_length]
    if not usable:
        usable = list(edges)

    groups: list[AngleGroup] = []
    for edge in usable:
        for group in groups:
            if angle_difference(edge.angle, group.angle) < tolerance:
                group.add(edge)
                break
        else:
            group = AngleGroup(angle=edge.angle)
            group.add(edge)
            groups.append(group)

    groups.sort(key=lambda g: -g.total_length)
    return groups


def compute_convex_hull(points: Sequence[Point]) -> list[Point]:
    """Compute the convex hull with a Graham scan.

    The pivot is the lowest point (leftmost on ties). Remaining points are
    sorted by polar angle around it, nearer points first on ties, and the
    sweep keeps only strict left turns. The result is counter-clockwise
    regardless of the input winding.

    Args:
        points: Input points in any order

    Returns:
        Hull vertices, counter-clockwise
    """
    if len(points) < 3:
        return list(points)

    pivot = min(points, key=lambda p: (p.y, p.x))
    rest = [p for p in points if p is not pivot]
    rest.sort(
        key=lambda p: (
            math.atan2(p.y - pivot.y, p.x - pivot.x),
            (p.x - pivot.x) ** 2 + (p.y - pivot.y) ** 2,
        )
    )

    hull = [pivot]
    for p in rest:
        while len(hull) > 1 and cross(hull[-2], hull[-1], p) <= 0:
            hull.pop()
        hull.append(p)

    return hull


def rotated_width(points: Iterable[Point], angle: float) -> float:
    """Extent of the points projected onto the direction of ``angle``."""
    rad = math.radians(angle)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    projections = [p.x * cos_a + p.y * sin_a for p in points]
    return max(projections) - min(projections)


def detect_orientation(polygon: Polygon) -> float:
    """Find the edge angle along which the polygon is widest.

    Every unique edge angle (normalized to [0, 180), rounded to 0.1 degree)
    is tried; the first angle reaching the maximum width wins.

    Args:
        polygon: Polygon to analyze

    Returns:
        Orientation angle in degrees (0.0 when the polygon has no edges)
    """
    points = polygon.points
    n = len(points)
    angles: list[float] = []
    seen: set[float] = set()
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        if math.hypot(b.x - a.x, b.y - a.y) < 1e-10:
            continue
        angle = normalize_angle(round(edge_angle(a, b), 1))
        if angle not in seen:
            seen.add(angle)
            angles.append(angle)

    best_angle = 0.0
    best_width = -math.inf
    for angle in angles:
        width = rotated_width(points, angle)
        if width > best_width:
            best_width = width
            best_angle = angle
    return best_angle


def unique_angles(angles: Iterable[float], exclude: Iterable[float] = ()) -> list[float]:
    """Normalize and deduplicate angles, keeping first-seen order.

    Args:
        angles: Candidate angles in degrees
        exclude: Angles that must not be returned (already tried)

    Returns:
        Ordered unique angles in [0, 180)
    """
    seen = {round(normalize_angle(a), 3) for a in exclude}
    result = []
    for angle in angles:
        normalized = normalize_angle(angle)
        key = round(normalized, 3)
        if key in seen:
            continue
        seen.add(key)
        result.append(normalized)
    return result


def boundary_angles(
    groups: Sequence[AngleGroup],
    max_angles: int = 8,
    test_perpendicular: bool = True,
) -> list[float]:
    """Angle set of the boundary-driven search.

    Args:
        groups: Dominant angle groups, most significant first
        max_angles: Number of groups to use
        test_perpendicular: Include each group's perpendicular

    Returns:
        Group angles (and perpendiculars) followed by 0 degrees
    """
    angles: list[float] = []
    for group in groups[:max_angles]:
        angles.append(group.angle)
        if test_perpendicular:
            angles.append(group.perpendicular)
    angles.append(0.0)
    return unique_angles(angles)


def natural_angles(edges: Sequence[Edge]) -> list[float]:
    """Rounded unique edge angles and their perpendiculars, longest edges first."""
    angles: list[float] = []
    for edge in edges:
        rounded = float(round(edge.angle))
        angles.append(rounded)
        angles.append(rounded + 90.0)
    return unique_angles(angles)


def critical_angles(polygon: Polygon) -> list[float]:
    """Rotating-calipers angle set.

    An optimal enclosing or inscribed rectangle of a convex region has a
    side flush with a hull edge, so hull edge angles and their
    perpendiculars are the critical orientations.

    Args:
        polygon: Polygon to analyze

    Returns:
        Hull edge angles and perpendiculars rounded to 0.1 degree
    """
    hull = compute_convex_hull(list(polygon.points))
    n = len(hull)
    angles: list[float] = []
    for i in range(n):
        a = hull[i]
        b = hull[(i + 1) % n]
        if math.hypot(b.x - a.x, b.y - a.y) < 1e-10:
            continue
        angle = round(edge_angle(a, b), 1)
        angles.append(angle)
        angles.append(angle + 90.0)
    return unique_angles(angles)


def strategic_angles(
    angle_step: float = 8.0,
    fine_step: float = 2.0,
    fine_window: float = 10.0,
) -> list[float]:
    """Fixed sweep over [0, 180) that is finer around 90 degrees.

    Args:
        angle_step: Regular sweep step
        fine_step: Step used within ``fine_window`` of 90 degrees
        fine_window: Half-width of the fine region

    Returns:
        Sorted unique angles
    """
    angles = []
    count = math.ceil(180.0 / angle_step)
    for i in range(count):
        angle = i * angle_step
        if angle < 180.0:
            angles.append(angle)

    if fine_window > 0:
        steps = int(round(2 * fine_window / fine_step))
        for i in range(steps + 1):
            angles.append(90.0 - fine_window + i * fine_step)

    return sorted(unique_angles(angles))


def refinement_angles(center_angle: float, span: float = 8.0, step: float = 2.0) -> list[float]:
    """Angles within +/- span of center_angle at the given step, nearest first."""
    angles = []
    steps = int(round(span / step))
    for i in range(1, steps + 1):
        angles.append(center_angle - i * step)
        angles.append(center_angle + i * step)
    return unique_angles(angles)
