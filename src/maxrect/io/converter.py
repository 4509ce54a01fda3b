"""Conversion between external representations and domain models.

This module handles:
- Plain JSON point data ([x, y] pairs or {"x", "y"} objects) to Points
- SVG path data to Points (segment end points, via svgpathtools)
- Rectangles and polygons to SVG ``points`` attribute strings
"""

from collections.abc import Sequence
from typing import Any

from svgpathtools import parse_path

from maxrect.domain import Point, Polygon, Rectangle


def points_from_data(data: Sequence[Any]) -> list[Point]:
    """Convert JSON point data to Points.

    Args:
        data: Sequence of [x, y] pairs or {"x": .., "y": ..} objects

    Returns:
        List of Points

    Raises:
        ValueError: If an entry is neither a pair nor a point object
    """
    points = []
    for index, item in enumerate(data):
        if isinstance(item, dict):
            if "x" not in item or "y" not in item:
                raise ValueError(f"Point {index} is missing x or y")
            points.append(Point.from_dict(item))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            points.append(Point(float(item[0]), float(item[1])))
        else:
            raise ValueError(f"Point {index} is not an [x, y] pair or point object: {item!r}")
    return points


def parse_path_points(path_data: str) -> list[Point]:
    """Extract the vertex list of an SVG path.

    The path data is parsed with svgpathtools. Every segment contributes its
    end point, so curves and arcs reduce to the chord between their ends. A
    closing segment that returns to the first vertex is not repeated.

    Args:
        path_data: SVG ``d`` attribute

    Returns:
        Points in path order

    Raises:
        ValueError: If the path data is malformed

    Examples:
        >>> [p.to_tuple() for p in parse_path_points("M0 0 h10 v5 H0 Z")]
        [(0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (0.0, 5.0)]
    """
    try:
        path = parse_path(path_data)
    except (IndexError, ValueError) as e:
        raise ValueError(f"Malformed path data: {e}") from e

    points: list[Point] = []
    for seg in path:
        start = Point(seg.start.real, seg.start.imag)
        # A moveto inside the data starts a new run of vertices
        if not points or points[-1] != start:
            points.append(start)
        points.append(Point(seg.end.real, seg.end.imag))

    if len(points) > 1 and points[-1] == points[0]:
        points.pop()
    return points


def _format_number(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def rectangle_to_svg_points(rect: Rectangle, precision: int = 2) -> str:
    """Format rectangle corners for an SVG ``<polygon points=...>`` attribute.

    Args:
        rect: Rectangle to render
        precision: Decimal places

    Returns:
        Space-separated "x,y" pairs in corner order
    """
    return " ".join(
        f"{_format_number(c.x, precision)},{_format_number(c.y, precision)}"
        for c in rect.corners
    )


def polygon_to_svg_points(polygon: Polygon, precision: int = 2) -> str:
    """Format polygon vertices for an SVG ``points`` attribute."""
    return " ".join(
        f"{_format_number(p.x, precision)},{_format_number(p.y, precision)}"
        for p in polygon.points
    )
