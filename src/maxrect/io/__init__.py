"""Polygon and result I/O for maxrect.

This module handles everything outside the engine's pure geometry:
reading polygons from JSON files, converting SVG path data to point lists,
formatting rectangles for SVG rendering and persisting precomputed results.

Key classes:
- PolygonReader: Load a polygon and its search hints
- RectangleStore: JSON key to Rectangle map
"""

from maxrect.io.converter import (
    parse_path_points,
    points_from_data,
    polygon_to_svg_points,
    rectangle_to_svg_points,
)
from maxrect.io.reader import PolygonReader
from maxrect.io.store import RectangleStore, make_key

__all__ = [
    "PolygonReader",
    "RectangleStore",
    "make_key",
    "parse_path_points",
    "points_from_data",
    "polygon_to_svg_points",
    "rectangle_to_svg_points",
]
