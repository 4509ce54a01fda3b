"""maxrect - Find the largest rectangle that fits inside a polygon.

maxrect is a library and CLI that takes a simple (possibly concave) polygon
and returns the largest-area rectangle, at any rotation, that fits entirely
inside it. The search combines closed-form formulas for quadrilaterals,
boundary-angle driven fitting and a dense centroid/angle sweep, all under a
wall-clock budget.

Example:
    $ maxrect outline.json

    >>> from maxrect import find_inscribed_rectangle
    >>> result = find_inscribed_rectangle([(0, 0), (1, 0), (1, 2), (0, 2)])
    >>> round(result.rectangle.area, 6)
    2.0
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

from maxrect.core.engine import InscribedRectangleEngine, find_inscribed_rectangle

__all__ = [
    "InscribedRectangleEngine",
    "__author__",
    "__version__",
    "find_inscribed_rectangle",
]
