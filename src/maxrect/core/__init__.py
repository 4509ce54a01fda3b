"""Core algorithms for maxrect.

This module contains the core algorithms for:

- Geometry operations (ray casting, distances, centroids, angles)
- Containment acceleration (spatial grid and its cache)
- Boundary analysis (edges, dominant angles, convex hull, orientation)
- Candidate center generation (uniform, hybrid, pole of inaccessibility)
- Rectangle fitting, validation and repair
- Closed-form quadrilateral formulas
- Time-budgeted searches and the hybrid orchestrator

All algorithms are free of I/O. Progress is reported through an optional
trace observer.

Key functions:
- find_inscribed_rectangle: One-call search entry point
- point_in_polygon: Ray-casting containment test
- find_dominant_angles: Edge orientation groups
- pole_of_inaccessibility: Interior point farthest from the boundary

Key classes:
- InscribedRectangleEngine: Hybrid orchestrator
- SpatialGrid / SpatialGridCache: Containment acceleration
- RectangleValidator: Sampling validator with shrink and expansion repair
- RectangleFitter: Binary-search scale fitting
"""

from maxrect.core.boundary import (
    compute_convex_hull,
    detect_orientation,
    extract_edges,
    find_dominant_angles,
)
from maxrect.core.centroids import (
    hybrid_candidates,
    pole_of_inaccessibility,
    select_strategy,
    uniform_candidates,
)
from maxrect.core.closed_form import (
    closed_form_rectangle,
    parallelogram_rectangle,
    trapezoid_rectangle,
)
from maxrect.core.containment import CellState, SpatialGrid, SpatialGridCache
from maxrect.core.engine import InscribedRectangleEngine, find_inscribed_rectangle
from maxrect.core.fitter import BaseDimension, RectangleFitter
from maxrect.core.geometry import point_in_polygon, point_in_polygon_with_tolerance
from maxrect.core.search import Deadline, SearchOutcome, boundary_search, dense_search
from maxrect.core.validator import (
    DENSE,
    SPARSE,
    STANDARD,
    RectangleValidator,
    SampleDensity,
)

__all__ = [
    # Engine
    "InscribedRectangleEngine",
    "find_inscribed_rectangle",
    # Searches
    "Deadline",
    "SearchOutcome",
    "boundary_search",
    "dense_search",
    # Containment
    "CellState",
    "SpatialGrid",
    "SpatialGridCache",
    "point_in_polygon",
    "point_in_polygon_with_tolerance",
    # Boundary analysis
    "compute_convex_hull",
    "detect_orientation",
    "extract_edges",
    "find_dominant_angles",
    # Centroids
    "hybrid_candidates",
    "pole_of_inaccessibility",
    "select_strategy",
    "uniform_candidates",
    # Fitting and validation
    "BaseDimension",
    "DENSE",
    "RectangleFitter",
    "RectangleValidator",
    "SPARSE",
    "STANDARD",
    "SampleDensity",
    # Closed form
    "closed_form_rectangle",
    "parallelogram_rectangle",
    "trapezoid_rectangle",
]
