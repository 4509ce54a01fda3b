"""Exception hierarchy for maxrect."""


class MaxRectError(Exception):
    """Base exception for all maxrect errors."""

    pass


class PolygonError(MaxRectError):
    """Errors related to the input polygon."""

    pass


class InvalidPolygonError(PolygonError):
    """Polygon cannot be searched at all (too few or non-finite points)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid polygon: {reason}")


class DegeneratePolygonError(PolygonError):
    """Polygon has no interior (zero area, collinear points)."""

    def __init__(self, vertex_count: int) -> None:
        self.vertex_count = vertex_count
        super().__init__(f"Degenerate polygon with {vertex_count} points has zero area")


class PolygonLoadError(PolygonError):
    """Error loading a polygon file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load polygon '{path}': {reason}")


class SearchError(MaxRectError):
    """Errors raised from search results."""

    pass


class NoFeasibleRectangleError(SearchError):
    """No candidate rectangle survived validation."""

    def __init__(self, vertex_count: int, elapsed_ms: float) -> None:
        self.vertex_count = vertex_count
        self.elapsed_ms = elapsed_ms
        super().__init__(
            f"No inscribed rectangle found for polygon with {vertex_count} points "
            f"after {elapsed_ms:.0f}ms"
        )


class StoreError(MaxRectError):
    """Errors related to the precomputed rectangle store."""

    pass


class StoreLoadError(StoreError):
    """Error reading a rectangle store file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load rectangle store '{path}': {reason}")


class StoreSaveError(StoreError):
    """Error writing a rectangle store file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save rectangle store '{path}': {reason}")
