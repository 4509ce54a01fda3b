"""Polygon reader for JSON input files.

Accepted layouts:
- A bare list of [x, y] pairs or {"x": .., "y": ..} objects
- An object with "points" (same list forms) or "path" (SVG path data),
  plus optional "pathCount", "targetArea" and "ids" (region identifiers)
"""

import json
from pathlib import Path
from typing import Any

from maxrect.domain import Polygon
from maxrect.exceptions import PolygonLoadError
from maxrect.io.converter import parse_path_points, points_from_data


class PolygonReader:
    """Loads a polygon and its search hints from a JSON file.

    Example:
        reader = PolygonReader(Path("outline.json"))
        reader.load()
        result = engine.find(reader.polygon, target_area=reader.target_area)
    """

    def __init__(self, path: Path) -> None:
        """Initialize the reader.

        Args:
            path: Path to the JSON file
        """
        self._path = path
        self._polygon: Polygon | None = None
        self._path_count: int | None = None
        self._target_area: float | None = None
        self._region_ids: list[str] = []

    def load(self) -> None:
        """Load and parse the file.

        Raises:
            FileNotFoundError: If the file does not exist
            PolygonLoadError: If the content is not a recognized polygon layout
        """
        if not self._path.exists():
            raise FileNotFoundError(f"Polygon file not found: {self._path}")

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise PolygonLoadError(str(self._path), f"invalid JSON: {e}") from e

        try:
            self._parse(data)
        except (TypeError, ValueError) as e:
            raise PolygonLoadError(str(self._path), str(e)) from e

    def _parse(self, data: Any) -> None:
        if isinstance(data, list):
            self._polygon = Polygon(tuple(points_from_data(data)))
            return

        if not isinstance(data, dict):
            raise ValueError("expected a list of points or an object")

        if "points" in data:
            points = points_from_data(data["points"])
        elif "path" in data:
            points = parse_path_points(str(data["path"]))
        else:
            raise ValueError("object needs a 'points' or 'path' field")

        self._polygon = Polygon(tuple(points))
        if data.get("pathCount") is not None:
            self._path_count = int(data["pathCount"])
        if data.get("targetArea") is not None:
            self._target_area = float(data["targetArea"])
        self._region_ids = [str(i) for i in data.get("ids", [])]

    def _require_loaded(self) -> Polygon:
        if self._polygon is None:
            raise RuntimeError("Polygon not loaded. Call load() first.")
        return self._polygon

    @property
    def polygon(self) -> Polygon:
        """The loaded polygon."""
        return self._require_loaded()

    @property
    def path_count(self) -> int | None:
        """Number of source paths, if the file provides it."""
        self._require_loaded()
        return self._path_count

    @property
    def target_area(self) -> float | None:
        """Reference area for the coverage early stop, if provided."""
        self._require_loaded()
        return self._target_area

    @property
    def region_ids(self) -> list[str]:
        """Region identifiers that make up the polygon, if provided."""
        self._require_loaded()
        return list(self._region_ids)
