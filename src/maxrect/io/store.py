"""Precomputed rectangle store.

Results are persisted as a plain JSON object mapping a key to a serialized
Rectangle. Keys for polygons assembled from several regions are the sorted
region identifiers joined with underscores, so the same selection always
maps to the same entry regardless of selection order.
"""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path

from maxrect.domain import Rectangle
from maxrect.exceptions import StoreLoadError, StoreSaveError

KEY_SEPARATOR = "_"


def make_key(region_ids: Iterable[str]) -> str:
    """Build the store key for a set of region identifiers.

    Examples:
        >>> make_key(["b", "a", "c"])
        'a_b_c'
    """
    return KEY_SEPARATOR.join(sorted(str(i) for i in region_ids))


class RectangleStore:
    """Key to Rectangle map backed by a JSON file.

    Example:
        store = RectangleStore(Path("precomputed.json"))
        store.load()
        store.put(make_key(["r1", "r2"]), rect)
        store.save()
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._entries: dict[str, Rectangle] = {}

    def load(self) -> None:
        """Load entries from the backing file (a missing file is an empty store).

        Raises:
            StoreLoadError: If the file is not a valid store
        """
        if self.path is None or not self.path.exists():
            return

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreLoadError(str(self.path), str(e)) from e

        if not isinstance(data, dict):
            raise StoreLoadError(str(self.path), "expected a JSON object")

        try:
            self._entries = {key: Rectangle.from_dict(value) for key, value in data.items()}
        except (KeyError, TypeError, ValueError) as e:
            raise StoreLoadError(str(self.path), f"malformed entry: {e}") from e

    def save(self, path: Path | None = None) -> Path:
        """Write all entries, sorted by key.

        Args:
            path: Target path (the store's own path if None)

        Returns:
            Path written

        Raises:
            StoreSaveError: If no path is known or writing fails
        """
        target = path or self.path
        if target is None:
            raise StoreSaveError("<unset>", "no path given")

        payload = {key: self._entries[key].to_dict() for key in sorted(self._entries)}
        try:
            target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            raise StoreSaveError(str(target), str(e)) from e
        return target

    def get(self, key: str) -> Rectangle | None:
        return self._entries.get(key)

    def get_for(self, region_ids: Iterable[str]) -> Rectangle | None:
        """Look up the entry for a set of region identifiers."""
        return self._entries.get(make_key(region_ids))

    def put(self, key: str, rect: Rectangle) -> None:
        self._entries[key] = rect

    def remove(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
