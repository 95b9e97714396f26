"""
Search result wrapper.

Presents a raw search response as a read-only sequence of hits, converting
each hit into a model-shaped record on first access.
"""

from collections.abc import Sequence
from typing import Any, Dict, Iterator, List, Optional

from search_sync.core.interfaces import RowBuilder


class SearchResult(Sequence):
    """
    A sequence over the hits of one search or scroll response.

    When a row builder is given, each hit's ``_source`` is passed to it the
    first time the hit is accessed and the built record replaces the raw hit.
    Without one, raw hits are returned unchanged. Scroll ids are exposed but
    never followed.
    """

    def __init__(
        self,
        response: Optional[Dict[str, Any]] = None,
        row_builder: Optional[RowBuilder] = None,
    ):
        """
        Initialize search result.

        Args:
            response: Raw response body from the search client
            row_builder: Optional callable that builds a record from hit fields
        """
        self.response: Dict[str, Any] = response or {}
        self.row_builder = row_builder

        hits = self.response.get("hits") or {}
        self.scroll_id: Optional[str] = self.response.get("_scroll_id") if hits else None
        self.total: int = _total_hits(hits.get("total"))
        self.took: Optional[int] = self.response.get("took") if hits else None
        self.timed_out: bool = bool(self.response.get("timed_out", False)) if hits else False

        self._hits: List[Any] = list(hits.get("hits") or [])
        self._converted: List[bool] = [False] * len(self._hits)

    def __len__(self) -> int:
        return len(self._hits)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self._get(i) for i in range(*index.indices(len(self._hits)))]
        if index < 0:
            index += len(self._hits)
        if not 0 <= index < len(self._hits):
            raise IndexError("search result index out of range")
        return self._get(index)

    def __iter__(self) -> Iterator[Any]:
        for i in range(len(self._hits)):
            yield self._get(i)

    def __contains__(self, item: Any) -> bool:
        return any(hit == item for hit in self)

    def __repr__(self) -> str:
        return (
            f"SearchResult(total={self.total}, hits={len(self._hits)}, "
            f"took={self.took}, timed_out={self.timed_out})"
        )

    @property
    def hits(self) -> List[Any]:
        """Hits in response order, converted."""
        return list(self)

    def _get(self, i: int) -> Any:
        if not self._converted[i]:
            self._hits[i] = self._convert(self._hits[i])
            self._converted[i] = True
        return self._hits[i]

    def _convert(self, hit: Any) -> Any:
        """Convert a search hit into a record."""
        if self.row_builder is None:
            return hit
        source = hit.get("_source") or {}
        return self.row_builder({str(key): value for key, value in source.items()})


def _total_hits(total: Any) -> int:
    # Elasticsearch 7+ reports {"value": n, "relation": "eq"}
    if isinstance(total, dict):
        return total.get("value", 0)
    return total or 0
