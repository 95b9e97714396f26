"""
Shared fakes for the search sync tests.

No test talks to a real cluster: the search client is an in-process
recorder and rows are plain objects.
"""

from typing import Any, Dict, List, Optional

import pytest

from search_sync.core.errors import SearchNotFoundError
from search_sync.core.models import ColumnDescriptor, DocumentRef


class FakeRow:
    """A row with an ``id`` primary key (or a composite key)."""

    def __init__(self, **values):
        self.__dict__.update(values)

    def __eq__(self, other):
        return isinstance(other, FakeRow) and vars(self) == vars(other)


class FakeRowSource:
    """Serves an in-memory list of rows."""

    def __init__(self, rows=None, key=("id",), name="Documents", fail_after=None):
        self.rows: List[FakeRow] = list(rows or [])
        self.key = key
        self.name = name
        self.fail_after = fail_after
        self.built: List[Dict[str, Any]] = []
        self.callbacks = None

    @property
    def collection_name(self) -> str:
        return self.name

    def primary_key(self, row):
        return tuple(getattr(row, column) for column in self.key)

    def values(self, row):
        return dict(vars(row))

    def each_page(self, size):
        for start in range(0, len(self.rows), size):
            if self.fail_after is not None and start >= self.fail_after:
                raise RuntimeError("row source went away")
            yield self.rows[start:start + size]

    def columns(self):
        return {
            "id": ColumnDescriptor(type="integer", db_type="integer"),
            "title": ColumnDescriptor(type="string", db_type="varchar(255)"),
            "content": ColumnDescriptor(type="string", db_type="text"),
        }

    def build_row(self, data):
        self.built.append(data)
        return FakeRow(**data)

    def subscribe(self, on_create, on_update, on_destroy):
        self.callbacks = (on_create, on_update, on_destroy)

    def unsubscribe(self):
        self.callbacks = None


class FakeSearchClient:
    """Records every call; ``fail_with`` makes every call raise."""

    def __init__(self, responses=None, aliases=None, fail_with=None):
        self.calls: List[tuple] = []
        self.responses = responses or {}
        self.aliases: Dict[str, Dict[str, Any]] = aliases or {}
        self.fail_with: Optional[Exception] = fail_with
        self.bulk_batches: List[List[Dict[str, Any]]] = []

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def upsert(self, ref: DocumentRef, payload):
        self._record("upsert", ref, payload)

    def delete(self, ref: DocumentRef):
        self._record("delete", ref)

    def search(self, index, type_name, params):
        self._record("search", index, type_name, params)
        return self.responses.get("search")

    def scroll(self, scroll_id, duration):
        self._record("scroll", scroll_id, duration)
        return self.responses.get("scroll")

    def bulk(self, actions):
        self._record("bulk", actions)
        self.bulk_batches.append(actions)

    def get_alias_targets(self, alias):
        self._record("get_alias_targets", alias)
        if alias not in self.aliases:
            raise SearchNotFoundError(f"alias [{alias}] missing")
        return self.aliases[alias]

    def update_aliases(self, actions):
        self._record("update_aliases", actions)
        for action in actions:
            if "remove" in action:
                alias = action["remove"]["alias"]
                prefix = action["remove"]["index"].rstrip("*")
                bound = self.aliases.get(alias, {})
                self.aliases[alias] = {
                    name: meta for name, meta in bound.items() if not name.startswith(prefix)
                }
            if "add" in action:
                alias = action["add"]["alias"]
                self.aliases.setdefault(alias, {})[action["add"]["index"]] = {"aliases": {alias: {}}}

    def create_index(self, name, mappings):
        self._record("create_index", name, mappings)

    def put_mapping(self, name, type_name, mappings):
        self._record("put_mapping", name, type_name, mappings)

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


def make_response(sources, total=None, scroll_id=None, took=3, timed_out=False):
    """Build a raw search response around hit sources."""
    response = {
        "took": took,
        "timed_out": timed_out,
        "hits": {
            "total": {"value": len(sources) if total is None else total, "relation": "eq"},
            "hits": [
                {"_index": "documents", "_id": str(i), "_source": source}
                for i, source in enumerate(sources, 1)
            ],
        },
    }
    if scroll_id:
        response["_scroll_id"] = scroll_id
    return response


@pytest.fixture
def search_client():
    return FakeSearchClient()


@pytest.fixture
def row_source():
    return FakeRowSource(rows=[FakeRow(id=i, title=f"Doc {i}") for i in range(1, 4)])
