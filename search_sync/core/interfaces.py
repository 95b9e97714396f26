"""
Abstract interfaces for the injected capabilities.

These protocols define the contract that search engine and row source
adapters must implement to work with the sync orchestrator.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Sequence

from search_sync.core.models import ColumnDescriptor, DocumentRef


# Builds a model-shaped record from a hit's source fields
RowBuilder = Callable[[Dict[str, Any]], Any]

# Builds the document body sent to the search engine for a row
PayloadBuilder = Callable[[Any], Dict[str, Any]]

# Lifecycle callback receiving the affected row
RowCallback = Callable[[Any], None]


class ISearchClient(Protocol):
    """
    Talk to a search engine.

    Implementations must raise the exceptions from
    ``search_sync.core.errors`` rather than client-specific ones.
    """

    def upsert(self, ref: DocumentRef, payload: Dict[str, Any]) -> Any:
        """Create or replace a single document."""
        ...

    def delete(self, ref: DocumentRef) -> Any:
        """Remove a single document."""
        ...

    def search(
        self, index: str, type_name: Optional[str], params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Run a search.

        Args:
            index: Index or alias name to search
            type_name: Optional document type
            params: Request parameters; ``q`` for a query string or ``body``
                for a structured query, plus options such as ``scroll``

        Returns:
            Raw response body
        """
        ...

    def scroll(self, scroll_id: str, duration: str) -> Dict[str, Any]:
        """Fetch the next page of a scrolled search."""
        ...

    def bulk(self, actions: List[Dict[str, Any]]) -> Any:
        """Submit a batch of bulk actions as a single request."""
        ...

    def get_alias_targets(self, alias: str) -> Dict[str, Any]:
        """
        Return the concrete indices bound to an alias.

        Returns:
            Mapping of index name to alias metadata

        Raises:
            SearchNotFoundError: If the alias does not exist
        """
        ...

    def update_aliases(self, actions: List[Dict[str, Any]]) -> Any:
        """Apply a list of alias actions atomically."""
        ...

    def create_index(self, name: str, mappings: Dict[str, Any]) -> Any:
        """Create an index with the given mappings."""
        ...

    def put_mapping(
        self, name: str, type_name: Optional[str], mappings: Dict[str, Any]
    ) -> Any:
        """Update the mappings of an existing index."""
        ...


class IRowSource(Protocol):
    """
    Read rows from a relational table.

    Also exposes the table's lifecycle events so index updates can follow
    row mutations.
    """

    @property
    def collection_name(self) -> str:
        """Natural name of the table."""
        ...

    def primary_key(self, row: Any) -> Sequence[Any]:
        """Primary key values of a row, in key definition order."""
        ...

    def values(self, row: Any) -> Dict[str, Any]:
        """Current column values of a row."""
        ...

    def each_page(self, size: int) -> Iterator[List[Any]]:
        """Yield the table's rows in pages of at most ``size`` rows."""
        ...

    def columns(self) -> Dict[str, ColumnDescriptor]:
        """Column descriptors keyed by column name."""
        ...

    def build_row(self, data: Dict[str, Any]) -> Any:
        """Construct an (unsaved) row from field values."""
        ...

    def subscribe(
        self, on_create: RowCallback, on_update: RowCallback, on_destroy: RowCallback
    ) -> None:
        """Register lifecycle callbacks."""
        ...

    def unsubscribe(self) -> None:
        """Remove previously registered lifecycle callbacks."""
        ...
