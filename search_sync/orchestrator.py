"""
Sync orchestrator - main entry point.

Keeps a search index in step with a relational table and gives query and
scroll access back into the table's object model.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from search_sync.core.errors import SearchNotFoundError, SearchRequestError, SearchSyncError
from search_sync.core.interfaces import IRowSource, ISearchClient, PayloadBuilder
from search_sync.core.models import ColumnDescriptor, DocumentRef, SyncConfig
from search_sync.execution.executor import SearchExecutor
from search_sync.execution.result import SearchResult
from search_sync.indexing.bulk import BulkImporter
from search_sync.indexing.document import document_id, indexed_payload
from search_sync.schema.type_mappings import build_index_mapping

TIMESTAMP_FORMAT = "%Y%m%d.%H%M%S"

# Row saves must go through whatever the search engine answers
HOOK_ERRORS = (SearchSyncError,)

Query = Union[str, Dict[str, Any], SearchResult]


class SyncOrchestrator:
    """
    Mirrors one table into one search index.

    Coordinates document identity, payload building, single-document and
    bulk writes, versioned reindexing with alias cutover, and searching.
    """

    def __init__(
        self,
        search_client: ISearchClient,
        row_source: IRowSource,
        config: Optional[SyncConfig] = None,
        payload_builder: Optional[PayloadBuilder] = None,
        convert_hits: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize sync orchestrator.

        Args:
            search_client: Search engine client implementation
            row_source: Table the documents are built from
            config: Index settings; the index defaults to the table name
            payload_builder: Builds the document body for a row. Defaults to
                the row's column values with timestamps rendered as strings.
            convert_hits: If True, search hits are built into rows
            logger: Logger for warnings and progress messages
        """
        config = config or SyncConfig()
        if not config.index:
            config = config.model_copy(
                update={"index": row_source.collection_name.lower()}
            )

        self.config = config
        self.search_client = search_client
        self.row_source = row_source
        self.payload_builder = payload_builder or self.default_payload
        self.logger = logger or logging.getLogger(__name__)

        self.executor = SearchExecutor(
            search_client,
            row_builder=row_source.build_row if convert_hits else None,
            logger=self.logger,
        )

    @classmethod
    def from_sqlalchemy(
        cls,
        model: type,
        session_factory: Callable,
        index: Optional[str] = None,
        type_name: Optional[str] = None,
        es_host: Optional[str] = None,
        client_options: Optional[Dict[str, Any]] = None,
        payload_builder: Optional[PayloadBuilder] = None,
        attach: bool = True,
    ) -> "SyncOrchestrator":
        """
        Create orchestrator for a SQLAlchemy model and Elasticsearch.

        Args:
            model: Mapped class to mirror
            session_factory: Callable returning a new Session
            index: Index name; defaults to the table name
            type_name: Optional document type
            es_host: Elasticsearch host URL
            client_options: Extra options for the Elasticsearch client
            payload_builder: Custom document body builder
            attach: If True, hook the model's insert/update/delete events

        Returns:
            Configured SyncOrchestrator
        """
        from search_sync.adapters.elasticsearch import ESSearchClient
        from search_sync.adapters.sqlalchemy import SQLAlchemyRowSource

        config = SyncConfig(
            index=index,
            type_name=type_name,
            client_options=client_options or {},
        )
        orchestrator = cls(
            search_client=ESSearchClient(es_host=es_host, **config.client_options),
            row_source=SQLAlchemyRowSource(model, session_factory),
            config=config,
            payload_builder=payload_builder,
        )
        if attach:
            orchestrator.attach()
        return orchestrator

    @property
    def index(self) -> str:
        return self.config.index

    @property
    def type_name(self) -> Optional[str]:
        return self.config.type_name

    # Documents

    def default_payload(self, row: Any) -> Dict[str, Any]:
        """Document body built from the row's current column values."""
        return indexed_payload(self.row_source.values(row))

    def document_ref(
        self,
        row: Any,
        index: Optional[str] = None,
        type_name: Optional[str] = None,
        doc_id: Any = None,
    ) -> DocumentRef:
        """
        Determine where a row's document lives.

        Args:
            row: Row to locate
            index: Index override
            type_name: Type override
            doc_id: Id override

        Returns:
            Index, type and id of the document
        """
        return DocumentRef(
            index=index or self.index,
            type_name=type_name or self.type_name,
            id=doc_id if doc_id is not None else document_id(self.row_source.primary_key(row)),
        )

    def index_document(self, row: Any, **overrides: Any) -> Any:
        """Create or replace the row's document. Errors propagate."""
        ref = self.document_ref(row, **overrides)
        return self.search_client.upsert(ref, self.payload_builder(row))

    def destroy_document(self, row: Any, **overrides: Any) -> Any:
        """Remove the row's document. Errors propagate."""
        return self.search_client.delete(self.document_ref(row, **overrides))

    # Lifecycle hooks

    def on_create(self, row: Any) -> None:
        self.executor.call_safe(self.index_document, row, errors=HOOK_ERRORS)

    def on_update(self, row: Any) -> None:
        self.executor.call_safe(self.index_document, row, errors=HOOK_ERRORS)

    def on_destroy(self, row: Any) -> None:
        self.executor.call_safe(self.destroy_document, row, errors=HOOK_ERRORS)

    def attach(self) -> None:
        """Follow the row source's create, update and delete events."""
        self.row_source.subscribe(self.on_create, self.on_update, self.on_destroy)

    def detach(self) -> None:
        self.row_source.unsubscribe()

    # Searching

    def search_unsafe(self, query: Query = "", **options: Any) -> Optional[SearchResult]:
        """
        Search the model's index without catching errors.

        Args:
            query: Query string, structured query body, or a previous result
                to continue scrolling
            **options: ``index`` and ``type_name`` overrides, ``scroll``
                duration and any other search parameter

        Returns:
            Wrapped search response
        """
        if isinstance(query, SearchResult):
            return self.scroll_unsafe(query, options.get("scroll"))

        params = {"index": self.index, "type_name": self.type_name}
        params.update(options)
        index = params.pop("index")
        type_name = params.pop("type_name")

        if isinstance(query, str):
            if query:
                params["q"] = query
        else:
            params["body"] = query

        return self.executor.search(index, type_name, params)

    def search(self, query: Query = "", **options: Any) -> Optional[SearchResult]:
        """
        Search the model's index.

        Not-found and transport failures give an empty result instead of
        an error. See ``search_unsafe`` for the arguments.
        """
        return self.executor.call_safe(
            self.search_unsafe, query, default=SearchResult(), **options
        )

    def scroll_unsafe(
        self, scroll: Union[str, SearchResult, None], duration: Optional[str] = None
    ) -> Optional[SearchResult]:
        """
        Fetch the next page of a scroll without catching errors.

        Args:
            scroll: Scroll id, or the previous result
            duration: How long to keep the scroll context alive

        Returns:
            The next page, or None if there is no scroll to continue
        """
        scroll_id = scroll.scroll_id if isinstance(scroll, SearchResult) else scroll
        if not scroll_id:
            return None
        return self.executor.scroll(scroll_id, duration or "1m")

    def scroll(
        self, scroll: Union[str, SearchResult, None], duration: Optional[str] = None
    ) -> Optional[SearchResult]:
        """Fetch the next page of a scroll, giving an empty result on failure."""
        return self.executor.call_safe(
            self.scroll_unsafe, scroll, duration, default=SearchResult()
        )

    # Bulk indexing

    def bulk_import(
        self,
        index: Optional[str] = None,
        row_source: Optional[IRowSource] = None,
        batch_size: int = 100,
    ) -> None:
        """
        Add or update every row in the index.

        Writes to the index currently behind the alias unless told otherwise.
        Use ``reindex`` to build a fresh index and switch the alias to it.

        Args:
            index: Target index; defaults to the latest aliased index, then
                the configured index
            row_source: Rows to import; defaults to the whole table
            batch_size: Rows per bulk request
        """
        index_name = index or self.resolve_latest_index() or self.index
        importer = BulkImporter(
            self.search_client,
            row_source or self.row_source,
            self.payload_builder,
            type_name=self.type_name,
            logger=self.logger,
        )
        importer.run(index_name, batch_size=batch_size)

    def reindex(
        self,
        index: Optional[str] = None,
        row_source: Optional[IRowSource] = None,
        batch_size: int = 100,
    ) -> None:
        """
        Build a new timestamped index and point the alias at it.

        The alias only moves once the import has finished; a failed import
        leaves the previous index live.
        """
        index_name = index or self.timestamped_index_name()
        self.bulk_import(index=index_name, row_source=row_source, batch_size=batch_size)
        self.alias_swap(index_name)

    def alias_swap(self, new_index: str) -> None:
        """
        Atomically move the alias from all previous indices to ``new_index``.

        The removal is left out while the alias does not exist yet, since
        Elasticsearch rejects removing a missing alias.
        """
        actions = [{"add": {"index": new_index, "alias": self.index}}]
        if self.resolve_latest_index() is not None:
            actions.insert(0, {"remove": {"index": f"{self.index}*", "alias": self.index}})
        self.search_client.update_aliases(actions)
        self.logger.info(f"Alias {self.index} now points to {new_index}")

    def resolve_latest_index(self) -> Optional[str]:
        """
        Find the index currently behind the alias.

        Returns:
            Index name, or None if the alias does not exist
        """
        try:
            targets = self.search_client.get_alias_targets(self.index)
        except SearchNotFoundError:
            return None
        return sorted(targets)[0] if targets else None

    def timestamped_index_name(self, now: Optional[datetime] = None) -> str:
        """
        Generate a versioned index name.

        Produces names like ``documents-20191004.123456``, with the
        environment inserted before the timestamp outside production.
        """
        parts = [self.index]
        if not self.config.is_production:
            parts.append(self.config.environment)
        parts.append((now or datetime.now()).strftime(TIMESTAMP_FORMAT))
        return "-".join(parts)

    import_all = bulk_import
    reindex_all = reindex
    latest_index_name = resolve_latest_index

    # Mappings

    def create_or_update_mapping(
        self,
        columns: Optional[Dict[str, ColumnDescriptor]] = None,
        index: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create an index with mappings built from the table's columns.

        Falls back to updating the mappings when the index already exists.
        The configured name is used as an alias by ``reindex``, so pass the
        versioned index name when preparing a reindex.

        Args:
            columns: Column descriptors; defaults to the row source's columns
            index: Index to create or update; defaults to the configured index

        Returns:
            The generated mapping document
        """
        mapping = build_index_mapping(columns or self.row_source.columns())
        body = {self.type_name: mapping} if self.type_name else mapping
        index_name = index or self.index

        try:
            self.search_client.create_index(index_name, body)
            self.logger.info(f"Index {index_name} created")
        except SearchRequestError:
            self.search_client.put_mapping(index_name, self.type_name, body)
            self.logger.info(f"Mappings for {index_name} updated")
        return mapping
