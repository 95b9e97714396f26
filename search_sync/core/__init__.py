"""Core interfaces, models and errors for search sync."""

from search_sync.core.errors import (
    SAFE_ERRORS,
    SearchNotFoundError,
    SearchRequestError,
    SearchSyncError,
    SearchTransportError,
)
from search_sync.core.interfaces import (
    IRowSource,
    ISearchClient,
    PayloadBuilder,
    RowBuilder,
)
from search_sync.core.models import (
    ColumnDescriptor,
    DocumentRef,
    FieldMapping,
    SyncConfig,
)

__all__ = [
    "IRowSource",
    "ISearchClient",
    "PayloadBuilder",
    "RowBuilder",
    "ColumnDescriptor",
    "DocumentRef",
    "FieldMapping",
    "SyncConfig",
    "SAFE_ERRORS",
    "SearchSyncError",
    "SearchNotFoundError",
    "SearchTransportError",
    "SearchRequestError",
]
