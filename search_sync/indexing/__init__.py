"""Document identity, payload and bulk indexing."""

from search_sync.indexing.bulk import BulkImporter, upsert_action
from search_sync.indexing.document import (
    document_id,
    document_ref,
    format_timestamp,
    indexed_payload,
)

__all__ = [
    "BulkImporter",
    "upsert_action",
    "document_id",
    "document_ref",
    "format_timestamp",
    "indexed_payload",
]
