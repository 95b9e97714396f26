"""
Bulk action batching.

Streams rows from a row source and submits them to the search client as
upsert actions, one bulk request per page.
"""

import logging
from typing import Any, Dict, List, Optional

from search_sync.core.interfaces import IRowSource, ISearchClient, PayloadBuilder
from search_sync.core.models import DocumentRef
from search_sync.indexing.document import document_id


def upsert_action(ref: DocumentRef, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a bulk action that creates the document or updates it in place.

    Args:
        ref: Target document
        payload: Document body

    Returns:
        Bulk action in ``elasticsearch.helpers`` form
    """
    action = {
        "_op_type": "update",
        "_index": ref.index,
        "_id": ref.id,
        "doc": payload,
        "doc_as_upsert": True,
    }
    if ref.type_name:
        action["_type"] = ref.type_name
    return action


class BulkImporter:
    """
    Copies every row of a row source into one index.

    Batches are flushed in row source order; any failure stops the import.
    """

    def __init__(
        self,
        client: ISearchClient,
        row_source: IRowSource,
        payload_builder: PayloadBuilder,
        type_name: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize bulk importer.

        Args:
            client: Search client that receives the bulk requests
            row_source: Rows to import
            payload_builder: Builds the document body for a row
            type_name: Optional document type for every action
            logger: Logger for progress messages
        """
        self.client = client
        self.row_source = row_source
        self.payload_builder = payload_builder
        self.type_name = type_name
        self.logger = logger or logging.getLogger(__name__)

    def build_actions(self, index: str, rows: List[Any]) -> List[Dict[str, Any]]:
        actions = []
        for row in rows:
            ref = DocumentRef(
                index=index,
                type_name=self.type_name,
                id=document_id(self.row_source.primary_key(row)),
            )
            actions.append(upsert_action(ref, self.payload_builder(row)))
        return actions

    def run(self, index: str, batch_size: int = 100) -> int:
        """
        Import all rows into an index.

        Args:
            index: Target index name
            batch_size: Rows per page and per bulk request

        Returns:
            Number of documents submitted
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        total = 0
        batches = 0
        for page in self.row_source.each_page(batch_size):
            if not page:
                continue
            actions = self.build_actions(index, page)
            self.client.bulk(actions)
            batches += 1
            total += len(actions)
            self.logger.info(f"Indexed batch {batches} ({len(actions)} documents) into {index}")

        self.logger.info(f"Imported {total} documents into {index} in {batches} batches")
        return total
