"""
Elasticsearch search client.

Implements ISearchClient on top of the official Elasticsearch client.
"""

import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from elasticsearch import ApiError, Elasticsearch, NotFoundError, TransportError, helpers
from elasticsearch.helpers import BulkIndexError

from search_sync.core.errors import (
    SearchNotFoundError,
    SearchRequestError,
    SearchTransportError,
)
from search_sync.core.models import DocumentRef


DEFAULT_ES_HOST = "http://localhost:9200"


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise Elasticsearch client exceptions as search sync errors."""
    try:
        yield
    except BulkIndexError as e:
        raise SearchRequestError(f"{e}: {e.errors[:3]}") from e
    except NotFoundError as e:
        raise SearchNotFoundError(str(e)) from e
    except ApiError as e:
        # Server-side failures are treated like an unreachable cluster
        if e.meta.status >= 500:
            raise SearchTransportError(str(e)) from e
        raise SearchRequestError(str(e)) from e
    except TransportError as e:
        raise SearchTransportError(str(e)) from e


class ESSearchClient:
    """
    Talks to an Elasticsearch cluster.

    Implements the ISearchClient interface for Elasticsearch. Document types
    are only sent through bulk action metadata and mapping bodies; typeless
    clusters should leave the type name unset.
    """

    def __init__(
        self,
        es_host: Optional[str] = None,
        es_client: Optional[Elasticsearch] = None,
        **client_options: Any,
    ):
        """
        Initialize Elasticsearch search client.

        Args:
            es_host: Elasticsearch host URL. If not provided, reads from the
                ELASTICSEARCH_URL environment variable.
            es_client: Existing client to use instead of creating one
            **client_options: Extra options for the Elasticsearch client
        """
        self.es_host = es_host or os.getenv("ELASTICSEARCH_URL", DEFAULT_ES_HOST)
        self.es_client = es_client or Elasticsearch(hosts=[self.es_host], **client_options)

    def upsert(self, ref: DocumentRef, payload: Dict[str, Any]) -> Any:
        with translate_errors():
            return self.es_client.index(
                index=ref.index, id=_doc_id(ref.id), document=payload
            )

    def delete(self, ref: DocumentRef) -> Any:
        with translate_errors():
            return self.es_client.delete(index=ref.index, id=_doc_id(ref.id))

    def search(
        self, index: str, type_name: Optional[str], params: Dict[str, Any]
    ) -> Dict[str, Any]:
        with translate_errors():
            response = self.es_client.search(index=index, **params)
        return response.body

    def scroll(self, scroll_id: str, duration: str) -> Dict[str, Any]:
        with translate_errors():
            response = self.es_client.scroll(scroll_id=scroll_id, scroll=duration)
        return response.body

    def bulk(self, actions: List[Dict[str, Any]]) -> Any:
        """
        Submit bulk actions in a single request.

        Raises:
            SearchRequestError: If any action in the batch failed
        """
        with translate_errors():
            return helpers.bulk(self.es_client, actions, chunk_size=max(len(actions), 1))

    def get_alias_targets(self, alias: str) -> Dict[str, Any]:
        with translate_errors():
            response = self.es_client.indices.get_alias(name=alias)
        return response.body

    def update_aliases(self, actions: List[Dict[str, Any]]) -> Any:
        with translate_errors():
            return self.es_client.indices.update_aliases(actions=actions)

    def create_index(self, name: str, mappings: Dict[str, Any]) -> Any:
        with translate_errors():
            return self.es_client.indices.create(index=name, mappings=mappings)

    def put_mapping(
        self, name: str, type_name: Optional[str], mappings: Dict[str, Any]
    ) -> Any:
        with translate_errors():
            return self.es_client.indices.put_mapping(index=name, body=mappings)


def _doc_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)
