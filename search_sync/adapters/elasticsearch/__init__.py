"""Elasticsearch adapter for search sync."""

from search_sync.adapters.elasticsearch.client import ESSearchClient

__all__ = ["ESSearchClient"]
