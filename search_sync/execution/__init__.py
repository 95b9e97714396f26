"""Search execution and result wrapping."""

from search_sync.execution.executor import SearchExecutor
from search_sync.execution.result import SearchResult

__all__ = ["SearchExecutor", "SearchResult"]
