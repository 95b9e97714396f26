"""
Search execution coordinator.

Runs calls through an injected search client and decides which failures
are turned into empty results.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from search_sync.core.errors import SAFE_ERRORS
from search_sync.core.interfaces import ISearchClient, RowBuilder
from search_sync.execution.result import SearchResult

T = TypeVar("T")


class SearchExecutor:
    """
    Coordinates search client calls.

    Wraps a search client and provides the result wrapping and the "safe"
    error handling shared by every entry point of the orchestrator.
    """

    def __init__(
        self,
        client: ISearchClient,
        row_builder: Optional[RowBuilder] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize search executor.

        Args:
            client: Search client implementation
            row_builder: Builds records from hits; raw hits are kept if None
            logger: Logger for swallowed failures
        """
        self.client = client
        self.row_builder = row_builder
        self.logger = logger or logging.getLogger(__name__)

    def search(
        self, index: str, type_name: Optional[str], params: Dict[str, Any]
    ) -> SearchResult:
        response = self.client.search(index, type_name, params)
        return SearchResult(response, self.row_builder)

    def scroll(self, scroll_id: str, duration: str) -> SearchResult:
        response = self.client.scroll(scroll_id, duration)
        return SearchResult(response, self.row_builder)

    def call_safe(
        self,
        operation: Callable[..., T],
        *args: Any,
        default: Any = None,
        errors: Tuple[Type[Exception], ...] = SAFE_ERRORS,
        **kwargs: Any,
    ) -> Optional[T]:
        """
        Run an operation, turning not-found and transport failures into a default.

        Args:
            operation: Callable to run
            *args: Positional arguments for the callable
            default: Value returned when a failure is swallowed
            errors: Failures to swallow
            **kwargs: Keyword arguments for the callable

        Returns:
            The operation's result, or ``default`` on a swallowed failure
        """
        try:
            return operation(*args, **kwargs)
        except errors as e:
            self.logger.warning(f"Search engine call failed: {e}")
            return default
