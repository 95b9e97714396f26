"""
Error taxonomy for search engine calls.

Adapters translate client-specific exceptions into these types so the
orchestrator can decide what to swallow without knowing the client.
"""


class SearchSyncError(Exception):
    """Base class for all search sync failures."""


class SearchNotFoundError(SearchSyncError):
    """The target index, alias or document does not exist."""


class SearchTransportError(SearchSyncError):
    """The search engine could not be reached or failed to answer."""


class SearchRequestError(SearchSyncError):
    """The search engine rejected the request (bad query, mapping conflict...)."""


# Failures the safe entry points turn into empty results
SAFE_ERRORS = (SearchNotFoundError, SearchTransportError)
