"""
Search Sync - keep a search index in step with a relational table.

Main entry point for creating sync orchestrators for mapped models.
"""

from search_sync.execution.result import SearchResult
from search_sync.orchestrator import SyncOrchestrator

__all__ = ["SyncOrchestrator", "SearchResult"]
