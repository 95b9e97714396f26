"""SQLAlchemy adapter for search sync."""

from search_sync.adapters.sqlalchemy.row_source import SQLAlchemyRowSource

__all__ = ["SQLAlchemyRowSource"]
