"""
Shared data models for the search sync system.
"""

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


PRODUCTION_ENVIRONMENT = "production"


class ColumnDescriptor(BaseModel):
    """Describes one relational column for field mapping generation."""

    model_config = ConfigDict(frozen=True)

    type: Optional[str] = None  # logical type: integer, string, text, datetime...
    db_type: Optional[str] = None  # raw database type, lower-cased


class FieldMapping(BaseModel):
    """A single search field definition."""

    model_config = ConfigDict(frozen=True)

    type: str
    format: Optional[str] = None

    def to_mapping(self) -> Dict[str, Any]:
        """Return the mapping entry as sent to the search engine."""
        return self.model_dump(exclude_none=True)


class DocumentRef(BaseModel):
    """Location of one document: index, optional type and id."""

    model_config = ConfigDict(frozen=True)

    index: str
    type_name: Optional[str] = None
    id: Any = None


class SyncConfig(BaseModel):
    """
    Per-model synchronization settings.

    Set once when the orchestrator is built. ``index`` falls back to the
    row source's collection name when left empty.
    """

    model_config = ConfigDict(frozen=True)

    index: Optional[str] = None
    type_name: Optional[str] = None
    client_options: Dict[str, Any] = Field(default_factory=dict)
    environment: str = Field(
        default_factory=lambda: os.getenv("SEARCH_SYNC_ENV", PRODUCTION_ENVIRONMENT)
    )

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION_ENVIRONMENT
