"""
Document identity and payload derivation.

Turns a row's primary key and column values into the id and body of the
search document that mirrors it.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from search_sync.core.models import DocumentRef


# Separator between composite primary key components in document ids
ID_SEPARATOR = "_"


def document_id(primary_key: Sequence[Any]) -> Any:
    """
    Derive the document id from primary key values.

    A single-column key is returned as-is. Composite keys are joined with
    ``_`` in key definition order; missing components become empty strings.

    Args:
        primary_key: Primary key values in key definition order

    Returns:
        Document id, or None when the key is missing
    """
    if primary_key is None:
        return None
    if len(primary_key) == 1:
        return primary_key[0]
    return ID_SEPARATOR.join("" if part is None else str(part) for part in primary_key)


def document_ref(
    primary_key: Sequence[Any], index: str, type_name: Optional[str] = None
) -> DocumentRef:
    """Build the full location of the document for a primary key."""
    return DocumentRef(index=index, type_name=type_name, id=document_id(primary_key))


def format_timestamp(value: datetime) -> str:
    """
    Render a timestamp as ISO-8601 with a UTC offset.

    Naive timestamps are taken to be local time.
    """
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat(timespec="seconds")


def indexed_payload(values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Default document body for a row.

    Copies the row's column values, rendering timestamps as strings.
    """
    return {
        key: format_timestamp(value) if isinstance(value, datetime) else value
        for key, value in values.items()
    }
