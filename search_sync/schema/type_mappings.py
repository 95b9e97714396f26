"""
Type mapping utilities for converting database columns to search fields.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Type

from search_sync.core.models import ColumnDescriptor, FieldMapping


class TypeMapper:
    """Maps relational column types to search field types."""

    # Logical column type -> search field type
    FIELD_TYPE_MAP = {
        "integer": "integer",
        "string": "keyword",
        "text": "text",
        "timestamp": "date",
        "datetime": "date",
        "date": "date",
        "boolean": "boolean",
        "float": "float",
    }

    DEFAULT_FIELD_TYPE = "text"

    # Raw database types that change the mapping
    TEXT_DB_TYPE = "text"
    TIMESTAMP_DB_TYPE = "timestamp"
    TIMESTAMP_FORMAT = "epoch_second"

    # Python value type -> logical column type; order matters, bool is an int
    PYTHON_TYPE_MAP = (
        (bool, "boolean"),
        (int, "integer"),
        (float, "float"),
        (Decimal, "float"),
        (str, "string"),
        (datetime, "datetime"),
        (date, "date"),
    )

    @classmethod
    def from_column(cls, name: str, descriptor: ColumnDescriptor) -> FieldMapping:
        """
        Get the search field mapping for a column.

        Never fails: unknown logical types map to the text field type.

        Args:
            name: Column name
            descriptor: Logical and raw database type of the column

        Returns:
            Field mapping for the column
        """
        return FieldMapping(
            type=cls.field_type(descriptor),
            format=cls._format(descriptor),
        )

    @classmethod
    def field_type(cls, descriptor: ColumnDescriptor) -> str:
        check = descriptor.type
        if descriptor.db_type == cls.TEXT_DB_TYPE:
            check = "text"
        return cls.FIELD_TYPE_MAP.get(check, cls.DEFAULT_FIELD_TYPE)

    @classmethod
    def logical_type(cls, python_type: Optional[Type]) -> Optional[str]:
        """
        Get the logical column type for a Python value type.

        Args:
            python_type: Python type stored in the column

        Returns:
            Logical type name, or None if the type is not recognized
        """
        if python_type is None:
            return None
        for candidate, logical in cls.PYTHON_TYPE_MAP:
            if issubclass(python_type, candidate):
                return logical
        return None

    @classmethod
    def _format(cls, descriptor: ColumnDescriptor) -> Optional[str]:
        if descriptor.db_type == cls.TIMESTAMP_DB_TYPE:
            return cls.TIMESTAMP_FORMAT
        return None


def map_column(name: str, descriptor: ColumnDescriptor) -> FieldMapping:
    """Map a single column to its search field definition."""
    return TypeMapper.from_column(name, descriptor)


def build_index_mapping(columns: Mapping[str, ColumnDescriptor]) -> Dict[str, Any]:
    """
    Build a complete index mapping document from column descriptors.

    Args:
        columns: Column descriptors keyed by column name

    Returns:
        Mapping document of the form ``{"properties": {field: {...}}}``
    """
    return {
        "properties": {
            name: map_column(name, descriptor).to_mapping()
            for name, descriptor in columns.items()
        }
    }
