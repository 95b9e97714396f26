"""Column type mapping and index mapping generation."""

from search_sync.schema.type_mappings import TypeMapper, build_index_mapping, map_column

__all__ = ["TypeMapper", "build_index_mapping", "map_column"]
