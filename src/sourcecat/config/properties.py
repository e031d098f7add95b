"""Key names used in serialized source configuration trees."""

OBJECT_TYPE_NAME = "@type"

SOURCE_SPEC = "spec"
ENCODING = "encoding"
SOURCE_PRODUCES_SORTED_KEYS = "produces_sorted_keys"
SOURCE_IS_INFINITE = "is_infinite"
SOURCE_ESTIMATED_SIZE_BYTES = "estimated_size_bytes"
SOURCE_DOES_NOT_NEED_SPLITTING = "does_not_need_splitting"

CONCAT_SOURCE_SOURCES = "sources"
CONCAT_SOURCE_BASE_SPECS = "base_specs"

__all__ = [
    "CONCAT_SOURCE_BASE_SPECS",
    "CONCAT_SOURCE_SOURCES",
    "ENCODING",
    "OBJECT_TYPE_NAME",
    "SOURCE_DOES_NOT_NEED_SPLITTING",
    "SOURCE_ESTIMATED_SIZE_BYTES",
    "SOURCE_IS_INFINITE",
    "SOURCE_PRODUCES_SORTED_KEYS",
    "SOURCE_SPEC",
]
