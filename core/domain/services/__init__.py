"""Pure domain services."""

from .attribute_inference import (
    UNCATEGORIZED,
    PartialAttributes,
    contains_term,
    infer_attributes,
    infer_category,
    infer_condition,
    infer_format,
    is_music_product,
    looks_like_release,
    merge_with_inferred,
    search_query_for,
)

__all__ = [
    "UNCATEGORIZED",
    "PartialAttributes",
    "contains_term",
    "infer_attributes",
    "infer_category",
    "infer_condition",
    "infer_format",
    "is_music_product",
    "looks_like_release",
    "merge_with_inferred",
    "search_query_for",
]
