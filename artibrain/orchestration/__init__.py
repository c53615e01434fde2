"""
Orchestration - content lifecycle.
"""

from artibrain.orchestration.publication import (
    ContentItem,
    initial_item,
    is_publicly_visible,
    parse_status,
    public_visibility_clause,
    transition,
)

__all__ = [
    "ContentItem",
    "initial_item",
    "is_publicly_visible",
    "parse_status",
    "public_visibility_clause",
    "transition",
]
