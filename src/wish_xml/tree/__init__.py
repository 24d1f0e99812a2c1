"""Tree layer for wish-xml.

The DOM-style node model with its attribute store and tree-wide search.
"""

from .node import AttributeStore, ContentKind, Node

__all__ = [
    "AttributeStore",
    "ContentKind",
    "Node",
]
