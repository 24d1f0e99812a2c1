"""Serialization layer for wish-xml.

Renders node trees back to indented, entity-escaped XML text.
"""

from .writer import (
    GENERATOR_COMMENT,
    XML_DECLARATION,
    XMLSerializer,
    escape,
    format_attributes,
    serialize,
    to_string,
    write_file,
)

__all__ = [
    "GENERATOR_COMMENT",
    "XML_DECLARATION",
    "XMLSerializer",
    "escape",
    "format_attributes",
    "serialize",
    "to_string",
    "write_file",
]
