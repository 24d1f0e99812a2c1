"""Public API layer for wish-xml."""

from .parser import (
    XMLCodec,
    parse,
    parse_file,
    parse_string,
    serialize,
    to_string,
    write_file,
)

__all__ = [
    "XMLCodec",
    "parse",
    "parse_file",
    "parse_string",
    "serialize",
    "to_string",
    "write_file",
]
