"""Parsing layer for wish-xml.

The recursive state machine that turns a character stream into a node tree.
"""

from .parser import ENTITIES, ParserState, XMLParser, parse_reader

__all__ = [
    "ENTITIES",
    "ParserState",
    "XMLParser",
    "parse_reader",
]
