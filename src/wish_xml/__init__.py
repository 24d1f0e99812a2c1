"""WiSH XML.

A small DOM-style XML library: a node tree with attributes, a recursive
state-machine parser and an indenting serializer.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), to_string()
- Level 2: Configured codec - XMLCodec class with XMLConfig
- Level 3: Building blocks - PushbackReader, XMLParser, XMLSerializer
"""

__version__ = "0.1.0"
__author__ = "WiSH XML Team"

# Level 1: Simple functions
# Level 2: Configured codec
from .api import (
    XMLCodec,
    parse,
    parse_file,
    parse_string,
    serialize,
    to_string,
    write_file,
)

# Level 3: Building blocks
from .character import PushbackReader
from .parsing import XMLParser
from .serialization import XMLSerializer

# Configuration and errors
from .shared.config import XMLConfig
from .shared.errors import (
    XMLConversionError,
    XMLEncodingError,
    XMLError,
    XMLTreeError,
)

# Data model
from .tree import AttributeStore, ContentKind, Node

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_string",
    "parse_file",
    "serialize",
    "to_string",
    "write_file",

    # Level 2: Configured codec
    "XMLCodec",
    "XMLConfig",

    # Level 3: Building blocks
    "PushbackReader",
    "XMLParser",
    "XMLSerializer",

    # Data model
    "AttributeStore",
    "ContentKind",
    "Node",

    # Errors
    "XMLConversionError",
    "XMLEncodingError",
    "XMLError",
    "XMLTreeError",
]
