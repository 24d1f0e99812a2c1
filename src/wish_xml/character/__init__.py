"""Character layer for wish-xml.

Provides the push-back reader that feeds decoded characters to the parser
with line-ending normalisation and position tracking.
"""

from .reader import EOF, PushbackReader

__all__ = [
    "EOF",
    "PushbackReader",
]
