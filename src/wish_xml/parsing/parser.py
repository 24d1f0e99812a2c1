"""Recursive state-machine XML parser.

The parser reads one character at a time from a :class:`PushbackReader`
and fills in :class:`Node` objects. Each call of :meth:`XMLParser._read_element`
handles exactly one element: its open tag, its content and its close tag
(or the ``/>`` of a self-closing tag). When a nested element starts, the
``<`` and the following character are pushed back and the method recurses
on a fresh, unnamed child, so the call stack doubles as the element stack.

Every invocation keeps its own state-history stack. Entering a nested
context (entity, comment, CDATA, tag body) pushes the state to resume
afterwards; popping an empty history resumes in ``PRE``.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from wish_xml.character.reader import EOF, PushbackReader
from wish_xml.shared.config import XMLConfig
from wish_xml.shared.errors import XMLEncodingError
from wish_xml.shared.logging import get_logger
from wish_xml.tree.node import Node

# Predefined entities; "&#NN;" decimal references are handled separately.
ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}

QUOTE_CHARS = ('"', "'")
# Whitespace that is folded to a single space inside attribute values.
ATTRIBUTE_WHITESPACE = " \r\n\t"

COMMENT_PREFIX = "!-"
CDATA_PREFIX = "![CDATA"
DOCTYPE_PREFIX = "!DOCTYP"
COMMENT_SUFFIX = "--"
CDATA_SUFFIX = "]]"


class ParserState(Enum):
    """States of the per-element scanner."""

    PRE = auto()                # Outside any tag, waiting for "<"
    TEXT = auto()               # Element content
    ENTITY = auto()             # Between "&" and ";"
    OPEN_TAG = auto()           # Reading the tag name after "<"
    CLOSE_TAG = auto()          # Reading the name after "</"
    START_TAG = auto()          # Character right after "<"
    ATTRIBUTE_LVALUE = auto()   # Attribute name
    ATTRIBUTE_EQUAL = auto()    # Between attribute name and "="
    ATTRIBUTE_RVALUE = auto()   # After "=", waiting for the opening quote
    QUOTE = auto()              # Inside a quoted attribute value
    IN_TAG = auto()             # Between attributes
    SINGLE_TAG = auto()         # After "/" in "<name/>"
    COMMENT = auto()            # Inside "<!-- ... -->"
    DONE = auto()               # Element finished
    DOCTYPE = auto()            # Inside "<!DOCTYPE ...>" or "<? ... ?>"
    CDATA = auto()              # Inside "<![CDATA[ ... ]]>"


@dataclass
class _ElementScan:
    """Mutable state of one recursive invocation."""

    node: Node
    depth: int
    state: ParserState = ParserState.PRE
    history: List[ParserState] = field(default_factory=list)
    text: str = ""
    entity: str = ""
    attribute_name: str = ""
    quote_char: str = '"'
    finished: bool = False
    # Set when an unnamed placeholder met its parent's close tag.
    handed_back: bool = False

    def push(self, state: ParserState) -> None:
        self.history.append(state)

    def pop(self) -> ParserState:
        if self.history:
            return self.history.pop()
        return ParserState.PRE


Handler = Callable[[_ElementScan, str], None]


class XMLParser:
    """Builds a :class:`Node` tree from a character stream.

    A parser instance is bound to one reader and is used for one document.

    Args:
        reader: Source of characters
        config: Configuration (nesting limit); defaults to ``XMLConfig()``
        correlation_id: Optional ID attached to debug log records

    Example:
        >>> reader = PushbackReader.from_string('<root><a x="1">hi</a></root>')
        >>> root = XMLParser(reader).parse()
        >>> root.get_element(0).attributes.find("x")
        '1'
    """

    def __init__(
        self,
        reader: PushbackReader,
        config: Optional[XMLConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.reader = reader
        self.config = config or XMLConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_parser")
        self._handlers: Dict[ParserState, Handler] = {
            ParserState.PRE: self._process_pre,
            ParserState.START_TAG: self._process_start_tag,
            ParserState.OPEN_TAG: self._process_open_tag,
            ParserState.TEXT: self._process_text,
            ParserState.CLOSE_TAG: self._process_close_tag,
            ParserState.IN_TAG: self._process_in_tag,
            ParserState.DONE: self._process_done,
            ParserState.CDATA: self._process_cdata,
            ParserState.COMMENT: self._process_comment,
            ParserState.DOCTYPE: self._process_doctype,
            ParserState.ENTITY: self._process_entity,
            ParserState.SINGLE_TAG: self._process_single_tag,
            ParserState.QUOTE: self._process_quote,
            ParserState.ATTRIBUTE_RVALUE: self._process_attribute_rvalue,
            ParserState.ATTRIBUTE_LVALUE: self._process_attribute_lvalue,
            ParserState.ATTRIBUTE_EQUAL: self._process_attribute_equal,
        }

    def parse(self) -> Node:
        """Read one complete element from the reader and return it.

        Raises:
            XMLEncodingError: On malformed input, with line and column
            XMLTreeError: If the document mixes text and child elements
            OSError: If the underlying stream fails
        """
        root = Node()
        self._read_element(root, 0)
        self.logger.debug(
            "Document parsed",
            extra={
                "root": root.name,
                "characters_read": self.reader.characters_read,
            }
        )
        return root

    def _read_element(self, node: Node, depth: int) -> bool:
        """Populate ``node`` from the reader.

        Returns:
            True if ``node`` turned out to be a placeholder that handed its
            parent's close tag back to the reader
        """
        if depth > self.config.tree.max_depth:
            raise self._error(
                f"Element nesting exceeds maximum depth {self.config.tree.max_depth}"
            )

        scan = _ElementScan(node=node, depth=depth)
        while True:
            char = self.reader.read()
            if char == EOF:
                break
            handler = self._handlers.get(scan.state)
            if handler is None:
                raise self._error("State exception")
            handler(scan, char)
            if scan.finished:
                return scan.handed_back

        if scan.state is ParserState.DONE:
            return False
        raise self._error("Missing end tag")

    def _error(self, message: str) -> XMLEncodingError:
        line, column = self.reader.position
        return XMLEncodingError(message, line, column)

    # State handlers

    def _process_pre(self, scan: _ElementScan, char: str) -> None:
        if char == "<":
            scan.push(ParserState.TEXT)
            scan.state = ParserState.START_TAG

    def _process_start_tag(self, scan: _ElementScan, char: str) -> None:
        scan.state = scan.pop()
        if char == "/":
            scan.push(scan.state)
            scan.state = ParserState.CLOSE_TAG
        elif char == "?":
            scan.state = ParserState.DOCTYPE
        elif scan.node.name is not None:
            # A nested element: give "<" and this character back and let a
            # new invocation read it as its own root.
            self.reader.unread(char)
            self.reader.unread("<")
            child = scan.node.add_element()
            if self._read_element(child, scan.depth + 1):
                self._absorb_placeholder(scan.node, child)
            scan.state = scan.pop()
        else:
            scan.push(scan.state)
            scan.state = ParserState.OPEN_TAG
            scan.text += char

    def _process_open_tag(self, scan: _ElementScan, char: str) -> None:
        if char == ">":
            if scan.node.name is None:
                scan.node.name = scan.text
            else:
                scan.node.add_element(scan.text)
            scan.text = ""
            scan.state = scan.pop()
        elif char == "/":
            scan.state = ParserState.SINGLE_TAG
        elif char == "-" and scan.text == COMMENT_PREFIX:
            scan.text = ""
            scan.state = ParserState.COMMENT
        elif char == "[" and scan.text == CDATA_PREFIX:
            scan.text = ""
            scan.state = ParserState.CDATA
        elif char == "E" and scan.text == DOCTYPE_PREFIX:
            scan.text = ""
            scan.state = ParserState.DOCTYPE
        elif char.isspace():
            scan.node.name = scan.text
            scan.text = ""
            scan.state = ParserState.IN_TAG
        else:
            scan.text += char

    def _process_text(self, scan: _ElementScan, char: str) -> None:
        if char.isspace() and not scan.text:
            return
        if char == "<":
            scan.push(scan.state)
            scan.state = ParserState.START_TAG
            if scan.text:
                scan.node.set_value(scan.text)
                scan.text = ""
        elif char == "&":
            scan.push(scan.state)
            scan.state = ParserState.ENTITY
            scan.entity = ""
        else:
            scan.text += char

    def _process_close_tag(self, scan: _ElementScan, char: str) -> None:
        if char != ">":
            scan.text += char
            return

        scan.state = scan.pop()
        end_tag = scan.text
        if scan.node.name is None and scan.depth > 0:
            self._hand_back_close_tag(end_tag)
            scan.handed_back = True
        elif end_tag != scan.node.name:
            raise self._error(f"Mismatched close tag </{end_tag}>")
        scan.text = ""
        scan.finished = True
        self.logger.debug(
            "Element complete",
            extra={"tag": scan.node.name, "depth": scan.depth}
        )

    def _process_in_tag(self, scan: _ElementScan, char: str) -> None:
        if char == ">":
            scan.state = scan.pop()
        elif char == "/":
            scan.state = ParserState.SINGLE_TAG
        elif char.isspace():
            pass
        else:
            scan.state = ParserState.ATTRIBUTE_LVALUE
            scan.text += char

    def _process_done(self, scan: _ElementScan, char: str) -> None:
        # Unreachable in practice: every element returns from its close tag.
        scan.finished = True

    def _process_cdata(self, scan: _ElementScan, char: str) -> None:
        if char == ">" and scan.text.endswith(CDATA_SUFFIX):
            scan.node.set_value(scan.text[:-len(CDATA_SUFFIX)])
            scan.text = ""
            scan.state = scan.pop()
        else:
            scan.text += char

    def _process_comment(self, scan: _ElementScan, char: str) -> None:
        if char == ">" and scan.text.endswith(COMMENT_SUFFIX):
            scan.text = ""
            scan.state = scan.pop()
        else:
            scan.text += char

    def _process_doctype(self, scan: _ElementScan, char: str) -> None:
        if char == ">":
            scan.state = scan.pop()
            if scan.state is ParserState.TEXT:
                scan.state = ParserState.PRE

    def _process_entity(self, scan: _ElementScan, char: str) -> None:
        if char != ";":
            scan.entity += char
            return

        scan.state = scan.pop()
        name = scan.entity
        scan.entity = ""
        scan.text += self._decode_entity(name)

    def _process_single_tag(self, scan: _ElementScan, char: str) -> None:
        if scan.node.name is None:
            scan.node.name = scan.text
            scan.text = ""
        if char != ">":
            raise self._error(f"Expected > for tag <{scan.node.name}/>")
        scan.finished = True
        self.logger.debug(
            "Empty element complete",
            extra={"tag": scan.node.name, "depth": scan.depth}
        )

    def _process_quote(self, scan: _ElementScan, char: str) -> None:
        if char == scan.quote_char:
            scan.node.attributes.add(scan.attribute_name, scan.text)
            scan.text = ""
            scan.state = ParserState.IN_TAG
        elif char in ATTRIBUTE_WHITESPACE:
            scan.text += " "
        elif char == "&":
            scan.push(scan.state)
            scan.state = ParserState.ENTITY
            scan.entity = ""
        else:
            scan.text += char

    def _process_attribute_rvalue(self, scan: _ElementScan, char: str) -> None:
        if char in QUOTE_CHARS:
            scan.quote_char = char
            scan.state = ParserState.QUOTE
        elif not char.isspace():
            raise self._error("Error in attribute processing")

    def _process_attribute_lvalue(self, scan: _ElementScan, char: str) -> None:
        if char.isspace():
            scan.attribute_name = scan.text
            scan.text = ""
            scan.state = ParserState.ATTRIBUTE_EQUAL
        elif char == "=":
            scan.attribute_name = scan.text
            scan.text = ""
            scan.state = ParserState.ATTRIBUTE_RVALUE
        else:
            scan.text += char

    def _process_attribute_equal(self, scan: _ElementScan, char: str) -> None:
        if char == "=":
            scan.state = ParserState.ATTRIBUTE_RVALUE
        elif not char.isspace():
            raise self._error("Error in attribute processing")

    # Helpers

    def _decode_entity(self, name: str) -> str:
        if name in ENTITIES:
            return ENTITIES[name]
        if name.startswith("#"):
            digits = name[1:]
            if not (digits.isascii() and digits.isdigit()):
                raise self._error(f"Malformed character reference: &{name};")
            try:
                return chr(int(digits))
            except (ValueError, OverflowError):
                raise self._error(
                    f"Character reference out of range: &{name};"
                ) from None
        raise self._error(f"Unknown entity: &{name};")

    def _hand_back_close_tag(self, end_tag: str) -> None:
        """Return ``</end_tag>`` to the reader so the parent can consume it."""
        self.reader.unread(">")
        for char in reversed(end_tag):
            self.reader.unread(char)
        self.reader.unread("/")
        self.reader.unread("<")

    def _absorb_placeholder(self, parent: Node, placeholder: Node) -> None:
        """Drop an unnamed child that only held a comment or CDATA section.

        Text captured by the placeholder becomes the parent's value.
        """
        parent.remove_element(placeholder)
        if placeholder.value is not None:
            parent.set_value(placeholder.value)
        self.logger.debug(
            "Anonymous placeholder absorbed",
            extra={"tag": parent.name, "has_value": placeholder.value is not None}
        )


def parse_reader(
    reader: PushbackReader,
    config: Optional[XMLConfig] = None,
    correlation_id: Optional[str] = None
) -> Node:
    """Parse one document from ``reader`` and return its root node."""
    return XMLParser(reader, config, correlation_id).parse()
