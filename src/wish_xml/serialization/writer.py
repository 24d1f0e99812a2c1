"""XML serializer for :class:`~wish_xml.tree.node.Node` trees.

Output is a fixed declaration line and generator comment followed by the
element tree, one element per line, nested elements indented by two
spaces:

    <?xml version="1.0" standalone="yes"?>
    <!-- Written by WiSH XML writer -->
    <root>
      <element1 attribute1="att1">value1</element1>
      <element2/>
    </root>
"""

import io
from pathlib import Path
from typing import Optional, TextIO, Union

from wish_xml.shared.config import WriterConfig
from wish_xml.shared.errors import XMLTreeError
from wish_xml.shared.logging import get_logger
from wish_xml.tree.node import AttributeStore, ContentKind, Node

XML_DECLARATION = '<?xml version="1.0" standalone="yes"?>'
GENERATOR_COMMENT = "<!-- Written by WiSH XML writer -->"
INDENT_STEP = "  "

# "&" must come first: the other replacements introduce ampersands.
ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
    ("/", "&#47;"),
    ("!", "&#33;"),
)

logger = get_logger(__name__, component="xml_serializer")


def escape(text: str) -> str:
    """Replace characters that would break the markup with references."""
    for char, reference in ESCAPES:
        text = text.replace(char, reference)
    return text


def format_attributes(attributes: AttributeStore) -> str:
    """Render attributes as `` name="value"`` fragments in insertion order."""
    return "".join(f' {name}="{escape(value)}"' for name, value in attributes)


class XMLSerializer:
    """Writes node trees as indented XML text to any object with ``write``."""

    def serialize(self, node: Node, sink: TextIO) -> None:
        """Write the preamble and the whole tree rooted at ``node``.

        Raises:
            XMLTreeError: If an element in the tree has no name
        """
        sink.write(XML_DECLARATION + "\n")
        sink.write(GENERATOR_COMMENT + "\n")
        self.write_element(node, sink)

    def write_element(self, node: Node, sink: TextIO, indent: str = "") -> None:
        """Write ``node`` and its subtree without the preamble."""
        if node.name is None:
            raise XMLTreeError("Cannot serialize an element without a name")

        sink.write(f"{indent}<{node.name}{format_attributes(node.attributes)}")
        kind = node.kind
        if kind is ContentKind.EMPTY:
            sink.write("/>\n")
        elif kind is ContentKind.CHILDREN:
            sink.write(">\n")
            for child in node:
                self.write_element(child, sink, indent + INDENT_STEP)
            sink.write(f"{indent}</{node.name}>\n")
        else:
            sink.write(f">{escape(node.value or '')}</{node.name}>\n")


def serialize(node: Node, sink: TextIO) -> None:
    """Write ``node`` as a complete document to ``sink``."""
    XMLSerializer().serialize(node, sink)


def to_string(node: Node, preamble: bool = True) -> str:
    """Serialize ``node`` to a string, with or without the preamble lines."""
    buffer = io.StringIO()
    serializer = XMLSerializer()
    if preamble:
        serializer.serialize(node, buffer)
    else:
        serializer.write_element(node, buffer)
    return buffer.getvalue()


def write_file(
    node: Node,
    path: Union[str, Path],
    config: Optional[WriterConfig] = None
) -> None:
    """Serialize ``node`` into the file at ``path``.

    Line endings follow ``config.newline``; I/O errors propagate.
    """
    config = config or WriterConfig()
    with open(path, "w", encoding=config.encoding, newline=config.newline) as sink:
        XMLSerializer().serialize(node, sink)
    logger.debug("Document written", extra={"path": str(path), "root": node.name})
