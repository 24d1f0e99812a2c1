"""Public parse and serialize API for wish-xml.

Module-level functions cover the common cases; :class:`XMLCodec` carries a
configuration and correlation ID for repeated use.
"""

import io
import time
from pathlib import Path
from typing import Optional, TextIO, Union

from wish_xml.character import PushbackReader
from wish_xml.parsing import XMLParser
from wish_xml.serialization import writer
from wish_xml.shared import XMLConfig, get_logger
from wish_xml.tree import Node

# Type definitions for input data
InputType = Union[str, Path, TextIO]
PathType = Union[str, Path]

MS_PER_SECOND = 1000
PREVIEW_LENGTH = 100  # Max length for content preview in logs


class XMLCodec:
    """Configured entry point for parsing and writing documents.

    Attributes:
        config: Reader, tree and writer configuration
        correlation_id: Correlation ID attached to log records
        characters_read: Raw characters consumed by the most recent parse

    Examples:
        >>> codec = XMLCodec()
        >>> root = codec.parse('<root><item>value</item></root>')
        >>> root.get_element(0).value
        'value'

        >>> codec = XMLCodec(XMLConfig.windows_output())
        >>> codec.write_file(root, 'out.xml')
    """

    def __init__(
        self,
        config: Optional[XMLConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or XMLConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_codec")
        self.characters_read = 0

    def parse(self, source: InputType) -> Node:
        """Parse a document from XML text, a ``Path`` or a text stream.

        A ``str`` is always treated as XML text; pass a ``Path`` to read a
        file.

        Raises:
            XMLEncodingError: On malformed input
            XMLTreeError: If the document mixes text and child elements
            TypeError: If ``source`` is none of the supported types
        """
        if isinstance(source, str):
            return self.parse_string(source)
        if isinstance(source, Path):
            return self.parse_file(source)
        if hasattr(source, "read"):
            return self._parse_stream(source, source_name=type(source).__name__)
        raise TypeError(f"Unsupported input type: {type(source).__name__}")

    def parse_string(self, text: str) -> Node:
        """Parse a document held in memory."""
        self.logger.debug(
            "Parsing string input",
            extra={"length": len(text), "preview": text[:PREVIEW_LENGTH]}
        )
        return self._parse_stream(io.StringIO(text, newline=""), source_name="string")

    def parse_file(self, path: PathType) -> Node:
        """Parse the document stored at ``path``.

        Raises:
            OSError: If the file cannot be opened or read
        """
        path = Path(path)
        with path.open(encoding=self.config.reader.encoding, newline="") as stream:
            return self._parse_stream(stream, source_name=str(path))

    def _parse_stream(self, stream: TextIO, source_name: str) -> Node:
        start_time = time.perf_counter()
        self.logger.info("Starting parse operation", extra={"source": source_name})

        reader = PushbackReader(stream, self.config.reader)
        root = XMLParser(reader, self.config, self.correlation_id).parse()
        self.characters_read = reader.characters_read

        self.logger.info(
            "Parse operation completed",
            extra={
                "source": source_name,
                "root": root.name,
                "characters_read": reader.characters_read,
                "processing_time_ms": (time.perf_counter() - start_time) * MS_PER_SECOND,
            }
        )
        return root

    def serialize(self, node: Node, sink: TextIO) -> None:
        """Write ``node`` as a complete document to ``sink``."""
        writer.serialize(node, sink)

    def to_string(self, node: Node, preamble: bool = True) -> str:
        """Serialize ``node`` to a string."""
        return writer.to_string(node, preamble=preamble)

    def write_file(self, node: Node, path: PathType) -> None:
        """Write ``node`` to ``path`` using the writer configuration."""
        self.logger.info("Writing document", extra={"path": str(path), "root": node.name})
        writer.write_file(node, path, self.config.writer)


_default_codec = XMLCodec()


def parse(source: InputType, config: Optional[XMLConfig] = None) -> Node:
    """Parse a document from XML text, a ``Path`` or a text stream.

    Examples:
        >>> root = parse('<root><a x="1">hi</a></root>')
        >>> root.find_element("a").value
        'hi'
    """
    return _codec_for(config).parse(source)


def parse_string(text: str, config: Optional[XMLConfig] = None) -> Node:
    """Parse a document held in memory."""
    return _codec_for(config).parse_string(text)


def parse_file(path: PathType, config: Optional[XMLConfig] = None) -> Node:
    """Parse the document stored at ``path``."""
    return _codec_for(config).parse_file(path)


def serialize(node: Node, sink: TextIO) -> None:
    """Write ``node`` as a complete document to ``sink``."""
    _default_codec.serialize(node, sink)


def to_string(node: Node, preamble: bool = True) -> str:
    """Serialize ``node`` to a string."""
    return _default_codec.to_string(node, preamble=preamble)


def write_file(node: Node, path: PathType, config: Optional[XMLConfig] = None) -> None:
    """Write ``node`` to ``path``."""
    _codec_for(config).write_file(node, path)


def _codec_for(config: Optional[XMLConfig]) -> XMLCodec:
    return _default_codec if config is None else XMLCodec(config)
