"""Shared utilities for wish-xml.

Error types, configuration objects, logging helpers and statistics used
across the reader, parser, tree and serializer layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ReaderConfig,
    TreeConfig,
    WriterConfig,
    XMLConfig,
)
from .errors import (
    XMLConversionError,
    XMLEncodingError,
    XMLError,
    XMLTreeError,
)
from .logging import (
    ComponentLogger,
    configure_logging,
    get_logger,
)
from .result import DocumentStatistics, collect_statistics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ReaderConfig",
    "TreeConfig",
    "WriterConfig",
    "XMLConfig",
    "XMLConversionError",
    "XMLEncodingError",
    "XMLError",
    "XMLTreeError",
    "ComponentLogger",
    "configure_logging",
    "get_logger",
    "DocumentStatistics",
    "collect_statistics",
]
