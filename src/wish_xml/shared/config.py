"""Configuration classes for wish-xml.

Configuration is plain dataclasses validated in ``__post_init__`` and
composed by the immutable :class:`XMLConfig`.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_BUFFER_SIZE = 8192
MIN_BUFFER_SIZE = 1
MAX_BUFFER_SIZE = 1024 * 1024  # 1MB

DEFAULT_MAX_DEPTH = 200

# Only the UTF family is read or written; other encodings are out of scope.
SUPPORTED_ENCODINGS = ("utf-8", "utf-8-sig", "utf-16", "utf-32")
SUPPORTED_NEWLINES = ("\n", "\r\n")
LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_COMPONENTS = ("reader", "tree", "writer", "global_")


def _canonical_encoding(encoding: str) -> str:
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        raise ValueError(f"Unknown encoding: {encoding}") from None


@dataclass(frozen=True)
class ReaderConfig:
    """Configuration for the character source feeding the parser."""

    encoding: str = "utf-8"
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if _canonical_encoding(self.encoding) not in SUPPORTED_ENCODINGS:
            raise ValueError(
                f"encoding must be one of {list(SUPPORTED_ENCODINGS)}, "
                f"got {self.encoding!r}"
            )
        if not (MIN_BUFFER_SIZE <= self.buffer_size <= MAX_BUFFER_SIZE):
            raise ValueError(
                f"buffer_size must be between {MIN_BUFFER_SIZE} and "
                f"{MAX_BUFFER_SIZE}"
            )


@dataclass(frozen=True)
class TreeConfig:
    """Configuration for tree construction."""

    # Each nesting level costs a couple of interpreter frames.
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass(frozen=True)
class WriterConfig:
    """Configuration for writing serialized documents to files."""

    encoding: str = "utf-8"
    newline: str = "\n"

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if _canonical_encoding(self.encoding) not in SUPPORTED_ENCODINGS:
            raise ValueError(
                f"encoding must be one of {list(SUPPORTED_ENCODINGS)}, "
                f"got {self.encoding!r}"
            )
        if self.newline not in SUPPORTED_NEWLINES:
            raise ValueError("newline must be '\\n' or '\\r\\n'")


@dataclass(frozen=True)
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {list(LOGGING_LEVELS)}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class XMLConfig:
    """Complete configuration for reading, building and writing documents.

    Frozen along with every component, so one instance can be shared by any
    number of codecs.
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    writer: WriterConfig = field(default_factory=WriterConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Re-validate components and report failures uniformly."""
        try:
            for component in _COMPONENTS:
                getattr(self, component).__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "XMLConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: ``component__field`` keys for component settings, plain
                keys for top-level fields

        Returns:
            New XMLConfig instance with overrides applied

        Example:
            >>> config = XMLConfig().override(tree__max_depth=500)
            >>> config.tree.max_depth
            500
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        try:
            for component, overrides in nested.items():
                new_fields[component] = replace(getattr(self, component), **overrides)
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for component in _COMPONENTS:
            result[component] = dict(vars(getattr(self, component)))
        result["name"] = self.name
        result["description"] = self.description
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XMLConfig":
        """Create configuration from dictionary.

        Missing sections and fields fall back to their defaults.
        """
        component_types = {
            "reader": ReaderConfig,
            "tree": TreeConfig,
            "writer": WriterConfig,
            "global_": GlobalConfig,
        }
        values: Dict[str, Any] = {}
        try:
            for component, component_type in component_types.items():
                if component in data:
                    values[component] = component_type(**data[component])
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        for key in ("name", "description"):
            if key in data:
                values[key] = data[key]
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "XMLConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "XMLConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def large_documents(cls) -> "XMLConfig":
        """Create preset for big, deeply nested documents."""
        return cls(
            reader=ReaderConfig(buffer_size=64 * 1024),
            tree=TreeConfig(max_depth=300),
            name="large_documents",
            description="Larger read buffer and deeper nesting limit",
        )

    @classmethod
    def windows_output(cls) -> "XMLConfig":
        """Create preset writing CRLF line endings."""
        return cls(
            writer=WriterConfig(newline="\r\n"),
            name="windows_output",
            description="Serialized files use CRLF line endings",
        )
