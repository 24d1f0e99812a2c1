"""Document statistics reported by the command-line tools."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

import psutil

if TYPE_CHECKING:
    from wish_xml.tree.node import Node


@dataclass
class DocumentStatistics:
    """Size and cost figures for one parsed document."""

    elements: int = 0
    attributes: int = 0
    max_depth: int = 0
    characters_read: int = 0
    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_read * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary representation."""
        return {
            "elements": self.elements,
            "attributes": self.attributes,
            "max_depth": self.max_depth,
            "characters_read": self.characters_read,
            "processing_time_ms": self.processing_time_ms,
            "memory_used_bytes": self.memory_used_bytes,
        }


def resident_memory() -> int:
    """Return the resident set size of the current process in bytes."""
    return psutil.Process().memory_info().rss


def collect_statistics(root: "Node") -> DocumentStatistics:
    """Count elements, attributes and nesting depth below ``root``.

    The root is depth 0. Timing and memory fields are left for the caller.
    """
    stats = DocumentStatistics()
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        stats.elements += 1
        stats.attributes += len(node.attributes)
        stats.max_depth = max(stats.max_depth, depth)
        stack.extend((child, depth + 1) for child in node)
    return stats
