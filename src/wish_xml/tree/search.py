"""Tree-wide queries over :class:`~wish_xml.tree.node.Node` subtrees.

All searches walk the receiver's descendants depth-first in document
order: each child is tested before its own subtree, and the first match
ends the walk. The node the search starts from is never tested itself.
Name and attribute comparisons are exact and case-sensitive.
"""

from typing import TYPE_CHECKING, Callable, Iterator, Optional

if TYPE_CHECKING:
    from .node import Node

Predicate = Callable[["Node"], bool]


def find_first(node: "Node", predicate: Predicate) -> Optional["Node"]:
    """Return the first descendant of ``node`` accepted by ``predicate``."""
    for child in node.children:
        if predicate(child):
            return child
        found = find_first(child, predicate)
        if found is not None:
            return found
    return None


def find_element(node: "Node", tag: str) -> Optional["Node"]:
    return find_first(node, lambda candidate: candidate.name == tag)


def find_attribute(node: "Node", name: str) -> Optional["Node"]:
    return find_first(node, lambda candidate: candidate.attributes.find(name) is not None)


def find_element_with_attribute(
    node: "Node", tag: str, attribute: str
) -> Optional["Node"]:
    """Both conditions must hold on the same candidate."""
    return find_first(
        node,
        lambda candidate: (
            candidate.name == tag
            and candidate.attributes.find(attribute) is not None
        ),
    )


def iter_nodes(node: "Node") -> Iterator["Node"]:
    """Yield ``node`` and its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
