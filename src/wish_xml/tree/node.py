"""In-memory XML tree model.

A :class:`Node` is one element: a name, an ordered attribute list and a
content slot that is either empty, a scalar text value or an ordered list
of child nodes. The value/children exclusivity mirrors the document shapes
the serializer can write (``<a/>``, ``<a>text</a>`` or ``<a>...</a>`` with
nested elements) and is enforced at run time.
"""

from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from wish_xml.shared.errors import XMLConversionError, XMLTreeError

from . import search


class ContentKind(Enum):
    """Which variant a node's content slot currently holds."""

    EMPTY = auto()      # No value and no children: <name/>
    VALUE = auto()      # Scalar text: <name>value</name>
    CHILDREN = auto()   # Nested elements


class AttributeStore:
    """Ordered ``(name, value)`` pairs attached to one node.

    Duplicate names are allowed; lookups return the first match.
    """

    def __init__(self) -> None:
        self._pairs: List[Tuple[str, str]] = []

    def add(self, name: str, value: Any) -> None:
        """Append an attribute; the value is stored in string form."""
        self._pairs.append((name, str(value)))

    def find(self, name: str) -> Optional[str]:
        """Return the value of the first attribute called ``name``, or None."""
        for attr_name, value in self._pairs:
            if attr_name == name:
                return value
        return None

    def names(self) -> List[str]:
        return [name for name, _ in self._pairs]

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, name: object) -> bool:
        return any(attr_name == name for attr_name, _ in self._pairs)

    def __repr__(self) -> str:
        return f"AttributeStore({self._pairs!r})"


class Node:
    """One element of an XML tree.

    Nodes compare by identity: ``remove_element`` and ``contains`` look for
    the very object passed in. Use :meth:`to_dict` to compare structure.

    Args:
        name: Tag name; None only for the unnamed child the parser creates
            before it has read the tag

    Example:
        >>> root = Node("root")
        >>> item = root.add_element("element1", 42)
        >>> item.attributes.add("unit", "m")
        >>> root.find_element("element1").get_value_as_int()
        42
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name
        self.attributes = AttributeStore()
        self._content: Union[None, str, List["Node"]] = None

    # Content inspection

    @property
    def tag(self) -> Optional[str]:
        """Alias for :attr:`name`."""
        return self.name

    @property
    def kind(self) -> ContentKind:
        """Variant currently held by the content slot."""
        if self._content is None:
            return ContentKind.EMPTY
        if isinstance(self._content, list):
            return ContentKind.CHILDREN
        return ContentKind.VALUE

    @property
    def value(self) -> Optional[str]:
        """Scalar value, or None when the node is empty or has children."""
        if isinstance(self._content, str):
            return self._content
        return None

    @property
    def children(self) -> Tuple["Node", ...]:
        """Snapshot of the direct children (empty for leaves)."""
        if isinstance(self._content, list):
            return tuple(self._content)
        return ()

    def get_value(self) -> Optional[str]:
        return self.value

    def get_value_as_int(self) -> int:
        """Return the scalar value parsed as an integer.

        Raises:
            XMLConversionError: If there is no value or it is not an integer
        """
        value = self._require_value()
        try:
            return int(value)
        except ValueError:
            raise XMLConversionError(
                f"Error converting numeric value {value!r}", value
            ) from None

    def get_value_as_float(self) -> float:
        """Return the scalar value parsed as a float.

        Raises:
            XMLConversionError: If there is no value or it is not numeric
        """
        value = self._require_value()
        try:
            return float(value)
        except ValueError:
            raise XMLConversionError(
                f"Error converting numeric value {value!r}", value
            ) from None

    def _require_value(self) -> str:
        value = self.value
        if value is None:
            raise XMLConversionError("No value present")
        return value

    def size(self) -> int:
        """Number of direct children, 0 for leaves and empty nodes."""
        if isinstance(self._content, list):
            return len(self._content)
        return 0

    def is_empty(self) -> bool:
        """True when the node holds neither a value nor children."""
        return self._content is None

    def get_element(self, index: int) -> Optional["Node"]:
        """Return the child at ``index``; None when out of range or negative."""
        if not isinstance(self._content, list):
            return None
        if index < 0 or index >= len(self._content):
            return None
        return self._content[index]

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.children)

    def __bool__(self) -> bool:
        # A childless node is still a node; keep truthiness independent of len().
        return True

    # Mutation

    def set_value(self, value: Any) -> None:
        """Store ``value`` (in string form) as this node's scalar content.

        An empty string clears the value and leaves the node empty, since
        ``<name></name>`` reads back as an empty element.

        Raises:
            XMLTreeError: If ``value`` is None or the node already has children
        """
        if value is None:
            raise XMLTreeError("Cannot assign a null value")
        if isinstance(self._content, list):
            raise XMLTreeError(
                "Cannot assign a value to an element with subelements"
            )
        self._content = str(value) or None

    def add_element(self, name: Optional[str] = None, value: Any = None) -> "Node":
        """Append and return a new child.

        Without arguments the child is unnamed; with ``name`` it is an empty
        branch; with ``name`` and ``value`` it is a leaf holding ``str(value)``
        (an empty string leaves the child empty).

        Raises:
            XMLTreeError: If this node already holds a scalar value
        """
        child = Node(name)
        if value is not None:
            child.set_value(value)
        self._child_list().append(child)
        return child

    def append_element(self, child: "Node") -> "Node":
        """Append an existing node as the last child and return it.

        The node is moved, not copied; it must not be attached elsewhere.

        Raises:
            XMLTreeError: If ``child`` is None or this node holds a value
        """
        if child is None:
            raise XMLTreeError("Cannot add a null element")
        if child is self:
            raise XMLTreeError("An element cannot contain itself")
        self._child_list().append(child)
        return child

    def remove_element(self, target: "Node") -> bool:
        """Remove ``target`` from the direct children.

        Returns:
            True if the node was found and removed. Removing the last child
            leaves this node empty.

        Raises:
            XMLTreeError: If ``target`` is None or this node has no children
        """
        children = self._existing_children(target)
        for index, child in enumerate(children):
            if child is target:
                del children[index]
                if not children:
                    self._content = None
                return True
        return False

    def contains(self, target: "Node") -> bool:
        """Check whether ``target`` is a direct child of this node.

        Raises:
            XMLTreeError: If ``target`` is None or this node has no children
        """
        children = self._existing_children(target)
        return any(child is target for child in children)

    def remove_all_elements(self) -> bool:
        """Drop every child; False when there were no children to drop."""
        if not isinstance(self._content, list):
            return False
        self._content = None
        return True

    def _child_list(self) -> List["Node"]:
        if self._content is None:
            self._content = []
        elif not isinstance(self._content, list):
            raise XMLTreeError(
                "Cannot create a subelement to an element with a value"
            )
        return self._content

    def _existing_children(self, target: Optional["Node"]) -> List["Node"]:
        if target is None:
            raise XMLTreeError("Target element cannot be None")
        if not isinstance(self._content, list):
            raise XMLTreeError("No subelements")
        return self._content

    # Search

    def find_element(self, tag: str, attribute: Optional[str] = None) -> Optional["Node"]:
        """Find the first descendant named ``tag`` (and carrying ``attribute``).

        Descendants are visited depth-first in document order; the receiver
        itself is not tested.
        """
        if attribute is None:
            return search.find_element(self, tag)
        return search.find_element_with_attribute(self, tag, attribute)

    def find_attribute(self, name: str) -> Optional["Node"]:
        """Find the first descendant that carries an attribute called ``name``."""
        return search.find_attribute(self, name)

    def iter_nodes(self) -> Iterator["Node"]:
        """Yield this node and all descendants in document order."""
        return search.iter_nodes(self)

    # Representation

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to a plain dictionary for comparison or JSON."""
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": [list(pair) for pair in self.attributes],
        }
        if isinstance(self._content, list):
            result["children"] = [child.to_dict() for child in self._content]
        elif self._content is not None:
            result["value"] = self._content
        return result

    def __repr__(self) -> str:
        if isinstance(self._content, list):
            return f"<Node {self.name} ({len(self._content)})>"
        if self._content is not None:
            return f"<Node {self.name}={self._content!r}>"
        return f"<Node {self.name}/>"
