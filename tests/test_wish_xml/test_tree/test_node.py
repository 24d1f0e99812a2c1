"""Tests for the node model and attribute store."""

import pytest

from wish_xml.shared.errors import XMLConversionError, XMLTreeError
from wish_xml.tree import AttributeStore, ContentKind, Node


class TestAttributeStore:
    """Test ordered attribute storage."""

    def test_insertion_order(self) -> None:
        """Test that attributes keep the order they were added in."""
        store = AttributeStore()
        store.add("b", "2")
        store.add("a", "1")

        assert list(store) == [("b", "2"), ("a", "1")]
        assert store.names() == ["b", "a"]
        assert len(store) == 2

    def test_duplicates_find_first(self) -> None:
        """Test that duplicate names are kept and lookups return the first."""
        store = AttributeStore()
        store.add("id", "first")
        store.add("id", "second")

        assert len(store) == 2
        assert store.find("id") == "first"

    def test_values_stored_as_strings(self) -> None:
        """Test that non-string values are converted on add."""
        store = AttributeStore()
        store.add("count", 3)

        assert store.find("count") == "3"

    def test_missing_name(self) -> None:
        """Test lookups of absent and differently cased names."""
        store = AttributeStore()
        store.add("Unit", "m")

        assert store.find("unit") is None
        assert "Unit" in store
        assert "unit" not in store

    def test_iteration_is_snapshot(self) -> None:
        """Test that adding during iteration does not affect the iterator."""
        store = AttributeStore()
        store.add("a", "1")

        for name, _ in store:
            store.add(name + "2", "x")

        assert store.names() == ["a", "a2"]


class TestNodeContent:
    """Test the value/children exclusivity."""

    def test_new_node_is_empty(self) -> None:
        """Test a fresh node."""
        node = Node("root")

        assert node.kind is ContentKind.EMPTY
        assert node.is_empty()
        assert node.value is None
        assert node.get_value() is None
        assert node.size() == 0
        assert node.children == ()

    def test_unnamed_node(self) -> None:
        """Test that a node may be created without a name."""
        node = Node()

        assert node.name is None
        assert node.tag is None

    def test_set_value(self) -> None:
        """Test storing a scalar value."""
        node = Node("n")
        node.set_value(12.5)

        assert node.kind is ContentKind.VALUE
        assert node.value == "12.5"
        assert not node.is_empty()

    def test_set_value_replaces(self) -> None:
        """Test that a second value replaces the first."""
        node = Node("n")
        node.set_value("a")
        node.set_value("b")

        assert node.value == "b"

    def test_set_value_none_fails(self) -> None:
        """Test that None is rejected instead of stored as text."""
        node = Node("n")
        node.set_value("kept")

        with pytest.raises(XMLTreeError, match="null value"):
            node.set_value(None)

        assert node.value == "kept"

    def test_empty_string_leaves_node_empty(self) -> None:
        """Test that an empty value is the same as no value."""
        node = Node("n")
        node.set_value("")

        assert node.kind is ContentKind.EMPTY
        assert node.value is None

    def test_empty_string_clears_value(self) -> None:
        """Test that assigning an empty string removes an existing value."""
        node = Node("n")
        node.set_value("x")
        node.set_value("")

        assert node.is_empty()
        node.add_element("child")
        assert node.size() == 1

    def test_add_element_with_empty_value(self) -> None:
        """Test that an empty value creates an empty child."""
        root = Node("root")
        child = root.add_element("a", "")

        assert child.kind is ContentKind.EMPTY
        assert child.to_dict() == {"name": "a", "attributes": []}

    def test_set_value_on_branch_fails(self) -> None:
        """Test that a node with children cannot take a value."""
        node = Node("n")
        node.add_element("child")

        with pytest.raises(XMLTreeError, match="Cannot assign a value"):
            node.set_value("x")

        assert node.size() == 1

    def test_add_element_to_leaf_fails(self) -> None:
        """Test that a node with a value cannot take children."""
        node = Node("n")
        node.set_value("x")

        with pytest.raises(XMLTreeError, match="Cannot create a subelement"):
            node.add_element("child")

        assert node.value == "x"

    def test_empty_node_is_truthy(self) -> None:
        """Test that truthiness does not follow the child count."""
        assert bool(Node("n"))
        assert len(Node("n")) == 0


class TestNodeChildren:
    """Test child creation, access and removal."""

    def test_add_element_variants(self) -> None:
        """Test the three forms of add_element."""
        root = Node("root")
        unnamed = root.add_element()
        branch = root.add_element("branch")
        leaf = root.add_element("leaf", 42)

        assert unnamed.name is None
        assert branch.kind is ContentKind.EMPTY
        assert leaf.value == "42"
        assert root.children == (unnamed, branch, leaf)
        assert root.kind is ContentKind.CHILDREN

    def test_get_element(self) -> None:
        """Test indexed access including out-of-range indexes."""
        root = Node("root")
        first = root.add_element("a")
        second = root.add_element("b")

        assert root.get_element(0) is first
        assert root.get_element(1) is second
        assert root.get_element(2) is None
        assert root.get_element(-1) is None
        assert Node("leaf").get_element(0) is None

    def test_iteration(self) -> None:
        """Test iterating direct children."""
        root = Node("root")
        root.add_element("a")
        root.add_element("b")

        assert [child.name for child in root] == ["a", "b"]
        assert len(root) == 2

    def test_append_element(self) -> None:
        """Test attaching an existing node."""
        root = Node("root")
        child = Node("child")

        assert root.append_element(child) is child
        assert root.contains(child)

    def test_append_element_invalid(self) -> None:
        """Test that None and the node itself are rejected."""
        root = Node("root")

        with pytest.raises(XMLTreeError, match="null element"):
            root.append_element(None)

        with pytest.raises(XMLTreeError, match="cannot contain itself"):
            root.append_element(root)

    def test_remove_element(self) -> None:
        """Test removal by identity."""
        root = Node("root")
        first = root.add_element("a")
        second = root.add_element("a")

        assert root.remove_element(second) is True
        assert root.children == (first,)
        assert root.remove_element(Node("a")) is False

    def test_remove_last_child_empties_node(self) -> None:
        """Test that removing the only child makes the node empty again."""
        root = Node("root")
        child = root.add_element("a")

        root.remove_element(child)

        assert root.is_empty()
        root.set_value("now a leaf")
        assert root.value == "now a leaf"

    def test_remove_and_contains_errors(self) -> None:
        """Test the failure cases of remove_element and contains."""
        root = Node("root")

        with pytest.raises(XMLTreeError, match="No subelements"):
            root.remove_element(Node("a"))

        with pytest.raises(XMLTreeError, match="No subelements"):
            root.contains(Node("a"))

        root.add_element("a")
        with pytest.raises(XMLTreeError, match="cannot be None"):
            root.remove_element(None)

        with pytest.raises(XMLTreeError, match="cannot be None"):
            root.contains(None)

    def test_contains_is_direct_only(self) -> None:
        """Test that grandchildren are not direct children."""
        root = Node("root")
        child = root.add_element("a")
        grandchild = child.add_element("b")

        assert root.contains(child)
        assert not root.contains(grandchild)

    def test_remove_all_elements(self) -> None:
        """Test dropping every child."""
        root = Node("root")
        root.add_element("a")
        root.add_element("b")

        assert root.remove_all_elements() is True
        assert root.is_empty()
        assert root.remove_all_elements() is False


class TestNumericValues:
    """Test numeric conversions of scalar values."""

    def test_int_value(self) -> None:
        """Test integer conversion."""
        node = Node("n")
        node.set_value(" 42 ")

        assert node.get_value_as_int() == 42

    def test_float_value(self) -> None:
        """Test float conversion."""
        node = Node("n")
        node.set_value("2.5e3")

        assert node.get_value_as_float() == 2500.0

    def test_not_numeric(self) -> None:
        """Test that non-numeric text raises with the offending value."""
        node = Node("n")
        node.set_value("ten")

        with pytest.raises(XMLConversionError, match="Error converting") as exc_info:
            node.get_value_as_int()
        assert exc_info.value.value == "ten"

        with pytest.raises(ValueError):
            node.get_value_as_float()

    def test_float_text_is_not_int(self) -> None:
        """Test that a decimal fraction is not accepted as an integer."""
        node = Node("n")
        node.set_value("1.5")

        with pytest.raises(XMLConversionError):
            node.get_value_as_int()

    def test_no_value(self) -> None:
        """Test conversions of empty and branch nodes."""
        branch = Node("n")
        branch.add_element("c")

        with pytest.raises(XMLConversionError, match="No value present"):
            Node("n").get_value_as_int()

        with pytest.raises(XMLConversionError, match="No value present"):
            branch.get_value_as_float()


class TestRepresentation:
    """Test dictionary and repr output."""

    def test_to_dict(self) -> None:
        """Test the structure produced for a small tree."""
        root = Node("root")
        child = root.add_element("a", "hi")
        child.attributes.add("x", "1")
        root.add_element("b")

        assert root.to_dict() == {
            "name": "root",
            "attributes": [],
            "children": [
                {"name": "a", "attributes": [["x", "1"]], "value": "hi"},
                {"name": "b", "attributes": []},
            ],
        }

    def test_repr(self) -> None:
        """Test repr of each content kind."""
        root = Node("root")
        leaf = root.add_element("a", "v")

        assert repr(root) == "<Node root (1)>"
        assert repr(leaf) == "<Node a='v'>"
        assert repr(Node("e")) == "<Node e/>"
