#!/usr/bin/env python3
"""
Unit tests for node tree construction.
"""

import unittest
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Generic, NewType, Optional, TypeVar

from instancer import ReflectionError, Settings
from instancer.model import NodeFactory, NodeKind
from instancer.settings import AssignmentType

T = TypeVar("T")

UserId = NewType("UserId", int)


class Color(Enum):
    RED = "red"
    GREEN = "green"


@dataclass
class Leaf:
    value: int


@dataclass
class Containers:
    names: list[str]
    tags: set[int]
    frozen: frozenset[str]
    scores: dict[str, float]
    pair: tuple[int, str]
    ids: tuple[int, ...]
    sequence: Sequence[Leaf]
    mapping: Mapping[str, Leaf]


@dataclass
class Optionals:
    maybe: Optional[int]
    union: str | None
    color: Color
    user_id: UserId
    counter: ClassVar[int] = 0


@dataclass
class Box(Generic[T]):
    item: T
    items: list[T]


@dataclass
class Chain:
    value: int
    next: Optional["Chain"] = None


@dataclass
class Level2:
    leaf: Leaf


@dataclass
class Level1:
    inner: Level2


class Base:
    id: int


class Derived(Base):
    name: str

    def set_name(self, name: str) -> None:
        self.name = name


@dataclass
class Broken:
    value: "UndefinedType"  # noqa: F821


def child(node, name):
    return next(c for c in node.children if c.field is not None and c.field.name == name)


class TestNodeFactory(unittest.TestCase):
    """Test how NodeFactory maps classes and annotations to nodes."""

    def setUp(self):
        self.factory = NodeFactory(Settings())

    def test_root_node(self):
        """Test the root node of a simple dataclass."""
        root = self.factory.create_root_node(Leaf)

        self.assertTrue(root.is_root)
        self.assertEqual(root.depth, 0)
        self.assertIs(root.target_class, Leaf)
        self.assertEqual(len(root.children), 1)

        value = root.children[0]
        self.assertIs(value.target_class, int)
        self.assertEqual(value.field.name, "value")
        self.assertIs(value.parent, root)
        self.assertEqual(value.depth, 1)
        self.assertEqual(value.ancestor_path(), [root, value])
        self.assertEqual(str(value), "field 'Leaf.value' (int)")

    def test_collection_nodes(self):
        """Test collection, map and tuple kinds and their element nodes."""
        root = self.factory.create_root_node(Containers)

        names = child(root, "names")
        self.assertEqual(names.kind, NodeKind.COLLECTION)
        self.assertIs(names.children[0].target_class, str)

        self.assertIs(child(root, "tags").target_class, set)
        self.assertIs(child(root, "frozen").target_class, frozenset)

        scores = child(root, "scores")
        self.assertEqual(scores.kind, NodeKind.MAP)
        self.assertEqual([c.target_class for c in scores.children], [str, float])

        pair = child(root, "pair")
        self.assertEqual(pair.kind, NodeKind.TUPLE)
        self.assertEqual([c.target_class for c in pair.children], [int, str])

        ids = child(root, "ids")
        self.assertEqual(ids.kind, NodeKind.COLLECTION)
        self.assertIs(ids.target_class, tuple)

    def test_abstract_collection_aliases(self):
        """Test that abstract collection types map to concrete containers."""
        root = self.factory.create_root_node(Containers)

        sequence = child(root, "sequence")
        self.assertIs(sequence.target_class, list)
        self.assertIs(sequence.children[0].target_class, Leaf)

        mapping = child(root, "mapping")
        self.assertIs(mapping.target_class, dict)
        self.assertEqual(mapping.kind, NodeKind.MAP)

    def test_optional_and_special_types(self):
        """Test Optional, unions, enums, NewType and ClassVar handling."""
        root = self.factory.create_root_node(Optionals)

        maybe = child(root, "maybe")
        self.assertIs(maybe.target_class, int)
        self.assertTrue(maybe.optional)

        union = child(root, "union")
        self.assertIs(union.target_class, str)
        self.assertTrue(union.optional)

        self.assertIs(child(root, "color").target_class, Color)
        self.assertEqual(child(root, "color").children, [])
        self.assertIs(child(root, "user_id").target_class, int)
        self.assertNotIn("counter", [c.field.name for c in root.children])

    def test_generic_class(self):
        """Test type variable substitution for parameterized roots."""
        root = self.factory.create_root_node(Box[Leaf])

        self.assertIs(root.target_class, Box)
        self.assertIs(child(root, "item").target_class, Leaf)
        self.assertIs(child(root, "items").children[0].target_class, Leaf)

    def test_parameterized_collection_root(self):
        """Test a parameterized collection as the root type."""
        root = self.factory.create_root_node(list[Leaf])

        self.assertEqual(root.kind, NodeKind.COLLECTION)
        self.assertIs(root.children[0].target_class, Leaf)
        self.assertIsNone(root.children[0].field)

    def test_cycle_detection(self):
        """Test that a class repeated on the ancestor path is marked cyclic."""
        root = self.factory.create_root_node(Chain)
        nested = child(root, "next")

        self.assertFalse(root.cyclic)
        self.assertTrue(nested.cyclic)
        self.assertEqual(nested.children, [])

    def test_max_depth(self):
        """Test that nodes deeper than max_depth get no children."""
        factory = NodeFactory(Settings(max_depth=1))
        root = factory.create_root_node(Level1)

        inner = child(root, "inner")
        leaf = child(inner, "leaf")
        self.assertEqual(leaf.depth, 2)
        self.assertEqual(leaf.children, [])

    def test_inherited_fields(self):
        """Test that base class fields come first."""
        root = self.factory.create_root_node(Derived)

        self.assertEqual([c.field.name for c in root.children], ["id", "name"])
        self.assertIs(root.children[0].field.declaring_class, Base)
        self.assertIs(root.children[1].field.declaring_class, Derived)

    def test_setters_discovered_with_method_assignment(self):
        """Test that set_<name> methods are attached to nodes."""
        plain = NodeFactory(Settings()).create_root_node(Derived)
        self.assertIsNone(child(plain, "name").setter)

        factory = NodeFactory(Settings(assignment_type=AssignmentType.METHOD))
        root = factory.create_root_node(Derived)

        self.assertEqual(child(root, "name").setter.name, "set_name")
        self.assertIs(child(root, "name").setter.param_type, str)
        self.assertIsNone(child(root, "id").setter)

    def test_subtype_nodes_are_memoized(self):
        """Test that subtype nodes are created once per node and subclass."""
        root = self.factory.create_root_node(Base)

        first = self.factory.create_subtype_node(root, Derived)
        second = self.factory.create_subtype_node(root, Derived)

        self.assertIs(first, second)
        self.assertEqual([c.field.name for c in first.children], ["id", "name"])

    def test_unresolvable_annotations(self):
        """Test that broken annotations raise a reflection error."""
        with self.assertRaises(ReflectionError):
            self.factory.create_root_node(Broken)


if __name__ == "__main__":
    unittest.main()
