#!/usr/bin/env python3
"""
Unit tests for reflective access, instantiation and the random source.
"""

import unittest
from dataclasses import dataclass, field

from instancer import InstancerApiError, RandomSource, ReflectionError
from instancer.instantiator import Instantiator
from instancer.reflection import FieldInfo, Reflector


@dataclass
class Item:
    sku: str
    price: float = 9.99
    labels: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Frozen:
    value: int


class Slotted:
    __slots__ = ("value",)
    value: int


class Settable:
    value: int

    def get_value(self) -> int:
        return self.value

    def is_value(self) -> bool:
        return bool(self.value)

    def set_value(self, value: int) -> None:
        self.value = value


class NeedsArgument:
    def __new__(cls, required):
        return super().__new__(cls)


class Validated:
    code: str

    def __init__(self, code: str = ""):
        if not code:
            raise ValueError("code must not be empty")
        self.code = code


class TestReflector(unittest.TestCase):
    """Test field catalog and reflective assignment."""

    def test_dataclass_fields(self):
        """Test dataclass fields in declaration order with resolved types."""
        fields = Reflector.get_fields(Item)

        self.assertEqual([f.name for f in fields], ["sku", "price", "labels"])
        self.assertEqual(fields[0], FieldInfo(Item, "sku", str))
        self.assertEqual(str(fields[1]), "Item.price")

    def test_builtins_have_no_fields(self):
        """Test that builtin classes are leaves."""
        self.assertEqual(Reflector.get_fields(str), [])
        self.assertEqual(Reflector.get_fields(dict), [])

    def test_get_field(self):
        """Test field lookup by name."""
        self.assertEqual(Reflector.get_field(Item, "price").type, float)
        with self.assertRaises(InstancerApiError) as cm:
            Reflector.get_field(Item, "cost")
        self.assertIn("Invalid field 'cost'", str(cm.exception))

    def test_getter_prefixes(self):
        """Test that get_ and is_ prefixes are stripped."""
        self.assertEqual(
            Reflector.field_from_getter(Settable.get_value),
            (Settable, Reflector.get_field(Settable, "value")),
        )
        self.assertEqual(Reflector.field_from_getter(Settable.is_value)[1].name, "value")

    def test_not_a_getter(self):
        """Test that non-function references are rejected."""
        with self.assertRaises(InstancerApiError):
            Reflector.field_from_getter("value")

    def test_setters(self):
        """Test setter lookup and invocation."""
        method = Reflector.setter_from_reference(Settable.set_value)[1]
        self.assertEqual((method.name, method.param_type), ("set_value", int))

        target = Settable()
        Reflector.invoke_setter(target, method, 5)
        self.assertEqual(target.get_value(), 5)

    def test_set_field_on_frozen_dataclass(self):
        """Test that fields of frozen dataclasses can be written."""
        target = Frozen(1)
        Reflector.set_field(target, "value", 2)
        self.assertEqual(target.value, 2)

    def test_set_field_failure(self):
        """Test that failed writes raise reflection errors with the path."""
        with self.assertRaises(ReflectionError) as cm:
            Reflector.set_field(Slotted(), "other", 1, path="root (Slotted)")

        self.assertEqual(cm.exception.path, "root (Slotted)")
        self.assertIsInstance(cm.exception.__cause__, AttributeError)

    def test_has_value(self):
        """Test the present-and-not-None check."""
        item = Item("A-1")
        self.assertTrue(Reflector.has_value(item, "sku"))
        self.assertFalse(Reflector.has_value(Slotted(), "value"))


class TestInstantiator(unittest.TestCase):
    """Test instantiation strategies."""

    def setUp(self):
        self.instantiator = Instantiator()

    def test_no_argument_constructor(self):
        """Test that classes constructible without arguments are constructed."""
        self.assertEqual(self.instantiator.instantiate(Settable).__class__, Settable)

    def test_constructor_bypass_applies_defaults(self):
        """Test that required constructor arguments are bypassed with dataclass defaults set."""
        item = self.instantiator.instantiate(Item)

        self.assertIsInstance(item, Item)
        self.assertFalse(hasattr(item, "sku"))
        self.assertEqual(item.price, 9.99)
        self.assertEqual(item.labels, [])

    def test_failing_constructor_falls_through(self):
        """Test that a constructor raising other errors falls through to the bypass strategy."""
        instance = self.instantiator.instantiate(Validated)

        self.assertIsInstance(instance, Validated)
        self.assertFalse(hasattr(instance, "code"))

    def test_uninstantiable(self):
        """Test that None is returned when every strategy fails."""
        self.assertIsNone(self.instantiator.instantiate(NeedsArgument))


class TestRandomSource(unittest.TestCase):
    """Test the seeded random source."""

    def test_same_seed_same_sequence(self):
        """Test reproducibility from a seed."""
        first, second = RandomSource(10), RandomSource(10)
        self.assertEqual(
            [first.int_range(1, 100) for _ in range(20)],
            [second.int_range(1, 100) for _ in range(20)],
        )
        self.assertEqual(first.seed, 10)

    def test_random_seed(self):
        """Test that a seed is chosen when none is given."""
        self.assertIsInstance(RandomSource().seed, int)

    def test_helpers(self):
        """Test bounds of helper methods."""
        random = RandomSource(1)
        self.assertTrue(all(1 <= random.int_range(1, 3) <= 3 for _ in range(100)))
        self.assertEqual(len(random.alphanumeric(12)), 12)
        self.assertTrue(random.digits(8).isdigit())
        self.assertIn(random.one_of(["a", "b"]), ("a", "b"))
        self.assertFalse(random.dice_roll(precondition=False))


if __name__ == "__main__":
    unittest.main()
