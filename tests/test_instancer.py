#!/usr/bin/env python3
"""
End-to-end tests of object creation through the fluent API.
"""

import itertools
import unittest
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol
from unittest import mock

from instancer import (
    AssignmentType,
    GeneratorUsageError,
    Instancer,
    InstancerApiError,
    Mode,
    OnSetMethodNotFound,
    ReflectionError,
    Select,
    Settings,
    UnusedSelectorError,
)
from instancer.generators import UUIDGenerator


class Suit(Enum):
    HEARTS = 1
    SPADES = 2
    CLUBS = 3


class Order:
    id: uuid.UUID
    quantity: int

    def get_id(self) -> uuid.UUID:
        return self.id


@dataclass
class Address:
    street: str
    city: str


@dataclass
class Person:
    name: str
    age: int
    home: Address
    work: Address
    nickname: str = "none"

    def get_name(self) -> str:
        return self.name


@dataclass
class Basket:
    items: list[str]
    tags: set[int]
    counts: dict[str, int]
    pair: tuple[int, str]
    ids: tuple[int, ...]


@dataclass
class Card:
    suit: Suit
    rank: int


@dataclass
class Profile:
    bio: Optional[str]


@dataclass
class TreeNode:
    value: int
    child: Optional["TreeNode"] = None


@dataclass
class Level2:
    value: int
    address: Address


@dataclass
class Level1:
    inner: Level2


@dataclass
class Animal:
    name: str


@dataclass
class Dog(Animal):
    breed: str


@dataclass
class Owner:
    pet: Animal


class Drawable(Protocol):
    def draw(self) -> str: ...


class Circle:
    def draw(self) -> str:
        return "circle"


@dataclass
class Canvas:
    shape: Drawable


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class Bean:
    name: str
    code: int

    def __init__(self):
        self.setter_calls = 0

    def set_name(self, name: str) -> None:
        self.setter_calls += 1
        self.name = name


class TestCreate(unittest.TestCase):
    """Test creating populated objects."""

    def test_create_populates_all_fields(self):
        """Test that every reachable field gets a value."""
        person = Instancer.create(Person)

        self.assertIsInstance(person, Person)
        self.assertIsInstance(person.name, str)
        self.assertTrue(1 <= person.age <= 10000)
        self.assertIsInstance(person.home, Address)
        self.assertIsInstance(person.work.city, str)
        self.assertNotEqual(person.nickname, "none")

    def test_plain_annotated_class(self):
        """Test population of a non-dataclass with class annotations."""
        order = Instancer.create(Order)
        self.assertIsInstance(order.id, uuid.UUID)
        self.assertIsInstance(order.quantity, int)

    def test_frozen_dataclass(self):
        """Test that frozen dataclasses are populated too."""
        point = Instancer.create(Point)
        self.assertIsInstance(point.x, int)
        self.assertIsInstance(point.y, int)

    def test_collections(self):
        """Test population of lists, sets, dicts and tuples."""
        basket = Instancer.create(Basket)

        self.assertTrue(2 <= len(basket.items) <= 6)
        self.assertTrue(all(isinstance(item, str) for item in basket.items))
        self.assertIsInstance(basket.tags, set)
        self.assertTrue(2 <= len(basket.tags) <= 6)
        self.assertTrue(2 <= len(basket.counts) <= 6)
        self.assertTrue(all(isinstance(k, str) and isinstance(v, int) for k, v in basket.counts.items()))
        self.assertIsInstance(basket.pair[0], int)
        self.assertIsInstance(basket.pair[1], str)
        self.assertIsInstance(basket.ids, tuple)
        self.assertTrue(2 <= len(basket.ids) <= 6)

    def test_parameterized_root(self):
        """Test a parameterized collection as the root type."""
        addresses = Instancer.create(list[Address])

        self.assertIsInstance(addresses, list)
        self.assertTrue(2 <= len(addresses) <= 6)
        self.assertTrue(all(isinstance(address, Address) for address in addresses))

    def test_cycles_end_in_none(self):
        """Test that a recursive field is left as None."""
        tree = Instancer.create(TreeNode)
        self.assertIsInstance(tree.value, int)
        self.assertIsNone(tree.child)

    def test_max_depth(self):
        """Test that nodes below max_depth are None."""
        level1 = Instancer.of(Level1).with_max_depth(1).create()

        self.assertIsInstance(level1.inner, Level2)
        self.assertIsNone(level1.inner.value)
        self.assertIsNone(level1.inner.address)

    def test_invalid_root(self):
        """Test that roots must be classes or parameterized types."""
        with self.assertRaises(InstancerApiError):
            Instancer.of("Person")
        with self.assertRaises(InstancerApiError):
            Instancer.of(None)


class TestCustomization(unittest.TestCase):
    """Test set, supply, generate, ignore and nullable customizations."""

    def test_set(self):
        """Test setting a field to a fixed value."""
        person = Instancer.of(Person).set(Select.field(Person, "name"), "Homer").create()
        self.assertEqual(person.name, "Homer")

    def test_set_with_getter(self):
        """Test selecting a field through its getter."""
        person = Instancer.of(Person).set(Select.field(Person.get_name), "Marge").create()
        self.assertEqual(person.name, "Marge")

    def test_supply(self):
        """Test supplying values from a callable."""
        counter = itertools.count(1)
        model = Instancer.of(Person).supply(Select.field(Person, "age"), lambda: next(counter)).to_model()

        self.assertEqual([p.age for p in itertools.islice(model.stream(), 3)], [1, 2, 3])

    def test_supplied_object_is_not_modified(self):
        """Test that supplied objects are not populated further."""
        address = Address("Evergreen Terrace", "Springfield")
        person = Instancer.of(Person).set(Select.field(Person, "home"), address).create()

        self.assertIs(person.home, address)
        self.assertEqual(person.home.city, "Springfield")

    def test_generate(self):
        """Test generating values with a built-in spec."""
        model = (
            Instancer.of(Person).generate(Select.field(Person, "age"), lambda gen: gen.ints().range(18, 21)).to_model()
        )
        self.assertTrue(all(18 <= p.age <= 21 for p in itertools.islice(model.stream(), 50)))

    def test_enum_spec(self):
        """Test enum generation with exclusions."""
        model = (
            Instancer.of(Card).generate(Select.all(Suit), lambda gen: gen.enums(Suit).excluding(Suit.CLUBS)).to_model()
        )
        suits = {card.suit for card in itertools.islice(model.stream(), 100)}
        self.assertEqual(suits, {Suit.HEARTS, Suit.SPADES})

    def test_collection_size(self):
        """Test sizing a collection with a delegating spec."""
        basket = (
            Instancer.of(Basket)
            .generate(Select.field(Basket, "items"), lambda gen: gen.collections().size(3))
            .create()
        )

        self.assertEqual(len(basket.items), 3)
        self.assertTrue(all(isinstance(item, str) for item in basket.items))

    def test_map_spec_uses_map_settings(self):
        """Test that unset bounds of a spec on a map come from the map size settings."""
        basket = (
            Instancer.of(Basket)
            .with_setting("map_min_size", 7)
            .with_setting("map_max_size", 9)
            .generate(Select.field(Basket, "counts"), lambda gen: gen.collections().min_size(8))
            .generate(Select.field(Basket, "items"), lambda gen: gen.collections())
            .create()
        )

        self.assertTrue(8 <= len(basket.counts) <= 9)
        self.assertTrue(2 <= len(basket.items) <= 6)


    def test_scoped_selector(self):
        """Test that a scope limits a selector to a subtree."""
        person = (
            Instancer.of(Person)
            .set(Select.field(Address, "city").within(Select.scope(Person, "home")), "Springfield")
            .create()
        )

        self.assertEqual(person.home.city, "Springfield")
        self.assertNotEqual(person.work.city, "Springfield")

    def test_exact_selector_beats_predicate(self):
        """Test precedence across tiers in a created object."""
        person = (
            Instancer.of(Person)
            .set(Select.field(Person, "name"), "exact")
            .set(Select.fields().named("name"), "predicate")
            .lenient()
            .create()
        )
        self.assertEqual(person.name, "exact")

    def test_selector_group(self):
        """Test one value for a group of selectors."""
        person = (
            Instancer.of(Person)
            .set(Select.all(Select.field(Person, "name"), Select.field(Person, "nickname")), "Bart")
            .create()
        )
        self.assertEqual((person.name, person.nickname), ("Bart", "Bart"))

    def test_root_selector(self):
        """Test replacing the root object."""
        address = Address("Main Street", "Shelbyville")
        self.assertIs(Instancer.of(Address).set(Select.root(), address).create(), address)

    def test_ignore(self):
        """Test that ignored fields keep their default, or None."""
        person = (
            Instancer.of(Person)
            .ignore(Select.field(Person, "name"))
            .ignore(Select.field(Person, "nickname"))
            .create()
        )

        self.assertIsNone(person.name)
        self.assertEqual(person.nickname, "none")
        self.assertIsInstance(person.age, int)

    def test_with_nullable(self):
        """Test that nullable fields are sometimes None."""
        model = Instancer.of(Person).with_nullable(Select.field(Person, "name")).with_seed(7).to_model()
        names = [p.name for p in itertools.islice(model.stream(), 200)]

        self.assertIn(None, names)
        self.assertTrue(any(isinstance(name, str) for name in names))

    def test_nullable_spec(self):
        """Test that a nullable() spec is sometimes None."""
        model = (
            Instancer.of(Person)
            .generate(Select.field(Person, "age"), lambda gen: gen.ints().nullable())
            .with_seed(3)
            .to_model()
        )
        ages = [p.age for p in itertools.islice(model.stream(), 200)]
        self.assertIn(None, ages)

    def test_optional_nullable_setting(self):
        """Test Optional fields are only nulled when the setting allows it."""
        strict = Instancer.of(Profile).with_seed(5).to_model()
        self.assertTrue(all(p.bio is not None for p in itertools.islice(strict.stream(), 200)))

        nullable = Instancer.of(Profile).with_setting("optional_nullable", True).with_seed(5).to_model()
        self.assertIn(None, [p.bio for p in itertools.islice(nullable.stream(), 200)])

    def test_subtype_delegation(self):
        """Test that delegating to a subclass populates the subclass fields."""
        owner = Instancer.of(Owner).generate(Select.field(Owner, "pet"), lambda gen: gen.delegating(Dog)).create()

        self.assertIsInstance(owner.pet, Dog)
        self.assertIsInstance(owner.pet.name, str)
        self.assertIsInstance(owner.pet.breed, str)

    def test_copy_of_model(self):
        """Test that Instancer.of(model) extends a model's configuration."""
        model = Instancer.of(Person).set(Select.field(Person, "name"), "Lisa").to_model()
        person = Instancer.of(model).set(Select.field(Person, "age"), 8).create()

        self.assertEqual((person.name, person.age), ("Lisa", 8))
        self.assertEqual(len(model.spec.generators), 1)


class TestDelegatingIds(unittest.TestCase):
    """Test the delegating UUID generator selected through a getter."""

    def test_delegating_uuid_generator_over_many_instances(self):
        """Test that ids are unique UUIDs and the generator is initialized once."""
        with mock.patch.object(UUIDGenerator, "init", autospec=True) as init:
            model = Instancer.of(Order).generate(Select.field(Order.get_id), lambda gen: gen.delegating()).to_model()
            orders = list(itertools.islice(model.stream(), 1000))

        init.assert_called_once()
        ids = [order.id for order in orders]
        self.assertTrue(all(isinstance(i, uuid.UUID) and i.version == 4 for i in ids))
        self.assertEqual(len(set(ids)), 1000)
        self.assertTrue(all(isinstance(order.quantity, int) for order in orders))

    def test_delegating_generator_with_target_class(self):
        """Test delegation to an explicit UUID target class through a getter selector."""
        with mock.patch.object(UUIDGenerator, "init", autospec=True) as init:
            model = (
                Instancer.of(Order)
                .generate(Select.field(Order.get_id), lambda gen: gen.delegating(uuid.UUID))
                .to_model()
            )
            orders = list(itertools.islice(model.stream(), 1000))

        init.assert_called_once()
        self.assertEqual(len({order.get_id() for order in orders}), 1000)



class TestValidation(unittest.TestCase):
    """Test errors reported before and during generation."""

    def test_generator_usage_error(self):
        """Test that a generator of the wrong class is rejected."""
        api = Instancer.of(Person).generate(Select.field(Person, "name"), lambda gen: gen.ints())

        with self.assertRaises(GeneratorUsageError) as cm:
            api.create()
        self.assertIn("Person.name", str(cm.exception))

    def test_protocol_field_accepts_value(self):
        """Test that a value can be set on a field typed with a plain protocol."""
        circle = Circle()
        canvas = Instancer.of(Canvas).set(Select.field(Canvas, "shape"), circle).create()
        self.assertIs(canvas.shape, circle)


    def test_failure_logs_seed(self):
        """Test that the seed is logged when generation fails."""
        api = Instancer.of(Person).with_seed(99).generate(Select.field(Person, "name"), lambda gen: gen.ints())

        with self.assertLogs("instancer.engine", level="ERROR") as logs, self.assertRaises(GeneratorUsageError):
            api.create()
        self.assertIn("99", logs.output[0])

    def test_unused_selector_strict(self):
        """Test that strict mode reports selectors that match nothing."""
        api = Instancer.of(Order).set(Select.field(Address, "city"), "Springfield")

        with self.assertRaises(UnusedSelectorError) as cm:
            api.create()
        self.assertEqual(cm.exception.selectors, [Select.field(Address, "city")])
        self.assertIn("lenient()", str(cm.exception))

    def test_unused_selector_lenient(self):
        """Test that lenient mode accepts unused selectors."""
        order = Instancer.of(Order).set(Select.field(Address, "city"), "Springfield").lenient().create()
        self.assertIsInstance(order, Order)

        settings = Settings(mode=Mode.LENIENT)
        self.assertIsInstance(Instancer.of(Order).with_settings(settings).ignore(Address).create(), Order)

    def test_root_field_validated_before_generation(self):
        """Test that class-less field selectors are checked when the model is built."""
        with self.assertRaises(InstancerApiError):
            Instancer.of(Person).set(Select.field("surname"), "Simpson").to_model()

    def test_invalid_setting(self):
        """Test that unknown settings are rejected."""
        with self.assertRaises(InstancerApiError):
            Instancer.of(Person).with_setting("colour", "blue")

    def test_setter_selector_requires_method_assignment(self):
        """Test that setter selectors fail with field assignment."""
        with self.assertRaises(InstancerApiError):
            Instancer.of(Bean).set(Select.setter(Bean, "set_name"), "x").to_model()


class TestSeed(unittest.TestCase):
    """Test reproducibility."""

    def test_same_seed_same_objects(self):
        """Test that equal seeds give equal objects."""
        first = Instancer.of(Person).with_seed(123).create()
        second = Instancer.of(Person).with_seed(123).create()
        self.assertEqual(first, second)

    def test_seed_from_settings(self):
        """Test the seed setting and the model's seed."""
        model = Instancer.of(Basket).with_settings(Settings(seed=42)).to_model()
        self.assertEqual(model.seed, 42)
        self.assertEqual(model.create(), Instancer.of(Basket).with_seed(42).create())

    def test_random_seed_is_reported(self):
        """Test that unseeded models still expose their seed."""
        model = Instancer.of(Person).to_model()
        first = model.create()
        self.assertEqual(Instancer.of(Person).with_seed(model.seed).create(), first)


class TestSetterAssignment(unittest.TestCase):
    """Test assignment through setter methods."""

    def method_settings(self, **values):
        return Settings(assignment_type=AssignmentType.METHOD, **values)

    def test_setters_are_called(self):
        """Test that setters are used when they exist, fields otherwise."""
        bean = Instancer.of(Bean).with_settings(self.method_settings()).create()

        self.assertEqual(bean.setter_calls, 1)
        self.assertIsInstance(bean.name, str)
        self.assertIsInstance(bean.code, int)

    def test_setter_selector(self):
        """Test selecting a setter."""
        bean = (
            Instancer.of(Bean)
            .with_settings(self.method_settings())
            .set(Select.setter(Bean, "set_name"), "via setter")
            .create()
        )
        self.assertEqual(bean.name, "via setter")

    def test_missing_setter_ignored(self):
        """Test the IGNORE policy for fields without setters."""
        settings = self.method_settings(on_set_method_not_found=OnSetMethodNotFound.IGNORE)
        bean = Instancer.of(Bean).with_settings(settings).create()
        self.assertFalse(hasattr(bean, "code"))

    def test_missing_setter_fails(self):
        """Test the FAIL policy for fields without setters."""
        api = Instancer.of(Bean).with_settings(self.method_settings(on_set_method_not_found=OnSetMethodNotFound.FAIL))
        with self.assertRaises(ReflectionError):
            api.create()


if __name__ == "__main__":
    unittest.main()
