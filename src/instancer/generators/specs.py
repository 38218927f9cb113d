"""
Generator specs offered to ``InstancerApi.generate(selector, fn)``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .builtin import (
    BooleanGenerator,
    CollectionSpec,
    DateGenerator,
    DateTimeGenerator,
    DecimalGenerator,
    DelegatingGenerator,
    EnumGenerator,
    FloatGenerator,
    IntGenerator,
    OneOfGenerator,
    StringGenerator,
    UUIDGenerator,
)


class Generators:
    """
    Entry point to the built-in generator specs.

    Every method returns a new, unconfigured spec; fluent calls on the spec
    return configured copies.

    Example:
        ```python
        Instancer.of(Person).generate(Select.field(Person, "age"), lambda gen: gen.ints().range(18, 65))
        ```
    """

    def ints(self) -> IntGenerator:
        return IntGenerator()

    def floats(self) -> FloatGenerator:
        return FloatGenerator()

    def decimals(self) -> DecimalGenerator:
        return DecimalGenerator()

    def strings(self) -> StringGenerator:
        return StringGenerator()

    def booleans(self) -> BooleanGenerator:
        return BooleanGenerator()

    def uuids(self) -> UUIDGenerator:
        return UUIDGenerator()

    def dates(self) -> DateGenerator:
        return DateGenerator()

    def datetimes(self) -> DateTimeGenerator:
        return DateTimeGenerator()

    def enums[E: Enum](self, enum_class: type[E]) -> EnumGenerator[E]:
        return EnumGenerator(enum_class)

    def one_of(self, *values: Any) -> OneOfGenerator:
        return OneOfGenerator(values)

    def collections(self) -> CollectionSpec:
        """Size a collection or map; the container comes from the built-in generator."""
        return CollectionSpec()

    def delegating(self, target_class: type | None = None) -> DelegatingGenerator:
        """
        A spec that only supplies hints.

        The value is produced by the generator resolved for ``target_class``,
        or for the selected node's class when it is None. Passing a subclass
        of the node's class generates instances of that subclass.
        """
        return DelegatingGenerator(target_class)
