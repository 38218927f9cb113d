"""
Lookup of built-in generators by class.
"""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from .base import Generator
from .builtin import (
    BooleanGenerator,
    CollectionGenerator,
    DateGenerator,
    DateTimeGenerator,
    DecimalGenerator,
    EnumGenerator,
    FloatGenerator,
    IntGenerator,
    StringGenerator,
    UUIDGenerator,
)


def default_registry() -> dict[type, Generator[Any]]:
    """A fresh class-to-generator mapping of the built-in generators."""
    return {
        bool: BooleanGenerator(),
        int: IntGenerator(),
        float: FloatGenerator(),
        Decimal: DecimalGenerator(),
        str: StringGenerator(),
        uuid.UUID: UUIDGenerator(),
        datetime.date: DateGenerator(),
        datetime.datetime: DateTimeGenerator(),
        list: CollectionGenerator(list),
        set: CollectionGenerator(set),
        frozenset: CollectionGenerator(frozenset),
        tuple: CollectionGenerator(tuple),
        dict: CollectionGenerator(dict),
    }


class GeneratorResolver:
    """
    Maps a class to the built-in generator that produces it.

    The registry is built once at construction and only read afterwards.
    Each resolver owns its generator instances, so a resolver belongs to
    one generation session.
    """

    def __init__(self, overrides: Mapping[type, Generator[Any]] | None = None):
        self._registry = default_registry()
        if overrides:
            self._registry.update(overrides)

    def resolve(self, target_class: type) -> Generator[Any] | None:
        """
        Get the generator for a class.

        Enums get a generator for their members. Other classes get the
        generator registered for the nearest class in their MRO.

        Returns:
            The generator, or None if the class has no built-in generator
        """
        if issubclass(target_class, Enum):
            return self._registry.get(target_class) or EnumGenerator(target_class)

        for klass in target_class.__mro__:
            generator = self._registry.get(klass)
            if generator is not None:
                return generator
        return None

    def supports(self, target_class: type) -> bool:
        return self.resolve(target_class) is not None
