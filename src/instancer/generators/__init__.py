"""
Value generators and the generator resolver.
"""

from .base import CollectionHint, Generator, GeneratorContext, GeneratorHint, GeneratorResult, Hints
from .builtin import (
    AbstractGenerator,
    BooleanGenerator,
    CollectionGenerator,
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
from .misc import GeneratorDecorator, InstantiatingGenerator, SupplierGenerator, ValueGenerator
from .resolver import GeneratorResolver
from .specs import Generators

__all__ = [
    "AbstractGenerator",
    "BooleanGenerator",
    "CollectionGenerator",
    "CollectionHint",
    "CollectionSpec",
    "DateGenerator",
    "DateTimeGenerator",
    "DecimalGenerator",
    "DelegatingGenerator",
    "EnumGenerator",
    "FloatGenerator",
    "Generator",
    "GeneratorContext",
    "GeneratorDecorator",
    "GeneratorHint",
    "GeneratorResolver",
    "GeneratorResult",
    "Generators",
    "Hints",
    "InstantiatingGenerator",
    "IntGenerator",
    "OneOfGenerator",
    "StringGenerator",
    "SupplierGenerator",
    "UUIDGenerator",
    "ValueGenerator",
]
