"""
Generators used internally by the handler chain and the fluent API.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..random_source import RandomSource
from ..settings import AfterGenerate
from .base import Generator, Hints

if TYPE_CHECKING:
    from ..instantiator import Instantiator


class GeneratorDecorator(Generator[Any]):
    """
    Generates values with ``delegate`` while reporting ``override``'s hints.

    Used for delegating user generators: the user supplies only hints (for
    example a collection size or nullability) and the value comes from the
    generator resolved for the node. The delegate's own hints are not used.
    """

    def __init__(self, delegate: Generator[Any], override: Generator[Any]):
        self.delegate = delegate
        self.override = override

    def generate(self, random: RandomSource) -> Any:
        return self.delegate.generate(random)

    def hints(self) -> Hints | None:
        return self.override.hints()

    def target_class(self) -> type | None:
        return self.delegate.target_class()

    def api_method(self) -> str | None:
        return self.override.api_method()


class InstantiatingGenerator(Generator[Any]):
    """Creates an instance of a class through the instantiator; the engine then populates it."""

    def __init__(self, instantiator: Instantiator, target: type):
        self._instantiator = instantiator
        self._target = target

    def generate(self, random: RandomSource) -> Any:
        return self._instantiator.instantiate(self._target)

    def hints(self) -> Hints | None:
        return Hints.of(after_generate=AfterGenerate.POPULATE_ALL)

    def target_class(self) -> type | None:
        return self._target


class ValueGenerator(Generator[Any]):
    """Always returns the same value; backs ``set(selector, value)``."""

    def __init__(self, value: Any):
        self._value = value

    def generate(self, random: RandomSource) -> Any:
        return self._value

    def hints(self) -> Hints | None:
        return Hints.of(after_generate=AfterGenerate.DO_NOT_MODIFY)

    def target_class(self) -> type | None:
        return type(self._value) if self._value is not None else None

    def api_method(self) -> str:
        return "set()"


class SupplierGenerator(Generator[Any]):
    """Calls a zero-argument callable for every value; backs ``supply(selector, callable)``."""

    def __init__(self, supplier: Callable[[], Any]):
        self._supplier = supplier

    def generate(self, random: RandomSource) -> Any:
        return self._supplier()

    def hints(self) -> Hints | None:
        return Hints.of(after_generate=AfterGenerate.DO_NOT_MODIFY)

    def api_method(self) -> str:
        return "supply()"
