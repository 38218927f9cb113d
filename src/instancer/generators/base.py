"""
Generator abstractions: generators, hints and generation results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, TypeVar

from ..random_source import RandomSource
from ..settings import AfterGenerate, Settings

H = TypeVar("H")


@dataclass(frozen=True)
class GeneratorContext:
    """Read-only configuration handed to every generator's ``init``."""

    settings: Settings = field(default_factory=Settings)


@dataclass(frozen=True)
class GeneratorHint:
    """
    Hint describing how a generator's value should be treated.

    Attributes:
        target_class: Class to generate instead of the node's declared class
        nullable: Whether the generated value may be replaced by None
        is_delegating: If True the generator only supplies hints; the value
            comes from the generator resolved for ``target_class``
            (or for the node's class when ``target_class`` is None)
    """

    target_class: type | None = None
    nullable: bool = False
    is_delegating: bool = False


@dataclass(frozen=True)
class CollectionHint:
    """
    Number of elements to add to a generated collection or map.

    A bound left as None is taken from the collection or map size settings,
    depending on the kind of node being populated.
    """

    min_size: int | None = None
    max_size: int | None = None


@dataclass(frozen=True)
class Hints:
    """Immutable set of hint objects, at most one per hint class, plus an after-generate action."""

    hints: tuple[Any, ...] = ()
    after_generate: AfterGenerate | None = None

    @classmethod
    def of(cls, *hints: Any, after_generate: AfterGenerate | None = None) -> Hints:
        result = cls(after_generate=after_generate)
        for hint in hints:
            result = result.with_hint(hint)
        return result

    @classmethod
    def empty(cls) -> Hints:
        return cls()

    def get(self, hint_type: type[H]) -> H | None:
        """Get the hint of the given class, if present."""
        for hint in self.hints:
            if type(hint) is hint_type:
                return hint
        return None

    def with_hint(self, hint: Any) -> Hints:
        """Return a copy holding ``hint``, replacing any hint of the same class."""
        others = tuple(h for h in self.hints if type(h) is not type(hint))
        return Hints(others + (hint,), self.after_generate)

    def with_after_generate(self, after_generate: AfterGenerate) -> Hints:
        return Hints(self.hints, after_generate)


class Generator[T](ABC):
    """
    Produces values for nodes.

    Subclasses implement :meth:`generate`. ``init`` is called once per
    generation session before the first ``generate`` call, with the shared
    :class:`GeneratorContext`.
    """

    def init(self, context: GeneratorContext) -> None:  # noqa: B027
        """Initialize the generator from the generation settings."""

    @abstractmethod
    def generate(self, random: RandomSource) -> T:
        """Generate a value."""

    def hints(self) -> Hints | None:
        """Hints describing how the generated value should be treated."""
        return None

    def target_class(self) -> type | None:
        """Class of the values this generator produces, if it is known."""
        return None

    def api_method(self) -> str | None:
        """Name of the API method that created this generator, for error messages."""
        return None


@dataclass(frozen=True)
class GeneratorResult:
    """Terminal output of resolution for one node: a value and its hints."""

    value: Any
    hints: Hints = field(default_factory=Hints)

    @classmethod
    def create(cls, value: Any, hints: Hints | None = None) -> GeneratorResult:
        return cls(value, hints if hints is not None else Hints.empty())

    @classmethod
    def null_result(cls) -> GeneratorResult:
        return cls(None, Hints.of(after_generate=AfterGenerate.DO_NOT_MODIFY))

    @property
    def is_null(self) -> bool:
        return self.value is None
