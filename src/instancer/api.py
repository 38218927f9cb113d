"""
Fluent entry points: Instancer, InstancerApi and Model.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .context import ModelContext
from .engine import InstancerEngine
from .errors import InstancerApiError
from .generators.base import Generator
from .generators.misc import SupplierGenerator, ValueGenerator
from .generators.resolver import GeneratorResolver
from .generators.specs import Generators
from .handlers import GeneratorFacade
from .instantiator import Instantiator
from .model.nodes import Node, NodeFactory
from .model.selectors import Selector, TargetClass, TargetSelector
from .settings import Mode, Settings
from .validation import ApiValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelSpec:
    """Everything configured through :class:`InstancerApi`, frozen for a :class:`Model`."""

    root_type: Any
    settings: Settings = field(default_factory=Settings)
    seed: int | None = None
    generators: tuple[tuple[TargetSelector, Generator[Any]], ...] = ()
    ignored: tuple[TargetSelector, ...] = ()
    nullable: tuple[TargetSelector, ...] = ()


class Model[T]:
    """
    A reusable generation session.

    The node tree, selector maps, random source and initialized generators
    are created once and shared by every :meth:`create` call and every item
    of :meth:`stream`. A model is not thread-safe; use one model per thread.
    """

    def __init__(self, spec: ModelSpec):
        self._spec = spec
        node_factory = NodeFactory(spec.settings)
        self._root = node_factory.create_root_node(spec.root_type)

        context = ModelContext(self._root.target_class, spec.settings, spec.seed)
        for target, generator in spec.generators:
            context.put_generator(target, generator)
        for target in spec.ignored:
            context.put_ignored(target)
        for target in spec.nullable:
            context.put_nullable(target)
        self._context = context

        facade = GeneratorFacade.create(context, GeneratorResolver(), Instantiator())
        self._engine = InstancerEngine(context, self._root, node_factory, facade)
        self._verified = False
        logger.debug("Created model of %s with seed %s", self._root, context.seed)

    @property
    def spec(self) -> ModelSpec:
        return self._spec

    @property
    def seed(self) -> int:
        return self._context.seed

    @property
    def root(self) -> Node:
        return self._root

    @property
    def context(self) -> ModelContext:
        return self._context

    def create(self) -> T:
        """
        Create an object.

        Raises:
            UnusedSelectorError: In strict mode, after the first object, if a
                selector did not match any node
        """
        result = self._engine.create_root_object()
        if not self._verified:
            self._verified = True
            self._context.verify_selectors_used()
        return result

    def stream(self) -> Iterator[T]:
        """Infinite iterator of objects; combine with ``itertools.islice``."""
        while True:
            yield self.create()


class InstancerApi[T]:
    """
    Builder collecting the customizations of one root type.

    Methods return the builder itself so calls can be chained. ``create``
    builds a fresh :class:`Model` per call; use :meth:`to_model` to reuse one.
    """

    def __init__(self, root_type: Any, spec: ModelSpec | None = None):
        self._spec = spec if spec is not None else ModelSpec(root_type)

    def _update(self, **changes: Any) -> InstancerApi[T]:
        self._spec = dataclasses.replace(self._spec, **changes)
        return self

    @staticmethod
    def _target(selector: TargetSelector | type) -> TargetSelector:
        ApiValidator.not_null(selector, "Selector must not be null")
        if isinstance(selector, type):
            return Selector(TargetClass(selector))
        if not isinstance(selector, TargetSelector):
            raise InstancerApiError(f"Not a selector: {selector!r}")
        return selector

    def _add_generator(self, selector: TargetSelector | type, generator: Generator[Any]) -> InstancerApi[T]:
        entry = (self._target(selector), generator)
        return self._update(generators=self._spec.generators + (entry,))

    def generate(
        self, selector: TargetSelector | type, spec: Callable[[Generators], Generator[Any]]
    ) -> InstancerApi[T]:
        """Generate the selected nodes with a built-in generator spec: ``lambda gen: gen.ints().range(1, 5)``."""
        ApiValidator.not_null(spec, "Generator function must not be null")
        generator = spec(Generators())
        ApiValidator.not_null(generator, "Generator function must return a generator")
        return self._add_generator(selector, generator)

    def supply(
        self, selector: TargetSelector | type, supplier: Generator[Any] | Callable[[], Any]
    ) -> InstancerApi[T]:
        """Supply values for the selected nodes from a generator or a zero-argument callable."""
        ApiValidator.not_null(supplier, "Supplier must not be null")
        if isinstance(supplier, Generator):
            return self._add_generator(selector, supplier)
        if callable(supplier):
            return self._add_generator(selector, SupplierGenerator(supplier))
        raise InstancerApiError(f"Not a generator or callable: {supplier!r}")

    def set(self, selector: TargetSelector | type, value: Any) -> InstancerApi[T]:
        """Set the selected nodes to ``value``, which is not modified further."""
        return self._add_generator(selector, ValueGenerator(value))

    def ignore(self, selector: TargetSelector | type) -> InstancerApi[T]:
        """Leave the selected nodes alone: fields keep their defaults, or None."""
        return self._update(ignored=self._spec.ignored + (self._target(selector),))

    def with_nullable(self, selector: TargetSelector | type) -> InstancerApi[T]:
        """Allow the selected nodes to be None."""
        return self._update(nullable=self._spec.nullable + (self._target(selector),))

    def with_seed(self, seed: int) -> InstancerApi[T]:
        ApiValidator.is_true(isinstance(seed, int) and not isinstance(seed, bool), f"Invalid seed: {seed!r}")
        return self._update(seed=seed)

    def with_settings(self, settings: Settings) -> InstancerApi[T]:
        ApiValidator.not_null(settings, "Settings must not be null")
        return self._update(settings=settings)

    def with_setting(self, name: str, value: Any) -> InstancerApi[T]:
        return self._update(settings=self._spec.settings.with_values(**{name: value}))

    def with_max_depth(self, max_depth: int) -> InstancerApi[T]:
        return self.with_setting("max_depth", max_depth)

    def lenient(self) -> InstancerApi[T]:
        """Do not fail on selectors that match no node."""
        return self.with_setting("mode", Mode.LENIENT)

    def to_model(self) -> Model[T]:
        return Model(self._spec)

    def create(self) -> T:
        return self.to_model().create()

    def stream(self) -> Iterator[T]:
        return self.to_model().stream()


class Instancer:
    """
    Entry point of the library.

    Example:
        ```python
        person = Instancer.of(Person).set(Select.field(Person, "name"), "Homer").create()
        people = list(itertools.islice(Instancer.of(Person).stream(), 10))
        ```
    """

    @staticmethod
    def of[T](target: type[T] | Model[T] | Any) -> InstancerApi[T]:
        """
        Start configuring a class, a parameterized alias such as ``list[Person]``,
        or a copy of an existing model's configuration.
        """
        ApiValidator.not_null(target, "Class must not be null")
        if isinstance(target, Model):
            return InstancerApi(target.spec.root_type, target.spec)
        if not isinstance(target, type) and typing.get_origin(target) is None:
            raise InstancerApiError(f"Not a class or parameterized type: {target!r}")
        return InstancerApi(target)

    @staticmethod
    def create[T](target: type[T] | Any) -> T:
        return Instancer.of(target).create()

    @staticmethod
    def stream[T](target: type[T] | Any) -> Iterator[T]:
        return Instancer.of(target).stream()
