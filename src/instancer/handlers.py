"""
Handler chain deciding which generator produces each node's value.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any

from .context import ModelContext
from .generators.base import Generator, GeneratorContext, GeneratorHint, GeneratorResult, Hints
from .generators.misc import GeneratorDecorator, InstantiatingGenerator
from .generators.resolver import GeneratorResolver
from .instantiator import Instantiator
from .model.nodes import Node, NodeKind
from .settings import AfterGenerate
from .validation import ApiValidator

logger = logging.getLogger(__name__)


class InitializedGenerators:
    """
    Generators whose ``init`` already ran in this session, keyed by identity.

    The generator objects are held alongside their ids so that an id cannot
    be reused by another object while the session is alive. A
    :class:`GeneratorDecorator` is not tracked itself; its delegate and its
    override are initialized individually.
    """

    def __init__(self, context: GeneratorContext):
        self._context = context
        self._generators: dict[int, Generator[Any]] = {}

    def initialize(self, generator: Generator[Any]) -> None:
        """Run ``generator.init`` unless it already ran in this session."""
        if isinstance(generator, GeneratorDecorator):
            self.initialize(generator.delegate)
            self.initialize(generator.override)
            return

        key = id(generator)
        if key in self._generators:
            return
        logger.debug("Initializing generator %s", type(generator).__name__)
        generator.init(self._context)
        self._generators[key] = generator

    def __contains__(self, generator: object) -> bool:
        return id(generator) in self._generators

    def __len__(self) -> int:
        return len(self._generators)


class NodeHandler(ABC):
    """One link of the handler chain."""

    @abstractmethod
    def attempt(self, node: Node) -> GeneratorResult | None:
        """
        Try to produce a value for the node.

        Returns:
            The result, or None to let the next handler try
        """


class UserSuppliedGeneratorHandler(NodeHandler):
    """
    Produces values with generators the user attached to selectors.

    A generator whose :class:`GeneratorHint` is delegating only contributes
    hints: the value comes from the built-in generator for the hint's target
    class (or the node's class), falling back to instantiating that class.
    """

    def __init__(
        self,
        context: ModelContext,
        resolver: GeneratorResolver,
        instantiator: Instantiator,
        initialized: InitializedGenerators,
    ):
        self._context = context
        self._resolver = resolver
        self._instantiator = instantiator
        self._initialized = initialized
        self._instantiating: dict[type, InstantiatingGenerator] = {}

    def attempt(self, node: Node) -> GeneratorResult | None:
        generator = self._context.get_generator(node)
        if generator is None:
            return None

        ApiValidator.validate_generator_usage(node, generator, self._context.matched_selector(node))
        generator = self._with_delegate(node, generator)
        self._initialized.initialize(generator)
        return GeneratorResult.create(generator.generate(self._context.random), generator.hints())

    def _with_delegate(self, node: Node, generator: Generator[Any]) -> Generator[Any]:
        hints = generator.hints()
        hint = hints.get(GeneratorHint) if hints is not None else None
        if hint is None or not hint.is_delegating:
            return generator

        target = hint.target_class or node.target_class
        delegate = self._resolver.resolve(target)
        if delegate is None:
            delegate = self._instantiating_generator(target)
        logger.debug("Delegating %s to %s for %s", generator.api_method(), type(delegate).__name__, node)
        return GeneratorDecorator(delegate, generator)

    def _instantiating_generator(self, target: type) -> InstantiatingGenerator:
        if target not in self._instantiating:
            self._instantiating[target] = InstantiatingGenerator(self._instantiator, target)
        return self._instantiating[target]


class UsingGeneratorResolverHandler(NodeHandler):
    """Produces values with the built-in generator for the node's class."""

    def __init__(self, context: ModelContext, resolver: GeneratorResolver, initialized: InitializedGenerators):
        self._context = context
        self._resolver = resolver
        self._initialized = initialized

    def attempt(self, node: Node) -> GeneratorResult | None:
        generator = self._resolver.resolve(node.target_class)
        if generator is None:
            return None
        self._initialized.initialize(generator)
        return GeneratorResult.create(generator.generate(self._context.random), generator.hints())


class InstantiatingHandler(NodeHandler):
    """Last handler: creates an empty instance of the node's class to be populated."""

    def __init__(self, instantiator: Instantiator):
        self._instantiator = instantiator

    def attempt(self, node: Node) -> GeneratorResult | None:
        cls = node.target_class
        if node.kind is not NodeKind.DEFAULT or not self._can_instantiate(cls):
            return GeneratorResult.null_result()

        instance = self._instantiator.instantiate(cls)
        if instance is None:
            return GeneratorResult.null_result()
        return GeneratorResult.create(instance, Hints.of(after_generate=AfterGenerate.POPULATE_ALL))

    @staticmethod
    def _can_instantiate(cls: type) -> bool:
        if cls is object or inspect.isabstract(cls):
            return False
        return not getattr(cls, "_is_protocol", False)


class GeneratorFacade:
    """Runs the handlers in order; the first result wins."""

    def __init__(self, handlers: list[NodeHandler]):
        self._handlers = handlers

    @classmethod
    def create(cls, context: ModelContext, resolver: GeneratorResolver, instantiator: Instantiator) -> GeneratorFacade:
        """Build the standard chain: user-supplied, resolver, instantiating."""
        initialized = InitializedGenerators(context.generator_context)
        return cls(
            [
                UserSuppliedGeneratorHandler(context, resolver, instantiator, initialized),
                UsingGeneratorResolverHandler(context, resolver, initialized),
                InstantiatingHandler(instantiator),
            ]
        )

    @property
    def handlers(self) -> list[NodeHandler]:
        return list(self._handlers)

    def generate(self, node: Node) -> GeneratorResult:
        for handler in self._handlers:
            result = handler.attempt(node)
            if result is not None:
                return result
        return GeneratorResult.null_result()
