"""
Model context: the resolved user configuration of one generation session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .errors import InstancerApiError, UnusedSelectorError
from .generators.base import Generator, GeneratorContext
from .model.nodes import Node
from .model.selectors import PredicateSelector, Selector, TargetSelector, TargetSetter
from .random_source import RandomSource
from .settings import AssignmentType, Mode, Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    selector: Selector | PredicateSelector
    value: Any
    order: int

    @property
    def rank(self) -> tuple[int, int]:
        return int(self.selector.precedence), self.order


class SelectorMap:
    """
    Selector-to-value mapping with precedence ranking.

    For a node, the winning entry is the matching one with the highest
    precedence tier; ties go to the most recently added. Winners are
    remembered so that strict mode can report selectors that never won.
    """

    def __init__(self, root_class: type, settings: Settings):
        self._root_class = root_class
        self._settings = settings
        self._entries: list[_Entry] = []
        self._used: set[int] = set()
        self._cache: dict[Node, _Entry | None] = {}

    def put(self, target: TargetSelector, value: Any) -> None:
        """
        Add an entry for every selector ``target`` stands for.

        Selectors declared without a class are resolved against the root class.

        Raises:
            InstancerApiError: If a selector cannot be resolved against the root
                class, or a setter selector is used without setter assignment
        """
        for selector in target.selectors():
            self._check_setter(selector)
            resolved = selector.resolve(self._root_class)
            self._entries.append(_Entry(resolved, value, len(self._entries)))
        self._cache.clear()

    def _check_setter(self, selector: Selector | PredicateSelector) -> None:
        if not isinstance(selector, Selector) or not isinstance(selector.target, TargetSetter):
            return
        if self._settings.assignment_type is not AssignmentType.METHOD:
            raise InstancerApiError(
                f"Setter selector {selector} requires setter assignment; "
                "set 'assignment_type' to AssignmentType.METHOD"
            )

    def _winner(self, node: Node) -> _Entry | None:
        if node not in self._cache:
            matching = [entry for entry in self._entries if entry.selector.matches(node)]
            self._cache[node] = max(matching, key=lambda entry: entry.rank) if matching else None
        return self._cache[node]

    def get(self, node: Node) -> Any | None:
        entry = self._winner(node)
        if entry is None:
            return None
        self._used.add(entry.order)
        return entry.value

    def selector_for(self, node: Node) -> Selector | PredicateSelector | None:
        entry = self._winner(node)
        return entry.selector if entry is not None else None

    def unused(self) -> list[Selector | PredicateSelector]:
        return [entry.selector for entry in self._entries if entry.order not in self._used]

    def __len__(self) -> int:
        return len(self._entries)


class ModelContext:
    """
    Settings, random source and selector maps of one generation session.

    Args:
        root_class: Class of the root node; selectors without a class bind to it
        settings: Generation settings
        seed: Seed overriding ``settings.seed``
    """

    def __init__(self, root_class: type, settings: Settings, seed: int | None = None):
        self.root_class = root_class
        self.settings = settings
        self.random = RandomSource(seed if seed is not None else settings.seed)
        self.generator_context = GeneratorContext(settings)
        self._generators = SelectorMap(root_class, settings)
        self._ignored = SelectorMap(root_class, settings)
        self._nullable = SelectorMap(root_class, settings)
        logger.debug("Model context for %s created with seed %s", root_class.__qualname__, self.random.seed)

    @property
    def seed(self) -> int:
        return self.random.seed

    def put_generator(self, target: TargetSelector, generator: Generator[Any]) -> None:
        self._generators.put(target, generator)

    def put_ignored(self, target: TargetSelector) -> None:
        self._ignored.put(target, True)

    def put_nullable(self, target: TargetSelector) -> None:
        self._nullable.put(target, True)

    def get_generator(self, node: Node) -> Generator[Any] | None:
        """The user-supplied generator for the node, if a selector matches it."""
        return self._generators.get(node)

    def matched_selector(self, node: Node) -> Selector | PredicateSelector | None:
        """The selector whose generator applies to the node, for error messages."""
        return self._generators.selector_for(node)

    def is_ignored(self, node: Node) -> bool:
        return bool(self._ignored.get(node))

    def is_nullable(self, node: Node) -> bool:
        return bool(self._nullable.get(node))

    def unused_selectors(self) -> list[Selector | PredicateSelector]:
        maps: Iterable[SelectorMap] = (self._generators, self._ignored, self._nullable)
        return [selector for selector_map in maps for selector in selector_map.unused()]

    def verify_selectors_used(self) -> None:
        """
        Raises:
            UnusedSelectorError: In strict mode, if a selector never matched a node
        """
        if self.settings.mode is not Mode.STRICT:
            return
        unused = self.unused_selectors()
        if unused:
            raise UnusedSelectorError(unused)
