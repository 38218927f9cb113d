"""
Generation engine: recursive descent over the node tree.
"""

from __future__ import annotations

import logging
from typing import Any

from .context import ModelContext
from .errors import InstancerError, ReflectionError
from .generators.base import CollectionHint, GeneratorHint, GeneratorResult, Hints
from .handlers import GeneratorFacade
from .model.nodes import Node, NodeFactory, NodeKind
from .reflection import Reflector
from .settings import AfterGenerate, AssignmentType, OnSetMethodNotFound

logger = logging.getLogger(__name__)

# attempts per requested element when collisions shrink sets and maps
_MAX_ATTEMPTS_PER_ELEMENT = 10


class InstancerEngine:
    """
    Fills the node tree with generated values.

    For every node the generator facade produces a value and hints; the
    hints decide whether the value may be replaced by None and whether its
    fields or elements are populated in turn.
    """

    def __init__(self, context: ModelContext, root: Node, node_factory: NodeFactory, facade: GeneratorFacade):
        self._context = context
        self._settings = context.settings
        self._random = context.random
        self._root = root
        self._node_factory = node_factory
        self._facade = facade

    def create_root_object(self) -> Any:
        try:
            return self._generate(self._root)
        except InstancerError:
            logger.error("Failed to create %s with seed %s", self._root, self._context.seed)
            raise

    def _generate(self, node: Node) -> Any:
        if node.cyclic or node.depth > self._settings.max_depth:
            return None
        if self._context.is_ignored(node):
            return None

        result = self._facade.generate(node)
        if self._is_nulled(node, result):
            return None

        value = result.value
        if value is None:
            return None

        action = result.hints.after_generate or self._settings.after_generate_hint
        if action is AfterGenerate.DO_NOT_MODIFY:
            return value
        return self._populate(node, value, result.hints, action)

    def _is_nulled(self, node: Node, result: GeneratorResult) -> bool:
        hint = result.hints.get(GeneratorHint)
        selected = self._context.is_nullable(node)
        nullable = (
            selected
            or (hint is not None and hint.nullable)
            or (node.optional and self._settings.optional_nullable)
        )
        return nullable and self._random.dice_roll()

    def _populate(self, node: Node, value: Any, hints: Hints, action: AfterGenerate) -> Any:
        if node.kind is NodeKind.COLLECTION:
            return self._populate_collection(node, value, hints, action)
        if node.kind is NodeKind.MAP:
            return self._populate_map(node, value, hints, action)
        if node.kind is NodeKind.TUPLE:
            return self._populate_tuple(node, value, action)
        self._populate_object(node, value, action)
        return value

    def _populate_object(self, node: Node, obj: Any, action: AfterGenerate) -> None:
        actual = type(obj)
        if actual is not node.target_class and issubclass(actual, node.target_class):
            node = self._node_factory.create_subtype_node(node, actual)

        for child in node.children:
            if child.field is None:
                continue
            name = child.field.name
            if self._context.is_ignored(child):
                if not hasattr(obj, name):
                    self._assign(obj, child, None)
                continue
            if action is AfterGenerate.POPULATE_NULLS and Reflector.has_value(obj, name):
                continue
            self._assign(obj, child, self._generate(child))

    def _assign(self, obj: Any, node: Node, value: Any) -> None:
        assert node.field is not None
        path = str(node)
        if self._settings.assignment_type is AssignmentType.METHOD:
            if node.setter is not None:
                Reflector.invoke_setter(obj, node.setter, value, path)
                return
            policy = self._settings.on_set_method_not_found
            if policy is OnSetMethodNotFound.IGNORE:
                return
            if policy is OnSetMethodNotFound.FAIL:
                raise ReflectionError(f"No setter method found for field '{node.field}'", path=path)
        Reflector.set_field(obj, node.field.name, value, path)

    def _size(self, node: Node, hints: Hints) -> int:
        if node.kind is NodeKind.MAP:
            lower, upper = self._settings.map_min_size, self._settings.map_max_size
        else:
            lower, upper = self._settings.collection_min_size, self._settings.collection_max_size

        hint = hints.get(CollectionHint)
        if hint is not None:
            if hint.min_size is not None and hint.max_size is not None:
                lower, upper = hint.min_size, hint.max_size
            elif hint.min_size is not None:
                lower, upper = hint.min_size, max(hint.min_size, upper)
            elif hint.max_size is not None:
                lower, upper = min(lower, hint.max_size), hint.max_size
        return self._random.int_range(lower, max(lower, upper))

    def _populate_collection(self, node: Node, container: Any, hints: Hints, action: AfterGenerate) -> Any:
        if not node.children or (action is AfterGenerate.POPULATE_NULLS and len(container) > 0):
            return container
        element = node.children[0]
        if self._context.is_ignored(element):
            return container

        size = self._size(node, hints)
        unique = isinstance(container, (set, frozenset))
        items: list[Any] = []
        seen: set[Any] = set()
        attempts = 0
        while len(items) < size and attempts < size * _MAX_ATTEMPTS_PER_ELEMENT:
            attempts += 1
            item = self._generate(element)
            if item is None:
                if not unique:
                    # nulls are skipped without retrying
                    size -= 1
                continue
            if unique:
                if item in seen:
                    continue
                seen.add(item)
            items.append(item)

        if isinstance(container, list):
            container.extend(items)
            return container
        if isinstance(container, set):
            container.update(items)
            return container
        return type(container)([*container, *items])

    def _populate_map(self, node: Node, container: Any, hints: Hints, action: AfterGenerate) -> Any:
        if len(node.children) != 2 or (action is AfterGenerate.POPULATE_NULLS and len(container) > 0):
            return container
        key_node, value_node = node.children
        if self._context.is_ignored(key_node):
            return container

        size = self._size(node, hints)
        added = 0
        attempts = 0
        while added < size and attempts < size * _MAX_ATTEMPTS_PER_ELEMENT:
            attempts += 1
            key = self._generate(key_node)
            if key is None or key in container:
                continue
            container[key] = None if self._context.is_ignored(value_node) else self._generate(value_node)
            added += 1
        return container

    def _populate_tuple(self, node: Node, container: Any, action: AfterGenerate) -> Any:
        if action is AfterGenerate.POPULATE_NULLS and len(container) > 0:
            return container
        return tuple(
            None if self._context.is_ignored(child) else self._generate(child) for child in node.children
        )
