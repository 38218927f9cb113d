"""
Node model: the tree of positions in the object graph being generated.
"""

from __future__ import annotations

import collections.abc
import logging
import types
import typing
from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Any, TypeVar, Union

from ..reflection import FieldInfo, MethodInfo, Reflector
from ..settings import AssignmentType, Settings

logger = logging.getLogger(__name__)

_COLLECTION_TYPES: dict[Any, type] = {
    list: list,
    set: set,
    frozenset: frozenset,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
}

_MAP_TYPES: dict[Any, type] = {
    dict: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}


class NodeKind(Enum):
    """Structural kind of a node, which decides how its children are filled."""

    DEFAULT = "default"
    COLLECTION = "collection"
    MAP = "map"
    TUPLE = "tuple"


class Node:
    """
    A position in the object graph.

    A node knows the class to generate, the field it is assigned to (if any),
    its parent and its children. Nodes are created by :class:`NodeFactory`
    and are not modified afterwards.
    """

    def __init__(
        self,
        target_class: type,
        *,
        type_args: tuple[Any, ...] = (),
        field: FieldInfo | None = None,
        setter: MethodInfo | None = None,
        parent: Node | None = None,
        kind: NodeKind = NodeKind.DEFAULT,
        optional: bool = False,
    ):
        self.target_class = target_class
        self.type_args = type_args
        self.field = field
        self.setter = setter
        self.parent = parent
        self.kind = kind
        self.optional = optional
        self.depth: int = 0 if parent is None else parent.depth + 1
        self.cyclic = False
        self.children: list[Node] = []

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def owner_class(self) -> type | None:
        """Class of the object this node's field belongs to."""
        return self.parent.target_class if self.parent is not None else None

    def ancestors(self) -> Iterator[Node]:
        """Iterate from this node up to the root, this node included."""
        node: Node | None = self
        while node is not None:
            yield node
            node = node.parent

    def ancestor_path(self) -> list[Node]:
        """Nodes from the root down to this node."""
        return list(reversed(list(self.ancestors())))

    def __str__(self) -> str:
        type_name = getattr(self.target_class, "__name__", str(self.target_class))
        if self.parent is None:
            return f"root ({type_name})"
        if self.field is not None:
            owner = self.owner_class.__name__ if self.owner_class is not None else "?"
            return f"field '{owner}.{self.field.name}' ({type_name})"
        return f"element of {self.parent} ({type_name})"

    def __repr__(self) -> str:
        return f"Node[{self}, depth={self.depth}]"


class NodeFactory:
    """Builds node trees from classes and type annotations."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._subtype_nodes: dict[tuple[Node, type], Node] = {}

    def create_root_node(self, root_type: Any) -> Node:
        """Create the tree for a root class or parameterized alias such as ``list[Person]``."""
        target_class, type_args, optional = self._resolve_type(root_type, {})
        node = Node(
            target_class,
            type_args=type_args,
            kind=self._kind_of(target_class, type_args),
            optional=optional,
        )
        self._add_children(node)
        return node

    def create_subtype_node(self, node: Node, subtype: type) -> Node:
        """
        Create (once) a node for a subclass of ``node``'s class at the same position.

        Used when a generator produced an instance of a subclass, so that
        the subclass's own fields get populated.
        """
        key = (node, subtype)
        if key not in self._subtype_nodes:
            subtype_node = Node(
                subtype,
                field=node.field,
                setter=node.setter,
                parent=node.parent,
                kind=NodeKind.DEFAULT,
                optional=node.optional,
            )
            self._add_children(subtype_node)
            self._subtype_nodes[key] = subtype_node
        return self._subtype_nodes[key]

    def _create_node(
        self,
        annotation: Any,
        parent: Node,
        type_map: dict[Any, Any],
        field: FieldInfo | None = None,
    ) -> Node:
        target_class, type_args, optional = self._resolve_type(annotation, type_map)
        setter = None
        if field is not None and self._settings.assignment_type is AssignmentType.METHOD:
            setter = Reflector.find_setter(parent.target_class, field)

        node = Node(
            target_class,
            type_args=type_args,
            field=field,
            setter=setter,
            parent=parent,
            kind=self._kind_of(target_class, type_args),
            optional=optional,
        )
        self._add_children(node)
        return node

    def _add_children(self, node: Node) -> None:
        if node.depth > self._settings.max_depth:
            logger.debug("Maximum depth %s reached at %s", self._settings.max_depth, node)
            return

        if node.kind is NodeKind.DEFAULT:
            if self._is_cyclic(node):
                logger.debug("Cycle detected at %s", node)
                node.cyclic = True
                return
            type_map = self._type_map(node.target_class, node.type_args)
            for field in Reflector.get_fields(node.target_class):
                node.children.append(self._create_node(field.type, node, type_map, field))

        elif node.kind is NodeKind.COLLECTION:
            element = node.type_args[0] if node.type_args else object
            node.children.append(self._create_node(element, node, {}))

        elif node.kind is NodeKind.MAP:
            key, value = node.type_args if len(node.type_args) == 2 else (object, object)
            node.children.append(self._create_node(key, node, {}))
            node.children.append(self._create_node(value, node, {}))

        elif node.kind is NodeKind.TUPLE:
            for element in node.type_args:
                node.children.append(self._create_node(element, node, {}))

    @staticmethod
    def _is_cyclic(node: Node) -> bool:
        if not Reflector.get_fields(node.target_class):
            return False
        return any(
            ancestor.target_class is node.target_class and ancestor.kind is NodeKind.DEFAULT
            for ancestor in node.ancestors()
            if ancestor is not node
        )

    @staticmethod
    def _kind_of(target_class: type, type_args: tuple[Any, ...]) -> NodeKind:
        if target_class in _MAP_TYPES.values():
            return NodeKind.MAP
        if target_class in _COLLECTION_TYPES.values():
            return NodeKind.COLLECTION
        if target_class is tuple:
            if not type_args or (len(type_args) == 2 and type_args[1] is Ellipsis):
                return NodeKind.COLLECTION
            return NodeKind.TUPLE
        return NodeKind.DEFAULT

    @staticmethod
    def _type_map(target_class: type, type_args: tuple[Any, ...]) -> dict[Any, Any]:
        parameters = getattr(target_class, "__parameters__", ())
        return dict(zip(parameters, type_args))

    def _resolve_type(self, annotation: Any, type_map: dict[Any, Any]) -> tuple[type, tuple[Any, ...], bool]:
        """Reduce an annotation to ``(class, type arguments, optional)``."""
        annotation = self._substitute(annotation, type_map)
        optional = False
        if annotation is Any:
            return object, (), False

        origin = typing.get_origin(annotation)
        if origin is Annotated:
            annotation = typing.get_args(annotation)[0]
            origin = typing.get_origin(annotation)

        if origin is Union or origin is types.UnionType:
            members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            optional = len(members) < len(typing.get_args(annotation))
            target_class, type_args, _ = self._resolve_type(members[0] if members else object, {})
            return target_class, type_args, optional

        if origin is not None:
            type_args = typing.get_args(annotation)
            target_class = origin
        elif isinstance(annotation, typing.NewType):
            return self._resolve_type(annotation.__supertype__, {})
        else:
            type_args = ()
            target_class = annotation

        if target_class in _COLLECTION_TYPES:
            target_class = _COLLECTION_TYPES[target_class]
        elif target_class in _MAP_TYPES:
            target_class = _MAP_TYPES[target_class]

        if not isinstance(target_class, type):
            target_class = object
        return target_class, type_args, optional

    def _substitute(self, annotation: Any, type_map: dict[Any, Any]) -> Any:
        if isinstance(annotation, TypeVar):
            return type_map.get(annotation, annotation.__bound__ or object)
        if not type_map:
            return annotation

        args = typing.get_args(annotation)
        if not args:
            return annotation
        new_args = tuple(self._substitute(arg, type_map) for arg in args)
        if isinstance(annotation, types.GenericAlias):
            return types.GenericAlias(typing.get_origin(annotation), new_args)
        if isinstance(annotation, types.UnionType) or typing.get_origin(annotation) is Union:
            return Union[new_args]
        if hasattr(annotation, "copy_with"):
            return annotation.copy_with(new_args)
        return annotation
