"""
Selector model: immutable matchers describing which nodes a rule applies to.
"""

from __future__ import annotations

import dataclasses
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar

from ..reflection import Reflector
from .nodes import Node


class Precedence(IntEnum):
    """Selector precedence tiers; a higher tier always wins."""

    PREDICATE = 1
    EXACT = 2


def _type_name(cls: Any) -> str:
    return getattr(cls, "__name__", str(cls))


class Target(ABC):
    """What an exact selector points at."""

    @abstractmethod
    def matches(self, node: Node) -> bool:
        """Check whether the node is the target."""

    def resolve(self, root_class: type) -> Target:  # noqa: ARG002
        """Bind a target that was declared without a class to the root class."""
        return self


@dataclass(frozen=True)
class TargetClass(Target):
    target_class: type

    def matches(self, node: Node) -> bool:
        return node.target_class is self.target_class

    def __str__(self) -> str:
        return f"all({_type_name(self.target_class)})"


@dataclass(frozen=True)
class TargetField(Target):
    declaring_class: type | None
    field_name: str

    def matches(self, node: Node) -> bool:
        if node.field is None or node.field.name != self.field_name:
            return False
        owner = node.owner_class
        return self.declaring_class is not None and owner is not None and issubclass(owner, self.declaring_class)

    def resolve(self, root_class: type) -> Target:
        if self.declaring_class is not None:
            return self
        Reflector.get_field(root_class, self.field_name)
        return TargetField(root_class, self.field_name)

    def __str__(self) -> str:
        if self.declaring_class is None:
            return f"field('{self.field_name}')"
        return f"field({_type_name(self.declaring_class)}, '{self.field_name}')"


@dataclass(frozen=True)
class TargetSetter(Target):
    declaring_class: type | None
    method_name: str
    param_type: Any = None

    def matches(self, node: Node) -> bool:
        setter = node.setter
        if setter is None or setter.name != self.method_name:
            return False
        if self.param_type is not None and setter.param_type is not self.param_type:
            return False
        owner = node.owner_class
        return self.declaring_class is not None and owner is not None and issubclass(owner, self.declaring_class)

    def resolve(self, root_class: type) -> Target:
        if self.declaring_class is not None:
            return self
        Reflector.get_setter(root_class, self.method_name, self.param_type)
        return TargetSetter(root_class, self.method_name, self.param_type)

    def __str__(self) -> str:
        args = [f"'{self.method_name}'"]
        if self.declaring_class is not None:
            args.insert(0, _type_name(self.declaring_class))
        if self.param_type is not None:
            args.append(_type_name(self.param_type))
        return f"setter({', '.join(args)})"


@dataclass(frozen=True)
class TargetRoot(Target):
    def matches(self, node: Node) -> bool:
        return node.is_root

    def __str__(self) -> str:
        return "root()"


@dataclass(frozen=True)
class Scope:
    """
    Narrows a selector to a subtree.

    A node is within a scope when the node itself or one of its ancestors
    matches the scope's target and, if the scope has a parent, that matching
    node is in turn within the parent scope.
    """

    target: Target | PredicateSelector
    parent: Scope | None = None

    def matches(self, node: Node) -> bool:
        for ancestor in node.ancestors():
            if self.target.matches(ancestor) and (self.parent is None or self.parent.matches(ancestor)):
                return True
        return False

    def within(self, outer: Scope) -> Scope:
        """Return a copy of this scope nested inside ``outer``."""
        parent = outer if self.parent is None else self.parent.within(outer)
        return dataclasses.replace(self, parent=parent)

    def resolve(self, root_class: type) -> Scope:
        target = self.target.resolve(root_class) if isinstance(self.target, Target) else self.target
        parent = self.parent.resolve(root_class) if self.parent is not None else None
        return Scope(target, parent)

    def chain(self) -> list[Scope]:
        """Scopes from outermost to this one."""
        scopes: list[Scope] = []
        scope: Scope | None = self
        while scope is not None:
            scopes.insert(0, scope)
            scope = scope.parent
        return scopes

    def __str__(self) -> str:
        target = self.target
        if isinstance(target, TargetClass):
            return f"scope({_type_name(target.target_class)})"
        if isinstance(target, TargetField):
            return f"scope({_type_name(target.declaring_class)}, '{target.field_name}')"
        return f"scope({target})"


def _nest(scope: Scope | None, scopes: tuple[Scope, ...]) -> Scope | None:
    chain = None
    for outer_to_inner in scopes:
        chain = outer_to_inner if chain is None else outer_to_inner.within(chain)
    if chain is None:
        return scope
    return chain if scope is None else scope.within(chain)


def _within_str(scope: Scope | None) -> str:
    if scope is None:
        return ""
    return f".within({', '.join(str(s) for s in scope.chain())})"


class TargetSelector(ABC):
    """Anything that can be passed where a selector is expected."""

    @abstractmethod
    def selectors(self) -> list[Selector | PredicateSelector]:
        """The flat list of selectors this object stands for."""

    @abstractmethod
    def matches(self, node: Node) -> bool:
        """Check whether the node is selected."""


class GroupableSelector(TargetSelector):
    """A selector that may be a member of a :class:`SelectorGroup`."""


@dataclass(frozen=True)
class Selector(GroupableSelector):
    """Exact selector: matches by class, field, setter or root position."""

    target: Target
    scope: Scope | None = None

    precedence: ClassVar[Precedence] = Precedence.EXACT

    def matches(self, node: Node) -> bool:
        return self.target.matches(node) and (self.scope is None or self.scope.matches(node))

    def within(self, *scopes: Scope) -> Selector:
        """Restrict this selector to the given scopes, outermost first."""
        return dataclasses.replace(self, scope=_nest(self.scope, scopes))

    def to_scope(self) -> Scope:
        """Convert this selector into a scope."""
        return Scope(self.target, self.scope)

    def resolve(self, root_class: type) -> Selector:
        scope = self.scope.resolve(root_class) if self.scope is not None else None
        return Selector(self.target.resolve(root_class), scope)

    def selectors(self) -> list[Selector | PredicateSelector]:
        return [self]

    def __str__(self) -> str:
        return f"{self.target}{_within_str(self.scope)}"


@dataclass(frozen=True)
class PredicateSelector(GroupableSelector):
    """Selector matching nodes that satisfy a predicate; lowest precedence."""

    predicate: Callable[[Node], bool]
    description: str = "<predicate>"
    scope: Scope | None = None

    precedence: ClassVar[Precedence] = Precedence.PREDICATE

    def matches(self, node: Node) -> bool:
        return self.predicate(node) and (self.scope is None or self.scope.matches(node))

    def within(self, *scopes: Scope) -> PredicateSelector:
        return dataclasses.replace(self, scope=_nest(self.scope, scopes))

    def to_scope(self) -> Scope:
        return Scope(self)

    def resolve(self, root_class: type) -> PredicateSelector:
        if self.scope is None:
            return self
        return dataclasses.replace(self, scope=self.scope.resolve(root_class))

    def selectors(self) -> list[Selector | PredicateSelector]:
        return [self]

    def __str__(self) -> str:
        return f"{self.description}{_within_str(self.scope)}"


@dataclass(frozen=True)
class _PredicateSelectorBuilder(GroupableSelector):
    _base: ClassVar[str]
    predicates: tuple[tuple[str, Callable[[Node], bool]], ...] = ()
    scope: Scope | None = None

    def _with(self, description: str, predicate: Callable[[Node], bool]) -> Any:
        return dataclasses.replace(self, predicates=self.predicates + ((description, predicate),))

    def within(self, *scopes: Scope) -> Any:
        return dataclasses.replace(self, scope=_nest(self.scope, scopes))

    def _base_predicate(self, node: Node) -> bool:  # noqa: ARG002
        return True

    def build(self) -> PredicateSelector:
        predicates = tuple(p for _, p in self.predicates)
        base = self._base_predicate

        def predicate(node: Node) -> bool:
            return base(node) and all(p(node) for p in predicates)

        return PredicateSelector(predicate, str(self), self.scope)

    def to_scope(self) -> Scope:
        return self.build().to_scope()

    def selectors(self) -> list[Selector | PredicateSelector]:
        return [self.build()]

    def matches(self, node: Node) -> bool:
        return self.build().matches(node)

    def __str__(self) -> str:
        return self._base + "".join(f".{description}" for description, _ in self.predicates)


@dataclass(frozen=True)
class FieldSelectorBuilder(_PredicateSelectorBuilder):
    """Fluent predicate selector over fields: ``Select.fields().named("id")``."""

    _base: ClassVar[str] = "fields()"

    def _base_predicate(self, node: Node) -> bool:
        return node.field is not None

    def named(self, name: str) -> FieldSelectorBuilder:
        return self._with(f"named('{name}')", lambda node: node.field is not None and node.field.name == name)

    def matching(self, regex: str) -> FieldSelectorBuilder:
        pattern = re.compile(regex)
        return self._with(
            f"matching('{regex}')",
            lambda node: node.field is not None and pattern.fullmatch(node.field.name) is not None,
        )

    def of_type(self, field_type: type) -> FieldSelectorBuilder:
        return self._with(f"of_type({_type_name(field_type)})", lambda node: node.target_class is field_type)

    def declared_in(self, cls: type) -> FieldSelectorBuilder:
        return self._with(
            f"declared_in({_type_name(cls)})",
            lambda node: node.field is not None and node.field.declaring_class is cls,
        )


@dataclass(frozen=True)
class TypeSelectorBuilder(_PredicateSelectorBuilder):
    """Fluent predicate selector over types: ``Select.types().of(Animal)``."""

    _base: ClassVar[str] = "types()"

    def of(self, cls: type) -> TypeSelectorBuilder:
        return self._with(f"of({_type_name(cls)})", lambda node: issubclass(node.target_class, cls))

    def excluding(self, cls: type) -> TypeSelectorBuilder:
        return self._with(f"excluding({_type_name(cls)})", lambda node: node.target_class is not cls)


@dataclass(frozen=True)
class SelectorGroup(TargetSelector):
    """A non-empty group of selectors sharing one rule; matches if any member matches."""

    members: tuple[GroupableSelector, ...] = field(default_factory=tuple)

    def selectors(self) -> list[Selector | PredicateSelector]:
        return [selector for member in self.members for selector in member.selectors()]

    def matches(self, node: Node) -> bool:
        return any(member.matches(node) for member in self.members)

    def __str__(self) -> str:
        return f"all({', '.join(str(member) for member in self.members)})"
