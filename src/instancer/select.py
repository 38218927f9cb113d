"""
Public API for building selectors and scopes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .errors import InstancerApiError
from .model.selectors import (
    FieldSelectorBuilder,
    GroupableSelector,
    PredicateSelector,
    Scope,
    Selector,
    SelectorGroup,
    TargetClass,
    TargetField,
    TargetRoot,
    TargetSetter,
    TypeSelectorBuilder,
)
from .reflection import FieldInfo, Reflector
from .validation import ApiValidator

_MISSING: Any = object()


class Select:
    """
    Factory for selectors.

    Exact selectors (``all``, ``field``, ``setter``, ``root``) always take
    precedence over predicate selectors (``fields``, ``types``), whatever
    the order they were declared in.

    Example:
        ```python
        Instancer.of(Person)
            .set(Select.field(Person, "name"), "Homer")
            .generate(Select.all(int).within(Select.scope(Address)), lambda gen: gen.ints().range(1, 9))
            .create()
        ```
    """

    @staticmethod
    def all(*targets: type | GroupableSelector) -> Selector | SelectorGroup:
        """
        Select all nodes of a class, or combine several selectors into a group.

        ``Select.all(Person)`` matches every node whose class is exactly
        ``Person``. ``Select.all(sel1, sel2)`` matches any node matched by a
        member; members keep their own precedence.

        Raises:
            InstancerApiError: If no arguments are given or an argument is None
        """
        if len(targets) == 1 and isinstance(targets[0], type):
            return Selector(TargetClass(targets[0]))

        ApiValidator.not_empty(targets, "Selector group must contain at least one selector")
        members: list[GroupableSelector] = []
        for target in targets:
            ApiValidator.not_null(target, "Selector group must not contain null elements")
            if isinstance(target, type):
                members.append(Selector(TargetClass(target)))
            elif isinstance(target, GroupableSelector):
                members.append(target)
            else:
                raise InstancerApiError(f"Not a groupable selector: {target!r}")
        return SelectorGroup(tuple(members))

    @staticmethod
    def field(target: type | str | Callable[..., Any] | property, field_name: str | None = None) -> Selector:
        """
        Select a field.

        Accepted forms:
            - ``field(Person, "name")``: field ``name`` of ``Person`` and its subclasses
            - ``field("name")``: field ``name`` of the root class
            - ``field(Person.get_name)`` or ``field(Person.name_property)``: the field read by a getter

        Raises:
            InstancerApiError: If an argument is None or the field cannot be resolved
        """
        if isinstance(target, type):
            ApiValidator.not_null(field_name, "field name must not be null")
            assert field_name is not None
            Reflector.get_field(target, field_name)
            return Selector(TargetField(target, field_name))

        if field_name is not None:
            ApiValidator.not_null(target, "declaring class must not be null")
            ApiValidator.is_class(target, "declaring class must be a class")

        ApiValidator.not_null(target, "field name must not be null")
        if isinstance(target, str):
            return Selector(TargetField(None, target))

        cls, field = Reflector.field_from_getter(target)
        return Selector(TargetField(cls, field.name))

    @staticmethod
    def setter(
        target: type | str | Callable[..., Any],
        method_name: str | None = None,
        param_type: type | None = None,
    ) -> Selector:
        """
        Select a setter method; only applies when assignment is via setters.

        Accepted forms: ``setter("set_name")``, ``setter(Person, "set_name")``,
        ``setter(Person, "set_name", str)`` and ``setter(Person.set_name)``.

        Raises:
            InstancerApiError: If an argument is None or no such method exists
        """
        if isinstance(target, str):
            return Selector(TargetSetter(None, target, param_type))

        if isinstance(target, type):
            ApiValidator.not_null(method_name, "method name must not be null")
            assert method_name is not None
            Reflector.get_setter(target, method_name, param_type)
            return Selector(TargetSetter(target, method_name, param_type))

        ApiValidator.not_null(target, "setter method reference must not be null")
        cls, method = Reflector.setter_from_reference(target)
        return Selector(TargetSetter(cls, method.name))

    @staticmethod
    def fields(predicate: Callable[[FieldInfo], bool] = _MISSING) -> FieldSelectorBuilder | PredicateSelector:
        """
        Select fields matching a predicate.

        Without arguments returns a builder: ``Select.fields().named("id").of_type(int)``.
        """
        if predicate is _MISSING:
            return FieldSelectorBuilder()
        ApiValidator.not_null(predicate, "Field predicate must not be null")
        return PredicateSelector(
            lambda node: node.field is not None and bool(predicate(node.field)),
            "fields(<predicate>)",
        )

    @staticmethod
    def types(predicate: Callable[[type], bool] = _MISSING) -> TypeSelectorBuilder | PredicateSelector:
        """
        Select types matching a predicate.

        Without arguments returns a builder: ``Select.types().of(Animal)``.
        """
        if predicate is _MISSING:
            return TypeSelectorBuilder()
        ApiValidator.not_null(predicate, "Type predicate must not be null")
        return PredicateSelector(lambda node: bool(predicate(node.target_class)), "types(<predicate>)")

    @staticmethod
    def scope(
        target: type | Callable[..., Any] | property | PredicateSelector | FieldSelectorBuilder | TypeSelectorBuilder,
        field_name: str | None = None,
    ) -> Scope:
        """
        Create a scope for ``Selector.within()``.

        Accepted forms: ``scope(Address)``, ``scope(Person, "address")``,
        ``scope(Person.get_address)`` and ``scope(predicate_selector)``.
        """
        ApiValidator.not_null(target, "Scope class must not be null")

        if isinstance(target, PredicateSelector):
            return Scope(target)
        if isinstance(target, (FieldSelectorBuilder, TypeSelectorBuilder)):
            return Scope(target.build())

        if isinstance(target, type):
            if field_name is None:
                return Scope(TargetClass(target))
            Reflector.get_field(target, field_name)
            return Scope(TargetField(target, field_name))

        cls, field = Reflector.field_from_getter(target)
        return Scope(TargetField(cls, field.name))

    @staticmethod
    def root() -> Selector:
        """Select the root object."""
        return Selector(TargetRoot())

    @staticmethod
    def all_strings() -> Selector:
        return Selector(TargetClass(str))

    @staticmethod
    def all_ints() -> Selector:
        return Selector(TargetClass(int))

    @staticmethod
    def all_floats() -> Selector:
        return Selector(TargetClass(float))

    @staticmethod
    def all_booleans() -> Selector:
        return Selector(TargetClass(bool))
