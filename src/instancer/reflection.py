"""
Reflective access to fields and methods of user classes.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .errors import InstancerApiError, ReflectionError

_GETTER_PREFIXES = ("get_", "is_")
SETTER_PREFIX = "set_"


@dataclass(frozen=True)
class FieldInfo:
    """A field declared on a class: a dataclass field or a class-level annotation."""

    declaring_class: type
    name: str
    type: Any = Any

    def __str__(self) -> str:
        return f"{self.declaring_class.__name__}.{self.name}"


@dataclass(frozen=True)
class MethodInfo:
    """A single-argument setter method."""

    declaring_class: type
    name: str
    param_type: Any = None

    def __str__(self) -> str:
        param = getattr(self.param_type, "__name__", "?") if self.param_type is not None else "?"
        return f"{self.declaring_class.__name__}.{self.name}({param})"


class Reflector:
    """Catalog of fields and methods, and reflective reads and writes."""

    @staticmethod
    def get_fields(cls: type) -> list[FieldInfo]:
        """
        Get the fields of a class in declaration order, base classes first.

        Builtin types and enums have no fields. ``ClassVar`` annotations are
        not fields.

        Raises:
            ReflectionError: If the class annotations cannot be resolved
        """
        if cls.__module__ == "builtins" or issubclass(cls, Enum):
            return []

        try:
            hints = typing.get_type_hints(cls)
        except (NameError, TypeError, AttributeError) as exc:
            raise ReflectionError(
                f"Could not resolve type annotations of {cls.__qualname__}", path=cls.__qualname__
            ) from exc

        if dataclasses.is_dataclass(cls):
            names = [f.name for f in dataclasses.fields(cls)]
        else:
            names = []
            for klass in reversed(cls.__mro__):
                for name in inspect.get_annotations(klass):
                    if name not in names and not name.startswith("__"):
                        names.append(name)

        fields = []
        for name in names:
            hint = hints.get(name, Any)
            if typing.get_origin(hint) is ClassVar or hint is ClassVar:
                continue
            fields.append(FieldInfo(Reflector._declaring_class(cls, name), name, hint))
        return fields

    @staticmethod
    def find_field(cls: type, name: str) -> FieldInfo | None:
        for field in Reflector.get_fields(cls):
            if field.name == name:
                return field
        return None

    @staticmethod
    def get_field(cls: type, name: str) -> FieldInfo:
        """Get a field by name, failing with an API error if the class has no such field."""
        field = Reflector.find_field(cls, name)
        if field is None:
            raise InstancerApiError(f"Invalid field '{name}' for {cls.__qualname__}")
        return field

    @staticmethod
    def get_setter(cls: type, name: str, param_type: Any = None) -> MethodInfo:
        """
        Get a setter method by name.

        Args:
            cls: Class declaring (or inheriting) the method
            name: Method name
            param_type: If given, the method's parameter annotation must equal it

        Raises:
            InstancerApiError: If there is no such method or the parameter type differs
        """
        function = inspect.getattr_static(cls, name, None)
        if isinstance(function, (staticmethod, classmethod)) or not inspect.isfunction(function):
            raise InstancerApiError(f"Invalid setter method '{name}' for {cls.__qualname__}")

        actual = Reflector._parameter_type(function)
        if param_type is not None and actual is not param_type:
            expected = getattr(param_type, "__name__", str(param_type))
            raise InstancerApiError(
                f"Invalid setter method '{name}({expected})' for {cls.__qualname__}: "
                f"parameter is declared as {getattr(actual, '__name__', actual)}"
            )
        return MethodInfo(Reflector._method_owner(cls, name), name, actual)

    @staticmethod
    def find_setter(cls: type, field: FieldInfo) -> MethodInfo | None:
        """Find the conventional ``set_<name>`` method for a field."""
        name = SETTER_PREFIX + field.name.lstrip("_")
        if not inspect.isfunction(inspect.getattr_static(cls, name, None)):
            return None
        return Reflector.get_setter(cls, name)

    @staticmethod
    def field_from_getter(reference: Any) -> tuple[type, FieldInfo]:
        """
        Resolve a getter reference to the field it reads.

        Accepts an unbound method (``Order.get_id``, ``Order.is_paid`` or a
        record-style ``Order.id``) or a ``property`` object. Properties map
        to a field of the same name or the same name with a leading underscore.

        Returns:
            The class the getter was referenced on and the resolved field
        """
        function = reference.fget if isinstance(reference, property) else reference
        if not inspect.isfunction(function):
            raise InstancerApiError(f"Not a getter method reference: {reference!r}")

        cls = Reflector.declaring_class_of(function)
        name = function.__name__
        if isinstance(reference, property):
            candidates = [name, "_" + name]
        else:
            candidates = [name[len(prefix):] for prefix in _GETTER_PREFIXES if name.startswith(prefix)]
            candidates.append(name)

        for candidate in candidates:
            field = Reflector.find_field(cls, candidate)
            if field is not None:
                return cls, field
        raise InstancerApiError(f"Unable to resolve the field from getter {cls.__qualname__}.{name}")

    @staticmethod
    def setter_from_reference(reference: Any) -> tuple[type, MethodInfo]:
        """Resolve a setter reference such as ``Order.set_id``."""
        if not inspect.isfunction(reference):
            raise InstancerApiError(f"Not a setter method reference: {reference!r}")
        cls = Reflector.declaring_class_of(reference)
        parameters = list(inspect.signature(reference).parameters.values())[1:]
        if len(parameters) != 1:
            raise InstancerApiError(
                f"Setter {cls.__qualname__}.{reference.__name__} must accept exactly one argument"
            )
        return cls, Reflector.get_setter(cls, reference.__name__)

    @staticmethod
    def declaring_class_of(function: Any) -> type:
        """Find the class a method was defined in, using its qualified name."""
        qualname = getattr(function, "__qualname__", "")
        parts = qualname.split(".")[:-1]
        if not parts or "<locals>" in parts:
            raise InstancerApiError(
                f"Unable to resolve the declaring class of {qualname or function!r}: "
                "method references must belong to a module-level class"
            )

        owner: Any = sys.modules.get(function.__module__)
        for part in parts:
            owner = getattr(owner, part, None)
        if not isinstance(owner, type):
            raise InstancerApiError(f"Unable to resolve the declaring class of {qualname}")
        return owner

    @staticmethod
    def set_field(target: Any, name: str, value: Any, path: str | None = None) -> None:
        """Write a field, bypassing ``__setattr__`` overrides such as frozen dataclasses."""
        try:
            object.__setattr__(target, name, value)
        except (AttributeError, TypeError) as exc:
            raise ReflectionError(f"Could not set value to field '{name}'", path=path) from exc

    @staticmethod
    def invoke_setter(target: Any, method: MethodInfo, value: Any, path: str | None = None) -> None:
        try:
            getattr(target, method.name)(value)
        except Exception as exc:
            raise ReflectionError(f"Could not invoke setter {method}", path=path) from exc

    @staticmethod
    def has_value(target: Any, name: str) -> bool:
        """Whether the attribute is present and not None."""
        return getattr(target, name, None) is not None

    @staticmethod
    def _declaring_class(cls: type, name: str) -> type:
        for klass in cls.__mro__:
            if name in inspect.get_annotations(klass):
                return klass
        return cls

    @staticmethod
    def _method_owner(cls: type, name: str) -> type:
        for klass in cls.__mro__:
            if name in vars(klass):
                return klass
        return cls

    @staticmethod
    def _parameter_type(function: Any) -> Any:
        parameters = list(inspect.signature(function).parameters.values())[1:]
        if not parameters:
            return None
        try:
            hints = typing.get_type_hints(function)
        except (NameError, TypeError) as exc:
            raise ReflectionError(
                f"Could not resolve type annotations of {function.__qualname__}",
                path=function.__qualname__,
            ) from exc
        return hints.get(parameters[0].name)
