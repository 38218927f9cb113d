"""
Argument and usage validation for the public API.
"""

from __future__ import annotations

from collections.abc import Sized
from typing import TYPE_CHECKING, Any

from .errors import GeneratorUsageError, InstancerApiError

if TYPE_CHECKING:
    from .generators.base import Generator
    from .model.nodes import Node


class ApiValidator:
    """Fail-fast checks raising :class:`InstancerApiError`."""

    @staticmethod
    def not_null(value: Any, message: str) -> None:
        if value is None:
            raise InstancerApiError(message)

    @staticmethod
    def not_empty(values: Sized | None, message: str) -> None:
        if not values:
            raise InstancerApiError(message)

    @staticmethod
    def is_true(condition: bool, message: str) -> None:
        if not condition:
            raise InstancerApiError(message)

    @staticmethod
    def is_class(value: Any, message: str) -> None:
        ApiValidator.not_null(value, message)
        if not isinstance(value, type):
            raise InstancerApiError(f"{message}: {value!r} is not a class")

    @staticmethod
    def validate_generator_usage(node: Node, generator: Generator[Any], selector: Any = None) -> None:
        """
        Check that a user-supplied generator can produce a value for the node.

        The produced class is the delegation target class for delegating
        generators and ``generator.target_class()`` otherwise. Generators that
        do not declare a class, and nodes typed as ``object`` or a protocol,
        are not checked.

        Raises:
            GeneratorUsageError: If the produced class is not assignable to the node's class
        """
        from .generators.base import GeneratorHint

        produced = generator.target_class()
        hints = generator.hints()
        hint = hints.get(GeneratorHint) if hints is not None else None
        if hint is not None and hint.is_delegating and hint.target_class is not None:
            produced = hint.target_class

        if produced is None or node.target_class is object or _is_protocol(node.target_class):
            return
        if not is_assignable(node.target_class, produced):
            raise GeneratorUsageError(node, generator, produced, selector)


def _is_protocol(cls: type) -> bool:
    # issubclass() rejects protocols not marked @runtime_checkable
    return getattr(cls, "_is_protocol", False)


def is_assignable(target: type, produced: type) -> bool:
    """Whether values of class ``produced`` may be assigned where ``target`` is expected."""
    if issubclass(produced, target):
        return True
    # int is acceptable where float is expected
    return target is float and produced is int
