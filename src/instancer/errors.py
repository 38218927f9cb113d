"""
Exception hierarchy for Instancer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .model.nodes import Node


class InstancerError(Exception):
    """Base class for all errors raised by Instancer."""


class InstancerApiError(InstancerError):
    """
    Raised when the library is configured or used incorrectly.

    Covers invalid selector arguments, unresolvable fields and methods,
    empty selector groups and invalid settings. These errors are reported
    before any value is generated and are never retried.
    """


class GeneratorUsageError(InstancerApiError):
    """Raised when a user-supplied generator cannot produce a value for its matched node."""

    def __init__(self, node: Node, generator: Any, produced: type, selector: Any = None):
        self.node = node
        self.generator = generator
        self.produced = produced
        self.selector = selector

        api_method = getattr(generator, "api_method", lambda: None)() or type(generator).__name__
        msg = (
            f"Generator '{api_method}' produces {produced.__name__} "
            f"and cannot be used with {node} (expected {node.target_class.__name__})"
        )
        if selector is not None:
            msg += f"; selected by {selector}"
        super().__init__(msg)


class UnusedSelectorError(InstancerApiError):
    """Raised in strict mode when a selector did not match any node."""

    def __init__(self, selectors: list[Any]):
        self.selectors = selectors
        lines = "\n".join(f"  - {selector}" for selector in selectors)
        super().__init__(
            "Found unused selectors. Either remove them or call lenient():\n" + lines
        )


class ReflectionError(InstancerError):
    """Raised when a field or method could not be read, written or introspected."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)
