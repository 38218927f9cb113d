"""
Creation of empty instances of user classes.
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class InstantiationStrategy(ABC):
    """One way of creating an instance; returns None when it does not apply."""

    @abstractmethod
    def create(self, cls: type) -> Any | None:
        """Create an instance of ``cls`` or return None."""


class NoArgumentConstructorStrategy(InstantiationStrategy):
    """Calls the constructor without arguments."""

    def create(self, cls: type) -> Any | None:
        try:
            return cls()
        except Exception as exc:
            logger.debug("Could not call %s() without arguments: %r", cls.__qualname__, exc)
            return None


class BypassConstructorStrategy(InstantiationStrategy):
    """
    Allocates the instance with ``__new__`` without running ``__init__``.

    Dataclass fields with defaults are set to their defaults so that the
    instance looks as if the constructor had run.
    """

    def create(self, cls: type) -> Any | None:
        try:
            instance = cls.__new__(cls)
        except TypeError as exc:
            logger.debug("Could not allocate %s: %s", cls.__qualname__, exc)
            return None

        if dataclasses.is_dataclass(cls):
            for field in dataclasses.fields(cls):
                if field.default is not dataclasses.MISSING:
                    object.__setattr__(instance, field.name, field.default)
                elif field.default_factory is not dataclasses.MISSING:
                    object.__setattr__(instance, field.name, field.default_factory())
        return instance


class Instantiator:
    """Tries each instantiation strategy in order until one succeeds."""

    def __init__(self, strategies: list[InstantiationStrategy] | None = None):
        self._strategies = strategies or [NoArgumentConstructorStrategy(), BypassConstructorStrategy()]

    def instantiate(self, cls: type) -> Any | None:
        """
        Create an instance of ``cls``.

        Returns:
            The instance, or None if no strategy could create one
        """
        for strategy in self._strategies:
            instance = strategy.create(cls)
            if instance is not None:
                return instance
        logger.debug("Unable to instantiate %s", cls.__qualname__)
        return None
