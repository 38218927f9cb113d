"""
Settings controlling how objects are generated.
"""

from __future__ import annotations

import dataclasses
import functools
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import InstancerApiError


class Mode(Enum):
    """Whether unused selectors are reported as errors."""

    STRICT = "strict"
    LENIENT = "lenient"


class AssignmentType(Enum):
    """How generated values are written into objects."""

    FIELD = "field"
    METHOD = "method"


class OnSetMethodNotFound(Enum):
    """What to do when assignment is via setters and a field has no setter."""

    ASSIGN_FIELD = "assign_field"
    IGNORE = "ignore"
    FAIL = "fail"


class AfterGenerate(Enum):
    """Action applied to an object after a generator has produced it."""

    DO_NOT_MODIFY = "do_not_modify"
    POPULATE_NULLS = "populate_nulls"
    POPULATE_ALL = "populate_all"


@dataclass(frozen=True)
class Settings:
    """
    Immutable generation settings.

    Instances are created with defaults and refined with :meth:`with_values`,
    :meth:`from_mapping` or :meth:`from_env`. Every way of building settings
    validates the result, so a ``Settings`` object is always consistent.
    """

    seed: int | None = None
    mode: Mode = Mode.STRICT
    max_depth: int = 8
    collection_min_size: int = 2
    collection_max_size: int = 6
    map_min_size: int = 2
    map_max_size: int = 6
    string_min_length: int = 3
    string_max_length: int = 10
    int_min: int = 1
    int_max: int = 10000
    float_min: float = 1.0
    float_max: float = 10000.0
    decimal_scale: int = 2
    optional_nullable: bool = False
    assignment_type: AssignmentType = AssignmentType.FIELD
    on_set_method_not_found: OnSetMethodNotFound = OnSetMethodNotFound.ASSIGN_FIELD
    after_generate_hint: AfterGenerate = AfterGenerate.POPULATE_NULLS

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise InstancerApiError(f"max_depth must not be negative: {self.max_depth}")
        if self.decimal_scale < 0:
            raise InstancerApiError(f"decimal_scale must not be negative: {self.decimal_scale}")
        for low, high in (
            ("collection_min_size", "collection_max_size"),
            ("map_min_size", "map_max_size"),
            ("string_min_length", "string_max_length"),
        ):
            if getattr(self, low) < 0:
                raise InstancerApiError(f"{low} must not be negative: {getattr(self, low)}")
            self._check_range(low, high)
        self._check_range("int_min", "int_max")
        self._check_range("float_min", "float_max")

    def _check_range(self, low: str, high: str) -> None:
        if getattr(self, low) > getattr(self, high):
            raise InstancerApiError(
                f"{low} must be less than or equal to {high}: "
                f"{getattr(self, low)} > {getattr(self, high)}"
            )

    @classmethod
    def defaults(cls) -> Settings:
        """Create settings with default values."""
        return cls()

    @classmethod
    def names(cls) -> list[str]:
        """Names of all settings."""
        return [f.name for f in dataclasses.fields(cls)]

    def with_values(self, **values: Any) -> Settings:
        """Return a copy with the given settings replaced; strings are parsed to the declared types."""
        unknown = sorted(set(values) - set(self.names()))
        if unknown:
            raise InstancerApiError(f"Unknown setting(s): {', '.join(unknown)}")
        converted = {name: _validate(name, value) for name, value in values.items()}
        return dataclasses.replace(self, **converted)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Settings:
        """Create settings from a mapping of names to values (strings are parsed)."""
        return cls().with_values(**dict(values))

    @classmethod
    def from_env(cls, prefix: str = "INSTANCER_") -> Settings:
        """
        Create settings from environment variables.

        Args:
            prefix: Variable prefix; ``INSTANCER_MAX_DEPTH`` sets ``max_depth``

        Returns:
            Settings with every matching variable applied over the defaults
        """
        try:
            loaded = EnvironmentSettings(_env_prefix=prefix)
        except ValidationError as exc:
            raise InstancerApiError(f"Invalid settings in environment variables with prefix '{prefix}'") from exc
        return cls(**loaded.model_dump())


class EnvironmentSettings(BaseSettings):
    """Settings overrides read from prefixed environment variables."""

    model_config = SettingsConfigDict(env_prefix="INSTANCER_", extra="ignore")

    seed: int | None = Settings.seed
    mode: Mode = Settings.mode
    max_depth: int = Settings.max_depth
    collection_min_size: int = Settings.collection_min_size
    collection_max_size: int = Settings.collection_max_size
    map_min_size: int = Settings.map_min_size
    map_max_size: int = Settings.map_max_size
    string_min_length: int = Settings.string_min_length
    string_max_length: int = Settings.string_max_length
    int_min: int = Settings.int_min
    int_max: int = Settings.int_max
    float_min: float = Settings.float_min
    float_max: float = Settings.float_max
    decimal_scale: int = Settings.decimal_scale
    optional_nullable: bool = Settings.optional_nullable
    assignment_type: AssignmentType = Settings.assignment_type
    on_set_method_not_found: OnSetMethodNotFound = Settings.on_set_method_not_found
    after_generate_hint: AfterGenerate = Settings.after_generate_hint


@functools.cache
def _adapter(name: str) -> TypeAdapter[Any]:
    return TypeAdapter(typing.get_type_hints(Settings)[name])


def _validate(name: str, value: Any) -> Any:
    try:
        return _adapter(name).validate_python(value)
    except ValidationError as exc:
        raise InstancerApiError(f"Invalid value for setting '{name}': {value!r}") from exc

