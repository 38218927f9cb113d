"""
Built-in value generators.

Every generator here doubles as a fluent spec: configuration methods return
a configured copy and never modify the receiver, so a generator is immutable
once the fluent chain completes. ``init`` fills in whatever the chain left
unset from :class:`~instancer.settings.Settings`.
"""

from __future__ import annotations

import copy
import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, Self

from ..errors import InstancerApiError, InstancerError
from ..random_source import RandomSource
from ..settings import AfterGenerate, Settings
from ..validation import ApiValidator
from .base import CollectionHint, Generator, GeneratorContext, GeneratorHint, Hints

DEFAULT_MIN_DATE = datetime.date(1970, 1, 1)
DEFAULT_MAX_DATE = datetime.date(2050, 12, 31)
_ONE_DAY = datetime.timedelta(days=1)


class AbstractGenerator[T](Generator[T]):
    """Base class of built-in generators."""

    def __init__(self) -> None:
        self._nullable = False
        self._settings = Settings()

    def _copy(self, **changes: Any) -> Self:
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, f"_{name}", value)
        return clone

    def nullable(self, nullable: bool = True) -> Self:
        """Allow the generated value to be None."""
        return self._copy(nullable=nullable)

    def init(self, context: GeneratorContext) -> None:
        self._settings = context.settings

    def hints(self) -> Hints | None:
        return Hints.of(GeneratorHint(nullable=self._nullable))

    def api_method(self) -> str | None:
        return None


class _NumberGenerator[N: (int, float)](AbstractGenerator[N]):
    _type: type

    def __init__(self, min_value: N | None = None, max_value: N | None = None) -> None:
        super().__init__()
        self._min = min_value
        self._max = max_value
        self._lower: N | None = None
        self._upper: N | None = None

    def min(self, min_value: N) -> Self:
        ApiValidator.not_null(min_value, "min must not be null")
        return self._copy(min=min_value)

    def max(self, max_value: N) -> Self:
        ApiValidator.not_null(max_value, "max must not be null")
        return self._copy(max=max_value)

    def range(self, min_value: N, max_value: N) -> Self:
        ApiValidator.is_true(
            min_value <= max_value,
            f"Invalid {self.api_method()} range: min must be less than or equal to max: {min_value} > {max_value}",
        )
        return self._copy(min=min_value, max=max_value)

    def _defaults(self) -> tuple[N, N]:
        raise NotImplementedError

    def init(self, context: GeneratorContext) -> None:
        super().init(context)
        default_min, default_max = self._defaults()
        span = default_max - default_min
        lower = self._min if self._min is not None else default_min
        upper = self._max if self._max is not None else default_max
        if lower > upper:
            # only one bound was given and it lies outside the default range
            if self._min is not None:
                upper = lower + span
            else:
                lower = upper - span
        self._lower, self._upper = lower, upper

    def target_class(self) -> type | None:
        return self._type

    def _bounds(self) -> tuple[N, N]:
        if self._lower is None or self._upper is None:
            self.init(GeneratorContext(self._settings))
        assert self._lower is not None and self._upper is not None
        return self._lower, self._upper


class IntGenerator(_NumberGenerator[int]):
    _type = int

    def _defaults(self) -> tuple[int, int]:
        return self._settings.int_min, self._settings.int_max

    def generate(self, random: RandomSource) -> int:
        lower, upper = self._bounds()
        return random.int_range(lower, upper)

    def api_method(self) -> str:
        return "ints()"


class FloatGenerator(_NumberGenerator[float]):
    _type = float

    def _defaults(self) -> tuple[float, float]:
        return self._settings.float_min, self._settings.float_max

    def generate(self, random: RandomSource) -> float:
        lower, upper = self._bounds()
        return random.float_range(lower, upper)

    def api_method(self) -> str:
        return "floats()"


class DecimalGenerator(AbstractGenerator[Decimal]):
    def __init__(self) -> None:
        super().__init__()
        self._delegate = FloatGenerator()
        self._scale: int | None = None

    def range(self, min_value: Decimal, max_value: Decimal) -> DecimalGenerator:
        return self._copy(delegate=self._delegate.range(float(min_value), float(max_value)))

    def scale(self, scale: int) -> DecimalGenerator:
        ApiValidator.is_true(scale >= 0, f"Scale must not be negative: {scale}")
        return self._copy(scale=scale)

    def init(self, context: GeneratorContext) -> None:
        super().init(context)
        self._delegate.init(context)

    def generate(self, random: RandomSource) -> Decimal:
        scale = self._scale if self._scale is not None else self._settings.decimal_scale
        value = Decimal(repr(self._delegate.generate(random)))
        return value.quantize(Decimal(1).scaleb(-scale))

    def target_class(self) -> type | None:
        return Decimal

    def api_method(self) -> str:
        return "decimals()"


class BooleanGenerator(AbstractGenerator[bool]):
    def __init__(self) -> None:
        super().__init__()
        self._probability = 0.5

    def probability(self, probability: float) -> BooleanGenerator:
        """Probability of generating True."""
        ApiValidator.is_true(0 <= probability <= 1, f"Probability must be between 0 and 1: {probability}")
        return self._copy(probability=probability)

    def generate(self, random: RandomSource) -> bool:
        return random.probability(self._probability)

    def target_class(self) -> type | None:
        return bool

    def api_method(self) -> str:
        return "booleans()"


class StringGenerator(AbstractGenerator[str]):
    def __init__(self) -> None:
        super().__init__()
        self._min_length: int | None = None
        self._max_length: int | None = None
        self._prefix = ""
        self._suffix = ""
        self._case = "upper"
        self._allow_empty = False

    def min_length(self, length: int) -> StringGenerator:
        ApiValidator.is_true(length >= 0, f"Length must not be negative: {length}")
        return self._copy(min_length=length)

    def max_length(self, length: int) -> StringGenerator:
        ApiValidator.is_true(length >= 0, f"Length must not be negative: {length}")
        return self._copy(max_length=length)

    def length(self, min_length: int, max_length: int | None = None) -> StringGenerator:
        """Exact length, or a length range when ``max_length`` is given."""
        max_length = min_length if max_length is None else max_length
        ApiValidator.is_true(
            0 <= min_length <= max_length,
            f"Invalid string length range: {min_length}, {max_length}",
        )
        return self._copy(min_length=min_length, max_length=max_length)

    def prefix(self, prefix: str) -> StringGenerator:
        return self._copy(prefix=prefix)

    def suffix(self, suffix: str) -> StringGenerator:
        return self._copy(suffix=suffix)

    def upper_case(self) -> StringGenerator:
        return self._copy(case="upper")

    def lower_case(self) -> StringGenerator:
        return self._copy(case="lower")

    def mixed_case(self) -> StringGenerator:
        return self._copy(case="mixed")

    def alpha_numeric(self) -> StringGenerator:
        return self._copy(case="alphanumeric")

    def digits(self) -> StringGenerator:
        return self._copy(case="digits")

    def allow_empty(self, allow: bool = True) -> StringGenerator:
        return self._copy(allow_empty=allow)

    def generate(self, random: RandomSource) -> str:
        if self._allow_empty and random.dice_roll():
            return ""
        lower = self._min_length if self._min_length is not None else self._settings.string_min_length
        upper = self._max_length if self._max_length is not None else self._settings.string_max_length
        length = random.int_range(lower, max(lower, upper))

        if self._case == "lower":
            text = random.lower_case_alphabetic(length)
        elif self._case == "mixed":
            text = random.alphabetic(length)
        elif self._case == "alphanumeric":
            text = random.alphanumeric(length)
        elif self._case == "digits":
            text = random.digits(length)
        else:
            text = random.upper_case_alphabetic(length)
        return f"{self._prefix}{text}{self._suffix}"

    def target_class(self) -> type | None:
        return str

    def api_method(self) -> str:
        return "strings()"


class UUIDGenerator(AbstractGenerator[uuid.UUID]):
    def generate(self, random: RandomSource) -> uuid.UUID:
        return uuid.UUID(int=random.get_random_bits(128), version=4)

    def target_class(self) -> type | None:
        return uuid.UUID

    def api_method(self) -> str:
        return "uuids()"


class DateGenerator(AbstractGenerator[datetime.date]):
    def __init__(self) -> None:
        super().__init__()
        self._min: datetime.date = DEFAULT_MIN_DATE
        self._max: datetime.date = DEFAULT_MAX_DATE

    def range(self, min_value: datetime.date, max_value: datetime.date) -> DateGenerator:
        ApiValidator.is_true(min_value <= max_value, f"Start must not exceed end: {min_value} > {max_value}")
        return self._copy(min=min_value, max=max_value)

    def past(self) -> DateGenerator:
        return self._copy(min=DEFAULT_MIN_DATE, max=datetime.date.today() - datetime.timedelta(days=1))

    def future(self) -> DateGenerator:
        return self._copy(min=datetime.date.today() + datetime.timedelta(days=1), max=DEFAULT_MAX_DATE)

    def generate(self, random: RandomSource) -> datetime.date:
        return datetime.date.fromordinal(random.int_range(self._min.toordinal(), self._max.toordinal()))

    def target_class(self) -> type | None:
        return datetime.date

    def api_method(self) -> str:
        return "dates()"


class DateTimeGenerator(AbstractGenerator[datetime.datetime]):
    def __init__(self) -> None:
        super().__init__()
        self._min = datetime.datetime.combine(DEFAULT_MIN_DATE, datetime.time.min)
        self._max = datetime.datetime.combine(DEFAULT_MAX_DATE, datetime.time.max)
        self._truncate_to: datetime.timedelta | None = None

    def min(self, min_value: datetime.datetime) -> DateTimeGenerator:
        ApiValidator.not_null(min_value, "min must not be null")
        return self._copy(min=min_value)

    def max(self, max_value: datetime.datetime) -> DateTimeGenerator:
        ApiValidator.not_null(max_value, "max must not be null")
        return self._copy(max=max_value)

    def range(self, min_value: datetime.datetime, max_value: datetime.datetime) -> DateTimeGenerator:
        ApiValidator.is_true(min_value <= max_value, f"Start must not exceed end: {min_value} > {max_value}")
        return self._copy(min=min_value, max=max_value)

    def past(self) -> DateTimeGenerator:
        return self._copy(max=datetime.datetime.now() - datetime.timedelta(seconds=1))

    def future(self) -> DateTimeGenerator:
        return self._copy(min=datetime.datetime.now() + datetime.timedelta(minutes=1))

    def truncated_to(self, unit: datetime.timedelta) -> DateTimeGenerator:
        """Truncate generated values to a multiple of ``unit`` since midnight, for example ``timedelta(hours=1)``."""
        ApiValidator.is_true(
            unit > datetime.timedelta(0) and _ONE_DAY % unit == datetime.timedelta(0),
            f"Unit must divide a day without remainder: {unit}",
        )
        return self._copy(truncate_to=unit)

    def generate(self, random: RandomSource) -> datetime.datetime:
        ApiValidator.is_true(self._min <= self._max, f"Start must not exceed end: {self._min} > {self._max}")
        span = int((self._max - self._min).total_seconds())
        value = self._min + datetime.timedelta(seconds=random.int_range(0, span))
        if self._truncate_to is None:
            return value
        midnight = datetime.datetime.combine(value.date(), datetime.time.min, tzinfo=value.tzinfo)
        return midnight + (value - midnight) // self._truncate_to * self._truncate_to


    def target_class(self) -> type | None:
        return datetime.datetime

    def api_method(self) -> str:
        return "datetimes()"


class EnumGenerator[E: Enum](AbstractGenerator[E]):
    def __init__(self, enum_class: type[E]) -> None:
        super().__init__()
        self._enum_class = enum_class
        self._excluded: tuple[E, ...] = ()

    def excluding(self, *values: E) -> EnumGenerator[E]:
        return self._copy(excluded=self._excluded + values)

    def generate(self, random: RandomSource) -> E:
        choices = [member for member in self._enum_class if member not in self._excluded]
        if not choices:
            raise InstancerApiError(f"No values left to generate for {self._enum_class.__name__}")
        return random.one_of(choices)

    def target_class(self) -> type | None:
        return self._enum_class

    def api_method(self) -> str:
        return "enums()"


class OneOfGenerator(AbstractGenerator[Any]):
    def __init__(self, values: tuple[Any, ...]) -> None:
        super().__init__()
        ApiValidator.not_empty(values, "Array must have at least one element")
        self._values = values

    def generate(self, random: RandomSource) -> Any:
        return random.one_of(self._values)

    def api_method(self) -> str:
        return "one_of()"


class CollectionGenerator(AbstractGenerator[Any]):
    """Creates an empty container; the engine adds the elements."""

    def __init__(self, container_class: type) -> None:
        super().__init__()
        self._container_class = container_class

    def generate(self, random: RandomSource) -> Any:
        return self._container_class()

    def hints(self) -> Hints | None:
        settings = self._settings
        if self._container_class is dict:
            size = CollectionHint(settings.map_min_size, settings.map_max_size)
        else:
            size = CollectionHint(settings.collection_min_size, settings.collection_max_size)
        return Hints.of(GeneratorHint(nullable=self._nullable), size, after_generate=AfterGenerate.POPULATE_ALL)

    def target_class(self) -> type | None:
        return self._container_class


class DelegatingGenerator(AbstractGenerator[Any]):
    """
    Supplies hints only; the value comes from the generator resolved for
    ``target_class`` (or for the node's own class).
    """

    def __init__(self, target_class: type | None = None) -> None:
        super().__init__()
        self._target_class = target_class

    def generate(self, random: RandomSource) -> Any:
        raise InstancerError(f"{type(self).__name__} only supplies hints and cannot generate values")

    def hints(self) -> Hints | None:
        return Hints.of(
            GeneratorHint(target_class=self._target_class, nullable=self._nullable, is_delegating=True)
        )

    def api_method(self) -> str:
        return "delegating()"


class CollectionSpec(DelegatingGenerator):
    """Sizes a collection or map while the container itself comes from the built-in generator."""

    def __init__(self) -> None:
        super().__init__()
        self._min_size: int | None = None
        self._max_size: int | None = None

    def size(self, size: int) -> CollectionSpec:
        ApiValidator.is_true(size >= 0, f"Size must not be negative: {size}")
        return self._copy(min_size=size, max_size=size)

    def min_size(self, size: int) -> CollectionSpec:
        ApiValidator.is_true(size >= 0, f"Size must not be negative: {size}")
        return self._copy(min_size=size)

    def max_size(self, size: int) -> CollectionSpec:
        ApiValidator.is_true(size >= 0, f"Size must not be negative: {size}")
        return self._copy(max_size=size)

    def hints(self) -> Hints | None:
        hints = super().hints()
        assert hints is not None
        return hints.with_hint(CollectionHint(self._min_size, self._max_size)).with_after_generate(
            AfterGenerate.POPULATE_ALL
        )

    def api_method(self) -> str:
        return "collections()"
