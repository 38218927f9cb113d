"""
Instancer: randomized, fully populated test fixtures for Python classes.

Instancer builds a tree of every field reachable from a root class and fills
it with generated values, honoring user-supplied generators, scoped
selectors, ignored and nullable nodes.

Example:
    ```python
    from instancer import Instancer, Select

    order = (
        Instancer.of(Order)
        .generate(Select.field(Order.get_id), lambda gen: gen.delegating())
        .generate(Select.all(int).within(Select.scope(Item)), lambda gen: gen.ints().range(1, 9))
        .create()
    )
    ```
"""

from .api import Instancer, InstancerApi, Model
from .errors import (
    GeneratorUsageError,
    InstancerApiError,
    InstancerError,
    ReflectionError,
    UnusedSelectorError,
)
from .generators import (
    CollectionHint,
    Generator,
    GeneratorContext,
    GeneratorHint,
    GeneratorResult,
    Generators,
    Hints,
)
from .model import Node, PredicateSelector, Scope, Selector, SelectorGroup
from .random_source import RandomSource
from .select import Select
from .settings import AfterGenerate, AssignmentType, Mode, OnSetMethodNotFound, Settings

__version__ = "0.1.0"

__all__ = [
    "AfterGenerate",
    "AssignmentType",
    "CollectionHint",
    "Generator",
    "GeneratorContext",
    "GeneratorHint",
    "GeneratorResult",
    "GeneratorUsageError",
    "Generators",
    "Hints",
    "Instancer",
    "InstancerApi",
    "InstancerApiError",
    "InstancerError",
    "Mode",
    "Model",
    "Node",
    "OnSetMethodNotFound",
    "PredicateSelector",
    "RandomSource",
    "ReflectionError",
    "Scope",
    "Select",
    "Selector",
    "SelectorGroup",
    "Settings",
    "UnusedSelectorError",
]
