"""
Node tree and selector model.
"""

from .nodes import Node, NodeFactory, NodeKind
from .selectors import (
    FieldSelectorBuilder,
    GroupableSelector,
    Precedence,
    PredicateSelector,
    Scope,
    Selector,
    SelectorGroup,
    Target,
    TargetClass,
    TargetField,
    TargetRoot,
    TargetSelector,
    TargetSetter,
    TypeSelectorBuilder,
)

__all__ = [
    "FieldSelectorBuilder",
    "GroupableSelector",
    "Node",
    "NodeFactory",
    "NodeKind",
    "Precedence",
    "PredicateSelector",
    "Scope",
    "Selector",
    "SelectorGroup",
    "Target",
    "TargetClass",
    "TargetField",
    "TargetRoot",
    "TargetSelector",
    "TargetSetter",
    "TypeSelectorBuilder",
]
