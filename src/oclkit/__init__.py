"""
oclkit: runtime invariants, pre/postconditions and derived attributes for
Python classes.
"""

from .context import EvaluationContext, Expectation, format_value
from .registry import (
    ConstraintDeclaration,
    ConstraintKind,
    ConstraintRegistry,
    registry_for,
)
from .core import (
    Constrained,
    ConstraintViolationError,
    Derived,
    Guarded,
    declare_derived,
    declare_invariant,
    declare_postcondition,
    declare_precondition,
    guard_attributes,
    guard_method,
    post,
    pre,
    validate_invariants,
    validate_postconditions,
    validate_preconditions,
)

__version__ = "0.1.0"

__all__ = [
    # Mixin and descriptors
    "Constrained",
    "Guarded",
    "Derived",

    # Declaration API
    "declare_invariant",
    "declare_precondition",
    "declare_postcondition",
    "declare_derived",
    "guard_attributes",
    "guard_method",
    "pre",
    "post",

    # Checkpoints
    "validate_invariants",
    "validate_preconditions",
    "validate_postconditions",

    # Registry
    "ConstraintKind",
    "ConstraintDeclaration",
    "ConstraintRegistry",
    "registry_for",

    # Evaluation
    "EvaluationContext",
    "Expectation",
    "format_value",

    # Errors
    "ConstraintViolationError",
]
