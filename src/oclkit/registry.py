"""
Per-class storage of declared constraints.

Each class owns one :class:`ConstraintRegistry`, kept in the class's own
``__dict__``. Lookup goes through :func:`registry_for`, which never returns a
parent's registry: a subclass starts with an empty registry of its own and
does not inherit or merge its parent's declarations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Set
import logging

logger = logging.getLogger(__name__)

REGISTRY_ATTR = "__oclkit_registry__"


class ConstraintKind(Enum):
    """The three checkpoints; the value is the label used in messages."""
    INVARIANT = "Invariant"
    PRECONDITION = "Precondition"
    POSTCONDITION = "Postcondition"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class ConstraintDeclaration:
    """
    A named predicate attached to a class.

    Attributes:
        kind: Which checkpoint evaluates the predicate
        name: Name reported when the constraint is violated
        predicate: ``(context)`` for invariants, ``(context, *args)`` for
            preconditions, ``(context, result, *args)`` for postconditions
        method_id: Guarded method name (pre/postconditions only)
    """
    kind: ConstraintKind
    name: str
    predicate: Callable[..., Any]
    method_id: Optional[str] = None

    def __str__(self) -> str:
        target = f" for {self.method_id}" if self.method_id else ""
        return f"{self.kind.label} '{self.name}'{target}"


@dataclass
class ConstraintRegistry:
    """Invariants, pre/postconditions and derived formulas of one class."""
    owner: type
    invariants: List[ConstraintDeclaration] = field(default_factory=list)
    preconditions: Dict[str, List[ConstraintDeclaration]] = field(default_factory=dict)
    postconditions: Dict[str, List[ConstraintDeclaration]] = field(default_factory=dict)
    derived: Dict[str, Callable[[Any], Any]] = field(default_factory=dict)
    guarded: List[str] = field(default_factory=list)
    wrapped: Set[str] = field(default_factory=set)

    def add_invariant(self, name: str, predicate: Callable) -> ConstraintDeclaration:
        decl = ConstraintDeclaration(ConstraintKind.INVARIANT, name, predicate)
        self.invariants.append(decl)
        logger.debug("%s: registered %s", self.owner.__qualname__, decl)
        return decl

    def add_precondition(self, method_id: str, name: str, predicate: Callable) -> ConstraintDeclaration:
        decl = ConstraintDeclaration(ConstraintKind.PRECONDITION, name, predicate, method_id)
        self.preconditions.setdefault(method_id, []).append(decl)
        logger.debug("%s: registered %s", self.owner.__qualname__, decl)
        return decl

    def add_postcondition(self, method_id: str, name: str, predicate: Callable) -> ConstraintDeclaration:
        decl = ConstraintDeclaration(ConstraintKind.POSTCONDITION, name, predicate, method_id)
        self.postconditions.setdefault(method_id, []).append(decl)
        logger.debug("%s: registered %s", self.owner.__qualname__, decl)
        return decl

    def add_derived(self, name: str, formula: Callable) -> None:
        self.derived[name] = formula
        logger.debug("%s: registered derived attribute '%s'", self.owner.__qualname__, name)

    def add_guarded(self, name: str) -> None:
        if name not in self.guarded:
            self.guarded.append(name)

    def preconditions_for(self, method_id: str) -> List[ConstraintDeclaration]:
        return self.preconditions.get(method_id, [])

    def postconditions_for(self, method_id: str) -> List[ConstraintDeclaration]:
        return self.postconditions.get(method_id, [])

    def is_wrapped(self, method_id: str) -> bool:
        return method_id in self.wrapped

    def mark_wrapped(self, method_id: str) -> None:
        self.wrapped.add(method_id)

    def __iter__(self) -> Iterator[ConstraintDeclaration]:
        """Iterate invariants, then preconditions, then postconditions."""
        yield from self.invariants
        for decls in self.preconditions.values():
            yield from decls
        for decls in self.postconditions.values():
            yield from decls

    def __len__(self) -> int:
        """Number of constraint declarations (derived attributes excluded)."""
        return sum(1 for _ in self)

    def describe(self) -> List[str]:
        """One line per declaration, for display."""
        lines = [str(decl) for decl in self]
        lines.extend(f"Derived '{name}'" for name in self.derived)
        lines.extend(f"Guarded '{name}'" for name in self.guarded)
        return lines


def registry_for(cls: type) -> ConstraintRegistry:
    """
    Return the registry owned by ``cls``, creating it on first use.

    Only ``cls.__dict__`` is consulted, so a registry attached to a base class
    is never shared with its subclasses.
    """
    registry = cls.__dict__.get(REGISTRY_ATTR)
    if registry is None:
        registry = ConstraintRegistry(owner=cls)
        setattr(cls, REGISTRY_ATTR, registry)
    return registry
