"""
Constraint engine: declaration API, enforcement checkpoints and interception.

Classes opt in either by inheriting :class:`Constrained` or by passing the
class to the module-level ``declare_*`` functions. Declarations are stored in
the class's :class:`~oclkit.registry.ConstraintRegistry` and enforced at three
checkpoints:

1. **Invariants** - after every write to a guarded attribute, and on demand
   via :func:`validate_invariants`.
2. **Preconditions** - before a guarded method body runs. A failure aborts the
   call and the body never executes.
3. **Postconditions** - after a guarded method body returns, given the result
   and the original arguments. A failure is raised after the fact; the body's
   side effects are not rolled back.

Each checkpoint evaluates every constraint of its kind with a fresh
:class:`~oclkit.context.EvaluationContext` and raises a single
:class:`ConstraintViolationError` listing all failures.

Basic Usage
-----------
::

    from oclkit import Constrained, Guarded, pre, post

    class Account(Constrained):
        limit = Guarded(default=0)
        amount = Guarded(default=0)

        def __init__(self, owner):
            self.owner = owner

        @pre("PositiveAndWithinLimit", lambda c, n: c.expect(n).to_be_positive())
        @post("AmountNonNegative", lambda c, result, n: c.expect(c.amount).to_be_greater_than_or_equal_to(0))
        def withdraw(self, n):
            vars(self)["amount"] = self.amount - n

    @Account.declare_invariant("IncomeInvariant")
    def income_invariant(c):
        c.expect(c.limit).to_be(200_000)

Subclasses do not inherit their parent's declarations; see
:func:`~oclkit.registry.registry_for`.
"""

from typing import Any, Callable, Iterable, List, Optional, Union
import functools
import logging

from .context import EvaluationContext
from .registry import ConstraintDeclaration, ConstraintKind, registry_for

logger = logging.getLogger(__name__)

_MISSING = object()


# =============================================================================
# Errors
# =============================================================================

class ConstraintViolationError(Exception):
    """Raised when any constraint of a checkpoint fails.

    ``errors`` holds one description per violated constraint; the message is
    their ``", "`` join.
    """

    def __init__(self, errors: Union[str, Iterable[str]]):
        if isinstance(errors, str):
            self.errors: List[str] = [errors]
        else:
            self.errors = list(errors)
        super().__init__(", ".join(self.errors))


# =============================================================================
# Enforcement checkpoints
# =============================================================================

def _evaluate(obj: Any, declarations: List[ConstraintDeclaration], *args, **kwargs) -> List[str]:
    """Run each declaration in its own context and collect failure entries."""
    failures = []
    for decl in declarations:
        context = EvaluationContext(obj)
        decl.predicate(context, *args, **kwargs)
        if not context.valid:
            failures.append(f"{decl} violated: " + ", ".join(context.error_messages))
    return failures


def _raise_if_failed(obj: Any, kind: ConstraintKind, failures: List[str]) -> None:
    if not failures:
        return
    logger.warning(
        "Constraint violation [%s] on %s: %s",
        kind.label, type(obj).__qualname__, ", ".join(failures)
    )
    raise ConstraintViolationError(failures)


def validate_invariants(obj: Any) -> None:
    """Check every invariant declared on ``type(obj)``, in declaration order.

    Raises:
        ConstraintViolationError: if at least one invariant recorded a failure
    """
    registry = registry_for(type(obj))
    failures = _evaluate(obj, registry.invariants)
    _raise_if_failed(obj, ConstraintKind.INVARIANT, failures)


def validate_preconditions(obj: Any, method_id: str, *args, **kwargs) -> None:
    """Check the preconditions of ``method_id``; predicates get ``(context, *args)``."""
    registry = registry_for(type(obj))
    failures = _evaluate(obj, registry.preconditions_for(method_id), *args, **kwargs)
    _raise_if_failed(obj, ConstraintKind.PRECONDITION, failures)


def validate_postconditions(obj: Any, method_id: str, result: Any, *args, **kwargs) -> None:
    """Check the postconditions of ``method_id``; predicates get ``(context, result, *args)``."""
    registry = registry_for(type(obj))
    failures = _evaluate(obj, registry.postconditions_for(method_id), result, *args, **kwargs)
    _raise_if_failed(obj, ConstraintKind.POSTCONDITION, failures)


# =============================================================================
# Interception
# =============================================================================

class Guarded:
    """
    Attribute whose every assignment re-checks the owner's invariants.

    The value is stored in the instance ``__dict__`` under the attribute's own
    name before the check runs, so a failing assignment raises at the
    assignment site with the invalid value already in place. Writing to
    ``vars(obj)[name]`` bypasses the check.

    Until the first write, reads return ``default``, or a value made by
    ``default_factory`` and kept for that instance. As with dataclass fields,
    unhashable defaults such as lists must be given as a factory.
    """

    def __init__(self, default: Any = _MISSING, default_factory: Optional[Callable[[], Any]] = None):
        if default is not _MISSING and default_factory is not None:
            raise ValueError("cannot specify both default and default_factory")
        if default is not _MISSING and type(default).__hash__ is None:
            raise ValueError(
                f"mutable default {type(default).__name__} is not allowed: use default_factory"
            )
        self.default = default
        self.default_factory = default_factory
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        registry_for(owner).add_guarded(name)

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            pass
        if self.default_factory is not None:
            return instance.__dict__.setdefault(self.name, self.default_factory())
        if self.default is _MISSING:
            raise AttributeError(
                f"'{type(instance).__name__}' object has no attribute '{self.name}'"
            )
        return self.default

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self.name] = value
        validate_invariants(instance)

    def __repr__(self) -> str:
        return f"Guarded({self.name!r})"


class Derived:
    """
    Read-only attribute computed from ``formula(context)`` on every access.

    Nothing is stored on the instance; assignment and deletion raise
    ``AttributeError``.
    """

    def __init__(self, formula: Callable[[EvaluationContext], Any], name: Optional[str] = None):
        self.formula = formula
        self.name = name
        functools.update_wrapper(self, formula, assigned=("__doc__",), updated=())

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        registry_for(owner).add_derived(name, self.formula)

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return self.formula(EvaluationContext(instance))

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"derived attribute '{self.name}' is read-only")

    def __delete__(self, instance: Any) -> None:
        raise AttributeError(f"derived attribute '{self.name}' is read-only")

    def __repr__(self) -> str:
        return f"Derived({self.name!r})"


def guard_method(func: Callable, method_id: Optional[str] = None) -> Callable:
    """
    Wrap ``func`` so calls run preconditions, the body, then postconditions.

    The constraints themselves are looked up on ``type(self)`` at call time,
    so one wrapper serves every constraint later declared for ``method_id``.
    """
    method_id = method_id or func.__name__

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        validate_preconditions(self, method_id, *args, **kwargs)
        result = func(self, *args, **kwargs)
        validate_postconditions(self, method_id, result, *args, **kwargs)
        return result

    wrapper.__oclkit_guarded__ = method_id
    return wrapper


def _wrap_method(cls: type, method_id: str) -> None:
    """Install a guarded wrapper for ``method_id`` on ``cls`` at most once."""
    registry = registry_for(cls)
    if registry.is_wrapped(method_id):
        return

    original = getattr(cls, method_id, None)
    if original is None or not callable(original):
        raise AttributeError(f"{cls.__qualname__} has no method '{method_id}'")
    # an inherited wrapper would re-run this class's checks a second time
    if getattr(original, "__oclkit_guarded__", None) == method_id:
        original = original.__wrapped__

    setattr(cls, method_id, guard_method(original, method_id))
    registry.mark_wrapped(method_id)
    logger.debug("%s: wrapped method '%s'", cls.__qualname__, method_id)


# =============================================================================
# Declaration API
# =============================================================================

def declare_invariant(cls: type, name: str, predicate: Callable) -> ConstraintDeclaration:
    """Declare an invariant ``predicate(context)`` on ``cls``."""
    return registry_for(cls).add_invariant(name, predicate)


def declare_precondition(cls: type, method_id: str, name: str, predicate: Callable) -> ConstraintDeclaration:
    """Declare a precondition ``predicate(context, *args)`` for ``cls.method_id``."""
    _wrap_method(cls, method_id)
    return registry_for(cls).add_precondition(method_id, name, predicate)


def declare_postcondition(cls: type, method_id: str, name: str, predicate: Callable) -> ConstraintDeclaration:
    """Declare a postcondition ``predicate(context, result, *args)`` for ``cls.method_id``."""
    _wrap_method(cls, method_id)
    return registry_for(cls).add_postcondition(method_id, name, predicate)


def declare_derived(cls: type, name: str, formula: Callable) -> Derived:
    """Expose ``formula(context)`` as the read-only attribute ``cls.name``."""
    descriptor = Derived(formula, name)
    setattr(cls, name, descriptor)
    registry_for(cls).add_derived(name, formula)
    return descriptor


def guard_attributes(cls: type, *names: str) -> None:
    """Install a :class:`Guarded` attribute on ``cls`` for each name."""
    registry = registry_for(cls)
    for name in names:
        descriptor = Guarded()
        descriptor.name = name
        setattr(cls, name, descriptor)
        registry.add_guarded(name)
        logger.debug("%s: guarded attribute '%s'", cls.__qualname__, name)


# =============================================================================
# In-class decorators
# =============================================================================

class _PendingMethod:
    """Method carrying ``@pre``/``@post`` declarations until its class exists.

    When the owning class is created, ``__set_name__`` puts the plain function
    back and declares each stashed condition on the owner, which wraps the
    method once.
    """

    def __init__(self, func: Callable):
        self.func = func
        self.declarations: List[tuple] = []
        functools.update_wrapper(self, func)

    def __set_name__(self, owner: type, name: str) -> None:
        setattr(owner, name, self.func)
        for kind, decl_name, predicate in self.declarations:
            if kind is ConstraintKind.PRECONDITION:
                declare_precondition(owner, name, decl_name, predicate)
            else:
                declare_postcondition(owner, name, decl_name, predicate)


def _stash(kind: ConstraintKind, name: str, predicate: Callable) -> Callable:
    def decorator(func: Callable) -> _PendingMethod:
        if not isinstance(func, _PendingMethod):
            func = _PendingMethod(func)
        func.declarations.insert(0, (kind, name, predicate))  # decorators apply bottom-up
        return func

    return decorator


def pre(name: str, predicate: Callable) -> Callable:
    """
    Decorator adding a precondition to a method defined in a class body.

    Works on any class, :class:`Constrained` or not. The predicate receives
    ``(context, *args, **kwargs)`` of the call. Several ``@pre``/``@post`` may
    be stacked; they run top to bottom.

    Example:
        class Counter:
            @pre("PositiveStep", lambda c, step: c.expect(step).to_be_positive())
            def advance(self, step):
                ...
    """
    return _stash(ConstraintKind.PRECONDITION, name, predicate)


def post(name: str, predicate: Callable) -> Callable:
    """
    Decorator adding a postcondition to a method defined in a class body.

    The predicate receives ``(context, result, *args, **kwargs)``.
    """
    return _stash(ConstraintKind.POSTCONDITION, name, predicate)


# =============================================================================
# Mixin
# =============================================================================

def _declaring(register: Callable[[Callable], Any], predicate: Optional[Callable]):
    """Call ``register(predicate)`` now, or return a decorator that will."""
    if predicate is not None:
        return register(predicate)

    def decorator(func: Callable) -> Callable:
        register(func)
        return func

    return decorator


class Constrained:
    """
    Mixin giving a class the declaration API as classmethods and an
    on-demand :meth:`validate_invariants`.

    Each classmethod accepting a predicate can also be used as a decorator by
    omitting it::

        @User.declare_derived("full_name")
        def full_name(c):
            return f"{c.first_name} {c.last_name}"
    """

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        registry_for(cls)

    @classmethod
    def declare_invariant(cls, name: str, predicate: Optional[Callable] = None):
        return _declaring(lambda p: declare_invariant(cls, name, p), predicate)

    @classmethod
    def declare_precondition(cls, method_id: str, name: str, predicate: Optional[Callable] = None):
        return _declaring(lambda p: declare_precondition(cls, method_id, name, p), predicate)

    @classmethod
    def declare_postcondition(cls, method_id: str, name: str, predicate: Optional[Callable] = None):
        return _declaring(lambda p: declare_postcondition(cls, method_id, name, p), predicate)

    @classmethod
    def declare_derived(cls, name: str, formula: Optional[Callable] = None):
        return _declaring(lambda f: declare_derived(cls, name, f), formula)

    @classmethod
    def guard_attributes(cls, *names: str) -> None:
        guard_attributes(cls, *names)

    def validate_invariants(self) -> None:
        """Check all invariants now; raises ConstraintViolationError on failure."""
        validate_invariants(self)
