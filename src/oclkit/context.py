"""
Evaluation context and fluent expectations for constraint predicates.

Every constraint check gets its own :class:`EvaluationContext` wrapping the
object under test. Predicates read the subject's state through the context and
record failures with the expectation vocabulary::

    def income_invariant(c):
        expected = 200_000 if c.owner.income < 5_000_000 else round(c.owner.income * 0.1)
        c.expect(c.limit).to_be(expected)

Usage constraint
----------------
Expectation methods record a failure as a side effect and return ``None``.
Issue each check as its own statement. Combining them with ``and``/``or``
short-circuits after the first call (``None`` is falsy), so later checks never
run::

    # wrong: the second check is never evaluated
    c.expect(amount).to_be_positive() and c.expect(amount).to_be_less_than(c.limit)

    # right
    c.expect(amount).to_be_positive()
    c.expect(amount).to_be_less_than(c.limit)
"""

from typing import Any, List


def format_value(value: Any) -> str:
    """Render a value for a failure message.

    Integers render as plain digits, integral floats drop the decimal point
    and everything else uses ``repr()``.
    """
    if isinstance(value, bool):
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


class EvaluationContext:
    """
    Ephemeral per-check view of a subject object.

    Attribute access for any public name the context does not define itself is
    forwarded to :meth:`read`, so ``c.limit`` returns ``subject.limit`` and
    ``c.describe()`` calls ``subject.describe()``. Names starting with an
    underscore are not forwarded.
    """

    def __init__(self, subject: Any):
        self.subject = subject
        self._errors: List[str] = []

    def read(self, name: str) -> Any:
        """Look up attribute ``name`` on the subject."""
        return getattr(self.subject, name)

    def __getattr__(self, name: str) -> Any:
        # only reached when normal lookup on the context fails
        if name.startswith("_"):
            raise AttributeError(name)
        return self.read(name)

    def expect(self, actual: Any) -> "Expectation":
        """Create an expectation bound to ``actual`` and this context."""
        return Expectation(actual, self)

    def add_error(self, detail: str) -> None:
        """Record a failure message."""
        self._errors.append(detail)

    @property
    def valid(self) -> bool:
        """True while no failure has been recorded."""
        return not self._errors

    @property
    def error_messages(self) -> List[str]:
        return list(self._errors)

    def __repr__(self) -> str:
        return f"EvaluationContext({self.subject!r}, errors={len(self._errors)})"


class Expectation:
    """Fluent comparisons over one actual value.

    Each method checks and, on failure, appends
    ``Expected <actual> to <phrase> <expected>`` to the owning context.
    """

    def __init__(self, actual: Any, context: EvaluationContext):
        self.actual = actual
        self.context = context

    def _fail(self, phrase: str, *operand: Any) -> None:
        parts = [f"Expected {format_value(self.actual)} to {phrase}"]
        parts.extend(format_value(value) for value in operand)
        self.context.add_error(" ".join(parts))

    def to_be(self, expected: Any) -> None:
        if self.actual == expected:
            return
        self._fail("equal", expected)

    def to_not_be(self, expected: Any) -> None:
        if self.actual != expected:
            return
        self._fail("not equal", expected)

    def to_be_positive(self) -> None:
        if self.actual > 0:
            return
        self._fail("be positive")

    def to_be_greater_than(self, value: Any) -> None:
        if self.actual > value:
            return
        self._fail("be greater than", value)

    def to_be_greater_than_or_equal_to(self, value: Any) -> None:
        if self.actual >= value:
            return
        self._fail("be greater than or equal to", value)

    def to_be_less_than(self, value: Any) -> None:
        if self.actual < value:
            return
        self._fail("be less than", value)

    def to_be_less_than_or_equal_to(self, value: Any) -> None:
        if self.actual <= value:
            return
        self._fail("be less than or equal to", value)
