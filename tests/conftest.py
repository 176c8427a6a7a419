"""
Pytest configuration and shared fixtures for oclkit tests.

This module provides:
- Example domain classes (Owner, Account, User) carrying real constraints
- Fixtures for ready-to-use instances of them
"""

import pytest

from oclkit import Constrained, Guarded
from oclkit.utils.color import set_color_enabled


# =============================================================================
# Example Classes
# =============================================================================


class Owner:
    def __init__(self, income):
        self.income = income


class Account(Constrained):
    """Bank account whose withdrawal limit depends on the owner's income."""

    limit = Guarded(default=0)
    amount = Guarded(default=0)

    def __init__(self, owner):
        self.owner = owner

    def withdraw(self, amount_to_withdraw):
        vars(self)["amount"] = self.amount - amount_to_withdraw
        return self.amount


@Account.declare_invariant("IncomeInvariant")
def income_invariant(c):
    income = c.owner.income
    expected = 200_000 if income < 5_000_000 else round(income * 0.1)
    c.expect(c.limit).to_be(expected)


@Account.declare_precondition("withdraw", "PositiveAndWithinLimit")
def positive_and_within_limit(c, amount_to_withdraw):
    c.expect(amount_to_withdraw).to_be_positive()
    c.expect(amount_to_withdraw).to_be_less_than_or_equal_to(c.limit)


@Account.declare_postcondition("withdraw", "AmountNonNegative")
def amount_non_negative(c, _result, _amount_to_withdraw):
    c.expect(c.amount).to_be_greater_than_or_equal_to(0)


class User(Constrained):
    def __init__(self, first_name, last_name):
        self.first_name = first_name
        self.last_name = last_name


User.guard_attributes("first_name", "last_name")
User.declare_derived("full_name", lambda c: f"{c.first_name} {c.last_name}")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def owner():
    """Owner below the 5,000,000 income threshold (limit 200,000)."""
    return Owner(4_000_000)


@pytest.fixture
def account(owner):
    """Account in a valid state: limit 200,000, amount 1,000,000."""
    acc = Account(owner)
    acc.limit = 200_000
    acc.amount = 1_000_000
    acc.validate_invariants()
    return acc


@pytest.fixture
def user():
    return User("Taro", "Yamada")


@pytest.fixture(autouse=True)
def plain_output():
    """Keep colors off so CLI output can be compared literally."""
    set_color_enabled(False)
    yield
    set_color_enabled(True)
