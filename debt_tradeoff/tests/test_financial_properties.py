"""Property-based checks on the calculator invariants."""

from __future__ import annotations

from math import isclose

from hypothesis import given, settings
from hypothesis import strategies as st

from debt_tradeoff.core import financial
from debt_tradeoff.models import DebtInfo

money = st.floats(min_value=1.0, max_value=100_000.0, allow_nan=False, allow_infinity=False)
positive_rate = st.floats(min_value=0.0001, max_value=0.05, allow_nan=False, allow_infinity=False)

debt_strategy = st.builds(
    DebtInfo,
    balance=st.floats(min_value=0.0, max_value=50_000.0, allow_nan=False),
    interest_rate=st.floats(min_value=0.0, max_value=1.0, allow_nan=False),
    minimum_payment=st.floats(min_value=0.0, max_value=2_000.0, allow_nan=False),
)


@given(payment=money, months=st.integers(min_value=0, max_value=600))
def test_zero_rate_annuity_is_payment_times_months(payment, months):
    assert financial.future_value_annuity(payment, 0, months) == payment * months


@given(flows=st.lists(money, min_size=1, max_size=120), rate=positive_rate)
def test_discounting_positive_flows_is_less_than_their_sum(flows, rate):
    assert financial.npv(flows, rate) < sum(flows)


@settings(max_examples=50, deadline=None)
@given(
    debts=st.lists(debt_strategy, min_size=0, max_size=4),
    extra=st.floats(min_value=0.0, max_value=5_000.0, allow_nan=False),
    max_months=st.integers(min_value=0, max_value=120),
)
def test_debt_payoff_bounds(debts, extra, max_months):
    payoff = financial.simulate_debt_payoff(debts, extra, max_months)
    assert 0 <= payoff.months_to_debt_free <= max_months
    assert payoff.interest_saved >= 0


@given(
    target=money,
    contribution=st.floats(min_value=1.0, max_value=5_000.0, allow_nan=False),
)
def test_zero_return_goal_months_covers_the_gap(target, contribution):
    months = financial.calculate_goal_months(0, target, contribution, 0)
    assert months * contribution >= target or isclose(months * contribution, target)
    assert (months - 1) * contribution < target or isclose((months - 1) * contribution, target)
