from __future__ import annotations

from math import isclose

import pytest

from debt_tradeoff.core import financial
from debt_tradeoff.models import DebtInfo


def two_debts() -> list[DebtInfo]:
    return [
        DebtInfo(id="cc", balance=5000, interest_rate=0.18, minimum_payment=100),
        DebtInfo(id="loan", balance=10000, interest_rate=0.06, minimum_payment=200),
    ]


def test_future_value_annuity_five_years_at_seven_percent():
    fv = financial.future_value_annuity(500, 0.07 / 12, 60)
    assert 35000 <= fv <= 37000


def test_future_value_annuity_zero_rate_is_simple_sum():
    assert financial.future_value_annuity(250.0, 0, 24) == 6000.0


def test_present_value_discounts_and_zero_rate_passthrough():
    assert financial.present_value(1000.0, 0, 12) == 1000.0
    assert isclose(financial.present_value(1010.0, 0.01, 1), 1000.0, rel_tol=1e-12)


def test_npv_uses_one_based_periods():
    # a single flow of 110 one period out at 10% is worth exactly 100 today
    assert isclose(financial.npv([110.0], 0.10), 100.0, rel_tol=1e-12)
    assert isclose(financial.npv([100.0, 100.0], 0.0), 200.0)
    assert financial.npv([], 0.05) == 0.0


def test_avalanche_payoff_two_debts():
    payoff = financial.simulate_debt_payoff(two_debts(), 500, 120)

    assert payoff.months_to_debt_free <= 30
    assert payoff.interest_saved > 0
    assert payoff.total_interest > 0


def test_payoff_does_not_mutate_inputs():
    debts = two_debts()
    financial.simulate_debt_payoff(debts, 500, 120)
    assert debts[0].balance == 5000
    assert debts[1].balance == 10000


def test_payoff_capped_at_max_months():
    # minimum barely covers interest so the loan never clears
    debts = [DebtInfo(balance=50000, interest_rate=0.24, minimum_payment=1001)]
    payoff = financial.simulate_debt_payoff(debts, 0, 36)
    assert payoff.months_to_debt_free == 36
    assert payoff.interest_saved == 0


def test_no_extra_payment_saves_nothing():
    payoff = financial.simulate_debt_payoff(two_debts(), 0, 120)
    assert payoff.interest_saved == 0


def test_paid_off_debts_finish_immediately():
    payoff = financial.simulate_debt_payoff([DebtInfo(balance=0, interest_rate=0.1)], 100, 60)
    assert payoff.months_to_debt_free == 0
    assert payoff.total_interest == 0


def test_avalanche_targets_highest_rate_first():
    debts = [
        DebtInfo(id="low", balance=1000, interest_rate=0.05, minimum_payment=0),
        DebtInfo(id="high", balance=1000, interest_rate=0.25, minimum_payment=0),
    ]
    states = financial.snapshot_debts(debts)
    financial._apply_avalanche(states, 600)
    assert states[0].balance == 1000
    assert isclose(states[1].balance, 400)


def test_avalanche_tie_goes_to_input_order():
    debts = [
        DebtInfo(id="first", balance=1000, interest_rate=0.10, minimum_payment=0),
        DebtInfo(id="second", balance=1000, interest_rate=0.10, minimum_payment=0),
    ]
    states = financial.snapshot_debts(debts)
    financial._apply_avalanche(states, 1500)
    assert states[0].balance == 0
    assert isclose(states[1].balance, 500)


def test_investment_growth_contributes_before_growth():
    # one month: (0 + 100) * (1 + 0.12 / 12) = 101
    assert isclose(financial.simulate_investment_growth(0, 100, 0.12, 1), 101.0)
    assert financial.simulate_investment_growth(1000, 0, 0.0, 12) == 1000


@pytest.mark.parametrize(
    "current, target, contribution, annual_return, expected",
    [
        (0, 6000, 500, 0, 12),
        (5000, 5000, 0, 0.05, 0),
        (6000, 5000, 100, 0.05, 0),
        (0, 1000, 0, 0.05, financial.GOAL_UNREACHABLE_MONTHS),
        (0, 1000, 300, 0, 4),
    ],
)
def test_calculate_goal_months(current, target, contribution, annual_return, expected):
    assert financial.calculate_goal_months(current, target, contribution, annual_return) == expected


def test_goal_months_with_growth_is_faster_than_without():
    flat = financial.calculate_goal_months(0, 10000, 200, 0)
    grown = financial.calculate_goal_months(0, 10000, 200, 0.08)
    assert grown < flat


def test_goal_months_capped_at_fifty_years():
    assert financial.calculate_goal_months(0, 10_000_000, 1, 0.01) == financial.GOAL_MONTHS_CAP


def test_net_worth_timeline_samples_every_interval():
    points = financial.generate_net_worth_timeline(two_debts(), 1000, 250, 250, 0.07, 60, 6)

    assert [p.month for p in points] == list(range(0, 61, 6))
    first = points[0]
    assert first.debt_total == 15000
    assert first.net_worth == 1000 - 15000
    assert first.assets == first.savings == 1000
    # paying down debt and saving both push net worth up
    assert points[-1].net_worth > first.net_worth
    assert points[-1].debt_total < first.debt_total


def test_net_worth_timeline_is_restartable():
    args = (two_debts(), 1000, 250, 250, 0.07, 24, 3)
    assert financial.generate_net_worth_timeline(*args) == financial.generate_net_worth_timeline(*args)


def test_net_worth_timeline_rejects_bad_interval():
    with pytest.raises(ValueError):
        financial.generate_net_worth_timeline(two_debts(), 0, 0, 0, 0.05, 12, 0)


def test_zero_rate_debt_still_receives_extra_payment():
    debts = [DebtInfo(id="family", balance=1200, interest_rate=0.0, minimum_payment=0)]
    payoff = financial.simulate_debt_payoff(debts, 100, 60)
    assert payoff.months_to_debt_free == 12
    assert payoff.total_interest == 0
