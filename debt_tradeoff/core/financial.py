"""Compound-interest and amortization math used by the tradeoff engine.

Every function here is pure: inputs are never mutated and no state is kept
between calls. Rates passed as ``annual_*`` are yearly fractions and are
converted to monthly rates by dividing by 12.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from debt_tradeoff.models import DebtInfo
from debt_tradeoff.schemas.tradeoff import NetWorthPoint

PAID_OFF_THRESHOLD = 0.01
GOAL_UNREACHABLE_MONTHS = 9999
GOAL_MONTHS_CAP = 600  # 50 years


@dataclass
class DebtState:
    """Working copy of one debt for a single simulation run."""

    balance: float
    interest_rate: float
    minimum_payment: float


@dataclass(frozen=True)
class DebtPayoff:
    months_to_debt_free: int
    total_interest: float
    interest_saved: float


def snapshot_debts(debts: Iterable[DebtInfo]) -> List[DebtState]:
    return [
        DebtState(
            balance=debt.balance,
            interest_rate=debt.interest_rate,
            minimum_payment=debt.minimum_payment,
        )
        for debt in debts
    ]


def future_value_annuity(payment: float, monthly_rate: float, months: int) -> float:
    """FV = PMT * ((1 + r)^n - 1) / r"""
    if monthly_rate == 0:
        return payment * months
    return payment * (((1 + monthly_rate) ** months - 1) / monthly_rate)


def present_value(future_value: float, monthly_rate: float, months: int) -> float:
    """PV = FV / (1 + r)^n"""
    if monthly_rate == 0:
        return future_value
    return future_value / (1 + monthly_rate) ** months


def npv(cash_flows: Sequence[float], monthly_discount_rate: float) -> float:
    """Discount each flow by its 1-based period: sum(CF_t / (1 + r)^t)."""
    return sum(
        cash_flow / (1 + monthly_discount_rate) ** (period + 1)
        for period, cash_flow in enumerate(cash_flows)
    )


def _all_paid(states: Sequence[DebtState]) -> bool:
    return all(state.balance <= PAID_OFF_THRESHOLD for state in states)


def _accrue_and_pay_minimums(states: Sequence[DebtState]) -> float:
    """Apply one month of interest and minimum payments; return interest charged."""
    interest_total = 0.0
    for state in states:
        if state.balance <= 0:
            continue
        interest = state.balance * (state.interest_rate / 12)
        state.balance += interest
        interest_total += interest
        state.balance -= min(state.minimum_payment, state.balance)
    return interest_total


def _apply_avalanche(states: Sequence[DebtState], extra_payment: float) -> None:
    """Pour the extra payment onto the highest-rate open debt until it runs out.

    Ties on rate go to the earliest debt in input order. Zero-rate debts are
    still paid once every interest-bearing debt is cleared.
    """
    remaining = extra_payment
    while remaining > 0:
        target = None
        for state in states:
            if state.balance <= PAID_OFF_THRESHOLD:
                continue
            if target is None or state.interest_rate > target.interest_rate:
                target = state
        if target is None:
            break
        payment = min(remaining, target.balance)
        target.balance -= payment
        remaining -= payment


def _baseline_interest(debts: Sequence[DebtInfo], max_months: int) -> float:
    """Interest paid over ``max_months`` when only minimums are made."""
    states = snapshot_debts(debts)
    total_interest = 0.0
    for _ in range(max_months):
        if _all_paid(states):
            break
        total_interest += _accrue_and_pay_minimums(states)
    return total_interest


def simulate_debt_payoff(
    debts: Sequence[DebtInfo],
    extra_payment: float,
    max_months: int,
) -> DebtPayoff:
    """
    Simulate month-by-month payoff with the avalanche method.

    Order of operations (per month):
      1) Accrue interest on every open debt and pay its minimum.
      2) Apply the extra payment to the highest-rate open debt, spilling over
         to the next one when a balance hits zero.

    Stops when every balance is <= 0.01 or ``max_months`` is reached, so the
    returned month count never exceeds ``max_months``.
    """
    states = snapshot_debts(debts)
    baseline = _baseline_interest(debts, max_months)

    total_interest = 0.0
    month = 0
    while month < max_months and not _all_paid(states):
        month += 1
        total_interest += _accrue_and_pay_minimums(states)
        _apply_avalanche(states, extra_payment)

    return DebtPayoff(
        months_to_debt_free=month,
        total_interest=total_interest,
        interest_saved=max(baseline - total_interest, 0.0),
    )


def simulate_investment_growth(
    initial_amount: float,
    monthly_contribution: float,
    annual_return: float,
    months: int,
) -> float:
    """Contribute at the start of each month, then grow for the month."""
    monthly_rate = annual_return / 12
    balance = initial_amount
    for _ in range(months):
        balance += monthly_contribution
        balance *= 1 + monthly_rate
    return balance


def calculate_goal_months(
    current_amount: float,
    target_amount: float,
    monthly_contribution: float,
    annual_return: float,
) -> int:
    gap = target_amount - current_amount
    if gap <= 0:
        return 0
    if monthly_contribution <= 0:
        return GOAL_UNREACHABLE_MONTHS

    monthly_rate = annual_return / 12
    if monthly_rate == 0:
        return math.ceil(gap / monthly_contribution)

    balance = current_amount
    months = 0
    while balance < target_amount and months < GOAL_MONTHS_CAP:
        balance += monthly_contribution
        balance *= 1 + monthly_rate
        months += 1
    return months


def generate_net_worth_timeline(
    debts: Sequence[DebtInfo],
    initial_savings: float,
    monthly_debt_payment: float,
    monthly_savings: float,
    annual_return: float,
    months: int,
    interval_months: int,
) -> List[NetWorthPoint]:
    """
    Project net worth from month 0 through ``months``, sampling every
    ``interval_months``.

    Each step uses the same mechanics as :func:`simulate_debt_payoff` for the
    debts and :func:`simulate_investment_growth` for savings.
    """
    if interval_months < 1:
        raise ValueError("interval_months must be at least 1")

    states = snapshot_debts(debts)
    savings = initial_savings
    monthly_rate = annual_return / 12

    points: List[NetWorthPoint] = []
    for month in range(months + 1):
        if month % interval_months == 0:
            debt_total = sum(state.balance for state in states if state.balance > 0)
            points.append(
                NetWorthPoint(
                    month=month,
                    net_worth=savings - debt_total,
                    debt_total=debt_total,
                    assets=savings,
                    savings=savings,
                )
            )

        if month == months:
            break

        _accrue_and_pay_minimums(states)
        _apply_avalanche(states, monthly_debt_payment)

        savings += monthly_savings
        savings *= 1 + monthly_rate

    return points
