"""
Monte Carlo stress test for a fixed debt/savings allocation.

Each trial perturbs income, essential expenses and the expected investment
return by independent uniform draws, replays the deterministic payoff and
growth math from :mod:`debt_tradeoff.core.financial`, and records whether
the household reaches debt freedom and its goals within the horizon. Trial
results are then reduced to percentile and confidence-interval statistics.

The random source belongs to the simulator instance. All draws for a run are
taken up front on the calling thread, so a seeded simulator produces the
same result whether trials run serially or on a thread pool.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from debt_tradeoff import config as settings
from debt_tradeoff.core import financial
from debt_tradeoff.models import DebtInfo, GoalInfo, SimulationConfig
from debt_tradeoff.schemas.tradeoff import AllocationRatio, MonteCarloResult

logger = logging.getLogger(__name__)

CI_Z_SCORE = 1.96
DEBT_FREE_PERCENTILES = (50, 75, 90)
NPV_PERCENTILES = (5, 95)


@dataclass
class SimulationInput:
    """Everything one Monte Carlo run needs, already resolved by the caller."""

    debts: Sequence[DebtInfo]
    monthly_income: float
    essential_expenses: float
    total_min_payments: float
    ratio: AllocationRatio
    expected_return: float
    initial_savings: float
    goals: Sequence[GoalInfo] = field(default_factory=list)
    config: SimulationConfig = field(default_factory=SimulationConfig)


@dataclass(frozen=True)
class TrialDraw:
    """Relative perturbations for one trial, each in [-variance, +variance]."""

    income: float
    expense: float
    investment_return: float


@dataclass(frozen=True)
class TrialResult:
    months_to_debt_free: int
    final_npv: float
    goals_achieved: int
    total_goals: int


def run_trial(sim_input: SimulationInput, draw: TrialDraw) -> TrialResult:
    """Replay the plan under one set of perturbed assumptions.

    Pure given its arguments: debts are snapshotted inside the calculator, so
    concurrent trials never observe each other's balances.
    """
    cfg = sim_input.config
    monthly_income = sim_input.monthly_income * (1.0 + draw.income)
    essential_expenses = sim_input.essential_expenses * (1.0 + draw.expense)
    expected_return = max(sim_input.expected_return * (1.0 + draw.investment_return), 0.0)

    extra_money = max(monthly_income - essential_expenses - sim_input.total_min_payments, 0.0)
    debt_payment = extra_money * sim_input.ratio.debt_percent
    savings_amount = extra_money * sim_input.ratio.savings_percent

    payoff = financial.simulate_debt_payoff(sim_input.debts, debt_payment, cfg.projection_months)
    investment_value = financial.simulate_investment_growth(
        sim_input.initial_savings,
        savings_amount,
        expected_return,
        cfg.projection_months,
    )
    final_npv = financial.present_value(
        investment_value, cfg.monthly_discount_rate, cfg.projection_months
    )

    goals_achieved = 0
    for goal in sim_input.goals:
        months = financial.calculate_goal_months(
            goal.current_amount,
            goal.target_amount,
            goal.contribution_share(savings_amount),
            expected_return,
        )
        if months <= cfg.projection_months:
            goals_achieved += 1

    return TrialResult(
        months_to_debt_free=payoff.months_to_debt_free,
        final_npv=final_npv,
        goals_achieved=goals_achieved,
        total_goals=len(sim_input.goals),
    )


def truncated_percentile(sorted_values: Sequence[float], pct: int) -> float:
    """Value at index floor(n * pct / 100) of an ascending sequence.

    This is a nearest-rank style estimator without interpolation; it is kept
    for output compatibility with existing consumers.
    """
    index = min(len(sorted_values) * pct // 100, len(sorted_values) - 1)
    return sorted_values[index]


def is_successful(result: TrialResult, projection_months: int) -> bool:
    if result.months_to_debt_free > projection_months:
        return False
    return result.total_goals == 0 or result.goals_achieved >= result.total_goals // 2


def aggregate_results(results: Sequence[TrialResult], cfg: SimulationConfig) -> MonteCarloResult:
    n = len(results)
    if n == 0:
        return MonteCarloResult(
            num_simulations=0,
            success_probability=0.0,
            debt_free_p50=0,
            debt_free_p75=0,
            debt_free_p90=0,
            npv_mean=0.0,
            npv_std_dev=0.0,
            npv_p5=0.0,
            npv_p95=0.0,
            confidence_interval_95=(0.0, 0.0),
        )

    debt_free_months = np.sort(np.array([r.months_to_debt_free for r in results], dtype=int))
    npvs = np.sort(np.array([r.final_npv for r in results], dtype=float))
    success_count = sum(1 for r in results if is_successful(r, cfg.projection_months))

    npv_mean = float(np.mean(npvs))
    npv_std_dev = float(np.std(npvs, ddof=1)) if n > 1 else 0.0
    margin = CI_Z_SCORE * npv_std_dev / math.sqrt(n)

    p50, p75, p90 = (int(truncated_percentile(debt_free_months, p)) for p in DEBT_FREE_PERCENTILES)
    p5, p95 = (float(truncated_percentile(npvs, p)) for p in NPV_PERCENTILES)

    return MonteCarloResult(
        num_simulations=n,
        success_probability=success_count / n,
        debt_free_p50=p50,
        debt_free_p75=p75,
        debt_free_p90=p90,
        npv_mean=npv_mean,
        npv_std_dev=npv_std_dev,
        npv_p5=p5,
        npv_p95=p95,
        confidence_interval_95=(npv_mean - margin, npv_mean + margin),
    )


def _chunk(items: Sequence[TrialDraw], size: int) -> List[Sequence[TrialDraw]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class MonteCarloSimulator:
    """Runs randomized trials for an allocation and aggregates the outcome.

    Example:
        >>> simulator = MonteCarloSimulator(seed=42)
        >>> result = simulator.run_simulation(sim_input)
        >>> print(f"Success: {result.success_probability:.1%}")
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Args:
            rng: Random source to draw perturbations from. Takes precedence
                 over ``seed``.
            seed: Seed for a fresh generator. When both are None the
                  generator is seeded from OS entropy.
            max_workers: Thread count for trial fan-out; 0 or 1 runs trials
                         on the calling thread. Defaults to
                         ``DEBT_TRADEOFF_MAX_WORKERS``.
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.max_workers = settings.MAX_WORKERS if max_workers is None else max(0, max_workers)

    def draw_trials(self, cfg: SimulationConfig) -> List[TrialDraw]:
        variances = np.array([cfg.income_variance, cfg.expense_variance, cfg.return_variance])
        samples = self.rng.uniform(-1.0, 1.0, size=(cfg.num_simulations, 3)) * variances
        return [
            TrialDraw(income=float(row[0]), expense=float(row[1]), investment_return=float(row[2]))
            for row in samples
        ]

    def run_simulation(self, sim_input: SimulationInput) -> MonteCarloResult:
        cfg = sim_input.config
        draws = self.draw_trials(cfg)

        if self.max_workers <= 1 or len(draws) < 2:
            results = [run_trial(sim_input, draw) for draw in draws]
        else:
            results = self._run_parallel(sim_input, draws)

        aggregated = aggregate_results(results, cfg)
        logger.debug(
            "monte carlo: %d trials, ratio %.2f/%.2f, success %.3f, debt-free p50 %d",
            aggregated.num_simulations,
            sim_input.ratio.debt_percent,
            sim_input.ratio.savings_percent,
            aggregated.success_probability,
            aggregated.debt_free_p50,
        )
        return aggregated

    def _run_parallel(self, sim_input: SimulationInput, draws: List[TrialDraw]) -> List[TrialResult]:
        worker_count = min(self.max_workers, len(draws))
        batch_size = max(1, math.ceil(len(draws) / (worker_count * 4)))

        def run_batch(batch: Sequence[TrialDraw]) -> List[TrialResult]:
            return [run_trial(sim_input, draw) for draw in batch]

        results: List[TrialResult] = []
        with ThreadPoolExecutor(max_workers=worker_count) as pool:
            # map preserves batch order, keeping aggregation deterministic
            for batch_results in pool.map(run_batch, _chunk(draws, batch_size)):
                results.extend(batch_results)
        return results
