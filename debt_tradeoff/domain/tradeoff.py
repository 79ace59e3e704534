"""
Debt-vs-savings tradeoff model.

Given a validated request the model:
  1) analyzes three fixed allocations of the monthly surplus
     (75/25, 50/50, 25/75 debt/savings) with the deterministic calculator,
  2) scores them on NPV, risk, speed to debt freedom and psychological fit,
  3) picks one through the ordered rules in :mod:`debt_tradeoff.domain.selection`,
  4) stress-tests the pick with Monte Carlo and projects its timelines.

A request without debts short-circuits to a single all-savings plan.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from dateutil.relativedelta import relativedelta

from debt_tradeoff import config
from debt_tradeoff.core import financial
from debt_tradeoff.core.montecarlo import MonteCarloSimulator, SimulationInput
from debt_tradeoff.domain.selection import Selection, select_strategy
from debt_tradeoff.domain.validation import validate as validate_request
from debt_tradeoff.models import SimulationConfig, TradeoffInput
from debt_tradeoff.schemas.tradeoff import (
    AllocationRatio,
    MonteCarloResult,
    ProjectionResult,
    Strategy,
    StrategyResult,
    TradeoffOutput,
)

logger = logging.getLogger(__name__)

RequestLike = Union[TradeoffInput, Mapping[str, Any]]

STRATEGY_RATIOS: Dict[Strategy, AllocationRatio] = {
    Strategy.AGGRESSIVE_DEBT: AllocationRatio(debt_percent=0.75, savings_percent=0.25),
    Strategy.BALANCED: AllocationRatio(debt_percent=0.50, savings_percent=0.50),
    Strategy.AGGRESSIVE_SAVINGS: AllocationRatio(debt_percent=0.25, savings_percent=0.75),
}
ALL_SAVINGS_RATIO = AllocationRatio(debt_percent=0.0, savings_percent=1.0)

# composite score weights; the psychological weight comes from the request
NPV_WEIGHT = 0.35
RISK_WEIGHT = 0.25
DEBT_FREE_WEIGHT = 0.25
DEFAULT_PSYCHOLOGICAL_WEIGHT = 0.15

PSYCHOLOGICAL_PREFERENCE: Dict[Strategy, float] = {
    Strategy.AGGRESSIVE_DEBT: 1.0,
    Strategy.BALANCED: 0.7,
    Strategy.AGGRESSIVE_SAVINGS: 0.5,
}

RISK_TOLERANCE_MULTIPLIER: Dict[str, float] = {
    "conservative": 1.2,
    "aggressive": 0.8,
}

STRATEGY_PROS: Dict[Strategy, List[str]] = {
    Strategy.AGGRESSIVE_DEBT: [
        "Minimize total interest paid",
        "Become debt-free faster",
        "Psychological relief",
        "Guaranteed return",
    ],
    Strategy.BALANCED: [
        "Balanced approach",
        "Flexibility",
        "Moderate risk",
        "Progress on multiple fronts",
    ],
    Strategy.AGGRESSIVE_SAVINGS: [
        "Maximize compound growth",
        "Build wealth faster",
        "Time in market advantage",
        "Better prepared for opportunities",
    ],
}

STRATEGY_CONS: Dict[Strategy, List[str]] = {
    Strategy.AGGRESSIVE_DEBT: [
        "Slower wealth accumulation",
        "Miss compound growth",
        "Less flexibility",
    ],
    Strategy.BALANCED: [
        "Not optimized for single goal",
        "Slower progress",
    ],
    Strategy.AGGRESSIVE_SAVINGS: [
        "Pay more interest",
        "Debt lasts longer",
        "Returns not guaranteed",
        "Higher risk",
    ],
}


def coerce_request(request: RequestLike) -> TradeoffInput:
    if isinstance(request, TradeoffInput):
        return request
    return TradeoffInput.model_validate(request)


def planning_return(request: TradeoffInput) -> float:
    """Expected return for deterministic projections; 0 means "not provided"."""
    expected = request.investment_profile.expected_return
    return expected if expected != 0 else config.FALLBACK_EXPECTED_RETURN


def calculate_risk_score(ratio: AllocationRatio, request: TradeoffInput) -> float:
    score = ratio.savings_percent * 3.0

    progress = request.emergency_fund_progress()
    if progress < 0.5:
        score += 3.0
    elif progress < 1.0:
        score += 1.5

    if request.highest_interest_rate() > 0.15 and ratio.debt_percent < 0.5:
        score += 2.0

    score *= RISK_TOLERANCE_MULTIPLIER.get(request.risk_tolerance(), 1.0)
    return min(max(score, 0.0), 10.0)


def score_strategies(results: List[StrategyResult], request: TradeoffInput) -> List[StrategyResult]:
    """Return copies of ``results`` with the composite ``score`` filled in."""
    max_npv = max(result.npv for result in results)
    min_months = min(result.months_to_debt_free for result in results)
    psychological_weight = request.preferences.psychological_weight or DEFAULT_PSYCHOLOGICAL_WEIGHT

    scored: List[StrategyResult] = []
    for result in results:
        npv_score = result.npv / max_npv if max_npv > 0 else 0.0
        risk_score = 1.0 - result.risk_score / 10.0
        debt_free_score = (
            min_months / result.months_to_debt_free if result.months_to_debt_free > 0 else 0.0
        )
        preference = PSYCHOLOGICAL_PREFERENCE.get(result.strategy, 0.5)

        score = (
            npv_score * NPV_WEIGHT
            + risk_score * RISK_WEIGHT
            + debt_free_score * DEBT_FREE_WEIGHT
            + preference * psychological_weight
        )
        scored.append(result.model_copy(update={"score": score}))
    return scored


def generate_recommendations(
    selected: StrategyResult,
    request: TradeoffInput,
    monte_carlo: Optional[MonteCarloResult],
) -> List[str]:
    recommendations: List[str] = []

    if selected.strategy == Strategy.AGGRESSIVE_DEBT:
        recommendations.append("Focus extra payments on highest interest debt first (Avalanche method)")
        if request.highest_interest_rate() > 0.15:
            recommendations.append("Consider balance transfer or debt consolidation for high-rate debts")
    elif selected.strategy == Strategy.AGGRESSIVE_SAVINGS:
        recommendations.append("Maximize retirement account contributions for tax benefits")
        recommendations.append("Consider low-cost index funds for long-term growth")
    elif selected.strategy == Strategy.BALANCED:
        recommendations.append("Review allocation quarterly and adjust based on progress")

    progress = request.emergency_fund_progress()
    if progress < 0.5:
        recommendations.append(
            f"Build emergency fund to at least 50% (currently {progress * 100:.0f}%)"
        )

    if monte_carlo is not None and monte_carlo.success_probability < 0.7:
        recommendations.append(
            "Consider increasing income or reducing expenses to improve success probability"
        )
    return recommendations


class TradeoffModel:
    """Decision model for splitting a monthly surplus between debt and savings.

    The model holds no per-request state. Its Monte Carlo simulator owns the
    only random source, so pass a seeded simulator for reproducible output.

    Example:
        >>> model = TradeoffModel(simulator=MonteCarloSimulator(seed=7))
        >>> output = model.execute(request, as_of=date(2025, 1, 1))
        >>> output.recommended_strategy
        <Strategy.AGGRESSIVE_DEBT: 'aggressive_debt'>
    """

    name = "savings_debt_tradeoff"
    description = (
        "Decision tree analysis with Monte Carlo simulation for optimal "
        "debt-savings allocation"
    )

    def __init__(
        self,
        simulator: Optional[MonteCarloSimulator] = None,
        timeline_interval_months: Optional[int] = None,
    ):
        self.simulator = simulator or MonteCarloSimulator()
        self.timeline_interval_months = timeline_interval_months or config.TIMELINE_INTERVAL_MONTHS

    def dependencies(self) -> List[str]:
        return []

    def validate(self, request: RequestLike) -> None:
        validate_request(coerce_request(request))

    def execute(self, request: RequestLike, as_of: Optional[date] = None) -> TradeoffOutput:
        """Validate the request and build the full recommendation.

        Args:
            request: ``TradeoffInput`` or its JSON-shaped dict.
            as_of: Reference date for projected calendar dates. Defaults to today.

        Raises:
            InvalidInput: if the request fails a domain check.
            pydantic.ValidationError: if a dict request is malformed.
        """
        ti = coerce_request(request)
        validate_request(ti)

        as_of = as_of or date.today()
        cfg = ti.effective_simulation_config()
        extra_money = max(ti.extra_money(), 0.0)

        if not ti.debts:
            selected = StrategyResult(
                strategy=Strategy.AGGRESSIVE_SAVINGS,
                ratio=ALL_SAVINGS_RATIO,
                score=100,
            )
            analysis = [selected]
            selection = Selection(
                result=selected,
                reasoning="No debts to pay off. Focus on aggressive savings.",
                key_factors=["No debt obligations", "Full allocation to savings"],
                rule="no_debt",
            )
        else:
            analysis = [
                self.analyze_strategy(strategy, ratio, extra_money, ti, cfg)
                for strategy, ratio in STRATEGY_RATIOS.items()
            ]
            analysis = score_strategies(analysis, ti)
            selection = select_strategy(analysis, ti)
            selected = selection.result

        logger.debug(
            "user %s: selected %s via %s", ti.user_id or "-", selected.strategy.value, selection.rule
        )

        monte_carlo = self.run_monte_carlo(selected.ratio, ti, cfg)
        projections = self.generate_projections(selected.ratio, extra_money, ti, cfg, as_of)
        recommendations = generate_recommendations(selected, ti, monte_carlo)

        logger.info(
            "tradeoff analysis complete: strategy=%s success_probability=%.3f",
            selected.strategy.value,
            monte_carlo.success_probability,
        )

        return TradeoffOutput(
            recommended_strategy=selected.strategy,
            recommended_ratio=selected.ratio,
            strategy_analysis=analysis,
            reasoning=selection.reasoning,
            key_factors=selection.key_factors,
            projected_timelines=projections,
            monte_carlo_results=monte_carlo,
            recommendations=recommendations,
        )

    def analyze_strategy(
        self,
        strategy: Strategy,
        ratio: AllocationRatio,
        extra_money: float,
        request: TradeoffInput,
        cfg: SimulationConfig,
    ) -> StrategyResult:
        debt_payment = extra_money * ratio.debt_percent
        savings_payment = extra_money * ratio.savings_percent
        expected_return = planning_return(request)

        payoff = financial.simulate_debt_payoff(request.debts, debt_payment, cfg.projection_months)
        investment_value = financial.simulate_investment_growth(
            request.investment_profile.current_investments,
            savings_payment,
            expected_return,
            cfg.projection_months,
        )
        npv = payoff.interest_saved + financial.present_value(
            investment_value, cfg.monthly_discount_rate, cfg.projection_months
        )

        time_to_goals = {
            goal.id: financial.calculate_goal_months(
                goal.current_amount,
                goal.target_amount,
                goal.contribution_share(savings_payment),
                expected_return,
            )
            for goal in request.goals
        }

        result = StrategyResult(
            strategy=strategy,
            ratio=ratio,
            npv=npv,
            total_interest_paid=payoff.total_interest,
            interest_saved=payoff.interest_saved,
            investment_value=investment_value,
            months_to_debt_free=payoff.months_to_debt_free,
            time_to_goals=time_to_goals,
            risk_score=calculate_risk_score(ratio, request),
            pros=list(STRATEGY_PROS[strategy]),
            cons=list(STRATEGY_CONS[strategy]),
        )
        logger.debug(
            "%s: npv=%.2f months_to_debt_free=%d risk=%.2f",
            strategy.value,
            result.npv,
            result.months_to_debt_free,
            result.risk_score,
        )
        return result

    def run_monte_carlo(
        self,
        ratio: AllocationRatio,
        request: TradeoffInput,
        cfg: SimulationConfig,
    ) -> MonteCarloResult:
        return self.simulator.run_simulation(
            SimulationInput(
                debts=request.debts,
                monthly_income=request.monthly_income,
                essential_expenses=request.essential_expenses,
                total_min_payments=request.min_payments(),
                ratio=ratio,
                expected_return=request.investment_profile.expected_return,
                initial_savings=request.investment_profile.current_investments,
                goals=request.goals,
                config=cfg,
            )
        )

    def generate_projections(
        self,
        ratio: AllocationRatio,
        extra_money: float,
        request: TradeoffInput,
        cfg: SimulationConfig,
        as_of: date,
    ) -> ProjectionResult:
        debt_payment = extra_money * ratio.debt_percent
        savings_payment = extra_money * ratio.savings_percent
        expected_return = planning_return(request)

        payoff = financial.simulate_debt_payoff(request.debts, debt_payment, cfg.projection_months)

        fund_gap = request.emergency_fund_gap()
        fund_months = 0
        if savings_payment > 0 and fund_gap > 0:
            # capped so the projected date stays inside the calendar
            fund_months = min(int(fund_gap / savings_payment), financial.GOAL_UNREACHABLE_MONTHS)

        goal_dates = {
            goal.id: as_of
            + relativedelta(
                months=financial.calculate_goal_months(
                    goal.current_amount,
                    goal.target_amount,
                    goal.contribution_share(savings_payment),
                    expected_return,
                )
            )
            for goal in request.goals
        }

        timeline = financial.generate_net_worth_timeline(
            request.debts,
            request.investment_profile.current_investments,
            debt_payment,
            savings_payment,
            expected_return,
            cfg.projection_months,
            self.timeline_interval_months,
        )

        return ProjectionResult(
            debt_free_date=as_of + relativedelta(months=payoff.months_to_debt_free),
            emergency_fund_date=as_of + relativedelta(months=fund_months),
            goal_dates=goal_dates,
            net_worth_growth=timeline,
        )


def validate(request: RequestLike) -> None:
    """Check a request without running any simulation."""
    validate_request(coerce_request(request))


def execute(
    request: RequestLike,
    as_of: Optional[date] = None,
    seed: Optional[int] = None,
) -> TradeoffOutput:
    """Run the tradeoff model with a fresh simulator for this call."""
    model = TradeoffModel(simulator=MonteCarloSimulator(seed=seed))
    return model.execute(request, as_of=as_of)
