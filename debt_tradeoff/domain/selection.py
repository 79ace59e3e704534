"""
Priority-ordered rules that pick the recommended strategy.

Rules are evaluated top to bottom and the first match forces its strategy.
When none applies the analysis with the highest composite score wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from debt_tradeoff.models import TradeoffInput
from debt_tradeoff.schemas.tradeoff import Strategy, StrategyResult


@dataclass(frozen=True)
class SelectionContext:
    """The handful of request facts the rules look at."""

    emergency_fund_progress: float
    highest_rate: float
    weighted_avg_rate: float
    priority: str

    @classmethod
    def from_request(cls, request: TradeoffInput) -> "SelectionContext":
        return cls(
            emergency_fund_progress=request.emergency_fund_progress(),
            highest_rate=request.highest_interest_rate(),
            weighted_avg_rate=request.weighted_avg_interest_rate(),
            priority=request.preferences.priority,
        )


@dataclass(frozen=True)
class SelectionRule:
    name: str
    applies: Callable[[SelectionContext], bool]
    strategy: Strategy
    reasoning: str
    key_factor: Callable[[SelectionContext], str]


@dataclass(frozen=True)
class Selection:
    result: StrategyResult
    reasoning: str
    key_factors: List[str]
    rule: Optional[str] = None


def _emergency_fund_factor(ctx: SelectionContext) -> str:
    return f"Emergency fund at {ctx.emergency_fund_progress * 100:.0f}% of target"


SELECTION_RULES: Sequence[SelectionRule] = (
    SelectionRule(
        name="critical_emergency_fund",
        applies=lambda ctx: ctx.emergency_fund_progress < 0.3,
        strategy=Strategy.AGGRESSIVE_SAVINGS,
        reasoning="Emergency fund critically low - prioritize building safety net",
        key_factor=_emergency_fund_factor,
    ),
    SelectionRule(
        name="prefers_debt_free",
        applies=lambda ctx: ctx.priority == "debt_free",
        strategy=Strategy.AGGRESSIVE_DEBT,
        reasoning="Following your preference to become debt-free faster",
        key_factor=lambda ctx: "User priority: debt freedom",
    ),
    SelectionRule(
        name="prefers_wealth_building",
        applies=lambda ctx: ctx.priority == "wealth_building" and ctx.emergency_fund_progress >= 0.5,
        strategy=Strategy.AGGRESSIVE_SAVINGS,
        reasoning="Following your preference for wealth building",
        key_factor=lambda ctx: "User priority: wealth building",
    ),
    SelectionRule(
        name="high_interest_debt",
        applies=lambda ctx: ctx.highest_rate > 0.18,
        strategy=Strategy.AGGRESSIVE_DEBT,
        reasoning="High interest debt detected - prioritize debt payoff",
        key_factor=lambda ctx: f"Highest debt rate: {ctx.highest_rate * 100:.1f}%",
    ),
    SelectionRule(
        name="low_emergency_fund",
        applies=lambda ctx: ctx.emergency_fund_progress < 0.5,
        strategy=Strategy.AGGRESSIVE_SAVINGS,
        reasoning="Emergency fund below 50% - prioritize savings",
        key_factor=_emergency_fund_factor,
    ),
    SelectionRule(
        name="moderate_interest_debt",
        applies=lambda ctx: ctx.weighted_avg_rate > 0.10,
        strategy=Strategy.AGGRESSIVE_DEBT,
        reasoning="Moderate-high interest debt - debt payoff provides better return",
        key_factor=lambda ctx: f"Average debt rate: {ctx.weighted_avg_rate * 100:.1f}%",
    ),
    SelectionRule(
        name="low_rates_strong_fund",
        applies=lambda ctx: ctx.weighted_avg_rate <= 0.10 and ctx.emergency_fund_progress >= 0.8,
        strategy=Strategy.AGGRESSIVE_SAVINGS,
        reasoning="Low interest debt and strong emergency fund - maximize wealth building",
        key_factor=lambda ctx: "Low debt rates and adequate emergency fund",
    ),
)


def match_rule(ctx: SelectionContext, rules: Sequence[SelectionRule] = SELECTION_RULES) -> Optional[SelectionRule]:
    for rule in rules:
        if rule.applies(ctx):
            return rule
    return None


def find_result(results: Sequence[StrategyResult], strategy: Strategy) -> StrategyResult:
    for result in results:
        if result.strategy == strategy:
            return result
    return results[0]


def best_by_score(results: Sequence[StrategyResult]) -> StrategyResult:
    # first occurrence wins on ties
    best = results[0]
    for result in results[1:]:
        if result.score > best.score:
            best = result
    return best


def select_strategy(results: Sequence[StrategyResult], request: TradeoffInput) -> Selection:
    if not results:
        raise ValueError("select_strategy needs at least one analyzed strategy")

    ctx = SelectionContext.from_request(request)
    rule = match_rule(ctx)
    if rule is not None:
        return Selection(
            result=find_result(results, rule.strategy),
            reasoning=rule.reasoning,
            key_factors=[rule.key_factor(ctx)],
            rule=rule.name,
        )

    best = best_by_score(results)
    return Selection(
        result=best,
        reasoning="Balanced approach recommended based on overall analysis",
        key_factors=[f"Best composite score: {best.score:.2f}"],
        rule="best_composite_score",
    )
