"""Data contracts returned by the tradeoff engine."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

RATIO_TOLERANCE = 1e-9


class Strategy(str, Enum):
    AGGRESSIVE_DEBT = "aggressive_debt"
    BALANCED = "balanced"
    AGGRESSIVE_SAVINGS = "aggressive_savings"


class AllocationRatio(BaseModel):
    """Split of the monthly surplus between debt paydown and savings."""

    debt_percent: float = Field(..., ge=0, le=1)
    savings_percent: float = Field(..., ge=0, le=1)

    @model_validator(mode="after")
    def ensure_complete_split(self) -> "AllocationRatio":
        if abs(self.debt_percent + self.savings_percent - 1.0) > RATIO_TOLERANCE:
            raise ValueError("debt_percent and savings_percent must sum to 1.0")
        return self


class StrategyResult(BaseModel):
    """Deterministic analysis of one candidate allocation."""

    strategy: Strategy
    ratio: AllocationRatio
    npv: float = 0.0
    total_interest_paid: float = 0.0
    interest_saved: float = Field(0.0, ge=0)
    investment_value: float = 0.0
    months_to_debt_free: int = Field(0, ge=0)
    time_to_goals: Dict[str, int] = Field(default_factory=dict)
    risk_score: float = Field(0.0, ge=0, le=10)
    score: float = 0.0
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)


class MonteCarloResult(BaseModel):
    """Aggregated statistics over all randomized trials."""

    num_simulations: int = Field(..., ge=0)
    success_probability: float = Field(..., ge=0, le=1)
    debt_free_p50: int
    debt_free_p75: int
    debt_free_p90: int
    npv_mean: float
    npv_std_dev: float
    npv_p5: float
    npv_p95: float
    confidence_interval_95: Tuple[float, float]


class NetWorthPoint(BaseModel):
    """Single sample of the net-worth projection."""

    month: int = Field(..., ge=0)
    net_worth: float
    debt_total: float = Field(..., ge=0)
    assets: float
    savings: float


class ProjectionResult(BaseModel):
    debt_free_date: date
    emergency_fund_date: date
    # goal id -> projected completion date
    goal_dates: Dict[str, date] = Field(default_factory=dict)
    net_worth_growth: List[NetWorthPoint] = Field(default_factory=list)


class TradeoffOutput(BaseModel):
    """Full response for one tradeoff request."""

    recommended_strategy: Strategy
    recommended_ratio: AllocationRatio
    strategy_analysis: List[StrategyResult]
    reasoning: str
    key_factors: List[str]
    projected_timelines: ProjectionResult
    monte_carlo_results: Optional[MonteCarloResult] = None
    recommendations: List[str] = Field(default_factory=list)
