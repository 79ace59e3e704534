"""Debt-vs-savings tradeoff decision engine."""

from debt_tradeoff.core.montecarlo import MonteCarloSimulator
from debt_tradeoff.domain.tradeoff import TradeoffModel, execute, validate
from debt_tradeoff.domain.validation import InvalidInput, ValidationReason
from debt_tradeoff.models import (
    DebtInfo,
    EmergencyFundStatus,
    GoalInfo,
    InvestmentProfile,
    SimulationConfig,
    TradeoffInput,
    TradeoffPreferences,
)
from debt_tradeoff.schemas.tradeoff import (
    AllocationRatio,
    MonteCarloResult,
    NetWorthPoint,
    ProjectionResult,
    Strategy,
    StrategyResult,
    TradeoffOutput,
)

__all__ = [
    "AllocationRatio",
    "DebtInfo",
    "EmergencyFundStatus",
    "GoalInfo",
    "InvalidInput",
    "InvestmentProfile",
    "MonteCarloResult",
    "MonteCarloSimulator",
    "NetWorthPoint",
    "ProjectionResult",
    "SimulationConfig",
    "Strategy",
    "StrategyResult",
    "TradeoffInput",
    "TradeoffModel",
    "TradeoffOutput",
    "TradeoffPreferences",
    "ValidationReason",
    "execute",
    "validate",
]
