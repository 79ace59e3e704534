from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from debt_tradeoff import config


class DebtInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = ""
    name: str = ""
    # balance and interest_rate are range-checked by domain.validation so the
    # caller gets a reason code instead of a schema error
    balance: float
    interest_rate: float
    minimum_payment: float = Field(default=0.0, ge=0)
    type: str = ""


class GoalInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str = ""
    target_amount: float = Field(ge=0)
    current_amount: float = Field(default=0.0, ge=0)
    deadline: Optional[date] = None
    priority: Optional[float] = Field(default=None, ge=0, le=1)

    def contribution_share(self, monthly_savings: float) -> float:
        """Portion of the monthly savings routed to this goal."""
        if self.priority:
            return monthly_savings * self.priority
        return monthly_savings


class InvestmentProfile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    risk_tolerance: str = ""
    expected_return: float = Field(default=0.0, ge=-1, le=1)
    time_horizon: int = Field(default=0, ge=0)
    current_investments: float = Field(default=0.0, ge=0)


class EmergencyFundStatus(BaseModel):
    model_config = ConfigDict(extra="forbid")

    target_amount: float = Field(default=0.0, ge=0)
    current_amount: float = Field(default=0.0, ge=0)
    monthly_expenses: float = Field(default=0.0, ge=0)
    target_months: int = Field(default=0, ge=0)


class TradeoffPreferences(BaseModel):
    model_config = ConfigDict(extra="forbid")

    psychological_weight: float = Field(default=0.0, ge=0, le=1)
    priority: Literal["", "debt_free", "wealth_building", "balanced"] = ""
    accept_investment_risk: bool = False
    risk_tolerance: Literal["", "conservative", "moderate", "aggressive"] = ""


class SimulationConfig(BaseModel):
    """Monte Carlo knobs. Variances are +/- fractions of the base value."""

    model_config = ConfigDict(extra="forbid")

    num_simulations: int = Field(default_factory=lambda: config.NUM_SIMULATIONS, ge=1)
    income_variance: float = Field(default_factory=lambda: config.INCOME_VARIANCE, ge=0, le=1)
    expense_variance: float = Field(default_factory=lambda: config.EXPENSE_VARIANCE, ge=0, le=1)
    return_variance: float = Field(default_factory=lambda: config.RETURN_VARIANCE, ge=0, le=1)
    projection_months: int = Field(default_factory=lambda: config.PROJECTION_MONTHS, ge=1, le=600)
    discount_rate: float = Field(default_factory=lambda: config.DISCOUNT_RATE, ge=0, le=1)

    @property
    def monthly_discount_rate(self) -> float:
        return self.discount_rate / 12.0


class TradeoffInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str = ""
    monthly_income: float = 0.0
    essential_expenses: float = Field(default=0.0, ge=0)
    debts: List[DebtInfo] = Field(default_factory=list)
    total_min_payments: Optional[float] = Field(default=None, ge=0)
    goals: List[GoalInfo] = Field(default_factory=list)
    investment_profile: InvestmentProfile = Field(default_factory=InvestmentProfile)
    emergency_fund: EmergencyFundStatus = Field(default_factory=EmergencyFundStatus)
    preferences: TradeoffPreferences = Field(default_factory=TradeoffPreferences)
    simulation_config: Optional[SimulationConfig] = None

    def min_payments(self) -> float:
        """Caller-supplied minimum payment total, else the sum over debts."""
        if self.total_min_payments is not None:
            return self.total_min_payments
        return sum(debt.minimum_payment for debt in self.debts)

    def extra_money(self) -> float:
        return self.monthly_income - self.essential_expenses - self.min_payments()

    def effective_simulation_config(self) -> SimulationConfig:
        return self.simulation_config or SimulationConfig()

    def total_debt(self) -> float:
        return sum(debt.balance for debt in self.debts)

    def weighted_avg_interest_rate(self) -> float:
        total = self.total_debt()
        if total == 0:
            return 0.0
        return sum(debt.balance * debt.interest_rate for debt in self.debts) / total

    def highest_interest_rate(self) -> float:
        return max([0.0] + [debt.interest_rate for debt in self.debts])

    def emergency_fund_gap(self) -> float:
        return max(self.emergency_fund.target_amount - self.emergency_fund.current_amount, 0.0)

    def risk_tolerance(self) -> str:
        return self.preferences.risk_tolerance or self.investment_profile.risk_tolerance

    def emergency_fund_progress(self) -> float:
        target = self.emergency_fund.target_amount
        if target == 0:
            return 1.0
        return min(max(self.emergency_fund.current_amount / target, 0.0), 1.0)
