from __future__ import annotations

from copy import deepcopy

import pytest

from debt_tradeoff.core.montecarlo import MonteCarloSimulator
from debt_tradeoff.domain.tradeoff import TradeoffModel

BASE_REQUEST = {
    "user_id": "user1",
    "monthly_income": 6000,
    "essential_expenses": 3500,
    "total_min_payments": 300,
    "debts": [
        {
            "id": "cc1",
            "name": "Credit Card",
            "balance": 8000,
            "interest_rate": 0.20,
            "minimum_payment": 200,
            "type": "credit_card",
        },
        {
            "id": "car",
            "name": "Car Loan",
            "balance": 15000,
            "interest_rate": 0.06,
            "minimum_payment": 100,
            "type": "car_loan",
        },
    ],
    "goals": [
        {"id": "emergency", "name": "Emergency Fund", "target_amount": 15000, "current_amount": 3000, "priority": 0.6},
        {"id": "vacation", "name": "Vacation", "target_amount": 5000, "current_amount": 500, "priority": 0.4},
    ],
    "investment_profile": {
        "risk_tolerance": "moderate",
        "expected_return": 0.07,
        "time_horizon": 10,
        "current_investments": 5000,
    },
    "emergency_fund": {
        "target_amount": 15000,
        "current_amount": 3000,
        "monthly_expenses": 3500,
        "target_months": 4,
    },
    "preferences": {
        "psychological_weight": 0.15,
        "priority": "balanced",
        "accept_investment_risk": True,
        "risk_tolerance": "moderate",
    },
    "simulation_config": {
        "num_simulations": 100,
        "income_variance": 0.10,
        "expense_variance": 0.15,
        "return_variance": 0.20,
        "projection_months": 60,
        "discount_rate": 0.05,
    },
}


@pytest.fixture()
def request_payload() -> dict:
    return deepcopy(BASE_REQUEST)


@pytest.fixture()
def seeded_model() -> TradeoffModel:
    return TradeoffModel(simulator=MonteCarloSimulator(seed=1234))
