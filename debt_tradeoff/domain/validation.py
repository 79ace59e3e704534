"""Request checks that run before any simulation work."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from debt_tradeoff.models import TradeoffInput


class ValidationReason(str, Enum):
    MISSING_INCOME = "missing_income"
    NEGATIVE_BALANCE = "negative_balance"
    INTEREST_RATE_OUT_OF_RANGE = "interest_rate_out_of_range"
    INSUFFICIENT_EXTRA_MONEY = "insufficient_extra_money"


class InvalidInput(ValueError):
    """The request cannot be analyzed as given; the caller has to fix it."""

    def __init__(self, reason: ValidationReason, message: str, debt_index: Optional[int] = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.debt_index = debt_index

    def to_dict(self) -> dict:
        detail = {"reason": self.reason.value, "message": self.message}
        if self.debt_index is not None:
            detail["debt_index"] = self.debt_index
        return detail


def validate(request: TradeoffInput) -> None:
    """Raise :class:`InvalidInput` on the first failed check.

    A request without debts skips every check: it always resolves to the
    all-savings plan.
    """
    if not request.debts:
        return

    # NaN fails every check below
    if not request.monthly_income > 0:
        raise InvalidInput(ValidationReason.MISSING_INCOME, "monthly income must be positive")

    for index, debt in enumerate(request.debts):
        if not debt.balance >= 0:
            raise InvalidInput(
                ValidationReason.NEGATIVE_BALANCE,
                f"debt {index}: balance cannot be negative",
                debt_index=index,
            )
        if not 0 <= debt.interest_rate <= 1:
            raise InvalidInput(
                ValidationReason.INTEREST_RATE_OUT_OF_RANGE,
                f"debt {index}: interest rate must be between 0 and 1",
                debt_index=index,
            )

    if not request.extra_money() > 0:
        raise InvalidInput(
            ValidationReason.INSUFFICIENT_EXTRA_MONEY,
            "no extra money available for allocation",
        )
