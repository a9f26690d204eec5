"""Margin loan amortization helpers."""

from __future__ import annotations

from dataclasses import dataclass

# Rates below this are treated as interest-free.
ZERO_RATE_EPSILON = 1e-7


def monthly_rate(annual_interest_rate_percent: float) -> float:
    return annual_interest_rate_percent / 12 / 100


def monthly_payment(rate: float, periods: int, principal: float) -> float:
    """Level payment retiring ``principal`` over ``periods`` months at ``rate``."""
    if periods <= 0:
        return 0.0
    if rate < ZERO_RATE_EPSILON:
        return principal / periods
    return rate * principal / (1 - (1 + rate) ** -periods)


@dataclass(slots=True, frozen=True)
class LoanStep:
    payment: float
    additional_principal: float
    principal: float


def amortize_month(principal: float, rate: float, payment: float, surplus: float, sweep_percent: float) -> LoanStep:
    """Apply one month of interest, the level payment and a surplus sweep.

    A paid-off loan (principal <= 0) stays inactive: no payment, no interest
    and nothing swept from the surplus. A month whose surplus is negative
    sweeps nothing, so the principal never grows.
    """
    if principal <= 0:
        return LoanStep(payment=0.0, additional_principal=0.0, principal=0.0)
    additional = min(max(surplus, 0.0) * sweep_percent / 100, principal)
    remaining = max(principal * (1 + rate) - payment - additional, 0.0)
    return LoanStep(payment=payment, additional_principal=additional, principal=round(remaining, 2))
