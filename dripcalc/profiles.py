"""Built-in investor profiles used as starting assumptions."""

from __future__ import annotations

import copy
from typing import Any, Final

from .schema import Assumptions

CURRENT_SHARE_PRICE: Final[float] = 24.33
DEFAULT_DIVIDEND_YIELD: Final[float] = 5.0
DEFAULT_MONTHLY_APPRECIATION: Final[float] = -1.0


def _profile(
    *,
    description: str,
    initial_share_count: float,
    initial_investment: float,
    simulation_months: int,
    drip: dict[str, Any],
) -> dict[str, Any]:
    return {
        "description": description,
        "assumptions": {
            "investor": {
                "initial_share_count": initial_share_count,
                "initial_investment": initial_investment,
                "base_income": 0,
                "surplus_for_drip_to_principal_percent": 0,
            },
            "tax": {
                "withhold_taxes": True,
                "strategy": "monthly",
                "method": "taxBracket",
                "filing_type": "single",
            },
            "drip": drip,
            "simulation_months": simulation_months,
            "start_month": 1,
            "share_price": {
                "model": "geometric",
                "initial_price": CURRENT_SHARE_PRICE,
                "monthly_appreciation_percent": DEFAULT_MONTHLY_APPRECIATION,
            },
            "dividend": {
                "model": "yieldBased",
                "yield_period": "4w",
                "yield_per_4w_percent": DEFAULT_DIVIDEND_YIELD,
            },
            "loan": {"include_loan": False},
            "contributions": [],
        },
    }


PROFILES: Final[dict[str, dict[str, Any]]] = {
    "early_career": _profile(
        description="Get started with periodic investments",
        initial_share_count=0,
        initial_investment=0,
        simulation_months=60,
        drip={"strategy": "percentage", "percentage": 100},
    ),
    "mid_career": _profile(
        description="Maximize returns with a solid base",
        initial_share_count=100,
        initial_investment=2500,
        simulation_months=120,
        drip={"strategy": "percentage", "percentage": 100},
    ),
    "retirement": _profile(
        description="Convert investments to income",
        initial_share_count=1000,
        initial_investment=25000,
        simulation_months=240,
        drip={"strategy": "fixedIncome", "percentage": 0, "fixed_income_amount": 500},
    ),
}


def profile_names() -> list[str]:
    return sorted(PROFILES)


def build_profile(name: str) -> Assumptions:
    if name not in PROFILES:
        expected = ", ".join(profile_names())
        raise ValueError(f"unknown profile '{name}'; expected one of [{expected}]")
    return Assumptions.from_dict(copy.deepcopy(PROFILES[name]["assumptions"]))
