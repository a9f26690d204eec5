import json
from pathlib import Path

import pytest


@pytest.fixture
def sample_assumptions_dict() -> dict:
    return json.loads(Path("sample_assumptions.json").read_text(encoding="utf-8"))


@pytest.fixture
def flat_assumptions_dict() -> dict:
    """No loan, no withholding, constant $10 price and 1% per-cycle yield."""
    return {
        "investor": {
            "initial_share_count": 0,
            "initial_investment": 100000,
            "base_income": 0,
            "surplus_for_drip_to_principal_percent": 0,
        },
        "tax": {"withhold_taxes": False},
        "drip": {"strategy": "percentage", "percentage": 100},
        "simulation_months": 12,
        "start_month": 1,
        "share_price": {"model": "geometric", "initial_price": 10.0, "monthly_appreciation_percent": 0.0},
        "dividend": {"model": "yieldBased", "yield_period": "4w", "yield_per_4w_percent": 1.0},
        "loan": {"include_loan": False},
        "contributions": [],
    }
