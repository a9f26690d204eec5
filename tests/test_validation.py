import pytest

from dripcalc.schema import load_assumptions
from dripcalc.validate import InvalidAssumptions, validate_assumptions
from tests.helpers import clone_assumptions, write_assumptions


def _run_validation(tmp_path, sample_assumptions_dict, mutator):
    data = clone_assumptions(sample_assumptions_dict)
    mutator(data)
    path = write_assumptions(tmp_path, data)
    return validate_assumptions(load_assumptions(path))


def _weekly(**overrides):
    item = {"id": "w", "name": "Weekly", "amount": 50, "kind": "dca", "frequency": "weekly", "day_of_week": 2}
    item.update(overrides)
    return item


def test_sample_assumptions_validate():
    result = validate_assumptions(load_assumptions("sample_assumptions.json"))
    assert result.errors == []
    assert result.warnings == []
    assert result.is_valid


@pytest.mark.parametrize(
    ("mutator", "expected_error"),
    [
        (lambda d: d.update({"simulation_months": -1}), "simulation_months: must be >= 0"),
        (lambda d: d.update({"start_month": 0}), "start_month: must be between 1 and 12"),
        (lambda d: d.update({"start_month": 13}), "start_month: must be between 1 and 12"),
        (lambda d: d["share_price"].update({"initial_price": 0}), "share_price.initial_price: must be > 0"),
        (lambda d: d["investor"].update({"initial_investment": -1}), "investor.initial_investment: must be >= 0"),
        (
            lambda d: d["investor"].update({"surplus_for_drip_to_principal_percent": 120}),
            "investor.surplus_for_drip_to_principal_percent: must be <= 100",
        ),
        (
            lambda d: d["tax"].update({"filing_type": "joint"}),
            "tax.filing_type: 'joint' is not valid; expected one of [headOfHousehold, married, single]",
        ),
        (
            lambda d: d["tax"].update({"strategy": "yearly"}),
            "tax.strategy: 'yearly' is not valid; expected one of [monthly, none, quarterly]",
        ),
        (
            lambda d: d["tax"].update({"method": "flat"}),
            "tax.method: 'flat' is not valid; expected one of [fixedAmount, fixedPercent, taxBracket]",
        ),
        (lambda d: d["drip"].update({"percentage": 150}), "drip.percentage: must be <= 100"),
        (lambda d: d["drip"].update({"fixed_amount": -10}), "drip.fixed_amount: must be >= 0"),
        (
            lambda d: d["loan"].update({"amortization_months": 0}),
            "loan.amortization_months: must be > 0 when a loan amount is set",
        ),
        (
            lambda d: d["share_price"].update({"model": "uniform", "uniform_min": 2, "uniform_max": 1}),
            "share_price.uniform_min/share_price.uniform_max: uniform_min must be <= uniform_max",
        ),
        (
            lambda d: d["dividend"].update({"yield_period": "monthly"}),
            "dividend.yield_period: 'monthly' is not valid; expected one of [4w, yearly]",
        ),
        (
            lambda d: d.update({"contributions": [_weekly(), _weekly()]}),
            "contributions[1].id: duplicate contribution id 'w'",
        ),
        (
            lambda d: d.update({"contributions": [_weekly(day_of_week=None)]}),
            "contributions[0].day_of_week: required when frequency is 'weekly'",
        ),
        (
            lambda d: d.update({"contributions": [_weekly(day_of_week=6)]}),
            "contributions[0].day_of_week: must be between 1 (Monday) and 5 (Friday)",
        ),
        (
            lambda d: d.update({"contributions": [_weekly(amount=0)]}),
            "contributions[0].amount: must be > 0",
        ),
        (
            lambda d: d.update({"contributions": [_weekly(start_date="2025-13-01")]}),
            "contributions[0].start_date: '2025-13-01' is not a valid date; expected YYYY-MM-DD",
        ),
        (
            lambda d: d.update({"contributions": [_weekly(start_date="2025-06-01", end_date="2025-01-01")]}),
            "contributions[0].start_date/contributions[0].end_date: start_date must be <= end_date",
        ),
    ],
)
def test_validation_errors(tmp_path, sample_assumptions_dict, mutator, expected_error):
    result = _run_validation(tmp_path, sample_assumptions_dict, mutator)
    assert expected_error in result.errors
    assert not result.is_valid


@pytest.mark.parametrize(
    ("mutator", "expected_warning"),
    [
        (
            lambda d: d["drip"].update({"strategy": "legacy"}),
            "drip.strategy: 'legacy' is not recognised; falling back to 'reinvest all'",
        ),
        (
            lambda d: d["share_price"].update({"model": "variable"}),
            "share_price.model: 'variable' is not recognised; falling back to 'geometric'",
        ),
        (
            lambda d: d["tax"].update({"strategy": "none"}),
            "tax.strategy: 'none' with withhold_taxes enabled never withholds",
        ),
        (lambda d: d.update({"simulation_months": 0}), "simulation_months: 0 produces only the initial month"),
    ],
)
def test_validation_warnings(tmp_path, sample_assumptions_dict, mutator, expected_warning):
    result = _run_validation(tmp_path, sample_assumptions_dict, mutator)
    assert expected_warning in result.warnings
    assert result.is_valid


def test_excluded_loan_skips_loan_checks(tmp_path, sample_assumptions_dict):
    def mutator(data):
        data["loan"] = {"include_loan": False, "amount": 100, "amortization_months": 0}

    assert _run_validation(tmp_path, sample_assumptions_dict, mutator).is_valid


def test_invalid_assumptions_carries_errors():
    exc = InvalidAssumptions(["a: bad", "b: worse"])
    assert exc.errors == ["a: bad", "b: worse"]
    assert str(exc) == "a: bad; b: worse"
    assert isinstance(exc, ValueError)
