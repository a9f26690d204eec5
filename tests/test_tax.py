import pytest

from dripcalc.tax import (
    calculate_tax,
    marginal_tax,
    monthly_bracket_withholding,
    quarterly_bracket_withholding,
    standard_deduction,
)
from dripcalc.tax_data import FEDERAL_BRACKETS, STANDARD_DEDUCTIONS


@pytest.mark.parametrize("filing_type", sorted(FEDERAL_BRACKETS))
def test_calculate_tax_zero_or_negative_income(filing_type):
    assert calculate_tax(0, filing_type) == 0
    assert calculate_tax(-5_000, filing_type) == 0


@pytest.mark.parametrize(
    ("income", "filing_type", "expected"),
    [
        (11_925, "single", 1_192.50),
        (50_000, "single", 5_914.00),
        (23_850, "married", 2_385.00),
        (20_000, "headOfHousehold", 2_060.00),
    ],
)
def test_calculate_tax_walks_brackets(income, filing_type, expected):
    assert round(calculate_tax(income, filing_type), 2) == expected


@pytest.mark.parametrize("filing_type", sorted(FEDERAL_BRACKETS))
def test_calculate_tax_is_monotone(filing_type):
    incomes = [0, 1_000, 15_000, 60_000, 150_000, 300_000, 700_000, 1_000_000]
    taxes = [calculate_tax(income, filing_type) for income in incomes]
    assert taxes == sorted(taxes)


def test_top_bracket_is_open_ended():
    base = calculate_tax(1_000_000, "single")
    assert round(calculate_tax(1_100_000, "single") - base, 2) == 37_000.00


def test_unknown_filing_type_fails_fast():
    with pytest.raises(ValueError, match="unknown filing type"):
        calculate_tax(50_000, "joint")


def test_standard_deductions():
    assert standard_deduction("single") == 15_000
    assert standard_deduction("married") == 30_000
    assert standard_deduction("headOfHousehold") == 22_500
    assert set(STANDARD_DEDUCTIONS) == set(FEDERAL_BRACKETS)


def test_marginal_tax_is_difference_of_full_walks():
    assert round(marginal_tax(60_000, 40_000, "single"), 2) == round(
        calculate_tax(60_000, "single") - calculate_tax(40_000, "single"), 2
    )


def test_monthly_withholding_within_one_bracket():
    assert round(monthly_bracket_withholding(50_000, 495, 495, "married"), 2) == 49.50


def test_monthly_withholding_crossing_a_bracket():
    # 850 at 10% and 650 at 12%
    assert round(monthly_bracket_withholding(53_000, 1_500, 1_500, "married"), 2) == 163.00


def test_monthly_withholding_below_standard_deduction():
    assert monthly_bracket_withholding(10_000, 4_000, 4_000, "single") == 0


def test_monthly_withholding_only_taxes_income_above_deduction():
    assert round(monthly_bracket_withholding(14_000, 2_000, 2_000, "single"), 2) == 100.00


def test_quarterly_withholding_waits_for_distributions_to_exceed_deduction():
    assert quarterly_bracket_withholding(50_000, 10_000, 10_000, "single") == 0


def test_quarterly_withholding_taxes_amount_above_deduction_when_prior_income_is_below():
    assert round(quarterly_bracket_withholding(0, 20_000, 8_000, "single"), 2) == 500.00


def test_quarterly_withholding_marginal_difference():
    assert round(quarterly_bracket_withholding(50_000, 30_000, 10_000, "single"), 2) == 2_200.00
