"""Progressive federal tax and dividend withholding helpers."""

from __future__ import annotations

from .tax_data import FEDERAL_BRACKETS, STANDARD_DEDUCTIONS


def _brackets_for(filing_type: str) -> list[tuple[float, float]]:
    try:
        return FEDERAL_BRACKETS[filing_type]
    except KeyError:
        raise ValueError(f"unknown filing type: {filing_type!r}") from None


def _progressive_tax(amount: float, brackets: list[tuple[float, float]]) -> float:
    if amount <= 0:
        return 0.0

    remaining = amount
    tax = 0.0
    for idx, (threshold, rate) in enumerate(brackets):
        if remaining <= 0:
            break
        if idx + 1 < len(brackets):
            span = brackets[idx + 1][0] - threshold
            income_in_bracket = min(remaining, span)
        else:
            income_in_bracket = remaining
        if income_in_bracket > 0:
            tax += income_in_bracket * rate
        remaining -= income_in_bracket
    return tax


def calculate_tax(taxable_income: float, filing_type: str) -> float:
    return _progressive_tax(taxable_income, _brackets_for(filing_type))


def standard_deduction(filing_type: str) -> float:
    _brackets_for(filing_type)
    return STANDARD_DEDUCTIONS[filing_type]


def marginal_tax(income_with: float, income_without: float, filing_type: str) -> float:
    """Tax attributable to the slice between two taxable incomes.

    Both incomes are walked through the full bracket table so the slice lands
    in whatever brackets the lower income leaves open.
    """
    return calculate_tax(income_with, filing_type) - calculate_tax(income_without, filing_type)


def monthly_bracket_withholding(base_income: float, ytd_distribution: float, taxable_distribution: float, filing_type: str) -> float:
    deduction = standard_deduction(filing_type)
    total_income = base_income + ytd_distribution
    if total_income <= deduction:
        return 0.0
    prior_income = base_income + (ytd_distribution - taxable_distribution)
    return marginal_tax(
        max(0.0, total_income - deduction),
        max(0.0, prior_income - deduction),
        filing_type,
    )


def quarterly_bracket_withholding(base_income: float, ytd_distribution: float, quarter_distribution: float, filing_type: str) -> float:
    """Withholding for a quarter's distributions on a year-to-date basis.

    Nothing is withheld while the year's distributions alone are still under
    the standard deduction. When income before the quarter sits below the
    deduction only the part of the year above it is taxed.
    """
    deduction = standard_deduction(filing_type)
    total_income = base_income + ytd_distribution
    if total_income <= deduction or ytd_distribution < deduction:
        return 0.0
    prior_income = base_income + (ytd_distribution - quarter_distribution)
    if prior_income <= deduction:
        return calculate_tax(total_income - deduction, filing_type)
    return marginal_tax(total_income - deduction, prior_income - deduction, filing_type)
