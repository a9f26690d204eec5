"""Core month-by-month portfolio recurrence engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
import random

from .contributions import calendar_position, group_contributions_by_month, materialize_contributions, month_contribution
from .loan import amortize_month, monthly_payment, monthly_rate
from .models import CYCLES_PER_YEAR, dividend_multiplier, initial_dividend, next_dividend, next_share_price
from .schema import Assumptions, DripPolicy, TaxPolicy
from .tax import monthly_bracket_withholding, quarterly_bracket_withholding
from .tax_data import QUARTER_END_MONTHS
from .validate import InvalidAssumptions, validate_assumptions

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AmortizationEntry:
    month: int
    share_count: float
    dividend: float
    distribution: float
    ytd_distribution: float
    marginal_taxes_withheld: float
    effective_tax_rate: float | None
    loan_payment: float
    surplus_for_drip: float
    additional_principal: float
    income: float
    supplemental_contribution: float
    actual_drip: float
    share_price: float
    new_shares_from_drip: float
    new_shares_from_contribution: float
    total_shares: float
    portfolio_value: float
    loan_principal: float
    net_portfolio_value: float


@dataclass(slots=True, frozen=True)
class CalculatedSummary:
    initial_share_count: float
    annualized_dividend_yield_percent: float
    monthly_loan_payment: float
    loan_payoff_month: int
    yearly_portfolio_values: list[tuple[int, float]]


@dataclass(slots=True)
class PortfolioResult:
    summary: CalculatedSummary
    amortization: list[AmortizationEntry]


def _is_withholding_month(tax: TaxPolicy, calendar_month: int) -> bool:
    if not tax.withhold_taxes:
        return False
    if tax.strategy == "monthly":
        return True
    return tax.strategy == "quarterly" and calendar_month in QUARTER_END_MONTHS


def _taxes_withheld(tax: TaxPolicy, base_income: float, ytd_distribution: float, taxable_distribution: float) -> float:
    if tax.method == "taxBracket":
        if tax.strategy == "quarterly":
            return quarterly_bracket_withholding(base_income, ytd_distribution, taxable_distribution, tax.filing_type)
        return monthly_bracket_withholding(base_income, ytd_distribution, taxable_distribution, tax.filing_type)
    if tax.method == "fixedAmount":
        return tax.fixed_amount
    if tax.method == "fixedPercent":
        return taxable_distribution * tax.fixed_percent / 100
    return 0.0


def _split_surplus(drip: DripPolicy, available: float) -> tuple[float, float]:
    """Return (reinvested, paid out) for the surplus left after the principal sweep."""
    if drip.strategy == "none":
        return 0.0, available
    if drip.strategy == "percentage":
        reinvested = available * drip.percentage / 100
        return reinvested, available - reinvested
    if drip.strategy == "fixedAmount":
        reinvested = min(drip.fixed_amount, available)
        return reinvested, available - reinvested
    if drip.strategy == "fixedIncome":
        if available >= drip.fixed_income_amount:
            return available - drip.fixed_income_amount, drip.fixed_income_amount
        return 0.0, available
    logger.debug("Unknown DRIP strategy %r; reinvesting the full surplus", drip.strategy)
    return available, 0.0


def _effective_tax_rate(
    tax: TaxPolicy,
    entries: list[AmortizationEntry],
    month: int,
    calendar_month: int,
    taxes: float,
    distribution: float,
) -> float | None:
    if not tax.withhold_taxes:
        return None

    year_start = max(1, month - (calendar_month - 1))
    year_entries = entries[year_start:month]
    year_taxes = taxes + sum(entry.marginal_taxes_withheld for entry in year_entries)
    year_distributions = distribution + sum(entry.distribution for entry in year_entries)
    if taxes <= 0 or year_taxes == 0:
        return 0.0

    if tax.strategy == "quarterly":
        months_in_quarter = min((calendar_month - 1) % 3 + 1, month)
        quarter_distribution = distribution + sum(
            entry.distribution for entry in entries[month - months_in_quarter + 1:month]
        )
        if quarter_distribution <= 0:
            return 0.0
        return round(taxes / quarter_distribution * 100, 2)

    if year_distributions <= 0:
        return 0.0
    return round(year_taxes / year_distributions * 100, 2)


def _summarize(assumptions: Assumptions, entries: list[AmortizationEntry], payment: float) -> CalculatedSummary:
    payoff_month = next(
        (entry.month for entry in entries if entry.loan_principal <= 0),
        assumptions.loan.amortization_months,
    )
    return CalculatedSummary(
        initial_share_count=entries[0].total_shares,
        annualized_dividend_yield_percent=CYCLES_PER_YEAR * assumptions.dividend.period_yield_percent,
        monthly_loan_payment=payment,
        loan_payoff_month=payoff_month,
        yearly_portfolio_values=[
            (entry.month, entry.net_portfolio_value)
            for entry in entries
            if entry.month > 0 and entry.month % 12 == 0
        ],
    )


def calculate_portfolio(
    assumptions: Assumptions,
    *,
    rng: random.Random | None = None,
    base_year: int | None = None,
) -> PortfolioResult:
    """Project the portfolio month by month.

    Entry 0 is the opening position; entries 1..N each derive only from the
    previous entry plus that month's price, dividend and contributions.
    Random price and dividend models draw from ``rng``, which defaults to a
    generator seeded from ``assumptions.seed``.
    """
    validation = validate_assumptions(assumptions)
    if not validation.is_valid:
        raise InvalidAssumptions(validation.errors)
    for warning in validation.warnings:
        logger.debug("Assumption warning: %s", warning)

    if rng is None:
        rng = random.Random(assumptions.seed)
    if base_year is None:
        base_year = date.today().year

    investor = assumptions.investor
    tax = assumptions.tax
    price_model = assumptions.share_price
    dividend_model = assumptions.dividend
    months = assumptions.simulation_months
    start_month = assumptions.start_month

    loan_amount = assumptions.loan.effective_amount
    rate = monthly_rate(assumptions.loan.annual_interest_rate_percent)
    payment = monthly_payment(rate, assumptions.loan.amortization_months, loan_amount)

    grouped = group_contributions_by_month(
        materialize_contributions(assumptions.contributions, months, start_month, base_year=base_year)
    )

    logger.debug("Projecting %d months from calendar month %d (base year %d)", months, start_month, base_year)

    opening_shares = investor.initial_investment / price_model.initial_price + investor.initial_share_count
    opening_value = opening_shares * price_model.initial_price
    entries: list[AmortizationEntry] = [
        AmortizationEntry(
            month=0,
            share_count=opening_shares,
            dividend=0.0,
            distribution=0.0,
            ytd_distribution=0.0,
            marginal_taxes_withheld=0.0,
            effective_tax_rate=0.0 if tax.withhold_taxes else None,
            loan_payment=0.0,
            surplus_for_drip=0.0,
            additional_principal=0.0,
            income=0.0,
            supplemental_contribution=0.0,
            actual_drip=0.0,
            share_price=price_model.initial_price,
            new_shares_from_drip=0.0,
            new_shares_from_contribution=0.0,
            total_shares=opening_shares,
            portfolio_value=opening_value,
            loan_principal=loan_amount,
            net_portfolio_value=opening_value - loan_amount,
        )
    ]

    base_dividend = initial_dividend(dividend_model, price_model.initial_price)
    for month in range(1, months + 1):
        prev = entries[-1]
        _, calendar_month = calendar_position(month, start_month)

        price = next_share_price(prev.share_price, month, price_model, rng)
        base_dividend = next_dividend(base_dividend, price, month, dividend_model, rng)
        dividend = dividend_multiplier(calendar_month) * base_dividend
        distribution = prev.total_shares * dividend

        ytd_distribution = distribution if calendar_month == 1 else prev.ytd_distribution + distribution

        taxes = 0.0
        if _is_withholding_month(tax, calendar_month):
            taxable_distribution = distribution
            if tax.strategy == "quarterly":
                taxable_distribution += sum(entry.distribution for entry in entries[max(1, month - 2):month])
            taxes = _taxes_withheld(tax, investor.base_income, ytd_distribution, taxable_distribution)

        loan_payment = payment if prev.loan_principal > 0 else 0.0
        surplus = distribution - (taxes + loan_payment)
        step = amortize_month(
            prev.loan_principal,
            rate,
            loan_payment,
            surplus,
            investor.surplus_for_drip_to_principal_percent,
        )
        actual_drip, income = _split_surplus(assumptions.drip, surplus - step.additional_principal)

        contribution = month_contribution(grouped, month, start_month, base_year)
        new_drip_shares = actual_drip / price if actual_drip > 0 and price > 0 else 0.0
        new_contribution_shares = contribution / price if contribution > 0 and price > 0 else 0.0
        total_shares = prev.total_shares + new_drip_shares + new_contribution_shares
        portfolio_value = total_shares * price

        if prev.loan_principal > 0 and step.principal <= 0:
            logger.info("Loan paid off in month %d", month)

        entries.append(
            AmortizationEntry(
                month=month,
                share_count=prev.total_shares,
                dividend=dividend,
                distribution=distribution,
                ytd_distribution=ytd_distribution,
                marginal_taxes_withheld=taxes,
                effective_tax_rate=_effective_tax_rate(tax, entries, month, calendar_month, taxes, distribution),
                loan_payment=step.payment,
                surplus_for_drip=surplus,
                additional_principal=step.additional_principal,
                income=income,
                supplemental_contribution=contribution,
                actual_drip=actual_drip,
                share_price=price,
                new_shares_from_drip=new_drip_shares,
                new_shares_from_contribution=new_contribution_shares,
                total_shares=total_shares,
                portfolio_value=portfolio_value,
                loan_principal=step.principal,
                net_portfolio_value=portfolio_value - step.principal,
            )
        )

    summary = _summarize(assumptions, entries, payment)
    logger.debug(
        "Projection finished: %d entries, final net value %.2f",
        len(entries),
        entries[-1].net_portfolio_value,
    )
    return PortfolioResult(summary=summary, amortization=entries)
