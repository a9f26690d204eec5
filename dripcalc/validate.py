"""Semantic validation for projection assumptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from .contributions import DateParseError, parse_contribution_date
from .models import DIVIDEND_MODELS, INITIAL_DIVIDEND_METHODS, PRICE_MODELS, YIELD_PERIODS
from .schema import Assumptions, SupplementalContribution
from .tax_data import FILING_TYPES

WITHHOLDING_STRATEGIES = {"none", "monthly", "quarterly"}
WITHHOLDING_METHODS = {"taxBracket", "fixedAmount", "fixedPercent"}
DRIP_STRATEGIES = {"none", "percentage", "fixedAmount", "fixedIncome"}
WEEKDAY_FREQUENCIES = {"weekly", "biweekly"}


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class InvalidAssumptions(ValueError):
    """Raised when a projection is requested for assumptions that fail validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid assumptions")


def _check_enum(result: ValidationResult, path: str, value: str, allowed: Iterable[str]) -> None:
    allowed_set = set(allowed)
    if value not in allowed_set:
        expected = ", ".join(sorted(allowed_set))
        result.errors.append(f"{path}: '{value}' is not valid; expected one of [{expected}]")


def _warn_enum(result: ValidationResult, path: str, value: str, allowed: Iterable[str], fallback: str) -> None:
    if value not in set(allowed):
        result.warnings.append(f"{path}: '{value}' is not recognised; falling back to '{fallback}'")


def _check_non_negative(result: ValidationResult, path: str, value: float) -> None:
    if value < 0:
        result.errors.append(f"{path}: must be >= 0")


def _check_percent(result: ValidationResult, path: str, value: float) -> None:
    if value < 0:
        result.errors.append(f"{path}: must be >= 0")
    elif value > 100:
        result.errors.append(f"{path}: must be <= 100")


def _check_contribution(result: ValidationResult, base: str, item: SupplementalContribution) -> None:
    if item.amount <= 0:
        result.errors.append(f"{base}.amount: must be > 0")
    if item.frequency in WEEKDAY_FREQUENCIES:
        if item.day_of_week is None:
            result.errors.append(f"{base}.day_of_week: required when frequency is '{item.frequency}'")
        elif not 1 <= item.day_of_week <= 5:
            result.errors.append(f"{base}.day_of_week: must be between 1 (Monday) and 5 (Friday)")

    dates: dict[str, date | None] = {}
    for key in ("start_date", "end_date"):
        try:
            dates[key] = parse_contribution_date(getattr(item, key), strict=True)
        except DateParseError as exc:
            result.errors.append(f"{base}.{key}: {exc}")
            dates[key] = None
    if dates["start_date"] and dates["end_date"] and dates["start_date"] > dates["end_date"]:
        result.errors.append(f"{base}.start_date/{base}.end_date: start_date must be <= end_date")
    if item.use_custom_date_range and item.start_date is None and item.end_date is None:
        result.warnings.append(f"{base}.use_custom_date_range: set without dates; the simulation window is used")


def validate_assumptions(assumptions: Assumptions) -> ValidationResult:
    result = ValidationResult()
    investor = assumptions.investor

    _check_non_negative(result, "investor.initial_investment", investor.initial_investment)
    _check_non_negative(result, "investor.initial_share_count", investor.initial_share_count)
    _check_non_negative(result, "investor.base_income", investor.base_income)
    _check_percent(
        result,
        "investor.surplus_for_drip_to_principal_percent",
        investor.surplus_for_drip_to_principal_percent,
    )

    if assumptions.simulation_months < 0:
        result.errors.append("simulation_months: must be >= 0")
    elif assumptions.simulation_months == 0:
        result.warnings.append("simulation_months: 0 produces only the initial month")
    if not 1 <= assumptions.start_month <= 12:
        result.errors.append("start_month: must be between 1 and 12")

    tax = assumptions.tax
    _check_enum(result, "tax.strategy", tax.strategy, WITHHOLDING_STRATEGIES)
    _check_enum(result, "tax.method", tax.method, WITHHOLDING_METHODS)
    _check_enum(result, "tax.filing_type", tax.filing_type, FILING_TYPES)
    _check_non_negative(result, "tax.fixed_amount", tax.fixed_amount)
    _check_percent(result, "tax.fixed_percent", tax.fixed_percent)
    if tax.withhold_taxes and tax.strategy == "none":
        result.warnings.append("tax.strategy: 'none' with withhold_taxes enabled never withholds")

    drip = assumptions.drip
    _warn_enum(result, "drip.strategy", drip.strategy, DRIP_STRATEGIES, "reinvest all")
    _check_percent(result, "drip.percentage", drip.percentage)
    _check_non_negative(result, "drip.fixed_amount", drip.fixed_amount)
    _check_non_negative(result, "drip.fixed_income_amount", drip.fixed_income_amount)

    price = assumptions.share_price
    if price.initial_price <= 0:
        result.errors.append("share_price.initial_price: must be > 0")
    _warn_enum(result, "share_price.model", price.model, PRICE_MODELS, "geometric")
    if price.uniform_min > price.uniform_max:
        result.errors.append("share_price.uniform_min/share_price.uniform_max: uniform_min must be <= uniform_max")
    _check_non_negative(result, "share_price.normal_std_dev", price.normal_std_dev)
    _check_non_negative(result, "share_price.gbm_volatility", price.gbm_volatility)

    dividend = assumptions.dividend
    _warn_enum(result, "dividend.model", dividend.model, DIVIDEND_MODELS, "yieldBased")
    _check_enum(result, "dividend.yield_period", dividend.yield_period, YIELD_PERIODS)
    _check_enum(result, "dividend.initial_method", dividend.initial_method, INITIAL_DIVIDEND_METHODS)
    _check_non_negative(result, "dividend.yield_per_4w_percent", dividend.yield_per_4w_percent)
    _check_non_negative(result, "dividend.yearly_yield_percent", dividend.yearly_yield_percent)
    _check_non_negative(result, "dividend.initial_amount", dividend.initial_amount)
    if dividend.uniform_min > dividend.uniform_max:
        result.errors.append("dividend.uniform_min/dividend.uniform_max: uniform_min must be <= uniform_max")
    _check_non_negative(result, "dividend.normal_std_dev", dividend.normal_std_dev)
    _check_non_negative(result, "dividend.gbm_volatility", dividend.gbm_volatility)
    if dividend.model in {"linear", "gbm"} and dividend.initial_method == "flatAmount" and dividend.initial_amount == 0:
        result.warnings.append(f"dividend.initial_amount: 0 keeps a '{dividend.model}' dividend path at zero")

    loan = assumptions.loan
    if loan.include_loan:
        _check_non_negative(result, "loan.amount", loan.amount)
        _check_non_negative(result, "loan.annual_interest_rate_percent", loan.annual_interest_rate_percent)
        if loan.amount > 0 and loan.amortization_months <= 0:
            result.errors.append("loan.amortization_months: must be > 0 when a loan amount is set")

    seen_ids: set[str] = set()
    for idx, item in enumerate(assumptions.contributions):
        base = f"contributions[{idx}]"
        if item.id in seen_ids:
            result.errors.append(f"{base}.id: duplicate contribution id '{item.id}'")
        seen_ids.add(item.id)
        _check_contribution(result, base, item)

    return result
