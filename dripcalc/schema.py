"""Assumption schema dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import json
from pathlib import Path
from typing import Any


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into schema objects."""


CONTRIBUTION_FREQUENCIES: dict[str, set[str]] = {
    "dca": {"daily", "weekly", "monthly", "quarterly", "yearly"},
    "salary": {"weekly", "biweekly", "semimonthly", "monthly"},
    "oneTime": {"none"},
}


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{path}: expected array")
    return value


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise SchemaError(f"{path}.{key}: missing required field")
    return data[key]


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"{path}: expected number")
    return float(value)


@dataclass(slots=True)
class InvestorProfile:
    initial_investment: float
    initial_share_count: float = 0.0
    base_income: float = 0.0
    surplus_for_drip_to_principal_percent: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "investor") -> "InvestorProfile":
        return cls(
            initial_investment=_number(_require(data, "initial_investment", path), f"{path}.initial_investment"),
            initial_share_count=_number(_optional(data, "initial_share_count", 0), f"{path}.initial_share_count"),
            base_income=_number(_optional(data, "base_income", 0), f"{path}.base_income"),
            surplus_for_drip_to_principal_percent=_number(
                _optional(data, "surplus_for_drip_to_principal_percent", 0),
                f"{path}.surplus_for_drip_to_principal_percent",
            ),
        )


@dataclass(slots=True)
class TaxPolicy:
    withhold_taxes: bool
    strategy: str = "monthly"
    method: str = "taxBracket"
    filing_type: str = "single"
    fixed_amount: float = 0.0
    fixed_percent: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "tax") -> "TaxPolicy":
        return cls(
            withhold_taxes=bool(_require(data, "withhold_taxes", path)),
            strategy=_optional(data, "strategy", "monthly"),
            method=_optional(data, "method", "taxBracket"),
            filing_type=_optional(data, "filing_type", "single"),
            fixed_amount=float(_optional(data, "fixed_amount", 0.0)),
            fixed_percent=float(_optional(data, "fixed_percent", 0.0)),
        )


@dataclass(slots=True)
class DripPolicy:
    strategy: str = "percentage"
    percentage: float = 100.0
    fixed_amount: float = 0.0
    fixed_income_amount: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "drip") -> "DripPolicy":
        return cls(
            strategy=_optional(data, "strategy", "percentage"),
            percentage=float(_optional(data, "percentage", 100.0)),
            fixed_amount=float(_optional(data, "fixed_amount", 0.0)),
            fixed_income_amount=float(_optional(data, "fixed_income_amount", 0.0)),
        )


@dataclass(slots=True)
class SharePriceModel:
    initial_price: float
    model: str = "geometric"
    monthly_appreciation_percent: float = 0.0
    linear_change_amount: float = 0.0
    uniform_min: float = -1.0
    uniform_max: float = 1.0
    normal_mean: float = 0.5
    normal_std_dev: float = 1.0
    gbm_drift: float = 0.5
    gbm_volatility: float = 2.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "share_price") -> "SharePriceModel":
        return cls(
            initial_price=_number(_require(data, "initial_price", path), f"{path}.initial_price"),
            model=_optional(data, "model", "geometric"),
            monthly_appreciation_percent=float(_optional(data, "monthly_appreciation_percent", 0.0)),
            linear_change_amount=float(_optional(data, "linear_change_amount", 0.0)),
            uniform_min=float(_optional(data, "uniform_min", -1.0)),
            uniform_max=float(_optional(data, "uniform_max", 1.0)),
            normal_mean=float(_optional(data, "normal_mean", 0.5)),
            normal_std_dev=float(_optional(data, "normal_std_dev", 1.0)),
            gbm_drift=float(_optional(data, "gbm_drift", 0.5)),
            gbm_volatility=float(_optional(data, "gbm_volatility", 2.0)),
        )


@dataclass(slots=True)
class DividendModel:
    model: str = "yieldBased"
    yield_period: str = "4w"
    yield_per_4w_percent: float = 0.0
    yearly_yield_percent: float = 0.0
    linear_change_amount: float = 0.0
    uniform_min: float = 4.0
    uniform_max: float = 6.0
    normal_mean: float = 5.0
    normal_std_dev: float = 0.5
    gbm_drift: float = 2.0
    gbm_volatility: float = 10.0
    initial_method: str = "yieldBased"
    initial_amount: float = 0.0
    initial_yield_percent: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "dividend") -> "DividendModel":
        return cls(
            model=_optional(data, "model", "yieldBased"),
            yield_period=_optional(data, "yield_period", "4w"),
            yield_per_4w_percent=float(_optional(data, "yield_per_4w_percent", 0.0)),
            yearly_yield_percent=float(_optional(data, "yearly_yield_percent", 0.0)),
            linear_change_amount=float(_optional(data, "linear_change_amount", 0.0)),
            uniform_min=float(_optional(data, "uniform_min", 4.0)),
            uniform_max=float(_optional(data, "uniform_max", 6.0)),
            normal_mean=float(_optional(data, "normal_mean", 5.0)),
            normal_std_dev=float(_optional(data, "normal_std_dev", 0.5)),
            gbm_drift=float(_optional(data, "gbm_drift", 2.0)),
            gbm_volatility=float(_optional(data, "gbm_volatility", 10.0)),
            initial_method=_optional(data, "initial_method", "yieldBased"),
            initial_amount=float(_optional(data, "initial_amount", 0.0)),
            initial_yield_percent=float(_optional(data, "initial_yield_percent", 0.0)),
        )

    @property
    def period_yield_percent(self) -> float:
        """Yield per 4-week distribution cycle, whichever period it was entered in."""
        if self.yield_period == "yearly":
            return self.yearly_yield_percent / 13
        return self.yield_per_4w_percent


@dataclass(slots=True)
class LoanTerms:
    include_loan: bool = False
    amount: float = 0.0
    annual_interest_rate_percent: float = 0.0
    amortization_months: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "loan") -> "LoanTerms":
        return cls(
            include_loan=bool(_optional(data, "include_loan", False)),
            amount=float(_optional(data, "amount", 0.0)),
            annual_interest_rate_percent=float(_optional(data, "annual_interest_rate_percent", 0.0)),
            amortization_months=int(_optional(data, "amortization_months", 0)),
        )

    @property
    def effective_amount(self) -> float:
        return self.amount if self.include_loan else 0.0


@dataclass(slots=True)
class SupplementalContribution:
    id: str
    name: str
    amount: float
    kind: str
    frequency: str
    enabled: bool = True
    recurring: bool = True
    start_date: str | None = None
    end_date: str | None = None
    use_custom_date_range: bool = False
    day_of_week: int | None = None

    def __post_init__(self) -> None:
        allowed = CONTRIBUTION_FREQUENCIES.get(self.kind)
        if allowed is None:
            expected = ", ".join(sorted(CONTRIBUTION_FREQUENCIES))
            raise SchemaError(f"contribution {self.id!r}: kind '{self.kind}' is not valid; expected one of [{expected}]")
        if self.frequency not in allowed:
            expected = ", ".join(sorted(allowed))
            raise SchemaError(
                f"contribution {self.id!r}: frequency '{self.frequency}' is not allowed for {self.kind}; expected one of [{expected}]"
            )
        if self.kind == "oneTime":
            self.recurring = False

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "SupplementalContribution":
        kind = _require(data, "kind", path)
        default_frequency = "none" if kind == "oneTime" else None
        frequency = _optional(data, "frequency", default_frequency)
        if frequency is None:
            raise SchemaError(f"{path}.frequency: missing required field")
        day_of_week = _optional(data, "day_of_week")
        try:
            return cls(
                id=str(_require(data, "id", path)),
                name=_require(data, "name", path),
                amount=_number(_require(data, "amount", path), f"{path}.amount"),
                kind=kind,
                frequency=frequency,
                enabled=bool(_optional(data, "enabled", True)),
                recurring=bool(_optional(data, "recurring", kind != "oneTime")),
                start_date=_optional(data, "start_date"),
                end_date=_optional(data, "end_date"),
                use_custom_date_range=bool(_optional(data, "use_custom_date_range", False)),
                day_of_week=None if day_of_week is None else int(day_of_week),
            )
        except SchemaError as exc:
            raise SchemaError(f"{path}: {exc}") from None


@dataclass(slots=True, frozen=True)
class MaterializedContribution:
    amount: float
    date: date
    source_id: str
    source_name: str


@dataclass(slots=True)
class Assumptions:
    investor: InvestorProfile
    tax: TaxPolicy
    share_price: SharePriceModel
    simulation_months: int
    start_month: int = 1
    drip: DripPolicy = field(default_factory=DripPolicy)
    dividend: DividendModel = field(default_factory=DividendModel)
    loan: LoanTerms = field(default_factory=LoanTerms)
    contributions: list[SupplementalContribution] = field(default_factory=list)
    seed: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Assumptions":
        seed = _optional(data, "seed")
        return cls(
            investor=InvestorProfile.from_dict(_expect_dict(_require(data, "investor", "assumptions"), "investor")),
            tax=TaxPolicy.from_dict(_expect_dict(_require(data, "tax", "assumptions"), "tax")),
            share_price=SharePriceModel.from_dict(
                _expect_dict(_require(data, "share_price", "assumptions"), "share_price")
            ),
            simulation_months=int(_require(data, "simulation_months", "assumptions")),
            start_month=int(_optional(data, "start_month", 1)),
            drip=DripPolicy.from_dict(_expect_dict(_optional(data, "drip", {}), "drip")),
            dividend=DividendModel.from_dict(_expect_dict(_optional(data, "dividend", {}), "dividend")),
            loan=LoanTerms.from_dict(_expect_dict(_optional(data, "loan", {}), "loan")),
            contributions=[
                SupplementalContribution.from_dict(_expect_dict(item, f"contributions[{idx}]"), f"contributions[{idx}]")
                for idx, item in enumerate(_expect_list(_optional(data, "contributions", []), "contributions"))
            ],
            seed=None if seed is None else int(seed),
        )


def load_assumptions(path: str | Path) -> Assumptions:
    """Load assumptions JSON into strongly-typed dataclasses."""
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError("assumptions: root must be a JSON object")
    return Assumptions.from_dict(raw)
