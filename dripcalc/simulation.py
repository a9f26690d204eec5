"""Scenario orchestration for deterministic and randomised projections."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
import math
import random

from .engine import PortfolioResult, calculate_portfolio
from .schema import Assumptions

logger = logging.getLogger(__name__)

RANDOM_MODELS = {"uniform", "normal", "gbm"}
DEFAULT_RUNS = 500


@dataclass(slots=True)
class NetValuePercentiles:
    month: int
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float


@dataclass(slots=True)
class ScenarioResult:
    mode: str
    seed: int | None
    scenario_count: int
    baseline: PortfolioResult
    yearly_percentiles: list[NetValuePercentiles]
    final_net_values: list[float]
    loan_paid_off_rate: float | None = None


def is_stochastic(assumptions: Assumptions) -> bool:
    return assumptions.share_price.model in RANDOM_MODELS or assumptions.dividend.model in RANDOM_MODELS


def _percentile(values: list[float], pct: float) -> float:
    ordered = sorted(values)
    if not ordered:
        return 0.0
    if len(ordered) == 1:
        return ordered[0]
    position = (len(ordered) - 1) * pct
    low = int(math.floor(position))
    high = int(math.ceil(position))
    if low == high:
        return ordered[low]
    weight = position - low
    return (ordered[low] * (1.0 - weight)) + (ordered[high] * weight)


def _aggregate(results: list[PortfolioResult]) -> list[NetValuePercentiles]:
    months = [month for month, _ in results[0].summary.yearly_portfolio_values]
    percentiles: list[NetValuePercentiles] = []
    for idx, month in enumerate(months):
        values = [result.summary.yearly_portfolio_values[idx][1] for result in results]
        percentiles.append(
            NetValuePercentiles(
                month=month,
                p10=_percentile(values, 0.10),
                p25=_percentile(values, 0.25),
                p50=_percentile(values, 0.50),
                p75=_percentile(values, 0.75),
                p90=_percentile(values, 0.90),
            )
        )
    return percentiles


def _paid_off_rate(assumptions: Assumptions, results: list[PortfolioResult]) -> float | None:
    if assumptions.loan.effective_amount <= 0:
        return None
    paid_off = sum(1 for result in results if result.amortization[-1].loan_principal <= 0)
    return paid_off / len(results)


def run_scenarios(
    assumptions: Assumptions,
    runs: int | None = None,
    seed: int | None = None,
    *,
    base_year: int | None = None,
) -> ScenarioResult:
    """Run one projection, or many when a price or dividend model is random.

    Each randomised run gets its own generator seeded from a master seed so a
    whole batch can be replayed from ``seed``.
    """
    if base_year is None:
        base_year = date.today().year

    if not is_stochastic(assumptions):
        baseline = calculate_portfolio(assumptions, base_year=base_year)
        return ScenarioResult(
            mode="deterministic",
            seed=None,
            scenario_count=1,
            baseline=baseline,
            yearly_percentiles=_aggregate([baseline]),
            final_net_values=[baseline.amortization[-1].net_portfolio_value],
            loan_paid_off_rate=_paid_off_rate(assumptions, [baseline]),
        )

    if seed is None:
        seed = assumptions.seed if assumptions.seed is not None else random.randint(1, 2**31 - 1)
    run_count = max(1, runs if runs is not None else DEFAULT_RUNS)
    master = random.Random(seed)

    results: list[PortfolioResult] = []
    for _ in range(run_count):
        run_rng = random.Random(master.randint(1, 2**31 - 1))
        results.append(calculate_portfolio(assumptions, rng=run_rng, base_year=base_year))
    logger.info("Completed %d randomised runs with seed %d", run_count, seed)

    return ScenarioResult(
        mode="randomised",
        seed=seed,
        scenario_count=run_count,
        baseline=results[0],
        yearly_percentiles=_aggregate(results),
        final_net_values=[result.amortization[-1].net_portfolio_value for result in results],
        loan_paid_off_rate=_paid_off_rate(assumptions, results),
    )
