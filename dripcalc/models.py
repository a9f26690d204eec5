"""Share price and dividend-per-share generators."""

from __future__ import annotations

import logging
import math
import random

from .schema import DividendModel, SharePriceModel

logger = logging.getLogger(__name__)

PRICE_MODELS = {"geometric", "linear", "uniform", "normal", "gbm"}
DIVIDEND_MODELS = {"yieldBased", "linear", "uniform", "normal", "gbm"}
YIELD_PERIODS = {"4w", "yearly"}
INITIAL_DIVIDEND_METHODS = {"flatAmount", "yieldBased"}

# Thirteen 4-week distribution cycles per year.
CYCLES_PER_YEAR = 13
MONTHLY_DT = 1.0 / 12.0


def dividend_multiplier(calendar_month: int) -> int:
    # December pays an extra cycle.
    return 2 if calendar_month == 12 else 1


def gbm_step(value: float, drift_percent: float, volatility_percent: float, rng: random.Random) -> float:
    """Advance ``value`` one month along a geometric Brownian motion path.

    Drift and volatility are annual percentages.
    """
    mu = drift_percent / 100
    sigma = volatility_percent / 100
    shock = rng.gauss(0.0, 1.0)
    return value * math.exp((mu - (sigma * sigma) / 2) * MONTHLY_DT + sigma * math.sqrt(MONTHLY_DT) * shock)


def next_share_price(prev_price: float, month: int, model: SharePriceModel, rng: random.Random) -> float:
    kind = model.model
    if kind == "linear":
        return max(0.0, prev_price + model.linear_change_amount)
    if kind == "uniform":
        return prev_price * (1 + rng.uniform(model.uniform_min, model.uniform_max) / 100)
    if kind == "normal":
        return prev_price * (1 + rng.gauss(model.normal_mean, model.normal_std_dev) / 100)
    if kind == "gbm":
        return gbm_step(prev_price, model.gbm_drift, model.gbm_volatility, rng)
    if kind != "geometric":
        logger.debug("month %d: unknown share price model %r, using geometric", month, kind)
    return prev_price * (1 + model.monthly_appreciation_percent / 100)


def _period_scale(model: DividendModel) -> float:
    return CYCLES_PER_YEAR if model.yield_period == "yearly" else 1.0


def initial_dividend(model: DividendModel, initial_price: float) -> float:
    """Starting dividend per share for the path; never drawn at random."""
    if model.initial_method == "flatAmount":
        return model.initial_amount
    if model.initial_yield_percent:
        return initial_price * model.initial_yield_percent / 100 / CYCLES_PER_YEAR
    return initial_price * model.period_yield_percent / 100


def next_dividend(prev_dividend: float, price: float, month: int, model: DividendModel, rng: random.Random) -> float:
    """Base dividend per share for ``month`` before the December multiplier."""
    kind = model.model
    if kind == "linear":
        return max(0.0, prev_dividend + model.linear_change_amount)
    if kind == "uniform":
        scale = _period_scale(model)
        drawn = rng.uniform(model.uniform_min / scale, model.uniform_max / scale)
        return price * max(0.0, drawn) / 100
    if kind == "normal":
        scale = _period_scale(model)
        drawn = rng.gauss(model.normal_mean / scale, model.normal_std_dev / scale)
        return price * max(0.0, drawn) / 100
    if kind == "gbm":
        return gbm_step(prev_dividend, model.gbm_drift, model.gbm_volatility, rng)
    if kind != "yieldBased":
        logger.debug("month %d: unknown dividend model %r, using yieldBased", month, kind)
    return price * model.period_yield_percent / 100
