import math
import random

import pytest

from dripcalc.models import (
    dividend_multiplier,
    gbm_step,
    initial_dividend,
    next_dividend,
    next_share_price,
)
from dripcalc.schema import DividendModel, SharePriceModel


def test_geometric_price_compounds_percent():
    model = SharePriceModel(initial_price=100, model="geometric", monthly_appreciation_percent=-1.0)
    assert next_share_price(100, 1, model, random.Random(1)) == pytest.approx(99.0)


def test_linear_price_never_goes_negative():
    model = SharePriceModel(initial_price=3, model="linear", linear_change_amount=-5)
    assert next_share_price(3, 1, model, random.Random(1)) == 0


def test_uniform_price_stays_within_percent_bounds():
    model = SharePriceModel(initial_price=100, model="uniform", uniform_min=-2, uniform_max=3)
    rng = random.Random(5)
    for month in range(1, 200):
        assert 98 <= next_share_price(100, month, model, rng) <= 103


def test_normal_price_with_zero_spread_is_the_mean():
    model = SharePriceModel(initial_price=100, model="normal", normal_mean=0.5, normal_std_dev=0)
    assert next_share_price(100, 1, model, random.Random(3)) == pytest.approx(100.5)


def test_gbm_without_volatility_grows_at_monthly_drift():
    assert gbm_step(100, 12, 0, random.Random(2)) == pytest.approx(100 * math.exp(0.01))


def test_gbm_paths_repeat_for_same_seed():
    model = SharePriceModel(initial_price=50, model="gbm", gbm_drift=5, gbm_volatility=30)
    first, second = random.Random(42), random.Random(42)
    path_a = [next_share_price(50, m, model, first) for m in range(1, 25)]
    path_b = [next_share_price(50, m, model, second) for m in range(1, 25)]
    assert path_a == path_b


def test_unknown_price_model_falls_back_to_geometric():
    model = SharePriceModel(initial_price=100, model="variable", monthly_appreciation_percent=2)
    assert next_share_price(100, 1, model, random.Random(1)) == pytest.approx(102)


@pytest.mark.parametrize(
    ("model", "expected"),
    [
        (DividendModel(model="yieldBased", yield_period="4w", yield_per_4w_percent=5), 1.0),
        (DividendModel(model="yieldBased", yield_period="yearly", yearly_yield_percent=65), 1.0),
        (DividendModel(model="uniform", uniform_min=5, uniform_max=5), 1.0),
        (DividendModel(model="normal", normal_mean=5, normal_std_dev=0), 1.0),
        (DividendModel(model="normal", yield_period="yearly", normal_mean=65, normal_std_dev=0), 1.0),
    ],
)
def test_yield_driven_dividends_scale_with_price(model, expected):
    assert next_dividend(0.5, 20, 1, model, random.Random(9)) == pytest.approx(expected)


def test_linear_dividend_steps_from_previous_value():
    model = DividendModel(model="linear", linear_change_amount=0.1)
    assert next_dividend(1.0, 20, 1, model, random.Random(1)) == pytest.approx(1.1)
    model = DividendModel(model="linear", linear_change_amount=-2)
    assert next_dividend(1.0, 20, 1, model, random.Random(1)) == 0


def test_random_dividend_yield_is_floored_at_zero():
    model = DividendModel(model="uniform", uniform_min=-5, uniform_max=-1)
    assert next_dividend(1.0, 20, 1, model, random.Random(4)) == 0


def test_gbm_dividend_evolves_from_previous_dividend():
    model = DividendModel(model="gbm", gbm_drift=12, gbm_volatility=0)
    assert next_dividend(2.0, 50, 1, model, random.Random(1)) == pytest.approx(2.0 * math.exp(0.01))


def test_initial_dividend_methods():
    flat = DividendModel(model="gbm", initial_method="flatAmount", initial_amount=2.0)
    assert initial_dividend(flat, 50) == 2.0
    by_yield = DividendModel(initial_method="yieldBased", initial_yield_percent=13)
    assert initial_dividend(by_yield, 10) == pytest.approx(0.1)
    from_period = DividendModel(initial_method="yieldBased", yield_per_4w_percent=5)
    assert initial_dividend(from_period, 10) == pytest.approx(0.5)


def test_december_pays_double():
    assert dividend_multiplier(12) == 2
    assert [dividend_multiplier(month) for month in range(1, 12)] == [1] * 11
