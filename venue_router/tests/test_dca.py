from datetime import datetime

import pandas as pd
import pytest

from venue_router.backtest.dca import (
    DCABacktest,
    DCAParameters,
    max_drawdown_pct,
    monthly_returns,
    optimal_amount,
    optimal_frequency,
    performance_metrics,
)


@pytest.fixture
def rising_prices():
    dates = pd.date_range("2024-01-01", periods=10, freq="D")
    return pd.DataFrame({"date": dates, "price": [100.0 + i for i in range(10)]})


def test_daily_dca_buys_each_day(rising_prices):
    params = DCAParameters(0.0, 10.0, "daily", datetime(2024, 1, 1), datetime(2024, 1, 5))
    res = DCABacktest(params, rising_prices).calculate()

    assert len(res.transactions) == 5
    assert res.total_invested == pytest.approx(50.0)
    expected_units = sum(10.0 / p for p in (100.0, 101.0, 102.0, 103.0, 104.0))
    assert res.units == pytest.approx(expected_units)
    assert res.final_value == pytest.approx(expected_units * 104.0)
    assert res.average_cost == pytest.approx(50.0 / expected_units)
    assert res.transactions["cumulative_investment"].iloc[-1] == pytest.approx(50.0)


def test_initial_investment_is_an_extra_first_buy(rising_prices):
    params = DCAParameters(100.0, 10.0, "weekly", datetime(2024, 1, 1), datetime(2024, 1, 10))
    res = DCABacktest(params, rising_prices).calculate()
    assert list(res.transactions["amount"]) == [100.0, 10.0, 10.0]
    assert res.total_invested == pytest.approx(120.0)


def test_non_positive_prices_are_skipped():
    prices = [("2024-01-01", 0.0), ("2024-01-02", 50.0)]
    params = DCAParameters(0.0, 10.0, "daily", datetime(2024, 1, 1), datetime(2024, 1, 2))
    res = DCABacktest(params, prices).calculate()
    assert len(res.transactions) == 1
    assert res.units == pytest.approx(0.2)


def test_lump_sum_wins_in_a_rising_market(rising_prices):
    params = DCAParameters(0.0, 10.0, "daily", datetime(2024, 1, 1), datetime(2024, 1, 5))
    out = DCABacktest(params, rising_prices).compare_with_lump_sum(100.0)
    assert out["lump_sum_return"] == pytest.approx(4.0)
    assert out["winner"] == "Lump Sum"
    assert out["difference"] == pytest.approx(out["dca_return"] - 4.0)

    hold = DCABacktest(params, rising_prices).compare_with_buy_and_hold(100.0)
    assert hold["buy_and_hold_return"] == pytest.approx(4.0)
    assert hold["winner"] == "Buy & Hold"


def test_metrics_need_two_transactions():
    m = performance_metrics(pd.DataFrame())
    assert m["sharpe_ratio"] == 0.0
    assert m["monthly_returns"] == []


def test_monthly_returns_and_drawdown():
    tx = pd.DataFrame({
        "date": pd.to_datetime(["2024-01-01", "2024-01-20", "2024-02-01", "2024-02-20"]),
        "portfolio_value": [100.0, 120.0, 90.0, 130.0],
    })
    mr = monthly_returns(tx)
    assert list(mr["month"]) == ["2024-01", "2024-02"]
    assert mr["return"].iloc[0] == pytest.approx(20.0)
    assert max_drawdown_pct(tx["portfolio_value"]) == pytest.approx(25.0)

    m = performance_metrics(tx)
    assert m["win_rate"] == pytest.approx(100.0)
    assert m["best_month"]["month"] == "2024-02"
    assert m["max_drawdown"] == pytest.approx(25.0)


@pytest.fixture
def falling_prices():
    dates = pd.date_range("2024-01-01", periods=10, freq="D")
    return pd.DataFrame({"date": dates, "price": [109.0 - i for i in range(10)]})


def test_optimal_frequency_rising_market_prefers_daily(rising_prices):
    # per-period amount is fixed, so more purchases compound the gain
    assert optimal_frequency(rising_prices, 1200.0, datetime(2024, 1, 1), datetime(2024, 1, 10)) == "daily"


def test_optimal_frequency_falling_market_prefers_monthly(falling_prices):
    assert optimal_frequency(falling_prices, 1200.0, datetime(2024, 1, 1), datetime(2024, 1, 10)) == "monthly"


def test_optimal_amount_reachable_target_converges_to_floor(rising_prices):
    # daily buys from 100 up to 109 return ~4.39% regardless of amount, so the
    # search keeps halving towards the 10 floor: 10 + 9990 / 2**14 rounds to 11
    amount = optimal_amount(rising_prices, "daily", datetime(2024, 1, 1), datetime(2024, 1, 10), 4.0)
    assert amount == 11


def test_optimal_amount_unreachable_target_returns_default(rising_prices):
    amount = optimal_amount(rising_prices, "daily", datetime(2024, 1, 1), datetime(2024, 1, 10), 5.0)
    assert amount == 100
