from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Literal, Tuple, Union

import numpy as np
import pandas as pd

Frequency = Literal["daily", "weekly", "monthly"]
FREQUENCIES: Tuple[str, ...] = ("daily", "weekly", "monthly")

PriceInput = Union[pd.DataFrame, Iterable[Tuple[Any, float]]]


@dataclass
class DCAParameters:
    initial_investment: float
    recurring_amount: float
    frequency: Frequency
    start_date: datetime
    end_date: datetime
    asset: str = "BTC"


@dataclass
class DCAResult:
    total_invested: float
    final_value: float
    total_return: float
    total_return_pct: float
    average_cost: float
    units: float
    transactions: pd.DataFrame
    performance: Dict[str, Any] = field(default_factory=dict)


def _normalize_prices(prices: PriceInput) -> pd.DataFrame:
    if isinstance(prices, pd.DataFrame):
        df = prices[["date", "price"]].copy()
    else:
        df = pd.DataFrame(list(prices), columns=["date", "price"])
    df["date"] = pd.to_datetime(df["date"])
    df["price"] = df["price"].astype(float)
    return df.sort_values("date").reset_index(drop=True)


class DCABacktest:
    """Dollar-cost averaging over a daily (or sparser) price series.

    Purchases happen at the price nearest to each scheduled date; a scheduled
    date whose nearest price is not positive is skipped.
    """

    def __init__(self, params: DCAParameters, prices: PriceInput):
        self.params = params
        self.prices = _normalize_prices(prices)

    def price_at(self, date) -> float:
        if self.prices.empty:
            return 0.0
        target = pd.Timestamp(date)
        idx = (self.prices["date"] - target).abs().idxmin()
        return float(self.prices.at[idx, "price"])

    def _next_date(self, current: pd.Timestamp) -> pd.Timestamp:
        if self.params.frequency == "daily":
            return current + pd.Timedelta(days=1)
        if self.params.frequency == "weekly":
            return current + pd.Timedelta(days=7)
        if self.params.frequency == "monthly":
            return current + pd.DateOffset(months=1)
        raise ValueError(f"unknown frequency '{self.params.frequency}'")

    def calculate(self) -> DCAResult:
        p = self.params
        rows: List[Dict[str, Any]] = []
        units = 0.0
        invested = 0.0
        current = pd.Timestamp(p.start_date)
        end = pd.Timestamp(p.end_date)

        def _buy(date: pd.Timestamp, price: float, amount: float):
            nonlocal units, invested
            bought = amount / price
            units += bought
            invested += amount
            rows.append({
                "date": date,
                "price": price,
                "amount": amount,
                "units": bought,
                "cumulative_units": units,
                "cumulative_investment": invested,
                "portfolio_value": units * price,
            })

        if p.initial_investment > 0:
            price = self.price_at(current)
            if price > 0:
                _buy(current, price, p.initial_investment)

        while current <= end:
            price = self.price_at(current)
            if price > 0 and p.recurring_amount > 0:
                _buy(current, price, p.recurring_amount)
            current = self._next_date(current)

        tx = pd.DataFrame(rows, columns=[
            "date", "price", "amount", "units", "cumulative_units", "cumulative_investment", "portfolio_value",
        ])
        final_value = units * self.price_at(end)
        total_return = final_value - invested
        return DCAResult(
            total_invested=invested,
            final_value=final_value,
            total_return=total_return,
            total_return_pct=(total_return / invested * 100.0) if invested > 0 else 0.0,
            average_cost=(invested / units) if units > 0 else 0.0,
            units=units,
            transactions=tx,
            performance=performance_metrics(tx),
        )

    def compare_with_lump_sum(self, amount: float) -> Dict[str, Any]:
        dca = self.calculate()
        start_price = self.price_at(self.params.start_date)
        lump_units = amount / start_price if start_price > 0 else 0.0
        lump_return = lump_units * self.price_at(self.params.end_date) - amount
        return _versus(dca.total_return, lump_return, "lump_sum_return", "Lump Sum")

    def compare_with_buy_and_hold(self, amount: float) -> Dict[str, Any]:
        dca = self.calculate()
        start_price = self.price_at(self.params.start_date)
        hold_units = amount / start_price if start_price > 0 else 0.0
        hold_return = hold_units * self.price_at(self.params.end_date) - amount
        return _versus(dca.total_return, hold_return, "buy_and_hold_return", "Buy & Hold")


def _versus(dca_return: float, other_return: float, other_key: str, other_label: str) -> Dict[str, Any]:
    difference = dca_return - other_return
    if difference > 0:
        winner = "DCA"
    elif difference < 0:
        winner = other_label
    else:
        winner = "Tie"
    return {"dca_return": dca_return, other_key: other_return, "difference": difference, "winner": winner}


def monthly_returns(transactions: pd.DataFrame) -> pd.DataFrame:
    """Per calendar month: first vs last portfolio value, in percent."""
    if transactions is None or transactions.empty:
        return pd.DataFrame(columns=["month", "return"])
    months = transactions["date"].dt.strftime("%Y-%m")
    grouped = transactions.groupby(months, sort=True)["portfolio_value"].agg(["first", "last"])
    out = pd.DataFrame({
        "month": grouped.index,
        "return": (grouped["last"] - grouped["first"]) / grouped["first"] * 100.0,
    })
    return out.reset_index(drop=True)


def max_drawdown_pct(values: pd.Series) -> float:
    if values is None or values.empty:
        return 0.0
    peak = values.cummax()
    dd = (peak - values) / peak
    return float(dd.max() * 100.0)


def performance_metrics(transactions: pd.DataFrame) -> Dict[str, Any]:
    if transactions is None or len(transactions) < 2:
        return {
            "sharpe_ratio": 0.0,
            "max_drawdown": 0.0,
            "volatility": 0.0,
            "win_rate": 0.0,
            "best_month": {"month": "", "return": 0.0},
            "worst_month": {"month": "", "return": 0.0},
            "monthly_returns": [],
        }

    mr = monthly_returns(transactions)
    rets = mr["return"].to_numpy(dtype=float)
    avg = float(np.mean(rets))
    # population std, risk-free rate of zero
    vol = float(np.std(rets))
    best = mr.loc[mr["return"].idxmax()]
    worst = mr.loc[mr["return"].idxmin()]
    return {
        "sharpe_ratio": avg / vol if vol > 0 else 0.0,
        "max_drawdown": max_drawdown_pct(transactions["portfolio_value"]),
        "volatility": vol,
        "win_rate": float((rets > 0).sum()) / len(rets) * 100.0,
        "best_month": {"month": best["month"], "return": float(best["return"])},
        "worst_month": {"month": worst["month"], "return": float(worst["return"])},
        "monthly_returns": mr.to_dict("records"),
    }


def optimal_frequency(prices: PriceInput, total_amount: float, start_date, end_date) -> str:
    """Frequency with the highest absolute return for a fixed per-period amount."""
    frame = _normalize_prices(prices)
    best_freq = "monthly"
    best_return = -np.inf
    for freq in FREQUENCIES:
        params = DCAParameters(0.0, total_amount / 12, freq, start_date, end_date)
        result = DCABacktest(params, frame).calculate()
        if result.total_return > best_return:
            best_return = result.total_return
            best_freq = freq
    return best_freq


def optimal_amount(prices: PriceInput, frequency: Frequency, start_date, end_date, target_return_pct: float) -> int:
    """Binary search (10..10 000) for the smallest amount reaching the target return."""
    frame = _normalize_prices(prices)
    low, high = 10.0, 10_000.0
    best = 100.0
    while high - low > 1:
        mid = (low + high) / 2
        result = DCABacktest(DCAParameters(0.0, mid, frequency, start_date, end_date), frame).calculate()
        ret_pct = result.total_return / result.total_invested * 100.0 if result.total_invested > 0 else 0.0
        if ret_pct >= target_return_pct:
            best = mid
            high = mid
        else:
            low = mid
    return int(round(best))
