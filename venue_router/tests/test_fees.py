import pytest

from venue_router.venues.fees import effective_price, effective_spread, fee_adjusted_quote, to_bps
from conftest import make_venue


def test_effective_price_uses_requested_rate():
    v = make_venue("x", taker=0.002, maker=0.001)
    assert effective_price(100.0, v) == pytest.approx(100.2)
    assert effective_price(100.0, v, is_maker=True) == pytest.approx(100.1)


@pytest.mark.parametrize("price", [0.00001234, 1.0, 27123.45, 1e9])
def test_effective_price_round_trip(price):
    v = make_venue("x", taker=0.0026)
    assert effective_price(price, v) / (1 + v.taker_fee) == pytest.approx(price, rel=1e-12)


def test_fee_adjusted_quote_uses_taker_rate():
    v = make_venue("x", taker=0.01, maker=0.0)
    q = fee_adjusted_quote(99.0, 101.0, v)
    assert q.mid_price == pytest.approx(100.0)
    assert q.effective_bid == pytest.approx(99.99)
    assert q.effective_ask == pytest.approx(102.01)
    assert q.effective_mid_price == pytest.approx(101.0)
    assert q.spread == pytest.approx(2.0)
    assert q.effective_spread == pytest.approx(2.02)


def test_crossed_book_spread_is_not_clamped():
    v = make_venue("x", taker=0.0)
    assert effective_spread(101.0, 100.0, v) == pytest.approx(-1.0)


def test_to_bps():
    assert to_bps(0.05, 100.0) == pytest.approx(5.0)
    assert to_bps(1.0, 0.0) is None
