import pytest

from venue_router.exchanges.errors import ExchangeFetchError
from venue_router.routing.router import compute_savings
from venue_router.routing.types import RouteRequest, UnsupportedSymbolError
from venue_router.venues.registry import VenueRegistry
from conftest import make_venue

BOOKS = {
    "alpha": (99.90, 100.10),
    "beta": (99.95, 100.05),
    "gamma": (99.80, 100.20),
}


@pytest.mark.asyncio
async def test_buy_picks_lowest_effective_ask_and_reports_savings(make_service):
    svc, _ = make_service(BOOKS)
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "buy", 10, reference_venue="alpha"))

    assert res.best_route.venue_id == "beta"
    assert res.best_route.effective_price == pytest.approx(100.05)
    assert res.reference_route.venue_id == "alpha"
    assert res.savings_usd == pytest.approx(0.50)
    assert res.savings_bps == pytest.approx(0.05 / 100.10 * 10_000)
    assert res.savings_bps == pytest.approx(5.0, abs=0.01)
    assert len(res.quotes) == 3


@pytest.mark.asyncio
async def test_sell_picks_highest_effective_bid(make_service):
    svc, _ = make_service(BOOKS)
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "sell", 2, reference_venue="gamma"))

    assert res.best_route.venue_id == "beta"
    assert res.best_route.effective_price == pytest.approx(99.95)
    assert res.savings_usd == pytest.approx((99.95 - 99.80) * 2)
    assert res.savings_bps == pytest.approx(0.15 / 99.80 * 10_000)


@pytest.mark.asyncio
async def test_fees_change_the_winner(make_service):
    registry = VenueRegistry([
        make_venue("alpha", taker=0.0),
        make_venue("beta", taker=0.01),
        make_venue("gamma", taker=0.0),
    ])
    svc, _ = make_service(BOOKS, registry=registry)
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "buy", 1))
    # beta's raw ask is lowest but its 1% fee makes it the dearest
    assert res.best_route.venue_id == "alpha"
    assert res.best_route.raw_ask == pytest.approx(100.10)


@pytest.mark.asyncio
async def test_reference_equal_to_best_has_no_savings(make_service):
    svc, _ = make_service(BOOKS)
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "buy", 10, reference_venue="beta"))
    assert res.best_route.venue_id == "beta"
    assert res.reference_route.venue_id == "beta"
    assert res.savings_usd is None
    assert res.savings_bps is None


@pytest.mark.asyncio
async def test_reference_resolves_by_label_case_insensitive(make_service):
    svc, _ = make_service(BOOKS)
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "buy", 1, reference_venue="alpha exchange"))
    assert res.reference_route.venue_id == "alpha"
    assert res.reference_route.venue_label == "Alpha Exchange"
    assert res.savings_usd == pytest.approx(0.05)


@pytest.mark.asyncio
async def test_unresolvable_or_missing_reference(make_service):
    svc, _ = make_service(BOOKS)
    for ref in (None, "", "nope"):
        res = await svc.simulate_route(RouteRequest("BTC/USDT", "buy", 1, reference_venue=ref))
        assert res.best_route is not None
        assert res.reference_route is None
        assert res.savings_usd is None and res.savings_bps is None


@pytest.mark.asyncio
async def test_reference_venue_without_quote(make_service):
    books = dict(BOOKS, alpha=ExchangeFetchError("alpha", "down"))
    svc, _ = make_service(books)
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "buy", 1, reference_venue="alpha"))
    assert res.best_route.venue_id == "beta"
    assert res.reference_route is None
    assert res.savings_usd is None


@pytest.mark.asyncio
async def test_no_liquidity_is_a_null_result(make_service):
    err = ExchangeFetchError("x", "down")
    svc, _ = make_service({"alpha": err, "beta": err, "gamma": err})
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "sell", 1, reference_venue="alpha"))
    assert res.best_route is None
    assert res.reference_route is None
    assert res.savings_usd is None and res.savings_bps is None
    assert res.quotes == []
    assert res.to_dict()["best_route"] is None


@pytest.mark.asyncio
async def test_unsupported_symbol_raises(make_service):
    svc, _ = make_service(BOOKS)
    with pytest.raises(UnsupportedSymbolError):
        await svc.simulate_route(RouteRequest("XRP/USDT", "buy", 1))


@pytest.mark.asyncio
async def test_result_timestamp_uses_service_clock(make_service, clock):
    svc, _ = make_service(BOOKS)
    res = await svc.simulate_route(RouteRequest("BTC/USDT", "buy", 1))
    assert res.ts == clock.now


def test_compute_savings_directions():
    usd, bps = compute_savings("buy", 99.0, 100.0, 3)
    assert usd == pytest.approx(3.0)
    assert bps == pytest.approx(100.0)
    usd, bps = compute_savings("sell", 99.0, 100.0, 1)
    assert usd == pytest.approx(-1.0)
    assert bps == pytest.approx(-100.0)
    assert compute_savings("buy", 1.0, 0.0, 1)[1] is None
