"""Command-line front end for the venue router.

  venue-router snapshot --symbols BTC/USDT,ETH/USDT
  venue-router simulate --symbol BTC/USDT --side buy --size 0.5 --reference kraken
  venue-router history --symbol BTC/USDT --limit 20

Input validation lives here; the routing core assumes well-formed requests.
"""
from __future__ import annotations
import argparse
import asyncio
import json
import math
import sys
from typing import List, Optional, Sequence

from loguru import logger

from venue_router.core.config import ConfigError, settings_or_default
from venue_router.routing import RouterService
from venue_router.routing.types import SIDES, InvalidRouteRequest, RouteRequest


def setup_logging(log_level: str):
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
    )


def parse_symbols(param: Optional[str], supported: Sequence[str]) -> List[str]:
    """Keep the supported entries of a comma list; fall back to every symbol."""
    if not param:
        return list(supported)
    requested = [s.strip().upper() for s in param.split(",")]
    requested = [s for s in requested if s in supported]
    return requested or list(supported)


def build_route_request(symbol: Optional[str], side: Optional[str], size, reference: Optional[str], supported: Sequence[str]) -> RouteRequest:
    sym = (symbol or "").upper()
    if sym not in supported:
        raise InvalidRouteRequest("Unsupported symbol")
    if side not in SIDES:
        raise InvalidRouteRequest('Side must be "buy" or "sell"')
    try:
        qty = float(size)
    except (TypeError, ValueError):
        raise InvalidRouteRequest("Size must be a positive number") from None
    if not math.isfinite(qty) or qty <= 0:
        raise InvalidRouteRequest("Size must be a positive number")
    return RouteRequest(symbol=sym, side=side, size=qty, reference_venue=reference or None)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="venue-router", description="Fee-adjusted best-venue comparison and route simulation")
    p.add_argument("--config", default=None, help="YAML settings file (built-in defaults when omitted)")
    p.add_argument("--log-level", default=None)
    sub = p.add_subparsers(dest="command", required=True)

    snap = sub.add_parser("snapshot", help="compare venues for one or more symbols")
    snap.add_argument("--symbols", default=None, help="comma separated, e.g. BTC/USDT,ETH/USDT")

    sim = sub.add_parser("simulate", help="simulate routing a hypothetical order")
    sim.add_argument("--symbol", required=True)
    sim.add_argument("--side", required=True)
    sim.add_argument("--size", required=True)
    sim.add_argument("--reference", default=None, help="venue id or label to measure savings against")

    hist = sub.add_parser("history", help="poll snapshots and print best-venue history")
    hist.add_argument("--symbol", required=True)
    hist.add_argument("--limit", type=int, default=60)
    hist.add_argument("--polls", type=int, default=1)
    hist.add_argument("--interval", type=float, default=5.0, help="seconds between polls")
    return p.parse_args(argv)


async def run_command(args: argparse.Namespace, service: RouterService) -> dict:
    supported = service.supported_symbols
    if args.command == "snapshot":
        symbols = parse_symbols(args.symbols, supported)
        snaps = await service.get_symbol_snapshots(symbols)
        return {"success": True, "symbols": [s.to_dict() for s in snaps]}

    if args.command == "simulate":
        req = build_route_request(args.symbol, args.side, args.size, args.reference, supported)
        result = await service.simulate_route(req)
        return {"success": True, "result": result.to_dict()}

    if args.command == "history":
        symbol = args.symbol.upper()
        if symbol not in supported:
            raise InvalidRouteRequest("Unsupported symbol")
        for i in range(max(1, args.polls)):
            if i:
                await asyncio.sleep(args.interval)
            await service.get_symbol_snapshot(symbol)
        points = service.get_router_history(symbol, args.limit)
        return {"success": True, "symbol": symbol, "history": [h.to_dict() for h in points]}

    raise InvalidRouteRequest(f"unknown command {args.command}")


async def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = settings_or_default(args.config)
    except ConfigError as e:
        logger.error(f"{e}")
        return 2
    setup_logging(args.log_level or settings.logging.level)

    service = RouterService(settings=settings)
    try:
        out = await run_command(args, service)
    except InvalidRouteRequest as e:
        print(json.dumps({"success": False, "error": str(e)}))
        return 2
    finally:
        await service.aclose()
    print(json.dumps(out, indent=2))
    return 0


def run():  # pragma: no cover
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":  # pragma: no cover
    run()
