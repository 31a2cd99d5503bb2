"""MintSignal — application entry point.

Boots the FastAPI status server and provides the CLI entry point for
buy, sell, and full-cycle signal evaluation of a single mint.
"""

import logging

from fastapi import FastAPI

from mintsignal.api.routers import router

app = FastAPI(title="MintSignal Internal API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("mintsignal")


@app.get("/health")
async def health():
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli() -> None:
    """Parse CLI arguments and dispatch to the appropriate mode."""
    import argparse
    import asyncio

    from mintsignal.config import load_config
    from mintsignal.signals.models import Holding

    parser = argparse.ArgumentParser(description="MintSignal buy/sell signal waiter")
    parser.add_argument("--mint", required=True, help="Token mint to evaluate")
    parser.add_argument(
        "--mode",
        choices=["buy", "sell", "cycle"],
        default="cycle",
        help="Which waiter(s) to run (default: cycle)",
    )
    parser.add_argument("--amount", help="Raw token amount held (sell / cycle)")
    parser.add_argument("--cost", help="Raw quote amount spent (sell / cycle)")
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the status API while waiting",
    )
    args = parser.parse_args()

    holding = None
    if args.mode in ("sell", "cycle"):
        if args.amount is None or args.cost is None:
            parser.error("--amount and --cost are required for sell and cycle modes")
        try:
            holding = Holding(amount=args.amount, cost=args.cost)
        except (ValueError, TypeError) as exc:
            parser.error(f"invalid --amount/--cost: {exc}")

    config = load_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    asyncio.run(_run_signals(config, args, holding))


async def _run_signals(config, args, holding=None) -> None:
    """Run the requested waiters with live collaborators."""
    import asyncio

    from mintsignal.api.routers import configure_routers
    from mintsignal.cache.price_history import PriceHistoryCache
    from mintsignal.cache.sampler import PriceSampler
    from mintsignal.engine import TradeSignals
    from mintsignal.notify.telegram import TelegramNotifier
    from mintsignal.quotes.quote_client import JupiterQuoteClient

    quotes = JupiterQuoteClient(config)
    cache = PriceHistoryCache()
    sampler = PriceSampler(cache, quotes, config.price_sample_interval)
    signals = TradeSignals(
        config=config,
        quotes=quotes,
        notifier=TelegramNotifier(config),
        history=cache,
    )
    configure_routers(price_history=cache)

    server = None
    server_task = None
    if args.serve:
        import uvicorn

        server = uvicorn.Server(
            uvicorn.Config(app, host="0.0.0.0", port=config.api_port, log_level="info")
        )
        server_task = asyncio.create_task(server.serve())
        logger.info("Status API available at http://localhost:%d", config.api_port)

    sampler_task = asyncio.create_task(sampler.run())
    try:
        if args.mode in ("buy", "cycle"):
            bought = await signals.wait_for_buy_signal(args.mint)
            logger.info("Buy signal for %s: %s", args.mint, "BUY" if bought else "SKIP")
            if not bought or args.mode == "buy":
                return

        sold = await signals.wait_for_sell_signal(holding, args.mint)
        logger.info("Sell signal for %s: %s", args.mint, "SELL" if sold else "HOLD")
    finally:
        sampler.stop()
        await sampler_task
        if server is not None:
            server.should_exit = True
            await server_task


if __name__ == "__main__":
    _run_cli()
