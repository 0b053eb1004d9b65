#!/usr/bin/env python3
"""
Paper Trading Simulation Runner

Runs a number of ticks over the default instrument universe with a simple
scripted trader, then prints the final valuation and holdings.

The trader buys when a price falls below its recent average and sells a
position once it is up more than the take-profit threshold.
"""

import argparse
import random
import sys
from pathlib import Path

from loguru import logger
from tqdm import tqdm

from papertrade.core.engine.clock import ManualClock
from papertrade.core.engine.session import SimulationSession
from papertrade.core.enums import EventFrequency, MarketVolatility
from papertrade.core.exceptions.simulation import SimulationException
from papertrade.core.models.portfolio import Portfolio
from papertrade.core.models.simulation_config import SimulationConfig
from papertrade.infrastructure.news import HttpTextGenerator
from papertrade.infrastructure.persistence import JsonLedgerStore
from papertrade.infrastructure.reporting import summarize_holdings, transactions_to_frame


class ScriptedTrader:
    """Mean-reversion trader used to exercise the ledger."""

    def __init__(
        self,
        session: SimulationSession,
        portfolio: Portfolio,
        rng: random.Random,
        lookback: int = 10,
        take_profit: float = 0.05,
    ):
        self.session = session
        self.portfolio = portfolio
        self.rng = rng
        self.lookback = lookback
        self.take_profit = take_profit

    def act(self) -> None:
        """Consider one randomly chosen instrument."""
        instruments = [i for i in self.session.instruments() if not i.halted]
        if not instruments:
            return
        instrument = self.rng.choice(instruments)
        recent = list(instrument.price_history)[-self.lookback :]
        average = sum(recent) / len(recent)

        holding = self.portfolio.holdings.get(instrument.symbol)
        if holding and instrument.market_price > holding.average_cost_basis * (1 + self.take_profit):
            self.session.sell(self.portfolio.portfolio_id, instrument.symbol, holding.quantity)
        elif instrument.market_price < average:
            self.session.buy(self.portfolio.portfolio_id, instrument.symbol, 1)


def setup_logging(debug: bool = False):
    """Configure logging with loguru."""
    logger.remove()

    level = "DEBUG" if debug else "WARNING"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
    )


def main():
    parser = argparse.ArgumentParser(
        description="Run a paper-trading market simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 500 ticks with a fixed seed
  python scripts/run_simulation.py --ticks 500 --seed 42

  # Volatile market, frequent news, ledger saved to disk
  python scripts/run_simulation.py --volatility high --event-frequency high --store-dir data/ledgers --user alice
        """,
    )

    parser.add_argument("--ticks", type=int, default=300, help="Number of ticks to run (default: 300)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument(
        "--initial-balance", type=float, default=10000.0, help="Starting cash (default: 10000)"
    )
    parser.add_argument(
        "--volatility",
        choices=[v.value for v in MarketVolatility],
        default=MarketVolatility.MEDIUM.value,
        help="Market volatility preset (default: medium)",
    )
    parser.add_argument(
        "--event-frequency",
        choices=[f.value for f in EventFrequency],
        default=EventFrequency.MEDIUM.value,
        help="News frequency preset (default: medium)",
    )
    parser.add_argument(
        "--tick-seconds", type=float, default=1.0, help="Simulated seconds per tick (default: 1)"
    )
    parser.add_argument("--news-endpoint", type=str, default=None, help="Headline generator URL")
    parser.add_argument("--store-dir", type=str, default=None, help="Directory for JSON ledgers")
    parser.add_argument("--user", type=str, default="demo", help="User key for the stored ledger")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.ticks <= 0:
        logger.error("Number of ticks must be positive")
        return 1

    setup_logging(args.debug)

    config = SimulationConfig(
        initial_balance=args.initial_balance,
        tick_interval_seconds=args.tick_seconds,
        market_volatility=MarketVolatility(args.volatility),
        event_frequency=EventFrequency(args.event_frequency),
        seed=args.seed,
    )
    clock = ManualClock()
    store = JsonLedgerStore(Path(args.store_dir)) if args.store_dir else None
    generator = HttpTextGenerator(args.news_endpoint) if args.news_endpoint else None

    try:
        session = SimulationSession.with_default_universe(
            config=config, clock=clock, store=store, text_generator=generator
        )
        portfolio = session.load_portfolio(args.user) if store else session.open_portfolio()
        trader = ScriptedTrader(session, portfolio, random.Random(args.seed))

        headlines = 0
        for _ in tqdm(range(args.ticks), desc="Simulating", unit="tick"):
            clock.advance(args.tick_seconds)
            report = session.tick()
            if report.news is not None:
                headlines += 1
            trader.act()

        summary = summarize_holdings(portfolio, session.price_lookup)
        trades = transactions_to_frame(portfolio.transaction_history)

        print(f"\nTicks: {args.ticks}  News stories: {headlines}  Trades: {len(trades)}")
        print(f"Cash:         ${summary['cash_balance']:,.2f}")
        print(f"Total assets: ${summary['total_assets_value']:,.2f}")
        print(f"Earnings:     ${summary['earnings']:,.2f}")
        print(f"Realized P&L: ${summary['realized_pnl']:,.2f}")
        if summary["positions"]:
            print("\nHoldings:")
            print(summary["holdings"].to_string(index=False))

        if store:
            session.save_portfolio(args.user)
            logger.success(f"Ledger saved for {args.user}")
        session.close()
        return 0

    except SimulationException as e:
        logger.exception(f"Simulation failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
