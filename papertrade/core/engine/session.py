"""
Simulation session - the explicit context object of the simulator.

The session owns the instrument universe, the portfolios and their limit
order managers, and drives the fixed per-tick order:

1. SentimentEngine.tick (maybe publish a story)
2. PriceModel.advance for every live instrument
3. LimitOrderManager.tick for every portfolio
"""

import random
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from loguru import logger

from papertrade.core.constants import DEFAULT_UNIVERSE, DEFAULT_VOLATILITY
from papertrade.core.enums import EventFrequency, MarketVolatility, TransactionType
from papertrade.core.exceptions.simulation import (
    ConfigurationError,
    InstrumentCorruptError,
    OrderNotFoundError,
    PersistenceError,
    PortfolioNotFoundError,
    SimulationException,
    UnknownSymbolError,
    ValidationError,
)
from papertrade.core.interfaces.collaborators import ILedgerStore, ITextGenerator
from papertrade.core.models.instrument import Instrument
from papertrade.core.models.limit_order import LimitOrder
from papertrade.core.models.news import NewsItem
from papertrade.core.models.portfolio import Portfolio
from papertrade.core.models.portfolio_metrics import Valuation
from papertrade.core.models.results import OrderResult, TradeResult
from papertrade.core.models.simulation_config import SimulationConfig
from papertrade.core.models.transaction_history import TransactionHistory
from papertrade.core.protocols import Clock, NotificationSink, RandomSource
from papertrade.core.utils.validation import validate_symbol, validate_timestamp

from .clock import MonotonicClock
from .limit_order_manager import LimitOrderManager
from .price_model import PriceModel
from .sentiment_engine import NewsConfig, SentimentEngine


@dataclass(frozen=True)
class TickReport:
    """What happened during one tick."""

    timestamp: datetime
    news: NewsItem | None = None
    prices: dict[str, float] = field(default_factory=dict)
    changed_orders: list[LimitOrder] = field(default_factory=list)
    halted_symbols: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "news": self.news.to_dict() if self.news else None,
            "prices": dict(self.prices),
            "changed_orders": [order.to_dict() for order in self.changed_orders],
            "halted_symbols": list(self.halted_symbols),
        }


class SimulationSession:
    """Holds all simulation state and exposes the typed operations on it.

    Ledger and limit-order calls return Results; unknown portfolio ids and
    persistence failures are raised.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        instruments: Iterable[Instrument] | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
        store: ILedgerStore | None = None,
        text_generator: ITextGenerator | None = None,
        notification_sink: NotificationSink | None = None,
    ) -> None:
        self.config = (config or SimulationConfig()).validate()
        self.clock = clock or MonotonicClock()
        self.rng = rng or random.Random(self.config.seed)
        self.store = store
        self.notification_sink = notification_sink

        self.price_model = PriceModel(self.rng, self.config.volatility_factor())
        self.sentiment_engine = SentimentEngine(
            config=self._news_config(),
            rng=self.rng,
            text_generator=text_generator,
        )

        self._instruments: dict[str, Instrument] = {}
        self._portfolios: dict[str, Portfolio] = {}
        self._order_managers: dict[str, LimitOrderManager] = {}
        self._user_portfolios: dict[str, str] = {}
        self._tick_lock = threading.RLock()

        for instrument in instruments or []:
            self.add_instrument(instrument)

    def _news_config(self) -> NewsConfig:
        return NewsConfig(
            interval_seconds=self.config.effective_news_interval(),
            company_probability=self.config.company_news_probability,
            sector_probability=self.config.sector_news_probability,
            positive_probability=self.config.positive_news_probability,
            market_dampener=self.config.market_news_dampener,
            generator_timeout_seconds=self.config.text_generator_timeout_seconds,
            cache_ttl_seconds=self.config.headline_cache_ttl_seconds,
            generator_backoff_seconds=self.config.text_generator_backoff_seconds,
        )

    @classmethod
    def with_default_universe(
        cls, config: SimulationConfig | None = None, **kwargs: Any
    ) -> "SimulationSession":
        """Create a session seeded with the default instrument universe."""
        session = cls(config=config, **kwargs)
        for symbol, name, sector, price in DEFAULT_UNIVERSE:
            session.add_instrument(
                Instrument.create_simulated(
                    symbol,
                    rng=session.rng,
                    company_name=name,
                    sector=sector,
                    market_price=price,
                )
            )
        return session

    # Instruments
    def price_lookup(self, symbol: str) -> float | None:
        """Get the current price of a tradable instrument, None if unknown or halted."""
        instrument = self._instruments.get(str(symbol).strip().upper())
        if instrument is None or instrument.halted:
            return None
        return instrument.market_price

    def instruments(self) -> list[Instrument]:
        """Get all instruments sorted by symbol."""
        return [self._instruments[symbol] for symbol in sorted(self._instruments)]

    def get_instrument(self, symbol: str) -> Instrument:
        """Get one instrument.

        Raises:
            ValidationError: If the symbol is malformed
            UnknownSymbolError: If the symbol is not in the universe
        """
        normalized = validate_symbol(symbol)
        instrument = self._instruments.get(normalized)
        if instrument is None:
            raise UnknownSymbolError(normalized)
        return instrument

    def add_instrument(self, instrument: Instrument) -> Instrument:
        """Add an instrument to the universe.

        Raises:
            ValidationError: If the symbol is already present
        """
        with self._tick_lock:
            if instrument.symbol in self._instruments:
                raise ValidationError(f"Instrument {instrument.symbol} already exists")
            self._instruments[instrument.symbol] = instrument
        logger.info(f"Added instrument {instrument.symbol} ({instrument.company_name})")
        return instrument

    def create_custom_instrument(
        self,
        symbol: str,
        company_name: str | None = None,
        sector: str | None = None,
        market_price: float | None = None,
        volatility: float = DEFAULT_VOLATILITY,
    ) -> Instrument:
        """Build a user-defined instrument with back-filled history and add it."""
        instrument = Instrument.create_simulated(
            symbol,
            rng=self.rng,
            company_name=company_name,
            sector=sector,
            market_price=market_price,
            volatility=volatility,
        )
        instrument.is_custom = True
        return self.add_instrument(instrument)

    def remove_instrument(self, symbol: str) -> Instrument:
        """Remove an instrument no portfolio holds or has active orders for.

        Raises:
            ValidationError: If the instrument is held or has active orders
        """
        instrument = self.get_instrument(symbol)
        with self._tick_lock:
            for portfolio_id, portfolio in self._portfolios.items():
                if portfolio.held_quantity(instrument.symbol) > 0:
                    raise ValidationError(
                        f"Cannot remove {instrument.symbol}: held by portfolio {portfolio_id}"
                    )
                manager = self._order_managers[portfolio_id]
                if any(o.symbol == instrument.symbol for o in manager.active_orders()):
                    raise ValidationError(
                        f"Cannot remove {instrument.symbol}: active limit orders exist"
                    )
            del self._instruments[instrument.symbol]
        logger.info(f"Removed instrument {instrument.symbol}")
        return instrument

    # Settings
    def set_market_volatility(self, level: MarketVolatility) -> None:
        """Switch the global volatility preset."""
        self.config.market_volatility = MarketVolatility(level)
        self.price_model.volatility_factor = self.config.volatility_factor()

    def set_event_frequency(self, level: EventFrequency) -> None:
        """Switch the news frequency preset."""
        self.config.event_frequency = EventFrequency(level)
        self.sentiment_engine.set_interval(self.config.effective_news_interval())

    def recent_news(self) -> list[NewsItem]:
        """Get the recent-news feed, newest first."""
        return self.sentiment_engine.recent_news()

    def _now(self) -> datetime:
        return validate_timestamp(self.clock.now(), "now")

    # Tick
    def tick(self, now: datetime | None = None) -> TickReport:
        """Advance the simulation by one tick.

        A corrupt instrument is halted and skipped; the others keep updating.
        A naive now is taken as UTC.
        """
        with self._tick_lock:
            now = validate_timestamp(now or self.clock.now(), "now")

            news = self.sentiment_engine.tick(now, self._instruments)

            prices: dict[str, float] = {}
            halted: list[str] = []
            for symbol, instrument in self._instruments.items():
                if instrument.halted:
                    continue
                try:
                    prices[symbol] = self.price_model.advance(instrument)
                except InstrumentCorruptError as e:
                    instrument.halted = True
                    halted.append(symbol)
                    logger.error(f"Halting instrument: {e}")

            changed: list[LimitOrder] = []
            for portfolio_id, manager in self._order_managers.items():
                changed.extend(manager.tick(now, self.price_lookup, self._portfolios[portfolio_id]))

        logger.debug(
            f"Tick at {now.isoformat()}: {len(prices)} prices, "
            f"{len(changed)} order changes, {len(halted)} halted"
        )
        return TickReport(
            timestamp=now,
            news=news,
            prices=prices,
            changed_orders=changed,
            halted_symbols=halted,
        )

    # Portfolios
    def open_portfolio(
        self, initial_balance: float | None = None, portfolio_id: str | None = None
    ) -> Portfolio:
        """Create and register a new portfolio."""
        portfolio = Portfolio(
            initial_balance=self.config.initial_balance if initial_balance is None else initial_balance,
            portfolio_id=portfolio_id,
            max_order_quantity=self.config.max_order_quantity,
        )
        self._register(portfolio)
        return portfolio

    def _register(self, portfolio: Portfolio, orders: Iterable[LimitOrder | dict] = ()) -> None:
        manager = LimitOrderManager(
            portfolio.portfolio_id, clock=self.clock, notification_sink=self.notification_sink
        )
        manager.load(orders)
        with self._tick_lock:
            self._portfolios[portfolio.portfolio_id] = portfolio
            self._order_managers[portfolio.portfolio_id] = manager
        logger.info(f"Registered portfolio {portfolio.portfolio_id}")

    def portfolio(self, portfolio_id: str) -> Portfolio:
        """Get a registered portfolio.

        Raises:
            PortfolioNotFoundError: If no such portfolio is registered
        """
        portfolio = self._portfolios.get(portfolio_id)
        if portfolio is None:
            raise PortfolioNotFoundError(portfolio_id)
        return portfolio

    def portfolios(self) -> list[Portfolio]:
        """Get all registered portfolios."""
        return list(self._portfolios.values())

    def order_manager(self, portfolio_id: str) -> LimitOrderManager:
        """Get the limit order manager of a portfolio."""
        self.portfolio(portfolio_id)
        return self._order_managers[portfolio_id]

    def reset_portfolio(self, portfolio_id: str, new_initial_balance: float | None = None) -> Portfolio:
        """Clear a portfolio and its limit orders and restart with a new balance."""
        portfolio = self.portfolio(portfolio_id)
        balance = portfolio.initial_balance if new_initial_balance is None else new_initial_balance
        manager = self._order_managers[portfolio_id]
        with self._tick_lock, manager.lock, portfolio.lock:
            portfolio.reset(balance)
            manager.load([])
        return portfolio

    def _notify_trade(self, result: TradeResult) -> None:
        if self.notification_sink is None or not result.success:
            return
        try:
            self.notification_sink.notify(result.message)
        except Exception as e:
            logger.warning(f"Notification sink failed: {e}")

    def buy(self, portfolio_id: str, symbol: str, quantity: int) -> TradeResult:
        """Buy at the current market price."""
        result = self.portfolio(portfolio_id).buy(
            symbol, quantity, self.price_lookup, timestamp=self._now()
        )
        self._notify_trade(result)
        return result

    def sell(self, portfolio_id: str, symbol: str, quantity: int) -> TradeResult:
        """Sell at the current market price."""
        result = self.portfolio(portfolio_id).sell(
            symbol, quantity, self.price_lookup, timestamp=self._now()
        )
        self._notify_trade(result)
        return result

    def valuate(self, portfolio_id: str) -> Valuation:
        """Value a portfolio at current prices."""
        return self.portfolio(portfolio_id).valuate(self.price_lookup)

    def get_transaction_history(
        self,
        portfolio_id: str,
        symbol: str | None = None,
        type: TransactionType | None = None,
    ) -> TransactionHistory:
        """Get a restartable, filterable view of a portfolio's transactions."""
        return self.portfolio(portfolio_id).transactions(symbol, type)

    # Limit orders
    def submit_limit_order(self, portfolio_id: str, order: Mapping[str, Any]) -> OrderResult:
        """Submit a limit order request for a portfolio."""
        portfolio = self.portfolio(portfolio_id)
        return self._order_managers[portfolio_id].submit(order, portfolio)

    def cancel_limit_order(self, order_id: str) -> OrderResult:
        """Cancel an active limit order in whichever portfolio owns it."""
        for manager in list(self._order_managers.values()):
            if manager.has_order(order_id):
                return manager.cancel(order_id)
        return OrderResult.rejected(OrderNotFoundError(order_id))

    def limit_orders(self, portfolio_id: str, active_only: bool = False) -> list[LimitOrder]:
        """List a portfolio's limit orders."""
        manager = self.order_manager(portfolio_id)
        return manager.active_orders() if active_only else manager.all_orders()

    # Persistence
    def _require_store(self) -> ILedgerStore:
        if self.store is None:
            raise ConfigurationError("No ledger store configured")
        return self.store

    def load_portfolio(self, user_key: str) -> Portfolio:
        """Load a user's ledger from the store, or open a fresh one.

        Raises:
            PersistenceError: If the store fails or the stored ledger is corrupt
        """
        snapshot = self._require_store().load(user_key)
        if snapshot is None:
            logger.info(f"No stored ledger for {user_key}, opening a new portfolio")
            portfolio = self.open_portfolio()
        else:
            try:
                portfolio = Portfolio.from_snapshot(snapshot, self.config.max_order_quantity)
                self._register(portfolio, snapshot.limit_orders)
            except (SimulationException, KeyError, TypeError, ValueError) as e:
                logger.error(f"Stored ledger for {user_key} is corrupt: {e}")
                raise PersistenceError(user_key, "load", f"corrupt ledger: {e}") from e
            logger.info(
                f"Loaded ledger for {user_key}: {len(snapshot.holdings)} holdings, "
                f"{len(snapshot.transactions)} transactions"
            )
        self._user_portfolios[user_key] = portfolio.portfolio_id
        return portfolio

    def save_portfolio(self, user_key: str, portfolio_id: str | None = None) -> None:
        """Persist a user's ledger and limit orders.

        Raises:
            PortfolioNotFoundError: If no portfolio is bound to user_key
            PersistenceError: If the store fails; in-memory state is unchanged
        """
        portfolio_id = portfolio_id or self._user_portfolios.get(user_key)
        if portfolio_id is None:
            raise PortfolioNotFoundError(user_key)
        portfolio = self.portfolio(portfolio_id)

        manager = self._order_managers[portfolio_id]
        with self._tick_lock, manager.lock, portfolio.lock:
            snapshot = portfolio.snapshot()
            snapshot.limit_orders = [o.to_dict() for o in manager.all_orders()]

        try:
            self._require_store().save(user_key, snapshot)
        except PersistenceError as e:
            logger.error(f"Failed to save ledger for {user_key}: {e}")
            raise
        self._user_portfolios[user_key] = portfolio_id
        logger.info(f"Saved ledger for {user_key}")

    def close(self) -> None:
        """Release background resources."""
        self.sentiment_engine.close()
