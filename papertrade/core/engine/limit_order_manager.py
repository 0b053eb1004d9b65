"""
Limit order manager.

Holds one portfolio's standing limit orders, checks them against current
prices on every tick and executes the triggered ones through the ledger.
"""

import threading
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from papertrade.core.constants import LIMIT_ORDER_MAX_QUANTITY
from papertrade.core.enums import TransactionType
from papertrade.core.exceptions.simulation import (
    InsufficientSharesError,
    OrderNotFoundError,
    OrderStateError,
    SimulationException,
    ValidationError,
)
from papertrade.core.interfaces.portfolio import IPortfolio
from papertrade.core.models.limit_order import LimitOrder
from papertrade.core.models.results import OrderResult
from papertrade.core.protocols import Clock, NotificationSink, PriceLookup
from papertrade.core.utils.decorators import log_ledger_operation
from papertrade.core.utils.validation import (
    validate_price,
    validate_quantity,
    validate_symbol,
    validate_timestamp,
)

_REQUIRED_FIELDS = ("type", "symbol", "quantity", "target_price")


def parse_order_request(order_request: Mapping[str, Any], portfolio_id: str) -> LimitOrder:
    """Validate a loosely typed order request and build an ACTIVE order.

    Raises:
        ValidationError: Naming the first invalid field
    """
    missing = [name for name in _REQUIRED_FIELDS if order_request.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"Limit order is missing required fields: {', '.join(missing)}")

    try:
        order_type = TransactionType.from_string(str(order_request["type"]))
    except ValueError as e:
        raise ValidationError(f"Invalid order type: {order_request['type']!r}") from e

    expiration = order_request.get("expiration")
    return LimitOrder(
        portfolio_id=portfolio_id,
        type=order_type,
        symbol=validate_symbol(order_request["symbol"]),
        quantity=validate_quantity(
            order_request["quantity"], max_quantity=LIMIT_ORDER_MAX_QUANTITY
        ),
        target_price=validate_price(order_request["target_price"], "target_price"),
        expiration=validate_timestamp(expiration, "expiration") if expiration else None,
    )


class LimitOrderManager:
    """Per-portfolio store and matcher of limit orders.

    The manager is the only mutator of its orders. Every order ends in exactly
    one terminal state, and a failure executing one order never stops the
    others from being processed.

    Lock order: the manager lock is always taken before the portfolio lock.
    """

    def __init__(
        self,
        portfolio_id: str,
        clock: Clock | None = None,
        notification_sink: NotificationSink | None = None,
    ) -> None:
        self.portfolio_id = portfolio_id
        self.clock = clock
        self.notification_sink = notification_sink
        self._orders: dict[str, LimitOrder] = {}
        self._lock = threading.RLock()

    @property
    def lock(self):
        """Get the lock guarding the order book."""
        return self._lock

    def _now(self) -> datetime:
        return self.clock.now() if self.clock is not None else datetime.now(UTC)

    def _notify(self, message: str) -> None:
        if self.notification_sink is None:
            return
        try:
            self.notification_sink.notify(message)
        except Exception as e:
            logger.warning(f"Notification sink failed: {e}")

    @log_ledger_operation
    def submit(self, order_request: Mapping[str, Any], portfolio: IPortfolio) -> OrderResult:
        """Validate and register a new limit order.

        Sell orders require the shares to be held now; buy-side funds are only
        checked when the order executes.
        """
        try:
            order = parse_order_request(order_request, portfolio.portfolio_id)
            if order.type.is_sell:
                held = portfolio.held_quantity(order.symbol)
                if held < order.quantity:
                    raise InsufficientSharesError(order.symbol, order.quantity, held)
        except SimulationException as e:
            return OrderResult.rejected(e)

        order.created_at = self._now()
        with self._lock:
            self._orders[order.id] = order

        message = (
            f"Limit {order.type.value.lower()} order placed: {order.quantity} {order.symbol} "
            f"at ${order.target_price:,.2f}"
        )
        return OrderResult.ok(order, message)

    @log_ledger_operation
    def cancel(self, order_id: str) -> OrderResult:
        """Cancel an active order."""
        with self._lock:
            order = self._orders.get(order_id)
            try:
                if order is None:
                    raise OrderNotFoundError(order_id)
                order.cancel(self._now())
            except (OrderNotFoundError, OrderStateError) as e:
                return OrderResult.rejected(e, order)

        return OrderResult.ok(order, f"Limit order {order_id} cancelled")

    def tick(
        self, now: datetime, price_lookup: PriceLookup, portfolio: IPortfolio
    ) -> list[LimitOrder]:
        """Expire, execute or keep each active order.

        Orders whose symbol has no current price are left active.

        Returns:
            Orders whose status changed during this tick
        """
        changed: list[LimitOrder] = []
        with self._lock:
            active = [order for order in self._orders.values() if order.is_active]

            for order in active:
                try:
                    if self._process(order, now, price_lookup, portfolio):
                        changed.append(order)
                except Exception as e:
                    logger.exception(f"Unexpected error processing limit order {order.id}")
                    if order.is_active:
                        order.fail(now, f"Unexpected error: {e}")
                        changed.append(order)

        return changed

    def _process(
        self, order: LimitOrder, now: datetime, price_lookup: PriceLookup, portfolio: IPortfolio
    ) -> bool:
        """Handle one active order. Returns True when its status changed."""
        if order.is_expired(now):
            order.expire(now)
            logger.info(f"Limit order {order.id} expired")
            return True

        current_price = price_lookup(order.symbol)
        if current_price is None or not order.is_triggered(current_price):
            return False

        # Execute at the price that triggered the order
        def trigger_price(_: str) -> float:
            return current_price

        if order.type.is_buy:
            result = portfolio.buy(order.symbol, order.quantity, trigger_price, timestamp=now)
        else:
            result = portfolio.sell(order.symbol, order.quantity, trigger_price, timestamp=now)

        if result.success and result.transaction is not None:
            transaction = result.transaction
            order.complete(now, transaction.price_per_unit, transaction.total_value)
            message = (
                f"Limit {order.type.value.capitalize()} Order executed: {order.quantity} shares "
                f"of {order.symbol} at ${transaction.price_per_unit:,.2f}"
            )
            logger.info(message)
            self._notify(message)
        else:
            order.fail(now, result.message)
            logger.warning(f"Limit order {order.id} failed: {result.message}")
            self._notify(f"Limit order for {order.symbol} failed: {result.message}")
        return True

    def get(self, order_id: str) -> LimitOrder:
        """Get an order by id.

        Raises:
            OrderNotFoundError: If no such order exists
        """
        with self._lock:
            order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def has_order(self, order_id: str) -> bool:
        """Check if this manager owns order_id."""
        with self._lock:
            return order_id in self._orders

    def active_orders(self) -> list[LimitOrder]:
        """Get orders still waiting to trigger, oldest first."""
        with self._lock:
            return [order for order in self._orders.values() if order.is_active]

    def all_orders(self) -> list[LimitOrder]:
        """Get every order in submission order."""
        with self._lock:
            return list(self._orders.values())

    def load(self, orders: Iterable[LimitOrder | dict]) -> None:
        """Replace the order book with persisted orders."""
        loaded = [o if isinstance(o, LimitOrder) else LimitOrder.from_dict(o) for o in orders]
        with self._lock:
            self._orders = {order.id: order for order in loaded}
        logger.debug(f"Loaded {len(loaded)} limit orders for {self.portfolio_id}")
