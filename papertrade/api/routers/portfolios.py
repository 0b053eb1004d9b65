"""
Portfolio API endpoints.

Ledger rejections are answered with HTTP 400 and the typed result body.
"""

from typing import Any

from fastapi import APIRouter, Depends, Response, status

from papertrade.api.dependencies import get_session
from papertrade.api.schemas.api_models import (
    LimitOrderRequest,
    OrderResponse,
    PortfolioCreateRequest,
    PortfolioResponse,
    ResetRequest,
    TradeRequest,
    TradeResponse,
)
from papertrade.core.engine.session import SimulationSession
from papertrade.core.enums import TransactionType
from papertrade.core.models.results import OrderResult, TradeResult

router = APIRouter()


def _trade_response(result: TradeResult, response: Response) -> TradeResponse:
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return TradeResponse(
        success=result.success,
        message=result.message,
        error=result.error,
        transaction=result.transaction.to_dict() if result.transaction else None,
    )


def _order_response(result: OrderResult, response: Response) -> OrderResponse:
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return OrderResponse(
        success=result.success,
        message=result.message,
        error=result.error,
        order=result.order.to_dict() if result.order else None,
    )


def _portfolio_response(session: SimulationSession, portfolio_id: str) -> PortfolioResponse:
    portfolio = session.portfolio(portfolio_id)
    return PortfolioResponse(
        portfolio_id=portfolio.portfolio_id,
        cash_balance=portfolio.cash_balance,
        initial_balance=portfolio.initial_balance,
        valuation=portfolio.valuate(session.price_lookup).to_dict(),
        holdings=portfolio.holding_details(session.price_lookup),
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
def open_portfolio(
    request: PortfolioCreateRequest, session: SimulationSession = Depends(get_session)
) -> PortfolioResponse:
    """Open a new portfolio."""
    portfolio = session.open_portfolio(initial_balance=request.initial_balance)
    return _portfolio_response(session, portfolio.portfolio_id)


@router.post("/users/{user_key}/load")
def load_user_portfolio(user_key: str, session: SimulationSession = Depends(get_session)) -> PortfolioResponse:
    """Load a user's stored ledger, or open a fresh one."""
    portfolio = session.load_portfolio(user_key)
    return _portfolio_response(session, portfolio.portfolio_id)


@router.post("/users/{user_key}/save")
def save_user_portfolio(user_key: str, session: SimulationSession = Depends(get_session)) -> dict[str, str]:
    """Persist a user's ledger."""
    session.save_portfolio(user_key)
    return {"user_key": user_key, "status": "saved"}


@router.get("/{portfolio_id}")
def get_portfolio(portfolio_id: str, session: SimulationSession = Depends(get_session)) -> PortfolioResponse:
    """Get cash, valuation and holdings."""
    return _portfolio_response(session, portfolio_id)


@router.post("/{portfolio_id}/buy")
def buy(
    portfolio_id: str,
    request: TradeRequest,
    response: Response,
    session: SimulationSession = Depends(get_session),
) -> TradeResponse:
    """Buy at the current market price."""
    return _trade_response(session.buy(portfolio_id, request.symbol, request.quantity), response)


@router.post("/{portfolio_id}/sell")
def sell(
    portfolio_id: str,
    request: TradeRequest,
    response: Response,
    session: SimulationSession = Depends(get_session),
) -> TradeResponse:
    """Sell at the current market price."""
    return _trade_response(session.sell(portfolio_id, request.symbol, request.quantity), response)


@router.get("/{portfolio_id}/valuation")
def get_valuation(portfolio_id: str, session: SimulationSession = Depends(get_session)) -> dict[str, float]:
    """Value the portfolio at current prices."""
    return session.valuate(portfolio_id).to_dict()


@router.get("/{portfolio_id}/transactions")
def get_transactions(
    portfolio_id: str,
    symbol: str | None = None,
    type: TransactionType | None = None,
    session: SimulationSession = Depends(get_session),
) -> dict[str, list[dict]]:
    """Get the transaction history, optionally filtered."""
    history = session.get_transaction_history(portfolio_id, symbol=symbol, type=type)
    return {"transactions": [t.to_dict() for t in history]}


@router.post("/{portfolio_id}/reset")
def reset_portfolio(
    portfolio_id: str, request: ResetRequest, session: SimulationSession = Depends(get_session)
) -> PortfolioResponse:
    """Clear holdings, history and limit orders."""
    session.reset_portfolio(portfolio_id, request.new_initial_balance)
    return _portfolio_response(session, portfolio_id)


@router.post("/{portfolio_id}/limit-orders")
def submit_limit_order(
    portfolio_id: str,
    request: LimitOrderRequest,
    response: Response,
    session: SimulationSession = Depends(get_session),
) -> OrderResponse:
    """Submit a limit order."""
    result = session.submit_limit_order(portfolio_id, request.model_dump())
    return _order_response(result, response)


@router.get("/{portfolio_id}/limit-orders")
def list_limit_orders(
    portfolio_id: str, active_only: bool = False, session: SimulationSession = Depends(get_session)
) -> dict[str, Any]:
    """List limit orders."""
    orders = session.limit_orders(portfolio_id, active_only=active_only)
    return {"orders": [order.to_dict() for order in orders]}


@router.delete("/{portfolio_id}/limit-orders/{order_id}")
def cancel_limit_order(
    portfolio_id: str,
    order_id: str,
    response: Response,
    session: SimulationSession = Depends(get_session),
) -> OrderResponse:
    """Cancel an active limit order."""
    result = session.order_manager(portfolio_id).cancel(order_id)
    return _order_response(result, response)
