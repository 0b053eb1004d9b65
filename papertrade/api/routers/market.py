"""
Market API endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from papertrade.api.dependencies import get_session
from papertrade.api.schemas.api_models import CustomInstrumentRequest, SettingsRequest
from papertrade.core.engine.session import SimulationSession

router = APIRouter()


@router.get("/instruments")
def list_instruments(session: SimulationSession = Depends(get_session)) -> dict[str, Any]:
    """List all instruments with their current state."""
    return {
        "instruments": [
            {**instrument.to_dict(), "day_change": instrument.day_change()}
            for instrument in session.instruments()
        ]
    }


@router.get("/instruments/{symbol}")
def get_instrument(symbol: str, session: SimulationSession = Depends(get_session)) -> dict[str, Any]:
    """Get one instrument including its price history."""
    instrument = session.get_instrument(symbol)
    return {
        **instrument.to_dict(),
        "day_change": instrument.day_change(),
        "estimated_volatility": instrument.estimate_volatility(),
    }


@router.post("/instruments", status_code=status.HTTP_201_CREATED)
def create_instrument(
    request: CustomInstrumentRequest, session: SimulationSession = Depends(get_session)
) -> dict[str, Any]:
    """Add a user-defined instrument with back-filled history."""
    instrument = session.create_custom_instrument(
        request.symbol,
        company_name=request.company_name,
        sector=request.sector,
        market_price=request.market_price,
        volatility=request.volatility,
    )
    return instrument.to_dict()


@router.delete("/instruments/{symbol}")
def delete_instrument(symbol: str, session: SimulationSession = Depends(get_session)) -> dict[str, str]:
    """Remove an instrument nobody holds."""
    instrument = session.remove_instrument(symbol)
    return {"symbol": instrument.symbol, "status": "removed"}


@router.post("/tick")
def run_tick(session: SimulationSession = Depends(get_session)) -> dict[str, Any]:
    """Advance the simulation by one tick."""
    return session.tick().to_dict()


@router.get("/news")
def get_news(session: SimulationSession = Depends(get_session)) -> dict[str, list[dict]]:
    """Get the recent-news feed, newest first."""
    return {"news": [item.to_dict() for item in session.recent_news()]}


@router.get("/settings")
def get_settings(session: SimulationSession = Depends(get_session)) -> dict[str, Any]:
    """Get the current simulation settings."""
    return session.config.to_dict()


@router.put("/settings")
def update_settings(
    request: SettingsRequest, session: SimulationSession = Depends(get_session)
) -> dict[str, Any]:
    """Change the volatility and news frequency presets."""
    if request.market_volatility is not None:
        session.set_market_volatility(request.market_volatility)
    if request.event_frequency is not None:
        session.set_event_frequency(request.event_frequency)
    return session.config.to_dict()
