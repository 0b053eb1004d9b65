"""
FastAPI main application for the paper-trading simulator.
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from papertrade.core.engine.session import SimulationSession
from papertrade.core.exceptions.simulation import (
    ConfigurationError,
    PersistenceError,
    PortfolioNotFoundError,
    SimulationException,
    UnknownSymbolError,
)
from papertrade.infrastructure.persistence import InMemoryLedgerStore

from .routers import market, portfolios

_STATUS_BY_ERROR: list[tuple[type[SimulationException], int]] = [
    (PortfolioNotFoundError, status.HTTP_404_NOT_FOUND),
    (UnknownSymbolError, status.HTTP_404_NOT_FOUND),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


async def simulation_error_handler(request: Request, exc: SimulationException) -> JSONResponse:
    """Map domain exceptions to HTTP errors."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc)},
    )


def create_app(session: SimulationSession | None = None) -> FastAPI:
    """Build the application around a simulation session.

    Args:
        session: Session to serve (default: default universe with an in-memory store)
    """
    app = FastAPI(
        title="Paper Trading Simulator API",
        version="1.0.0",
        description="API for a simulated stock market with paper-trading portfolios",
    )
    app.state.session = session or SimulationSession.with_default_universe(
        store=InMemoryLedgerStore()
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Development frontend
            "http://localhost:8080",  # Alternative development port
        ],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )
    app.add_exception_handler(SimulationException, simulation_error_handler)

    app.include_router(market.router, prefix="/api/market", tags=["market"])
    app.include_router(portfolios.router, prefix="/api/portfolios", tags=["portfolios"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning API information."""
        return {"message": "Paper Trading Simulator API", "version": "1.0.0", "status": "running"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
