"""
Integration tests for the HTTP API.

Drives the FastAPI app through TestClient against a deterministic session.
"""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from papertrade.api.main import create_app
from papertrade.core.engine.clock import ManualClock
from papertrade.core.engine.session import SimulationSession
from papertrade.core.enums import EventFrequency
from papertrade.core.models.instrument import Instrument
from papertrade.core.models.simulation_config import SimulationConfig
from papertrade.core.models.snapshot import LedgerSnapshot
from papertrade.infrastructure.persistence import InMemoryLedgerStore

START = datetime(2024, 1, 1, 9, 30, tzinfo=UTC)


@pytest.fixture
def session() -> SimulationSession:
    """Session with two flat instruments and an in-memory store."""
    return SimulationSession(
        config=SimulationConfig(event_frequency=EventFrequency.NONE, seed=5),
        instruments=[
            Instrument("AAPL", "Apple Inc.", "Technology", 160.0, volatility=0.0),
            Instrument("MSFT", "Microsoft Corporation", "Technology", 300.0, volatility=0.0),
        ],
        clock=ManualClock(START),
        store=InMemoryLedgerStore(),
    )


@pytest.fixture
def client(session: SimulationSession) -> TestClient:
    """Test client bound to the session."""
    return TestClient(create_app(session))


@pytest.fixture
def portfolio_id(client: TestClient) -> str:
    """Open a 500.00 portfolio."""
    response = client.post("/api/portfolios/", json={"initial_balance": 500.0})
    return response.json()["portfolio_id"]


class TestMarketEndpoints:
    """Test suite for /api/market."""

    def test_should_report_health(self, client: TestClient) -> None:
        """Test root and health endpoints."""
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "running"

    def test_should_list_and_fetch_instruments(self, client: TestClient) -> None:
        """Test instrument listing and detail."""
        listing = client.get("/api/market/instruments").json()["instruments"]
        detail = client.get("/api/market/instruments/aapl")

        assert [i["symbol"] for i in listing] == ["AAPL", "MSFT"]
        assert detail.status_code == 200
        assert detail.json()["market_price"] == 160.0

    def test_should_return_404_for_unknown_instrument(self, client: TestClient) -> None:
        """Test unknown symbols map to 404."""
        response = client.get("/api/market/instruments/ZZZ")

        assert response.status_code == 404
        assert response.json()["error"] == "UnknownSymbolError"

    def test_should_create_custom_instrument(self, client: TestClient) -> None:
        """Test adding a user-defined instrument."""
        response = client.post(
            "/api/market/instruments", json={"symbol": "nova", "market_price": 25.0}
        )

        assert response.status_code == 201
        assert response.json()["symbol"] == "NOVA"
        assert client.post("/api/market/instruments", json={"symbol": "NOVA"}).status_code == 400

    def test_should_tick_and_update_settings(self, client: TestClient) -> None:
        """Test manual tick and settings change."""
        tick = client.post("/api/market/tick").json()
        settings = client.put(
            "/api/market/settings", json={"market_volatility": "high", "event_frequency": "low"}
        ).json()

        assert set(tick["prices"]) == {"AAPL", "MSFT"}
        assert settings["market_volatility"] == "high"
        assert settings["event_frequency"] == "low"
        assert client.get("/api/market/news").json() == {"news": []}


class TestPortfolioEndpoints:
    """Test suite for /api/portfolios."""

    def test_should_buy_and_valuate(self, client: TestClient, portfolio_id: str) -> None:
        """Test a successful buy then valuation."""
        # Act
        response = client.post(
            f"/api/portfolios/{portfolio_id}/buy", json={"symbol": "aapl", "quantity": "2"}
        )
        valuation = client.get(f"/api/portfolios/{portfolio_id}/valuation").json()

        # Assert
        assert response.status_code == 200
        assert response.json()["transaction"]["total_value"] == 320.0
        assert valuation["cash_balance"] == 180.0
        assert valuation["portfolio_value"] == 320.0

    def test_should_reject_insufficient_funds_with_400(
        self, client: TestClient, portfolio_id: str
    ) -> None:
        """Test a ledger rejection returns the result body."""
        response = client.post(
            f"/api/portfolios/{portfolio_id}/buy", json={"symbol": "MSFT", "quantity": 2}
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"] == "InsufficientFundsError"

    @pytest.mark.parametrize("quantity", ["abc", 0, -3, 2.5])
    def test_should_reject_malformed_quantity_with_422(
        self, client: TestClient, portfolio_id: str, quantity: object
    ) -> None:
        """Test request validation rejects bad quantities before the ledger."""
        response = client.post(
            f"/api/portfolios/{portfolio_id}/buy", json={"symbol": "AAPL", "quantity": quantity}
        )

        assert response.status_code == 422
        assert client.get(f"/api/portfolios/{portfolio_id}").json()["cash_balance"] == 500.0

    def test_should_return_404_for_unknown_portfolio(self, client: TestClient) -> None:
        """Test unknown portfolio ids map to 404."""
        response = client.get("/api/portfolios/port-missing")

        assert response.status_code == 404
        assert response.json()["error"] == "PortfolioNotFoundError"

    def test_should_filter_transactions(self, client: TestClient, portfolio_id: str) -> None:
        """Test the transaction history query filters."""
        client.post(f"/api/portfolios/{portfolio_id}/buy", json={"symbol": "AAPL", "quantity": 1})
        client.post(f"/api/portfolios/{portfolio_id}/sell", json={"symbol": "AAPL", "quantity": 1})

        sells = client.get(
            f"/api/portfolios/{portfolio_id}/transactions", params={"type": "SELL"}
        ).json()["transactions"]

        assert [t["type"] for t in sells] == ["SELL"]

    def test_should_manage_limit_orders(self, client: TestClient, portfolio_id: str) -> None:
        """Test submit, list, execute on tick and cancel."""
        # Arrange
        submit = client.post(
            f"/api/portfolios/{portfolio_id}/limit-orders",
            json={"type": "buy", "symbol": "AAPL", "quantity": 1, "target_price": 170.0},
        )
        standing = client.post(
            f"/api/portfolios/{portfolio_id}/limit-orders",
            json={"type": "BUY", "symbol": "MSFT", "quantity": 1, "target_price": 100.0},
        ).json()["order"]

        # Act
        tick = client.post("/api/market/tick").json()
        cancel = client.delete(f"/api/portfolios/{portfolio_id}/limit-orders/{standing['id']}")
        cancel_again = client.delete(
            f"/api/portfolios/{portfolio_id}/limit-orders/{standing['id']}"
        )
        active = client.get(
            f"/api/portfolios/{portfolio_id}/limit-orders", params={"active_only": True}
        ).json()["orders"]

        # Assert
        assert submit.status_code == 200
        assert [o["status"] for o in tick["changed_orders"]] == ["completed"]
        assert cancel.json()["success"] is True
        assert cancel_again.status_code == 400
        assert cancel_again.json()["error"] == "OrderStateError"
        assert active == []

    def test_should_reject_bad_limit_order_type(self, client: TestClient, portfolio_id: str) -> None:
        """Test an unknown order type is a validation error."""
        response = client.post(
            f"/api/portfolios/{portfolio_id}/limit-orders",
            json={"type": "hold", "symbol": "AAPL", "quantity": 1, "target_price": 10.0},
        )

        assert response.status_code == 422

    def test_should_save_and_load_user_ledger(
        self, client: TestClient, session: SimulationSession
    ) -> None:
        """Test the user persistence endpoints."""
        # Arrange
        loaded = client.post("/api/portfolios/users/alice/load").json()
        client.post(
            f"/api/portfolios/{loaded['portfolio_id']}/buy", json={"symbol": "AAPL", "quantity": 1}
        )

        # Act
        saved = client.post("/api/portfolios/users/alice/save")
        session.store.fail_next_save = True
        failed = client.post("/api/portfolios/users/alice/save")

        # Assert
        assert saved.json() == {"user_key": "alice", "status": "saved"}
        assert failed.status_code == 503
        assert failed.json()["error"] == "PersistenceError"
        assert session.store.load("alice").cash_balance == 340.0

    def test_should_return_503_for_corrupt_stored_ledger(
        self, client: TestClient, session: SimulationSession
    ) -> None:
        """Test a stored ledger that cannot be rebuilt is a persistence failure."""
        # Arrange
        session.store.save(
            "mallory", LedgerSnapshot("port-9", cash_balance=-1.0, initial_balance=500.0)
        )

        # Act
        response = client.post("/api/portfolios/users/mallory/load")

        # Assert
        assert response.status_code == 503
        assert response.json()["error"] == "PersistenceError"

    def test_should_reset_portfolio(self, client: TestClient, portfolio_id: str) -> None:
        """Test reset with a new balance."""
        client.post(f"/api/portfolios/{portfolio_id}/buy", json={"symbol": "AAPL", "quantity": 1})

        response = client.post(
            f"/api/portfolios/{portfolio_id}/reset", json={"new_initial_balance": 1000.0}
        )

        assert response.json()["cash_balance"] == 1000.0
        assert response.json()["holdings"] == []
