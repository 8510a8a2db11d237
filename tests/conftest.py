"""Shared pytest fixtures for all tests."""

import itertools
from datetime import datetime

import pytest

import config.settings as config_settings
from config.settings import Settings
from journal.schemas import Trade


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Test settings with a fixed timezone (Asia/Kolkata, UTC+5:30, no DST).

    Naive datetimes in tests are therefore Kolkata wall-clock time.
    """
    settings = Settings(
        _env_file=None,
        ENVIRONMENT="test",
        LOG_LEVEL="DEBUG",
        TIMEZONE="Asia/Kolkata",
        TOP_SYMBOLS_LIMIT=10,
        WEEKLY_WINDOW=12,
        CURRENCY_SYMBOL="₹",
    )
    monkeypatch.setattr(config_settings, "_settings", settings)
    return settings


@pytest.fixture
def make_trade():
    """Factory for closed LONG stock trades entered Monday 2024-03-04 10:15."""
    ids = itertools.count(1)

    def _make(**overrides) -> Trade:
        data = {
            "id": f"t{next(ids)}",
            "user_id": "user-1",
            "symbol": "RELIANCE",
            "type": "STOCK",
            "side": "LONG",
            "entry_price": 100.0,
            "exit_price": 110.0,
            "quantity": 10,
            "fees": 0.0,
            "entry_date": datetime(2024, 3, 4, 10, 15),
            "exit_date": datetime(2024, 3, 4, 14, 0),
            "status": "CLOSED",
        }
        data.update(overrides)
        return Trade(**data)

    return _make


@pytest.fixture
def scenario_trades(make_trade):
    """Three closed LONG trades: a win, a loss and a breakeven."""
    return [
        make_trade(entry_price=100, exit_price=110, quantity=10, fees=5),
        make_trade(entry_price=50, exit_price=40, quantity=5, fees=2),
        make_trade(entry_price=200, exit_price=200, quantity=1, fees=0),
    ]


@pytest.fixture
def tagged_trades(make_trade):
    """Closed trades spread over symbols, strategies, emotions and mistakes."""
    return [
        make_trade(
            symbol="INFY", exit_price=120, quantity=5,  # +100
            strategies=["Breakout"], emotions=["Confident"], mistakes=[],
        ),
        make_trade(
            symbol="TCS", exit_price=90, quantity=5,  # -50
            strategies=["Breakout", "Scalp"], emotions=["FOMO"], mistakes=["Chased Entry"],
        ),
        make_trade(
            symbol="INFY", exit_price=80, quantity=10,  # -200
            strategies=[], emotions=["FOMO", "Greedy"], mistakes=["Chased Entry", "No Stop Loss"],
        ),
        make_trade(
            symbol="HDFC", exit_price=100, quantity=3,  # 0
            strategies=["Scalp"], emotions=[], mistakes=[],
        ),
        make_trade(
            symbol="HDFC", status="OPEN", exit_price=None, exit_date=None,
            strategies=["Scalp"], emotions=["Fear"], mistakes=["Revenge"],
        ),
    ]


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "unit: Unit tests")
