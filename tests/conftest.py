"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from antifraud.engine import RiskEngine
from antifraud.models import Transaction
from antifraud.store import InMemoryHistoryStore

TxFactory = Callable[..., Transaction]


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def ts() -> datetime:
    """Midday event timestamp, outside the night window."""
    return datetime(2025, 11, 27, 12, 0)


@pytest.fixture
def make_tx(ts: datetime) -> TxFactory:
    """Factory for a low-risk transaction with habitual context."""

    def _make(
        sender: str = "s1",
        receiver: str | None = "r1",
        timestamp: datetime | None = None,
        **overrides: Any,
    ) -> Transaction:
        fields: dict[str, Any] = {
            "amount": Decimal("10.00"),
            "currency": "BRL",
            "channel": "APP",
            "device_id": "dev-1",
            "geo_location": "BR",
            "ip_address": "1.1.1.1",
            "auth_attempts": 0,
        }
        fields.update(overrides)
        return Transaction(
            sender_account_id=sender,
            receiver_account_id=receiver,
            timestamp=timestamp or ts,
            **fields,
        )

    return _make


@pytest.fixture
def store() -> InMemoryHistoryStore:
    """Create a fresh in-memory store for each test."""
    return InMemoryHistoryStore()


@pytest.fixture
def engine(store: InMemoryHistoryStore) -> RiskEngine:
    """Engine backed by the in-memory store."""
    return RiskEngine(store)


@pytest.fixture
def mock_store() -> MagicMock:
    """History store double with empty history that echoes appended records."""
    mock = MagicMock()
    mock.by_account_since.return_value = []
    mock.by_account_between.return_value = []
    mock.by_receiver_since.return_value = []
    mock.by_ip_since.return_value = []
    mock.latest_by_account.return_value = None
    mock.append.side_effect = lambda tx: tx
    return mock
