"""Tests for the transaction and verdict models."""

from datetime import datetime
from decimal import Decimal

import pytest

from antifraud.models import (
    APPROVED_REASON,
    APPROVED_RULE,
    Channel,
    Transaction,
    TransactionStatus,
    Verdict,
)


class TestTransaction:
    """Tests for Transaction defaults."""

    def test_defaults(self) -> None:
        tx = Transaction(
            amount=Decimal("10.00"),
            sender_account_id="s1",
            receiver_account_id=None,
            timestamp=datetime(2025, 11, 27, 12, 0),
        )

        assert tx.is_suspicious is False
        assert tx.risk_reason is None
        assert tx.transaction_id is None
        assert tx.status == TransactionStatus.PENDING
        assert tx.auth_attempts is None
        assert isinstance(tx.created_at, datetime)
        assert tx.updated_at is None


class TestVerdict:
    """Tests for Verdict."""

    def test_approved(self) -> None:
        verdict = Verdict.approved()

        assert verdict.suspicious is False
        assert verdict.reason == APPROVED_REASON
        assert verdict.rule == APPROVED_RULE

    def test_flag(self) -> None:
        verdict = Verdict.flag("panic_mode", "burst")

        assert verdict == Verdict(suspicious=True, reason="burst", rule="panic_mode")

    def test_apply_writes_verdict_fields(self, make_tx) -> None:
        """Test apply sets verdict fields and leaves status untouched."""
        tx = make_tx()

        out = Verdict.flag("high_amount", "too much").apply(tx)

        assert out is tx
        assert tx.is_suspicious is True
        assert tx.risk_reason == "too much"
        assert tx.status == TransactionStatus.PENDING

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Verdict.approved().suspicious = True  # type: ignore[misc]


class TestEnums:
    def test_status_values(self) -> None:
        assert [s.value for s in TransactionStatus] == ["PENDING", "APPROVED", "REJECTED"]

    def test_channel_is_str(self) -> None:
        assert Channel.APP == "APP"
        assert Channel("PHONE") is Channel.PHONE
