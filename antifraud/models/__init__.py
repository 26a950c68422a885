"""Domain models for transaction risk analysis."""

from antifraud.models.enums import Channel, TransactionStatus
from antifraud.models.transaction import (
    APPROVED_REASON,
    APPROVED_RULE,
    Transaction,
    Verdict,
)

__all__ = [
    "APPROVED_REASON",
    "APPROVED_RULE",
    "Channel",
    "Transaction",
    "TransactionStatus",
    "Verdict",
]
