"""Rule-based fraud risk analysis for financial transactions."""

from antifraud.engine import RiskEngine
from antifraud.models import Transaction, TransactionStatus, Verdict
from antifraud.store import HistoryStore, InMemoryHistoryStore

__version__ = "0.1.0"

__all__ = [
    "HistoryStore",
    "InMemoryHistoryStore",
    "RiskEngine",
    "Transaction",
    "TransactionStatus",
    "Verdict",
]
