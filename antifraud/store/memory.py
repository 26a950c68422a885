"""In-memory history store with per-account indexes."""

import threading
from dataclasses import dataclass, field
from datetime import datetime

from antifraud.models import Transaction


@dataclass
class InMemoryHistoryStore:
    """In-memory store for evaluated transactions with relationship tracking."""

    transactions: list[Transaction] = field(default_factory=list)

    # Relationship indexes (positions in ``transactions``)
    _sender_transactions: dict[str, list[int]] = field(default_factory=dict)
    _receiver_transactions: dict[str, list[int]] = field(default_factory=dict)
    _ip_transactions: dict[str, list[int]] = field(default_factory=dict)

    _next_id: int = 1
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def append(self, transaction: Transaction) -> Transaction:
        """Add a transaction to the store, assigning its identity."""
        with self._lock:
            now = datetime.now()
            if transaction.created_at is None:
                transaction.created_at = now
            transaction.updated_at = now
            transaction.transaction_id = self._next_id
            self._next_id += 1

            idx = len(self.transactions)
            self.transactions.append(transaction)
            self._sender_transactions.setdefault(transaction.sender_account_id, []).append(idx)
            if transaction.receiver_account_id is not None:
                self._receiver_transactions.setdefault(transaction.receiver_account_id, []).append(idx)
            if transaction.ip_address is not None:
                self._ip_transactions.setdefault(transaction.ip_address, []).append(idx)
            return transaction

    def by_account_since(self, account_id: str, since: datetime) -> list[Transaction]:
        """Get transactions sent by an account strictly after ``since``."""
        return [tx for tx in self._indexed(self._sender_transactions, account_id) if tx.timestamp > since]

    def by_account_between(self, account_id: str, start: datetime, end: datetime) -> list[Transaction]:
        """Get transactions sent by an account within ``[start, end]``."""
        return [
            tx
            for tx in self._indexed(self._sender_transactions, account_id)
            if start <= tx.timestamp <= end
        ]

    def by_receiver_since(self, receiver_id: str, since: datetime) -> list[Transaction]:
        """Get transactions received by an account strictly after ``since``."""
        return [tx for tx in self._indexed(self._receiver_transactions, receiver_id) if tx.timestamp > since]

    def by_ip_since(self, ip_address: str, since: datetime) -> list[Transaction]:
        """Get transactions from an IP address strictly after ``since``."""
        return [tx for tx in self._indexed(self._ip_transactions, ip_address) if tx.timestamp > since]

    def latest_by_account(self, account_id: str) -> Transaction | None:
        """Get the most recent transaction sent by an account.

        Equal timestamps resolve to the record appended last.
        """
        latest = None
        for tx in self._indexed(self._sender_transactions, account_id):
            if latest is None or tx.timestamp >= latest.timestamp:
                latest = tx
        return latest

    def get(self, transaction_id: int) -> Transaction | None:
        """Get a persisted transaction by identity."""
        with self._lock:
            # Identities are assigned sequentially from 1
            idx = transaction_id - 1
            if 0 <= idx < len(self.transactions):
                return self.transactions[idx]
            return None

    def get_stats(self) -> dict[str, int]:
        """Get store statistics."""
        with self._lock:
            return {
                "transactions": len(self.transactions),
                "suspicious": sum(1 for tx in self.transactions if tx.is_suspicious),
                "senders": len(self._sender_transactions),
                "receivers": len(self._receiver_transactions),
            }

    def _indexed(self, index: dict[str, list[int]], key: str) -> list[Transaction]:
        with self._lock:
            return [self.transactions[i] for i in index.get(key, [])]
