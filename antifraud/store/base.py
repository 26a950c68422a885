"""History store contract consumed by the risk engine."""

from datetime import datetime
from typing import Protocol, Sequence

from antifraud.models import Transaction


class HistoryStore(Protocol):
    """Point-in-time queries over previously recorded transactions.

    Window queries named ``*_since`` are exclusive on the lower bound
    (``timestamp > since``); ``by_account_between`` is inclusive on both
    ends. Implementations raise ``HistoryStoreError`` on any failure.
    """

    def by_account_since(self, account_id: str, since: datetime) -> Sequence[Transaction]:
        """Transactions sent by ``account_id`` after ``since``."""
        ...

    def by_account_between(
        self, account_id: str, start: datetime, end: datetime
    ) -> Sequence[Transaction]:
        """Transactions sent by ``account_id`` within ``[start, end]``."""
        ...

    def by_receiver_since(self, receiver_id: str, since: datetime) -> Sequence[Transaction]:
        """Transactions received by ``receiver_id`` after ``since``."""
        ...

    def by_ip_since(self, ip_address: str, since: datetime) -> Sequence[Transaction]:
        """Transactions originating from ``ip_address`` after ``since``."""
        ...

    def latest_by_account(self, account_id: str) -> Transaction | None:
        """Most recent transaction sent by ``account_id``, by event timestamp."""
        ...

    def append(self, transaction: Transaction) -> Transaction:
        """Persist a transaction and return it with its identity assigned."""
        ...
