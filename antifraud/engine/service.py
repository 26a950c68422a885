"""Risk engine applying the rule pipeline to incoming transactions."""

import logging
import threading
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field, replace
from typing import ContextManager, Iterator

from antifraud.config import RiskThresholds
from antifraud.engine.rules import RULES, Rule
from antifraud.exceptions import HistoryStoreError
from antifraud.models import Transaction, Verdict
from antifraud.store.base import HistoryStore

logger = logging.getLogger(__name__)


@dataclass
class _SenderLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class SenderLocks:
    """Registry of one lock per sender account.

    Serializes evaluations for the same sender inside one process so that
    concurrent transactions observe each other's history. An entry lives
    only while some evaluation holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: dict[str, _SenderLock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, sender_account_id: str) -> Iterator[None]:
        """Hold the sender's lock for the duration of the block."""
        with self._guard:
            entry = self._locks.get(sender_account_id)
            if entry is None:
                entry = self._locks[sender_account_id] = _SenderLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[sender_account_id]

    def __len__(self) -> int:
        return len(self._locks)


class RiskEngine:
    """Evaluate transactions against the ordered fraud-risk rules.

    The first matching rule decides the verdict; when none matches the
    transaction is approved. The evaluated transaction is appended to the
    history store exactly once, after the verdict is fixed.

    Parameters
    ----------
    store : HistoryStore
        History queried by the rules and receiving the evaluated record.
    thresholds : RiskThresholds | None
        Rule limits (defaults to ``RiskThresholds()``).
    serialize_by_sender : bool
        Hold a per-sender lock across classification and append.
    rules : tuple | None
        Ordered ``(name, rule)`` pairs, ``RULES`` by default.
    """

    def __init__(
        self,
        store: HistoryStore,
        thresholds: RiskThresholds | None = None,
        serialize_by_sender: bool = False,
        rules: tuple[tuple[str, Rule], ...] | None = None,
    ) -> None:
        self.store = store
        self.thresholds = thresholds or RiskThresholds()
        self.rules = rules if rules is not None else RULES
        self._sender_locks = SenderLocks() if serialize_by_sender else None

    def classify(self, transaction: Transaction) -> Verdict:
        """Run the rule pipeline without touching the transaction or persisting it."""
        for name, rule in self.rules:
            verdict = rule(transaction, self.store, self.thresholds)
            if verdict is not None:
                logger.debug("Rule %s matched for sender %s", name, transaction.sender_account_id)
                return verdict
        return Verdict.approved()

    def evaluate(self, transaction: Transaction) -> Transaction:
        """Classify a transaction, record the verdict and persist it.

        The verdict is written onto a copy; the caller's transaction is
        left untouched whether or not the append succeeds.

        Parameters
        ----------
        transaction : Transaction
            Incoming transaction; amount, sender and timestamp must be set.

        Returns
        -------
        Transaction
            The persisted copy with verdict fields and identity.

        Raises
        ------
        HistoryStoreError
            If any history query or the final append fails. No verdict is
            recorded in that case.
        """
        with self._lock_for(transaction.sender_account_id):
            try:
                verdict = self.classify(transaction)
                persisted = self.store.append(verdict.apply(replace(transaction)))
            except HistoryStoreError:
                logger.error(
                    "Evaluation aborted for sender %s: history store failure",
                    transaction.sender_account_id,
                )
                raise

        log = logger.info if verdict.suspicious else logger.debug
        log(
            "Transaction %s from %s: %s (%s)",
            persisted.transaction_id,
            persisted.sender_account_id,
            "SUSPICIOUS" if verdict.suspicious else "APPROVED",
            verdict.rule,
            extra={"extra": {"rule": verdict.rule, "suspicious": verdict.suspicious}},
        )
        return persisted

    def _lock_for(self, sender_account_id: str) -> ContextManager:
        if self._sender_locks is None:
            return nullcontext()
        return self._sender_locks.hold(sender_account_id)
