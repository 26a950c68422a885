"""Transaction and verdict models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from antifraud.models.enums import TransactionStatus

APPROVED_RULE = "approved"
APPROVED_REASON = "transaction approved."


@dataclass
class Transaction:
    """Financial transaction, the unit of evaluation and of history."""

    amount: Decimal
    sender_account_id: str
    receiver_account_id: str | None
    timestamp: datetime  # Event time, used for every window computation
    currency: str | None = None
    customer_id: str | None = None

    # Context used by the behavioral rules
    channel: str | None = None
    device_id: str | None = None
    ip_address: str | None = None
    geo_location: str | None = None
    auth_attempts: int | None = None

    # Verdict, written by the engine only
    is_suspicious: bool = False
    risk_reason: str | None = None

    # Assigned by the history store on append
    transaction_id: int | None = None

    # Audit fields
    status: TransactionStatus = TransactionStatus.PENDING
    created_at: datetime | None = field(default_factory=datetime.now)
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Verdict:
    """Outcome of a rule evaluation."""

    suspicious: bool
    reason: str
    rule: str

    @classmethod
    def approved(cls) -> "Verdict":
        return cls(suspicious=False, reason=APPROVED_REASON, rule=APPROVED_RULE)

    @classmethod
    def flag(cls, rule: str, reason: str) -> "Verdict":
        return cls(suspicious=True, reason=reason, rule=rule)

    def apply(self, transaction: Transaction) -> Transaction:
        """Write the verdict fields onto a transaction."""
        transaction.is_suspicious = self.suspicious
        transaction.risk_reason = self.reason
        return transaction
