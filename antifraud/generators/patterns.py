"""Fraud pattern injectors, one per risk rule family."""

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from antifraud.generators.transaction import AccountProfile, TransactionGenerator
from antifraud.models import Channel, Transaction


@dataclass
class FraudPattern:
    """Configuration for fraud pattern generation."""

    name: str
    description: str
    rule: str  # Rule expected to flag the last transaction of the pattern


class FraudPatternGenerator:
    """Generate transaction sequences that a single risk rule should flag.

    Each injector returns the transactions to evaluate in order; only the
    last one is expected to be flagged, by ``FraudPattern.rule``. Injectors
    assume the profile already has routine history evaluated before
    ``timestamp``.
    """

    PATTERNS = {
        "auth_failures": FraudPattern(
            "auth_failures",
            "Transaction after repeated failed authentication",
            "auth_attempts",
        ),
        "panic_burst": FraudPattern(
            "panic_burst",
            "Many transactions in a few minutes",
            "panic_mode",
        ),
        "channel_change": FraudPattern(
            "channel_change",
            "Switch to a channel the account does not use",
            "channel_change",
        ),
        "device_change": FraudPattern(
            "device_change",
            "Transaction from an unknown device",
            "device_change",
        ),
        "geo_jump": FraudPattern(
            "geo_jump",
            "Material amount from a different location",
            "geo_mismatch",
        ),
        "receiver_fanout": FraudPattern(
            "receiver_fanout",
            "Payments to several new receivers within an hour",
            "distinct_receivers",
        ),
        "night_high_value": FraudPattern(
            "night_high_value",
            "High-value transfer during night hours",
            "high_amount_night",
        ),
        "high_value": FraudPattern(
            "high_value",
            "High-value transfer during the day",
            "high_amount",
        ),
        "new_receiver_large": FraudPattern(
            "new_receiver_large",
            "Elevated amount to a previously unknown receiver",
            "new_receiver",
        ),
    }

    def __init__(self, seed: int | None = None, transactions: TransactionGenerator | None = None) -> None:
        if seed is not None:
            random.seed(seed)
        self.transactions = transactions or TransactionGenerator(seed=seed)

    def inject(self, pattern: str, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate the transactions of a named pattern."""
        if pattern not in self.PATTERNS:
            raise ValueError(f"Unknown fraud pattern: {pattern}")
        return getattr(self, f"inject_{pattern}")(profile, timestamp)

    def inject_auth_failures(self, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate a transaction submitted after several failed logins."""
        tx = self.transactions.generate(profile, timestamp)
        tx.auth_attempts = random.randint(3, 6)
        return [tx]

    def inject_panic_burst(
        self,
        profile: AccountProfile,
        timestamp: datetime,
        count: int = 4,
    ) -> list[Transaction]:
        """Generate ``count`` transactions one minute apart to the same payee."""
        payee = profile.payees[0] if profile.payees else None
        return [
            self.transactions.generate(profile, timestamp + timedelta(minutes=i), payee)
            for i in range(count)
        ]

    def inject_channel_change(self, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate a transaction over the phone channel (or web for phone users)."""
        tx = self.transactions.generate(profile, timestamp)
        tx.channel = Channel.WEB.value if profile.channel == Channel.PHONE.value else Channel.PHONE.value
        return [tx]

    def inject_device_change(self, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate a transaction from a device never seen on the account."""
        tx = self.transactions.generate(profile, timestamp)
        tx.device_id = self.transactions.device_id()
        return [tx]

    def inject_geo_jump(self, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate a material transaction from another location."""
        tx = self.transactions.generate(profile, timestamp)
        tx.geo_location = "PT-LIS" if profile.geo_location != "PT-LIS" else "US-NY"
        tx.amount = self._amount(250, 900)
        return [tx]

    def inject_receiver_fanout(
        self,
        profile: AccountProfile,
        timestamp: datetime,
        count: int = 3,
    ) -> list[Transaction]:
        """Generate small payments to ``count`` new receivers, 15 minutes apart."""
        return [
            self.transactions.generate(
                profile,
                timestamp + timedelta(minutes=15 * i),
                self.transactions.account_id(),
            )
            for i in range(count)
        ]

    def inject_night_high_value(self, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate a high-value transfer to a known payee at night."""
        night_time = timestamp.replace(hour=random.choice([0, 1, 2, 3, 4, 5, 23]), minute=random.randint(0, 59))
        tx = self.transactions.generate(profile, night_time)
        tx.amount = self._amount(2500, 8000)
        return [tx]

    def inject_high_value(self, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate a high-value transfer to a known payee during the day."""
        day_time = timestamp.replace(hour=random.randint(9, 18), minute=random.randint(0, 59))
        tx = self.transactions.generate(profile, day_time)
        tx.amount = self._amount(2500, 8000)
        return [tx]

    def inject_new_receiver_large(self, profile: AccountProfile, timestamp: datetime) -> list[Transaction]:
        """Generate an elevated payment to an unknown receiver."""
        tx = self.transactions.generate(profile, timestamp, self.transactions.account_id())
        tx.amount = self._amount(1100, 1900)
        return [tx]

    @staticmethod
    def _amount(low: float, high: float) -> Decimal:
        return Decimal(str(round(random.uniform(low, high), 2)))

