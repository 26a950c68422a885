"""Traffic simulation replaying routine and fraudulent transactions through the engine."""

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from antifraud.engine import RiskEngine
from antifraud.generators import AccountProfile, FraudPatternGenerator, TransactionGenerator
from antifraud.models import Transaction

logger = logging.getLogger(__name__)


@dataclass
class LabeledTransaction:
    """A generated transaction and the pattern it belongs to, if any."""

    transaction: Transaction
    pattern: str | None = None
    expected_rule: str | None = None  # Set on the transaction a pattern should get flagged

    @property
    def is_fraud(self) -> bool:
        return self.pattern is not None


@dataclass
class SimulationResult:
    """Outcome of a simulation run."""

    evaluated: list[LabeledTransaction] = field(default_factory=list)

    @property
    def suspicious(self) -> list[Transaction]:
        return [item.transaction for item in self.evaluated if item.transaction.is_suspicious]

    def reason_counts(self) -> Counter:
        """Number of evaluated transactions per risk reason."""
        return Counter(item.transaction.risk_reason for item in self.evaluated)

    def missed(self) -> list[LabeledTransaction]:
        """Pattern triggers that the engine approved."""
        return [
            item
            for item in self.evaluated
            if item.expected_rule is not None and not item.transaction.is_suspicious
        ]

    def false_positives(self) -> list[LabeledTransaction]:
        """Routine transactions that the engine flagged."""
        return [item for item in self.evaluated if not item.is_fraud and item.transaction.is_suspicious]

    def summary(self) -> dict[str, Any]:
        return {
            "transactions": len(self.evaluated),
            "suspicious": len(self.suspicious),
            "fraud_triggers": sum(1 for item in self.evaluated if item.expected_rule is not None),
            "missed": len(self.missed()),
            "false_positives": len(self.false_positives()),
        }


class TrafficSimulation:
    """Generate routine traffic with injected fraud patterns and evaluate it.

    This scenario creates:
    - Sender accounts with a habitual channel, device, location and payees
    - Routine history for every account, spread over business hours
    - For a share of accounts, one fraud pattern after the routine history
    """

    def __init__(
        self,
        num_accounts: int = 100,
        transactions_per_account: int = 12,
        fraud_rate: float = 0.2,
        seed: int | None = None,
        start: datetime | None = None,
        patterns: list[str] | None = None,
    ) -> None:
        """Initialize the simulation.

        Parameters
        ----------
        num_accounts : int
            Number of sender accounts to generate.
        transactions_per_account : int
            Routine transactions per account.
        fraud_rate : float
            Share of accounts receiving a fraud pattern (0.0 to 1.0).
        seed : int | None
            Random seed for reproducibility.
        start : datetime | None
            First day of routine history (midnight of 30 days ago by default).
        patterns : list[str] | None
            Pattern names to inject; all known patterns by default.
        """
        self.num_accounts = num_accounts
        self.transactions_per_account = transactions_per_account
        self.fraud_rate = fraud_rate
        self.seed = seed
        self.start = start or (datetime.now() - timedelta(days=30)).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        self.patterns = patterns or list(FraudPatternGenerator.PATTERNS)

        if seed is not None:
            random.seed(seed)

        self._transaction_gen = TransactionGenerator(seed=seed)
        self._fraud_gen = FraudPatternGenerator(seed=seed, transactions=self._transaction_gen)

        self.profiles: list[AccountProfile] = []

    def generate(self) -> list[LabeledTransaction]:
        """Generate all transactions, ordered by event timestamp."""
        logger.info(
            "Generating traffic: %d accounts, %d routine transactions each, %.1f%% fraud accounts",
            self.num_accounts,
            self.transactions_per_account,
            self.fraud_rate * 100,
        )

        self.profiles = [self._transaction_gen.generate_profile() for _ in range(self.num_accounts)]

        items: list[LabeledTransaction] = []
        for profile in self.profiles:
            for tx in self._transaction_gen.generate_history(profile, self.start, self.transactions_per_account):
                items.append(LabeledTransaction(tx))

        # Patterns start the day after the longest routine history
        history_days = -(-self.transactions_per_account // len(TransactionGenerator.BUSINESS_HOURS))
        injection_time = self.start + timedelta(days=history_days + 1, hours=10)

        fraud_accounts = round(self.num_accounts * self.fraud_rate)
        for i, profile in enumerate(random.sample(self.profiles, fraud_accounts)):
            pattern = self.patterns[i % len(self.patterns)]
            injected = self._fraud_gen.inject(pattern, profile, injection_time)
            rule = FraudPatternGenerator.PATTERNS[pattern].rule
            for j, tx in enumerate(injected):
                last = j == len(injected) - 1
                items.append(LabeledTransaction(tx, pattern, rule if last else None))

        logger.info(
            "Generated %d transactions (%d in fraud patterns)",
            len(items),
            sum(1 for item in items if item.is_fraud),
        )

        items.sort(key=lambda item: item.transaction.timestamp)
        return items

    def run(self, engine: RiskEngine) -> SimulationResult:
        """Generate traffic and evaluate it in timestamp order.

        Parameters
        ----------
        engine : RiskEngine
            Engine whose store receives every evaluated transaction.

        Returns
        -------
        SimulationResult
            Evaluated transactions with their labels.
        """
        result = SimulationResult()
        for item in self.generate():
            item.transaction = engine.evaluate(item.transaction)
            result.evaluated.append(item)

        logger.info("Simulation complete: %s", result.summary())
        return result
