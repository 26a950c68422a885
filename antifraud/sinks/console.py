"""Console sink printing verdicts for quick inspection."""

from collections import Counter
from typing import Any

from antifraud.models import Transaction
from antifraud.sinks.serialization import to_json


def format_verdict(transaction: Transaction) -> str:
    """One-line rendering of an evaluated transaction."""
    flag = "SUSPICIOUS" if transaction.is_suspicious else "approved"
    receiver = transaction.receiver_account_id or "-"
    currency = f" {transaction.currency}" if transaction.currency else ""
    return (
        f"#{transaction.transaction_id} {flag:<10} "
        f"{transaction.sender_account_id} -> {receiver} "
        f"{transaction.amount}{currency} | {transaction.risk_reason}"
    )


class ConsoleSink:
    """Print evaluated transactions to stdout.

    Compact mode prints one verdict line per transaction; pretty mode dumps
    every record as indented JSON.
    """

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Print full JSON records instead of verdict lines.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: Counter = Counter()
        self._suspicious = 0

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Print a batch of records under a topic heading."""
        shown = records[: self.max_records] if self.max_records else records

        print(f"\n--- {topic}: {len(records)} records ---")
        for record in shown:
            print(self._render(record))
        if len(records) > len(shown):
            print(f"... and {len(records) - len(shown)} more records")

        self._counts[topic] += len(records)
        self._suspicious += sum(1 for r in records if getattr(r, "is_suspicious", False))

    def _render(self, record: Any) -> str:
        if self.pretty:
            return to_json(record, indent=2)
        if isinstance(record, Transaction):
            return format_verdict(record)
        return to_json(record)

    def close(self) -> None:
        """Print totals per topic and the number of suspicious records."""
        print("\n--- console sink summary ---")
        for topic, count in self._counts.items():
            print(f"  {topic}: {count} records")
        print(f"  suspicious: {self._suspicious}")
