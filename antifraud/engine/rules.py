"""Heuristic fraud-risk rules.

Every rule is a plain function ``(transaction, store, thresholds)`` returning
a suspicious :class:`Verdict` when it matches, or ``None`` to let the next
rule run. ``RULES`` fixes the evaluation order; the engine stops at the
first match and falls back to approval.
"""

from typing import Callable

from antifraud.config import RiskThresholds
from antifraud.models import Transaction, Verdict
from antifraud.store.base import HistoryStore

Rule = Callable[[Transaction, HistoryStore, RiskThresholds], Verdict | None]

REASON_AUTH_ATTEMPTS = "multiple failed authentication attempts."
REASON_PANIC_MODE = "possible panic-mode attack: too many transactions in a short period."
REASON_CHANNEL_CHANGE = "unusual channel change: previously {last} now {current}."
REASON_DEVICE_CHANGE = "device differs from the account's last recorded device."
REASON_GEO_MISMATCH = "geo-location changed relative to the last transaction."
REASON_DISTINCT_RECEIVERS = "suspicious pattern: multiple distinct receivers within one hour."
REASON_HIGH_AMOUNT_NIGHT = "critical alert: high-value transaction at an unusual hour"
REASON_HIGH_AMOUNT = "warning: amount exceeds the normal limit."
REASON_NEW_RECEIVER = "new receiver and elevated amount."


def check_auth_attempts(
    transaction: Transaction, store: HistoryStore, thresholds: RiskThresholds
) -> Verdict | None:
    """Too many failed authentication attempts. Never touches the store."""
    attempts = transaction.auth_attempts or 0
    if attempts >= thresholds.auth_attempts:
        return Verdict.flag("auth_attempts", REASON_AUTH_ATTEMPTS)
    return None


def check_panic_mode(
    transaction: Transaction, store: HistoryStore, thresholds: RiskThresholds
) -> Verdict | None:
    """Burst of transactions from the sender in the panic window."""
    since = transaction.timestamp - thresholds.panic_window
    recent = store.by_account_since(transaction.sender_account_id, since)
    if len(recent) >= thresholds.panic_count:
        return Verdict.flag("panic_mode", REASON_PANIC_MODE)
    return None


def check_behavioral_drift(
    transaction: Transaction, store: HistoryStore, thresholds: RiskThresholds
) -> Verdict | None:
    """Channel, device or location differs from the sender's last transaction."""
    last = store.latest_by_account(transaction.sender_account_id)
    if last is None:
        return None
    return (
        _channel_change(last, transaction)
        or _device_change(last, transaction)
        or _geo_mismatch(last, transaction, thresholds)
    )


def _channel_change(last: Transaction, current: Transaction) -> Verdict | None:
    if last.channel is None or current.channel is None:
        return None
    # Any change counts, moving to PHONE included
    if last.channel.lower() != current.channel.lower():
        reason = REASON_CHANNEL_CHANGE.format(last=last.channel, current=current.channel)
        return Verdict.flag("channel_change", reason)
    return None


def _device_change(last: Transaction, current: Transaction) -> Verdict | None:
    if last.device_id is None or current.device_id is None:
        return None
    if last.device_id != current.device_id:
        return Verdict.flag("device_change", REASON_DEVICE_CHANGE)
    return None


def _geo_mismatch(
    last: Transaction, current: Transaction, thresholds: RiskThresholds
) -> Verdict | None:
    if last.geo_location is None or current.geo_location is None:
        return None
    if last.geo_location.lower() != current.geo_location.lower() and current.amount > thresholds.geo_amount_floor:
        return Verdict.flag("geo_mismatch", REASON_GEO_MISMATCH)
    return None


def check_distinct_receivers(
    transaction: Transaction, store: HistoryStore, thresholds: RiskThresholds
) -> Verdict | None:
    """Sender paid too many different receivers within the receiver window."""
    since = transaction.timestamp - thresholds.receiver_window
    last_hour = store.by_account_since(transaction.sender_account_id, since)
    receivers = {tx.receiver_account_id for tx in last_hour if tx.receiver_account_id is not None}
    if transaction.receiver_account_id is not None:
        receivers.add(transaction.receiver_account_id)
    if len(receivers) >= thresholds.distinct_receivers:
        return Verdict.flag("distinct_receivers", REASON_DISTINCT_RECEIVERS)
    return None


def check_high_amount(
    transaction: Transaction, store: HistoryStore, thresholds: RiskThresholds
) -> Verdict | None:
    """Amount above the high-value limit; night time escalates the alert."""
    if transaction.amount <= thresholds.high_value:
        return None
    if thresholds.is_night(transaction.timestamp.hour):
        return Verdict.flag("high_amount_night", REASON_HIGH_AMOUNT_NIGHT)
    return Verdict.flag("high_amount", REASON_HIGH_AMOUNT)


def check_new_receiver(
    transaction: Transaction, store: HistoryStore, thresholds: RiskThresholds
) -> Verdict | None:
    """Elevated amount sent to a receiver with no incoming history."""
    receiver = transaction.receiver_account_id
    if receiver is None:
        return None
    since = transaction.timestamp - thresholds.receiver_lookback
    history = store.by_receiver_since(receiver, since)
    if not history and transaction.amount > thresholds.new_receiver_amount:
        return Verdict.flag("new_receiver", REASON_NEW_RECEIVER)
    return None


RULES: tuple[tuple[str, Rule], ...] = (
    ("auth_attempts", check_auth_attempts),
    ("panic_mode", check_panic_mode),
    ("behavioral_drift", check_behavioral_drift),
    ("distinct_receivers", check_distinct_receivers),
    ("high_amount", check_high_amount),
    ("new_receiver", check_new_receiver),
)
