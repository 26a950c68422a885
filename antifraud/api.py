"""Inbound operations: analyze a transaction payload and report liveness.

Payloads are plain JSON-like dicts. Keys may be camelCase
(``senderAccountId``) or snake_case (``sender_account_id``). Verdict,
identity and audit fields present on input are ignored.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from antifraud.engine import RiskEngine
from antifraud.exceptions import InvalidTransactionError
from antifraud.models import Transaction
from antifraud.sinks.serialization import to_dict

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "Antifraud system is operational."

# snake_case attribute -> camelCase payload key
PAYLOAD_FIELDS: dict[str, str] = {
    "amount": "amount",
    "currency": "currency",
    "sender_account_id": "senderAccountId",
    "receiver_account_id": "receiverAccountId",
    "customer_id": "customerId",
    "channel": "channel",
    "device_id": "deviceId",
    "ip_address": "ipAddress",
    "geo_location": "geoLocation",
    "auth_attempts": "authAttempts",
    "timestamp": "timestamp",
}

OUTPUT_FIELDS: dict[str, str] = {
    "transaction_id": "id",
    **PAYLOAD_FIELDS,
    "is_suspicious": "suspicious",
    "risk_reason": "riskReason",
    "status": "status",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

_STRING_FIELDS = (
    "currency",
    "receiver_account_id",
    "customer_id",
    "channel",
    "device_id",
    "ip_address",
    "geo_location",
)


def parse_transaction(payload: dict[str, Any]) -> Transaction:
    """Build a Transaction from an inbound payload.

    Parameters
    ----------
    payload : dict[str, Any]
        Decoded JSON body.

    Returns
    -------
    Transaction
        A pending transaction with no verdict.

    Raises
    ------
    InvalidTransactionError
        If amount, sender or timestamp is missing or malformed, or if a
        context field has the wrong type.
    """
    if not isinstance(payload, dict):
        raise InvalidTransactionError("Transaction payload must be a JSON object")

    values = {attr: _lookup(payload, attr) for attr in PAYLOAD_FIELDS}

    sender = values["sender_account_id"]
    if sender is None or str(sender).strip() == "":
        raise InvalidTransactionError("senderAccountId is required")

    strings = {}
    for attr in _STRING_FIELDS:
        value = values[attr]
        strings[attr] = None if value is None else str(value)

    return Transaction(
        amount=_parse_amount(values["amount"]),
        sender_account_id=str(sender),
        timestamp=_parse_timestamp(values["timestamp"]),
        auth_attempts=_parse_auth_attempts(values["auth_attempts"]),
        **strings,
    )


def to_payload(transaction: Transaction) -> dict[str, Any]:
    """Serialize a transaction with camelCase keys."""
    data = to_dict(transaction)
    return {key: data[attr] for attr, key in OUTPUT_FIELDS.items()}


def analyze_transaction(engine: RiskEngine, payload: dict[str, Any]) -> dict[str, Any]:
    """Validate a payload, evaluate it and return the persisted record.

    ``InvalidTransactionError`` is raised before the engine runs;
    ``HistoryStoreError`` from the engine propagates unchanged.
    """
    try:
        transaction = parse_transaction(payload)
    except InvalidTransactionError as e:
        logger.warning("Rejected transaction payload: %s", e)
        raise
    evaluated = engine.evaluate(transaction)
    return to_payload(evaluated)


def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "UP", "message": HEALTH_MESSAGE}


def _lookup(payload: dict[str, Any], attr: str) -> Any:
    camel = PAYLOAD_FIELDS[attr]
    if camel in payload:
        return payload[camel]
    return payload.get(attr)


def _parse_amount(value: Any) -> Decimal:
    if value is None:
        raise InvalidTransactionError("amount is required")
    if isinstance(value, bool):
        raise InvalidTransactionError(f"amount must be numeric, got {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise InvalidTransactionError(f"amount must be numeric, got {value!r}") from None
    if not amount.is_finite():
        raise InvalidTransactionError(f"amount must be finite, got {value!r}")
    if amount < 0:
        raise InvalidTransactionError(f"amount must be non-negative, got {value!r}")
    return amount


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        raise InvalidTransactionError("timestamp is required")
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            raise InvalidTransactionError(f"timestamp must be ISO-8601, got {value!r}") from None
    # History holds naive local time; offsets are converted to it
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _parse_auth_attempts(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTransactionError(f"authAttempts must be an integer, got {value!r}")
    if value < 0:
        raise InvalidTransactionError(f"authAttempts must be non-negative, got {value!r}")
    return value
