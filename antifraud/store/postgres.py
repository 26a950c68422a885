"""PostgreSQL-backed history store."""

import logging
from datetime import datetime
from typing import Any

import psycopg

from antifraud.exceptions import HistoryStoreError
from antifraud.models import Transaction, TransactionStatus

logger = logging.getLogger(__name__)

SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS transactions (
    id BIGSERIAL PRIMARY KEY,
    amount NUMERIC(15, 2) NOT NULL,
    currency VARCHAR(3),
    sender_account_id VARCHAR(64) NOT NULL,
    receiver_account_id VARCHAR(64),
    customer_id VARCHAR(64),
    channel VARCHAR(32),
    device_id VARCHAR(128),
    ip_address VARCHAR(45),
    geo_location VARCHAR(64),
    auth_attempts INTEGER,
    event_timestamp TIMESTAMP NOT NULL,
    is_suspicious BOOLEAN NOT NULL DEFAULT FALSE,
    risk_reason TEXT,
    status VARCHAR(16) NOT NULL,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);
CREATE INDEX IF NOT EXISTS ix_transactions_sender_ts ON transactions (sender_account_id, event_timestamp);
CREATE INDEX IF NOT EXISTS ix_transactions_receiver_ts ON transactions (receiver_account_id, event_timestamp);
CREATE INDEX IF NOT EXISTS ix_transactions_ip_ts ON transactions (ip_address, event_timestamp);
"""


class PostgresHistoryStore:
    """History store persisting transactions in a PostgreSQL table."""

    # Model attribute -> table column, in SELECT/INSERT order
    COLUMNS: dict[str, str] = {
        "transaction_id": "id",
        "amount": "amount",
        "currency": "currency",
        "sender_account_id": "sender_account_id",
        "receiver_account_id": "receiver_account_id",
        "customer_id": "customer_id",
        "channel": "channel",
        "device_id": "device_id",
        "ip_address": "ip_address",
        "geo_location": "geo_location",
        "auth_attempts": "auth_attempts",
        "timestamp": "event_timestamp",
        "is_suspicious": "is_suspicious",
        "risk_reason": "risk_reason",
        "status": "status",
        "created_at": "created_at",
        "updated_at": "updated_at",
    }

    def __init__(self, conninfo: str | None = None, conn: Any = None) -> None:
        """Initialize the store.

        Parameters
        ----------
        conninfo : str | None
            PostgreSQL connection string, used when ``conn`` is not given.
        conn : Any
            An open psycopg connection.
        """
        if conn is None:
            if conninfo is None:
                raise ValueError("Either conninfo or conn is required")
            try:
                conn = psycopg.connect(conninfo)
            except psycopg.Error as e:
                raise HistoryStoreError(f"Could not connect to PostgreSQL: {e}") from e
        self.conn = conn
        self._select = "SELECT {} FROM transactions".format(", ".join(self.COLUMNS.values()))

    def create_schema(self) -> None:
        """Create the transactions table and its indexes if missing."""
        self._execute(SCHEMA_DDL, (), fetch=False)
        logger.info("Transactions schema ready")

    def by_account_since(self, account_id: str, since: datetime) -> list[Transaction]:
        return self._query(
            "WHERE sender_account_id = %s AND event_timestamp > %s",
            (account_id, since),
        )

    def by_account_between(self, account_id: str, start: datetime, end: datetime) -> list[Transaction]:
        return self._query(
            "WHERE sender_account_id = %s AND event_timestamp BETWEEN %s AND %s",
            (account_id, start, end),
        )

    def by_receiver_since(self, receiver_id: str, since: datetime) -> list[Transaction]:
        return self._query(
            "WHERE receiver_account_id = %s AND event_timestamp > %s",
            (receiver_id, since),
        )

    def by_ip_since(self, ip_address: str, since: datetime) -> list[Transaction]:
        return self._query(
            "WHERE ip_address = %s AND event_timestamp > %s",
            (ip_address, since),
        )

    def latest_by_account(self, account_id: str) -> Transaction | None:
        rows = self._query(
            "WHERE sender_account_id = %s ORDER BY event_timestamp DESC, id DESC LIMIT 1",
            (account_id,),
        )
        return rows[0] if rows else None

    def append(self, transaction: Transaction) -> Transaction:
        """Insert a transaction and assign the generated identity."""
        now = datetime.now()
        if transaction.created_at is None:
            transaction.created_at = now
        transaction.updated_at = now

        attrs = [a for a in self.COLUMNS if a != "transaction_id"]
        columns = ", ".join(self.COLUMNS[a] for a in attrs)
        placeholders = ", ".join(["%s"] * len(attrs))
        values = tuple(self._to_db(getattr(transaction, a)) for a in attrs)

        rows = self._execute(
            f"INSERT INTO transactions ({columns}) VALUES ({placeholders}) RETURNING id",
            values,
        )
        transaction.transaction_id = rows[0][0]
        return transaction

    def close(self) -> None:
        """Close the connection."""
        self.conn.close()

    def _query(self, clause: str, params: tuple) -> list[Transaction]:
        rows = self._execute(f"{self._select} {clause}", params)
        return [self._from_row(row) for row in rows]

    def _execute(self, sql: str, params: tuple, fetch: bool = True) -> list[tuple]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall() if fetch else []
            self.conn.commit()
            return rows
        except psycopg.Error as e:
            logger.error("History store query failed: %s", e)
            self._rollback()
            raise HistoryStoreError(f"History store query failed: {e}") from e

    def _rollback(self) -> None:
        if self.conn.closed:
            return
        try:
            self.conn.rollback()
        except psycopg.Error as e:
            logger.warning("Rollback failed on a broken connection: %s", e)

    def _from_row(self, row: tuple) -> Transaction:
        data = dict(zip(self.COLUMNS, row))
        data["status"] = TransactionStatus(data["status"])
        return Transaction(**data)

    @staticmethod
    def _to_db(value: Any) -> Any:
        if isinstance(value, TransactionStatus):
            return value.value
        return value
