"""Custom exception hierarchy for antifraud."""


class AntifraudError(Exception):
    """Base exception for all antifraud errors."""


class InvalidTransactionError(AntifraudError):
    """Raised when an inbound transaction payload is malformed."""


class HistoryStoreError(AntifraudError):
    """Raised when the history store cannot answer a query or persist a record."""


class ConfigurationError(AntifraudError):
    """Raised when configuration is invalid or missing."""


class SinkError(AntifraudError):
    """Raised when a sink operation fails."""
