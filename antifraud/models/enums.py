"""Enumeration types for transaction records."""

from enum import Enum


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Channel(str, Enum):
    APP = "APP"
    WEB = "WEB"
    PHONE = "PHONE"
    ATM = "ATM"
