"""Synthetic traffic generators."""

from antifraud.generators.patterns import FraudPattern, FraudPatternGenerator
from antifraud.generators.transaction import AccountProfile, TransactionGenerator

__all__ = [
    "AccountProfile",
    "FraudPattern",
    "FraudPatternGenerator",
    "TransactionGenerator",
]
