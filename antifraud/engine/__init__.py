"""Rule-based risk engine."""

from antifraud.engine.rules import RULES
from antifraud.engine.service import RiskEngine, SenderLocks

__all__ = ["RULES", "RiskEngine", "SenderLocks"]
