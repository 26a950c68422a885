"""Pre-built traffic scenarios."""

from antifraud.scenarios.simulation import LabeledTransaction, SimulationResult, TrafficSimulation

__all__ = ["LabeledTransaction", "SimulationResult", "TrafficSimulation"]
