"""Boundary adapters for plan storage and token accounting."""

from .memory import InMemoryPlanRepository, InMemoryTokenLedger

__all__ = ["InMemoryPlanRepository", "InMemoryTokenLedger"]
