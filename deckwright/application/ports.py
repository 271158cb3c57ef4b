"""
Application ports - abstract interfaces for external dependencies.

These interfaces define the contracts that the application layer needs
from the language model, the quota ledger and plan storage.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from deckwright.domain.entities.plan import Plan
from deckwright.domain.value_objects.tier import ActionKind


@dataclass(frozen=True)
class CompletionRequest:
    """One language-model call: instructions in, free text out."""

    system_instruction: str
    user_instruction: str
    temperature: float
    max_output_tokens: int


@dataclass(frozen=True)
class QuotaCheck:
    ok: bool
    available: int
    required: int


class LLMServicePort(ABC):
    """Abstract interface for LLM operations."""

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> str:
        """Run one completion and return the raw response text.

        Implementations raise ``UpstreamUnavailable`` for network, timeout,
        rate-limit and quota failures.
        """
        pass


class TokenLedgerPort(ABC):
    """Quota boundary. The core only reads and reports, never bills."""

    @abstractmethod
    async def has_enough_tokens(self, user_id: str, action: ActionKind) -> QuotaCheck:
        pass

    @abstractmethod
    async def deduct(
        self,
        user_id: str,
        action: ActionKind,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        pass


class PlanRepositoryPort(ABC):
    """Plans stored as opaque documents keyed by project id."""

    @abstractmethod
    async def get_plan(self, project_id: str) -> Optional[Plan]:
        """Get the stored plan for a project, if any."""
        pass

    @abstractmethod
    async def save_plan(self, project_id: str, plan: Plan) -> None:
        """Replace the stored plan for a project."""
        pass
