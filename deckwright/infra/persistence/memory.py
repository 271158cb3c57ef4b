"""
In-memory adapters for the quota and plan-storage boundaries.

Used by the development server and the tests; a real deployment plugs its own
ledger and store in behind the same ports.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Tuple

from deckwright.application.ports import PlanRepositoryPort, QuotaCheck, TokenLedgerPort
from deckwright.domain.entities.plan import Plan
from deckwright.domain.value_objects.tier import ActionKind

DEFAULT_ACTION_COSTS: Mapping[ActionKind, int] = {
    ActionKind.CREATE_PRESENTATION: 10,
    ActionKind.REGENERATE_SLIDES: 10,
    ActionKind.EXPORT_PRESENTATION: 3,
}


class InMemoryPlanRepository(PlanRepositoryPort):
    def __init__(self) -> None:
        self._plans: Dict[str, Plan] = {}
        self._lock = asyncio.Lock()

    async def get_plan(self, project_id: str) -> Optional[Plan]:
        return self._plans.get(project_id)

    async def save_plan(self, project_id: str, plan: Plan) -> None:
        async with self._lock:
            self._plans[project_id] = plan


class InMemoryTokenLedger(TokenLedgerPort):
    """Per-user token balances with a fixed cost per action."""

    def __init__(
        self,
        starting_balance: int = 50,
        costs: Optional[Mapping[ActionKind, int]] = None,
    ) -> None:
        self.starting_balance = starting_balance
        self.costs = dict(costs or DEFAULT_ACTION_COSTS)
        self._balances: Dict[str, int] = {}
        self.deductions: List[Tuple[str, ActionKind, Dict[str, Any]]] = []
        self._lock = asyncio.Lock()

    def balance(self, user_id: str) -> int:
        return self._balances.get(user_id, self.starting_balance)

    def set_balance(self, user_id: str, amount: int) -> None:
        self._balances[user_id] = amount

    async def has_enough_tokens(self, user_id: str, action: ActionKind) -> QuotaCheck:
        required = self.costs.get(action, 0)
        available = self.balance(user_id)
        return QuotaCheck(ok=available >= required, available=available, required=required)

    async def deduct(
        self,
        user_id: str,
        action: ActionKind,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        async with self._lock:
            cost = self.costs.get(action, 0)
            available = self.balance(user_id)
            if available < cost:
                raise ValueError(f"User {user_id} cannot afford {action.value}")
            self._balances[user_id] = available - cost
            self.deductions.append((user_id, action, dict(metadata or {})))
