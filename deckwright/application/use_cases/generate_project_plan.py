"""
Use Case: Generate Project Plan

Quota check, synthesis, persistence and deduction for one project. A project
without a stored plan is charged as a creation, otherwise as a regeneration.
The quota check happens before any model call; synthesis never touches quota.
"""

from deckwright.application.ports import PlanRepositoryPort, TokenLedgerPort
from deckwright.application.use_cases.synthesize_plan import PlanSynthesizer
from deckwright.domain.entities.plan import Brief, Plan
from deckwright.domain.exceptions import InsufficientTokens
from deckwright.domain.value_objects.tier import ActionKind
from deckwright.infra.config.logging_config import bind_context, get_logger


class GenerateProjectPlanUseCase:
    """(Re)generates the slide plan stored for a project."""

    def __init__(
        self,
        synthesizer: PlanSynthesizer,
        plan_repo: PlanRepositoryPort,
        ledger: TokenLedgerPort,
    ):
        self.synthesizer = synthesizer
        self.plan_repo = plan_repo
        self.ledger = ledger
        self._log = get_logger("usecase.generate_project_plan")

    async def action_for(self, project_id: str) -> ActionKind:
        """First plan for a project is a creation; any later one a regeneration."""
        existing = await self.plan_repo.get_plan(project_id)
        if existing is None:
            return ActionKind.CREATE_PRESENTATION
        return ActionKind.REGENERATE_SLIDES

    async def execute(self, user_id: str, project_id: str, brief: Brief) -> Plan:
        """
        Execute plan generation for a project.

        Args:
            user_id: Caller identity, used only for quota
            project_id: Key the plan is stored under
            brief: Title, language and outline

        Returns:
            The newly stored plan (always a new value, never an edit)

        Raises:
            InsufficientTokens: Before any model call, when the quota is short
        """
        bind_context(user_id=user_id, project_id=project_id)
        action = await self.action_for(project_id)
        self._log.info("usecase.start", action=action.value)

        check = await self.ledger.has_enough_tokens(user_id, action)
        if not check.ok:
            self._log.info(
                "quota.insufficient", available=check.available, required=check.required
            )
            raise InsufficientTokens(check)

        plan = await self.synthesizer.synthesize(brief)
        await self.plan_repo.save_plan(project_id, plan)

        try:
            await self.ledger.deduct(
                user_id,
                action,
                {"project_id": project_id, "slides": len(plan.slides)},
            )
        except Exception as exc:
            # the plan is already stored; billing trouble must not lose it
            self._log.error("quota.deduct.failed", error=str(exc))

        self._log.info("usecase.done", slides=len(plan.slides))
        return plan
