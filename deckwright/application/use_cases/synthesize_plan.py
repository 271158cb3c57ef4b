"""
Use Case: Synthesize Slide Plan

Turns a brief into a validated Plan. Stages run strictly in order:
invoke, extract, normalize, validate (with exactly one repair attempt) and a
best-effort refinement pass that can only ever fall back to the accepted plan.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from deckwright.application.plan_parsing import (
    extract_json_object,
    format_issues,
    normalize_slide_ids,
)
from deckwright.application.ports import CompletionRequest, LLMServicePort
from deckwright.application.prompts.plan_synthesis import PlanSynthesisPrompts
from deckwright.domain.entities.plan import Brief, Plan, ValidationIssue, validate_plan
from deckwright.domain.exceptions import (
    ExtractionError,
    SchemaValidationError,
    SynthesisFailed,
    UpstreamReason,
    UpstreamUnavailable,
)
from deckwright.infra.config.logging_config import get_logger, operation_scope


@dataclass(frozen=True)
class SynthesisOptions:
    plan_temperature: float = 0.7
    repair_temperature: float = 0.3
    refine_temperature: float = 0.2
    max_output_tokens: int = 4000
    comment_temperature: float = 0.7
    comment_max_tokens: int = 200
    refine: bool = True


class RefinementError(Exception):
    """Refinement produced nothing usable."""


@dataclass(frozen=True)
class RefinementOutcome:
    """Either a refined plan or the reason refinement was discarded."""

    plan: Optional[Plan] = None
    error: Optional[RefinementError] = None

    def unwrap_or(self, fallback: Plan) -> Plan:
        return self.plan if self.plan is not None else fallback


def _issues_of(exc: Union[ExtractionError, SchemaValidationError]) -> List[ValidationIssue]:
    if isinstance(exc, SchemaValidationError):
        return exc.issues
    return [ValidationIssue(path="(root)", message=exc.message)]


class PlanSynthesizer:
    """
    Drives the language model to produce a schema-valid slide plan.

    Holds no per-run state; every call builds its own messages, so one
    instance is safe to share between concurrent requests.
    """

    def __init__(
        self,
        llm: LLMServicePort,
        options: Optional[SynthesisOptions] = None,
        prompts: Optional[PlanSynthesisPrompts] = None,
    ):
        self.llm = llm
        self.options = options or SynthesisOptions()
        self.prompts = prompts or PlanSynthesisPrompts()
        self._log = get_logger("usecase.synthesize_plan")

    async def synthesize(self, brief: Brief) -> Plan:
        """
        Produce a validated plan for the brief.

        Args:
            brief: Title, language and outline typed by the user

        Returns:
            The refined plan, or the accepted plan when refinement fails

        Raises:
            SynthesisFailed: Output was still invalid after the single repair
            UpstreamUnavailable: The model service failed during invoke or repair
        """
        with operation_scope("synthesis", language=brief.language):
            return await self._run(brief)

    async def _run(self, brief: Brief) -> Plan:
        self._log.info("synthesis.start")
        system_prompt = self.prompts.get_system_prompt()
        user_prompt = self.prompts.get_user_prompt(brief)

        raw = await self._complete(
            system_prompt, user_prompt, self.options.plan_temperature
        )
        try:
            plan = self.accept(raw)
        except (ExtractionError, SchemaValidationError) as exc:
            plan = await self._repair(system_prompt, user_prompt, raw, exc)

        if self.options.refine:
            outcome = await self.refine(plan)
            if outcome.error is not None:
                self._log.warning("synthesis.refine.fallback", error=str(outcome.error))
            plan = outcome.unwrap_or(plan)

        self._log.info("synthesis.done", slides=len(plan.slides))
        return plan

    def accept(self, raw: str) -> Plan:
        """Extract, normalize and validate one raw model response.

        Raises:
            ExtractionError: No JSON object in the text
            SchemaValidationError: The object violates the plan schema
        """
        candidate = normalize_slide_ids(extract_json_object(raw))
        result = validate_plan(candidate)
        if isinstance(result, Plan):
            return result
        raise SchemaValidationError(result)

    async def refine(self, plan: Plan) -> RefinementOutcome:
        """Fact-checking pass; never raises."""
        try:
            raw = await self._complete(
                self.prompts.get_refine_system_prompt(),
                self.prompts.get_refine_prompt(plan),
                self.options.refine_temperature,
            )
            refined = self.accept(raw)
        except (ExtractionError, SchemaValidationError) as exc:
            detail = format_issues(_issues_of(exc))
            return RefinementOutcome(error=RefinementError(detail))
        except Exception as exc:
            return RefinementOutcome(error=RefinementError(f"{type(exc).__name__}: {exc}"))

        self._log.info("synthesis.refine.accepted", slides=len(refined.slides))
        return RefinementOutcome(plan=refined)

    async def comment_on_topic(self, brief: Brief) -> str:
        """Two or three sentences on why the brief's topic matters."""
        text = await self._complete(
            self.prompts.get_comment_system_prompt(),
            self.prompts.get_comment_prompt(brief),
            self.options.comment_temperature,
            max_output_tokens=self.options.comment_max_tokens,
        )
        comment = text.strip()
        if not comment:
            raise UpstreamUnavailable(
                UpstreamReason.SERVICE_ERROR, detail="empty comment completion"
            )
        return comment

    async def check_connection(self) -> bool:
        """Tiny round trip to the model service."""
        try:
            await self._complete("", "Hello", 0.0, max_output_tokens=10)
        except UpstreamUnavailable as exc:
            self._log.warning("llm.connection.failed", reason=exc.reason.value)
            return False
        return True

    async def _repair(
        self,
        system_prompt: str,
        user_prompt: str,
        raw: str,
        error: Union[ExtractionError, SchemaValidationError],
    ) -> Plan:
        issues = _issues_of(error)
        self._log.info(
            "synthesis.repair.start", code=error.code, issues=format_issues(issues)
        )
        repaired = await self._complete(
            system_prompt,
            self.prompts.get_repair_prompt(user_prompt, raw, issues),
            self.options.repair_temperature,
        )
        try:
            return self.accept(repaired)
        except (ExtractionError, SchemaValidationError) as exc:
            remaining = _issues_of(exc)
            self._log.warning(
                "synthesis.repair.failed", code=exc.code, issues=format_issues(remaining)
            )
            raise SynthesisFailed(remaining, detail=format_issues(remaining)) from exc

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        request = CompletionRequest(
            system_instruction=system_prompt,
            user_instruction=user_prompt,
            temperature=temperature,
            max_output_tokens=max_output_tokens or self.options.max_output_tokens,
        )
        return await self.llm.complete(request)
