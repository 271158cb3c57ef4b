"""
FastAPI router for plan synthesis.

These endpoints call the synthesizer directly and never touch quota; the
project endpoints are the metered path.
"""

from fastapi import APIRouter, Depends

from deckwright.api.dependencies import get_synthesizer
from deckwright.api.schemas import CommentResponse
from deckwright.application.use_cases.synthesize_plan import PlanSynthesizer
from deckwright.domain.entities.plan import Brief, Plan
from deckwright.infra.config.logging_config import get_logger

router = APIRouter(prefix="/plans", tags=["plans"])
log = get_logger("api.plans")


@router.post(
    "",
    response_model=Plan,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def synthesize_plan(
    brief: Brief,
    synthesizer: PlanSynthesizer = Depends(get_synthesizer),
) -> Plan:
    """
    Turn a brief into a validated slide plan.

    Invalid model output is repaired once; if that also fails the response is
    502 with the remaining schema issues.
    """
    log.info("plan.synthesize.request", language=brief.language, outline_len=len(brief.outline))
    plan = await synthesizer.synthesize(brief)
    log.info("plan.synthesize.success", slides=len(plan.slides))
    return plan


@router.post("/comment", response_model=CommentResponse)
async def comment_on_topic(
    brief: Brief,
    synthesizer: PlanSynthesizer = Depends(get_synthesizer),
) -> CommentResponse:
    comment = await synthesizer.comment_on_topic(brief)
    return CommentResponse(comment=comment)
