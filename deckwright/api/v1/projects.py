"""
FastAPI router for metered project operations.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from deckwright.api.dependencies import (
    get_current_user_id,
    get_export_project_use_case,
    get_generate_project_plan_use_case,
    get_watermark_image,
)
from deckwright.api.schemas import ProjectExportRequest
from deckwright.api.v1.exports import attachment
from deckwright.application.use_cases.export_project import ExportProjectUseCase
from deckwright.application.use_cases.generate_project_plan import GenerateProjectPlanUseCase
from deckwright.domain.entities.plan import Brief, Plan
from deckwright.infra.config.logging_config import bind_context, get_logger

router = APIRouter(prefix="/projects", tags=["projects"])
log = get_logger("api.projects")


@router.post(
    "/{project_id}/generate",
    response_model=Plan,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def generate_project_plan(
    project_id: str,
    brief: Brief,
    user_id: str = Depends(get_current_user_id),
    use_case: GenerateProjectPlanUseCase = Depends(get_generate_project_plan_use_case),
) -> Plan:
    """(Re)generate and store the plan of a project. Costs quota."""
    bind_context(project_id=project_id)
    log.info("project.generate.request")
    return await use_case.execute(user_id, project_id, brief)


@router.post("/{project_id}/export")
async def export_project(
    project_id: str,
    request: ProjectExportRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: ExportProjectUseCase = Depends(get_export_project_use_case),
    watermark_image: Optional[bytes] = Depends(get_watermark_image),
) -> Response:
    bind_context(project_id=project_id)
    log.info("project.export.request", tier=request.tier.value, theme=request.theme)
    deck = await use_case.execute(
        user_id,
        project_id,
        tier=request.tier,
        theme_key=request.theme,
        watermark_image=watermark_image,
    )
    return attachment(deck)
