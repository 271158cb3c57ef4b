"""
Use Case: Export Project

Loads the stored plan, gates the requested theme by tier, renders and
packages the document, then reports the export to the quota ledger.
"""

from datetime import date
from typing import Optional

from starlette.concurrency import run_in_threadpool

from deckwright.application.ports import PlanRepositoryPort, TokenLedgerPort
from deckwright.domain.exceptions import InsufficientTokens, PlanNotFound
from deckwright.domain.themes import Theme, ThemeCatalog, theme_catalog
from deckwright.domain.value_objects.tier import ActionKind, Tier
from deckwright.infra.config.logging_config import bind_context, get_logger
from deckwright.infra.rendering.packaging import DocumentMetadata, ExportedDeck, export_deck


def select_theme(
    catalog: ThemeCatalog,
    requested: Optional[str],
    tier: Tier,
    fallback_key: Optional[str] = None,
) -> Theme:
    """Theme the tier may use.

    No request, or a requested theme outside the tier, gives ``fallback_key``
    (or the catalog default).
    """
    if not requested:
        return catalog.get(fallback_key)
    key = requested.strip().lower()
    if catalog.is_available(key, tier):
        return catalog.get(key)
    get_logger("usecase.export_project").warning(
        "theme.unavailable", requested=requested, tier=tier.value
    )
    return catalog.get(fallback_key)


class ExportProjectUseCase:
    """Renders a project's stored plan into a downloadable .pptx."""

    def __init__(
        self,
        plan_repo: PlanRepositoryPort,
        ledger: TokenLedgerPort,
        catalog: ThemeCatalog = theme_catalog,
        metadata: Optional[DocumentMetadata] = None,
        default_theme: Optional[str] = None,
        watermark_text: Optional[str] = None,
    ):
        self.plan_repo = plan_repo
        self.ledger = ledger
        self.catalog = catalog
        self.metadata = metadata
        self.default_theme = default_theme
        self.watermark_text = watermark_text
        self._log = get_logger("usecase.export_project")

    async def execute(
        self,
        user_id: str,
        project_id: str,
        tier: "Tier | str" = Tier.FREE,
        theme_key: Optional[str] = None,
        watermark_image: Optional[bytes] = None,
        today: Optional[date] = None,
    ) -> ExportedDeck:
        """
        Execute the export.

        Raises:
            PlanNotFound: The project has no stored plan
            InsufficientTokens: The user cannot afford an export
            RenderError: Rendering failed; nothing is deducted
        """
        resolved_tier = Tier.parse(tier)
        bind_context(user_id=user_id, project_id=project_id)
        self._log.info("usecase.start", action="export", tier=resolved_tier.value)

        plan = await self.plan_repo.get_plan(project_id)
        if plan is None:
            raise PlanNotFound(project_id)

        check = await self.ledger.has_enough_tokens(user_id, ActionKind.EXPORT_PRESENTATION)
        if not check.ok:
            raise InsufficientTokens(check)

        theme = select_theme(self.catalog, theme_key, resolved_tier, self.default_theme)
        deck = await run_in_threadpool(
            export_deck,
            plan,
            theme,
            resolved_tier,
            watermark_image=watermark_image,
            watermark_text=self.watermark_text,
            metadata=self.metadata,
            today=today,
        )

        try:
            await self.ledger.deduct(
                user_id,
                ActionKind.EXPORT_PRESENTATION,
                {"project_id": project_id, "filename": deck.filename, "bytes": len(deck.content)},
            )
        except Exception as exc:
            self._log.error("quota.deduct.failed", error=str(exc))

        self._log.info("usecase.done", filename=deck.filename, size=len(deck.content))
        return deck
