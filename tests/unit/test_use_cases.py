"""
Unit tests for the quota-metered use cases.
"""

import threading
from unittest.mock import AsyncMock, Mock, patch

import pytest

from deckwright.application.ports import QuotaCheck
from deckwright.application.use_cases.export_project import (
    ExportProjectUseCase,
    select_theme,
)
from deckwright.application.use_cases.generate_project_plan import GenerateProjectPlanUseCase
from deckwright.application.use_cases.synthesize_plan import PlanSynthesizer, SynthesisOptions
from deckwright.domain.exceptions import (
    InsufficientTokens,
    PlanNotFound,
    RenderError,
    SynthesisFailed,
)
from deckwright.domain.themes import theme_catalog
from deckwright.domain.value_objects.tier import ActionKind, Tier
from deckwright.infra.rendering.packaging import ExportedDeck
from tests._helpers.fakes import ScriptedLLM, plan_json

USER = "user-1"
PROJECT = "project-1"


class TestGenerateProjectPlanUseCase:
    @pytest.fixture
    def llm(self):
        return ScriptedLLM()

    @pytest.fixture
    def use_case(self, llm, plan_repo, ledger):
        synthesizer = PlanSynthesizer(llm, SynthesisOptions(refine=False))
        return GenerateProjectPlanUseCase(synthesizer, plan_repo, ledger)

    @pytest.mark.asyncio
    async def test_execute_success(self, use_case, llm, plan_repo, ledger, brief):
        llm.queue(plan_json())

        plan = await use_case.execute(USER, PROJECT, brief)

        assert await plan_repo.get_plan(PROJECT) == plan
        assert ledger.balance(USER) == 40
        user_id, action, metadata = ledger.deductions[0]
        assert (user_id, action) == (USER, ActionKind.CREATE_PRESENTATION)
        assert metadata == {"project_id": PROJECT, "slides": 4}

    @pytest.mark.asyncio
    async def test_second_generation_is_a_regeneration(self, use_case, llm, ledger, brief):
        llm.queue(plan_json(), plan_json(slide_count=5))

        await use_case.execute(USER, PROJECT, brief)
        await use_case.execute(USER, PROJECT, brief)

        assert [d[1] for d in ledger.deductions] == [
            ActionKind.CREATE_PRESENTATION,
            ActionKind.REGENERATE_SLIDES,
        ]
        assert ledger.deductions[1][2] == {"project_id": PROJECT, "slides": 5}

    @pytest.mark.asyncio
    async def test_quota_checked_for_selected_action(self, llm, plan_repo, sample_plan, brief):
        ledger = Mock()
        ledger.has_enough_tokens = AsyncMock(return_value=QuotaCheck(True, 50, 10))
        ledger.deduct = AsyncMock()
        llm.queue(plan_json())
        use_case = GenerateProjectPlanUseCase(
            PlanSynthesizer(llm, SynthesisOptions(refine=False)), plan_repo, ledger
        )
        await plan_repo.save_plan(PROJECT, sample_plan)

        await use_case.execute(USER, PROJECT, brief)

        ledger.has_enough_tokens.assert_awaited_once_with(USER, ActionKind.REGENERATE_SLIDES)

    @pytest.mark.asyncio
    async def test_action_is_per_project(self, use_case, plan_repo, sample_plan):
        await plan_repo.save_plan(PROJECT, sample_plan)

        assert await use_case.action_for(PROJECT) is ActionKind.REGENERATE_SLIDES
        assert await use_case.action_for("project-2") is ActionKind.CREATE_PRESENTATION

    @pytest.mark.asyncio
    async def test_insufficient_tokens_before_model_call(self, use_case, llm, ledger, brief):
        ledger.set_balance(USER, 5)

        with pytest.raises(InsufficientTokens) as exc_info:
            await use_case.execute(USER, PROJECT, brief)

        assert exc_info.value.check == QuotaCheck(ok=False, available=5, required=10)
        assert llm.calls == 0

    @pytest.mark.asyncio
    async def test_synthesis_failure_charges_nothing(self, use_case, llm, plan_repo, ledger, brief):
        llm.queue("{}", "{}")

        with pytest.raises(SynthesisFailed):
            await use_case.execute(USER, PROJECT, brief)

        assert await plan_repo.get_plan(PROJECT) is None
        assert ledger.deductions == []

    @pytest.mark.asyncio
    async def test_deduct_failure_keeps_plan(self, llm, plan_repo, brief):
        ledger = Mock()
        ledger.has_enough_tokens = AsyncMock(return_value=QuotaCheck(True, 50, 10))
        ledger.deduct = AsyncMock(side_effect=RuntimeError("billing down"))
        llm.queue(plan_json())
        use_case = GenerateProjectPlanUseCase(
            PlanSynthesizer(llm, SynthesisOptions(refine=False)), plan_repo, ledger
        )

        plan = await use_case.execute(USER, PROJECT, brief)

        assert await plan_repo.get_plan(PROJECT) == plan
        ledger.deduct.assert_called_once()


class TestSelectTheme:
    def test_no_request_uses_fallback(self):
        assert select_theme(theme_catalog, None, Tier.PRO, "modern").key == "modern"
        assert select_theme(theme_catalog, None, Tier.PRO).key == "minimal"

    def test_available_theme_is_honoured(self):
        assert select_theme(theme_catalog, "Corporate", Tier.PRO).key == "corporate"

    def test_locked_theme_falls_back(self):
        assert select_theme(theme_catalog, "corporate", Tier.FREE).key == "minimal"

    def test_unknown_theme_falls_back(self):
        assert select_theme(theme_catalog, "plaid", Tier.ENTERPRISE, "modern").key == "modern"


class TestExportProjectUseCase:
    @pytest.fixture
    def use_case(self, plan_repo, ledger):
        return ExportProjectUseCase(plan_repo, ledger, watermark_text="Preview")

    @pytest.mark.asyncio
    async def test_missing_plan(self, use_case):
        with pytest.raises(PlanNotFound):
            await use_case.execute(USER, "nope")

    @pytest.mark.asyncio
    async def test_insufficient_tokens(self, use_case, plan_repo, ledger, sample_plan):
        await plan_repo.save_plan(PROJECT, sample_plan)
        ledger.set_balance(USER, 2)

        with pytest.raises(InsufficientTokens):
            await use_case.execute(USER, PROJECT)

    @pytest.mark.asyncio
    async def test_execute_success(self, use_case, plan_repo, ledger, sample_plan, open_pptx):
        await plan_repo.save_plan(PROJECT, sample_plan)

        deck = await use_case.execute(USER, PROJECT, tier="pro", theme_key="creative")

        assert isinstance(deck, ExportedDeck)
        assert deck.filename.startswith("deck-under-test-")
        assert len(open_pptx(deck.content).slides) == 5
        assert ledger.balance(USER) == 47
        assert ledger.deductions[0][1] is ActionKind.EXPORT_PRESENTATION

    @pytest.mark.asyncio
    async def test_theme_gated_by_tier(self, use_case, plan_repo, sample_plan):
        await plan_repo.save_plan(PROJECT, sample_plan)

        with patch(
            "deckwright.application.use_cases.export_project.export_deck",
            return_value=ExportedDeck(filename="x.pptx", content=b"pptx"),
        ) as export:
            await use_case.execute(USER, PROJECT, tier="free", theme_key="corporate")

        args, kwargs = export.call_args
        assert args[1].key == "minimal"
        assert args[2] is Tier.FREE
        assert kwargs["watermark_text"] == "Preview"

    @pytest.mark.asyncio
    async def test_render_runs_off_the_event_loop_thread(self, use_case, plan_repo, sample_plan):
        await plan_repo.save_plan(PROJECT, sample_plan)
        loop_thread = threading.get_ident()
        render_threads = []

        def fake_export(*args, **kwargs):
            render_threads.append(threading.get_ident())
            return ExportedDeck(filename="x.pptx", content=b"pptx")

        with patch(
            "deckwright.application.use_cases.export_project.export_deck",
            side_effect=fake_export,
        ):
            deck = await use_case.execute(USER, PROJECT)

        assert deck.filename == "x.pptx"
        assert len(render_threads) == 1
        assert render_threads[0] != loop_thread

    @pytest.mark.asyncio
    async def test_render_error_charges_nothing(self, use_case, plan_repo, ledger, sample_plan):
        await plan_repo.save_plan(PROJECT, sample_plan)

        with patch(
            "deckwright.application.use_cases.export_project.export_deck",
            side_effect=RenderError("boom"),
        ):
            with pytest.raises(RenderError):
                await use_case.execute(USER, PROJECT)

        assert ledger.deductions == []
