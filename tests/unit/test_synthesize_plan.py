"""
Unit tests for the plan synthesizer state machine.
"""

import asyncio
import json

import pytest

from deckwright.application.use_cases.synthesize_plan import (
    PlanSynthesizer,
    RefinementOutcome,
    SynthesisOptions,
)
from deckwright.domain.entities.plan import Brief, Plan, serialize_plan, validate_plan
from deckwright.domain.exceptions import (
    SynthesisFailed,
    UpstreamReason,
    UpstreamUnavailable,
)
from deckwright.infra.llm.mock_client import MockLLMClient
from tests._helpers.fakes import ScriptedLLM, plan_dict, plan_json

SCENARIO_B = 'Of course! ```json { "projectTitle": "X", "slides": [] } ``` Hope it helps.'


def _refined_json(**overrides):
    plan = plan_dict(**overrides)
    plan["slides"][1]["bullets"] = ["Fact-checked detail"]
    return json.dumps(plan)


class TestSynthesize:
    @pytest.mark.asyncio
    async def test_happy_path_invokes_then_refines(self, brief):
        llm = ScriptedLLM([plan_json(), _refined_json()])
        synthesizer = PlanSynthesizer(llm)

        plan = await synthesizer.synthesize(brief)

        assert isinstance(plan, Plan)
        assert plan.slides[1].bullets == ("Fact-checked detail",)
        assert llm.calls == 2
        assert [r.temperature for r in llm.requests] == [0.7, 0.2]
        assert all(r.max_output_tokens == 4000 for r in llm.requests)
        assert 'Project Title: "Photosynthesis"' in llm.requests[0].user_instruction

    @pytest.mark.asyncio
    async def test_prose_around_json_is_tolerated(self, brief):
        llm = ScriptedLLM([f"Here you go:\n```json\n{plan_json()}\n```", plan_json()])

        plan = await PlanSynthesizer(llm).synthesize(brief)

        assert plan.project_title == "Deck Under Test"
        assert llm.calls == 2

    @pytest.mark.asyncio
    async def test_missing_ids_are_numbered(self, brief):
        raw = plan_dict()
        for slide in raw["slides"]:
            del slide["id"]
        llm = ScriptedLLM([json.dumps(raw)])

        plan = await PlanSynthesizer(llm, SynthesisOptions(refine=False)).synthesize(brief)

        assert [s.id for s in plan.slides] == ["slide-1", "slide-2", "slide-3", "slide-4"]

    @pytest.mark.asyncio
    async def test_invalid_twice_fails_after_exactly_one_repair(self, brief):
        llm = ScriptedLLM([SCENARIO_B, SCENARIO_B])

        with pytest.raises(SynthesisFailed) as exc_info:
            await PlanSynthesizer(llm).synthesize(brief)

        assert llm.calls == 2
        assert "slides" in [issue.path for issue in exc_info.value.issues]
        assert exc_info.value.code == "SYNTHESIS_FAILED"

    @pytest.mark.asyncio
    async def test_repair_success(self, brief):
        llm = ScriptedLLM([SCENARIO_B, plan_json(), plan_json()])

        plan = await PlanSynthesizer(llm).synthesize(brief)

        assert llm.calls == 3
        repair = llm.requests[1]
        assert repair.temperature == 0.3
        assert 'Project Title: "Photosynthesis"' in repair.user_instruction
        assert '"projectTitle": "X"' in repair.user_instruction
        assert "slides:" in repair.user_instruction
        # repaired output validates on its own as well
        assert validate_plan(serialize_plan(plan)) == plan

    @pytest.mark.asyncio
    async def test_extraction_failure_is_repaired(self, brief):
        llm = ScriptedLLM(["I cannot produce JSON today.", plan_json()])

        plan = await PlanSynthesizer(llm, SynthesisOptions(refine=False)).synthesize(brief)

        assert llm.calls == 2
        assert "did not contain a JSON object" in llm.requests[1].user_instruction
        assert len(plan.slides) == 4

    @pytest.mark.asyncio
    async def test_truncated_reply_goes_to_repair(self, brief):
        truncated = plan_json()[:-40]
        llm = ScriptedLLM([truncated, plan_json()])

        plan = await PlanSynthesizer(llm, SynthesisOptions(refine=False)).synthesize(brief)

        assert llm.calls == 2
        assert "did not contain a JSON object" in llm.requests[1].user_instruction
        assert len(plan.slides) == 4

    @pytest.mark.asyncio
    async def test_invoke_upstream_failure_propagates(self, brief):
        llm = ScriptedLLM([UpstreamUnavailable(UpstreamReason.RATE_LIMITED, retry_after=5)])

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await PlanSynthesizer(llm).synthesize(brief)

        assert exc_info.value.reason is UpstreamReason.RATE_LIMITED
        assert llm.calls == 1

    @pytest.mark.asyncio
    async def test_repair_upstream_failure_is_not_wrapped(self, brief):
        llm = ScriptedLLM([SCENARIO_B, UpstreamUnavailable(UpstreamReason.TIMEOUT)])

        with pytest.raises(UpstreamUnavailable):
            await PlanSynthesizer(llm).synthesize(brief)


class TestRefinementFallback:
    @pytest.mark.asyncio
    async def test_invalid_refinement_returns_accepted_plan(self, brief):
        llm = ScriptedLLM([plan_json(), SCENARIO_B])

        plan = await PlanSynthesizer(llm).synthesize(brief)

        assert plan == validate_plan(plan_dict())
        assert llm.calls == 2

    @pytest.mark.asyncio
    async def test_refinement_upstream_failure_is_swallowed(self, brief):
        llm = ScriptedLLM([plan_json(), UpstreamUnavailable(UpstreamReason.NETWORK)])

        plan = await PlanSynthesizer(llm).synthesize(brief)

        assert plan == validate_plan(plan_dict())

    @pytest.mark.asyncio
    async def test_refinement_with_duplicate_ids_is_discarded(self, brief):
        refined = plan_dict()
        refined["slides"][3]["id"] = "slide-2"
        llm = ScriptedLLM([plan_json(), json.dumps(refined)])

        plan = await PlanSynthesizer(llm).synthesize(brief)

        assert [s.id for s in plan.slides] == ["slide-1", "slide-2", "slide-3", "slide-4"]

    @pytest.mark.asyncio
    async def test_refine_reports_error_without_raising(self, sample_plan):
        llm = ScriptedLLM([RuntimeError("boom")])

        outcome = await PlanSynthesizer(llm).refine(sample_plan)

        assert isinstance(outcome, RefinementOutcome)
        assert outcome.plan is None
        assert "boom" in str(outcome.error)
        assert outcome.unwrap_or(sample_plan) is sample_plan

    @pytest.mark.asyncio
    async def test_refine_prompt_carries_the_plan(self, sample_plan):
        llm = ScriptedLLM([plan_json()])

        await PlanSynthesizer(llm).refine(sample_plan)

        assert '"projectTitle": "Deck Under Test"' in llm.requests[0].user_instruction

    @pytest.mark.asyncio
    async def test_refinement_can_be_disabled(self, brief):
        llm = ScriptedLLM([plan_json()])

        await PlanSynthesizer(llm, SynthesisOptions(refine=False)).synthesize(brief)

        assert llm.calls == 1


class TestCommentAndConnection:
    @pytest.mark.asyncio
    async def test_comment_on_topic(self, brief):
        llm = ScriptedLLM(["  Photosynthesis feeds the planet.  "])

        comment = await PlanSynthesizer(llm).comment_on_topic(brief)

        assert comment == "Photosynthesis feeds the planet."
        assert llm.requests[0].max_output_tokens == 200
        assert llm.requests[0].temperature == 0.7

    @pytest.mark.asyncio
    async def test_empty_comment_is_upstream_error(self, brief):
        llm = ScriptedLLM(["   "])

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await PlanSynthesizer(llm).comment_on_topic(brief)

        assert exc_info.value.reason is UpstreamReason.SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_check_connection(self):
        assert await PlanSynthesizer(ScriptedLLM(["Hi"])).check_connection() is True
        failing = ScriptedLLM([UpstreamUnavailable(UpstreamReason.NETWORK)])
        assert await PlanSynthesizer(failing).check_connection() is False


class TestWithMockClient:
    @pytest.mark.asyncio
    async def test_photosynthesis_brief(self):
        brief = Brief(
            title="Intro to Photosynthesis",
            language="en",
            outline="light reactions; dark reactions; products",
        )
        llm = MockLLMClient()

        plan = await PlanSynthesizer(llm).synthesize(brief)

        assert plan.project_title == "Intro to Photosynthesis"
        assert 3 <= len(plan.slides) <= 30
        assert plan.references
        assert len(llm.requests) == 2

    @pytest.mark.asyncio
    async def test_concurrent_runs_do_not_share_state(self):
        llm = MockLLMClient()
        synthesizer = PlanSynthesizer(llm)
        briefs = [Brief(title=f"Topic {i}", language="en", outline="- a") for i in range(3)]

        plans = await asyncio.gather(*(synthesizer.synthesize(b) for b in briefs))

        assert [p.project_title for p in plans] == ["Topic 0", "Topic 1", "Topic 2"]
