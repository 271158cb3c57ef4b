"""
Unit tests for log configuration, correlation scopes and request context.
"""

import logging

import pytest
import structlog
from starlette.requests import Request

from deckwright.application.use_cases.synthesize_plan import PlanSynthesizer, SynthesisOptions
from deckwright.infra.config.logging_config import (
    MAX_FIELD_CHARS,
    PROVIDER_LOGGERS,
    bind_context,
    clear_context,
    clip_long_values,
    operation_scope,
    service_stamp,
    setup_logging,
)
from deckwright.infra.config.settings import Settings
from deckwright.infra.middleware.request_context import caller_context
from tests._helpers.fakes import ScriptedLLM, plan_json


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


class ContextRecordingLLM(ScriptedLLM):
    """Records the bound log context seen by each completion call."""

    def __init__(self, responses):
        super().__init__(responses)
        self.contexts = []

    async def complete(self, request):
        self.contexts.append(structlog.contextvars.get_contextvars())
        return await super().complete(request)


def _request(path="/api/v1/plans", headers=None):
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": path,
            "query_string": b"",
            "headers": raw_headers,
        }
    )


class TestProcessors:
    def test_long_model_output_is_clipped(self):
        raw = "x" * (MAX_FIELD_CHARS + 500)

        event = clip_long_values(None, "info", {"event": "synthesis.repair.start", "raw": raw})

        assert event["raw"].startswith("x" * MAX_FIELD_CHARS)
        assert event["raw"].endswith(f"[{len(raw)} chars]")
        assert event["event"] == "synthesis.repair.start"

    def test_short_values_untouched(self):
        event = {"event": "render.done", "slides": 7, "theme": "modern"}

        assert clip_long_values(None, "info", dict(event)) == event

    def test_service_stamp_does_not_override_bound_values(self):
        stamp = service_stamp("Deckwright API", "production")

        event = stamp(None, "info", {"event": "x", "environment": "staging"})

        assert event["service"] == "Deckwright API"
        assert event["environment"] == "staging"


class TestSetupLogging:
    def test_provider_loggers_quieted(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FORMAT", "console")

        setup_logging(Settings(_env_file=None))

        for name in PROVIDER_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
        structlog.reset_defaults()


class TestOperationScope:
    def test_binds_and_restores(self):
        bind_context(request_id="req-1")

        with operation_scope("render", theme="modern") as render_id:
            inside = structlog.contextvars.get_contextvars()

        assert inside["render_id"] == render_id
        assert inside["theme"] == "modern"
        assert inside["request_id"] == "req-1"
        assert structlog.contextvars.get_contextvars() == {"request_id": "req-1"}

    def test_ids_are_unique(self):
        with operation_scope("render") as first:
            pass
        with operation_scope("render") as second:
            pass

        assert first != second

    @pytest.mark.asyncio
    async def test_synthesis_calls_share_one_correlation_id(self, brief):
        llm = ContextRecordingLLM(["not json", plan_json()])

        await PlanSynthesizer(llm, SynthesisOptions(refine=False)).synthesize(brief)

        ids = {context["synthesis_id"] for context in llm.contexts}
        assert len(ids) == 1
        assert all(context["language"] == "en" for context in llm.contexts)
        assert "synthesis_id" not in structlog.contextvars.get_contextvars()


class TestCallerContext:
    def test_reuses_gateway_request_id(self):
        context = caller_context(_request(headers={"X-Request-ID": "gw-9", "X-User-Id": "u-1"}))

        assert context == {
            "request_id": "gw-9",
            "route": "/api/v1/plans",
            "method": "POST",
            "user_id": "u-1",
        }

    def test_generates_request_id_without_user(self):
        context = caller_context(_request(path="/health"))

        assert len(context["request_id"]) == 32
        assert "user_id" not in context
        assert context["route"] == "/health"
