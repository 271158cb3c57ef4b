"""
Pytest configuration and fixtures.
"""

import io

import pytest
from fastapi.testclient import TestClient
from pptx import Presentation

from deckwright.domain.entities.plan import Brief, Plan
from deckwright.infra.llm.mock_client import MockLLMClient
from deckwright.infra.persistence.memory import InMemoryPlanRepository, InMemoryTokenLedger
from tests._helpers.fakes import ScriptedLLM, plan_dict


@pytest.fixture
def brief():
    """Sample synthesis request."""
    return Brief(
        title="Photosynthesis",
        language="en",
        outline="- What it is\n- Light reactions\n- Calvin cycle",
    )


@pytest.fixture
def sample_plan_dict():
    return plan_dict()


@pytest.fixture
def sample_plan(sample_plan_dict):
    return Plan.model_validate(sample_plan_dict)


@pytest.fixture
def full_plan():
    """One slide of every layout plus references."""
    return Plan.model_validate(
        {
            "projectTitle": "Every Layout",
            "language": "en",
            "slides": [
                {"id": "s1", "title": "Every Layout", "layout": "title"},
                {"id": "s2", "title": "Agenda", "bullets": ["One", "Two", "Three"]},
                {
                    "id": "s3",
                    "title": "Part One",
                    "layout": "section",
                    "speakerNotes": "Where it all begins",
                },
                {
                    "id": "s4",
                    "title": "Simplicity is the ultimate sophistication",
                    "layout": "quote",
                    "speakerNotes": "Leonardo da Vinci",
                },
                {"id": "s5", "title": "A Picture", "layout": "image"},
            ],
            "references": [
                {"url": "https://example.org/a", "label": "Source A"},
                {"url": "https://example.org/b"},
            ],
        }
    )


@pytest.fixture
def scripted_llm():
    return ScriptedLLM()


@pytest.fixture
def plan_repo():
    return InMemoryPlanRepository()


@pytest.fixture
def ledger():
    return InMemoryTokenLedger()


@pytest.fixture
def open_pptx():
    """Re-open rendered bytes with python-pptx."""

    def _open(content: bytes):
        return Presentation(io.BytesIO(content))

    return _open


# ---------- API TESTING FIXTURES ----------


@pytest.fixture
def app(scripted_llm, plan_repo, ledger):
    """FastAPI application with in-memory boundaries per test."""
    from deckwright.api import dependencies
    from deckwright.main import app

    app.dependency_overrides[dependencies.get_plan_repository] = lambda: plan_repo
    app.dependency_overrides[dependencies.get_token_ledger] = lambda: ledger
    app.dependency_overrides[dependencies.get_watermark_image] = lambda: None
    app.dependency_overrides[dependencies.get_llm_client] = MockLLMClient
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """FastAPI test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def use_scripted_llm(app, scripted_llm):
    """Route synthesis through the scripted fake instead of the mock client."""
    from deckwright.api import dependencies

    app.dependency_overrides[dependencies.get_llm_client] = lambda: scripted_llm
    return scripted_llm


@pytest.fixture
def auth_headers():
    return {"X-User-Id": "user-1"}
