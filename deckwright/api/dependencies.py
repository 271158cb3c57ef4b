"""
API dependencies for dependency injection.

Provides the language-model client, the synthesizer, the boundary adapters
and the use cases to the routers.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from deckwright.application.ports import LLMServicePort, PlanRepositoryPort, TokenLedgerPort
from deckwright.application.use_cases.export_project import ExportProjectUseCase
from deckwright.application.use_cases.generate_project_plan import GenerateProjectPlanUseCase
from deckwright.application.use_cases.synthesize_plan import PlanSynthesizer, SynthesisOptions
from deckwright.infra.config.logging_config import get_logger
from deckwright.infra.config.settings import Settings, get_settings
from deckwright.infra.llm.langchain_client import LangChainClient
from deckwright.infra.llm.mock_client import MockLLMClient
from deckwright.infra.persistence.memory import InMemoryPlanRepository, InMemoryTokenLedger
from deckwright.infra.rendering.packaging import DocumentMetadata

DUMMY_API_KEY = "dummy-key-for-test"


async def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> str:
    """Caller identity forwarded by the gateway; authentication happens upstream."""
    if not x_user_id:
        get_logger("auth").info("auth.missing_header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )
    return x_user_id


@lru_cache(maxsize=1)
def get_llm_client() -> LLMServicePort:
    """Dependency for LLM client."""
    settings = get_settings()

    # Use mock client in development when OPENAI_API_KEY is dummy
    if settings.openai_api_key == DUMMY_API_KEY:
        return MockLLMClient()

    return LangChainClient(
        model_name=settings.openai_model,
        temperature=settings.plan_temperature,
        max_tokens=settings.llm_max_tokens,
        base_url=settings.openai_base_url,
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout,
        max_retries=settings.openai_max_retries,
    )


def synthesis_options(settings: Settings) -> SynthesisOptions:
    return SynthesisOptions(
        plan_temperature=settings.plan_temperature,
        repair_temperature=settings.repair_temperature,
        refine_temperature=settings.refine_temperature,
        max_output_tokens=settings.llm_max_tokens,
        refine=settings.refine_plans,
    )


def get_synthesizer(
    llm: LLMServicePort = Depends(get_llm_client),
) -> PlanSynthesizer:
    return PlanSynthesizer(llm, synthesis_options(get_settings()))


@lru_cache(maxsize=1)
def get_plan_repository() -> PlanRepositoryPort:
    return InMemoryPlanRepository()


@lru_cache(maxsize=1)
def get_token_ledger() -> TokenLedgerPort:
    return InMemoryTokenLedger()


def get_document_metadata() -> DocumentMetadata:
    settings = get_settings()
    return DocumentMetadata(
        author=settings.document_author, company=settings.document_company
    )


@lru_cache(maxsize=1)
def _read_logo(path: str) -> Optional[bytes]:
    logo = Path(path)
    if not logo.is_file():
        get_logger("render").warning("watermark.logo.missing", path=path)
        return None
    return logo.read_bytes()


def get_watermark_image() -> Optional[bytes]:
    """Configured logo bytes for free-tier watermarks, if any."""
    path = get_settings().watermark_logo_path
    return _read_logo(path) if path else None


def get_generate_project_plan_use_case(
    synthesizer: PlanSynthesizer = Depends(get_synthesizer),
    plan_repo: PlanRepositoryPort = Depends(get_plan_repository),
    ledger: TokenLedgerPort = Depends(get_token_ledger),
) -> GenerateProjectPlanUseCase:
    return GenerateProjectPlanUseCase(synthesizer, plan_repo, ledger)


def get_export_project_use_case(
    plan_repo: PlanRepositoryPort = Depends(get_plan_repository),
    ledger: TokenLedgerPort = Depends(get_token_ledger),
    metadata: DocumentMetadata = Depends(get_document_metadata),
) -> ExportProjectUseCase:
    settings = get_settings()
    return ExportProjectUseCase(
        plan_repo,
        ledger,
        metadata=metadata,
        default_theme=settings.default_theme,
        watermark_text=settings.watermark_text,
    )
