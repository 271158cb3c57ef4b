"""
Pure infrastructure LLM client for LangChain integration.

This client provides only the basic invoke functionality without any domain knowledge.
Prompts live in the application layer; provider failures are translated into
``UpstreamUnavailable`` here so callers never see raw SDK exceptions.
"""

from typing import List, Optional

import openai
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_openai import ChatOpenAI

from deckwright.application.ports import CompletionRequest, LLMServicePort
from deckwright.domain.exceptions import UpstreamReason, UpstreamUnavailable
from deckwright.infra.config.logging_config import get_logger


def _retry_after_seconds(exc: openai.APIStatusError) -> Optional[int]:
    header = exc.response.headers.get("retry-after") if exc.response else None
    if header is None:
        return None
    try:
        return max(0, int(float(header)))
    except ValueError:
        return None


def translate_openai_error(exc: Exception) -> Optional[UpstreamUnavailable]:
    """Map an OpenAI SDK exception onto an ``UpstreamUnavailable``.

    Returns ``None`` for exceptions that are not upstream failures.
    """
    detail = f"{type(exc).__name__}: {exc}"
    if isinstance(exc, openai.RateLimitError):
        if getattr(exc, "code", None) == "insufficient_quota":
            return UpstreamUnavailable(UpstreamReason.QUOTA_EXCEEDED, detail)
        return UpstreamUnavailable(
            UpstreamReason.RATE_LIMITED, detail, retry_after=_retry_after_seconds(exc)
        )
    # APITimeoutError subclasses APIConnectionError
    if isinstance(exc, openai.APITimeoutError):
        return UpstreamUnavailable(UpstreamReason.TIMEOUT, detail)
    if isinstance(exc, openai.APIConnectionError):
        return UpstreamUnavailable(UpstreamReason.NETWORK, detail)
    if isinstance(exc, openai.APIStatusError):
        return UpstreamUnavailable(UpstreamReason.SERVICE_ERROR, detail)
    return None


class LangChainClient(LLMServicePort):
    """
    Infrastructure-layer LLM client providing pure invoke functionality.

    No domain knowledge or prompts should be included here.
    """

    def __init__(
        self,
        model_name: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 4000,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        """Initialize LangChain client with LLM configuration."""
        llm_kwargs = {
            "model": model_name,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }

        # Add base_url if provided (for OpenAI-compatible servers)
        if base_url:
            llm_kwargs["base_url"] = base_url

        self.llm = ChatOpenAI(**llm_kwargs)
        self._text_parser = StrOutputParser()
        self._log = get_logger("infra.llm")

    async def complete(self, request: CompletionRequest) -> str:
        """Run one single-turn completion with per-call sampling bounds."""
        messages = self.create_messages(
            request.user_instruction, request.system_instruction
        )
        bound = self.llm.bind(
            temperature=request.temperature, max_tokens=request.max_output_tokens
        )
        try:
            response = await bound.ainvoke(messages)
        except openai.OpenAIError as exc:
            upstream = translate_openai_error(exc)
            if upstream is None:
                raise
            self._log.warning(
                "llm.invoke.failed",
                reason=upstream.reason.value,
                error=upstream.detail,
            )
            raise upstream from exc

        text = self._text_parser.invoke(response)
        self._log.info(
            "llm.invoke.text",
            temperature=request.temperature,
            max_tokens=request.max_output_tokens,
            chars=len(text),
        )
        return text

    def create_messages(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
    ) -> List[BaseMessage]:
        """
        Utility method to create message list for common patterns.

        Args:
            user_prompt: User's input message
            system_prompt: Optional system message

        Returns:
            List of BaseMessage objects ready for LLM invocation
        """
        messages: List[BaseMessage] = []

        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))

        messages.append(HumanMessage(content=user_prompt))

        return messages
