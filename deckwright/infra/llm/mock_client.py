"""
Mock LLM client for development and testing purposes.
"""

import json
import re
from typing import List

from deckwright.application.plan_parsing import extract_json_object
from deckwright.application.ports import CompletionRequest, LLMServicePort

_TITLE_PATTERN = re.compile(r'Project Title: "(?P<title>[^"\n]+)"')
_LANGUAGE_PATTERN = re.compile(r"Language: (?P<language>\S+)")


class MockLLMClient(LLMServicePort):
    """Mock LLM client that returns fake but schema-valid responses."""

    def __init__(self) -> None:
        self.requests: List[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> str:
        self.requests.append(request)
        if "JSON" not in request.system_instruction:
            return (
                "This topic matters because it connects everyday observations "
                "to the principles behind them. A clear structure helps the "
                "audience follow each step."
            )
        if not _TITLE_PATTERN.search(request.user_instruction):
            # refinement: echo the submitted plan back unchanged
            return json.dumps(extract_json_object(request.user_instruction))
        return "Here is your plan:\n" + json.dumps(self._plan(request.user_instruction))

    def _plan(self, prompt: str) -> dict:
        title_match = _TITLE_PATTERN.search(prompt)
        language_match = _LANGUAGE_PATTERN.search(prompt)
        title = (title_match.group("title") if title_match else "Sample Deck")[:60]
        return {
            "projectTitle": title,
            "language": language_match.group("language") if language_match else "en",
            "slides": [
                {"id": "slide-1", "title": title, "layout": "title"},
                {
                    "id": "slide-2",
                    "title": "Overview",
                    "bullets": ["Why it matters", "Key ideas", "What comes next"],
                },
                {
                    "id": "slide-3",
                    "title": "Key Ideas",
                    "layout": "section",
                    "speakerNotes": "The core concepts in brief",
                },
                {
                    "id": "slide-4",
                    "title": "Summary",
                    "bullets": ["Recap of the main points"],
                },
            ],
            "references": [
                {"url": "https://en.wikipedia.org/wiki/Presentation", "label": "Wikipedia"}
            ],
        }
