"""
Helpers turning raw model text into a plan candidate.
"""

import copy
import json
from typing import Any, Dict, Iterator, Sequence

from deckwright.domain.entities.plan import ValidationIssue
from deckwright.domain.exceptions import ExtractionError

_decoder = json.JSONDecoder()


def _top_level_braces(text: str) -> Iterator[int]:
    """Yield offsets of ``{`` that open at brace depth zero.

    Braces inside JSON strings are ignored once an object is open; prose
    outside any object is not string-tracked, so stray quotes there are
    harmless.
    """
    depth = 0
    in_string = escaped = False
    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == "{":
            if depth == 0:
                yield index
            depth += 1
        elif char == "}" and depth:
            depth -= 1
        elif char == '"' and depth:
            in_string = True


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the first top-level JSON object embedded in ``text``.

    Surrounding prose, code fences and balanced stray braces are skipped.
    Objects nested inside a malformed or truncated outer object are never
    promoted to the result. Raises ``ExtractionError`` when no decodable
    top-level object exists.
    """
    if not text:
        raise ExtractionError("empty response")

    for start in _top_level_braces(text):
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value

    raise ExtractionError(f"no complete JSON object in {len(text)} chars of output")


def normalize_slide_ids(candidate: Any) -> Any:
    """Assign ``slide-{n}`` to slides without an id, by 1-based position.

    Works on a copy and never reorders. Non-dict candidates and candidates
    without a slide list are returned unchanged for the validator to reject.
    """
    if not isinstance(candidate, dict) or not isinstance(candidate.get("slides"), list):
        return candidate

    normalized = copy.deepcopy(candidate)
    for index, slide in enumerate(normalized["slides"]):
        if not isinstance(slide, dict):
            continue
        slide_id = slide.get("id")
        if slide_id is None or (isinstance(slide_id, str) and not slide_id.strip()):
            slide["id"] = f"slide-{index + 1}"
    return normalized


def format_issues(issues: Sequence[ValidationIssue]) -> str:
    return "\n".join(str(issue) for issue in issues)
