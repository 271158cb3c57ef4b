"""
Slide plan synthesis prompts.

Contains all prompt templates for plan generation, repair, refinement and
topic comments.
"""

import json
from typing import Sequence

from deckwright.domain.entities.plan import (
    BULLET_MAX,
    MAX_BULLETS,
    MAX_SLIDES,
    MIN_SLIDES,
    REFERENCES_TITLE,
    TITLE_MAX,
    Brief,
    Plan,
    SlideLayout,
    ValidationIssue,
    serialize_plan,
)

_LAYOUTS = ", ".join(f'"{layout.value}"' for layout in SlideLayout)


def _language_name(language: str) -> str:
    return "English" if language.lower() == "en" else language


class PlanSynthesisPrompts:
    """Centralized prompt templates for slide plan synthesis."""

    @staticmethod
    def get_system_prompt() -> str:
        """System prompt fixing the hard constraints of a slide plan."""
        return f"""
You are an expert presentation architect. Given a project title, language and
outline, return a normalized JSON slide plan.

Key requirements:
- Between {MIN_SLIDES} and {MAX_SLIDES} slides; aim for 8-12 unless the outline forces fewer
- Each slide MUST have a unique "id" field (e.g. "slide-1", "slide-2")
- Titles must be at most {TITLE_MAX} characters
- Bullets must be at most {BULLET_MAX} characters each, at most {MAX_BULLETS} per slide
- Allowed layouts: {_LAYOUTS}
- Bullets are required for the "title-bullets" layout
- Add section divider slides where they help the structure
- End with a "{REFERENCES_TITLE}" slide and a top-level "references" list of
  objects with "url" and optional "label"
- Return pure JSON only, no code fences or markdown

Return ONLY a JSON object with keys: projectTitle, language, slides[], references[].
Each slide has: id, title, bullets (optional), speakerNotes (optional), layout (optional).
"""

    @staticmethod
    def get_user_prompt(brief: Brief) -> str:
        """User prompt carrying the brief."""
        return f"""
Project Title: "{brief.title}"
Language: {brief.language}
Presentation Outline (bullets):
{brief.outline}

Write every slide in {_language_name(brief.language)}. Each slide must have a
unique "id" field (e.g. "slide-1", "slide-2").
"""

    @staticmethod
    def get_repair_prompt(
        original_prompt: str, invalid_output: str, issues: Sequence[ValidationIssue]
    ) -> str:
        """Follow-up prompt asking for a corrected object."""
        problems = "\n".join(f"- {issue}" for issue in issues) or "- (no JSON object found)"
        return f"""
The previous response was not a valid slide plan. Please fix it.

Original request:
{original_prompt}

Invalid response:
{invalid_output}

Problems:
{problems}

Please return ONLY the corrected JSON object.
"""

    @staticmethod
    def get_refine_system_prompt() -> str:
        return """
You are a meticulous fact-checker for presentation content. You keep the JSON
structure of a slide plan intact while improving its accuracy.
"""

    @staticmethod
    def get_refine_prompt(plan: Plan) -> str:
        """Fact-checking instruction for an accepted plan."""
        payload = json.dumps(serialize_plan(plan), ensure_ascii=False, indent=2)
        return f"""
Review this slide plan:
{payload}

- Correct unverified or inaccurate claims
- Ensure a "{REFERENCES_TITLE}" slide exists listing 5-10 credible sources
- Ensure the top-level "references" list holds canonical URLs for those sources
- Keep every slide id, the slide order and all length limits unchanged

Return ONLY the corrected JSON object.
"""

    @staticmethod
    def get_comment_system_prompt() -> str:
        return (
            "You are an expert presentation consultant. Provide brief, insightful "
            "comments about presentation topics that highlight their importance "
            "and relevance."
        )

    @staticmethod
    def get_comment_prompt(brief: Brief) -> str:
        return f"""
Project Title: "{brief.title}"
Language: {brief.language}
Presentation Outline:
{brief.outline}

Please provide a brief, insightful comment about this topic. The comment should be:
- 2-3 sentences long
- Professional and engaging
- Relevant to the topic and outline
- Written in {_language_name(brief.language)}
- Focused on why this topic is important or interesting

Comment:
"""
