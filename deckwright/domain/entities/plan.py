"""
Slide plan schema.

The plan is the structural contract between synthesis and rendering. Models
are frozen; a regenerated plan is always a new value. ``validate_plan`` is the
single entry point for untrusted input and reports problems as a list of
``ValidationIssue`` so a repair prompt can point at exact fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from typing_extensions import Annotated

MIN_SLIDES = 3
MAX_SLIDES = 30
MAX_BULLETS = 6
TITLE_MAX = 60
BULLET_MAX = 120
NOTES_MAX = 2000
PROJECT_TITLE_MAX = 120

REFERENCES_TITLE = "References"

BulletText = Annotated[str, StringConstraints(min_length=1, max_length=BULLET_MAX)]


class SlideLayout(str, Enum):
    TITLE = "title"
    TITLE_BULLETS = "title-bullets"
    SECTION = "section"
    QUOTE = "quote"
    IMAGE = "image"


class Reference(BaseModel):
    """A cited source.

    ``url`` is kept verbatim: models cite bare hosts, DOIs and relative paths
    as often as full URLs. Only http(s)-resolvable ones become hyperlinks.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str = Field(..., min_length=1, max_length=2048)
    label: Optional[str] = Field(None, min_length=1, max_length=200)


class Slide(BaseModel):
    """One rendered page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    # layout is declared before bullets so the bullets rule can see it
    layout: SlideLayout = Field(default=SlideLayout.TITLE_BULLETS)
    bullets: Optional[
        Annotated[Tuple[BulletText, ...], Field(max_length=MAX_BULLETS)]
    ] = Field(default=None, validate_default=True)
    speaker_notes: Optional[str] = Field(
        default=None, alias="speakerNotes", max_length=NOTES_MAX
    )

    @field_validator("layout", mode="before")
    @classmethod
    def _default_layout(cls, value: Any) -> Any:
        return SlideLayout.TITLE_BULLETS if value is None else value

    @field_validator("bullets")
    @classmethod
    def _bullets_required_for_title_bullets(
        cls, value: Optional[Tuple[str, ...]], info: ValidationInfo
    ) -> Optional[Tuple[str, ...]]:
        if info.data.get("layout") is SlideLayout.TITLE_BULLETS and not value:
            raise ValueError("Bullets are required for title-bullets layout")
        return value


class Plan(BaseModel):
    """The validated, structured slide-deck description."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    project_title: str = Field(
        ..., alias="projectTitle", min_length=1, max_length=PROJECT_TITLE_MAX
    )
    language: str = Field(..., min_length=2, max_length=40)
    slides: Tuple[Slide, ...] = Field(..., min_length=MIN_SLIDES, max_length=MAX_SLIDES)
    references: Optional[Tuple[Reference, ...]] = None

    @field_validator("slides")
    @classmethod
    def _unique_slide_ids(cls, slides: Tuple[Slide, ...]) -> Tuple[Slide, ...]:
        seen = set()
        for index, slide in enumerate(slides):
            if slide.id in seen:
                raise ValueError(
                    f"Duplicate slide id '{slide.id}' at position {index}"
                )
            seen.add(slide.id)
        return slides

    def has_references_slide(self) -> bool:
        target = REFERENCES_TITLE.lower()
        return any(slide.title.strip().lower() == target for slide in self.slides)


class Brief(BaseModel):
    """Synthesis request: what the user typed."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, max_length=PROJECT_TITLE_MAX)
    language: str = Field(..., min_length=2, max_length=40)
    outline: str = Field(..., min_length=1)
    theme: Optional[str] = Field(None, min_length=1)


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _issue_path(loc: Tuple[Union[int, str], ...]) -> str:
    return ".".join(str(part) for part in loc) or "(root)"


def issues_from_error(exc: ValidationError) -> List[ValidationIssue]:
    """Flatten a pydantic error into path/message pairs."""
    issues = []
    for error in exc.errors():
        message = error["msg"]
        # pydantic prefixes custom ValueErrors with "Value error, "
        if error["type"] == "value_error" and message.startswith("Value error, "):
            message = message[len("Value error, "):]
        issues.append(ValidationIssue(path=_issue_path(error["loc"]), message=message))
    return issues


def validate_plan(candidate: Any) -> Union[Plan, List[ValidationIssue]]:
    """Validate an untrusted candidate.

    Args:
        candidate: Anything; typically the dict decoded from model output.

    Returns:
        The validated ``Plan`` or a non-empty list of issues. Never raises for
        bad input.
    """
    if isinstance(candidate, Plan):
        return candidate
    try:
        return Plan.model_validate(candidate)
    except ValidationError as exc:
        return issues_from_error(exc)


def serialize_plan(plan: Plan) -> dict:
    """Wire (JSON) form of a plan, camelCase keys, unset optionals omitted."""
    return plan.model_dump(mode="json", by_alias=True, exclude_none=True)
