from .plan import (
    Brief,
    Plan,
    Reference,
    Slide,
    SlideLayout,
    ValidationIssue,
    serialize_plan,
    validate_plan,
)

__all__ = [
    "Brief",
    "Plan",
    "Reference",
    "Slide",
    "SlideLayout",
    "ValidationIssue",
    "serialize_plan",
    "validate_plan",
]
