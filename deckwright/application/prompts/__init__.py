"""
Prompt templates for language-model calls.
"""

from .plan_synthesis import PlanSynthesisPrompts

__all__ = ["PlanSynthesisPrompts"]
