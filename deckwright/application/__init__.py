"""
Application layer - use cases and orchestration.

Coordinates the plan schema, the language model and the renderer to turn a
brief into a stored plan and a plan into a document.
"""

from .use_cases.export_project import ExportProjectUseCase
from .use_cases.generate_project_plan import GenerateProjectPlanUseCase
from .use_cases.synthesize_plan import PlanSynthesizer, SynthesisOptions

__all__ = [
    "ExportProjectUseCase",
    "GenerateProjectPlanUseCase",
    "PlanSynthesizer",
    "SynthesisOptions",
]
