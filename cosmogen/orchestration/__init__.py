"""
Orchestration module for cosmogen.

Wires the generators into stage pipelines and exposes the public
generation entry points.
"""

from .pipeline import Pipeline, PipelineError, Stage
from .groups import GroupGenerator
from .universe import (
    generate_solar_system,
    generate_multiple_systems,
    generate_universe,
    build_system_pipeline,
)

__all__ = [
    "Pipeline",
    "PipelineError",
    "Stage",
    "GroupGenerator",
    "generate_solar_system",
    "generate_multiple_systems",
    "generate_universe",
    "build_system_pipeline",
]
