"""
cosmogen

A deterministic procedural generator of hierarchical celestial systems.
One seed drives a forkable random stream; every generation stage draws from
its own labelled fork, so results are reproducible and stages are independent.

Main components:
- core: PRNG, distributions, topology grammar, body model, materializer
- phenomena: Rings, belts, comets, Lagrange points, disks, nebulae, rogues, black holes
- orchestration: Typed stage pipeline, grouping, single/multi-system generation
- analysis: Generation statistics, structural integrity checks
- visualization: Orbit maps, summary plots
- storage: JSON persistence
"""

__version__ = "0.1.0"
__author__ = "cosmogen team"

from .config import GeneratorConfig
from .core import UniverseSnapshot, SeededStream, RandomGenerator
from .orchestration import (
    generate_solar_system,
    generate_multiple_systems,
    generate_universe,
)

__all__ = [
    "GeneratorConfig",
    "UniverseSnapshot",
    "SeededStream",
    "RandomGenerator",
    "generate_solar_system",
    "generate_multiple_systems",
    "generate_universe",
]
