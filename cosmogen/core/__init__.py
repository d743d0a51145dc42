"""
Core module for cosmogen.

Contains the fundamental building blocks:
- SeededStream: Forkable deterministic random stream
- RandomGenerator: Distributions over a stream
- Topology grammar engine and built-in presets
- Celestial body model and UniverseSnapshot
- BodyMaterializer: topology tree -> bodies
"""

from .prng import SeededStream, IdFactory, create_stream, hash_label
from .distributions import RandomGenerator
from .topology import (
    GrammarError,
    GrammarDefinition,
    ProductionRule,
    RepeatDistribution,
    TopologyNode,
    NodeType,
    GrammarTopologyGenerator,
    ClassicTopologyGenerator,
)
from .presets import (
    TOPOLOGY_PRESETS,
    get_topology_preset,
    list_topology_presets,
    create_topology_generator,
)
from .bodies import BodyType, CelestialBody, Group, UniverseSnapshot
from .materializer import BodyMaterializer

__all__ = [
    "SeededStream",
    "IdFactory",
    "create_stream",
    "hash_label",
    "RandomGenerator",
    "GrammarError",
    "GrammarDefinition",
    "ProductionRule",
    "RepeatDistribution",
    "TopologyNode",
    "NodeType",
    "GrammarTopologyGenerator",
    "ClassicTopologyGenerator",
    "TOPOLOGY_PRESETS",
    "get_topology_preset",
    "list_topology_presets",
    "create_topology_generator",
    "BodyType",
    "CelestialBody",
    "Group",
    "UniverseSnapshot",
    "BodyMaterializer",
]
