"""
Built-in topology presets.

Notation used in the preset docstrings:
    S system, ★ star, ● planet, ◦ moon, · sub-moon
    {n} exactly n, {n,m} uniform in [n, m], * geometric, ε no offspring
"""

from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .topology import (
    ClassicTopologyGenerator,
    GrammarDefinition,
    GrammarError,
    GrammarTopologyGenerator,
    ProductionRule,
    RepeatDistribution,
    TopologyGenerator,
)

if TYPE_CHECKING:
    from ..config import GeneratorConfig


DEFAULT_TOPOLOGY_PRESET = "classic"


@dataclass
class TopologyPreset:
    """Named grammar plus the parameter overrides it pairs well with."""
    id: str
    name: str
    description: str
    grammar: GrammarDefinition
    suggested_overrides: Dict[str, Any] = field(default_factory=dict)


def _terminal() -> List[ProductionRule]:
    return [ProductionRule(weight=1.0, expand=[])]


# S → ★{1-3} ●*,  ● → ◦*
CLASSIC = TopologyPreset(
    id="classic",
    name="Classic",
    description="Standard L-system topology: 1-3 stars, geometric planet/moon distribution",
    grammar=GrammarDefinition(
        axiom=["system"],
        productions={
            "system": [ProductionRule(1.0, ["stars", "planets"])],
            "stars": [ProductionRule(1.0, ["star"], max_count=3)],
            "planets": [ProductionRule(1.0, ["planet"], repeat=RepeatDistribution.geometric(0.4))],
            "planet": [ProductionRule(1.0, ["moons"])],
            "moons": [ProductionRule(1.0, ["moon"], repeat=RepeatDistribution.geometric(0.3))],
            "star": _terminal(),
            "moon": _terminal(),
        },
        max_depth=4,
        star_count=(0.65, 0.25, 0.10),
    ),
)

# S → ★{1} ●{1,2},  ● → ◦{5-18}
COMPACT = TopologyPreset(
    id="compact",
    name="Compact",
    description="Only 1-2 planets but each has 5-18 moons - Jupiter-like systems",
    grammar=GrammarDefinition(
        axiom=["system"],
        productions={
            "system": [ProductionRule(1.0, ["stars", "planets"])],
            "stars": [ProductionRule(1.0, ["star"], max_count=1)],
            "planets": [ProductionRule(1.0, ["planet"], repeat=RepeatDistribution.uniform(1, 2))],
            "planet": [ProductionRule(1.0, ["moons"])],
            "moons": [ProductionRule(1.0, ["moon"], repeat=RepeatDistribution.geometric(0.08),
                                     min_count=5, max_count=18)],
            "star": _terminal(),
            "moon": _terminal(),
        },
        max_depth=4,
        star_count=(1.0, 0.0, 0.0),
        default_planet_geometric_p=0.9,
        default_moon_geometric_p=0.08,
    ),
    suggested_overrides={
        "planet_geometric_p": 0.9,
        "moon_geometric_p": 0.08,
        "star_probabilities": (1.0, 0.0, 0.0),
    },
)

# S → ★{1-3} ●{1-4},  ● → [70%: ◦{1-3}] | [30%: ε]
MULTI_STAR_HEAVY = TopologyPreset(
    id="multiStarHeavy",
    name="Multi-Star Heavy",
    description="95% binary/ternary systems! Stars are the focus, fewer planets",
    grammar=GrammarDefinition(
        axiom=["system"],
        productions={
            "system": [ProductionRule(1.0, ["stars", "planets"])],
            "stars": [ProductionRule(1.0, ["star"], max_count=3)],
            "planets": [ProductionRule(1.0, ["planet"], repeat=RepeatDistribution.uniform(1, 4))],
            "planet": [
                ProductionRule(0.7, ["moons"]),
                ProductionRule(0.3, []),
            ],
            "moons": [ProductionRule(1.0, ["moon"], repeat=RepeatDistribution.uniform(1, 3))],
            "star": _terminal(),
            "moon": _terminal(),
        },
        max_depth=4,
        star_count=(0.05, 0.55, 0.40),
        default_planet_geometric_p=0.6,
        default_moon_geometric_p=0.5,
    ),
    suggested_overrides={
        "star_probabilities": (0.05, 0.55, 0.40),
        "planet_geometric_p": 0.6,
        "moon_geometric_p": 0.5,
    },
)

# S → ★{1} ●{3-6},  ● → ◦{4-25}
MOON_RICH = TopologyPreset(
    id="moonRich",
    name="Moon-Rich",
    description="Every planet has 4-25 moons! Systems swimming in satellites",
    grammar=GrammarDefinition(
        axiom=["system"],
        productions={
            "system": [ProductionRule(1.0, ["stars", "planets"])],
            "stars": [ProductionRule(1.0, ["star"], max_count=1)],
            "planets": [ProductionRule(1.0, ["planet"], repeat=RepeatDistribution.uniform(3, 6))],
            "planet": [ProductionRule(1.0, ["moons"])],
            "moons": [ProductionRule(1.0, ["moon"], repeat=RepeatDistribution.geometric(0.05),
                                     min_count=4, max_count=25)],
            "star": _terminal(),
            "moon": _terminal(),
        },
        max_depth=4,
        star_count=(1.0, 0.0, 0.0),
        default_planet_geometric_p=0.3,
        default_moon_geometric_p=0.05,
    ),
    suggested_overrides={
        "star_probabilities": (1.0, 0.0, 0.0),
        "planet_geometric_p": 0.3,
        "moon_geometric_p": 0.05,
    },
)

# S → ★{1} [15%: ε | 60%: ●{1} | 25%: ●{2}],  ● → [75%: ε] | [25%: ◦{1|2}]
SPARSE_OUTPOST = TopologyPreset(
    id="sparseOutpost",
    name="Sparse Outpost",
    description="Ultra-minimal: 1 star, 0-2 planets, most have no moons - lonely frontier",
    grammar=GrammarDefinition(
        axiom=["system"],
        productions={
            "system": [ProductionRule(1.0, ["stars", "planets"])],
            "stars": [ProductionRule(1.0, ["star"], max_count=1)],
            "planets": [
                ProductionRule(0.15, []),
                ProductionRule(0.60, ["planet"], repeat=RepeatDistribution.fixed(1)),
                ProductionRule(0.25, ["planet"], repeat=RepeatDistribution.fixed(2)),
            ],
            "planet": [
                ProductionRule(0.75, []),
                ProductionRule(0.25, ["moons"]),
            ],
            "moons": [
                ProductionRule(0.85, ["moon"], repeat=RepeatDistribution.fixed(1)),
                ProductionRule(0.15, ["moon"], repeat=RepeatDistribution.fixed(2)),
            ],
            "star": _terminal(),
            "moon": _terminal(),
        },
        max_depth=3,
        star_count=(1.0, 0.0, 0.0),
        default_planet_geometric_p=0.95,
        default_moon_geometric_p=0.95,
    ),
    suggested_overrides={
        "star_probabilities": (1.0, 0.0, 0.0),
        "planet_geometric_p": 0.95,
        "moon_geometric_p": 0.95,
        "max_depth": 3,
    },
)

# S → ★{1} ●{2-5},  ● → ◦{2-6},  ◦ → [50%: ε] | [50%: ·{1-4}]
DEEP_HIERARCHY = TopologyPreset(
    id="deepHierarchy",
    name="Deep Hierarchy",
    description="50% of moons have sub-moons (1-4 each)! Nested orbital structures",
    grammar=GrammarDefinition(
        axiom=["system"],
        productions={
            "system": [ProductionRule(1.0, ["stars", "planets"])],
            "stars": [ProductionRule(1.0, ["star"], max_count=1)],
            "planets": [ProductionRule(1.0, ["planet"], repeat=RepeatDistribution.uniform(2, 5))],
            "planet": [ProductionRule(1.0, ["moons"])],
            "moons": [ProductionRule(1.0, ["moon"], repeat=RepeatDistribution.uniform(2, 6))],
            "moon": [
                ProductionRule(0.5, []),
                ProductionRule(0.5, ["submoons"]),
            ],
            "submoons": [ProductionRule(1.0, ["submoon"], repeat=RepeatDistribution.uniform(1, 4))],
            "submoon": _terminal(),
            "star": _terminal(),
        },
        max_depth=6,
        star_count=(1.0, 0.0, 0.0),
        allow_sub_moons=True,
        default_planet_geometric_p=0.35,
        default_moon_geometric_p=0.25,
    ),
    suggested_overrides={
        "star_probabilities": (1.0, 0.0, 0.0),
        "planet_geometric_p": 0.35,
        "moon_geometric_p": 0.25,
        "max_depth": 6,
    },
)


TOPOLOGY_PRESETS: Dict[str, TopologyPreset] = {
    preset.id: preset
    for preset in (CLASSIC, COMPACT, MULTI_STAR_HEAVY, MOON_RICH, SPARSE_OUTPOST, DEEP_HIERARCHY)
}


def get_topology_preset(preset_id: str) -> TopologyPreset:
    """Look up a preset; unknown ids are a hard error."""
    try:
        return TOPOLOGY_PRESETS[preset_id]
    except KeyError:
        known = ", ".join(TOPOLOGY_PRESETS)
        raise GrammarError(f"Unknown topology preset '{preset_id}' (known: {known})") from None


def list_topology_presets() -> List[Dict[str, str]]:
    """(id, name, description) of every preset, in registration order."""
    return [
        {"id": p.id, "name": p.name, "description": p.description}
        for p in TOPOLOGY_PRESETS.values()
    ]


def create_topology_generator(
    preset_id: str = DEFAULT_TOPOLOGY_PRESET,
    new_id: Optional[Callable[[], str]] = None,
) -> TopologyGenerator:
    """
    Select the interpreter for a preset.

    'classic' keeps the legacy hard-coded path; everything else runs through
    the general grammar interpreter.
    """
    preset = get_topology_preset(preset_id)
    if preset.id == "classic":
        return ClassicTopologyGenerator(new_id=new_id)
    return GrammarTopologyGenerator(preset.grammar, preset_id=preset.id, new_id=new_id)


def apply_suggested_overrides(config: "GeneratorConfig", preset_id: str) -> "GeneratorConfig":
    """
    Return a copy of config using the preset and its suggested parameters.

    Example:
        config = apply_suggested_overrides(GeneratorConfig(), "moonRich")
    """
    preset = get_topology_preset(preset_id)
    result = copy.deepcopy(config)
    result.topology_preset = preset.id
    for key, value in preset.suggested_overrides.items():
        setattr(result, key, value)
    return result
