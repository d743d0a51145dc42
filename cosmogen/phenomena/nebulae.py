"""
Galaxy-scale nebula regions.

Nebulae are either scattered uniformly inside a sphere or anchored at a
sampled angle and distance from a group center. Each nebula draws from its
own fork ('nebula-<i>').
"""

from __future__ import annotations
import math
from typing import Dict, List

from ..config import NebulaColorStyle, NebulaParams, NebulaPlacement, NebulaSizeBias
from ..core.bodies import Group, NebulaRegion, Vector3
from ..core.distributions import RandomGenerator, clamp01, range_int, range_sample
from .base import PhenomenonGenerator


# style -> [(base, accent)]
NEBULA_PALETTES: Dict[NebulaColorStyle, List[tuple]] = {
    NebulaColorStyle.EMISSION: [("#C2185B", "#FF8A80"), ("#D32F2F", "#FFAB91"), ("#AD1457", "#F48FB1")],
    NebulaColorStyle.REFLECTION: [("#1565C0", "#90CAF9"), ("#283593", "#9FA8DA"), ("#0277BD", "#81D4FA")],
    NebulaColorStyle.PLANETARY: [("#00897B", "#B388FF"), ("#00838F", "#80DEEA"), ("#6A1B9A", "#A7FFEB")],
    NebulaColorStyle.DARK: [("#1B1B1F", "#4E342E"), ("#212121", "#37474F"), ("#263238", "#3E2723")],
}

SIZE_MULTIPLIERS = {
    NebulaSizeBias.SMALL: 0.6,
    NebulaSizeBias.MEDIUM: 1.0,
    NebulaSizeBias.LARGE: 1.6,
    NebulaSizeBias.GIANT: 2.5,
}

NEBULA_NAMES = ["Veil", "Orion", "Eagle", "Lagoon", "Helix", "Carina", "Rosette", "Trifid", "Crab", "Horsehead"]


class NebulaGenerator(PhenomenonGenerator):
    """Shared galaxy pass: runs once per universe, after grouping."""

    label = "nebulae"

    def __init__(self, params: NebulaParams, rng: RandomGenerator):
        super().__init__(params, rng)

    def generate(self, groups: Dict[str, Group]) -> List[NebulaRegion]:
        if not self.enabled:
            return []

        count = max(0, range_int(self.rng, self.params.count_range))
        anchors = list(groups.values())
        return [self._make_nebula(self.rng.fork(f"nebula-{i}"), anchors, i) for i in range(count)]

    def _make_nebula(self, rng: RandomGenerator, anchors: List[Group], index: int) -> NebulaRegion:
        p = self.params
        associated = []
        if NebulaPlacement(p.placement) == NebulaPlacement.ANCHORED and anchors:
            group = rng.choice(anchors)
            angle = rng.uniform(0.0, 2.0 * math.pi)
            distance = range_sample(rng, p.anchor_distance_range)
            lift = rng.uniform(-0.25, 0.25) * distance
            position = Vector3(
                group.position.x + math.cos(angle) * distance,
                group.position.y + lift,
                group.position.z + math.sin(angle) * distance,
            )
            associated.append(group.id)
        else:
            x, y, z = rng.point_in_sphere(p.scatter_radius)
            position = Vector3(x, y, z)

        style = NebulaColorStyle(p.color_style)
        if style == NebulaColorStyle.MIXED:
            style = rng.choice(list(NEBULA_PALETTES))
        base_color, accent_color = rng.choice(NEBULA_PALETTES[style])

        radius = range_sample(rng, p.radius_range) * SIZE_MULTIPLIERS[NebulaSizeBias(p.size_bias)]
        radius = max(radius, 1e-3)
        dimensions = Vector3(
            radius * rng.uniform(0.7, 1.3),
            radius * rng.uniform(0.4, 1.0),
            radius * rng.uniform(0.7, 1.3),
        )

        name = NEBULA_NAMES[index % len(NEBULA_NAMES)]
        if index >= len(NEBULA_NAMES):
            name = f"{name} {index // len(NEBULA_NAMES) + 1}"

        return NebulaRegion(
            id=self.new_id(),
            name=f"{name} Nebula",
            position=position,
            radius=radius,
            dimensions=dimensions,
            density=clamp01(range_sample(rng, p.density_range)),
            brightness=clamp01(range_sample(rng, p.brightness_range)),
            base_color=base_color,
            accent_color=accent_color,
            noise_scale=range_sample(rng, p.noise_scale_range),
            noise_detail=range_int(rng, p.noise_detail_range),
            seed=rng.seed_value(),
            associated_group_ids=associated,
        )
