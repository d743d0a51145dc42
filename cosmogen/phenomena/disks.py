"""
Protoplanetary disks: visual-only gas/dust fields around young stars.
"""

from __future__ import annotations
from typing import Dict, List

from ..config import DiskParams
from ..core.bodies import CelestialBody, ProtoplanetaryDisk
from ..core.distributions import RandomGenerator, clamp, clamp01, range_int, range_sample
from .base import PhenomenonGenerator


DISK_STYLES = ["thin", "moderate", "thick", "extreme"]

# style -> (thickness multiplier, particle multiplier)
STYLE_SCALING = {
    "thin": (0.5, 0.8),
    "moderate": (1.0, 1.0),
    "thick": (1.6, 1.2),
    "extreme": (2.4, 1.5),
}

# (base, highlight)
DISK_PALETTES = [
    ("#D2691E", "#FFD39B"),
    ("#CD853F", "#FFE4B5"),
    ("#B5651D", "#FFDAB9"),
    ("#A0522D", "#F4A460"),
    ("#8B6F5A", "#F5DEB3"),
]

MIN_INNER_RADIUS = 0.05


class ProtoplanetaryDiskGenerator(PhenomenonGenerator):
    """One optional disk per system, gated by a probability roll."""

    label = "protoplanetaryDisks"

    def __init__(self, params: DiskParams, rng: RandomGenerator):
        super().__init__(params, rng)

    def generate(self, bodies: Dict[str, CelestialBody], host_id: str) -> List[ProtoplanetaryDisk]:
        host = self.host(bodies, host_id)
        if not self.enabled:
            return []
        if not self.rng.bool(self.params.probability):
            return []
        return [self._make_disk(host)]

    def _pick_style(self) -> str:
        weights = self.params.style_weights
        styles = [s for s in DISK_STYLES if weights.get(s, 0.0) > 0]
        if not styles:
            return "moderate"
        return self.rng.weighted(styles, [weights[s] for s in styles])

    def _make_disk(self, host: CelestialBody) -> ProtoplanetaryDisk:
        p = self.params
        rng = self.rng
        style = self._pick_style()
        thickness_scale, particle_scale = STYLE_SCALING[style]

        inner = max(range_sample(rng, p.inner_radius_range), MIN_INNER_RADIUS)
        outer = max(range_sample(rng, p.outer_radius_range), inner * 1.5)
        particles = range_int(rng, p.particle_count_range) * particle_scale
        base_color, highlight = rng.choice(DISK_PALETTES)

        return ProtoplanetaryDisk(
            id=self.new_id(),
            system_id=host.id,
            central_star_id=host.id,
            inner_radius=inner,
            outer_radius=outer,
            thickness=max(0.0, range_sample(rng, p.thickness_range) * thickness_scale),
            particle_count=int(clamp(particles, 0, p.max_particle_count)),
            base_color=base_color,
            highlight_color=highlight,
            opacity=clamp01(range_sample(rng, p.opacity_range)),
            brightness=max(0.0, range_sample(rng, p.brightness_range)),
            clumpiness=clamp01(range_sample(rng, p.clumpiness_range)),
            rotation_speed_multiplier=range_sample(rng, p.rotation_speed_range),
            seed=rng.seed_value(),
            style=style,
            name=f"{host.name} Disk",
            band_strength=rng.uniform(0.0, 1.0),
            band_frequency=rng.uniform(2.0, 10.0),
            gap_sharpness=rng.uniform(0.2, 0.9),
            inner_glow_strength=rng.uniform(0.2, 0.8),
            noise_scale=rng.uniform(0.5, 3.0),
            noise_strength=rng.uniform(0.1, 0.6),
            spiral_strength=rng.uniform(0.3, 0.8) if style == "extreme" else rng.uniform(0.0, 0.3),
            spiral_arm_count=rng.randint(2, 4),
            edge_softness=rng.uniform(0.2, 0.7),
            temperature_gradient=rng.uniform(0.5, 2.0),
        )
