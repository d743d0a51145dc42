"""
Small-body belts as particle-field aggregates.

Main belts sit in a fractional sub-range of the gap between two consecutive
planet orbits, or beyond the outermost planet. Kuiper belts span a radial
multiplier range of the outermost planet's distance and are always icy.

Particle count = clamp(geometric(p), min_count, max_count).
"""

from __future__ import annotations
from typing import Dict, List

from ..config import BeltParams, BeltPlacementMode, KuiperParams
from ..core.bodies import CelestialBody, SmallBodyField
from ..core.distributions import RandomGenerator, clamp, clamp01, range_sample
from .base import PhenomenonGenerator, planets_of


ROCKY_PALETTE = ["#8B7D6B", "#7A6A5A", "#9C8B78", "#6E6259"]
ROCKY_HIGHLIGHT = "#C8B89A"
ICY_PALETTE = ["#A8C8E8", "#B0D0F0", "#C8D8E8", "#9FB8D0"]
ICY_HIGHLIGHT = "#E8F4FF"

MIN_BELT_WIDTH = 1e-3


def belt_style(thickness: float, bounds) -> str:
    """Style bucket from where thickness falls inside its sampling range."""
    low, high = bounds
    t = 0.5 if high <= low else (thickness - low) / (high - low)
    if t < 0.25:
        return "thin"
    if t < 0.6:
        return "moderate"
    if t < 0.9:
        return "thick"
    return "scattered"


class _FieldBuilder(PhenomenonGenerator):
    """Common particle-field sampling for main and Kuiper belts."""

    belt_type = "main"
    is_icy = False

    def _particle_count(self) -> int:
        p = self.params
        raw = self.rng.geometric(p.asteroid_geometric_p)
        return int(clamp(raw, p.min_count, p.max_count))

    def _build(
        self,
        host: CelestialBody,
        inner: float,
        outer: float,
        region_label: str,
        name: str,
    ) -> SmallBodyField:
        p = self.params
        if outer <= inner:
            outer = inner + MIN_BELT_WIDTH

        particle_count = self._particle_count()
        thickness = range_sample(self.rng, p.thickness_range)
        palette = ICY_PALETTE if self.is_icy else ROCKY_PALETTE
        base_color = self.rng.choice(palette)

        return SmallBodyField(
            id=self.new_id(),
            system_id=host.id,
            host_star_id=host.id,
            inner_radius=inner,
            outer_radius=outer,
            thickness=max(0.0, thickness),
            particle_count=particle_count,
            base_color=base_color,
            highlight_color=ICY_HIGHLIGHT if self.is_icy else ROCKY_HIGHLIGHT,
            opacity=clamp01(range_sample(self.rng, p.opacity_range)),
            brightness=max(0.0, range_sample(self.rng, p.brightness_range)),
            clumpiness=clamp01(range_sample(self.rng, p.clumpiness_range)),
            rotation_speed_multiplier=range_sample(self.rng, p.rotation_speed_range),
            belt_type=self.belt_type,
            region_label=region_label,
            is_icy=self.is_icy,
            seed=self.rng.seed_value(),
            style=belt_style(thickness, p.thickness_range),
            eccentricity=clamp(range_sample(self.rng, p.eccentricity_range), 0.0, 0.99),
            inclination_sigma=getattr(p, "inclination_sigma", None),
            name=name,
        )


class BeltGenerator(_FieldBuilder):
    """
    Main asteroid belts.

    Example:
        gen = BeltGenerator(config.belts, master.fork("belts"))
        fields = gen.generate(bodies, root_id)
    """

    label = "belts"

    def __init__(self, params: BeltParams, rng: RandomGenerator):
        super().__init__(params, rng)

    @property
    def enabled(self) -> bool:
        return self.params.enable_asteroid_belts

    def generate(self, bodies: Dict[str, CelestialBody], host_id: str) -> List[SmallBodyField]:
        host = self.host(bodies, host_id)
        if not self.enabled:
            return []

        p = self.params
        mode = BeltPlacementMode(p.placement_mode)
        limit = max(0, p.max_belts_per_system)
        planets = planets_of(bodies, host)
        fields: List[SmallBodyField] = []

        if mode in (BeltPlacementMode.BETWEEN_PLANETS, BeltPlacementMode.BOTH):
            frac_lo, frac_hi = sorted(p.gap_fraction)
            for inner_planet, outer_planet in zip(planets, planets[1:]):
                if len(fields) >= limit:
                    break
                if not self.rng.bool(p.gap_probability):
                    continue
                start = inner_planet.orbital_distance
                gap = outer_planet.orbital_distance - start
                if gap <= 0:
                    continue
                fields.append(self._build(
                    host,
                    start + gap * frac_lo,
                    start + gap * frac_hi,
                    region_label=f"{inner_planet.name}-{outer_planet.name} gap",
                    name=f"{host.name} Belt {len(fields) + 1}",
                ))

        if (mode in (BeltPlacementMode.OUTER_BELT, BeltPlacementMode.BOTH)
                and planets and len(fields) < limit):
            if self.rng.bool(p.outer_belt_probability):
                edge = planets[-1].orbital_distance
                lo, hi = sorted(p.outer_distance_range)
                fields.append(self._build(
                    host,
                    edge * lo,
                    edge * hi,
                    region_label="outer",
                    name=f"{host.name} Belt {len(fields) + 1}",
                ))

        return fields


class KuiperBeltGenerator(_FieldBuilder):
    """Icy outer belt beyond the planets, gated by a probability roll."""

    label = "kuiper"
    belt_type = "kuiper"
    is_icy = True

    def __init__(self, params: KuiperParams, rng: RandomGenerator):
        super().__init__(params, rng)

    def generate(self, bodies: Dict[str, CelestialBody], host_id: str) -> List[SmallBodyField]:
        host = self.host(bodies, host_id)
        if not self.enabled:
            return []

        planets = planets_of(bodies, host)
        if not planets:
            return []
        if not self.rng.bool(self.params.probability):
            return []

        edge = planets[-1].orbital_distance
        lo, hi = sorted(self.params.radial_range)
        return [self._build(
            host,
            edge * lo,
            edge * hi,
            region_label="kuiper",
            name=f"{host.name} Kuiper Belt",
        )]
