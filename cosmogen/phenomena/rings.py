"""
Planetary rings.

Each planet gets one Bernoulli trial whose probability grows with mass and
with orbital rank:

    p = base + mass_boost * m / (m + mass_reference)
             + distance_boost * rank / (n - 1)

clamped to [0, 1]. Ring radii are planet-radius multiples with
outer > inner + min_gap and inner > 1.
"""

from __future__ import annotations
from typing import Dict, List

from ..config import RingParams
from ..core.bodies import CelestialBody, PlanetaryRing
from ..core.distributions import RandomGenerator, clamp01, range_sample
from .base import PhenomenonGenerator, perturb_color, planets_of, safe_number


MIN_INNER_MULTIPLIER = 1.05
RING_EPSILON = 1e-3


class RingGenerator(PhenomenonGenerator):
    """Attach optional ring metadata to the planets of one system."""

    label = "rings"

    def __init__(self, params: RingParams, rng: RandomGenerator):
        super().__init__(params, rng)

    def ring_probability(self, mass: float, rank: int, count: int) -> float:
        p = self.params
        mass_term = mass / (mass + p.mass_reference) if mass + p.mass_reference > 0 else 0.0
        distance_term = rank / (count - 1) if count > 1 else 0.0
        prob = p.base_probability + p.mass_boost * mass_term + p.distance_boost * distance_term
        return clamp01(safe_number(prob))

    def generate(self, bodies: Dict[str, CelestialBody], host_id: str) -> List[str]:
        """Returns ids of the planets that received a ring."""
        host = self.host(bodies, host_id)
        if not self.enabled:
            return []

        planets = planets_of(bodies, host)
        ringed = []
        for rank, planet in enumerate(planets):
            if not self.rng.bool(self.ring_probability(planet.mass, rank, len(planets))):
                continue
            planet.ring = self._make_ring(planet)
            ringed.append(planet.id)
        return ringed

    def _make_ring(self, planet: CelestialBody) -> PlanetaryRing:
        p = self.params
        inner = max(range_sample(self.rng, p.inner_radius_range), MIN_INNER_MULTIPLIER)
        outer = inner + range_sample(self.rng, p.width_range)
        if outer <= inner + p.min_gap:
            outer = inner + p.min_gap + RING_EPSILON

        return PlanetaryRing(
            inner_radius_multiplier=inner,
            outer_radius_multiplier=outer,
            thickness=max(0.0, range_sample(self.rng, p.thickness_range)),
            opacity=clamp01(range_sample(self.rng, p.opacity_range)),
            albedo=clamp01(range_sample(self.rng, p.albedo_range)),
            color=perturb_color(self.rng, planet.color, p.color_jitter),
            density=clamp01(range_sample(self.rng, p.density_range)),
            seed=self.rng.seed_value(),
        )
