"""
Comets on eccentric orbits around a system center.

Each comet draws from its own fork ('comet-<i>'), so adding comets never
changes the ones before it. Semi-major axes are relative to the outermost
planet; short-period comets get a 0.5x multiplier.
"""

from __future__ import annotations
import math
from typing import Dict, List

from ..config import CometParams
from ..core.bodies import CelestialBody, CometBody, CometMeta
from ..core.distributions import RandomGenerator, clamp, clamp01, range_int, range_sample
from .base import PhenomenonGenerator, add_body, planets_of


ECC_MIN = 0.001  # keeps perihelion strictly below aphelion
ECC_MAX = 0.99

COMET_COLORS = ["#DDEEFF", "#E8E8E8", "#CFE8FF", "#F0F0E0"]
TAIL_COLORS = ["#B0E0FF", "#E0F0FF", "#A0FFE0", "#FFFFFF"]


class CometGenerator(PhenomenonGenerator):
    """
    Per-system comet population.

    Args:
        params: Comet section of the config
        rng: 'comets' stream
        orbit_k: Speed constant (speed = k / sqrt(a))
        fallback_distance: Reference distance for systems without planets
        radius_power: Radius exponent shared with the materializer
    """

    label = "comets"

    def __init__(
        self,
        params: CometParams,
        rng: RandomGenerator,
        orbit_k: float = 20.0,
        fallback_distance: float = 5.832,
        radius_power: float = 0.4,
    ):
        super().__init__(params, rng)
        self.orbit_k = orbit_k
        self.fallback_distance = fallback_distance
        self.radius_power = radius_power

    def generate(self, bodies: Dict[str, CelestialBody], host_id: str) -> List[CometBody]:
        host = self.host(bodies, host_id)
        if not self.enabled:
            return []

        planets = planets_of(bodies, host)
        reference = planets[-1].orbital_distance if planets else self.fallback_distance
        count = max(0, range_int(self.rng, self.params.count_range))

        comets = []
        for i in range(count):
            comet = self._make_comet(self.rng.fork(f"comet-{i}"), host, reference, i)
            comets.append(add_body(bodies, comet))
        return comets

    def _make_comet(
        self,
        rng: RandomGenerator,
        host: CelestialBody,
        reference: float,
        index: int,
    ) -> CometBody:
        p = self.params
        is_short = rng.bool(p.short_period_probability)
        a = reference * range_sample(rng, p.distance_range)
        if is_short:
            a *= p.short_period_multiplier
        a = max(a, 1e-3)
        e = clamp(range_sample(rng, p.eccentricity_range), ECC_MIN, ECC_MAX)

        inclination = [rng.uniform(-p.inclination_max, p.inclination_max) for _ in range(3)]
        perihelion = a * (1.0 - e)
        aphelion = a * (1.0 + e)

        activity = clamp01(p.activity)
        has_tail = rng.bool(0.5 + 0.5 * activity)
        mass = range_sample(rng, p.mass_range)
        meta = CometMeta(
            is_periodic=is_short,
            perihelion_distance=perihelion,
            aphelion_distance=aphelion,
            has_tail=has_tail,
            tail_length_base=range_sample(rng, p.tail_length_range) * (0.5 + activity),
            tail_width_base=range_sample(rng, p.tail_width_range),
            tail_color=rng.choice(TAIL_COLORS),
            tail_opacity_base=clamp01(0.3 + 0.6 * activity * rng.float()),
            activity_falloff_distance=perihelion + (aphelion - perihelion) * 0.25,
            seed=rng.seed_value(),
        )

        return CometBody(
            id=self.new_id(),
            name=f"Comet {host.name} {index + 1}",
            mass=mass,
            radius=max(0.02, math.pow(mass, self.radius_power) * 0.15),
            color=rng.choice(COMET_COLORS),
            parent_id=host.id,
            orbital_distance=a,
            orbital_speed=self.orbit_k / math.sqrt(a),
            orbital_phase=rng.uniform(0.0, 360.0),
            semi_major_axis=a,
            eccentricity=e,
            orbit_offset_x=-a * e,
            orbit_rot_x=inclination[0] or None,
            orbit_rot_y=inclination[1] or None,
            orbit_rot_z=inclination[2] or None,
            comet=meta,
        )
