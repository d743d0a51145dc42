"""
Rogue planets: unbound planets drifting between systems.

Rogues have parent_id None but are never system roots; they are listed in
the snapshot's rogue_planet_ids only. Curved-trajectory fields are present
only when the sampled curvature is > 0, otherwise the rogue drifts linearly.
"""

from __future__ import annotations
import math
from typing import Dict, List

from ..config import RogueParams
from ..core.bodies import CelestialBody, Group, RoguePlanetBody, RoguePlanetMeta, Vector3
from ..core.distributions import RandomGenerator, clamp, range_int, range_sample
from .base import PhenomenonGenerator


ROGUE_PALETTE = ["#5D6D7E", "#6E5A4E", "#4A5A6A", "#7B6F63"]
OVERRIDE_PALETTE = ["#3A2F5B", "#1F3B4D", "#4B2E2E", "#2E4B3A"]


class RoguePlanetGenerator(PhenomenonGenerator):
    """
    Shared galaxy pass placing rogues around group centers (or the origin).

    Args:
        params: Rogue section of the config
        rng: 'roguePlanets' stream
        mass_mu, mass_sigma, radius_power: Planet physics shared with the materializer
    """

    label = "roguePlanets"

    def __init__(
        self,
        params: RogueParams,
        rng: RandomGenerator,
        mass_mu: float = 1.5,
        mass_sigma: float = 0.8,
        radius_power: float = 0.4,
    ):
        super().__init__(params, rng)
        self.mass_mu = mass_mu
        self.mass_sigma = mass_sigma
        self.radius_power = radius_power

    def generate(
        self,
        bodies: Dict[str, CelestialBody],
        groups: Dict[str, Group],
    ) -> List[RoguePlanetBody]:
        if not self.enabled:
            return []

        count = max(0, range_int(self.rng, self.params.count_range))
        anchors = list(groups.values())
        rogues = []
        for i in range(count):
            rogue = self._make_rogue(self.rng.fork(f"rogue-{i}"), anchors, i)
            bodies[rogue.id] = rogue
            rogues.append(rogue)
        return rogues

    def _make_rogue(self, rng: RandomGenerator, anchors: List[Group], index: int) -> RoguePlanetBody:
        p = self.params
        center = rng.choice(anchors).position if anchors else Vector3()
        ox, oy, oz = rng.point_in_sphere(p.spawn_radius)
        position = Vector3(center.x + ox, center.y + oy, center.z + oz)

        direction = rng.unit_vector()
        speed = range_sample(rng, p.speed_range)
        velocity = Vector3(*(c * speed for c in direction))

        mass = rng.log_normal(self.mass_mu, self.mass_sigma) * 10.0
        color = rng.choice(ROGUE_PALETTE)
        override = rng.choice(OVERRIDE_PALETTE) if rng.bool(p.color_override_probability) else None

        meta = RoguePlanetMeta(
            seed=rng.seed_value(),
            initial_position=position,
            velocity=velocity,
            color_override=override,
        )
        curvature = range_sample(rng, p.curvature_range) if rng.bool(p.curved_probability) else 0.0
        if curvature > 0:
            a = max(range_sample(rng, p.semi_major_axis_range), 1e-3)
            lo, hi = sorted(p.eccentricity_range)
            meta.path_curvature = curvature
            meta.semi_major_axis = a
            # More curved paths are more eccentric
            meta.eccentricity = clamp(lo + (hi - lo) * curvature * rng.float(), 0.0, 0.99)
            meta.orbit_rot_x = rng.uniform(-p.inclination_max, p.inclination_max)
            meta.orbit_rot_y = rng.uniform(0.0, 360.0)
            meta.orbit_rot_z = rng.uniform(0.0, 360.0)
            meta.path_period = 2.0 * math.pi * a / max(speed, 1e-3)

        return RoguePlanetBody(
            id=self.new_id(),
            name=f"Rogue {index + 1}",
            mass=mass,
            radius=math.pow(mass, self.radius_power) * 0.15,
            color=override or color,
            parent_id=None,
            rogue=meta,
        )
