"""
Lagrange point markers and Trojan clusters.

For a primary of mass M1 and a secondary of mass M2 at distance r, with
mu = M2 / (M1 + M2):

    L1 = r (1 - (mu/3)^(1/3))     same phase as the secondary
    L2 = r (1 + (mu/3)^(1/3))     same phase
    L3 = r (1 + 5 mu / 12)        opposite phase
    L4 = r                        phase + 60 degrees (stable)
    L5 = r                        phase - 60 degrees (stable)

All markers share the secondary's orbital speed so they co-rotate with it.
Stable markers may additionally spawn a tightly scattered Trojan cluster.
"""

from __future__ import annotations
from typing import Dict, List, Tuple

from ..config import LagrangePairScope, LagrangeParams
from ..core.bodies import (
    AsteroidBody,
    BodyType,
    CelestialBody,
    LagrangePointBody,
    LagrangePointMeta,
)
from ..core.distributions import RandomGenerator, range_int
from .base import PhenomenonGenerator, add_body, planets_of, safe_number
from .belts import ROCKY_PALETTE


MARKER_MASS = 1e-6
STABLE_COLOR = "#7CFC00"
UNSTABLE_COLOR = "#FF8C00"
TROJAN_MASS_RANGE = (0.001, 0.01)


def lagrange_positions(
    distance: float,
    phase: float,
    primary_mass: float,
    secondary_mass: float,
) -> Dict[int, Tuple[float, float]]:
    """
    Distance/phase of L1..L5 for one pair.

    Returns:
        point index -> (orbital distance, orbital phase in degrees)
    """
    total = primary_mass + secondary_mass
    mu = safe_number(secondary_mass / total if total > 0 else 0.0, 0.0, 0.0, 0.5)
    hill = (mu / 3.0) ** (1.0 / 3.0)
    return {
        1: (distance * (1.0 - hill), phase % 360.0),
        2: (distance * (1.0 + hill), phase % 360.0),
        3: (distance * (1.0 + 5.0 * mu / 12.0), (phase + 180.0) % 360.0),
        4: (distance, (phase + 60.0) % 360.0),
        5: (distance, (phase - 60.0) % 360.0),
    }


class LagrangeGenerator(PhenomenonGenerator):
    """
    Markers (and Trojans) for star-planet and/or planet-moon pairs.

    Example:
        gen = LagrangeGenerator(config.lagrange, master.fork("lagrange"))
        new_bodies = gen.generate(bodies, root_id)
    """

    label = "lagrange"

    def __init__(self, params: LagrangeParams, rng: RandomGenerator):
        super().__init__(params, rng)

    def eligible_pairs(
        self,
        bodies: Dict[str, CelestialBody],
        host: CelestialBody,
    ) -> List[Tuple[CelestialBody, CelestialBody, str]]:
        scope = LagrangePairScope(self.params.pair_scope)
        planets = planets_of(bodies, host)
        pairs = []
        if scope in (LagrangePairScope.STAR_PLANET, LagrangePairScope.BOTH):
            pairs.extend((host, planet, "starPlanet") for planet in planets)
        if scope in (LagrangePairScope.PLANET_MOON, LagrangePairScope.BOTH):
            for planet in planets:
                moons = [bodies[c] for c in planet.children if bodies[c].body_type == BodyType.MOON]
                moons.sort(key=lambda m: m.orbital_distance)
                pairs.extend((planet, moon, "planetMoon") for moon in moons)
        return pairs

    def generate(self, bodies: Dict[str, CelestialBody], host_id: str) -> List[CelestialBody]:
        host = self.host(bodies, host_id)
        if not self.enabled:
            return []

        created: List[CelestialBody] = []
        for primary, secondary, pair_type in self.eligible_pairs(bodies, host):
            created.extend(self._pair_markers(bodies, primary, secondary, pair_type))
        return created

    def _pair_markers(
        self,
        bodies: Dict[str, CelestialBody],
        primary: CelestialBody,
        secondary: CelestialBody,
        pair_type: str,
    ) -> List[CelestialBody]:
        p = self.params
        indices = []
        if p.generate_l1_l3_markers:
            indices.extend([1, 2, 3])
        if p.generate_l4_l5_markers:
            indices.extend([4, 5])
        if not indices:
            return []

        positions = lagrange_positions(
            secondary.orbital_distance, secondary.orbital_phase,
            primary.mass, secondary.mass,
        )
        created = []
        for index in indices:
            distance, phase = positions[index]
            stable = index >= 4
            marker = add_body(bodies, LagrangePointBody(
                id=self.new_id(),
                name=f"{secondary.name} L{index}",
                mass=MARKER_MASS,
                radius=p.marker_radius,
                color=STABLE_COLOR if stable else UNSTABLE_COLOR,
                parent_id=primary.id,
                orbital_distance=distance,
                orbital_speed=secondary.orbital_speed,
                orbital_phase=phase,
                lagrange_point=LagrangePointMeta(
                    primary_id=primary.id,
                    secondary_id=secondary.id,
                    point_index=index,
                    stable=stable,
                    pair_type=pair_type,
                    label=f"L{index}",
                ),
            ))
            created.append(marker)

            if stable and p.enable_trojans and self.rng.bool(p.trojan_frequency):
                created.extend(self._trojans(bodies, primary, secondary, marker))
        return created

    def _trojans(
        self,
        bodies: Dict[str, CelestialBody],
        primary: CelestialBody,
        secondary: CelestialBody,
        marker: LagrangePointBody,
    ) -> List[CelestialBody]:
        p = self.params
        low, high = sorted((max(0, p.trojan_min_count), max(0, p.trojan_max_count)))
        count = range_int(self.rng, (low, high))
        trojans = []
        for j in range(count):
            spread = self.rng.uniform(-p.trojan_distance_spread, p.trojan_distance_spread)
            distance = marker.orbital_distance * (1.0 + spread)
            mass = self.rng.uniform(*TROJAN_MASS_RANGE)
            trojans.append(add_body(bodies, AsteroidBody(
                id=self.new_id(),
                name=f"{secondary.name} {marker.lagrange_point.label} Trojan {j + 1}",
                mass=mass,
                radius=0.02 + mass,
                color=self.rng.choice(ROCKY_PALETTE),
                parent_id=primary.id,
                orbital_distance=distance,
                orbital_speed=marker.orbital_speed,
                orbital_phase=(marker.orbital_phase
                               + self.rng.uniform(-p.trojan_phase_spread, p.trojan_phase_spread)) % 360.0,
                asteroid_sub_type="trojan",
                lagrange_host_id=marker.id,
            )))
        return trojans
