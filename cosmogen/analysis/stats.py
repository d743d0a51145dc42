"""
Generation statistics.

Aggregates totals over a finished snapshot:
- Body counts per type (stars, planets, moons, comets, Lagrange markers, Trojans)
- Small-body fields split into main and Kuiper belts, with particle totals
- Protoplanetary disks, nebulae, rogue planets
- Black holes by mass class, with spin range and feature counts
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List
import numpy as np

from ..core.bodies import (
    AsteroidBody,
    BlackHoleBody,
    BodyType,
    PlanetBody,
    RoguePlanetBody,
    UniverseSnapshot,
)


# Mass thresholds of the black-hole classes (exclusive upper bounds)
STELLAR_MASS_LIMIT = 50.0
INTERMEDIATE_MASS_LIMIT = 10000.0


def black_hole_mass_class(mass: float) -> str:
    if mass < STELLAR_MASS_LIMIT:
        return "stellar"
    if mass < INTERMEDIATE_MASS_LIMIT:
        return "intermediate"
    return "supermassive"


@dataclass
class GenerationStats:
    """Totals of one generation run."""
    total_bodies: int = 0
    total_systems: int = 0
    total_stars: int = 0
    total_planets: int = 0
    total_moons: int = 0
    total_groups: int = 0
    total_ringed_planets: int = 0
    total_comets: int = 0
    total_lagrange_markers: int = 0
    total_trojan_bodies: int = 0

    # Particle belts
    total_main_belts: int = 0
    total_kuiper_belts: int = 0
    total_main_belt_particles: int = 0
    total_kuiper_belt_particles: int = 0

    total_protoplanetary_disks: int = 0
    total_protoplanetary_disk_particles: int = 0
    total_nebulae: int = 0
    rogue_planet_ids: List[str] = field(default_factory=list)

    # Black holes
    total_black_holes: int = 0
    black_holes_with_disks: int = 0
    black_holes_with_jets: int = 0
    black_holes_with_photon_rings: int = 0
    black_holes_by_class: Dict[str, int] = field(
        default_factory=lambda: {"stellar": 0, "intermediate": 0, "supermassive": 0}
    )
    min_black_hole_spin: float = 0.0
    avg_black_hole_spin: float = 0.0
    max_black_hole_spin: float = 0.0

    @property
    def total_small_body_belts(self) -> int:
        return self.total_main_belts + self.total_kuiper_belts

    @property
    def total_small_body_particles(self) -> int:
        return self.total_main_belt_particles + self.total_kuiper_belt_particles

    @property
    def total_rogue_planets(self) -> int:
        return len(self.rogue_planet_ids)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["total_small_body_belts"] = self.total_small_body_belts
        data["total_small_body_particles"] = self.total_small_body_particles
        data["total_rogue_planets"] = self.total_rogue_planets
        return data

    def summary_lines(self) -> List[str]:
        lines = [
            f"Systems: {self.total_systems}, bodies: {self.total_bodies}",
            f"Stars: {self.total_stars}, planets: {self.total_planets}, moons: {self.total_moons}",
            f"Groups: {self.total_groups}, nebulae: {self.total_nebulae}, rogue planets: {self.total_rogue_planets}",
            f"Ringed planets: {self.total_ringed_planets}, comets: {self.total_comets}",
            f"Lagrange markers: {self.total_lagrange_markers}, trojans: {self.total_trojan_bodies}",
            f"Belts: {self.total_main_belts} main ({self.total_main_belt_particles} particles), "
            f"{self.total_kuiper_belts} kuiper ({self.total_kuiper_belt_particles} particles)",
            f"Protoplanetary disks: {self.total_protoplanetary_disks} "
            f"({self.total_protoplanetary_disk_particles} particles)",
        ]
        if self.total_black_holes:
            lines.append(
                f"Black holes: {self.total_black_holes} {self.black_holes_by_class}, "
                f"spin {self.min_black_hole_spin:.3f}/{self.avg_black_hole_spin:.3f}/{self.max_black_hole_spin:.3f}"
            )
        return lines


def compute_generation_stats(snapshot: UniverseSnapshot) -> GenerationStats:
    """
    Count everything in a snapshot.

    Args:
        snapshot: Output of one generation call

    Returns:
        GenerationStats
    """
    bodies = list(snapshot.bodies.values())
    stats = GenerationStats(
        total_bodies=len(bodies),
        total_systems=len(snapshot.root_ids),
        total_groups=len(snapshot.groups),
        total_nebulae=len(snapshot.nebulae),
        rogue_planet_ids=[b.id for b in bodies if isinstance(b, RoguePlanetBody)],
    )

    for body in bodies:
        bt = body.body_type
        if bt == BodyType.STAR:
            stats.total_stars += 1
        elif bt == BodyType.PLANET:
            stats.total_planets += 1
            if isinstance(body, PlanetBody) and body.ring is not None:
                stats.total_ringed_planets += 1
        elif bt == BodyType.MOON:
            stats.total_moons += 1
        elif bt == BodyType.COMET:
            stats.total_comets += 1
        elif bt == BodyType.LAGRANGE_POINT:
            stats.total_lagrange_markers += 1
        elif bt == BodyType.ASTEROID:
            if isinstance(body, AsteroidBody) and body.lagrange_host_id is not None:
                stats.total_trojan_bodies += 1

    for f in snapshot.small_body_fields.values():
        if f.belt_type == "kuiper":
            stats.total_kuiper_belts += 1
            stats.total_kuiper_belt_particles += f.particle_count
        else:
            stats.total_main_belts += 1
            stats.total_main_belt_particles += f.particle_count

    disks = list(snapshot.protoplanetary_disks.values())
    stats.total_protoplanetary_disks = len(disks)
    stats.total_protoplanetary_disk_particles = sum(d.particle_count for d in disks)

    black_holes = [b for b in bodies if isinstance(b, BlackHoleBody) and b.black_hole is not None]
    stats.total_black_holes = len(black_holes)
    if black_holes:
        spins = np.array([b.black_hole.spin for b in black_holes])
        stats.min_black_hole_spin = float(np.min(spins))
        stats.avg_black_hole_spin = float(np.mean(spins))
        stats.max_black_hole_spin = float(np.max(spins))
        for bh in black_holes:
            props = bh.black_hole
            stats.black_holes_by_class[black_hole_mass_class(bh.mass)] += 1
            stats.black_holes_with_disks += int(props.has_accretion_disk)
            stats.black_holes_with_jets += int(props.has_relativistic_jet)
            stats.black_holes_with_photon_rings += int(props.has_photon_ring)

    return stats
