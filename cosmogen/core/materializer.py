"""
Entity materializer: topology tree -> concrete bodies.

Per system:
1. Sample a mass for every star node (log-normal x type multiplier)
2. Stable sort by mass, heaviest first
3. Heaviest star becomes the center (orbit 0); the rest are companions
   sharing orbit index 0 with evenly spaced phases
4. Planets orbit the center at index = position among planets + companions
5. Moons (and sub-moons) use their own per-parent index
6. Optional elliptical augmentation from a separate stream

The black-hole path can replace the center or one companion with a
BlackHoleBody; only then may the root be lighter than a companion.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .bodies import (
    BlackHoleBody,
    CelestialBody,
    MoonBody,
    PlanetBody,
    StarBody,
)
from .distributions import RandomGenerator, range_sample
from .topology import NodeType, TopologyNode

if TYPE_CHECKING:
    from ..config import GeneratorConfig
    from ..phenomena.black_holes import BlackHoleGenerator


MASS_MULTIPLIERS: Dict[NodeType, float] = {
    NodeType.STAR: 100.0,
    NodeType.PLANET: 10.0,
    NodeType.MOON: 1.0,
    NodeType.SUBMOON: 0.3,
}

# radius = mass^radius_power * RADIUS_SCALE
RADIUS_SCALE = 0.15

# (exclusive lower mass bound, color), checked top-down
STAR_COLOR_BANDS: List[Tuple[float, str]] = [
    (600.0, "#9BB0FF"),  # Blue-white (O, B)
    (200.0, "#CAD7FF"),  # White (A)
    (100.0, "#F8F7FF"),  # Yellow-white (F)
    (50.0, "#FFF4EA"),   # Orange (G, K)
]
STAR_COLOR_FALLBACK = "#FFD2A1"  # Deep red (M)

PLANET_PALETTE = ["#4A90E2", "#E25822", "#8B7355", "#C0A080", "#A0C0E0"]
MOON_PALETTE = ["#CCCCCC", "#B8B8B8", "#A89F91", "#D9D4C7"]

GREEK_LETTERS = ["Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta"]
CONSTELLATIONS = ["Centauri", "Orionis", "Cygni", "Tauri", "Lyrae", "Aquilae"]
PLANET_NAMES = ["Mercury", "Venus", "Earth", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune", "Pluto"]
MOON_NAMES = ["Moon", "Phobos", "Deimos", "Io", "Europa", "Ganymede", "Callisto", "Titan"]


def star_color(mass: float) -> str:
    for threshold, color in STAR_COLOR_BANDS:
        if mass > threshold:
            return color
    return STAR_COLOR_FALLBACK


def _letters(n: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA"""
    out = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = chr(65 + rem) + out
    return out


class NameRegistry:
    """
    Per-system name counters.

    Stars are keyed by the 1-based count, so the first star is "Beta
    Centauri" and every eighth moves to the next constellation. Planets past
    the named nine take the count as a letter (10th is "Planet J").
    """

    def __init__(self):
        self.counts: Dict[str, int] = {}

    def next(self, kind: str) -> str:
        count = self.counts.get(kind, 0) + 1
        self.counts[kind] = count
        index = count - 1

        if kind == "star":
            letter = GREEK_LETTERS[count % len(GREEK_LETTERS)]
            constellation = CONSTELLATIONS[(count // len(GREEK_LETTERS)) % len(CONSTELLATIONS)]
            return f"{letter} {constellation}"
        if kind == "planet":
            if count <= len(PLANET_NAMES):
                return PLANET_NAMES[index]
            return f"Planet {_letters(count)}"
        if count <= len(MOON_NAMES):
            return MOON_NAMES[index]
        return f"Moon {count}"


@dataclass
class MaterializedSystem:
    """Bodies of one system in creation order."""
    root_id: Optional[str]
    bodies: Dict[str, CelestialBody] = field(default_factory=dict)

    def add(self, body: CelestialBody) -> CelestialBody:
        self.bodies[body.id] = body
        return body


@dataclass
class _StarEntry:
    node: TopologyNode
    mass: float


class BodyMaterializer:
    """
    Converts one topology tree into bodies.

    Args:
        config: Generator configuration
        rng: 'stardata' stream (masses, orbits, palette colors)
        shape_rng: 'orbitShape' stream, only consumed when orbit shaping is on
        black_holes: Optional black-hole path generator
    """

    def __init__(
        self,
        config: "GeneratorConfig",
        rng: RandomGenerator,
        shape_rng: Optional[RandomGenerator] = None,
        black_holes: Optional["BlackHoleGenerator"] = None,
    ):
        self.config = config
        self.rng = rng
        self.shape_rng = shape_rng
        self.black_holes = black_holes
        self.names = NameRegistry()

    # ===== Physics helpers =====

    def sample_mass(self, node_type: NodeType) -> float:
        base = self.rng.log_normal(self.config.mass_mu, self.config.mass_sigma)
        return base * MASS_MULTIPLIERS.get(node_type, 1.0)

    def radius_for(self, mass: float) -> float:
        return math.pow(mass, self.config.radius_power) * RADIUS_SCALE

    def orbital_distance(self, index: int) -> float:
        c = self.config
        jitter = self.rng.uniform(-c.orbit_jitter, c.orbit_jitter)
        return c.orbit_base * math.pow(c.orbit_growth, index) + jitter

    def orbital_speed(self, distance: float) -> float:
        if distance <= 0:
            return 0.0
        return self.config.orbit_k / math.sqrt(distance)

    # ===== Materialization =====

    def materialize(self, root: TopologyNode) -> MaterializedSystem:
        """Build every body of the system rooted at root."""
        system = MaterializedSystem(root_id=None)
        if root.type != NodeType.SYSTEM:
            raise ValueError(f"Expected a system node, got {root.type.value}")

        star_nodes = root.children_of_type(NodeType.STAR)
        planet_nodes = root.children_of_type(NodeType.PLANET)
        for star_node in star_nodes:
            planet_nodes.extend(star_node.children_of_type(NodeType.PLANET))

        if not star_nodes:
            if not planet_nodes:
                return system
            # Planets without stars orbit an implicit star built from the system node
            star_nodes = [root]

        entries = [_StarEntry(node, self.sample_mass(NodeType.STAR)) for node in star_nodes]
        entries.sort(key=lambda e: e.mass, reverse=True)

        substitute = None
        if self.black_holes is not None:
            substitute = self.black_holes.choose_substitution(len(entries))

        center_entry, companions = entries[0], entries[1:]
        center = system.add(self._make_star(center_entry, None, 0.0, 0.0, 0.0, substitute == 0))
        system.root_id = center.id

        for i, entry in enumerate(companions):
            distance = self.orbital_distance(0)
            phase = 360.0 * i / len(companions)
            companion = self._make_star(
                entry, center.id, distance, self.orbital_speed(distance), phase,
                substitute == i + 1,
            )
            system.add(companion)
            self._shape(companion)

        # Depth-first: each planet is followed by its whole satellite subtree
        pending = [
            (planet_node, center.id, i + len(companions))
            for i, planet_node in enumerate(planet_nodes)
        ]
        pending.reverse()
        while pending:
            node, parent_id, orbit_index = pending.pop()
            body = self._materialize_orbiter(system, node, parent_id, orbit_index)
            satellites = [c for c in node.children if c.type in (NodeType.MOON, NodeType.SUBMOON)]
            pending.extend(reversed([(child, body.id, i) for i, child in enumerate(satellites)]))

        self._link_children(system)
        return system

    def _make_star(
        self,
        entry: _StarEntry,
        parent_id: Optional[str],
        distance: float,
        speed: float,
        phase: float,
        as_black_hole: bool,
    ) -> CelestialBody:
        if as_black_hole:
            props, mass = self.black_holes.build()
            return BlackHoleBody(
                id=entry.node.id,
                name=f"{self.names.next('star')} BH",
                mass=mass,
                radius=props.shadow_radius,
                color="#000000",
                parent_id=parent_id,
                orbital_distance=distance,
                orbital_speed=speed,
                orbital_phase=phase,
                black_hole=props,
            )
        return StarBody(
            id=entry.node.id,
            name=self.names.next("star"),
            mass=entry.mass,
            radius=self.radius_for(entry.mass),
            color=star_color(entry.mass),
            parent_id=parent_id,
            orbital_distance=distance,
            orbital_speed=speed,
            orbital_phase=phase,
        )

    def _materialize_orbiter(
        self,
        system: MaterializedSystem,
        node: TopologyNode,
        parent_id: str,
        orbit_index: int,
    ) -> CelestialBody:
        """Planet, moon or sub-moon body (satellites are queued by the caller)."""
        mass = self.sample_mass(node.type)
        distance = self.orbital_distance(orbit_index)
        speed = self.orbital_speed(distance)
        phase = self.rng.uniform(0.0, 360.0)

        if node.type == NodeType.PLANET:
            body: CelestialBody = PlanetBody(
                id=node.id,
                name=self.names.next("planet"),
                mass=mass,
                radius=self.radius_for(mass),
                color=self.rng.choice(PLANET_PALETTE),
                parent_id=parent_id,
                orbital_distance=distance,
                orbital_speed=speed,
                orbital_phase=phase,
            )
        else:
            body = MoonBody(
                id=node.id,
                name=self.names.next("moon"),
                mass=mass,
                radius=self.radius_for(mass),
                color=self.rng.choice(MOON_PALETTE),
                parent_id=parent_id,
                orbital_distance=distance,
                orbital_speed=speed,
                orbital_phase=phase,
            )
        system.add(body)
        self._shape(body)
        return body

    def _shape(self, body: CelestialBody) -> None:
        """Elliptical/inclined augmentation; zero-valued fields stay None."""
        params = self.config.orbit_shape
        rng = self.shape_rng
        if not params.enable or rng is None:
            return

        eccentricity = range_sample(rng, params.eccentricity_range)
        inclination = rng.uniform(-params.inclination_max, params.inclination_max) \
            if params.inclination_max > 0 else 0.0
        rot_y = rot_z = 0.0
        if params.secondary_rotation_max > 0:
            rot_y = rng.uniform(-params.secondary_rotation_max, params.secondary_rotation_max)
            rot_z = rng.uniform(-params.secondary_rotation_max, params.secondary_rotation_max)
        offset = [0.0, 0.0, 0.0]
        if params.offset_enabled and params.offset_max > 0:
            offset = rng.point_in_sphere(params.offset_max)

        if eccentricity != 0:
            body.eccentricity = eccentricity
            body.semi_major_axis = body.orbital_distance
        if inclination != 0:
            body.orbit_rot_x = inclination
        if rot_y != 0:
            body.orbit_rot_y = rot_y
        if rot_z != 0:
            body.orbit_rot_z = rot_z
        for axis, value in zip("xyz", offset):
            if value != 0:
                setattr(body, f"orbit_offset_{axis}", value)

    @staticmethod
    def _link_children(system: MaterializedSystem) -> None:
        for body in system.bodies.values():
            if body.parent_id is not None:
                system.bodies[body.parent_id].children.append(body.id)
