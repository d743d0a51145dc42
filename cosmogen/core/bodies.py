"""
Plain-data output model for generated universes.

Celestial bodies form a tagged union keyed by body_type. Every variant shares
the CelestialBody base (identity, mass, radius, color, parent/children edges
and orbital parameters); type-specific payloads live only on the variant that
can carry them:

    StarBody            -
    PlanetBody          ring
    RoguePlanetBody     rogue (unbound, parent_id is None)
    MoonBody            -
    AsteroidBody        asteroid_sub_type, lagrange_host_id
    CometBody           comet
    LagrangePointBody   lagrange_point
    BlackHoleBody       black_hole

Aggregates (SmallBodyField, ProtoplanetaryDisk, NebulaRegion) are visual-only
fields, not individual entities. Everything serializes through to_dict() into
JSON-compatible dicts with camelCase keys; None-valued fields are omitted so
the circular/coplanar defaults stay canonical.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple


class BodyType(Enum):
    """Discriminator of the body union."""
    STAR = "star"
    PLANET = "planet"
    MOON = "moon"
    ASTEROID = "asteroid"
    COMET = "comet"
    LAGRANGE_POINT = "lagrangePoint"
    BLACK_HOLE = "blackHole"


def camel_case(name: str) -> str:
    """orbit_offset_x -> orbitOffsetX"""
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def to_plain(obj: Any) -> Any:
    """Recursively convert dataclasses/enums/containers to JSON-ready data."""
    if hasattr(obj, "to_dict") and is_dataclass(obj):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return _dataclass_to_dict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {str(k): to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(v) for v in obj]
    return obj


def _dataclass_to_dict(obj: Any, keep_none: Tuple[str, ...] = ()) -> Dict[str, Any]:
    """Skips None fields except those named in keep_none (emitted as null)."""
    data = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None and f.name not in keep_none:
            continue
        data[camel_case(f.name)] = to_plain(value)
    return data


@dataclass
class Vector3:
    """World-space position or velocity."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


# ===== Type-specific payloads =====

@dataclass
class PlanetaryRing:
    """Ring system attached to a planet (radii are planet-radius multiples)."""
    inner_radius_multiplier: float
    outer_radius_multiplier: float
    thickness: float
    opacity: float      # 0-1
    albedo: float
    color: str
    density: float      # 0-1
    seed: int = 0


@dataclass
class CometMeta:
    """Orbit-derived and tail-appearance parameters of a comet."""
    is_periodic: bool
    perihelion_distance: float
    aphelion_distance: float
    has_tail: bool
    tail_length_base: float
    tail_width_base: float
    tail_color: str
    tail_opacity_base: float
    activity_falloff_distance: float
    seed: int = 0


@dataclass
class LagrangePointMeta:
    """Marker of one Lagrange point of a two-body pair."""
    primary_id: str
    secondary_id: str
    point_index: int    # 1-5
    stable: bool        # True for L4/L5
    pair_type: str      # 'starPlanet' | 'planetMoon'
    label: Optional[str] = None


@dataclass
class BlackHoleProperties:
    """Visual and physical parameters of a black hole."""
    has_accretion_disk: bool
    has_relativistic_jet: bool
    has_photon_ring: bool
    mass_class: str                 # 'stellar' | 'intermediate' | 'supermassive'
    spin: float                     # 0-1 Kerr parameter
    shadow_radius: float
    accretion_inner_radius: float
    accretion_outer_radius: float
    disk_thickness: float
    disk_brightness: float
    disk_opacity: float
    disk_temperature: float
    disk_clumpiness: float
    jet_length: float
    jet_opening_angle: float        # degrees
    jet_brightness: float
    doppler_beaming_strength: float
    lensing_strength: float
    rotation_speed_multiplier: float
    disk_tilt: float                # radians
    disk_tilt_axis_angle: float     # radians
    seed: int = 0


@dataclass
class RoguePlanetMeta:
    """Motion parameters of an unbound planet."""
    seed: int
    initial_position: Vector3
    velocity: Vector3
    color_override: Optional[str] = None
    # Curved trajectory (present only when path_curvature > 0)
    path_curvature: Optional[float] = None
    semi_major_axis: Optional[float] = None
    eccentricity: Optional[float] = None
    orbit_rot_x: Optional[float] = None
    orbit_rot_y: Optional[float] = None
    orbit_rot_z: Optional[float] = None
    path_period: Optional[float] = None


# ===== Body union =====

@dataclass
class CelestialBody:
    """
    Shared base of every body variant.

    Orbital phase and rotations are in degrees. Optional orbital fields are
    None when they would be exactly zero.
    """
    id: str
    name: str
    mass: float
    radius: float
    color: str
    parent_id: Optional[str]
    orbital_distance: float = 0.0
    orbital_speed: float = 0.0
    orbital_phase: float = 0.0
    children: List[str] = field(default_factory=list)

    semi_major_axis: Optional[float] = None
    eccentricity: Optional[float] = None
    orbit_offset_x: Optional[float] = None
    orbit_offset_y: Optional[float] = None
    orbit_offset_z: Optional[float] = None
    orbit_rot_x: Optional[float] = None
    orbit_rot_y: Optional[float] = None
    orbit_rot_z: Optional[float] = None

    body_type: ClassVar[BodyType]

    def to_dict(self) -> Dict[str, Any]:
        # parentId is always present; null marks a system root or a rogue
        data = _dataclass_to_dict(self, keep_none=("parent_id",))
        data["bodyType"] = self.body_type.value
        return data


@dataclass
class StarBody(CelestialBody):
    body_type: ClassVar[BodyType] = BodyType.STAR


@dataclass
class PlanetBody(CelestialBody):
    ring: Optional[PlanetaryRing] = None

    body_type: ClassVar[BodyType] = BodyType.PLANET


@dataclass
class RoguePlanetBody(PlanetBody):
    rogue: Optional[RoguePlanetMeta] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if "rogue" in data:
            data["roguePlanet"] = data.pop("rogue")
        data["isRoguePlanet"] = True
        return data


@dataclass
class MoonBody(CelestialBody):
    body_type: ClassVar[BodyType] = BodyType.MOON


@dataclass
class AsteroidBody(CelestialBody):
    asteroid_sub_type: str = "generic"   # 'mainBelt' | 'kuiperBelt' | 'trojan' | 'generic'
    lagrange_host_id: Optional[str] = None

    body_type: ClassVar[BodyType] = BodyType.ASTEROID


@dataclass
class CometBody(CelestialBody):
    comet: Optional[CometMeta] = None

    body_type: ClassVar[BodyType] = BodyType.COMET


@dataclass
class LagrangePointBody(CelestialBody):
    lagrange_point: Optional[LagrangePointMeta] = None

    body_type: ClassVar[BodyType] = BodyType.LAGRANGE_POINT


@dataclass
class BlackHoleBody(CelestialBody):
    black_hole: Optional[BlackHoleProperties] = None

    body_type: ClassVar[BodyType] = BodyType.BLACK_HOLE


# ===== Visual aggregates =====

@dataclass
class SmallBodyField:
    """Particle-field belt (main asteroid belt or Kuiper belt)."""
    id: str
    system_id: str
    host_star_id: str
    inner_radius: float
    outer_radius: float
    thickness: float
    particle_count: int
    base_color: str
    highlight_color: str
    opacity: float
    brightness: float
    clumpiness: float
    rotation_speed_multiplier: float
    belt_type: str          # 'main' | 'kuiper'
    region_label: str
    is_icy: bool
    seed: int
    style: str              # 'thin' | 'moderate' | 'thick' | 'scattered'
    eccentricity: float = 0.0
    inclination_sigma: Optional[float] = None
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _dataclass_to_dict(self)


@dataclass
class ProtoplanetaryDisk:
    """Visual-only gas/dust disk around a young star."""
    id: str
    system_id: str
    central_star_id: str
    inner_radius: float
    outer_radius: float
    thickness: float
    particle_count: int
    base_color: str
    highlight_color: str
    opacity: float
    brightness: float
    clumpiness: float
    rotation_speed_multiplier: float
    seed: int
    style: str              # 'thin' | 'moderate' | 'thick' | 'extreme'
    name: Optional[str] = None
    band_strength: Optional[float] = None
    band_frequency: Optional[float] = None
    gap_sharpness: Optional[float] = None
    inner_glow_strength: Optional[float] = None
    noise_scale: Optional[float] = None
    noise_strength: Optional[float] = None
    spiral_strength: Optional[float] = None
    spiral_arm_count: Optional[int] = None
    edge_softness: Optional[float] = None
    temperature_gradient: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return _dataclass_to_dict(self)


@dataclass
class NebulaRegion:
    """Galaxy-scale volumetric cloud."""
    id: str
    name: str
    position: Vector3
    radius: float
    dimensions: Vector3
    density: float
    brightness: float
    base_color: str
    accent_color: str
    noise_scale: float
    noise_detail: int
    seed: int
    associated_group_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _dataclass_to_dict(self)


# ===== Groups =====

@dataclass
class GroupChild:
    id: str
    type: str   # 'system' | 'group'


@dataclass
class Group:
    """Cluster of systems and/or sub-groups."""
    id: str
    name: str
    color: str
    position: Vector3
    children: List[GroupChild] = field(default_factory=list)
    parent_group_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "children": [to_plain(c) for c in self.children],
            "parentGroupId": self.parent_group_id,
            "color": self.color,
            "position": self.position.to_dict(),
        }


# ===== Snapshot =====

@dataclass
class UniverseSnapshot:
    """
    Result of one generation call.

    Attributes:
        bodies: All bodies keyed by id (serialized as 'stars')
        root_ids: System-center ids (parent_id is None, rogues excluded)
        groups: Groups keyed by id
        root_group_ids: Groups without a parent group
        small_body_fields: Main and Kuiper belt fields keyed by id
        protoplanetary_disks: Disks keyed by id
        nebulae: Nebula regions keyed by id
        rogue_planet_ids: Unbound planets (subset of bodies)
        seed: Root entropy the universe was generated from
        belts: Legacy per-rock belts, always empty
    """
    bodies: Dict[str, CelestialBody] = field(default_factory=dict)
    root_ids: List[str] = field(default_factory=list)
    groups: Dict[str, Group] = field(default_factory=dict)
    root_group_ids: List[str] = field(default_factory=list)
    small_body_fields: Dict[str, SmallBodyField] = field(default_factory=dict)
    protoplanetary_disks: Dict[str, ProtoplanetaryDisk] = field(default_factory=dict)
    nebulae: Dict[str, NebulaRegion] = field(default_factory=dict)
    rogue_planet_ids: List[str] = field(default_factory=list)
    seed: Optional[int] = None
    belts: Dict[str, Any] = field(default_factory=dict)

    def bodies_of_type(self, body_type: BodyType) -> List[CelestialBody]:
        return [b for b in self.bodies.values() if b.body_type == body_type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stars": {k: b.to_dict() for k, b in self.bodies.items()},
            "rootIds": list(self.root_ids),
            "groups": {k: g.to_dict() for k, g in self.groups.items()},
            "rootGroupIds": list(self.root_group_ids),
            "smallBodyFields": {k: f.to_dict() for k, f in self.small_body_fields.items()},
            "protoplanetaryDisks": {k: d.to_dict() for k, d in self.protoplanetary_disks.items()},
            "nebulae": {k: n.to_dict() for k, n in self.nebulae.items()},
            "roguePlanetIds": list(self.rogue_planet_ids),
            "belts": {},
            "seed": self.seed,
        }
