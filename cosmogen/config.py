"""
Configuration module for the cosmogen generator.

Contains all configurable parameters for topology, materialization and the
secondary phenomenon passes. Every secondary pass owns one section and is
disabled by default.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Tuple
from enum import Enum
import json
from pathlib import Path


class BeltPlacementMode(Enum):
    """Where main asteroid belts may form."""
    BETWEEN_PLANETS = "betweenPlanets"  # Gaps between consecutive planet orbits
    OUTER_BELT = "outerBelt"            # Beyond the outermost planet
    BOTH = "both"


class LagrangePairScope(Enum):
    """Two-body pairs that receive Lagrange markers."""
    STAR_PLANET = "starPlanet"
    PLANET_MOON = "planetMoon"
    BOTH = "both"


class ShadowRadiusMode(Enum):
    """Black-hole shadow radius scaling."""
    PHYSICAL = "physical"    # Log scaling with mass
    CINEMATIC = "cinematic"  # Free sampling from a range


class NebulaPlacement(Enum):
    """Nebula positioning strategy."""
    SCATTERED = "scattered"  # Uniform inside the galaxy volume
    ANCHORED = "anchored"    # Offset from a group center


class NebulaColorStyle(Enum):
    """Curated nebula palettes."""
    EMISSION = "emission"        # Hydrogen reds and pinks
    REFLECTION = "reflection"    # Dusty blues
    PLANETARY = "planetary"      # Teal and violet shells
    DARK = "dark"                # Absorbing dust lanes
    MIXED = "mixed"              # Any of the above


class NebulaSizeBias(Enum):
    """Global size multiplier for nebulae."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    GIANT = "giant"


@dataclass
class GroupingParams:
    """Cluster/group hierarchy parameters."""
    enable: bool = False
    num_groups: Tuple[int, int] = (3, 7)    # [min, max], capped by system count
    nesting_probability: float = 0.2        # Chance a group gets a parent group
    position_sigma: float = 50.0            # Std dev of Gaussian group positions


@dataclass
class OrbitShapeParams:
    """Elliptical/inclined orbit augmentation."""
    enable: bool = False
    eccentricity_range: Tuple[float, float] = (0.0, 0.0)
    inclination_max: float = 0.0            # Degrees, sampled in [-max, max]
    secondary_rotation_max: float = 0.0     # Degrees, Y/Z rotations
    offset_enabled: bool = False
    offset_max: float = 0.0                 # Radius of the orbit-center offset sphere


@dataclass
class BeltParams:
    """Main asteroid belt (particle field) parameters."""
    enable_asteroid_belts: bool = False
    placement_mode: BeltPlacementMode = BeltPlacementMode.BETWEEN_PLANETS
    max_belts_per_system: int = 2
    gap_probability: float = 0.5            # Independent roll per eligible gap
    outer_belt_probability: float = 0.5

    # Particle count = clamp(geometric(p), min, max)
    asteroid_geometric_p: float = 0.003
    min_count: int = 50
    max_count: int = 1000

    gap_fraction: Tuple[float, float] = (0.3, 0.7)       # Sub-range of the gap
    outer_distance_range: Tuple[float, float] = (1.3, 1.8)  # x outermost planet
    thickness_range: Tuple[float, float] = (0.05, 0.4)
    eccentricity_range: Tuple[float, float] = (0.0, 0.05)
    opacity_range: Tuple[float, float] = (0.5, 0.9)
    brightness_range: Tuple[float, float] = (0.6, 1.0)
    clumpiness_range: Tuple[float, float] = (0.1, 0.5)
    rotation_speed_range: Tuple[float, float] = (0.5, 1.0)


@dataclass
class KuiperParams:
    """Icy outer belt parameters."""
    enable: bool = False
    probability: float = 1.0
    radial_range: Tuple[float, float] = (2.0, 3.5)        # x outermost planet
    inclination_sigma: float = 1.5
    eccentricity_range: Tuple[float, float] = (0.0, 0.15)
    asteroid_geometric_p: float = 0.0015
    min_count: int = 100
    max_count: int = 1500
    thickness_range: Tuple[float, float] = (0.4, 1.2)
    opacity_range: Tuple[float, float] = (0.3, 0.6)
    brightness_range: Tuple[float, float] = (0.4, 0.8)
    clumpiness_range: Tuple[float, float] = (0.05, 0.3)
    rotation_speed_range: Tuple[float, float] = (0.1, 0.4)


@dataclass
class RingParams:
    """Planetary ring parameters."""
    enable: bool = False
    base_probability: float = 0.2
    mass_boost: float = 0.3                 # Added as m / (m + mass_reference)
    mass_reference: float = 50.0
    distance_boost: float = 0.2             # Added as rank / (n - 1)
    inner_radius_range: Tuple[float, float] = (1.2, 1.8)  # x planet radius
    width_range: Tuple[float, float] = (0.4, 1.5)
    min_gap: float = 0.1                    # outer > inner + min_gap
    thickness_range: Tuple[float, float] = (0.01, 0.08)
    opacity_range: Tuple[float, float] = (0.4, 0.9)
    albedo_range: Tuple[float, float] = (0.3, 0.9)
    density_range: Tuple[float, float] = (0.3, 0.9)
    color_jitter: float = 0.15              # Max per-channel perturbation (0-1)


@dataclass
class CometParams:
    """Comet parameters."""
    enable: bool = False
    count_range: Tuple[int, int] = (1, 4)   # Per system
    short_period_probability: float = 0.3
    distance_range: Tuple[float, float] = (1.5, 4.0)  # x outermost planet
    short_period_multiplier: float = 0.5
    eccentricity_range: Tuple[float, float] = (0.5, 0.95)
    inclination_max: float = 30.0           # Degrees
    activity: float = 0.6                   # Tail probability and scale
    tail_length_range: Tuple[float, float] = (1.0, 4.0)
    tail_width_range: Tuple[float, float] = (0.1, 0.5)
    mass_range: Tuple[float, float] = (0.01, 0.1)


@dataclass
class LagrangeParams:
    """Lagrange point markers and Trojan clusters."""
    enable: bool = False
    pair_scope: LagrangePairScope = LagrangePairScope.STAR_PLANET
    generate_l1_l3_markers: bool = False
    generate_l4_l5_markers: bool = True
    enable_trojans: bool = False
    trojan_frequency: float = 0.3           # Chance a stable marker gets Trojans
    trojan_min_count: int = 2
    trojan_max_count: int = 8
    trojan_distance_spread: float = 0.05    # Fraction of the pair distance
    trojan_phase_spread: float = 6.0        # Degrees
    marker_radius: float = 0.05


@dataclass
class DiskParams:
    """Protoplanetary disk parameters."""
    enable: bool = False
    probability: float = 0.3
    inner_radius_range: Tuple[float, float] = (0.5, 1.5)
    outer_radius_range: Tuple[float, float] = (4.0, 10.0)
    thickness_range: Tuple[float, float] = (0.3, 0.8)
    particle_count_range: Tuple[int, int] = (10000, 25000)
    max_particle_count: int = 50000
    opacity_range: Tuple[float, float] = (0.4, 0.7)
    brightness_range: Tuple[float, float] = (0.4, 0.8)
    clumpiness_range: Tuple[float, float] = (0.3, 0.6)
    rotation_speed_range: Tuple[float, float] = (0.15, 0.4)
    style_weights: Dict[str, float] = field(default_factory=lambda: {
        "thin": 0.3, "moderate": 0.4, "thick": 0.2, "extreme": 0.1,
    })


@dataclass
class NebulaParams:
    """Galaxy-scale nebula parameters."""
    enable: bool = False
    count_range: Tuple[int, int] = (1, 3)
    placement: NebulaPlacement = NebulaPlacement.ANCHORED
    color_style: NebulaColorStyle = NebulaColorStyle.MIXED
    size_bias: NebulaSizeBias = NebulaSizeBias.MEDIUM
    radius_range: Tuple[float, float] = (20.0, 60.0)
    anchor_distance_range: Tuple[float, float] = (30.0, 120.0)
    scatter_radius: float = 250.0
    density_range: Tuple[float, float] = (0.2, 0.6)
    brightness_range: Tuple[float, float] = (0.3, 0.8)
    noise_scale_range: Tuple[float, float] = (0.5, 2.0)
    noise_detail_range: Tuple[int, int] = (2, 6)


@dataclass
class RogueParams:
    """Unbound (rogue) planet parameters."""
    enable: bool = False
    count_range: Tuple[int, int] = (1, 3)
    spawn_radius: float = 120.0             # Around a group center or origin
    speed_range: Tuple[float, float] = (0.05, 0.4)
    curved_probability: float = 0.3         # Chance of a curved trajectory
    curvature_range: Tuple[float, float] = (0.1, 1.0)
    semi_major_axis_range: Tuple[float, float] = (10.0, 60.0)
    eccentricity_range: Tuple[float, float] = (0.1, 0.8)
    inclination_max: float = 30.0           # Degrees
    color_override_probability: float = 0.3


@dataclass
class BlackHoleParams:
    """Black-hole center/companion substitution."""
    enable: bool = False
    system_probability: float = 0.0         # Center becomes a black hole
    as_companion_probability: float = 0.0   # One companion becomes a black hole
    mass_class_weights: Tuple[float, float, float] = (0.7, 0.25, 0.05)  # stellar/intermediate/supermassive
    shadow_radius_mode: ShadowRadiusMode = ShadowRadiusMode.PHYSICAL
    physical_scale: float = 0.3             # shadow = scale * log10(1 + mass)
    shadow_radius_range: Tuple[float, float] = (0.2, 1.5)  # Cinematic mode
    max_shadow_radius: float = 3.0
    accretion_disk_probability: float = 0.8
    jet_probability: float = 0.5            # Only rolled when a disk exists
    photon_ring_probability: float = 0.9
    spin_range: Tuple[float, float] = (0.1, 0.99)
    spin_bias: float = 0.0                  # > 0 pushes spins towards the top of the range
    disk_outer_multiplier_range: Tuple[float, float] = (4.0, 10.0)  # x shadow
    disk_temperature_range: Tuple[float, float] = (3000.0, 20000.0)
    jet_length_multiplier_range: Tuple[float, float] = (10.0, 30.0)  # x shadow


@dataclass
class GeneratorConfig:
    """
    Main configuration container for cosmogen.

    Example:
        config = GeneratorConfig(
            topology_preset="moonRich",
            max_systems=5,
        )
        config.rings.enable = True
        config.save("my_config.json")
    """
    # Topology
    topology_preset: str = "classic"
    star_probabilities: Tuple[float, float, float] = (0.65, 0.25, 0.10)  # 1/2/3 stars
    planet_geometric_p: float = 0.4
    moon_geometric_p: float = 0.3
    max_depth: int = 3

    # Orbits
    orbit_base: float = 1.0
    orbit_growth: float = 1.8
    orbit_jitter: float = 0.1               # Uniform in [-jitter, jitter]
    orbit_k: float = 20.0                   # speed = k / sqrt(distance)

    # Physical
    mass_mu: float = 1.5
    mass_sigma: float = 0.8
    radius_power: float = 0.4

    # Systems per universe (1 = single system)
    max_systems: int = 1

    # Sub-configurations
    grouping: GroupingParams = field(default_factory=GroupingParams)
    orbit_shape: OrbitShapeParams = field(default_factory=OrbitShapeParams)
    belts: BeltParams = field(default_factory=BeltParams)
    kuiper: KuiperParams = field(default_factory=KuiperParams)
    rings: RingParams = field(default_factory=RingParams)
    comets: CometParams = field(default_factory=CometParams)
    lagrange: LagrangeParams = field(default_factory=LagrangeParams)
    disks: DiskParams = field(default_factory=DiskParams)
    nebulae: NebulaParams = field(default_factory=NebulaParams)
    rogues: RogueParams = field(default_factory=RogueParams)
    black_holes: BlackHoleParams = field(default_factory=BlackHoleParams)

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self._to_dict()
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, path: str | Path) -> "GeneratorConfig":
        """Load configuration from JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Build from a nested dict; missing keys keep their defaults."""
        return cls._from_dict(data)

    def to_dict(self) -> dict:
        return self._to_dict()

    def _to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        def convert(obj):
            if isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, Path):
                return str(obj)
            elif hasattr(obj, '__dataclass_fields__'):
                return {k: convert(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert(x) for x in obj]
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            return obj

        return convert(self)

    @classmethod
    def _from_dict(cls, data: dict) -> "GeneratorConfig":
        """Reconstruct from dictionary."""
        return _build_section(cls, data, "")

    def validate(self) -> List[str]:
        """Validate configuration, return list of warnings/errors."""
        issues = []

        if len(self.star_probabilities) != 3:
            issues.append("star_probabilities needs exactly three weights")
        elif sum(self.star_probabilities) <= 0:
            issues.append("star_probabilities must have a positive sum")
        for name in ("planet_geometric_p", "moon_geometric_p"):
            p = getattr(self, name)
            if not 0 <= p <= 1:
                issues.append(f"{name} should be in [0, 1]")
        if self.max_depth < 0:
            issues.append("max_depth is negative; systems will be bare")
        if self.orbit_base <= 0:
            issues.append("orbit_base must be positive")
        if self.orbit_growth < 1:
            issues.append("orbit_growth < 1 makes outer orbits shrink")
        if self.orbit_jitter >= self.orbit_base:
            issues.append("orbit_jitter >= orbit_base may produce non-positive distances")
        if self.mass_sigma < 0:
            issues.append("mass_sigma must be non-negative")
        if self.max_systems < 1:
            issues.append("max_systems must be at least 1")
        if self.grouping.num_groups[0] < 1:
            issues.append("grouping.num_groups minimum is raised to 1")

        for section, lo_name, hi_name in (
            (self.belts, "min_count", "max_count"),
            (self.kuiper, "min_count", "max_count"),
            (self.lagrange, "trojan_min_count", "trojan_max_count"),
        ):
            if getattr(section, lo_name) > getattr(section, hi_name):
                issues.append(f"{type(section).__name__}: {lo_name} > {hi_name}")

        for section in (self.grouping, self.orbit_shape, self.belts, self.kuiper,
                        self.rings, self.comets, self.lagrange, self.disks,
                        self.nebulae, self.rogues, self.black_holes):
            for f in fields(section):
                value = getattr(section, f.name)
                if f.name.endswith("_range") and value[0] > value[1]:
                    issues.append(f"{type(section).__name__}.{f.name}: min > max")
                if f.name.endswith("probability") and not 0 <= value <= 1:
                    issues.append(f"{type(section).__name__}.{f.name} will be clamped to [0, 1]")

        if self.black_holes.max_shadow_radius <= 0:
            issues.append("black_holes.max_shadow_radius must be positive")

        return issues


def _build_section(cls, data: Dict[str, Any], prefix: str):
    """Recursively rebuild a dataclass, converting enums and tuples."""
    if not isinstance(data, dict):
        raise ValueError(f"Configuration section '{prefix.rstrip('.') or 'root'}' must be a mapping")

    defaults = cls()
    known = {f.name for f in fields(cls)}
    kwargs = {}
    for key, value in data.items():
        if key not in known:
            raise ValueError(f"Unknown configuration key '{prefix}{key}'")
        current = getattr(defaults, key)
        if is_dataclass(current):
            value = _build_section(type(current), value, f"{prefix}{key}.")
        elif isinstance(current, Enum):
            value = type(current)(value)
        elif isinstance(current, tuple):
            value = tuple(value)
        kwargs[key] = value
    return cls(**kwargs)


# Preset configurations
def sparse_config() -> GeneratorConfig:
    """Few lonely single-star systems with slightly tilted orbits."""
    return GeneratorConfig(
        max_systems=3,
        max_depth=2,
        star_probabilities=(1.0, 0.0, 0.0),
        planet_geometric_p=0.8,
        moon_geometric_p=0.8,
        orbit_shape=OrbitShapeParams(enable=True, inclination_max=5.0),
    )


def solar_like_config() -> GeneratorConfig:
    """Solar-system-like defaults: a main belt, occasional rings and comets."""
    return GeneratorConfig(
        max_systems=5,
        max_depth=3,
        star_probabilities=(0.8, 0.2, 0.0),
        planet_geometric_p=0.5,
        moon_geometric_p=0.6,
        orbit_shape=OrbitShapeParams(enable=True, inclination_max=10.0),
        belts=BeltParams(enable_asteroid_belts=True, max_belts_per_system=1),
        kuiper=KuiperParams(enable=True, probability=0.5),
        rings=RingParams(enable=True, base_probability=0.3),
        comets=CometParams(enable=True, count_range=(0, 2), activity=0.5),
        lagrange=LagrangeParams(
            enable=True,
            generate_l1_l3_markers=True,
            enable_trojans=True,
            trojan_frequency=0.3,
        ),
    )


def crowded_config() -> GeneratorConfig:
    """Many multi-star systems with mixed eccentricities and grouping."""
    return GeneratorConfig(
        max_systems=15,
        max_depth=3,
        planet_geometric_p=0.3,
        moon_geometric_p=0.4,
        grouping=GroupingParams(enable=True),
        orbit_shape=OrbitShapeParams(
            enable=True,
            eccentricity_range=(0.0, 0.3),
            inclination_max=25.0,
            secondary_rotation_max=10.0,
        ),
        belts=BeltParams(
            enable_asteroid_belts=True,
            placement_mode=BeltPlacementMode.BOTH,
            max_belts_per_system=2,
        ),
        kuiper=KuiperParams(enable=True, probability=0.6),
        rings=RingParams(enable=True, base_probability=0.6),
        comets=CometParams(enable=True, count_range=(1, 4), short_period_probability=0.5, activity=0.7),
        lagrange=LagrangeParams(enable=True, generate_l1_l3_markers=True,
                                enable_trojans=True, trojan_frequency=0.6),
        disks=DiskParams(enable=True, probability=0.2),
        nebulae=NebulaParams(enable=True),
        rogues=RogueParams(enable=True),
    )


def super_dense_config() -> GeneratorConfig:
    """Stress preset: everything enabled at high frequency."""
    return GeneratorConfig(
        max_systems=50,
        max_depth=4,
        planet_geometric_p=0.2,
        moon_geometric_p=0.3,
        grouping=GroupingParams(enable=True, num_groups=(4, 8), nesting_probability=0.5),
        orbit_shape=OrbitShapeParams(
            enable=True,
            eccentricity_range=(0.1, 0.6),
            inclination_max=45.0,
            secondary_rotation_max=30.0,
            offset_enabled=True,
            offset_max=0.5,
        ),
        belts=BeltParams(
            enable_asteroid_belts=True,
            placement_mode=BeltPlacementMode.BOTH,
            max_belts_per_system=3,
            gap_probability=0.7,
        ),
        kuiper=KuiperParams(enable=True, probability=0.9),
        rings=RingParams(enable=True, base_probability=0.9),
        comets=CometParams(enable=True, count_range=(3, 8), short_period_probability=0.7, activity=0.9),
        lagrange=LagrangeParams(
            enable=True,
            pair_scope=LagrangePairScope.BOTH,
            generate_l1_l3_markers=True,
            enable_trojans=True,
            trojan_frequency=0.8,
        ),
        disks=DiskParams(enable=True, probability=0.5),
        nebulae=NebulaParams(enable=True, count_range=(3, 6), size_bias=NebulaSizeBias.LARGE),
        rogues=RogueParams(enable=True, count_range=(3, 8)),
        black_holes=BlackHoleParams(enable=True, system_probability=0.1, as_companion_probability=0.1),
    )


CONFIG_PRESETS = {
    "sparse": sparse_config,
    "solarLike": solar_like_config,
    "crowded": crowded_config,
    "superDenseExperimental": super_dense_config,
}
