"""
Top-level orchestration: seed + config -> UniverseSnapshot.

Single system:
    topology -> black-hole path -> orbit shaping -> bodies -> rings -> belts
    -> kuiper -> comets -> lagrange -> protoplanetary disks -> groups
    -> nebulae -> rogue planets

Multiple systems:
    N single-system runs (grouping, nebulae and rogues off), each seeded by
    one integer drawn in order from the master's 'systems' stream, then one
    shared groups -> nebulae -> rogue planets pass over the merged snapshot.
    Grouping is always on for that shared pass.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from ..config import GeneratorConfig
from ..core.bodies import UniverseSnapshot
from ..core.distributions import RandomGenerator
from ..core.materializer import BodyMaterializer
from ..core.prng import IdFactory, SeedLike
from ..core.presets import create_topology_generator
from ..core.topology import ExpansionStats, TopologyNode
from ..phenomena.belts import BeltGenerator, KuiperBeltGenerator
from ..phenomena.black_holes import BlackHoleGenerator
from ..phenomena.comets import CometGenerator
from ..phenomena.disks import ProtoplanetaryDiskGenerator
from ..phenomena.lagrange import LagrangeGenerator
from ..phenomena.nebulae import NebulaGenerator
from ..phenomena.rings import RingGenerator
from ..phenomena.rogues import RoguePlanetGenerator
from .groups import GroupGenerator, root_group_ids
from .pipeline import Pipeline, Stage

logger = logging.getLogger(__name__)

ConfigLike = Union[GeneratorConfig, Dict[str, Any], None]


@dataclass
class GenerationContext:
    """Mutable state threaded through the stages of one run."""
    config: GeneratorConfig
    snapshot: UniverseSnapshot
    tree: Optional[TopologyNode] = None
    expansion: Optional[ExpansionStats] = None
    root_id: Optional[str] = None
    black_holes: Optional[BlackHoleGenerator] = None
    shape_rng: Optional[RandomGenerator] = None
    ringed_planet_ids: List[str] = field(default_factory=list)


def resolve_config(config: ConfigLike) -> GeneratorConfig:
    """Accept a GeneratorConfig, a nested dict or None; log validation issues."""
    if config is None:
        config = GeneratorConfig()
    elif isinstance(config, dict):
        config = GeneratorConfig.from_dict(config)
    elif not isinstance(config, GeneratorConfig):
        raise TypeError(f"Unsupported config type: {type(config).__name__}")

    for issue in config.validate():
        logger.warning(f"Config: {issue}")
    return config


# ===== Stage bodies =====

def _run_topology(ctx: GenerationContext, rng: RandomGenerator) -> None:
    generator = create_topology_generator(
        ctx.config.topology_preset,
        new_id=IdFactory(rng.fork("ids").stream),
    )
    ctx.tree = generator.generate(rng, ctx.config)
    ctx.expansion = generator.stats
    logger.debug(
        f"Topology '{ctx.config.topology_preset}': {ctx.expansion.nodes_created} nodes, "
        f"height {ctx.tree.height}"
    )


def _run_black_holes(ctx: GenerationContext, rng: RandomGenerator) -> None:
    ctx.black_holes = BlackHoleGenerator(ctx.config.black_holes, rng)


def _run_orbit_shape(ctx: GenerationContext, rng: RandomGenerator) -> None:
    ctx.shape_rng = rng


def _run_bodies(ctx: GenerationContext, rng: RandomGenerator) -> None:
    materializer = BodyMaterializer(ctx.config, rng, ctx.shape_rng, ctx.black_holes)
    system = materializer.materialize(ctx.tree)
    ctx.snapshot.bodies.update(system.bodies)
    ctx.root_id = system.root_id
    if system.root_id is not None:
        ctx.snapshot.root_ids.append(system.root_id)


def _run_rings(ctx: GenerationContext, rng: RandomGenerator) -> None:
    if ctx.root_id is None:
        return
    ctx.ringed_planet_ids = RingGenerator(ctx.config.rings, rng).generate(
        ctx.snapshot.bodies, ctx.root_id
    )


def _run_belts(ctx: GenerationContext, rng: RandomGenerator) -> None:
    if ctx.root_id is None:
        return
    for f in BeltGenerator(ctx.config.belts, rng).generate(ctx.snapshot.bodies, ctx.root_id):
        ctx.snapshot.small_body_fields[f.id] = f


def _run_kuiper(ctx: GenerationContext, rng: RandomGenerator) -> None:
    if ctx.root_id is None:
        return
    for f in KuiperBeltGenerator(ctx.config.kuiper, rng).generate(ctx.snapshot.bodies, ctx.root_id):
        ctx.snapshot.small_body_fields[f.id] = f


def _run_comets(ctx: GenerationContext, rng: RandomGenerator) -> None:
    if ctx.root_id is None:
        return
    c = ctx.config
    generator = CometGenerator(
        c.comets, rng,
        orbit_k=c.orbit_k,
        fallback_distance=c.orbit_base * c.orbit_growth ** 3,
        radius_power=c.radius_power,
    )
    generator.generate(ctx.snapshot.bodies, ctx.root_id)


def _run_lagrange(ctx: GenerationContext, rng: RandomGenerator) -> None:
    if ctx.root_id is None:
        return
    LagrangeGenerator(ctx.config.lagrange, rng).generate(ctx.snapshot.bodies, ctx.root_id)


def _run_disks(ctx: GenerationContext, rng: RandomGenerator) -> None:
    if ctx.root_id is None:
        return
    generator = ProtoplanetaryDiskGenerator(ctx.config.disks, rng)
    for disk in generator.generate(ctx.snapshot.bodies, ctx.root_id):
        ctx.snapshot.protoplanetary_disks[disk.id] = disk


def _run_groups(ctx: GenerationContext, rng: RandomGenerator) -> None:
    groups = GroupGenerator(ctx.config.grouping, rng).generate(ctx.snapshot.root_ids)
    ctx.snapshot.groups = {g.id: g for g in groups}
    ctx.snapshot.root_group_ids = root_group_ids(groups)


def _run_nebulae(ctx: GenerationContext, rng: RandomGenerator) -> None:
    for nebula in NebulaGenerator(ctx.config.nebulae, rng).generate(ctx.snapshot.groups):
        ctx.snapshot.nebulae[nebula.id] = nebula


def _run_rogues(ctx: GenerationContext, rng: RandomGenerator) -> None:
    c = ctx.config
    generator = RoguePlanetGenerator(c.rogues, rng, c.mass_mu, c.mass_sigma, c.radius_power)
    rogues = generator.generate(ctx.snapshot.bodies, ctx.snapshot.groups)
    ctx.snapshot.rogue_planet_ids.extend(r.id for r in rogues)


# ===== Pipelines =====

def _galaxy_stages(config: GeneratorConfig, enabled: bool = True) -> List[Stage]:
    return [
        Stage("groups", GroupGenerator.label, ("root_ids",), ("groups",),
              _run_groups, enabled and config.grouping.enable),
        Stage("nebulae", NebulaGenerator.label, ("groups",), ("nebulae",),
              _run_nebulae, enabled and config.nebulae.enable),
        Stage("roguePlanets", RoguePlanetGenerator.label, ("groups", "bodies"), ("rogue_planets",),
              _run_rogues, enabled and config.rogues.enable),
    ]


def build_system_pipeline(config: GeneratorConfig, galaxy_passes: bool = True) -> Pipeline:
    """
    Stage list of one system run.

    Args:
        config: Generator configuration
        galaxy_passes: False inside multi-system runs, where grouping,
            nebulae and rogues happen once over the merged result
    """
    c = config
    stages = [
        Stage("topology", "lsystem", (), ("tree",), _run_topology),
        Stage("blackHoles", BlackHoleGenerator.label, (), ("black_hole_path",),
              _run_black_holes, c.black_holes.enable),
        Stage("orbitShape", "orbitShape", (), ("orbit_shape",),
              _run_orbit_shape, c.orbit_shape.enable),
        Stage("bodies", "stardata", ("tree", "black_hole_path", "orbit_shape"),
              ("bodies", "root_ids"), _run_bodies),
        Stage("rings", RingGenerator.label, ("bodies",), ("rings",),
              _run_rings, c.rings.enable),
        Stage("belts", BeltGenerator.label, ("bodies",), ("main_belts",),
              _run_belts, c.belts.enable_asteroid_belts),
        Stage("kuiper", KuiperBeltGenerator.label, ("bodies",), ("kuiper_belts",),
              _run_kuiper, c.kuiper.enable),
        Stage("comets", CometGenerator.label, ("bodies",), ("comets",),
              _run_comets, c.comets.enable),
        Stage("lagrange", LagrangeGenerator.label, ("bodies",), ("lagrange_points",),
              _run_lagrange, c.lagrange.enable),
        Stage("protoplanetaryDisks", ProtoplanetaryDiskGenerator.label, ("bodies",),
              ("protoplanetary_disks",), _run_disks, c.disks.enable),
    ]
    stages.extend(_galaxy_stages(config, enabled=galaxy_passes))
    return Pipeline(stages)


def build_galaxy_pipeline(config: GeneratorConfig) -> Pipeline:
    """Shared pass over an already merged multi-system snapshot."""
    return Pipeline(_galaxy_stages(config), initial=("bodies", "root_ids"))


# ===== Public API =====

def _run_system(
    master: RandomGenerator,
    config: GeneratorConfig,
    galaxy_passes: bool,
) -> GenerationContext:
    ctx = GenerationContext(config=config, snapshot=UniverseSnapshot(seed=master.stream.entropy))
    build_system_pipeline(config, galaxy_passes).run(master, ctx)
    return ctx


def generate_solar_system(seed: SeedLike = None, config: ConfigLike = None) -> UniverseSnapshot:
    """
    Generate one system (plus its galaxy-scale passes).

    Args:
        seed: String, number or None (time-based)
        config: GeneratorConfig, nested dict or None for defaults

    Returns:
        UniverseSnapshot with at most one root id
    """
    return _solar_system(seed, resolve_config(config))


def _solar_system(seed: SeedLike, config: GeneratorConfig) -> UniverseSnapshot:
    master = RandomGenerator.from_seed(seed)
    ctx = _run_system(master, config, galaxy_passes=True)
    logger.debug(f"Generated system with {len(ctx.snapshot.bodies)} bodies (seed={master.stream.entropy})")
    return ctx.snapshot


def generate_multiple_systems(
    count: int,
    seed: SeedLike = None,
    config: ConfigLike = None,
) -> UniverseSnapshot:
    """
    Generate count independent systems and merge them.

    Each system is seeded by the next value of the master's 'systems'
    stream, so system k depends only on the master seed and k. The merged
    systems are always grouped, whatever config.grouping.enable says.

    Example:
        snapshot = generate_multiple_systems(5, seed="galaxy-1")
        assert len(snapshot.root_ids) <= 5
    """
    return _multiple_systems(count, seed, resolve_config(config))


def _multiple_systems(count: int, seed: SeedLike, config: GeneratorConfig) -> UniverseSnapshot:
    master = RandomGenerator.from_seed(seed)
    systems = master.fork("systems")
    merged = UniverseSnapshot(seed=master.stream.entropy)

    for i in range(max(0, int(count))):
        system_seed = systems.seed_value()
        part = _run_system(RandomGenerator.from_seed(system_seed), config, galaxy_passes=False).snapshot
        merged.bodies.update(part.bodies)
        merged.root_ids.extend(part.root_ids)
        merged.small_body_fields.update(part.small_body_fields)
        merged.protoplanetary_disks.update(part.protoplanetary_disks)
        logger.debug(f"System {i + 1}/{count}: seed {system_seed}, {len(part.bodies)} bodies")

    galaxy_config = replace(config, grouping=replace(config.grouping, enable=True))
    ctx = GenerationContext(config=galaxy_config, snapshot=merged)
    build_galaxy_pipeline(galaxy_config).run(master, ctx)
    logger.debug(
        f"Generated {len(merged.root_ids)} systems, {len(merged.groups)} groups, "
        f"{len(merged.nebulae)} nebulae, {len(merged.rogue_planet_ids)} rogue planets"
    )
    return merged


def generate_universe(config: ConfigLike = None, seed: SeedLike = None) -> UniverseSnapshot:
    """Dispatch on config.max_systems."""
    config = resolve_config(config)
    if config.max_systems > 1:
        return _multiple_systems(config.max_systems, seed, config)
    return _solar_system(seed, config)

