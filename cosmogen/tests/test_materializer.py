"""
Tests for the topology -> bodies materializer.
"""

import pytest
from cosmogen.config import GeneratorConfig, OrbitShapeParams
from cosmogen.core.bodies import BodyType, MoonBody, PlanetBody, StarBody
from cosmogen.core.distributions import RandomGenerator
from cosmogen.core.materializer import (
    BodyMaterializer,
    NameRegistry,
    _letters,
    star_color,
)
from cosmogen.core.topology import NodeType, TopologyNode


def _node(node_type, node_id, parent=None):
    node = TopologyNode(type=node_type, id=node_id, parent=parent,
                        depth=0 if parent is None else parent.depth + 1)
    if parent is not None:
        parent.children.append(node)
    return node


def _system(num_stars=1, moons_per_planet=(2, 0, 1)):
    root = _node(NodeType.SYSTEM, "sys")
    for i in range(num_stars):
        _node(NodeType.STAR, f"star-{i}", root)
    for i, moons in enumerate(moons_per_planet):
        planet = _node(NodeType.PLANET, f"planet-{i}", root)
        for j in range(moons):
            _node(NodeType.MOON, f"moon-{i}-{j}", planet)
    return root


def _materialize(root, seed=42, config=None, shape_seed=None):
    config = config or GeneratorConfig()
    shape_rng = RandomGenerator.from_seed(shape_seed) if shape_seed is not None else None
    return BodyMaterializer(config, RandomGenerator.from_seed(seed), shape_rng=shape_rng).materialize(root)


class TestBodyMaterializer:
    """Tests for BodyMaterializer."""

    def test_heaviest_star_is_root(self):
        """The center outweighs every stellar companion."""
        for seed in range(25):
            system = _materialize(_system(num_stars=3), seed=seed)
            root = system.bodies[system.root_id]
            assert root.parent_id is None
            companions = [b for b in system.bodies.values()
                          if b.body_type == BodyType.STAR and b.id != root.id]
            assert len(companions) == 2
            assert all(c.mass <= root.mass for c in companions)
            assert all(c.parent_id == root.id for c in companions)

    def test_companion_phases_evenly_spaced(self):
        system = _materialize(_system(num_stars=3, moons_per_planet=()))
        phases = sorted(b.orbital_phase for b in system.bodies.values() if b.parent_id is not None)
        assert phases == [0.0, 180.0]

    def test_planet_orbit_index_skips_companions(self):
        """With one companion the first planet sits at index 1."""
        config = GeneratorConfig(orbit_jitter=0.0)
        system = _materialize(_system(num_stars=2, moons_per_planet=(0, 0)), config=config)
        planets = [b for b in system.bodies.values() if isinstance(b, PlanetBody)]
        distances = sorted(p.orbital_distance for p in planets)
        assert distances[0] == pytest.approx(config.orbit_base * config.orbit_growth)
        assert distances[1] == pytest.approx(config.orbit_base * config.orbit_growth ** 2)

    def test_moons_use_own_index(self):
        config = GeneratorConfig(orbit_jitter=0.0)
        system = _materialize(_system(moons_per_planet=(2,)), config=config)
        moons = sorted((b for b in system.bodies.values() if isinstance(b, MoonBody)),
                       key=lambda m: m.orbital_distance)
        assert moons[0].orbital_distance == pytest.approx(config.orbit_base)
        assert moons[1].orbital_distance == pytest.approx(config.orbit_base * config.orbit_growth)
        assert all(m.parent_id == "planet-0" for m in moons)

    def test_orbital_speed(self):
        config = GeneratorConfig()
        system = _materialize(_system(), config=config)
        for body in system.bodies.values():
            if body.parent_id is None:
                assert body.orbital_speed == 0.0
                assert body.orbital_distance == 0.0
            else:
                assert body.orbital_speed == pytest.approx(config.orbit_k / body.orbital_distance ** 0.5)

    def test_children_consistent_with_parents(self):
        system = _materialize(_system(num_stars=2))
        for body in system.bodies.values():
            for child_id in body.children:
                assert system.bodies[child_id].parent_id == body.id
            if body.parent_id is not None:
                assert body.id in system.bodies[body.parent_id].children

    def test_ids_taken_from_topology(self):
        system = _materialize(_system(moons_per_planet=(1,)))
        assert set(system.bodies) == {"star-0", "planet-0", "moon-0-0"}

    def test_creation_order_is_depth_first(self):
        system = _materialize(_system(moons_per_planet=(2, 0, 1)))
        assert list(system.bodies) == [
            "star-0", "planet-0", "moon-0-0", "moon-0-1", "planet-1", "planet-2", "moon-2-0",
        ]

    def test_deep_moon_chain(self):
        """Thousands of nested moons materialize without exhausting the stack."""
        root = _system(moons_per_planet=(1,))
        node = root.children[-1].children[0]
        for i in range(5000):
            node = _node(NodeType.MOON, f"deep-{i}", node)
        system = _materialize(root)
        assert len(system.bodies) == 5003
        assert system.bodies["deep-0"].parent_id == "moon-0-0"
        assert system.bodies["deep-4999"].parent_id == "deep-4998"
        assert system.bodies["deep-4999"].children == []

    def test_implicit_star(self):
        """Planets without any star orbit a star built from the system node."""
        system = _materialize(_system(num_stars=0, moons_per_planet=(1, 1)))
        assert system.root_id == "sys"
        root = system.bodies["sys"]
        assert isinstance(root, StarBody)
        assert len([b for b in system.bodies.values() if isinstance(b, PlanetBody)]) == 2

    def test_empty_system(self):
        system = _materialize(_system(num_stars=0, moons_per_planet=()))
        assert system.root_id is None
        assert system.bodies == {}

    def test_rejects_non_system_root(self):
        with pytest.raises(ValueError):
            _materialize(_node(NodeType.PLANET, "p"))

    def test_circular_orbits_by_default(self):
        system = _materialize(_system(num_stars=2), shape_seed=7)
        for body in system.bodies.values():
            assert body.eccentricity is None
            assert body.orbit_rot_x is None
            assert "eccentricity" not in body.to_dict()

    def test_orbit_shaping(self):
        config = GeneratorConfig(orbit_shape=OrbitShapeParams(
            enable=True, eccentricity_range=(0.1, 0.5), inclination_max=20.0,
        ))
        system = _materialize(_system(), config=config, shape_seed=7)
        for body in system.bodies.values():
            if body.parent_id is None:
                continue
            assert 0.1 <= body.eccentricity <= 0.5
            assert body.semi_major_axis == body.orbital_distance
            assert -20.0 <= body.orbit_rot_x <= 20.0
            assert body.orbit_rot_y is None

    def test_shaping_leaves_main_stream_alone(self):
        """Enabling orbit shaping changes no mass, distance or phase."""
        plain = _materialize(_system(num_stars=2), seed=11)
        config = GeneratorConfig(orbit_shape=OrbitShapeParams(enable=True, eccentricity_range=(0.1, 0.2)))
        shaped = _materialize(_system(num_stars=2), seed=11, config=config, shape_seed=3)
        for body_id, body in plain.bodies.items():
            other = shaped.bodies[body_id]
            assert (body.mass, body.orbital_distance, body.orbital_phase) == \
                (other.mass, other.orbital_distance, other.orbital_phase)

    def test_deterministic(self):
        a = _materialize(_system(num_stars=3), seed="repeat")
        b = _materialize(_system(num_stars=3), seed="repeat")
        assert {k: v.to_dict() for k, v in a.bodies.items()} == {k: v.to_dict() for k, v in b.bodies.items()}


class TestNaming:
    """Tests for naming and colors."""

    def test_star_names(self):
        names = NameRegistry()
        generated = [names.next("star") for _ in range(8)]
        assert generated[0] == "Beta Centauri"
        assert generated[6] == "Theta Centauri"
        assert generated[7] == "Alpha Orionis"

    def test_planet_names_overflow(self):
        names = NameRegistry()
        generated = [names.next("planet") for _ in range(11)]
        assert generated[0] == "Mercury"
        assert generated[8] == "Pluto"
        assert generated[9] == "Planet J"
        assert generated[10] == "Planet K"

    def test_moon_names_overflow(self):
        names = NameRegistry()
        generated = [names.next("moon") for _ in range(9)]
        assert generated[0] == "Moon"
        assert generated[8] == "Moon 9"

    def test_letters(self):
        assert _letters(1) == "A"
        assert _letters(26) == "Z"
        assert _letters(27) == "AA"

    def test_star_color_bands(self):
        assert star_color(1000.0) == "#9BB0FF"
        assert star_color(150.0) == "#F8F7FF"
        assert star_color(10.0) == "#FFD2A1"
