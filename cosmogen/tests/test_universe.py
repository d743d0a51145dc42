"""
Tests for orchestration: pipelines, public entry points and groups.
"""

import pytest
from cosmogen.config import (
    CONFIG_PRESETS,
    BlackHoleParams,
    CometParams,
    BeltParams,
    GeneratorConfig,
    GroupingParams,
    RingParams,
)
from cosmogen.core.bodies import BodyType, BlackHoleBody, CometBody, Group, GroupChild, Vector3
from cosmogen.core.distributions import RandomGenerator
from cosmogen.core.presets import TOPOLOGY_PRESETS, apply_suggested_overrides
from cosmogen.orchestration import (
    GroupGenerator,
    Pipeline,
    PipelineError,
    Stage,
    build_system_pipeline,
    generate_multiple_systems,
    generate_solar_system,
    generate_universe,
)
from cosmogen.orchestration.groups import root_group_ids, would_create_cycle
from cosmogen.orchestration.universe import resolve_config
from cosmogen.analysis import check_snapshot, compute_generation_stats


def _body_dicts(snapshot, exclude=()):
    return {
        k: b.to_dict() for k, b in snapshot.bodies.items()
        if b.body_type not in exclude
    }


class TestSolarSystem:
    """Tests for generate_solar_system."""

    def test_reproducible(self):
        """Same seed and default config give identical systems."""
        a = generate_solar_system("test-seed-123")
        b = generate_solar_system("test-seed-123")
        stats_a = compute_generation_stats(a)
        stats_b = compute_generation_stats(b)
        assert stats_a.total_stars == stats_b.total_stars
        assert stats_a.total_planets == stats_b.total_planets
        assert stats_a.total_moons == stats_b.total_moons
        assert a.to_dict() == b.to_dict()

    def test_different_seeds_differ(self):
        a = generate_solar_system("alpha")
        b = generate_solar_system("beta")
        assert set(a.bodies) != set(b.bodies)

    def test_single_root(self):
        for seed in range(20):
            snapshot = generate_solar_system(seed)
            assert len(snapshot.root_ids) <= 1
            assert check_snapshot(snapshot) == []

    def test_defaults_produce_no_phenomena(self):
        snapshot = generate_solar_system(5)
        assert snapshot.small_body_fields == {}
        assert snapshot.protoplanetary_disks == {}
        assert snapshot.groups == {}
        assert snapshot.nebulae == {}
        assert snapshot.rogue_planet_ids == []
        assert snapshot.belts == {}
        types = {b.body_type for b in snapshot.bodies.values()}
        assert types <= {BodyType.STAR, BodyType.PLANET, BodyType.MOON}

    def test_seed_recorded(self):
        assert generate_solar_system(1234).seed == 1234

    def test_root_parent_id_serialized_as_null(self):
        """Plain output keeps parentId on every body, null for the root."""
        snapshot = generate_solar_system("test-seed-123")
        data = snapshot.to_dict()
        root_id = snapshot.root_ids[0]
        assert "parentId" in data["stars"][root_id]
        assert data["stars"][root_id]["parentId"] is None
        roots = [k for k, body in data["stars"].items() if body["parentId"] is None]
        assert roots == snapshot.root_ids

    def test_black_hole_centers(self):
        """With system_probability 1 every root is a black hole."""
        config = GeneratorConfig(black_holes=BlackHoleParams(enable=True, system_probability=1.0))
        for seed in range(10):
            snapshot = generate_solar_system(seed, config)
            for root_id in snapshot.root_ids:
                root = snapshot.bodies[root_id]
                assert root.body_type == BodyType.BLACK_HOLE
                assert isinstance(root, BlackHoleBody)
                assert root.black_hole is not None
            assert check_snapshot(snapshot) == []

    def test_dict_config(self):
        snapshot = generate_solar_system("dict", {"rings": {"enable": True, "base_probability": 1.0}})
        planets = snapshot.bodies_of_type(BodyType.PLANET)
        assert all(p.ring is not None for p in planets)

    def test_unknown_config_key(self):
        with pytest.raises(ValueError):
            generate_solar_system(1, {"ringz": {"enable": True}})

    def test_bad_config_type(self):
        with pytest.raises(TypeError):
            resolve_config(["rings"])


class TestStageIndependence:
    """Toggling one pass never changes what the others produce."""

    def test_comets_and_belts_do_not_shift_rings(self):
        rings_only = GeneratorConfig(rings=RingParams(enable=True, base_probability=0.5))
        everything = GeneratorConfig(
            rings=RingParams(enable=True, base_probability=0.5),
            comets=CometParams(enable=True),
            belts=BeltParams(enable_asteroid_belts=True),
        )
        for seed in ("toggle-1", "toggle-2", 77):
            a = generate_solar_system(seed, rings_only)
            b = generate_solar_system(seed, everything)
            expected = _body_dicts(a)
            actual = _body_dicts(b, exclude=(BodyType.COMET,))
            # Comets are registered as children of the root
            for body in actual.values():
                body["children"] = [c for c in body["children"] if c in expected]
            assert actual == expected

    def test_inactive_black_hole_path_is_invisible(self):
        plain = GeneratorConfig()
        armed = GeneratorConfig(black_holes=BlackHoleParams(enable=True, system_probability=0.0))
        for seed in range(5):
            assert _body_dicts(generate_solar_system(seed, plain)) == \
                _body_dicts(generate_solar_system(seed, armed))

    def test_comets_are_extra_bodies(self):
        config = GeneratorConfig(comets=CometParams(enable=True, count_range=(2, 2)))
        for seed in range(5):
            snapshot = generate_solar_system(seed, config)
            comets = [b for b in snapshot.bodies.values() if isinstance(b, CometBody)]
            assert len(comets) == (2 if snapshot.root_ids else 0)


class TestMultipleSystems:
    """Tests for generate_multiple_systems and generate_universe."""

    def test_system_count(self):
        snapshot = generate_multiple_systems(6, seed="galaxy")
        assert len(snapshot.root_ids) <= 6
        assert len(set(snapshot.root_ids)) == len(snapshot.root_ids)
        assert check_snapshot(snapshot) == []

    def test_prefix_stability(self):
        """System k depends only on the master seed and k."""
        small = generate_multiple_systems(2, seed="prefix")
        large = generate_multiple_systems(4, seed="prefix")
        assert large.root_ids[:len(small.root_ids)] == small.root_ids
        for body_id, body in small.bodies.items():
            assert large.bodies[body_id].to_dict() == body.to_dict()

    def test_grouping(self):
        config = GeneratorConfig(grouping=GroupingParams(enable=True, num_groups=(2, 3)))
        snapshot = generate_multiple_systems(8, seed="groups", config=config)
        assert 1 <= len(snapshot.groups) <= 3
        assert snapshot.root_group_ids
        assert check_snapshot(snapshot) == []

    def test_default_config_still_groups(self):
        """The shared pass groups the merged systems even with grouping off."""
        config = GeneratorConfig()
        assert not config.grouping.enable
        snapshot = generate_multiple_systems(5, seed="galaxy", config=config)
        assert snapshot.root_ids
        assert snapshot.groups
        assert snapshot.root_group_ids
        members = [c.id for g in snapshot.groups.values() for c in g.children if c.type == "system"]
        assert sorted(members) == sorted(snapshot.root_ids)
        assert check_snapshot(snapshot) == []
        assert not config.grouping.enable

    def test_dispatch(self):
        config = GeneratorConfig(max_systems=3)
        a = generate_universe(config, seed=9)
        b = generate_multiple_systems(3, seed=9, config=config)
        assert a.to_dict() == b.to_dict()

        single = generate_universe(GeneratorConfig(), seed=9)
        assert single.to_dict() == generate_solar_system(9).to_dict()

    def test_zero_systems(self):
        snapshot = generate_multiple_systems(0, seed=1)
        assert snapshot.bodies == {}
        assert snapshot.root_ids == []

    def test_presets_are_consistent(self):
        """Every style preset yields a structurally sound universe."""
        for name, factory in CONFIG_PRESETS.items():
            config = factory()
            config.max_systems = min(config.max_systems, 4)
            snapshot = generate_universe(config, seed=f"preset-{name}")
            assert check_snapshot(snapshot) == [], name

    def test_topology_presets_are_consistent(self):
        for preset_id in TOPOLOGY_PRESETS:
            config = apply_suggested_overrides(GeneratorConfig(max_systems=3), preset_id)
            snapshot = generate_universe(config, seed=preset_id)
            assert check_snapshot(snapshot) == [], preset_id

    def test_rogues_are_not_roots(self):
        config = CONFIG_PRESETS["crowded"]()
        config.max_systems = 3
        snapshot = generate_universe(config, seed="rogue")
        assert snapshot.rogue_planet_ids
        for rogue_id in snapshot.rogue_planet_ids:
            assert rogue_id not in snapshot.root_ids
            assert snapshot.bodies[rogue_id].parent_id is None


class TestPipeline:
    """Tests for the stage pipeline."""

    def test_missing_requirement(self):
        with pytest.raises(PipelineError):
            Pipeline([Stage("bodies", "stardata", requires=("tree",), provides=("bodies",))])

    def test_duplicate_stage(self):
        with pytest.raises(PipelineError):
            Pipeline([Stage("a", "a"), Stage("a", "b")])

    def test_initial_artifacts(self):
        pipeline = Pipeline([Stage("groups", "groups", requires=("root_ids",))], initial=("root_ids",))
        assert pipeline.artifacts == ["root_ids"]

    def test_disabled_stage_still_reported(self):
        calls = []
        pipeline = Pipeline([
            Stage("one", "one", run=lambda ctx, rng: calls.append("one")),
            Stage("two", "two", run=lambda ctx, rng: calls.append("two"), enabled=False),
        ])
        pipeline.run(RandomGenerator.from_seed(1), None)
        assert calls == ["one"]
        assert [(r.name, r.label_path, r.ran) for r in pipeline.reports] == [
            ("one", "one", True), ("two", "two", False),
        ]

    def test_streams_are_stage_forks(self):
        seen = {}
        pipeline = Pipeline([
            Stage("one", "rings", run=lambda ctx, rng: seen.setdefault("one", rng.float())),
        ])
        pipeline.run(RandomGenerator.from_seed(3), None)
        assert seen["one"] == RandomGenerator.from_seed(3).fork("rings").float()

    def test_system_pipeline_order(self):
        pipeline = build_system_pipeline(GeneratorConfig())
        names = [s.name for s in pipeline.stages]
        assert names == [
            "topology", "blackHoles", "orbitShape", "bodies", "rings", "belts",
            "kuiper", "comets", "lagrange", "protoplanetaryDisks",
            "groups", "nebulae", "roguePlanets",
        ]
        assert not pipeline.stage("rings").enabled
        assert pipeline.stage("topology").label == "lsystem"


def _group(group_id, parent=None):
    return Group(id=group_id, name=group_id, color="#FFFFFF", position=Vector3(),
                 parent_group_id=parent)


class TestGroups:
    """Tests for GroupGenerator."""

    def test_every_system_in_one_group(self):
        params = GroupingParams(enable=True, num_groups=(3, 5), nesting_probability=0.5)
        roots = [f"sys-{i}" for i in range(10)]
        groups = GroupGenerator(params, RandomGenerator.from_seed(1)).generate(roots)
        assert 3 <= len(groups) <= 5
        members = [c.id for g in groups for c in g.children if c.type == "system"]
        assert sorted(members) == sorted(roots)

    def test_group_count_capped_by_systems(self):
        params = GroupingParams(enable=True, num_groups=(3, 7))
        groups = GroupGenerator(params, RandomGenerator.from_seed(2)).generate(["a", "b"])
        assert 1 <= len(groups) <= 2

    def test_zero_minimum_still_groups_every_system(self):
        params = GroupingParams(enable=True, num_groups=(0, 3))
        roots = ["a", "b", "c", "d"]
        for seed in range(40):
            groups = GroupGenerator(params, RandomGenerator.from_seed(seed)).generate(roots)
            assert 1 <= len(groups) <= 3
            members = [c.id for g in groups for c in g.children if c.type == "system"]
            assert sorted(members) == roots

    def test_disabled_or_empty(self):
        assert GroupGenerator(GroupingParams(enable=False), RandomGenerator.from_seed(1)).generate(["a"]) == []
        assert GroupGenerator(GroupingParams(enable=True), RandomGenerator.from_seed(1)).generate([]) == []

    def test_nesting_is_acyclic(self):
        params = GroupingParams(enable=True, num_groups=(6, 6), nesting_probability=1.0)
        for seed in range(10):
            groups = GroupGenerator(params, RandomGenerator.from_seed(seed)).generate(
                [f"s{i}" for i in range(6)])
            by_id = {g.id: g for g in groups}
            for group in groups:
                seen = set()
                current = group
                while current.parent_group_id is not None:
                    assert current.id not in seen
                    seen.add(current.id)
                    current = by_id[current.parent_group_id]
            roots = root_group_ids(groups)
            assert roots
            for group in groups:
                if group.parent_group_id is not None:
                    parent = by_id[group.parent_group_id]
                    assert GroupChild(id=group.id, type="group") in parent.children

    def test_would_create_cycle(self):
        a, b, c = _group("a"), _group("b", "a"), _group("c", "b")
        groups = {"a": a, "b": b, "c": c}
        assert would_create_cycle(a, c, groups)
        assert not would_create_cycle(c, a, groups)
        assert would_create_cycle(a, a, groups)
