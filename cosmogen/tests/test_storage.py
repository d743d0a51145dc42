"""
Tests for JSON snapshot storage.
"""

import gzip
import json

import pytest
import numpy as np
from cosmogen.config import CONFIG_PRESETS
from cosmogen.orchestration import generate_universe
from cosmogen.storage import JSONStorage, load_snapshot, save_snapshot
from cosmogen.storage.json_storage import SnapshotEncoder


@pytest.fixture
def snapshot():
    config = CONFIG_PRESETS["crowded"]()
    config.max_systems = 3
    return generate_universe(config, seed="storage")


class TestJSONStorage:
    """Tests for JSONStorage."""

    def test_save_and_load(self, tmp_path, snapshot):
        storage = JSONStorage(tmp_path / "out")
        path = storage.save(snapshot, "run")
        assert path.name == "run.json"
        data = storage.load("run")
        assert data == json.loads(json.dumps(snapshot.to_dict()))
        assert set(data) >= {"stars", "rootIds", "groups", "smallBodyFields", "roguePlanetIds"}

    def test_compressed(self, tmp_path, snapshot):
        storage = JSONStorage(tmp_path)
        path = storage.save(snapshot, "run", compress=True)
        assert path.name == "run.json.gz"
        with gzip.open(path, "rt", encoding="utf-8") as f:
            raw = json.load(f)
        assert raw["rootIds"] == snapshot.root_ids
        assert storage.load("run")["rootIds"] == snapshot.root_ids

    def test_exists_list_delete(self, tmp_path):
        storage = JSONStorage(tmp_path)
        storage.save({"a": 1}, "first")
        storage.save({"b": 2}, "second", compress=True)
        assert storage.exists("first")
        assert storage.exists("second")
        assert [p.name for p in storage.list_files()] == ["first.json", "second.json.gz"]

        assert storage.delete("first")
        assert not storage.exists("first")
        assert not storage.delete("first")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JSONStorage(tmp_path).load("nothing")

    def test_bodies_are_camel_case(self, tmp_path, snapshot):
        storage = JSONStorage(tmp_path)
        storage.save(snapshot, "run")
        data = storage.load("run")
        body = next(iter(data["stars"].values()))
        assert {"id", "name", "mass", "radius", "color", "parentId", "orbitalDistance",
                "orbitalSpeed", "orbitalPhase", "children", "bodyType"} <= set(body)
        assert data["belts"] == {}


class TestSnapshotFiles:
    """Tests for save_snapshot / load_snapshot."""

    def test_roundtrip(self, tmp_path, snapshot):
        path = save_snapshot(snapshot, tmp_path / "deep" / "universe.json")
        assert path.exists()
        assert load_snapshot(path)["seed"] == snapshot.seed

    def test_compress_appends_suffix(self, tmp_path, snapshot):
        path = save_snapshot(snapshot, tmp_path / "universe.json", compress=True)
        assert path.name == "universe.json.gz"
        assert load_snapshot(path)["rootIds"] == snapshot.root_ids

    def test_plain_dict(self, tmp_path):
        path = save_snapshot({"stars": {}, "rootIds": []}, tmp_path / "empty.json")
        assert load_snapshot(path) == {"stars": {}, "rootIds": []}


class TestSnapshotEncoder:
    """Tests for SnapshotEncoder."""

    def test_numpy_values(self):
        data = {"i": np.int64(3), "f": np.float32(0.5), "b": np.bool_(True), "a": np.arange(3)}
        assert json.loads(json.dumps(data, cls=SnapshotEncoder)) == {"i": 3, "f": 0.5, "b": True, "a": [0, 1, 2]}

    def test_enum(self):
        from cosmogen.core.bodies import BodyType
        assert json.dumps(BodyType.BLACK_HOLE, cls=SnapshotEncoder) == '"blackHole"'
