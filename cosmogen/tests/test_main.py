"""
Tests for the command-line entry point.
"""

import matplotlib
matplotlib.use("Agg")

from cosmogen.config import GeneratorConfig
from cosmogen.main import build_config, main, parse_seed, run_generation


class TestMain:
    """Tests for the CLI helpers."""

    def test_parse_seed(self):
        assert parse_seed("42") == 42
        assert parse_seed("galaxy-7") == "galaxy-7"
        assert parse_seed(None) is None

    def test_build_config_precedence(self, tmp_path):
        path = tmp_path / "config.json"
        GeneratorConfig(max_systems=7).save(path)
        config = build_config(preset="crowded", config_path=path)
        assert config.max_systems == 7

        config = build_config(preset="sparse", topology="moonRich", systems=2)
        assert config.topology_preset == "moonRich"
        assert config.max_systems == 2
        assert config.star_probabilities == (1.0, 0.0, 0.0)

    def test_run_generation(self, tmp_path):
        results = run_generation(GeneratorConfig(), seed=3, output_dir=tmp_path, name="run", check=True)
        assert results["issues"] == []
        assert (tmp_path / "run.json").exists()
        assert (tmp_path / "run_config.json").exists()
        assert (tmp_path / "run_stats.json").exists()

    def test_main(self, tmp_path):
        code = main(["--seed", "cli", "--systems", "2", "--output", str(tmp_path),
                     "--name", "cli", "--check", "--compress", "--plot"])
        assert code == 0
        assert (tmp_path / "cli.json.gz").exists()
        assert (tmp_path / "cli_system.png").exists()
        assert (tmp_path / "cli_stats.png").exists()
