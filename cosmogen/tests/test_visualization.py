"""
Tests for the diagnostic plots.
"""

import math

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

from cosmogen.config import CONFIG_PRESETS
from cosmogen.core.bodies import UniverseSnapshot
from cosmogen.orchestration import generate_solar_system, generate_universe
from cosmogen.visualization import plot_generation_stats, plot_system_overview
from cosmogen.visualization.system_plot import planar_positions


@pytest.fixture
def snapshot():
    config = CONFIG_PRESETS["solarLike"]()
    config.max_systems = 2
    return generate_universe(config, seed="plots")


class TestPlots:
    """Tests for plot functions."""

    def test_planar_positions(self):
        snapshot = generate_solar_system("positions")
        root_id = snapshot.root_ids[0]
        positions = planar_positions(snapshot.bodies, root_id)
        assert positions[root_id] == (0.0, 0.0)
        for body_id, (x, y) in positions.items():
            body = snapshot.bodies[body_id]
            if body.parent_id is None:
                continue
            px, py = positions[body.parent_id]
            assert math.hypot(x - px, y - py) == pytest.approx(body.orbital_distance)

    def test_system_overview(self, snapshot):
        ax = plot_system_overview(snapshot)
        assert ax.get_title().startswith("System")
        plt.close(ax.figure)

    def test_overview_other_root(self, snapshot):
        fig, ax = plt.subplots()
        result = plot_system_overview(snapshot, root_id=snapshot.root_ids[-1], ax=ax, show_labels=False)
        assert result is ax
        plt.close(fig)

    def test_empty_overview(self):
        ax = plot_system_overview(UniverseSnapshot())
        assert ax.get_title() == "Empty system"
        plt.close(ax.figure)

    def test_generation_stats_figure(self, snapshot):
        fig = plot_generation_stats(snapshot)
        assert len(fig.axes) == 4
        plt.close(fig)
