"""
cosmogen - deterministic procedural celestial-system generator.

Main entry point for generation runs.
"""

from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import Optional, Union

from cosmogen.config import CONFIG_PRESETS, GeneratorConfig
from cosmogen.core.presets import TOPOLOGY_PRESETS, apply_suggested_overrides
from cosmogen.orchestration import generate_universe
from cosmogen.analysis import check_snapshot, compute_generation_stats
from cosmogen.storage import JSONStorage
from cosmogen.visualization import plot_generation_stats, plot_system_overview


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_seed(value: Optional[str]) -> Union[int, str, None]:
    """Numeric seeds stay numbers, anything else is a string seed."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return value


def build_config(
    preset: Optional[str] = None,
    topology: Optional[str] = None,
    config_path: Optional[Path] = None,
    systems: Optional[int] = None,
) -> GeneratorConfig:
    """
    Assemble the run configuration.

    Precedence: config file, else style preset, else defaults; then the
    topology preset (with its suggested overrides) and the system count.
    """
    if config_path is not None:
        config = GeneratorConfig.load(config_path)
    elif preset is not None:
        config = CONFIG_PRESETS[preset]()
    else:
        config = GeneratorConfig()

    if topology is not None:
        config = apply_suggested_overrides(config, topology)
    if systems is not None:
        config.max_systems = systems
    return config


def run_generation(
    config: GeneratorConfig,
    seed: Union[int, str, None] = None,
    output_dir: Optional[Path] = None,
    name: str = "universe",
    check: bool = False,
    compress: bool = False,
) -> dict:
    """
    Generate one universe and write it to disk.

    Args:
        config: Generator configuration
        seed: String, number or None (time-based)
        output_dir: Directory for output files
        name: Base filename of this run
        check: Run structural checks and log every problem
        compress: Gzip the snapshot

    Returns:
        Dictionary with results
    """
    logger.info(f"Starting generation: {name}")
    logger.info(f"Topology: {config.topology_preset}, systems: {config.max_systems}, seed: {seed}")

    snapshot = generate_universe(config, seed=seed)
    stats = compute_generation_stats(snapshot)
    for line in stats.summary_lines():
        logger.info(line)

    issues = []
    if check:
        issues = check_snapshot(snapshot)
        for issue in issues:
            logger.error(issue)
        logger.info(f"Integrity check: {len(issues)} issue(s)")

    if output_dir is None:
        output_dir = Path("./output")
    storage = JSONStorage(output_dir)
    snapshot_path = storage.save(snapshot, name, compress=compress)
    config.save(Path(output_dir) / f"{name}_config.json")
    storage.save(stats.to_dict(), f"{name}_stats")
    logger.info(f"Snapshot saved to: {snapshot_path}")

    return {
        'snapshot': snapshot,
        'stats': stats,
        'issues': issues,
        'snapshot_path': snapshot_path,
        'output_dir': Path(output_dir),
    }


def main(argv=None):
    """Command-line interface for generation runs."""
    parser = argparse.ArgumentParser(description="Procedural celestial-system generator")

    parser.add_argument('--seed', type=str, default=None,
                        help='Seed, string or integer (default: time-based)')
    parser.add_argument('--systems', type=int, default=None,
                        help='Number of systems (default: from config)')
    parser.add_argument('--preset', choices=sorted(CONFIG_PRESETS), default=None,
                        help='Style preset')
    parser.add_argument('--topology', choices=sorted(TOPOLOGY_PRESETS), default=None,
                        help='Topology preset (applies its suggested overrides)')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON config file (overrides --preset)')
    parser.add_argument('--output', type=str, default='./output',
                        help='Output directory (default: ./output)')
    parser.add_argument('--name', type=str, default='universe',
                        help='Run name (default: universe)')
    parser.add_argument('--compress', action='store_true',
                        help='Gzip the snapshot')
    parser.add_argument('--check', action='store_true',
                        help='Run structural integrity checks')
    parser.add_argument('--plot', action='store_true',
                        help='Save diagnostic plots')

    args = parser.parse_args(argv)

    config = build_config(
        preset=args.preset,
        topology=args.topology,
        config_path=Path(args.config) if args.config else None,
        systems=args.systems,
    )

    results = run_generation(
        config=config,
        seed=parse_seed(args.seed),
        output_dir=Path(args.output),
        name=args.name,
        check=args.check,
        compress=args.compress,
    )

    if args.plot:
        logger.info("Generating plots...")
        import matplotlib.pyplot as plt

        snapshot = results['snapshot']
        ax = plot_system_overview(snapshot)
        overview_path = results['output_dir'] / f"{args.name}_system.png"
        ax.figure.savefig(overview_path, dpi=150)
        plt.close(ax.figure)

        fig = plot_generation_stats(snapshot)
        stats_path = results['output_dir'] / f"{args.name}_stats.png"
        fig.savefig(stats_path, dpi=150)
        plt.close(fig)

        logger.info(f"Plots saved to: {overview_path}, {stats_path}")

    logger.info("Done!")
    return 1 if results['issues'] else 0


if __name__ == "__main__":
    raise SystemExit(main())
