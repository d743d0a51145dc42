"""
Diagnostic plots of generated snapshots.
"""

from __future__ import annotations
import math
from typing import Any, Dict, List, Optional, Tuple
import numpy as np

from ..core.bodies import BodyType, CelestialBody, UniverseSnapshot

_plt = None
def _get_plt():
    global _plt
    if _plt is None:
        import matplotlib.pyplot as plt
        _plt = plt
    return _plt


BODY_TYPE_ORDER = [bt for bt in BodyType]


def _descendants(bodies: Dict[str, CelestialBody], root_id: str) -> List[CelestialBody]:
    out = []
    stack = [root_id]
    while stack:
        body = bodies[stack.pop()]
        out.append(body)
        stack.extend(reversed(body.children))
    return out


def planar_positions(
    bodies: Dict[str, CelestialBody],
    root_id: str,
) -> Dict[str, Tuple[float, float]]:
    """
    Top-down (x, y) of every body in one system at t = 0.

    Each body sits at its orbital distance and phase around its parent;
    the root is at the origin.
    """
    positions = {root_id: (0.0, 0.0)}
    for body in _descendants(bodies, root_id):
        if body.id == root_id:
            continue
        px, py = positions[body.parent_id]
        angle = math.radians(body.orbital_phase)
        positions[body.id] = (
            px + body.orbital_distance * math.cos(angle),
            py + body.orbital_distance * math.sin(angle),
        )
    return positions


def plot_system_overview(
    snapshot: UniverseSnapshot,
    root_id: Optional[str] = None,
    ax: Optional[Any] = None,
    show_labels: bool = True,
    figsize: Tuple[int, int] = (9, 9),
) -> Any:
    """
    Top-down orbit map of one system.

    Args:
        snapshot: Generated snapshot
        root_id: System to draw (first root by default)
        ax: Matplotlib axis
        show_labels: Annotate stars and planets with their names
        figsize: Figure size when ax is None

    Returns:
        Matplotlib axis
    """
    plt = _get_plt()
    from matplotlib.patches import Circle, Wedge

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    ax.set_facecolor('#0B0B16')
    ax.set_aspect('equal')

    if root_id is None:
        if not snapshot.root_ids:
            ax.set_title('Empty system')
            return ax
        root_id = snapshot.root_ids[0]

    bodies = snapshot.bodies
    positions = planar_positions(bodies, root_id)

    # Belts as translucent annuli around their host
    for f in snapshot.small_body_fields.values():
        if f.host_star_id not in positions:
            continue
        cx, cy = positions[f.host_star_id]
        ax.add_patch(Wedge(
            (cx, cy), f.outer_radius, 0, 360,
            width=f.outer_radius - f.inner_radius,
            color=f.base_color, alpha=min(0.35, f.opacity),
        ))

    for body_id, (x, y) in positions.items():
        body = bodies[body_id]
        if body.parent_id is not None and body.body_type in (BodyType.STAR, BodyType.PLANET, BodyType.BLACK_HOLE):
            px, py = positions[body.parent_id]
            ax.add_patch(Circle(
                (px, py), body.orbital_distance,
                fill=False, color='gray', linewidth=0.5, alpha=0.4,
            ))

    xs = np.array([p[0] for p in positions.values()])
    ys = np.array([p[1] for p in positions.values()])
    colors = [bodies[i].color if bodies[i].color != '#000000' else '#FF9F1C' for i in positions]
    sizes = np.array([max(4.0, 40.0 * bodies[i].radius) for i in positions])
    ax.scatter(xs, ys, c=colors, s=sizes, edgecolors='none', zorder=3)

    if show_labels:
        for body_id, (x, y) in positions.items():
            body = bodies[body_id]
            if body.body_type in (BodyType.STAR, BodyType.PLANET, BodyType.BLACK_HOLE):
                ax.annotate(body.name, (x, y), color='white', fontsize=7,
                            xytext=(4, 4), textcoords='offset points')

    extent = max(float(np.max(np.abs(xs))), float(np.max(np.abs(ys))), 1.0) * 1.15
    for f in snapshot.small_body_fields.values():
        if f.host_star_id in positions:
            extent = max(extent, f.outer_radius * 1.05)
    ax.set_xlim(-extent, extent)
    ax.set_ylim(-extent, extent)
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_title(f'System {bodies[root_id].name} ({len(positions)} bodies)')

    return ax


def plot_generation_stats(
    snapshot: UniverseSnapshot,
    figsize: Tuple[int, int] = (12, 9),
) -> Any:
    """
    Summary figure of a snapshot.

    Panels:
    1. Body count per type
    2. Mass distribution (log10)
    3. Planet orbital distances
    4. Particle counts of belts and disks

    Returns:
        Matplotlib figure
    """
    plt = _get_plt()

    fig, axes = plt.subplots(2, 2, figsize=figsize)
    bodies = list(snapshot.bodies.values())

    # Panel 1: Body types
    counts = [sum(1 for b in bodies if b.body_type == bt) for bt in BODY_TYPE_ORDER]
    axes[0, 0].bar([bt.value for bt in BODY_TYPE_ORDER], counts, color='steelblue')
    axes[0, 0].set_ylabel('Count')
    axes[0, 0].set_title('Bodies by Type')
    axes[0, 0].tick_params(axis='x', rotation=45)

    # Panel 2: Masses
    masses = np.array([b.mass for b in bodies if b.mass > 0])
    if masses.size:
        axes[0, 1].hist(np.log10(masses), bins=30, alpha=0.7, color='darkorange')
    axes[0, 1].set_xlabel('log10(mass)')
    axes[0, 1].set_ylabel('Count')
    axes[0, 1].set_title('Mass Distribution')

    # Panel 3: Planet distances
    distances = np.array([
        b.orbital_distance for b in bodies
        if b.body_type == BodyType.PLANET and b.parent_id is not None
    ])
    if distances.size:
        axes[1, 0].hist(distances, bins=30, alpha=0.7, color='seagreen')
    axes[1, 0].set_xlabel('Orbital distance')
    axes[1, 0].set_ylabel('Count')
    axes[1, 0].set_title('Planet Orbits')

    # Panel 4: Particles
    labels, particles = [], []
    for f in snapshot.small_body_fields.values():
        labels.append(f.name or f.belt_type)
        particles.append(f.particle_count)
    for d in snapshot.protoplanetary_disks.values():
        labels.append(d.name or 'disk')
        particles.append(d.particle_count)
    if particles:
        axes[1, 1].barh(range(len(particles)), particles, color='slateblue')
        axes[1, 1].set_yticks(range(len(particles)))
        axes[1, 1].set_yticklabels(labels, fontsize=7)
    axes[1, 1].set_xlabel('Particles')
    axes[1, 1].set_title('Belts and Disks')

    plt.tight_layout()
    return fig
