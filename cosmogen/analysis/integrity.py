"""
Structural checks over a generated snapshot.

check_snapshot() returns a list of human-readable problems (empty when the
snapshot is sound), in the same way GeneratorConfig.validate() reports
configuration issues.
"""

from __future__ import annotations
from typing import Dict, List, Optional

from ..core.bodies import (
    BlackHoleBody,
    BodyType,
    CelestialBody,
    CometBody,
    PlanetBody,
    UniverseSnapshot,
)


def _has_cycle(start_id: str, parents: Dict[str, Optional[str]]) -> bool:
    seen = set()
    current = start_id
    while current is not None:
        if current in seen:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


def check_bodies(bodies: Dict[str, CelestialBody], root_ids: List[str]) -> List[str]:
    """Parent/children consistency, acyclicity and root validity."""
    issues = []

    for body in bodies.values():
        if body.parent_id is not None and body.parent_id not in bodies:
            issues.append(f"Body {body.id} has invalid parent_id: {body.parent_id}")
        for child_id in body.children:
            child = bodies.get(child_id)
            if child is None:
                issues.append(f"Body {body.id} has invalid child: {child_id}")
            elif child.parent_id != body.id:
                issues.append(
                    f"Body {body.id} lists {child_id} as child, but its parent_id is {child.parent_id}"
                )
        if body.parent_id is not None and body.parent_id in bodies:
            if body.id not in bodies[body.parent_id].children:
                issues.append(f"Body {body.id} is missing from children of {body.parent_id}")

    parents = {b.id: b.parent_id for b in bodies.values()}
    for body_id in bodies:
        if _has_cycle(body_id, parents):
            issues.append(f"Cycle detected in body hierarchy at {body_id}")

    for root_id in root_ids:
        root = bodies.get(root_id)
        if root is None:
            issues.append(f"Root id {root_id} does not exist")
        elif root.parent_id is not None:
            issues.append(f"Root {root_id} has non-null parent_id: {root.parent_id}")

    return issues


def check_mass_ordering(bodies: Dict[str, CelestialBody], root_ids: List[str]) -> List[str]:
    """No direct stellar companion outmasses its root, except via a black hole."""
    issues = []
    for root_id in root_ids:
        root = bodies.get(root_id)
        if root is None or isinstance(root, BlackHoleBody):
            continue
        for child_id in root.children:
            child = bodies.get(child_id)
            if child is None or child.body_type != BodyType.STAR:
                continue
            if child.mass > root.mass:
                issues.append(f"Companion {child_id} ({child.mass:.3f}) outmasses root {root_id} ({root.mass:.3f})")
    return issues


def check_payloads(bodies: Dict[str, CelestialBody]) -> List[str]:
    """Ring, comet and Trojan payload sanity."""
    issues = []
    for body in bodies.values():
        if isinstance(body, PlanetBody) and body.ring is not None:
            ring = body.ring
            if not ring.outer_radius_multiplier > ring.inner_radius_multiplier > 1.0:
                issues.append(
                    f"Planet {body.id} ring radii invalid: "
                    f"{ring.inner_radius_multiplier} / {ring.outer_radius_multiplier}"
                )
            if not 0.0 <= ring.opacity <= 1.0:
                issues.append(f"Planet {body.id} ring opacity out of range: {ring.opacity}")
            if not 0.0 <= ring.density <= 1.0:
                issues.append(f"Planet {body.id} ring density out of range: {ring.density}")

        if isinstance(body, CometBody):
            e = body.eccentricity
            if e is not None and not 0.0 <= e < 1.0:
                issues.append(f"Comet {body.id} has invalid eccentricity: {e}")
            if body.comet is not None and body.comet.perihelion_distance >= body.comet.aphelion_distance:
                issues.append(
                    f"Comet {body.id} has perihelion >= aphelion: "
                    f"{body.comet.perihelion_distance} >= {body.comet.aphelion_distance}"
                )

        host_id = getattr(body, "lagrange_host_id", None)
        if host_id is not None:
            host = bodies.get(host_id)
            if host is None or host.body_type != BodyType.LAGRANGE_POINT:
                issues.append(f"Asteroid {body.id} references missing Lagrange marker {host_id}")

        if body.mass <= 0 or body.radius <= 0:
            issues.append(f"Body {body.id} has non-positive mass or radius")
    return issues


def check_fields(snapshot: UniverseSnapshot) -> List[str]:
    """Belt and disk geometry plus host references."""
    issues = []
    for f in snapshot.small_body_fields.values():
        if f.inner_radius >= f.outer_radius:
            issues.append(f"Field {f.id} has inner_radius >= outer_radius: {f.inner_radius} >= {f.outer_radius}")
        if f.thickness < 0:
            issues.append(f"Field {f.id} has negative thickness: {f.thickness}")
        if f.particle_count < 0:
            issues.append(f"Field {f.id} has negative particle_count: {f.particle_count}")
        if f.host_star_id not in snapshot.bodies:
            issues.append(f"Field {f.id} references missing host: {f.host_star_id}")
        if f.belt_type == "kuiper" and not f.is_icy:
            issues.append(f"Kuiper field {f.id} should be icy")
        if not 0.0 <= f.opacity <= 1.0:
            issues.append(f"Field {f.id} has invalid opacity: {f.opacity}")
        if not 0.0 <= f.clumpiness <= 1.0:
            issues.append(f"Field {f.id} has invalid clumpiness: {f.clumpiness}")

    for disk in snapshot.protoplanetary_disks.values():
        if disk.inner_radius >= disk.outer_radius:
            issues.append(f"Disk {disk.id} has inner_radius >= outer_radius")
        if disk.central_star_id not in snapshot.bodies:
            issues.append(f"Disk {disk.id} references missing star: {disk.central_star_id}")
    return issues


def check_groups(snapshot: UniverseSnapshot) -> List[str]:
    """Group references, acyclicity and one-group-per-system."""
    issues = []
    groups = snapshot.groups
    for group in groups.values():
        if group.parent_group_id is not None and group.parent_group_id not in groups:
            issues.append(f"Group {group.id} has invalid parent_group_id: {group.parent_group_id}")

    parents = {g.id: g.parent_group_id for g in groups.values()}
    for group_id in groups:
        if _has_cycle(group_id, parents):
            issues.append(f"Cycle detected in group hierarchy at {group_id}")

    if groups:
        memberships: Dict[str, int] = {}
        for group in groups.values():
            for child in group.children:
                if child.type == "system":
                    memberships[child.id] = memberships.get(child.id, 0) + 1
        for root_id in snapshot.root_ids:
            count = memberships.get(root_id, 0)
            if count != 1:
                issues.append(f"System {root_id} belongs to {count} groups")

    for group_id in snapshot.root_group_ids:
        if group_id not in groups or groups[group_id].parent_group_id is not None:
            issues.append(f"Root group {group_id} is missing or has a parent")
    return issues


def check_snapshot(snapshot: UniverseSnapshot) -> List[str]:
    """
    Run every structural check.

    Returns:
        List of problems; empty when the snapshot is consistent

    Example:
        issues = check_snapshot(generate_solar_system("seed"))
        assert not issues
    """
    issues = []
    issues.extend(check_bodies(snapshot.bodies, snapshot.root_ids))
    issues.extend(check_mass_ordering(snapshot.bodies, snapshot.root_ids))
    issues.extend(check_payloads(snapshot.bodies))
    issues.extend(check_fields(snapshot))
    issues.extend(check_groups(snapshot))

    rogue_roots = set(snapshot.rogue_planet_ids) & set(snapshot.root_ids)
    if rogue_roots:
        issues.append(f"Rogue planets listed as roots: {sorted(rogue_roots)}")
    for rogue_id in snapshot.rogue_planet_ids:
        if rogue_id not in snapshot.bodies:
            issues.append(f"Rogue planet {rogue_id} does not exist")
    return issues
