"""
Shared contract of the secondary phenomenon passes.

Each pass:
- receives the finalized body map (plus a host id for per-system passes)
- draws only from its own forked stream
- appends new entities or attaches metadata, never touching orbital topology
  (the host's children list is the only existing field that may grow)
"""

from __future__ import annotations
import math
from abc import ABC
from typing import Dict, List, Optional, Tuple

from ..core.bodies import BodyType, CelestialBody
from ..core.distributions import RandomGenerator
from ..core.prng import IdFactory


class UnknownHostError(KeyError):
    """A pass was invoked against a body id that does not exist."""

    def __init__(self, host_id: str, label: str = ""):
        self.host_id = host_id
        self.label = label
        where = f" ({label})" if label else ""
        super().__init__(f"Unknown host body '{host_id}'{where}")


def safe_number(
    value: float,
    fallback: float = 0.0,
    low: Optional[float] = None,
    high: Optional[float] = None,
) -> float:
    """Replace NaN/inf with fallback, then clamp to [low, high]."""
    value = float(value)
    if not math.isfinite(value):
        value = fallback
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


# ===== Color helpers =====

def hex_to_rgb(color: str) -> Tuple[float, float, float]:
    """'#RRGGBB' -> (r, g, b) in [0, 1]"""
    color = color.lstrip("#")
    return tuple(int(color[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def rgb_to_hex(rgb: Tuple[float, float, float]) -> str:
    return "#" + "".join(f"{int(round(max(0.0, min(1.0, c)) * 255)):02X}" for c in rgb)


def perturb_color(rng: RandomGenerator, color: str, jitter: float) -> str:
    """Shift every channel by uniform(-jitter, jitter)."""
    r, g, b = hex_to_rgb(color)
    return rgb_to_hex((
        r + rng.uniform(-jitter, jitter),
        g + rng.uniform(-jitter, jitter),
        b + rng.uniform(-jitter, jitter),
    ))


# ===== Body map helpers =====

def require_host(bodies: Dict[str, CelestialBody], host_id: str, label: str = "") -> CelestialBody:
    try:
        return bodies[host_id]
    except KeyError:
        raise UnknownHostError(host_id, label) from None


def planets_of(bodies: Dict[str, CelestialBody], host: CelestialBody) -> List[CelestialBody]:
    """Direct planet children of host, innermost first."""
    planets = [
        bodies[child_id] for child_id in host.children
        if bodies[child_id].body_type == BodyType.PLANET
    ]
    return sorted(planets, key=lambda p: p.orbital_distance)


def add_body(bodies: Dict[str, CelestialBody], body: CelestialBody) -> CelestialBody:
    """Insert a new body and register it on its parent."""
    bodies[body.id] = body
    if body.parent_id is not None:
        bodies[body.parent_id].children.append(body.id)
    return body


class PhenomenonGenerator(ABC):
    """
    Base of every secondary pass.

    Attributes:
        label: Fork label of the pass's stream
        params: The config section controlling the pass
        rng: Dedicated stream forked from the master with `label`
        new_id: Id source forked from rng (does not advance rng)
    """

    label: str = ""

    def __init__(self, params, rng: RandomGenerator):
        self.params = params
        self.rng = rng
        self.new_id = IdFactory(rng.fork("ids").stream)

    @property
    def enabled(self) -> bool:
        return bool(getattr(self.params, "enable", False))

    def host(self, bodies: Dict[str, CelestialBody], host_id: str) -> CelestialBody:
        return require_host(bodies, host_id, self.label)
