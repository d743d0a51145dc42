"""
Black-hole path: alternate center/companion constructor.

The materializer asks choose_substitution() which sorted star slot (0 =
center, k = k-th companion) becomes a black hole, then build() for its
properties. Every number passes safe_number before it is stored.

Mass classes (weighted):
    stellar       5 - 45
    intermediate  60 - 9000
    supermassive  1e5 - 1e7
"""

from __future__ import annotations
import math
from typing import Optional, Tuple

from ..config import BlackHoleParams, ShadowRadiusMode
from ..core.bodies import BlackHoleProperties
from ..core.distributions import RandomGenerator, clamp01, range_sample
from .base import PhenomenonGenerator, safe_number


MASS_CLASSES = ["stellar", "intermediate", "supermassive"]
MASS_RANGES = {
    "stellar": (5.0, 45.0),
    "intermediate": (60.0, 9000.0),
    "supermassive": (1e5, 1e7),
}

MIN_SHADOW_RADIUS = 0.05
MAX_SPIN = 0.998


class BlackHoleGenerator(PhenomenonGenerator):
    """
    Example:
        bh = BlackHoleGenerator(config.black_holes, master.fork("blackHoles"))
        materializer = BodyMaterializer(config, stardata, black_holes=bh)
    """

    label = "blackHoles"

    def __init__(self, params: BlackHoleParams, rng: RandomGenerator):
        super().__init__(params, rng)

    def choose_substitution(self, num_stars: int) -> Optional[int]:
        """Index into the mass-sorted star list to replace, or None."""
        p = self.params
        if not self.enabled or num_stars <= 0:
            return None
        if self.rng.bool(p.system_probability):
            return 0
        if num_stars > 1 and self.rng.bool(p.as_companion_probability):
            return self.rng.randint(1, num_stars - 1)
        return None

    def sample_spin(self) -> float:
        p = self.params
        low, high = sorted(p.spin_range)
        u = self.rng.float()
        if p.spin_bias > 0:
            u = u ** (1.0 / (1.0 + p.spin_bias))
        return safe_number(low + (high - low) * u, 0.5, 0.0, MAX_SPIN)

    def shadow_radius(self, mass: float) -> float:
        p = self.params
        if ShadowRadiusMode(p.shadow_radius_mode) == ShadowRadiusMode.PHYSICAL:
            raw = p.physical_scale * math.log10(1.0 + mass)
        else:
            raw = range_sample(self.rng, p.shadow_radius_range)
        high = max(p.max_shadow_radius, MIN_SHADOW_RADIUS)
        return safe_number(raw, min(0.5, high), MIN_SHADOW_RADIUS, high)

    def build(self) -> Tuple[BlackHoleProperties, float]:
        """
        Sample one black hole.

        Returns:
            (properties, mass)
        """
        p = self.params
        rng = self.rng

        mass_class = rng.weighted(MASS_CLASSES, list(p.mass_class_weights))
        low, high = MASS_RANGES[mass_class]
        mass = safe_number(math.exp(rng.uniform(math.log(low), math.log(high))), low, low, high)

        shadow = self.shadow_radius(mass)
        has_disk = rng.bool(p.accretion_disk_probability)
        has_jet = has_disk and rng.bool(p.jet_probability)
        has_photon_ring = rng.bool(p.photon_ring_probability)
        spin = self.sample_spin()

        inner = safe_number(shadow * rng.uniform(1.5, 3.0), shadow * 2.0, shadow * 1.01)
        outer = safe_number(shadow * range_sample(rng, p.disk_outer_multiplier_range),
                            inner * 2.0, inner * 1.1)
        jet_length = shadow * range_sample(rng, p.jet_length_multiplier_range) if has_jet else 0.0

        props = BlackHoleProperties(
            has_accretion_disk=has_disk,
            has_relativistic_jet=has_jet,
            has_photon_ring=has_photon_ring,
            mass_class=mass_class,
            spin=spin,
            shadow_radius=shadow,
            accretion_inner_radius=inner,
            accretion_outer_radius=outer,
            disk_thickness=safe_number(shadow * rng.uniform(0.05, 0.3), 0.1, 0.0),
            disk_brightness=clamp01(rng.uniform(0.5, 1.0)),
            disk_opacity=clamp01(rng.uniform(0.6, 1.0)),
            disk_temperature=safe_number(range_sample(rng, p.disk_temperature_range), 6000.0, 0.0),
            disk_clumpiness=clamp01(rng.uniform(0.1, 0.6)),
            jet_length=safe_number(jet_length, 0.0, 0.0),
            jet_opening_angle=safe_number(rng.uniform(2.0, 10.0), 5.0, 0.0, 45.0),
            jet_brightness=clamp01(rng.uniform(0.4, 1.0)) if has_jet else 0.0,
            doppler_beaming_strength=clamp01(rng.uniform(0.3, 0.9) * (0.5 + 0.5 * spin)),
            lensing_strength=clamp01(rng.uniform(0.5, 1.0)),
            rotation_speed_multiplier=safe_number(rng.uniform(0.5, 2.0) * (0.5 + spin), 1.0, 0.0, 10.0),
            disk_tilt=safe_number(rng.uniform(-0.5, 0.5), 0.0, -math.pi, math.pi),
            disk_tilt_axis_angle=safe_number(rng.uniform(0.0, 2.0 * math.pi), 0.0, 0.0, 2.0 * math.pi),
            seed=rng.seed_value(),
        )
        return props, mass
