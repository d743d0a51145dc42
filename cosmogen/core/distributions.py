"""
Named distributions over a SeededStream.

Every sampler consumes draws from the wrapped stream in a fixed order, so the
draw count of a generation pass depends only on the sampled values and never
on wall-clock or platform state.

Distributions:
- uniform(min, max)
- normal(mu, sigma)      Box-Muller from two draws
- log_normal(mu, sigma)  exp(normal)
- geometric(p)           failures before first success
- poisson(lam)           Knuth (small λ), rounded normal (large λ)
- weighted(items, w)     cumulative linear scan
- bool(p)                Bernoulli with p clamped to [0, 1]
"""

from __future__ import annotations
import math
from typing import List, Sequence, TypeVar

from .prng import SeededStream, SeedLike


T = TypeVar("T")

# Above this mean the Knuth product loop becomes slow and loses precision
POISSON_NORMAL_THRESHOLD = 30.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to [low, high]."""
    return max(low, min(high, value))


def clamp01(value: float) -> float:
    """Clamp value to [0, 1], mapping NaN to 0."""
    if value != value:
        return 0.0
    return clamp(value, 0.0, 1.0)


class RandomGenerator:
    """
    Distribution layer wrapping one stream.

    Example:
        rng = RandomGenerator.from_seed("test-seed-123")
        stars = rng.weighted([1, 2, 3], [0.65, 0.25, 0.10])
        planets = rng.geometric(0.4)
        comets = rng.fork("comets")
    """

    def __init__(self, stream: SeededStream):
        self.stream = stream

    @classmethod
    def from_seed(cls, seed: SeedLike = None) -> "RandomGenerator":
        return cls(SeededStream(seed))

    # ===== Raw draws =====

    def float(self) -> float:
        return self.stream.float()

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high] inclusive."""
        return self.stream.int(low, high)

    def choice(self, items: Sequence[T]) -> T:
        return self.stream.choice(items)

    def bool(self, p: float = 0.5) -> bool:
        """Return True with probability p (clamped to [0, 1])."""
        return self.stream.bool(clamp01(p))

    def getrandbits(self, k: int) -> int:
        return self.stream.getrandbits(k)

    # ===== Continuous =====

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return low + self.stream.float() * (high - low)

    def normal(self, mu: float = 0.0, sigma: float = 1.0) -> float:
        """Normal sample via the Box-Muller transform (two draws)."""
        u1 = 1.0 - self.stream.float()  # (0, 1], keeps log finite
        u2 = self.stream.float()
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return z0 * sigma + mu

    def log_normal(self, mu: float, sigma: float) -> float:
        return math.exp(self.normal(mu, sigma))

    # ===== Discrete =====

    def geometric(self, p: float) -> int:
        """
        Number of failures before the first success.

        Returns 0 without drawing when p <= 0 or p >= 1.
        """
        if not (0.0 < p < 1.0):
            return 0
        u = 1.0 - self.stream.float()
        return int(math.floor(math.log(u) / math.log(1.0 - p)))

    def poisson(self, lam: float) -> int:
        """Poisson sample with mean lam."""
        if not lam > 0.0:
            return 0
        if lam > POISSON_NORMAL_THRESHOLD:
            return max(0, int(round(self.normal(lam, math.sqrt(lam)))))
        limit = math.exp(-lam)
        k = 0
        product = self.stream.float()
        while product > limit:
            k += 1
            product *= self.stream.float()
        return k

    def weighted(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """
        Weighted selection by cumulative linear scan.

        Falls back to the last item when rounding leaves a remainder.
        """
        if len(items) == 0:
            raise ValueError("Cannot choose from an empty sequence")
        total = sum(weights)
        remaining = self.stream.float() * total
        for item, weight in zip(items, weights):
            remaining -= weight
            if remaining <= 0:
                return item
        return items[-1]

    # ===== Geometry helpers =====

    def unit_vector(self) -> List[float]:
        """Uniformly distributed direction on the unit sphere."""
        theta = self.uniform(0.0, 2.0 * math.pi)
        cos_phi = self.uniform(-1.0, 1.0)
        sin_phi = math.sqrt(max(0.0, 1.0 - cos_phi * cos_phi))
        return [sin_phi * math.cos(theta), cos_phi, sin_phi * math.sin(theta)]

    def point_in_sphere(self, radius: float) -> List[float]:
        """Uniform point inside a sphere (spherical coordinates, r ~ u^(1/3))."""
        r = radius * self.stream.float() ** (1.0 / 3.0)
        direction = self.unit_vector()
        return [r * c for c in direction]

    # ===== Forking =====

    def fork(self, label: str) -> "RandomGenerator":
        return RandomGenerator(self.stream.fork(label))

    def seed_value(self) -> int:
        """31-bit integer suitable as a client-side seed."""
        return self.randint(0, 2147483647)

    def __repr__(self) -> str:
        return f"RandomGenerator({self.stream!r})"


def range_sample(rng: RandomGenerator, bounds: Sequence[float]) -> float:
    """Uniform sample from a (low, high) pair; degenerate ranges skip the draw."""
    low, high = float(bounds[0]), float(bounds[1])
    if low == high:
        return low
    return rng.uniform(low, high)


def range_int(rng: RandomGenerator, bounds: Sequence[int]) -> int:
    """Integer sample from an inclusive (low, high) pair."""
    return rng.randint(int(bounds[0]), int(bounds[1]))
