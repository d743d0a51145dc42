"""
Seedable, forkable random streams.

A stream is identified by its root entropy and the path of labels used to
reach it from the root:

    root = SeededStream("test-seed-123")
    lsystem = root.fork("lsystem")          # path: ("lsystem",)
    comet_0 = root.fork("comets").fork("comet-0")

Key properties:
- fork(label) is a pure function of (root entropy, label path, label)
- Forking never advances the parent's own cursor
- Sibling forks with different labels are statistically independent

Derivation is delegated to numpy's SeedSequence spawn keys, so each label path
maps to an independent PCG64 state.
"""

from __future__ import annotations
import time
import uuid
from typing import Sequence, Tuple, TypeVar, Union

import numpy as np


T = TypeVar("T")

SeedLike = Union[str, int, float, None]

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_SEED_MASK = 0xFFFFFFFFFFFFFFFF


def hash_label(label: str) -> int:
    """
    Hash a string to a 32-bit unsigned integer (FNV-1a).

    Stable across processes, unlike the built-in hash().
    """
    h = _FNV_OFFSET
    for byte in label.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def normalize_seed(seed: SeedLike) -> int:
    """
    Convert a user-facing seed into non-negative integer entropy.

    Strings are hashed, numbers are truncated and wrapped to unsigned 64-bit
    (so -n and n stay distinct), None draws a time-derived (non-reproducible)
    seed.
    """
    if seed is None:
        return time.time_ns() & _SEED_MASK
    if isinstance(seed, str):
        return hash_label(seed)
    if isinstance(seed, (bool, np.bool_)):
        return int(seed)
    if isinstance(seed, (int, np.integer)):
        return int(seed) & _SEED_MASK
    if isinstance(seed, (float, np.floating)):
        if not np.isfinite(seed):
            raise ValueError(f"Seed must be finite, got {seed}")
        return int(seed) & _SEED_MASK
    raise TypeError(f"Unsupported seed type: {type(seed).__name__}")


class SeededStream:
    """
    Deterministic random stream with label-based forking.

    Attributes:
        entropy: Root entropy shared by the whole lineage
        path: Hashed labels leading from the root to this stream
    """

    def __init__(self, seed: SeedLike = None):
        self.entropy = normalize_seed(seed)
        self.path: Tuple[int, ...] = ()
        self._labels: Tuple[str, ...] = ()
        self._gen = self._make_generator()

    @classmethod
    def _derived(
        cls,
        entropy: int,
        path: Tuple[int, ...],
        labels: Tuple[str, ...],
    ) -> "SeededStream":
        stream = cls.__new__(cls)
        stream.entropy = entropy
        stream.path = path
        stream._labels = labels
        stream._gen = stream._make_generator()
        return stream

    def _make_generator(self) -> np.random.Generator:
        sequence = np.random.SeedSequence(self.entropy, spawn_key=self.path)
        return np.random.Generator(np.random.PCG64(sequence))

    @property
    def label_path(self) -> str:
        """Human-readable fork path, e.g. 'comets/comet-0'."""
        return "/".join(self._labels) or "<root>"

    def fork(self, label: str) -> "SeededStream":
        """
        Derive an independent child stream.

        The same label forked from the same stream always yields the same
        child, regardless of how many values the parent has produced.
        """
        return SeededStream._derived(
            self.entropy,
            self.path + (hash_label(label),),
            self._labels + (label,),
        )

    def float(self) -> float:
        """Next float in [0, 1)."""
        return float(self._gen.random())

    def int(self, low: int, high: int) -> int:
        """Integer in [low, high], both ends inclusive."""
        low, high = int(np.floor(low)), int(np.floor(high))
        if low > high:
            low, high = high, low
        if low == high:
            return low
        return int(self._gen.integers(low, high, endpoint=True))

    def bool(self, p: float = 0.5) -> bool:
        """True with probability p."""
        return self.float() < p

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element from a non-empty sequence."""
        if len(items) == 0:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.int(0, len(items) - 1)]

    def getrandbits(self, k: int) -> int:
        """Non-negative integer with k random bits."""
        if k <= 0:
            return 0
        n_words = (k + 63) // 64
        words = self._gen.bit_generator.random_raw(n_words)
        value = 0
        for word in words:
            value = (value << 64) | int(word)
        return value >> (n_words * 64 - k)

    def __repr__(self) -> str:
        return f"SeededStream(entropy={self.entropy}, path='{self.label_path}')"


class IdFactory:
    """
    Deterministic UUID4-shaped ids drawn from a dedicated stream.

    Example:
        new_id = IdFactory(root.fork("ids"))
        body_id = new_id()
    """

    def __init__(self, stream: SeededStream):
        self.stream = stream

    def __call__(self) -> str:
        return str(uuid.UUID(int=self.stream.getrandbits(128), version=4))


def create_stream(seed: SeedLike = None) -> SeededStream:
    """Factory: create a root stream from a string, number or absent seed."""
    return SeededStream(seed)
