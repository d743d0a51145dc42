"""
Secondary phenomenon passes.

Per system: rings, main belts, Kuiper belts, comets, Lagrange points,
protoplanetary disks, black holes (through the materializer).
Galaxy-wide: nebulae, rogue planets.
"""

from .base import UnknownHostError, PhenomenonGenerator
from .belts import BeltGenerator, KuiperBeltGenerator
from .rings import RingGenerator
from .comets import CometGenerator
from .lagrange import LagrangeGenerator
from .disks import ProtoplanetaryDiskGenerator
from .nebulae import NebulaGenerator
from .rogues import RoguePlanetGenerator
from .black_holes import BlackHoleGenerator

__all__ = [
    "UnknownHostError",
    "PhenomenonGenerator",
    "BeltGenerator",
    "KuiperBeltGenerator",
    "RingGenerator",
    "CometGenerator",
    "LagrangeGenerator",
    "ProtoplanetaryDiskGenerator",
    "NebulaGenerator",
    "RoguePlanetGenerator",
    "BlackHoleGenerator",
]
