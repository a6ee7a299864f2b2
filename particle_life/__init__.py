from .boundary import BOUNCE, CLAMP, WRAP, BoundaryPolicy, boundary_for
from .config import ConfigError, Settings
from .engine import Universe
from .forces import BOUNDED, SIMPLE, BruteForceNeighbors, ForceLaw, ForceModel
from .presets import Mulberry32, explore, random_rules, random_setup, symmetrize
from .store import FIELDS_PER_ATOM, ParticleStore, ParticleView, StaleViewError

__all__ = [
    "BOUNCE", "BOUNDED", "CLAMP", "FIELDS_PER_ATOM", "SIMPLE", "WRAP",
    "BoundaryPolicy", "BruteForceNeighbors", "ConfigError", "ForceLaw",
    "ForceModel", "Mulberry32", "ParticleStore", "ParticleView", "Settings",
    "StaleViewError", "Universe", "boundary_for", "explore", "random_rules",
    "random_setup", "symmetrize",
]
