# Configuration for the particle life engine

import json
import math
import os
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field, fields
from typing import List, Optional

# Domain settings
WIDTH = 1280
HEIGHT = 720

# Particle settings
NUM_COLORS = 6
ATOMS_PER_COLOR = 500
MAX_COLORS = 7

# Physics settings
TIME_SCALE = 0.2
VISCOSITY = 0.7  # can be > 1
WALL_REPEL = 40
DEFAULT_RADIUS = 80
MAX_RADIUS = 200
WALL_FORCE = 0.1
TOROID = True
REAL_FORCES = True

# Non-toroidal wall behaviour
WALL_MODES = ("bounce", "clamp")
WALLS = "bounce"

# Fixed layout used when debug is set
DEBUG_LAYOUT = ((100.0, 100.0, 0), (140.0, 140.0, 1))

COLORS = ["green", "red", "orange", "cyan", "magenta", "lavender", "teal"]

# Keys a settings mapping must carry; walls and seed may be left out
REQUIRED = (
    "width",
    "height",
    "num_colors",
    "atoms_per_color",
    "toroid",
    "wall_repel",
    "viscosity",
    "rules",
    "radii",
    "time_scale",
    "real_forces",
    "debug",
)


class ConfigError(ValueError):
    """Raised when a configuration value is missing, malformed or inconsistent."""


def _check_int(name, value, minimum=1):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")


def check_number(name, value, minimum=None):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be finite, got {value}")
    if minimum is not None and value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return float(value)


def check_flag(name, value):
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be a bool, got {value!r}")
    return value


def _check_sequence(name, value):
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise ConfigError(f"{name} must be a sequence of numbers, got {value!r}")


def check_rules(rules, num_colors):
    """Return ``rules`` as a list of floats sized for ``num_colors``."""
    _check_sequence("rules", rules)
    try:
        values = [float(v) for v in rules]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"rules must be a sequence of numbers: {exc}") from exc
    if len(values) != num_colors * num_colors:
        raise ConfigError(
            f"rules has {len(values)} entries, expected {num_colors * num_colors} "
            f"for {num_colors} colors"
        )
    if not all(math.isfinite(v) for v in values):
        raise ConfigError("rules must be finite")
    return values


def check_radii(radii, num_colors):
    """Return ``radii`` as a list of floats sized for ``num_colors``."""
    _check_sequence("radii", radii)
    try:
        values = [float(v) for v in radii]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"radii must be a sequence of numbers: {exc}") from exc
    if len(values) != num_colors:
        raise ConfigError(
            f"radii has {len(values)} entries, expected {num_colors}"
        )
    if not all(math.isfinite(v) and v >= 0 for v in values):
        raise ConfigError("radii must be finite and non-negative")
    return values


@dataclass
class Settings:
    """Engine configuration.

    ``rules[i * num_colors + j]`` is the coefficient a particle of color ``i``
    feels from a particle of color ``j``; ``radii[i]`` is the interaction
    cutoff of a particle of color ``i``.
    """

    width: int = WIDTH
    height: int = HEIGHT
    num_colors: int = NUM_COLORS
    atoms_per_color: int = ATOMS_PER_COLOR
    rules: List[float] = field(default_factory=list)
    radii: List[float] = field(default_factory=list)
    toroid: bool = TOROID
    walls: str = WALLS
    wall_repel: float = WALL_REPEL
    viscosity: float = VISCOSITY
    time_scale: float = TIME_SCALE
    real_forces: bool = REAL_FORCES
    debug: bool = False
    seed: Optional[int] = None

    @property
    def num_atoms(self):
        if self.debug:
            return len(DEBUG_LAYOUT)
        return self.num_colors * self.atoms_per_color

    def validate(self):
        _check_int("width", self.width)
        _check_int("height", self.height)
        _check_int("num_colors", self.num_colors)
        _check_int("atoms_per_color", self.atoms_per_color)
        self.rules = check_rules(self.rules, self.num_colors)
        self.radii = check_radii(self.radii, self.num_colors)
        check_flag("toroid", self.toroid)
        check_flag("real_forces", self.real_forces)
        check_flag("debug", self.debug)
        if self.walls not in WALL_MODES:
            raise ConfigError(f"walls must be one of {WALL_MODES}, got {self.walls!r}")
        check_number("wall_repel", self.wall_repel, minimum=0)
        check_number("viscosity", self.viscosity)
        check_number("time_scale", self.time_scale)
        if self.seed is not None:
            _check_int("seed", self.seed, minimum=0)
        if self.debug and self.num_colors < 2:
            raise ConfigError("debug layout needs at least 2 colors")
        return self

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        """Build validated settings from a mapping, e.g. decoded JSON."""
        if not isinstance(data, dict):
            raise ConfigError(f"settings must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown settings: {sorted(unknown)}")
        for required in REQUIRED:
            if required not in data:
                raise ConfigError(f"missing setting: {required}")
        return cls(**data).validate()

    def save(self, filepath):
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath):
        with open(filepath) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{filepath}: {exc}") from exc
        return cls.from_dict(data)
