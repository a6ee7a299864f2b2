import logging
from dataclasses import replace

import numpy as np

from .boundary import boundary_for
from .config import (
    ConfigError, DEFAULT_RADIUS, Settings,
    check_flag, check_number, check_radii, check_rules,
)
from .forces import ForceModel, force_law
from .integrator import Integrator
from .store import ParticleStore

logger = logging.getLogger(__name__)


def resize_rules(rules, old_colors, new_colors):
    """Keep the overlapping block of a flat rule matrix, zero-fill the rest."""
    out = [0.0] * (new_colors * new_colors)
    for i in range(min(old_colors, new_colors)):
        for j in range(min(old_colors, new_colors)):
            out[i * new_colors + j] = rules[i * old_colors + j]
    return out


def resize_radii(radii, new_colors):
    missing = max(0, new_colors - len(radii))
    return list(radii[:new_colors]) + [float(DEFAULT_RADIUS)] * missing


class Universe:
    """The particle life engine.

    Owns the particle buffer and advances it one step per ``tick()``. Every
    setter validates its input and raises ``ConfigError`` without touching the
    engine when it is rejected, so ``tick()`` itself never fails.
    """

    def __init__(self, settings, neighbors=None):
        if not isinstance(settings, Settings):
            raise ConfigError(f"expected Settings, got {type(settings).__name__}")
        self.settings = replace(settings).validate()
        self._store = ParticleStore()
        self._integrator = Integrator(ForceModel(neighbors))
        self._sync_rules()
        self._sync_physics()
        self.reset()

    @classmethod
    def from_dict(cls, data, **kwargs):
        return cls(Settings.from_dict(data), **kwargs)

    # -- accessors --------------------------------------------------------

    def width(self):
        return self.settings.width

    def height(self):
        return self.settings.height

    def particle_count(self):
        return len(self._store)

    def particle_view(self):
        """Read-only view of the buffer, valid until the next mutating call."""
        return self._store.view()

    @property
    def force_law(self):
        return self._law

    @property
    def boundary(self):
        return self._boundary

    # -- lifecycle --------------------------------------------------------

    def reset(self):
        """Throw away all particles and place them again."""
        s = self.settings
        if s.debug:
            self._store.fill_debug()
        else:
            rng = np.random.default_rng(s.seed)
            self._store.fill_random(
                s.num_colors, s.atoms_per_color, s.width, s.height, rng
            )
        n = len(self._store)
        self._fx = np.zeros(n, dtype=np.float64)
        self._fy = np.zeros(n, dtype=np.float64)
        logger.debug("universe reset with %d atoms", n)

    def tick(self):
        self._integrator.step(
            self._store.buffer, self.settings,
            self._rules, self._radii,
            self._law, self._boundary,
            self._fx, self._fy,
        )
        self._store.touch()

    # -- setters ----------------------------------------------------------

    def set_color_count(self, num_colors, rules=None, radii=None):
        """
        Change the number of colors and re-create every particle.

        ``rules`` and ``radii`` sized for the new count may be passed along;
        when left out the current ones are resized (overlap kept, new rules
        0.0, new radii ``DEFAULT_RADIUS``).
        """
        if isinstance(num_colors, bool) or not isinstance(num_colors, int):
            raise ConfigError(f"num_colors must be an integer, got {num_colors!r}")
        if num_colors < 1:
            raise ConfigError(f"num_colors must be >= 1, got {num_colors}")
        if self.settings.debug and num_colors < 2:
            raise ConfigError("debug layout needs at least 2 colors")
        old = self.settings.num_colors
        if rules is None:
            rules = resize_rules(self.settings.rules, old, num_colors)
        if radii is None:
            radii = resize_radii(self.settings.radii, num_colors)
        rules = check_rules(rules, num_colors)
        radii = check_radii(radii, num_colors)

        self.settings.num_colors = num_colors
        self.settings.rules = rules
        self.settings.radii = radii
        self._sync_rules()
        self.reset()
        logger.info("color count %d -> %d", old, num_colors)

    def set_rules(self, rules):
        self.settings.rules = check_rules(rules, self.settings.num_colors)
        self._sync_rules()

    def set_radii(self, radii):
        self.settings.radii = check_radii(radii, self.settings.num_colors)
        self._sync_rules()

    def set_viscosity(self, viscosity):
        self.settings.viscosity = check_number("viscosity", viscosity)

    def set_wall_repel(self, wall_repel):
        self.settings.wall_repel = check_number("wall_repel", wall_repel, minimum=0)

    def set_time_scale(self, time_scale):
        self.settings.time_scale = check_number("time_scale", time_scale)

    def set_toroid(self, toroid):
        self.settings.toroid = check_flag("toroid", toroid)
        self._sync_physics()

    def set_walls(self, walls):
        self._boundary = boundary_for(self.settings.toroid, walls)
        self.settings.walls = walls

    def set_real_forces(self, real_forces):
        self.settings.real_forces = check_flag("real_forces", real_forces)
        self._sync_physics()

    def _sync_rules(self):
        self._rules = np.asarray(self.settings.rules, dtype=np.float64)
        self._radii = np.asarray(self.settings.radii, dtype=np.float64)

    def _sync_physics(self):
        s = self.settings
        self._law = force_law(s.real_forces)
        self._boundary = boundary_for(s.toroid, s.walls)
        logger.info(
            "force law %s, boundary %s", self._law.name, self._boundary.name
        )
