"""Edge behaviour applied after each position update.

Every policy works one axis at a time: ``kernel(p, v, extent) -> (p, v)``.
"""

from numba import jit

from .config import ConfigError, WALL_MODES


@jit(nopython=True)
def wrap_axis(p, v, extent):
    # one tick never moves an atom further than the extent
    if p < 0:
        p += extent
    if p >= extent:
        p -= extent
    return p, v


@jit(nopython=True)
def clamp_axis(p, v, extent):
    if p < 0:
        p = 0.0
    elif p > extent:
        p = extent
    return p, v


@jit(nopython=True)
def bounce_axis(p, v, extent):
    if p < 0:
        p = -p
        v = -v
    elif p > extent:
        p = 2 * extent - p
        v = -v
    return p, v


class BoundaryPolicy:
    def __init__(self, name, kernel):
        self.name = name
        self.kernel = kernel

    def apply(self, p, v, extent):
        return self.kernel(float(p), float(v), float(extent))

    def __repr__(self):
        return f"BoundaryPolicy({self.name!r})"


WRAP = BoundaryPolicy("wrap", wrap_axis)
CLAMP = BoundaryPolicy("clamp", clamp_axis)
BOUNCE = BoundaryPolicy("bounce", bounce_axis)

_WALLS = {"clamp": CLAMP, "bounce": BOUNCE}


def boundary_for(toroid, walls="bounce"):
    """Pick the policy for a domain: wrap when toroidal, else the wall mode."""
    if walls not in WALL_MODES:
        raise ConfigError(f"walls must be one of {WALL_MODES}, got {walls!r}")
    if toroid:
        return WRAP
    return _WALLS[walls]
