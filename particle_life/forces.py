"""Pairwise interaction laws and the force pass.

Accelerations are accumulated into ``fx``/``fy`` arrays, one entry per atom.
The neighbor scan is a plain O(N^2) loop over every ordered pair and is the
dominant cost of a tick; ``BruteForceNeighbors`` is the single place that
knows about it.
"""

import math

from numba import jit

from .config import WALL_FORCE
from .store import COLOR, FIELDS_PER_ATOM, X, Y


@jit(nopython=True)
def toroidal_delta(xi, yi, xj, yj, width, height, toroid):
    """Signed (dx, dy) from atom j to atom i, shortest way round if toroid."""
    dx = xi - xj
    dy = yi - yj
    if toroid:
        wx = dx - width if dx > 0 else dx + width
        if abs(wx) < abs(dx):
            dx = wx
        wy = dy - height if dy > 0 else dy + height
        if abs(wy) < abs(dy):
            dy = wy
    return dx, dy


@jit(nopython=True)
def simple_force(g, d, dx, dy, r):
    f = g / math.sqrt(d)
    return f * dx, f * dy


@jit(nopython=True)
def bounded_force(g, d, dx, dy, r):
    # repulsion at (almost) zero separation would blow up
    if g <= 0 and d <= 1:
        return 0.0, 0.0
    f = g * (1.0 - math.sqrt(d) / r)
    theta = math.atan2(dy, dx)
    return f * math.cos(theta), f * math.sin(theta)


class ForceLaw:
    """A named pair force ``(g, d, dx, dy, r) -> (fx, fy)``."""

    def __init__(self, name, kernel):
        self.name = name
        self.kernel = kernel

    def __call__(self, g, d, dx, dy, r):
        return self.kernel(float(g), float(d), float(dx), float(dy), float(r))

    def __repr__(self):
        return f"ForceLaw({self.name!r})"


SIMPLE = ForceLaw("simple", simple_force)
BOUNDED = ForceLaw("bounded", bounded_force)


def force_law(real_forces):
    return BOUNDED if real_forces else SIMPLE


@jit(nopython=True)
def brute_force_pass(
    atoms,
    rules,
    radii,
    num_colors,
    width,
    height,
    toroid,
    pair_force,
    fx,
    fy,
):
    """
    Accumulate pair forces over every ordered pair (i, j), i != j.
    Pairs outside the acting atom's radius, or exactly coincident, add nothing.
    """
    n = atoms.shape[0] // FIELDS_PER_ATOM

    for i in range(n):
        base_i = i * FIELDS_PER_ATOM
        xi = atoms[base_i + X]
        yi = atoms[base_i + Y]
        ci = int(atoms[base_i + COLOR])
        r = radii[ci]
        r2 = r * r
        ax = 0.0
        ay = 0.0

        for j in range(n):
            if i == j:
                continue
            base_j = j * FIELDS_PER_ATOM
            dx, dy = toroidal_delta(
                xi, yi,
                atoms[base_j + X], atoms[base_j + Y],
                width, height, toroid,
            )
            # Box filter before anything with a square root
            if abs(dx) > r or abs(dy) > r:
                continue
            if dx == 0 and dy == 0:
                continue
            d = dx * dx + dy * dy
            if d <= 0 or d >= r2:
                continue

            g = rules[ci * num_colors + int(atoms[base_j + COLOR])]
            px, py = pair_force(g, d, dx, dy, r)
            ax += px
            ay += py

        fx[i] += ax
        fy[i] += ay


@jit(nopython=True)
def wall_repulsion(atoms, width, height, wall_repel, fx, fy):
    """Push atoms closer than ``wall_repel`` to an edge back inside."""
    n = atoms.shape[0] // FIELDS_PER_ATOM

    for i in range(n):
        x = atoms[i * FIELDS_PER_ATOM + X]
        y = atoms[i * FIELDS_PER_ATOM + Y]
        if x < wall_repel:
            fx[i] += (wall_repel - x) * WALL_FORCE
        if y < wall_repel:
            fy[i] += (wall_repel - y) * WALL_FORCE
        if x > width - wall_repel:
            fx[i] += (width - wall_repel - x) * WALL_FORCE
        if y > height - wall_repel:
            fy[i] += (height - wall_repel - y) * WALL_FORCE


class BruteForceNeighbors:
    """Visit every other atom for every atom.

    Anything exposing the same ``accumulate`` signature (a grid or tree, say)
    can be handed to ``ForceModel`` instead without touching the force laws.
    """

    def accumulate(
        self, atoms, rules, radii, num_colors, width, height, toroid, law, fx, fy
    ):
        brute_force_pass(
            atoms, rules, radii, num_colors,
            float(width), float(height), toroid,
            law.kernel, fx, fy,
        )


class ForceModel:
    def __init__(self, neighbors=None):
        self.neighbors = neighbors or BruteForceNeighbors()

    def compute(self, atoms, settings, rules, radii, law, fx, fy):
        """Fill ``fx``/``fy`` with this tick's forces for ``atoms``."""
        fx[:] = 0
        fy[:] = 0
        self.neighbors.accumulate(
            atoms, rules, radii, settings.num_colors,
            settings.width, settings.height, settings.toroid,
            law, fx, fy,
        )
        if not settings.toroid and settings.wall_repel > 0:
            wall_repulsion(
                atoms, float(settings.width), float(settings.height),
                float(settings.wall_repel), fx, fy,
            )
