"""Seeded rule and setup generators.

All randomness here comes from ``Mulberry32`` so that a seed alone
reproduces a universe.
"""

import logging

from .config import DEFAULT_RADIUS, MAX_RADIUS, Settings

logger = logging.getLogger(__name__)

MASK = 0xFFFFFFFF
DEFAULT_SEED = 0xCAFECAFE


def _imul(a, b):
    return (a * b) & MASK


class Mulberry32:
    """Small seedable generator returning floats in [0, 1)."""

    def __init__(self, seed=DEFAULT_SEED):
        self.state = int(seed) & MASK

    def __call__(self):
        self.state = (self.state + 0x6D2B79F5) & MASK
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK
        return ((t ^ (t >> 14)) & MASK) / 4294967296.0

    def randint(self, low, high):
        """Integer in [low, high)."""
        return low + int(self() * (high - low))


def symmetrize(rules, num_colors):
    """Average every (i, j) / (j, i) pair of a flat rule matrix."""
    out = list(rules)
    for i in range(num_colors):
        for j in range(i):
            v = 0.5 * (out[i * num_colors + j] + out[j * num_colors + i])
            out[i * num_colors + j] = out[j * num_colors + i] = v
    return out


def random_rules(num_colors, seed=DEFAULT_SEED, symmetric=False, rng=None):
    """
    Rules uniform in [-1, 1) and every radius at ``DEFAULT_RADIUS``.

    Pass ``rng`` to keep drawing from an existing stream instead of ``seed``;
    its ``state`` beforehand is the seed that reproduces the result.
    """
    if rng is None:
        rng = Mulberry32(seed)
    rules = [rng() * 2 - 1 for _ in range(num_colors * num_colors)]
    radii = [float(DEFAULT_RADIUS)] * num_colors
    if symmetric:
        rules = symmetrize(rules, num_colors)
    return rules, radii


def random_setup(seed=DEFAULT_SEED, width=None, height=None, symmetric=False):
    """
    Draw a whole configuration from ``seed``: 2-7 colors, 500-3000 atoms in
    total, viscosity in [0.1, 2) and wall repulsion in [0, 100).
    The rule matrix is drawn afresh from the same seed.
    """
    rng = Mulberry32(seed)
    num_colors = rng.randint(2, 8)
    total_atoms = rng.randint(500, 3000)
    viscosity = rng() * 1.9 + 0.1
    wall_repel = rng.randint(0, 100)
    rules, radii = random_rules(num_colors, seed, symmetric)

    settings = Settings(
        num_colors=num_colors,
        atoms_per_color=max(1, total_atoms // num_colors),
        rules=rules,
        radii=radii,
        viscosity=viscosity,
        wall_repel=wall_repel,
        seed=seed,
    )
    if width is not None:
        settings.width = width
    if height is not None:
        settings.height = height
    logger.info(
        "random setup #%d: %d colors x %d atoms",
        seed, settings.num_colors, settings.atoms_per_color,
    )
    return settings.validate()


def explore(rules, radii, num_colors, rng):
    """
    Return mutated copies of ``rules`` and ``radii``.

    Usually one rule entry gets a fresh strength (negated when the old one
    attracted); otherwise one color's radius is redrawn.
    """
    rules = list(rules)
    radii = list(radii)
    c1 = int(rng() * num_colors)
    if rng() >= 0.2:
        c2 = int(rng() * num_colors)
        strength = rng()
        if rules[c1 * num_colors + c2] > 0:
            strength = -strength
        rules[c1 * num_colors + c2] = strength
    else:
        radii[c1] = float(1 + int(rng() * MAX_RADIUS))
    return rules, radii
