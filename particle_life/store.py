import logging

import numpy as np

from .config import DEBUG_LAYOUT

logger = logging.getLogger(__name__)

FIELDS_PER_ATOM = 5
X, Y, VX, VY, COLOR = range(FIELDS_PER_ATOM)


class StaleViewError(RuntimeError):
    """Raised when a particle view is read after the store was mutated."""


class ParticleStore:
    """Flat float64 buffer of ``FIELDS_PER_ATOM * n`` values, record-major.

    Each record is ``(x, y, vx, vy, color)``. The buffer is only reallocated by
    ``allocate``; ticks write into it in place and bump ``generation`` so that
    outstanding views can tell they are stale.
    """

    def __init__(self):
        self.buffer = np.zeros(0, dtype=np.float64)
        self.generation = 0

    def __len__(self):
        return self.buffer.shape[0] // FIELDS_PER_ATOM

    @property
    def records(self):
        return self.buffer.reshape(-1, FIELDS_PER_ATOM)

    def allocate(self, n):
        self.buffer = np.zeros(n * FIELDS_PER_ATOM, dtype=np.float64)
        self.touch()
        return self.records

    def touch(self):
        self.generation += 1

    def fill_random(self, num_colors, atoms_per_color, width, height, rng):
        """Uniform positions in [0, width) x [0, height), zero velocity."""
        records = self.allocate(num_colors * atoms_per_color)
        records[:, X] = rng.uniform(0, width, size=len(records))
        records[:, Y] = rng.uniform(0, height, size=len(records))
        records[:, COLOR] = np.repeat(np.arange(num_colors), atoms_per_color)
        logger.debug(
            "placed %d atoms (%d colors x %d) in %dx%d",
            len(records), num_colors, atoms_per_color, width, height,
        )

    def fill_debug(self):
        records = self.allocate(len(DEBUG_LAYOUT))
        for i, (x, y, color) in enumerate(DEBUG_LAYOUT):
            records[i] = (x, y, 0.0, 0.0, color)
        logger.debug("placed debug layout of %d atoms", len(records))

    def view(self):
        return ParticleView(self)


class ParticleView:
    """Read-only window onto a ``ParticleStore``.

    The view is bound to the store generation it was taken at. Any later tick
    or reallocation invalidates it, and every accessor raises
    ``StaleViewError`` from then on; take a fresh view instead.
    """

    def __init__(self, store):
        self._store = store
        self._generation = store.generation
        self._buffer = store.buffer

    @property
    def valid(self):
        return (
            self._generation == self._store.generation
            and self._buffer is self._store.buffer
        )

    def _check(self):
        if not self.valid:
            raise StaleViewError(
                "particle view is stale; call particle_view() again after tick() "
                "or a reallocating setter"
            )

    @property
    def array(self):
        """Flat read-only ndarray of ``5 * count`` float64 values (zero-copy)."""
        self._check()
        out = self._buffer.view()
        out.flags.writeable = False
        return out

    @property
    def records(self):
        return self.array.reshape(-1, FIELDS_PER_ATOM)

    @property
    def positions(self):
        return self.records[:, X:Y + 1]

    @property
    def velocities(self):
        return self.records[:, VX:VY + 1]

    @property
    def colors(self):
        return self.records[:, COLOR].astype(np.int32)

    def __len__(self):
        self._check()
        return self._buffer.shape[0]

    def __getitem__(self, index):
        return self.array[index]

    def __iter__(self):
        return iter(self.array)

    def __array__(self, dtype=None, copy=None):
        out = self.array
        if dtype is not None:
            return out.astype(dtype)
        if copy:
            return out.copy()
        return out
