from numba import jit

from .store import FIELDS_PER_ATOM, VX, VY, X, Y


@jit(nopython=True)
def update_atoms(atoms, fx, fy, viscosity, time_scale, width, height, boundary):
    """
    Damp velocities, add this tick's forces, move atoms and apply the
    boundary policy, all in place.
    """
    n = atoms.shape[0] // FIELDS_PER_ATOM
    keep = 1.0 - viscosity

    for i in range(n):
        base = i * FIELDS_PER_ATOM
        vx = atoms[base + VX] * keep + fx[i] * time_scale
        vy = atoms[base + VY] * keep + fy[i] * time_scale

        x, vx = boundary(atoms[base + X] + vx, vx, width)
        y, vy = boundary(atoms[base + Y] + vy, vy, height)

        atoms[base + X] = x
        atoms[base + Y] = y
        atoms[base + VX] = vx
        atoms[base + VY] = vy


class Integrator:
    """One discrete tick: forces, velocities, positions, boundary."""

    def __init__(self, force_model):
        self.force_model = force_model

    def step(self, atoms, settings, rules, radii, law, boundary, fx, fy):
        self.force_model.compute(atoms, settings, rules, radii, law, fx, fy)
        update_atoms(
            atoms, fx, fy,
            float(settings.viscosity), float(settings.time_scale),
            float(settings.width), float(settings.height),
            boundary.kernel,
        )
